"""Data models for the backend-issued OAuth credential"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Credential:
    """Access/refresh token pair issued by the backend after login

    Attributes:
        access_token: Bearer token for backend API authentication
        refresh_token: Token the backend issued for refreshing (may be absent)
        expiry_timestamp_ms: Issue time plus lifetime, in epoch milliseconds
    """
    access_token: str
    refresh_token: Optional[str]
    expiry_timestamp_ms: Optional[int]

    @classmethod
    def issued(
        cls,
        access_token: str,
        refresh_token: Optional[str],
        expires_in: int,
        issued_at_ms: int,
    ) -> "Credential":
        """Build a credential from an issuer's ``expires_in`` (seconds)"""
        return cls(
            access_token=access_token,
            refresh_token=refresh_token or None,
            expiry_timestamp_ms=issued_at_ms + int(expires_in) * 1000,
        )

    def __repr__(self) -> str:
        # Never leak token material into logs or tracebacks
        return (
            f"Credential(access_token='***', "
            f"refresh_token={'***' if self.refresh_token else None}, "
            f"expiry_timestamp_ms={self.expiry_timestamp_ms})"
        )

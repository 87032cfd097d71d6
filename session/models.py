"""Data models for the observable login session"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class SessionStatus(str, Enum):
    LOGGED_OUT = "logged_out"
    AUTHENTICATING = "authenticating"
    LOGGED_IN = "logged_in"


@dataclass(frozen=True)
class User:
    """Opaque user record supplied by the backend

    Attributes:
        id: Backend user identifier
        display_name: Optional human-readable name
    """
    id: str
    display_name: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "User":
        return cls(
            id=str(payload.get("id", "")),
            display_name=payload.get("display_name") or payload.get("displayName"),
        )

    @property
    def label(self) -> str:
        """Name shown to the user"""
        return self.display_name or self.id

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "display_name": self.display_name}


@dataclass(frozen=True)
class SessionState:
    status: SessionStatus
    user: Optional[User] = None

    @property
    def logged_in(self) -> bool:
        return self.status is SessionStatus.LOGGED_IN

    @classmethod
    def logged_out(cls) -> "SessionState":
        return cls(SessionStatus.LOGGED_OUT)

    @classmethod
    def authenticating(cls) -> "SessionState":
        return cls(SessionStatus.AUTHENTICATING)

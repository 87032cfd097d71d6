"""Expiry policy for stored credentials"""

import time
from typing import Optional

from settings import EXPIRY_SKEW_MS
from .models import Credential


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds"""
    return int(time.time() * 1000)


def is_valid(
    credential: Optional[Credential],
    now: int,
    skew_ms: int = EXPIRY_SKEW_MS,
) -> bool:
    """Check whether a credential may still be sent to the backend

    A request started just before expiry must not arrive at the backend
    already expired, so the last ``skew_ms`` of a token's life count as
    expired too.

    Args:
        credential: Stored credential, or None if nothing is stored
        now: Current time in epoch milliseconds
        skew_ms: Safety margin before the real expiry

    Returns:
        True if the credential is usable, False otherwise
    """
    if credential is None or not credential.access_token:
        return False
    if credential.expiry_timestamp_ms is None:
        return False
    return now < credential.expiry_timestamp_ms - skew_ms

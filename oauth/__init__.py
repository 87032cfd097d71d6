"""OAuth credential handling for the converter client

Covers the credential model, the expiry policy, the browser login handoff
and the redirect callback that delivers issued tokens.
"""

from .models import Credential
from .expiry import is_valid, now_ms
from .authorization import get_login_url, start_login_flow
from .callback import (
    CallbackOutcome,
    OAuthCallbackHandler,
    format_redirect_error,
    parse_fragment,
)

__all__ = [
    "Credential",
    "is_valid",
    "now_ms",
    "get_login_url",
    "start_login_flow",
    "CallbackOutcome",
    "OAuthCallbackHandler",
    "format_redirect_error",
    "parse_fragment",
]

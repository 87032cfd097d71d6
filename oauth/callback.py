"""
OAuth redirect callback handling.

The backend finishes the OAuth exchange and redirects the browser to our
callback route with the issued tokens (or an error) in the URL fragment.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING
from urllib.parse import parse_qsl

from exceptions import (
    AuthFlowError,
    InvalidCallbackError,
    MalformedCredentialError,
    RedirectError,
)
from settings import HOME_ROUTE

if TYPE_CHECKING:
    from utils.flash import FlashMessages
    from utils.storage import TokenStorage

logger = logging.getLogger(__name__)

INVALID_CALLBACK_REASON = "Login failed: invalid callback."


def parse_fragment(fragment: str) -> Dict[str, str]:
    """Parse a URL fragment as flat key/value pairs

    Args:
        fragment: Raw fragment, with or without the leading '#'

    Returns:
        Dictionary of parameters (last value wins for repeated keys)
    """
    fragment = (fragment or "").lstrip("#")
    return dict(parse_qsl(fragment, keep_blank_values=False))


def format_redirect_error(error: str) -> str:
    """Turn an issuer error code into a human-readable failure reason"""
    return f"Login failed: {error.replace('_', ' ')}."


@dataclass(frozen=True)
class CallbackOutcome:
    """Result of processing one redirect callback"""
    redirect_to: str
    error: Optional[AuthFlowError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class OAuthCallbackHandler:
    """Turns a redirect fragment into a stored credential or a failure reason"""

    def __init__(self, storage: "TokenStorage", flash: "FlashMessages", home_route: str = HOME_ROUTE):
        self.storage = storage
        self.flash = flash
        self.home_route = home_route

    def handle(self, fragment: str) -> CallbackOutcome:
        """Process the callback fragment

        Args:
            fragment: The part of the callback URL after '#'

        Returns:
            CallbackOutcome telling the caller where to redirect
        """
        params = parse_fragment(fragment)

        error = params.get("error")
        if error:
            reason = format_redirect_error(error)
            logger.warning(f"Issuer reported login error: {error}")
            return self._fail(RedirectError(reason))

        access_token = params.get("access_token")
        expires_in = params.get("expires_in")
        if access_token and expires_in:
            try:
                self.storage.save_tokens(access_token, params.get("refresh_token"), expires_in)
            except MalformedCredentialError as e:
                logger.warning(f"Rejected callback credential: {e}")
                return self._fail(InvalidCallbackError(INVALID_CALLBACK_REASON))

            logger.info("Login callback stored a new credential")
            return CallbackOutcome(redirect_to=self.home_route)

        logger.warning(f"Callback is missing token fields (got: {sorted(params)})")
        return self._fail(InvalidCallbackError(INVALID_CALLBACK_REASON))

    def _fail(self, error: AuthFlowError) -> CallbackOutcome:
        self.storage.clear()
        self.flash.set(error.message)
        return CallbackOutcome(redirect_to=self.home_route, error=error)

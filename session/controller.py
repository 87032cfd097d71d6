"""Session controller: owns the observable login state"""

import logging
import webbrowser
from typing import Callable, List, Optional, TYPE_CHECKING

from exceptions import GatewayError, SessionExpiredError
from oauth.authorization import start_login_flow
from oauth.expiry import is_valid, now_ms
from settings import AUTH_STATUS_ENDPOINT
from .models import SessionState, SessionStatus, User

if TYPE_CHECKING:
    from gateway.client import BackendClient
    from utils.storage import TokenStorage

logger = logging.getLogger(__name__)


class SessionController:
    """Drives login, logout and session verification

    Only this class changes ``state``. Gateway errors reach it as exceptions
    and it alone decides the resulting transition.
    """

    def __init__(
        self,
        storage: "TokenStorage",
        gateway: "BackendClient",
        clock: Optional[Callable[[], int]] = None,
    ):
        self.storage = storage
        self.gateway = gateway
        self._clock = clock or now_ms
        self.state = SessionState.authenticating()
        self.error: Optional[str] = None
        self._generation = 0
        self._logout_listeners: List[Callable[[], None]] = []
        self._check_listeners: List[Callable[[], None]] = []

    @property
    def logged_in(self) -> bool:
        return self.state.logged_in

    @property
    def user(self) -> Optional[User]:
        return self.state.user

    def add_logout_listener(self, listener: Callable[[], None]) -> None:
        """Register a callback run whenever the user logs out"""
        self._logout_listeners.append(listener)

    def add_check_listener(self, listener: Callable[[], None]) -> None:
        """Register a callback run at the start of every status check"""
        self._check_listeners.append(listener)

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _set_state(self, state: SessionState) -> None:
        if state != self.state:
            logger.info(f"Session {self.state.status.value} -> {state.status.value}")
        self.state = state

    async def check_status(self) -> SessionState:
        """Verify the stored credential against the backend

        Returns:
            The session state after the check
        """
        generation = self._next_generation()
        self.error = None
        for listener in self._check_listeners:
            listener()

        if not is_valid(self.storage.load(), self._clock()):
            logger.debug("No valid credential, skipping status request")
            self._set_state(SessionState.logged_out())
            return self.state

        if self.state.status is SessionStatus.LOGGED_OUT:
            self._set_state(SessionState.authenticating())

        try:
            data = await self.gateway.get(AUTH_STATUS_ENDPOINT)
        except SessionExpiredError:
            # A revoked credential ends the session even if a newer check already finished
            self.expire()
            return self.state
        except GatewayError as e:
            if generation == self._generation:
                self.error = e.message
                self._set_state(SessionState.logged_out())
            return self.state

        if generation != self._generation:
            logger.debug("Discarding stale session status response")
            return self.state

        user = data.get("user") if isinstance(data, dict) else None
        if isinstance(user, dict) and data.get("logged_in", True):
            self._set_state(SessionState(SessionStatus.LOGGED_IN, User.from_payload(user)))
        else:
            logger.info("Status response carried no user, treating session as invalid")
            self.storage.clear()
            self._set_state(SessionState.logged_out())
        return self.state

    def login(self, open_url: Callable[[str], bool] = webbrowser.open) -> str:
        """Hand the browser off to the backend login endpoint

        Control comes back only through the callback route.

        Returns:
            The login URL, for display
        """
        return start_login_flow(self.gateway.base_url, open_url=open_url)

    def logout(self) -> None:
        """Forget the credential locally; no backend call is needed"""
        self._next_generation()
        self.storage.clear()
        self.error = None
        self._set_state(SessionState.logged_out())
        for listener in self._logout_listeners:
            listener()

    def expire(self) -> None:
        """React to a SessionExpiredError raised by any other backend call"""
        self._next_generation()
        self.storage.clear()
        self.error = None
        self._set_state(SessionState.logged_out())

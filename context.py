"""
Composition root shared by the web front and the CLI.
"""
import logging
import threading
from typing import Callable, Optional

import httpx

from conversion import ConversionResult, ConversionWorkflow
from gateway import BackendClient
from oauth import CallbackOutcome, OAuthCallbackHandler, now_ms
from session import SessionController
from settings import API_BASE_URL, HOME_ROUTE
from utils import FlashMessages, TokenStorage

logger = logging.getLogger(__name__)


class AppContext:
    """Owns every stateful component and passes them to the view layers by reference"""

    def __init__(
        self,
        token_file: Optional[str] = None,
        base_url: str = API_BASE_URL,
        clock: Optional[Callable[[], int]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        clock = clock or now_ms
        self.storage = TokenStorage(token_file, clock=clock)
        self.flash = FlashMessages()
        self.gateway = BackendClient(self.storage, base_url=base_url, clock=clock, transport=transport)
        self.session = SessionController(self.storage, self.gateway, clock=clock)
        self.workflow = ConversionWorkflow(self.gateway, self.session)
        self.callback_handler = OAuthCallbackHandler(self.storage, self.flash, home_route=HOME_ROUTE)
        self.callback_received = threading.Event()
        self.last_callback: Optional[CallbackOutcome] = None

        self.session.add_logout_listener(self.workflow.reset)
        self.session.add_check_listener(self.workflow.clear_result)

    def handle_callback(self, fragment: str) -> CallbackOutcome:
        """Run the callback handler and wake anyone waiting for the login handoff"""
        outcome = self.callback_handler.handle(fragment)
        self.last_callback = outcome
        self.callback_received.set()
        return outcome

    async def convert(self, playlist_url: str, playlist_name: Optional[str] = None) -> Optional[ConversionResult]:
        """Submit a conversion on behalf of a view, only while logged in

        Returns:
            The result, or None if the submission was refused locally
        """
        if not self.session.logged_in:
            logger.warning("Refusing conversion while not logged in")
            return None
        return await self.workflow.submit(playlist_url, playlist_name)

    def view_state(self) -> dict:
        """Snapshot of everything the home view renders

        Consumes the one-time callback error, if one is pending.
        """
        state = self.session.state
        result = self.workflow.result
        return {
            "status": state.status.value,
            "logged_in": state.logged_in,
            "user": state.user.to_dict() if state.user else None,
            "error": self.flash.consume() or self.session.error,
            "converting": self.workflow.converting,
            "result": result.to_dict() if result else None,
        }

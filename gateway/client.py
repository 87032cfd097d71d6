"""Backend API HTTP client: the single choke point for every backend call"""

import logging
from typing import Any, Callable, Dict, Optional, TYPE_CHECKING

import httpx

from exceptions import (
    RequestFailedError,
    SessionExpiredError,
    UnreachableError,
)
from oauth.expiry import is_valid, now_ms
from settings import API_BASE_URL, CONNECT_TIMEOUT, REQUEST_TIMEOUT

if TYPE_CHECKING:
    from utils.storage import TokenStorage

logger = logging.getLogger(__name__)

AUTH_REQUIRED_MESSAGE = "Authentication required. Please log in."


class BackendClient:
    """Authorizes, dispatches and classifies requests to the conversion backend

    Every failure is raised as one of SessionExpiredError, RequestFailedError
    or UnreachableError; raw httpx exceptions never reach callers. Each call
    is a single attempt.
    """

    def __init__(
        self,
        storage: "TokenStorage",
        base_url: str = API_BASE_URL,
        clock: Optional[Callable[[], int]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            storage: Token storage holding the current credential
            base_url: Backend origin, e.g. http://localhost:5000
            clock: Millisecond clock used by the expiry policy
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.storage = storage
        self.base_url = base_url.rstrip("/")
        self._clock = clock or now_ms
        self._transport = transport

    def _authorization_headers(self) -> Dict[str, str]:
        """Build the bearer header for the stored credential, if it is still valid"""
        credential = self.storage.load()
        if credential is None:
            return {}

        if not is_valid(credential, self._clock()):
            # No refresh support: an expired credential is treated as dead
            logger.info("Stored credential has expired, discarding it")
            self.storage.clear()
            return {}

        return {"authorization": f"Bearer {credential.access_token}"}

    async def request(self, method: str, endpoint: str, json: Optional[Dict[str, Any]] = None) -> Any:
        """Make a request to the backend

        Args:
            method: HTTP method
            endpoint: Path starting with /api
            json: Optional JSON request body

        Returns:
            Parsed JSON body of a 2xx response

        Raises:
            SessionExpiredError: backend answered 401 (credential cleared)
            RequestFailedError: backend answered any other non-2xx status
            UnreachableError: no response was received
        """
        headers = {
            "content-type": "application/json",
            "accept": "application/json",
            **self._authorization_headers(),
        }
        url = f"{self.base_url}{endpoint}"

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(REQUEST_TIMEOUT, connect=CONNECT_TIMEOUT),
                transport=self._transport,
            ) as client:
                response = await client.request(method, url, json=json, headers=headers)
        except httpx.RequestError as e:
            logger.error(f"{method} {endpoint} failed without a response: {e!r}")
            raise UnreachableError(
                "Could not reach the conversion server. Check your connection and try again."
            ) from e

        logger.debug(f"{method} {endpoint} - {response.status_code}")
        return self._handle_response(response, method, endpoint)

    def _handle_response(self, response: httpx.Response, method: str, endpoint: str) -> Any:
        body = self._json_body(response)

        if response.is_success:
            if body is None:
                # Empty or non-JSON success (e.g. 204)
                return {"success": True}
            return body

        logger.error(f"{method} {endpoint} returned {response.status_code}: {body if body is not None else response.text[:200]}")

        fields = body if isinstance(body, dict) else {}

        if response.status_code == 401 or fields.get("auth_required"):
            self.storage.clear()
            message = fields.get("error") or AUTH_REQUIRED_MESSAGE
            raise SessionExpiredError(message)

        if body is None:
            raise RequestFailedError(response.status_code, f"HTTP error! status: {response.status_code}")

        message = fields.get("message") or fields.get("error")
        raise RequestFailedError(response.status_code, message if isinstance(message, str) else None)

    @staticmethod
    def _json_body(response: httpx.Response) -> Any:
        """Parse a JSON body as sent, or None if the body is empty or not JSON"""
        if "application/json" not in response.headers.get("content-type", ""):
            return None
        try:
            return response.json()
        except ValueError:
            return None

    async def get(self, endpoint: str) -> Any:
        return await self.request("GET", endpoint)

    async def post(self, endpoint: str, json: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("POST", endpoint, json=json)

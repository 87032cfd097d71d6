"""Conversion workflow: submits a playlist conversion and normalizes the outcome"""

import logging
from typing import Any, Optional, TYPE_CHECKING

from exceptions import GatewayError, SessionExpiredError
from settings import CONVERT_ENDPOINT, DEFAULT_PLAYLIST_NAME
from .models import ConversionOutcome, ConversionResult

if TYPE_CHECKING:
    from gateway.client import BackendClient
    from session.controller import SessionController

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "The server returned no conversion data."
CONVERSION_FAILED_MESSAGE = "Conversion failed."


def classify_response(payload: Any) -> ConversionResult:
    """Map a /api/convert response body onto a ConversionResult

    Args:
        payload: Parsed response body, or None if nothing came back

    Returns:
        SUCCESS for a successful response with data, PARTIAL for an
        unsuccessful response that still carries data, FAILURE otherwise
    """
    if not payload or not isinstance(payload, dict):
        return ConversionResult.failure(NO_DATA_MESSAGE)

    data = payload.get("data")
    message = payload.get("error") or payload.get("message")

    if not isinstance(data, dict):
        if payload.get("success"):
            return ConversionResult.failure(NO_DATA_MESSAGE)
        return ConversionResult.failure(message or CONVERSION_FAILED_MESSAGE)

    if payload.get("success"):
        return ConversionResult.from_data(ConversionOutcome.SUCCESS, data)

    return ConversionResult.from_data(
        ConversionOutcome.PARTIAL, data, message=message or CONVERSION_FAILED_MESSAGE
    )


class ConversionWorkflow:
    """Submits conversions through the backend client

    Holds at most one result; each new submission replaces it wholesale.
    """

    def __init__(self, gateway: "BackendClient", session: "SessionController"):
        self.gateway = gateway
        self.session = session
        self.result: Optional[ConversionResult] = None
        self.converting = False
        self._generation = 0

    async def submit(self, playlist_url: str, playlist_name: Optional[str] = None) -> ConversionResult:
        """Convert a source playlist into a new target playlist

        The caller must only submit while logged in; a credential that went
        stale in the meantime is caught by the backend client's 401 handling.

        Args:
            playlist_url: Public source playlist URL
            playlist_name: Name for the new playlist (defaults if blank)

        Returns:
            The normalized result of this submission
        """
        self._generation += 1
        generation = self._generation
        self.result = None
        self.converting = True

        body = {
            "playlist_url": playlist_url.strip(),
            "playlist_name": (playlist_name or "").strip() or DEFAULT_PLAYLIST_NAME,
        }
        logger.info(f"Submitting conversion for {body['playlist_url']}")

        try:
            payload = await self.gateway.post(CONVERT_ENDPOINT, json=body)
            result = classify_response(payload)
        except SessionExpiredError as e:
            self.session.expire()
            result = ConversionResult.failure(e.message)
        except GatewayError as e:
            result = ConversionResult.failure(e.message)

        logger.info(f"Conversion finished with outcome {result.outcome.value}")

        if generation != self._generation:
            logger.debug("Discarding stale conversion result")
            return result

        self.result = result
        self.converting = False
        return result

    def reset(self) -> None:
        """Forget the current result; later completions of in-flight submissions are dropped"""
        self._generation += 1
        self.result = None
        self.converting = False

    def clear_result(self) -> None:
        """Hide the last result without abandoning an in-flight submission"""
        self.result = None

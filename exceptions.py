"""
Defines custom exceptions for the converter client so callers can tell
"server rejected us" apart from "server unreachable" and from login failures.
"""

from typing import Optional


class ConverterClientError(Exception):
    """Base exception for all application-specific errors."""

    def __init__(self, message: str = ""):
        self.message = message or (self.__class__.__doc__ or "").strip()
        super().__init__(self.message)


class MalformedCredentialError(ConverterClientError):
    """Raised when a credential is missing its access token or lifetime."""


class GatewayError(ConverterClientError):
    """Base for every failure surfaced by the backend client."""


class SessionExpiredError(GatewayError):
    """Raised when the backend rejects the request as unauthorized (HTTP 401)."""


class RequestFailedError(GatewayError):
    """Raised for any other non-2xx response from the backend."""

    def __init__(self, status: int, message: Optional[str] = None):
        super().__init__(message or f"Request failed with status {status}")
        self.status = status


class UnreachableError(GatewayError):
    """Raised when no response was received from the backend at all."""


class AuthFlowError(ConverterClientError):
    """Base for failures reported through the OAuth redirect callback."""


class InvalidCallbackError(AuthFlowError):
    """Raised when the callback fragment lacks the required token fields."""


class RedirectError(AuthFlowError):
    """Raised when the issuer redirected back with an error parameter."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

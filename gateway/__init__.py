"""Backend gateway package: authorized access to the conversion API"""

from .client import BackendClient

__all__ = [
    "BackendClient",
]

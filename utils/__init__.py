"""Shared utilities package for the converter client"""

from .storage import TokenStorage
from .flash import FlashMessages

__all__ = [
    "TokenStorage",
    "FlashMessages",
]

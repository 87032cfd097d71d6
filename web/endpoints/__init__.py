"""
Endpoint handlers for the local web front.
"""
from .health import router as health_router
from .home import router as home_router
from .callback import router as callback_router

__all__ = [
    'health_router',
    'home_router',
    'callback_router',
]

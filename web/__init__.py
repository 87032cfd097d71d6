"""
Playlist Converter web front.

Serves the client-side routes: the home view state and the OAuth callback
relay that hands issued tokens to the callback handler.
"""
from .app import create_app
from .server import FrontServer, setup_debug_logging

__version__ = "1.0.0"

__all__ = [
    'create_app',
    'FrontServer',
    'setup_debug_logging',
]

"""Login session state and its controller"""

from .models import SessionState, SessionStatus, User
from .controller import SessionController

__all__ = [
    "SessionState",
    "SessionStatus",
    "User",
    "SessionController",
]

"""One-time message slot carried from the callback route to the home route"""

import threading
from typing import Optional


class FlashMessages:
    """Holds at most one pending message; reading it clears it"""

    def __init__(self):
        self._lock = threading.Lock()
        self._message: Optional[str] = None

    def set(self, message: str) -> None:
        with self._lock:
            self._message = message

    def consume(self) -> Optional[str]:
        """Return the pending message once, so a refresh does not repeat it"""
        with self._lock:
            message, self._message = self._message, None
            return message

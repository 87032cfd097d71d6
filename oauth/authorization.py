"""Login handoff to the backend's authorization-initiation endpoint"""

import logging
import webbrowser
from typing import Callable

from settings import API_BASE_URL, AUTH_LOGIN_ENDPOINT

logger = logging.getLogger(__name__)


def get_login_url(base_url: str = API_BASE_URL) -> str:
    """Build the URL the browser is navigated to for login

    Returns:
        Full login URL on the backend
    """
    return f"{base_url.rstrip('/')}{AUTH_LOGIN_ENDPOINT}"


def start_login_flow(base_url: str = API_BASE_URL, open_url: Callable[[str], bool] = webbrowser.open) -> str:
    """Start the OAuth login flow by opening the browser

    The backend performs the OAuth exchange and redirects back to the
    callback route; nothing is returned from the backend to this call.

    Returns:
        Login URL that was opened
    """
    login_url = get_login_url(base_url)
    logger.info(f"Handing off to backend login at {login_url}")
    open_url(login_url)
    return login_url

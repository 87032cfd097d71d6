import json
import logging
import os
import platform
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from exceptions import MalformedCredentialError
from oauth.expiry import is_valid, now_ms
from oauth.models import Credential
from settings import TOKEN_FILE

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "access_token"
REFRESH_TOKEN_KEY = "refresh_token"
EXPIRY_KEY = "token_expiry"


class TokenStorage:
    """Durable storage for the current credential

    The credential lives in a small JSON document with three string-keyed
    entries. They are always written and cleared together.
    """

    def __init__(self, token_file: Optional[str] = None, clock: Optional[Callable[[], int]] = None):
        self.token_path = Path(token_file if token_file else TOKEN_FILE)
        self._clock = clock or now_ms
        self._lock = threading.Lock()
        self._ensure_secure_directory()

    def _ensure_secure_directory(self):
        """Create parent directory with secure permissions"""
        parent_dir = self.token_path.parent
        if not parent_dir.exists():
            parent_dir.mkdir(parents=True, exist_ok=True)
            # Set directory permissions to 700 on Unix-like systems
            if platform.system() != "Windows":
                os.chmod(parent_dir, 0o700)

    def _write(self, data: Dict[str, str]):
        """Replace the token document in one step so readers never see a partial write"""
        fd, tmp_name = tempfile.mkstemp(dir=self.token_path.parent, prefix=".tokens-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
            if platform.system() != "Windows":
                os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.token_path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _read(self) -> Optional[Dict[str, Any]]:
        if not self.token_path.exists():
            return None

        try:
            data = json.loads(self.token_path.read_text())
        except (json.JSONDecodeError, IOError) as e:
            logger.error(f"Failed to read token file {self.token_path}: {e}")
            return None

        if not isinstance(data, dict):
            logger.error(f"Ignoring token file {self.token_path}: unexpected format")
            return None
        return data

    def save(self, credential: Credential):
        """Persist a credential, replacing whatever was stored before

        Raises:
            MalformedCredentialError: if the access token or expiry is missing.
                The previously stored credential is left untouched.
        """
        if not credential.access_token:
            raise MalformedCredentialError("Credential has no access token")
        if credential.expiry_timestamp_ms is None:
            raise MalformedCredentialError("Credential has no lifetime")

        data = {
            ACCESS_TOKEN_KEY: credential.access_token,
            EXPIRY_KEY: str(credential.expiry_timestamp_ms),
        }
        # An absent refresh token stays absent; never carry over the old one
        if credential.refresh_token:
            data[REFRESH_TOKEN_KEY] = credential.refresh_token

        with self._lock:
            self._write(data)
        logger.debug(f"Saved credential to {self.token_path}")

    def save_tokens(self, access_token: Optional[str], refresh_token: Optional[str], expires_in: Any) -> Credential:
        """Save issuer tokens with computed expiry time

        Args:
            access_token: Bearer token
            refresh_token: Optional refresh token
            expires_in: Lifetime in seconds (int or numeric string)

        Returns:
            The credential that was stored

        Raises:
            MalformedCredentialError: if the access token or lifetime is missing or invalid
        """
        if not access_token:
            raise MalformedCredentialError("Missing access token")
        if expires_in is None or expires_in == "":
            raise MalformedCredentialError("Missing token lifetime")
        try:
            lifetime = int(expires_in)
        except (TypeError, ValueError):
            raise MalformedCredentialError(f"Invalid token lifetime: {expires_in!r}")

        credential = Credential.issued(access_token, refresh_token, lifetime, self._clock())
        self.save(credential)
        return credential

    def load(self) -> Optional[Credential]:
        """Load the stored credential

        Returns:
            The credential, or None if no complete credential is stored
        """
        with self._lock:
            data = self._read()
        if not data:
            return None

        access_token = data.get(ACCESS_TOKEN_KEY)
        expiry = data.get(EXPIRY_KEY)
        if not access_token or expiry in (None, ""):
            return None

        try:
            expiry_ms = int(expiry)
        except (TypeError, ValueError):
            logger.error(f"Ignoring stored credential with invalid expiry: {expiry!r}")
            return None

        return Credential(
            access_token=access_token,
            refresh_token=data.get(REFRESH_TOKEN_KEY) or None,
            expiry_timestamp_ms=expiry_ms,
        )

    def clear(self):
        """Remove all stored token entries"""
        with self._lock:
            if self.token_path.exists():
                self.token_path.unlink()
                logger.debug(f"Cleared credential at {self.token_path}")

    def get_status(self) -> Dict[str, Any]:
        """Get token status without exposing secrets"""
        credential = self.load()
        if not credential:
            return {
                "has_tokens": False,
                "is_expired": True,
                "has_refresh_token": False,
                "expires_at": None,
                "time_until_expiry": "No tokens"
            }

        current_ms = self._clock()
        expires_at = credential.expiry_timestamp_ms // 1000
        current_time = current_ms // 1000
        expires_str = datetime.fromtimestamp(expires_at).isoformat()

        if not is_valid(credential, current_ms):
            time_since = max(current_time - expires_at, 0)
            hours_since = time_since // 3600
            mins_since = (time_since % 3600) // 60

            if current_time < expires_at:
                time_str = "expiring"
            elif hours_since > 0:
                time_str = f"{hours_since}h {mins_since}m ago"
            else:
                time_str = f"{mins_since}m ago"

            return {
                "has_tokens": True,
                "is_expired": True,
                "has_refresh_token": credential.refresh_token is not None,
                "expires_at": expires_str,
                "time_until_expiry": time_str
            }

        time_remaining = expires_at - current_time
        hours = time_remaining // 3600
        minutes = (time_remaining % 3600) // 60

        if hours > 0:
            time_str = f"{hours}h {minutes}m"
        else:
            time_str = f"{minutes}m"

        return {
            "has_tokens": True,
            "is_expired": False,
            "has_refresh_token": credential.refresh_token is not None,
            "expires_at": expires_str,
            "time_until_expiry": time_str
        }

    @property
    def token_file(self) -> Path:
        """Get the token file path"""
        return self.token_path

"""Settings source for the converter client

Values resolve in this order: process environment, then the ``.env`` file
(loaded into the environment without overriding it), then the default passed
by ``settings.py``. The default also fixes the value's type.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Lets a deployment keep its .env outside the working directory
ENV_FILE_VARIABLE = "CONVERTER_ENV_FILE"

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})


class ConfigLoader:
    """Typed lookups over the environment and an optional .env file"""

    def __init__(self, env_path: Optional[str] = None):
        """
        Args:
            env_path: .env file to load. Falls back to $CONVERTER_ENV_FILE,
                then to '.env' in the current directory.
        """
        self.env_path = Path(env_path or os.getenv(ENV_FILE_VARIABLE) or ".env")
        self.env_file_loaded = False
        if self.env_path.is_file():
            load_dotenv(dotenv_path=self.env_path, override=False)
            self.env_file_loaded = True
            logger.debug(f"Loaded settings from {self.env_path}")
        else:
            logger.debug(f"No settings file at {self.env_path}, using environment and defaults")

    def get(self, env_var: str, default: Any) -> Any:
        """Look up ``env_var``, parsed to the type of ``default``

        An unparseable number logs a warning and yields the default. String
        values starting with ``~/`` are expanded to the user's home.
        """
        raw = os.getenv(env_var)
        if raw is None:
            return self._expand(default)

        # bool first: it is a subclass of int
        if isinstance(default, bool):
            return raw.strip().lower() in _TRUE_STRINGS
        if isinstance(default, (int, float)):
            kind = type(default)
            try:
                return kind(raw)
            except ValueError:
                logger.warning(f"{env_var}={raw!r} is not a valid {kind.__name__}, using {default}")
                return default
        return self._expand(raw)

    @staticmethod
    def _expand(value: Any) -> Any:
        if isinstance(value, str) and value.startswith("~/"):
            return str(Path(value).expanduser())
        return value


_config_loader: Optional[ConfigLoader] = None


def get_config_loader() -> ConfigLoader:
    """Process-wide loader used by ``settings.py``"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader

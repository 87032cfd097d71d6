from pathlib import Path
from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Backend configuration
# All API paths are appended to this base (e.g. {API_BASE_URL}/api/convert)
API_BASE_URL = config.get("API_BASE_URL", "http://localhost:5000").rstrip("/")
AUTH_STATUS_ENDPOINT = "/api/auth/status"
AUTH_LOGIN_ENDPOINT = "/api/auth/login"
CONVERT_ENDPOINT = "/api/convert"

# Local front configuration (serves the home and callback routes)
PORT = config.get("PORT", 3000)
LOG_LEVEL = config.get("LOG_LEVEL", "info")
BIND_ADDRESS = config.get("BIND_ADDRESS", "127.0.0.1")
HOME_ROUTE = "/"
CALLBACK_PATH = "/auth/callback"

# Timeout configuration
CONNECT_TIMEOUT = config.get("CONNECT_TIMEOUT", 10.0)
# Conversions run server-side and can take a while for long playlists
REQUEST_TIMEOUT = config.get("REQUEST_TIMEOUT", 300.0)
# How long the CLI waits for the browser to come back through the callback route
LOGIN_TIMEOUT = config.get("LOGIN_TIMEOUT", 300)

# Credentials are treated as expired this long before their real expiry
EXPIRY_SKEW_MS = config.get("EXPIRY_SKEW_MS", 60000)

# Conversion defaults
DEFAULT_PLAYLIST_NAME = config.get("DEFAULT_PLAYLIST_NAME", "Converted YouTube Playlist")

# Token storage
TOKEN_FILE = config.get("TOKEN_FILE", str(Path.home() / ".playlist-converter" / "tokens.json"))

# Debug log written when --debug is passed
DEBUG_LOG_FILE = config.get("DEBUG_LOG_FILE", "converter_debug.log")

"""Central configuration for the Strava gear fixer.

All values are constants imported by the rest of the package. Adjust as needed
for your environment. Client credentials and tokens live in the data file; the
environment (optionally via a local `.env`) only tunes paths and behaviour.
"""

from __future__ import annotations

import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except ImportError:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Persisted state
# ---------------------------------------------------------------------------
# JSON file holding client credentials, tokens, trainer bike id and the
# last-seen activity watermark. Path can be absolute or relative.
DATA_FILE = os.getenv("STRAVA_DATA_FILE", "data.json")


# ---------------------------------------------------------------------------
# Strava settings
# ---------------------------------------------------------------------------
# Trailing slash matters: request paths are resolved relative to it.
STRAVA_BASE_URL = "https://www.strava.com/api/v3/"
STRAVA_OAUTH_URL = "https://www.strava.com/oauth/token"
STRAVA_AUTHORIZE_URL = "https://www.strava.com/oauth/authorize"

# Request timeout in seconds.
REQUEST_TIMEOUT = _env_float("STRAVA_REQUEST_TIMEOUT", 15.0)

# Tokens are renewed this many seconds before their stated expiry.
TOKEN_EXPIRY_MARGIN_SECONDS = 5

# HTTP session pool sizes. Calls are sequential so one connection suffices.
HTTP_POOL_CONNECTIONS = 1
HTTP_POOL_MAXSIZE = 1

# Identifies this tool in Strava's API logs.
USER_AGENT = "strava-gear-fix/0.1"


# ---------------------------------------------------------------------------
# Gear fix job
# ---------------------------------------------------------------------------
# How far back to look on the very first run (no watermark stored yet).
DEFAULT_LOOKBACK_DAYS = _env_int("STRAVA_LOOKBACK_DAYS", 7)

# Activities with this sport type get the trainer bike assigned.
VIRTUAL_RIDE_SPORT_TYPE = "VirtualRide"


# ---------------------------------------------------------------------------
# OAuth bootstrap
# ---------------------------------------------------------------------------
OAUTH_HOST = "127.0.0.1"
OAUTH_PORT = _env_int("STRAVA_OAUTH_PORT", 8000)
OAUTH_CALLBACK_PATH = "/strava-auth"
# Must match the callback domain registered for the Strava application.
REDIRECT_URI = f"http://localhost:{OAUTH_PORT}{OAUTH_CALLBACK_PATH}"
OAUTH_SCOPE = "activity:read_all,activity:write"

# Seconds to wait for the browser authorisation before giving up.
OAUTH_WAIT_TIMEOUT = _env_int("STRAVA_OAUTH_TIMEOUT", 300)

# Delay between answering the callback and stopping the local server.
OAUTH_SHUTDOWN_GRACE_SECONDS = 0.5


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()
if LOG_LEVEL not in LOG_LEVELS:
    LOG_LEVEL = "INFO"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

"""Central configuration for the ride map service.

All values are constants imported by the rest of the package. Secrets are read
from environment variables (optionally via a local `.env`).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


# Load .env from the current directory or any parent folder.
load_dotenv()


# ---------------------------------------------------------------------------
# Strava settings
# ---------------------------------------------------------------------------
STRAVA_BASE_URL = "https://www.strava.com/api/v3"
STRAVA_AUTHORIZE_URL = "https://www.strava.com/oauth/authorize"
STRAVA_OAUTH_URL = "https://www.strava.com/oauth/token"  # nosec B105

# Client credentials pulled from the environment. Do not hardcode secrets.
CLIENT_ID = os.getenv("STRAVA_CLIENT_ID", "")
CLIENT_SECRET = os.getenv("STRAVA_CLIENT_SECRET", "")
REDIRECT_URI = os.getenv("STRAVA_REDIRECT_URI", "http://localhost:3000/auth/callback")
SCOPE = os.getenv("STRAVA_SCOPE", "activity:read_all")


# ---------------------------------------------------------------------------
# Credential storage
# ---------------------------------------------------------------------------
# Single JSON record holding the current access/refresh token pair.
TOKEN_FILE = os.getenv("RIDE_MAP_TOKEN_FILE", os.path.join("data", "strava-token.json"))


# ---------------------------------------------------------------------------
# Activity window
# ---------------------------------------------------------------------------
# Default date window (ISO dates) shown on the map.
DEFAULT_START_DATE = os.getenv("LEJOG_START_DATE", "2024-09-02")
DEFAULT_END_DATE = os.getenv("LEJOG_END_DATE", "2024-09-15")

# Provider activity type kept by the aggregator.
ACTIVITY_TYPE = os.getenv("RIDE_MAP_ACTIVITY_TYPE", "Ride")

# JSON file replacing the bundled sample activities. Empty keeps the default.
SAMPLE_DATA_FILE = os.getenv("RIDE_MAP_SAMPLE_DATA_FILE", "")


# ---------------------------------------------------------------------------
# Performance tuning
# ---------------------------------------------------------------------------
# Items requested per listing page. A shorter page marks the end of results.
PAGE_SIZE = _env_int("RIDE_MAP_PAGE_SIZE", 30)

# Upper bound on listing pages fetched per request.
MAX_PAGES = _env_int("RIDE_MAP_MAX_PAGES", 50)

# Threads used to fetch activity detail and streams in parallel.
ENRICH_WORKERS = _env_int("RIDE_MAP_ENRICH_WORKERS", 4)

# HTTP session pool sizes for concurrent requests.
HTTP_POOL_CONNECTIONS = 10
HTTP_POOL_MAXSIZE = 10

# Request timeout in seconds.
REQUEST_TIMEOUT = _env_float("REQUEST_TIMEOUT", 15.0)


# ---------------------------------------------------------------------------
# Web server
# ---------------------------------------------------------------------------
HOST = os.getenv("RIDE_MAP_HOST", "0.0.0.0")  # nosec B104
PORT = _env_int("RIDE_MAP_PORT", 3000)

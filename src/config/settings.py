"""Global configuration and constants for the pool update pipeline."""

from __future__ import annotations

import os
from typing import Final

DEFAULT_USER_AGENT: Final = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) PoolStandingsTracker/1.0"
)
DEFAULT_TIMEOUT: Final = 15  # seconds
DEFAULT_RETRIES: Final = 2
DEFAULT_BACKOFF_FACTOR: Final = 0.6
DATA_DIR: Final = os.environ.get("POOL_DATA_DIR", "data")

# Politeness delay between consecutive source fetches
REQUEST_DELAY: Final = float(os.environ.get("POOL_REQUEST_DELAY", "4"))

ROSTERS_FILENAME: Final = "rosters.json"
RESULTS_FILENAME: Final = "results.json"

# Payout pot per pool, in whole currency units
POOL_POT: Final = 300

API_KEY_ENV: Final = "API_FOOTBALL_KEY"
API_HOST: Final = "v3.football.api-sports.io"
API_REQUEST_DELAY: Final = 6.5

LOG_LEVEL: Final = os.environ.get("POOL_LOG_LEVEL", "INFO")


class ConfigurationError(RuntimeError):
    """Raised when a required configuration value is missing or unusable."""


def rosters_path(data_dir: str | None = None) -> str:
    return os.path.join(data_dir or DATA_DIR, ROSTERS_FILENAME)


def results_path(data_dir: str | None = None) -> str:
    return os.path.join(data_dir or DATA_DIR, RESULTS_FILENAME)


def require_api_key(env: dict[str, str] | None = None) -> str:
    """Return the API credential or raise ConfigurationError.

    Absence is a fatal precondition: callers must check it before any fetch.
    """
    source = os.environ if env is None else env
    key = (source.get(API_KEY_ENV) or "").strip()
    if not key:
        raise ConfigurationError(f"Missing credential: set the {API_KEY_ENV} environment variable")
    return key

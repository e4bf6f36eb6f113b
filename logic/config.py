"""
Configuration management module.

This module loads application settings from the environment (and an optional
.env file) and exposes them as a single Settings object.
"""

import math
import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

DEFAULT_DATABASE_URL = "sqlite:///./travel_spots.db"
DEFAULT_NOMINATIM_URL = "https://nominatim.openstreetmap.org"
DEFAULT_USER_AGENT = "TravelGuide/1.0"


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Attributes:
        database_url: SQLAlchemy database URL for the spot store.
        log_level: Root logging level name.
        nominatim_url: Base URL of the Nominatim geocoding service.
        geocoder_user_agent: User-Agent sent to the geocoder.
        geocoder_timeout: Upstream request timeout in seconds.
        geocoder_limit: Maximum number of suggestions requested.
        recede_seconds: Duration of the camera recede phase.
        traverse_seconds: Duration of the camera traverse phase.
        approach_seconds: Duration of the camera approach phase.
        overview_zoom: Wide zoom level used while travelling between spots.
    """

    database_url: str = DEFAULT_DATABASE_URL
    log_level: str = "INFO"
    nominatim_url: str = DEFAULT_NOMINATIM_URL
    geocoder_user_agent: str = DEFAULT_USER_AGENT
    geocoder_timeout: float = 10.0
    geocoder_limit: int = 5
    recede_seconds: float = 1.0
    traverse_seconds: float = 1.0
    approach_seconds: float = 1.5
    overview_zoom: int = 4


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number, got {raw!r}")
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"Environment variable {name} must be positive, got {raw!r}")
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"Environment variable {name} must be positive, got {raw!r}")
    return value


def get_settings() -> Settings:
    """Build settings from the current environment.

    Read at call time rather than import time so that tests can set
    variables before the application starts.

    Returns:
        Settings populated from environment variables with defaults.

    Raises:
        ValueError: If a numeric variable cannot be parsed or is not positive.
    """
    return Settings(
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        nominatim_url=os.getenv("NOMINATIM_URL", DEFAULT_NOMINATIM_URL).rstrip("/"),
        geocoder_user_agent=os.getenv("GEOCODER_USER_AGENT", DEFAULT_USER_AGENT),
        geocoder_timeout=_env_float("GEOCODER_TIMEOUT_SECONDS", 10.0),
        geocoder_limit=_env_int("GEOCODER_LIMIT", 5),
        recede_seconds=_env_float("CAMERA_RECEDE_SECONDS", 1.0),
        traverse_seconds=_env_float("CAMERA_TRAVERSE_SECONDS", 1.0),
        approach_seconds=_env_float("CAMERA_APPROACH_SECONDS", 1.5),
        overview_zoom=_env_int("CAMERA_OVERVIEW_ZOOM", 4),
    )

"""Application configuration and settings."""
import logging
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    """Read a float from the environment, keeping ``default`` on bad values."""
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={value!r}, using {default}")
        return default


class Settings:
    """Application settings loaded from environment variables."""

    # Strava API Configuration
    STRAVA_ACCESS_TOKEN: str = os.getenv("STRAVA_ACCESS_TOKEN", "")
    STRAVA_API_BASE: str = os.getenv("STRAVA_API_BASE", "https://www.strava.com/api/v3")
    STRAVA_TIMEOUT: float = _env_float("STRAVA_TIMEOUT", 10.0)

    # Rendering Configuration
    FONT_FILE: str = os.getenv("ROUTESHARE_FONT_FILE", "")

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("ROUTESHARE_LOG_LEVEL", "INFO")


settings = Settings()

"""
Runtime configuration for the trip planner.

Values come from the environment (optionally a local .env file) so the same
build can point at a local planning API or a deployed one.
"""

import os
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8000"


class Settings(BaseModel):
    api_url: str = DEFAULT_API_URL
    mapbox_token: Optional[str] = None
    analytics_id: Optional[str] = None
    default_timeout: float = 30.0
    itinerary_timeout: float = 120.0
    theme_file: Path = Field(default_factory=lambda: Path.home() / ".tripplanner" / "theme.json")
    log_level: str = "INFO"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not a number; using {default}")
        return default


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings once per process. Call get_settings.cache_clear() to reload."""
    settings = Settings(
        api_url=os.getenv("PLANNER_API_URL") or DEFAULT_API_URL,
        mapbox_token=os.getenv("PLANNER_MAPBOX_TOKEN"),
        analytics_id=os.getenv("PLANNER_ANALYTICS_ID"),
        default_timeout=_float_env("PLANNER_DEFAULT_TIMEOUT", 30.0),
        itinerary_timeout=_float_env("PLANNER_ITINERARY_TIMEOUT", 120.0),
        log_level=os.getenv("PLANNER_LOG_LEVEL", "INFO"),
    )
    theme_file = os.getenv("PLANNER_THEME_FILE")
    if theme_file:
        settings.theme_file = Path(theme_file)
    if not settings.mapbox_token:
        logger.warning("PLANNER_MAPBOX_TOKEN not set; map rendering will be unavailable")
    return settings

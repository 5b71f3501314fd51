"""Configuration management"""
import logging
import os
from typing import Optional
from dotenv import load_dotenv
import pytz

from habit_tracker.exceptions import ConfigurationError

load_dotenv()

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Calendar
# Aware timestamps are converted to this zone before being cut down to a day.
# Naive timestamps are treated as already local.
TRACKER_TIMEZONE: str = os.getenv("TRACKER_TIMEZONE", "UTC")

# Categories
PINNED_CATEGORY_TITLE: str = os.getenv("PINNED_CATEGORY_TITLE", "Pinned")
DEFAULT_CATEGORY_TITLE: str = os.getenv("DEFAULT_CATEGORY_TITLE", "Important")


def validate_config() -> None:
    """Validate configuration values"""
    try:
        pytz.timezone(TRACKER_TIMEZONE)
    except pytz.exceptions.UnknownTimeZoneError:
        raise ConfigurationError(
            f"Invalid timezone: '{TRACKER_TIMEZONE}'. "
            f"Use IANA timezone (e.g., 'Europe/Stockholm', 'America/New_York')",
            config_key="TRACKER_TIMEZONE",
        )
    if not PINNED_CATEGORY_TITLE.strip():
        raise ConfigurationError("PINNED_CATEGORY_TITLE is required", config_key="PINNED_CATEGORY_TITLE")
    if not DEFAULT_CATEGORY_TITLE.strip():
        raise ConfigurationError("DEFAULT_CATEGORY_TITLE is required", config_key="DEFAULT_CATEGORY_TITLE")
    if PINNED_CATEGORY_TITLE == DEFAULT_CATEGORY_TITLE:
        raise ConfigurationError(
            "PINNED_CATEGORY_TITLE and DEFAULT_CATEGORY_TITLE must differ",
            config_key="PINNED_CATEGORY_TITLE",
        )


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging with the standard format"""
    logging.basicConfig(
        format=LOG_FORMAT,
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
    )

"""Process configuration read from the environment.

Bootstrap settings only (where the database lives, how to reach the media
server, logging). Runtime scheduling settings live in the database
settings table, see channelarr.database.settings.

Values are read at call time so tests can monkeypatch the environment.
"""

import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_DB_PATH = "data/channelarr.db"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_TIMEZONE = "UTC"
DEFAULT_JELLYFIN_TIMEOUT = 10.0


def get_db_path() -> str:
    """Path of the SQLite database file."""
    return os.environ.get("CHANNELARR_DB_PATH", DEFAULT_DB_PATH)


def get_log_level() -> str:
    return os.environ.get("CHANNELARR_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


def get_log_file() -> str | None:
    return os.environ.get("CHANNELARR_LOG_FILE") or None


def get_user_timezone_str() -> str:
    return os.environ.get("CHANNELARR_TIMEZONE", DEFAULT_TIMEZONE)


def get_user_timezone() -> ZoneInfo:
    """Timezone used for guide output. Falls back to UTC on unknown names."""
    try:
        return ZoneInfo(get_user_timezone_str())
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo(DEFAULT_TIMEZONE)


def get_jellyfin_settings() -> dict:
    """Get Jellyfin connection settings.

    Returns:
        Dict with enabled, url, api_key, timeout
    """
    url = os.environ.get("JELLYFIN_URL") or None
    api_key = os.environ.get("JELLYFIN_API_KEY") or None
    try:
        timeout = float(os.environ.get("JELLYFIN_TIMEOUT", DEFAULT_JELLYFIN_TIMEOUT))
    except ValueError:
        timeout = DEFAULT_JELLYFIN_TIMEOUT
    return {
        "enabled": bool(url and api_key),
        "url": url,
        "api_key": api_key,
        "timeout": timeout,
    }

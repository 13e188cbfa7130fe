"""Time utilities.

Single source of truth for datetime <-> tick conversion and guide
formatting. Ticks are 100ns units counted from the Unix epoch.
Datetimes carry microsecond precision, so tick positions are floored to
the microsecond when converted back. Flooring is monotonic, which keeps
slot boundaries that share a tick identical as datetimes.
"""

from datetime import UTC, datetime, timedelta

from channelarr.config import get_user_timezone
from channelarr.core.types import TICKS_PER_SECOND, UNIX_EPOCH

__all__ = [
    "now_utc",
    "to_utc",
    "to_user_tz",
    "datetime_to_ticks",
    "ticks_to_datetime",
    "format_runtime",
    "format_datetime_xmltv",
]

_TICKS_PER_MICROSECOND = TICKS_PER_SECOND // 1_000_000
_MICROSECOND = timedelta(microseconds=1)


def now_utc() -> datetime:
    """Get current time in UTC."""
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """Convert any datetime to UTC.

    Args:
        dt: Datetime to convert (must be timezone-aware)

    Returns:
        Datetime in UTC
    """
    if dt.tzinfo is None:
        raise ValueError("Cannot convert naive datetime - must be timezone-aware")
    return dt.astimezone(UTC)


def to_user_tz(dt: datetime) -> datetime:
    """Convert any datetime to the configured guide timezone."""
    if dt.tzinfo is None:
        raise ValueError("Cannot convert naive datetime - must be timezone-aware")
    return dt.astimezone(get_user_timezone())


def datetime_to_ticks(dt: datetime) -> int:
    """Ticks since the Unix epoch for a timezone-aware datetime."""
    return ((to_utc(dt) - UNIX_EPOCH) // _MICROSECOND) * _TICKS_PER_MICROSECOND


def ticks_to_datetime(ticks: int) -> datetime:
    """UTC datetime for a tick position (floored to the microsecond)."""
    return UNIX_EPOCH + timedelta(microseconds=ticks // _TICKS_PER_MICROSECOND)


def format_runtime(ticks: int | None) -> str:
    """Format a runtime as H:MM:SS, or 'Unknown' when missing."""
    if not ticks or ticks <= 0:
        return "Unknown"
    total_seconds = ticks // TICKS_PER_SECOND
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"


def format_datetime_xmltv(dt: datetime) -> str:
    """Format datetime for XMLTV output in the configured timezone.

    Converts to user timezone and formats as: YYYYMMDDHHMMSS +/-HHMM

    Args:
        dt: Datetime to format (will be converted to user timezone)

    Returns:
        XMLTV formatted datetime string with timezone offset
    """
    local_dt = to_user_tz(dt)
    offset = local_dt.utcoffset()
    if offset is None:
        offset_str = "+0000"
    else:
        total_seconds = int(offset.total_seconds())
        sign = "+" if total_seconds >= 0 else "-"
        total_seconds = abs(total_seconds)
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        offset_str = f"{sign}{hours:02d}{minutes:02d}"
    return local_dt.strftime("%Y%m%d%H%M%S") + " " + offset_str

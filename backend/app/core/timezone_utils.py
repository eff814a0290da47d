"""
Timezone utilities for the studio platform.

The studio runs on a single local timezone; timestamps are stored in UTC.
"""

from datetime import date, datetime, time
from typing import Optional

import pytz

from .config import settings


def get_studio_timezone() -> pytz.BaseTzInfo:
    """Get the studio's configured timezone."""
    return pytz.timezone(settings.studio_timezone)


def utc_now() -> datetime:
    """Current timezone-aware UTC datetime."""
    return datetime.now(pytz.UTC)


def studio_now() -> datetime:
    """Current datetime in the studio timezone."""
    return datetime.now(get_studio_timezone())


def studio_today() -> date:
    """
    Get 'today' in the studio timezone.

    Timecards and delivery deadlines are keyed on this date, not on the
    server's UTC date.
    """
    return studio_now().date()


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Attach UTC to naive datetimes and convert aware ones to UTC.

    Some backends (SQLite) hand back naive values for timezone-aware columns.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC)


def to_studio_time(dt: datetime) -> datetime:
    """Convert a stored (UTC) datetime to the studio timezone."""
    aware = ensure_utc(dt)
    assert aware is not None
    return aware.astimezone(get_studio_timezone())


def studio_datetime(day: date, clock: time) -> datetime:
    """Localize a studio wall-clock date/time."""
    return get_studio_timezone().localize(datetime.combine(day, clock))


def parse_clock(value: str) -> time:
    """Parse 'HH:MM' (or 'HH:MM:SS') into a time."""
    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time value: {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    second = int(parts[2]) if len(parts) > 2 else 0
    return time(hour, minute, second)

from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE


def get_timezone(name: Optional[str] = None) -> ZoneInfo:
    return ZoneInfo(name or DEFAULT_TIMEZONE)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: Optional[str]) -> Optional[time]:
    """Parse an "HH:MM" shift time. Empty values give None."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    return datetime.strptime(value, "%H:%M").time()


def ensure_aware(value: Optional[datetime], tz: tzinfo) -> Optional[datetime]:
    """Attach ``tz`` to naive datetimes, convert aware ones into ``tz``.

    MySQL DATETIME columns come back naive and are stored in the organisation zone.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def to_naive_local(value: Optional[datetime], tz: tzinfo) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value
    return value.astimezone(tz).replace(tzinfo=None)


def at_local_time(instant: datetime, wall_time: time, tz: tzinfo) -> datetime:
    """Same calendar day as ``instant`` (in ``tz``) at ``wall_time``."""
    local_day = ensure_aware(instant, tz).date()
    return datetime.combine(local_day, wall_time, tzinfo=tz)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end (floored, may be negative)."""
    return int((end - start).total_seconds() // 60)


def add_minutes(instant: datetime, minutes: int) -> datetime:
    return instant + timedelta(minutes=int(minutes))


def format_minutes(total_minutes: int) -> str:
    """Render minutes as "<H>h <M>m"."""
    total_minutes = max(int(total_minutes), 0)
    return f"{total_minutes // 60}h {total_minutes % 60}m"


def format_clock_time(instant: datetime) -> str:
    """12-hour wall clock, e.g. "10:45 AM"."""
    return instant.strftime("%I:%M %p")

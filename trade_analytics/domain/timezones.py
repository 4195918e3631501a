"""Reporting timezone helpers.

Calendar dates and local clock times are taken in the reporting zone
(IANA name). Period boundaries use one fixed UTC offset captured once,
so a span is never re-evaluated across a DST transition.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


@lru_cache(maxsize=64)
def resolve_timezone(name: str) -> ZoneInfo:
    """Look up an IANA zone.

    Raises:
        ValueError: If the name is empty or unknown
    """
    if not name:
        raise ValueError("timezone cannot be empty")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"unknown timezone: {name!r}") from e


def local_date(ts: datetime, tz: ZoneInfo) -> date:
    """Calendar date of an instant in the reporting zone."""
    return ts.astimezone(tz).date()


def capture_offset(tz: ZoneInfo, anchor: datetime | None = None) -> timezone:
    """Freeze the zone's UTC offset at ``anchor`` (default: now)."""
    anchor = anchor or datetime.now(timezone.utc)
    offset = anchor.astimezone(tz).utcoffset() or timedelta(0)
    return timezone(offset)


def period_start(day: date, offset: timezone) -> datetime:
    """Midnight of ``day`` in the captured fixed offset."""
    return datetime(day.year, day.month, day.day, tzinfo=offset)

"""
Civil date/time helpers.

All dates cross the engine boundary as 'YYYY-MM-DD' and times as 'HH:MM'
in one fixed timezone. The timezone is always passed in by the caller.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from typing import List, Optional, Union

MINUTES_PER_DAY = 1440


def time_to_minutes(value: str) -> int:
    """'07:30' -> 450"""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    """450 -> '07:30'. Values past midnight wrap around."""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def format_time(value: Union[datetime, time]) -> str:
    return value.strftime("%H:%M")


def parse_date_value(value: Union[str, date, datetime, None]) -> Optional[date]:
    """
    Accept a date, a datetime or an ISO string and return the civil date.

    Only the date part of an ISO datetime string is kept, so a deadline of
    '2026-10-23T00:00:00Z' means the whole of 23 October.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def localize(value: datetime, tz: tzinfo) -> datetime:
    """Interpret naive datetimes in ``tz``; convert aware ones into it."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def at_minutes(day: date, minutes: int, tz: tzinfo) -> datetime:
    """The instant ``minutes`` after civil midnight of ``day``."""
    midnight = datetime.combine(day, time(0, 0), tzinfo=tz)
    return midnight + timedelta(minutes=minutes)


def end_of_day(day: date, tz: tzinfo) -> datetime:
    """Last representable instant of ``day`` (inclusive deadline bound)."""
    return datetime.combine(day, time(23, 59, 59, 999999), tzinfo=tz)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def date_range(start: date, days: int) -> List[date]:
    """``days`` consecutive dates beginning with ``start``."""
    return [start + timedelta(days=i) for i in range(max(0, days))]


def dates_through(start: date, end: date) -> List[date]:
    """Every date from ``start`` to ``end`` inclusive (empty if end < start)."""
    return date_range(start, (end - start).days + 1)

"""Ad-hoc slot search: up to three concrete candidates for a one-off request."""

from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import List, Optional, Sequence

from loguru import logger

from .free_blocks import find_free_blocks, pick_non_overlapping
from .models import BusyInterval, DayPart, FreeBlock, TimeRequest, TimeWindow, WORK_HOURS
from .timeutils import date_range, dates_through, localize, minutes_to_time, time_to_minutes

DEFAULT_MAX_SLOTS = 3
DEFAULT_SEARCH_DAYS = 28


def _fit_window(window: TimeWindow, duration_minutes: int, is_exact: bool) -> TimeWindow:
    """An exact-time window narrower than the request is stretched to fit it."""
    if not is_exact:
        return window
    start = time_to_minutes(window.start)
    end = time_to_minutes(window.end)
    if end <= start:
        end += 24 * 60
    if end - start >= duration_minutes:
        return window
    return TimeWindow(window.start, minutes_to_time(start + duration_minutes))


def find_slots(
    duration_minutes: int,
    deadline: Optional[date],
    busy: Sequence[BusyInterval],
    now: datetime,
    tz: tzinfo,
    window: Optional[TimeWindow] = None,
    target_date: Optional[date] = None,
    limit: int = DEFAULT_MAX_SLOTS,
    is_exact: bool = False,
    search_days: int = DEFAULT_SEARCH_DAYS,
) -> List[FreeBlock]:
    """
    Find up to ``limit`` free slots for an ad-hoc request.

    Args:
        duration_minutes: Length of the requested slot
        deadline: Last acceptable date (inclusive); None searches ``search_days``
        busy: Busy intervals to avoid
        now: Current instant
        tz: The fixed civil timezone
        window: Time-of-day window (defaults to 09:00-18:00)
        target_date: Search only this date
        limit: Maximum number of slots returned
        is_exact: The window came from an exact clock time

    Returns:
        Chronological, mutually non-overlapping free blocks (possibly empty)
    """
    today = localize(now, tz).date()
    window = _fit_window(window or WORK_HOURS, duration_minutes, is_exact)

    if target_date is not None:
        days = [target_date]
    elif deadline is not None:
        days = dates_through(today, deadline)
    else:
        days = date_range(today, search_days)

    day_part = next((p for p in DayPart if p.window == window), None)

    slots: List[FreeBlock] = []
    for day in days:
        if len(slots) >= limit:
            break
        blocks = find_free_blocks(day, day_part or window, duration_minutes, busy, now, tz)
        slots.extend(pick_non_overlapping(blocks, limit - len(slots)))

    logger.debug(f"Ad-hoc search: {len(slots)} slot(s) of {duration_minutes} min over {len(days)} day(s)")
    return slots


def find_slots_for_request(
    request: TimeRequest,
    duration_minutes: int,
    busy: Sequence[BusyInterval],
    now: datetime,
    tz: tzinfo,
    limit: int = DEFAULT_MAX_SLOTS,
) -> List[FreeBlock]:
    """Second step of the "parse then search" flow."""
    return find_slots(
        duration_minutes,
        deadline=None,
        busy=busy,
        now=now,
        tz=tz,
        window=request.window,
        target_date=request.date,
        limit=limit,
        is_exact=request.is_exact,
    )

"""
Day-Part Grid Search.

Walks a single day's window in 30-minute steps and keeps every candidate
of the requested length that is free, inside the window, and far enough
in the future.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from loguru import logger

from .models import BusyInterval, DayPart, FreeBlock, TimeWindow
from .timeutils import at_minutes, localize, time_to_minutes

GRID_STEP_MINUTES = 30
LOOKAHEAD_BUFFER = timedelta(minutes=30)


def do_times_overlap(start1: datetime, end1: datetime, start2: datetime, end2: datetime) -> bool:
    """Half-open overlap test: touching ranges do not overlap."""
    return not (end1 <= start2 or start1 >= end2)


def is_slot_free(
    start: datetime,
    end: datetime,
    busy: Iterable[BusyInterval],
    tz: tzinfo,
) -> bool:
    """True when ``[start, end)`` overlaps none of the busy intervals."""
    for interval in busy:
        if do_times_overlap(start, end, localize(interval.start, tz), localize(interval.end, tz)):
            return False
    return True


def is_too_late(start: datetime, now: datetime) -> bool:
    """Slots starting within the next 30 minutes (or earlier) are not offered."""
    return start <= now + LOOKAHEAD_BUFFER


def find_free_blocks(
    day: date,
    window: Union[DayPart, TimeWindow],
    duration_minutes: int,
    busy: Sequence[BusyInterval],
    now: datetime,
    tz: tzinfo,
) -> List[FreeBlock]:
    """
    Find all free blocks of ``duration_minutes`` inside one window of one day.

    Args:
        day: Civil date to search
        window: A DayPart or an arbitrary start/end window
        duration_minutes: Required block length
        busy: Busy intervals to avoid
        now: Current instant (naive values are read in ``tz``)
        tz: The fixed civil timezone

    Returns:
        Free blocks in chronological order (grid starts may overlap each other)
    """
    day_part: Optional[DayPart] = window if isinstance(window, DayPart) else None
    time_window = window.window if isinstance(window, DayPart) else window

    window_start = time_to_minutes(time_window.start)
    window_end = time_to_minutes(time_window.end)
    if window_end <= window_start:
        window_end += 24 * 60  # Window runs past midnight

    if duration_minutes <= 0 or duration_minutes > window_end - window_start:
        return []

    now = localize(now, tz)
    # Only intervals touching this window can matter
    range_start = at_minutes(day, window_start, tz)
    range_end = at_minutes(day, window_end, tz)
    relevant = [
        b for b in busy
        if do_times_overlap(range_start, range_end, localize(b.start, tz), localize(b.end, tz))
    ]

    blocks: List[FreeBlock] = []
    current = window_start
    while current + duration_minutes <= window_end:
        start = at_minutes(day, current, tz)
        end = at_minutes(day, current + duration_minutes, tz)

        if not is_too_late(start, now) and is_slot_free(start, end, relevant, tz):
            blocks.append(FreeBlock(start=start, end=end, day_part=day_part))

        current += GRID_STEP_MINUTES

    return blocks


def pick_non_overlapping(blocks: Iterable[FreeBlock], limit: Optional[int] = None) -> List[FreeBlock]:
    """
    Greedily keep blocks that do not overlap an already kept one.

    Grid candidates 30 minutes apart overlap whenever the duration is longer
    than the step, so several sessions on one day are chosen through here.
    """
    chosen: List[FreeBlock] = []
    for block in blocks:
        if limit is not None and len(chosen) >= limit:
            break
        if any(block.overlaps(c) for c in chosen):
            continue
        chosen.append(block)
    return chosen


def find_free_blocks_for_days(
    days: Iterable[date],
    day_parts: Iterable[DayPart],
    duration_minutes: int,
    busy: Sequence[BusyInterval],
    now: datetime,
    tz: tzinfo,
) -> Dict[Tuple[date, DayPart], List[FreeBlock]]:
    """Grid search for every (date, day-part) pair: ``{(date, part): [blocks]}``."""
    day_parts = list(day_parts)
    found: Dict[Tuple[date, DayPart], List[FreeBlock]] = {}
    total = 0
    for day in days:
        for part in day_parts:
            blocks = find_free_blocks(day, part, duration_minutes, busy, now, tz)
            found[(day, part)] = blocks
            total += len(blocks)
    logger.debug(f"Grid search: {len(found)} day-parts scanned, {total} free {duration_minutes}-min blocks")
    return found

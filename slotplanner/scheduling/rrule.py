"""
Recurrence Descriptor Builder.

Keeps the calendar's RRULE syntax in one place. Day assignments for the
Nx-per-week cadences are fixed (Mon/Wed/Fri and Mon/Thu).
"""

from __future__ import annotations

from datetime import date, timezone, tzinfo
from typing import Dict, Optional, Union

from loguru import logger

from .cadence import Cadence, as_cadence, plan_session_count
from .models import RecurrenceBound, RecurrenceDescriptor
from .timeutils import end_of_day

# Deadline day ends more than four weeks from today
UNTIL_THRESHOLD_DAYS = 28

BYDAY_CODES = ["MO", "TU", "WE", "TH", "FR", "SA", "SU"]

FIXED_BYDAY: Dict[Cadence, str] = {
    Cadence.THRICE_WEEKLY: "MO,WE,FR",
    Cadence.TWICE_WEEKLY: "MO,TH",
}


def format_until(deadline: date, tz: tzinfo) -> str:
    """End of the deadline day in ``tz``, as an RRULE UTC timestamp."""
    return end_of_day(deadline, tz).astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def build_recurrence(
    frequency: Union[Cadence, str, None],
    start_date: date,
    deadline: Optional[date] = None,
    *,
    count: Optional[int] = None,
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> Optional[RecurrenceDescriptor]:
    """
    Build the recurrence for a repeating calendar entry.

    Bounded by UNTIL (end of the deadline day) when the deadline is more than
    four weeks after ``today``, otherwise by COUNT.

    Args:
        frequency: Goal cadence
        start_date: Date of the first occurrence
        deadline: Inclusive deadline
        count: Occurrence count to use (defaults to the planner's count)
        today: Reference date for the four-week rule (defaults to start_date)
        tz: Timezone of the deadline (defaults to UTC)

    Returns:
        RecurrenceDescriptor, or None for one-shot / unrecognised cadences,
        which are booked as discrete events instead.
    """
    cadence = as_cadence(frequency)
    if not cadence.is_recurring:
        logger.debug(f"No recurrence for frequency '{frequency}'")
        return None

    tz = tz or timezone.utc
    today = today or start_date

    parts = ["FREQ=DAILY" if cadence == Cadence.DAILY else "FREQ=WEEKLY"]

    until = None
    if deadline is not None and (deadline - today).days >= UNTIL_THRESHOLD_DAYS:
        until = end_of_day(deadline, tz).astimezone(timezone.utc).replace(microsecond=0)
        parts.append(f"UNTIL={format_until(deadline, tz)}")
    else:
        count = count or plan_session_count(cadence, start_date, deadline)
        parts.append(f"COUNT={count}")

    if cadence == Cadence.WEEKLY:
        parts.append(f"BYDAY={BYDAY_CODES[start_date.weekday()]}")
    elif cadence in FIXED_BYDAY:
        parts.append(f"BYDAY={FIXED_BYDAY[cadence]}")
        parts.append("INTERVAL=1")

    rule = ";".join(parts)
    if until is not None:
        return RecurrenceDescriptor(rule=rule, bounded_by=RecurrenceBound.UNTIL, bound_value=until)
    return RecurrenceDescriptor(rule=rule, bounded_by=RecurrenceBound.COUNT, bound_value=count)

"""
Cadence parsing and the Session Count Planner.

A goal's free-text frequency ("daily", "3x per week", "twice a week") is
normalised into a ``Cadence`` once; every table below is keyed on the enum.
"""

from __future__ import annotations

import math
import re
from datetime import date
from enum import Enum
from typing import Dict, Optional, Union

from loguru import logger

HORIZON_WEEKS = 4


class Cadence(str, Enum):
    """Recurrence pattern of a goal."""
    ONCE = "once"                  # No frequency given
    DAILY = "daily"
    WEEKLY = "weekly"
    TWICE_WEEKLY = "2x_week"
    THRICE_WEEKLY = "3x_week"
    UNKNOWN = "unknown"            # Frequency given but not recognised

    @property
    def is_recurring(self) -> bool:
        return self not in (Cadence.ONCE, Cadence.UNKNOWN)


# Maximum occurrences over the rolling 4-week horizon
MAX_EVENTS: Dict[Cadence, int] = {
    Cadence.ONCE: 1,
    Cadence.DAILY: 28,
    Cadence.WEEKLY: 4,
    Cadence.TWICE_WEEKLY: 8,
    Cadence.THRICE_WEEKLY: 12,
    Cadence.UNKNOWN: 1,
}

SESSIONS_PER_WEEK: Dict[Cadence, int] = {
    Cadence.WEEKLY: 1,
    Cadence.TWICE_WEEKLY: 2,
    Cadence.THRICE_WEEKLY: 3,
}

_EXACT_PHRASES: Dict[str, Cadence] = {
    "daily": Cadence.DAILY,
    "every day": Cadence.DAILY,
    "everyday": Cadence.DAILY,
    "each day": Cadence.DAILY,
    "weekly": Cadence.WEEKLY,
    "every week": Cadence.WEEKLY,
    "once a week": Cadence.WEEKLY,
    "once per week": Cadence.WEEKLY,
    "1x per week": Cadence.WEEKLY,
    "1x/week": Cadence.WEEKLY,
    "twice a week": Cadence.TWICE_WEEKLY,
    "twice per week": Cadence.TWICE_WEEKLY,
    "twice weekly": Cadence.TWICE_WEEKLY,
}

_TIMES_PER_WEEK = re.compile(
    r"^(?P<n>\d+|two|three)\s*(?:x|times?)?\s*(?:days?\s+)?"
    r"(?:(?:/|a|per|each|every)?\s*(?:week|wk)s?|weekly)$"
)

_NUMBER_WORDS = {"two": 2, "three": 3}

_TIMES_TO_CADENCE = {2: Cadence.TWICE_WEEKLY, 3: Cadence.THRICE_WEEKLY, 1: Cadence.WEEKLY}


def parse_cadence(frequency: Optional[str]) -> Cadence:
    """
    Normalise a goal frequency.

    Examples:
    - None / ""                     -> ONCE
    - "Daily", "every day"          -> DAILY
    - "3x per week", "3 times a week", "3x weekly", "3 days a week" -> THRICE_WEEKLY
    - "fortnightly"                 -> UNKNOWN
    """
    if frequency is None or not frequency.strip():
        return Cadence.ONCE

    text = " ".join(frequency.lower().split())

    if text in _EXACT_PHRASES:
        return _EXACT_PHRASES[text]

    match = _TIMES_PER_WEEK.match(text)
    if match:
        raw = match.group("n")
        times = _NUMBER_WORDS.get(raw) or int(raw)
        cadence = _TIMES_TO_CADENCE.get(times)
        if cadence:
            return cadence

    logger.debug(f"Unrecognised frequency '{frequency}', treating as one-shot")
    return Cadence.UNKNOWN


def as_cadence(frequency: Union[Cadence, str, None]) -> Cadence:
    if isinstance(frequency, Cadence):
        return frequency
    return parse_cadence(frequency)


def plan_session_count(
    frequency: Union[Cadence, str, None],
    first_date: date,
    deadline: Optional[date] = None,
) -> int:
    """
    How many occurrences a goal needs over the rolling 4-week horizon.

    With a deadline, only the occurrences that fit between ``first_date``
    and the deadline (both inclusive) are counted: calendar days for daily
    goals, started weeks for weekly / Nx-weekly goals. Always at least 1;
    a deadline before ``first_date`` still gives one "as soon as possible"
    occurrence.
    """
    cadence = as_cadence(frequency)
    max_events = MAX_EVENTS[cadence]

    if deadline is None or not cadence.is_recurring:
        return max_events

    days_until_deadline = (deadline - first_date).days + 1
    if days_until_deadline <= 0:
        return 1

    if cadence == Cadence.DAILY:
        events = min(max_events, days_until_deadline)
    else:
        weeks = math.ceil(days_until_deadline / 7)
        events = min(max_events, weeks * SESSIONS_PER_WEEK[cadence])

    return max(1, events)

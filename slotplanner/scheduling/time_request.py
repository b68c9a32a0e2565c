"""
Ad-hoc Time Request Parser.

Turns a short phrase ("tomorrow afternoon", "3pm", "next Tuesday",
"Oct 21 at 9:30am") into a target date and a search window. Stateless and
single-shot: no cadence, no conversation context.

Examples:
- "today", "tonight", "tomorrow", "in 3 days"
- "friday", "next friday" (next occurrence; a week ahead if today is Friday)
- "oct 21", "21 october", "10/21" (next year once the date has passed)
- "3pm", "at 9", "9:30am", "15:00" (1-hour exact window); a bare "at 1" to
  "at 7" means 13:00 to 19:00
- "morning", "afternoon", "evening"
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

from loguru import logger

from .models import DayPart, TimeRequest, TimeWindow, WORK_HOURS
from .timeutils import minutes_to_time

EXACT_WINDOW_MINUTES = 60

# Bare "at h" hours read as afternoon/evening
BARE_PM_HOURS = (1, 7)

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

MONTHS = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

_MONTH_NAMES = "|".join(sorted(MONTHS, key=len, reverse=True))

_IN_DAYS = re.compile(r"\bin\s+(\d+)\s+days?\b")
_WEEKDAY = re.compile(r"\b(?:next\s+|this\s+|on\s+)?(" + "|".join(WEEKDAYS) + r")\b")
_MONTH_DAY = re.compile(r"\b(" + _MONTH_NAMES + r")\.?\s+(\d{1,2})(?:st|nd|rd|th)?\b")
_DAY_MONTH = re.compile(r"\b(\d{1,2})(?:st|nd|rd|th)?\s+(?:of\s+)?(" + _MONTH_NAMES + r")\b")
_NUMERIC_DATE = re.compile(r"\b(\d{1,2})/(\d{1,2})\b")

_TIME_12H = re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm)\b")
_TIME_24H = re.compile(r"\b(\d{1,2}):(\d{2})\b")
_AT_HOUR = re.compile(r"\bat\s+(\d{1,2})\b(?!\s*(?:/|:|days?\b))")

_DAY_PARTS = {
    "morning": DayPart.MORNING,
    "afternoon": DayPart.AFTERNOON,
    "evening": DayPart.EVENING,
    "tonight": DayPart.EVENING,
}


def _parse_date(text: str, today: date) -> Optional[date]:
    if re.search(r"\btoday\b|\btonight\b", text):
        return today
    if re.search(r"\btomorrow\b", text):
        return today + timedelta(days=1)

    match = _IN_DAYS.search(text)
    if match:
        return today + timedelta(days=int(match.group(1)))

    match = _WEEKDAY.search(text)
    if match:
        target = WEEKDAYS.index(match.group(1))
        days_ahead = (target - today.weekday()) % 7
        return today + timedelta(days=days_ahead or 7)

    month_day = None
    match = _MONTH_DAY.search(text)
    if match:
        month_day = (MONTHS[match.group(1)], int(match.group(2)))
    else:
        match = _DAY_MONTH.search(text)
        if match:
            month_day = (MONTHS[match.group(2)], int(match.group(1)))
        else:
            match = _NUMERIC_DATE.search(text)
            if match:
                month_day = (int(match.group(1)), int(match.group(2)))

    if month_day:
        return _next_month_day(*month_day, today=today)

    return None


def _next_month_day(month: int, day: int, today: date) -> Optional[date]:
    """This year's date, or next year's once it has passed."""
    try:
        candidate = date(today.year, month, day)
        if candidate < today:
            candidate = date(today.year + 1, month, day)
    except ValueError:
        logger.debug(f"Ignoring invalid month/day {month}/{day}")
        return None
    return candidate


def _parse_exact_time(text: str) -> Optional[Tuple[int, int]]:
    match = _TIME_12H.search(text)
    if match:
        hour = int(match.group(1))
        minute = int(match.group(2) or 0)
        if not 1 <= hour <= 12 or minute > 59:
            return None
        period = match.group(3)
        if period == "pm" and hour != 12:
            hour += 12
        elif period == "am" and hour == 12:
            hour = 0
        return hour, minute

    match = _TIME_24H.search(text)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour <= 23 and minute <= 59:
            return hour, minute
        return None

    match = _AT_HOUR.search(text)
    if match:
        hour = int(match.group(1))
        if BARE_PM_HOURS[0] <= hour <= BARE_PM_HOURS[1]:
            # "at 3" means 15:00
            hour += 12
        if hour <= 23:
            return hour, 0

    return None


def parse_time_request(text: str, now: datetime) -> TimeRequest:
    """
    Parse a loose time phrase into a date and search window.

    Args:
        text: The user's phrase
        now: Current civil datetime, supplied by the caller

    Returns:
        TimeRequest; today and 09:00-18:00 work hours when nothing matched
    """
    text = " ".join((text or "").lower().split())
    today = now.date()

    target = _parse_date(text, today)
    matched_date = target is not None
    target = target or today

    exact = _parse_exact_time(text)
    if exact is not None:
        hour, minute = exact
        start = hour * 60 + minute
        # A bare time that has already gone by today means tomorrow
        if not matched_date and start <= now.hour * 60 + now.minute:
            target = today + timedelta(days=1)
        window = TimeWindow(minutes_to_time(start), minutes_to_time(start + EXACT_WINDOW_MINUTES))
        return TimeRequest(
            date=target,
            window=window,
            is_exact=True,
            matched_date=matched_date,
            matched_time=True,
        )

    for word, part in _DAY_PARTS.items():
        if re.search(rf"\b{word}\b", text):
            return TimeRequest(
                date=target,
                window=part.window,
                day_part=part,
                matched_date=matched_date,
                matched_time=True,
            )

    return TimeRequest(date=target, window=WORK_HOURS, matched_date=matched_date)

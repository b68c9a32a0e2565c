"""
Google Calendar boundary for slotplanner.

The engine never talks to a calendar. This module converts at the edges:

- Events read from the Google Calendar API (``events.list`` items) into
  BusyInterval objects for the engine
- Proposed sessions and recurrence descriptors into ``events.insert``
  request bodies for the caller to send

API Documentation: https://developers.google.com/calendar/api/v3/reference
"""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Dict, Iterable, List, Optional, Sequence

from loguru import logger

from ..scheduling.models import BusyInterval, FreeBlock, Goal, RecurrenceDescriptor
from ..scheduling.timeutils import localize

DEFAULT_REMINDER_MINUTES = 30


def _parse_event_time(data: Dict[str, Any], tz: tzinfo) -> Optional[datetime]:
    """Read a Google ``start``/``end`` object: timed or all-day."""
    if data.get("dateTime"):
        return localize(datetime.fromisoformat(data["dateTime"].replace("Z", "+00:00")), tz)
    if data.get("date"):
        return datetime.combine(date.fromisoformat(data["date"]), time(0, 0), tzinfo=tz)
    return None


def busy_interval_from_event(event: Dict[str, Any], tz: tzinfo) -> Optional[BusyInterval]:
    """
    Convert one Google Calendar event into a BusyInterval.

    Returns None for events that do not block time: cancelled events,
    events marked "show as available" (transparent), and malformed ones.
    """
    if event.get("status") == "cancelled" or event.get("transparency") == "transparent":
        return None

    start = _parse_event_time(event.get("start", {}), tz)
    end = _parse_event_time(event.get("end", {}), tz)
    if start is None or end is None or start >= end:
        return None

    return BusyInterval(start=start, end=end, summary=event.get("summary"))


def busy_intervals_from_events(events: Iterable[Dict[str, Any]], tz: tzinfo) -> List[BusyInterval]:
    """Convert an ``events.list`` result into busy intervals, skipping unusable items."""
    intervals = []
    skipped = 0
    for event in events:
        try:
            interval = busy_interval_from_event(event, tz)
        except ValueError as e:
            logger.warning(f"Failed to parse event {event.get('id', '?')}: {e}")
            interval = None
        if interval is None:
            skipped += 1
            continue
        intervals.append(interval)

    if skipped:
        logger.debug(f"Skipped {skipped} non-blocking or malformed event(s)")
    return intervals


def should_use_individual_events(goal: Goal, events: Sequence[FreeBlock]) -> bool:
    """
    Multi-session days cannot be expressed by one RRULE, so they are booked
    as separate events.
    """
    per_day = Counter(e.date for e in events)
    has_multi_session_days = any(count > 1 for count in per_day.values())
    return has_multi_session_days or goal.max_sessions_per_day > 1


def _event_time(block_time: datetime, tz: tzinfo) -> Dict[str, str]:
    return {
        "dateTime": localize(block_time, tz).isoformat(),
        "timeZone": str(tz),
    }


def _reminders(reminder_minutes: int) -> Dict[str, Any]:
    return {
        "useDefault": False,
        "overrides": [{"method": "popup", "minutes": reminder_minutes}],
    }


def _target_line(goal: Goal) -> str:
    if goal.target_amount is None:
        return ""
    amount = f"{goal.target_amount:g}"
    unit = f" {goal.target_unit}" if goal.target_unit else ""
    return f"\nTarget: {amount}{unit}"


def build_session_resources(
    goal: Goal,
    events: Sequence[FreeBlock],
    tz: tzinfo,
    reminder_minutes: int = DEFAULT_REMINDER_MINUTES,
) -> List[Dict[str, Any]]:
    """One non-recurring event body per proposed session."""
    total = len(events)
    resources = []
    for index, block in enumerate(events, 1):
        session_line = f"\nSession {index} of {total}" if total > 1 else ""
        resources.append({
            "summary": goal.description,
            "description": f"Goal: {goal.description}{session_line}{_target_line(goal)}",
            "start": _event_time(block.start, tz),
            "end": _event_time(block.end, tz),
            "reminders": _reminders(reminder_minutes),
        })
    return resources


def build_recurring_resource(
    goal: Goal,
    first_event: FreeBlock,
    descriptor: RecurrenceDescriptor,
    tz: tzinfo,
    reminder_minutes: int = DEFAULT_REMINDER_MINUTES,
) -> Dict[str, Any]:
    """A single repeating event body anchored on the first proposed session."""
    return {
        "summary": goal.description,
        "description": f"Goal: {goal.description}\nFrequency: {goal.frequency}{_target_line(goal)}",
        "start": _event_time(first_event.start, tz),
        "end": _event_time(first_event.end, tz),
        "recurrence": [descriptor.as_rrule_line()],
        "reminders": _reminders(reminder_minutes),
    }


def busy_window(now: datetime, horizon_days: int) -> Dict[str, str]:
    """``timeMin``/``timeMax`` for the ``events.list`` read covering the horizon."""
    return {
        "timeMin": now.isoformat(),
        "timeMax": (now + timedelta(days=horizon_days)).isoformat(),
    }

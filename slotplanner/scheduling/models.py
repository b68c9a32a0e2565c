"""
Data models for the availability scheduling engine.

Defines busy intervals, goals, day-parts and the result types handed back
to callers. Every model is frozen: the engine only reads its inputs and
builds fresh results per request.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from .timeutils import format_date, format_time, parse_date_value


class DayPart(str, Enum):
    """Fixed daily windows used for slot search and preference matching."""
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"

    @property
    def window(self) -> "TimeWindow":
        return DAY_PART_WINDOWS[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


class TimePreference(str, Enum):
    """A goal's time-of-day preference. WEEKEND filters dates, not windows."""
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    WEEKEND = "weekend"


class DistributionStrategy(str, Enum):
    """How many sessions are packed into a day."""
    SPREAD_EVENLY = "spread_evenly"    # Respect max_sessions_per_day
    FINISH_QUICKLY = "finish_quickly"  # Take every free block of the day


@dataclass(frozen=True)
class TimeWindow:
    """A civil time-of-day window, 'HH:MM' strings."""
    start: str
    end: str

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start, "end": self.end}


DAY_PART_WINDOWS: Dict[DayPart, TimeWindow] = {
    DayPart.MORNING: TimeWindow("06:00", "12:00"),
    DayPart.AFTERNOON: TimeWindow("12:00", "18:00"),
    DayPart.EVENING: TimeWindow("18:00", "22:00"),
}

WORK_HOURS = TimeWindow("09:00", "18:00")

DAY_PART_ORDER: Tuple[DayPart, ...] = (DayPart.MORNING, DayPart.AFTERNOON, DayPart.EVENING)


@dataclass(frozen=True)
class BusyInterval:
    """An externally supplied occupied time range."""
    start: datetime
    end: datetime
    summary: Optional[str] = None

    def __post_init__(self):
        if (self.start.tzinfo is None) != (self.end.tzinfo is None):
            raise ValueError("BusyInterval start and end must both be naive or both be aware")
        if self.start >= self.end:
            raise ValueError(f"BusyInterval start must be before end: {self.start} >= {self.end}")


@dataclass(frozen=True)
class FreeBlock:
    """A candidate, duration-matching, non-overlapping time range."""
    start: datetime
    end: datetime
    day_part: Optional[DayPart] = None

    @property
    def date(self) -> str:
        return format_date(self.start.date())

    @property
    def start_time(self) -> str:
        return format_time(self.start)

    @property
    def end_time(self) -> str:
        return format_time(self.end)

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    def overlaps(self, other: "FreeBlock") -> bool:
        return not (self.end <= other.start or self.start >= other.end)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "durationMinutes": self.duration_minutes,
            "dayPart": self.day_part.value if self.day_part else None,
        }

    def __str__(self) -> str:
        return f"{self.date} {self.start_time}-{self.end_time}"


@dataclass(frozen=True)
class DaySlots:
    """All usable free blocks for one date within one day-part."""
    date: date
    slots: Tuple[FreeBlock, ...] = ()


@dataclass(frozen=True)
class Goal:
    """
    A scheduling goal, read-only to the engine.

    ``session_duration`` is in hours. ``deadline`` covers its whole
    calendar day.
    """
    description: str = ""
    target_amount: Optional[float] = None
    target_unit: Optional[str] = None
    deadline: Optional[date] = None
    frequency: Optional[str] = None
    time_preferences: FrozenSet[TimePreference] = frozenset()
    max_sessions_per_day: int = 1
    session_duration: Optional[float] = None
    distribution_strategy: DistributionStrategy = DistributionStrategy.SPREAD_EVENLY
    id: Optional[str] = None

    def __post_init__(self):
        if self.max_sessions_per_day < 1:
            raise ValueError("max_sessions_per_day must be at least 1")
        if self.session_duration is not None and self.session_duration <= 0:
            raise ValueError("session_duration must be positive")

    @property
    def weekend_only(self) -> bool:
        return TimePreference.WEEKEND in self.time_preferences

    @property
    def day_parts(self) -> List[DayPart]:
        """Selected day-parts in canonical order; all three when none selected."""
        selected = [p for p in DAY_PART_ORDER if TimePreference(p.value) in self.time_preferences]
        return selected or list(DAY_PART_ORDER)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Goal":
        """
        Create a Goal from the goal-management collaborator's record.

        Accepts snake_case or camelCase keys. Unknown time preferences are
        dropped, empty values become None.
        """
        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                value = data.get(key)
                if value not in (None, ""):
                    return value
            return default

        return cls(
            id=pick("id"),
            description=pick("description", default=""),
            target_amount=_optional_float(pick("target_amount", "targetAmount")),
            target_unit=pick("target_unit", "targetUnit"),
            deadline=parse_date_value(pick("deadline")),
            frequency=pick("frequency"),
            time_preferences=parse_time_preferences(pick("time_preferences", "timePreferences", default=[])),
            max_sessions_per_day=int(pick("max_sessions_per_day", "maxSessionsPerDay", default=1)),
            session_duration=_optional_float(pick("session_duration", "sessionDuration")),
            distribution_strategy=DistributionStrategy(
                pick("distribution_strategy", "distributionStrategy", default="spread_evenly")
            ),
        )


def parse_time_preferences(values: Union[Iterable[str], str, None]) -> FrozenSet[TimePreference]:
    """Keep only recognised preferences; anything else is ignored."""
    if values is None:
        return frozenset()
    if isinstance(values, str):
        values = [values]
    valid = {p.value for p in TimePreference}
    return frozenset(TimePreference(v.lower()) for v in values if isinstance(v, str) and v.lower() in valid)


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


@dataclass(frozen=True)
class TimeOption:
    """The concrete session list proposed for one day-part."""
    day_part: DayPart
    events: Tuple[FreeBlock, ...]
    session_minutes: int

    @property
    def label(self) -> str:
        return self.day_part.label

    @property
    def total_events(self) -> int:
        return len(self.events)

    @property
    def total_hours(self) -> float:
        return self.total_events * self.session_minutes / 60

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dayPart": self.day_part.value,
            "label": self.label,
            "events": [e.to_dict() for e in self.events],
            "totalEvents": self.total_events,
            "totalHours": self.total_hours,
        }


@dataclass(frozen=True)
class ScheduleDiagnostics:
    """Insufficiency report returned in diagnostic mode."""
    sessions_needed: int
    sessions_found: int
    session_minutes: int
    alternatives: Tuple[FreeBlock, ...] = ()

    @property
    def incomplete(self) -> bool:
        return self.sessions_found < self.sessions_needed

    @property
    def missing_sessions(self) -> int:
        return max(0, self.sessions_needed - self.sessions_found)

    @property
    def hours_needed(self) -> float:
        return self.sessions_needed * self.session_minutes / 60

    @property
    def hours_found(self) -> float:
        return self.sessions_found * self.session_minutes / 60

    @property
    def missing_hours(self) -> float:
        return self.missing_sessions * self.session_minutes / 60

    def to_dict(self) -> Dict[str, Any]:
        return {
            "incomplete": self.incomplete,
            "sessionsNeeded": self.sessions_needed,
            "sessionsFound": self.sessions_found,
            "missingSessions": self.missing_sessions,
            "hoursNeeded": self.hours_needed,
            "hoursFound": self.hours_found,
            "missingHours": self.missing_hours,
            "alternatives": [a.to_dict() for a in self.alternatives],
        }


@dataclass(frozen=True)
class ScheduleResult:
    """The engine's primary output for a goal query."""
    time_options: Tuple[TimeOption, ...]
    event_count: int
    frequency: str
    diagnostics: Optional[ScheduleDiagnostics] = None

    @property
    def is_empty(self) -> bool:
        return not self.time_options

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "timeOptions": [o.to_dict() for o in self.time_options],
            "eventCount": self.event_count,
            "frequency": self.frequency,
        }
        if self.diagnostics is not None:
            result.update(self.diagnostics.to_dict())
        return result


class RecurrenceBound(str, Enum):
    COUNT = "count"
    UNTIL = "until"


@dataclass(frozen=True)
class RecurrenceDescriptor:
    """A validated RRULE body for the calendar-write collaborator."""
    rule: str
    bounded_by: RecurrenceBound
    bound_value: Union[int, datetime]

    def __post_init__(self):
        if not self.rule.startswith("FREQ="):
            raise ValueError(f"Recurrence rule must start with FREQ=: {self.rule}")
        if self.bounded_by == RecurrenceBound.COUNT:
            if not isinstance(self.bound_value, int) or self.bound_value < 1:
                raise ValueError("COUNT-bounded recurrence needs a positive integer count")
            if f"COUNT={self.bound_value}" not in self.rule:
                raise ValueError("Recurrence rule does not carry its COUNT bound")
        else:
            if not isinstance(self.bound_value, datetime):
                raise ValueError("UNTIL-bounded recurrence needs a datetime bound")
            if "UNTIL=" not in self.rule:
                raise ValueError("Recurrence rule does not carry its UNTIL bound")

    def as_rrule_line(self) -> str:
        return f"RRULE:{self.rule}"

    def to_dict(self) -> Dict[str, Any]:
        bound = self.bound_value
        return {
            "rule": self.rule,
            "boundedBy": self.bounded_by.value,
            "boundValue": bound if isinstance(bound, int) else bound.isoformat(),
        }


@dataclass(frozen=True)
class TimeRequest:
    """A parsed ad-hoc time phrase."""
    date: date
    window: TimeWindow
    is_exact: bool = False
    day_part: Optional[DayPart] = None
    matched_date: bool = False
    matched_time: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": format_date(self.date),
            "timeWindow": self.window.to_dict(),
            "isExact": self.is_exact,
            "dayPart": self.day_part.value if self.day_part else None,
        }

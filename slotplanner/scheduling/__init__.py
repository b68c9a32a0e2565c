"""
Availability Scheduling Engine.

Pure, synchronous functions over explicit inputs (busy intervals, goal,
current time, timezone):
- Goal Duration Resolver (duration)
- Session Count Planner (cadence)
- Day-Part Grid Search (free_blocks)
- Recurring Date Generator (recurrence_dates)
- Multi-Session Distributor + Alternative Slot Search (distributor)
- Ad-hoc Time Request Parser and slot search (time_request, slot_finder)
- Recurrence Descriptor Builder (rrule)
"""

from .cadence import Cadence, parse_cadence, plan_session_count
from .distributor import find_alternative_slots, plan_schedule
from .duration import calculate_duration_minutes, session_minutes, sessions_needed
from .free_blocks import do_times_overlap, find_free_blocks, is_slot_free
from .manager import SchedulingManager
from .models import (
    BusyInterval,
    DayPart,
    DaySlots,
    DistributionStrategy,
    FreeBlock,
    Goal,
    RecurrenceBound,
    RecurrenceDescriptor,
    ScheduleDiagnostics,
    ScheduleResult,
    TimeOption,
    TimePreference,
    TimeRequest,
    TimeWindow,
)
from .recurrence_dates import recurring_dates
from .rrule import build_recurrence
from .slot_finder import find_slots
from .time_request import parse_time_request

__all__ = [
    "BusyInterval",
    "Cadence",
    "DayPart",
    "DaySlots",
    "DistributionStrategy",
    "FreeBlock",
    "Goal",
    "RecurrenceBound",
    "RecurrenceDescriptor",
    "ScheduleDiagnostics",
    "ScheduleResult",
    "SchedulingManager",
    "TimeOption",
    "TimePreference",
    "TimeRequest",
    "TimeWindow",
    "build_recurrence",
    "calculate_duration_minutes",
    "do_times_overlap",
    "find_alternative_slots",
    "find_free_blocks",
    "find_slots",
    "is_slot_free",
    "parse_cadence",
    "parse_time_request",
    "plan_schedule",
    "plan_session_count",
    "recurring_dates",
    "session_minutes",
    "sessions_needed",
]

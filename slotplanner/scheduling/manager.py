"""
Scheduling Manager for slotplanner.

Facade for callers embedding the engine: resolves the configured timezone
and the current time once, threads both into the pure engine functions,
and formats results for display.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from loguru import logger

from ..core.config import SlotPlannerConfig
from ..core.errors import get_error_message
from .distributor import plan_schedule
from .models import BusyInterval, FreeBlock, Goal, RecurrenceDescriptor, ScheduleResult, TimeRequest, TimeWindow
from .rrule import build_recurrence
from .slot_finder import find_slots, find_slots_for_request
from .time_request import parse_time_request
from .timeutils import localize, parse_date_value


class SchedulingManager:
    """
    Entry point for goal planning and ad-hoc slot finding.

    Usage:
        manager = SchedulingManager(config())
        result = manager.plan(goal, busy, diagnostic=True)
        request, slots = manager.find_time("tomorrow afternoon", 30, busy)
    """

    def __init__(
        self,
        config: Optional[SlotPlannerConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the manager.

        Args:
            config: Loaded configuration (defaults are used when omitted)
            clock: Returns the current instant; injected for deterministic tests
        """
        self.config = config or SlotPlannerConfig()
        self.tz = ZoneInfo(self.config.scheduling.timezone)
        self._clock = clock

    def now(self) -> datetime:
        if self._clock is not None:
            return localize(self._clock(), self.tz)
        return datetime.now(self.tz)

    def plan(
        self,
        goal: Goal,
        busy: Sequence[BusyInterval],
        diagnostic: bool = False,
    ) -> ScheduleResult:
        """Plan sessions for a goal over the configured horizon."""
        scheduling = self.config.scheduling
        return plan_schedule(
            goal,
            busy,
            now=self.now(),
            tz=self.tz,
            horizon_days=scheduling.horizon_days,
            diagnostic=diagnostic,
            alternatives_per_missing_session=scheduling.alternatives_per_missing_session,
        )

    def parse(self, text: str) -> TimeRequest:
        return parse_time_request(text, self.now())

    def find_time(
        self,
        text: str,
        duration_minutes: int,
        busy: Sequence[BusyInterval],
    ) -> Tuple[TimeRequest, List[FreeBlock]]:
        """Parse a loose time phrase, then search that day and window."""
        now = self.now()
        request = parse_time_request(text, now)
        slots = find_slots_for_request(
            request,
            duration_minutes,
            busy,
            now,
            self.tz,
            limit=self.config.scheduling.adhoc_max_slots,
        )
        logger.info(f"'{text}' -> {request.date} {request.window.start}-{request.window.end}: {len(slots)} slot(s)")
        return request, slots

    def find_slots(
        self,
        duration_minutes: int,
        busy: Sequence[BusyInterval],
        deadline: Optional[date] = None,
        window: Optional[TimeWindow] = None,
        target_date: Optional[date] = None,
    ) -> List[FreeBlock]:
        return find_slots(
            duration_minutes,
            deadline,
            busy,
            self.now(),
            self.tz,
            window=window,
            target_date=target_date,
            limit=self.config.scheduling.adhoc_max_slots,
            search_days=self.config.scheduling.horizon_days,
        )

    def recurrence_for(self, goal: Goal, events: Sequence[FreeBlock]) -> Optional[RecurrenceDescriptor]:
        """Recurrence for booking ``events`` as one repeating entry, if the goal repeats."""
        if not events:
            return None
        return build_recurrence(
            goal.frequency,
            parse_date_value(events[0].date),
            goal.deadline,
            count=len(events),
            today=self.now().date(),
            tz=self.tz,
        )

    def format_schedule(self, result: ScheduleResult, goal: Optional[Goal] = None) -> str:
        """
        Format a schedule for display.

        Args:
            result: Output of ``plan``
            goal: The planned goal; a deadline already behind today is
                reported as an "as soon as possible" booking
        """
        notice = []
        if goal is not None and goal.deadline is not None and goal.deadline < self.now().date():
            notice = [f"⏰ {get_error_message('deadline_passed', detailed=True)}", ""]

        if result.is_empty:
            return "\n".join(notice + [f"📅 {get_error_message('no_slots')}", "", get_error_message('no_slots', detailed=True)])

        lines = notice + [f"📅 Schedule options ({result.frequency})", ""]
        for option in result.time_options:
            lines.append(f"**{option.label}** - {option.total_events} session(s), {option.total_hours:g}h")
            for event in option.events:
                lines.append(f"   {_friendly(event)}")
            lines.append("")

        diagnostics = result.diagnostics
        if diagnostics is not None and diagnostics.incomplete:
            lines.append(
                f"⚠️ {get_error_message('incomplete_schedule')}: "
                f"{diagnostics.sessions_found}/{diagnostics.sessions_needed} sessions"
            )
            for alt in diagnostics.alternatives:
                part = f" ({alt.day_part.value})" if alt.day_part else ""
                lines.append(f"   • {_friendly(alt)}{part}")

        return "\n".join(lines).rstrip()

    def format_slots(self, request: TimeRequest, slots: Sequence[FreeBlock]) -> str:
        """Format ad-hoc slot candidates for display."""
        day = request.date.strftime("%A, %B %d")
        if not slots:
            return f"No free time found on {day} between {request.window.start} and {request.window.end}."

        lines = [f"Free on {day}:"]
        for i, slot in enumerate(slots, 1):
            lines.append(f"  {i}. {slot.start.strftime('%I:%M %p').lstrip('0')} - {slot.end.strftime('%I:%M %p').lstrip('0')}")
        return "\n".join(lines)


def _friendly(block: FreeBlock) -> str:
    """'Mon 19 Oct, 7:00 AM - 8:00 AM'"""
    start = block.start.strftime("%I:%M %p").lstrip("0")
    end = block.end.strftime("%I:%M %p").lstrip("0")
    return f"{block.start.strftime('%a %d %b')}, {start} - {end}"

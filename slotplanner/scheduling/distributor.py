"""
Multi-Session Distributor.

Assembles the day-part keyed session proposals for a goal:

1. Resolve the per-session duration and cadence
2. Grid-search every horizon date in every day-part
3. Plan the occurrence count from the first date that has any free time
4. For each selected day-part, fill sessions along the recurring dates,
   falling back to another day-part on dates where the preferred one is full
5. In diagnostic mode, report shortfall and search alternative slots
"""

from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from .cadence import Cadence, parse_cadence, plan_session_count
from .duration import session_minutes, sessions_needed
from .free_blocks import find_free_blocks, find_free_blocks_for_days, pick_non_overlapping
from .models import (
    DAY_PART_ORDER,
    BusyInterval,
    DayPart,
    DaySlots,
    DistributionStrategy,
    FreeBlock,
    Goal,
    ScheduleDiagnostics,
    ScheduleResult,
    TimeOption,
)
from .recurrence_dates import recurring_dates
from .timeutils import date_range, dates_through, is_weekend, localize

DEFAULT_HORIZON_DAYS = 28
ALTERNATIVES_PER_MISSING_SESSION = 3
ALTERNATIVES_PER_DAY_PART = 3

BlockIndex = Dict[Tuple[date, DayPart], List[FreeBlock]]


def horizon_dates(today: date, horizon_days: int, weekend_only: bool = False) -> List[date]:
    """Dates searched for a goal, weekend-filtered when the goal asks for it."""
    dates = date_range(today, horizon_days)
    if weekend_only:
        dates = [d for d in dates if is_weekend(d)]
    return dates


def build_day_slots(
    blocks_by_day: BlockIndex,
    day_part: DayPart,
    dates: Sequence[date],
    goal: Goal,
) -> List[DaySlots]:
    """
    Usable sessions per date for one day-part.

    Blocks within a day never overlap each other; spread_evenly caps them at
    ``max_sessions_per_day``, finish_quickly keeps every one.
    """
    limit: Optional[int] = goal.max_sessions_per_day
    if goal.distribution_strategy == DistributionStrategy.FINISH_QUICKLY:
        limit = None

    day_slots = []
    for day in dates:
        blocks = blocks_by_day.get((day, day_part), [])
        if blocks:
            day_slots.append(DaySlots(date=day, slots=tuple(pick_non_overlapping(blocks, limit))))
    return day_slots


def first_available_date(slots_by_part: Dict[DayPart, List[DaySlots]], order: Sequence[DayPart]) -> Optional[date]:
    for part in order:
        if slots_by_part[part]:
            return slots_by_part[part][0].date
    return None


def _option_dates(
    goal: Goal,
    cadence: Cadence,
    first_date: date,
    valid_dates: Sequence[date],
    event_count: int,
    needed: int,
    today: date,
) -> List[date]:
    if goal.deadline is not None and goal.deadline < today:
        # Deadline already passed: one occurrence as soon as possible
        return [first_date]
    if not cadence.is_recurring and needed > 1:
        # One-shot goal split into several sessions: keep going day by day
        return [d for d in valid_dates if d >= first_date and (goal.deadline is None or d <= goal.deadline)]
    dates = recurring_dates(cadence, first_date, valid_dates, goal.deadline, event_count)
    return [d for d in dates if goal.deadline is None or d <= goal.deadline]


def _fill_option(
    day_part: DayPart,
    dates: Sequence[date],
    slots_by_part: Dict[DayPart, List[DaySlots]],
    needed: int,
) -> List[FreeBlock]:
    events: List[FreeBlock] = []
    for day in dates:
        entry = next((s for s in slots_by_part[day_part] if s.date == day), None)

        if entry is not None and entry.slots:
            for slot in entry.slots:
                if len(events) >= needed:
                    break
                events.append(slot)
        else:
            # Same date, another part of the day
            for alt_part in DAY_PART_ORDER:
                if alt_part == day_part:
                    continue
                alt_entry = next((s for s in slots_by_part[alt_part] if s.date == day), None)
                if alt_entry is not None and alt_entry.slots:
                    events.append(alt_entry.slots[0])
                    break

        if len(events) >= needed:
            break
    return events


def plan_schedule(
    goal: Goal,
    busy: Sequence[BusyInterval],
    now: datetime,
    tz: tzinfo,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    diagnostic: bool = False,
    alternatives_per_missing_session: int = ALTERNATIVES_PER_MISSING_SESSION,
) -> ScheduleResult:
    """
    Plan concrete sessions for a goal.

    Args:
        goal: The goal to schedule (never modified)
        busy: Busy intervals for the horizon
        now: Current instant; naive values are read in ``tz``
        tz: The fixed civil timezone
        horizon_days: Days searched, starting today
        diagnostic: Also compute the insufficiency report and alternatives
        alternatives_per_missing_session: Cap on alternatives per missing session

    Returns:
        ScheduleResult with one TimeOption per selected day-part that found
        at least one session; ``time_options`` is empty when nothing fits.
    """
    now = localize(now, tz)
    today = now.date()
    cadence = parse_cadence(goal.frequency)
    one_shot = not cadence.is_recurring
    per_session = session_minutes(goal, one_shot)

    valid_dates = horizon_dates(today, horizon_days, goal.weekend_only)
    blocks_by_day = find_free_blocks_for_days(valid_dates, DAY_PART_ORDER, per_session, busy, now, tz)

    slots_by_part = {part: build_day_slots(blocks_by_day, part, valid_dates, goal) for part in DAY_PART_ORDER}

    selected = goal.day_parts
    search_order = selected + [p for p in DAY_PART_ORDER if p not in selected]
    first_date = first_available_date(slots_by_part, search_order)

    event_count = plan_session_count(cadence, first_date, goal.deadline) if first_date else 1
    needed = sessions_needed(goal, event_count, one_shot)

    time_options: List[TimeOption] = []
    for part in selected:
        if not slots_by_part[part]:
            continue

        dates = _option_dates(goal, cadence, slots_by_part[part][0].date, valid_dates, event_count, needed, today)
        events = _fill_option(part, dates, slots_by_part, needed)

        logger.debug(f"{part.value}: found {len(events)} sessions (needed {needed})")
        if events:
            time_options.append(TimeOption(day_part=part, events=tuple(events), session_minutes=per_session))

    diagnostics = None
    if diagnostic:
        diagnostics = diagnose(
            goal,
            cadence,
            needed,
            time_options,
            busy,
            now,
            tz,
            per_session,
            horizon_days,
            alternatives_per_missing_session,
        )

    logger.info(
        f"Planned '{goal.description}': {len(time_options)} option(s), "
        f"{event_count} event(s), {per_session} min per session"
    )

    return ScheduleResult(
        time_options=tuple(time_options),
        event_count=event_count,
        frequency=goal.frequency or "one-time",
        diagnostics=diagnostics,
    )


def diagnostic_sessions_needed(
    goal: Goal,
    cadence: Cadence,
    needed: int,
    today: date,
    horizon_days: int,
) -> int:
    """
    Sessions a goal should have, independent of where free time was found.

    Daily goals with a deadline count every eligible date from today (not
    from the first free date), so a missed today shows up as a shortfall.
    """
    if cadence == Cadence.DAILY and goal.deadline is not None and not goal.session_duration:
        eligible = [d for d in horizon_dates(today, horizon_days, goal.weekend_only) if d <= goal.deadline]
        return max(1, len(eligible))
    return needed


def diagnose(
    goal: Goal,
    cadence: Cadence,
    needed: int,
    time_options: Sequence[TimeOption],
    busy: Sequence[BusyInterval],
    now: datetime,
    tz: tzinfo,
    per_session: int,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    alternatives_per_missing_session: int = ALTERNATIVES_PER_MISSING_SESSION,
) -> ScheduleDiagnostics:
    """Compare found sessions to needed ones and search alternatives on shortfall."""
    today = localize(now, tz).date()
    sessions_needed_total = diagnostic_sessions_needed(goal, cadence, needed, today, horizon_days)
    primary = time_options[0].events if time_options else ()
    sessions_found = len(primary)

    alternatives: Tuple[FreeBlock, ...] = ()
    if sessions_found < sessions_needed_total:
        missing = sessions_needed_total - sessions_found
        alternatives = tuple(
            find_alternative_slots(
                busy,
                now,
                tz,
                per_session,
                goal.deadline,
                missing * alternatives_per_missing_session,
                exclude=primary,
                horizon_days=horizon_days,
            )
        )
        logger.info(
            f"Incomplete schedule for '{goal.description}': {sessions_found}/{sessions_needed_total} sessions, "
            f"{len(alternatives)} alternative(s)"
        )

    return ScheduleDiagnostics(
        sessions_needed=sessions_needed_total,
        sessions_found=sessions_found,
        session_minutes=per_session,
        alternatives=alternatives,
    )


def find_alternative_slots(
    busy: Sequence[BusyInterval],
    now: datetime,
    tz: tzinfo,
    duration_minutes: int,
    deadline: Optional[date],
    max_alternatives: int,
    exclude: Sequence[FreeBlock] = (),
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> List[FreeBlock]:
    """
    Alternative Slot Search.

    Scans every date from today through the deadline (the horizon when
    there is none) across all three day-parts, taking up to three blocks per
    date and day-part. Blocks overlapping an already proposed session are
    skipped.
    """
    today = localize(now, tz).date()
    if deadline is not None:
        dates = dates_through(today, deadline)
    else:
        dates = date_range(today, horizon_days)

    alternatives: List[FreeBlock] = []
    for day in dates:
        if len(alternatives) >= max_alternatives:
            break
        for part in DAY_PART_ORDER:
            blocks = find_free_blocks(day, part, duration_minutes, busy, now, tz)
            blocks = [b for b in blocks if not any(b.overlaps(e) for e in exclude)]
            alternatives.extend(pick_non_overlapping(blocks, ALTERNATIVES_PER_DAY_PART))

    logger.debug(f"Alternative search: {len(alternatives)} candidate(s) over {len(dates)} date(s)")
    return alternatives[:max_alternatives]

"""
Goal Duration Resolver.

Maps a goal's target amount and unit to minutes. The unit table is a
heuristic approximation (a kilometre "costs" about 30 minutes of running,
a page about 2 minutes of reading), not a measured duration.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Dict, Optional

from loguru import logger

from .models import DAY_PART_WINDOWS, Goal
from .timeutils import time_to_minutes

DEFAULT_SESSION_MINUTES = 60


class TargetUnit(str, Enum):
    """Recognised goal units."""
    HOUR = "hour"
    MINUTE = "minute"
    KILOMETER = "km"
    MILE = "mile"
    PAGE = "page"
    CHAPTER = "chapter"
    UNKNOWN = "unknown"


UNIT_MINUTES: Dict[TargetUnit, int] = {
    TargetUnit.HOUR: 60,
    TargetUnit.MINUTE: 1,
    TargetUnit.KILOMETER: 30,   # ~30 min per km running
    TargetUnit.MILE: 45,        # ~45 min per mile running
    TargetUnit.PAGE: 2,         # ~2 min per page reading
    TargetUnit.CHAPTER: 30,
    TargetUnit.UNKNOWN: DEFAULT_SESSION_MINUTES,
}

UNIT_ALIASES: Dict[str, TargetUnit] = {
    "hour": TargetUnit.HOUR,
    "hours": TargetUnit.HOUR,
    "hr": TargetUnit.HOUR,
    "hrs": TargetUnit.HOUR,
    "h": TargetUnit.HOUR,
    "minute": TargetUnit.MINUTE,
    "minutes": TargetUnit.MINUTE,
    "min": TargetUnit.MINUTE,
    "mins": TargetUnit.MINUTE,
    "km": TargetUnit.KILOMETER,
    "kms": TargetUnit.KILOMETER,
    "kilometer": TargetUnit.KILOMETER,
    "kilometers": TargetUnit.KILOMETER,
    "kilometre": TargetUnit.KILOMETER,
    "kilometres": TargetUnit.KILOMETER,
    "mile": TargetUnit.MILE,
    "miles": TargetUnit.MILE,
    "mi": TargetUnit.MILE,
    "page": TargetUnit.PAGE,
    "pages": TargetUnit.PAGE,
    "chapter": TargetUnit.CHAPTER,
    "chapters": TargetUnit.CHAPTER,
}

# Longest fixed day-part, 06:00-12:00 / 12:00-18:00
LONGEST_DAY_PART_MINUTES = max(
    time_to_minutes(w.end) - time_to_minutes(w.start) for w in DAY_PART_WINDOWS.values()
)


def parse_unit(unit: Optional[str]) -> TargetUnit:
    """Normalise free-form unit text; unrecognised text maps to UNKNOWN."""
    if not unit:
        return TargetUnit.UNKNOWN
    return UNIT_ALIASES.get(unit.strip().lower(), TargetUnit.UNKNOWN)


def calculate_duration_minutes(target_amount: Optional[float], target_unit: Optional[str]) -> int:
    """
    Total minutes implied by a target.

    Missing amount or unit gives the 60-minute default; an unknown unit is
    treated as one hour per unit. Never raises.
    """
    if not target_amount or not target_unit:
        return DEFAULT_SESSION_MINUTES

    unit = parse_unit(target_unit)
    if unit == TargetUnit.UNKNOWN:
        logger.debug(f"Unknown target unit '{target_unit}', assuming {DEFAULT_SESSION_MINUTES} min each")

    return int(round(target_amount * UNIT_MINUTES[unit]))


def goal_total_minutes(goal: Goal) -> int:
    return calculate_duration_minutes(goal.target_amount, goal.target_unit)


def splits_into_default_sessions(goal: Goal, one_shot: bool) -> bool:
    """
    A one-shot goal with no explicit session length whose total cannot fit
    into any single day-part ("study 10 hours") is split into default-length
    sessions instead of being searched as one impossible block.
    """
    return (
        one_shot
        and goal.session_duration is None
        and goal_total_minutes(goal) > LONGEST_DAY_PART_MINUTES
    )


def session_minutes(goal: Goal, one_shot: bool = False) -> int:
    """Minutes per session for a goal."""
    if goal.session_duration:
        return max(1, int(round(goal.session_duration * 60)))
    if splits_into_default_sessions(goal, one_shot):
        return DEFAULT_SESSION_MINUTES
    return goal_total_minutes(goal)


def sessions_needed(goal: Goal, planned_count: int, one_shot: bool = False) -> int:
    """
    Number of sessions the goal asks for.

    Goals with both a target amount and a session length need
    ``ceil(target_amount / session_duration)``: one session per
    ``session_duration`` units of target, whatever the unit. One-shot goals
    split into default sessions need ``ceil(total minutes / 60)``. Everything
    else needs the planner's cadence count.
    """
    if goal.session_duration and goal.target_amount:
        return max(1, math.ceil(goal.target_amount / goal.session_duration))
    if splits_into_default_sessions(goal, one_shot):
        return max(1, math.ceil(goal_total_minutes(goal) / DEFAULT_SESSION_MINUTES))
    return max(1, planned_count)

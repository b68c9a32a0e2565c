"""Calendar collaborator boundary for slotplanner."""

from .calendar import (
    build_recurring_resource,
    build_session_resources,
    busy_interval_from_event,
    busy_intervals_from_events,
    busy_window,
    should_use_individual_events,
)

__all__ = [
    "build_recurring_resource",
    "build_session_resources",
    "busy_interval_from_event",
    "busy_intervals_from_events",
    "busy_window",
    "should_use_individual_events",
]

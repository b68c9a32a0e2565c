"""
Centralized Error Handling for slotplanner.

The engine itself degrades gracefully (empty results, documented defaults).
This module provides:
- ConfigurationError for broken settings
- User-friendly messages for the "nothing found" outcomes
"""

from typing import Dict

from loguru import logger


class ConfigurationError(Exception):
    """Raised when the configuration cannot be loaded or is invalid."""
    pass


# User-friendly messages for the engine's empty / partial outcomes
ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "no_slots": {
        "short": "No free time found",
        "detailed": """No free time was found for this request.

Try one of:
1. A shorter session duration
2. A different time of day (morning, afternoon or evening)
3. A later deadline""",
    },
    "incomplete_schedule": {
        "short": "Not enough free time for every session",
        "detailed": """Only part of the goal could be scheduled.

The remaining sessions did not fit into your preferred time of day.
Alternative slots from other parts of the day are listed below; pick
the ones you want to add.""",
    },
    "deadline_passed": {
        "short": "Deadline has already passed",
        "detailed": """The goal's deadline is already in the past.

A single session has been proposed as soon as possible instead.""",
    },
    "one_time": {
        "short": "One-time goal",
        "detailed": """This goal has no repeating cadence.

Sessions are booked as separate calendar events rather than a single
repeating entry.""",
    },
}


def get_error_message(error_key: str, detailed: bool = False) -> str:
    """
    Get user-friendly error message.

    Args:
        error_key: Key for the error type
        detailed: Whether to return the detailed explanation

    Returns:
        User-friendly error message
    """
    if error_key not in ERROR_MESSAGES:
        logger.warning(f"Unknown error message key: {error_key}")
        return f"An error occurred: {error_key}"

    msg = ERROR_MESSAGES[error_key]
    return msg["detailed"] if detailed else msg["short"]

"""
Recurring Date Generator.

Chooses the dates a recurring goal occupies from the ordered list of valid
dates in the search horizon.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .cadence import Cadence, as_cadence

# Offsets inside each 7-date window (Mon/Wed/Fri-style and Mon/Thu-style)
WEEK_POSITIONS: Dict[Cadence, Tuple[int, ...]] = {
    Cadence.THRICE_WEEKLY: (0, 2, 4),
    Cadence.TWICE_WEEKLY: (0, 3),
}


def recurring_dates(
    frequency: Union[Cadence, str, None],
    first_date: date,
    valid_dates: Sequence[date],
    deadline: Optional[date] = None,
    max_count: int = 100,
) -> List[date]:
    """
    Enumerate the dates on which sessions should occur.

    The first date past the (inclusive) deadline ends generation; later
    occurrences are dropped, never substituted.

    Args:
        frequency: Goal cadence (text or Cadence)
        first_date: First chosen date, expected to be in ``valid_dates``
        valid_dates: Ordered horizon dates (already weekend-filtered if needed)
        deadline: Last allowed date
        max_count: Upper bound on generated dates
    """
    cadence = as_cadence(frequency)
    if not cadence.is_recurring or first_date not in valid_dates:
        return [first_date]

    start = list(valid_dates).index(first_date)

    def allowed(day: date) -> bool:
        return deadline is None or day <= deadline

    dates: List[date] = []

    if cadence == Cadence.DAILY:
        for day in valid_dates[start:start + max_count]:
            if not allowed(day):
                break
            dates.append(day)

    elif cadence == Cadence.WEEKLY:
        for i in range(max_count):
            index = start + i * 7
            if index >= len(valid_dates):
                break
            if not allowed(valid_dates[index]):
                break
            dates.append(valid_dates[index])

    else:
        positions = WEEK_POSITIONS[cadence]
        for week in range(math.ceil(max_count / len(positions))):
            for offset in positions:
                if len(dates) >= max_count:
                    return dates
                index = start + week * 7 + offset
                if index >= len(valid_dates):
                    continue
                if not allowed(valid_dates[index]):
                    return dates
                dates.append(valid_dates[index])

    return dates

"""
Unit tests for the recurring date generator.
"""

import sys
from datetime import date
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from slotplanner.scheduling.recurrence_dates import recurring_dates
from slotplanner.scheduling.timeutils import date_range

MONDAY = date(2026, 10, 19)
HORIZON = date_range(MONDAY, 28)


class TestRecurringDates:
    """Tests for recurring_dates."""

    def test_daily_consecutive(self):
        """Test daily goals take consecutive dates."""
        dates = recurring_dates("daily", MONDAY, HORIZON, date(2026, 10, 25), max_count=7)
        assert dates == date_range(MONDAY, 7)

    def test_daily_stops_at_deadline(self):
        """Test generation ends after the deadline."""
        dates = recurring_dates("daily", MONDAY, HORIZON, date(2026, 10, 21), max_count=28)
        assert dates[-1] == date(2026, 10, 21)
        assert len(dates) == 3

    def test_weekly_steps_by_seven(self):
        """Test weekly goals repeat on the same weekday."""
        dates = recurring_dates("weekly", MONDAY, HORIZON, max_count=4)
        assert dates == [date(2026, 10, 19), date(2026, 10, 26), date(2026, 11, 2), date(2026, 11, 9)]

    def test_thrice_weekly_positions(self):
        """Test 3x/week uses offsets 0, 2 and 4 in each week."""
        dates = recurring_dates("3x per week", MONDAY, HORIZON, date(2026, 11, 1), max_count=6)
        assert dates == [
            date(2026, 10, 19), date(2026, 10, 21), date(2026, 10, 23),
            date(2026, 10, 26), date(2026, 10, 28), date(2026, 10, 30),
        ]

    def test_twice_weekly_positions(self):
        """Test 2x/week uses offsets 0 and 3 in each week."""
        dates = recurring_dates("twice a week", MONDAY, HORIZON, max_count=4)
        assert dates == [date(2026, 10, 19), date(2026, 10, 22), date(2026, 10, 26), date(2026, 10, 29)]

    def test_deadline_drops_later_occurrences(self):
        """Test occurrences past the deadline are dropped, not replaced."""
        dates = recurring_dates("3x per week", MONDAY, HORIZON, date(2026, 10, 27), max_count=12)
        assert dates == [date(2026, 10, 19), date(2026, 10, 21), date(2026, 10, 23), date(2026, 10, 26)]

    def test_one_shot_returns_first_date(self):
        """Test non-recurring cadences return only the first date."""
        assert recurring_dates(None, MONDAY, HORIZON) == [MONDAY]

    def test_first_date_outside_list(self):
        """Test a first date missing from the valid list is returned alone."""
        assert recurring_dates("daily", date(2027, 1, 1), HORIZON) == [date(2027, 1, 1)]

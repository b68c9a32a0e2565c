"""
Unit tests for the day-part grid search.

Tests:
- Grid walk inside a day-part
- Busy interval and past-buffer exclusion
- Custom and midnight-crossing windows
- Non-overlapping selection
"""

import sys
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from slotplanner.scheduling.free_blocks import (
    do_times_overlap,
    find_free_blocks,
    find_free_blocks_for_days,
    is_slot_free,
    pick_non_overlapping,
)
from slotplanner.scheduling.models import BusyInterval, DayPart, TimeWindow

TZ = ZoneInfo("Australia/Sydney")
NOW = datetime(2026, 10, 19, 8, 0, tzinfo=TZ)  # Monday
TUESDAY = date(2026, 10, 20)


def busy(day: date, start: str, end: str) -> BusyInterval:
    sh, sm = map(int, start.split(":"))
    eh, em = map(int, end.split(":"))
    return BusyInterval(
        start=datetime(day.year, day.month, day.day, sh, sm, tzinfo=TZ),
        end=datetime(day.year, day.month, day.day, eh, em, tzinfo=TZ),
    )


class TestOverlap:
    """Tests for the overlap helpers."""

    def test_touching_ranges_do_not_overlap(self):
        """Test half-open semantics."""
        a = datetime(2026, 10, 20, 9, 0, tzinfo=TZ)
        b = datetime(2026, 10, 20, 10, 0, tzinfo=TZ)
        c = datetime(2026, 10, 20, 11, 0, tzinfo=TZ)
        assert not do_times_overlap(a, b, b, c)
        assert do_times_overlap(a, c, b, c)

    def test_naive_busy_read_in_timezone(self):
        """Test naive busy intervals are interpreted in the given timezone."""
        naive = BusyInterval(start=datetime(2026, 10, 20, 9, 0), end=datetime(2026, 10, 20, 10, 0))
        start = datetime(2026, 10, 20, 9, 30, tzinfo=TZ)
        end = datetime(2026, 10, 20, 10, 30, tzinfo=TZ)
        assert not is_slot_free(start, end, [naive], TZ)


class TestFindFreeBlocks:
    """Tests for find_free_blocks."""

    def test_empty_morning(self):
        """Test every grid start in an empty morning."""
        blocks = find_free_blocks(TUESDAY, DayPart.MORNING, 60, [], NOW, TZ)

        assert len(blocks) == 11
        assert blocks[0].start_time == "06:00"
        assert blocks[-1].start_time == "11:00"
        assert blocks[-1].end_time == "12:00"
        assert all(b.day_part == DayPart.MORNING for b in blocks)

    def test_past_buffer(self):
        """Test slots starting within 30 minutes of now are not offered."""
        blocks = find_free_blocks(NOW.date(), DayPart.MORNING, 60, [], NOW, TZ)

        assert blocks[0].start_time == "09:00"
        assert all(b.start > NOW for b in blocks)
        assert len(blocks) == 5

    def test_busy_interval_excluded(self):
        """Test candidates overlapping a busy interval are dropped."""
        blocks = find_free_blocks(TUESDAY, DayPart.MORNING, 60, [busy(TUESDAY, "09:00", "10:00")], NOW, TZ)
        starts = [b.start_time for b in blocks]

        assert "08:00" in starts
        assert "08:30" not in starts
        assert "09:00" not in starts
        assert "09:30" not in starts
        assert "10:00" in starts
        assert len(blocks) == 8

    def test_duration_longer_than_window(self):
        """Test an impossible duration yields nothing."""
        assert find_free_blocks(TUESDAY, DayPart.EVENING, 300, [], NOW, TZ) == []

    def test_non_positive_duration(self):
        """Test zero-length requests yield nothing."""
        assert find_free_blocks(TUESDAY, DayPart.MORNING, 0, [], NOW, TZ) == []

    def test_custom_window(self):
        """Test an arbitrary start/end window."""
        blocks = find_free_blocks(TUESDAY, TimeWindow("09:00", "18:00"), 30, [], NOW, TZ)

        assert blocks[0].start_time == "09:00"
        assert blocks[-1].end_time == "18:00"
        assert all(b.day_part is None for b in blocks)

    def test_window_crossing_midnight(self):
        """Test a window ending at or before its start runs into the next day."""
        blocks = find_free_blocks(TUESDAY, TimeWindow("22:00", "02:00"), 60, [], NOW, TZ)

        assert len(blocks) == 5
        assert blocks[0].start_time == "22:00"
        assert blocks[-1].date == "2026-10-21"
        assert blocks[-1].end_time == "02:00"

    def test_results_avoid_busy_intervals(self):
        """Test no returned block overlaps any busy interval."""
        intervals = [busy(TUESDAY, "12:15", "13:10"), busy(TUESDAY, "15:00", "15:30")]
        blocks = find_free_blocks(TUESDAY, DayPart.AFTERNOON, 45, intervals, NOW, TZ)

        assert blocks
        for block in blocks:
            for interval in intervals:
                assert not do_times_overlap(block.start, block.end, interval.start, interval.end)


class TestSelection:
    """Tests for pick_non_overlapping and the multi-day search."""

    def test_pick_non_overlapping(self):
        """Test greedy selection skips overlapping grid neighbours."""
        blocks = find_free_blocks(TUESDAY, DayPart.MORNING, 60, [], NOW, TZ)
        chosen = pick_non_overlapping(blocks, limit=3)

        assert [b.start_time for b in chosen] == ["06:00", "07:00", "08:00"]

    def test_pick_without_limit(self):
        """Test every non-overlapping block is kept without a limit."""
        blocks = find_free_blocks(TUESDAY, DayPart.MORNING, 60, [], NOW, TZ)
        assert len(pick_non_overlapping(blocks)) == 6

    def test_find_for_days(self):
        """Test the (date, day-part) index covers every pair."""
        found = find_free_blocks_for_days(
            [NOW.date(), TUESDAY],
            [DayPart.MORNING, DayPart.EVENING],
            60,
            [],
            NOW,
            TZ,
        )

        assert set(found) == {
            (NOW.date(), DayPart.MORNING),
            (NOW.date(), DayPart.EVENING),
            (TUESDAY, DayPart.MORNING),
            (TUESDAY, DayPart.EVENING),
        }
        assert len(found[(TUESDAY, DayPart.EVENING)]) == 7

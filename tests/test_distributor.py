"""
Unit tests for the multi-session distributor and alternative slot search.

Tests:
- Day-part keyed options and fallback
- Deadline inclusivity, past buffer, no-overlap
- One-shot splitting and distribution strategies
- Diagnostic mode and alternatives
"""

import sys
from datetime import date, datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from slotplanner.scheduling.distributor import find_alternative_slots, plan_schedule
from slotplanner.scheduling.free_blocks import do_times_overlap
from slotplanner.scheduling.models import (
    BusyInterval,
    DayPart,
    DistributionStrategy,
    Goal,
    TimePreference,
)
from slotplanner.scheduling.timeutils import date_range

TZ = ZoneInfo("Australia/Sydney")
NOW = datetime(2026, 10, 19, 8, 0, tzinfo=TZ)  # Monday
TODAY = NOW.date()


def busy(day: date, start: str, end: str) -> BusyInterval:
    sh, sm = map(int, start.split(":"))
    eh, em = map(int, end.split(":"))
    return BusyInterval(
        start=datetime(day.year, day.month, day.day, sh, sm, tzinfo=TZ),
        end=datetime(day.year, day.month, day.day, eh, em, tzinfo=TZ),
    )


@pytest.fixture
def morning_daily_goal():
    """Daily one-hour goal in the morning, due Friday."""
    return Goal(
        description="Meditate",
        frequency="daily",
        deadline=date(2026, 10, 23),
        time_preferences=frozenset({TimePreference.MORNING}),
    )


class TestPlanSchedule:
    """Tests for plan_schedule."""

    def test_daily_morning_goal(self, morning_daily_goal):
        """Test one option for the selected day-part, one session per date."""
        result = plan_schedule(morning_daily_goal, [], NOW, TZ)

        assert [o.day_part for o in result.time_options] == [DayPart.MORNING]
        events = result.time_options[0].events
        assert [e.date for e in events] == [
            "2026-10-19", "2026-10-20", "2026-10-21", "2026-10-22", "2026-10-23",
        ]
        assert events[0].start_time == "09:00"
        assert events[1].start_time == "06:00"
        assert result.event_count == 5
        assert result.frequency == "daily"
        assert result.diagnostics is None

    def test_daily_deadline_week(self):
        """Test daily with deadline today+6 gives seven consecutive dates."""
        goal = Goal(description="Walk", frequency="daily", deadline=TODAY + timedelta(days=6))
        result = plan_schedule(goal, [], NOW, TZ)

        assert result.event_count == 7
        for option in result.time_options:
            assert [e.date for e in option.events] == [d.isoformat() for d in date_range(TODAY, 7)]

    def test_thrice_weekly_two_weeks(self):
        """Test 3x/week with deadline today+13 gives six sessions."""
        goal = Goal(description="Gym", frequency="3x per week", deadline=TODAY + timedelta(days=13))
        result = plan_schedule(goal, [], NOW, TZ)

        assert result.event_count == 6
        morning = result.time_options[0]
        assert [e.date for e in morning.events] == [
            "2026-10-19", "2026-10-21", "2026-10-23",
            "2026-10-26", "2026-10-28", "2026-10-30",
        ]

    def test_no_preference_gives_all_parts_in_order(self):
        """Test all three day-parts are offered when none is selected."""
        goal = Goal(description="Read", frequency="weekly")
        result = plan_schedule(goal, [], NOW, TZ)

        assert [o.label for o in result.time_options] == ["Morning", "Afternoon", "Evening"]
        assert all(o.total_events == 4 for o in result.time_options)

    def test_one_shot_ten_hours(self):
        """Test a 10-hour one-shot goal is split into ten 60-minute sessions."""
        goal = Goal(description="Study", target_amount=10, target_unit="hour")
        result = plan_schedule(goal, [], NOW, TZ)

        assert result.frequency == "one-time"
        for option in result.time_options:
            assert option.total_events == 10
            assert option.total_hours == 10
            assert all(e.duration_minutes == 60 for e in option.events)

    def test_fallback_to_other_day_part(self, morning_daily_goal):
        """Test dates with a full morning borrow another part of the same day."""
        booked = [busy(date(2026, 10, 21), "06:00", "12:00")]
        result = plan_schedule(morning_daily_goal, booked, NOW, TZ)

        events = result.time_options[0].events
        assert len(events) == 5
        assert events[2].date == "2026-10-21"
        assert events[2].day_part == DayPart.AFTERNOON

    def test_deadline_inclusive(self, morning_daily_goal):
        """Test no session falls after the deadline day, and the deadline day is used."""
        result = plan_schedule(morning_daily_goal, [], NOW, TZ)
        dates = [e.date for o in result.time_options for e in o.events]

        assert max(dates) == "2026-10-23"

    def test_past_buffer(self):
        """Test no session starts within 30 minutes of now."""
        goal = Goal(description="Call", frequency="daily")
        result = plan_schedule(goal, [], NOW, TZ)

        for option in result.time_options:
            for event in option.events:
                assert event.start > NOW + timedelta(minutes=30)

    def test_no_overlap_with_busy_or_each_other(self):
        """Test sessions avoid busy time and never overlap one another."""
        intervals = [
            busy(TODAY + timedelta(days=i), "06:30", "09:15") for i in range(10)
        ] + [busy(TODAY + timedelta(days=i), "13:00", "16:00") for i in range(10)]
        goal = Goal(description="Practice", frequency="daily", session_duration=1.5, target_amount=9, target_unit="hours",
                    max_sessions_per_day=2)
        result = plan_schedule(goal, intervals, NOW, TZ)

        assert not result.is_empty
        for option in result.time_options:
            events = option.events
            for i, event in enumerate(events):
                for interval in intervals:
                    assert not do_times_overlap(event.start, event.end, interval.start, interval.end)
                for other in events[i + 1:]:
                    assert not event.overlaps(other)

    def test_spread_evenly_respects_daily_cap(self):
        """Test max_sessions_per_day caps sessions per date."""
        goal = Goal(
            description="Revise",
            target_amount=6,
            target_unit="hours",
            session_duration=1,
            max_sessions_per_day=2,
            time_preferences=frozenset({TimePreference.MORNING}),
        )
        result = plan_schedule(goal, [], NOW, TZ)

        events = result.time_options[0].events
        assert [(e.date, e.start_time) for e in events] == [
            ("2026-10-19", "09:00"), ("2026-10-19", "10:00"),
            ("2026-10-20", "06:00"), ("2026-10-20", "07:00"),
            ("2026-10-21", "06:00"), ("2026-10-21", "07:00"),
        ]

    def test_finish_quickly_fills_days(self):
        """Test finish_quickly takes every free block of a day."""
        goal = Goal(
            description="Revise",
            target_amount=6,
            target_unit="hours",
            session_duration=1,
            distribution_strategy=DistributionStrategy.FINISH_QUICKLY,
            time_preferences=frozenset({TimePreference.MORNING}),
        )
        result = plan_schedule(goal, [], NOW, TZ)

        events = result.time_options[0].events
        assert [(e.date, e.start_time) for e in events] == [
            ("2026-10-19", "09:00"), ("2026-10-19", "10:00"), ("2026-10-19", "11:00"),
            ("2026-10-20", "06:00"), ("2026-10-20", "07:00"), ("2026-10-20", "08:00"),
        ]

    def test_weekend_only(self):
        """Test the weekend preference restricts dates."""
        goal = Goal(description="Hike", frequency="weekly", time_preferences=frozenset({TimePreference.WEEKEND}))
        result = plan_schedule(goal, [], NOW, TZ)

        assert result.time_options
        for option in result.time_options:
            assert all(e.start.weekday() >= 5 for e in option.events)

    def test_past_deadline_gives_one_session(self):
        """Test an expired deadline degrades to one session as soon as possible."""
        goal = Goal(description="Late", frequency="daily", deadline=date(2026, 10, 10))
        result = plan_schedule(goal, [], NOW, TZ)

        assert result.event_count == 1
        assert all(o.total_events == 1 for o in result.time_options)

    def test_idempotent(self, morning_daily_goal):
        """Test identical inputs give identical results."""
        intervals = [busy(date(2026, 10, 20), "06:00", "07:30")]
        first = plan_schedule(morning_daily_goal, intervals, NOW, TZ, diagnostic=True)
        second = plan_schedule(morning_daily_goal, intervals, NOW, TZ, diagnostic=True)

        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_goal_not_modified(self, morning_daily_goal):
        """Test the goal comes back untouched."""
        before = Goal(**morning_daily_goal.__dict__)
        plan_schedule(morning_daily_goal, [], NOW, TZ)
        assert morning_daily_goal == before


class TestDiagnostics:
    """Tests for diagnostic mode."""

    def test_complete_schedule(self, morning_daily_goal):
        """Test a complete schedule reports no shortfall."""
        result = plan_schedule(morning_daily_goal, [], NOW, TZ, diagnostic=True)
        diagnostics = result.diagnostics

        assert diagnostics.sessions_needed == 5
        assert diagnostics.sessions_found == 5
        assert not diagnostics.incomplete
        assert diagnostics.alternatives == ()

    def test_fully_booked_preferred_part(self, morning_daily_goal):
        """Test a fully booked morning gives incomplete with other-part alternatives."""
        intervals = [busy(TODAY + timedelta(days=i), "06:00", "12:00") for i in range(28)]
        result = plan_schedule(morning_daily_goal, intervals, NOW, TZ, diagnostic=True)
        diagnostics = result.diagnostics

        assert result.is_empty
        assert diagnostics.incomplete
        assert diagnostics.sessions_found == 0
        assert diagnostics.missing_sessions == 5
        assert len(diagnostics.alternatives) == 15
        assert all(a.day_part != DayPart.MORNING for a in diagnostics.alternatives)
        assert all(a.date <= "2026-10-23" for a in diagnostics.alternatives)

    def test_partial_schedule_alternatives(self, morning_daily_goal):
        """Test alternatives are capped and never overlap proposed sessions."""
        intervals = [busy(date(2026, 10, 21 + i), "06:00", "22:00") for i in range(3)]
        result = plan_schedule(morning_daily_goal, intervals, NOW, TZ, diagnostic=True)
        diagnostics = result.diagnostics
        primary = result.time_options[0].events

        assert len(primary) == 2
        assert diagnostics.sessions_found == 2
        assert diagnostics.incomplete == (diagnostics.sessions_found < diagnostics.sessions_needed)
        assert len(diagnostics.alternatives) == 9
        for alt in diagnostics.alternatives:
            assert not any(alt.overlaps(e) for e in primary)

    def test_needed_counts_target_units(self):
        """Test a page target with hour-long sessions needs one session per page."""
        goal = Goal(description="Read", target_amount=100, target_unit="pages", session_duration=1)
        diagnostics = plan_schedule(goal, [], NOW, TZ, diagnostic=True).diagnostics

        assert diagnostics.sessions_needed == 100
        assert diagnostics.session_minutes == 60
        assert diagnostics.incomplete

    def test_to_dict_merges_diagnostics(self, morning_daily_goal):
        """Test the serialised result carries diagnostic keys."""
        data = plan_schedule(morning_daily_goal, [], NOW, TZ, diagnostic=True).to_dict()

        assert data["incomplete"] is False
        assert data["sessionsNeeded"] == 5
        assert data["timeOptions"][0]["dayPart"] == "morning"


class TestAlternativeSlots:
    """Tests for find_alternative_slots."""

    def test_three_per_day_part(self):
        """Test at most three blocks per date and day-part."""
        alternatives = find_alternative_slots([], NOW, TZ, 60, date(2026, 10, 20), max_alternatives=100)
        tuesday = [a for a in alternatives if a.date == "2026-10-20"]

        assert len(tuesday) == 9
        for part in DayPart:
            assert len([a for a in tuesday if a.day_part == part]) == 3

    def test_truncated_to_max(self):
        """Test the result never exceeds max_alternatives."""
        alternatives = find_alternative_slots([], NOW, TZ, 30, None, max_alternatives=4)
        assert len(alternatives) == 4

# tests/test_streaks.py

"""
Tests for streak transitions, milestones and multipliers.
"""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from models.progression import StreakRecord
from core.errors import BackdatedActivityError


def make_record(today, current, longest=None, days_ago=1, rewards=None):
    return StreakRecord(
        user_id="u-1",
        current_streak=current,
        longest_streak=current if longest is None else longest,
        last_activity_date=today - timedelta(days=days_ago),
        streak_rewards=rewards or [],
    )


def test_first_activity_starts_streak(streak_engine, today):
    update = streak_engine.start_streak("u-1", today)
    assert update.changed
    assert update.record.current_streak == 1
    assert update.record.longest_streak == 1
    assert update.record.last_activity_date == today
    assert update.record.streak_rewards == []


def test_same_day_is_idempotent(streak_engine, today):
    record = make_record(today, current=4, longest=9)
    first = streak_engine.record_activity(record, today).record
    second = streak_engine.record_activity(first, today)

    assert not second.changed
    assert (second.record.current_streak, second.record.longest_streak, second.record.last_activity_date) == (
        first.current_streak,
        first.longest_streak,
        first.last_activity_date,
    )
    assert first.current_streak == 5


def test_consecutive_day_continues_streak(streak_engine, today):
    update = streak_engine.record_activity(make_record(today, current=5, longest=5), today)
    assert update.record.current_streak == 6
    assert update.record.longest_streak == 6
    assert update.record.last_activity_date == today
    assert not update.streak_broken


def test_continuation_keeps_higher_longest(streak_engine, today):
    update = streak_engine.record_activity(make_record(today, current=5, longest=20), today)
    assert update.record.current_streak == 6
    assert update.record.longest_streak == 20


def test_missed_day_resets_streak(streak_engine, today):
    update = streak_engine.record_activity(make_record(today, current=10, longest=10, days_ago=3), today)
    assert update.record.current_streak == 1
    assert update.record.longest_streak == 10
    assert update.streak_broken


def test_backdated_activity_is_rejected(streak_engine, today):
    record = make_record(today, current=4, days_ago=-1)
    with pytest.raises(BackdatedActivityError):
        streak_engine.record_activity(record, today)
    assert record.current_streak == 4


def test_input_record_is_not_mutated(streak_engine, today):
    record = make_record(today, current=6, rewards=[3])
    streak_engine.record_activity(record, today)
    assert record.current_streak == 6
    assert record.streak_rewards == [3]


def test_milestone_granted_once(streak_engine, today):
    update = streak_engine.record_activity(make_record(today, current=6, rewards=[3]), today)
    assert update.milestone_reached == 7
    assert update.record.streak_rewards == [3, 7]

    # Break the streak, then climb back to 7.
    record = update.record
    day = today + timedelta(days=5)
    record = streak_engine.record_activity(record, day).record
    assert record.current_streak == 1
    for _ in range(6):
        day += timedelta(days=1)
        result = streak_engine.record_activity(record, day)
        record = result.record

    assert record.current_streak == 7
    assert result.milestone_reached is None
    assert record.streak_rewards == [3, 7]
    assert record.longest_streak == 7


def test_non_milestone_day_grants_nothing(streak_engine, today):
    update = streak_engine.record_activity(make_record(today, current=3, rewards=[3]), today)
    assert update.milestone_reached is None
    assert update.record.streak_rewards == [3]


def test_bonus_multiplier_steps(streak_engine):
    streaks = [0, 2, 3, 6, 7, 13, 14, 29, 30, 31]
    multipliers = [streak_engine.bonus_multiplier(s) for s in streaks]
    assert multipliers == [1.0, 1.0, 1.1, 1.1, 1.25, 1.25, 1.5, 1.5, 2.0, 2.0]
    assert multipliers == sorted(multipliers)


@pytest.mark.parametrize(
    "streak,expected_next,expected_days",
    [(0, 3, 3), (3, 7, 4), (13, 14, 1), (29, 30, 1), (99, 100, 1), (100, None, None), (250, None, None)],
)
def test_next_milestone(streak_engine, streak, expected_next, expected_days):
    assert streak_engine.next_milestone(streak) == expected_next
    assert streak_engine.days_until_next_milestone(streak) == expected_days


@pytest.mark.parametrize(
    "streak,expected",
    [
        (0, "Start your cleanup streak today!"),
        (1, "Great start! Keep it going tomorrow!"),
        (4, "4 days strong! Keep the streak alive!"),
        (12, "Amazing 12-day streak! You're on fire!"),
        (45, "Incredible 45-day streak! You're a cleanup legend!"),
    ],
)
def test_status_message(streak_engine, streak, expected):
    assert streak_engine.status_message(streak) == expected


def test_summary_without_record(streak_engine):
    summary = streak_engine.summarize(None)
    assert summary.current_streak == 0
    assert summary.bonus_multiplier == 1.0
    assert summary.next_milestone == 3
    assert summary.last_activity_date is None


def test_summary_with_record(streak_engine, today):
    summary = streak_engine.summarize(make_record(today, current=14, longest=20, rewards=[3, 7, 14]))
    assert summary.bonus_multiplier == 1.5
    assert summary.next_milestone == 30
    assert summary.days_until_next_milestone == 16
    assert summary.streak_rewards == [3, 7, 14]


def test_record_rejects_longest_below_current(today):
    with pytest.raises(ValidationError):
        StreakRecord(user_id="u-1", current_streak=5, longest_streak=2, last_activity_date=today)

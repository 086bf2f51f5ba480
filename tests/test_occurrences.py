from datetime import date, datetime, timedelta

import pytest

from care_reminders.models import ReminderTimeOfDay
from care_reminders.occurrences import (
    compute_future_occurrences,
    compute_future_reminder_times,
    next_reminder_time,
    to_instant,
)

from conftest import NOW, daily, make_task, monthly, weekly

TODAY = NOW.date()
TOMORROW = TODAY + timedelta(days=1)


def test_to_instant_zeroes_seconds():
    instant = to_instant(date(2026, 2, 18), ReminderTimeOfDay(14, 30))
    assert instant == datetime(2026, 2, 18, 14, 30, 0, 0)


def test_past_one_shot_yields_nothing():
    task = make_task(created_at=NOW - timedelta(days=1))
    assert compute_future_occurrences(task, 2, 10, NOW) == []


def test_future_one_shot_yields_exactly_its_date():
    task = make_task(created_at=NOW + timedelta(days=5))
    assert compute_future_occurrences(task, 1, 1, NOW) == [TODAY + timedelta(days=5)]
    assert compute_future_occurrences(task, 2, 10, NOW) == [TODAY + timedelta(days=5)]


def test_todays_occurrence_dropped_once_its_time_passed():
    task = make_task(hour=6, recurrence=daily(1))
    result = compute_future_occurrences(task, 1, 5, NOW)
    assert result[0] == TOMORROW


def test_todays_occurrence_kept_while_still_ahead():
    task = make_task(hour=18, recurrence=daily(1))
    result = compute_future_occurrences(task, 1, 5, NOW)
    assert result[0] == TODAY


def test_reminder_exactly_now_is_not_in_the_future():
    task = make_task(hour=12, minute=0, recurrence=daily(1))
    assert compute_future_occurrences(task, 1, 1, NOW) == [TOMORROW]


@pytest.mark.parametrize("max_count", [0, 1, 3, 50])
def test_result_never_exceeds_max_count(max_count):
    task = make_task(recurrence=daily(1))
    assert len(compute_future_occurrences(task, 2, max_count, NOW)) <= max_count


def test_daily_window_stops_at_horizon():
    task = make_task(hour=10, recurrence=daily(1))
    result = compute_future_occurrences(task, 1, 100, NOW)

    assert result[0] == TOMORROW
    assert result[-1] == date(2026, 3, 18)
    assert len(result) == 28


def test_every_three_days_steps_by_interval():
    task = make_task(hour=18, recurrence=daily(3), created_at=NOW - timedelta(days=3))
    assert compute_future_occurrences(task, 1, 3, NOW) == [
        TODAY,
        TODAY + timedelta(days=3),
        TODAY + timedelta(days=6),
    ]


def test_weekly_multiple_days_are_all_visited():
    task = make_task(hour=9, recurrence=weekly([0, 2, 4]), created_at=datetime(2026, 2, 2, 9, 0))
    now = NOW.replace(hour=8)
    assert compute_future_occurrences(task, 1, 4, now) == [
        date(2026, 2, 18),
        date(2026, 2, 20),
        date(2026, 2, 23),
        date(2026, 2, 25),
    ]


def test_monthly_clamped_occurrences_across_short_months():
    task = make_task(hour=9, recurrence=monthly([31]), created_at=datetime(2026, 1, 31, 9, 0))
    now = datetime(2026, 1, 31, 12, 0)
    assert compute_future_occurrences(task, 3, 10, now) == [
        date(2026, 2, 28),
        date(2026, 3, 31),
        date(2026, 4, 30),
    ]


@pytest.mark.parametrize(
    "rule",
    [daily(1), daily(5), weekly([1, 3, 6]), weekly([2], interval=3), monthly([1, 15, 31]), monthly([30], interval=2)],
)
def test_occurrences_strictly_ascending_and_in_future(rule):
    task = make_task(hour=10, recurrence=rule, created_at=datetime(2025, 12, 1, 10, 0))
    result = compute_future_occurrences(task, 3, 20, NOW)

    assert result
    assert all(a < b for a, b in zip(result, result[1:]))
    assert all(to_instant(d, task.reminder_time) > NOW for d in result)


def test_empty_weekly_rule_yields_nothing():
    task = make_task(recurrence=weekly([]))
    assert compute_future_occurrences(task, 1, 5, NOW) == []


def test_reminder_times_carry_time_of_day():
    task = make_task(hour=14, minute=30, recurrence=daily(1))
    dates = compute_future_occurrences(task, 1, 3, NOW)
    times = compute_future_reminder_times(task, 1, 3, NOW)

    assert len(times) == len(dates) == 3
    for t in times:
        assert (t.hour, t.minute, t.second, t.microsecond) == (14, 30, 0, 0)


def test_next_reminder_time_none_without_occurrence():
    task = make_task(created_at=NOW - timedelta(days=1))
    assert next_reminder_time(task, NOW) is None


def test_next_reminder_time_for_future_one_shot():
    task = make_task(hour=9, created_at=NOW + timedelta(days=3))
    assert next_reminder_time(task, NOW) == datetime(2026, 2, 21, 9, 0)


def test_next_reminder_time_none_when_todays_time_passed():
    task = make_task(hour=8, recurrence=daily(1))
    assert next_reminder_time(task, NOW) is None


def test_every_other_week_follows_anchor_weeks():
    # anchored on a Sunday: Feb 15..21 and Mar 1..7 are on, Feb 22..28 is off
    task = make_task(hour=9, recurrence=weekly([0, 3], interval=2), created_at=datetime(2026, 2, 15, 9, 0))
    assert compute_future_occurrences(task, 1, 3, NOW) == [
        date(2026, 2, 19),
        date(2026, 3, 2),
        date(2026, 3, 5),
    ]

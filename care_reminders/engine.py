from __future__ import annotations

from datetime import date, datetime, time
from typing import List, Optional, Set

from .models import RecurrenceRule, RecurrenceUnit, ReminderTimeOfDay, Task
from .periods import (
    add_days,
    add_months,
    days_between,
    days_in_month,
    is_same_day,
    months_between,
    now_local,
    weeks_between,
)


def compute_next_occurrence(task: Task, now: Optional[datetime] = None) -> Optional[date]:
    """
    Single source of truth for "when does this task fire next":
    - today, if today is an occurrence day (whatever the time of day)
    - the next occurrence day otherwise
    - None when the task never fires again or its rule cannot match
    """
    today = (now or now_local()).date()
    anchor = task.created_at.date()

    if task.recurrence is None:
        # One-shot: fires on its anchor day only.
        if is_same_day(anchor, today):
            return today
        if anchor > today:
            return anchor
        return None

    return resolve_next(task.recurrence, anchor, today)


def resolve_next(rule: RecurrenceRule, anchor: date, today: date) -> Optional[date]:
    if rule.interval < 1:
        return None

    # A future anchor is the first cycle; resolve from there.
    if anchor > today:
        today = anchor

    if rule.unit == RecurrenceUnit.DAY:
        return _next_daily(rule.interval, anchor, today)
    if rule.unit == RecurrenceUnit.WEEK:
        return _next_weekly(rule.interval, _valid_days(rule.days_of_week, 0, 6), anchor, today)
    if rule.unit == RecurrenceUnit.MONTH:
        return _next_monthly(rule.interval, _valid_days(rule.days_of_month, 1, 31), anchor, today)
    return None


def _next_daily(interval: int, anchor: date, today: date) -> date:
    remainder = days_between(anchor, today) % interval
    if remainder == 0:
        return today
    return add_days(today, interval - remainder)


def _next_weekly(interval: int, days: List[int], anchor: date, today: date) -> Optional[date]:
    if not days:
        return None

    # Cycles are whole weeks elapsed since the anchor; every interval-th one is on.
    # One full off stretch plus one on week covers every case.
    for offset in range(7 * (interval + 1)):
        day = add_days(today, offset)
        if weeks_between(anchor, day) % interval == 0 and day.weekday() in days:
            return day
    return None


def _next_monthly(interval: int, days: List[int], anchor: date, today: date) -> Optional[date]:
    if not days:
        return None

    # An on cycle that starts late in a month can miss a selected day,
    # so look across the following one as well.
    limit = add_months(today, 2 * interval + 1)
    day = today
    while day <= limit:
        if months_between(anchor, day) % interval == 0 and day.day in _month_days(days, day):
            return day
        day = add_days(day, 1)
    return None


def _month_days(days: List[int], day: date) -> Set[int]:
    # Days past the end of a short month land on its last day.
    last = days_in_month(day.year, day.month)
    return {min(d, last) for d in days}


def _valid_days(values, low: int, high: int) -> List[int]:
    return sorted({int(v) for v in values if low <= int(v) <= high})


def is_due_on(task: Task, day: date) -> bool:
    """Whether `day` is one of the task's occurrence days."""
    return compute_next_occurrence(task, datetime.combine(day, time(0, 0))) == day


def is_due_today(task: Task, now: Optional[datetime] = None) -> bool:
    return is_due_on(task, (now or now_local()).date())


def is_task_missed(reminder_time: ReminderTimeOfDay, now: datetime) -> bool:
    """Today's reminder time has already passed (minute resolution)."""
    return now.hour * 60 + now.minute > reminder_time.hour * 60 + reminder_time.minute

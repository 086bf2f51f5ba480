from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import List, Optional

from .engine import compute_next_occurrence, resolve_next
from .models import ReminderTimeOfDay, Task
from .periods import add_days, add_months, now_local


def to_instant(day: date, reminder_time: ReminderTimeOfDay) -> datetime:
    """`day` at the reminder's HH:MM:00.000, local wall clock."""
    return datetime.combine(day, time(reminder_time.hour, reminder_time.minute))


def compute_future_occurrences(
    task: Task,
    months_ahead: int,
    max_count: int,
    now: Optional[datetime] = None,
) -> List[date]:
    """
    Occurrence dates whose reminder instant is strictly after `now`, ascending.

    Walks the recurrence forward from the next occurrence until `max_count`
    dates are collected or the cursor passes `months_ahead` months from today.
    A one-shot task yields at most its single occurrence.
    """
    now = now or now_local()
    out: List[date] = []
    if max_count <= 0:
        return out

    cursor = compute_next_occurrence(task, now)
    horizon = add_months(now.date(), months_ahead)
    anchor = task.created_at.date()

    while cursor is not None and cursor <= horizon and len(out) < max_count:
        if to_instant(cursor, task.reminder_time) > now:
            out.append(cursor)

        if task.recurrence is None:
            break
        cursor = resolve_next(task.recurrence, anchor, add_days(cursor, 1))

    return out


def compute_future_reminder_times(
    task: Task,
    months_ahead: int,
    max_count: int,
    now: Optional[datetime] = None,
) -> List[datetime]:
    return [
        to_instant(d, task.reminder_time)
        for d in compute_future_occurrences(task, months_ahead, max_count, now)
    ]


def next_reminder_time(task: Task, now: Optional[datetime] = None) -> Optional[datetime]:
    """Next occurrence at its time of day, None once that instant has passed."""
    now = now or now_local()
    day = compute_next_occurrence(task, now)
    if day is None:
        return None
    instant = to_instant(day, task.reminder_time)
    return None if instant < now else instant


def overdue_instant(reminder: datetime, delay_minutes: int) -> datetime:
    return reminder + timedelta(minutes=delay_minutes)

from datetime import datetime, timedelta

import pytest

from care_reminders.config import reset_settings
from care_reminders.models import RecurrenceRule, RecurrenceUnit, ReminderTimeOfDay, Task


# Wednesday
NOW = datetime(2026, 2, 18, 12, 0)


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    for key in ("REMINDER_SCHEDULE_MONTHS_AHEAD", "REMINDER_MAX_NOTIFICATIONS_PER_TASK"):
        monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


def make_task(
    task_id="t1",
    title="Take medication",
    hour=10,
    minute=0,
    created_at=None,
    recurrence=None,
    completed=False,
):
    return Task(
        id=task_id,
        title=title,
        icon="💊",
        reminder_time=ReminderTimeOfDay(hour, minute),
        created_at=created_at or NOW - timedelta(days=7),
        recurrence=recurrence,
        completed=completed,
    )


def daily(interval=1):
    return RecurrenceRule(interval=interval, unit=RecurrenceUnit.DAY)


def weekly(days, interval=1):
    return RecurrenceRule(interval=interval, unit=RecurrenceUnit.WEEK, days_of_week=tuple(days))


def monthly(days, interval=1):
    return RecurrenceRule(interval=interval, unit=RecurrenceUnit.MONTH, days_of_month=tuple(days))

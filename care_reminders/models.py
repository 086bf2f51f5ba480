from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Tuple
from datetime import datetime, time

from .periods import parse_local_datetime


class RecurrenceUnit(str, Enum):
    DAY = "DAY"
    WEEK = "WEEK"
    MONTH = "MONTH"


@dataclass(frozen=True)
class RecurrenceRule:
    interval: int
    unit: RecurrenceUnit
    # 0=Mon ... 6=Sun
    days_of_week: Tuple[int, ...] = ()
    # 1..31, clamped to the month length when resolved
    days_of_month: Tuple[int, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RecurrenceRule":
        return cls(
            interval=int(data.get("interval", 0)),
            unit=RecurrenceUnit(data["unit"]),
            days_of_week=tuple(int(d) for d in data.get("daysOfWeek") or ()),
            days_of_month=tuple(int(d) for d in data.get("daysOfMonth") or ()),
        )


@dataclass(frozen=True)
class ReminderTimeOfDay:
    hour: int    # 0..23
    minute: int  # 0..59

    def as_time(self) -> time:
        return time(self.hour, self.minute)

    def format(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReminderTimeOfDay":
        return cls(hour=int(data["hour"]), minute=int(data["minute"]))


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    icon: str
    reminder_time: ReminderTimeOfDay
    created_at: datetime  # recurrence anchor, local wall clock

    # None for a one-shot task
    recurrence: Optional[RecurrenceRule] = None

    completed: bool = False
    completed_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Task":
        """Build a task from the camelCase shape served by the task API."""
        recurrence = data.get("recurrence")
        completed_at = data.get("completedAt")
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            icon=data.get("icon", ""),
            reminder_time=ReminderTimeOfDay.from_dict(data["reminderTime"]),
            created_at=parse_local_datetime(data["createdAt"]),
            recurrence=RecurrenceRule.from_dict(recurrence) if recurrence else None,
            completed=bool(data.get("completed", False)),
            completed_at=parse_local_datetime(completed_at) if completed_at else None,
        )


@dataclass(frozen=True)
class ReminderSettings:
    enable_reminder: bool = True
    enable_overdue_reminder: bool = True
    overdue_delay_minutes: int = 30

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReminderSettings":
        return cls(
            enable_reminder=bool(data.get("enableReminder", True)),
            enable_overdue_reminder=bool(data.get("enableOverdueReminder", True)),
            overdue_delay_minutes=max(0, int(data.get("overdueDelayMinutes", 30))),
        )

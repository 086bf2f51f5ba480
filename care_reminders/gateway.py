from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol

from .models import Task


class NotificationCategory(str, Enum):
    REMINDER = "reminder"
    OVERDUE = "overdue"


# (title, body template) per category
CONTENT = {
    NotificationCategory.REMINDER: ("Time for your task", "Let's do '{title}' now!"),
    NotificationCategory.OVERDUE: ("Task Overdue", "'{title}' is still waiting!"),
}


@dataclass(frozen=True)
class NotificationPayload:
    title: str
    body: str
    category: NotificationCategory
    correlation_id: str
    task_id: str


@dataclass(frozen=True)
class ScheduledNotification:
    schedule_id: str
    payload: NotificationPayload
    trigger: datetime


def correlation_id(category: NotificationCategory, task_id: str, trigger: datetime) -> str:
    return f"{category.value}_{task_id}_{int(trigger.timestamp())}"


def build_payload(task: Task, category: NotificationCategory, trigger: datetime) -> NotificationPayload:
    title, body = CONTENT[category]
    return NotificationPayload(
        title=title,
        body=body.format(title=task.title),
        category=category,
        correlation_id=correlation_id(category, task.id, trigger),
        task_id=task.id,
    )


class NotificationGateway(Protocol):
    """Platform delayed-notification capability. Failures are raised, not returned."""

    async def cancel_all(self) -> None: ...

    async def schedule(self, payload: NotificationPayload, trigger: datetime) -> str: ...

from __future__ import annotations
import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from .config import get_settings
from .gateway import NotificationCategory, NotificationGateway, build_payload
from .log import get_logger
from .models import ReminderSettings, Task
from .occurrences import compute_future_reminder_times, overdue_instant
from .periods import now_local

logger = get_logger(__name__)


class ScheduleRefreshError(RuntimeError):
    """The gateway could not clear old notifications; nothing was scheduled."""


@dataclass(frozen=True)
class ScheduleRequest:
    task: Task
    category: NotificationCategory
    trigger: datetime


@dataclass
class ScheduleReport:
    scheduled: List[str] = field(default_factory=list)  # schedule ids
    failed: List[ScheduleRequest] = field(default_factory=list)

    @property
    def settled(self) -> int:
        return len(self.scheduled) + len(self.failed)


class ReminderScheduler:
    """
    Rebuilds the whole notification schedule on every pass: cancel everything,
    then schedule primary and overdue reminders for each task's upcoming
    occurrences. Callers serialize passes; nothing is kept between them.
    """

    def __init__(
        self,
        gateway: NotificationGateway,
        months_ahead: Optional[int] = None,
        max_per_task: Optional[int] = None,
    ):
        settings = get_settings()
        self.gateway = gateway
        self.months_ahead = settings.schedule_months_ahead if months_ahead is None else months_ahead
        self.max_per_task = settings.max_notifications_per_task if max_per_task is None else max_per_task

    async def refresh_schedule(
        self,
        tasks: Iterable[Task],
        reminder_settings: ReminderSettings,
        now: Optional[datetime] = None,
    ) -> ScheduleReport:
        now = now or now_local()

        try:
            await self.gateway.cancel_all()
        except Exception as exc:
            logger.error("reminder_cancel_all_failed", error=repr(exc))
            raise ScheduleRefreshError("could not cancel scheduled notifications") from exc

        requests = self.plan(tasks, reminder_settings, now)
        results = await asyncio.gather(
            *(self._schedule(req) for req in requests),
            return_exceptions=True,
        )

        report = ScheduleReport()
        for req, result in zip(requests, results):
            if isinstance(result, Exception):
                report.failed.append(req)
                logger.warning(
                    "reminder_schedule_failed",
                    task_id=req.task.id,
                    category=req.category.value,
                    trigger=req.trigger.isoformat(),
                    error=repr(result),
                )
            elif isinstance(result, BaseException):
                raise result
            else:
                report.scheduled.append(result)

        logger.info(
            "reminder_schedule_refreshed",
            tasks=len({req.task.id for req in requests}),
            scheduled=len(report.scheduled),
            failed=len(report.failed),
        )
        return report

    def plan(
        self,
        tasks: Iterable[Task],
        reminder_settings: ReminderSettings,
        now: datetime,
    ) -> List[ScheduleRequest]:
        requests: List[ScheduleRequest] = []
        for task in tasks:
            # completed tasks need no reminders
            if task.completed:
                continue

            for reminder in compute_future_reminder_times(task, self.months_ahead, self.max_per_task, now):
                if reminder_settings.enable_reminder:
                    requests.append(ScheduleRequest(task, NotificationCategory.REMINDER, reminder))
                if reminder_settings.enable_overdue_reminder:
                    overdue = overdue_instant(reminder, reminder_settings.overdue_delay_minutes)
                    requests.append(ScheduleRequest(task, NotificationCategory.OVERDUE, overdue))
        return requests

    async def _schedule(self, req: ScheduleRequest) -> str:
        payload = build_payload(req.task, req.category, req.trigger)
        return await self.gateway.schedule(payload, req.trigger)


def log_scheduled(gateway) -> None:
    """Debug-log what a listing-capable gateway still has pending."""
    list_scheduled = getattr(gateway, "list_scheduled", None)
    if list_scheduled is None:
        return
    pending = list_scheduled()
    logger.debug("reminder_pending_count", count=len(pending))
    for n in pending:
        logger.debug(
            "reminder_pending",
            schedule_id=n.schedule_id,
            category=n.payload.category.value,
            task_id=n.payload.task_id,
            trigger=n.trigger.isoformat(),
            title=n.payload.title,
            body=n.payload.body,
        )

from __future__ import annotations
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple
from uuid import uuid4

from PySide6.QtCore import QObject, QTimer, Signal
from PySide6.QtWidgets import QSystemTrayIcon

from .gateway import NotificationCategory, NotificationPayload, ScheduledNotification
from .periods import now_local

# QTimer intervals are signed 32-bit milliseconds (~24.8 days).
MAX_TIMER_MS = 2**31 - 1


class TrayNotificationGateway(QObject):
    """Delayed notifications on the Qt event loop, one QTimer each."""

    notification_fired = Signal(object)  # ScheduledNotification

    def __init__(self, clock: Callable[[], datetime] = now_local, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.clock = clock
        self._pending: Dict[str, Tuple[ScheduledNotification, QTimer]] = {}

    async def cancel_all(self) -> None:
        for _, timer in self._pending.values():
            timer.stop()
            timer.deleteLater()
        self._pending.clear()

    async def schedule(self, payload: NotificationPayload, trigger: datetime) -> str:
        delay = self._delay_ms(trigger)
        if delay <= 0:
            raise ValueError(f"trigger {trigger.isoformat()} is not in the future")

        schedule_id = uuid4().hex
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.timeout.connect(lambda sid=schedule_id: self._on_timeout(sid))
        timer.start(min(delay, MAX_TIMER_MS))

        self._pending[schedule_id] = (ScheduledNotification(schedule_id, payload, trigger), timer)
        return schedule_id

    def list_scheduled(self) -> List[ScheduledNotification]:
        return sorted((item for item, _ in self._pending.values()), key=lambda n: n.trigger)

    def _on_timeout(self, schedule_id: str) -> None:
        entry = self._pending.get(schedule_id)
        if entry is None:
            return
        item, timer = entry

        # long delays are armed in chunks
        remaining = self._delay_ms(item.trigger)
        if remaining > 0:
            timer.start(min(remaining, MAX_TIMER_MS))
            return

        del self._pending[schedule_id]
        timer.deleteLater()
        self.notification_fired.emit(item)

    def _delay_ms(self, trigger: datetime) -> int:
        return int((trigger - self.clock()).total_seconds() * 1000)


class Notifier:
    def __init__(self, tray: QSystemTrayIcon):
        self.tray = tray

    def remind(self, notification: ScheduledNotification) -> None:
        icon = QSystemTrayIcon.MessageIcon.Information
        if notification.payload.category == NotificationCategory.OVERDUE:
            icon = QSystemTrayIcon.MessageIcon.Warning
        self.tray.showMessage(notification.payload.title, notification.payload.body, icon, 10_000)

from __future__ import annotations
import argparse
import asyncio
import json
import signal
import sys
from pathlib import Path
from typing import List, Optional

from PySide6.QtGui import QAction
from PySide6.QtWidgets import QApplication, QMenu, QSystemTrayIcon
from PySide6.QtCore import QTimer

from .config import get_settings
from .log import configure_logging, get_logger
from .models import ReminderSettings, Task
from .notifications import Notifier, TrayNotificationGateway
from .resources import tray_icon
from .scheduler import ReminderScheduler, ScheduleRefreshError, log_scheduled

logger = get_logger(__name__)


def load_tasks(path: Path) -> List[Task]:
    """Tasks in the task API's JSON shape: a list, or {"tasks": [...]}."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    items = raw.get("tasks", []) if isinstance(raw, dict) else raw

    tasks: List[Task] = []
    for item in items:
        try:
            tasks.append(Task.from_dict(item))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("task_skipped", task_id=item.get("id") if isinstance(item, dict) else None, error=repr(exc))
    return tasks


def load_reminder_settings(path: Optional[Path]) -> ReminderSettings:
    if path is None:
        return ReminderSettings(overdue_delay_minutes=get_settings().default_overdue_minutes)
    return ReminderSettings.from_dict(json.loads(path.read_text(encoding="utf-8")))


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="care-reminders", description="Schedule task reminders as tray notifications.")
    p.add_argument("--tasks", type=Path, required=True, help="JSON file with the task list")
    p.add_argument("--settings", type=Path, default=None, help="JSON file with reminder settings")
    return p.parse_args(argv)


def run_pass(scheduler: ReminderScheduler, tasks_path: Path, reminder_settings: ReminderSettings) -> None:
    try:
        tasks = load_tasks(tasks_path)
    except (OSError, json.JSONDecodeError):
        # the file is read again on the next refresh tick
        logger.exception("tasks_unreadable", path=str(tasks_path))
        return

    try:
        asyncio.run(scheduler.refresh_schedule(tasks, reminder_settings))
    except ScheduleRefreshError:
        # retried on the next refresh tick
        logger.exception("reminder_pass_skipped")
        return
    log_scheduled(scheduler.gateway)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging()
    settings = get_settings()
    reminder_settings = load_reminder_settings(args.settings)

    app = QApplication(sys.argv[:1])
    app.setQuitOnLastWindowClosed(False)

    # Qt's event loop eats SIGINT unless we pump it. This makes Ctrl-C behave.
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    _sig_timer = QTimer()
    _sig_timer.start(250)
    _sig_timer.timeout.connect(lambda: None)

    tray = QSystemTrayIcon()
    tray.setIcon(tray_icon())
    tray.setToolTip("Care Reminders")

    notifier = Notifier(tray)
    gateway = TrayNotificationGateway()
    gateway.notification_fired.connect(notifier.remind)
    scheduler = ReminderScheduler(gateway)

    def refresh() -> None:
        run_pass(scheduler, args.tasks, reminder_settings)

    menu = QMenu()

    act_refresh = QAction("Refresh reminders")
    act_refresh.triggered.connect(refresh)
    menu.addAction(act_refresh)

    menu.addSeparator()

    def quit_cleanly():
        # Ensure tray icon disappears immediately; avoids some Qt shutdown warnings.
        tray.hide()
        app.quit()

    act_quit = QAction("Quit")
    act_quit.triggered.connect(quit_cleanly)
    menu.addAction(act_quit)

    tray.setContextMenu(menu)

    # Each pass only keeps a few occurrences per task, so rebuild periodically.
    refresh_timer = QTimer()
    refresh_timer.setInterval(settings.refresh_interval_minutes * 60_000)
    refresh_timer.timeout.connect(refresh)
    refresh_timer.start()

    refresh()
    tray.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())

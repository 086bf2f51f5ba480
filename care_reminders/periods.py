from __future__ import annotations
import calendar
from datetime import datetime, timedelta, date, tzinfo


def local_tz() -> tzinfo:
    return datetime.now().astimezone().tzinfo  # type: ignore


def now_local() -> datetime:
    """Current local wall-clock time, naive."""
    return datetime.now(local_tz()).replace(tzinfo=None)


def to_local(dt: datetime) -> datetime:
    """Aware datetimes are converted to naive local wall clock; naive ones are already local."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(local_tz()).replace(tzinfo=None)


def parse_local_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return to_local(value)
    s = str(value).strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    return to_local(datetime.fromisoformat(s))


def is_same_day(a: datetime | date, b: datetime | date) -> bool:
    return _as_date(a) == _as_date(b)


def days_between(start: date, end: date) -> int:
    """Whole days from start to end, negative when end is earlier."""
    return (end - start).days


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(d: date, months: int) -> date:
    """Same day-of-month `months` later, clamped to the last day of a shorter month."""
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(d.day, days_in_month(year, month)))


def weeks_between(start: date, end: date) -> int:
    """Whole 7-day weeks elapsed from start to end."""
    return days_between(start, end) // 7


def months_between(start: date, end: date) -> int:
    """
    Whole months elapsed from start to end (end not before start).
    A month is complete on the same day-of-month, or on the last day of a
    shorter month: Jan 31 -> Feb 28 is one month, Jan 31 -> Feb 27 is none.
    """
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if months > 0 and add_months(start, months) > end:
        months -= 1
    return months


def _as_date(value: datetime | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value

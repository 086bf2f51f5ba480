"""
Task form validation.

The form layer hands the engine recurrence rules and reminder times that
passed these models. Broken input is repaired in two stages: missing fields
get defaults, an invalid recurrence is replaced by the daily default, and if
the form is still invalid it is discarded for a fully default one.
"""

from datetime import datetime
from typing import Annotated, Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .log import get_logger
from .models import RecurrenceRule, RecurrenceUnit, ReminderTimeOfDay
from .periods import now_local

logger = get_logger(__name__)

DEFAULT_TITLE = "(no title)"
DEFAULT_ICON = "✅"
DEFAULT_RECURRENCE = {"interval": 1, "unit": RecurrenceUnit.DAY.value}

DayOfWeek = Annotated[int, Field(ge=0, le=6)]
DayOfMonth = Annotated[int, Field(ge=1, le=31)]


class ReminderTimeModel(BaseModel):
    hour: int = Field(ge=0, le=23)
    minute: int = Field(ge=0, le=59)


class RecurrenceRuleModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    interval: int = Field(ge=1)
    unit: RecurrenceUnit
    days_of_week: Optional[List[DayOfWeek]] = Field(default=None, alias="daysOfWeek")
    days_of_month: Optional[List[DayOfMonth]] = Field(default=None, alias="daysOfMonth")

    @model_validator(mode="after")
    def check_day_sets(self) -> "RecurrenceRuleModel":
        if self.unit == RecurrenceUnit.WEEK and not self.days_of_week:
            raise ValueError("Weekly recurrence must specify daysOfWeek")
        if self.unit == RecurrenceUnit.MONTH and not self.days_of_month:
            raise ValueError("Monthly recurrence must specify daysOfMonth")
        return self


class TaskFormData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    icon: str = Field(min_length=1)
    recurrence: Optional[RecurrenceRuleModel] = None  # None means one-shot
    reminder_time: ReminderTimeModel = Field(alias="reminderTime")

    def to_recurrence_rule(self) -> Optional[RecurrenceRule]:
        if self.recurrence is None:
            return None
        return RecurrenceRule(
            interval=self.recurrence.interval,
            unit=self.recurrence.unit,
            days_of_week=tuple(sorted(set(self.recurrence.days_of_week or ()))),
            days_of_month=tuple(sorted(set(self.recurrence.days_of_month or ()))),
        )

    def to_reminder_time(self) -> ReminderTimeOfDay:
        return ReminderTimeOfDay(hour=self.reminder_time.hour, minute=self.reminder_time.minute)


def default_form_data(now: Optional[datetime] = None) -> TaskFormData:
    now = now or now_local()
    # next full hour
    hour = now.hour if now.minute == 0 else (now.hour + 1) % 24
    return TaskFormData(
        title=DEFAULT_TITLE,
        icon=DEFAULT_ICON,
        recurrence=RecurrenceRuleModel.model_validate(DEFAULT_RECURRENCE),
        reminder_time=ReminderTimeModel(hour=hour, minute=0),
    )


def autofill_task_form_data(data: Mapping[str, Any], now: Optional[datetime] = None) -> TaskFormData:
    defaults = default_form_data(now)
    filled = {
        "title": data.get("title") or defaults.title,
        "icon": data.get("icon") or defaults.icon,
        "recurrence": data.get("recurrence"),
        "reminderTime": data.get("reminderTime") or defaults.reminder_time.model_dump(),
    }

    try:
        return TaskFormData.model_validate(filled)
    except ValidationError as exc:
        if not any(err["loc"][:1] == ("recurrence",) for err in exc.errors()):
            logger.debug("task_form_reset_to_defaults", errors=exc.error_count())
            return defaults

    filled["recurrence"] = DEFAULT_RECURRENCE
    try:
        return TaskFormData.model_validate(filled)
    except ValidationError as exc:
        logger.debug("task_form_reset_to_defaults", errors=exc.error_count())
        return defaults

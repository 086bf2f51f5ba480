"""
Reminder engine settings, loaded from REMINDER_* environment variables.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REMINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # How far ahead each scheduling pass looks, and how many occurrences per task it keeps
    schedule_months_ahead: int = Field(default=1, ge=0)
    max_notifications_per_task: int = Field(default=2, ge=0)

    # The tray app rebuilds the schedule this often
    refresh_interval_minutes: int = Field(default=60, ge=1, le=24 * 60)

    # Used when no reminder settings are supplied
    default_overdue_minutes: int = Field(default=30, ge=0)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = False


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None

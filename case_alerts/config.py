"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "case-alerts"
    debug: bool = False
    log_level: str = "INFO"

    # IANA zone whose midnights define "today" for the office
    calendar_timezone: str = "UTC"
    refresh_interval_seconds: float = 60.0

    # Payment follow-ups
    payment_window_days: int = 2

    # Administrative silence
    default_silence_days: int = 60
    silence_warning_days: int = 7
    silence_urgent_days: int = 3

    # Pending documents
    default_reminder_interval_days: int = 10
    documents_lead_days: int = 2

    # Overdue escalation (documents and standalone reminders)
    overdue_medium_days: int = 3
    overdue_high_days: int = 7

    # Standalone reminders
    standalone_gate_days: int = 3
    standalone_horizon_days: int = 7

    model_config = {"env_prefix": "CASE_ALERTS_"}


settings = Settings()

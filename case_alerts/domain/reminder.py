"""StandaloneReminder — a manually scheduled follow-up.

Standalone reminders are not tied to document or payment state.  They may
reference a client (``client_id``) but carry their own name fields, since
they are often created for people who are not clients yet.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from case_alerts.domain.client import coerce_date


class StandaloneReminder(BaseModel):
    """Point-in-time copy of a reminder record."""

    id: str = Field(..., min_length=1)
    client_id: Optional[str] = Field(None, alias="clientId")
    client_name: str = Field(..., min_length=1, alias="clientName")
    client_surname: str = Field(..., min_length=1, alias="clientSurname")
    phone: Optional[str] = None
    notes: Optional[str] = None
    reminder_type: Optional[str] = Field(
        None, alias="reminderType", description="e.g. REQUERIMIENTO, RECORDATORIO"
    )
    reminder_date: datetime = Field(..., alias="reminderDate")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("reminder_date", "created_at", "updated_at", mode="before")
    @classmethod
    def dates_accept_plain_dates(cls, v: Any) -> Any:
        return coerce_date(v)

    @property
    def display_name(self) -> str:
        return f"{self.client_name} {self.client_surname}".strip()

    @property
    def subject_id(self) -> str:
        """Identifier used in notifications; never collides with client ids."""
        return f"reminder-{self.id}"

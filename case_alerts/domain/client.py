"""ClientSnapshot — the read-only view of a client that the engine consumes.

Field names follow the backend's JSON (snake_case), with the camelCase
spellings the frontend used accepted as aliases (``totalFee``,
``isOptional``, ``uploadedAt`` ...).  Snapshots are frozen: the engine may
read them but never change them.

Dates are kept exactly as received.  A date-only value ("2026-03-01") is a
naive midnight and is read as a wall-clock date in the office calendar; an
offset-bearing timestamp is converted into that calendar before use.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


def coerce_date(value: Any) -> Any:
    """Accept plain ``date`` objects and blank strings for datetime fields."""
    if isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day)
    return value


# ── Payments ─────────────────────────────────────────────────────────────────

class Payment(BaseModel):
    """One entry in a client's payment history."""

    amount: float
    date: Optional[datetime] = None
    method: str = ""
    note: Optional[str] = None

    model_config = {"frozen": True}

    @field_validator("date", mode="before")
    @classmethod
    def date_accepts_plain_dates(cls, v: Any) -> Any:
        return coerce_date(v)


class PaymentInfo(BaseModel):
    """Agreed fee and how much of it has been paid so far."""

    total_fee: float = Field(0.0, alias="totalFee", ge=0.0)
    paid_amount: float = Field(0.0, alias="paidAmount", ge=0.0)
    payments: list[Payment] = Field(default_factory=list)

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def remaining(self) -> float:
        return self.total_fee - self.paid_amount


# ── Documents ────────────────────────────────────────────────────────────────

class RequiredDocument(BaseModel):
    """A document on the client's checklist."""

    code: Optional[str] = None
    name: Optional[str] = None
    submitted: bool = False
    is_optional: bool = Field(False, alias="isOptional")
    uploaded_at: Optional[datetime] = Field(None, alias="uploadedAt")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("submitted", "is_optional", mode="before")
    @classmethod
    def null_flags_are_false(cls, v: Any) -> Any:
        # The backend stores unset checklist flags as null
        return False if v is None else v

    @field_validator("uploaded_at", mode="before")
    @classmethod
    def uploaded_at_accepts_dates(cls, v: Any) -> Any:
        return coerce_date(v)

    @property
    def is_pending(self) -> bool:
        """Required and not yet handed in."""
        return not self.submitted and not self.is_optional


# ── Client ───────────────────────────────────────────────────────────────────

class ClientSnapshot(BaseModel):
    """Point-in-time copy of a client record.

    ``administrative_silence_days`` and ``reminder_interval_days`` are left
    as ``None`` when the record does not carry them; the engine substitutes
    its configured defaults (60 and 10 days).
    """

    id: str = Field(..., min_length=1)
    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    case_type: Optional[str] = Field(None, alias="caseType")
    custom_reminder_date: Optional[datetime] = Field(None, alias="customReminderDate")
    payment: PaymentInfo = Field(default_factory=PaymentInfo)
    submitted_to_immigration: bool = Field(False, alias="submittedToImmigration")
    application_date: Optional[datetime] = Field(None, alias="applicationDate")
    administrative_silence_days: Optional[int] = Field(
        None, alias="administrativeSilenceDays", ge=0
    )
    required_documents: list[RequiredDocument] = Field(
        default_factory=list, alias="requiredDocuments"
    )
    reminder_interval_days: Optional[int] = Field(None, alias="reminderIntervalDays", ge=0)
    created_at: datetime = Field(..., alias="createdAt")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator(
        "custom_reminder_date", "application_date", "created_at", mode="before"
    )
    @classmethod
    def dates_accept_plain_dates(cls, v: Any) -> Any:
        return coerce_date(v)

    @field_validator("submitted_to_immigration", mode="before")
    @classmethod
    def null_submission_is_false(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("payment", mode="before")
    @classmethod
    def null_payment_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("required_documents", mode="before")
    @classmethod
    def null_documents_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def pending_documents(self) -> list[RequiredDocument]:
        return [d for d in self.required_documents if d.is_pending]

    @property
    def submitted_documents(self) -> list[RequiredDocument]:
        return [d for d in self.required_documents if d.submitted]

"""Notification events — the engine's output.

Events are ephemeral: they are recomputed on every evaluation and never
persisted by the engine.  Client events and standalone-reminder events are
distinct models joined in a tagged union on ``subject_type``, so consumers
never have to inspect a fake client to tell them apart.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from case_alerts.domain.enums import NotificationKind, Priority, SubjectType

# (subject_id, kind): how callers track read / dismissed state.
DismissalKey = tuple[str, NotificationKind]


class _NotificationBase(BaseModel):
    subject_id: str = Field(..., description="Client id, or reminder-<id> for standalone reminders")
    kind: NotificationKind
    message: str
    priority: Priority
    days_remaining: Optional[int] = Field(
        None,
        description="Negative = overdue, 0 = due today, positive = days until due",
    )

    model_config = {"frozen": True}

    @property
    def key(self) -> DismissalKey:
        return (self.subject_id, self.kind)


class ClientNotification(_NotificationBase):
    """An event raised by one of the client rules."""

    subject_type: Literal[SubjectType.CLIENT] = SubjectType.CLIENT
    client_id: str
    client_name: str
    case_type: Optional[str] = None


class ReminderNotification(_NotificationBase):
    """An event raised by a standalone reminder."""

    subject_type: Literal[SubjectType.REMINDER] = SubjectType.REMINDER
    reminder_id: str
    client_name: str
    phone: Optional[str] = None
    notes: Optional[str] = None
    reminder_type: Optional[str] = None
    reminder_date: datetime


NotificationEvent = Annotated[
    Union[ClientNotification, ReminderNotification],
    Field(discriminator="subject_type"),
]


class NotificationSummary(BaseModel):
    """Aggregate counts over one evaluation.

    This is an observability object, not a control mechanism.
    """

    total: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    by_kind: dict[NotificationKind, int] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @classmethod
    def from_events(
        cls, events: Iterable[ClientNotification | ReminderNotification]
    ) -> NotificationSummary:
        events = list(events)
        priorities = Counter(e.priority for e in events)
        return cls(
            total=len(events),
            high=priorities[Priority.HIGH],
            medium=priorities[Priority.MEDIUM],
            low=priorities[Priority.LOW],
            by_kind=dict(Counter(e.kind for e in events)),
        )

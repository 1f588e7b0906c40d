"""Request bodies for the notification endpoints.

Client and reminder records are accepted as raw dicts and validated one by
one by the SnapshotAdapter, so a single malformed record is reported back
instead of failing the whole request.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from case_alerts.domain.enums import NotificationKind
from case_alerts.domain.notification import DismissalKey


class DismissalRequest(BaseModel):
    subject_id: str = Field(..., min_length=1)
    kind: NotificationKind

    @property
    def key(self) -> DismissalKey:
        return (self.subject_id, self.kind)


class SnapshotRequest(BaseModel):
    clients: list[dict[str, Any]] = Field(default_factory=list)
    reminders: list[dict[str, Any]] = Field(default_factory=list)


class EvaluateRequest(SnapshotRequest):
    now: Optional[datetime] = Field(None, description="Defaults to the server clock")
    dismissed: list[DismissalRequest] = Field(default_factory=list)

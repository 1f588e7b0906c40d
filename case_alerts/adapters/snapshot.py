"""Snapshot adapter — turns raw backend records into validated snapshots.

Records arrive as JSON dicts in the backend's shape.  Each record is
validated on its own: one malformed client (an unparsable date, a missing
id) is rejected and reported, and the rest of the batch goes through.

Architectural rules:
    1. The adapter must NOT mutate the incoming dicts.
    2. No deadline logic lives here, only validation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from case_alerts.domain.client import ClientSnapshot
from case_alerts.domain.reminder import StandaloneReminder

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)


@dataclass(frozen=True)
class RejectedRecord:
    """A record that could not be turned into a snapshot."""

    record_type: str
    record_id: str | None
    reason: str

    def to_dict(self) -> dict:
        return {
            "record_type": self.record_type,
            "record_id": self.record_id,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class SnapshotBatch:
    """Validated clients and reminders plus whatever was rejected."""

    clients: tuple[ClientSnapshot, ...] = ()
    reminders: tuple[StandaloneReminder, ...] = ()
    rejected: tuple[RejectedRecord, ...] = field(default_factory=tuple)


class AdapterStats:
    """Accepted / rejected counters for observability."""

    __slots__ = ("accepted_count", "rejected_count")

    def __init__(self) -> None:
        self.accepted_count: int = 0
        self.rejected_count: int = 0

    def to_dict(self) -> dict:
        return {
            "accepted_count": self.accepted_count,
            "rejected_count": self.rejected_count,
        }


def _summarize(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


class SnapshotAdapter:
    """Validates raw client and reminder records one by one.

    Usage:
        adapter = SnapshotAdapter()
        batch = adapter.adapt(raw_clients, raw_reminders)
        engine.evaluate(now, batch.clients, batch.reminders)
    """

    def __init__(self) -> None:
        self._stats = AdapterStats()

    def adapt(
        self,
        raw_clients: Iterable[Mapping[str, Any]] = (),
        raw_reminders: Iterable[Mapping[str, Any]] = (),
    ) -> SnapshotBatch:
        rejected: list[RejectedRecord] = []
        clients = self._validate_all(ClientSnapshot, "client", raw_clients, rejected)
        reminders = self._validate_all(StandaloneReminder, "reminder", raw_reminders, rejected)
        return SnapshotBatch(
            clients=tuple(clients),
            reminders=tuple(reminders),
            rejected=tuple(rejected),
        )

    @property
    def stats(self) -> dict:
        return self._stats.to_dict()

    # ── Internals ────────────────────────────────────────────────────────

    def _validate_all(
        self,
        model: type[_M],
        record_type: str,
        records: Iterable[Mapping[str, Any]],
        rejected: list[RejectedRecord],
    ) -> list[_M]:
        valid: list[_M] = []
        for raw in records:
            try:
                valid.append(model.model_validate(raw))
                self._stats.accepted_count += 1
            except ValidationError as exc:
                self._stats.rejected_count += 1
                record_id = raw.get("id") if isinstance(raw, Mapping) else None
                reason = _summarize(exc)
                logger.warning("Rejected %s %s: %s", record_type, record_id, reason)
                rejected.append(
                    RejectedRecord(
                        record_type=record_type,
                        record_id=None if record_id is None else str(record_id),
                        reason=reason,
                    )
                )
        return valid

"""NotificationFeed — keeps the latest evaluation and pushes it to listeners.

Architecture:
    data store  →  PUT /api/snapshot      →  feed stores the SnapshotBatch
                                                  ↓
                                   engine runs (now, snapshot) every cycle
                                                  ↓
    FE          ←  /ws/notifications      ←  broadcast of visible events

The feed owns no deadline logic.  Each refresh fixes one "now", runs the
engine over the whole snapshot, prunes dismissals that no longer apply,
and hides the ones that do.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Callable

from fastapi import WebSocket

from case_alerts.adapters.snapshot import SnapshotBatch
from case_alerts.core.deadline_engine import DeadlineEngine, Notification
from case_alerts.domain.notification import NotificationSummary
from case_alerts.foundation.calendar import utc_now
from case_alerts.store.dismissal_store import DismissalStore

logger = logging.getLogger(__name__)


class NotificationFeed:
    """Latest snapshot, latest result, and the WebSocket clients to tell."""

    def __init__(
        self,
        engine: DeadlineEngine,
        dismissals: DismissalStore,
        refresh_interval_seconds: float = 60.0,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._engine = engine
        self._dismissals = dismissals
        self._refresh_interval = refresh_interval_seconds
        self._clock = clock
        self._snapshot = SnapshotBatch()
        self._events: list[Notification] = []
        self._evaluated_at: datetime | None = None
        self._clients: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    # ── Snapshot + evaluation ────────────────────────────────────────

    async def replace_snapshot(self, batch: SnapshotBatch) -> list[Notification]:
        """Swap in a new snapshot and re-evaluate immediately."""
        async with self._lock:
            self._snapshot = batch
        logger.info(
            "Snapshot replaced: %d client(s), %d reminder(s), %d rejected",
            len(batch.clients),
            len(batch.reminders),
            len(batch.rejected),
        )
        return await self.refresh()

    async def refresh(self) -> list[Notification]:
        """Evaluate the current snapshot, store the result and broadcast it."""
        async with self._lock:
            snapshot = self._snapshot
        now = self._clock()

        events = self._engine.evaluate(now, snapshot.clients, snapshot.reminders)
        await self._dismissals.prune(e.key for e in events)
        hidden = await self._dismissals.snapshot()
        visible = [e for e in events if e.key not in hidden]

        async with self._lock:
            self._events = visible
            self._evaluated_at = now

        await self._broadcast(self.payload(visible, now))
        return visible

    async def current(self) -> tuple[list[Notification], datetime | None]:
        async with self._lock:
            return list(self._events), self._evaluated_at

    async def run_periodic(self) -> None:
        """Re-evaluate forever on the configured cadence.

        A failing cycle is logged and the next one runs as usual; cancel
        the task to stop.
        """
        logger.info("Notification refresh every %.0fs", self._refresh_interval)
        while True:
            try:
                await self.refresh()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.error("Notification refresh failed: %s", exc, exc_info=True)
            await asyncio.sleep(self._refresh_interval)

    @staticmethod
    def payload(events: list[Notification], evaluated_at: datetime | None) -> dict[str, Any]:
        return {
            "type": "notifications",
            "evaluated_at": evaluated_at.isoformat() if evaluated_at else None,
            "summary": NotificationSummary.from_events(events).model_dump(mode="json"),
            "notifications": [e.model_dump(mode="json") for e in events],
        }

    # ── Client management ────────────────────────────────────────────

    async def connect(self, ws: WebSocket) -> None:
        await ws.accept()
        async with self._lock:
            self._clients.add(ws)
            events, evaluated_at = list(self._events), self._evaluated_at
        logger.info("Notification listener connected (%d total)", len(self._clients))
        await ws.send_text(json.dumps(self.payload(events, evaluated_at)))

    async def disconnect(self, ws: WebSocket) -> None:
        async with self._lock:
            self._clients.discard(ws)
        logger.info("Notification listener disconnected (%d remaining)", len(self._clients))

    @property
    def client_count(self) -> int:
        return len(self._clients)

    async def _broadcast(self, payload: dict[str, Any]) -> None:
        """Send payload to all connected listeners, dropping dead ones."""
        async with self._lock:
            clients = set(self._clients)
        if not clients:
            return

        message = json.dumps(payload)
        dead: set[WebSocket] = set()
        for ws in clients:
            try:
                await ws.send_text(message)
            except Exception:
                dead.add(ws)

        if dead:
            async with self._lock:
                self._clients -= dead
            logger.info("Removed %d dead notification listener(s)", len(dead))

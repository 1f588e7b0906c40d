"""REST endpoints for notification evaluation and dismissal.

Paths:
    POST /api/notifications/evaluate   stateless one-shot evaluation
    PUT  /api/snapshot                 replace the feed's snapshot
    GET  /api/notifications            last feed evaluation
    POST /api/notifications/dismiss    hide (subject_id, kind)
    POST /api/notifications/restore    show it again
    GET  /api/notifications/dismissed  current dismissals
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from case_alerts.adapters.snapshot import SnapshotAdapter
from case_alerts.api.schemas import DismissalRequest, EvaluateRequest, SnapshotRequest
from case_alerts.core.deadline_engine import DeadlineEngine, popup_candidates, sort_by_priority
from case_alerts.foundation.calendar import utc_now
from case_alerts.services.notification_feed import NotificationFeed
from case_alerts.store.dismissal_store import DismissalStore

logger = logging.getLogger(__name__)


def create_notifications_router(
    engine: DeadlineEngine,
    adapter: SnapshotAdapter,
    feed: NotificationFeed,
    dismissals: DismissalStore,
) -> APIRouter:
    """Factory that wires the notification endpoints to engine, feed and store."""

    router = APIRouter(prefix="/api", tags=["notifications"])

    @router.post("/notifications/evaluate")
    async def evaluate_snapshot(body: EvaluateRequest) -> dict[str, Any]:
        """Evaluate the posted snapshot without touching the feed."""
        batch = adapter.adapt(body.clients, body.reminders)
        now = body.now or utc_now()
        events = engine.evaluate(
            now,
            batch.clients,
            batch.reminders,
            dismissed=[d.key for d in body.dismissed],
        )
        payload = NotificationFeed.payload(events, now)
        payload["rejected"] = [r.to_dict() for r in batch.rejected]
        return payload

    @router.put("/snapshot")
    async def replace_snapshot(body: SnapshotRequest) -> dict[str, Any]:
        batch = adapter.adapt(body.clients, body.reminders)
        events = await feed.replace_snapshot(batch)
        return {
            "status": "accepted",
            "clients": len(batch.clients),
            "reminders": len(batch.reminders),
            "rejected": [r.to_dict() for r in batch.rejected],
            "notification_count": len(events),
        }

    @router.get("/notifications")
    async def list_notifications(sort: str | None = None) -> dict[str, Any]:
        """Last evaluation.  ``?sort=priority`` orders high → low."""
        events, evaluated_at = await feed.current()
        if sort == "priority":
            events = sort_by_priority(events)
        elif sort is not None:
            raise HTTPException(status_code=400, detail=f"Unknown sort order '{sort}'")
        payload = NotificationFeed.payload(events, evaluated_at)
        payload["popups"] = [e.model_dump(mode="json") for e in popup_candidates(events)]
        return payload

    @router.post("/notifications/dismiss")
    async def dismiss(body: DismissalRequest) -> dict[str, Any]:
        await dismissals.dismiss(body.key)
        await feed.refresh()
        return {"status": "dismissed", "subject_id": body.subject_id, "kind": body.kind.value}

    @router.post("/notifications/restore")
    async def restore(body: DismissalRequest) -> dict[str, Any]:
        if not await dismissals.restore(body.key):
            raise HTTPException(
                status_code=404,
                detail=f"{body.subject_id}/{body.kind.value} is not dismissed",
            )
        await feed.refresh()
        return {"status": "restored", "subject_id": body.subject_id, "kind": body.kind.value}

    @router.get("/notifications/dismissed")
    async def list_dismissed() -> dict[str, Any]:
        keys = await dismissals.snapshot()
        items = sorted(
            ({"subject_id": sid, "kind": kind.value} for sid, kind in keys),
            key=lambda d: (d["subject_id"], d["kind"]),
        )
        return {"dismissed": items, "count": len(items)}

    return router

"""case-alerts — deadline and reminder notifications for case management.

This is the application entry point.  It wires the DeadlineEngine,
SnapshotAdapter, DismissalStore, NotificationFeed and the HTTP/WebSocket
endpoints together.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo

from fastapi import FastAPI

from case_alerts.adapters.snapshot import SnapshotAdapter
from case_alerts.api.notifications import create_notifications_router
from case_alerts.api.ws_notifications import create_notifications_ws_router
from case_alerts.config import Settings, settings
from case_alerts.core.deadline_engine import (
    DeadlineEngine,
    DocumentPolicy,
    PaymentPolicy,
    SilencePolicy,
    StandalonePolicy,
)
from case_alerts.domain.notification import NotificationSummary
from case_alerts.services.notification_feed import NotificationFeed
from case_alerts.store.dismissal_store import DismissalStore

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)


def _calendar_zone(name: str) -> tzinfo:
    return timezone.utc if name.upper() == "UTC" else ZoneInfo(name)


def build_engine(cfg: Settings) -> DeadlineEngine:
    return DeadlineEngine(
        payment=PaymentPolicy(window_days=cfg.payment_window_days),
        silence=SilencePolicy(
            default_days=cfg.default_silence_days,
            warning_days=cfg.silence_warning_days,
            urgent_days=cfg.silence_urgent_days,
        ),
        documents=DocumentPolicy(
            default_interval_days=cfg.default_reminder_interval_days,
            lead_days=cfg.documents_lead_days,
            overdue_medium_days=cfg.overdue_medium_days,
            overdue_high_days=cfg.overdue_high_days,
        ),
        standalone=StandalonePolicy(
            gate_days=cfg.standalone_gate_days,
            horizon_days=cfg.standalone_horizon_days,
            overdue_medium_days=cfg.overdue_medium_days,
            overdue_high_days=cfg.overdue_high_days,
        ),
        calendar_tz=_calendar_zone(cfg.calendar_timezone),
    )


def create_app(cfg: Settings = settings) -> FastAPI:
    engine = build_engine(cfg)
    adapter = SnapshotAdapter()
    dismissals = DismissalStore()
    feed = NotificationFeed(
        engine,
        dismissals,
        refresh_interval_seconds=cfg.refresh_interval_seconds,
    )

    @contextlib.asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        task = asyncio.create_task(feed.run_periodic())
        try:
            yield
        finally:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            logger.info("Notification refresh stopped")

    app = FastAPI(
        title=cfg.app_name,
        description="Deadline and reminder notifications for immigration cases",
        version="0.3.0",
        debug=cfg.debug,
        lifespan=lifespan,
    )

    app.include_router(create_notifications_router(engine, adapter, feed, dismissals))
    app.include_router(create_notifications_ws_router(feed))

    @app.get("/health")
    async def health() -> dict:
        events, evaluated_at = await feed.current()
        return {
            "status": "ok",
            "evaluated_at": evaluated_at.isoformat() if evaluated_at else None,
            "summary": NotificationSummary.from_events(events).model_dump(mode="json"),
            "dismissed": await dismissals.count(),
            "listeners": feed.client_count,
            "adapter": adapter.stats,
        }

    return app


app = create_app()

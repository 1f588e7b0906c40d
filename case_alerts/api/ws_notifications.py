"""Notification WebSocket — pushes every feed evaluation to listeners.

Path: /ws/notifications

Listeners receive the current notifications on connect and again after
every refresh.  Sending "ping" gets "pong" back.
"""

from __future__ import annotations

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from case_alerts.services.notification_feed import NotificationFeed


def create_notifications_ws_router(feed: NotificationFeed) -> APIRouter:
    """Factory that creates the notification WebSocket endpoint."""

    router = APIRouter()

    @router.websocket("/ws/notifications")
    async def notifications_ws(websocket: WebSocket) -> None:
        await feed.connect(websocket)
        try:
            while True:
                data = await websocket.receive_text()
                if data.strip().lower() == "ping":
                    await websocket.send_text("pong")
        except WebSocketDisconnect:
            await feed.disconnect(websocket)

    return router

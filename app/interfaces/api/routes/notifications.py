"""Endpoints and websocket handler for order notifications."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status

from app.application.alerts import AlertRuntime
from app.domain.entities import NotificationRecord
from app.infrastructure.notifications import serialize_notification
from app.interfaces.api.dependencies import get_alert_runtime
from app.interfaces.api.schemas import (
    NotificationActionResponse,
    NotificationCountRead,
    NotificationRead,
    NotificationStatsRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def notification_to_schema(notification: NotificationRecord) -> NotificationRead:
    return NotificationRead(
        id=notification.id or "",
        order_id=notification.order_id,
        message=notification.message,
        notification_type=notification.notification_type,
        priority=notification.priority,
        is_read=notification.is_read,
        read_at=notification.read_at,
        created_at=notification.created_at,
        metadata=notification.metadata or {},
    )


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    unread_only: bool = Query(default=True),
    limit: int | None = Query(default=None, ge=1, le=500),
    runtime: AlertRuntime = Depends(get_alert_runtime),
) -> list[NotificationRead]:
    """Return notifications, newest first."""

    records = runtime.records.list(unread_only=unread_only, limit=limit)
    return [notification_to_schema(record) for record in records]


@router.get("/count", response_model=NotificationCountRead)
def count_unread_notifications(
    runtime: AlertRuntime = Depends(get_alert_runtime),
) -> NotificationCountRead:
    return NotificationCountRead(unread=runtime.records.count_unread())


@router.get("/stats", response_model=NotificationStatsRead)
def notification_stats(
    runtime: AlertRuntime = Depends(get_alert_runtime),
) -> NotificationStatsRead:
    """Return total, unread and per-type counts over every notification."""

    stats = runtime.records.stats()
    return NotificationStatsRead(
        total=stats.total, unread=stats.unread, by_type=stats.by_type
    )


@router.post("/read-all", response_model=NotificationActionResponse)
def mark_all_notifications_read(
    runtime: AlertRuntime = Depends(get_alert_runtime),
) -> NotificationActionResponse:
    return NotificationActionResponse(success=runtime.records.mark_all_read())


@router.post("/test", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_test_notification(
    runtime: AlertRuntime = Depends(get_alert_runtime),
) -> NotificationRead:
    """Create a synthetic new-order notification not tied to any order."""

    record = runtime.router.create_test_notification()
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Test notification was not created",
        )
    return notification_to_schema(record)


@router.post("/{notification_id}/read", response_model=NotificationActionResponse)
def mark_notification_read(
    notification_id: str,
    runtime: AlertRuntime = Depends(get_alert_runtime),
) -> NotificationActionResponse:
    if not runtime.records.mark_read(notification_id):
        exists = runtime.records.exists(notification_id)
        if exists is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Notifications are temporarily unavailable",
            )
        if not exists:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found"
            )
        return NotificationActionResponse(success=False)
    return NotificationActionResponse(success=True)


@router.delete("/{notification_id}", response_model=NotificationActionResponse)
def delete_notification(
    notification_id: str,
    runtime: AlertRuntime = Depends(get_alert_runtime),
) -> NotificationActionResponse:
    return NotificationActionResponse(success=runtime.records.delete(notification_id))


async def _handle_console_message(
    websocket: WebSocket,
    runtime: AlertRuntime,
    console_id: str,
    message: dict[str, Any],
) -> None:
    consoles = runtime.consoles
    message_type = message.get("type")
    if message_type == "ping":
        await websocket.send_json({"type": "pong"})
    elif message_type == "hello":
        consoles.apply_hello(console_id, message)
    elif message_type == "route":
        path = message.get("path")
        if isinstance(path, str):
            consoles.update_route(console_id, path)
    elif message_type == "audio.unlocked":
        consoles.mark_audio_unlocked(console_id)
    elif message_type == "permission":
        permission = message.get("notifications")
        if isinstance(permission, str):
            consoles.set_notification_permission(console_id, permission)
    elif message_type == "stop":
        runtime.orchestrator.stop_ringing()
        await websocket.send_json({"type": "ringing", "data": {"ringing": False}})
    elif message_type == "ack":
        ids = message.get("ids", [])
        if isinstance(ids, list):
            for notification_id in ids:
                if isinstance(notification_id, str):
                    runtime.records.mark_read(notification_id)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint for staff consoles.

    Consoles report their route and device capabilities, receive the unread
    notifications and then the audio and device commands of every alert.
    """

    runtime: AlertRuntime | None = getattr(websocket.app.state, "alert_runtime", None)
    if runtime is None:
        await websocket.close(code=1011)
        return

    console = await runtime.consoles.connect(websocket)
    route = websocket.query_params.get("route")
    if route:
        runtime.consoles.update_route(console.console_id, route)
    try:
        pending = runtime.records.list(unread_only=True)
        await websocket.send_json(
            {
                "type": "init",
                "data": {
                    "consoleId": console.console_id,
                    "notifications": [serialize_notification(record) for record in pending],
                    "ringing": runtime.orchestrator.is_currently_ringing(),
                },
            }
        )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue
            await _handle_console_message(websocket, runtime, console.console_id, message)
    except WebSocketDisconnect:
        logger.debug("Console %s disconnected", console.console_id)
    finally:
        runtime.consoles.disconnect(console.console_id)

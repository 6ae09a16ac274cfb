"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    order_id: str | None = None
    message: str
    notification_type: str
    priority: int
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class NotificationCountRead(BaseModel):
    unread: int


class NotificationStatsRead(BaseModel):
    """Totals for the dashboard badges, with counts per notification type."""

    total: int
    unread: int
    by_type: dict[str, int] = Field(default_factory=dict)


class OrderNotificationCreate(BaseModel):
    """Manual notification raised by staff for an existing order."""

    notification_type: str = Field(..., min_length=1)


class NotificationActionResponse(BaseModel):
    """Outcome of a mark-read or delete operation."""

    success: bool


__all__ = [
    "NotificationActionResponse",
    "NotificationCountRead",
    "NotificationRead",
    "NotificationStatsRead",
    "OrderNotificationCreate",
]

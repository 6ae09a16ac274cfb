"""Domain entity representing a persisted order notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Final

NOTIFICATION_ORDER_CREATED: Final[str] = "order_created"
NOTIFICATION_ORDER_PAID: Final[str] = "order_paid"
NOTIFICATION_ORDER_UPDATED: Final[str] = "order_updated"
NOTIFICATION_ORDER_CANCELLED: Final[str] = "order_cancelled"
NOTIFICATION_PAYMENT_FAILED: Final[str] = "payment_failed"
NOTIFICATION_PAYMENT_COMPLETED: Final[str] = "payment_completed"

NOTIFICATION_TYPES: Final[tuple[str, ...]] = (
    NOTIFICATION_ORDER_CREATED,
    NOTIFICATION_ORDER_PAID,
    NOTIFICATION_ORDER_UPDATED,
    NOTIFICATION_ORDER_CANCELLED,
    NOTIFICATION_PAYMENT_FAILED,
    NOTIFICATION_PAYMENT_COMPLETED,
)

MIN_PRIORITY: Final[int] = 1
MAX_PRIORITY: Final[int] = 5


@dataclass
class NotificationRecord:
    """Staff-facing message generated from an order event.

    ``notification_type``, ``priority``, ``message`` and ``metadata`` are fixed at
    creation; only ``is_read`` and ``read_at`` change afterwards.
    """

    id: str | None
    order_id: str | None
    message: str
    notification_type: str
    priority: int
    is_read: bool = False
    read_at: datetime | None = None
    created_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class NotificationStats:
    """Totals shown on the dashboard badges."""

    total: int = 0
    unread: int = 0
    by_type: dict[str, int] = field(default_factory=dict)


__all__ = [
    "MAX_PRIORITY",
    "MIN_PRIORITY",
    "NOTIFICATION_ORDER_CANCELLED",
    "NOTIFICATION_ORDER_CREATED",
    "NOTIFICATION_ORDER_PAID",
    "NOTIFICATION_ORDER_UPDATED",
    "NOTIFICATION_PAYMENT_COMPLETED",
    "NOTIFICATION_PAYMENT_FAILED",
    "NOTIFICATION_TYPES",
    "NotificationRecord",
    "NotificationStats",
]

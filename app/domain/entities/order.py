"""Domain entity describing a storefront order."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Final

ORDER_STATUS_PENDING: Final[str] = "pending"
ORDER_STATUS_PAYMENT_PENDING: Final[str] = "payment_pending"
ORDER_STATUS_PAID: Final[str] = "paid"
ORDER_STATUS_ACCEPTED: Final[str] = "accepted"
ORDER_STATUS_REJECTED: Final[str] = "rejected"
ORDER_STATUS_PROCESSING: Final[str] = "processing"
ORDER_STATUS_COMPLETED: Final[str] = "completed"
ORDER_STATUS_CANCELLED: Final[str] = "cancelled"

ORDER_STATUSES: Final[tuple[str, ...]] = (
    ORDER_STATUS_PENDING,
    ORDER_STATUS_PAYMENT_PENDING,
    ORDER_STATUS_PAID,
    ORDER_STATUS_ACCEPTED,
    ORDER_STATUS_REJECTED,
    ORDER_STATUS_PROCESSING,
    ORDER_STATUS_COMPLETED,
    ORDER_STATUS_CANCELLED,
)

PAYMENT_STATUS_PENDING: Final[str] = "pending"
PAYMENT_STATUS_PROCESSING: Final[str] = "processing"
PAYMENT_STATUS_COMPLETED: Final[str] = "completed"
PAYMENT_STATUS_FAILED: Final[str] = "failed"
PAYMENT_STATUS_REFUNDED: Final[str] = "refunded"

PAYMENT_STATUSES: Final[tuple[str, ...]] = (
    PAYMENT_STATUS_PENDING,
    PAYMENT_STATUS_PROCESSING,
    PAYMENT_STATUS_COMPLETED,
    PAYMENT_STATUS_FAILED,
    PAYMENT_STATUS_REFUNDED,
)


@dataclass
class Order:
    """Order placed through the storefront checkout."""

    id: str | None
    order_number: str
    customer_name: str
    customer_email: str
    total_amount: float
    status: str = ORDER_STATUS_PENDING
    payment_status: str = PAYMENT_STATUS_PENDING
    customer_phone: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


__all__ = [
    "ORDER_STATUSES",
    "ORDER_STATUS_ACCEPTED",
    "ORDER_STATUS_CANCELLED",
    "ORDER_STATUS_COMPLETED",
    "ORDER_STATUS_PAID",
    "ORDER_STATUS_PAYMENT_PENDING",
    "ORDER_STATUS_PENDING",
    "ORDER_STATUS_PROCESSING",
    "ORDER_STATUS_REJECTED",
    "PAYMENT_STATUSES",
    "PAYMENT_STATUS_COMPLETED",
    "PAYMENT_STATUS_FAILED",
    "PAYMENT_STATUS_PENDING",
    "PAYMENT_STATUS_PROCESSING",
    "PAYMENT_STATUS_REFUNDED",
    "Order",
]

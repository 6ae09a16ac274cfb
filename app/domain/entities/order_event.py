"""Domain events exchanged between the realtime feed and the alert services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final

CHANGE_INSERT: Final[str] = "INSERT"
CHANGE_UPDATE: Final[str] = "UPDATE"
CHANGE_DELETE: Final[str] = "DELETE"


@dataclass
class OrderEvent:
    """Notification-worthy occurrence derived from an order row change."""

    notification_type: str
    order_id: str | None
    order_number: str
    customer_name: str
    amount: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class RowChange:
    """Committed change of a single database row.

    ``new`` is empty for deletes and ``old`` is empty for inserts.
    """

    table: str
    event: str
    new: dict[str, Any] = field(default_factory=dict)
    old: dict[str, Any] = field(default_factory=dict)


__all__ = [
    "CHANGE_DELETE",
    "CHANGE_INSERT",
    "CHANGE_UPDATE",
    "OrderEvent",
    "RowChange",
]

"""Use case for order status and payment transitions."""

from typing import Any

from sqlalchemy.orm import Session

from app.domain.entities import Order
from app.infrastructure.repositories import OrderRepository
from .validators import ensure_valid_amount, ensure_valid_statuses


def update_order(session: Session, order_id: str, changes: dict[str, Any]) -> Order | None:
    """Apply ``changes`` to an order. Returns ``None`` when it does not exist."""

    ensure_valid_statuses(changes)
    ensure_valid_amount(changes.get("total_amount"))
    return OrderRepository(session).update(order_id, changes)

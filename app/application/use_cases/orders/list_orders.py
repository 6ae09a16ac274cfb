"""Use case for listing orders."""

from typing import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import Order
from app.infrastructure.repositories import OrderRepository


def list_orders(session: Session, *, skip: int = 0, limit: int = 100) -> Sequence[Order]:
    """Return orders, newest first."""

    return OrderRepository(session).list(skip=skip, limit=limit)


def get_order(session: Session, order_id: str) -> Order | None:
    return OrderRepository(session).get(order_id)

"""Persistence layer for storefront orders."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from app.domain.entities import Order
from app.infrastructure.models import OrderModel
from app.utils import (
    ensure_utc_naive_datetime,
    from_utc_naive_datetime,
    now_in_app_timezone,
)

_UPDATABLE_FIELDS = frozenset(
    {
        "customer_name",
        "customer_email",
        "customer_phone",
        "total_amount",
        "status",
        "payment_status",
        "notes",
    }
)


class OrderRepository:
    """Provide CRUD operations for :class:`Order` entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self, *, skip: int = 0, limit: int = 100) -> Sequence[Order]:
        query = (
            self.session.query(OrderModel)
            .order_by(OrderModel.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    def list_created_after(self, moment: datetime) -> Sequence[Order]:
        """Return orders created strictly after ``moment``, oldest first."""

        query = (
            self.session.query(OrderModel)
            .filter(OrderModel.created_at > ensure_utc_naive_datetime(moment))
            .order_by(OrderModel.created_at.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def get(self, order_id: str) -> Order | None:
        model = self.session.get(OrderModel, order_id)
        return self._to_entity(model) if model else None

    def get_by_number(self, order_number: str) -> Order | None:
        model = (
            self.session.query(OrderModel)
            .filter(OrderModel.order_number == order_number)
            .one_or_none()
        )
        return self._to_entity(model) if model else None

    def create(self, order: Order) -> Order:
        model = OrderModel()
        model.order_number = order.order_number
        model.customer_name = order.customer_name
        model.customer_email = order.customer_email
        model.customer_phone = order.customer_phone
        model.total_amount = order.total_amount
        model.status = order.status
        model.payment_status = order.payment_status
        model.notes = order.notes
        model.created_at = ensure_utc_naive_datetime(
            order.created_at or now_in_app_timezone()
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, order_id: str, changes: Mapping[str, Any]) -> Order | None:
        model = self.session.get(OrderModel, order_id)
        if model is None:
            return None
        for field_name, value in changes.items():
            if field_name not in _UPDATABLE_FIELDS:
                msg = f"Field '{field_name}' cannot be updated"
                raise ValueError(msg)
            setattr(model, field_name, value)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: OrderModel) -> Order:
        return Order(
            id=model.id,
            order_number=model.order_number,
            customer_name=model.customer_name,
            customer_email=model.customer_email,
            customer_phone=model.customer_phone,
            total_amount=float(model.total_amount or 0),
            status=model.status,
            payment_status=model.payment_status,
            notes=model.notes,
            created_at=from_utc_naive_datetime(model.created_at),
            updated_at=from_utc_naive_datetime(model.updated_at),
        )


__all__ = ["OrderRepository"]

"""Order placement and status transitions."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.application.alerts import AlertRuntime
from app.application.use_cases.orders import (
    get_order as get_order_uc,
    list_orders as list_orders_uc,
    place_order as place_order_uc,
    update_order as update_order_uc,
)
from app.domain.entities import Order
from app.interfaces.api.dependencies import get_alert_runtime, get_db
from app.interfaces.api.schemas import (
    NotificationRead,
    OrderCreate,
    OrderNotificationCreate,
    OrderRead,
    OrderUpdate,
)

from .notifications import notification_to_schema

router = APIRouter(prefix="/orders", tags=["orders"])


def _order_to_schema(order: Order) -> OrderRead:
    return OrderRead(
        id=order.id or "",
        order_number=order.order_number,
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        customer_phone=order.customer_phone,
        total_amount=order.total_amount,
        status=order.status,
        payment_status=order.payment_status,
        notes=order.notes,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


@router.get("/", response_model=list[OrderRead])
def list_orders(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
) -> list[OrderRead]:
    return [_order_to_schema(order) for order in list_orders_uc(db, skip=skip, limit=limit)]


@router.post("/", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
def place_order(payload: OrderCreate, db: Session = Depends(get_db)) -> OrderRead:
    """Persist a checkout order; staff consoles are alerted through the change feed."""

    try:
        order = place_order_uc(db, **payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _order_to_schema(order)


@router.patch("/{order_id}", response_model=OrderRead)
def update_order(
    order_id: str, payload: OrderUpdate, db: Session = Depends(get_db)
) -> OrderRead:
    try:
        order = update_order_uc(db, order_id, payload.changes())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return _order_to_schema(order)


@router.get("/{order_id}", response_model=OrderRead)
def get_order(order_id: str, db: Session = Depends(get_db)) -> OrderRead:
    order = get_order_uc(db, order_id)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return _order_to_schema(order)


@router.post(
    "/{order_id}/notifications",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
)
def create_order_notification(
    order_id: str,
    payload: OrderNotificationCreate,
    db: Session = Depends(get_db),
    runtime: AlertRuntime = Depends(get_alert_runtime),
) -> NotificationRead:
    """Raise a notification of the requested type for an existing order."""

    if get_order_uc(db, order_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    try:
        record = runtime.router.create_order_notification(order_id, payload.notification_type)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Notification was not created",
        )
    return notification_to_schema(record)

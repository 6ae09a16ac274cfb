"""Use case for placing storefront orders."""

from uuid import uuid4

from sqlalchemy.orm import Session

from app.domain.entities import ORDER_STATUS_PENDING, PAYMENT_STATUS_PENDING, Order
from app.infrastructure.repositories import OrderRepository
from app.utils import now_in_app_timezone
from .validators import ensure_valid_amount


def generate_order_number() -> str:
    """Return a human readable order number such as ``ORD-20240501-1A2B3C``."""

    return f"ORD-{now_in_app_timezone():%Y%m%d}-{uuid4().hex[:6].upper()}"


def place_order(
    session: Session,
    *,
    customer_name: str,
    customer_email: str,
    total_amount: float,
    customer_phone: str | None = None,
    notes: str | None = None,
    order_number: str | None = None,
) -> Order:
    """Persist a new pending order."""

    ensure_valid_amount(total_amount)
    repository = OrderRepository(session)
    number = order_number or generate_order_number()
    if repository.get_by_number(number) is not None:
        msg = f"Order number '{number}' already exists"
        raise ValueError(msg)

    entity = Order(
        id=None,
        order_number=number,
        customer_name=customer_name,
        customer_email=customer_email,
        customer_phone=customer_phone,
        total_amount=total_amount,
        status=ORDER_STATUS_PENDING,
        payment_status=PAYMENT_STATUS_PENDING,
        notes=notes,
        created_at=now_in_app_timezone(),
    )
    return repository.create(entity)

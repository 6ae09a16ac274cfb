"""SQLAlchemy model for storefront orders."""

from uuid import uuid4

from sqlalchemy import Column, DateTime, Numeric, String, Text

from app.infrastructure.database import Base
from app.utils import now_utc_naive_datetime


def _new_identifier() -> str:
    return str(uuid4())


class OrderModel(Base):
    """Database representation of an order placed through checkout."""

    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=_new_identifier)
    order_number = Column(String(40), nullable=False, unique=True, index=True)
    customer_name = Column(String(120), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(40), nullable=True)
    total_amount = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    status = Column(String(30), nullable=False, default="pending")
    payment_status = Column(String(30), nullable=False, default="pending")
    notes = Column(Text, nullable=True)
    created_at = Column(
        DateTime(), nullable=False, default=now_utc_naive_datetime, index=True
    )
    updated_at = Column(DateTime(), nullable=True, onupdate=now_utc_naive_datetime)


__all__ = ["OrderModel"]

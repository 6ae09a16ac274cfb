"""SQLAlchemy model for persisted order notifications."""

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text

from app.infrastructure.database import Base
from app.utils import now_utc_naive_datetime


def _new_identifier() -> str:
    return str(uuid4())


class NotificationModel(Base):
    """Database representation for staff notifications about orders."""

    __tablename__ = "order_notifications"

    id = Column(String(36), primary_key=True, default=_new_identifier)
    order_id = Column(
        String(36),
        ForeignKey("orders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    message = Column(Text, nullable=False)
    notification_type = Column(String(32), nullable=False, index=True)
    priority = Column(Integer, nullable=False, default=3)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    read_at = Column(DateTime(), nullable=True)
    created_at = Column(
        DateTime(), nullable=False, default=now_utc_naive_datetime, index=True
    )
    # ``metadata`` is reserved on declarative classes.
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)


__all__ = ["NotificationModel"]

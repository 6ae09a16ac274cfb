"""SQLAlchemy model for key/value application settings."""

from sqlalchemy import Column, DateTime, JSON, String

from app.infrastructure.database import Base
from app.utils import now_utc_naive_datetime


class SettingModel(Base):
    """A JSON document stored under a unique key."""

    __tablename__ = "settings"

    key = Column(String(120), primary_key=True)
    value = Column(JSON, nullable=False, default=dict)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_utc_naive_datetime,
        onupdate=now_utc_naive_datetime,
    )


__all__ = ["SettingModel"]

"""Persistence helpers for order notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.domain.entities import NotificationRecord, NotificationStats
from app.infrastructure.models import NotificationModel
from app.utils import (
    ensure_utc_naive_datetime,
    from_utc_naive_datetime,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide CRUD operations for :class:`NotificationRecord` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(
        self,
        *,
        unread_only: bool = False,
        limit: int | None = None,
    ) -> Sequence[NotificationRecord]:
        query = self.session.query(NotificationModel)
        if unread_only:
            query = query.filter(NotificationModel.is_read.is_(False))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def get(self, notification_id: str) -> NotificationRecord | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def count_unread(self) -> int:
        count = (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.is_read.is_(False))
            .scalar()
        )
        return int(count or 0)

    def stats(self) -> NotificationStats:
        rows = (
            self.session.query(
                NotificationModel.notification_type, func.count(NotificationModel.id)
            )
            .group_by(NotificationModel.notification_type)
            .all()
        )
        by_type = {notification_type: int(count) for notification_type, count in rows}
        return NotificationStats(
            total=sum(by_type.values()),
            unread=self.count_unread(),
            by_type=by_type,
        )

    def create(self, notification: NotificationRecord) -> NotificationRecord:
        model = NotificationModel()
        model.order_id = notification.order_id
        model.message = notification.message
        model.notification_type = notification.notification_type
        model.priority = notification.priority
        model.is_read = False
        model.read_at = None
        model.created_at = ensure_utc_naive_datetime(
            notification.created_at or now_in_app_timezone()
        )
        model.metadata_ = notification.metadata or {}
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_id: str) -> NotificationRecord | None:
        """Flag a notification as read, keeping the first ``read_at`` timestamp."""

        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        if not model.is_read:
            model.is_read = True
            model.read_at = ensure_utc_naive_datetime(now_in_app_timezone())
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def mark_all_as_read(self) -> int:
        # Row by row so the realtime feed observes every UPDATE.
        models = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.is_read.is_(False))
            .all()
        )
        if not models:
            return 0
        read_at = ensure_utc_naive_datetime(now_in_app_timezone())
        for model in models:
            model.is_read = True
            model.read_at = read_at
        self.session.commit()
        return len(models)

    def delete(self, notification_id: str) -> bool:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return False
        self.session.delete(model)
        self.session.commit()
        return True

    @staticmethod
    def _to_entity(model: NotificationModel) -> NotificationRecord:
        return NotificationRecord(
            id=model.id,
            order_id=model.order_id,
            message=model.message,
            notification_type=model.notification_type,
            priority=model.priority,
            is_read=bool(model.is_read),
            read_at=from_utc_naive_datetime(model.read_at),
            created_at=from_utc_naive_datetime(model.created_at),
            metadata=dict(model.metadata_ or {}),
        )


__all__ = ["NotificationRepository"]

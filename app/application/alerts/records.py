"""Notification records and the internal bus republishing their inserts."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import (
    CHANGE_DELETE,
    CHANGE_INSERT,
    CHANGE_UPDATE,
    NOTIFICATION_ORDER_CANCELLED,
    NOTIFICATION_ORDER_CREATED,
    NOTIFICATION_ORDER_PAID,
    NOTIFICATION_ORDER_UPDATED,
    NOTIFICATION_PAYMENT_COMPLETED,
    NOTIFICATION_PAYMENT_FAILED,
    NotificationRecord,
    NotificationStats,
    OrderEvent,
    RowChange,
)
from app.infrastructure.notifications import RealtimeChangeFeed, normalize_json_values
from app.infrastructure.repositories import NotificationRepository
from app.utils import from_utc_naive_datetime

from .settings_store import NotificationSettingsStore

logger = logging.getLogger(__name__)

NOTIFICATIONS_TABLE = "order_notifications"

RecordCallback = Callable[[NotificationRecord], None]
ClearedCallback = Callable[[], None]

MESSAGE_TEMPLATES: dict[str, str] = {
    NOTIFICATION_ORDER_CREATED: "New order #{order_number} received from {customer_name}",
    NOTIFICATION_ORDER_PAID: "Payment completed for order #{order_number} by {customer_name}",
    NOTIFICATION_ORDER_UPDATED: "Order #{order_number} has been updated",
    NOTIFICATION_ORDER_CANCELLED: "Order #{order_number} has been cancelled",
    NOTIFICATION_PAYMENT_FAILED: "Payment failed for order #{order_number}",
    NOTIFICATION_PAYMENT_COMPLETED: "Payment of €{amount} completed for order #{order_number}",
}


def build_message(event: OrderEvent) -> str:
    template = MESSAGE_TEMPLATES.get(
        event.notification_type, "Notification for order #{order_number}"
    )
    amount = float(event.amount) if event.amount is not None else 0.0
    return template.format(
        order_number=event.order_number,
        customer_name=event.customer_name,
        amount=f"{amount:.2f}",
    )


def record_from_row(row: Mapping[str, Any]) -> NotificationRecord:
    """Build a record from an ``order_notifications`` row snapshot."""

    return NotificationRecord(
        id=row.get("id"),
        order_id=row.get("order_id"),
        message=row.get("message") or "",
        notification_type=row.get("notification_type") or "",
        priority=int(row.get("priority") or 0),
        is_read=bool(row.get("is_read")),
        read_at=from_utc_naive_datetime(row.get("read_at")),
        created_at=from_utc_naive_datetime(row.get("created_at")),
        metadata=dict(row.get("metadata") or {}),
    )


class NotificationRecordService:
    """Create and query notification records.

    The service is the only subscriber to the ``order_notifications`` change
    stream and republishes every inserted record to its own listeners.
    Backend failures are logged and reported through the return value.
    """

    SUBSCRIBER_ID = "notification-record-service"

    def __init__(
        self,
        session_factory: Callable[[], Session],
        settings_store: NotificationSettingsStore,
        feed: RealtimeChangeFeed,
    ) -> None:
        self._session_factory = session_factory
        self._settings_store = settings_store
        self._feed = feed
        self._listeners: dict[str, RecordCallback] = {}
        self._cleared_listeners: dict[str, ClearedCallback] = {}
        self._cleared_announced = False
        self._started = False

    def start(self) -> None:
        if self._started:
            return
        self._feed.subscribe(NOTIFICATIONS_TABLE, CHANGE_INSERT, self.SUBSCRIBER_ID, self._on_insert)
        self._feed.subscribe(NOTIFICATIONS_TABLE, CHANGE_UPDATE, self.SUBSCRIBER_ID, self._on_change)
        self._feed.subscribe(NOTIFICATIONS_TABLE, CHANGE_DELETE, self.SUBSCRIBER_ID, self._on_change)
        self._started = True

    def shutdown(self) -> None:
        for event_type in (CHANGE_INSERT, CHANGE_UPDATE, CHANGE_DELETE):
            self._feed.unsubscribe(NOTIFICATIONS_TABLE, event_type, self.SUBSCRIBER_ID)
        self._listeners.clear()
        self._cleared_listeners.clear()
        self._started = False

    def subscribe(self, listener_id: str, callback: RecordCallback) -> None:
        """Call ``callback`` for every inserted record; replaces ``listener_id``."""

        self._listeners[listener_id] = callback

    def unsubscribe(self, listener_id: str) -> None:
        self._listeners.pop(listener_id, None)

    def subscribe_cleared(self, listener_id: str, callback: ClearedCallback) -> None:
        """Call ``callback`` when the last unread record is read or deleted."""

        self._cleared_listeners[listener_id] = callback

    def unsubscribe_cleared(self, listener_id: str) -> None:
        self._cleared_listeners.pop(listener_id, None)

    def create(self, event: OrderEvent) -> NotificationRecord | None:
        config = self._settings_store.get().type_config(event.notification_type)
        if not config.enabled:
            logger.info(
                "Notification type %s disabled; nothing created for order %s",
                event.notification_type,
                event.order_number,
            )
            return None

        metadata = {
            "order_number": event.order_number,
            "customer_name": event.customer_name,
            "amount": event.amount,
            **event.metadata,
        }
        record = NotificationRecord(
            id=None,
            order_id=event.order_id,
            message=build_message(event),
            notification_type=event.notification_type,
            priority=config.priority,
            metadata=normalize_json_values(metadata),
        )
        try:
            with self._session_factory() as session:
                saved = NotificationRepository(session).create(record)
        except SQLAlchemyError:
            logger.exception(
                "Failed to create %s notification for order %s",
                event.notification_type,
                event.order_number,
            )
            return None
        logger.info("Created %s notification %s", saved.notification_type, saved.id)
        return saved

    def list(self, unread_only: bool = True, limit: int | None = None) -> Sequence[NotificationRecord]:
        try:
            with self._session_factory() as session:
                return NotificationRepository(session).list(unread_only=unread_only, limit=limit)
        except SQLAlchemyError:
            logger.exception("Failed to list notifications")
            return []

    def exists(self, notification_id: str) -> bool | None:
        """Whether the record exists; ``None`` when the backend cannot answer."""

        try:
            with self._session_factory() as session:
                return NotificationRepository(session).get(notification_id) is not None
        except SQLAlchemyError:
            logger.exception("Failed to look up notification %s", notification_id)
            return None

    def count_unread(self) -> int:
        try:
            with self._session_factory() as session:
                return NotificationRepository(session).count_unread()
        except SQLAlchemyError:
            logger.exception("Failed to count unread notifications")
            return 0

    def stats(self) -> NotificationStats:
        try:
            with self._session_factory() as session:
                return NotificationRepository(session).stats()
        except SQLAlchemyError:
            logger.exception("Failed to compute notification stats")
            return NotificationStats()

    def mark_read(self, notification_id: str) -> bool:
        try:
            with self._session_factory() as session:
                record = NotificationRepository(session).mark_as_read(notification_id)
        except SQLAlchemyError:
            logger.exception("Failed to mark notification %s as read", notification_id)
            return False
        return record is not None

    def mark_all_read(self) -> bool:
        try:
            with self._session_factory() as session:
                updated = NotificationRepository(session).mark_all_as_read()
        except SQLAlchemyError:
            logger.exception("Failed to mark all notifications as read")
            return False
        logger.info("Marked %d notifications as read", updated)
        return True

    def delete(self, notification_id: str) -> bool:
        try:
            with self._session_factory() as session:
                NotificationRepository(session).delete(notification_id)
        except SQLAlchemyError:
            logger.exception("Failed to delete notification %s", notification_id)
            return False
        return True

    def _on_insert(self, change: RowChange) -> None:
        record = record_from_row(change.new)
        if not record.is_read:
            self._cleared_announced = False
        for listener_id, callback in list(self._listeners.items()):
            try:
                callback(record)
            except Exception:
                logger.exception("Notification listener '%s' failed", listener_id)

    def _on_change(self, change: RowChange) -> None:
        if not self._cleared_listeners or self._cleared_announced:
            return
        if change.event == CHANGE_UPDATE:
            became_read = not change.old.get("is_read") and bool(change.new.get("is_read"))
            if not became_read:
                return
        elif change.old.get("is_read"):
            return
        if self.count_unread() > 0:
            return
        self._cleared_announced = True
        for listener_id, callback in list(self._cleared_listeners.items()):
            try:
                callback()
            except Exception:
                logger.exception("Cleared listener '%s' failed", listener_id)


__all__ = [
    "MESSAGE_TEMPLATES",
    "NotificationRecordService",
    "build_message",
    "record_from_row",
]

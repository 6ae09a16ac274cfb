"""Turn order row changes into notification records."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import asdict
from datetime import datetime
from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import (
    CHANGE_INSERT,
    CHANGE_UPDATE,
    NOTIFICATION_ORDER_CANCELLED,
    NOTIFICATION_ORDER_CREATED,
    NOTIFICATION_ORDER_UPDATED,
    NOTIFICATION_PAYMENT_COMPLETED,
    NOTIFICATION_PAYMENT_FAILED,
    NOTIFICATION_TYPES,
    ORDER_STATUS_ACCEPTED,
    ORDER_STATUS_CANCELLED,
    ORDER_STATUS_COMPLETED,
    PAYMENT_STATUS_COMPLETED,
    PAYMENT_STATUS_FAILED,
    NotificationRecord,
    OrderEvent,
    RowChange,
)
from app.infrastructure.notifications import RealtimeChangeFeed
from app.infrastructure.repositories import OrderRepository
from app.utils import (
    ensure_app_timezone,
    ensure_utc,
    from_utc_naive_datetime,
    now_in_app_timezone,
)

from .records import NotificationRecordService
from .scheduling import RepeatingTask, Scheduler

logger = logging.getLogger(__name__)

ORDERS_TABLE = "orders"
WATCHED_FIELDS = ("status", "payment_status", "total_amount")
TEST_ORDER_NUMBER = "TEST-001"
TEST_CUSTOMER_NAME = "Test Customer"


def _amount(row: Mapping[str, Any]) -> float | None:
    value = row.get("total_amount")
    return float(value) if value is not None else None


def _event(notification_type: str, row: Mapping[str, Any], **metadata: Any) -> OrderEvent:
    return OrderEvent(
        notification_type=notification_type,
        order_id=row.get("id"),
        order_number=str(row.get("order_number") or ""),
        customer_name=str(row.get("customer_name") or ""),
        amount=_amount(row),
        metadata=metadata,
    )


def classify_insert(row: Mapping[str, Any]) -> list[OrderEvent]:
    """Every inserted order is a new order, whatever its initial status."""

    return [
        _event(
            NOTIFICATION_ORDER_CREATED,
            row,
            customer_email=row.get("customer_email"),
            customer_phone=row.get("customer_phone"),
            status=row.get("status"),
            payment_status=row.get("payment_status"),
            created_at=from_utc_naive_datetime(row.get("created_at")),
        )
    ]


def classify_update(old: Mapping[str, Any], new: Mapping[str, Any]) -> list[OrderEvent]:
    """Compare two snapshots of an order row.

    Status and payment transitions each produce their own event. A generic
    ``order_updated`` is emitted only when a watched field changed without
    producing one of them.
    """

    events: list[OrderEvent] = []
    old_status, new_status = old.get("status"), new.get("status")
    old_payment, new_payment = old.get("payment_status"), new.get("payment_status")

    if new_status != old_status:
        if new_status == ORDER_STATUS_CANCELLED:
            events.append(
                _event(NOTIFICATION_ORDER_CANCELLED, new, previous_status=old_status)
            )
        elif new_status in (ORDER_STATUS_ACCEPTED, ORDER_STATUS_COMPLETED):
            events.append(
                _event(
                    NOTIFICATION_ORDER_UPDATED,
                    new,
                    previous_status=old_status,
                    new_status=new_status,
                )
            )

    if new_payment != old_payment:
        if new_payment == PAYMENT_STATUS_COMPLETED:
            events.append(
                _event(NOTIFICATION_PAYMENT_COMPLETED, new, previous_payment_status=old_payment)
            )
        elif new_payment == PAYMENT_STATUS_FAILED:
            events.append(
                _event(NOTIFICATION_PAYMENT_FAILED, new, previous_payment_status=old_payment)
            )

    if events:
        return events

    changed = [field for field in WATCHED_FIELDS if old.get(field) != new.get(field)]
    if changed:
        events.append(_event(NOTIFICATION_ORDER_UPDATED, new, changed_fields=changed))
    return events


class OrderEventRouter:
    """Single subscriber to order inserts and updates.

    A reconciliation sync picks up orders the realtime path missed: rows
    created strictly after the last checked timestamp that were not already
    handled.
    """

    SUBSCRIBER_ID = "order-event-router"

    def __init__(
        self,
        session_factory: Callable[[], Session],
        records: NotificationRecordService,
        feed: RealtimeChangeFeed,
        scheduler: Scheduler,
        *,
        reconciliation_interval: float = 30.0,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._session_factory = session_factory
        self._records = records
        self._feed = feed
        self._scheduler = scheduler
        self._reconciliation_interval = reconciliation_interval
        self._clock = clock
        self._last_checked: datetime = ensure_utc(clock())
        self._handled: dict[str, datetime | None] = {}
        self._sync_task: RepeatingTask | None = None

    @property
    def last_checked(self) -> datetime:
        return ensure_app_timezone(self._last_checked)

    def start(self) -> None:
        if self._sync_task is not None:
            return
        self._last_checked = ensure_utc(self._clock())
        self._feed.subscribe(ORDERS_TABLE, CHANGE_INSERT, self.SUBSCRIBER_ID, self.handle_insert)
        self._feed.subscribe(ORDERS_TABLE, CHANGE_UPDATE, self.SUBSCRIBER_ID, self.handle_update)
        self._sync_task = RepeatingTask(
            self._scheduler,
            self._reconciliation_interval,
            self.reconcile,
            initial_delay=self._reconciliation_interval,
        ).start()

    def shutdown(self) -> None:
        self._feed.unsubscribe(ORDERS_TABLE, CHANGE_INSERT, self.SUBSCRIBER_ID)
        self._feed.unsubscribe(ORDERS_TABLE, CHANGE_UPDATE, self.SUBSCRIBER_ID)
        if self._sync_task is not None:
            self._sync_task.cancel()
            self._sync_task = None

    def handle_insert(self, change: RowChange) -> list[NotificationRecord]:
        order_id = change.new.get("id")
        if order_id in self._handled:
            logger.debug("Order %s already handled; insert ignored", order_id)
            return []
        if order_id is not None:
            self._handled[order_id] = ensure_utc(
                from_utc_naive_datetime(change.new.get("created_at"))
            )
        return self._forward(classify_insert(change.new))

    def handle_update(self, change: RowChange) -> list[NotificationRecord]:
        return self._forward(classify_update(change.old, change.new))

    def reconcile(self) -> int:
        """Notify orders created since the last check. Returns how many were new."""

        try:
            with self._session_factory() as session:
                orders = OrderRepository(session).list_created_after(self._last_checked)
        except SQLAlchemyError:
            logger.exception("Order reconciliation failed; will retry")
            return 0

        processed = 0
        for order in orders:
            created_at = ensure_utc(order.created_at)
            if created_at is not None and created_at > self._last_checked:
                self._last_checked = created_at
            if order.id in self._handled:
                continue
            self._handled[order.id] = created_at
            self._forward(classify_insert(asdict(order)))
            processed += 1

        self._handled = {
            order_id: created_at
            for order_id, created_at in self._handled.items()
            if created_at is None or created_at > self._last_checked
        }
        if processed:
            logger.info("Reconciliation picked up %d missed orders", processed)
        return processed

    def create_order_notification(
        self, order_id: str, notification_type: str
    ) -> NotificationRecord | None:
        """Create a notification of ``notification_type`` for an existing order."""

        if notification_type not in NOTIFICATION_TYPES:
            msg = f"Unknown notification type '{notification_type}'"
            raise ValueError(msg)
        try:
            with self._session_factory() as session:
                order = OrderRepository(session).get(order_id)
        except SQLAlchemyError:
            logger.exception("Failed to load order %s", order_id)
            return None
        if order is None:
            return None
        return self._records.create(_event(notification_type, asdict(order), manual=True))

    def create_test_notification(self) -> NotificationRecord | None:
        event = OrderEvent(
            notification_type=NOTIFICATION_ORDER_CREATED,
            order_id=None,
            order_number=TEST_ORDER_NUMBER,
            customer_name=TEST_CUSTOMER_NAME,
            amount=0.0,
            metadata={"test": True},
        )
        return self._records.create(event)

    def _forward(self, events: list[OrderEvent]) -> list[NotificationRecord]:
        created: list[NotificationRecord] = []
        for event in events:
            record = self._records.create(event)
            if record is not None:
                created.append(record)
        return created


__all__ = [
    "OrderEventRouter",
    "WATCHED_FIELDS",
    "classify_insert",
    "classify_update",
]

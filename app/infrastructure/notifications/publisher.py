"""Utility helpers to push notification records to staff consoles."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from app.domain.entities import NotificationRecord
from app.utils import isoformat_or_none

from .manager import ConsoleConnectionManager


class NotificationPublisher:
    """Serialize notification records and schedule their delivery."""

    def __init__(self, manager: ConsoleConnectionManager) -> None:
        self._manager = manager

    def dispatch(self, notification: NotificationRecord) -> None:
        """Schedule ``notification`` to be delivered to every staff console."""

        consoles = [console.console_id for console in self._manager.staff_consoles()]
        if not consoles:
            return
        message = {"type": "notification", "data": serialize_notification(notification)}
        self._manager.dispatch(consoles, message)


def serialize_notification(notification: NotificationRecord) -> dict[str, Any]:
    """Return the JSON payload representation for ``notification``."""

    return {
        "id": notification.id,
        "order_id": notification.order_id,
        "message": notification.message,
        "notification_type": notification.notification_type,
        "priority": notification.priority,
        "is_read": notification.is_read,
        "read_at": isoformat_or_none(notification.read_at),
        "created_at": isoformat_or_none(notification.created_at),
        "metadata": normalize_json_values(dict(notification.metadata or {})),
    }


def normalize_json_values(data: Any) -> Any:
    """Convert ``datetime`` instances nested inside ``data`` into ISO strings."""

    if isinstance(data, dict):
        for key, value in data.items():
            if isinstance(value, datetime):
                data[key] = value.isoformat()
            elif isinstance(value, (dict, list)):
                normalize_json_values(value)
    elif isinstance(data, list):
        for index, item in enumerate(data):
            if isinstance(item, datetime):
                data[index] = item.isoformat()
            elif isinstance(item, (dict, list)):
                normalize_json_values(item)
    return data


__all__ = [
    "NotificationPublisher",
    "normalize_json_values",
    "serialize_notification",
]

"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationRepository
from .order_repository import OrderRepository
from .setting_repository import SettingRepository

__all__ = [
    "NotificationRepository",
    "OrderRepository",
    "SettingRepository",
]

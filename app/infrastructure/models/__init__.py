"""ORM models used by the application infrastructure."""

from .notification import NotificationModel
from .order import OrderModel
from .setting import SettingModel

__all__ = [
    "NotificationModel",
    "OrderModel",
    "SettingModel",
]

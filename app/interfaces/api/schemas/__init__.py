from .alert import (
    AlertStatusRead,
    AlertStopResponse,
    CustomSoundRequest,
    SettingsResponse,
    TestSoundRequest,
    TestSoundResponse,
)
from .notification import (
    NotificationActionResponse,
    NotificationCountRead,
    NotificationRead,
    NotificationStatsRead,
    OrderNotificationCreate,
)
from .order import OrderCreate, OrderRead, OrderUpdate

__all__ = [
    "AlertStatusRead",
    "AlertStopResponse",
    "CustomSoundRequest",
    "NotificationActionResponse",
    "NotificationCountRead",
    "NotificationRead",
    "NotificationStatsRead",
    "OrderCreate",
    "OrderNotificationCreate",
    "OrderRead",
    "OrderUpdate",
    "SettingsResponse",
    "TestSoundRequest",
    "TestSoundResponse",
]

"""Domain entities exposed by the application."""

from .audio import (
    AUDIO_PATTERNS,
    PATTERN_CONTINUOUS,
    PATTERN_DOUBLE,
    PATTERN_SINGLE,
    PATTERN_TRIPLE,
    RING_PATTERNS,
    AudioPattern,
    ToneConfig,
)
from .notification import (
    MAX_PRIORITY,
    MIN_PRIORITY,
    NOTIFICATION_ORDER_CANCELLED,
    NOTIFICATION_ORDER_CREATED,
    NOTIFICATION_ORDER_PAID,
    NOTIFICATION_ORDER_UPDATED,
    NOTIFICATION_PAYMENT_COMPLETED,
    NOTIFICATION_PAYMENT_FAILED,
    NOTIFICATION_TYPES,
    NotificationRecord,
    NotificationStats,
)
from .notification_settings import (
    DEFAULT_SOUND_NAME,
    NotificationSettings,
    NotificationTypeConfig,
    default_type_configs,
)
from .order import (
    ORDER_STATUSES,
    ORDER_STATUS_ACCEPTED,
    ORDER_STATUS_CANCELLED,
    ORDER_STATUS_COMPLETED,
    ORDER_STATUS_PENDING,
    PAYMENT_STATUSES,
    PAYMENT_STATUS_COMPLETED,
    PAYMENT_STATUS_FAILED,
    PAYMENT_STATUS_PENDING,
    Order,
)
from .order_event import (
    CHANGE_DELETE,
    CHANGE_INSERT,
    CHANGE_UPDATE,
    OrderEvent,
    RowChange,
)

__all__ = [
    "AUDIO_PATTERNS",
    "AudioPattern",
    "CHANGE_DELETE",
    "CHANGE_INSERT",
    "CHANGE_UPDATE",
    "DEFAULT_SOUND_NAME",
    "MAX_PRIORITY",
    "MIN_PRIORITY",
    "NOTIFICATION_ORDER_CANCELLED",
    "NOTIFICATION_ORDER_CREATED",
    "NOTIFICATION_ORDER_PAID",
    "NOTIFICATION_ORDER_UPDATED",
    "NOTIFICATION_PAYMENT_COMPLETED",
    "NOTIFICATION_PAYMENT_FAILED",
    "NOTIFICATION_TYPES",
    "NotificationRecord",
    "NotificationSettings",
    "NotificationStats",
    "NotificationTypeConfig",
    "ORDER_STATUSES",
    "ORDER_STATUS_ACCEPTED",
    "ORDER_STATUS_CANCELLED",
    "ORDER_STATUS_COMPLETED",
    "ORDER_STATUS_PENDING",
    "Order",
    "OrderEvent",
    "PATTERN_CONTINUOUS",
    "PATTERN_DOUBLE",
    "PATTERN_SINGLE",
    "PATTERN_TRIPLE",
    "PAYMENT_STATUSES",
    "PAYMENT_STATUS_COMPLETED",
    "PAYMENT_STATUS_FAILED",
    "PAYMENT_STATUS_PENDING",
    "RING_PATTERNS",
    "RowChange",
    "ToneConfig",
    "default_type_configs",
]

"""Realtime notification helpers for the infrastructure layer."""

from .audio_engine import ConsoleAudioEngine, encode_wav
from .manager import (
    CAPABILITY_NOTIFICATIONS,
    CAPABILITY_VIBRATE,
    CAPABILITY_WAKE_LOCK,
    PERMISSION_DEFAULT,
    PERMISSION_DENIED,
    PERMISSION_GRANTED,
    PERMISSION_UNSUPPORTED,
    ConsoleConnectionManager,
    ConsoleState,
)
from .publisher import (
    NotificationPublisher,
    normalize_json_values,
    serialize_notification,
)
from .realtime import ChangeCallback, RealtimeChangeFeed

__all__ = [
    "CAPABILITY_NOTIFICATIONS",
    "CAPABILITY_VIBRATE",
    "CAPABILITY_WAKE_LOCK",
    "ChangeCallback",
    "ConsoleAudioEngine",
    "ConsoleConnectionManager",
    "ConsoleState",
    "NotificationPublisher",
    "PERMISSION_DEFAULT",
    "PERMISSION_DENIED",
    "PERMISSION_GRANTED",
    "PERMISSION_UNSUPPORTED",
    "RealtimeChangeFeed",
    "encode_wav",
    "normalize_json_values",
    "serialize_notification",
]

"""Order alert services: records, routing, ringing and device alerts."""

from .device import DeviceAlertAdapter
from .order_events import OrderEventRouter, classify_insert, classify_update
from .orchestrator import AlertOrchestrator
from .records import MESSAGE_TEMPLATES, NotificationRecordService, build_message
from .ring_patterns import RingPatternEngine, RingSession
from .runtime import AlertRuntime
from .scheduling import AsyncioScheduler, RepeatingTask, Scheduler
from .settings_store import (
    DatabaseSettingsSource,
    DefaultSettingsSource,
    LocalFileSettingsSource,
    NotificationSettingsStore,
    SettingsSource,
)
from .tone import ToneSynthesizer, render_tone

__all__ = [
    "AlertOrchestrator",
    "AlertRuntime",
    "AsyncioScheduler",
    "DatabaseSettingsSource",
    "DefaultSettingsSource",
    "DeviceAlertAdapter",
    "LocalFileSettingsSource",
    "MESSAGE_TEMPLATES",
    "NotificationRecordService",
    "NotificationSettingsStore",
    "OrderEventRouter",
    "RepeatingTask",
    "RingPatternEngine",
    "RingSession",
    "Scheduler",
    "SettingsSource",
    "ToneSynthesizer",
    "build_message",
    "classify_insert",
    "classify_update",
    "render_tone",
]

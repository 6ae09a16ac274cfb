"""Process-wide wiring of the alert services."""

from __future__ import annotations

import logging
from typing import Callable

from sqlalchemy.orm import Session

from app.config import Settings
from app.infrastructure.notifications import (
    ConsoleAudioEngine,
    ConsoleConnectionManager,
    NotificationPublisher,
    RealtimeChangeFeed,
)

from .device import DeviceAlertAdapter
from .order_events import OrderEventRouter
from .orchestrator import AlertOrchestrator
from .records import NotificationRecordService
from .ring_patterns import RingPatternEngine
from .scheduling import Scheduler
from .settings_store import (
    DatabaseSettingsSource,
    DefaultSettingsSource,
    LocalFileSettingsSource,
    NotificationSettingsStore,
)
from .tone import ToneSynthesizer

logger = logging.getLogger(__name__)

PUBLISHER_LISTENER_ID = "console-publisher"


class AlertRuntime:
    """Build every alert service once and own their lifecycle."""

    def __init__(
        self,
        *,
        settings: Settings,
        session_factory: Callable[[], Session],
        feed: RealtimeChangeFeed,
        consoles: ConsoleConnectionManager,
        scheduler: Scheduler,
    ) -> None:
        self.consoles = consoles
        self.settings_store = NotificationSettingsStore(
            [
                DatabaseSettingsSource(session_factory, settings.settings_key),
                LocalFileSettingsSource(settings.settings_fallback_path),
                DefaultSettingsSource(),
            ]
        )
        self.records = NotificationRecordService(session_factory, self.settings_store, feed)
        self.router = OrderEventRouter(
            session_factory,
            self.records,
            feed,
            scheduler,
            reconciliation_interval=settings.reconciliation_interval_seconds,
        )
        self.synthesizer = ToneSynthesizer(
            lambda: ConsoleAudioEngine(consoles), sample_rate=settings.audio_sample_rate
        )
        self.ring_engine = RingPatternEngine(
            self.synthesizer, scheduler, continuous_gap=settings.continuous_ring_gap_seconds
        )
        self.device = DeviceAlertAdapter(
            consoles,
            scheduler,
            wake_lock_timeout=settings.wake_lock_timeout_seconds,
            notification_timeout=settings.browser_notification_timeout_seconds,
        )
        self.orchestrator = AlertOrchestrator(
            self.settings_store,
            self.records,
            self.ring_engine,
            self.device,
            scheduler,
            route_provider=consoles.active_routes,
            is_staff_route=consoles.is_staff_route,
            vibration_pattern=settings.vibration_pattern,
            vibration_repeat_seconds=settings.vibration_repeat_seconds,
            wake_lock_timeout=settings.wake_lock_timeout_seconds,
        )
        self.publisher = NotificationPublisher(consoles)
        self._started = False

    def start(self) -> None:
        if self._started:
            return
        self.settings_store.load()
        self.records.start()
        self.router.start()
        self.orchestrator.start()
        self.records.subscribe(PUBLISHER_LISTENER_ID, self.publisher.dispatch)
        self._started = True
        logger.info("Order alert services started")

    def shutdown(self) -> None:
        if not self._started:
            return
        self.orchestrator.shutdown()
        self.router.shutdown()
        self.records.shutdown()
        self.synthesizer.close()
        self._started = False
        logger.info("Order alert services stopped")


__all__ = ["AlertRuntime", "PUBLISHER_LISTENER_ID"]

"""Decide whether a new notification should make noise, and make it."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Sequence
from typing import Any, Callable

from app.domain.entities import (
    AUDIO_PATTERNS,
    NOTIFICATION_ORDER_CREATED,
    NOTIFICATION_PAYMENT_COMPLETED,
    PATTERN_CONTINUOUS,
    NotificationRecord,
    NotificationSettings,
    ToneConfig,
)

from .device import DeviceAlertAdapter
from .records import NotificationRecordService
from .ring_patterns import RingPatternEngine, RingSession
from .scheduling import RepeatingTask, Scheduler
from .settings_store import NotificationSettingsStore

logger = logging.getLogger(__name__)

RINGING_TYPES = frozenset({NOTIFICATION_ORDER_CREATED, NOTIFICATION_PAYMENT_COMPLETED})
DEFAULT_VIBRATION_PATTERN = (500, 200, 500, 200, 500, 200, 500)
NOTIFICATION_TITLES = {
    NOTIFICATION_ORDER_CREATED: "New order received",
    NOTIFICATION_PAYMENT_COMPLETED: "Payment completed",
}


class AlertOrchestrator:
    """Policy layer on top of the ring engine and the device adapter.

    Only records of a ringing type received while a staff console is on a
    staff route can ring. Each alert step runs on its own so a failing step
    never prevents the others.
    """

    LISTENER_ID = "alert-orchestrator"

    def __init__(
        self,
        settings_store: NotificationSettingsStore,
        records: NotificationRecordService,
        ring_engine: RingPatternEngine,
        device: DeviceAlertAdapter,
        scheduler: Scheduler,
        *,
        route_provider: Callable[[], Iterable[str]],
        is_staff_route: Callable[[str], bool],
        vibration_pattern: Sequence[int] = DEFAULT_VIBRATION_PATTERN,
        vibration_repeat_seconds: float = 3.0,
        wake_lock_timeout: float = 60.0,
        history_size: int = 256,
    ) -> None:
        self._settings_store = settings_store
        self._records = records
        self._ring_engine = ring_engine
        self._device = device
        self._scheduler = scheduler
        self._route_provider = route_provider
        self._is_staff_route = is_staff_route
        self._vibration_pattern = list(vibration_pattern)
        self._vibration_repeat_seconds = vibration_repeat_seconds
        self._wake_lock_timeout = wake_lock_timeout
        self._session: RingSession | None = None
        self._vibration_task: RepeatingTask | None = None
        self._seen_order: deque[str] = deque(maxlen=history_size)
        self._seen: set[str] = set()

    def start(self) -> None:
        self._records.subscribe(self.LISTENER_ID, self.handle_record)
        self._records.subscribe_cleared(self.LISTENER_ID, self._on_unread_cleared)

    def shutdown(self) -> None:
        self._records.unsubscribe(self.LISTENER_ID)
        self._records.unsubscribe_cleared(self.LISTENER_ID)
        self.stop_ringing()
        self._device.shutdown()

    def handle_record(self, record: NotificationRecord) -> bool:
        """React to a newly inserted record. Returns whether a ring started."""

        if record.notification_type not in RINGING_TYPES:
            return False
        if record.id is not None:
            if record.id in self._seen:
                logger.debug("Notification %s already alerted", record.id)
                return False
            self._remember(record.id)
        if not self.staff_route_active():
            logger.info("No staff console on a staff route; alert for %s suppressed", record.id)
            return False
        settings = self._settings_store.get()
        if not settings.enabled:
            logger.info("Alerts disabled; %s not announced", record.id)
            return False

        started = bool(self._run_step("ring", self._start_ring, settings, record))
        if settings.vibration_enabled:
            self._run_step("vibration", self._start_vibration)
        if settings.browser_notification_enabled:
            self._run_step(
                "browser notification",
                self._device.show_browser_notification,
                NOTIFICATION_TITLES.get(record.notification_type, "Order alert"),
                record.message,
                require_interaction=settings.type_config(
                    record.notification_type
                ).persistent_notification,
            )
        self._run_step("wake lock", self._device.request_wake_lock, self._wake_lock_timeout)
        return started

    def stop_ringing(self) -> bool:
        """Stop ringing and vibration. Safe to call when nothing rings."""

        was_ringing = self.is_currently_ringing()
        if self._session is not None:
            self._session.stop()
            self._session = None
        vibrating = self._vibration_task is not None
        if self._vibration_task is not None:
            self._vibration_task.cancel()
            self._vibration_task = None
        if vibrating:
            self._run_step("vibration stop", self._device.vibrate, [0])
        self._run_step("wake lock release", self._device.release_wake_lock)
        if was_ringing:
            logger.info("Ringing stopped")
        return was_ringing

    def is_currently_ringing(self) -> bool:
        return self._session is not None and self._session.is_ringing

    def get_ring_count(self) -> int:
        if self._session is None:
            return 0
        return self._session.current_repeat_count()

    def staff_route_active(self) -> bool:
        return any(self._is_staff_route(route) for route in self._route_provider())

    def test_sound(self, notification_type: str = NOTIFICATION_ORDER_CREATED) -> RingSession | None:
        """Play one repetition of the pattern configured for ``notification_type``."""

        audio = AUDIO_PATTERNS.get(notification_type)
        if audio is None:
            msg = f"Unknown notification type '{notification_type}'"
            raise ValueError(msg)
        settings = self._settings_store.get()
        return self._run_step(
            "test sound",
            self._ring_engine.play_pattern,
            audio.pattern,
            audio.tone,
            settings.ring_interval,
            1,
            sound_url=self._custom_sound_url(settings),
        )

    def _start_ring(self, settings: NotificationSettings, record: NotificationRecord) -> bool:
        type_config = settings.type_config(record.notification_type)
        if not (settings.sound_enabled and type_config.sound_enabled):
            logger.info("Sound disabled for %s", record.notification_type)
            return False
        if self.is_currently_ringing():
            logger.info("Already ringing; %s joins the active ring", record.id)
            return False
        audio = AUDIO_PATTERNS.get(record.notification_type, AUDIO_PATTERNS[NOTIFICATION_ORDER_CREATED])
        tone = ToneConfig(audio.tone.frequency, settings.ring_duration, audio.tone.volume)
        self._session = self._ring_engine.play_pattern(
            PATTERN_CONTINUOUS,
            tone,
            settings.ring_interval,
            settings.max_rings,
            sound_url=self._custom_sound_url(settings),
        )
        logger.info("Ringing for %s notification %s", record.notification_type, record.id)
        return True

    def _start_vibration(self) -> bool:
        if self._vibration_task is not None:
            self._vibration_task.cancel()
        vibrated = self._device.vibrate(self._vibration_pattern)
        if self.is_currently_ringing():
            self._vibration_task = RepeatingTask(
                self._scheduler,
                self._vibration_repeat_seconds,
                self._vibrate_while_ringing,
                initial_delay=self._vibration_repeat_seconds,
            ).start()
        return vibrated

    def _vibrate_while_ringing(self) -> None:
        if not self.is_currently_ringing():
            if self._vibration_task is not None:
                self._vibration_task.cancel()
                self._vibration_task = None
            return
        self._device.vibrate(self._vibration_pattern)

    def _on_unread_cleared(self) -> None:
        if self.is_currently_ringing():
            logger.info("All notifications read; stopping the ring")
        self.stop_ringing()

    def _remember(self, record_id: str) -> None:
        if len(self._seen_order) == self._seen_order.maxlen:
            self._seen.discard(self._seen_order[0])
        self._seen_order.append(record_id)
        self._seen.add(record_id)

    @staticmethod
    def _custom_sound_url(settings: NotificationSettings) -> str | None:
        if settings.custom_notification_sound and settings.notification_sound_url:
            return settings.notification_sound_url
        return None

    @staticmethod
    def _run_step(name: str, step: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return step(*args, **kwargs)
        except Exception:
            logger.exception("Alert step '%s' failed", name)
            return None


__all__ = ["AlertOrchestrator", "DEFAULT_VIBRATION_PATTERN", "RINGING_TYPES"]

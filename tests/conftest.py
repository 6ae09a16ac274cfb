"""Shared fixtures: in-memory database, virtual clock and recording consoles."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.application.alerts import (
    DatabaseSettingsSource,
    DefaultSettingsSource,
    NotificationSettingsStore,
)
from app.infrastructure import models  # noqa: F401
from app.infrastructure.database import Base
from app.infrastructure.notifications import (
    ConsoleConnectionManager,
    ConsoleState,
    RealtimeChangeFeed,
)

STAFF_ROUTES = ("/admin", "/orders", "/order-dashboard")


class ManualTimer:
    def __init__(self, when: float, sequence: int, callback: Callable[[], None]) -> None:
        self.when = when
        self.sequence = sequence
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler driven by :meth:`advance` instead of wall-clock time."""

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: list[ManualTimer] = []
        self._sequence = 0

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now + max(delay, 0.0), self._sequence, callback)
        self._sequence += 1
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> list[ManualTimer]:
        return [timer for timer in self._timers if not timer.cancelled]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [
                timer
                for timer in self._timers
                if not timer.cancelled and timer.when <= target + 1e-9
            ]
            if not due:
                break
            timer = min(due, key=lambda item: (item.when, item.sequence))
            self._timers.remove(timer)
            self.now = max(self.now, timer.when)
            timer.callback()
        self._timers = [timer for timer in self._timers if not timer.cancelled]
        self.now = target


class RecordingConsoles(ConsoleConnectionManager):
    """Connection manager that records dispatched messages instead of sending."""

    def __init__(self) -> None:
        super().__init__(STAFF_ROUTES)
        self.sent: list[tuple[str, dict[str, Any]]] = []

    def dispatch(self, console_ids, message) -> None:
        for console_id in dict.fromkeys(console_ids):
            self.sent.append((console_id, dict(message)))

    def add(
        self,
        route: str = "/admin",
        *,
        vibrate: bool = True,
        wake_lock: bool = True,
        notifications: str = "granted",
        audio_unlocked: bool = True,
    ) -> ConsoleState:
        console = self.register(
            object(),
            route=route,
            capabilities={
                "vibrate": vibrate,
                "wakeLock": wake_lock,
                "notifications": notifications,
            },
        )
        if audio_unlocked:
            self.mark_audio_unlocked(console.console_id)
        return console

    def messages(self, message_type: str) -> list[tuple[str, dict[str, Any]]]:
        return [(console_id, message) for console_id, message in self.sent if message["type"] == message_type]


class RecordingSynthesizer:
    """Stand-in for the tone synthesizer that remembers when tones played."""

    def __init__(self, scheduler: ManualScheduler) -> None:
        self._scheduler = scheduler
        self.tones: list[tuple[float, float, float, float]] = []
        self.sounds: list[tuple[float, str]] = []

    def play_tone(self, frequency: float, duration: float, volume: float) -> bool:
        self.tones.append((self._scheduler.now, frequency, duration, volume))
        return True

    def play_sound(self, url: str, volume: float, fallback) -> bool:
        self.sounds.append((self._scheduler.now, url))
        return True

    def start_times(self) -> list[float]:
        return [round(start, 6) for start, *_ in self.tones]


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def synthesizer(scheduler: ManualScheduler) -> RecordingSynthesizer:
    return RecordingSynthesizer(scheduler)


@pytest.fixture()
def consoles() -> RecordingConsoles:
    return RecordingConsoles()


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture()
def feed(session_factory) -> RealtimeChangeFeed:
    change_feed = RealtimeChangeFeed()
    change_feed.attach(session_factory)
    yield change_feed
    change_feed.detach()


@pytest.fixture()
def settings_store(session_factory) -> NotificationSettingsStore:
    store = NotificationSettingsStore(
        [
            DatabaseSettingsSource(session_factory, "phoneNotificationSettings"),
            DefaultSettingsSource(),
        ]
    )
    store.load()
    return store

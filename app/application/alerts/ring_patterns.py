"""Ring patterns built from repeated tones."""

from __future__ import annotations

import logging
from typing import Callable

from app.domain.entities import (
    PATTERN_CONTINUOUS,
    PATTERN_DOUBLE,
    PATTERN_SINGLE,
    PATTERN_TRIPLE,
    RING_PATTERNS,
    ToneConfig,
)

from .scheduling import RepeatingTask, Scheduler, TimerHandle
from .tone import ToneSynthesizer

logger = logging.getLogger(__name__)

DEFAULT_CONTINUOUS_GAP = 0.1


def pattern_tones(pattern: str, duration: float) -> tuple[tuple[float, float], ...]:
    """Return ``(offset, tone_duration)`` pairs for one repetition of ``pattern``."""

    if pattern == PATTERN_DOUBLE:
        return ((0.0, duration * 0.4), (duration * 0.6, duration * 0.4))
    if pattern == PATTERN_TRIPLE:
        return (
            (0.0, duration * 0.3),
            (duration * 0.4, duration * 0.3),
            (duration * 0.8, duration * 0.3),
        )
    if pattern in (PATTERN_SINGLE, PATTERN_CONTINUOUS):
        return ((0.0, duration),)
    msg = f"Unknown ring pattern '{pattern}'"
    raise ValueError(msg)


def repetition_length(pattern: str, duration: float) -> float:
    return max(offset + length for offset, length in pattern_tones(pattern, duration))


class RingSession:
    """One run of a ring pattern, from start until stopped or exhausted."""

    def __init__(
        self,
        scheduler: Scheduler,
        synthesizer: ToneSynthesizer,
        *,
        pattern: str,
        tone: ToneConfig,
        interval: float,
        max_repeats: int,
        continuous_gap: float = DEFAULT_CONTINUOUS_GAP,
        sound_url: str | None = None,
        on_finish: Callable[["RingSession"], None] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._synthesizer = synthesizer
        self.pattern = pattern
        self.tone = tone
        self._tones = pattern_tones(pattern, tone.duration)
        self._sound_url = sound_url
        self._on_finish = on_finish
        self._pending: dict[int, TimerHandle] = {}
        self._next_timer_id = 0
        self._repeat_count = 0
        self._tone_count = 0
        self._ringing = False

        if pattern == PATTERN_CONTINUOUS:
            self._task = RepeatingTask(
                scheduler, tone.duration + continuous_gap, self._play_repetition
            )
        else:
            self._task = RepeatingTask(
                scheduler,
                repetition_length(pattern, tone.duration) + max(interval, 0.0),
                self._play_repetition,
                max_runs=max(int(max_repeats), 1),
                on_complete=self._schedule_finish,
            )

    @property
    def is_ringing(self) -> bool:
        return self._ringing

    @property
    def tone_count(self) -> int:
        return self._tone_count

    def current_repeat_count(self) -> int:
        return self._repeat_count

    def start(self) -> "RingSession":
        self._ringing = True
        self._task.start()
        return self

    def stop(self) -> bool:
        """Cancel every pending timer. Returns whether the session was ringing."""

        was_ringing = self._ringing
        self._ringing = False
        self._task.cancel()
        for handle in self._pending.values():
            handle.cancel()
        self._pending.clear()
        if was_ringing and self._on_finish is not None:
            self._on_finish(self)
        return was_ringing

    def _play_repetition(self) -> None:
        self._repeat_count += 1
        for offset, length in self._tones:
            if offset <= 0:
                self._play_tone(length)
            else:
                self._call_later(offset, lambda length=length: self._play_tone(length))

    def _play_tone(self, length: float) -> None:
        if not self._ringing:
            return
        self._tone_count += 1
        if self._sound_url:
            fallback = ToneConfig(self.tone.frequency, length, self.tone.volume)
            self._synthesizer.play_sound(self._sound_url, self.tone.volume, fallback)
        else:
            self._synthesizer.play_tone(self.tone.frequency, length, self.tone.volume)

    def _schedule_finish(self) -> None:
        self._call_later(repetition_length(self.pattern, self.tone.duration), self._finish)

    def _finish(self) -> None:
        if not self._ringing:
            return
        self._ringing = False
        self._pending.clear()
        logger.debug(
            "%s ring finished after %d repetitions", self.pattern, self._repeat_count
        )
        if self._on_finish is not None:
            self._on_finish(self)

    def _call_later(self, delay: float, callback: Callable[[], None]) -> None:
        timer_id = self._next_timer_id
        self._next_timer_id += 1

        def fire() -> None:
            self._pending.pop(timer_id, None)
            callback()

        self._pending[timer_id] = self._scheduler.call_later(delay, fire)


class RingPatternEngine:
    """Start ring sessions, keeping at most one active at a time.

    A new session preempts the active one.
    """

    def __init__(
        self,
        synthesizer: ToneSynthesizer,
        scheduler: Scheduler,
        *,
        continuous_gap: float = DEFAULT_CONTINUOUS_GAP,
    ) -> None:
        self._synthesizer = synthesizer
        self._scheduler = scheduler
        self._continuous_gap = continuous_gap
        self._active: RingSession | None = None

    def play_pattern(
        self,
        pattern: str,
        tone: ToneConfig,
        interval: float,
        max_repeats: int,
        *,
        sound_url: str | None = None,
    ) -> RingSession:
        if pattern not in RING_PATTERNS:
            msg = f"Unknown ring pattern '{pattern}'"
            raise ValueError(msg)
        if self._active is not None:
            logger.info("Preempting active %s ring", self._active.pattern)
            self.stop()
        session = RingSession(
            self._scheduler,
            self._synthesizer,
            pattern=pattern,
            tone=tone,
            interval=interval,
            max_repeats=max_repeats,
            continuous_gap=self._continuous_gap,
            sound_url=sound_url,
            on_finish=self._session_finished,
        )
        self._active = session
        session.start()
        return session

    def stop(self) -> bool:
        session = self._active
        self._active = None
        if session is None:
            return False
        return session.stop()

    def _session_finished(self, session: RingSession) -> None:
        if self._active is session:
            self._active = None


__all__ = [
    "RingPatternEngine",
    "RingSession",
    "pattern_tones",
    "repetition_length",
]

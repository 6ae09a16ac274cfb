"""Tone rendering and playback on the console audio engine."""

from __future__ import annotations

import logging
from typing import Callable, Protocol

import numpy as np

from app.domain.entities import ToneConfig

logger = logging.getLogger(__name__)

ATTACK_SECONDS = 0.01
SILENCE_LEVEL = 0.001
DEFAULT_SAMPLE_RATE = 22050


class AudioEngine(Protocol):
    @property
    def state(self) -> str: ...

    def resume(self) -> bool: ...

    def play(self, samples: np.ndarray, sample_rate: int) -> bool: ...

    def play_url(self, url: str, volume: float) -> bool: ...

    def close(self) -> None: ...


def render_tone(
    frequency: float, duration: float, volume: float, sample_rate: int
) -> np.ndarray:
    """Return a sine tone with a 10 ms linear attack and an exponential decay.

    The envelope reaches ``volume`` at the end of the attack and decays to
    near silence at ``duration``.
    """

    count = max(int(round(duration * sample_rate)), 1)
    volume = min(max(float(volume), 0.0), 1.0)
    timeline = np.arange(count, dtype=np.float64) / sample_rate
    if volume == 0.0:
        return np.zeros(count, dtype=np.float64)

    attack = min(ATTACK_SECONDS, duration)
    floor = min(SILENCE_LEVEL, volume)
    envelope = np.empty(count, dtype=np.float64)
    rising = timeline < attack
    envelope[rising] = volume * timeline[rising] / attack
    decay_span = max(duration - attack, 1e-6)
    progress = (timeline[~rising] - attack) / decay_span
    envelope[~rising] = volume * np.power(floor / volume, progress)
    return np.sin(2 * np.pi * frequency * timeline) * envelope


class ToneSynthesizer:
    """Play tones through a lazily created audio engine.

    Playback never raises: failures are logged and reported as ``False``.
    """

    def __init__(
        self,
        engine_factory: Callable[[], AudioEngine],
        *,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
    ) -> None:
        self._engine_factory = engine_factory
        self._sample_rate = sample_rate
        self._engine: AudioEngine | None = None

    @property
    def engine(self) -> AudioEngine | None:
        return self._engine

    def play_tone(self, frequency: float, duration: float, volume: float) -> bool:
        try:
            engine = self._ready_engine()
            samples = render_tone(frequency, duration, volume, self._sample_rate)
            return bool(engine.play(samples, self._sample_rate))
        except Exception:
            logger.exception("Failed to play %.0f Hz tone", frequency)
            return False

    def play_sound(self, url: str, volume: float, fallback: ToneConfig) -> bool:
        """Play the audio asset at ``url``, or ``fallback`` if that fails."""

        try:
            engine = self._ready_engine()
            if engine.play_url(url, volume):
                return True
        except Exception:
            logger.exception("Failed to play custom sound %s", url)
        return self.play_tone(fallback.frequency, fallback.duration, fallback.volume)

    def close(self) -> None:
        if self._engine is None:
            return
        try:
            self._engine.close()
        except Exception:
            logger.exception("Failed to close audio engine")
        self._engine = None

    def _ready_engine(self) -> AudioEngine:
        if self._engine is None:
            self._engine = self._engine_factory()
        if self._engine.state == "suspended":
            self._engine.resume()
        return self._engine


__all__ = ["AudioEngine", "ToneSynthesizer", "render_tone"]

"""Audio output that plays rendered tones on unlocked staff consoles."""

from __future__ import annotations

import base64
import io
import logging
import wave

import numpy as np

from .manager import ConsoleConnectionManager

logger = logging.getLogger(__name__)

STATE_RUNNING = "running"
STATE_SUSPENDED = "suspended"
STATE_CLOSED = "closed"


class ConsoleAudioEngine:
    """Send PCM tones to the consoles whose audio was unlocked by a user gesture.

    Browsers keep audio suspended until the page receives an interaction, so the
    engine is ``suspended`` while no staff console has reported
    ``audio.unlocked``.
    """

    def __init__(self, consoles: ConsoleConnectionManager) -> None:
        self._consoles = consoles
        self._closed = False

    @property
    def state(self) -> str:
        if self._closed:
            return STATE_CLOSED
        return STATE_RUNNING if self._unlocked_console_ids() else STATE_SUSPENDED

    def resume(self) -> bool:
        """Ask locked staff consoles to unlock audio on their next interaction."""

        if self._closed:
            return False
        locked = [
            console.console_id
            for console in self._consoles.staff_consoles()
            if not console.audio_unlocked
        ]
        if locked:
            self._consoles.dispatch(locked, {"type": "audio.resume"})
        return self.state == STATE_RUNNING

    def play(self, samples: np.ndarray, sample_rate: int) -> bool:
        targets = self._unlocked_console_ids()
        if self._closed or not targets:
            logger.debug("No unlocked staff console; tone skipped")
            return False
        message = {
            "type": "audio.tone",
            "data": {
                "sampleRate": sample_rate,
                "durationSeconds": round(len(samples) / sample_rate, 3),
                "wav": encode_wav(samples, sample_rate),
            },
        }
        self._consoles.dispatch(targets, message)
        return True

    def play_url(self, url: str, volume: float) -> bool:
        targets = self._unlocked_console_ids()
        if self._closed or not targets:
            return False
        message = {"type": "audio.sound", "data": {"url": url, "volume": volume}}
        self._consoles.dispatch(targets, message)
        return True

    def close(self) -> None:
        self._closed = True

    def _unlocked_console_ids(self) -> list[str]:
        return [
            console.console_id
            for console in self._consoles.staff_consoles()
            if console.audio_unlocked
        ]


def encode_wav(samples: np.ndarray, sample_rate: int) -> str:
    """Return ``samples`` (floats in ``-1..1``) as a base64 mono 16-bit WAV."""

    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype("<i2")
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as writer:
        writer.setnchannels(1)
        writer.setsampwidth(2)
        writer.setframerate(sample_rate)
        writer.writeframes(pcm.tobytes())
    return base64.b64encode(buffer.getvalue()).decode("ascii")


__all__ = [
    "ConsoleAudioEngine",
    "STATE_CLOSED",
    "STATE_RUNNING",
    "STATE_SUSPENDED",
    "encode_wav",
]

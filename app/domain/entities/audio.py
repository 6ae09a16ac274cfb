"""Audio patterns used to ring for each notification type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .notification import (
    NOTIFICATION_ORDER_CANCELLED,
    NOTIFICATION_ORDER_CREATED,
    NOTIFICATION_ORDER_PAID,
    NOTIFICATION_ORDER_UPDATED,
    NOTIFICATION_PAYMENT_COMPLETED,
    NOTIFICATION_PAYMENT_FAILED,
)

PATTERN_SINGLE: Final[str] = "single"
PATTERN_DOUBLE: Final[str] = "double"
PATTERN_TRIPLE: Final[str] = "triple"
PATTERN_CONTINUOUS: Final[str] = "continuous"

RING_PATTERNS: Final[tuple[str, ...]] = (
    PATTERN_SINGLE,
    PATTERN_DOUBLE,
    PATTERN_TRIPLE,
    PATTERN_CONTINUOUS,
)


@dataclass(frozen=True)
class ToneConfig:
    """A single tone: frequency in Hz, duration in seconds, volume in ``0..1``."""

    frequency: float
    duration: float
    volume: float


@dataclass(frozen=True)
class AudioPattern:
    """Tone and ring pattern associated with a notification type."""

    tone: ToneConfig
    pattern: str


AUDIO_PATTERNS: Final[dict[str, AudioPattern]] = {
    NOTIFICATION_ORDER_CREATED: AudioPattern(ToneConfig(800, 0.5, 0.7), PATTERN_TRIPLE),
    NOTIFICATION_ORDER_PAID: AudioPattern(ToneConfig(1000, 0.3, 0.8), PATTERN_DOUBLE),
    NOTIFICATION_ORDER_UPDATED: AudioPattern(ToneConfig(600, 0.2, 0.5), PATTERN_SINGLE),
    NOTIFICATION_ORDER_CANCELLED: AudioPattern(ToneConfig(400, 0.8, 0.6), PATTERN_SINGLE),
    NOTIFICATION_PAYMENT_FAILED: AudioPattern(
        ToneConfig(300, 1.0, 0.7), PATTERN_CONTINUOUS
    ),
    NOTIFICATION_PAYMENT_COMPLETED: AudioPattern(
        ToneConfig(1200, 0.4, 0.8), PATTERN_SINGLE
    ),
}


__all__ = [
    "AUDIO_PATTERNS",
    "AudioPattern",
    "PATTERN_CONTINUOUS",
    "PATTERN_DOUBLE",
    "PATTERN_SINGLE",
    "PATTERN_TRIPLE",
    "RING_PATTERNS",
    "ToneConfig",
]

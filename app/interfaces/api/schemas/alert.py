"""Pydantic models for the ringing controls and alert preferences."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.domain.entities import NOTIFICATION_ORDER_CREATED


class AlertStatusRead(BaseModel):
    """Polled by the admin pages to render the ringing banner."""

    ringing: bool
    ring_count: int
    unread: int
    staff_consoles: int
    audio_state: str
    wake_lock_held: bool = False
    last_reconciled_at: datetime | None = None
    settings_source: str | None = None


class AlertStopResponse(BaseModel):
    stopped: bool


class TestSoundRequest(BaseModel):
    notification_type: str = Field(
        default=NOTIFICATION_ORDER_CREATED,
        description="Notification type whose audio pattern is played",
    )


class TestSoundResponse(BaseModel):
    played: bool
    pattern: str | None = None


class CustomSoundRequest(BaseModel):
    url: str = Field(..., min_length=1, description="Address of the ring tone asset")
    name: str = Field(..., min_length=1, description="Name shown in the admin settings")


class SettingsResponse(BaseModel):
    """Current preferences in their camelCase persisted shape."""

    settings: dict[str, Any]
    persisted: bool = True


__all__ = [
    "AlertStatusRead",
    "AlertStopResponse",
    "CustomSoundRequest",
    "SettingsResponse",
    "TestSoundRequest",
    "TestSoundResponse",
]

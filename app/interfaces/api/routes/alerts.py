"""Ringing controls and alert preferences for the admin pages."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import ValidationError

from app.application.alerts import AlertRuntime
from app.domain.entities import AUDIO_PATTERNS
from app.interfaces.api.dependencies import get_alert_runtime
from app.interfaces.api.schemas import (
    AlertStatusRead,
    AlertStopResponse,
    CustomSoundRequest,
    SettingsResponse,
    TestSoundRequest,
    TestSoundResponse,
)

router = APIRouter(prefix="/alerts", tags=["alerts"])


def _settings_response(runtime: AlertRuntime, persisted: bool = True) -> SettingsResponse:
    return SettingsResponse(
        settings=runtime.settings_store.get().to_payload(), persisted=persisted
    )


# Ring state and preferences live on the event loop, so every handler here is a coroutine.
@router.get("/status", response_model=AlertStatusRead)
async def get_alert_status(
    runtime: AlertRuntime = Depends(get_alert_runtime),
) -> AlertStatusRead:
    engine = runtime.synthesizer.engine
    return AlertStatusRead(
        ringing=runtime.orchestrator.is_currently_ringing(),
        ring_count=runtime.orchestrator.get_ring_count(),
        unread=runtime.records.count_unread(),
        staff_consoles=len(runtime.consoles.staff_consoles()),
        audio_state=engine.state if engine is not None else "uninitialized",
        wake_lock_held=runtime.device.wake_lock_held,
        last_reconciled_at=runtime.router.last_checked,
        settings_source=runtime.settings_store.loaded_from,
    )


@router.post("/stop", response_model=AlertStopResponse)
async def stop_ringing(
    runtime: AlertRuntime = Depends(get_alert_runtime),
) -> AlertStopResponse:
    return AlertStopResponse(stopped=runtime.orchestrator.stop_ringing())


@router.post("/test-sound", response_model=TestSoundResponse)
async def test_sound(
    payload: TestSoundRequest | None = None,
    runtime: AlertRuntime = Depends(get_alert_runtime),
) -> TestSoundResponse:
    notification_type = (payload or TestSoundRequest()).notification_type
    if notification_type not in AUDIO_PATTERNS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown notification type '{notification_type}'",
        )
    session = runtime.orchestrator.test_sound(notification_type)
    return TestSoundResponse(
        played=session is not None and session.tone_count > 0,
        pattern=session.pattern if session is not None else None,
    )


@router.get("/settings", response_model=SettingsResponse)
async def get_alert_settings(
    runtime: AlertRuntime = Depends(get_alert_runtime),
) -> SettingsResponse:
    return _settings_response(runtime)


@router.put("/settings", response_model=SettingsResponse)
async def update_alert_settings(
    payload: dict[str, Any] = Body(...),
    runtime: AlertRuntime = Depends(get_alert_runtime),
) -> SettingsResponse:
    """Merge a partial camelCase or snake_case document into the preferences."""

    try:
        runtime.settings_store.get().merged(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc
    persisted = runtime.settings_store.update(payload)
    return _settings_response(runtime, persisted)


@router.put("/settings/sound", response_model=SettingsResponse)
async def set_custom_sound(
    payload: CustomSoundRequest,
    runtime: AlertRuntime = Depends(get_alert_runtime),
) -> SettingsResponse:
    persisted = runtime.settings_store.set_custom_sound(payload.url, payload.name)
    return _settings_response(runtime, persisted)


@router.delete("/settings/sound", response_model=SettingsResponse)
async def reset_custom_sound(
    runtime: AlertRuntime = Depends(get_alert_runtime),
) -> SettingsResponse:
    persisted = runtime.settings_store.reset_to_default_sound()
    return _settings_response(runtime, persisted)

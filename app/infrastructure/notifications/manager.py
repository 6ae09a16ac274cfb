"""Connection management for staff console websockets."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from anyio import from_thread
from fastapi import WebSocket

logger = logging.getLogger(__name__)

PERMISSION_GRANTED = "granted"
PERMISSION_DENIED = "denied"
PERMISSION_DEFAULT = "default"
PERMISSION_UNSUPPORTED = "unsupported"

CAPABILITY_VIBRATE = "vibrate"
CAPABILITY_WAKE_LOCK = "wakeLock"
CAPABILITY_NOTIFICATIONS = "notifications"


@dataclass
class ConsoleState:
    """What a connected browser tab reported about itself."""

    console_id: str
    websocket: Any
    route: str = "/"
    capabilities: dict[str, bool] = field(default_factory=dict)
    notification_permission: str = PERMISSION_UNSUPPORTED
    permission_prompted: bool = False
    audio_unlocked: bool = False

    def supports(self, capability: str) -> bool:
        if capability == CAPABILITY_NOTIFICATIONS:
            return self.notification_permission != PERMISSION_UNSUPPORTED
        return bool(self.capabilities.get(capability))


class ConsoleConnectionManager:
    """Track connected consoles, their current route and device capabilities."""

    def __init__(self, staff_route_prefixes: Iterable[str]) -> None:
        self._staff_route_prefixes = tuple(staff_route_prefixes)
        self._consoles: dict[str, ConsoleState] = {}

    async def connect(self, websocket: WebSocket) -> ConsoleState:
        """Accept the websocket connection and register it as a console."""

        await websocket.accept()
        return self.register(websocket)

    def register(
        self,
        websocket: Any,
        *,
        route: str = "/",
        capabilities: Mapping[str, Any] | None = None,
    ) -> ConsoleState:
        console = ConsoleState(console_id=uuid4().hex, websocket=websocket)
        self._consoles[console.console_id] = console
        self.apply_hello(console.console_id, {"route": route, "capabilities": capabilities or {}})
        return console

    def disconnect(self, console_id: str) -> None:
        self._consoles.pop(console_id, None)

    def get(self, console_id: str) -> ConsoleState | None:
        return self._consoles.get(console_id)

    def apply_hello(self, console_id: str, payload: Mapping[str, Any]) -> None:
        """Store the route and capabilities announced by a console."""

        console = self._consoles.get(console_id)
        if console is None:
            return
        route = payload.get("route")
        if isinstance(route, str) and route:
            console.route = route
        capabilities = payload.get("capabilities")
        if isinstance(capabilities, Mapping):
            permission = capabilities.get(CAPABILITY_NOTIFICATIONS)
            if isinstance(permission, str):
                console.notification_permission = permission
            elif permission is False:
                console.notification_permission = PERMISSION_UNSUPPORTED
            console.capabilities = {
                key: bool(value)
                for key, value in capabilities.items()
                if key != CAPABILITY_NOTIFICATIONS
            }
        if payload.get("audioUnlocked"):
            console.audio_unlocked = True

    def update_route(self, console_id: str, route: str) -> None:
        console = self._consoles.get(console_id)
        if console is not None and route:
            console.route = route

    def mark_audio_unlocked(self, console_id: str) -> None:
        console = self._consoles.get(console_id)
        if console is not None:
            console.audio_unlocked = True

    def set_notification_permission(self, console_id: str, permission: str) -> None:
        console = self._consoles.get(console_id)
        if console is not None:
            console.notification_permission = permission

    def is_staff_route(self, route: str) -> bool:
        return any(route.startswith(prefix) for prefix in self._staff_route_prefixes)

    def active_routes(self) -> list[str]:
        return [console.route for console in self._consoles.values()]

    def staff_consoles(self, capability: str | None = None) -> list[ConsoleState]:
        """Return consoles on staff routes, optionally filtered by capability."""

        consoles = [
            console
            for console in self._consoles.values()
            if self.is_staff_route(console.route)
        ]
        if capability is None:
            return consoles
        return [console for console in consoles if console.supports(capability)]

    async def send(self, console_id: str, message: dict[str, Any]) -> None:
        """Send ``message`` to the console identified by ``console_id``."""

        console = self._consoles.get(console_id)
        if console is None:
            return
        try:
            await console.websocket.send_json(message)
        except Exception:  # pragma: no cover - defensive cleanup
            logger.warning("Dropping console %s after a failed send", console_id)
            self.disconnect(console_id)

    def dispatch(self, console_ids: Iterable[str], message: dict[str, Any]) -> None:
        """Schedule ``message`` to be delivered to every console in ``console_ids``."""

        seen: set[str] = set()
        for console_id in console_ids:
            if console_id in seen:
                continue
            seen.add(console_id)
            self._schedule_send(console_id, dict(message))

    def _schedule_send(self, console_id: str, message: dict[str, Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self.send, console_id, message)
            except RuntimeError:
                logger.debug(
                    "No event loop available; message %s for console %s dropped",
                    message.get("type"),
                    console_id,
                )
        else:
            loop.create_task(self.send(console_id, message))


__all__ = [
    "CAPABILITY_NOTIFICATIONS",
    "CAPABILITY_VIBRATE",
    "CAPABILITY_WAKE_LOCK",
    "ConsoleConnectionManager",
    "ConsoleState",
    "PERMISSION_DEFAULT",
    "PERMISSION_DENIED",
    "PERMISSION_GRANTED",
    "PERMISSION_UNSUPPORTED",
]

"""Vibration, wake lock and desktop notifications on staff consoles."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from app.infrastructure.notifications import (
    CAPABILITY_NOTIFICATIONS,
    CAPABILITY_VIBRATE,
    CAPABILITY_WAKE_LOCK,
    PERMISSION_DEFAULT,
    PERMISSION_GRANTED,
    ConsoleConnectionManager,
)

from .scheduling import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_NOTIFICATION_TAG = "new-order"


class DeviceAlertAdapter:
    """Fire-and-forget device side effects.

    Every operation targets the staff consoles that reported the matching
    capability. Consoles without it are skipped, and no operation raises:
    each returns whether at least one console was instructed.
    """

    def __init__(
        self,
        consoles: ConsoleConnectionManager,
        scheduler: Scheduler,
        *,
        wake_lock_timeout: float = 60.0,
        notification_timeout: float = 10.0,
    ) -> None:
        self._consoles = consoles
        self._scheduler = scheduler
        self._wake_lock_timeout = wake_lock_timeout
        self._notification_timeout = notification_timeout
        self._wake_lock_holders: set[str] = set()
        self._wake_lock_release: TimerHandle | None = None
        self._notification_closers: dict[str, TimerHandle] = {}

    @property
    def wake_lock_held(self) -> bool:
        return bool(self._wake_lock_holders)

    def vibrate(self, pattern: Sequence[int]) -> bool:
        try:
            targets = [
                console.console_id
                for console in self._consoles.staff_consoles(CAPABILITY_VIBRATE)
            ]
            if not targets:
                return False
            message = {
                "type": "device.vibrate",
                "data": {"pattern": [int(value) for value in pattern]},
            }
            self._consoles.dispatch(targets, message)
            return True
        except Exception:
            logger.exception("Vibration request failed")
            return False

    def request_wake_lock(self, timeout: float | None = None) -> bool:
        """Keep console screens awake, releasing the lock after ``timeout`` seconds."""

        try:
            targets = [
                console.console_id
                for console in self._consoles.staff_consoles(CAPABILITY_WAKE_LOCK)
            ]
            if not targets:
                return False
            self._consoles.dispatch(
                targets, {"type": "device.wake_lock", "data": {"action": "acquire"}}
            )
            self._wake_lock_holders.update(targets)
            self._cancel_wake_lock_timer()
            self._wake_lock_release = self._scheduler.call_later(
                self._wake_lock_timeout if timeout is None else timeout,
                self._release_expired_wake_lock,
            )
            return True
        except Exception:
            logger.exception("Wake lock request failed")
            return False

    def release_wake_lock(self) -> bool:
        self._cancel_wake_lock_timer()
        if not self._wake_lock_holders:
            return False
        holders = sorted(self._wake_lock_holders)
        self._wake_lock_holders.clear()
        try:
            self._consoles.dispatch(
                holders, {"type": "device.wake_lock", "data": {"action": "release"}}
            )
            return True
        except Exception:
            logger.exception("Wake lock release failed")
            return False

    def show_browser_notification(
        self,
        title: str,
        body: str,
        *,
        tag: str = DEFAULT_NOTIFICATION_TAG,
        require_interaction: bool = True,
    ) -> bool:
        """Show a desktop notification, prompting for permission at most once."""

        try:
            shown: list[str] = []
            for console in self._consoles.staff_consoles(CAPABILITY_NOTIFICATIONS):
                permission = console.notification_permission
                if permission == PERMISSION_GRANTED:
                    request_permission = False
                elif permission == PERMISSION_DEFAULT and not console.permission_prompted:
                    console.permission_prompted = True
                    request_permission = True
                else:
                    continue
                self._consoles.dispatch(
                    [console.console_id],
                    {
                        "type": "device.notification",
                        "data": {
                            "title": title,
                            "body": body,
                            "tag": tag,
                            "requireInteraction": require_interaction,
                            "requestPermission": request_permission,
                            "focusOnClick": True,
                        },
                    },
                )
                shown.append(console.console_id)
            if not shown:
                return False
            self._schedule_close(tag, shown)
            return True
        except Exception:
            logger.exception("Browser notification failed")
            return False

    def shutdown(self) -> None:
        self.release_wake_lock()
        for handle in self._notification_closers.values():
            handle.cancel()
        self._notification_closers.clear()

    def _schedule_close(self, tag: str, console_ids: list[str]) -> None:
        previous = self._notification_closers.pop(tag, None)
        if previous is not None:
            previous.cancel()

        def close() -> None:
            self._notification_closers.pop(tag, None)
            self._consoles.dispatch(
                console_ids, {"type": "device.notification.close", "data": {"tag": tag}}
            )

        self._notification_closers[tag] = self._scheduler.call_later(
            self._notification_timeout, close
        )

    def _release_expired_wake_lock(self) -> None:
        self._wake_lock_release = None
        logger.debug("Wake lock timed out")
        self.release_wake_lock()

    def _cancel_wake_lock_timer(self) -> None:
        if self._wake_lock_release is not None:
            self._wake_lock_release.cancel()
            self._wake_lock_release = None


__all__ = ["DEFAULT_NOTIFICATION_TAG", "DeviceAlertAdapter"]

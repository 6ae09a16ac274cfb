"""Tests for vibration, wake lock and desktop notification commands."""

from __future__ import annotations

import pytest

from app.application.alerts import DeviceAlertAdapter


@pytest.fixture()
def device(consoles, scheduler) -> DeviceAlertAdapter:
    return DeviceAlertAdapter(
        consoles, scheduler, wake_lock_timeout=60.0, notification_timeout=10.0
    )


def test_vibrate_targets_only_capable_staff_consoles(device, consoles):
    capable = consoles.add("/admin")
    consoles.add("/admin", vibrate=False)
    consoles.add("/checkout")

    assert device.vibrate([500, 200, 500]) is True

    vibrations = consoles.messages("device.vibrate")
    assert [console_id for console_id, _ in vibrations] == [capable.console_id]
    assert vibrations[0][1]["data"]["pattern"] == [500, 200, 500]


def test_operations_without_capable_console_are_silent_noops(device, consoles):
    consoles.add("/", vibrate=True)

    assert device.vibrate([100]) is False
    assert device.request_wake_lock() is False
    assert device.show_browser_notification("New order", "Body") is False
    assert device.release_wake_lock() is False
    assert consoles.sent == []


def test_wake_lock_is_released_after_timeout(device, consoles, scheduler):
    console = consoles.add("/orders")

    assert device.request_wake_lock() is True
    assert device.wake_lock_held is True

    scheduler.advance(59)
    assert consoles.messages("device.wake_lock")[-1][1]["data"]["action"] == "acquire"

    scheduler.advance(1)
    last = consoles.messages("device.wake_lock")[-1]
    assert last == (console.console_id, {"type": "device.wake_lock", "data": {"action": "release"}})
    assert device.wake_lock_held is False


def test_explicit_release_cancels_timeout(device, consoles, scheduler):
    consoles.add("/admin")
    device.request_wake_lock(timeout=5)

    assert device.release_wake_lock() is True
    assert scheduler.pending == []
    assert len(consoles.messages("device.wake_lock")) == 2


def test_notification_is_closed_after_timeout(device, consoles, scheduler):
    console = consoles.add("/admin")

    assert device.show_browser_notification("New order", "New order #ORD-1", tag="new-order") is True

    shown = consoles.messages("device.notification")
    assert shown[0][1]["data"] == {
        "title": "New order",
        "body": "New order #ORD-1",
        "tag": "new-order",
        "requireInteraction": True,
        "requestPermission": False,
        "focusOnClick": True,
    }

    scheduler.advance(10)
    assert consoles.messages("device.notification.close") == [
        (console.console_id, {"type": "device.notification.close", "data": {"tag": "new-order"}})
    ]


def test_permission_is_prompted_once_and_never_after_denial(device, consoles):
    console = consoles.add("/admin", notifications="default")

    assert device.show_browser_notification("A", "first") is True
    assert consoles.messages("device.notification")[0][1]["data"]["requestPermission"] is True

    # The console never answered the prompt.
    assert device.show_browser_notification("B", "second") is False

    consoles.set_notification_permission(console.console_id, "denied")
    assert device.show_browser_notification("C", "third") is False
    assert len(consoles.messages("device.notification")) == 1


def test_unsupported_notifications_are_skipped(device, consoles):
    consoles.add("/admin", notifications="unsupported")
    assert device.show_browser_notification("A", "body") is False


def test_dispatch_failures_do_not_escape(device, consoles):
    consoles.add("/admin")

    def broken_dispatch(console_ids, message):
        raise RuntimeError("socket closed")

    consoles.dispatch = broken_dispatch

    assert device.vibrate([100]) is False
    assert device.request_wake_lock() is False
    assert device.show_browser_notification("A", "body") is False


def test_shutdown_releases_lock_and_cancels_pending_closes(device, consoles, scheduler):
    consoles.add("/admin")
    device.request_wake_lock()
    device.show_browser_notification("A", "body")

    device.shutdown()

    assert scheduler.pending == []
    assert device.wake_lock_held is False

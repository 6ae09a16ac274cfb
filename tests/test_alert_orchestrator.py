"""Tests for the ringing policy applied to new notifications."""

from __future__ import annotations

import pytest

from app.application.alerts import (
    AlertOrchestrator,
    DeviceAlertAdapter,
    NotificationRecordService,
    OrderEventRouter,
    RingPatternEngine,
)
from app.application.use_cases.orders import place_order
from app.domain.entities import NotificationRecord


@pytest.fixture()
def records(session_factory, settings_store, feed) -> NotificationRecordService:
    service = NotificationRecordService(session_factory, settings_store, feed)
    service.start()
    yield service
    service.shutdown()


@pytest.fixture()
def device(consoles, scheduler) -> DeviceAlertAdapter:
    return DeviceAlertAdapter(consoles, scheduler)


@pytest.fixture()
def ring_engine(synthesizer, scheduler) -> RingPatternEngine:
    return RingPatternEngine(synthesizer, scheduler, continuous_gap=0.1)


@pytest.fixture()
def orchestrator(settings_store, records, ring_engine, device, scheduler, consoles):
    alerts = AlertOrchestrator(
        settings_store,
        records,
        ring_engine,
        device,
        scheduler,
        route_provider=consoles.active_routes,
        is_staff_route=consoles.is_staff_route,
        vibration_repeat_seconds=3.0,
        wake_lock_timeout=60.0,
    )
    alerts.start()
    yield alerts
    alerts.shutdown()


def _record(record_id: str = "n-1", notification_type: str = "order_created") -> NotificationRecord:
    return NotificationRecord(
        id=record_id,
        order_id="order-1",
        message="New order #ORD-1 received from Mario",
        notification_type=notification_type,
        priority=5,
    )


def test_customer_page_never_rings(orchestrator, consoles, synthesizer):
    consoles.add("/checkout/success")

    assert orchestrator.handle_record(_record()) is False
    assert orchestrator.is_currently_ringing() is False
    assert synthesizer.tones == []
    assert consoles.sent == []


def test_staff_page_starts_exactly_one_continuous_session(orchestrator, consoles, synthesizer, scheduler):
    consoles.add("/admin/orders")

    assert orchestrator.handle_record(_record("n-1")) is True
    assert orchestrator.handle_record(_record("n-2")) is False

    scheduler.advance(3.1 * 5)
    assert orchestrator.is_currently_ringing() is True
    assert orchestrator.get_ring_count() == 6
    # Tone of the order_created type, lasting the configured ring duration.
    assert {(tone[1], tone[2], tone[3]) for tone in synthesizer.tones} == {(800, 3.0, 0.7)}


def test_new_order_end_to_end(orchestrator, session_factory, records, feed, scheduler, consoles, synthesizer):
    consoles.add("/admin")
    router = OrderEventRouter(session_factory, records, feed, scheduler)
    router.start()

    with session_factory() as session:
        place_order(
            session,
            order_number="ORD-1",
            customer_name="Mario",
            customer_email="mario@example.com",
            total_amount=35.0,
        )

    unread = records.list()
    assert [record.message for record in unread] == ["New order #ORD-1 received from Mario"]
    assert orchestrator.is_currently_ringing() is True
    assert len(synthesizer.tones) == 1
    assert consoles.messages("device.notification")[0][1]["data"]["tag"] == "new-order"
    router.shutdown()


def test_duplicate_delivery_alerts_once(orchestrator, consoles):
    consoles.add("/admin")

    orchestrator.handle_record(_record("n-1"))
    orchestrator.stop_ringing()
    consoles.sent.clear()

    assert orchestrator.handle_record(_record("n-1")) is False
    assert consoles.sent == []


def test_non_ringing_types_are_ignored(orchestrator, consoles):
    consoles.add("/admin")

    assert orchestrator.handle_record(_record(notification_type="order_cancelled")) is False
    assert consoles.sent == []


def test_payment_completed_rings_with_its_tone(orchestrator, consoles, synthesizer):
    consoles.add("/order-dashboard")

    assert orchestrator.handle_record(_record(notification_type="payment_completed")) is True
    assert synthesizer.tones[0][1] == 1200


def test_global_switch_suppresses_everything(orchestrator, consoles, settings_store, synthesizer):
    consoles.add("/admin")
    settings_store.update({"enabled": False})

    assert orchestrator.handle_record(_record()) is False
    assert synthesizer.tones == []
    assert consoles.sent == []


def test_sound_switch_only_silences_the_ring(orchestrator, consoles, settings_store, synthesizer):
    consoles.add("/admin")
    settings_store.update({"soundEnabled": False})

    assert orchestrator.handle_record(_record()) is False
    assert synthesizer.tones == []
    assert consoles.messages("device.vibrate")
    assert consoles.messages("device.notification")
    assert consoles.messages("device.wake_lock")


def test_vibration_repeats_while_ringing(orchestrator, consoles, scheduler):
    consoles.add("/admin")
    orchestrator.handle_record(_record())

    scheduler.advance(9)
    assert len(consoles.messages("device.vibrate")) == 4

    orchestrator.stop_ringing()
    stop = consoles.messages("device.vibrate")[-1][1]
    assert stop["data"]["pattern"] == [0]

    scheduler.advance(30)
    assert len(consoles.messages("device.vibrate")) == 5


def test_failing_step_does_not_block_the_others(orchestrator, consoles, device, synthesizer):
    consoles.add("/admin")

    def broken(*args, **kwargs):
        raise RuntimeError("vibration motor missing")

    device.vibrate = broken

    assert orchestrator.handle_record(_record()) is True
    assert len(synthesizer.tones) == 1
    assert consoles.messages("device.notification")
    assert consoles.messages("device.wake_lock")


def test_stop_ringing_when_idle_is_a_noop(orchestrator):
    assert orchestrator.stop_ringing() is False
    assert orchestrator.is_currently_ringing() is False
    assert orchestrator.get_ring_count() == 0


def test_stop_ringing_cancels_every_timer(orchestrator, consoles, scheduler, synthesizer):
    consoles.add("/admin", notifications="unsupported")
    orchestrator.handle_record(_record())
    scheduler.advance(1)

    assert orchestrator.stop_ringing() is True
    assert scheduler.pending == []

    played = len(synthesizer.tones)
    scheduler.advance(60)
    assert len(synthesizer.tones) == played
    assert consoles.messages("device.wake_lock")[-1][1]["data"]["action"] == "release"


def test_reading_all_notifications_stops_the_ring(orchestrator, records, consoles):
    from app.domain.entities import OrderEvent

    consoles.add("/admin")
    records.create(
        OrderEvent(
            notification_type="order_created",
            order_id=None,
            order_number="ORD-1",
            customer_name="Mario",
        )
    )
    assert orchestrator.is_currently_ringing() is True

    records.mark_all_read()

    assert orchestrator.is_currently_ringing() is False


def test_custom_sound_is_used_when_configured(orchestrator, consoles, settings_store, synthesizer):
    consoles.add("/admin")
    settings_store.set_custom_sound("https://cdn.example.com/bell.mp3", "Bell")

    orchestrator.handle_record(_record())

    assert synthesizer.sounds == [(0.0, "https://cdn.example.com/bell.mp3")]


def test_test_sound_plays_type_pattern_once(orchestrator, synthesizer, scheduler):
    session = orchestrator.test_sound("order_paid")
    scheduler.advance(10)

    assert session.pattern == "double"
    assert [tone[1] for tone in synthesizer.tones] == [1000, 1000]
    assert session.is_ringing is False

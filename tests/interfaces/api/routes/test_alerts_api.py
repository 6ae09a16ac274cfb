"""Integration tests for the notification, alert and order endpoints."""

from __future__ import annotations

import asyncio
from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[4]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from app.config import reset_settings_cache
from app.infrastructure.database import build_engine, initialize_database


@pytest.fixture()
def client(tmp_path, monkeypatch):
    """Return a test client bound to a fresh database file."""

    monkeypatch.setenv("SETTINGS_FALLBACK_PATH", str(tmp_path / "settings.json"))
    monkeypatch.setenv("RECONCILIATION_INTERVAL_SECONDS", "3600")
    reset_settings_cache()

    engine = build_engine(f"sqlite:///{tmp_path / 'alerts.db'}")
    initialize_database(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    from main import create_app

    app = create_app(session_factory=factory)
    with TestClient(app) as test_client:
        yield test_client
    engine.dispose()
    reset_settings_cache()


def _place_order(client: TestClient, number: str = "ORD-1", amount: float = 35.0) -> dict:
    response = client.post(
        "/orders/",
        json={
            "order_number": number,
            "customer_name": "Mario",
            "customer_email": "mario@example.com",
            "total_amount": amount,
        },
    )
    assert response.status_code == 201
    return response.json()


def test_order_lifecycle_creates_notifications(client: TestClient) -> None:
    order = _place_order(client, amount=48.0)

    response = client.get("/notifications/")
    assert response.status_code == 200
    notifications = response.json()
    assert [item["message"] for item in notifications] == ["New order #ORD-1 received from Mario"]

    response = client.patch(f"/orders/{order['id']}", json={"payment_status": "completed"})
    assert response.status_code == 200
    assert response.json()["payment_status"] == "completed"

    messages = [item["message"] for item in client.get("/notifications/").json()]
    assert messages[0] == "Payment of €48.00 completed for order #ORD-1"
    assert client.get("/notifications/count").json() == {"unread": 2}

    response = client.patch(f"/orders/{order['id']}", json={"notes": "Leave at the door"})
    assert response.status_code == 200
    assert client.get("/notifications/count").json() == {"unread": 2}


def test_order_validation_errors(client: TestClient) -> None:
    order = _place_order(client)

    assert client.patch(f"/orders/{order['id']}", json={"status": "shipped"}).status_code == 400
    assert client.patch("/orders/missing", json={"status": "accepted"}).status_code == 404
    duplicate = client.post(
        "/orders/",
        json={
            "order_number": "ORD-1",
            "customer_name": "Mario",
            "customer_email": "mario@example.com",
            "total_amount": 10,
        },
    )
    assert duplicate.status_code == 409
    assert [item["order_number"] for item in client.get("/orders/").json()] == ["ORD-1"]


def test_notification_read_and_delete(client: TestClient) -> None:
    _place_order(client)
    notification = client.get("/notifications/").json()[0]

    response = client.post(f"/notifications/{notification['id']}/read")
    assert response.json() == {"success": True}
    response = client.post(f"/notifications/{notification['id']}/read")
    assert response.json() == {"success": True}
    assert client.post("/notifications/missing/read").status_code == 404

    all_items = client.get("/notifications/", params={"unread_only": False}).json()
    assert all_items[0]["is_read"] is True
    assert all_items[0]["read_at"] is not None

    test_response = client.post("/notifications/test")
    assert test_response.status_code == 201
    assert test_response.json()["order_id"] is None

    assert client.post("/notifications/read-all").json() == {"success": True}
    assert client.get("/notifications/count").json() == {"unread": 0}

    assert client.delete(f"/notifications/{notification['id']}").json() == {"success": True}
    assert len(client.get("/notifications/", params={"unread_only": False}).json()) == 1


def test_settings_endpoints(client: TestClient) -> None:
    settings = client.get("/alerts/settings").json()["settings"]
    assert settings["ringDuration"] == 3
    assert settings["notificationTypes"]["order_updated"]["soundEnabled"] is False

    response = client.put("/alerts/settings", json={"soundEnabled": False, "maxRings": 4})
    assert response.status_code == 200
    body = response.json()
    assert body["persisted"] is True
    assert body["settings"]["soundEnabled"] is False
    assert body["settings"]["maxRings"] == 4
    assert body["settings"]["enabled"] is True

    assert client.put("/alerts/settings", json={"maxRings": 0}).status_code == 422
    assert client.get("/alerts/settings").json()["settings"]["maxRings"] == 4

    sound = client.put(
        "/alerts/settings/sound",
        json={"url": "https://cdn.example.com/bell.mp3", "name": "Bell"},
    ).json()["settings"]
    assert sound["customNotificationSound"] is True
    assert sound["notificationSoundName"] == "Bell"

    reset = client.delete("/alerts/settings/sound").json()["settings"]
    assert reset["customNotificationSound"] is False
    assert reset["notificationSoundName"] == "Default Ring Tone"


def test_staff_console_rings_until_stopped(client: TestClient) -> None:
    with client.websocket_connect("/notifications/ws?route=/admin") as websocket:
        init = websocket.receive_json()
        assert init["type"] == "init"
        assert init["data"]["ringing"] is False

        websocket.send_json({"type": "hello", "route": "/admin/orders", "audioUnlocked": True, "capabilities": {}})
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

        _place_order(client)

        received = {websocket.receive_json()["type"] for _ in range(2)}
        assert received == {"audio.tone", "notification"}

        status_body = client.get("/alerts/status").json()
        assert status_body["ringing"] is True
        assert status_body["ring_count"] == 1
        assert status_body["staff_consoles"] == 1
        assert status_body["audio_state"] == "running"

        assert client.post("/alerts/stop").json() == {"stopped": True}
        assert client.get("/alerts/status").json()["ringing"] is False
        assert client.post("/alerts/stop").json() == {"stopped": False}


def test_customer_page_console_never_rings(client: TestClient) -> None:
    with client.websocket_connect("/notifications/ws?route=/checkout") as websocket:
        websocket.receive_json()
        websocket.send_json({"type": "audio.unlocked"})
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

        _place_order(client)

        assert client.get("/alerts/status").json()["ringing"] is False
        assert client.get("/notifications/count").json() == {"unread": 1}


def test_test_sound_endpoint(client: TestClient) -> None:
    response = client.post("/alerts/test-sound", json={"notification_type": "order_paid"})
    assert response.status_code == 200
    assert response.json()["pattern"] == "double"

    assert client.post("/alerts/test-sound", json={"notification_type": "unknown"}).status_code == 422


def test_notification_stats(client: TestClient) -> None:
    assert client.get("/notifications/stats").json() == {"total": 0, "unread": 0, "by_type": {}}

    order = _place_order(client)
    _place_order(client, number="ORD-2")
    client.patch(f"/orders/{order['id']}", json={"payment_status": "completed"})
    client.post("/notifications/read-all")
    _place_order(client, number="ORD-3")

    assert client.get("/notifications/stats").json() == {
        "total": 4,
        "unread": 1,
        "by_type": {"order_created": 3, "payment_completed": 1},
    }


def test_mark_read_reports_backend_outage(client: TestClient, monkeypatch) -> None:
    records = client.app.state.alert_runtime.records

    def broken_factory():
        raise OperationalError("SELECT", {}, Exception("backend down"))

    monkeypatch.setattr(records, "_session_factory", broken_factory)

    response = client.post("/notifications/some-id/read")
    assert response.status_code == 503


def test_get_order(client: TestClient) -> None:
    order = _place_order(client)

    response = client.get(f"/orders/{order['id']}")
    assert response.status_code == 200
    assert response.json()["order_number"] == "ORD-1"
    assert client.get("/orders/missing").status_code == 404


def test_manual_order_notification(client: TestClient) -> None:
    order = _place_order(client)

    response = client.post(
        f"/orders/{order['id']}/notifications", json={"notification_type": "order_paid"}
    )
    assert response.status_code == 201
    body = response.json()
    assert body["notification_type"] == "order_paid"
    assert body["order_id"] == order["id"]
    assert body["message"] == "Payment completed for order #ORD-1 by Mario"
    assert body["metadata"]["manual"] is True

    missing = client.post(
        "/orders/missing/notifications", json={"notification_type": "order_paid"}
    )
    assert missing.status_code == 404
    unknown = client.post(
        f"/orders/{order['id']}/notifications", json={"notification_type": "order_shipped"}
    )
    assert unknown.status_code == 422
    assert client.get("/notifications/count").json() == {"unread": 2}


def test_status_reports_wake_lock_and_reconciliation(client: TestClient) -> None:
    body = client.get("/alerts/status").json()

    assert body["wake_lock_held"] is False
    assert body["last_reconciled_at"] is not None


def test_settings_changes_happen_on_the_event_loop(client: TestClient, monkeypatch) -> None:
    store = client.app.state.alert_runtime.settings_store
    on_loop: list[bool] = []

    def _tracked(name: str) -> None:
        wrapped = getattr(store, name)

        def wrapper(*args, **kwargs):
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                on_loop.append(False)
            else:
                on_loop.append(True)
            return wrapped(*args, **kwargs)

        monkeypatch.setattr(store, name, wrapper)

    for name in ("update", "set_custom_sound", "reset_to_default_sound"):
        _tracked(name)

    client.put("/alerts/settings", json={"vibrationEnabled": False})
    client.put(
        "/alerts/settings/sound",
        json={"url": "https://cdn.example.com/bell.mp3", "name": "Bell"},
    )
    client.delete("/alerts/settings/sound")

    assert on_loop == [True, True, True]

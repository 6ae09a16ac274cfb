"""Tests for the alert preferences store and its fallback chain."""

from __future__ import annotations

import json

from sqlalchemy.exc import OperationalError

from app.application.alerts import (
    DatabaseSettingsSource,
    DefaultSettingsSource,
    LocalFileSettingsSource,
    NotificationSettingsStore,
)
from app.domain.entities import DEFAULT_SOUND_NAME, NotificationSettings
from app.infrastructure.repositories import SettingRepository

KEY = "phoneNotificationSettings"


class BrokenSource:
    name = "broken"

    def __init__(self) -> None:
        self.writes = 0

    def read(self):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    def write(self, payload):
        self.writes += 1
        raise OperationalError("UPSERT", {}, Exception("connection refused"))


def _chain(session_factory, tmp_path, *, database=True):
    sources = []
    sources.append(DatabaseSettingsSource(session_factory, KEY) if database else BrokenSource())
    sources.append(LocalFileSettingsSource(tmp_path / "settings.json"))
    sources.append(DefaultSettingsSource())
    return NotificationSettingsStore(sources)


def test_update_merges_and_keeps_other_fields(settings_store):
    settings_store.update({"ringDuration": 5, "phoneNumber": "+39 333 0000000"})

    assert settings_store.update({"soundEnabled": False}) is True

    current = settings_store.get()
    assert current.sound_enabled is False
    assert current.ring_duration == 5
    assert current.phone_number == "+39 333 0000000"
    assert current.enabled is True
    assert current.max_rings == 10


def test_get_returns_a_defensive_copy(settings_store):
    copy = settings_store.get()
    copy.enabled = False
    copy.notification_types["order_created"].enabled = False

    current = settings_store.get()
    assert current.enabled is True
    assert current.type_config("order_created").enabled is True


def test_notification_types_are_merged_per_key(settings_store):
    settings_store.update({"notificationTypes": {"order_updated": {"enabled": False}}})

    config = settings_store.get().type_config("order_updated")
    assert config.enabled is False
    assert config.priority == 3
    assert settings_store.get().type_config("order_created").priority == 5


def test_updates_are_persisted_as_camel_case_row(settings_store, session_factory):
    settings_store.update({"vibration_enabled": False})

    with session_factory() as session:
        stored = SettingRepository(session).get_value(KEY)
    assert stored["vibrationEnabled"] is False
    assert stored["browserNotificationEnabled"] is True
    assert stored["notificationSoundName"] == DEFAULT_SOUND_NAME


def test_load_prefers_database_row(session_factory, tmp_path):
    with session_factory() as session:
        SettingRepository(session).upsert(KEY, {"ringDuration": 7, "browserNotificationsEnabled": False})
    (tmp_path / "settings.json").write_text(json.dumps({"ringDuration": 1}), encoding="utf-8")

    store = _chain(session_factory, tmp_path)
    settings = store.load()

    assert store.loaded_from == "database"
    assert settings.ring_duration == 7
    assert settings.browser_notification_enabled is False
    assert settings.max_rings == 10


def test_load_falls_back_to_local_file_when_backend_fails(session_factory, tmp_path):
    (tmp_path / "settings.json").write_text(json.dumps({"maxRings": 4}), encoding="utf-8")

    store = _chain(session_factory, tmp_path, database=False)
    settings = store.load()

    assert store.loaded_from == "local"
    assert settings.max_rings == 4


def test_load_falls_back_to_defaults(session_factory, tmp_path):
    store = _chain(session_factory, tmp_path, database=False)

    assert store.load() == NotificationSettings()
    assert store.loaded_from == "defaults"


def test_corrupt_local_file_is_skipped(session_factory, tmp_path):
    (tmp_path / "settings.json").write_text("{not json", encoding="utf-8")

    store = _chain(session_factory, tmp_path, database=False)

    assert store.load() == NotificationSettings()
    assert store.loaded_from == "defaults"


def test_save_failure_falls_back_to_local_file(session_factory, tmp_path):
    store = _chain(session_factory, tmp_path, database=False)
    store.load()

    assert store.update({"ringInterval": 4}) is True

    saved = json.loads((tmp_path / "settings.json").read_text(encoding="utf-8"))
    assert saved["ringInterval"] == 4
    assert store.get().ring_interval == 4


def test_in_memory_state_survives_total_persistence_failure():
    broken = BrokenSource()
    store = NotificationSettingsStore([broken, DefaultSettingsSource()])
    store.load()

    assert store.update({"enabled": False}) is False
    assert broken.writes == 1
    assert store.get().enabled is False


def test_invalid_update_leaves_state_unchanged(settings_store):
    assert settings_store.update({"maxRings": 0}) is False
    assert settings_store.get().max_rings == 10


def test_custom_sound_round_trip(settings_store):
    settings_store.set_custom_sound("https://cdn.example.com/bell.mp3", "Bell")
    current = settings_store.get()
    assert current.custom_notification_sound is True
    assert current.notification_sound_name == "Bell"

    settings_store.reset_to_default_sound()
    current = settings_store.get()
    assert current.custom_notification_sound is False
    assert current.notification_sound_url == ""
    assert current.notification_sound_name == DEFAULT_SOUND_NAME

"""Alert preferences with an ordered chain of persistence sources."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Callable, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import DEFAULT_SOUND_NAME, NotificationSettings
from app.infrastructure.repositories import SettingRepository

logger = logging.getLogger(__name__)

_SOURCE_ERRORS = (SQLAlchemyError, OSError, ValueError)


class SettingsSource(Protocol):
    """A place alert preferences can be read from and written to.

    ``read`` returns ``None`` when the source holds nothing. Both methods may
    raise; the store treats any failure as "try the next source".
    """

    name: str

    def read(self) -> Mapping[str, Any] | None: ...

    def write(self, payload: dict[str, Any]) -> bool: ...


class DatabaseSettingsSource:
    name = "database"

    def __init__(self, session_factory: Callable[[], Session], key: str) -> None:
        self._session_factory = session_factory
        self._key = key

    def read(self) -> Mapping[str, Any] | None:
        with self._session_factory() as session:
            return SettingRepository(session).get_value(self._key)

    def write(self, payload: dict[str, Any]) -> bool:
        with self._session_factory() as session:
            SettingRepository(session).upsert(self._key, payload)
        return True


class LocalFileSettingsSource:
    name = "local"

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    def read(self) -> Mapping[str, Any] | None:
        if not self._path.exists():
            return None
        data = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            msg = f"{self._path} does not contain a JSON object"
            raise ValueError(msg)
        return data

    def write(self, payload: dict[str, Any]) -> bool:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return True


class DefaultSettingsSource:
    """Read-only source returning the built-in defaults."""

    name = "defaults"

    def read(self) -> Mapping[str, Any] | None:
        return {}

    def write(self, payload: dict[str, Any]) -> bool:
        return False


class NotificationSettingsStore:
    """Hold the in-memory alert preferences.

    The in-memory copy is authoritative: updates apply immediately and are
    not rolled back when persisting fails.
    """

    def __init__(self, sources: Sequence[SettingsSource]) -> None:
        self._sources = list(sources)
        self._settings = NotificationSettings()
        self._loaded_from: str | None = None

    @property
    def loaded_from(self) -> str | None:
        return self._loaded_from

    def load(self) -> NotificationSettings:
        for source in self._sources:
            try:
                payload = source.read()
            except _SOURCE_ERRORS as exc:
                logger.warning("Could not read notification settings from %s: %s", source.name, exc)
                continue
            if payload is None:
                logger.debug("No notification settings stored in %s", source.name)
                continue
            try:
                settings = NotificationSettings.from_payload(payload)
            except ValueError as exc:
                logger.warning("Ignoring invalid notification settings from %s: %s", source.name, exc)
                continue
            self._settings = settings
            self._loaded_from = source.name
            logger.info("Notification settings loaded from %s", source.name)
            return self.get()

        self._settings = NotificationSettings()
        self._loaded_from = None
        return self.get()

    def get(self) -> NotificationSettings:
        return self._settings.model_copy(deep=True)

    def update(self, partial: Mapping[str, Any]) -> bool:
        """Merge ``partial`` into the current settings and persist them.

        Returns ``False`` when ``partial`` is invalid (nothing changes) or when
        no source accepted the write (the new values are kept in memory).
        """

        try:
            updated = self._settings.merged(partial)
        except ValueError as exc:
            logger.warning("Rejected notification settings update: %s", exc)
            return False
        self._settings = updated
        return self._persist()

    def set_custom_sound(self, url: str, name: str) -> bool:
        return self.update(
            {
                "customNotificationSound": True,
                "notificationSoundUrl": url,
                "notificationSoundName": name,
            }
        )

    def reset_to_default_sound(self) -> bool:
        return self.update(
            {
                "customNotificationSound": False,
                "notificationSoundUrl": "",
                "notificationSoundName": DEFAULT_SOUND_NAME,
            }
        )

    def _persist(self) -> bool:
        payload = self._settings.to_payload()
        for source in self._sources:
            try:
                if source.write(payload):
                    logger.info("Notification settings saved to %s", source.name)
                    return True
            except _SOURCE_ERRORS as exc:
                logger.warning("Could not save notification settings to %s: %s", source.name, exc)
        logger.error("Notification settings could not be persisted; keeping them in memory")
        return False


__all__ = [
    "DatabaseSettingsSource",
    "DefaultSettingsSource",
    "LocalFileSettingsSource",
    "NotificationSettingsStore",
    "SettingsSource",
]

"""Alert preferences shared by every staff console of the deployment."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .notification import (
    MAX_PRIORITY,
    MIN_PRIORITY,
    NOTIFICATION_ORDER_CANCELLED,
    NOTIFICATION_ORDER_CREATED,
    NOTIFICATION_ORDER_PAID,
    NOTIFICATION_ORDER_UPDATED,
    NOTIFICATION_PAYMENT_COMPLETED,
    NOTIFICATION_PAYMENT_FAILED,
)

DEFAULT_SOUND_NAME: Final[str] = "Default Ring Tone"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class NotificationTypeConfig(_CamelModel):
    """Per notification type switches and priority."""

    enabled: bool = True
    priority: int = Field(default=3, ge=MIN_PRIORITY, le=MAX_PRIORITY)
    sound_enabled: bool = True
    persistent_notification: bool = False


def default_type_configs() -> dict[str, NotificationTypeConfig]:
    """Return the built-in configuration for every notification type."""

    return {
        NOTIFICATION_ORDER_CREATED: NotificationTypeConfig(
            enabled=True, priority=5, sound_enabled=True, persistent_notification=True
        ),
        NOTIFICATION_ORDER_PAID: NotificationTypeConfig(
            enabled=True, priority=5, sound_enabled=True, persistent_notification=True
        ),
        NOTIFICATION_ORDER_UPDATED: NotificationTypeConfig(
            enabled=True, priority=3, sound_enabled=False, persistent_notification=False
        ),
        NOTIFICATION_ORDER_CANCELLED: NotificationTypeConfig(
            enabled=True, priority=4, sound_enabled=True, persistent_notification=True
        ),
        NOTIFICATION_PAYMENT_FAILED: NotificationTypeConfig(
            enabled=True, priority=4, sound_enabled=True, persistent_notification=True
        ),
        NOTIFICATION_PAYMENT_COMPLETED: NotificationTypeConfig(
            enabled=True, priority=5, sound_enabled=True, persistent_notification=True
        ),
    }


class NotificationSettings(_CamelModel):
    """Singleton alert preferences persisted as camelCase JSON.

    ``enabled``, ``sound_enabled``, ``vibration_enabled`` and
    ``browser_notification_enabled`` are independent gates. Durations are in
    seconds and apply to every ring pattern.
    """

    enabled: bool = True
    phone_number: str = ""
    sound_enabled: bool = True
    vibration_enabled: bool = True
    browser_notification_enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "browserNotificationEnabled",
            "browserNotificationsEnabled",
            "browser_notification_enabled",
        ),
        serialization_alias="browserNotificationEnabled",
    )
    ring_duration: float = Field(default=3, gt=0)
    ring_interval: float = Field(default=2, ge=0)
    max_rings: int = Field(default=10, ge=1)
    custom_notification_sound: bool = False
    notification_sound_url: str = ""
    notification_sound_name: str = DEFAULT_SOUND_NAME
    notification_types: dict[str, NotificationTypeConfig] = Field(
        default_factory=default_type_configs
    )

    @field_validator("notification_types", mode="after")
    @classmethod
    def _fill_missing_types(
        cls, value: dict[str, NotificationTypeConfig]
    ) -> dict[str, NotificationTypeConfig]:
        completed = default_type_configs()
        completed.update(value)
        return completed

    def type_config(self, notification_type: str) -> NotificationTypeConfig:
        """Return the configuration for ``notification_type``.

        Unknown types are reported as disabled.
        """

        config = self.notification_types.get(notification_type)
        if config is None:
            return NotificationTypeConfig(enabled=False, sound_enabled=False)
        return config

    def merged(self, partial: Mapping[str, Any]) -> "NotificationSettings":
        """Return a copy with ``partial`` applied on top of the current values.

        Keys may use either the camelCase persisted names or the Python field
        names. ``notificationTypes`` is merged per type and per key.
        """

        data = self.model_dump()
        lookup = _field_lookup(type(self))
        for key, value in partial.items():
            name = lookup.get(key)
            if name is None:
                continue
            if name == "notification_types" and isinstance(value, Mapping):
                data[name] = _merge_type_configs(data[name], value)
            else:
                data[name] = value
        return type(self).model_validate(data)

    def to_payload(self) -> dict[str, Any]:
        """Return the camelCase JSON document stored in the settings row."""

        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> "NotificationSettings":
        """Build settings from a (possibly partial) persisted document."""

        defaults = cls()
        if not payload:
            return defaults
        return defaults.merged(payload)


def _field_lookup(model: type[BaseModel]) -> dict[str, str]:
    lookup: dict[str, str] = {}
    for name, info in model.model_fields.items():
        lookup[name] = name
        if info.alias:
            lookup[info.alias] = name
        validation_alias = info.validation_alias
        if isinstance(validation_alias, str):
            lookup[validation_alias] = name
        elif isinstance(validation_alias, AliasChoices):
            for choice in validation_alias.choices:
                if isinstance(choice, str):
                    lookup[choice] = name
    return lookup


def _merge_type_configs(
    current: dict[str, dict[str, Any]], partial: Mapping[str, Any]
) -> dict[str, dict[str, Any]]:
    merged = {key: dict(value) for key, value in current.items()}
    lookup = _field_lookup(NotificationTypeConfig)
    for notification_type, overrides in partial.items():
        if isinstance(overrides, NotificationTypeConfig):
            overrides = overrides.model_dump()
        if not isinstance(overrides, Mapping):
            continue
        entry = merged.setdefault(notification_type, {})
        for key, value in overrides.items():
            name = lookup.get(key)
            if name is not None:
                entry[name] = value
    return merged


__all__ = [
    "DEFAULT_SOUND_NAME",
    "NotificationSettings",
    "NotificationTypeConfig",
    "default_type_configs",
]

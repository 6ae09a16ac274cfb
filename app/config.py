"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./flower_shop.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default="Europe/Rome",
        description="IANA timezone used to localize persisted timestamps",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        description="Origins of the storefront and admin SPA allowed to call the API",
    )
    settings_key: str = Field(
        default="phoneNotificationSettings",
        description="Key of the settings row holding the alert preferences",
        min_length=1,
    )
    settings_fallback_path: str = Field(
        default=".notification_settings.json",
        description="Local JSON file used when the settings row cannot be read or written",
    )
    staff_route_prefixes: list[str] = Field(
        default_factory=lambda: ["/admin", "/orders", "/order-dashboard"],
        description="Console routes allowed to ring for new orders",
    )
    reconciliation_interval_seconds: float = Field(
        default=30.0,
        description="Seconds between reconciliation syncs of recently created orders",
        gt=0,
    )
    wake_lock_timeout_seconds: float = Field(
        default=60.0,
        description="Seconds after which an acquired screen wake lock is released",
        gt=0,
    )
    browser_notification_timeout_seconds: float = Field(
        default=10.0,
        description="Seconds after which desktop notifications are closed",
        gt=0,
    )
    continuous_ring_gap_seconds: float = Field(
        default=0.1,
        description="Silence between tones of a continuous ring",
        ge=0,
    )
    vibration_pattern: list[int] = Field(
        default_factory=lambda: [500, 200, 500, 200, 500, 200, 500],
        description="On/off vibration sequence in milliseconds",
    )
    vibration_repeat_seconds: float = Field(
        default=3.0,
        description="Seconds between vibration bursts while ringing",
        gt=0,
    )
    audio_sample_rate: int = Field(
        default=22050,
        description="Sample rate used to render alert tones",
        gt=0,
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]

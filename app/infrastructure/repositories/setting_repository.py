"""Persistence helpers for key/value settings rows."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from app.infrastructure.models import SettingModel


class SettingRepository:
    """Read and upsert JSON documents stored in the ``settings`` table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_value(self, key: str) -> dict[str, Any] | None:
        model = self.session.get(SettingModel, key)
        if model is None or model.value is None:
            return None
        return dict(model.value)

    def upsert(self, key: str, value: dict[str, Any]) -> None:
        model = self.session.get(SettingModel, key)
        if model is None:
            model = SettingModel(key=key)
            self.session.add(model)
        model.value = value
        self.session.commit()


__all__ = ["SettingRepository"]

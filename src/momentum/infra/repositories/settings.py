"""Settings repository mapping :class:`UserSettings` onto key/value rows."""

from __future__ import annotations

from dataclasses import asdict, fields, replace
from datetime import datetime, timezone
from typing import Any

from sqlmodel import select

from ...domain.habit import UserSettings
from ...models.settings import AppSetting
from ..database import SessionFactory

_DESCRIPTIONS = {
    "name": "Display name entered during onboarding",
    "notifications_enabled": "Whether habit reminders are enabled",
    "dark_mode": "Theme preference: auto, light or dark",
    "has_completed_onboarding": "Set once onboarding has finished",
}
_FIELD_NAMES = tuple(f.name for f in fields(UserSettings))


def _encode(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _decode(key: str, raw: str) -> Any:
    if key in {"notifications_enabled", "has_completed_onboarding"}:
        return raw.strip().lower() in {"1", "true", "yes", "on"}
    return raw


class SQLModelSettingsRepository:
    """SQLModel-based settings repository."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def load(self) -> UserSettings:
        """Return stored settings, falling back to defaults for missing keys."""
        with self.session_factory() as session:
            rows = session.exec(select(AppSetting)).all()
            values = {
                row.key: _decode(row.key, row.value) for row in rows if row.key in _FIELD_NAMES
            }
        return UserSettings(**values)

    def save(self, settings: UserSettings) -> UserSettings:
        with self.session_factory() as session:
            for key, value in asdict(settings).items():
                setting = session.get(AppSetting, key)
                if value is None:
                    if setting is not None:
                        session.delete(setting)
                    continue
                if setting is None:
                    setting = AppSetting(key=key, value=_encode(value), description=_DESCRIPTIONS.get(key))
                else:
                    setting.value = _encode(value)
                    setting.updated_at = datetime.now(timezone.utc)
                session.add(setting)
        return settings

    def update(self, **changes: Any) -> UserSettings:
        """Merge ``changes`` into the stored settings and persist the result."""
        unknown = sorted(set(changes) - set(_FIELD_NAMES))
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(unknown)}")
        return self.save(replace(self.load(), **changes))

    def clear(self) -> None:
        with self.session_factory() as session:
            for setting in session.exec(select(AppSetting)).all():
                session.delete(setting)


__all__ = ["SQLModelSettingsRepository"]

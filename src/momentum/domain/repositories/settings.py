"""Settings repository protocol."""

from __future__ import annotations

from typing import Any, Protocol

from ..habit import UserSettings


class SettingsRepository(Protocol):
    """Storage for the single set of user settings."""

    def load(self) -> UserSettings:
        ...

    def save(self, settings: UserSettings) -> UserSettings:
        ...

    def update(self, **changes: Any) -> UserSettings:
        """Merge ``changes`` into the stored settings."""
        ...

    def clear(self) -> None:
        ...

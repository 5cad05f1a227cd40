"""Repository protocols consumed by the services layer."""

from .habit import HabitNotFoundError, HabitRepository
from .settings import SettingsRepository

__all__ = ["HabitNotFoundError", "HabitRepository", "SettingsRepository"]

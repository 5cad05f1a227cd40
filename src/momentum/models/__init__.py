"""SQLModel table exports."""

from .habit import HabitCompletion, HabitRecord
from .settings import AppSetting

__all__ = [
    "AppSetting",
    "HabitCompletion",
    "HabitRecord",
]

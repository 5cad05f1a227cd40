"""First-run onboarding: starter habit templates and settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..domain.habit import Habit, Schedule
from ..domain.repositories import SettingsRepository
from ..logging_config import get_logger
from .reminders import parse_reminder_time
from .tracker import HabitTracker

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class StarterHabit:
    name: str
    icon: str
    color: str


STARTER_HABITS: tuple[StarterHabit, ...] = (
    StarterHabit(name="Morning Exercise", icon="🏃", color="#6366F1"),
    StarterHabit(name="Drink Water", icon="💧", color="#06B6D4"),
    StarterHabit(name="Read 10 Pages", icon="📚", color="#3B82F6"),
    StarterHabit(name="Meditate", icon="🧘", color="#8B5CF6"),
    StarterHabit(name="Healthy Meal", icon="🥗", color="#F59E0B"),
    StarterHabit(name="Sleep Early", icon="😴", color="#EC4899"),
)


def complete_onboarding(
    tracker: HabitTracker,
    settings: SettingsRepository,
    *,
    selected: Iterable[int],
    name: Optional[str] = None,
    reminder_time: Optional[str] = None,
) -> list[Habit]:
    """Create the chosen starter habits and mark onboarding as finished.

    ``selected`` holds indexes into :data:`STARTER_HABITS`; duplicates are ignored.
    """

    indexes = list(dict.fromkeys(selected))
    invalid = [index for index in indexes if not 0 <= index < len(STARTER_HABITS)]
    if invalid:
        raise ValueError(f"Unknown starter habit index(es): {invalid}")
    if reminder_time:
        parse_reminder_time(reminder_time)

    changes: dict = {"has_completed_onboarding": True}
    if name and name.strip():
        changes["name"] = name.strip()
    if reminder_time:
        changes["notifications_enabled"] = True
    settings.update(**changes)

    created = [
        tracker.add_habit(
            STARTER_HABITS[index].name,
            icon=STARTER_HABITS[index].icon,
            color=STARTER_HABITS[index].color,
            schedule=Schedule.DAILY,
            reminder_time=reminder_time,
        )
        for index in indexes
    ]

    logger.info("Onboarding completed", extra={"habits_created": len(created)})
    return created


__all__ = ["STARTER_HABITS", "StarterHabit", "complete_onboarding"]

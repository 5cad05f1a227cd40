"""Habit collection service: create, edit, delete and check off habits."""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable, Optional

from ..domain.habit import DEFAULT_COLOR, DEFAULT_ICON, DateLike, Habit, Schedule, UserSettings
from ..domain.repositories import HabitNotFoundError, HabitRepository, SettingsRepository
from ..logging_config import get_logger
from . import backup
from . import habits as core
from .reminders import LoggingReminderScheduler, ReminderScheduler, parse_reminder_time

logger = get_logger(__name__)


def _new_habit_id() -> str:
    return uuid.uuid4().hex


class HabitTracker:
    """Owns the habit collection and keeps reminders in step with it.

    Statistics are computed by the pure functions in :mod:`momentum.services.habits`
    over :meth:`habits`.

    When a settings repository is given, reminders are only scheduled while
    ``notifications_enabled`` is on. Without one, reminders are always scheduled.
    """

    def __init__(
        self,
        repository: HabitRepository,
        reminders: Optional[ReminderScheduler] = None,
        settings: Optional[SettingsRepository] = None,
    ):
        self.repository = repository
        self.reminders = reminders if reminders is not None else LoggingReminderScheduler()
        self.settings = settings

    def _reminders_enabled(self) -> bool:
        if self.settings is None:
            return True
        return self.settings.load().notifications_enabled

    def _sync_reminder(self, habit: Habit) -> None:
        self.reminders.cancel(habit.id)
        if habit.reminder_time and self._reminders_enabled():
            self.reminders.schedule(habit)

    def habits(self) -> list[Habit]:
        return self.repository.list_all()

    def get(self, habit_id: str) -> Habit:
        habit = self.repository.get(habit_id)
        if habit is None:
            raise HabitNotFoundError(habit_id)
        return habit

    def add_habit(
        self,
        name: str,
        *,
        color: str = DEFAULT_COLOR,
        icon: str = DEFAULT_ICON,
        schedule: Schedule | str = Schedule.DAILY,
        scheduled_days: Iterable[int] = (),
        reminder_time: Optional[str] = None,
    ) -> Habit:
        """Create and persist a habit with an empty completion record."""

        name = (name or "").strip()
        if not name:
            raise ValueError("Habit name is required")
        if reminder_time:
            parse_reminder_time(reminder_time)

        habit = Habit(
            id=_new_habit_id(),
            name=name,
            color=color,
            icon=icon,
            schedule=Schedule(schedule),
            scheduled_days=frozenset(scheduled_days),
            reminder_time=reminder_time or None,
            completions=(),
            created_at=datetime.now(timezone.utc),
        )
        stored = self.repository.add(habit)
        if stored.reminder_time and self._reminders_enabled():
            self.reminders.schedule(stored)
        return stored

    def update_habit(self, habit: Habit) -> Habit:
        """Persist edits to an existing habit and refresh its reminder."""

        if not habit.name.strip():
            raise ValueError("Habit name is required")
        if habit.reminder_time:
            parse_reminder_time(habit.reminder_time)

        stored = self.repository.update(habit)
        self._sync_reminder(stored)
        return stored

    def edit_habit(self, habit_id: str, **changes) -> Habit:
        """Apply field changes to a stored habit; ``id`` and ``created_at`` cannot change."""

        frozen = {"id", "created_at"} & set(changes)
        if frozen:
            raise ValueError(f"Cannot change {', '.join(sorted(frozen))}")
        return self.update_habit(replace(self.get(habit_id), **changes))

    def delete_habit(self, habit_id: str) -> None:
        """Delete a habit; its completion history is discarded with it."""

        self.get(habit_id)
        self.reminders.cancel(habit_id)
        self.repository.delete(habit_id)

    def toggle_completion(self, habit_id: str, day: DateLike) -> Habit:
        """Flip the completion state of ``day`` for the habit and persist it."""

        toggled = core.toggle_completion(self.get(habit_id), day)
        stored = self.repository.update(toggled)
        logger.info(
            "Completion toggled",
            extra={"habit_id": habit_id, "completions": len(stored.completions)},
        )
        return stored

    def import_habits(self, habits: Iterable[Habit]) -> int:
        """Add or overwrite habits by id and refresh their reminders."""

        habits = list(habits)
        count = backup.import_habits(self.repository, habits)
        for habit in habits:
            self._sync_reminder(habit)
        return count

    def set_notifications(self, enabled: bool) -> UserSettings:
        """Store the notifications switch and cancel or reschedule every reminder."""

        if self.settings is None:
            raise ValueError("Notifications need a settings repository")
        updated = self.settings.update(notifications_enabled=enabled)
        for habit in self.repository.list_all():
            self.reminders.cancel(habit.id)
            if enabled and habit.reminder_time:
                self.reminders.schedule(habit)
        logger.info("Notifications switched", extra={"enabled": enabled})
        return updated

    def clear_all(self) -> None:
        for habit in self.repository.list_all():
            self.reminders.cancel(habit.id)
        self.repository.clear()


__all__ = ["HabitNotFoundError", "HabitTracker"]

"""Daily reminder bookkeeping.

Delivering notifications is left to an external collaborator implementing
:class:`ReminderScheduler`; this module only validates reminder times and
works out when the next reminder is due.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional, Protocol

from ..domain.habit import Habit
from ..logging_config import get_logger

REMINDER_TITLE = "Momentum Reminder"

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ReminderMessage:
    identifier: str
    title: str
    body: str
    habit_id: str


class ReminderScheduler(Protocol):
    """Schedules and cancels repeating daily reminders for habits."""

    def schedule(self, habit: Habit) -> None:  # pragma: no cover - interface
        ...

    def cancel(self, habit_id: str) -> None:  # pragma: no cover - interface
        ...


def parse_reminder_time(value: str) -> time:
    """Parse a 24-hour ``HH:MM`` string."""

    parts = value.strip().split(":") if isinstance(value, str) else []
    if len(parts) != 2 or not all(part.isdigit() and len(part) == 2 for part in parts):
        raise ValueError(f"Reminder time must be HH:MM, got {value!r}")
    hours, minutes = (int(part) for part in parts)
    if hours > 23 or minutes > 59:
        raise ValueError(f"Reminder time out of range: {value!r}")
    return time(hour=hours, minute=minutes)


def reminder_identifier(habit_id: str) -> str:
    return f"habit-{habit_id}"


def reminder_message(habit: Habit) -> ReminderMessage:
    return ReminderMessage(
        identifier=reminder_identifier(habit.id),
        title=REMINDER_TITLE,
        body=f"Time to complete: {habit.name} {habit.icon}",
        habit_id=habit.id,
    )


def next_reminder_at(habit: Habit, now: Optional[datetime] = None) -> Optional[datetime]:
    """Return the next time the habit's daily reminder fires, strictly after ``now``."""

    if not habit.reminder_time:
        return None
    now = now or datetime.now()
    at = parse_reminder_time(habit.reminder_time)
    candidate = datetime.combine(now.date(), at, tzinfo=now.tzinfo)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


class LoggingReminderScheduler:
    """Keeps pending reminders in memory and logs every change."""

    def __init__(self) -> None:
        self.pending: dict[str, ReminderMessage] = {}

    def schedule(self, habit: Habit) -> None:
        if not habit.reminder_time:
            return
        parse_reminder_time(habit.reminder_time)
        message = reminder_message(habit)
        self.pending[message.identifier] = message
        logger.info(
            "Reminder scheduled",
            extra={"habit_id": habit.id, "reminder_time": habit.reminder_time},
        )

    def cancel(self, habit_id: str) -> None:
        if self.pending.pop(reminder_identifier(habit_id), None) is not None:
            logger.info("Reminder cancelled", extra={"habit_id": habit_id})


__all__ = [
    "REMINDER_TITLE",
    "LoggingReminderScheduler",
    "ReminderMessage",
    "ReminderScheduler",
    "next_reminder_at",
    "parse_reminder_time",
    "reminder_identifier",
    "reminder_message",
]

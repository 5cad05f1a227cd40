"""SQLModel implementation of the habit repository."""

from __future__ import annotations

from datetime import timezone
from typing import Optional

from sqlalchemy.orm import selectinload
from sqlmodel import select

from ...domain.habit import Habit
from ...domain.repositories.habit import HabitNotFoundError
from ...logging_config import get_logger
from ...models.habit import HabitCompletion, HabitRecord
from ..database import SessionFactory

logger = get_logger(__name__)


def _format_days(days: frozenset[int]) -> str:
    return ",".join(str(day) for day in sorted(days))


def _parse_days(raw: str) -> list[int]:
    return [int(part) for part in raw.split(",") if part.strip()]


def _to_domain(row: HabitRecord) -> Habit:
    """Build the domain value; completion rows become the canonical ordered set here."""

    created_at = row.created_at
    if created_at.tzinfo is None:
        # SQLite drops tzinfo; values are always written in UTC
        created_at = created_at.replace(tzinfo=timezone.utc)
    return Habit(
        id=row.id,
        name=row.name,
        color=row.color,
        icon=row.icon,
        schedule=row.schedule,
        scheduled_days=frozenset(_parse_days(row.scheduled_days)),
        reminder_time=row.reminder_time,
        completions=tuple(c.completed_on for c in row.completions),
        created_at=created_at,
    )


def _apply_fields(row: HabitRecord, habit: Habit) -> None:
    row.name = habit.name
    row.color = habit.color
    row.icon = habit.icon
    row.schedule = habit.schedule.value
    row.scheduled_days = _format_days(habit.scheduled_days)
    row.reminder_time = habit.reminder_time


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            row = session.get(HabitRecord, habit_id)
            if row is None:
                return None
            return _to_domain(row)

    def list_all(self) -> list[Habit]:
        """List all habits in creation order."""
        with self.session_factory() as session:
            statement = (
                select(HabitRecord)
                .options(selectinload(HabitRecord.completions))  # type: ignore[arg-type]
                .order_by(HabitRecord.created_at, HabitRecord.id)  # type: ignore[arg-type]
            )
            return [_to_domain(row) for row in session.exec(statement).all()]

    def add(self, habit: Habit) -> Habit:
        """Persist a new habit with its completions."""
        with self.session_factory() as session:
            if session.get(HabitRecord, habit.id) is not None:
                raise ValueError(f"Habit {habit.id} already exists")
            row = HabitRecord(id=habit.id, created_at=habit.created_at.astimezone(timezone.utc))
            _apply_fields(row, habit)
            row.completions = [
                HabitCompletion(habit_id=habit.id, completed_on=day) for day in habit.completions
            ]
            session.add(row)
            session.flush()
            logger.info("Habit created", extra={"habit_id": habit.id})
            return _to_domain(row)

    def update(self, habit: Habit) -> Habit:
        """Replace a stored habit's fields and completion record."""
        with self.session_factory() as session:
            row = session.get(HabitRecord, habit.id)
            if row is None:
                raise HabitNotFoundError(habit.id)
            _apply_fields(row, habit)

            wanted = set(habit.completions)
            for completion in list(row.completions):
                if completion.completed_on not in wanted:
                    row.completions.remove(completion)
            existing = {c.completed_on for c in row.completions}
            for day in sorted(wanted - existing):
                row.completions.append(HabitCompletion(habit_id=habit.id, completed_on=day))

            session.add(row)
            session.flush()
            return _to_domain(row)

    def delete(self, habit_id: str) -> None:
        """Delete a habit; its completions go with it."""
        with self.session_factory() as session:
            row = session.get(HabitRecord, habit_id)
            if row is not None:
                session.delete(row)
                logger.info("Habit deleted", extra={"habit_id": habit_id})

    def clear(self) -> None:
        """Delete every habit and completion."""
        with self.session_factory() as session:
            rows = session.exec(select(HabitRecord)).all()
            for row in rows:
                session.delete(row)
            logger.info("All habits cleared", extra={"count": len(rows)})


__all__ = ["SQLModelHabitRepository"]

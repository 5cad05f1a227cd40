"""Habit repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ..habit import Habit


class HabitNotFoundError(LookupError):
    """Raised when a habit id does not match any stored habit."""

    def __init__(self, habit_id: str):
        super().__init__(f"Habit {habit_id} not found")
        self.habit_id = habit_id


class HabitRepository(Protocol):
    """Storage for habits and their completion records."""

    def get(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self) -> list[Habit]:
        """List all habits in creation order."""
        ...

    def add(self, habit: Habit) -> Habit:
        """Persist a new habit."""
        ...

    def update(self, habit: Habit) -> Habit:
        """Replace a stored habit, including its completion record."""
        ...

    def delete(self, habit_id: str) -> None:
        """Delete a habit and its completion history."""
        ...

    def clear(self) -> None:
        """Delete every habit."""
        ...

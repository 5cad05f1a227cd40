"""Habit persistence tables."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from ..domain.habit import MAX_HABIT_ID_LENGTH


class HabitRecord(SQLModel, table=True):
    """Stored habit definition; completions live in ``habit_completion``."""

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(primary_key=True, max_length=MAX_HABIT_ID_LENGTH)
    name: str = Field(nullable=False, max_length=80, index=True)
    color: str = Field(default="#6366F1", max_length=16)
    icon: str = Field(default="checkmark.circle", max_length=64)
    schedule: str = Field(default="daily", max_length=16)
    # comma separated weekday indexes, 0=Sunday
    scheduled_days: str = Field(default="", max_length=32)
    reminder_time: Optional[str] = Field(default=None, max_length=5)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    completions: list["HabitCompletion"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "HabitCompletion",
            back_populates="habit",
            cascade="all, delete-orphan",
        ),
    )


class HabitCompletion(SQLModel, table=True):
    """A single calendar day on which a habit was marked done."""

    __tablename__: ClassVar[str] = "habit_completion"

    habit_id: str = Field(foreign_key="habit.id", primary_key=True, max_length=MAX_HABIT_ID_LENGTH)
    completed_on: str = Field(primary_key=True, max_length=10, index=True)

    habit: "HabitRecord" = Relationship(
        back_populates="completions",
        sa_relationship=relationship("HabitRecord", back_populates="completions"),
    )

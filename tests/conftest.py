"""Pytest configuration and shared fixtures for Momentum tests.

Repository and CLI tests run against a throwaway SQLite database inside the
test's ``tmp_path``; the statistics tests only need plain ``Habit`` values.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from itertools import count
from typing import Iterable

import pytest
from sqlmodel import Session

from momentum.config import BaseConfig
from momentum.domain.habit import Habit, Schedule
from momentum.infra.database import create_db_engine, create_session_factory, init_database
from momentum.infra.repositories import SQLModelHabitRepository, SQLModelSettingsRepository
from momentum.services.tracker import HabitTracker

# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point every Momentum environment variable at the test's temp directory."""

    monkeypatch.setenv("MOMENTUM_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("MOMENTUM_DEV_MODE", "true")
    monkeypatch.delenv("MOMENTUM_DATABASE_URL", raising=False)
    monkeypatch.delenv("MOMENTUM_STREAK_HORIZON_DAYS", raising=False)
    return tmp_path


@pytest.fixture
def config(isolated_env) -> BaseConfig:
    return BaseConfig()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def db_engine(config):
    """Fresh SQLite database with all tables created."""

    engine = create_db_engine(config)
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Raw session for inspecting rows directly."""

    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def settings_repo(session_factory) -> SQLModelSettingsRepository:
    return SQLModelSettingsRepository(session_factory)


class RecordingScheduler:
    """Reminder scheduler double that records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def schedule(self, habit: Habit) -> None:
        self.calls.append(("schedule", habit.id))

    def cancel(self, habit_id: str) -> None:
        self.calls.append(("cancel", habit_id))


@pytest.fixture
def reminders() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def tracker(habit_repo, reminders) -> HabitTracker:
    return HabitTracker(habit_repo, reminders)


@pytest.fixture
def gated_tracker(habit_repo, reminders, settings_repo) -> HabitTracker:
    """Tracker whose reminders follow the stored notifications switch."""

    return HabitTracker(habit_repo, reminders, settings=settings_repo)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory():
    """Factory for in-memory habits with sequential ids.

    Returns:
        Callable: builds a ``Habit``; ``days`` switches the schedule to specific weekdays
    """

    ids = count(1)

    def _create_habit(
        name: str = "Exercise",
        *,
        days: Iterable[int] | None = None,
        completions: Iterable[str | date] = (),
        reminder_time: str | None = None,
    ) -> Habit:
        return Habit(
            id=f"habit-{next(ids)}",
            name=name,
            schedule=Schedule.SPECIFIC if days is not None else Schedule.DAILY,
            scheduled_days=frozenset(days or ()),
            reminder_time=reminder_time,
            completions=tuple(completions),
            created_at=datetime(2023, 12, 1, 8, 30, tzinfo=timezone.utc),
        )

    return _create_habit

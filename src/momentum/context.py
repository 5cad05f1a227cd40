"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import SQLModelHabitRepository, SQLModelSettingsRepository
from .services.reminders import LoggingReminderScheduler, ReminderScheduler
from .services.tracker import HabitTracker


@dataclass
class AppContext:
    """Configuration, repositories and services shared by the CLI."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory
    habit_repo: SQLModelHabitRepository
    settings_repo: SQLModelSettingsRepository
    tracker: HabitTracker

    def dispose(self) -> None:
        self.engine.dispose()


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    reminders: Optional[ReminderScheduler] = None,
) -> AppContext:
    """Create the engine, ensure the schema exists and wire repositories."""

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)

    habit_repo = SQLModelHabitRepository(session_factory)
    settings_repo = SQLModelSettingsRepository(session_factory)
    tracker = HabitTracker(habit_repo, reminders or LoggingReminderScheduler(), settings=settings_repo)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        habit_repo=habit_repo,
        settings_repo=settings_repo,
        tracker=tracker,
    )

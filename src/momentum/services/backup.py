"""JSON import/export of habit records.

Exports use the camelCase layout of the mobile app's storage. Imports accept
either key style and both completion representations (a list of date strings
or a mapping of date string to bool); they are normalized here, once.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from ..domain.habit import MAX_HABIT_ID_LENGTH, Habit, Schedule
from ..domain.repositories import HabitRepository
from ..logging_config import get_logger

logger = get_logger(__name__)


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _parse_created_at(value: Optional[str]) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    if not isinstance(value, str):
        raise ValueError(f"createdAt must be an ISO timestamp, got {value!r}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"Invalid createdAt timestamp {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def habit_from_dict(data: Mapping[str, Any]) -> Habit:
    """Build a :class:`Habit` from a stored JSON object."""

    if not isinstance(data, Mapping):
        raise ValueError(f"Habit entry must be an object, got {type(data).__name__}")
    name = _pick(data, "name")
    if not isinstance(name, str) or not name.strip():
        raise ValueError("Habit entry is missing a name")

    schedule = _pick(data, "schedule", default=Schedule.DAILY.value)
    try:
        schedule = Schedule(schedule)
    except ValueError as exc:
        raise ValueError(f"Unknown schedule {schedule!r} for habit {name!r}") from exc

    habit_id = str(_pick(data, "id", default=uuid.uuid4().hex))
    if len(habit_id) > MAX_HABIT_ID_LENGTH:
        raise ValueError(f"Habit id for {name!r} is longer than {MAX_HABIT_ID_LENGTH} characters")
    scheduled_days = _pick(data, "scheduledDays", "scheduled_days", default=[])
    if not isinstance(scheduled_days, list):
        raise ValueError(f"scheduledDays for habit {name!r} must be a list of weekdays")
    completions = _pick(data, "completions", default=[])
    if not isinstance(completions, (list, Mapping)):
        raise ValueError(f"completions for habit {name!r} must be a list or an object")

    try:
        return Habit(
            id=habit_id,
            name=name.strip(),
            color=_pick(data, "color", default="#6366F1"),
            icon=_pick(data, "icon", default="checkmark.circle"),
            schedule=schedule,
            scheduled_days=frozenset(scheduled_days),
            reminder_time=_pick(data, "reminderTime", "reminder_time"),
            completions=completions,
            created_at=_parse_created_at(_pick(data, "createdAt", "created_at")),
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid habit entry {name!r}: {exc}") from exc


def habit_to_dict(habit: Habit) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": habit.id,
        "name": habit.name,
        "color": habit.color,
        "icon": habit.icon,
        "schedule": habit.schedule.value,
        "completions": list(habit.completions),
        "createdAt": habit.created_at.isoformat(),
    }
    if habit.schedule is Schedule.SPECIFIC:
        data["scheduledDays"] = sorted(habit.scheduled_days)
    if habit.reminder_time:
        data["reminderTime"] = habit.reminder_time
    return data


def load_habits_json(path: Path) -> list[Habit]:
    """Read habits from ``path``; a missing file yields an empty list."""

    if not path.exists():
        return []
    with path.open("r", encoding="utf-8") as fh:
        payload = json.load(fh)
    if not isinstance(payload, list):
        raise ValueError(f"{path} must contain a JSON list of habits")
    return [habit_from_dict(item) for item in payload]


def export_habits_json(*, habits: Iterable[Habit], output_path: Path) -> Path:
    """Write habits to ``output_path`` and return the path written."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [habit_to_dict(habit) for habit in habits]
    with output_path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, ensure_ascii=False)
    logger.info("Habits exported", extra={"count": len(payload), "path": str(output_path)})
    return output_path


def import_habits(repository: HabitRepository, habits: Iterable[Habit]) -> int:
    """Insert new habits and overwrite existing ones by id; return the count written."""

    count = 0
    for habit in habits:
        if repository.get(habit.id) is None:
            repository.add(habit)
        else:
            repository.update(habit)
        count += 1
    logger.info("Habits imported", extra={"count": count})
    return count


__all__ = [
    "export_habits_json",
    "habit_from_dict",
    "habit_to_dict",
    "import_habits",
    "load_habits_json",
]

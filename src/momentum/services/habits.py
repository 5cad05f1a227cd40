"""Habit scheduling, streak and completion statistics.

Everything here is a pure function of its inputs: the caller owns the habit
collection and supplies the reference date (defaulting to today in the local
calendar).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ..config import DEFAULT_STREAK_HORIZON_DAYS
from ..domain.habit import (
    WEEKDAY_NAMES,
    DateLike,
    Habit,
    Schedule,
    date_string,
    to_date,
    today,
    weekday_index,
)

STREAK_HORIZON_DAYS = DEFAULT_STREAK_HORIZON_DAYS
NO_BEST_DAY = "None"


@dataclass(frozen=True, slots=True)
class WeeklyStats:
    """Completion summary for the Sunday-to-Saturday week."""

    completed_count: int
    scheduled_count: int
    best_day_name: str
    completion_rate: float


@dataclass(frozen=True, slots=True)
class HeatmapDay:
    """One calendar cell of the completion heatmap."""

    date: str
    day: int
    percentage: int
    intensity: int


def _reference(reference_date: Optional[DateLike]) -> date:
    return today() if reference_date is None else to_date(reference_date)


def _percent(completed: int, scheduled: int) -> int:
    """Rounded (half-up) percentage with an empty-denominator result of 0."""

    if scheduled <= 0:
        return 0
    ratio = Decimal(completed) * 100 / Decimal(scheduled)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def is_habit_scheduled_for_date(habit: Habit, day: DateLike) -> bool:
    """Return True when the habit is due on ``day``."""

    if habit.schedule is Schedule.DAILY:
        return True
    if not habit.scheduled_days:
        return False
    return weekday_index(day) in habit.scheduled_days


def toggle_completion(habit: Habit, day: DateLike) -> Habit:
    """Return a copy of ``habit`` with ``day`` added to or removed from its completions.

    Scheduling is not checked; ad-hoc completions on unscheduled days are allowed.
    """

    key = date_string(day)
    completions = set(habit.completions)
    if key in completions:
        completions.remove(key)
    else:
        completions.add(key)
    return replace(habit, completions=tuple(completions))


def calculate_streak(
    habit: Habit,
    reference_date: Optional[DateLike] = None,
    *,
    horizon_days: int = STREAK_HORIZON_DAYS,
) -> int:
    """Count consecutive scheduled-and-completed days walking back from the reference date.

    Unscheduled days are skipped without breaking the run. The walk stops at
    the first scheduled day that was not completed, or after ``horizon_days``
    days.
    """

    if not habit.completions:
        return 0

    done = set(habit.completions)
    cursor = _reference(reference_date)
    streak = 0
    for _ in range(horizon_days):
        if is_habit_scheduled_for_date(habit, cursor):
            if cursor.isoformat() not in done:
                break
            streak += 1
        cursor -= timedelta(days=1)
    return streak


def week_start(reference_date: Optional[DateLike] = None) -> date:
    """Return the Sunday that opens the week containing the reference date."""

    ref = _reference(reference_date)
    return ref - timedelta(days=weekday_index(ref))


def get_weekly_stats(
    habits: Iterable[Habit], reference_date: Optional[DateLike] = None
) -> WeeklyStats:
    """Summarize completions over the current Sunday-to-Saturday week."""

    habits = list(habits)
    start = week_start(reference_date)
    completed_total = 0
    scheduled_total = 0
    best_day = NO_BEST_DAY
    best_count = 0

    for offset in range(7):
        day = start + timedelta(days=offset)
        key = day.isoformat()
        completed_today = 0
        for habit in habits:
            if not is_habit_scheduled_for_date(habit, day):
                continue
            scheduled_total += 1
            if key in habit.completions:
                completed_today += 1

        completed_total += completed_today
        # strict comparison keeps the earliest day on ties
        if completed_today > best_count:
            best_count = completed_today
            best_day = WEEKDAY_NAMES[weekday_index(day)]

    rate = (completed_total / scheduled_total * 100) if scheduled_total else 0.0
    return WeeklyStats(
        completed_count=completed_total,
        scheduled_count=scheduled_total,
        best_day_name=best_day,
        completion_rate=rate,
    )


def get_completion_percentage(habits: Iterable[Habit], day: DateLike) -> int:
    """Percentage of the habits scheduled on ``day`` that were completed that day."""

    key = date_string(day)
    scheduled = [habit for habit in habits if is_habit_scheduled_for_date(habit, key)]
    completed = sum(1 for habit in scheduled if key in habit.completions)
    return _percent(completed, len(scheduled))


def get_habit_completion_percentage(
    habit: Habit,
    window_days: int = 30,
    reference_date: Optional[DateLike] = None,
) -> int:
    """Percentage of scheduled days completed over the last ``window_days`` days."""

    done = set(habit.completions)
    cursor = _reference(reference_date)
    scheduled = 0
    completed = 0
    for _ in range(max(window_days, 0)):
        if is_habit_scheduled_for_date(habit, cursor):
            scheduled += 1
            if cursor.isoformat() in done:
                completed += 1
        cursor -= timedelta(days=1)
    return _percent(completed, scheduled)


def heatmap_intensity(percentage: int) -> int:
    """Bucket a completion percentage into intensity levels 0-4."""

    if percentage <= 0:
        return 0
    if percentage < 33:
        return 1
    if percentage < 66:
        return 2
    if percentage < 100:
        return 3
    return 4


def completion_heatmap(
    habits: Iterable[Habit],
    days: int = 42,
    reference_date: Optional[DateLike] = None,
) -> list[HeatmapDay]:
    """Per-date completion cells for the last ``days`` days, oldest first."""

    habits = list(habits)
    end = _reference(reference_date)
    cells: list[HeatmapDay] = []
    for offset in range(max(days, 0) - 1, -1, -1):
        day = end - timedelta(days=offset)
        percentage = get_completion_percentage(habits, day)
        cells.append(
            HeatmapDay(
                date=day.isoformat(),
                day=day.day,
                percentage=percentage,
                intensity=heatmap_intensity(percentage),
            )
        )
    return cells


__all__ = [
    "NO_BEST_DAY",
    "STREAK_HORIZON_DAYS",
    "HeatmapDay",
    "WeeklyStats",
    "calculate_streak",
    "completion_heatmap",
    "get_completion_percentage",
    "get_habit_completion_percentage",
    "get_weekly_stats",
    "heatmap_intensity",
    "is_habit_scheduled_for_date",
    "toggle_completion",
    "week_start",
]

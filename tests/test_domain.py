"""Tests for habit value invariants and date helpers."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from momentum.domain.habit import (
    Habit,
    Schedule,
    UserSettings,
    date_string,
    normalize_completions,
    to_date,
    weekday_index,
)


def test_weekday_index_starts_on_sunday():
    # 2024-01-07 is a Sunday
    assert [weekday_index(date(2024, 1, 7 + i)) for i in range(7)] == [0, 1, 2, 3, 4, 5, 6]


def test_date_string_normalizes_inputs():
    assert date_string(date(2024, 1, 5)) == "2024-01-05"
    assert date_string(datetime(2024, 1, 5, 23, 59)) == "2024-01-05"
    assert date_string(" 2024-01-05 ") == "2024-01-05"


@pytest.mark.parametrize("value", ["2024-13-01", "2024/01/05", "", "yesterday"])
def test_to_date_rejects_malformed_strings(value):
    with pytest.raises(ValueError):
        to_date(value)


def test_normalize_completions_from_list_and_mapping():
    """Both stored representations collapse to the same ordered set."""
    from_list = normalize_completions(["2024-01-03", "2024-01-01", "2024-01-03"])
    from_map = normalize_completions({"2024-01-01": True, "2024-01-02": False, "2024-01-03": True})

    assert from_list == from_map == ("2024-01-01", "2024-01-03")


def test_normalize_completions_rejects_bare_string():
    with pytest.raises(TypeError):
        normalize_completions("2024-01-01")


def test_habit_coerces_schedule_and_days():
    habit = Habit(id="h1", name="Gym", schedule="specific", scheduled_days=[5, 1, 3, 1])

    assert habit.schedule is Schedule.SPECIFIC
    assert habit.scheduled_days == frozenset({1, 3, 5})


@pytest.mark.parametrize("days", [[7], [-1], [0, 9]])
def test_habit_rejects_out_of_range_weekdays(days):
    with pytest.raises(ValueError, match="0..6"):
        Habit(id="h1", name="Gym", schedule=Schedule.SPECIFIC, scheduled_days=days)


def test_habit_rejects_unknown_schedule():
    with pytest.raises(ValueError):
        Habit(id="h1", name="Gym", schedule="weekly")


def test_habit_is_immutable():
    habit = Habit(id="h1", name="Gym")

    with pytest.raises(AttributeError):
        habit.name = "Run"  # type: ignore[misc]


def test_user_settings_defaults_and_validation():
    settings = UserSettings()

    assert settings.name is None
    assert settings.notifications_enabled is False
    assert settings.dark_mode == "auto"
    assert settings.has_completed_onboarding is False
    with pytest.raises(ValueError):
        UserSettings(dark_mode="sepia")

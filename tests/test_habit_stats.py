"""Tests for weekly stats, completion percentages and the heatmap."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from momentum.services.habits import (
    NO_BEST_DAY,
    completion_heatmap,
    get_completion_percentage,
    get_habit_completion_percentage,
    get_weekly_stats,
    heatmap_intensity,
    week_start,
)


class TestWeeklyStats:
    """Tests for the Sunday-to-Saturday weekly summary."""

    def test_empty_habit_list(self):
        stats = get_weekly_stats([], date(2024, 1, 3))

        assert stats.completed_count == 0
        assert stats.scheduled_count == 0
        assert stats.best_day_name == NO_BEST_DAY == "None"
        assert stats.completion_rate == 0

    def test_week_starts_on_sunday(self):
        assert week_start(date(2024, 1, 3)) == date(2023, 12, 31)
        assert week_start(date(2023, 12, 31)) == date(2023, 12, 31)
        assert week_start(date(2024, 1, 6)) == date(2023, 12, 31)

    def test_counts_scheduled_and_completed(self, habit_factory):
        daily = habit_factory("Water", completions=["2024-01-01", "2024-01-02"])
        mwf = habit_factory("Gym", days={1, 3, 5}, completions=["2024-01-01", "2024-01-03"])

        stats = get_weekly_stats([daily, mwf], date(2024, 1, 3))

        # 7 daily slots plus Mon/Wed/Fri
        assert stats.scheduled_count == 10
        assert stats.completed_count == 4
        assert stats.best_day_name == "Monday"
        assert stats.completion_rate == pytest.approx(40.0)

    def test_completions_outside_the_week_are_ignored(self, habit_factory):
        habit = habit_factory(completions=["2023-12-30", "2024-01-07", "2024-01-02"])

        stats = get_weekly_stats([habit], date(2024, 1, 2))

        assert stats.completed_count == 1
        assert stats.best_day_name == "Tuesday"

    def test_unscheduled_completions_do_not_count(self, habit_factory):
        habit = habit_factory(days={1}, completions=["2024-01-02"])

        stats = get_weekly_stats([habit], date(2024, 1, 3))

        assert stats.completed_count == 0
        assert stats.scheduled_count == 1
        assert stats.best_day_name == "None"
        assert stats.completion_rate == 0

    def test_tie_goes_to_earliest_day(self, habit_factory):
        habit = habit_factory(completions=["2024-01-04", "2024-01-02"])

        stats = get_weekly_stats([habit], date(2024, 1, 5))

        assert stats.best_day_name == "Tuesday"

    def test_sunday_can_be_best_day(self, habit_factory):
        habit = habit_factory(completions=["2023-12-31"])

        assert get_weekly_stats([habit], date(2024, 1, 1)).best_day_name == "Sunday"

    def test_rate_is_not_rounded(self, habit_factory):
        habit = habit_factory(completions=["2024-01-01"])

        stats = get_weekly_stats([habit], date(2024, 1, 1))

        assert stats.completion_rate == pytest.approx(100 / 7)


class TestCompletionPercentageForDate:
    """Tests for the share of scheduled habits completed on one date."""

    def test_no_habits_returns_zero(self):
        assert get_completion_percentage([], "2024-01-01") == 0

    def test_single_completed_daily_habit(self, habit_factory):
        habit = habit_factory(completions=["2024-01-01"])

        assert get_completion_percentage([habit], "2024-01-01") == 100

    def test_only_scheduled_habits_are_counted(self, habit_factory):
        done = habit_factory(completions=["2024-01-02"])
        not_done = habit_factory()
        mondays = habit_factory(days={1})

        assert get_completion_percentage([done, not_done, mondays], "2024-01-02") == 50

    def test_nothing_scheduled_returns_zero(self, habit_factory):
        mondays = habit_factory(days={1}, completions=["2024-01-02"])

        assert get_completion_percentage([mondays], "2024-01-02") == 0

    def test_rounds_to_nearest(self, habit_factory):
        habits = [habit_factory(completions=["2024-01-01"]) for _ in range(2)]
        habits.append(habit_factory())

        assert get_completion_percentage(habits, date(2024, 1, 1)) == 67

    def test_rounds_half_up(self, habit_factory):
        habits = [habit_factory(completions=["2024-01-01"])]
        habits += [habit_factory() for _ in range(7)]

        assert get_completion_percentage(habits, "2024-01-01") == 13


class TestHabitCompletionPercentage:
    """Tests for one habit's completion rate over a trailing window."""

    def test_half_of_daily_window(self, habit_factory):
        end = date(2024, 1, 10)
        habit = habit_factory(completions=[end - timedelta(days=i) for i in range(0, 10, 2)])

        assert get_habit_completion_percentage(habit, 10, end) == 50

    def test_specific_schedule_window(self, habit_factory):
        habit = habit_factory(days={1, 3, 5}, completions=["2024-01-01", "2024-01-02"])

        # Mon, Wed and Fri fall inside the week ending Sunday 2024-01-07
        assert get_habit_completion_percentage(habit, 7, date(2024, 1, 7)) == 33

    def test_window_excludes_older_days(self, habit_factory):
        habit = habit_factory(completions=["2024-01-01"])

        assert get_habit_completion_percentage(habit, 5, date(2024, 1, 10)) == 0

    def test_never_scheduled_returns_zero(self, habit_factory):
        habit = habit_factory(days=set(), completions=["2024-01-01"])

        assert get_habit_completion_percentage(habit, 30, date(2024, 1, 1)) == 0

    def test_default_window_is_thirty_days(self, habit_factory):
        end = date(2024, 3, 1)
        habit = habit_factory(completions=[end - timedelta(days=i) for i in range(15)])

        assert get_habit_completion_percentage(habit, reference_date=end) == 50


class TestHeatmap:
    """Tests for the calendar heatmap cells."""

    @pytest.mark.parametrize(
        ("percentage", "level"),
        [(0, 0), (1, 1), (32, 1), (33, 2), (65, 2), (66, 3), (99, 3), (100, 4)],
    )
    def test_intensity_buckets(self, percentage, level):
        assert heatmap_intensity(percentage) == level

    def test_cells_are_oldest_first(self, habit_factory):
        habit = habit_factory(completions=["2024-01-02"])

        cells = completion_heatmap([habit], days=3, reference_date=date(2024, 1, 3))

        assert [c.date for c in cells] == ["2024-01-01", "2024-01-02", "2024-01-03"]
        assert [c.day for c in cells] == [1, 2, 3]
        assert [c.percentage for c in cells] == [0, 100, 0]
        assert [c.intensity for c in cells] == [0, 4, 0]

    def test_default_covers_six_weeks(self):
        cells = completion_heatmap([], reference_date=date(2024, 2, 11))

        assert len(cells) == 42
        assert cells[-1].date == "2024-02-11"
        assert all(cell.percentage == 0 for cell in cells)

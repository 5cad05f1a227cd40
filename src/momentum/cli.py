"""Command-line interface for Momentum."""

from __future__ import annotations

import functools
from datetime import date
from pathlib import Path
from typing import Optional

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .domain.habit import DARK_MODE_CHOICES, WEEKDAY_NAMES, Habit, Schedule, date_string, to_date, today
from .domain.repositories import HabitNotFoundError
from .logging_config import setup_logging
from .services import backup
from .services import habits as stats
from .services.onboarding import STARTER_HABITS, complete_onboarding

_DAY_LABELS = {name[:3].lower(): index for index, name in enumerate(WEEKDAY_NAMES)}
_HEATMAP_GLYPHS = " ░▒▓█"


def _handle_errors(func):
    """Report domain errors as click errors instead of tracebacks."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except HabitNotFoundError as exc:
            raise click.ClickException(f"Habit {exc.habit_id} not found") from exc
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper


def _parse_days(raw: str) -> frozenset[int]:
    """Parse ``"1,3,5"`` or ``"mon,wed,fri"`` into weekday indexes (0=Sunday)."""

    days: set[int] = set()
    for part in raw.split(","):
        token = part.strip().lower()
        if not token:
            continue
        if token.isdigit():
            days.add(int(token))
        elif token[:3] in _DAY_LABELS:
            days.add(_DAY_LABELS[token[:3]])
        else:
            raise ValueError(f"Unknown weekday {part.strip()!r}")
    return frozenset(days)


def _parse_date_option(value: Optional[str]) -> date:
    return today() if value is None else to_date(value)


def _resolve_habit(app: AppContext, habit_ref: str) -> Habit:
    """Find a habit by full id or by a unique id prefix."""

    habit = app.habit_repo.get(habit_ref)
    if habit is not None:
        return habit
    matches = [h for h in app.tracker.habits() if h.id.startswith(habit_ref)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise ValueError(f"Habit id prefix {habit_ref!r} is ambiguous")
    raise HabitNotFoundError(habit_ref)


def _describe_schedule(habit: Habit) -> str:
    if habit.schedule is Schedule.DAILY:
        return "daily"
    if not habit.scheduled_days:
        return "never"
    return ",".join(WEEKDAY_NAMES[day][:3] for day in sorted(habit.scheduled_days))


@click.group()
@click.option("--verbose", is_flag=True, default=False, help="Echo log records to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Track habits, streaks and completion stats."""

    config = BaseConfig()
    setup_logging(config, console=verbose)
    app = create_app_context(config)
    ctx.obj = app
    ctx.call_on_close(app.dispose)


@cli.command("add")
@click.argument("name")
@click.option("--color", default="#6366F1", show_default=True)
@click.option("--icon", default="checkmark.circle", show_default=True)
@click.option("--days", default=None, help="Only on these weekdays, e.g. mon,wed,fri or 1,3,5")
@click.option("--reminder", default=None, help="Daily reminder time, HH:MM")
@click.pass_obj
@_handle_errors
def add_habit(app: AppContext, name: str, color: str, icon: str, days: Optional[str], reminder: Optional[str]) -> None:
    """Add a new habit."""

    schedule = Schedule.SPECIFIC if days is not None else Schedule.DAILY
    habit = app.tracker.add_habit(
        name,
        color=color,
        icon=icon,
        schedule=schedule,
        scheduled_days=_parse_days(days) if days is not None else (),
        reminder_time=reminder,
    )
    click.echo(f"Added habit {habit.id[:8]}: {habit.name} ({_describe_schedule(habit)})")


@cli.command("list")
@click.option("--date", "on_date", default=None, help="Reference date, YYYY-MM-DD")
@click.pass_obj
@_handle_errors
def list_habits(app: AppContext, on_date: Optional[str]) -> None:
    """List habits with their streak and 30-day completion rate."""

    reference = _parse_date_option(on_date)
    habits = app.tracker.habits()
    if not habits:
        click.echo("No habits yet.")
        return
    for habit in habits:
        mark = "✓" if habit.is_completed_on(reference) else "·"
        due = "due" if stats.is_habit_scheduled_for_date(habit, reference) else "off"
        streak = stats.calculate_streak(
            habit, reference, horizon_days=app.config.STREAK_HORIZON_DAYS
        )
        rate = stats.get_habit_completion_percentage(habit, 30, reference)
        click.echo(
            f"{habit.id[:8]} {mark} {habit.name} [{_describe_schedule(habit)}, {due}] "
            f"streak: {streak}, 30d: {rate}%"
        )


@cli.command("edit")
@click.argument("habit_ref")
@click.option("--name", default=None)
@click.option("--color", default=None)
@click.option("--icon", default=None)
@click.option("--days", default=None, help="Switch to specific weekdays, e.g. mon,wed,fri")
@click.option("--daily", is_flag=True, default=False, help="Switch to a daily schedule")
@click.option("--reminder", default=None, help="Daily reminder time, HH:MM")
@click.option("--no-reminder", is_flag=True, default=False, help="Remove the reminder")
@click.pass_obj
@_handle_errors
def edit_habit(
    app: AppContext,
    habit_ref: str,
    name: Optional[str],
    color: Optional[str],
    icon: Optional[str],
    days: Optional[str],
    daily: bool,
    reminder: Optional[str],
    no_reminder: bool,
) -> None:
    """Edit a habit's name, look, schedule or reminder."""

    if daily and days is not None:
        raise click.UsageError("Use either --daily or --days, not both.")
    if reminder and no_reminder:
        raise click.UsageError("Use either --reminder or --no-reminder, not both.")

    habit = _resolve_habit(app, habit_ref)
    changes: dict = {}
    if name is not None:
        changes["name"] = name.strip()
    if color is not None:
        changes["color"] = color
    if icon is not None:
        changes["icon"] = icon
    if daily:
        changes.update(schedule=Schedule.DAILY, scheduled_days=frozenset())
    elif days is not None:
        changes.update(schedule=Schedule.SPECIFIC, scheduled_days=_parse_days(days))
    if reminder:
        changes["reminder_time"] = reminder
    elif no_reminder:
        changes["reminder_time"] = None
    if not changes:
        click.echo("Nothing to change.")
        return
    updated = app.tracker.edit_habit(habit.id, **changes)
    click.echo(f"Updated habit {updated.id[:8]}: {updated.name} ({_describe_schedule(updated)})")


@cli.command("done")
@click.argument("habit_ref")
@click.option("--date", "on_date", default=None, help="Day to toggle, YYYY-MM-DD (default today)")
@click.pass_obj
@_handle_errors
def toggle_done(app: AppContext, habit_ref: str, on_date: Optional[str]) -> None:
    """Toggle a habit's completion for a day."""

    habit = _resolve_habit(app, habit_ref)
    key = date_string(_parse_date_option(on_date))
    updated = app.tracker.toggle_completion(habit.id, key)
    state = "completed" if updated.is_completed_on(key) else "not completed"
    click.echo(f"{updated.name} marked {state} on {key}")


@cli.command("delete")
@click.argument("habit_ref")
@click.confirmation_option(prompt="Delete this habit and its history?")
@click.pass_obj
@_handle_errors
def delete_habit(app: AppContext, habit_ref: str) -> None:
    """Delete a habit and its completion history."""

    habit = _resolve_habit(app, habit_ref)
    app.tracker.delete_habit(habit.id)
    click.echo(f"Deleted habit {habit.id[:8]}: {habit.name}")


@cli.command("streak")
@click.argument("habit_ref")
@click.option("--date", "on_date", default=None, help="Reference date, YYYY-MM-DD")
@click.pass_obj
@_handle_errors
def show_streak(app: AppContext, habit_ref: str, on_date: Optional[str]) -> None:
    """Show the current streak for a habit."""

    habit = _resolve_habit(app, habit_ref)
    streak = stats.calculate_streak(
        habit, _parse_date_option(on_date), horizon_days=app.config.STREAK_HORIZON_DAYS
    )
    click.echo(f"{habit.name}: {streak} day streak")


@cli.command("stats")
@click.option("--date", "on_date", default=None, help="Reference date, YYYY-MM-DD")
@click.pass_obj
@_handle_errors
def show_stats(app: AppContext, on_date: Optional[str]) -> None:
    """Show this week's summary and the day's completion rate."""

    reference = _parse_date_option(on_date)
    habits = app.tracker.habits()
    weekly = stats.get_weekly_stats(habits, reference)
    click.echo(f"Week of {stats.week_start(reference).isoformat()}")
    click.echo(f"  Completed: {weekly.completed_count}")
    click.echo(f"  Best day: {weekly.best_day_name}")
    click.echo(f"  Success rate: {round(weekly.completion_rate)}%")
    click.echo(f"{reference.isoformat()}: {stats.get_completion_percentage(habits, reference)}% done")


@cli.command("heatmap")
@click.option("--days", default=42, show_default=True, type=click.IntRange(min=1))
@click.option("--date", "on_date", default=None, help="Last day shown, YYYY-MM-DD")
@click.pass_obj
@_handle_errors
def show_heatmap(app: AppContext, days: int, on_date: Optional[str]) -> None:
    """Print a completion heatmap, one row per week."""

    cells = stats.completion_heatmap(app.tracker.habits(), days, _parse_date_option(on_date))
    for start in range(0, len(cells), 7):
        row = cells[start:start + 7]
        glyphs = "".join(_HEATMAP_GLYPHS[cell.intensity] for cell in row)
        click.echo(f"{row[0].date} {glyphs}")


@cli.command("onboard")
@click.option("--name", default=None, help="Your name")
@click.option(
    "--select",
    "selected",
    multiple=True,
    type=int,
    help="Starter habit number (repeatable); omit to list the starters",
)
@click.option("--reminder", default=None, help="Daily reminder time for the starters, HH:MM")
@click.pass_obj
@_handle_errors
def onboard(app: AppContext, name: Optional[str], selected: tuple[int, ...], reminder: Optional[str]) -> None:
    """Pick starter habits and finish onboarding."""

    if not selected:
        for index, starter in enumerate(STARTER_HABITS):
            click.echo(f"{index}: {starter.icon} {starter.name}")
        return
    created = complete_onboarding(
        app.tracker,
        app.settings_repo,
        selected=selected,
        name=name,
        reminder_time=reminder,
    )
    click.echo(f"Onboarding complete: {len(created)} habit(s) added.")


@cli.command("settings")
@click.option("--name", default=None)
@click.option("--dark-mode", type=click.Choice(DARK_MODE_CHOICES), default=None)
@click.option("--notifications/--no-notifications", default=None)
@click.pass_obj
@_handle_errors
def settings_cmd(
    app: AppContext,
    name: Optional[str],
    dark_mode: Optional[str],
    notifications: Optional[bool],
) -> None:
    """Show or update user settings."""

    changes: dict = {}
    if name is not None:
        changes["name"] = name.strip() or None
    if dark_mode is not None:
        changes["dark_mode"] = dark_mode
    current = app.settings_repo.update(**changes) if changes else app.settings_repo.load()
    if notifications is not None:
        current = app.tracker.set_notifications(notifications)
    click.echo(f"name: {current.name or '-'}")
    click.echo(f"notifications: {'on' if current.notifications_enabled else 'off'}")
    click.echo(f"dark mode: {current.dark_mode}")
    click.echo(f"onboarded: {'yes' if current.has_completed_onboarding else 'no'}")


@cli.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
@_handle_errors
def import_cmd(app: AppContext, path: Path) -> None:
    """Import habits from a JSON file."""

    count = app.tracker.import_habits(backup.load_habits_json(path))
    click.echo(f"Imported {count} habit(s) from {path}")


@cli.command("export")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
@_handle_errors
def export_cmd(app: AppContext, path: Path) -> None:
    """Export habits to a JSON file."""

    written = backup.export_habits_json(habits=app.tracker.habits(), output_path=path)
    click.echo(f"Export written: {written}")


@cli.command("reset")
@click.confirmation_option(prompt="Delete all habits and settings?")
@click.pass_obj
def reset(app: AppContext) -> None:
    """Delete every habit and reset settings."""

    app.tracker.clear_all()
    app.settings_repo.clear()
    click.echo("All data cleared.")


def main() -> None:  # pragma: no cover - console entry point
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()

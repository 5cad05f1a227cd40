"""Habit value types and local-calendar date helpers.

Every date that reaches the statistics core goes through :func:`to_date`, so
completion keys and weekday lookups always agree on the same local calendar
day. Aware datetimes are converted to local time first; naive ones are taken
as already local.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Iterable, Mapping, Optional, Union

DATE_FORMAT = "%Y-%m-%d"
WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)
DEFAULT_COLOR = "#6366F1"
DEFAULT_ICON = "checkmark.circle"
MAX_HABIT_ID_LENGTH = 64
DARK_MODE_CHOICES = ("auto", "light", "dark")

DateLike = Union[date, datetime, str]


def today() -> date:
    """Return today's date in the local calendar."""

    return date.today()


def to_date(value: DateLike) -> date:
    """Normalize a date, datetime or ``YYYY-MM-DD`` string to a local date."""

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), DATE_FORMAT).date()
        except ValueError as exc:
            raise ValueError(f"Invalid date string {value!r}; expected YYYY-MM-DD") from exc
    raise TypeError(f"Unsupported date value: {value!r}")


def date_string(value: DateLike) -> str:
    """Return the canonical ``YYYY-MM-DD`` key for a date-like value."""

    return to_date(value).isoformat()


def weekday_index(value: DateLike) -> int:
    """Weekday as 0=Sunday .. 6=Saturday."""

    return (to_date(value).weekday() + 1) % 7


def normalize_completions(raw: Union[Iterable[DateLike], Mapping[str, bool], None]) -> tuple[str, ...]:
    """Collapse either completion representation into a sorted tuple of date keys.

    Accepts an iterable of dates/date strings, or a mapping of date string to
    bool where only truthy entries count as completed.
    """

    if raw is None:
        return ()
    if isinstance(raw, Mapping):
        items: Iterable[DateLike] = [key for key, done in raw.items() if done]
    elif isinstance(raw, (str, bytes)):
        raise TypeError("completions must be a collection of dates, not a single string")
    else:
        items = raw
    return tuple(sorted({date_string(item) for item in items}))


class Schedule(str, Enum):
    """Recurrence rule for a habit."""

    DAILY = "daily"
    SPECIFIC = "specific"


@dataclass(frozen=True, slots=True)
class Habit:
    """A recurring user intention with its completion record."""

    id: str
    name: str
    color: str = DEFAULT_COLOR
    icon: str = DEFAULT_ICON
    schedule: Schedule = Schedule.DAILY
    scheduled_days: frozenset[int] = frozenset()
    reminder_time: Optional[str] = None
    completions: tuple[str, ...] = ()
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        object.__setattr__(self, "schedule", Schedule(self.schedule))

        days = frozenset(int(day) for day in self.scheduled_days or ())
        invalid = sorted(day for day in days if not 0 <= day <= 6)
        if invalid:
            raise ValueError(f"scheduled_days must be within 0..6, got {invalid}")
        object.__setattr__(self, "scheduled_days", days)

        object.__setattr__(self, "completions", normalize_completions(self.completions))

    def is_completed_on(self, value: DateLike) -> bool:
        return date_string(value) in self.completions


@dataclass(slots=True)
class UserSettings:
    """User-level preferences persisted alongside habits."""

    name: Optional[str] = None
    notifications_enabled: bool = False
    dark_mode: str = "auto"
    has_completed_onboarding: bool = False

    def __post_init__(self) -> None:
        if self.dark_mode not in DARK_MODE_CHOICES:
            raise ValueError(
                f"dark_mode must be one of {', '.join(DARK_MODE_CHOICES)}; got {self.dark_mode!r}"
            )


__all__ = [
    "DATE_FORMAT",
    "DARK_MODE_CHOICES",
    "DEFAULT_COLOR",
    "DEFAULT_ICON",
    "WEEKDAY_NAMES",
    "DateLike",
    "Habit",
    "Schedule",
    "UserSettings",
    "date_string",
    "normalize_completions",
    "to_date",
    "today",
    "weekday_index",
]

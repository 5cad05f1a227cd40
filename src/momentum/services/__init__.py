"""Service module exports."""

from . import backup, habits, onboarding, reminders, tracker

__all__ = [
    "backup",
    "habits",
    "onboarding",
    "reminders",
    "tracker",
]

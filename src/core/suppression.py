"""Reminder suppression rules — pure business logic.

Decides whether a reminder may fire right now given the user's settings
and the current runtime state. Re-evaluated on every scheduling decision;
nothing here is cached.

No I/O: this module only transforms data.
"""

from __future__ import annotations

from datetime import datetime

from src.data.models import ReminderSettings, ReminderState


def weekday_sunday_first(now: datetime) -> int:
    """Day of week with 0 = Sunday ... 6 = Saturday."""
    return (now.weekday() + 1) % 7


def is_work_hours(settings: ReminderSettings, now: datetime) -> bool:
    """True if now falls on a work day inside [start:00, end:00].

    Both ends are inclusive, so 17:00:00 is still in hours for a 9-17 window.
    A window whose end precedes its start contains nothing.
    """
    if weekday_sunday_first(now) not in settings.work_days:
        return False

    start = now.replace(hour=settings.work_start_hour, minute=0, second=0, microsecond=0)
    end = now.replace(hour=settings.work_end_hour, minute=0, second=0, microsecond=0)
    return start <= now <= end


def pause_reason(
    settings: ReminderSettings, state: ReminderState, now: datetime,
) -> str | None:
    """Return why reminders are suppressed, or None if they may fire.

    Checked in precedence order: snooze, meeting, focus, work hours.
    """
    if state.snooze_until is not None and now < state.snooze_until:
        return "snoozed"
    if settings.auto_pause_in_meetings and state.in_meeting:
        return "in meeting"
    if settings.auto_pause_during_focus and state.in_focus_mode:
        return "focus mode"
    if not is_work_hours(settings, now):
        return "outside work hours"
    return None


def should_pause_reminders(
    settings: ReminderSettings, state: ReminderState, now: datetime,
) -> bool:
    """True if any suppression condition currently blocks reminders."""
    return pause_reason(settings, state, now) is not None

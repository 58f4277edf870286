"""
Posture Guardian — Reminder Scheduler.

The posture/focus reminder state machine. It decides, from the user's
settings and the current suppression conditions (work hours, meetings,
focus mode, snooze), when the next reminder is due, keeps exactly one
cancellable timer armed for that moment, fires best-effort sound and
desktop notification side effects, and re-arms itself.

States:
    Disabled — no timer armed (reminders off, or currently suppressed)
    Armed    — one timer armed for state.next_reminder
    Firing   — transient, while trigger_reminder() runs

This module is provider-agnostic: it depends on ClockPort, AudioPort and
NotificationPort protocols, not on specific implementations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Callable

from src.config import settings as app_settings
from src.core.events import Listener, SchedulerSnapshot, StateEvents
from src.core.pain_log import PainLogStore
from src.core.suppression import pause_reason
from src.data.models import MAX_SNOOZE_MINUTES

if TYPE_CHECKING:
    from src.data.models import PainLocation, PainLog, ReminderSettings, ReminderState
    from src.data.stores import SettingsStore, StateStore
    from src.ports.audio_port import AudioPort
    from src.ports.clock_port import Cancellable, ClockPort
    from src.ports.notification_port import NotificationHandle, NotificationPort

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = "Posture Check"
NOTIFICATION_BODY = "Time to check your posture. Sit up straight and adjust your position."


@dataclass
class ScheduledTask:
    """A one-shot timer: its deadline plus the handle that cancels it."""

    deadline: datetime
    handle: Cancellable | None = None
    cancelled: bool = False

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        if self.handle is not None:
            self.handle.cancel()


class ReminderScheduler:
    """Owns the reminder settings/state and the single reminder timer.

    Every public mutator persists through the stores immediately and then
    publishes a SchedulerSnapshot to subscribers.
    """

    def __init__(
        self,
        settings_store: SettingsStore,
        state_store: StateStore,
        clock: ClockPort,
        audio: AudioPort | None = None,
        notifier: NotificationPort | None = None,
        *,
        sound_resource: str | None = None,
        notification_icon: str | None = None,
        notification_timeout_s: int | None = None,
    ) -> None:
        self._settings_store = settings_store
        self._state_store = state_store
        self._clock = clock
        self._audio = audio
        self._notifier = notifier

        self._sound_resource = sound_resource or app_settings.REMINDER_SOUND_PATH
        self._notification_icon = notification_icon or app_settings.NOTIFICATION_ICON_PATH
        self._notification_timeout_s = (
            notification_timeout_s or app_settings.NOTIFICATION_TIMEOUT_SECONDS
        )

        self._timer: ScheduledTask | None = None
        self._notification: NotificationHandle | None = None
        self._notification_closer: Cancellable | None = None
        self._notifications_blocked = False

        self._events = StateEvents()
        self._pain = PainLogStore(state_store, clock)

        self._init_notifications()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def settings(self) -> ReminderSettings:
        return self._settings_store.settings.model_copy(deep=True)

    @property
    def state(self) -> ReminderState:
        current = self._state_store.state
        return replace(current, pain_logs=list(current.pain_logs))

    @property
    def armed_task(self) -> ScheduledTask | None:
        """The currently armed reminder timer, if any."""
        if self._timer is None or self._timer.cancelled:
            return None
        return self._timer

    @property
    def notifications_blocked(self) -> bool:
        return self._notifications_blocked

    def now(self) -> datetime:
        """Current time according to the scheduler's clock."""
        return self._clock.now()

    def time_until_next(self) -> timedelta | None:
        next_reminder = self._state_store.state.next_reminder
        if next_reminder is None:
            return None
        return next_reminder - self._clock.now()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener with a snapshot after every change. Returns unsubscribe."""
        return self._events.subscribe(listener)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def schedule_next_reminder(self) -> ScheduledTask | None:
        """Cancel any armed timer, then arm the next one if reminders may fire.

        The next reminder is due `interval` minutes after the last one (or
        after now, when nothing has fired yet this cycle).
        """
        self._cancel_timer()

        now = self._clock.now()
        settings = self._settings_store.settings
        state = self._state_store.state

        reason = "disabled" if not settings.enabled else pause_reason(settings, state, now)
        if reason is not None:
            self._state_store.update(is_active=False, next_reminder=None)
            logger.info("Reminders paused (%s)", reason)
            self._publish()
            return None

        base = state.last_reminder or now
        # A stale last_reminder from an earlier session must not yield a past deadline
        target = max(base + timedelta(minutes=settings.interval), now)
        self._state_store.update(is_active=True, next_reminder=target)
        self._arm(target, now)
        logger.info("Next posture reminder at %s", target.isoformat(timespec="seconds"))
        self._publish()
        return self._timer

    def trigger_reminder(self) -> None:
        """Fire a reminder now, then re-arm for the next cycle."""
        now = self._clock.now()
        settings = self._settings_store.settings

        if settings.sound_enabled:
            self._play_sound(settings.sound_volume)
        if settings.notifications_enabled:
            self._show_notification()

        self._state_store.update(last_reminder=now, next_reminder=None)
        logger.info("Posture reminder fired at %s", now.isoformat(timespec="seconds"))
        self.schedule_next_reminder()

    def _arm(self, deadline: datetime, now: datetime) -> None:
        task = ScheduledTask(deadline=deadline)
        delay_ms = (deadline - now).total_seconds() * 1000
        task.handle = self._clock.schedule_once(delay_ms, lambda: self._on_timer(task))
        self._timer = task

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self, task: ScheduledTask) -> None:
        if task is not self._timer or task.cancelled:
            logger.debug("Ignoring superseded reminder timer for %s", task.deadline)
            return
        self._timer = None
        self.trigger_reminder()

    # ------------------------------------------------------------------
    # Control surface
    # ------------------------------------------------------------------

    def start_reminders(self) -> ScheduledTask | None:
        """Enable reminders and restart the cadence from now."""
        if not self._settings_store.settings.enabled:
            self._settings_store.update(enabled=True)
        self._state_store.update(is_active=True, last_reminder=None, snooze_until=None)
        logger.info("Posture reminders started")
        return self.schedule_next_reminder()

    def stop_reminders(self) -> None:
        """Disarm the timer. last_reminder and snooze_until are kept."""
        self._cancel_timer()
        self._state_store.update(is_active=False, next_reminder=None)
        logger.info("Posture reminders stopped")
        self._publish()

    def snooze(self, minutes: int) -> datetime:
        """Suppress reminders for the given number of minutes.

        The snooze does not arm a timer of its own: reminders resume only
        when something else re-runs schedule_next_reminder() after the
        deadline (a settings change, meeting/focus toggle or dismiss).
        """
        if not 0 < minutes <= MAX_SNOOZE_MINUTES:
            raise ValueError(
                f"Snooze minutes must be between 1 and {MAX_SNOOZE_MINUTES}, got {minutes!r}"
            )
        until = self._clock.now() + timedelta(minutes=minutes)
        self._state_store.update(snooze_until=until)
        logger.info(
            "Posture reminders snoozed for %d min (until %s)",
            minutes, until.isoformat(timespec="seconds"),
        )
        self.schedule_next_reminder()
        return until

    def dismiss_reminder(self) -> ScheduledTask | None:
        """Acknowledge the current reminder and arm the next cycle."""
        self._close_notification()
        return self.schedule_next_reminder()

    def set_in_meeting(self, in_meeting: bool) -> ScheduledTask | None:
        self._state_store.update(in_meeting=bool(in_meeting))
        return self.schedule_next_reminder()

    def set_in_focus_mode(self, in_focus_mode: bool) -> ScheduledTask | None:
        self._state_store.update(in_focus_mode=bool(in_focus_mode))
        return self.schedule_next_reminder()

    def update_settings(self, **changes) -> ReminderSettings:
        """Merge setting changes, persist them and re-evaluate the schedule.

        Raises ValueError on unknown keys or invalid values.
        """
        self._settings_store.update(**changes)
        if changes.get("notifications_enabled") and not self._notifications_blocked:
            self._init_notifications()
        self.schedule_next_reminder()
        return self.settings

    def shutdown(self) -> None:
        """Disarm everything before the process exits."""
        self.stop_reminders()
        self._close_notification()

    # ------------------------------------------------------------------
    # Pain log
    # ------------------------------------------------------------------

    def log_pain(
        self, level: int, location: PainLocation | str, notes: str | None = None,
    ) -> PainLog:
        entry = self._pain.log_pain(level, location, notes)
        self._publish()
        return entry

    def get_pain_logs(self, days: int = 7) -> list[PainLog]:
        return self._pain.get_pain_logs(days)

    def clear_logs(self) -> None:
        self._pain.clear_logs()
        self._publish()

    # ------------------------------------------------------------------
    # Side effects (best-effort, never fatal)
    # ------------------------------------------------------------------

    def _init_notifications(self) -> None:
        """Ask for notification permission once, if it was never decided."""
        if self._notifier is None or not self._settings_store.settings.notifications_enabled:
            return
        try:
            permission = self._notifier.permission()
            if permission == "default":
                permission = self._notifier.request_permission()
        except Exception as exc:
            logger.error("Notification permission check failed: %s", exc)
            return
        if permission == "denied":
            self._notifications_blocked = True
            logger.info("Notification permission denied; desktop notifications disabled")

    def _play_sound(self, volume: float) -> None:
        if self._audio is None:
            return
        try:
            self._audio.play(self._sound_resource, volume)
        except Exception as exc:
            logger.error("Error playing reminder sound: %s", exc)

    def _show_notification(self) -> None:
        if self._notifier is None or self._notifications_blocked:
            return
        try:
            permission = self._notifier.permission()
            if permission == "denied":
                self._notifications_blocked = True
                logger.info("Notification permission denied; desktop notifications disabled")
                return
            if permission != "granted":
                return

            self._close_notification()
            handle = self._notifier.show(
                NOTIFICATION_TITLE,
                NOTIFICATION_BODY,
                icon=self._notification_icon,
                timeout=self._notification_timeout_s,
            )
            self._notification = handle
            self._notification_closer = self._clock.schedule_once(
                self._notification_timeout_s * 1000,
                lambda: self._auto_close(handle),
            )
        except Exception as exc:
            logger.error("Error showing posture notification: %s", exc)

    def _auto_close(self, handle: NotificationHandle) -> None:
        if self._notification is handle:
            self._notification_closer = None
            self._close_notification()

    def _close_notification(self) -> None:
        if self._notification_closer is not None:
            self._notification_closer.cancel()
            self._notification_closer = None
        if self._notification is None:
            return
        handle, self._notification = self._notification, None
        try:
            handle.close()
        except Exception as exc:
            logger.error("Error closing posture notification: %s", exc)

    def _publish(self) -> None:
        if len(self._events):
            self._events.emit(SchedulerSnapshot(settings=self.settings, state=self.state))


def format_time_until(next_reminder: datetime | None, now: datetime) -> str:
    """Countdown text for the next reminder: "M:SS", "Due now" or "Not scheduled"."""
    if next_reminder is None:
        return "Not scheduled"

    remaining = next_reminder - now
    if remaining <= timedelta(0):
        return "Due now"

    minutes, seconds = divmod(int(remaining.total_seconds()), 60)
    return f"{minutes}:{seconds:02d}"

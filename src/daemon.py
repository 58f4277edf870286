"""
Posture Guardian — Reminder daemon.

Wires the scheduler to the real adapters (asyncio timers, pygame audio,
plyer desktop notifications) and keeps the event loop alive until the
process is interrupted.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from src.adapters.asyncio_clock import AsyncioClock
from src.adapters.plyer_notifier import PlyerNotifier
from src.adapters.pygame_audio import PygameAudioPlayer
from src.config import settings
from src.core.events import SchedulerSnapshot
from src.core.scheduler import ReminderScheduler, format_time_until
from src.data.db import RecordDB
from src.data.stores import SettingsStore, StateStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def build_scheduler(
    db_path: str | None = None,
    loop: asyncio.AbstractEventLoop | None = None,
) -> ReminderScheduler:
    """Create a scheduler backed by the configured database and adapters."""
    db = RecordDB(db_path=db_path)
    return ReminderScheduler(
        settings_store=SettingsStore(db),
        state_store=StateStore(db),
        clock=AsyncioClock(loop=loop, timezone=settings.TIMEZONE),
        audio=PygameAudioPlayer(),
        notifier=PlyerNotifier(),
        sound_resource=settings.REMINDER_SOUND_PATH,
        notification_icon=settings.NOTIFICATION_ICON_PATH,
        notification_timeout_s=settings.NOTIFICATION_TIMEOUT_SECONDS,
    )


def _log_snapshot(snapshot: SchedulerSnapshot, now: datetime) -> None:
    state = snapshot.state
    if state.next_reminder is None:
        logger.debug("State: active=%s, next reminder not scheduled", state.is_active)
        return
    logger.debug(
        "State: active=%s, next reminder in %s",
        state.is_active, format_time_until(state.next_reminder, now),
    )


async def run(auto_start: bool | None = None) -> None:
    """Run the reminder loop until cancelled."""
    scheduler = build_scheduler(loop=asyncio.get_running_loop())
    unsubscribe = scheduler.subscribe(
        lambda snapshot: _log_snapshot(snapshot, scheduler.now())
    )

    if auto_start is None:
        auto_start = settings.AUTO_START
    if auto_start:
        scheduler.start_reminders()
    else:
        logger.info("AUTO_START is off; waiting without an armed reminder")

    try:
        await asyncio.Event().wait()
    finally:
        unsubscribe()
        scheduler.shutdown()
        logger.info("Posture Guardian stopped")


def main() -> None:
    """Start the Posture Guardian daemon."""
    logging.basicConfig(level=settings.LOG_LEVEL, format=LOG_FORMAT)
    logger.info("Starting Posture Guardian (db: %s)", settings.DATABASE_PATH)
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("Interrupted")

"""Asyncio clock adapter — implements ClockPort on an asyncio event loop.

Timers are loop.call_later() handles, so reminder callbacks run on the
loop thread between other events, never concurrently with them.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)


class AsyncioClock:
    """Wall-clock time plus one-shot timers on an event loop."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        timezone: str = "",
    ) -> None:
        self._loop = loop
        self._tz = ZoneInfo(timezone) if timezone else None

    def now(self) -> datetime:
        if self._tz is None:
            return datetime.now().astimezone()
        return datetime.now(self._tz)

    def schedule_once(
        self, delay_ms: float, callback: Callable[[], None]
    ) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        delay_s = max(delay_ms, 0) / 1000
        logger.debug("Timer armed for %.1fs from now", delay_s)
        return loop.call_later(delay_s, callback)

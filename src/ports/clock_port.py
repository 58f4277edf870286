"""Clock port — abstract interface for wall-clock time and one-shot timers.

Core modules depend on this protocol, never on a specific event loop, so
the scheduler can be driven by a fake clock in tests.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Protocol


class Cancellable(Protocol):
    """Handle returned by schedule_once; cancel() is idempotent."""

    def cancel(self) -> None: ...


class ClockPort(Protocol):
    """Abstract time source used by core modules."""

    def now(self) -> datetime: ...

    def schedule_once(
        self, delay_ms: float, callback: Callable[[], None]
    ) -> Cancellable: ...

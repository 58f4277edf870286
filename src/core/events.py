"""State-change events for reminder UIs.

Listeners subscribe once and receive a SchedulerSnapshot after every
mutation, instead of polling the scheduler.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from src.data.models import ReminderSettings, ReminderState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchedulerSnapshot:
    """Copy of settings and state at the moment of a change."""

    settings: ReminderSettings
    state: ReminderState


Listener = Callable[[SchedulerSnapshot], None]


class StateEvents:
    """Minimal synchronous publish/subscribe hub."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        if not callable(listener):
            raise ValueError("Listener must be callable")
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, snapshot: SchedulerSnapshot) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Error in state listener %r", listener)

    def __len__(self) -> int:
        return len(self._listeners)

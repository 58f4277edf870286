"""
Posture Guardian — Pain Log.

Append-only record of self-reported discomfort, stored inside the runtime
state so it persists with it. Also provides the aggregations the dashboard
charts are built from (average level, counts per body area, daily trend).
"""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from src.data.models import PainLocation, PainLog

if TYPE_CHECKING:
    from src.data.stores import StateStore
    from src.ports.clock_port import ClockPort

logger = logging.getLogger(__name__)

MIN_PAIN_LEVEL = 0
MAX_PAIN_LEVEL = 10
MAX_HISTORY_DAYS = 3650


class PainLogStore:
    """Appends, queries and clears pain logs held by a StateStore."""

    def __init__(self, state_store: StateStore, clock: ClockPort) -> None:
        self._store = state_store
        self._clock = clock

    def log_pain(
        self,
        level: int,
        location: PainLocation | str,
        notes: str | None = None,
    ) -> PainLog:
        """Append a new pain report stamped with the current time.

        Raises ValueError if level is outside 0-10 or location is unknown.
        """
        if (
            not isinstance(level, int)
            or isinstance(level, bool)
            or not MIN_PAIN_LEVEL <= level <= MAX_PAIN_LEVEL
        ):
            raise ValueError(
                f"Pain level must be between {MIN_PAIN_LEVEL} and {MAX_PAIN_LEVEL}, got {level!r}"
            )
        location = PainLocation(location)

        entry = PainLog(
            id=str(uuid.uuid4()),
            timestamp=self._clock.now(),
            level=level,
            location=location,
            notes=notes or None,
        )
        self._store.update(pain_logs=[*self._store.state.pain_logs, entry])
        logger.info("Pain logged: level %d at %s", entry.level, location.value)
        return entry

    def get_pain_logs(self, days: int = 7) -> list[PainLog]:
        """Return entries logged within the last `days` days (24h blocks).

        Raises ValueError if days is negative or beyond MAX_HISTORY_DAYS.
        """
        if not 0 <= days <= MAX_HISTORY_DAYS:
            raise ValueError(f"Days must be between 0 and {MAX_HISTORY_DAYS}, got {days!r}")
        cutoff = self._clock.now() - timedelta(days=days)
        return [log for log in self._store.state.pain_logs if log.timestamp >= cutoff]

    def clear_logs(self) -> None:
        """Drop every pain log."""
        count = len(self._store.state.pain_logs)
        self._store.update(pain_logs=[])
        logger.info("Cleared %d pain logs", count)


# ---------------------------------------------------------------------------
# Aggregations
# ---------------------------------------------------------------------------


@dataclass
class PainSummary:
    """Headline numbers for a set of pain logs."""

    total: int
    average_level: float
    by_location: dict[PainLocation, int]
    most_common_location: PainLocation | None


@dataclass
class DailyPain:
    """Average pain level for one calendar day."""

    day: date
    average_level: float   # rounded to one decimal, 0.0 when count == 0
    count: int


def summarize_pain(logs: list[PainLog]) -> PainSummary:
    """Total, mean level and per-location counts for the given logs."""
    if not logs:
        return PainSummary(total=0, average_level=0.0, by_location={}, most_common_location=None)

    counts = Counter(log.location for log in logs)
    # Ties go to the location reported first
    most_common = max(counts, key=lambda loc: counts[loc])
    return PainSummary(
        total=len(logs),
        average_level=sum(log.level for log in logs) / len(logs),
        by_location=dict(counts),
        most_common_location=most_common,
    )


def daily_pain_trend(logs: list[PainLog], days: int, today: date | datetime) -> list[DailyPain]:
    """One entry per day for the `days` days ending today, oldest first.

    Days without reports are included with count 0.
    """
    if isinstance(today, datetime):
        today = today.date()

    by_day: dict[date, list[int]] = {}
    for log in logs:
        by_day.setdefault(log.timestamp.date(), []).append(log.level)

    trend: list[DailyPain] = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        levels = by_day.get(day, [])
        avg = round(sum(levels) / len(levels), 1) if levels else 0.0
        trend.append(DailyPain(day=day, average_level=avg, count=len(levels)))
    return trend

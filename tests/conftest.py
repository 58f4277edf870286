"""Shared test fixtures and configuration.

Sets up environment variables before any src imports, and provides a
deterministic clock plus fake audio/notification ports so the scheduler
can be exercised without timers or I/O.
"""

import os

# Patch env vars BEFORE any src imports
os.environ.setdefault("DATABASE_PATH", ":memory:")
os.environ.setdefault("TIMEZONE", "")
os.environ.setdefault("REMINDER_SOUND_PATH", "sounds/test-chime.mp3")
os.environ.setdefault("AUTO_START", "false")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

from datetime import datetime, timedelta

import pytest

# Wednesday, inside the default 9-17 Monday-Friday window
T0 = datetime(2025, 1, 15, 10, 0)


class FakeTimer:
    def __init__(self, due: datetime, callback) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeClock:
    """ClockPort whose time only moves when the test says so."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start
        self.timers: list[FakeTimer] = []

    def now(self) -> datetime:
        return self.current

    def schedule_once(self, delay_ms, callback) -> FakeTimer:
        timer = FakeTimer(self.current + timedelta(milliseconds=max(delay_ms, 0)), callback)
        self.timers.append(timer)
        return timer

    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def set(self, when: datetime) -> None:
        """Jump to `when` without firing anything."""
        self.current = when

    def advance(self, **delta) -> None:
        """Move time forward, firing due timers in deadline order."""
        target = self.current + timedelta(**delta)
        while True:
            due = [t for t in self.pending() if t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.current = timer.due
            timer.fired = True
            timer.callback()
        self.current = target


class FakeAudio:
    def __init__(self) -> None:
        self.plays: list[tuple[str, float]] = []
        self.error: Exception | None = None

    def play(self, resource: str, volume: float) -> bool:
        if self.error is not None:
            raise self.error
        self.plays.append((resource, volume))
        return True


class FakeNotification:
    def __init__(self, title, body, icon, timeout) -> None:
        self.title = title
        self.body = body
        self.icon = icon
        self.timeout = timeout
        self.closed = False

    def close(self) -> None:
        self.closed = True


class FakeNotifier:
    def __init__(self, permission: str = "granted") -> None:
        self.permission_value = permission
        self.grant_on_request: str = permission
        self.permission_checks = 0
        self.requests = 0
        self.shown: list[FakeNotification] = []
        self.error: Exception | None = None

    def permission(self) -> str:
        self.permission_checks += 1
        return self.permission_value

    def request_permission(self) -> str:
        self.requests += 1
        self.permission_value = self.grant_on_request
        return self.permission_value

    def show(self, title, body, *, icon=None, timeout=10) -> FakeNotification:
        if self.error is not None:
            raise self.error
        note = FakeNotification(title, body, icon, timeout)
        self.shown.append(note)
        return note


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_posture.db")


@pytest.fixture
def record_db(tmp_db_path):
    """Return a RecordDB instance backed by a temp file."""
    from src.data.db import RecordDB
    return RecordDB(db_path=tmp_db_path)


@pytest.fixture
def settings_store(record_db):
    from src.data.stores import SettingsStore
    return SettingsStore(record_db)


@pytest.fixture
def state_store(record_db):
    from src.data.stores import StateStore
    return StateStore(record_db)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def audio():
    return FakeAudio()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def make_scheduler(settings_store, state_store, clock, audio, notifier):
    """Factory building a ReminderScheduler over the shared stores and fakes."""
    from src.core.scheduler import ReminderScheduler

    def _make(**overrides):
        kwargs = {
            "settings_store": settings_store,
            "state_store": state_store,
            "clock": clock,
            "audio": audio,
            "notifier": notifier,
            "sound_resource": "chime.mp3",
            "notification_icon": "icon.png",
            "notification_timeout_s": 10,
        }
        kwargs.update(overrides)
        return ReminderScheduler(**kwargs)

    return _make


@pytest.fixture
def scheduler(make_scheduler):
    return make_scheduler()


@pytest.fixture
def write_raw(tmp_db_path, record_db):
    """Store raw (possibly corrupt) text under a key, bypassing JSON encoding."""
    import sqlite3

    def _write(key: str, raw: str) -> None:
        with sqlite3.connect(tmp_db_path) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO records (key, value, updated_at) VALUES (?, ?, '')",
                (key, raw),
            )

    return _write

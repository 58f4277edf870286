"""
Posture Guardian — Settings and State stores.

Each store owns one in-memory record, loads it from RecordDB on creation
and writes it back on every mutation.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from pydantic import ValidationError

from src.data.db import SETTINGS_KEY, STATE_KEY, RecordDB
from src.data.models import ReminderSettings, ReminderState

logger = logging.getLogger(__name__)


class SettingsStore:
    """Holds the reminder configuration."""

    def __init__(self, db: RecordDB) -> None:
        self._db = db
        self._settings = self._load()

    @property
    def settings(self) -> ReminderSettings:
        return self._settings

    def _load(self) -> ReminderSettings:
        data = self._db.load(SETTINGS_KEY)
        if data is None:
            return ReminderSettings()
        try:
            return ReminderSettings.model_validate(data)
        except ValidationError as exc:
            logger.warning("Stored reminder settings invalid, using defaults: %s", exc)
            return ReminderSettings()

    def reload(self) -> ReminderSettings:
        """Re-read settings from the database."""
        self._settings = self._load()
        return self._settings

    def update(self, **changes) -> ReminderSettings:
        """Shallow-merge changes into the current settings and persist.

        Raises ValueError on unknown keys or out-of-range values; nothing is
        saved in that case.
        """
        unknown = sorted(set(changes) - set(ReminderSettings.model_fields))
        if unknown:
            raise ValueError(f"Unknown reminder settings: {', '.join(unknown)}")

        merged = {**self._settings.model_dump(), **changes}
        self._settings = ReminderSettings.model_validate(merged)
        self._db.save(SETTINGS_KEY, self._settings.to_record())
        logger.debug("Reminder settings updated: %s", sorted(changes))
        return self._settings


class StateStore:
    """Holds the runtime reminder state, including the pain log list."""

    def __init__(self, db: RecordDB) -> None:
        self._db = db
        self._state = self._load()

    @property
    def state(self) -> ReminderState:
        return self._state

    def _load(self) -> ReminderState:
        data = self._db.load(STATE_KEY)
        if data is None:
            return ReminderState()
        try:
            state = ReminderState.from_dict(data)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Stored reminder state invalid, using defaults: %s", exc)
            return ReminderState()
        # Reminders never auto-resume across sessions
        state.is_active = False
        return state

    def reload(self) -> ReminderState:
        """Re-read state from the database."""
        self._state = self._load()
        return self._state

    def update(self, **changes) -> ReminderState:
        """Replace the given fields and persist."""
        self._state = replace(self._state, **changes)
        self.save()
        return self._state

    def save(self) -> None:
        self._db.save(STATE_KEY, self._state.to_dict())

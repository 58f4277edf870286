"""
Posture Guardian — Data Models.

Reminder settings are user-facing configuration and are validated with
pydantic, like the application config. Runtime state and pain logs are
plain dataclasses that serialize themselves to the JSON records kept by
src.data.db.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

# Upper bounds keep every derived deadline inside the datetime range
MAX_INTERVAL_MINUTES = 7 * 24 * 60
MAX_SNOOZE_MINUTES = 7 * 24 * 60


class PainLocation(str, Enum):
    """Body area a pain report refers to."""

    NECK = "neck"
    UPPER_BACK = "upper_back"
    LOWER_BACK = "lower_back"
    SHOULDERS = "shoulders"
    WRISTS = "wrists"
    OTHER = "other"

    @property
    def label(self) -> str:
        """Display name, e.g. "Upper Back"."""
        return " ".join(word.capitalize() for word in self.value.split("_"))


class ReminderSettings(BaseModel):
    """Reminder configuration, persisted under the "postureSettings" key.

    Stored JSON uses camelCase keys; Python code uses the snake_case names.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    enabled: bool = True
    interval: int = Field(default=30, gt=0, le=MAX_INTERVAL_MINUTES)  # minutes between reminders
    work_start_hour: int = Field(default=9, ge=0, le=23)
    work_end_hour: int = Field(default=17, ge=0, le=23)
    work_days: set[int] = Field(default_factory=lambda: {1, 2, 3, 4, 5})  # 0 = Sunday
    sound_enabled: bool = True
    sound_volume: float = Field(default=0.5, ge=0.0, le=1.0)
    notifications_enabled: bool = True
    auto_pause_in_meetings: bool = True
    auto_pause_during_focus: bool = True
    snooze_options: list[int] = Field(default_factory=lambda: [5, 15, 30, 60])

    @field_validator("work_days")
    @classmethod
    def check_work_days(cls, v: set[int]) -> set[int]:
        bad = sorted(d for d in v if not 0 <= d <= 6)
        if bad:
            raise ValueError(f"Work days must be 0-6 (0 = Sunday), got {bad}")
        return v

    @field_validator("snooze_options")
    @classmethod
    def check_snooze_options(cls, v: list[int]) -> list[int]:
        if any(not 0 < minutes <= MAX_SNOOZE_MINUTES for minutes in v):
            raise ValueError(
                f"Snooze options must be between 1 and {MAX_SNOOZE_MINUTES} minutes"
            )
        return v

    @field_serializer("work_days")
    def dump_work_days(self, days: set[int]) -> list[int]:
        return sorted(days)

    def to_record(self) -> dict:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class PainLog:
    """A single self-reported discomfort event. Never mutated once logged."""

    id: str
    timestamp: datetime
    level: int                  # 0-10
    location: PainLocation
    notes: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "level": self.level,
            "location": self.location.value,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> PainLog:
        return cls(
            id=str(data["id"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            level=int(data["level"]),
            location=PainLocation(data["location"]),
            notes=data.get("notes"),
        )


def _parse_time(raw: str | None) -> datetime | None:
    if raw is None:
        return None
    return datetime.fromisoformat(raw)


def _format_time(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass
class ReminderState:
    """Runtime reminder state, persisted under the "postureState" key."""

    is_active: bool = False
    last_reminder: datetime | None = None
    next_reminder: datetime | None = None
    snooze_until: datetime | None = None
    in_meeting: bool = False
    in_focus_mode: bool = False
    pain_logs: list[PainLog] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "isActive": self.is_active,
            "lastReminder": _format_time(self.last_reminder),
            "nextReminder": _format_time(self.next_reminder),
            "snoozeUntil": _format_time(self.snooze_until),
            "inMeeting": self.in_meeting,
            "inFocusMode": self.in_focus_mode,
            "painLogs": [log.to_dict() for log in self.pain_logs],
        }

    @classmethod
    def from_dict(cls, data: dict) -> ReminderState:
        """Build state from a stored record.

        Raises KeyError, TypeError or ValueError on malformed records.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected a JSON object, got {type(data).__name__}")
        return cls(
            is_active=bool(data.get("isActive", False)),
            last_reminder=_parse_time(data.get("lastReminder")),
            next_reminder=_parse_time(data.get("nextReminder")),
            snooze_until=_parse_time(data.get("snoozeUntil")),
            in_meeting=bool(data.get("inMeeting", False)),
            in_focus_mode=bool(data.get("inFocusMode", False)),
            pain_logs=[PainLog.from_dict(item) for item in data.get("painLogs", [])],
        )

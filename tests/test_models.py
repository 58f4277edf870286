"""Tests for src.data.models — settings, state and pain log records."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from src.data.models import (
    MAX_INTERVAL_MINUTES,
    MAX_SNOOZE_MINUTES,
    PainLocation,
    PainLog,
    ReminderSettings,
    ReminderState,
)


def test_settings_defaults():
    s = ReminderSettings()
    assert s.enabled is True
    assert s.interval == 30
    assert s.work_start_hour == 9
    assert s.work_end_hour == 17
    assert s.work_days == {1, 2, 3, 4, 5}
    assert s.sound_volume == 0.5
    assert s.snooze_options == [5, 15, 30, 60]


def test_settings_record_uses_camel_case_keys():
    record = ReminderSettings(work_days={5, 1, 3}).to_record()
    assert record["workStartHour"] == 9
    assert record["autoPauseInMeetings"] is True
    assert record["workDays"] == [1, 3, 5]
    assert "work_days" not in record


def test_settings_accept_both_key_styles():
    s = ReminderSettings.model_validate({"workEndHour": 18, "sound_volume": 0.2})
    assert s.work_end_hour == 18
    assert s.sound_volume == 0.2


@pytest.mark.parametrize(
    "field, value",
    [
        ("interval", 0),
        ("interval", -10),
        ("interval", MAX_INTERVAL_MINUTES + 1),
        ("interval", 10**10),
        ("work_start_hour", 24),
        ("work_end_hour", -1),
        ("sound_volume", 1.5),
        ("work_days", {7}),
        ("snooze_options", [5, 0]),
        ("snooze_options", [5, MAX_SNOOZE_MINUTES + 1]),
    ],
)
def test_settings_reject_out_of_range(field, value):
    with pytest.raises(ValidationError):
        ReminderSettings(**{field: value})


def test_settings_accept_upper_bounds():
    s = ReminderSettings(interval=MAX_INTERVAL_MINUTES, snooze_options=[MAX_SNOOZE_MINUTES])
    assert s.interval == MAX_INTERVAL_MINUTES
    assert s.snooze_options == [MAX_SNOOZE_MINUTES]


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        ReminderSettings(interval=0)


def test_pain_location_label():
    assert PainLocation.UPPER_BACK.label == "Upper Back"
    assert PainLocation.NECK.label == "Neck"
    assert PainLocation("wrists") is PainLocation.WRISTS


def test_state_defaults():
    state = ReminderState()
    assert state.is_active is False
    assert state.last_reminder is None
    assert state.pain_logs == []


def test_state_round_trip_keeps_pain_logs():
    log = PainLog(
        id="abc",
        timestamp=datetime(2025, 1, 15, 10, 0),
        level=7,
        location=PainLocation.NECK,
        notes="ache",
    )
    state = ReminderState(
        is_active=True,
        last_reminder=datetime(2025, 1, 15, 9, 30),
        snooze_until=datetime(2025, 1, 15, 11, 0),
        in_meeting=True,
        pain_logs=[log],
    )

    data = state.to_dict()
    assert data["lastReminder"] == "2025-01-15T09:30:00"
    assert data["painLogs"][0]["location"] == "neck"

    restored = ReminderState.from_dict(data)
    assert restored == state


def test_state_from_dict_rejects_non_object():
    with pytest.raises(TypeError):
        ReminderState.from_dict(["not", "a", "dict"])


def test_state_from_dict_rejects_bad_timestamp():
    with pytest.raises(ValueError):
        ReminderState.from_dict({"lastReminder": "yesterday-ish"})

"""Tests for src.config — AppConfig validation."""

import pytest
from pydantic import ValidationError

from src.config import AppConfig


def test_defaults():
    config = AppConfig()
    assert config.DATABASE_PATH == "data/posture.db"
    assert config.NOTIFICATION_TIMEOUT_SECONDS == 10
    assert config.AUTO_START is True
    assert config.TIMEZONE == ""


def test_valid_timezone_kept():
    assert AppConfig(TIMEZONE=" Asia/Jerusalem ").TIMEZONE == "Asia/Jerusalem"


def test_unknown_timezone_rejected():
    with pytest.raises(ValidationError):
        AppConfig(TIMEZONE="Mars/Olympus_Mons")


def test_timeout_parsed_from_string():
    assert AppConfig(NOTIFICATION_TIMEOUT_SECONDS="15").NOTIFICATION_TIMEOUT_SECONDS == 15


def test_non_positive_timeout_rejected():
    with pytest.raises(ValidationError):
        AppConfig(NOTIFICATION_TIMEOUT_SECONDS="0")


def test_log_level_normalized():
    assert AppConfig(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"


def test_unknown_log_level_rejected():
    with pytest.raises(ValidationError):
        AppConfig(LOG_LEVEL="chatty")


@pytest.mark.parametrize("raw, expected", [("true", True), ("0", False), ("no", False)])
def test_auto_start_parsed(raw, expected):
    assert AppConfig(AUTO_START=raw).AUTO_START is expected

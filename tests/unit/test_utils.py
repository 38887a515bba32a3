"""
Tests for utils module.
"""

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from satpredict.utils import (
    LOG_LEVEL_ENV_VAR,
    ensure_utc,
    format_duration,
    get_current_utc,
    parse_datetime,
    setup_logging,
)


class TestParseDatetime:
    """Tests for parse_datetime function."""

    def test_standard_format(self) -> None:
        dt = parse_datetime("2025-01-15 12:30:45")
        assert dt == datetime(2025, 1, 15, 12, 30, 45)

    def test_iso_format_with_z(self) -> None:
        assert parse_datetime("2025-01-15T12:30:45Z") == datetime(2025, 1, 15, 12, 30, 45)

    def test_offset_converted_to_utc(self) -> None:
        dt = parse_datetime("2025-01-15T12:30:45+02:00")
        assert dt == datetime(2025, 1, 15, 10, 30, 45)
        assert dt.tzinfo is None

    def test_date_only(self) -> None:
        dt = parse_datetime("2025-01-15")
        assert dt.hour == 0

    def test_invalid_format(self) -> None:
        with pytest.raises(ValueError):
            parse_datetime("not a date")


class TestUtcHelpers:
    """Tests for ensure_utc and get_current_utc."""

    def test_naive_unchanged(self) -> None:
        dt = datetime(2024, 1, 1, 12, 0, 0)
        assert ensure_utc(dt) is dt

    def test_aware_converted(self) -> None:
        dt = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert ensure_utc(dt) == datetime(2024, 1, 1, 17, 0, 0)

    def test_current_utc_is_naive(self) -> None:
        now = get_current_utc()
        assert now.tzinfo is None
        assert abs(now - datetime.now(timezone.utc).replace(tzinfo=None)) < timedelta(seconds=5)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_level_applied(self, monkeypatch) -> None:
        monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)
        setup_logging("WARNING")
        assert logging.getLogger().level == logging.WARNING

    def test_env_override(self, monkeypatch) -> None:
        monkeypatch.setenv(LOG_LEVEL_ENV_VAR, "DEBUG")
        setup_logging("ERROR")
        assert logging.getLogger().level == logging.DEBUG

    def test_log_file(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)
        log_file = tmp_path / "predict.log"
        setup_logging("INFO", str(log_file))
        logging.getLogger("satpredict.test").info("hello")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "hello" in log_file.read_text()


class TestFormatDuration:
    """Tests for format_duration."""

    @pytest.mark.parametrize(
        "seconds,expected",
        [(42.4, "00:42"), (582.0, "09:42"), (3600.0, "1:00:00"), (5430.6, "1:30:31")],
    )
    def test_format(self, seconds, expected) -> None:
        assert format_duration(seconds) == expected

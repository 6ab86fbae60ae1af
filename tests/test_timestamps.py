"""Unit tests for timestamp utilities."""

from datetime import datetime, timedelta, timezone

import pytest

from platform_monitor.utils.timestamps import ensure_utc, format_timestamp, parse_timestamp, utc_now


class TestUtcNow:
    """Tests for utc_now function."""

    def test_utc_now_returns_utc_datetime(self):
        now = utc_now()

        assert now.tzinfo == timezone.utc
        assert isinstance(now, datetime)

    def test_utc_now_is_recent(self):
        before = datetime.now(timezone.utc)
        now = utc_now()
        after = datetime.now(timezone.utc)

        assert before <= now <= after


class TestEnsureUtc:
    """Tests for ensure_utc function."""

    def test_ensure_utc_with_none(self):
        assert ensure_utc(None) is None

    def test_ensure_utc_with_naive_datetime(self):
        """Naive datetimes are treated as UTC."""
        result = ensure_utc(datetime(2025, 11, 4, 12, 0))

        assert result == datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc)

    def test_ensure_utc_converts_other_timezones(self):
        eastern = timezone(timedelta(hours=-5))

        result = ensure_utc(datetime(2025, 11, 4, 7, 0, tzinfo=eastern))

        assert result == datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc)
        assert result.tzinfo == timezone.utc


class TestParseTimestamp:
    """Tests for parse_timestamp function."""

    @pytest.mark.parametrize(
        "value",
        [
            "2025-11-04T12:00:00Z",
            "2025-11-04T12:00:00.000Z",
            "2025-11-04T12:00:00+00:00",
            "2025-11-04T07:00:00-05:00",
            "2025-11-04T12:00:00",
            1762257600,
            1762257600.0,
        ],
    )
    def test_parse_supported_formats(self, value):
        assert parse_timestamp(value) == datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "   ", "yesterday", True])
    def test_parse_unusable_values(self, value):
        assert parse_timestamp(value) is None

    def test_parse_out_of_range_epoch(self):
        assert parse_timestamp(10**20) is None


class TestFormatTimestamp:
    """Tests for format_timestamp function."""

    def test_format_utc(self):
        dt = datetime(2025, 11, 4, 12, 0, 30, 123456, tzinfo=timezone.utc)

        assert format_timestamp(dt) == "2025-11-04T12:00:30Z"

    def test_format_converts_to_utc(self):
        dt = datetime(2025, 11, 4, 14, 0, tzinfo=timezone(timedelta(hours=2)))

        assert format_timestamp(dt) == "2025-11-04T12:00:00Z"

    def test_format_none(self):
        assert format_timestamp(None) == ""

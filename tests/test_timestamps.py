"""Unit tests for timestamp utilities."""

from datetime import datetime, timedelta, timezone

from app.utils.timestamps import format_utc, utc_now


class TestUtcNow:
    """Tests for utc_now function."""

    def test_utc_now_returns_utc_datetime(self):
        """Test that utc_now returns a timezone-aware datetime in UTC."""
        now = utc_now()

        assert now.tzinfo == timezone.utc
        assert isinstance(now, datetime)

    def test_utc_now_is_recent(self):
        """Test that utc_now returns a recent timestamp."""
        before = datetime.now(timezone.utc)
        now = utc_now()
        after = datetime.now(timezone.utc)

        assert before <= now <= after


class TestFormatUtc:
    """Tests for format_utc function."""

    def test_format_aware_utc(self):
        """Test formatting a UTC datetime uses the Z suffix."""
        dt = datetime(2025, 11, 4, 12, 0, 0, tzinfo=timezone.utc)
        assert format_utc(dt) == "2025-11-04T12:00:00Z"

    def test_format_naive_treated_as_utc(self):
        """Test that naive datetimes are treated as UTC."""
        assert format_utc(datetime(2025, 11, 4, 12, 0, 0)) == "2025-11-04T12:00:00Z"

    def test_format_converts_other_timezones(self):
        """Test that offsets are converted to UTC."""
        ist = timezone(timedelta(hours=5, minutes=30))
        dt = datetime(2025, 11, 4, 17, 30, 0, tzinfo=ist)
        assert format_utc(dt) == "2025-11-04T12:00:00Z"

    def test_format_none(self):
        """Test that None passes through."""
        assert format_utc(None) is None

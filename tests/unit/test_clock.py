from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from app.core.clock import Clock, FixedClock, SystemClock, to_epoch_millis, truncate_to_millis


class TestSystemClock:
    def test_implements_clock_protocol(self):
        assert isinstance(SystemClock(), Clock)

    def test_returns_utc_with_millisecond_resolution(self):
        now = SystemClock().now()

        assert now.tzinfo is UTC
        assert now.microsecond % 1000 == 0


class TestFixedClock:
    def test_returns_fixed_time(self):
        moment = datetime(2025, 1, 15, 9, 30, tzinfo=UTC)
        clock = FixedClock(moment)

        assert clock.now() == moment
        assert clock.now() == moment

    def test_advance(self):
        clock = FixedClock(datetime(2025, 1, 15, tzinfo=UTC))

        clock.advance(milliseconds=1001)

        assert clock.now() == datetime(2025, 1, 15, 0, 0, 1, 1000, tzinfo=UTC)

    def test_set_time(self):
        clock = FixedClock(datetime(2025, 1, 15, tzinfo=UTC))
        later = datetime(2025, 6, 15, tzinfo=UTC)

        clock.set_time(later)

        assert clock.now() == later

    def test_truncates_sub_millisecond_precision(self):
        clock = FixedClock(datetime(2025, 1, 15, 0, 0, 0, 123_456, tzinfo=UTC))

        assert clock.now().microsecond == 123_000

    def test_rejects_naive_datetime(self):
        with pytest.raises(ValueError, match="UTC-aware"):
            FixedClock(datetime(2025, 1, 15))

    def test_rejects_non_utc_offset(self):
        with pytest.raises(ValueError, match="UTC-aware"):
            FixedClock(datetime(2025, 1, 15, tzinfo=timezone(timedelta(hours=2))))


def test_to_epoch_millis():
    assert to_epoch_millis(datetime(1970, 1, 1, tzinfo=UTC)) == 0
    assert to_epoch_millis(datetime(2024, 12, 31, 23, 0, tzinfo=UTC)) == 1_735_686_000_000


def test_truncate_to_millis():
    moment = datetime(2025, 1, 1, 0, 0, 0, 999_999, tzinfo=UTC)

    assert truncate_to_millis(moment).microsecond == 999_000

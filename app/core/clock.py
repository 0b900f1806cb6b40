from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol, runtime_checkable

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)


@runtime_checkable
class Clock(Protocol):
    def now(self) -> datetime: ...


def truncate_to_millis(moment: datetime) -> datetime:
    return moment.replace(microsecond=moment.microsecond - moment.microsecond % 1000)


def to_epoch_millis(moment: datetime) -> int:
    """Whole milliseconds since the Unix epoch, exact for aware datetimes."""
    return (moment - EPOCH) // _ONE_MS


class SystemClock:
    """Reads the host clock as a millisecond-resolution UTC instant."""

    def now(self) -> datetime:
        return truncate_to_millis(datetime.now(UTC))


class FixedClock:
    """Clock pinned to a given instant, moved only by explicit calls.

    Not thread-safe; meant for tests and single-threaded tooling.
    """

    def __init__(self, fixed_time: datetime) -> None:
        self._fixed_time = self._validate(fixed_time)

    def now(self) -> datetime:
        return self._fixed_time

    def set_time(self, new_time: datetime) -> None:
        self._fixed_time = self._validate(new_time)

    def advance(self, *, milliseconds: int = 0, seconds: float = 0) -> datetime:
        self._fixed_time = truncate_to_millis(
            self._fixed_time + timedelta(milliseconds=milliseconds, seconds=seconds)
        )
        return self._fixed_time

    @staticmethod
    def _validate(moment: datetime) -> datetime:
        if moment.tzinfo is None or moment.utcoffset() != timedelta(0):
            raise ValueError(f"datetime must be UTC-aware, got tzinfo={moment.tzinfo}")
        return truncate_to_millis(moment.astimezone(UTC))


__all__ = ["Clock", "EPOCH", "FixedClock", "SystemClock", "to_epoch_millis", "truncate_to_millis"]

"""Decomposition of one UTC instant into the calendar facts of a timezone.

Every field of a :class:`TimeReport` is derived from the single instant
passed in, and every offset-dependent field reuses one offset value, so the
local time, UTC time and offset of a report always describe the same moment.
"""

from __future__ import annotations

import calendar
from datetime import UTC, date, datetime, time
from zoneinfo import ZoneInfo

from app.core.clock import to_epoch_millis
from app.domains.timezones.schemas import TimeReport

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_START_OF_DAY = time(0, 0, 0, 0)
_END_OF_DAY = time(23, 59, 59, 999_000)


def offset_minutes(local: datetime) -> int:
    """Signed offset of an aware datetime from UTC, rounded to whole minutes."""
    offset = local.utcoffset()
    if offset is None:
        raise ValueError("datetime must be timezone-aware")
    return round(offset.total_seconds() / 60)


def format_offset(minutes: int) -> str:
    sign = "+" if minutes >= 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{mins:02d}"


def format_utc_offset(minutes: int) -> str:
    return f"UTC{format_offset(minutes)}"


def format_local_iso(local: datetime, minutes: int) -> str:
    millis = local.microsecond // 1000
    return f"{local:%Y-%m-%dT%H:%M:%S}.{millis:03d}{format_offset(minutes)}"


def format_utc_iso(instant: datetime) -> str:
    utc = instant.astimezone(UTC)
    return f"{utc:%Y-%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}Z"


def describe_utc_difference(minutes: int) -> str:
    if minutes == 0:
        return "same as UTC"

    hours, mins = divmod(abs(minutes), 60)
    parts = []
    if hours:
        parts.append(f"{hours} hour{'' if hours == 1 else 's'}")
    if mins:
        parts.append(f"{mins} minute{'' if mins == 1 else 's'}")
    direction = "ahead of" if minutes > 0 else "behind"
    return f"{' '.join(parts)} {direction} UTC"


def days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def local_day_boundary(day: date, wall: time, zone: ZoneInfo, *, fold: int = 0) -> datetime:
    """Instant at which ``day`` shows ``wall`` on the clocks of ``zone``.

    A wall time skipped by a DST jump is moved out of the gap through UTC;
    ``fold`` picks the earlier (0) or later (1) reading of a repeated time.
    """
    candidate = datetime.combine(day, wall, tzinfo=zone).replace(fold=fold)
    return candidate.astimezone(UTC).astimezone(zone)


def _boundary_iso(day: date, wall: time, zone: ZoneInfo, *, fold: int) -> str:
    boundary = local_day_boundary(day, wall, zone, fold=fold)
    return format_local_iso(boundary, offset_minutes(boundary))


def compute_time_report(instant: datetime, timezone: str) -> TimeReport:
    """Build the report for ``instant`` as seen from ``timezone``.

    ``instant`` must be timezone-aware; ``timezone`` must already be known to
    the host database (see :func:`app.domains.timezones.resolver.is_valid_timezone`).
    """
    if instant.tzinfo is None:
        raise ValueError("instant must be timezone-aware")

    zone = ZoneInfo(timezone)
    local = instant.astimezone(zone)
    minutes = offset_minutes(local)
    local_date = local.date()
    iso_year, iso_week, iso_weekday = local_date.isocalendar()
    dst = local.dst()

    return TimeReport(
        local_time=format_local_iso(local, minutes),
        utc_time=format_utc_iso(instant),
        timezone=timezone,
        offset=format_utc_offset(minutes),
        offset_minutes=minutes,
        timezone_abbreviation=local.tzname() or format_utc_offset(minutes),
        is_dst=bool(dst),
        day_of_week=WEEKDAY_NAMES[iso_weekday - 1],
        iso_week_number=iso_week,
        iso_year=iso_year,
        day_of_year=local_date.timetuple().tm_yday,
        days_in_month=days_in_month(local_date.year, local_date.month),
        days_in_year=days_in_year(local_date.year),
        is_leap_year=calendar.isleap(local_date.year),
        start_of_day=_boundary_iso(local_date, _START_OF_DAY, zone, fold=0),
        end_of_day=_boundary_iso(local_date, _END_OF_DAY, zone, fold=1),
        utc_difference=describe_utc_difference(minutes),
        timestamp_milliseconds=to_epoch_millis(instant),
    )


__all__ = [
    "WEEKDAY_NAMES",
    "compute_time_report",
    "days_in_month",
    "days_in_year",
    "describe_utc_difference",
    "format_local_iso",
    "format_offset",
    "format_utc_iso",
    "format_utc_offset",
    "local_day_boundary",
    "offset_minutes",
]

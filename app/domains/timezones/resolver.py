from __future__ import annotations

import re
from functools import lru_cache
from zoneinfo import available_timezones

# Matches every key shipped in the IANA database, including single-segment
# names ("UTC", "EST5EDT") and signed or hyphenated ones ("Etc/GMT+5").
TIMEZONE_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_+\-]*(?:/[A-Za-z0-9_+\-]+)*$")


@lru_cache(maxsize=1)
def supported_timezones() -> tuple[str, ...]:
    """Sorted identifiers the host timezone database can resolve."""
    return tuple(sorted(available_timezones()))


@lru_cache(maxsize=1)
def _supported_set() -> frozenset[str]:
    return frozenset(supported_timezones())


def matches_timezone_format(name: str) -> bool:
    return bool(TIMEZONE_PATTERN.fullmatch(name))


def is_valid_timezone(name: str) -> bool:
    return name in _supported_set()


__all__ = [
    "TIMEZONE_PATTERN",
    "is_valid_timezone",
    "matches_timezone_format",
    "supported_timezones",
]

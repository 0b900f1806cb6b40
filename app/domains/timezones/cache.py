from __future__ import annotations

from collections import OrderedDict
from collections.abc import Mapping
from dataclasses import dataclass, field

from app.domains.timezones.schemas import TimeReport


def build_cache_key(params: Mapping[str, str]) -> str:
    """Canonical ``name=value&...`` key, independent of parameter order.

    Values are used verbatim; ``Pacific/Auckland`` and ``Pacific/Auckland/``
    map to different keys.
    """
    return "&".join(f"{name}={params[name]}" for name in sorted(params.keys()))


@dataclass(frozen=True)
class CacheEntry:
    report: TimeReport
    created_at_ms: int


@dataclass
class ResponseCache:
    """Short-lived in-process store of computed reports.

    An entry answers lookups for ``ttl_ms`` after it was stored. Older entries
    stay in place as misses until the same key is stored again or the entry
    is evicted as least recently used once ``max_entries`` is reached.
    """

    ttl_ms: int = 1000
    max_entries: int = 10_000
    _entries: OrderedDict[str, CacheEntry] = field(default_factory=OrderedDict, init=False, repr=False)

    def lookup(self, key: str, now_ms: int) -> TimeReport | None:
        entry = self._entries.get(key)
        if entry is None or now_ms - entry.created_at_ms > self.ttl_ms:
            return None
        self._entries.move_to_end(key)
        return entry.report

    def store(self, key: str, report: TimeReport, now_ms: int) -> None:
        self._entries[key] = CacheEntry(report=report, created_at_ms=now_ms)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


__all__ = ["CacheEntry", "ResponseCache", "build_cache_key"]

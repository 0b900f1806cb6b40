"""Domain counters exposed next to the HTTP metrics on ``/metrics``"""

from __future__ import annotations

from prometheus_client import Counter

CACHE_LOOKUPS = Counter(
    "time_report_cache_lookups_total",
    "Response cache lookups by outcome",
    labelnames=("result",),
)

RATE_LIMITED_REQUESTS = Counter(
    "time_report_rate_limited_total",
    "Requests rejected by the per-client rate limiter",
)

REPORT_FAILURES = Counter(
    "time_report_failures_total",
    "Time reports that could not be computed",
)


def record_cache_lookup(hit: bool) -> None:
    CACHE_LOOKUPS.labels(result="hit" if hit else "miss").inc()


__all__ = ["CACHE_LOOKUPS", "RATE_LIMITED_REQUESTS", "REPORT_FAILURES", "record_cache_lookup"]

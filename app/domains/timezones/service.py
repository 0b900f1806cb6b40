from __future__ import annotations

from collections.abc import Mapping

from opentelemetry import trace

from app.core.clock import to_epoch_millis
from app.core.logging import logger
from app.domains.timezones.cache import build_cache_key
from app.domains.timezones.converter import compute_time_report
from app.domains.timezones.exceptions import (
    InvalidTimezoneFormatError,
    MissingTimezoneError,
    RateLimitExceededError,
    TimeComputationError,
    UnknownTimezoneError,
)
from app.domains.timezones.resolver import (
    is_valid_timezone,
    matches_timezone_format,
    supported_timezones,
)
from app.domains.timezones.schemas import TimeReport
from app.domains.timezones.state import TimeServiceState
from app.infra.metrics.prometheus import RATE_LIMITED_REQUESTS, REPORT_FAILURES, record_cache_lookup

TIMEZONE_PARAM = "timezone"


class TimeService:
    """Runs one time request through cache, rate limit, validation and computation.

    Each stage short-circuits the ones after it: a fresh cache entry is
    returned without touching the rate limiter, and a rejected or invalid
    request never reaches the converter.
    """

    def __init__(self, state: TimeServiceState, *, format_check: bool = True) -> None:
        self._state = state
        self._format_check = format_check
        self._tracer = trace.get_tracer(self.__class__.__module__)

    def report_for(self, params: Mapping[str, str], client_id: str) -> TimeReport:
        instant = self._state.clock.now()
        now_ms = to_epoch_millis(instant)
        cache_key = build_cache_key(params)

        with self._tracer.start_as_current_span(
            "TimeService.report_for",
            attributes={"cache.key": cache_key, "client.id": client_id},
        ) as span:
            cached = self._state.cache.lookup(cache_key, now_ms)
            record_cache_lookup(cached is not None)
            span.set_attribute("cache.hit", cached is not None)
            if cached is not None:
                logger.bind(cache_key=cache_key).debug("Serving cached time report")
                return cached

            if not self._state.rate_limiter.admit(client_id, now_ms):
                RATE_LIMITED_REQUESTS.inc()
                logger.bind(client_id=client_id).warning("Rate limit exceeded")
                raise RateLimitExceededError(client_id)

            timezone = self._validated_timezone(params.get(TIMEZONE_PARAM))

            try:
                report = compute_time_report(instant, timezone)
                self._state.cache.store(cache_key, report, now_ms)
            except Exception as exc:
                REPORT_FAILURES.inc()
                logger.bind(cache_key=cache_key).exception("Error computing time report")
                raise TimeComputationError() from exc

            logger.bind(cache_key=cache_key, timezone=timezone).debug("Computed time report")
            return report

    def _validated_timezone(self, timezone: str | None) -> str:
        if not timezone:
            raise MissingTimezoneError()
        if self._format_check and not matches_timezone_format(timezone):
            raise InvalidTimezoneFormatError(timezone)
        if not is_valid_timezone(timezone):
            raise UnknownTimezoneError(timezone)
        return timezone

    def list_timezones(self) -> list[str]:
        return list(supported_timezones())


__all__ = ["TIMEZONE_PARAM", "TimeService"]

from __future__ import annotations

from dataclasses import dataclass

from app.core.clock import Clock, SystemClock
from app.core.config import AppBaseSettings
from app.domains.timezones.cache import ResponseCache
from app.domains.timezones.ratelimit import FixedWindowRateLimiter


@dataclass
class TimeServiceState:
    """Mutable state shared by every request of one application instance.

    Built once by ``create_app`` and cleared on shutdown. Handlers run to
    completion on the event loop without awaiting in between reads and writes,
    so no locking is done here.
    """

    cache: ResponseCache
    rate_limiter: FixedWindowRateLimiter
    clock: Clock

    @classmethod
    def from_settings(cls, settings: AppBaseSettings, *, clock: Clock | None = None) -> "TimeServiceState":
        return cls(
            cache=ResponseCache(
                ttl_ms=settings.CACHE_TTL_MS,
                max_entries=settings.CACHE_MAX_ENTRIES,
            ),
            rate_limiter=FixedWindowRateLimiter(
                window_ms=settings.RATE_LIMIT_WINDOW_MS,
                max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
                max_clients=settings.RATE_LIMIT_MAX_CLIENTS,
            ),
            clock=clock or SystemClock(),
        )

    def close(self) -> None:
        self.cache.clear()
        self.rate_limiter.clear()


__all__ = ["TimeServiceState"]

"""Unit tests for the fixed-window rate limiter."""

from __future__ import annotations

from app.domains.timezones.ratelimit import FixedWindowRateLimiter


class TestFixedWindowRateLimiter:
    def test_admits_up_to_threshold_then_rejects(self):
        limiter = FixedWindowRateLimiter(window_ms=60_000, max_requests=100)

        results = [limiter.admit("10.0.0.1", 1_000 + i) for i in range(101)]

        assert all(results[:100])
        assert results[100] is False

    def test_rejects_until_window_elapses(self):
        limiter = FixedWindowRateLimiter(window_ms=60_000, max_requests=2)
        for _ in range(3):
            limiter.admit("client", 0)

        assert limiter.admit("client", 59_999) is False
        assert limiter.admit("client", 60_000) is True

        window = limiter.window_for("client")
        assert window is not None
        assert window.count == 1
        assert window.started_at_ms == 60_000

    def test_first_request_opens_window(self):
        limiter = FixedWindowRateLimiter()

        assert limiter.admit("client", 42) is True

        window = limiter.window_for("client")
        assert window is not None
        assert (window.count, window.started_at_ms) == (1, 42)

    def test_clients_are_counted_separately(self):
        limiter = FixedWindowRateLimiter(max_requests=1)

        assert limiter.admit("a", 0) is True
        assert limiter.admit("a", 1) is False
        assert limiter.admit("b", 2) is True

    def test_burst_across_window_boundary(self):
        limiter = FixedWindowRateLimiter(window_ms=1_000, max_requests=3)

        late = [limiter.admit("c", 0)] + [limiter.admit("c", 999) for _ in range(2)]
        early = [limiter.admit("c", 1_000 + i) for i in range(3)]

        assert all(late)
        assert all(early)

    def test_client_map_is_bounded(self):
        limiter = FixedWindowRateLimiter(max_clients=2)
        limiter.admit("a", 0)
        limiter.admit("b", 0)
        limiter.admit("a", 1)
        limiter.admit("c", 2)

        assert len(limiter) == 2
        assert limiter.window_for("b") is None
        assert limiter.window_for("a") is not None

    def test_clear(self):
        limiter = FixedWindowRateLimiter()
        limiter.admit("a", 0)

        limiter.clear()

        assert len(limiter) == 0

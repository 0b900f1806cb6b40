from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field

UNKNOWN_CLIENT = "unknown"


@dataclass
class RateWindow:
    count: int
    started_at_ms: int


@dataclass
class FixedWindowRateLimiter:
    """Per-client fixed-window request counter.

    A window opens on a client's first request and lasts ``window_ms``.
    Requests inside it are counted; once the count passes ``max_requests`` the
    rest of the window is rejected. The first request after the window ends
    opens a new one. Bursts of up to twice the limit are possible across a
    window boundary.

    Note: state is per-process. Each worker or instance enforces its own
    windows, and at most ``max_clients`` windows are kept (least recently
    seen clients are dropped first).
    """

    window_ms: int = 60_000
    max_requests: int = 100
    max_clients: int = 10_000
    _windows: OrderedDict[str, RateWindow] = field(default_factory=OrderedDict, init=False, repr=False)

    def admit(self, client_id: str, now_ms: int) -> bool:
        window = self._windows.get(client_id)
        if window is None:
            window = RateWindow(count=0, started_at_ms=now_ms)
            self._windows[client_id] = window
        self._windows.move_to_end(client_id)
        while len(self._windows) > self.max_clients:
            self._windows.popitem(last=False)

        if now_ms - window.started_at_ms < self.window_ms:
            window.count += 1
            return window.count <= self.max_requests

        window.count = 1
        window.started_at_ms = now_ms
        return True

    def window_for(self, client_id: str) -> RateWindow | None:
        return self._windows.get(client_id)

    def clear(self) -> None:
        self._windows.clear()

    def __len__(self) -> int:
        return len(self._windows)


__all__ = ["FixedWindowRateLimiter", "RateWindow", "UNKNOWN_CLIENT"]

import threading
import time
from collections import deque


class InMemoryRateLimiter:
    """
    Sliding-window request log per key (client address + route).

    Each key keeps the timestamps of its accepted requests inside the window.
    Keys with no hits left in their window are swept out. Counters live in
    this process only; several API replicas each enforce their own limit.
    """

    def __init__(self, clock=time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._hits)

    def allow(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        """Record a hit for key if under limit. Returns (allowed, retry_after_seconds)."""
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= window_seconds:
                self._sweep(now, window_seconds)
            hits = self._hits.setdefault(key, deque())
            while hits and now - hits[0] >= window_seconds:
                hits.popleft()
            if len(hits) >= limit:
                return False, max(1, int(hits[0] + window_seconds - now + 0.999))
            hits.append(now)
            return True, 0

    def _sweep(self, now: float, window_seconds: int) -> None:
        stale = [k for k, hits in self._hits.items() if not hits or now - hits[-1] >= window_seconds]
        for k in stale:
            del self._hits[k]
        self._last_sweep = now

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


rate_limiter = InMemoryRateLimiter()

import threading
import time


class InMemoryRateLimiter:
    """
    Fixed-window request counter keyed by client + route.
    Single-process only; each worker keeps its own windows.
    """

    def __init__(self, clock=time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, tuple[int, float]] = {}

    def allow(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        """
        Count one hit for key. Returns (allowed, retry_after_seconds).
        """
        now = self._clock()
        with self._lock:
            hits, started = self._windows.get(key, (0, now))
            if now - started >= window_seconds:
                hits, started = 0, now
            if hits >= limit:
                return False, max(1, int(window_seconds - (now - started)))
            self._windows[key] = (hits + 1, started)
            return True, 0

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


rate_limiter = InMemoryRateLimiter()

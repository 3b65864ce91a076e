import logging
import math
import threading
import time
from fastapi import Request

from roombook.config import settings
from roombook.middleware.error_handler import app_exception_handler
from roombook.utils.exceptions import RateLimitedException

logger = logging.getLogger(__name__)

EXEMPT_PATHS = {"/api/health"}


class RateLimiter:
    """
    Fixed-window request counter per client key.
    The counter is incremented before it is compared, under a lock, so
    concurrent requests cannot all slip in under the limit.
    """

    def __init__(self, limit: int, window_seconds: int, clock=time.monotonic):
        self.limit = limit
        self.window = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, tuple[float, int]] = {}

    def check_and_increment(self, key: str) -> tuple[bool, int]:
        """
        Count one request for `key`.
        Returns: (allowed, seconds until the current window resets)
        """
        now = self._clock()
        with self._lock:
            started, count = self._windows.get(key, (now, 0))
            if now - started >= self.window:
                started, count = now, 0
            count += 1
            self._windows[key] = (started, count)
            if len(self._windows) > 10_000:
                self._prune(now)

        retry_after = max(1, math.ceil(self.window - (now - started)))
        return count <= self.limit, retry_after

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _prune(self, now: float) -> None:
        stale = [k for k, (started, _) in self._windows.items() if now - started >= self.window]
        for k in stale:
            del self._windows[k]


def build_rate_limiter() -> RateLimiter | None:
    if not settings.RATE_LIMIT_ENABLED:
        return None
    return RateLimiter(settings.RATE_LIMIT_MAX, settings.RATE_LIMIT_WINDOW_SECONDS)


async def rate_limit_middleware(request: Request, call_next):
    limiter: RateLimiter | None = getattr(request.app.state, "rate_limiter", None)
    if limiter is None or request.method == "OPTIONS" or request.url.path in EXEMPT_PATHS:
        return await call_next(request)

    client = request.client.host if request.client else "unknown"
    allowed, retry_after = limiter.check_and_increment(client)
    if not allowed:
        logger.warning(f"Rate limit exceeded for {client} on {request.method} {request.url.path}")
        return await app_exception_handler(request, RateLimitedException(retry_after))
    return await call_next(request)

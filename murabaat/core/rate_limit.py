from __future__ import annotations

import logging
import time
from collections import deque
from threading import Lock

from fastapi import Depends, Request

from murabaat.core.config import settings
from murabaat.services.errors import RateLimited

logger = logging.getLogger(__name__)


class MemoryRateLimiter:
    """Sliding-window counters per key, held in process memory.

    Each worker process counts on its own.
    """

    def __init__(self, *, max_keys: int = 20_000) -> None:
        self._max_keys = max_keys
        self._lock = Lock()
        self._windows: dict[str, deque[float]] = {}

    def retry_after(self, key: str, *, limit: int, window_seconds: int) -> int:
        """Record a call under ``key``. Returns 0 if allowed, else seconds to wait."""

        now = time.monotonic()
        with self._lock:
            window = self._windows.setdefault(key, deque())
            while window and window[0] <= now - window_seconds:
                window.popleft()

            if len(window) >= limit:
                return max(1, int(window_seconds - (now - window[0])) + 1)

            window.append(now)
            if len(self._windows) > self._max_keys:
                self._evict_idle(now - window_seconds)
            return 0

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _evict_idle(self, cutoff: float) -> None:
        idle = [k for k, w in self._windows.items() if not w or w[-1] <= cutoff]
        for k in idle:
            del self._windows[k]


_limiter = MemoryRateLimiter()


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    first = forwarded.split(",")[0].strip()
    if first:
        return first
    return request.client.host if request.client else "unknown"


def rate_limit(scope: str, *, limit: int, window_seconds: int | None = None):
    """Route dependency capping calls per client IP within ``scope``."""

    window = window_seconds or settings.rate_limit_window_seconds

    def _dep(request: Request) -> None:
        ip = client_ip(request)
        wait = _limiter.retry_after(f"{scope}:{ip}", limit=limit, window_seconds=window)
        if wait:
            logger.warning("Rate limit hit: scope=%s ip=%s retry_after=%s", scope, ip, wait)
            raise RateLimited(retry_after=wait)

    return Depends(_dep)


def _reset_for_tests() -> None:
    _limiter.reset()

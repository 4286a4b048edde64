# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Login throttling keyed by client address.

The first failed login from an address opens a fixed window of
``login_window_minutes``; once ``login_max_attempts`` failures land inside
that window, further logins from the address are refused until it closes.
A successful login clears the address.

Counters live in process memory: they are not shared between workers and
are lost on restart.
"""

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import HTTPException, Request, status

from apphub.core.config import settings
from apphub.core.security import get_client_ip


@dataclass
class _Window:
    failures: int
    resets_at: float


class LoginRateLimiter:
    def __init__(
        self,
        max_attempts: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def _prune(self, now: float) -> None:
        expired = [key for key, w in self._windows.items() if w.resets_at <= now]
        for key in expired:
            del self._windows[key]

    def retry_after(self, key: str) -> Optional[int]:
        """Seconds until *key* may try again, or None if it is not blocked."""
        with self._lock:
            now = self._clock()
            self._prune(now)
            window = self._windows.get(key)
            if window is None or window.failures < self.max_attempts:
                return None
            return max(1, math.ceil(window.resets_at - now))

    def record_failure(self, key: str) -> int:
        """Count a failed attempt for *key*; returns failures in the window."""
        with self._lock:
            now = self._clock()
            self._prune(now)
            window = self._windows.get(key)
            if window is None:
                window = _Window(failures=0, resets_at=now + self.window_seconds)
                self._windows[key] = window
            window.failures += 1
            return window.failures

    def reset(self, key: str) -> None:
        with self._lock:
            self._windows.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._windows.clear()


login_limiter = LoginRateLimiter(
    max_attempts=settings.login_max_attempts,
    window_seconds=settings.login_window_minutes * 60,
)


def enforce_login_rate_limit(request: Request) -> None:
    """Dependency: refuse the login with 429 while the caller is blocked."""
    wait = login_limiter.retry_after(get_client_ip(request))
    if wait is not None:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts. Please try again later.",
            headers={"Retry-After": str(wait)},
        )

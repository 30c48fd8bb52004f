"""Process-wide fixed-window rate limiting for the /api/v1 routes."""
import math
import time
from typing import Callable

from log import get_logger

logger = get_logger("englearn.rate_limit")

RATE_LIMIT_REQUESTS = 20
RATE_LIMIT_WINDOW = 60
RATE_LIMIT_MESSAGE = "Too many requests, please try again later"


class FixedWindowRateLimiter:
    """Counts requests in fixed windows shared by every caller.

    The counter resets the first time it is checked after the window that
    was opened by the previous reset has elapsed.
    """

    def __init__(self, max_requests: int = RATE_LIMIT_REQUESTS,
                 window: float = RATE_LIMIT_WINDOW,
                 clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window = window
        self.clock = clock
        self.window_start = clock()
        self.count = 0

    def _roll(self, now: float):
        if now - self.window_start >= self.window:
            self.window_start = now
            self.count = 0

    def check(self) -> bool:
        """Return True if the request is allowed, False if rate-limited."""
        now = self.clock()
        self._roll(now)
        if self.count >= self.max_requests:
            logger.warning("Rate limit exceeded", extra={
                "component": "rate_limit", "count": self.count,
            })
            return False
        self.count += 1
        return True

    @property
    def remaining(self) -> int:
        return max(self.max_requests - self.count, 0)

    def reset_in(self) -> int:
        """Whole seconds until the current window closes."""
        left = self.window - (self.clock() - self.window_start)
        return max(int(math.ceil(left)), 0)

    def headers(self) -> dict:
        return {
            "RateLimit-Limit": str(self.max_requests),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_in()),
        }

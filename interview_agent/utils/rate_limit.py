"""Fixed-window request rate limiting per client address."""
import math
import time
from typing import Callable, Dict, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.types import ASGIApp

from interview_agent.errors import error_response


RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


class FixedWindowRateLimiter:
    """Counts hits per key inside fixed windows of ``window_seconds``."""

    def __init__(self, max_requests: int, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, Tuple[float, int]] = {}

    def hit(self, key: str) -> Tuple[bool, int, int]:
        """Record one request; returns (allowed, remaining, seconds until reset)."""
        now = self._clock()
        started, count = self._windows.get(key, (now, 0))
        if now - started >= self.window_seconds:
            started, count = now, 0
        count += 1
        self._windows[key] = (started, count)

        reset = max(0, math.ceil(started + self.window_seconds - now))
        remaining = max(0, self.max_requests - count)
        return count <= self.max_requests, remaining, reset

    def __len__(self) -> int:
        return len(self._windows)

    def prune(self):
        """Drop windows that have already expired."""
        now = self._clock()
        expired = [key for key, (started, _) in self._windows.items() if now - started >= self.window_seconds]
        for key in expired:
            del self._windows[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, limiter: FixedWindowRateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        key = request.client.host if request.client else "unknown"
        allowed, remaining, reset = self.limiter.hit(key)
        headers = {
            "RateLimit-Limit": str(self.limiter.max_requests),
            "RateLimit-Remaining": str(remaining),
            "RateLimit-Reset": str(reset),
        }
        if not allowed:
            return error_response(429, RATE_LIMIT_MESSAGE, headers={**headers, "Retry-After": str(reset)})

        if len(self.limiter) > 10_000:
            self.limiter.prune()

        response = await call_next(request)
        response.headers.update(headers)
        return response

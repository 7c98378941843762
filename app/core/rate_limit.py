# app/core/rate_limit.py
import logging
import time
from typing import Dict, Tuple

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Fixed-window request limiter keyed by client address.

    Only paths under ``path_prefix`` are counted. Counters live in process
    memory, which matches the single-process deployment of the API.
    """

    def __init__(
        self,
        app,
        max_requests: int,
        window_seconds: int,
        path_prefix: str = "/api",
        sweep_threshold: int = 1024,
    ):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.path_prefix = path_prefix
        # expired windows are dropped once this many clients are tracked
        self.sweep_threshold = sweep_threshold
        # client -> (window start, request count)
        self._windows: Dict[str, Tuple[float, int]] = {}

    def _client_key(self, request: Request) -> str:
        return request.client.host if request.client else "unknown"

    def _sweep(self, now: float) -> None:
        expired = [key for key, (started, _) in self._windows.items() if now - started >= self.window_seconds]
        for key in expired:
            del self._windows[key]

    def _hit(self, key: str) -> Tuple[int, float]:
        now = time.monotonic()
        if len(self._windows) >= self.sweep_threshold:
            self._sweep(now)
        started, count = self._windows.get(key, (now, 0))
        if now - started >= self.window_seconds:
            started, count = now, 0
        count += 1
        self._windows[key] = (started, count)
        return count, started + self.window_seconds - now

    async def dispatch(self, request: Request, call_next):
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        key = self._client_key(request)
        count, reset_in = self._hit(key)
        remaining = max(self.max_requests - count, 0)

        if count > self.max_requests:
            logger.warning(f"Rate limit exceeded for {key} on {request.url.path}")
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"error": "Too many requests, please try again later."},
                headers={"Retry-After": str(int(reset_in) + 1)},
            )

        response = await call_next(request)
        response.headers["RateLimit-Limit"] = str(self.max_requests)
        response.headers["RateLimit-Remaining"] = str(remaining)
        return response

"""
Folio Backend — Rate Limiting Middleware
==========================================

What:  Per-IP fixed window rate limiter over the /api surface.
Why:   Caps how hard a single client can hit the API (brute-forcing logins,
       flooding the contact form).
How:   Each IP gets a counter and the start time of its current window.

Algorithm: Fixed Window Counter
    1. If the IP's window started more than `window_seconds` ago, start a
       new window with a count of zero
    2. If the count has reached `max_requests`, reject with 429 until the
       window ends
    3. Otherwise increment and pass the request through

    Defaults: 100 requests per 10 minutes.

    A client can send up to 2x the limit across a window boundary; that
    burst is accepted for this workload.

Scope:
    Only paths under /api are counted. /health and the docs are never limited.

Production Upgrade Path:
    State is per process. With several workers each one keeps its own
    counters; move the counters to Redis (INCR + EXPIRE) to share them.
"""

import logging
import time
from dataclasses import dataclass
from typing import Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    started: float
    count: int = 0


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory fixed window rate limiter.

    Response on rate limit:
        HTTP 429 with {"success": false, "error": ...} and a Retry-After
        header holding the seconds left in the window.
    """

    LIMITED_PREFIX = "/api"

    # Sweep expired windows once this many IPs are tracked
    CLEANUP_THRESHOLD = 10_000

    def __init__(self, app, max_requests: int = 100, window_seconds: int = 600):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._windows: Dict[str, _Window] = {}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not request.url.path.startswith(self.LIMITED_PREFIX):
            return await call_next(request)

        # Behind a proxy this is the proxy's IP unless uvicorn runs with
        # --proxy-headers
        client_ip = request.client.host if request.client else "unknown"

        now = time.monotonic()
        window = self._windows.get(client_ip)
        if window is None or now - window.started >= self.window_seconds:
            window = _Window(started=now)
            self._windows[client_ip] = window

        if window.count >= self.max_requests:
            exc = RateLimitExceededError(
                retry_after=int(window.started + self.window_seconds - now) + 1
            )
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                window.count,
                self.window_seconds,
            )
            return JSONResponse(
                status_code=429,
                content={"success": False, "error": exc.message},
                headers={"Retry-After": str(exc.retry_after)},
            )

        window.count += 1

        if len(self._windows) > self.CLEANUP_THRESHOLD:
            self._cleanup_expired(now)

        return await call_next(request)

    def _cleanup_expired(self, now: float) -> None:
        """Drop windows that have already ended."""
        expired = [
            ip for ip, window in self._windows.items()
            if now - window.started >= self.window_seconds
        ]
        for ip in expired:
            del self._windows[ip]

        if expired:
            logger.debug("Cleaned up %d expired rate limit windows", len(expired))

"""
Wildwood Zoo Backend — Credential Rate Limiting Middleware
============================================================

What:  Per-IP sliding-window limit on the credential endpoints
       (POST /api/auth/login, /api/auth/register and /api/auth/register-staff).
How:   Keeps the timestamps of each IP's recent attempts in memory; once the
       window holds `auth_rate_limit_requests` entries further attempts get
       429 with a Retry-After header until the oldest one ages out.

Scope:
    Single-process only. State lives in this middleware instance, which is
    enough for the one-process deployment the service targets.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from wildwood.config import settings
from wildwood.exceptions import RateLimitExceededError
from wildwood.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

LIMITED_PATHS = frozenset({"/api/auth/login", "/api/auth/register", "/api/auth/register-staff"})


class AuthRateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window limiter for login/registration attempts.

    Args:
        max_requests: Attempts allowed per window (default from settings)
        window_seconds: Window length (default from settings)
    """

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
    ):
        super().__init__(app)
        self.max_requests = max_requests or settings.auth_rate_limit_requests
        self.window_seconds = window_seconds or settings.auth_rate_limit_window
        self._requests: Dict[str, List[float]] = defaultdict(list)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method != "POST" or request.url.path not in LIMITED_PATHS:
            return await call_next(request)

        # Behind a proxy this is the proxy's address
        client_ip = request.client.host if request.client else "unknown"

        now = time.time()
        window_start = now - self.window_seconds
        recent = [ts for ts in self._requests[client_ip] if ts > window_start]
        self._requests[client_ip] = recent

        if len(recent) >= self.max_requests:
            retry_after = int(recent[0] + self.window_seconds - now) + 1
            exc = RateLimitExceededError(retry_after=retry_after)
            logger.warning(
                "Auth rate limit exceeded for IP %s on %s: %d attempts in %ds",
                client_ip, request.url.path, len(recent), self.window_seconds,
            )
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": exc.message, "request_id": request_id_var.get("")},
                headers={"Retry-After": str(retry_after)},
            )

        recent.append(now)

        if len(self._requests) > 1000:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        """Drop IPs with no attempt inside the current window."""
        inactive_ips = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] < window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]
        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))

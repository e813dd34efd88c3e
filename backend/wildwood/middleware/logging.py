"""
Wildwood Zoo Backend — Request Logging Middleware
===================================================

What:  One access-log line per request: method, path, status, duration,
       request id, client IP and the authenticated principal (if any).
How:   Level follows the status class: 5xx → ERROR, 4xx → WARNING, else INFO.

What we log vs what we DON'T log (privacy):
    ✅ Log: method, path, status, duration, IP, request ID, role#id of the caller
    ❌ Don't log: request bodies (passwords, card numbers), Authorization header
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from wildwood.middleware.request_id import request_id_var

logger = logging.getLogger("wildwood.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each HTTP request with its status code and duration."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        # Probes hit /health every few seconds
        if path == "/health":
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        # Set by the bearer-token dependency once the token is verified
        principal = getattr(request.state, "principal", None)
        caller = f"{principal.role}#{principal.id}" if principal is not None else "anonymous"

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s as %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            caller,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "caller": caller,
            },
        )
        return response

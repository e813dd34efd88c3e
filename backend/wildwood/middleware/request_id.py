"""
Wildwood Zoo Backend — Request ID Middleware
==============================================

What:  Assigns an ID to each request and echoes it in `X-Request-ID`.
How:   Reuses a client-supplied X-Request-ID (trimmed to MAX_REQUEST_ID_LENGTH),
       otherwise generates a short UUID; stores it in a ContextVar for loggers
       and the error envelope.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Client-supplied ids end up in every log line of the request
MAX_REQUEST_ID_LENGTH = 64


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a correlation id to the request, its logs and its response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        supplied = request.headers.get("X-Request-ID", "").strip()[:MAX_REQUEST_ID_LENGTH]
        rid = supplied or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

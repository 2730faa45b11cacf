"""
Folio Backend — Request ID Middleware
=======================================

What:  Tags every request with a short correlation ID.
How:   Reuses a client-supplied X-Request-ID (so the dashboard can quote it
       in bug reports) or generates one, stores it in a ContextVar for
       loggers and exception handlers, and echoes it in the response header.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local; concurrent requests on one thread each see their own value
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

MAX_CLIENT_ID_LENGTH = 64


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        supplied = request.headers.get("X-Request-ID", "").strip()
        # Bounded so a client cannot push arbitrary data into every log line
        rid = supplied[:MAX_CLIENT_ID_LENGTH] if supplied else uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

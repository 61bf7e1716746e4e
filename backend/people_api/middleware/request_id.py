"""
People API — Request ID Middleware
====================================

What:  Assigns a correlation ID to every request and echoes it in X-Request-ID.
Why:   Ties together every log line and the error body produced by one request.
How:   Reuses a client-supplied X-Request-ID header or generates a short one,
       stores it in a ContextVar for log lines and error bodies, and sets it on
       the response.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# What: Coroutine-local storage for the current request ID
# Why ContextVar: concurrent requests share one thread, so threading.local
# would mix their IDs; each task gets its own copy of a ContextVar
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags each request with an ID available to loggers and exception handlers."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response

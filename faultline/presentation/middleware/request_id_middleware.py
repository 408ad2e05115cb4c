"""Request ID middleware.

Assigns every request a correlation ID:
- reused from X-Request-Id, then X-Correlation-Id, else a new UUID4
- stored on ``request.state.request_id`` and in a ContextVar
  (``get_request_id()``) for code outside route handlers
- bound into structlog contextvars so every log record carries it
- echoed in the X-Request-Id response header
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Awaitable, Callable
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-Id"
CORRELATION_ID_HEADER = "X-Correlation-Id"

request_id_context: ContextVar[str | None] = ContextVar("request_id", default=None)


def get_request_id() -> str | None:
    """Return the current request ID, or None outside a request."""
    return request_id_context.get()


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = (
            request.headers.get(REQUEST_ID_HEADER)
            or request.headers.get(CORRELATION_ID_HEADER)
            or str(uuid4())
        )
        request.state.request_id = request_id
        token = request_id_context.set(request_id)
        try:
            with structlog.contextvars.bound_contextvars(request_id=request_id):
                response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            request_id_context.reset(token)

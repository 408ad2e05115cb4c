"""Global exception handlers for FastAPI applications.

Every failure that reaches the application boundary goes through the error
pipeline, so clients always receive the same envelope:

Handlers:
    StructuredError: errors raised at failure sites
    HTTPException: Starlette/FastAPI HTTP errors (auth dependencies, 404s)
    RequestValidationError: request body/query/path validation
    Exception: everything else (rendered as InternalServerError)

Exports:
    register_exception_handlers: Register all handlers with a FastAPI app
    request_context_from: Build RequestContext from a Starlette request
"""

from __future__ import annotations

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from faultline.application.services.error_pipeline import ErrorPipeline
from faultline.core.errors import RequestContext, StructuredError
from faultline.presentation.errors.error_response_builder import to_json_response
from faultline.presentation.middleware.request_id_middleware import (
    CORRELATION_ID_HEADER,
    REQUEST_ID_HEADER,
    get_request_id,
)


def _client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip
    return request.client.host if request.client else None


def request_context_from(request: Request) -> RequestContext:
    """Extract correlation and client metadata from a request.

    The request ID comes from X-Request-Id, X-Correlation-Id, the ID set by
    RequestIdMiddleware, or a fresh UUID4, in that order.
    """
    request_id = (
        request.headers.get(REQUEST_ID_HEADER)
        or request.headers.get(CORRELATION_ID_HEADER)
        or get_request_id()
        or getattr(request.state, "request_id", None)
        or str(uuid4())
    )
    return RequestContext(
        id=request_id,
        method=request.method,
        path=request.url.path,
        ip=_client_ip(request),
        user_agent=request.headers.get("User-Agent"),
    )


def register_exception_handlers(
    app: FastAPI, pipeline: ErrorPipeline | None = None
) -> None:
    """Register the error pipeline as the app's exception handler.

    Args:
        app: FastAPI application instance.
        pipeline: Pipeline to use. Defaults to the container's pipeline,
            resolved on first failure.

    Example:
        >>> app = FastAPI()
        >>> app.add_middleware(RequestIdMiddleware)
        >>> register_exception_handlers(app)
    """

    async def handle_exception(request: Request, exc: Exception) -> JSONResponse:
        if pipeline is not None:
            active = pipeline
        else:
            from faultline.core.container import get_error_pipeline

            active = get_error_pipeline()

        request_context = request_context_from(request)
        response = to_json_response(active.handle(exc, request_context))
        response.headers[REQUEST_ID_HEADER] = request_context.id or ""

        # Preserve headers such as WWW-Authenticate from HTTPException
        if isinstance(exc, HTTPException) and exc.headers:
            for name, value in exc.headers.items():
                if name not in response.headers:
                    response.headers[name] = value
        return response

    app.add_exception_handler(StructuredError, handle_exception)
    app.add_exception_handler(HTTPException, handle_exception)
    app.add_exception_handler(RequestValidationError, handle_exception)
    app.add_exception_handler(Exception, handle_exception)

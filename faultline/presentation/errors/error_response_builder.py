"""Rendering of StructuredError into the error wire format.

ErrorResponseBuilder turns one normalized error into status code, body and
headers. It applies the client-facing sanitization policy, adds Retry-After
for rate-limit errors and attaches the hardening headers to every response.

Exports:
    HARDENING_HEADERS: Headers attached to every error response
    RenderedError: Status code, JSON body and headers of one error response
    ErrorResponseBuilder: Renderer
    to_json_response: RenderedError -> Starlette JSONResponse
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic_core import to_jsonable_python

from faultline.application.services.categorizer import categorize, severity_of
from faultline.application.services.sanitizer import ErrorSanitizer
from faultline.core.config import Settings, get_settings
from faultline.core.enums import (
    ErrorCategory,
    ErrorKind,
    ErrorSeverity,
)
from faultline.core.errors import StructuredError
from faultline.presentation.errors.error_response import ErrorBody, ErrorResponse

HARDENING_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

# Context keys that never reach the client body
_INTERNAL_KEYS = ("request", "stack")


@dataclass(frozen=True, slots=True, kw_only=True)
class RenderedError:
    """One rendered error response.

    Attributes:
        status_code: HTTP status code.
        body: JSON-ready body (wire field names).
        headers: Response headers.
    """

    status_code: int
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)


class ErrorResponseBuilder:
    """Render StructuredError instances.

    ``render()`` never raises. If building the body fails for any reason a
    fixed 500 response is returned instead.

    Args:
        settings: Sanitization, diagnostics and Retry-After configuration.
            Defaults to the process settings.
        sanitizer: Override the sanitizer derived from ``settings``.

    Example:
        >>> builder = ErrorResponseBuilder(settings)
        >>> rendered = builder.render(RateLimitError("Too many requests", 900))
        >>> rendered.status_code
        429
        >>> rendered.headers["Retry-After"]
        '900'
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        sanitizer: ErrorSanitizer | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._sanitizer = sanitizer or ErrorSanitizer(
            self._settings.should_sanitize,
            generic_message=self._settings.generic_error_message,
        )

    @property
    def sanitizer(self) -> ErrorSanitizer:
        return self._sanitizer

    def render(self, error: StructuredError) -> RenderedError:
        try:
            return self._render(error)
        except Exception:
            return self.fallback()

    def fallback(self) -> RenderedError:
        """Fixed 500 response used when rendering itself fails."""
        return RenderedError(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            body={
                "success": False,
                "error": {
                    "code": ErrorKind.INTERNAL_SERVER_ERROR.value,
                    "message": self._settings.generic_error_message,
                    "type": "InternalServerError",
                    "category": ErrorCategory.INTERNAL.value,
                    "severity": ErrorSeverity.CRITICAL.value,
                    "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
                },
            },
            headers=dict(HARDENING_HEADERS),
        )

    def _render(self, error: StructuredError) -> RenderedError:
        category = categorize(error)
        request = error.context.request

        body = ErrorBody(
            code=error.error_code.value,
            message=self._sanitizer.public_message(error),
            type=error.type_name,
            category=category,
            severity=severity_of(error),
            timestamp=error.timestamp,
            request_id=request.id if request is not None else None,
            details=self._details(error) or None,
            stack=error.stack if self._settings.should_include_stack_trace else None,
        )

        headers = dict(HARDENING_HEADERS)
        if category is ErrorCategory.RATE_LIMIT:
            headers["Retry-After"] = str(self._retry_after(error))

        return RenderedError(
            status_code=error.status_code,
            body=ErrorResponse(error=body).to_wire(),
            headers=headers,
        )

    def _details(self, error: StructuredError) -> dict[str, Any]:
        context = error.context.to_dict()
        for key in _INTERNAL_KEYS:
            context.pop(key, None)
        if self._sanitizer.enabled:
            context.pop("original_message", None)
        return to_jsonable_python(
            self._sanitizer.sanitize_context(context), serialize_unknown=True
        )

    def _retry_after(self, error: StructuredError) -> int:
        value = error.context.extra.get("retry_after")
        if isinstance(value, str) and value.isdigit():
            value = int(value)
        if isinstance(value, int | float) and not isinstance(value, bool) and value > 0:
            return int(value)
        return self._settings.rate_limit_retry_after


def to_json_response(rendered: RenderedError) -> JSONResponse:
    """Build the Starlette response for a rendered error."""
    return JSONResponse(
        status_code=rendered.status_code,
        content=rendered.body,
        headers=rendered.headers,
    )

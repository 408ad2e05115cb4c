"""Rules for foreign errors that already say what they are.

Covers errors named after a taxonomy family by other libraries or services
(``UnauthorizedError``, ``ForbiddenError``, ...), FastAPI and pydantic
validation failures and Starlette ``HTTPException``. Validation failures keep
only field paths and messages, never the rejected input values.
"""

from __future__ import annotations

from typing import Any

from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException

from faultline.application.normalization.rule import NormalizationRule
from faultline.application.normalization.shapes import (
    attribute,
    error_message,
    error_name,
    error_stack,
    origin,
)
from faultline.core.enums import ErrorKind
from faultline.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExternalServiceError,
    InternalServerError,
    NotFoundError,
    OperationTimeoutError,
    RateLimitError,
    StructuredError,
    ValidationError,
)

ALIASES: dict[str, type[StructuredError]] = {
    "ValidationError": ValidationError,
    "UnauthorizedError": AuthenticationError,
    "ForbiddenError": AuthorizationError,
    "NotFoundError": NotFoundError,
    "ConflictError": ConflictError,
    "RateLimitError": RateLimitError,
}

_REQUEST_LOCATIONS = frozenset({"body", "query", "path", "header", "cookie"})


def _is_alias(raw: Any) -> bool:
    return error_name(raw) in ALIASES


def _from_alias(raw: Any) -> StructuredError:
    name = error_name(raw)
    family = ALIASES[name]
    message = error_message(raw) or name
    context = origin(raw, stack=error_stack(raw))
    if family is RateLimitError:
        retry_after = attribute(raw, "retry_after") or attribute(raw, "retryAfter")
        return RateLimitError(message, retry_after, context=context)
    return family(message, context=context)


def _field_path(location: tuple[Any, ...] | list[Any]) -> str:
    parts = list(location)
    if parts and parts[0] in _REQUEST_LOCATIONS and len(parts) > 1:
        parts = parts[1:]
    return ".".join(str(part) for part in parts)


def _from_validation_errors(
    raw: RequestValidationError | PydanticValidationError,
) -> StructuredError:
    errors = list(raw.errors())
    fields = {_field_path(error.get("loc", ())): error.get("msg") for error in errors}
    all_missing = bool(errors) and all(error.get("type") == "missing" for error in errors)
    kind = ErrorKind.MISSING_REQUIRED_FIELD if all_missing else ErrorKind.VALIDATION_FAILED
    return ValidationError(
        "Validation failed",
        kind,
        context={"fields": fields, "original_error": error_name(raw)},
    )


def _retry_after_header(raw: HTTPException) -> int | None:
    value = (raw.headers or {}).get("Retry-After")
    if value is not None and str(value).isdigit():
        return int(value)
    return None


def _from_http_exception(raw: HTTPException) -> StructuredError:
    status = raw.status_code
    detail = raw.detail
    message = detail if isinstance(detail, str) and detail else f"HTTP {status}"
    context: dict[str, Any] = origin(raw, http_status=status)
    if detail is not None and not isinstance(detail, str):
        context["metadata"] = {"detail": detail}

    if status == 401:
        return AuthenticationError(message, context=context)
    if status == 403:
        return AuthorizationError(message, context=context)
    if status == 404:
        kind = ErrorKind.ENDPOINT_NOT_FOUND if message == "Not Found" else None
        return NotFoundError(message, kind, context=context)
    if status == 408:
        return OperationTimeoutError(message, context=context)
    if status == 409:
        return ConflictError(message, context=context)
    if status == 429:
        return RateLimitError(message, _retry_after_header(raw), context=context)
    if status == 503:
        return ExternalServiceError(
            message, kind=ErrorKind.SERVICE_UNAVAILABLE, context=context
        )
    if status == 504:
        return ExternalServiceError(
            message, kind=ErrorKind.EXTERNAL_SERVICE_TIMEOUT, context=context
        )
    if status == 502:
        return ExternalServiceError(message, context=context)
    if status >= 500:
        return InternalServerError(message, context=context)
    return ValidationError(message, ErrorKind.INVALID_INPUT, context=context)


ALIAS_RULES: tuple[NormalizationRule, ...] = (
    NormalizationRule(
        name="validation_errors",
        matches=lambda raw: isinstance(
            raw, RequestValidationError | PydanticValidationError
        ),
        build=_from_validation_errors,
    ),
    NormalizationRule(
        name="http_exception",
        matches=lambda raw: isinstance(raw, HTTPException),
        build=_from_http_exception,
    ),
    NormalizationRule(name="alias", matches=_is_alias, build=_from_alias),
)

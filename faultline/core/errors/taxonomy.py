"""Error families.

One StructuredError subclass per family. Each family fixes its status code
(through its kinds) and restricts which sub-kinds it accepts.

Usage:
    from faultline.core.errors import AuthenticationError, RateLimitError
    from faultline.core.enums import ErrorKind

    raise AuthenticationError("Token has expired", ErrorKind.TOKEN_EXPIRED)
    raise RateLimitError("Too many requests", 900)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from faultline.core.enums import ErrorKind
from faultline.core.errors.error_context import ErrorContext
from faultline.core.errors.structured_error import StructuredError

_Context = ErrorContext | Mapping[str, Any] | None


def _thread(context: _Context, **values: Any) -> ErrorContext:
    """Merge explicit constructor arguments into the context (they win)."""
    present = {key: value for key, value in values.items() if value is not None}
    return ErrorContext.coerce(context).merge(present, overwrite=True)


class ValidationError(StructuredError):
    """Input failed validation (400)."""

    default_kind = ErrorKind.VALIDATION_FAILED
    allowed_kinds = frozenset(
        {
            ErrorKind.INVALID_INPUT,
            ErrorKind.MISSING_REQUIRED_FIELD,
            ErrorKind.INVALID_FORMAT,
            ErrorKind.VALIDATION_FAILED,
        }
    )

    def __init__(
        self,
        message: str,
        kind: ErrorKind | None = None,
        *,
        field: str | None = None,
        context: _Context = None,
    ) -> None:
        super().__init__(message, kind, context=_thread(context, field=field))


class AuthenticationError(StructuredError):
    """Caller could not be authenticated (401)."""

    default_kind = ErrorKind.INVALID_CREDENTIALS
    allowed_kinds = frozenset(
        {
            ErrorKind.INVALID_CREDENTIALS,
            ErrorKind.TOKEN_EXPIRED,
            ErrorKind.TOKEN_INVALID,
            ErrorKind.SESSION_EXPIRED,
            ErrorKind.ACCOUNT_LOCKED,
            ErrorKind.ACCOUNT_DISABLED,
        }
    )


class AuthorizationError(StructuredError):
    """Authenticated caller lacks permission (403)."""

    default_kind = ErrorKind.ACCESS_DENIED
    allowed_kinds = frozenset(
        {
            ErrorKind.INSUFFICIENT_PERMISSIONS,
            ErrorKind.ACCESS_DENIED,
            ErrorKind.RESOURCE_FORBIDDEN,
        }
    )


class NotFoundError(StructuredError):
    """Requested resource does not exist (404)."""

    default_kind = ErrorKind.RESOURCE_NOT_FOUND
    allowed_kinds = frozenset(
        {
            ErrorKind.USER_NOT_FOUND,
            ErrorKind.RESOURCE_NOT_FOUND,
            ErrorKind.ENDPOINT_NOT_FOUND,
        }
    )


class ConflictError(StructuredError):
    """Request conflicts with current state (409)."""

    default_kind = ErrorKind.RESOURCE_ALREADY_EXISTS
    allowed_kinds = frozenset(
        {
            ErrorKind.RESOURCE_ALREADY_EXISTS,
            ErrorKind.DUPLICATE_ENTRY,
            ErrorKind.CONCURRENT_MODIFICATION,
        }
    )


class RateLimitError(StructuredError):
    """Caller exceeded a rate limit (429).

    Args:
        message: Human-readable message.
        retry_after: Seconds the client should wait, stored as
            ``context.extra["retry_after"]``.
    """

    default_kind = ErrorKind.RATE_LIMIT_EXCEEDED
    allowed_kinds = frozenset({ErrorKind.RATE_LIMIT_EXCEEDED, ErrorKind.TOO_MANY_REQUESTS})

    def __init__(
        self,
        message: str,
        retry_after: int | None = None,
        *,
        kind: ErrorKind | None = None,
        context: _Context = None,
    ) -> None:
        super().__init__(message, kind, context=_thread(context, retry_after=retry_after))

    @property
    def retry_after(self) -> int | None:
        return self.context.extra.get("retry_after")


class ExternalServiceError(StructuredError):
    """A downstream service failed (502, or 503 when unavailable)."""

    default_kind = ErrorKind.EXTERNAL_API_ERROR
    allowed_kinds = frozenset(
        {
            ErrorKind.EXTERNAL_API_ERROR,
            ErrorKind.EXTERNAL_SERVICE_TIMEOUT,
            ErrorKind.SERVICE_UNAVAILABLE,
        }
    )

    def __init__(
        self,
        message: str,
        service_name: str | None = None,
        *,
        kind: ErrorKind | None = None,
        context: _Context = None,
    ) -> None:
        super().__init__(
            message, kind, context=_thread(context, service_name=service_name)
        )


class DatabaseError(StructuredError):
    """Persistence layer failure (500)."""

    default_kind = ErrorKind.QUERY_FAILED
    allowed_kinds = frozenset(
        {
            ErrorKind.DATABASE_CONNECTION_ERROR,
            ErrorKind.QUERY_FAILED,
            ErrorKind.TRANSACTION_FAILED,
            ErrorKind.CONSTRAINT_VIOLATION,
        }
    )


class SecurityError(StructuredError):
    """Security policy violation (403)."""

    default_kind = ErrorKind.SECURITY_VIOLATION
    allowed_kinds = frozenset(
        {
            ErrorKind.SECURITY_VIOLATION,
            ErrorKind.SUSPICIOUS_ACTIVITY,
            ErrorKind.BRUTE_FORCE_ATTEMPT,
        }
    )


class BusinessLogicError(StructuredError):
    """Business rule rejected the operation (422)."""

    default_kind = ErrorKind.BUSINESS_RULE_VIOLATION
    allowed_kinds = frozenset(
        {
            ErrorKind.BUSINESS_RULE_VIOLATION,
            ErrorKind.INVALID_OPERATION,
            ErrorKind.DEPENDENCY_NOT_MET,
        }
    )


class InternalServerError(StructuredError):
    """Programmer or system fault (500). Never operational."""

    default_kind = ErrorKind.INTERNAL_SERVER_ERROR
    allowed_kinds = frozenset({ErrorKind.INTERNAL_SERVER_ERROR, ErrorKind.UNKNOWN_ERROR})
    operational: ClassVar[bool] = False


class NetworkError(StructuredError):
    """Transport-level failure talking to another host (502)."""

    default_kind = ErrorKind.NETWORK_ERROR
    allowed_kinds = frozenset(
        {ErrorKind.NETWORK_ERROR, ErrorKind.CONNECTION_TIMEOUT, ErrorKind.DNS_ERROR}
    )


class OperationTimeoutError(StructuredError):
    """Operation did not complete in time (408)."""

    default_kind = ErrorKind.TIMEOUT
    allowed_kinds = frozenset({ErrorKind.TIMEOUT})


ERROR_FAMILIES: tuple[type[StructuredError], ...] = (
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ConflictError,
    RateLimitError,
    ExternalServiceError,
    DatabaseError,
    SecurityError,
    BusinessLogicError,
    InternalServerError,
    NetworkError,
    OperationTimeoutError,
)

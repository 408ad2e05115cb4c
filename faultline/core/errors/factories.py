"""Factory helpers for common failure scenarios.

Thin wrappers that keep messages and context keys consistent across call
sites.

Usage:
    from faultline.core.errors import factories

    raise factories.resource_not_found("Account", account_id)
"""

from __future__ import annotations

from typing import Any

from faultline.core.enums import ErrorKind
from faultline.core.errors.taxonomy import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatabaseError,
    ExternalServiceError,
    NotFoundError,
    RateLimitError,
    SecurityError,
    ValidationError,
)


def missing_field(field: str) -> ValidationError:
    """Create a validation error for a missing required field."""
    return ValidationError(
        f"Missing required field: {field}",
        ErrorKind.MISSING_REQUIRED_FIELD,
        field=field,
    )


def invalid_format(field: str, expected_format: str) -> ValidationError:
    """Create a validation error for a field with the wrong format."""
    return ValidationError(
        f"Invalid format for field '{field}'. Expected: {expected_format}",
        ErrorKind.INVALID_FORMAT,
        field=field,
        context={"expected_format": expected_format},
    )


def invalid_credentials(context: dict[str, Any] | None = None) -> AuthenticationError:
    return AuthenticationError(
        "Invalid credentials", ErrorKind.INVALID_CREDENTIALS, context=context
    )


def insufficient_permissions(resource: str | None = None) -> AuthorizationError:
    return AuthorizationError(
        "Insufficient permissions",
        ErrorKind.INSUFFICIENT_PERMISSIONS,
        context={"resource_name": resource} if resource else None,
    )


def resource_not_found(resource_type: str, resource_id: str | None = None) -> NotFoundError:
    context: dict[str, Any] = {}
    if resource_id is not None:
        context["resource"] = {"type": resource_type, "id": resource_id}
    return NotFoundError(
        f"{resource_type} not found", ErrorKind.RESOURCE_NOT_FOUND, context=context
    )


def resource_exists(resource_type: str, resource_id: str | None = None) -> ConflictError:
    context: dict[str, Any] = {}
    if resource_id is not None:
        context["resource"] = {"type": resource_type, "id": resource_id}
    return ConflictError(
        f"{resource_type} already exists",
        ErrorKind.RESOURCE_ALREADY_EXISTS,
        context=context,
    )


def rate_limit_exceeded(retry_after: int | None = None) -> RateLimitError:
    return RateLimitError("Rate limit exceeded", retry_after)


def database_error(operation: str, context: dict[str, Any] | None = None) -> DatabaseError:
    return DatabaseError(
        f"Database {operation} failed",
        ErrorKind.QUERY_FAILED,
        context={"operation": operation, **(context or {})},
    )


def security_violation(violation: str, context: dict[str, Any] | None = None) -> SecurityError:
    return SecurityError(
        f"Security violation: {violation}",
        ErrorKind.SECURITY_VIOLATION,
        context={"violation": violation, **(context or {})},
    )


def service_unavailable(service_name: str) -> ExternalServiceError:
    return ExternalServiceError(
        f"{service_name} is temporarily unavailable",
        service_name,
        kind=ErrorKind.SERVICE_UNAVAILABLE,
    )

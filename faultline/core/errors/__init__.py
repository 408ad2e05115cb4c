"""Core errors package.

Exports the error taxonomy and context types for convenient importing.

Usage:
    from faultline.core.errors import NotFoundError, ErrorContextBuilder
"""

from faultline.core.errors.error_context import (
    ErrorContext,
    ErrorContextBuilder,
    RequestContext,
    ResourceContext,
    UserContext,
)
from faultline.core.errors.structured_error import StructuredError
from faultline.core.errors.taxonomy import (
    ERROR_FAMILIES,
    AuthenticationError,
    AuthorizationError,
    BusinessLogicError,
    ConflictError,
    DatabaseError,
    ExternalServiceError,
    InternalServerError,
    NetworkError,
    NotFoundError,
    OperationTimeoutError,
    RateLimitError,
    SecurityError,
    ValidationError,
)

__all__ = [
    "ERROR_FAMILIES",
    "AuthenticationError",
    "AuthorizationError",
    "BusinessLogicError",
    "ConflictError",
    "DatabaseError",
    "ErrorContext",
    "ErrorContextBuilder",
    "ExternalServiceError",
    "InternalServerError",
    "NetworkError",
    "NotFoundError",
    "OperationTimeoutError",
    "RateLimitError",
    "RequestContext",
    "ResourceContext",
    "SecurityError",
    "StructuredError",
    "UserContext",
    "ValidationError",
]

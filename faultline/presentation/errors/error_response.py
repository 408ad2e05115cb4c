"""Error wire format.

Every failure is rendered as exactly one ErrorResponse body:

    {
      "success": false,
      "error": {
        "code": "RATE_LIMIT_EXCEEDED",
        "message": "Too many requests",
        "type": "RateLimitError",
        "category": "RATE_LIMIT",
        "severity": "HIGH",
        "timestamp": "2024-01-15T10:30:00Z",
        "requestId": "550e8400-e29b-41d4-a716-446655440000",
        "details": {"retry_after": 900}
      }
    }

``requestId``, ``details`` and ``stack`` are omitted when absent.

Exports:
    ErrorBody: The ``error`` object
    ErrorResponse: The envelope
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from faultline.core.enums import ErrorCategory, ErrorSeverity


class ErrorBody(BaseModel):
    """Client-facing description of one failure.

    Examples:
        >>> body = ErrorBody(
        ...     code="USER_NOT_FOUND",
        ...     message="User not found",
        ...     type="NotFoundError",
        ...     category=ErrorCategory.NOT_FOUND,
        ...     severity=ErrorSeverity.LOW,
        ...     timestamp=datetime.now(UTC),
        ... )
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    code: str = Field(..., description="Machine-readable error kind")
    message: str = Field(..., description="Human-readable, sanitized message")
    type: str = Field(..., description="Error family name")
    category: ErrorCategory = Field(..., description="Derived category")
    severity: ErrorSeverity = Field(..., description="Derived severity")
    timestamp: datetime = Field(..., description="When the error was created (UTC)")
    request_id: str | None = Field(
        None,
        alias="requestId",
        description="Correlation ID of the failing request",
    )
    details: dict[str, Any] | None = Field(
        None,
        description="Sanitized diagnostic context",
    )
    stack: str | None = Field(
        None,
        description="Stack trace (development diagnostics only)",
    )


class ErrorResponse(BaseModel):
    """Error envelope."""

    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    error: ErrorBody

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict using wire field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

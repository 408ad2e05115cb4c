"""Audit sink error types.

Returned (not raised) by AuditProtocol implementations when an event could
not be recorded.

Usage:
    from faultline.core.result import Failure
    from faultline.domain.errors import AuditError

    return Failure(AuditError(message="Audit store unreachable"))
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True, kw_only=True)
class AuditError:
    """Audit sink failure (does NOT inherit from Exception).

    Attributes:
        message: Human-readable message.
        details: Additional context.
    """

    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message

"""Audit event types and risk levels for error-driven audit records.

Only SECURITY and AUTHENTICATION category errors are audited. The event
type tells the audit store which of the two it received; ``SYSTEM_ERROR``
covers anything forwarded explicitly by a caller.
"""

from enum import Enum


class AuditEventType(str, Enum):
    """Audit event types emitted by the error layer."""

    AUTHENTICATION_FAILURE = "authentication_failure"
    SECURITY_VIOLATION = "security_violation"
    SYSTEM_ERROR = "system_error"


class RiskLevel(str, Enum):
    """Risk classification attached to audit events."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

"""Error categories derived from an error's kind.

Categories drive logging, alerting and audit routing. They are never set by
hand; see ``faultline.application.services.categorizer``.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """High-level error categories."""

    VALIDATION = "VALIDATION"
    AUTHENTICATION = "AUTHENTICATION"
    AUTHORIZATION = "AUTHORIZATION"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    RATE_LIMIT = "RATE_LIMIT"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"
    DATABASE = "DATABASE"
    SECURITY = "SECURITY"
    BUSINESS_LOGIC = "BUSINESS_LOGIC"
    INTERNAL = "INTERNAL"

"""Error severity levels derived from HTTP status codes."""

from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity levels (LOW < MEDIUM < HIGH < CRITICAL)."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

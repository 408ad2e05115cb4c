"""LoggerProtocol definition for structured logging.

The error pipeline logs through this port instead of a process-wide logger,
so it carries no hidden global state and can be tested with a mock.
Implementations MUST emit structured records (message + key-value context).

Log Levels:
    - DEBUG: Diagnostic detail
    - INFO: LOW severity errors
    - WARNING: MEDIUM severity errors, degraded collaborators (audit, logging)
    - ERROR: HIGH severity errors
    - CRITICAL: CRITICAL severity errors (5xx)

Security:
    - NEVER log passwords, tokens, API keys
    - Error context is sanitized before it reaches the logger

Usage:
    from faultline.core.container import get_logger

    logger = get_logger()
    logger.warning("Audit record failed", error_code="ACCOUNT_LOCKED")

    request_logger = logger.bind(request_id=request_id)
    request_logger.info("Error handled")  # request_id auto-included
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    Implementations may enrich logs with timestamp, level, and request
    correlation.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message."""
        ...

    def error(
        self, message: str, /, *, error: BaseException | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            error: Optional exception instance; implementation may include
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: BaseException | None = None, **context: Any
    ) -> None:
        """Log a critical-level message with optional exception details.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            error: Optional exception instance.
            **context: Structured key-value context fields.
        """
        ...

    def bind(self, **context: Any) -> "LoggerProtocol":
        """Return new logger with permanently bound context.

        Original logger instance remains unchanged.

        Args:
            **context: Context to bind to all future logs.

        Returns:
            New logger instance with bound context.
        """
        ...

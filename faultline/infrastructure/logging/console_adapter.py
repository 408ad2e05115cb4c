"""structlog-backed LoggerProtocol adapter writing to stdout.

Renderer follows Settings.should_log_json:
- development: colored key=value console output
- testing/CI/production: one JSON object per line

Values bound with ``structlog.contextvars`` (RequestIdMiddleware binds
``request_id``) are merged into every record, so error logs emitted while a
request is in flight correlate with it without explicit binding.

Satisfies LoggerProtocol structurally; it does not inherit from it.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


class ConsoleAdapter:
    """Structured stdout logger.

    Args:
        use_json: Render JSON lines instead of console output.
        level: Minimum level name. Records below it are dropped.
    """

    def __init__(self, *, use_json: bool = False, level: str = "INFO") -> None:
        renderer: structlog.types.Processor = (
            structlog.processors.JSONRenderer()
            if use_json
            else structlog.dev.ConsoleRenderer(colors=True)
        )
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
                renderer,
            ],
            wrapper_class=structlog.make_filtering_bound_logger(
                logging.getLevelName(level.upper())
            ),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
            cache_logger_on_first_use=True,
        )
        self._logger = structlog.get_logger()

    def debug(self, message: str, /, **context: Any) -> None:
        self._logger.debug(message, **context)

    def info(self, message: str, /, **context: Any) -> None:
        self._logger.info(message, **context)

    def warning(self, message: str, /, **context: Any) -> None:
        self._logger.warning(message, **context)

    def error(
        self, message: str, /, *, error: BaseException | None = None, **context: Any
    ) -> None:
        self._logger.error(message, **_exception_fields(context, error))

    def critical(
        self, message: str, /, *, error: BaseException | None = None, **context: Any
    ) -> None:
        """Log at CRITICAL. The pipeline uses this for 5xx errors.

        Args:
            message: Sanitized error message.
            error: Exception flattened into ``error_type``/``error_message``.
            **context: Structured fields (error_code, severity, stack, ...).
        """
        self._logger.critical(message, **_exception_fields(context, error))

    def bind(self, **context: Any) -> ConsoleAdapter:
        """Return an adapter whose records always include ``context``."""
        bound = ConsoleAdapter.__new__(ConsoleAdapter)
        bound._logger = self._logger.bind(**context)
        return bound


def _exception_fields(
    context: dict[str, Any], error: BaseException | None
) -> dict[str, Any]:
    if error is None:
        return context
    return {
        **context,
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

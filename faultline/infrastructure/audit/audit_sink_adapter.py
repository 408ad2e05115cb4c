"""Forward security-relevant errors to the audit sink.

Only SECURITY and AUTHENTICATION category errors are forwarded. Forwarding is
fire-and-forget: inside a running event loop the record call is scheduled as
a task; without a loop (one thread per request) it runs on a worker thread.
The caller never waits for it. Any failure - a raising adapter, a Failure
result, a scheduling error - is logged at WARNING and swallowed, so auditing
can never replace or mask the error being rendered.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any

from faultline.core.enums import ErrorCategory, ErrorSeverity
from faultline.core.errors import StructuredError
from faultline.core.result import Failure
from faultline.domain.enums import AuditEventType, RiskLevel
from faultline.domain.protocols import AuditProtocol, LoggerProtocol

AUDITED_CATEGORIES = frozenset({ErrorCategory.SECURITY, ErrorCategory.AUTHENTICATION})

_EVENT_TYPES = {
    ErrorCategory.SECURITY: AuditEventType.SECURITY_VIOLATION,
    ErrorCategory.AUTHENTICATION: AuditEventType.AUTHENTICATION_FAILURE,
}

_RISK_LEVELS = {
    ErrorSeverity.CRITICAL: RiskLevel.CRITICAL,
    ErrorSeverity.HIGH: RiskLevel.HIGH,
}

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="faultline-audit")


class AuditSinkAdapter:
    """Non-blocking bridge from handled errors to an AuditProtocol.

    Args:
        audit: Audit sink port implementation.
        logger: Logger used to report audit failures.
    """

    def __init__(self, audit: AuditProtocol, logger: LoggerProtocol) -> None:
        self._audit = audit
        self._logger = logger
        self._pending: set[asyncio.Task[None]] = set()
        self._threaded: set[Future[None]] = set()

    @staticmethod
    def should_audit(category: ErrorCategory) -> bool:
        return category in AUDITED_CATEGORIES

    @staticmethod
    def risk_level(severity: ErrorSeverity) -> RiskLevel:
        return _RISK_LEVELS.get(severity, RiskLevel.MEDIUM)

    def submit(
        self,
        error: StructuredError,
        category: ErrorCategory,
        severity: ErrorSeverity,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Forward ``error`` to the audit sink if its category is audited.

        Args:
            error: The normalized error.
            category: Derived category.
            severity: Derived severity.
            context: Sanitized context to store with the event. Defaults to
                the error's own context.
        """
        if not self.should_audit(category):
            return
        if context is None:
            context = error.context.to_dict()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        try:
            if loop is None:
                future = _executor.submit(
                    self._record_in_thread, error, category, severity, context
                )
                self._threaded.add(future)
                future.add_done_callback(self._threaded.discard)
                return
            task = loop.create_task(self._record(error, category, severity, context))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        except Exception as exc:
            self._logger.warning(
                "Audit dispatch failed",
                error_code=error.error_code.value,
                reason=type(exc).__name__,
            )

    async def drain(self) -> None:
        """Wait for scheduled audit records (shutdown hooks and tests)."""
        waiting = [*self._pending, *map(asyncio.wrap_future, list(self._threaded))]
        if waiting:
            await asyncio.gather(*waiting, return_exceptions=True)

    def flush(self, timeout: float | None = None) -> None:
        """Block until records dispatched to worker threads have finished."""
        if self._threaded:
            wait(list(self._threaded), timeout=timeout)

    def _record_in_thread(
        self,
        error: StructuredError,
        category: ErrorCategory,
        severity: ErrorSeverity,
        context: dict[str, Any],
    ) -> None:
        asyncio.run(self._record(error, category, severity, context))

    async def _record(
        self,
        error: StructuredError,
        category: ErrorCategory,
        severity: ErrorSeverity,
        context: dict[str, Any],
    ) -> None:
        user = error.context.user
        request = error.context.request
        try:
            result = await self._audit.record(
                event_type=_EVENT_TYPES.get(category, AuditEventType.SYSTEM_ERROR),
                payload={
                    "error": error.error_code.value,
                    "message": error.message,
                    "category": category.value,
                    "severity": severity.value,
                    "context": context,
                },
                risk_level=self.risk_level(severity),
                user_id=user.user_id if user else None,
                ip_address=request.ip if request else None,
            )
        except Exception as exc:
            self._logger.warning(
                "Audit record raised",
                error_code=error.error_code.value,
                reason=type(exc).__name__,
            )
            return
        if isinstance(result, Failure):
            self._logger.warning(
                "Audit record failed",
                error_code=error.error_code.value,
                reason=result.error.message,
            )

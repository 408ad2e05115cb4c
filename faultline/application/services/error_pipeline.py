"""Error handling entry point.

ErrorPipeline is what the request boundary calls for every failure:

    raw failure
        -> normalize (ErrorNormalizer)
        -> merge request and caller context (fill-only)
        -> categorize / derive severity
        -> log (severity-keyed, context always sanitized)
        -> audit (SECURITY and AUTHENTICATION only, fire-and-forget)
        -> render

``handle()`` never raises and always returns exactly one rendered response.
Logging and audit failures are reported at WARNING and never replace the
error being rendered.

Severity to log level:
    CRITICAL -> critical
    HIGH     -> error
    MEDIUM   -> warning
    LOW      -> info
"""

from __future__ import annotations

import contextlib
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

from faultline.application.normalization import ErrorNormalizer
from faultline.application.services.categorizer import categorize, severity_of
from faultline.application.services.sanitizer import ErrorSanitizer
from faultline.core.enums import ErrorCategory, ErrorSeverity
from faultline.core.errors import (
    ErrorContext,
    RequestContext,
    StructuredError,
)
from faultline.domain.protocols import LoggerProtocol

if TYPE_CHECKING:
    from faultline.infrastructure.audit import AuditSinkAdapter
    from faultline.presentation.errors import RenderedError


class ErrorRenderer(Protocol):
    def render(self, error: StructuredError) -> RenderedError: ...


class ErrorPipeline:
    """Normalize, classify, log, audit and render one failure.

    Dependencies (injected via constructor):
        - ErrorNormalizer: foreign failure -> StructuredError
        - ErrorRenderer: StructuredError -> RenderedError
        - LoggerProtocol: structured log sink
        - AuditSinkAdapter: optional, forwards security-relevant errors

    Example:
        >>> pipeline = get_error_pipeline()
        >>> rendered = pipeline.handle(exc, request_context)
        >>> rendered.status_code
        409
    """

    def __init__(
        self,
        *,
        normalizer: ErrorNormalizer,
        renderer: ErrorRenderer,
        logger: LoggerProtocol,
        audit: AuditSinkAdapter | None = None,
        log_errors: bool = True,
    ) -> None:
        self._normalizer = normalizer
        self._renderer = renderer
        self._logger = logger
        self._audit = audit
        self._log_errors = log_errors
        # Log records are always redacted, whatever the client-facing policy
        self._log_sanitizer = ErrorSanitizer(True)

    def handle(
        self,
        raw_error: Any,
        request: RequestContext | Mapping[str, Any] | None = None,
        context: ErrorContext | Mapping[str, Any] | None = None,
    ) -> RenderedError:
        """Turn any failure into a rendered error response.

        Args:
            raw_error: Exception, duck-typed error object or mapping.
            request: Metadata of the failing request.
            context: Additional context; never overwrites existing keys.

        Returns:
            RenderedError: Status code, body and headers to send.
        """
        error = self.prepare(raw_error, request, context)
        category = categorize(error)
        severity = severity_of(error)
        try:
            log_context = self._log_sanitizer.sanitize_context(
                error.context.to_dict()
            )
        except Exception as exc:
            self._report("Error context redaction failed", exc)
            log_context = {}

        if self._log_errors:
            try:
                self._log(error, category, severity, log_context)
            except Exception as exc:
                self._report("Error logging failed", exc)

        if self._audit is not None:
            try:
                self._audit.submit(error, category, severity, log_context)
            except Exception as exc:
                self._report("Audit submission failed", exc)

        return self._renderer.render(error)

    def prepare(
        self,
        raw_error: Any,
        request: RequestContext | Mapping[str, Any] | None = None,
        context: ErrorContext | Mapping[str, Any] | None = None,
    ) -> StructuredError:
        """Normalize ``raw_error`` and merge request and caller context."""
        error = self._normalizer.normalize(raw_error)
        try:
            if request is not None:
                if not isinstance(request, RequestContext):
                    request = RequestContext.from_mapping(request)
                error = error.with_context(ErrorContext(request=request))
            if context:
                error = error.with_context(context)
        except Exception as exc:
            self._report("Error context merge failed", exc)
        return error

    def _log(
        self,
        error: StructuredError,
        category: ErrorCategory,
        severity: ErrorSeverity,
        log_context: dict[str, Any],
    ) -> None:
        request = error.context.request
        user = error.context.user
        fields: dict[str, Any] = {
            "error_code": error.error_code.value,
            "error_name": error.type_name,
            "status_code": error.status_code,
            "category": category.value,
            "severity": severity.value,
            "operational": error.is_operational,
            "request_id": request.id if request is not None else None,
            "user_id": user.user_id if user is not None else None,
            "context": log_context,
        }
        message = self._log_sanitizer.sanitize_message(error.message)

        match severity:
            case ErrorSeverity.CRITICAL:
                self._logger.critical(message, stack=error.stack, **fields)
            case ErrorSeverity.HIGH:
                self._logger.error(message, **fields)
            case ErrorSeverity.MEDIUM:
                self._logger.warning(message, **fields)
            case _:
                self._logger.info(message, **fields)

    def _report(self, message: str, exc: Exception) -> None:
        with contextlib.suppress(Exception):
            self._logger.warning(message, reason=type(exc).__name__)

"""Composition root.

Application-scoped singletons wiring the error layer together. Adapter
selection lives here and nowhere else; every other module receives its
collaborators through constructors.

Usage:
    # Application Layer (direct use)
    pipeline = get_error_pipeline()
    rendered = pipeline.handle(exc, request_context)

    # Presentation Layer (FastAPI Depends)
    from fastapi import Depends
    logger: LoggerProtocol = Depends(get_logger)

Tests replace collaborators by calling ``cache_clear()`` on the factories,
or by building ErrorPipeline directly.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from faultline.core.config import get_settings

if TYPE_CHECKING:
    from faultline.application.normalization import ErrorNormalizer
    from faultline.application.services.error_pipeline import ErrorPipeline
    from faultline.domain.protocols import AuditProtocol, LoggerProtocol
    from faultline.presentation.errors import ErrorResponseBuilder


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from faultline.infrastructure.logging import ConsoleAdapter

    settings = get_settings()
    return ConsoleAdapter(use_json=settings.should_log_json, level=settings.log_level)


@lru_cache()
def get_audit() -> "AuditProtocol":
    """Return the application-scoped audit sink.

    Defaults to the in-memory adapter. Deployments with a durable audit
    store pass their own adapter to ``build_error_pipeline``.
    """
    from faultline.infrastructure.audit import InMemoryAuditAdapter

    return InMemoryAuditAdapter()


@lru_cache()
def get_error_normalizer() -> "ErrorNormalizer":
    from faultline.application.normalization import ErrorNormalizer

    settings = get_settings()
    return ErrorNormalizer(
        sanitize=settings.should_sanitize,
        generic_message=settings.generic_error_message,
        logger=get_logger(),
    )


@lru_cache()
def get_error_response_builder() -> "ErrorResponseBuilder":
    from faultline.presentation.errors import ErrorResponseBuilder

    return ErrorResponseBuilder(get_settings())


def build_error_pipeline(
    *,
    normalizer: "ErrorNormalizer | None" = None,
    audit: "AuditProtocol | None" = None,
    logger: "LoggerProtocol | None" = None,
) -> "ErrorPipeline":
    """Assemble an ErrorPipeline, defaulting each collaborator.

    Args:
        normalizer: Normalizer, e.g. one extended with ``with_rules()``.
        audit: Audit sink adapter. Ignored when auditing is disabled.
        logger: Logger implementation.

    Returns:
        ErrorPipeline: Ready-to-use pipeline.
    """
    from faultline.application.services.error_pipeline import ErrorPipeline
    from faultline.infrastructure.audit import AuditSinkAdapter

    settings = get_settings()
    logger = logger or get_logger()
    audit_sink = None
    if settings.audit_enabled:
        audit_sink = AuditSinkAdapter(audit or get_audit(), logger)

    return ErrorPipeline(
        normalizer=normalizer or get_error_normalizer(),
        renderer=get_error_response_builder(),
        logger=logger,
        audit=audit_sink,
        log_errors=settings.log_errors,
    )


@lru_cache()
def get_error_pipeline() -> "ErrorPipeline":
    """Return the application-scoped error pipeline."""
    return build_error_pipeline()

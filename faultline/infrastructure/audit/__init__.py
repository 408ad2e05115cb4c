"""Audit adapters."""

from faultline.infrastructure.audit.audit_sink_adapter import (
    AUDITED_CATEGORIES,
    AuditSinkAdapter,
)
from faultline.infrastructure.audit.in_memory_adapter import (
    AuditEntry,
    InMemoryAuditAdapter,
)

__all__ = [
    "AUDITED_CATEGORIES",
    "AuditEntry",
    "AuditSinkAdapter",
    "InMemoryAuditAdapter",
]

"""Audit sink protocol (port).

The audit log storage backend is an external collaborator. This protocol
defines the only call the error layer makes against it: recording one
structured security event per SECURITY or AUTHENTICATION error.

Following hexagonal architecture:
- Domain defines the PORT (this protocol)
- Infrastructure provides ADAPTERS (InMemoryAuditAdapter, or a caller-owned
  adapter over a real audit store)
- AuditSinkAdapter forwards errors to the port without blocking responses

Usage:
    audit: AuditProtocol = InMemoryAuditAdapter()

    result = await audit.record(
        event_type=AuditEventType.AUTHENTICATION_FAILURE,
        payload={"error": "TOKEN_EXPIRED", "category": "AUTHENTICATION"},
        risk_level=RiskLevel.MEDIUM,
        user_id="user-123",
        ip_address="203.0.113.7",
    )
"""

from typing import Any, Protocol

from faultline.core.result import Result
from faultline.domain.enums import AuditEventType, RiskLevel
from faultline.domain.errors import AuditError


class AuditProtocol(Protocol):
    """Protocol for audit sinks.

    Error Handling:
        Implementations return Result types.
        NEVER raise - wrap failures in Failure(AuditError(...)) instead.
        Callers still guard against adapters that break this contract.
    """

    async def record(
        self,
        *,
        event_type: AuditEventType,
        payload: dict[str, Any],
        risk_level: RiskLevel,
        user_id: str | None = None,
        ip_address: str | None = None,
    ) -> Result[None, AuditError]:
        """Record one immutable audit event.

        Args:
            event_type: What happened.
            payload: Structured, sanitized event payload (error code,
                message, category, severity, context).
            risk_level: Risk classification derived from error severity.
            user_id: Acting user, when known.
            ip_address: Client IP address, when known.

        Returns:
            Result[None, AuditError]:
                - Success(None) once the event is accepted
                - Failure(AuditError) if the sink rejected or failed to store it
        """
        ...

"""In-memory implementation of AuditProtocol.

Keeps audit events in a list. Intended for unit tests and local development;
production deployments plug their own adapter over a durable audit store.

Usage:
    adapter = InMemoryAuditAdapter()
    await adapter.record(
        event_type=AuditEventType.SECURITY_VIOLATION,
        payload={"error": "BRUTE_FORCE_ATTEMPT"},
        risk_level=RiskLevel.HIGH,
    )
    adapter.entries[0].event_type  # AuditEventType.SECURITY_VIOLATION
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from faultline.core.result import Failure, Result, Success
from faultline.domain.enums import AuditEventType, RiskLevel
from faultline.domain.errors import AuditError


@dataclass(frozen=True, slots=True, kw_only=True)
class AuditEntry:
    """One recorded audit event."""

    event_type: AuditEventType
    payload: dict[str, Any]
    risk_level: RiskLevel
    user_id: str | None = None
    ip_address: str | None = None
    recorded_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class InMemoryAuditAdapter:
    """List-backed audit sink.

    Args:
        unavailable: When True every ``record`` call returns a Failure,
            simulating an unreachable audit store.
    """

    def __init__(self, *, unavailable: bool = False) -> None:
        self._entries: list[AuditEntry] = []
        self.unavailable = unavailable

    @property
    def entries(self) -> tuple[AuditEntry, ...]:
        return tuple(self._entries)

    async def record(
        self,
        *,
        event_type: AuditEventType,
        payload: dict[str, Any],
        risk_level: RiskLevel,
        user_id: str | None = None,
        ip_address: str | None = None,
    ) -> Result[None, AuditError]:
        if self.unavailable:
            return Failure(
                error=AuditError(
                    message="Audit store unavailable",
                    details={"event_type": event_type.value},
                )
            )
        self._entries.append(
            AuditEntry(
                event_type=event_type,
                payload=dict(payload),
                risk_level=risk_level,
                user_id=user_id,
                ip_address=ip_address,
            )
        )
        return Success(value=None)

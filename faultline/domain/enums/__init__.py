"""Domain enums package."""

from faultline.domain.enums.audit_event_type import AuditEventType, RiskLevel

__all__ = ["AuditEventType", "RiskLevel"]

"""Domain errors package."""

from faultline.domain.errors.audit_error import AuditError

__all__ = ["AuditError"]

"""Domain protocols (ports) for the error layer's collaborators."""

from faultline.domain.protocols.audit_protocol import AuditProtocol
from faultline.domain.protocols.logger_protocol import LoggerProtocol

__all__ = ["AuditProtocol", "LoggerProtocol"]

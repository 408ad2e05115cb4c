"""Unit tests for the audit adapters.

Tests cover:
- InMemoryAuditAdapter: recording and simulated outage
- AuditSinkAdapter: category filter, event type and risk mapping
- Fire-and-forget scheduling inside an event loop, worker thread without one
- A slow sink never delays submit()
- Failure results and raising adapters are logged, never raised
"""

import asyncio
import threading
import time
from unittest.mock import AsyncMock

import pytest

from faultline.core.enums import ErrorCategory, ErrorKind, ErrorSeverity
from faultline.core.errors import (
    AuthenticationError,
    ErrorContextBuilder,
    NotFoundError,
    SecurityError,
)
from faultline.core.result import Failure, Success
from faultline.domain.enums import AuditEventType, RiskLevel
from faultline.infrastructure.audit import AuditSinkAdapter, InMemoryAuditAdapter


@pytest.fixture
def sink(audit_adapter, mock_logger) -> AuditSinkAdapter:
    return AuditSinkAdapter(audit_adapter, mock_logger)


class GatedAudit:
    """Audit sink whose record() waits until ``released`` is set."""

    def __init__(self) -> None:
        self.released = threading.Event()
        self.calls: list[dict] = []

    async def record(self, **kwargs):
        await asyncio.to_thread(self.released.wait, 5)
        self.calls.append(kwargs)
        return Success(value=None)


def _security_error() -> SecurityError:
    context = (
        ErrorContextBuilder()
        .add_user("user-7")
        .add_request("req-7", "POST", "/login", ip="198.51.100.4")
        .build()
    )
    return SecurityError("Brute force", ErrorKind.BRUTE_FORCE_ATTEMPT, context=context)


@pytest.mark.unit
class TestInMemoryAuditAdapter:
    """Test the list-backed audit sink."""

    async def test_record_appends_entry(self, audit_adapter):
        """Test a recorded event is kept with its fields."""
        result = await audit_adapter.record(
            event_type=AuditEventType.SECURITY_VIOLATION,
            payload={"error": "SECURITY_VIOLATION"},
            risk_level=RiskLevel.HIGH,
            user_id="user-1",
            ip_address="203.0.113.7",
        )

        assert isinstance(result, Success)
        (entry,) = audit_adapter.entries
        assert entry.event_type == AuditEventType.SECURITY_VIOLATION
        assert entry.payload == {"error": "SECURITY_VIOLATION"}
        assert entry.user_id == "user-1"
        assert entry.recorded_at.tzinfo is not None

    async def test_unavailable_returns_failure(self):
        """Test the simulated outage returns a Failure instead of raising."""
        adapter = InMemoryAuditAdapter(unavailable=True)

        result = await adapter.record(
            event_type=AuditEventType.AUTHENTICATION_FAILURE,
            payload={},
            risk_level=RiskLevel.MEDIUM,
        )

        assert isinstance(result, Failure)
        assert result.error.message == "Audit store unavailable"
        assert adapter.entries == ()


@pytest.mark.unit
class TestAuditSinkAdapterClassification:
    """Test which errors are audited and how."""

    @pytest.mark.parametrize(
        "category,expected",
        [
            (ErrorCategory.SECURITY, True),
            (ErrorCategory.AUTHENTICATION, True),
            (ErrorCategory.AUTHORIZATION, False),
            (ErrorCategory.VALIDATION, False),
            (ErrorCategory.INTERNAL, False),
        ],
    )
    def test_should_audit(self, category, expected):
        """Test only SECURITY and AUTHENTICATION are audited."""
        assert AuditSinkAdapter.should_audit(category) is expected

    @pytest.mark.parametrize(
        "severity,risk",
        [
            (ErrorSeverity.CRITICAL, RiskLevel.CRITICAL),
            (ErrorSeverity.HIGH, RiskLevel.HIGH),
            (ErrorSeverity.MEDIUM, RiskLevel.MEDIUM),
            (ErrorSeverity.LOW, RiskLevel.MEDIUM),
        ],
    )
    def test_risk_level(self, severity, risk):
        """Test severity maps to audit risk."""
        assert AuditSinkAdapter.risk_level(severity) == risk


@pytest.mark.unit
class TestAuditSinkAdapterSubmit:
    """Test dispatch of audit records."""

    def test_worker_thread_without_event_loop(self, sink, audit_adapter):
        """Test the record is written on a worker thread and flush() waits."""
        sink.submit(_security_error(), ErrorCategory.SECURITY, ErrorSeverity.HIGH)
        sink.flush(timeout=5)

        (entry,) = audit_adapter.entries
        assert entry.event_type == AuditEventType.SECURITY_VIOLATION
        assert entry.risk_level == RiskLevel.HIGH
        assert entry.user_id == "user-7"
        assert entry.ip_address == "198.51.100.4"
        assert entry.payload["error"] == "BRUTE_FORCE_ATTEMPT"
        assert entry.payload["category"] == "SECURITY"
        assert entry.payload["severity"] == "HIGH"
        assert entry.payload["context"]["request"]["path"] == "/login"

    def test_slow_sink_does_not_block_submit(self, mock_logger):
        """Test submit() returns while the sink is still recording."""
        audit = GatedAudit()
        sink = AuditSinkAdapter(audit, mock_logger)

        started = time.monotonic()
        sink.submit(_security_error(), ErrorCategory.SECURITY, ErrorSeverity.HIGH)
        elapsed = time.monotonic() - started

        assert elapsed < 1
        assert audit.calls == []
        audit.released.set()
        sink.flush(timeout=5)
        assert len(audit.calls) == 1

    async def test_drain_waits_for_worker_threads(self, mock_logger):
        """Test drain() also awaits records dispatched without a loop."""
        audit = GatedAudit()
        sink = AuditSinkAdapter(audit, mock_logger)

        await asyncio.to_thread(
            sink.submit, _security_error(), ErrorCategory.SECURITY, ErrorSeverity.HIGH
        )
        audit.released.set()
        await sink.drain()

        assert len(audit.calls) == 1

    async def test_scheduled_inside_event_loop(self, sink, audit_adapter):
        """Test submit() returns immediately and drain() waits for the record."""
        error = AuthenticationError("Token has expired", ErrorKind.TOKEN_EXPIRED)

        sink.submit(error, ErrorCategory.AUTHENTICATION, ErrorSeverity.MEDIUM)

        assert audit_adapter.entries == ()
        await sink.drain()
        (entry,) = audit_adapter.entries
        assert entry.event_type == AuditEventType.AUTHENTICATION_FAILURE
        assert entry.risk_level == RiskLevel.MEDIUM

    def test_explicit_context_used(self, sink, audit_adapter):
        """Test a sanitized context replaces the error's own."""
        sink.submit(
            _security_error(),
            ErrorCategory.SECURITY,
            ErrorSeverity.HIGH,
            {"metadata": {"attempts": 12}},
        )
        sink.flush(timeout=5)

        assert audit_adapter.entries[0].payload["context"] == {
            "metadata": {"attempts": 12}
        }

    def test_unaudited_category_ignored(self, sink, audit_adapter):
        """Test non security-relevant errors are skipped."""
        sink.submit(NotFoundError("Gone"), ErrorCategory.NOT_FOUND, ErrorSeverity.LOW)
        sink.flush(timeout=5)

        assert audit_adapter.entries == ()

    def test_failure_result_logged(self, mock_logger):
        """Test a Failure from the sink is logged at WARNING."""
        sink = AuditSinkAdapter(InMemoryAuditAdapter(unavailable=True), mock_logger)

        sink.submit(_security_error(), ErrorCategory.SECURITY, ErrorSeverity.HIGH)
        sink.flush(timeout=5)

        mock_logger.warning.assert_called_once_with(
            "Audit record failed",
            error_code="BRUTE_FORCE_ATTEMPT",
            reason="Audit store unavailable",
        )

    async def test_raising_adapter_logged(self, mock_logger):
        """Test an adapter that raises is contained and logged."""
        audit = AsyncMock()
        audit.record.side_effect = ConnectionError("audit db down")
        sink = AuditSinkAdapter(audit, mock_logger)

        sink.submit(_security_error(), ErrorCategory.SECURITY, ErrorSeverity.HIGH)
        await sink.drain()

        mock_logger.warning.assert_called_once_with(
            "Audit record raised",
            error_code="BRUTE_FORCE_ATTEMPT",
            reason="ConnectionError",
        )

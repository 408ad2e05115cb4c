"""Unit tests for ConsoleAdapter (structured console logging).

Tests cover:
- All LoggerProtocol methods forward message and context
- Exception details on error() and critical()
- Renderer selection (JSON vs console) and level filtering
- Context binding

Architecture:
- Unit tests with mocked structlog
- NO real logging output
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from faultline.infrastructure.logging.console_adapter import ConsoleAdapter


@pytest.fixture
def mock_structlog():
    with patch(
        "faultline.infrastructure.logging.console_adapter.structlog"
    ) as mock_structlog:
        mock_structlog.get_logger.return_value = MagicMock()
        yield mock_structlog


@pytest.mark.unit
class TestConsoleAdapterLogging:
    """Test ConsoleAdapter logging methods."""

    @pytest.mark.parametrize("level", ["debug", "info", "warning", "error", "critical"])
    def test_level_forwards_message_and_context(self, mock_structlog, level):
        """Test each level logs message with structured context."""
        adapter = ConsoleAdapter()

        getattr(adapter, level)(
            "Error handled", error_code="TOKEN_EXPIRED", status_code=401
        )

        getattr(mock_structlog.get_logger.return_value, level).assert_called_once_with(
            "Error handled",
            error_code="TOKEN_EXPIRED",
            status_code=401,
        )

    def test_error_with_exception_adds_details(self, mock_structlog):
        """Test error() flattens the exception into type and message."""
        adapter = ConsoleAdapter()

        adapter.error("Audit record raised", error=ConnectionError("refused"))

        mock_structlog.get_logger.return_value.error.assert_called_once_with(
            "Audit record raised",
            error_type="ConnectionError",
            error_message="refused",
        )

    def test_critical_with_exception_adds_details(self, mock_structlog):
        """Test critical() flattens the exception into type and message."""
        adapter = ConsoleAdapter()

        adapter.critical("Unhandled failure", error=RuntimeError("boom"), stack="...")

        mock_structlog.get_logger.return_value.critical.assert_called_once_with(
            "Unhandled failure",
            stack="...",
            error_type="RuntimeError",
            error_message="boom",
        )

    def test_logs_with_nested_context(self, mock_structlog):
        """Test nested dictionaries pass through unchanged."""
        adapter = ConsoleAdapter()

        adapter.warning(
            "Validation failed",
            context={"fields": {"email": "Invalid format"}, "request": {"id": "r-1"}},
        )

        mock_structlog.get_logger.return_value.warning.assert_called_once_with(
            "Validation failed",
            context={"fields": {"email": "Invalid format"}, "request": {"id": "r-1"}},
        )


@pytest.mark.unit
class TestConsoleAdapterConfiguration:
    """Test structlog configuration."""

    def test_json_renderer_when_requested(self, mock_structlog):
        """Test use_json selects the JSON renderer."""
        ConsoleAdapter(use_json=True)

        processors = mock_structlog.configure.call_args.kwargs["processors"]
        assert processors[-1] is mock_structlog.processors.JSONRenderer.return_value

    def test_console_renderer_by_default(self, mock_structlog):
        """Test human-readable output is the default."""
        ConsoleAdapter()

        processors = mock_structlog.configure.call_args.kwargs["processors"]
        assert processors[-1] is mock_structlog.dev.ConsoleRenderer.return_value
        mock_structlog.dev.ConsoleRenderer.assert_called_once_with(colors=True)

    def test_contextvars_merged_first(self, mock_structlog):
        """Test request-scoped context is merged into every record."""
        ConsoleAdapter()

        processors = mock_structlog.configure.call_args.kwargs["processors"]
        assert processors[0] is mock_structlog.contextvars.merge_contextvars

    def test_level_filtering(self, mock_structlog):
        """Test the minimum level is applied to the bound logger."""
        ConsoleAdapter(level="warning")

        mock_structlog.make_filtering_bound_logger.assert_called_once_with(
            logging.WARNING
        )


@pytest.mark.unit
class TestConsoleAdapterBinding:
    """Test context binding."""

    def test_bind_returns_new_adapter(self, mock_structlog):
        """Test bind() returns a new adapter over the bound logger."""
        adapter = ConsoleAdapter()
        base_logger = mock_structlog.get_logger.return_value
        bound_logger = MagicMock()
        base_logger.bind.return_value = bound_logger

        bound = adapter.bind(request_id="req-1")
        bound.info("Error handled")

        assert bound is not adapter
        base_logger.bind.assert_called_once_with(request_id="req-1")
        bound_logger.info.assert_called_once_with("Error handled")
        base_logger.info.assert_not_called()

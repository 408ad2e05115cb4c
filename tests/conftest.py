"""Pytest configuration and shared fixtures.

Fixtures:
- make_settings: Settings factory isolated from process environment
- dev_settings / prod_settings: Development and production-like settings
- mock_logger: MagicMock standing in for LoggerProtocol
- audit_adapter: Fresh InMemoryAuditAdapter
- audit_sink: AuditSinkAdapter over audit_adapter (call flush() before asserting)
- make_pipeline: ErrorPipeline factory wired to the fixtures above
"""

import os
from unittest.mock import MagicMock, patch

import pytest

from faultline.application.normalization import ErrorNormalizer
from faultline.application.services.error_pipeline import ErrorPipeline
from faultline.core.config import Settings, get_settings
from faultline.core.enums import Environment
from faultline.infrastructure.audit import AuditSinkAdapter, InMemoryAuditAdapter
from faultline.presentation.errors import ErrorResponseBuilder


@pytest.fixture(autouse=True)
def isolated_environment():
    """Run every test without FAULTLINE_* variables from the host."""
    env = {
        key: value
        for key, value in os.environ.items()
        if not key.startswith("FAULTLINE_")
    }
    with patch.dict(os.environ, env, clear=True):
        get_settings.cache_clear()
        yield
    get_settings.cache_clear()


@pytest.fixture
def make_settings():
    """Build Settings with explicit overrides."""

    def _make(**overrides) -> Settings:
        return Settings(**overrides)

    return _make


@pytest.fixture
def dev_settings(make_settings) -> Settings:
    return make_settings(environment=Environment.DEVELOPMENT)


@pytest.fixture
def prod_settings(make_settings) -> Settings:
    return make_settings(environment=Environment.PRODUCTION)


@pytest.fixture
def mock_logger() -> MagicMock:
    """LoggerProtocol double recording every call."""
    logger = MagicMock()
    logger.bind.return_value = logger
    return logger


@pytest.fixture
def audit_adapter() -> InMemoryAuditAdapter:
    return InMemoryAuditAdapter()


@pytest.fixture
def audit_sink(audit_adapter, mock_logger) -> AuditSinkAdapter:
    return AuditSinkAdapter(audit_adapter, mock_logger)


@pytest.fixture
def make_pipeline(mock_logger, audit_sink):
    """Build an ErrorPipeline for the given settings."""

    def _make(settings: Settings, *, audit: bool = True) -> ErrorPipeline:
        return ErrorPipeline(
            normalizer=ErrorNormalizer(
                sanitize=settings.should_sanitize,
                generic_message=settings.generic_error_message,
                logger=mock_logger,
            ),
            renderer=ErrorResponseBuilder(settings),
            logger=mock_logger,
            audit=audit_sink if audit else None,
            log_errors=settings.log_errors,
        )

    return _make


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Tests that run a FastAPI app end to end"
    )

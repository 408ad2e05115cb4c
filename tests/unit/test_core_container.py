"""Unit tests for the composition root.

Tests cover:
- Singletons are cached
- Pipeline assembly follows settings (audit, log_errors, sanitize)
- Explicit collaborators override defaults
"""

import os
from unittest.mock import patch

import pytest

from faultline.application.normalization import ErrorNormalizer
from faultline.application.services.error_pipeline import ErrorPipeline
from faultline.core import container
from faultline.core.config import get_settings
from faultline.core.errors import NotFoundError
from faultline.infrastructure.audit import InMemoryAuditAdapter
from faultline.infrastructure.logging import ConsoleAdapter


@pytest.fixture(autouse=True)
def clear_container():
    factories = (
        container.get_logger,
        container.get_audit,
        container.get_error_normalizer,
        container.get_error_response_builder,
        container.get_error_pipeline,
    )
    for factory in factories:
        factory.cache_clear()
    yield
    for factory in factories:
        factory.cache_clear()


@pytest.mark.unit
class TestSingletons:
    """Test cached factories."""

    def test_logger_is_console_adapter(self):
        """Test the default logger implementation."""
        assert isinstance(container.get_logger(), ConsoleAdapter)

    def test_factories_cache_instances(self):
        """Test repeated calls return the same objects."""
        assert container.get_logger() is container.get_logger()
        assert container.get_audit() is container.get_audit()
        assert container.get_error_pipeline() is container.get_error_pipeline()

    def test_default_audit_is_in_memory(self):
        """Test the default audit sink."""
        assert isinstance(container.get_audit(), InMemoryAuditAdapter)

    def test_normalizer_follows_environment(self):
        """Test production settings produce a sanitizing normalizer."""
        with patch.dict(os.environ, {"FAULTLINE_ENVIRONMENT": "production"}):
            get_settings.cache_clear()
            error = container.get_error_normalizer().normalize(ValueError("secret"))

        assert error.message == "An internal error occurred"


@pytest.mark.unit
class TestBuildErrorPipeline:
    """Test pipeline assembly."""

    def test_default_pipeline(self):
        """Test the assembled pipeline handles errors."""
        pipeline = container.build_error_pipeline()

        assert isinstance(pipeline, ErrorPipeline)
        assert pipeline.handle(NotFoundError("Gone")).status_code == 404

    def test_audit_disabled(self, mock_logger):
        """Test no audit sink is attached when auditing is off."""
        with patch.dict(os.environ, {"FAULTLINE_AUDIT_ENABLED": "false"}):
            get_settings.cache_clear()
            pipeline = container.build_error_pipeline(logger=mock_logger)

        assert pipeline._audit is None

    def test_explicit_collaborators(self, mock_logger, audit_adapter):
        """Test caller-provided normalizer, audit and logger are used."""
        normalizer = ErrorNormalizer()

        pipeline = container.build_error_pipeline(
            normalizer=normalizer, audit=audit_adapter, logger=mock_logger
        )

        assert pipeline._normalizer is normalizer
        assert pipeline._logger is mock_logger
        assert pipeline._audit is not None

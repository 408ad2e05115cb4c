"""Unit tests for RequestIdMiddleware.

Tests cover:
- Request ID generation for new requests
- Reuse of X-Request-Id and X-Correlation-Id headers
- Contextvar and structlog context propagation and reset
- Request ID echoed in response headers and stored on request.state

Architecture:
- Unit tests with mocked Starlette Request/Response
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import pytest
import structlog

from faultline.presentation.middleware import RequestIdMiddleware, get_request_id


def _request(headers: dict[str, str] | None = None) -> MagicMock:
    request = MagicMock()
    request.headers = headers or {}
    return request


def _call_next() -> AsyncMock:
    response = MagicMock()
    response.headers = {}
    return AsyncMock(return_value=response)


@pytest.mark.unit
class TestRequestIdGeneration:
    """Test request ID selection."""

    async def test_generates_uuid_when_missing(self):
        """Test a UUID4 is generated when no header is sent."""
        middleware = RequestIdMiddleware(app=MagicMock())

        response = await middleware.dispatch(_request(), _call_next())

        request_id = response.headers["X-Request-Id"]
        assert UUID(request_id).version == 4

    async def test_reuses_request_id_header(self):
        """Test an inbound X-Request-Id is kept."""
        middleware = RequestIdMiddleware(app=MagicMock())
        request = _request({"X-Request-Id": "req-123"})

        response = await middleware.dispatch(request, _call_next())

        assert response.headers["X-Request-Id"] == "req-123"
        assert request.state.request_id == "req-123"

    async def test_falls_back_to_correlation_id(self):
        """Test X-Correlation-Id is used when X-Request-Id is absent."""
        middleware = RequestIdMiddleware(app=MagicMock())

        response = await middleware.dispatch(
            _request({"X-Correlation-Id": "corr-9"}), _call_next()
        )

        assert response.headers["X-Request-Id"] == "corr-9"


@pytest.mark.unit
class TestRequestIdContextPropagation:
    """Test contextvar handling."""

    async def test_request_id_available_during_request(self):
        """Test get_request_id() returns the ID inside the handler."""
        seen: list[str | None] = []
        logged: list[dict] = []
        response = MagicMock()
        response.headers = {}

        async def call_next(request):
            seen.append(get_request_id())
            logged.append(structlog.contextvars.get_contextvars())
            return response

        middleware = RequestIdMiddleware(app=MagicMock())
        await middleware.dispatch(_request({"X-Request-Id": "req-ctx"}), call_next)

        assert seen == ["req-ctx"]
        assert logged == [{"request_id": "req-ctx"}]
        assert structlog.contextvars.get_contextvars() == {}

    async def test_request_id_reset_after_request(self):
        """Test the contextvar is cleared once the request completes."""
        middleware = RequestIdMiddleware(app=MagicMock())

        await middleware.dispatch(_request({"X-Request-Id": "req-1"}), _call_next())

        assert get_request_id() is None

    async def test_request_id_reset_when_handler_raises(self):
        """Test the contextvar is cleared even if the handler fails."""
        middleware = RequestIdMiddleware(app=MagicMock())
        call_next = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(RuntimeError):
            await middleware.dispatch(_request({"X-Request-Id": "req-2"}), call_next)

        assert get_request_id() is None

    def test_outside_request_returns_none(self):
        """Test get_request_id() outside any request."""
        assert get_request_id() is None

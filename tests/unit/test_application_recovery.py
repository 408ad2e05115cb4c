"""Unit tests for recovery combinators.

Tests cover:
- retry: attempt counting, exponential backoff, re-raise of last failure
- with_fallback: primary result, fallback on failure (logged), fallback failure
- with_timeout: result in time, OperationTimeoutError on expiry, no cancel,
  the operation's own TimeoutError passes through, background tracking
"""

import asyncio
from unittest.mock import AsyncMock, call, patch

import pytest

from faultline.application.services import recovery
from faultline.application.services.recovery import retry, with_fallback, with_timeout
from faultline.core.enums import ErrorKind
from faultline.core.errors import OperationTimeoutError


def flaky(failures: int, result: str = "ok") -> AsyncMock:
    """AsyncMock failing ``failures`` times before returning ``result``."""
    return AsyncMock(
        side_effect=[ConnectionError(f"fail {n}") for n in range(failures)] + [result]
    )


@pytest.mark.unit
class TestRetry:
    """Test retry()."""

    async def test_succeeds_after_failures(self):
        """Test op failing twice then succeeding is called exactly 3 times."""
        operation = flaky(2)

        result = await retry(operation, 3, 10)

        assert result == "ok"
        assert operation.await_count == 3

    async def test_first_success_does_not_sleep(self):
        """Test no delay when the first attempt succeeds."""
        operation = AsyncMock(return_value=42)

        with patch("faultline.application.services.recovery.asyncio.sleep") as sleep:
            assert await retry(operation, 3, 10) == 42

        sleep.assert_not_called()

    async def test_exponential_backoff(self):
        """Test delays are base, 2x base, 4x base."""
        operation = flaky(3)

        with patch(
            "faultline.application.services.recovery.asyncio.sleep", new=AsyncMock()
        ) as sleep:
            await retry(operation, 4, 100)

        assert sleep.await_args_list == [call(0.1), call(0.2), call(0.4)]

    async def test_reraises_last_failure(self):
        """Test exhaustion re-raises the last error."""
        operation = flaky(5)

        with pytest.raises(ConnectionError, match="fail 2"):
            await retry(operation, 3, 1)

        assert operation.await_count == 3

    async def test_non_matching_errors_propagate_immediately(self):
        """Test retry_on limits which errors are retried."""
        operation = AsyncMock(side_effect=KeyError("missing"))

        with pytest.raises(KeyError):
            await retry(operation, 5, 1, retry_on=(ConnectionError,))

        assert operation.await_count == 1

    @pytest.mark.parametrize("max_attempts", [0, -1])
    async def test_rejects_non_positive_attempts(self, max_attempts):
        """Test invalid attempt counts are rejected."""
        with pytest.raises(ValueError):
            await retry(AsyncMock(), max_attempts, 10)


@pytest.mark.unit
class TestWithFallback:
    """Test with_fallback()."""

    async def test_returns_primary_result(self):
        """Test fallback is not called when primary succeeds."""
        fallback = AsyncMock(return_value="fallback")

        result = await with_fallback(AsyncMock(return_value="primary"), fallback)

        assert result == "primary"
        fallback.assert_not_awaited()

    async def test_falls_back_on_failure(self):
        """Test primary's failure is not propagated."""
        primary = AsyncMock(side_effect=RuntimeError("primary down"))

        result = await with_fallback(primary, AsyncMock(return_value="ok"))

        assert result == "ok"

    async def test_primary_failure_logged(self, mock_logger):
        """Test the swallowed primary failure is reported at WARNING."""
        primary = AsyncMock(side_effect=RuntimeError("primary down"))

        result = await with_fallback(
            primary, AsyncMock(return_value="ok"), logger=mock_logger
        )

        assert result == "ok"
        mock_logger.warning.assert_called_once_with(
            "Primary operation failed, using fallback", reason="RuntimeError"
        )

    async def test_primary_success_not_logged(self, mock_logger):
        """Test nothing is logged when primary succeeds."""
        await with_fallback(
            AsyncMock(return_value="primary"), AsyncMock(), logger=mock_logger
        )

        mock_logger.warning.assert_not_called()

    async def test_fallback_failure_propagates(self):
        """Test the fallback's own error surfaces."""
        primary = AsyncMock(side_effect=RuntimeError("primary down"))
        fallback = AsyncMock(side_effect=LookupError("cache miss"))

        with pytest.raises(LookupError, match="cache miss"):
            await with_fallback(primary, fallback)


@pytest.mark.unit
class TestWithTimeout:
    """Test with_timeout()."""

    async def test_returns_result_in_time(self):
        """Test a fast operation's result is returned."""
        assert await with_timeout(AsyncMock(return_value="done"), 1000) == "done"

    async def test_times_out_quickly(self):
        """Test a slow operation fails with a Timeout-kind error within budget."""
        loop = asyncio.get_running_loop()
        release = asyncio.Event()

        async def slow():
            await release.wait()
            return "late"

        started = loop.time()
        with pytest.raises(OperationTimeoutError) as exc_info:
            await with_timeout(slow, 50)
        elapsed = loop.time() - started
        release.set()
        await asyncio.sleep(0.01)

        assert elapsed < 0.5
        assert exc_info.value.error_code == ErrorKind.TIMEOUT
        assert exc_info.value.status_code == 408
        assert exc_info.value.context.get("timeout_ms") == 50

    async def test_operation_keeps_running_after_timeout(self):
        """Test the timed-out operation is not cancelled."""
        release = asyncio.Event()
        finished = asyncio.Event()

        async def slow():
            await release.wait()
            finished.set()

        with pytest.raises(OperationTimeoutError):
            await with_timeout(slow, 10)

        release.set()
        await asyncio.wait_for(finished.wait(), 1)

        assert finished.is_set()

    async def test_operation_errors_propagate(self):
        """Test failures inside the time budget are raised as-is."""
        with pytest.raises(ValueError, match="bad input"):
            await with_timeout(AsyncMock(side_effect=ValueError("bad input")), 1000)

    async def test_own_timeout_error_propagates(self):
        """Test a TimeoutError raised by the operation is not reported as expiry."""
        operation = AsyncMock(side_effect=TimeoutError("upstream gave up"))

        with pytest.raises(TimeoutError, match="upstream gave up") as exc_info:
            await with_timeout(operation, 1000)

        assert not isinstance(exc_info.value, OperationTimeoutError)

    async def test_background_operation_tracked_until_done(self):
        """Test a timed-out operation is referenced until it finishes."""
        release = asyncio.Event()

        async def slow():
            await release.wait()
            raise RuntimeError("late failure")

        before = set(recovery._orphaned)
        with pytest.raises(OperationTimeoutError):
            await with_timeout(slow, 10)

        (task,) = recovery._orphaned - before
        release.set()
        await asyncio.wait([task], timeout=1)
        await asyncio.sleep(0)

        assert task not in recovery._orphaned
        assert isinstance(task.exception(), RuntimeError)

    async def test_rejects_non_positive_timeout(self):
        """Test invalid timeouts are rejected."""
        with pytest.raises(ValueError):
            await with_timeout(AsyncMock(), 0)

"""Recovery combinators for async operations.

Opt-in wrappers callers can put around any awaitable-producing callable.
They are stateless and independent of the rendering pipeline; nothing in
normal request handling retries on its own.

Usage:
    user = await retry(lambda: client.fetch_user(user_id), max_attempts=3)
    quote = await with_fallback(fetch_live_quote, fetch_cached_quote)
    report = await with_timeout(lambda: build_report(account_id), 5000)

Limitation:
    ``with_timeout`` does not cancel the wrapped operation. When the timer
    fires first the operation keeps running in the background; operations
    that must not run twice should be idempotent. Background operations are
    kept referenced until they finish and their late failures are discarded.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from faultline.core.errors import OperationTimeoutError
from faultline.domain.protocols import LoggerProtocol

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]

_orphaned: set[asyncio.Future[Any]] = set()


def _release(task: asyncio.Future[Any]) -> None:
    _orphaned.discard(task)
    if not task.cancelled():
        task.exception()


async def retry(
    operation: Operation[T],
    max_attempts: int = 3,
    base_delay_ms: int = 1000,
    *,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
) -> T:
    """Call ``operation`` until it succeeds or attempts run out.

    The delay before attempt ``n + 1`` is ``base_delay_ms * 2**n`` where
    ``n`` counts from zero.

    Args:
        operation: Zero-argument callable returning an awaitable.
        max_attempts: Total number of calls, including the first.
        base_delay_ms: Delay before the first retry, in milliseconds.
        retry_on: Exception types that trigger a retry. Anything else
            propagates immediately.

    Returns:
        The first successful result.

    Raises:
        ValueError: If ``max_attempts`` is not positive or the delay is
            negative.
        Exception: The last failure once attempts are exhausted.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be positive")
    if base_delay_ms < 0:
        raise ValueError("base_delay_ms must not be negative")

    for attempt in range(max_attempts):
        try:
            return await operation()
        except retry_on:
            if attempt == max_attempts - 1:
                raise
            await asyncio.sleep(base_delay_ms * 2**attempt / 1000)
    raise AssertionError("unreachable")


async def with_fallback(
    primary: Operation[T],
    fallback: Operation[T],
    *,
    logger: LoggerProtocol | None = None,
) -> T:
    """Return ``primary()``'s result, or ``fallback()``'s if primary fails.

    The primary failure is logged at WARNING when ``logger`` is given.
    Failures of the fallback propagate.
    """
    try:
        return await primary()
    except Exception as exc:
        if logger is not None:
            logger.warning(
                "Primary operation failed, using fallback",
                reason=type(exc).__name__,
            )
        return await fallback()


async def with_timeout(operation: Operation[T], timeout_ms: int) -> T:
    """Race ``operation`` against a timer.

    Args:
        operation: Zero-argument callable returning an awaitable.
        timeout_ms: Time budget in milliseconds.

    Returns:
        The operation's result if it finishes in time.

    Raises:
        ValueError: If ``timeout_ms`` is not positive.
        OperationTimeoutError: If the timer fires first. The operation is
            left running.
        Exception: The operation's own failure, including a TimeoutError
            it raises before the deadline.
    """
    if timeout_ms <= 0:
        raise ValueError("timeout_ms must be positive")

    task = asyncio.ensure_future(operation())
    try:
        return await asyncio.wait_for(asyncio.shield(task), timeout_ms / 1000)
    except TimeoutError as exc:
        if task.done():
            raise
        _orphaned.add(task)
        task.add_done_callback(_release)
        raise OperationTimeoutError(
            "Operation timed out",
            context={"timeout_ms": timeout_ms},
        ) from exc

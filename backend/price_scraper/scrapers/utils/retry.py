"""Retry utilities with exponential backoff for scrape operations."""

import asyncio
from typing import Awaitable, Callable, TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _log_before_sleep(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "retrying_after_failure",
        attempt=retry_state.attempt_number,
        sleep_seconds=retry_state.next_action.sleep if retry_state.next_action else None,
        error=str(exc),
    )


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay_ms: int = 1000,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run an async operation, retrying every failure with exponential backoff.

    After failed attempt ``i`` (zero-based) the wrapper sleeps
    ``base_delay_ms * 2**i`` before trying again.  There is no jitter and no
    distinction between error types.

    Args:
        operation: Zero-argument coroutine factory invoked once per attempt
        max_attempts: Total number of attempts (>= 1)
        base_delay_ms: Delay before the second attempt, in milliseconds
        sleep: Async sleep function (seconds), injectable for tests

    Returns:
        The operation's result from the first successful attempt

    Raises:
        The exception raised by the final attempt once attempts are exhausted
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=base_delay_ms / 1000.0, exp_base=2, min=0),
        retry=retry_if_exception_type(Exception),
        before_sleep=_log_before_sleep,
        sleep=sleep,
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            return await operation()

"""Retry utilities for aiotinify.

Provides bounded retries with capped exponential backoff for transient
request failures. Every attempt first takes a token from the client's rate
limiter.

Example:
    >>> from aiotinify.http.retry import RetryPolicy, execute_with_retry
    >>>
    >>> policy = RetryPolicy(max_attempts=3, base_delay=0.5)
    >>> response = await execute_with_retry(send_once, policy, limiter)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import TypeVar

from aiotinify.core.exceptions import RateLimitExceededError, TinifyError
from aiotinify.http.rate_limiter import TokenBucketRateLimiter

logger = logging.getLogger("aiotinify.retry")

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retry behavior.

    Attributes:
        max_attempts: Maximum total attempts (including first try)
        base_delay: Delay in seconds before the first retry
        max_delay: Maximum delay between retries
        backoff_factor: Multiplier applied to the delay after each retry
    """

    max_attempts: int = 3
    base_delay: float = 0.1
    max_delay: float = 10.0
    backoff_factor: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("delays must not be negative")
        if self.backoff_factor < 1.0:
            raise ValueError("backoff_factor must be >= 1.0")

    def delay_for(self, attempt: int) -> float:
        """Calculate the delay after a failed attempt.

        Args:
            attempt: Failed attempt number (1-indexed)

        Returns:
            Delay in seconds, capped at ``max_delay``
        """
        delay = self.base_delay * (self.backoff_factor ** (attempt - 1))
        return min(delay, self.max_delay)

    def delays(self) -> Iterator[float]:
        """Yield the sleeps between consecutive attempts, in order."""
        for attempt in range(1, self.max_attempts):
            yield self.delay_for(attempt)


def is_retryable(exc: BaseException) -> bool:
    """Whether a failed attempt may be retried."""
    return isinstance(exc, TinifyError) and exc.retryable


async def execute_with_retry(
    func: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    limiter: TokenBucketRateLimiter,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    on_retry: Callable[[TinifyError, int, float], None] | None = None,
) -> T:
    """Execute an async request function with rate limiting and retries.

    Args:
        func: Performs one attempt; raises a ``TinifyError`` on failure
        policy: Retry configuration
        limiter: Rate limiter acquired before every attempt
        sleep: Awaitable used for backoff waits
        on_retry: Callback called on each retry (exception, attempt, delay)

    Returns:
        The result of the first successful attempt

    Raises:
        TinifyError: The first non-retryable error, or the last error once
            ``max_attempts`` is reached

    ``RetryPolicy`` guarantees at least one attempt, so the loop always
    returns or raises.
    """
    for attempt in range(1, policy.max_attempts + 1):
        await limiter.acquire()
        try:
            return await func()
        except TinifyError as e:
            if not is_retryable(e):
                logger.debug(f"Not retrying {type(e).__name__} on attempt {attempt}")
                raise
            if attempt == policy.max_attempts:
                logger.warning(f"Giving up after {attempt} attempts: {e}")
                raise

            delay = policy.delay_for(attempt)
            if isinstance(e, RateLimitExceededError):
                logger.warning(f"Server asked to retry after {e.retry_after}s")
            logger.warning(
                f"Attempt {attempt}/{policy.max_attempts} failed: {e}. "
                f"Retrying in {delay:.2f}s..."
            )

            if on_retry:
                on_retry(e, attempt, delay)

            await sleep(delay)


__all__ = [
    "RetryPolicy",
    "execute_with_retry",
    "is_retryable",
]

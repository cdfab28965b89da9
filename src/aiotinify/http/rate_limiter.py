"""Rate limiter for controlling request frequency.

Provides a token bucket rate limiter so one client never exceeds its
configured requests per minute.

Example:
    >>> from aiotinify.http.rate_limiter import RateLimit, TokenBucketRateLimiter
    >>>
    >>> limiter = TokenBucketRateLimiter(RateLimit(requests_per_minute=120, burst_capacity=5))
    >>>
    >>> # In async code
    >>> await limiter.acquire()  # Waits if the bucket is empty
    >>> # ... make request ...
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

logger = logging.getLogger("aiotinify.rate_limiter")


@dataclass(frozen=True)
class RateLimit:
    """Rate-limit policy.

    Attributes:
        requests_per_minute: Sustained request rate
        burst_capacity: Requests allowed immediately from a full bucket
    """

    requests_per_minute: int = 100
    burst_capacity: int = 10

    def __post_init__(self) -> None:
        if self.requests_per_minute < 1:
            raise ValueError("requests_per_minute must be positive")
        if self.burst_capacity < 1:
            raise ValueError("burst_capacity must be positive")

    @property
    def per_second(self) -> float:
        """Token refill rate per second."""
        return self.requests_per_minute / 60.0


class TokenBucketRateLimiter:
    """Rate limiter with burst capacity.

    Allows bursts of requests up to ``burst_capacity``, then refills
    continuously at ``requests_per_minute / 60`` tokens per second. Waiters
    queue on an ``asyncio.Lock`` and suspend with ``asyncio.sleep``, so
    unrelated tasks keep running.

    Example:
        >>> limiter = TokenBucketRateLimiter(RateLimit(requests_per_minute=600, burst_capacity=50))
        >>> # First 50 requests go through immediately
        >>> # Then limited to 10/second

    Attributes:
        rate_limit: The policy this limiter enforces
    """

    def __init__(self, rate_limit: RateLimit | None = None):
        """Initialize the limiter with a full bucket.

        Args:
            rate_limit: Policy to enforce (default: 100/min, burst 10)
        """
        self.rate_limit = rate_limit or RateLimit()
        self._tokens = float(self.rate_limit.burst_capacity)
        self._last_update = time.monotonic()
        self._lock = asyncio.Lock()

    @property
    def rate(self) -> float:
        """Refill rate in tokens per second."""
        return self.rate_limit.per_second

    @property
    def burst(self) -> int:
        """Bucket capacity."""
        return self.rate_limit.burst_capacity

    def _refill(self, now: float) -> None:
        elapsed = now - self._last_update
        self._tokens = min(self.burst, self._tokens + elapsed * self.rate)
        self._last_update = now

    async def acquire(self) -> float:
        """Acquire a token, waiting if necessary.

        Returns:
            Time waited in seconds
        """
        async with self._lock:
            self._refill(time.monotonic())

            if self._tokens >= 1:
                self._tokens -= 1
                return 0.0

            wait_time = (1 - self._tokens) / self.rate
            logger.warning(
                f"Rate limit reached, waiting {wait_time:.3f}s for next available slot"
            )
            await asyncio.sleep(wait_time)

            # The token accrued while sleeping is spent on this request
            self._refill(time.monotonic())
            self._tokens = max(0.0, self._tokens - 1)
            return wait_time

    def reset(self) -> None:
        """Reset to full burst capacity."""
        self._tokens = float(self.burst)
        self._last_update = time.monotonic()

    @property
    def available_tokens(self) -> float:
        """Current available tokens (approximate)."""
        elapsed = time.monotonic() - self._last_update
        return min(self.burst, self._tokens + elapsed * self.rate)


__all__ = [
    "RateLimit",
    "TokenBucketRateLimiter",
]

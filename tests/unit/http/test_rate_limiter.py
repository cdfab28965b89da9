"""Tests for aiotinify.http.rate_limiter."""

from __future__ import annotations

import asyncio
import time

import pytest

from aiotinify.http.rate_limiter import RateLimit, TokenBucketRateLimiter


class TestRateLimit:
    """RateLimit policy tests."""

    def test_defaults(self) -> None:
        """Defaults are 100/min with a burst of 10."""
        policy = RateLimit()
        assert policy.requests_per_minute == 100
        assert policy.burst_capacity == 10

    def test_per_second(self) -> None:
        """Refill rate is requests_per_minute / 60."""
        assert RateLimit(requests_per_minute=120).per_second == pytest.approx(2.0)

    @pytest.mark.parametrize("rpm,burst", [(0, 10), (100, 0), (-1, 1)])
    def test_rejects_non_positive(self, rpm: int, burst: int) -> None:
        """Both fields must be positive."""
        with pytest.raises(ValueError):
            RateLimit(requests_per_minute=rpm, burst_capacity=burst)


class TestTokenBucket:
    """TokenBucketRateLimiter tests."""

    async def test_burst_is_immediate(self) -> None:
        """Up to burst_capacity acquires do not wait."""
        limiter = TokenBucketRateLimiter(RateLimit(requests_per_minute=60, burst_capacity=5))
        waits = [await limiter.acquire() for _ in range(5)]
        assert waits == [0.0] * 5

    async def test_suspends_after_burst(self) -> None:
        """burst_capacity + 1 instantaneous acquires make one wait."""
        limiter = TokenBucketRateLimiter(RateLimit(requests_per_minute=600, burst_capacity=2))

        start = time.monotonic()
        waits = await asyncio.gather(*(limiter.acquire() for _ in range(3)))
        elapsed = time.monotonic() - start

        assert sum(1 for w in waits if w > 0) >= 1
        assert elapsed >= 0.05

    async def test_other_tasks_run_while_waiting(self) -> None:
        """A waiting acquire does not block the event loop."""
        limiter = TokenBucketRateLimiter(RateLimit(requests_per_minute=600, burst_capacity=1))
        await limiter.acquire()

        ticks = 0

        async def ticker() -> None:
            nonlocal ticks
            for _ in range(3):
                await asyncio.sleep(0)
                ticks += 1

        await asyncio.gather(limiter.acquire(), ticker())
        assert ticks == 3

    async def test_tokens_never_exceed_burst(self) -> None:
        """Refill is capped at the bucket capacity."""
        limiter = TokenBucketRateLimiter(RateLimit(requests_per_minute=6000, burst_capacity=3))
        await asyncio.sleep(0.05)
        assert limiter.available_tokens <= 3

    async def test_reset(self) -> None:
        """reset() refills the bucket."""
        limiter = TokenBucketRateLimiter(RateLimit(requests_per_minute=1, burst_capacity=2))
        await limiter.acquire()
        await limiter.acquire()
        assert limiter.available_tokens < 1
        limiter.reset()
        assert limiter.available_tokens == pytest.approx(2.0, abs=0.01)

    async def test_concurrent_acquires_keep_count_consistent(self) -> None:
        """Concurrent acquires never drive the bucket negative."""
        limiter = TokenBucketRateLimiter(RateLimit(requests_per_minute=6000, burst_capacity=10))
        await asyncio.gather(*(limiter.acquire() for _ in range(10)))
        assert limiter.available_tokens >= 0

    def test_default_policy(self) -> None:
        """No argument means the default policy."""
        limiter = TokenBucketRateLimiter()
        assert limiter.burst == 10
        assert limiter.rate == pytest.approx(100 / 60)

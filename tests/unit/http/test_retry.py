"""Tests for aiotinify.http.retry."""

from __future__ import annotations

import pytest

from aiotinify.core.exceptions import (
    AccountError,
    ClientError,
    InvalidApiKeyError,
    QuotaExceededError,
    RateLimitExceededError,
    ServerError,
    TinifyConnectionError,
)
from aiotinify.http.rate_limiter import RateLimit, TokenBucketRateLimiter
from aiotinify.http.retry import RetryPolicy, execute_with_retry, is_retryable


@pytest.fixture
def limiter() -> TokenBucketRateLimiter:
    return TokenBucketRateLimiter(RateLimit(requests_per_minute=60000, burst_capacity=1000))


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FailingThenOk:
    """Raises the given errors in order, then returns 'ok'."""

    def __init__(self, *errors: Exception):
        self.errors = list(errors)
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "ok"


class TestRetryPolicy:
    """RetryPolicy tests."""

    def test_defaults(self) -> None:
        """Defaults match the documented configuration."""
        policy = RetryPolicy()
        assert policy.max_attempts == 3
        assert policy.base_delay == 0.1
        assert policy.max_delay == 10.0
        assert policy.backoff_factor == 2.0

    def test_delay_formula(self) -> None:
        """delay_for(n) = min(base * factor^(n-1), max)."""
        policy = RetryPolicy(max_attempts=6, base_delay=1.0, max_delay=5.0, backoff_factor=2.0)
        assert [policy.delay_for(n) for n in range(1, 6)] == [1.0, 2.0, 4.0, 5.0, 5.0]

    def test_delays_monotonic_and_capped(self) -> None:
        """Consecutive delays never decrease and never exceed max_delay."""
        policy = RetryPolicy(max_attempts=12, base_delay=0.05, max_delay=3.0, backoff_factor=1.7)
        delays = list(policy.delays())
        assert len(delays) == 11
        assert all(a <= b for a, b in zip(delays, delays[1:]))
        assert all(d <= policy.max_delay for d in delays)

    def test_single_attempt_has_no_delays(self) -> None:
        """max_attempts=1 never sleeps."""
        assert list(RetryPolicy(max_attempts=1).delays()) == []

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_attempts": 0},
            {"base_delay": -1.0},
            {"max_delay": -0.5},
            {"backoff_factor": 0.5},
        ],
    )
    def test_rejects_invalid(self, kwargs: dict) -> None:
        """Invalid settings are rejected at construction."""
        with pytest.raises(ValueError):
            RetryPolicy(**kwargs)


class TestIsRetryable:
    """Retry eligibility tests."""

    @pytest.mark.parametrize(
        "error",
        [
            ServerError("boom", status=503),
            RateLimitExceededError(5),
            TinifyConnectionError(OSError("reset")),
        ],
    )
    def test_retryable(self, error: Exception) -> None:
        assert is_retryable(error)

    @pytest.mark.parametrize(
        "error",
        [
            ClientError("bad", status=400),
            AccountError("suspended", status=401),
            InvalidApiKeyError(),
            QuotaExceededError(),
            ValueError("not ours"),
        ],
    )
    def test_not_retryable(self, error: Exception) -> None:
        assert not is_retryable(error)


class TestExecuteWithRetry:
    """execute_with_retry tests."""

    @pytest.mark.parametrize("failures", [0, 1, 2, 3])
    async def test_succeeds_after_server_errors(self, limiter, failures: int) -> None:
        """k < max_attempts server errors then success means k+1 calls."""
        func = FailingThenOk(*[ServerError("boom", status=500) for _ in range(failures)])
        sleep = RecordingSleep()

        result = await execute_with_retry(func, RetryPolicy(max_attempts=4), limiter, sleep=sleep)

        assert result == "ok"
        assert func.calls == failures + 1
        assert len(sleep.delays) == failures

    async def test_client_error_not_retried(self, limiter) -> None:
        """A client error is raised after exactly one call."""
        error = ClientError("bad input", status=400)
        func = FailingThenOk(error)
        sleep = RecordingSleep()

        with pytest.raises(ClientError) as exc_info:
            await execute_with_retry(func, RetryPolicy(max_attempts=5), limiter, sleep=sleep)

        assert exc_info.value is error
        assert func.calls == 1
        assert sleep.delays == []

    async def test_exhausted_raises_last_error(self, limiter) -> None:
        """After max_attempts the last error is raised unchanged."""
        errors = [ServerError(f"boom {i}", status=502) for i in range(3)]
        func = FailingThenOk(*errors)

        with pytest.raises(ServerError) as exc_info:
            await execute_with_retry(
                func, RetryPolicy(max_attempts=3), limiter, sleep=RecordingSleep()
            )

        assert exc_info.value is errors[-1]
        assert func.calls == 3

    async def test_backoff_sequence(self, limiter) -> None:
        """Sleeps follow the policy's capped exponential delays."""
        policy = RetryPolicy(max_attempts=5, base_delay=1.0, max_delay=3.0, backoff_factor=2.0)
        func = FailingThenOk(*[TinifyConnectionError(OSError("x")) for _ in range(4)])
        sleep = RecordingSleep()

        await execute_with_retry(func, policy, limiter, sleep=sleep)

        assert sleep.delays == [1.0, 2.0, 3.0, 3.0]

    async def test_rate_limit_error_is_retried(self, limiter) -> None:
        """Transient 429s are retried."""
        func = FailingThenOk(RateLimitExceededError(17))
        result = await execute_with_retry(func, RetryPolicy(), limiter, sleep=RecordingSleep())
        assert result == "ok"
        assert func.calls == 2

    async def test_quota_error_not_retried(self, limiter) -> None:
        """Quota exhaustion is final."""
        func = FailingThenOk(QuotaExceededError())
        with pytest.raises(QuotaExceededError):
            await execute_with_retry(func, RetryPolicy(), limiter, sleep=RecordingSleep())
        assert func.calls == 1

    async def test_acquires_before_every_attempt(self) -> None:
        """Each attempt consumes a rate-limit token."""
        limiter = TokenBucketRateLimiter(RateLimit(requests_per_minute=1, burst_capacity=10))
        func = FailingThenOk(ServerError("a", status=500), ServerError("b", status=500))

        await execute_with_retry(func, RetryPolicy(), limiter, sleep=RecordingSleep())

        assert limiter.available_tokens == pytest.approx(7.0, abs=0.1)

    async def test_on_retry_callback(self, limiter) -> None:
        """on_retry receives error, attempt number and delay."""
        seen: list[tuple[str, int, float]] = []
        policy = RetryPolicy(max_attempts=3, base_delay=0.5)
        func = FailingThenOk(ServerError("boom", status=500))

        await execute_with_retry(
            func,
            policy,
            limiter,
            sleep=RecordingSleep(),
            on_retry=lambda e, attempt, delay: seen.append((type(e).__name__, attempt, delay)),
        )

        assert seen == [("ServerError", 1, 0.5)]

    async def test_foreign_exceptions_propagate(self, limiter) -> None:
        """Exceptions outside the taxonomy are not retried or wrapped."""
        calls = 0

        async def broken() -> str:
            nonlocal calls
            calls += 1
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await execute_with_retry(broken, RetryPolicy(), limiter, sleep=RecordingSleep())
        assert calls == 1

    async def test_eligibility_matches_is_retryable(self, limiter) -> None:
        """The loop retries exactly the errors is_retryable accepts."""
        errors = [ServerError("a", status=500), ClientError("b", status=404)]
        assert [is_retryable(e) for e in errors] == [True, False]

        func = FailingThenOk(*errors)
        with pytest.raises(ClientError):
            await execute_with_retry(func, RetryPolicy(max_attempts=5), limiter, sleep=RecordingSleep())
        assert func.calls == 2

"""aiotinify HTTP utilities.

Provides authentication headers, rate limiting, retry logic and the
single-attempt transport used by ``aiotinify.client.Client``.

Example:
    >>> from aiotinify.http import RateLimit, TokenBucketRateLimiter
    >>>
    >>> # Rate limiting
    >>> limiter = TokenBucketRateLimiter(RateLimit(requests_per_minute=100, burst_capacity=10))
    >>> await limiter.acquire()
"""

from aiotinify.http.auth import build_auth_header, build_headers
from aiotinify.http.rate_limiter import RateLimit, TokenBucketRateLimiter
from aiotinify.http.retry import RetryPolicy, execute_with_retry, is_retryable
from aiotinify.http.transport import Transport, classify_error

__all__ = [
    "RateLimit",
    "RetryPolicy",
    "TokenBucketRateLimiter",
    "Transport",
    "build_auth_header",
    "build_headers",
    "classify_error",
    "execute_with_retry",
    "is_retryable",
]

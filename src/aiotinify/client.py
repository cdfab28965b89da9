"""Request executor with rate limiting and retry support.

``Client`` ties together the header set, the token bucket, the retry policy
and the transport. Every instance is independent: its own credential,
limiter and connection pool.

Example:
    >>> from aiotinify.client import Client
    >>>
    >>> client = Client.builder().api_key("your-api-key").requests_per_minute(200).build()
    >>> async with client:
    ...     response = await client.get("https://api.tinify.com/output/abc")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

import httpx

from aiotinify.core.exceptions import InvalidApiKeyError
from aiotinify.http.auth import build_headers
from aiotinify.http.rate_limiter import RateLimit, TokenBucketRateLimiter
from aiotinify.http.retry import RetryPolicy, execute_with_retry
from aiotinify.http.transport import StreamSource, Transport

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class ClientConfig:
    """Immutable client configuration.

    Attributes:
        api_key: Tinify API key
        app_identifier: Optional identifier sent as ``User-Agent``
        timeout: Request timeout in seconds
        retry: Retry policy
        rate_limit: Rate-limit policy
    """

    api_key: str
    app_identifier: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    rate_limit: RateLimit = field(default_factory=RateLimit)

    def __repr__(self) -> str:
        return (
            f"ClientConfig(api_key='***', app_identifier={self.app_identifier!r}, "
            f"timeout={self.timeout!r}, retry={self.retry!r}, rate_limit={self.rate_limit!r})"
        )


class Client:
    """Async HTTP client with rate limiting and retry support.

    ``post`` and ``get`` take a rate-limit token before every attempt and
    retry transient failures. ``post_stream`` performs exactly one attempt
    because a consumed stream cannot be replayed.

    Attributes:
        config: Immutable configuration
        compression_count: Last ``Compression-Count`` reported by the service
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize client.

        Args:
            config: Client configuration
            http_client: Optional preconfigured ``httpx.AsyncClient``

        Raises:
            InvalidApiKeyError: If the API key is missing or blank
        """
        if not config.api_key or not config.api_key.strip():
            raise InvalidApiKeyError()

        self._config = config
        self._rate_limiter = TokenBucketRateLimiter(config.rate_limit)
        self._transport = Transport(
            build_headers(config.api_key, config.app_identifier),
            config.timeout,
            http_client=http_client,
        )
        self.compression_count: int | None = None

    @classmethod
    def builder(cls) -> "ClientBuilder":
        """Start building a client."""
        return ClientBuilder()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def api_key(self) -> str:
        return self._config.api_key

    @property
    def rate_limiter(self) -> TokenBucketRateLimiter:
        return self._rate_limiter

    @property
    def transport(self) -> Transport:
        return self._transport

    async def aclose(self) -> None:
        """Close the connection pool."""
        await self._transport.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def _track(self, response: httpx.Response) -> httpx.Response:
        value = response.headers.get("Compression-Count")
        if value is not None:
            try:
                self.compression_count = int(value)
            except ValueError:
                logger.debug(f"Ignoring non-numeric Compression-Count: {value!r}")
        return response

    async def _execute(self, method: str, url: str, body: bytes | None = None) -> httpx.Response:
        async def attempt() -> httpx.Response:
            return await self._transport.send(method, url, body=body)

        response = await execute_with_retry(attempt, self._config.retry, self._rate_limiter)
        return self._track(response)

    async def post(self, url: str, body: bytes | None = None) -> httpx.Response:
        """Make a rate-limited POST request with retries.

        Args:
            url: Absolute URL
            body: Optional body; sent as JSON when it looks like JSON

        Returns:
            Successful response, body unread
        """
        return await self._execute("POST", url, body)

    async def get(self, url: str) -> httpx.Response:
        """Make a rate-limited GET request with retries."""
        return await self._execute("GET", url)

    async def post_stream(
        self,
        url: str,
        stream: StreamSource,
        content_type: str,
    ) -> httpx.Response:
        """POST an incremental body in a single attempt.

        Args:
            url: Absolute URL
            stream: Async byte iterable or binary file object
            content_type: ``Content-Type`` of the body

        Returns:
            Successful response, body unread
        """
        await self._rate_limiter.acquire()
        response = await self._transport.send(
            "POST", url, stream=stream, content_type=content_type
        )
        return self._track(response)


class ClientBuilder:
    """Fluent builder for ``Client``.

    Defaults: 30s timeout, 3 attempts, 100 requests/minute, burst of 10.

    Example:
        >>> client = (
        ...     ClientBuilder()
        ...     .api_key("key")
        ...     .app_identifier("MyApp/1.0")
        ...     .max_retry_attempts(5)
        ...     .build()
        ... )
        >>> client.config.retry.max_attempts
        5
    """

    def __init__(self) -> None:
        self._api_key: str | None = None
        self._app_identifier: str | None = None
        self._timeout = DEFAULT_TIMEOUT
        self._retry = RetryPolicy()
        self._rate_limit = RateLimit()
        self._http_client: httpx.AsyncClient | None = None

    def api_key(self, key: str) -> "ClientBuilder":
        self._api_key = key
        return self

    def app_identifier(self, identifier: str) -> "ClientBuilder":
        self._app_identifier = identifier
        return self

    def timeout(self, seconds: float) -> "ClientBuilder":
        if seconds <= 0:
            raise ValueError("timeout must be positive")
        self._timeout = seconds
        return self

    def retry_policy(self, policy: RetryPolicy) -> "ClientBuilder":
        self._retry = policy
        return self

    def rate_limit(self, limit: RateLimit) -> "ClientBuilder":
        self._rate_limit = limit
        return self

    def max_retry_attempts(self, attempts: int) -> "ClientBuilder":
        self._retry = replace(self._retry, max_attempts=attempts)
        return self

    def requests_per_minute(self, rpm: int) -> "ClientBuilder":
        self._rate_limit = replace(self._rate_limit, requests_per_minute=rpm)
        return self

    def burst_capacity(self, burst: int) -> "ClientBuilder":
        self._rate_limit = replace(self._rate_limit, burst_capacity=burst)
        return self

    def http_client(self, client: httpx.AsyncClient) -> "ClientBuilder":
        """Use a preconfigured ``httpx.AsyncClient`` (proxies, mocks, ...)."""
        self._http_client = client
        return self

    def build_config(self) -> ClientConfig:
        """Build the immutable configuration.

        Raises:
            InvalidApiKeyError: If no API key was set
        """
        if not self._api_key or not self._api_key.strip():
            raise InvalidApiKeyError()
        return ClientConfig(
            api_key=self._api_key,
            app_identifier=self._app_identifier,
            timeout=self._timeout,
            retry=self._retry,
            rate_limit=self._rate_limit,
        )

    def build(self) -> Client:
        """Build the client. No network activity happens here."""
        return Client(self.build_config(), http_client=self._http_client)


__all__ = [
    "Client",
    "ClientBuilder",
    "ClientConfig",
    "DEFAULT_TIMEOUT",
]

"""Single-attempt HTTP transport with error classification.

Each call performs exactly one request and turns the response into either
an unread ``httpx.Response`` (2xx) or a typed ``TinifyError``. Retries and
rate limiting live one layer up, in ``aiotinify.client``.

Example:
    >>> from aiotinify.http.transport import Transport
    >>>
    >>> async with Transport({"Authorization": "Basic ..."}) as transport:
    ...     response = await transport.send("GET", "https://api.tinify.com/output/abc")
    ...     data = await response.aread()
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator, Mapping
from typing import IO, Any, Union

import httpx

from aiotinify.core.exceptions import (
    AccountError,
    ClientError,
    InvalidApiKeyError,
    QuotaExceededError,
    RateLimitExceededError,
    ServerError,
    TinifyConnectionError,
    TinifyError,
    UnknownError,
)

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER = 60
STREAM_CHUNK_SIZE = 64 * 1024

StreamSource = Union[AsyncIterable[bytes], IO[bytes]]


def looks_like_json(body: bytes) -> bool:
    """Whether a request body should be sent as ``application/json``."""
    return body.startswith(b"{") or body.startswith(b"[")


def parse_retry_after(value: str | None) -> int:
    """Parse a ``Retry-After`` header into whole seconds.

    Example:
        >>> parse_retry_after("17")
        17
        >>> parse_retry_after(None)
        60
    """
    if value is None:
        return DEFAULT_RETRY_AFTER
    try:
        return int(value.strip())
    except ValueError:
        return DEFAULT_RETRY_AFTER


def parse_error_body(body: bytes) -> tuple[str, str | None]:
    """Extract ``(message, error_type)`` from an error payload.

    Example:
        >>> parse_error_body(b'{"error": "Unauthorized", "message": "Bad key"}')
        ('Bad key', 'Unauthorized')
        >>> parse_error_body(b"<html>oops</html>")
        ('Unknown error', None)
    """
    try:
        payload: Any = json.loads(body)
    except ValueError:
        return "Unknown error", None

    if not isinstance(payload, dict):
        return "Unknown error", None

    message = payload.get("message")
    error_type = payload.get("error")
    return (
        message if isinstance(message, str) else "Unknown error",
        error_type if isinstance(error_type, str) else None,
    )


def classify_error(status: int, headers: Mapping[str, str], body: bytes) -> TinifyError:
    """Map a non-2xx response onto the error taxonomy.

    The 401 and 429 splits match on the message text, which is a best-effort
    heuristic tied to the provider's wording.

    Args:
        status: HTTP status code
        headers: Response headers
        body: Raw response body

    Returns:
        The classified error (not raised)
    """
    message, error_type = parse_error_body(body)
    logger.debug(f"API error response: status={status}, message={message}")

    lowered = message.lower()
    if status == 401:
        if "credentials" in lowered:
            return InvalidApiKeyError()
        return AccountError(message, error_type, status)
    if status == 429:
        if "quota" in lowered:
            return QuotaExceededError()
        return RateLimitExceededError(parse_retry_after(headers.get("Retry-After")))
    if 400 <= status < 500:
        return ClientError(message, error_type, status)
    if 500 <= status < 600:
        return ServerError(message, error_type, status)
    return UnknownError(message)


async def raise_for_status(response: httpx.Response) -> httpx.Response:
    """Pass 2xx responses through unread; read, close and raise otherwise."""
    if response.is_success:
        return response

    try:
        body = await response.aread()
    except httpx.RequestError as e:
        raise TinifyConnectionError(e) from e
    finally:
        await response.aclose()

    raise classify_error(response.status_code, response.headers, body)


async def _iter_file(fileobj: IO[bytes], chunk_size: int) -> AsyncIterator[bytes]:
    while True:
        chunk = await asyncio.to_thread(fileobj.read, chunk_size)
        if not chunk:
            break
        yield chunk


def as_async_stream(stream: StreamSource, chunk_size: int = STREAM_CHUNK_SIZE) -> AsyncIterable[bytes]:
    """Adapt a binary file object or async byte iterable to an async body."""
    if hasattr(stream, "read"):
        return _iter_file(stream, chunk_size)  # type: ignore[arg-type]
    return stream  # type: ignore[return-value]


class Transport:
    """Async HTTP transport for the Tinify API.

    Owns a pooled ``httpx.AsyncClient`` unless one is injected. Injected
    clients (for example one built on ``httpx.MockTransport``) are not
    closed by ``aclose``.

    Attributes:
        headers: Headers attached to every request
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        headers: Mapping[str, str],
        timeout: float = 30.0,
        *,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._headers = dict(headers)
        self._timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None

    @property
    def headers(self) -> dict[str, str]:
        """Headers attached to every request."""
        return dict(self._headers)

    @property
    def timeout(self) -> float:
        """Request timeout in seconds."""
        return self._timeout

    def _ensure_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client and self._client is not None:
            if not self._client.is_closed:
                await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "Transport":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def send(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        stream: StreamSource | None = None,
        content_type: str | None = None,
    ) -> httpx.Response:
        """Perform one request.

        Args:
            method: HTTP method
            url: Absolute URL
            body: Request body; JSON-looking bodies get a JSON content type
            stream: Incremental body source, sent without buffering
            content_type: Explicit ``Content-Type`` (overrides detection)

        Returns:
            Successful response with its body still unread

        Raises:
            TinifyConnectionError: If the request never got a response
            TinifyError: Classified error for non-2xx responses
        """
        client = self._ensure_client()

        headers = dict(self._headers)
        if body is not None and looks_like_json(body):
            headers["Content-Type"] = "application/json"
        if content_type:
            headers["Content-Type"] = content_type

        content: bytes | AsyncIterable[bytes] | None = body
        if stream is not None:
            content = as_async_stream(stream)

        logger.info(f"Making {method} request to: {url}")
        request = client.build_request(
            method,
            url,
            content=content,
            headers=headers,
            timeout=self._timeout,
        )
        try:
            response = await client.send(request, stream=True)
        except httpx.RequestError as e:
            raise TinifyConnectionError(e) from e

        return await raise_for_status(response)


__all__ = [
    "Transport",
    "classify_error",
    "looks_like_json",
    "parse_error_body",
    "parse_retry_after",
    "raise_for_status",
]

"""High-level Tinify client.

``Tinify`` validates input, uploads images to the shrink endpoint and hands
back ``Source`` handles for follow-up operations.

Example:
    >>> from aiotinify import Tinify
    >>>
    >>> async with Tinify.builder().api_key("your-api-key").build() as tinify:
    ...     source = await tinify.source_from_file("input.png")
    ...     await source.to_file("output.png")
    ...     print(tinify.compression_count)
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx

from aiotinify.client import Client, ClientBuilder
from aiotinify.core.config import Settings
from aiotinify.core.exceptions import ClientError, TinifyIOError, UnknownError
from aiotinify.http.rate_limiter import RateLimit
from aiotinify.http.retry import RetryPolicy
from aiotinify.http.transport import StreamSource
from aiotinify.options import envelope
from aiotinify.source import Source
from aiotinify.validation import (
    MAX_FILE_SIZE,
    validate_content_type,
    validate_image_file,
    validate_size,
    validate_url,
)

logger = logging.getLogger(__name__)

SHRINK_ENDPOINT = "https://api.tinify.com/shrink"


def _location(response: httpx.Response, base: str) -> str:
    location = response.headers.get("Location")
    if not location:
        raise UnknownError("Missing Location header in server response")
    # Relative locations resolve against the endpoint that issued them
    return str(httpx.URL(base).join(location))


class Tinify:
    """Main client for image compression and optimization.

    Wraps a ``Client``; every ``Tinify`` instance has its own credential,
    rate limiter and connection pool.

    Attributes:
        client: Underlying request executor
    """

    def __init__(self, client: Client, *, shrink_endpoint: str = SHRINK_ENDPOINT):
        self.client = client
        self._shrink_endpoint = shrink_endpoint

    @classmethod
    def builder(cls) -> "TinifyBuilder":
        """Configure a client fluently.

        Example:
            >>> tinify = (
            ...     Tinify.builder()
            ...     .api_key("your-api-key")
            ...     .app_identifier("MyApp/1.0")
            ...     .timeout(60)
            ...     .requests_per_minute(200)
            ...     .build()
            ... )
        """
        return TinifyBuilder()

    @classmethod
    def from_api_key(cls, api_key: str) -> "Tinify":
        """Client with default settings."""
        return cls.builder().api_key(api_key).build()

    @classmethod
    def from_settings(cls, settings: Settings) -> "Tinify":
        """Client configured from ``Settings``.

        Raises:
            InvalidApiKeyError: If ``settings.api_key`` is unset
        """
        builder = (
            cls.builder()
            .timeout(settings.timeout)
            .retry_policy(
                RetryPolicy(
                    max_attempts=settings.max_attempts,
                    base_delay=settings.base_delay,
                    max_delay=settings.max_delay,
                    backoff_factor=settings.backoff_factor,
                )
            )
            .rate_limit(
                RateLimit(
                    requests_per_minute=settings.requests_per_minute,
                    burst_capacity=settings.burst_capacity,
                )
            )
        )
        if settings.api_key:
            builder.api_key(settings.api_key)
        if settings.app_identifier:
            builder.app_identifier(settings.app_identifier)
        return builder.build()

    @property
    def api_key(self) -> str:
        return self.client.api_key

    @property
    def compression_count(self) -> int | None:
        """Compressions used this month, from the latest response."""
        return self.client.compression_count

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "Tinify":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def _shrink(self, body: bytes) -> Source:
        response = await self.client.post(self._shrink_endpoint, body)
        await response.aclose()
        return Source(_location(response, self._shrink_endpoint), self.client)

    async def source_from_file(self, path: Path | str) -> Source:
        """Upload a local image file.

        Args:
            path: Path to a png, jpg, jpeg or webp file

        Raises:
            ImageFileNotFoundError: If the file does not exist
            FileTooLargeError: If the file is larger than 5MB
            UnsupportedFormatError: If the extension is not supported
            TinifyIOError: If the file cannot be read
        """
        logger.info(f"Creating source from file: {path}")
        path = validate_image_file(path)
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise TinifyIOError(e) from e
        return await self.source_from_buffer(data)

    async def source_from_buffer(self, data: bytes) -> Source:
        """Upload image bytes held in memory.

        Raises:
            FileTooLargeError: If ``data`` is larger than 5MB
        """
        logger.info(f"Creating source from buffer of {len(data)} bytes")
        validate_size(len(data), MAX_FILE_SIZE)
        return await self._shrink(bytes(data))

    async def source_from_url(self, url: str) -> Source:
        """Let the service fetch the image from a URL.

        Raises:
            UrlParseError: If ``url`` is not an absolute http(s) URL
        """
        logger.info(f"Creating source from URL: {url}")
        validate_url(url)
        return await self._shrink(envelope("source", {"url": url}))

    async def source_from_stream(self, stream: StreamSource, content_type: str) -> Source:
        """Upload from an incremental byte source without buffering it.

        The upload is attempted once; a consumed stream cannot be replayed.

        Args:
            stream: Async iterable of bytes or a binary file object
            content_type: MIME type of the image, e.g. ``"image/png"``

        Raises:
            UnsupportedFormatError: If ``content_type`` is not a MIME type
        """
        logger.info(f"Creating source from stream with content type: {content_type}")
        validate_content_type(content_type)
        response = await self.client.post_stream(self._shrink_endpoint, stream, content_type)
        await response.aclose()
        return Source(_location(response, self._shrink_endpoint), self.client)

    async def validate(self) -> bool:
        """Check the API key with an empty upload.

        The service answers an authenticated empty upload with 400, which
        means the key is accepted.

        Raises:
            InvalidApiKeyError: If the key is rejected
        """
        try:
            response = await self.client.post(self._shrink_endpoint)
        except ClientError as e:
            if e.status == 400:
                return True
            raise
        await response.aclose()
        return True


class TinifyBuilder(ClientBuilder):
    """``ClientBuilder`` that produces a ``Tinify``."""

    def build(self) -> Tinify:  # type: ignore[override]
        return Tinify(super().build())


__all__ = [
    "SHRINK_ENDPOINT",
    "Tinify",
    "TinifyBuilder",
]

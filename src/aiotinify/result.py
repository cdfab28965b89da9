"""Result of an operation on a source.

Wraps one response. Header metadata can be read any number of times; the
body can be consumed at most once, into memory or into a file. A second
consumption raises ``ResultConsumedError``.

Example:
    >>> result = await source.resize(ResizeOptions(width=100, height=100))
    >>> result.image_width
    100
    >>> await result.to_file("thumb.png")
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from pathlib import Path

import httpx

from aiotinify.core.exceptions import ResultConsumedError, TinifyConnectionError, TinifyIOError

logger = logging.getLogger(__name__)


class BodyState(str, Enum):
    """Consumption state of a result body."""

    UNCONSUMED = "unconsumed"
    CONSUMED = "consumed"


def _int_header(headers: httpx.Headers, name: str) -> int | None:
    value = headers.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class TinifyResult:
    """Response wrapper with at-most-once body consumption.

    Attributes:
        headers: Response headers, kept after the body is consumed
        status_code: HTTP status code
    """

    def __init__(self, response: httpx.Response):
        self._response: httpx.Response | None = response
        self._state = BodyState.UNCONSUMED
        self.headers = response.headers.copy()
        self.status_code = response.status_code

    def __repr__(self) -> str:
        return f"TinifyResult(status_code={self.status_code}, state={self._state.value})"

    @property
    def consumed(self) -> bool:
        """Whether the body has been consumed or released."""
        return self._state is BodyState.CONSUMED

    def _take(self) -> httpx.Response:
        if self._state is BodyState.CONSUMED or self._response is None:
            raise ResultConsumedError()
        response = self._response
        self._response = None
        self._state = BodyState.CONSUMED
        return response

    async def to_buffer(self) -> bytes:
        """Read the whole body into memory.

        Raises:
            ResultConsumedError: If the body was already consumed
            TinifyConnectionError: If the connection drops mid-body
        """
        response = self._take()
        try:
            return await response.aread()
        except httpx.RequestError as e:
            raise TinifyConnectionError(e) from e
        finally:
            await response.aclose()

    async def to_file(self, path: Path | str, *, chunk_size: int = 64 * 1024) -> Path:
        """Stream the body to a file.

        Writes to a temporary file first, then atomically renames it to
        ``path``. Parent directories are created.

        Args:
            path: Destination path
            chunk_size: Download chunk size

        Returns:
            Path to the written file

        Raises:
            ResultConsumedError: If the body was already consumed
            TinifyIOError: If the file cannot be written
            TinifyConnectionError: If the connection drops mid-body
        """
        dest = Path(path)
        temp_path = dest.with_suffix(dest.suffix + ".tmp")
        response = self._take()

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "wb") as f:
                async for chunk in response.aiter_bytes(chunk_size):
                    await asyncio.to_thread(f.write, chunk)
            temp_path.replace(dest)
        except OSError as e:
            raise TinifyIOError(e) from e
        except httpx.RequestError as e:
            raise TinifyConnectionError(e) from e
        finally:
            # Gone after a successful replace; partial on any failure or cancellation
            if temp_path.exists():
                temp_path.unlink()
            await response.aclose()

        logger.info(f"Saved result to {dest}")
        return dest

    async def aclose(self) -> None:
        """Release the response without reading it."""
        if self._response is not None:
            await self._response.aclose()
            self._response = None
        self._state = BodyState.CONSUMED

    async def __aenter__(self) -> "TinifyResult":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    @property
    def compression_count(self) -> int | None:
        """Compressions used this month, as reported by the service."""
        return _int_header(self.headers, "Compression-Count")

    @property
    def image_width(self) -> int | None:
        return _int_header(self.headers, "Image-Width")

    @property
    def image_height(self) -> int | None:
        return _int_header(self.headers, "Image-Height")

    @property
    def content_type(self) -> str | None:
        return self.headers.get("Content-Type")

    @property
    def content_length(self) -> int | None:
        return _int_header(self.headers, "Content-Length")

    @property
    def location(self) -> str | None:
        """Location of a stored object, for ``store`` results."""
        return self.headers.get("Location")


__all__ = [
    "BodyState",
    "TinifyResult",
]

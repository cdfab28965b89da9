"""Uploaded image on the service.

A ``Source`` holds the location the service assigned to an upload. Every
operation POSTs a single-key JSON envelope to that location; downloads GET
it.

Example:
    >>> source = await tinify.source_from_file("input.png")
    >>> result = await source.convert(ConvertOptions(format=ImageFormat.WEBP))
    >>> await result.to_file("output.webp")
"""

from __future__ import annotations

import logging
from pathlib import Path

from aiotinify.client import Client
from aiotinify.options import (
    ConvertOptions,
    PreserveOptions,
    ResizeOptions,
    StoreOptions,
    envelope,
)
from aiotinify.result import TinifyResult
from aiotinify.validation import validate_dimensions

logger = logging.getLogger(__name__)


class Source:
    """Handle to an uploaded image.

    Immutable. Dropping it performs no server-side cleanup.

    Attributes:
        location: Server-assigned URL of the upload
    """

    __slots__ = ("_location", "_client")

    def __init__(self, location: str, client: Client):
        self._location = location
        self._client = client

    def __repr__(self) -> str:
        return f"Source(location={self._location!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Source):
            return NotImplemented
        return self._location == other._location and self._client is other._client

    def __hash__(self) -> int:
        return hash(self._location)

    @property
    def location(self) -> str:
        return self._location

    async def _post(self, body: bytes) -> TinifyResult:
        response = await self._client.post(self._location, body)
        return TinifyResult(response)

    async def resize(self, options: ResizeOptions) -> TinifyResult:
        """Resize the image.

        Args:
            options: Resize method and target dimensions

        Returns:
            Result holding the resized image

        Raises:
            InvalidDimensionsError: Before any request, if the dimensions are invalid
        """
        logger.info(f"Resizing image at location: {self._location}")
        validate_dimensions(options.width, options.height)
        return await self._post(envelope("resize", options))

    async def convert(self, options: ConvertOptions) -> TinifyResult:
        """Convert the image to another format."""
        logger.info(f"Converting image format at location: {self._location}")
        return await self._post(envelope("convert", options))

    async def preserve(self, options: PreserveOptions) -> TinifyResult:
        """Keep the given metadata in the compressed image."""
        logger.info(f"Preserving metadata for image at location: {self._location}")
        return await self._post(envelope("preserve", options.to_payload()["preserve"]))

    async def store(self, options: StoreOptions) -> TinifyResult:
        """Save the image directly to S3 or Google Cloud Storage.

        The stored object's URL is reported by ``TinifyResult.location``.
        """
        logger.info(f"Storing image to cloud storage from location: {self._location}")
        return await self._post(envelope("store", options))

    async def result(self) -> TinifyResult:
        """GET the compressed image without consuming it."""
        response = await self._client.get(self._location)
        return TinifyResult(response)

    async def to_buffer(self) -> bytes:
        """Download the compressed image into memory."""
        logger.info(f"Downloading image data from location: {self._location}")
        result = await self.result()
        return await result.to_buffer()

    async def to_file(self, path: Path | str) -> Path:
        """Download the compressed image to a local file."""
        logger.info(f"Saving image from location {self._location} to file: {path}")
        result = await self.result()
        return await result.to_file(path)


__all__ = [
    "Source",
]

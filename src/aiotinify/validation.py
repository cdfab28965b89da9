"""Pre-flight validation.

Checks that run before any request is made, so invalid input never costs a
compression or a network round trip.

Example:
    >>> from aiotinify.validation import validate_dimensions
    >>> validate_dimensions(100, None)
    >>> validate_dimensions(0, 100)
    Traceback (most recent call last):
    aiotinify.core.exceptions.InvalidDimensionsError: Invalid resize dimensions: width=0, height=100
"""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import urlsplit

from aiotinify.core.exceptions import (
    FileTooLargeError,
    ImageFileNotFoundError,
    InvalidDimensionsError,
    UnsupportedFormatError,
    UrlParseError,
)

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB
MAX_DIMENSION = 10000
SUPPORTED_FORMATS = frozenset({"png", "jpg", "jpeg", "webp"})

_MIME_RE = re.compile(r"^[\w.+-]+/[\w.+-]+$")


def validate_dimensions(width: int | None, height: int | None) -> None:
    """At least one dimension, each in ``1..MAX_DIMENSION``."""
    if width is None and height is None:
        raise InvalidDimensionsError(width, height)
    for value in (width, height):
        if value is not None and not 0 < value <= MAX_DIMENSION:
            raise InvalidDimensionsError(width, height)


def validate_size(size: int, max_size: int = MAX_FILE_SIZE) -> None:
    if size > max_size:
        raise FileTooLargeError(size=size, max_size=max_size)


def validate_image_format(path: Path | str) -> str:
    """Check the extension against ``SUPPORTED_FORMATS``.

    Returns:
        The lower-cased extension
    """
    suffix = Path(path).suffix.lstrip(".").lower()
    if not suffix:
        raise UnsupportedFormatError("unknown")
    if suffix not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(suffix)
    return suffix


def validate_image_file(path: Path | str, max_size: int = MAX_FILE_SIZE) -> Path:
    """Existence, then size, then extension.

    Raises:
        ImageFileNotFoundError: If ``path`` is not an existing file
        FileTooLargeError: If the file exceeds ``max_size``
        UnsupportedFormatError: If the extension is not supported
    """
    path = Path(path)
    if not path.is_file():
        raise ImageFileNotFoundError(path)
    validate_size(path.stat().st_size, max_size)
    validate_image_format(path)
    return path


def validate_url(url: str) -> str:
    """Require an absolute http(s) URL with a host."""
    try:
        parts = urlsplit(url)
        # Accessing port validates it
        parts.port
    except ValueError as e:
        raise UrlParseError(url, str(e)) from e

    if not parts.scheme:
        raise UrlParseError(url, "relative URL without a base")
    if parts.scheme not in ("http", "https"):
        raise UrlParseError(url, f"unsupported scheme {parts.scheme!r}")
    if not parts.hostname:
        raise UrlParseError(url, "empty host")
    return url


def validate_content_type(content_type: str) -> str:
    """Require a ``type/subtype`` MIME string."""
    if not _MIME_RE.match(content_type.split(";", 1)[0].strip()):
        raise UnsupportedFormatError(content_type)
    return content_type


__all__ = [
    "MAX_DIMENSION",
    "MAX_FILE_SIZE",
    "SUPPORTED_FORMATS",
    "validate_content_type",
    "validate_dimensions",
    "validate_image_file",
    "validate_image_format",
    "validate_size",
    "validate_url",
]

"""Custom exceptions.

aiotinify raises a closed hierarchy of exceptions so callers can tell every
failure kind apart:

Example:
    >>> from aiotinify.core.exceptions import QuotaExceededError, ServerError, TinifyError
    >>> isinstance(ServerError("boom", status=502), TinifyError)
    True
    >>> ServerError("boom", status=502).retryable
    True
    >>> try:
    ...     raise QuotaExceededError()
    ... except TinifyError as e:
    ...     print(f"Caught: {type(e).__name__}")
    Caught: QuotaExceededError

Only ``RateLimitExceededError``, ``ServerError`` and
``TinifyConnectionError`` are retryable.
"""

from __future__ import annotations

from pathlib import Path


class TinifyError(Exception):
    """Base exception for aiotinify.

    Example:
        >>> from aiotinify.core.exceptions import TinifyError
        >>> e = TinifyError("something went wrong")
        >>> str(e)
        'something went wrong'
        >>> e.retryable
        False
    """

    retryable: bool = False


class InvalidApiKeyError(TinifyError):
    """API key is missing, empty or rejected by the service."""

    def __init__(self, message: str = "API key invalid or missing") -> None:
        super().__init__(message)


class ImageFileNotFoundError(TinifyError):
    """Local image file does not exist.

    Example:
        >>> from aiotinify.core.exceptions import ImageFileNotFoundError
        >>> str(ImageFileNotFoundError("missing.png"))
        'File not found: missing.png'
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"File not found: {self.path}")


class UnsupportedFormatError(TinifyError):
    """File extension or content type is not an accepted image format."""

    def __init__(self, format: str) -> None:
        self.format = format
        super().__init__(f"Unsupported file format: {format}")


class FileTooLargeError(TinifyError):
    """Upload payload exceeds the size ceiling.

    Example:
        >>> from aiotinify.core.exceptions import FileTooLargeError
        >>> str(FileTooLargeError(size=11, max_size=10))
        'File too large: 11 bytes (max: 10 bytes)'
    """

    def __init__(self, size: int, max_size: int) -> None:
        self.size = size
        self.max_size = max_size
        super().__init__(f"File too large: {size} bytes (max: {max_size} bytes)")


class InvalidDimensionsError(TinifyError):
    """Resize width/height combination is invalid."""

    def __init__(self, width: int | None, height: int | None) -> None:
        self.width = width
        self.height = height
        super().__init__(f"Invalid resize dimensions: width={width}, height={height}")


class UrlParseError(TinifyError):
    """Source URL is malformed."""

    def __init__(self, url: str, reason: str = "invalid URL") -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"URL parse error: {reason}: {url!r}")


class QuotaExceededError(TinifyError):
    """Monthly compression quota is exhausted.

    Not retryable: the quota resets with the next billing cycle.
    """

    def __init__(self, message: str = "Monthly quota exceeded") -> None:
        super().__init__(message)


class RateLimitExceededError(TinifyError):
    """Service signalled a transient rate limit (HTTP 429).

    Attributes:
        retry_after: Seconds the service asked the client to wait
    """

    retryable = True

    def __init__(self, retry_after: int = 60) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded, retry after {retry_after} seconds")


class ApiError(TinifyError):
    """Error response from the service carrying its message and status.

    Attributes:
        message: Message field from the error payload
        error_type: Optional ``error`` field from the error payload
        status: HTTP status code
    """

    label = "API error"

    def __init__(
        self,
        message: str,
        error_type: str | None = None,
        status: int | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.status = status
        super().__init__(f"{self.label}: {message}")


class AccountError(ApiError):
    """401 response that does not indicate bad credentials."""

    label = "Account error"


class ClientError(ApiError):
    """4xx response other than 401 and 429."""

    label = "Client error"


class ServerError(ApiError):
    """5xx response."""

    label = "Server error"
    retryable = True


class TinifyConnectionError(TinifyError):
    """Transport-level failure: DNS, TLS, connect or read timeout."""

    retryable = True

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"Connection error: {cause}")


class TinifyIOError(TinifyError):
    """Local filesystem failure."""

    def __init__(self, cause: OSError) -> None:
        self.cause = cause
        super().__init__(f"I/O error: {cause}")


class TinifyJsonError(TinifyError):
    """Request envelope could not be serialized."""

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"JSON error: {cause}")


class UnknownError(TinifyError):
    """Anything not otherwise classified, including protocol violations."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Unknown error: {message}")


class ResultConsumedError(UnknownError):
    """Response body of a result was already consumed.

    Example:
        >>> from aiotinify.core.exceptions import ResultConsumedError
        >>> str(ResultConsumedError())
        'Unknown error: result body has already been consumed'
    """

    def __init__(self) -> None:
        super().__init__("result body has already been consumed")


__all__ = [
    "TinifyError",
    "InvalidApiKeyError",
    "ImageFileNotFoundError",
    "UnsupportedFormatError",
    "FileTooLargeError",
    "InvalidDimensionsError",
    "UrlParseError",
    "QuotaExceededError",
    "RateLimitExceededError",
    "ApiError",
    "AccountError",
    "ClientError",
    "ServerError",
    "TinifyConnectionError",
    "TinifyIOError",
    "TinifyJsonError",
    "UnknownError",
    "ResultConsumedError",
]

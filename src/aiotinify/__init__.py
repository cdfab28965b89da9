"""
aiotinify - Async client for the Tinify image compression API.

Uploads images from files, memory, URLs or streams and exposes the result
for resizing, format conversion, metadata preservation and cloud storage.

Key Features:
- One independent client per API key (no global state)
- Token bucket rate limiting with burst capacity
- Bounded retries with capped exponential backoff
- Typed errors for every failure kind
- Streaming uploads and downloads

Quick Start:
    >>> from aiotinify import Tinify, ResizeOptions
    >>> async with Tinify.from_api_key("your-api-key") as tinify:
    ...     source = await tinify.source_from_file("input.png")
    ...     result = await source.resize(ResizeOptions(width=100, height=100))
    ...     await result.to_file("thumb.png")
"""

# Request execution
from aiotinify.client import Client, ClientBuilder, ClientConfig

# Configuration and errors
from aiotinify.core.config import Settings, get_settings
from aiotinify.core.exceptions import (
    AccountError,
    ApiError,
    ClientError,
    FileTooLargeError,
    ImageFileNotFoundError,
    InvalidApiKeyError,
    InvalidDimensionsError,
    QuotaExceededError,
    RateLimitExceededError,
    ResultConsumedError,
    ServerError,
    TinifyConnectionError,
    TinifyError,
    TinifyIOError,
    TinifyJsonError,
    UnknownError,
    UnsupportedFormatError,
    UrlParseError,
)
from aiotinify.http.rate_limiter import RateLimit
from aiotinify.http.retry import RetryPolicy

# Operation options
from aiotinify.options import (
    ConvertOptions,
    GCSOptions,
    ImageFormat,
    PreserveMetadata,
    PreserveOptions,
    ResizeMethod,
    ResizeOptions,
    S3Options,
    StoreOptions,
)
from aiotinify.result import TinifyResult
from aiotinify.source import Source
from aiotinify.tinify import SHRINK_ENDPOINT, Tinify, TinifyBuilder
from aiotinify.validation import MAX_DIMENSION, MAX_FILE_SIZE, SUPPORTED_FORMATS

__version__ = "0.1.0"

__all__ = [
    # Client
    "Tinify",
    "TinifyBuilder",
    "Client",
    "ClientBuilder",
    "ClientConfig",
    "RateLimit",
    "RetryPolicy",
    "Settings",
    "get_settings",
    # Resources
    "Source",
    "TinifyResult",
    # Options
    "ConvertOptions",
    "GCSOptions",
    "ImageFormat",
    "PreserveMetadata",
    "PreserveOptions",
    "ResizeMethod",
    "ResizeOptions",
    "S3Options",
    "StoreOptions",
    # Limits
    "MAX_DIMENSION",
    "MAX_FILE_SIZE",
    "SHRINK_ENDPOINT",
    "SUPPORTED_FORMATS",
    # Errors
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
    # Version
    "__version__",
]

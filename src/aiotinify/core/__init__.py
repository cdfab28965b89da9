"""Core configuration and exceptions."""

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

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Exceptions
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

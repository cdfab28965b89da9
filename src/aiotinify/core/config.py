"""aiotinify configuration.

Settings loaded from environment variables with the TINIFY_ prefix. The
library never reads them on its own; the CLI and example programs pass them
to ``Tinify.from_settings``.

Example:
    >>> from aiotinify.core.config import get_settings
    >>> settings = get_settings(api_key="key", log_level="DEBUG")
    >>> settings.log_level
    'DEBUG'
    >>> settings.requests_per_minute
    100
"""

from __future__ import annotations

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings.

    Loads from environment variables with TINIFY_ prefix.

    Example:
        >>> from aiotinify.core.config import Settings
        >>> s = Settings(api_key="abc", timeout=60)
        >>> s.timeout
        60.0
        >>> s.max_attempts
        3
    """

    model_config = SettingsConfigDict(
        env_prefix="TINIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Credentials
    api_key: str | None = Field(default=None, description="Tinify API key")
    app_identifier: str | None = Field(default=None, description="Sent as User-Agent")

    # Requests
    timeout: float = Field(default=30.0, gt=0.0, description="Request timeout in seconds")

    # Retry
    max_attempts: int = Field(default=3, ge=1)
    base_delay: float = Field(default=0.1, ge=0.0)
    max_delay: float = Field(default=10.0, ge=0.0)
    backoff_factor: float = Field(default=2.0, ge=1.0)

    # Rate limiting
    requests_per_minute: int = Field(default=100, ge=1)
    burst_capacity: int = Field(default=10, ge=1)

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")


def get_settings(**overrides: Any) -> Settings:
    """Get settings with optional overrides.

    Example:
        >>> from aiotinify.core.config import get_settings
        >>> s = get_settings(burst_capacity=5)
        >>> s.burst_capacity
        5
    """
    return Settings(**overrides)

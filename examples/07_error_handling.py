#!/usr/bin/env python3
"""
Error Handling Example

Each failure kind has its own exception. Validation errors are raised
before any request is made.

Usage:
    TINIFY_API_KEY=... python examples/07_error_handling.py
"""

import asyncio
import logging

from aiotinify import (
    AccountError,
    ClientError,
    FileTooLargeError,
    ImageFileNotFoundError,
    InvalidApiKeyError,
    InvalidDimensionsError,
    MAX_FILE_SIZE,
    QuotaExceededError,
    RateLimitExceededError,
    ResizeOptions,
    ServerError,
    Tinify,
    TinifyConnectionError,
    TinifyError,
    UrlParseError,
    get_settings,
)


async def main() -> None:
    """Trigger and report common errors."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    async with Tinify.from_settings(get_settings()) as tinify:
        try:
            await tinify.source_from_file("does-not-exist.png")
        except ImageFileNotFoundError as e:
            print(f"✓ {e}")

        try:
            await tinify.source_from_buffer(b"\x00" * (MAX_FILE_SIZE + 1))
        except FileTooLargeError as e:
            print(f"✓ {e}")

        try:
            await tinify.source_from_url("not-a-url")
        except UrlParseError as e:
            print(f"✓ {e}")

        try:
            source = await tinify.source_from_url("https://tinypng.com/images/panda-happy.png")
            await source.resize(ResizeOptions(width=0, height=100))
        except InvalidDimensionsError as e:
            print(f"✓ {e}")
        except InvalidApiKeyError:
            print("✗ The API key was rejected")
        except QuotaExceededError:
            print("✗ Monthly quota used up; upgrade or wait for the next month")
        except RateLimitExceededError as e:
            print(f"✗ Still rate limited after retries; wait {e.retry_after}s")
        except (AccountError, ClientError) as e:
            print(f"✗ Request rejected ({e.status}): {e.message}")
        except (ServerError, TinifyConnectionError) as e:
            print(f"✗ Service unavailable after retries: {e}")
        except TinifyError as e:
            print(f"✗ {type(e).__name__}: {e}")


if __name__ == "__main__":
    asyncio.run(main())

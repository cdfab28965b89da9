#!/usr/bin/env python3
"""
Compression Count Example

Validate the key and report how many compressions were used this month.

Usage:
    TINIFY_API_KEY=... python examples/06_compression_count.py
"""

import asyncio

from aiotinify import Tinify, get_settings


async def main() -> None:
    """Check the key without spending a compression."""
    async with Tinify.from_settings(get_settings()) as tinify:
        await tinify.validate()
        print("✓ API key is valid")
        print(f"✓ Compressions this month: {tinify.compression_count}")


if __name__ == "__main__":
    asyncio.run(main())

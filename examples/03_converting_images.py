#!/usr/bin/env python3
"""
Format Conversion Example

Convert an image to WebP and to JPEG with a white background.

Usage:
    TINIFY_API_KEY=... python examples/03_converting_images.py input.png
"""

import asyncio
import sys
from pathlib import Path

from aiotinify import ConvertOptions, ImageFormat, Tinify, get_settings


async def main(path: Path) -> None:
    """Convert one upload to two formats."""
    async with Tinify.from_settings(get_settings()) as tinify:
        source = await tinify.source_from_file(path)

        result = await source.convert(ConvertOptions(format=ImageFormat.WEBP))
        print(f"✓ WebP: {await result.to_file(path.with_suffix('.webp'))}")

        # JPEG has no alpha channel; transparent areas get the background
        result = await source.convert(ConvertOptions(format=ImageFormat.JPEG, background="white"))
        print(f"✓ JPEG: {await result.to_file(path.with_suffix('.jpg'))} ({result.content_type})")


if __name__ == "__main__":
    asyncio.run(main(Path(sys.argv[1] if len(sys.argv) > 1 else "input.png")))

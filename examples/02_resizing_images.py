#!/usr/bin/env python3
"""
Resizing Example

Shows each resize method on one upload. The upload is reused, so only the
first compression counts against the monthly quota.

Usage:
    TINIFY_API_KEY=... python examples/02_resizing_images.py input.jpg
"""

import asyncio
import sys
from pathlib import Path

from aiotinify import ResizeMethod, ResizeOptions, Tinify, get_settings


async def main(path: Path) -> None:
    """Produce scaled, fitted, covered and thumbnail variants."""
    variants = {
        "scale": ResizeOptions(method=ResizeMethod.SCALE, width=300),
        "fit": ResizeOptions(method=ResizeMethod.FIT, width=300, height=200),
        "cover": ResizeOptions(method=ResizeMethod.COVER, width=300, height=300),
        "thumb": ResizeOptions(method=ResizeMethod.THUMB, width=150, height=150),
    }

    async with Tinify.from_settings(get_settings()) as tinify:
        source = await tinify.source_from_file(path)

        for name, options in variants.items():
            result = await source.resize(options)
            output = await result.to_file(path.with_name(f"{path.stem}.{name}{path.suffix}"))
            print(f"✓ {name}: {result.image_width}x{result.image_height} -> {output}")


if __name__ == "__main__":
    asyncio.run(main(Path(sys.argv[1] if len(sys.argv) > 1 else "input.jpg")))

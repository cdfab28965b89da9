#!/usr/bin/env python3
"""
aiotinify Quickstart Example

Compress a local image and write the result next to it.

Usage:
    TINIFY_API_KEY=... python examples/01_compressing_images.py input.png
"""

import asyncio
import sys
from pathlib import Path

from aiotinify import Tinify, get_settings


async def main(path: Path) -> None:
    """Upload, compress and download one image."""
    async with Tinify.from_settings(get_settings()) as tinify:
        source = await tinify.source_from_file(path)
        print(f"✓ Uploaded: {source.location}")

        output = await source.to_file(path.with_name(f"{path.stem}.min{path.suffix}"))
        print(f"✓ Saved: {output}")

        before = path.stat().st_size
        after = output.stat().st_size
        print(f"✓ {before} -> {after} bytes ({100 - after * 100 // max(before, 1)}% smaller)")


if __name__ == "__main__":
    asyncio.run(main(Path(sys.argv[1] if len(sys.argv) > 1 else "input.png")))

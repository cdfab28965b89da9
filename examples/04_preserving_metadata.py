#!/usr/bin/env python3
"""
Metadata Preservation Example

Keep copyright, creation date and GPS location in the compressed file.

Usage:
    TINIFY_API_KEY=... python examples/04_preserving_metadata.py photo.jpg
"""

import asyncio
import sys
from pathlib import Path

from aiotinify import PreserveMetadata, PreserveOptions, Tinify, get_settings


async def main(path: Path) -> None:
    """Compress while keeping selected metadata."""
    options = PreserveOptions(
        preserve=[PreserveMetadata.COPYRIGHT, PreserveMetadata.CREATION, PreserveMetadata.LOCATION]
    )

    async with Tinify.from_settings(get_settings()) as tinify:
        source = await tinify.source_from_file(path)
        result = await source.preserve(options)
        output = await result.to_file(path.with_name(f"{path.stem}.meta{path.suffix}"))
        print(f"✓ Saved with metadata: {output}")


if __name__ == "__main__":
    asyncio.run(main(Path(sys.argv[1] if len(sys.argv) > 1 else "photo.jpg")))

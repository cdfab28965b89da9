#!/usr/bin/env python3
"""
Cloud Storage Example

Store the compressed image directly in Amazon S3 (or an S3-compatible
service) or Google Cloud Storage, without downloading it.

Usage:
    export TINIFY_API_KEY=...
    export AWS_ACCESS_KEY_ID=... AWS_SECRET_ACCESS_KEY=... S3_PATH=bucket/images/out.png
    export GCP_ACCESS_TOKEN=... GCS_PATH=bucket/images/out.png
    python examples/05_saving_to_cloud.py input.png
"""

import asyncio
import os
import sys
from pathlib import Path

from aiotinify import GCSOptions, S3Options, Tinify, TinifyError, get_settings


def store_targets() -> list[S3Options | GCSOptions]:
    """Targets configured in the environment."""
    targets: list[S3Options | GCSOptions] = []
    if os.environ.get("AWS_ACCESS_KEY_ID") and os.environ.get("S3_PATH"):
        targets.append(
            S3Options(
                aws_access_key_id=os.environ["AWS_ACCESS_KEY_ID"],
                aws_secret_access_key=os.environ.get("AWS_SECRET_ACCESS_KEY", ""),
                region=os.environ.get("AWS_REGION", "us-east-1"),
                path=os.environ["S3_PATH"],
                headers={"Cache-Control": "public, max-age=31536000"},
                acl=os.environ.get("S3_ACL"),
            )
        )
    if os.environ.get("GCP_ACCESS_TOKEN") and os.environ.get("GCS_PATH"):
        targets.append(
            GCSOptions(
                gcp_access_token=os.environ["GCP_ACCESS_TOKEN"],
                path=os.environ["GCS_PATH"],
            )
        )
    return targets


async def main(path: Path) -> None:
    """Store one upload to every configured bucket."""
    targets = store_targets()
    if not targets:
        print("No storage configured; set S3_PATH or GCS_PATH (see module docstring)")
        return

    async with Tinify.from_settings(get_settings()) as tinify:
        source = await tinify.source_from_file(path)
        for options in targets:
            try:
                result = await source.store(options)
            except TinifyError as e:
                print(f"✗ {options.service}: {e}")
                continue
            print(f"✓ {options.service}: {result.location}")


if __name__ == "__main__":
    asyncio.run(main(Path(sys.argv[1] if len(sys.argv) > 1 else "input.png")))

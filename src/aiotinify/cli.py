"""CLI entry point."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from aiotinify.core.config import get_settings
from aiotinify.core.exceptions import TinifyError
from aiotinify.options import (
    ConvertOptions,
    ImageFormat,
    PreserveMetadata,
    PreserveOptions,
    ResizeMethod,
    ResizeOptions,
)
from aiotinify.tinify import Tinify

app = typer.Typer(
    name="aiotinify",
    help="Compress, resize and convert images with the Tinify API",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool, level: str) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _client(api_key: str | None, verbose: bool) -> Tinify:
    overrides = {"api_key": api_key} if api_key else {}
    settings = get_settings(**overrides)
    _setup_logging(verbose, settings.log_level)
    return Tinify.from_settings(settings)


def _fail(error: TinifyError) -> None:
    console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """Show version."""
    from aiotinify import __version__

    console.print(f"aiotinify {__version__}")


@app.command()
def compress(
    image: Path = typer.Argument(..., help="Image to compress"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output path"),
    width: Optional[int] = typer.Option(None, help="Resize width"),
    height: Optional[int] = typer.Option(None, help="Resize height"),
    method: ResizeMethod = typer.Option(ResizeMethod.FIT, help="Resize method"),
    convert: Optional[ImageFormat] = typer.Option(None, help="Convert to MIME type"),
    background: Optional[str] = typer.Option(None, help="Background for conversion"),
    preserve: list[PreserveMetadata] = typer.Option([], help="Metadata to keep"),
    api_key: Optional[str] = typer.Option(None, envvar="TINIFY_API_KEY", help="API key"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Compress an image, optionally applying one resize, convert or preserve step."""
    resizing = width is not None or height is not None
    requested = [
        name
        for name, given in (
            ("--width/--height", resizing),
            ("--convert", convert is not None),
            ("--preserve", bool(preserve)),
        )
        if given
    ]
    if len(requested) > 1:
        raise typer.BadParameter(f"Only one operation per run, got: {', '.join(requested)}")
    dest = output or image.with_name(f"{image.stem}.min{image.suffix}")

    async def run() -> None:
        async with _client(api_key, verbose) as tinify:
            source = await tinify.source_from_file(image)
            if resizing:
                result = await source.resize(ResizeOptions(method=method, width=width, height=height))
            elif convert is not None:
                result = await source.convert(ConvertOptions(format=convert, background=background))
            elif preserve:
                result = await source.preserve(PreserveOptions(preserve=preserve))
            else:
                result = await source.result()
            written = await result.to_file(dest)
            console.print(f"[green]✓[/green] Saved {written}")
            if tinify.compression_count is not None:
                console.print(f"Compressions this month: {tinify.compression_count}")

    try:
        asyncio.run(run())
    except TinifyError as e:
        _fail(e)


@app.command()
def validate(
    api_key: Optional[str] = typer.Option(None, envvar="TINIFY_API_KEY", help="API key"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Check that the API key is accepted."""

    async def run() -> None:
        async with _client(api_key, verbose) as tinify:
            await tinify.validate()
            console.print("[green]✓[/green] API key is valid")
            if tinify.compression_count is not None:
                console.print(f"Compressions this month: {tinify.compression_count}")

    try:
        asyncio.run(run())
    except TinifyError as e:
        _fail(e)


if __name__ == "__main__":
    app()

"""Tests for aiotinify.result."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from aiotinify.core.exceptions import (
    ResultConsumedError,
    TinifyConnectionError,
    TinifyIOError,
    UnknownError,
)
from aiotinify.result import TinifyResult


async def make_result(content: bytes = b"image-bytes", headers: dict | None = None) -> TinifyResult:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(
            lambda request: httpx.Response(200, content=content, headers=headers or {})
        )
    )
    response = await client.send(client.build_request("GET", "https://api.tinify.com/output/x"), stream=True)
    return TinifyResult(response)


class TestMetadata:
    """Header metadata tests."""

    async def test_numeric_headers(self) -> None:
        result = await make_result(
            headers={
                "Compression-Count": "42",
                "Image-Width": "100",
                "Image-Height": "80",
                "Content-Type": "image/png",
            }
        )
        assert result.compression_count == 42
        assert result.image_width == 100
        assert result.image_height == 80
        assert result.content_type == "image/png"
        assert result.content_length == len(b"image-bytes")

    async def test_missing_or_bad_headers(self) -> None:
        result = await make_result(headers={"Image-Width": "wide"})
        assert result.image_width is None
        assert result.image_height is None
        assert result.compression_count is None
        assert result.location is None

    async def test_metadata_survives_consumption(self) -> None:
        """Headers stay readable after the body is consumed."""
        result = await make_result(headers={"Compression-Count": "3"})
        await result.to_buffer()
        assert result.compression_count == 3
        assert result.compression_count == 3


class TestConsumption:
    """At-most-once body consumption tests."""

    async def test_to_buffer(self) -> None:
        result = await make_result(b"abc")
        assert not result.consumed
        assert await result.to_buffer() == b"abc"
        assert result.consumed

    async def test_second_to_buffer_fails(self) -> None:
        """A second consumption raises instead of returning empty bytes."""
        result = await make_result(b"abc")
        await result.to_buffer()
        with pytest.raises(ResultConsumedError):
            await result.to_buffer()

    async def test_consumed_error_is_unknown_kind(self) -> None:
        result = await make_result()
        await result.to_buffer()
        with pytest.raises(UnknownError):
            await result.to_buffer()

    async def test_to_file_then_to_buffer_fails(self, tmp_path) -> None:
        result = await make_result(b"abc")
        await result.to_file(tmp_path / "out.png")
        with pytest.raises(ResultConsumedError):
            await result.to_buffer()

    async def test_aclose_marks_consumed(self) -> None:
        result = await make_result()
        async with result:
            pass
        with pytest.raises(ResultConsumedError):
            await result.to_buffer()


class TestToFile:
    """File output tests."""

    async def test_writes_file(self, tmp_path) -> None:
        result = await make_result(b"x" * 200_000)
        dest = await result.to_file(tmp_path / "nested" / "out.png", chunk_size=4096)
        assert dest == tmp_path / "nested" / "out.png"
        assert dest.read_bytes() == b"x" * 200_000
        assert not (tmp_path / "nested" / "out.png.tmp").exists()

    async def test_unwritable_destination(self, tmp_path) -> None:
        """Filesystem failures become TinifyIOError."""
        blocker = tmp_path / "file"
        blocker.write_bytes(b"")
        result = await make_result()
        with pytest.raises(TinifyIOError):
            await result.to_file(blocker / "out.png")

    async def test_cancelled_download_leaves_no_temp_file(self, tmp_path) -> None:
        """Cancelling mid-body removes the partial temp file."""

        async def stalled_body():
            yield b"x" * 10
            await asyncio.Event().wait()

        result = TinifyResult(httpx.Response(200, content=stalled_body()))
        task = asyncio.create_task(result.to_file(tmp_path / "out.png"))
        while not (tmp_path / "out.png.tmp").exists():
            await asyncio.sleep(0.01)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert list(tmp_path.iterdir()) == []

    async def test_connection_drop_leaves_no_temp_file(self, tmp_path) -> None:
        """A body that fails mid-stream is reported and cleaned up."""

        async def broken_body():
            yield b"x" * 10
            raise httpx.ReadError("connection reset")

        result = TinifyResult(httpx.Response(200, content=broken_body()))
        with pytest.raises(TinifyConnectionError):
            await result.to_file(tmp_path / "out.png")
        assert list(tmp_path.iterdir()) == []

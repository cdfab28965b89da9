"""Shared fixtures: a Tinify client wired to an in-process mock API."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from aiotinify import RateLimit, RetryPolicy, Tinify

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingHandler:
    """Routes requests to a handler and records every request seen."""

    def __init__(self, handler: Handler):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def make_tinify():
    """Factory building a Tinify whose HTTP traffic goes to ``handler``.

    Retries sleep for zero seconds and the rate limit never kicks in.
    """

    def factory(
        handler: Handler,
        *,
        max_attempts: int = 3,
        api_key: str = "test-key",
    ) -> tuple[Tinify, RecordingHandler]:
        recorder = RecordingHandler(handler)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        tinify = (
            Tinify.builder()
            .api_key(api_key)
            .retry_policy(RetryPolicy(max_attempts=max_attempts, base_delay=0.0, max_delay=0.0))
            .rate_limit(RateLimit(requests_per_minute=60000, burst_capacity=1000))
            .http_client(http_client)
            .build()
        )
        return tinify, recorder

    return factory


@pytest.fixture
def image_file(tmp_path):
    """Small file with a png extension."""
    path = tmp_path / "input.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 64)
    return path

"""Tests for aiotinify.http.auth."""

from __future__ import annotations

import base64

from aiotinify.http.auth import build_auth_header, build_headers


class TestAuthHeader:
    """Authorization header tests."""

    def test_basic_scheme(self) -> None:
        """Header uses Basic auth with user 'api'."""
        header = build_auth_header("secret")
        assert header.startswith("Basic ")
        decoded = base64.b64decode(header.removeprefix("Basic ")).decode()
        assert decoded == "api:secret"

    def test_non_ascii_key(self) -> None:
        """Keys are UTF-8 encoded before base64."""
        header = build_auth_header("clé")
        decoded = base64.b64decode(header.removeprefix("Basic ")).decode("utf-8")
        assert decoded == "api:clé"

    def test_deterministic(self) -> None:
        """Same key always yields the same header."""
        assert build_auth_header("k") == build_auth_header("k")


class TestBuildHeaders:
    """Header set tests."""

    def test_without_identifier(self) -> None:
        """Only Authorization when no app identifier is set."""
        headers = build_headers("secret")
        assert headers == {"Authorization": "Basic YXBpOnNlY3JldA=="}

    def test_with_identifier(self) -> None:
        """App identifier goes into User-Agent."""
        headers = build_headers("secret", "MyApp/1.0")
        assert headers["User-Agent"] == "MyApp/1.0"
        assert "Authorization" in headers

"""Authentication headers.

The service uses HTTP Basic auth with the fixed user ``api`` and the API key
as password.

Example:
    >>> from aiotinify.http.auth import build_headers
    >>> build_headers("secret")
    {'Authorization': 'Basic YXBpOnNlY3JldA=='}
    >>> build_headers("secret", "MyApp/1.0")["User-Agent"]
    'MyApp/1.0'
"""

from __future__ import annotations

import base64


def build_auth_header(api_key: str) -> str:
    """Return the ``Authorization`` header value for an API key."""
    token = base64.b64encode(f"api:{api_key}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def build_headers(api_key: str, app_identifier: str | None = None) -> dict[str, str]:
    """Build the header set sent with every request.

    Args:
        api_key: Tinify API key
        app_identifier: Optional identifier sent as ``User-Agent``

    Returns:
        Header mapping
    """
    headers = {"Authorization": build_auth_header(api_key)}
    if app_identifier:
        headers["User-Agent"] = app_identifier
    return headers


__all__ = [
    "build_auth_header",
    "build_headers",
]

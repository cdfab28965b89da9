"""Option models for follow-up operations on a source.

Each model serializes to the JSON the service expects inside the
operation's envelope.

Example:
    >>> from aiotinify.options import ResizeMethod, ResizeOptions, envelope
    >>> envelope("resize", ResizeOptions(method=ResizeMethod.FIT, width=100, height=100))
    b'{"resize":{"method":"fit","width":100,"height":100}}'
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from aiotinify.core.exceptions import TinifyJsonError


class TinifyModel(BaseModel):
    """Base model with standard configuration."""

    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="forbid",
        frozen=True,
    )

    def to_payload(self) -> dict[str, Any]:
        """Wire representation with unset optional fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ResizeMethod(str, Enum):
    """How the service fits the image into the requested box."""

    SCALE = "scale"
    FIT = "fit"
    COVER = "cover"
    THUMB = "thumb"


class ResizeOptions(TinifyModel):
    """Resize request.

    Dimensions are checked by ``Source.resize`` before any request so the
    caller gets ``InvalidDimensionsError`` rather than a model error.
    """

    method: ResizeMethod = ResizeMethod.FIT
    width: int | None = None
    height: int | None = None


class ImageFormat(str, Enum):
    """Target formats for conversion."""

    AVIF = "image/avif"
    WEBP = "image/webp"
    JPEG = "image/jpeg"
    PNG = "image/png"


class ConvertOptions(TinifyModel):
    """Format conversion request.

    Example:
        >>> ConvertOptions(format=ImageFormat.JPEG, background="#FFFFFF").to_payload()
        {'type': 'image/jpeg', 'background': '#FFFFFF'}
    """

    format: ImageFormat = Field(..., alias="type")
    background: str | None = Field(
        default=None,
        pattern=r"^(#[0-9A-Fa-f]{6}|white|black)$",
        description="Fill for transparent areas when converting to a format without alpha",
    )


class PreserveMetadata(str, Enum):
    """Metadata kinds that can be kept during compression."""

    COPYRIGHT = "copyright"
    CREATION = "creation"
    LOCATION = "location"


class PreserveOptions(TinifyModel):
    """Metadata preservation request."""

    preserve: list[PreserveMetadata] = Field(..., min_length=1)


class S3Options(TinifyModel):
    """Amazon S3 (or S3 compatible) destination.

    Example:
        >>> S3Options(
        ...     aws_access_key_id="AKIA",
        ...     aws_secret_access_key="secret",
        ...     region="us-east-1",
        ...     path="bucket/image.png",
        ... ).to_payload()["service"]
        's3'
    """

    service: Literal["s3"] = "s3"
    aws_access_key_id: str
    aws_secret_access_key: str
    region: str
    path: str
    headers: dict[str, Any] | None = None
    acl: str | None = None


class GCSOptions(TinifyModel):
    """Google Cloud Storage destination."""

    service: Literal["gcs"] = "gcs"
    gcp_access_token: str
    path: str
    headers: dict[str, Any] | None = None


StoreOptions = Annotated[Union[S3Options, GCSOptions], Field(discriminator="service")]


def envelope(key: str, payload: TinifyModel | list[Any] | dict[str, Any]) -> bytes:
    """Serialize a single-key request envelope.

    Args:
        key: Operation name, e.g. ``"resize"``
        payload: Option model or already-plain JSON value

    Returns:
        Compact UTF-8 JSON bytes

    Raises:
        TinifyJsonError: If the payload is not JSON serializable
    """
    # Every operation, convert and store included, is wrapped under its own key
    try:
        value = payload.to_payload() if isinstance(payload, TinifyModel) else payload
        return json.dumps({key: value}, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise TinifyJsonError(e) from e


__all__ = [
    "ConvertOptions",
    "GCSOptions",
    "ImageFormat",
    "PreserveMetadata",
    "PreserveOptions",
    "ResizeMethod",
    "ResizeOptions",
    "S3Options",
    "StoreOptions",
    "TinifyModel",
    "envelope",
]

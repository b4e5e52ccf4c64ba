"""Pydantic response models for the Stability REST API.

These models are the deserialization targets for every endpoint. They carry
no behaviour beyond decoding and saving generated images.

Models
------
Image
    One generated artifact: base64 payload, finish reason and seed.
ImageResponse
    Body of every generation endpoint (``{"artifacts": [...]}``).
Engine
    One entry of ``GET /v1/engines/list``.
User, Organization
    Body of ``GET /v1/user/account``.
Balance
    Body of ``GET /v1/user/balance``.
ApiErrorBody
    Body of any non-200 response (``{"id", "name", "message"}``).
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
from pathlib import Path
from typing import TypeVar

from PIL import Image as PILImage
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from stability_client.core.exceptions import DecodeError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Image(BaseModel):
    """A single generated image.

    Attributes:
        base64: Base64-encoded image bytes (PNG)
        finish_reason: ``SUCCESS``, ``ERROR`` or ``CONTENT_FILTERED``
        seed: Seed the image was generated with
    """

    model_config = ConfigDict(populate_by_name=True)

    base64: str
    finish_reason: str = Field(..., alias="finishReason")
    seed: int

    def decode(self) -> bytes:
        """Return the raw image bytes.

        Raises:
            DecodeError: If the payload is not valid base64
        """
        try:
            return base64.b64decode(self.base64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"artifact payload is not valid base64: {e}") from e

    def save(self, path: str | Path) -> Path:
        """Decode the payload and write it to ``path``, overwriting any existing file.

        Returns:
            The path written to
        """
        path = Path(path)
        data = self.decode()
        path.write_bytes(data)
        logger.info(f"Saved artifact (seed={self.seed}) to {path}")
        return path

    def to_pil(self) -> PILImage.Image:
        """Decode the payload into a PIL image."""
        image = PILImage.open(io.BytesIO(self.decode()))
        image.load()
        return image


class ImageResponse(BaseModel):
    """Response of the generation endpoints."""

    artifacts: list[Image]

    def save_all(self, directory: str | Path, prefix: str = "image") -> list[Path]:
        """Save every artifact as ``<directory>/<prefix>_<index>.png``.

        Args:
            directory: Target directory (created if missing)
            prefix: File name prefix

        Returns:
            Paths written, in artifact order
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        return [
            artifact.save(directory / f"{prefix}_{i}.png")
            for i, artifact in enumerate(self.artifacts)
        ]


class Engine(BaseModel):
    """An engine (model) available to the account."""

    id: str
    name: str
    description: str
    type: str


class Organization(BaseModel):
    id: str
    name: str
    role: str
    is_default: bool


class User(BaseModel):
    """Account that owns the API key."""

    id: str
    email: str | None = None
    profile_picture: str | None = None
    organizations: list[Organization] = Field(default_factory=list)


class Balance(BaseModel):
    """Credit balance of the account."""

    credits: float


class ApiErrorBody(BaseModel):
    """Structured error returned with non-200 responses.

    Attributes:
        id: Unique identifier of the failed request, for support
        name: Short error code, e.g. ``bad_request``
        message: Human-readable description
    """

    id: str
    name: str
    message: str


def decode_json(model: type[T], data: bytes) -> T:
    """Deserialize ``data`` into ``model`` (a BaseModel or a typing form like ``list[Engine]``).

    Raises:
        DecodeError: If the bytes are not valid JSON of the expected shape
    """
    try:
        return TypeAdapter(model).validate_json(data)
    except ValidationError as e:
        raise DecodeError(f"could not decode {getattr(model, '__name__', model)} response: {e}") from e

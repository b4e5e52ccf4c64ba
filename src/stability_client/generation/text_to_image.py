"""Text-to-image generation (``POST /v1/generation/{engine}/text-to-image``).

Usage Example
-------------
    from stability_client import StylePreset, TextToImageBuilder

    request = (
        TextToImageBuilder()
        .height(1024)
        .width(1024)
        .cfg_scale(27)
        .samples(2)
        .steps(33)
        .style_preset(StylePreset.DIGITAL_ART)
        .text_prompt("A scholar tired at his desk, a raven on a bust", 1.0)
        .build()
    )

    response = request.generate("stable-diffusion-xl-1024-v1-0")
    response.save_all("outputs")

The request body is JSON. ``generate`` asks for JSON-wrapped base64
artifacts; ``generate_png`` asks for ``image/png`` and returns the raw bytes
of a single image.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from pydantic import Field, ValidationInfo, field_validator

from stability_client.api.models import ImageResponse, decode_json
from stability_client.core.client import (
    ACCEPT,
    APPLICATION_JSON,
    CONTENT_TYPE,
    IMAGE_PNG,
    POST,
    ClientBuilder,
)
from stability_client.core.config import StabilitySettings

from . import validators
from .base import DiffusionBuilderBase, RequestModel
from .common import (
    DEFAULT_DIMENSION,
    TEXT_TO_IMAGE_PATH,
    ClipGuidancePreset,
    Sampler,
    StylePreset,
    generation_path,
)

logger = logging.getLogger(__name__)


class TextToImage(RequestModel):
    """A validated text-to-image request. Create it with ``TextToImageBuilder``."""

    height: int
    width: int
    text_prompts: validators.TextPrompts
    cfg_scale: validators.CfgScale
    clip_guidance_preset: ClipGuidancePreset | None = None
    sampler: Sampler | None = None
    samples: validators.Samples
    seed: validators.Seed
    steps: validators.Steps
    style_preset: StylePreset
    extras: dict[str, str] = Field(default_factory=dict)

    @field_validator("height", "width")
    @classmethod
    def check_dimension(cls, value: int, info: ValidationInfo) -> int:
        return validators.validate_dimension(info.field_name, value)

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready request body. Unset optional fields and empty extras are omitted."""
        payload = self.model_dump(mode="json", exclude_none=True)
        if not payload["extras"]:
            del payload["extras"]
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_payload())

    def _client(
        self,
        engine: str,
        accept: str,
        settings: StabilitySettings | None,
        transport: httpx.BaseTransport | None,
    ):
        return (
            ClientBuilder(settings=settings, transport=transport)
            .method(POST)
            .path(generation_path(engine, TEXT_TO_IMAGE_PATH))
            .header(ACCEPT, accept)
            .header(CONTENT_TYPE, APPLICATION_JSON)
            .build()
        )

    def generate(
        self,
        engine: str,
        settings: StabilitySettings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> ImageResponse:
        """Generate images and return them as base64 artifacts.

        Args:
            engine: Engine id, e.g. ``stable-diffusion-xl-1024-v1-0``
            settings: Explicit settings; read from the environment when omitted
            transport: Optional httpx transport replacing the network

        Returns:
            ImageResponse with one artifact per requested sample

        Raises:
            ConfigurationError: If no API key is configured
            ApiError: If the API rejects the request
            DecodeError: If the response is not a valid artifact list
        """
        client = self._client(engine, APPLICATION_JSON, settings, transport)
        logger.info(f"Requesting {self.samples} text-to-image sample(s) from {engine}")
        return decode_json(ImageResponse, client.send(self.to_json().encode("utf-8")))

    def generate_png(
        self,
        engine: str,
        settings: StabilitySettings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> bytes:
        """Generate a single image and return the undecoded PNG bytes."""
        client = self._client(engine, IMAGE_PNG, settings, transport)
        logger.info(f"Requesting PNG text-to-image from {engine}")
        return client.send(self.to_json().encode("utf-8"))


class TextToImageBuilder(DiffusionBuilderBase):
    """Builder for ``TextToImage``.

    Defaults applied by ``build()``: 1024x1024, cfg_scale 7, 1 sample,
    seed 0, 50 steps; sampler and clip guidance left to the server.
    """

    def __init__(self) -> None:
        super().__init__()
        self._height: int | None = None
        self._width: int | None = None

    def height(self, height: int) -> TextToImageBuilder:
        """Image height in pixels: a multiple of 64, at least 128."""
        self._height = validators.validate_dimension("height", height)
        return self

    def width(self, width: int) -> TextToImageBuilder:
        """Image width in pixels: a multiple of 64, at least 128."""
        self._width = validators.validate_dimension("width", width)
        return self

    def build(self) -> TextToImage:
        """Return the finished request.

        Raises:
            ImageBuilderError: If no style preset is set or the first prompt is empty
        """
        fields = self._common_fields()
        return TextToImage(
            height=self._height if self._height is not None else DEFAULT_DIMENSION,
            width=self._width if self._width is not None else DEFAULT_DIMENSION,
            **fields,
        )

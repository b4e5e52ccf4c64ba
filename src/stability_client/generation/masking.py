"""Masked image editing (``POST /v1/generation/{engine}/image-to-image/masking``).

Usage Example
-------------
    from stability_client import MaskerBuilder, MaskSource, StylePreset

    request = (
        MaskerBuilder()
        .init_image_path("init_image.png")
        .mask_source(MaskSource.MASK_IMAGE_BLACK)
        .mask_image("black_mask_image.png")
        .text_prompt("a crab dancing", 1.0)
        .style_preset(StylePreset.FANTASY_ART)
        .build()
    )

    response = request.generate("stable-inpainting-512-v2-0")

With ``MaskSource.INIT_IMAGE_ALPHA`` the mask is taken from the alpha
channel of the init image and no mask image is needed (or sent).
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

import httpx
from pydantic import Field, model_validator

from stability_client.api.models import ImageResponse
from stability_client.core.config import StabilitySettings
from stability_client.core.exceptions import ImageBuilderError
from stability_client.core.multipart import MultipartFormData

from . import validators
from .base import DiffusionBuilderBase, RequestModel, add_text_prompts, coerce_enum, send_multipart
from .common import (
    IMAGE_TO_IMAGE_PATH,
    MASKING_PATH,
    ClipGuidancePreset,
    Sampler,
    StylePreset,
    format_number,
    generation_path,
)

logger = logging.getLogger(__name__)


class MaskSource(str, Enum):
    """Where the mask comes from.

    MASK_IMAGE_BLACK: black pixels of the mask image are replaced
    MASK_IMAGE_WHITE: white pixels of the mask image are replaced
    INIT_IMAGE_ALPHA: transparent pixels of the init image are replaced
    """

    MASK_IMAGE_BLACK = "MASK_IMAGE_BLACK"
    MASK_IMAGE_WHITE = "MASK_IMAGE_WHITE"
    INIT_IMAGE_ALPHA = "INIT_IMAGE_ALPHA"

    @property
    def needs_mask_image(self) -> bool:
        return self is not MaskSource.INIT_IMAGE_ALPHA


class Masker(RequestModel):
    """A validated masking request. Create it with ``MaskerBuilder``."""

    text_prompts: validators.TextPrompts
    init_image: Path
    mask_source: MaskSource
    mask_image: Path | None = None
    cfg_scale: validators.CfgScale
    clip_guidance_preset: ClipGuidancePreset | None = None
    sampler: Sampler | None = None
    samples: validators.Samples
    seed: validators.Seed
    steps: validators.Steps
    style_preset: StylePreset
    extras: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_mask_image(self) -> Masker:
        if self.mask_source.needs_mask_image and self.mask_image is None:
            raise ImageBuilderError("mask image path must be set")
        return self

    def to_multipart_form_data(self) -> MultipartFormData:
        """Encode the request as a closed multipart body.

        Raises:
            ValueError: If an image path has no extension
            OSError: If an image cannot be read
        """
        form = MultipartFormData()

        form.add_text("mask_source", self.mask_source.value)
        form.add_text("cfg_scale", format_number(self.cfg_scale))
        form.add_text("samples", str(self.samples))
        form.add_text("seed", str(self.seed))
        form.add_text("steps", str(self.steps))
        form.add_text("style_preset", self.style_preset.value)

        if self.clip_guidance_preset is not None:
            form.add_text("clip_guidance_preset", self.clip_guidance_preset.value)
        if self.sampler is not None:
            form.add_text("sampler", self.sampler.value)

        for key, value in self.extras.items():
            form.add_text(key, value)

        add_text_prompts(form, self.text_prompts)
        form.add_file("init_image", self.init_image)

        if self.mask_source.needs_mask_image:
            form.add_file("mask_image", self.mask_image)

        form.end_body()
        return form

    def generate(
        self,
        engine: str,
        settings: StabilitySettings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> ImageResponse:
        """Repaint the masked region of the init image.

        Args:
            engine: Engine id, e.g. ``stable-inpainting-512-v2-0``
            settings: Explicit settings; read from the environment when omitted
            transport: Optional httpx transport replacing the network
        """
        form = self.to_multipart_form_data()
        return send_multipart(
            generation_path(engine, IMAGE_TO_IMAGE_PATH, MASKING_PATH),
            form,
            settings=settings,
            transport=transport,
        )


class MaskerBuilder(DiffusionBuilderBase):
    """Builder for ``Masker``."""

    def __init__(self) -> None:
        super().__init__()
        self._init_image: Path | None = None
        self._mask_source: MaskSource | None = None
        self._mask_image: Path | None = None

    def init_image_path(self, path: str | Path) -> MaskerBuilder:
        self._init_image = Path(path)
        return self

    def mask_source(self, source: MaskSource | str) -> MaskerBuilder:
        self._mask_source = coerce_enum(MaskSource, source, "mask_source")
        return self

    def mask_image(self, path: str | Path) -> MaskerBuilder:
        """Black/white mask image; required unless the source is INIT_IMAGE_ALPHA."""
        self._mask_image = Path(path)
        return self

    def build(self) -> Masker:
        """Return the finished request.

        Raises:
            ImageBuilderError: If the init image, style preset, first prompt
                or mask source is missing, or a mask image is required but unset
        """
        if self._init_image is None:
            raise ImageBuilderError("init image path must be set")

        fields = self._common_fields()

        if self._mask_source is None:
            raise ImageBuilderError("a mask source must be set")
        if self._mask_source.needs_mask_image and self._mask_image is None:
            raise ImageBuilderError("mask image path must be set")

        mask_image = self._mask_image if self._mask_source.needs_mask_image else None
        if self._mask_image is not None and mask_image is None:
            logger.debug("Ignoring mask image: mask source is INIT_IMAGE_ALPHA")

        return Masker(
            init_image=self._init_image,
            mask_source=self._mask_source,
            mask_image=mask_image,
            **fields,
        )

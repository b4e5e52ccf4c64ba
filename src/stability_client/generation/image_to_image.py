"""Image-to-image generation (``POST /v1/generation/{engine}/image-to-image``).

Usage Example
-------------
    from stability_client import ImageMode, ImageToImageBuilder, StylePreset

    request = (
        ImageToImageBuilder()
        .init_image_path("init_image.png")
        .init_image_mode(ImageMode.IMAGE_STRENGTH)
        .image_strength(0.35)
        .steps(20)
        .style_preset(StylePreset.FANTASY_ART)
        .text_prompt("A crab relaxing on a beach", 0.5)
        .text_prompt("stones", -0.9)
        .build()
    )

    response = request.generate("stable-diffusion-xl-1024-v1-0")

The request is sent as multipart/form-data with the init image as a file
part. The init image is read from disk when the body is encoded.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

import httpx
from pydantic import Field, ValidationInfo, field_validator, model_validator

from stability_client.api.models import ImageResponse
from stability_client.core.config import StabilitySettings
from stability_client.core.exceptions import ImageBuilderError
from stability_client.core.multipart import MultipartFormData

from . import validators
from .base import DiffusionBuilderBase, RequestModel, add_text_prompts, coerce_enum, send_multipart
from .common import (
    IMAGE_TO_IMAGE_PATH,
    ClipGuidancePreset,
    Sampler,
    StylePreset,
    format_number,
    generation_path,
)

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_STRENGTH = 0.35


class ImageMode(str, Enum):
    """How the init image influences the result."""

    IMAGE_STRENGTH = "IMAGE_STRENGTH"
    STEP_SCHEDULE = "STEP_SCHEDULE"


class ImageToImage(RequestModel):
    """A validated image-to-image request. Create it with ``ImageToImageBuilder``."""

    text_prompts: validators.TextPrompts
    init_image: Path
    init_image_mode: ImageMode
    image_strength: float | None = None
    step_schedule_start: float | None = None
    step_schedule_end: float | None = None
    cfg_scale: validators.CfgScale
    clip_guidance_preset: ClipGuidancePreset | None = None
    sampler: Sampler | None = None
    samples: validators.Samples
    seed: validators.Seed
    steps: validators.Steps
    style_preset: StylePreset
    extras: dict[str, str] = Field(default_factory=dict)

    @field_validator("image_strength", "step_schedule_start", "step_schedule_end")
    @classmethod
    def check_unit_interval(cls, value: float | None, info: ValidationInfo) -> float | None:
        if value is None:
            return value
        return validators.validate_unit_interval(info.field_name, value)

    @model_validator(mode="after")
    def check_image_mode(self) -> ImageToImage:
        if self.init_image_mode is ImageMode.IMAGE_STRENGTH:
            if self.image_strength is None:
                raise ImageBuilderError("image_strength must be set for init_image_mode IMAGE_STRENGTH")
            if self.step_schedule_start is not None or self.step_schedule_end is not None:
                raise ImageBuilderError("step schedule values require init_image_mode STEP_SCHEDULE")
        elif self.image_strength is not None:
            raise ImageBuilderError(
                "image_strength requires init_image_mode IMAGE_STRENGTH", self.image_strength
            )
        return self

    def to_multipart_form_data(self) -> MultipartFormData:
        """Encode the request as a closed multipart body.

        Raises:
            ValueError: If the init image path has no extension
            OSError: If the init image cannot be read
        """
        form = MultipartFormData()

        add_text_prompts(form, self.text_prompts)
        form.add_text("init_image_mode", self.init_image_mode.value)

        if self.init_image_mode is ImageMode.IMAGE_STRENGTH:
            form.add_text("image_strength", format_number(self.image_strength))
        else:
            if self.step_schedule_start is not None:
                form.add_text("step_schedule_start", format_number(self.step_schedule_start))
            if self.step_schedule_end is not None:
                form.add_text("step_schedule_end", format_number(self.step_schedule_end))

        form.add_text("cfg_scale", format_number(self.cfg_scale))
        form.add_text("samples", str(self.samples))
        form.add_text("steps", str(self.steps))

        if self.sampler is not None:
            form.add_text("sampler", self.sampler.value)
        if self.clip_guidance_preset is not None:
            form.add_text("clip_guidance_preset", self.clip_guidance_preset.value)

        form.add_text("style_preset", self.style_preset.value)
        form.add_text("seed", str(self.seed))
        form.add_file("init_image", self.init_image)

        for key, value in self.extras.items():
            form.add_text(key, value)

        form.end_body()
        return form

    def generate(
        self,
        engine: str,
        settings: StabilitySettings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> ImageResponse:
        """Generate images from the init image and prompts.

        Args:
            engine: Engine id, e.g. ``stable-diffusion-xl-1024-v1-0``
            settings: Explicit settings; read from the environment when omitted
            transport: Optional httpx transport replacing the network

        Returns:
            ImageResponse with one artifact per requested sample
        """
        form = self.to_multipart_form_data()
        return send_multipart(
            generation_path(engine, IMAGE_TO_IMAGE_PATH), form, settings=settings, transport=transport
        )


class ImageToImageBuilder(DiffusionBuilderBase):
    """Builder for ``ImageToImage``.

    ``init_image_path`` and ``style_preset`` are mandatory, as is a non-empty
    first prompt. The init image mode defaults to IMAGE_STRENGTH with a
    strength of 0.35.
    """

    def __init__(self) -> None:
        super().__init__()
        self._init_image: Path | None = None
        self._init_image_mode: ImageMode | None = None
        self._image_strength: float | None = None
        self._step_schedule_start: float | None = None
        self._step_schedule_end: float | None = None

    def init_image_path(self, path: str | Path) -> ImageToImageBuilder:
        self._init_image = Path(path)
        return self

    def init_image_mode(self, mode: ImageMode | str) -> ImageToImageBuilder:
        self._init_image_mode = coerce_enum(ImageMode, mode, "init_image_mode")
        return self

    def image_strength(self, strength: float) -> ImageToImageBuilder:
        """How much the init image shapes the result (0 = ignore it, 1 = keep it)."""
        self._image_strength = validators.validate_unit_interval("image_strength", strength)
        return self

    def step_schedule_start(self, value: float) -> ImageToImageBuilder:
        self._step_schedule_start = validators.validate_unit_interval("step_schedule_start", value)
        return self

    def step_schedule_end(self, value: float) -> ImageToImageBuilder:
        self._step_schedule_end = validators.validate_unit_interval("step_schedule_end", value)
        return self

    def build(self) -> ImageToImage:
        """Return the finished request.

        Raises:
            ImageBuilderError: If a mandatory field is missing or the image
                mode conflicts with the strength/schedule parameters
        """
        if self._init_image is None:
            raise ImageBuilderError("init image path must be set")

        fields = self._common_fields()
        mode = self._init_image_mode or ImageMode.IMAGE_STRENGTH

        strength = self._image_strength
        if mode is ImageMode.IMAGE_STRENGTH and strength is None:
            strength = DEFAULT_IMAGE_STRENGTH

        # mode conflicts are rejected by ImageToImage itself
        return ImageToImage(
            init_image=self._init_image,
            init_image_mode=mode,
            image_strength=strength,
            step_schedule_start=self._step_schedule_start,
            step_schedule_end=self._step_schedule_end,
            **fields,
        )

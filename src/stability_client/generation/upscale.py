"""Image upscaling (``POST /v1/generation/{engine}/image-to-image/upscale``).

Usage Example
-------------
    from stability_client import UpscaleEngine, UpscalerBuilder

    request = UpscalerBuilder().image("1024_image.png").height(2048).build()
    response = request.generate(UpscaleEngine.ESRGAN_V1_X2PLUS)
    response.artifacts[0].save("2048_image.png")

Only one of ``height`` and ``width`` may be given; the other dimension
follows from the aspect ratio. Prompts, cfg_scale, steps and seed are only
understood by the latent upscaler and are left out of the body for ESRGAN.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

import httpx
from pydantic import ValidationInfo, field_validator, model_validator

from stability_client.api.models import ImageResponse
from stability_client.core.config import StabilitySettings
from stability_client.core.exceptions import ImageBuilderError
from stability_client.core.multipart import MultipartFormData

from . import validators
from .base import BuilderBase, RequestModel, add_text_prompts, coerce_enum, send_multipart
from .common import (
    DEFAULT_CFG_SCALE,
    DEFAULT_SEED,
    DEFAULT_STEPS,
    IMAGE_TO_IMAGE_PATH,
    UPSCALE_PATH,
    TextPrompt,
    format_number,
    generation_path,
)

logger = logging.getLogger(__name__)


class UpscaleEngine(str, Enum):
    ESRGAN_V1_X2PLUS = "esrgan-v1-x2plus"
    STABLE_DIFFUSION_X4_LATENT_UPSCALER = "stable-diffusion-x4-latent-upscaler"

    @property
    def accepts_prompts(self) -> bool:
        """Whether the engine takes prompts, cfg_scale, steps and seed."""
        return self is UpscaleEngine.STABLE_DIFFUSION_X4_LATENT_UPSCALER


class Upscaler(RequestModel):
    """A validated upscale request. Create it with ``UpscalerBuilder``."""

    image: Path
    height: int | None = None
    width: int | None = None
    text_prompts: tuple[TextPrompt, ...] = ()
    cfg_scale: validators.CfgScale
    seed: validators.Seed
    steps: validators.Steps

    @field_validator("height", "width")
    @classmethod
    def check_dimension(cls, value: int | None, info: ValidationInfo) -> int | None:
        if value is None:
            return value
        return validators.validate_upscale_dimension(info.field_name, value)

    @model_validator(mode="after")
    def check_single_dimension(self) -> Upscaler:
        if self.height is not None and self.width is not None:
            raise ImageBuilderError("height and width are mutually exclusive")
        return self

    @classmethod
    def builder(cls) -> UpscalerBuilder:
        return UpscalerBuilder()

    def to_multipart_form_data(self, engine: UpscaleEngine) -> MultipartFormData:
        """Encode the request for ``engine`` as a closed multipart body.

        Raises:
            ValueError: If the image path has no extension
            OSError: If the image cannot be read
        """
        latent = engine.accepts_prompts
        form = MultipartFormData()

        if latent:
            add_text_prompts(form, self.text_prompts)
        if self.height is not None:
            form.add_text("height", str(self.height))
        if self.width is not None:
            form.add_text("width", str(self.width))
        if latent:
            form.add_text("cfg_scale", format_number(self.cfg_scale))
            form.add_text("steps", str(self.steps))
            form.add_text("seed", str(self.seed))
        elif self.text_prompts:
            logger.debug(f"{engine.value} does not take prompts; omitting {len(self.text_prompts)} prompt(s)")

        form.add_file("image", self.image)
        form.end_body()
        return form

    def generate(
        self,
        engine: UpscaleEngine | str,
        settings: StabilitySettings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> ImageResponse:
        """Upscale the image with ``engine``.

        Args:
            engine: One of ``UpscaleEngine`` (or its string value)
            settings: Explicit settings; read from the environment when omitted
            transport: Optional httpx transport replacing the network
        """
        engine = coerce_enum(UpscaleEngine, engine.lower() if isinstance(engine, str) else engine, "engine")
        form = self.to_multipart_form_data(engine)
        return send_multipart(
            generation_path(engine.value, IMAGE_TO_IMAGE_PATH, UPSCALE_PATH),
            form,
            settings=settings,
            transport=transport,
        )


class UpscalerBuilder(BuilderBase):
    """Builder for ``Upscaler``. ``image`` is mandatory."""

    def __init__(self) -> None:
        super().__init__()
        self._image: Path | None = None
        self._height: int | None = None
        self._width: int | None = None

    def image(self, path: str | Path) -> UpscalerBuilder:
        self._image = Path(path)
        return self

    def height(self, height: int) -> UpscalerBuilder:
        """Target height in pixels, at least 512. Excludes ``width``."""
        self._height = validators.validate_upscale_dimension("height", height)
        return self

    def width(self, width: int) -> UpscalerBuilder:
        """Target width in pixels, at least 512. Excludes ``height``."""
        self._width = validators.validate_upscale_dimension("width", width)
        return self

    def build(self) -> Upscaler:
        """Return the finished request.

        Raises:
            ImageBuilderError: If no image is set or both height and width are set
        """
        if self._image is None:
            raise ImageBuilderError("image path must be set")

        return Upscaler(
            image=self._image,
            height=self._height,
            width=self._width,
            text_prompts=tuple(self._text_prompts),
            cfg_scale=self._cfg_scale if self._cfg_scale is not None else DEFAULT_CFG_SCALE,
            seed=self._seed if self._seed is not None else DEFAULT_SEED,
            steps=self._steps if self._steps is not None else DEFAULT_STEPS,
        )

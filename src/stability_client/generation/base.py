"""Base classes for the generation request builders.

Builder Pattern
---------------
Every endpoint has a builder that accumulates optional parameters through
chainable setters and a frozen request model produced by ``build()``:

    request = (
        TextToImageBuilder()
        .height(1024)
        .style_preset(StylePreset.DIGITAL_ART)
        .text_prompt("a castle")
        .build()
    )
    response = request.generate("stable-diffusion-xl-1024-v1-0")

Setters validate their own argument immediately and raise
``ImageBuilderError`` on a bad value. Checks that involve several fields
(mandatory fields, mutually exclusive fields) run in ``build()``, which is
also where the server defaults are filled in. A builder only ever hands out
a complete request; partially configured state is never observable as a
request object.

Hierarchy
---------
- ``BuilderBase``: prompts, cfg_scale, seed, steps (shared with upscaling)
- ``DiffusionBuilderBase``: adds sampler, clip guidance, samples, style
  preset and extras (text-to-image, image-to-image, masking)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from stability_client.api.models import ImageResponse, decode_json
from stability_client.core.client import ACCEPT, APPLICATION_JSON, CONTENT_TYPE, POST, ClientBuilder
from stability_client.core.config import StabilitySettings
from stability_client.core.exceptions import ImageBuilderError
from stability_client.core.multipart import MultipartFormData

from . import validators
from .common import (
    DEFAULT_CFG_SCALE,
    DEFAULT_SAMPLES,
    DEFAULT_SEED,
    DEFAULT_STEPS,
    ClipGuidancePreset,
    Sampler,
    StylePreset,
    TextPrompt,
    format_number,
)

logger = logging.getLogger(__name__)


class RequestModel(BaseModel):
    """Frozen base for finished requests.

    The request models enforce the same rules as their builders, so a
    directly constructed request is either complete and valid or not created
    at all. Failures surface as ``ImageBuilderError`` rather than pydantic's
    ``ValidationError``.
    """

    model_config = ConfigDict(frozen=True)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            for error in e.errors():
                cause = error.get("ctx", {}).get("error")
                if isinstance(cause, ImageBuilderError):
                    raise cause from e
            raise ImageBuilderError(f"invalid {type(self).__name__}: {e}") from e


class BuilderBase(ABC):
    """Setters common to every generation builder."""

    def __init__(self) -> None:
        self._text_prompts: list[TextPrompt] = []
        self._cfg_scale: float | None = None
        self._seed: int | None = None
        self._steps: int | None = None

    def text_prompt(self, text: str, weight: float = 1.0) -> BuilderBase:
        """Add a prompt. Call repeatedly to add weighted or negative prompts."""
        try:
            prompt = TextPrompt(text=text, weight=weight)
        except ValidationError as e:
            raise ImageBuilderError(f"invalid text prompt {text!r} with weight {weight!r}", weight) from e
        self._text_prompts.append(prompt)
        return self

    def cfg_scale(self, cfg_scale: float) -> BuilderBase:
        """How strictly the diffusion process adheres to the prompt text.

        Higher values keep the image closer to the prompt. Must not exceed 35.
        """
        self._cfg_scale = validators.validate_cfg_scale(cfg_scale)
        return self

    def seed(self, seed: int) -> BuilderBase:
        """Random noise seed; 0 lets the server pick one."""
        self._seed = validators.validate_seed(seed)
        return self

    def steps(self, steps: int) -> BuilderBase:
        """Number of diffusion steps (10-150)."""
        self._steps = validators.validate_steps(steps)
        return self

    @abstractmethod
    def build(self) -> RequestModel:
        """Validate cross-field rules, apply defaults and return the request."""
        pass


class DiffusionBuilderBase(BuilderBase):
    """Setters shared by the text-to-image, image-to-image and masking builders."""

    def __init__(self) -> None:
        super().__init__()
        self._clip_guidance_preset: ClipGuidancePreset | None = None
        self._sampler: Sampler | None = None
        self._samples: int | None = None
        self._style_preset: StylePreset | None = None
        self._extras: dict[str, str] = {}

    def clip_guidance_preset(self, clip_guidance_preset: ClipGuidancePreset | str) -> DiffusionBuilderBase:
        self._clip_guidance_preset = coerce_enum(ClipGuidancePreset, clip_guidance_preset, "clip_guidance_preset")
        return self

    def sampler(self, sampler: Sampler | str) -> DiffusionBuilderBase:
        """Sampler used by the diffusion process; the server picks one when unset."""
        self._sampler = coerce_enum(Sampler, sampler, "sampler")
        return self

    def samples(self, samples: int) -> DiffusionBuilderBase:
        """Number of images to generate (1-10)."""
        self._samples = validators.validate_samples(samples)
        return self

    def style_preset(self, style_preset: StylePreset | str) -> DiffusionBuilderBase:
        self._style_preset = coerce_enum(StylePreset, style_preset, "style_preset")
        return self

    def extras(self, extras: dict[str, Any]) -> DiffusionBuilderBase:
        """Extra, engine-specific parameters passed through unchanged."""
        self._extras = {str(k): str(v) for k, v in extras.items()}
        return self

    def _common_fields(self) -> dict[str, Any]:
        """Check the mandatory shared fields and return them with defaults applied."""
        if self._style_preset is None:
            raise ImageBuilderError("a style preset must be set")
        validators.require_text_prompts(self._text_prompts)

        return {
            "text_prompts": tuple(self._text_prompts),
            "cfg_scale": self._cfg_scale if self._cfg_scale is not None else DEFAULT_CFG_SCALE,
            "clip_guidance_preset": self._clip_guidance_preset,
            "sampler": self._sampler,
            "samples": self._samples if self._samples is not None else DEFAULT_SAMPLES,
            "seed": self._seed if self._seed is not None else DEFAULT_SEED,
            "steps": self._steps if self._steps is not None else DEFAULT_STEPS,
            "style_preset": self._style_preset,
            "extras": dict(self._extras),
        }


def coerce_enum(enum_type, value, name: str):
    try:
        return enum_type(value)
    except ValueError as e:
        choices = [m.value for m in enum_type]
        raise ImageBuilderError(f"{name} must be one of {choices}, but was {value!r}", value) from e


def add_text_prompts(form: MultipartFormData, prompts: tuple[TextPrompt, ...]) -> None:
    """Append prompts as ``text_prompts[i][text]`` / ``text_prompts[i][weight]`` fields."""
    for i, prompt in enumerate(prompts):
        form.add_text(f"text_prompts[{i}][text]", prompt.text)
        form.add_text(f"text_prompts[{i}][weight]", format_number(prompt.weight))


def send_multipart(
    path: str,
    form: MultipartFormData,
    settings: StabilitySettings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> ImageResponse:
    """POST a closed multipart body to a generation route and decode the artifacts."""
    client = (
        ClientBuilder(settings=settings, transport=transport)
        .method(POST)
        .path(path)
        .header(ACCEPT, APPLICATION_JSON)
        .header(CONTENT_TYPE, form.content_type)
        .build()
    )
    logger.info(f"Submitting multipart generation request to {path}")
    return decode_json(ImageResponse, client.send(bytes(form)))

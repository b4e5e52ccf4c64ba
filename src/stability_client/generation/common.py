"""Types shared by all generation endpoints.

The enums mirror the values accepted by the API verbatim. ``Sampler`` and
``ClipGuidancePreset`` have no "none" member: an unset value is ``None`` on
the request model and the field is left out of the payload entirely.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

GENERATION_PATH = "/generation"
TEXT_TO_IMAGE_PATH = "/text-to-image"
IMAGE_TO_IMAGE_PATH = "/image-to-image"
MASKING_PATH = "/masking"
UPSCALE_PATH = "/upscale"

DEFAULT_DIMENSION = 1024
DEFAULT_CFG_SCALE = 7
DEFAULT_SAMPLES = 1
DEFAULT_SEED = 0
DEFAULT_STEPS = 50


class ClipGuidancePreset(str, Enum):
    FAST_BLUE = "FAST_BLUE"
    FAST_GREEN = "FAST_GREEN"
    SIMPLE = "SIMPLE"
    SLOW = "SLOW"
    SLOWER = "SLOWER"
    SLOWEST = "SLOWEST"


class Sampler(str, Enum):
    DDIM = "DDIM"
    DDPM = "DDPM"
    K_DPMPP_2M = "K_DPMPP_2M"
    K_DPMPP_2S_ANCESTRAL = "K_DPMPP_2S_ANCESTRAL"
    K_DPMPP_SDE = "K_DPMPP_SDE"
    K_DPM_2 = "K_DPM_2"
    K_DPM_2_ANCESTRAL = "K_DPM_2_ANCESTRAL"
    K_EULER = "K_EULER"
    K_EULER_ANCESTRAL = "K_EULER_ANCESTRAL"
    K_HEUN = "K_HEUN"
    K_LMS = "K_LMS"


class StylePreset(str, Enum):
    THREE_D_MODEL = "3d-model"
    ANALOG_FILM = "analog-film"
    ANIME = "anime"
    CINEMATIC = "cinematic"
    COMIC_BOOK = "comic-book"
    DIGITAL_ART = "digital-art"
    ENHANCE = "enhance"
    FANTASY_ART = "fantasy-art"
    ISOMETRIC = "isometric"
    LINE_ART = "line-art"
    LOW_POLY = "low-poly"
    MODELING_COMPOUND = "modeling-compound"
    NEON_PUNK = "neon-punk"
    ORIGAMI = "origami"
    PHOTOGRAPHIC = "photographic"
    PIXEL_ART = "pixel-art"
    TILE_TEXTURE = "tile-texture"


class TextPrompt(BaseModel):
    """A weighted prompt. Negative weights steer the image away from the text."""

    model_config = ConfigDict(frozen=True)

    text: str
    weight: float = 1.0


def generation_path(engine: str, *routes: str) -> str:
    """Build ``/generation/<engine>/<routes...>`` with the engine id lower-cased."""
    return f"{GENERATION_PATH}/{engine.lower()}{''.join(routes)}"


def format_number(value: float) -> str:
    """Render a number for a form field (``1.0`` -> ``"1"``, ``0.35`` -> ``"0.35"``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

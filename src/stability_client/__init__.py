"""Stability Client - typed Python client for the Stability image-generation REST API."""

__version__ = "0.1.0"

import logging

from stability_client.core import (
    ApiError,
    Client,
    ClientBuilder,
    ConfigurationError,
    DecodeError,
    ImageBuilderError,
    MultipartFormData,
    StabilityError,
    StabilitySettings,
    get_settings,
)
from stability_client.api.models import (
    ApiErrorBody,
    Balance,
    Engine,
    Image,
    ImageResponse,
    Organization,
    User,
)
from stability_client.api.engines import list_engines
from stability_client.api.user import get_user_account, get_user_balance
from stability_client.generation import (
    ClipGuidancePreset,
    ImageMode,
    ImageToImage,
    ImageToImageBuilder,
    Masker,
    MaskerBuilder,
    MaskSource,
    Sampler,
    StylePreset,
    TextPrompt,
    TextToImage,
    TextToImageBuilder,
    UpscaleEngine,
    Upscaler,
    UpscalerBuilder,
)
from stability_client.logging_config import configure_logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ApiError",
    "ApiErrorBody",
    "Balance",
    "Client",
    "ClientBuilder",
    "ClipGuidancePreset",
    "ConfigurationError",
    "DecodeError",
    "Engine",
    "Image",
    "ImageBuilderError",
    "ImageMode",
    "ImageResponse",
    "ImageToImage",
    "ImageToImageBuilder",
    "Masker",
    "MaskerBuilder",
    "MaskSource",
    "MultipartFormData",
    "Organization",
    "Sampler",
    "StabilityError",
    "StabilitySettings",
    "StylePreset",
    "TextPrompt",
    "TextToImage",
    "TextToImageBuilder",
    "UpscaleEngine",
    "Upscaler",
    "UpscalerBuilder",
    "User",
    "configure_logging",
    "get_settings",
    "get_user_account",
    "get_user_balance",
    "list_engines",
]

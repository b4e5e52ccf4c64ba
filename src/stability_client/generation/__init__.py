"""Request builders for the generation endpoints.

- ``TextToImageBuilder`` -> ``TextToImage`` (JSON body)
- ``ImageToImageBuilder`` -> ``ImageToImage`` (multipart body)
- ``MaskerBuilder`` -> ``Masker`` (multipart body)
- ``UpscalerBuilder`` -> ``Upscaler`` (multipart body)
"""

from stability_client.generation.common import ClipGuidancePreset, Sampler, StylePreset, TextPrompt
from stability_client.generation.image_to_image import ImageMode, ImageToImage, ImageToImageBuilder
from stability_client.generation.masking import Masker, MaskerBuilder, MaskSource
from stability_client.generation.text_to_image import TextToImage, TextToImageBuilder
from stability_client.generation.upscale import UpscaleEngine, Upscaler, UpscalerBuilder

__all__ = [
    "ClipGuidancePreset",
    "ImageMode",
    "ImageToImage",
    "ImageToImageBuilder",
    "Masker",
    "MaskerBuilder",
    "MaskSource",
    "Sampler",
    "StylePreset",
    "TextPrompt",
    "TextToImage",
    "TextToImageBuilder",
    "UpscaleEngine",
    "Upscaler",
    "UpscalerBuilder",
]

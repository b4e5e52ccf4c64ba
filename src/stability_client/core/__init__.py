"""Core plumbing shared by every endpoint.

- **config**: ``StabilitySettings`` loaded from ``STABILITY_*`` environment
  variables (Pydantic Settings)
- **exceptions**: the ``StabilityError`` hierarchy
- **multipart**: ``MultipartFormData`` body encoder
- **client**: ``ClientBuilder`` / ``Client``, one request per connection

Import order matters: ``client`` imports ``stability_client.api.models``,
which imports ``exceptions``, so ``exceptions`` must be loaded first.
"""

from stability_client.core.exceptions import (  # isort: skip
    ApiError,
    ConfigurationError,
    DecodeError,
    ImageBuilderError,
    StabilityError,
)
from stability_client.core.config import StabilitySettings, get_settings
from stability_client.core.multipart import MultipartFormData
from stability_client.core.client import Client, ClientBuilder

__all__ = [
    "ApiError",
    "Client",
    "ClientBuilder",
    "ConfigurationError",
    "DecodeError",
    "ImageBuilderError",
    "MultipartFormData",
    "StabilityError",
    "StabilitySettings",
    "get_settings",
]

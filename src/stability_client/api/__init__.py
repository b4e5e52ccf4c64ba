"""REST API surface: response models and the account/engine endpoints.

Only the models are imported here; ``engines`` and ``user`` depend on
``stability_client.core.client``, which itself imports the models.
"""

from stability_client.api.models import (
    ApiErrorBody,
    Balance,
    Engine,
    Image,
    ImageResponse,
    Organization,
    User,
)

__all__ = [
    "ApiErrorBody",
    "Balance",
    "Engine",
    "Image",
    "ImageResponse",
    "Organization",
    "User",
]

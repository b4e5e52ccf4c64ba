"""Engine listing (``GET /v1/engines/list``)."""

from __future__ import annotations

import logging

import httpx

from stability_client.core.client import ACCEPT, APPLICATION_JSON, GET, ClientBuilder
from stability_client.core.config import StabilitySettings

from .models import Engine, decode_json

logger = logging.getLogger(__name__)

LIST_PATH = "/engines/list"


def list_engines(
    settings: StabilitySettings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> list[Engine]:
    """List all engines available to the organization/user of the API key.

    Raises:
        ConfigurationError: If no API key is configured
        ApiError: If the API rejects the request
        DecodeError: If the response is not a list of engines
    """
    client = (
        ClientBuilder(settings=settings, transport=transport)
        .method(GET)
        .path(LIST_PATH)
        .header(ACCEPT, APPLICATION_JSON)
        .build()
    )
    engines = decode_json(list[Engine], client.send())
    logger.debug(f"Found {len(engines)} engines")
    return engines

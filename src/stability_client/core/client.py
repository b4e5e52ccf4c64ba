"""One-shot HTTP client for the Stability REST API.

A request is described with ``ClientBuilder`` and executed by the resulting
``Client``:

    client = (
        ClientBuilder()
        .method(POST)
        .path("/generation/stable-diffusion-xl-1024-v1-0/text-to-image")
        .header(ACCEPT, APPLICATION_JSON)
        .header(CONTENT_TYPE, APPLICATION_JSON)
        .build()
    )
    raw = client.send(payload)

The builder reads the API key when it is constructed and sets the
``authorization`` and ``host`` headers. ``Client.send`` opens a fresh
connection, performs exactly one exchange, buffers the whole body and closes
the connection again. A 200 response returns the body bytes; any other
status raises ``ApiError``. Connection and TLS failures propagate as the
``httpx`` exceptions that caused them. There are no retries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from stability_client.api.models import ApiErrorBody

from .config import StabilitySettings, get_settings
from .exceptions import ApiError, ConfigurationError

logger = logging.getLogger(__name__)

DELETE = "DELETE"
GET = "GET"
POST = "POST"
SUPPORTED_METHODS = (DELETE, GET, POST)

ACCEPT = "accept"
AUTHORIZATION = "authorization"
CONTENT_TYPE = "content-type"
HOST = "host"

APPLICATION_JSON = "application/json"
IMAGE_PNG = "image/png"


@dataclass(frozen=True)
class Client:
    """A fully assembled request, ready to be sent once.

    Attributes:
        url: Absolute request URL
        method: HTTP method
        headers: Ordered header pairs
        timeout: Request timeout in seconds (None for no timeout)
        transport: Optional httpx transport replacing the network layer
    """

    url: str
    method: str
    headers: tuple[tuple[str, str], ...]
    timeout: float | None = None
    transport: httpx.BaseTransport | None = None

    def send(self, content: bytes | None = None) -> bytes:
        """Perform the request and return the raw body of a 200 response.

        Args:
            content: Request body, or None for an empty body

        Returns:
            Response body bytes

        Raises:
            ApiError: If the response status is not 200
            httpx.TransportError: If the connection or TLS handshake fails
        """
        logger.debug(f"{self.method} {self.url} ({len(content or b'')} bytes)")

        with httpx.Client(transport=self.transport, timeout=self.timeout) as http:
            response = http.request(
                self.method,
                self.url,
                headers=list(self.headers),
                content=content,
            )
            body = response.read()

        logger.debug(f"{self.method} {self.url} -> {response.status_code}")

        if response.status_code != 200:
            raise _api_error(response.status_code, body)

        return body


def _api_error(status_code: int, body: bytes) -> ApiError:
    try:
        error = ApiErrorBody.model_validate_json(body)
    except ValidationError:
        error = None

    text = body.decode("utf-8", errors="replace")
    logger.warning(f"Stability API returned {status_code}: {text[:500]}")
    return ApiError(status_code, error=error, body=text)


class ClientBuilder:
    """Fluent builder for ``Client``.

    Every setter returns the builder so calls can be chained. The API key is
    read when the builder is created, so a missing key fails here rather than
    at send time.

    Args:
        settings: Explicit settings; loaded from the environment when omitted
        transport: Optional httpx transport, mainly for tests

    Raises:
        ConfigurationError: If no API key is configured
    """

    def __init__(
        self,
        settings: StabilitySettings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.transport = transport
        self._url: str | None = None
        self._method: str | None = None
        self._headers: list[tuple[str, str]] = [
            (HOST, self.settings.authority),
            (AUTHORIZATION, f"Bearer {self.settings.api_key}"),
        ]

    def path(self, path: str) -> ClientBuilder:
        """Set the route, relative to the versioned base URL (e.g. '/user/account')."""
        if not path.startswith("/"):
            path = f"/{path}"
        self._url = f"{self.settings.versioned_url}{path}"
        return self

    def method(self, method: str) -> ClientBuilder:
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise ConfigurationError(f"unsupported HTTP method: {method}")
        self._method = method
        return self

    def header(self, name: str, value: str) -> ClientBuilder:
        self._headers.append((name.lower(), value))
        return self

    def build(self) -> Client:
        """Freeze the builder into a ``Client``.

        Raises:
            ConfigurationError: If no path was set
        """
        if self._url is None:
            raise ConfigurationError("url is not set")

        return Client(
            url=self._url,
            method=self._method or GET,
            headers=tuple(self._headers),
            timeout=self.settings.timeout,
            transport=self.transport,
        )

"""Shared pytest fixtures for stability_client tests."""

import base64
import io
import json
import re
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator

import httpx
import pytest
from PIL import Image

from stability_client.core.config import StabilitySettings

TEST_API_KEY = "sk-test-key"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, temp_dir: Path) -> None:
    """Run every test with a known API key and no stray .env file.

    The working directory is switched to a temporary directory so a
    developer's .env never leaks into the tests.
    """
    for var in ("STABILITY_BASE_URL", "STABILITY_API_VERSION", "STABILITY_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("STABILITY_API_KEY", TEST_API_KEY)
    monkeypatch.chdir(temp_dir)


@pytest.fixture
def test_settings() -> StabilitySettings:
    """Explicit settings that ignore the environment's .env file.

    Returns:
        StabilitySettings with a fake key and the default endpoint
    """
    return StabilitySettings(api_key=TEST_API_KEY, _env_file=None)


@pytest.fixture
def png_bytes() -> bytes:
    """A tiny valid PNG image.

    Returns:
        Encoded PNG bytes of an 8x8 red square
    """
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(255, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def init_image(temp_dir: Path, png_bytes: bytes) -> Path:
    """An init image on disk.

    Returns:
        Path to a PNG file
    """
    path = temp_dir / "init_image.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def mask_image(temp_dir: Path, png_bytes: bytes) -> Path:
    """A mask image on disk.

    Returns:
        Path to a PNG file
    """
    path = temp_dir / "mask_image.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def artifacts_body(png_bytes: bytes) -> dict:
    """A successful generation response with two artifacts.

    Returns:
        Dict in the shape returned by the generation endpoints
    """
    encoded = base64.b64encode(png_bytes).decode("ascii")
    return {
        "artifacts": [
            {"base64": encoded, "finishReason": "SUCCESS", "seed": 1234},
            {"base64": encoded, "finishReason": "SUCCESS", "seed": 5678},
        ]
    }


class RecordingTransport(httpx.MockTransport):
    """httpx mock transport that answers with a fixed response and records requests.

    Attributes:
        requests: Every request the transport received, in order
    """

    def __init__(self, status_code: int = 200, json_body=None, content: bytes = b"", headers=None):
        self.requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            request.read()
            self.requests.append(request)
            if json_body is not None:
                return httpx.Response(status_code, content=json.dumps(json_body).encode(), headers=headers)
            return httpx.Response(status_code, content=content, headers=headers)

        super().__init__(handler)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def mock_transport() -> Callable[..., RecordingTransport]:
    """Factory for RecordingTransport instances.

    Returns:
        Callable taking (status_code, json_body, content, headers)
    """
    return RecordingTransport


def _parse_form(body: bytes, boundary: str) -> list[tuple[str, bytes]]:
    delimiter = f"--{boundary}".encode()
    parts = body.split(delimiter)
    fields = []
    for part in parts[1:-1]:
        headers, _, content = part[2:].partition(b"\r\n\r\n")
        name = re.search(rb'; name="([^"]+)"', headers).group(1).decode()
        fields.append((name, content[:-2]))
    return fields


@pytest.fixture
def parse_form() -> Callable[[bytes, str], list[tuple[str, bytes]]]:
    """Split a multipart body into (field name, raw value) pairs in wire order.

    Returns:
        Callable taking (body, boundary)
    """
    return _parse_form

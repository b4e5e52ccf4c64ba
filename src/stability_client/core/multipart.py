"""multipart/form-data body encoder.

The image endpoints take their parameters as form fields and their source
images as file parts. ``MultipartFormData`` accumulates those parts into a
single in-memory body in the order they are added:

    form = MultipartFormData()
    form.add_text("cfg_scale", "7")
    form.add_file("init_image", "init.png")
    form.end_body()

    headers = {"Content-Type": form.content_type}
    body = bytes(form.body)

Each body gets its own boundary, made of a fixed prefix followed by a random
64-bit integer in decimal.
"""

import logging
import mimetypes
import random
from pathlib import Path

logger = logging.getLogger(__name__)

BOUNDARY_PREFIX = "------------------------"
MULTIPART_FORM_DATA = "multipart/form-data"

CRLF = b"\r\n"
FORBIDDEN_HEADER_CHARS = ('"', "\r", "\n")


def generate_boundary() -> str:
    """Return a fresh boundary token."""
    return f"{BOUNDARY_PREFIX}{random.getrandbits(64)}"


class MultipartFormData:
    """Accumulator for a multipart/form-data request body.

    Attributes:
        boundary: Token delimiting the parts of this body
        body: Encoded bytes written so far
    """

    def __init__(self, boundary: str | None = None) -> None:
        self.boundary = boundary or generate_boundary()
        self.body = bytearray()
        self._closed = False

    @property
    def content_type(self) -> str:
        """Value for the Content-Type header of a request carrying this body."""
        return f"{MULTIPART_FORM_DATA}; boundary={self.boundary}"

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("multipart body has already been closed")

    def _check_header_value(self, kind: str, value: str) -> None:
        if any(char in value for char in FORBIDDEN_HEADER_CHARS):
            raise ValueError(f"multipart {kind} must not contain quotes or line breaks: {value!r}")

    def _write_part_header(self, disposition: str, content_type: str | None = None) -> None:
        self.body += f"--{self.boundary}".encode() + CRLF
        self.body += f"Content-Disposition: form-data; {disposition}".encode() + CRLF
        if content_type:
            self.body += f"Content-Type: {content_type}".encode() + CRLF
        self.body += CRLF

    def add_text(self, name: str, value: str) -> None:
        """Append a text field.

        Args:
            name: Form field name
            value: Field value, encoded as UTF-8

        Raises:
            ValueError: If the name contains a quote or line break
        """
        self._check_open()
        self._check_header_value("field name", name)
        self._write_part_header(f'name="{name}"')
        self.body += str(value).encode("utf-8") + CRLF

    def add_file(self, name: str, path: str | Path) -> None:
        """Append a file field read from disk.

        The part's Content-Type is guessed from the file extension.

        Args:
            name: Form field name
            path: File to embed

        Raises:
            ValueError: If the path has no extension, or the name or file
                name contains a quote or line break
            OSError: If the file cannot be read
        """
        self._check_open()
        self._check_header_value("field name", name)
        path = Path(path)
        self._check_header_value("filename", path.name)
        if not path.suffix:
            raise ValueError(f"cannot determine content type of {path}: no file extension")

        content_type, _ = mimetypes.guess_type(path.name)
        content_type = content_type or "application/octet-stream"
        data = path.read_bytes()

        self._write_part_header(f'name="{name}"; filename="{path.name}"', content_type)
        self.body += data + CRLF
        logger.debug(f"Added file part {name!r} ({path.name}, {content_type}, {len(data)} bytes)")

    def end_body(self) -> None:
        """Write the closing boundary. Must be called exactly once, after all parts."""
        self._check_open()
        self.body += f"--{self.boundary}--".encode() + CRLF
        self._closed = True

    def __bytes__(self) -> bytes:
        return bytes(self.body)

"""Image encoding for inline-data requests.

Uploaded images travel to the model as base64 inline data. This module turns
an upload into an :class:`ImageBlob` and an ImageBlob into an
:class:`EncodedImage`.

The MIME type is always the one declared by the source (the browser upload,
or the file extension for files read from disk). It is never sniffed from the
image bytes.
"""

import base64
import logging
import mimetypes
from pathlib import Path

from .models import EncodedImage, ImageBlob

logger = logging.getLogger(__name__)

mimetypes.add_type("image/webp", ".webp")


def guess_mime_type(path: str | Path) -> str | None:
    """Return the MIME type declared by a file's extension, if any."""
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type


def read_image(path: str | Path, mime_type: str | None = None) -> ImageBlob:
    """Read an image file from disk into an ImageBlob.

    Args:
        path: Path to the image file
        mime_type: Declared MIME type; when omitted it is taken from the extension

    Returns:
        ImageBlob with the file's bytes

    Raises:
        OSError: If the file cannot be read
    """
    path = Path(path)
    data = path.read_bytes()
    declared = mime_type or guess_mime_type(path) or "application/octet-stream"
    logger.debug(f"Read {len(data)} bytes from {path.name} ({declared})")
    return ImageBlob(data=data, mime_type=declared, filename=path.name)


def encode_image(blob: ImageBlob) -> EncodedImage:
    """Encode an ImageBlob as base64, preserving its declared MIME type.

    Args:
        blob: Source image

    Returns:
        EncodedImage holding the base64 text (no data-URL prefix)
    """
    encoded = base64.b64encode(blob.data).decode("ascii")
    return EncodedImage(data=encoded, mime_type=blob.mime_type)

"""Validation utilities for uploads and prompts.

Everything here runs before a generation run starts, so a failure never
reaches the network layer. Messages are shown to the user as-is.
"""

import logging

from varigen.core.config import VarigenConfig
from varigen.core.errors import ValidationError
from varigen.core.models import ImageBlob

logger = logging.getLogger(__name__)

_MIME_LABELS = {
    "image/png": "PNG",
    "image/jpeg": "JPG",
    "image/webp": "WEBP",
}


def describe_allowed_types(allowed_mime_types: list[str]) -> str:
    """Human-readable list of accepted types, e.g. ``PNG, JPG, or WEBP``."""
    labels = [_MIME_LABELS.get(m, m) for m in allowed_mime_types]
    if len(labels) <= 1:
        return "".join(labels)
    return f"{', '.join(labels[:-1])}, or {labels[-1]}"


def validate_upload_size(size: int, max_bytes: int) -> None:
    """Reject uploads larger than ``max_bytes``.

    The ceiling is inclusive: ``size == max_bytes`` is accepted.

    Raises:
        ValidationError: If the upload is too large
    """
    if size > max_bytes:
        max_mb = max_bytes // (1024 * 1024)
        raise ValidationError(f"Image size cannot exceed {max_mb}MB.")


def validate_mime_type(mime_type: str | None, allowed_mime_types: list[str]) -> None:
    """Reject uploads whose declared type is not on the whitelist.

    Raises:
        ValidationError: If the MIME type is missing or not allowed
    """
    if not mime_type or mime_type.lower() not in allowed_mime_types:
        raise ValidationError(
            f"Unsupported image type ({mime_type or 'unknown'}). "
            f"Please upload a {describe_allowed_types(allowed_mime_types)} file."
        )


def validate_upload(blob: ImageBlob, config: VarigenConfig) -> None:
    """Validate an uploaded image against the configured limits.

    Args:
        blob: Uploaded image
        config: Configuration holding the size ceiling and type whitelist

    Raises:
        ValidationError: If the upload is too large or of an unsupported type
    """
    validate_upload_size(blob.size, config.max_upload_bytes)
    validate_mime_type(blob.mime_type, config.allowed_mime_types)
    logger.debug(f"Upload accepted: {blob.filename} ({blob.size} bytes, {blob.mime_type})")

"""Validation utilities for Stencil Studio uploads and generated images."""

import io
import logging
import struct
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from stencilstudio.core.config import config
from stencilstudio.core.errors import EmptyResultError, ValidationError
from stencilstudio.core.generation_client import EMPTY_RESULT_MESSAGE

from .models import SourceImage

logger = logging.getLogger(__name__)

# Pillow format name -> MIME type accepted by the image service
FORMAT_MIME_TYPES = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
}

READ_ERROR_MESSAGE = "Failed to read the image file."

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

__all__ = [
    "FORMAT_MIME_TYPES",
    "ValidationError",
    "detect_mime_type",
    "ensure_png",
    "load_source_image",
    "read_source_image",
    "validate_upload_size",
]


def validate_upload_size(size: int, max_bytes: int | None = None) -> None:
    """Reject uploads larger than the configured limit.

    Args:
        size: Upload size in bytes
        max_bytes: Limit in bytes (default: config.max_upload_bytes)

    Raises:
        ValidationError: If the upload is too large
    """
    max_bytes = max_bytes or config.max_upload_bytes
    if size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        limit_display = f"{limit_mb:g}MB"
        logger.warning(f"Upload rejected: {size} bytes exceeds {max_bytes}")
        raise ValidationError(f"Image size should be less than {limit_display}.")


def detect_mime_type(data: bytes) -> str:
    """Identify the image type from its contents.

    The file extension and browser-reported type are not trusted; Pillow
    reads the header and verifies the file structure.

    Args:
        data: Raw image bytes

    Returns:
        One of image/png, image/jpeg, image/webp

    Raises:
        ValidationError: If the data is not a readable PNG, JPEG or WEBP image
    """
    if not data:
        raise ValidationError(READ_ERROR_MESSAGE)

    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = image.format
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError, struct.error) as e:
        logger.warning(f"Unreadable image upload: {e}")
        raise ValidationError(READ_ERROR_MESSAGE) from e

    mime_type = FORMAT_MIME_TYPES.get(image_format or "")
    if mime_type is None:
        raise ValidationError(
            f"Unsupported image format ({image_format}). Please upload a PNG, JPG, or WEBP image."
        )
    return mime_type


def load_source_image(data: bytes, filename: str, max_bytes: int | None = None) -> SourceImage:
    """Build a SourceImage from bytes already in memory.

    Raises:
        ValidationError: If the image is too large, unreadable or unsupported
    """
    validate_upload_size(len(data), max_bytes)
    mime_type = detect_mime_type(data)
    return SourceImage(data=data, mime_type=mime_type, filename=filename)


def read_source_image(path: str | Path, max_bytes: int | None = None) -> SourceImage:
    """Read an uploaded file from disk into a SourceImage.

    The size limit is checked against the file size before the contents
    are read.

    Args:
        path: Path of the uploaded file
        max_bytes: Size limit (default: config.max_upload_bytes)

    Raises:
        ValidationError: If the file is missing, too large, unreadable or unsupported
    """
    path = Path(path)
    try:
        size = path.stat().st_size
    except OSError as e:
        raise ValidationError(READ_ERROR_MESSAGE) from e

    validate_upload_size(size, max_bytes)

    try:
        data = path.read_bytes()
    except OSError as e:
        raise ValidationError(READ_ERROR_MESSAGE) from e

    return load_source_image(data, path.name, max_bytes)


def ensure_png(data: bytes) -> bytes:
    """Return generated image bytes as PNG.

    PNG data is returned unchanged; any other format Pillow can read is
    re-encoded.

    Raises:
        EmptyResultError: If the data is not a readable image
    """
    if data.startswith(PNG_SIGNATURE):
        return data

    try:
        with Image.open(io.BytesIO(data)) as image:
            source_format = image.format
            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError, struct.error) as e:
        logger.error(f"Generated image could not be decoded: {e}")
        raise EmptyResultError(EMPTY_RESULT_MESSAGE) from e

    logger.info(f"Re-encoded generated {source_format} image as PNG")
    return buffer.getvalue()

"""
Photo preparation for contact photo uploads.

Provides utilities for:
- Reading a local image file
- Optional validation, format conversion and downsizing (Pillow)
- Base64 encoding for the updateContactPhoto request body
"""

import base64
import io
import logging
from pathlib import Path

from PIL import Image

# Photo processing configuration
MAX_PHOTO_SIZE = 5 * 1024 * 1024  # 5MB - Google API limit
MAX_PHOTO_DIMENSION = 2048  # pixels
JPEG_QUALITY = 85

logger = logging.getLogger(__name__)


class PhotoError(Exception):
    """Raised when a photo cannot be read or processed."""

    pass


def read_photo(path: Path | str) -> bytes:
    """
    Read a photo from disk.

    Args:
        path: Path to the image file

    Returns:
        Raw file contents

    Raises:
        PhotoError: If the file cannot be read or is empty
    """
    path = Path(path).expanduser()
    try:
        data = path.read_bytes()
    except OSError as e:
        raise PhotoError(f"Cannot read photo {path}: {e}") from e

    if not data:
        raise PhotoError(f"Photo file is empty: {path}")

    logger.debug(f"Read photo {path}: {len(data)} bytes")
    return data


def process_photo(
    photo_data: bytes,
    max_size: int = MAX_PHOTO_SIZE,
    max_dimension: int = MAX_PHOTO_DIMENSION,
) -> bytes:
    """
    Validate photo data and convert it to a JPEG within the API limits.

    Args:
        photo_data: Raw photo data as bytes
        max_size: Maximum encoded size in bytes (default: 5MB)
        max_dimension: Maximum width/height in pixels (default: 2048)

    Returns:
        JPEG-encoded photo data

    Raises:
        PhotoError: If the data is not an image or cannot be made small enough
    """
    if not photo_data:
        raise PhotoError("Photo data cannot be empty")

    try:
        image = Image.open(io.BytesIO(photo_data))
        image.load()
    except (Image.UnidentifiedImageError, OSError) as e:
        raise PhotoError("Invalid or unsupported image format") from e

    if image.mode not in ("RGB", "L"):
        logger.debug(f"Converting image from {image.mode} to RGB")
        if image.mode == "RGBA":
            # White background for transparency
            background = Image.new("RGB", image.size, (255, 255, 255))
            background.paste(image, mask=image.split()[3])
            image = background
        else:
            image = image.convert("RGB")

    width, height = image.size
    if width > max_dimension or height > max_dimension:
        scale = max_dimension / max(width, height)
        new_size = (max(1, int(width * scale)), max(1, int(height * scale)))
        logger.debug(f"Resizing photo from {width}x{height} to {new_size}")
        image = image.resize(new_size, Image.Resampling.LANCZOS)

    quality = JPEG_QUALITY
    output = io.BytesIO()
    image.save(output, format="JPEG", quality=quality, optimize=True)
    output_data = output.getvalue()

    while len(output_data) > max_size and quality > 20:
        quality -= 5
        output = io.BytesIO()
        image.save(output, format="JPEG", quality=quality, optimize=True)
        output_data = output.getvalue()

    if len(output_data) > max_size:
        raise PhotoError(
            f"Unable to reduce photo size below {max_size} bytes "
            f"(current: {len(output_data)} bytes)"
        )

    logger.debug(f"Processed photo: {len(photo_data)} -> {len(output_data)} bytes")
    return output_data


def encode_photo(photo_data: bytes) -> str:
    """Base64-encode photo bytes for the ``photoBytes`` request field."""
    return base64.b64encode(photo_data).decode("ascii")


def load_photo_for_upload(path: Path | str, optimize: bool = False) -> str:
    """
    Read, optionally process, and encode a photo for upload.

    Args:
        path: Path to the image file
        optimize: Convert to JPEG and shrink to the API limits first

    Returns:
        Base64 string for ``photoBytes``

    Raises:
        PhotoError: If reading or processing fails
    """
    data = read_photo(path)
    if optimize:
        data = process_photo(data)
    return encode_photo(data)

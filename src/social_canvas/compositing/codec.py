"""
Module: compositing.codec

Purpose:
    Decode source bytes into rasters and encode finished canvases into
    compressed JPEG bytes.

Key Functions:
    - decode(): SourceImage -> PIL Image (EXIF orientation applied)
    - encode(): PIL Image + quality -> JPEG bytes
    - jpeg_quality(): Map a (0, 1] quality factor to Pillow's 1-100 scale

Dependencies:
    - PIL: Image I/O
    - core.errors: DecodeFailure, EncodeFailure, InvalidQuality

Used By:
    - batch.orchestrator: Per-item decode and encode
"""

from __future__ import annotations

import logging
import math
from io import BytesIO

from PIL import Image, ImageOps

from social_canvas.core.errors import (
    DecodeFailure,
    EncodeFailure,
    InvalidDimensions,
    InvalidQuality,
)
from social_canvas.core.models.artifacts import SourceImage

logger = logging.getLogger(__name__)

OUTPUT_FORMAT = "JPEG"
OUTPUT_EXTENSION = ".jpg"
OUTPUT_MEDIA_TYPE = "image/jpeg"


def decode(source: SourceImage) -> Image.Image:
    """
    Decode a source into a fully loaded raster.

    The EXIF orientation tag is applied so portrait phone photos come out
    upright. Only the first frame of multi-frame files is used.

    Args:
        source: Source bytes and declared name

    Returns:
        Decoded image, detached from the byte buffer

    Raises:
        DecodeFailure: If the bytes are empty, unreadable or unsupported
        InvalidDimensions: If the decoded image has zero area
    """
    if not source.data:
        raise DecodeFailure(f"{source.name}: no image data", source_name=source.name)

    try:
        with Image.open(BytesIO(source.data)) as opened:
            opened.load()
            fmt = opened.format
            image = ImageOps.exif_transpose(opened)
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise DecodeFailure(f"{source.name}: cannot decode image ({e})", source_name=source.name) from e

    if image.width <= 0 or image.height <= 0:
        raise InvalidDimensions(f"{source.name}: decoded to {image.width}x{image.height}")

    logger.debug(f"Decoded {source.name}: {fmt} {image.mode} {image.width}x{image.height}")
    return image


def jpeg_quality(quality: float) -> int:
    """
    Convert a (0, 1] quality factor to Pillow's integer JPEG quality.

    Raises:
        InvalidQuality: If quality is outside (0, 1]

    Example:
        >>> jpeg_quality(0.9)
        90
    """
    if isinstance(quality, bool) or not isinstance(quality, (int, float)) or not math.isfinite(quality):
        raise InvalidQuality(f"quality must be a number within (0, 1]: {quality!r}")
    if not 0 < quality <= 1:
        raise InvalidQuality(f"quality must be within (0, 1]: {quality!r}")
    return max(1, min(100, int(round(quality * 100))))


def encode(image: Image.Image, quality: float) -> bytes:
    """
    Compress a raster to JPEG bytes.

    Args:
        image: Finished canvas (converted to RGB if needed)
        quality: Quality factor within (0, 1]

    Returns:
        JPEG byte stream

    Raises:
        InvalidQuality: If quality is outside (0, 1]
        EncodeFailure: If the codec rejects the image
    """
    level = jpeg_quality(quality)
    if image.mode != "RGB":
        image = image.convert("RGB")

    buffer = BytesIO()
    try:
        image.save(buffer, format=OUTPUT_FORMAT, quality=level)
    except (OSError, ValueError) as e:
        raise EncodeFailure(f"JPEG encoding failed: {e}") from e
    return buffer.getvalue()

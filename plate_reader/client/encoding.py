from __future__ import annotations

import io
import logging

from PIL import Image

from plate_reader.client.errors import EncodingError

logger = logging.getLogger(__name__)

DEFAULT_JPEG_QUALITY = 80


def encode_jpeg(image: Image.Image, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    """Serialize a Pillow image to JPEG bytes.

    Modes JPEG cannot hold (RGBA, P, ...) are flattened to RGB first.
    """
    try:
        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
        buf = io.BytesIO()
        image.save(buf, format="JPEG", quality=quality)
    except (OSError, ValueError, SystemError, AttributeError) as exc:
        logger.warning("jpeg_encoding_failed", extra={"error": type(exc).__name__})
        raise EncodingError(f"Invalid image data: {exc}") from exc

    data = buf.getvalue()
    if not data:
        raise EncodingError("Invalid image data: encoder produced no bytes")
    return data

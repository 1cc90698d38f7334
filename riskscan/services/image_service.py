"""
Forensic request helpers: base64 / data-URI decoding and image dimension probing.
"""

import base64
import binascii
import io
import logging
from typing import Union

from PIL import Image

logger = logging.getLogger(__name__)


def decode_image_data(data: Union[bytes, str]) -> bytes:
    """
    Accepts raw bytes, a base64 data URI, or bare base64.
    Raises ValueError when the payload cannot be decoded.
    """
    if isinstance(data, bytes):
        return data

    data_str = data.strip()
    if data_str.startswith("data:"):
        try:
            header, data_str = data_str.split(",", 1)
        except ValueError:
            raise ValueError("Invalid data URI")
        if ";base64" not in header:
            raise ValueError("Only base64 data URIs are supported")
        mime_type = header.split(":")[1].split(";")[0]
        if mime_type and not mime_type.startswith("image/"):
            raise ValueError(f"Unsupported data URI type: {mime_type}")

    try:
        content = base64.b64decode(data_str, validate=False)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 payload: {e}")

    if not content:
        raise ValueError("Empty image payload")
    return content


def get_image_size(image_bytes: bytes) -> tuple[int, int]:
    """(width, height) in pixels. Raises ValueError for unreadable images."""
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            return img.size
    except Exception as e:
        logger.warning(f"[IMAGE] Could not read image dimensions: {e}")
        raise ValueError("Invalid image content")

"""
Upload validation for forensic screenshots.

Checks extension, size and content integrity (PIL verify + format sniffing)
before any heuristic or Gemini work is done.
"""

import io
import os
import logging
from typing import Optional

from fastapi import HTTPException
from PIL import Image

from riskscan.config import settings

# Prevent decompression-bomb attacks
Image.MAX_IMAGE_PIXELS = settings.pil_max_image_pixels

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ['.jpg', '.jpeg', '.png', '.webp', '.gif', '.tiff', '.tif', '.bmp']
IMAGE_FORMATS = ['jpg', 'png', 'webp', 'gif', 'tiff', 'bmp', 'mpo']


def validate_image(filename: Optional[str], content: bytes) -> bool:
    """Check extension, size, and content integrity of an uploaded image."""
    ext = os.path.splitext(filename or "")[1].lower()

    if ext and ext not in IMAGE_EXTENSIONS:
        raise HTTPException(status_code=415, detail="Unsupported file format.")

    if len(content) > settings.max_image_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Image too large. Max {settings.max_image_upload_mb}MB allowed."
        )

    try:
        with Image.open(io.BytesIO(content)) as img:
            img.verify()
        with Image.open(io.BytesIO(content)) as img2:
            actual_format = (img2.format or "").lower()
            if actual_format == 'jpeg':
                actual_format = 'jpg'
            if actual_format not in IMAGE_FORMATS:
                raise ValueError(f"Format mismatch: {actual_format}")
    except Exception as e:
        logger.error(f"Corrupted or disguised upload detected ({filename}): {e}")
        raise HTTPException(status_code=400, detail="Invalid file content or format mismatch.")

    return True

"""
Metadata extraction from uploaded screenshots.

Functions:
  - get_exif_data: Flattens IFD0, the Exif sub-IFD, the GPS IFD and PIL 'info' into one dict.
  - extract_metadata: Builds the scan `Metadata` bag from an image's raw bytes.

Extraction never raises: unreadable files produce an empty `Metadata`.
"""

import io
import logging
from typing import Optional

from PIL import Image
from PIL.ExifTags import GPSTAGS, TAGS

from riskscan.schemas.scan import Metadata

logger = logging.getLogger(__name__)

EXIF_IFD_POINTER = 0x8769
GPS_IFD_POINTER = 0x8825
XMP_KEYS = ("XML:com.adobe.xmp", "xmp")


def _as_text(value) -> str:
    if isinstance(value, bytes):
        # UserComment carries an 8-byte charset prefix (b"ASCII\0\0\0")
        return value.decode("utf-8", errors="ignore").replace("\x00", " ")
    return str(value)


def _clean(value) -> Optional[str]:
    if value is None:
        return None
    text = _as_text(value).strip("\x00 ").strip()
    return text or None


def _dms_to_decimal(dms, ref) -> Optional[float]:
    """Convert an EXIF (degrees, minutes, seconds) triple to signed decimal degrees."""
    try:
        degrees, minutes, seconds = (float(part) for part in dms)
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    value = degrees + minutes / 60 + seconds / 3600
    if _as_text(ref).strip("\x00 ").upper() in ("S", "W"):
        value = -value
    return value


def get_exif_data(image_bytes: bytes) -> dict:
    """
    Extract metadata from the image (EXIF for JPEG/TIFF/WebP, 'info' for PNG).
    Returns {} when the bytes cannot be opened as an image.
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            exif = img.getexif()
            tags = {}
            for tag, value in exif.items():
                if tag in (EXIF_IFD_POINTER, GPS_IFD_POINTER):
                    continue
                tags[TAGS.get(tag, tag)] = value
            for tag, value in exif.get_ifd(EXIF_IFD_POINTER).items():
                tags.setdefault(TAGS.get(tag, tag), value)

            gps = {GPSTAGS.get(tag, tag): value for tag, value in exif.get_ifd(GPS_IFD_POINTER).items()}

            info = {}
            for key, value in (img.info or {}).items():
                if isinstance(key, str) and isinstance(value, (str, bytes)) and key != "icc_profile":
                    info[key] = value

            return {"format": img.format, "tags": tags, "gps": gps, "info": info}
    except Exception as e:
        logger.warning(f"[META] Could not read image metadata: {e}")
        return {}


def extract_metadata(image_bytes: bytes) -> Metadata:
    raw = get_exif_data(image_bytes)
    if not raw:
        return Metadata()

    tags = raw["tags"]
    gps = raw["gps"]
    info = raw["info"]

    make = _clean(tags.get("Make"))
    model = _clean(tags.get("Model"))

    markers = [tags.get("UserComment"), tags.get("ImageDescription")]
    markers += [info.get(k) for k in XMP_KEYS]
    markers += [info.get("Description"), info.get("Comment")]
    marker_blob = " ".join(_as_text(m) for m in markers if m is not None).lower()
    is_screenshot = "screenshot" in marker_blob or (raw["format"] == "PNG" and not (make or model))

    modified = _clean(tags.get("DateTime"))
    original = _clean(tags.get("DateTimeOriginal"))
    is_altered = (modified != original) if (modified and original) else None

    latitude = longitude = None
    if "GPSLatitude" in gps and "GPSLongitude" in gps:
        latitude = _dms_to_decimal(gps["GPSLatitude"], gps.get("GPSLatitudeRef", "N"))
        longitude = _dms_to_decimal(gps["GPSLongitude"], gps.get("GPSLongitudeRef", "E"))

    metadata = Metadata(
        software=_clean(tags.get("Software")),
        is_altered_timestamp=is_altered,
        has_exif=bool(tags or gps),
        is_screenshot=is_screenshot,
        make=make,
        model=model,
        gps_latitude=latitude,
        gps_longitude=longitude,
    )
    logger.info(f"[META] Extracted: {metadata.model_dump(exclude_none=True)}")
    return metadata


def merge_metadata(extracted: Optional[Metadata], supplied: Optional[Metadata]) -> Optional[Metadata]:
    """Caller-supplied (sidecar) values win over values read from the file."""
    if supplied is None:
        return extracted
    if extracted is None:
        return supplied
    merged = extracted.model_dump()
    merged.update(supplied.model_dump(exclude_none=True))
    return Metadata(**merged)

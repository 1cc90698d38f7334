"""
Local, network-free risk heuristics for forensic screenshot scans.

Functions:
  - get_metadata_risk_score: Scores editing-tool, timestamp, EXIF and GPS signals.
  - get_geometry_risk_score: Scores the screenshot's aspect ratio against a platform template.
  - get_heuristic_score: Runs both, in reason order, and sums the points.

Every rule is additive and independent. Reason order is fixed:
editing tool → timestamp → EXIF contradiction → GPS → geometry.
"""

import logging
from typing import Optional

from riskscan.detection.constants import (
    ALTERED_TIMESTAMP_POINTS,
    ASPECT_RATIO_TOLERANCE,
    EDITING_TOOL_PATTERN,
    EDITING_TOOL_POINTS,
    EXIF_CONTRADICTION_POINTS,
    GEOMETRY_MISMATCH_POINTS,
)
from riskscan.detection.templates import get_template
from riskscan.schemas.scan import Metadata

logger = logging.getLogger(__name__)


def get_metadata_risk_score(metadata: Optional[Metadata]) -> tuple:
    """
    Returns (score, reasons) from the caller-supplied metadata bag.
    Missing fields are skipped, never counted against the image.
    """
    score = 0
    reasons = []

    if metadata is None:
        return score, reasons

    if metadata.software and EDITING_TOOL_PATTERN.search(metadata.software):
        score += EDITING_TOOL_POINTS
        reasons.append(f"Modification Signature: File processed via {metadata.software}.")

    if metadata.is_altered_timestamp:
        score += ALTERED_TIMESTAMP_POINTS
        reasons.append("Epoch Discrepancy: Metadata suggests creation date was altered post-capture.")

    # Screenshots are rendered by the OS, they never carry lens data
    if metadata.has_exif and metadata.is_screenshot and (metadata.make or metadata.model):
        score += EXIF_CONTRADICTION_POINTS
        reasons.append("Inconsistent Metadata: File claims to be a screenshot but contains camera lens data.")

    # Informational only: location data is not a risk signal
    if metadata.gps_latitude is not None and metadata.gps_longitude is not None:
        reasons.append(
            f"Geolocation Marker Found: {metadata.gps_latitude:.2f}, {metadata.gps_longitude:.2f}"
        )

    return score, reasons


def get_geometry_risk_score(width: float, height: float, platform: Optional[str]) -> tuple:
    """
    Returns (score, reasons) for the structural aspect-ratio audit.
    Unknown platforms and non-positive dimensions skip the check.
    """
    template = get_template(platform)
    if template is None:
        return 0, []

    if width <= 0 or height <= 0:
        logger.warning(f"[HEURISTIC] Skipping geometry check for {platform}: invalid size {width}x{height}")
        return 0, []

    ratio = height / width
    is_standard = any(abs(ratio - r) < ASPECT_RATIO_TOLERANCE for r in template.aspect_ratios)
    if is_standard:
        return 0, []

    return GEOMETRY_MISMATCH_POINTS, [
        f"Geometric Mismatch: Screenshot dimensions do not match the {platform} standard."
    ]


def get_heuristic_score(
    metadata: Optional[Metadata],
    width: float,
    height: float,
    platform: Optional[str],
) -> tuple:
    """Unclamped (score, reasons) across all heuristic rules."""
    meta_score, meta_reasons = get_metadata_risk_score(metadata)
    geo_score, geo_reasons = get_geometry_risk_score(width, height, platform)

    score = meta_score + geo_score
    reasons = meta_reasons + geo_reasons

    logger.info(f"[HEURISTIC] score={score} (metadata={meta_score}, geometry={geo_score})")
    if reasons:
        logger.info(f"[HEURISTIC] Reasons: {reasons}")

    return score, reasons

"""
Result merging and risk classification.

`merge_forensic_result` combines the heuristic score with an optional
deep-vision reply using max-of-two (the stronger claim wins, never summed),
then maps the clamped score to a risk level and a layout verdict.
"""

from typing import Optional

from riskscan.detection.constants import (
    HEURISTIC_FALLBACK_THRESHOLDS,
    LAYOUT_FALLBACK_THRESHOLDS,
    STANDARD_THRESHOLDS,
)
from riskscan.schemas.gateway import GatewayReply
from riskscan.schemas.scan import ScanResult, clamp_score

VISION_ADVICE = (
    "Cross-verify this Transaction ID in your banking app.",
    "Check for blurred edges around the currency symbol.",
    "Check if the fonts are consistent across the entire screen.",
)
HEURISTIC_ADVICE = (
    "Verify the transaction manually.",
    "Check for editing artifacts.",
)
VISION_EXPLANATION = "Forensic vision audit complete."
HEURISTIC_EXPLANATION = "Basic heuristic forensic audit complete."


def classify_risk(score: int, thresholds: tuple = STANDARD_THRESHOLDS) -> str:
    high, medium = thresholds
    if score > high:
        return "High"
    if score > medium:
        return "Medium"
    return "Low"


def derive_layout_check(score: int) -> str:
    """Layout verdict from score alone, used when no vision verdict exists."""
    failed, suspicious = LAYOUT_FALLBACK_THRESHOLDS
    if score > failed:
        return "Failed"
    if score > suspicious:
        return "Suspicious"
    return "Passed"


def merge_forensic_result(
    heuristic_score: int,
    heuristic_reasons: list[str],
    vision: Optional[GatewayReply] = None,
) -> ScanResult:
    if vision is None:
        score = clamp_score(heuristic_score)
        return ScanResult(
            risk_level=classify_risk(score, HEURISTIC_FALLBACK_THRESHOLDS),
            score=score,
            explanation=HEURISTIC_EXPLANATION,
            reasons=heuristic_reasons,
            advice=list(HEURISTIC_ADVICE),
            layout_check=derive_layout_check(score),
        )

    score = clamp_score(max(heuristic_score, vision.score))
    return ScanResult(
        risk_level=classify_risk(score, STANDARD_THRESHOLDS),
        score=score,
        explanation=vision.explanation or VISION_EXPLANATION,
        reasons=[*heuristic_reasons, *vision.reasons],
        advice=list(VISION_ADVICE),
        layout_check=vision.layout_status or "Suspicious",
        anomalies=list(vision.anomalies),
    )

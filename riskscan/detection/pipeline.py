"""
Top-level scan pipeline: public entry points for the /scan routes.

  1. scan_text      → Gemini message audit → standard thresholds
  2. scan_link      → Gemini URL audit → standard thresholds + fixed URL tip
  3. scan_forensics → local heuristics (always) → optional Gemini vision audit
                      → max-of-two merge, or heuristic-only fallback

None of these raise: a gateway failure degrades to a fixed result (text/link)
or to the heuristic-only verdict (forensic).
"""

import logging
from typing import Optional, Union

from riskscan.config import settings
from riskscan.detection.classifier import classify_risk, merge_forensic_result
from riskscan.detection.heuristics import get_heuristic_score
from riskscan.integrations.gemini.client import analyze_content
from riskscan.schemas.gateway import GatewayFailure, GatewayResult, GatewaySuccess
from riskscan.schemas.scan import ImageSize, Metadata, ScanResult, clamp_score
from riskscan.services.image_service import decode_image_data

logger = logging.getLogger(__name__)

EMPTY_MESSAGE_EXPLANATION = "Please enter a message."
TEXT_FAILED_EXPLANATION = "Analysis failed."
LINK_FAILED_EXPLANATION = "Link analysis failed."
LINK_MISSPELLING_TIP = "Check for subtle misspellings in the URL."
FORENSIC_MODES = ("image", "payment", "qr")


def _degraded(explanation: str) -> ScanResult:
    return ScanResult(risk_level="Low", score=0, explanation=explanation, reasons=[], advice=[])


async def _consult_gateway(content, jurisdiction: str, mode: str, platform: Optional[str] = None) -> GatewayResult:
    """Await the gateway, converting anything it raises into a failure value."""
    try:
        return await analyze_content(content, jurisdiction, mode, platform=platform)
    except Exception as e:
        logger.error(f"[SCAN] Gateway raised during {mode} scan: {e}")
        return GatewayFailure(error=str(e))


async def scan_text(message: str, jurisdiction: Optional[str] = None) -> ScanResult:
    if not message or not message.strip():
        return _degraded(EMPTY_MESSAGE_EXPLANATION)

    jurisdiction = jurisdiction or settings.default_jurisdiction
    result = await _consult_gateway(message, jurisdiction, "text")

    if isinstance(result, GatewayFailure):
        logger.warning(f"[SCAN] Text scan degraded: {result.error}")
        return _degraded(TEXT_FAILED_EXPLANATION)

    reply = result.reply
    score = clamp_score(reply.score)
    logger.info(f"[SCAN] Text verdict: score={score}")

    return ScanResult(
        risk_level=classify_risk(score),
        score=score,
        explanation=reply.explanation,
        reasons=reply.reasons,
        advice=reply.advice,
    )


async def scan_link(url: str, jurisdiction: Optional[str] = None) -> ScanResult:
    jurisdiction = jurisdiction or settings.default_jurisdiction
    result = await _consult_gateway(url, jurisdiction, "link")

    if isinstance(result, GatewayFailure):
        logger.warning(f"[SCAN] Link scan degraded: {result.error}")
        return _degraded(LINK_FAILED_EXPLANATION)

    reply = result.reply
    score = clamp_score(reply.score)
    logger.info(f"[SCAN] Link verdict for {url}: score={score}")

    return ScanResult(
        risk_level=classify_risk(score),
        score=score,
        explanation=f"Domain audit complete for {url}.",
        reasons=reply.reasons,
        advice=[*reply.advice, LINK_MISSPELLING_TIP],
    )


def _dimensions(image_size: Union[ImageSize, tuple, dict]) -> tuple:
    if isinstance(image_size, ImageSize):
        return image_size.width, image_size.height
    if isinstance(image_size, dict):
        return image_size["width"], image_size["height"]
    width, height = image_size
    return width, height


async def scan_forensics(
    mode: str,
    metadata: Optional[Union[Metadata, dict]],
    image_size: Union[ImageSize, tuple, dict],
    jurisdiction: Optional[str] = None,
    platform: str = "General",
    image_data: Optional[Union[bytes, str]] = None,
) -> ScanResult:
    """
    Heuristics run first and always. The vision audit only runs when image
    data is supplied; its failure falls back to the heuristic-only verdict.
    """
    if isinstance(metadata, dict):
        metadata = Metadata.model_validate(metadata)
    jurisdiction = jurisdiction or settings.default_jurisdiction
    width, height = _dimensions(image_size)

    heuristic_score, heuristic_reasons = get_heuristic_score(metadata, width, height, platform)

    vision = None
    if image_data:
        try:
            image_bytes = decode_image_data(image_data)
        except ValueError as e:
            logger.warning(f"[SCAN] Undecodable image, skipping vision audit: {e}")
        else:
            vision_mode = mode if mode in FORENSIC_MODES else "image"
            result = await _consult_gateway(image_bytes, jurisdiction, vision_mode, platform=platform)
            if isinstance(result, GatewaySuccess):
                vision = result.reply
            else:
                logger.warning(f"[SCAN] Vision audit failed, using heuristic fallback: {result.error}")

    final = merge_forensic_result(heuristic_score, heuristic_reasons, vision)
    logger.info(
        f"[SCAN] Forensic verdict ({platform}, {mode}): score={final.score}, "
        f"risk={final.risk_level}, layout={final.layout_check}, vision={'yes' if vision else 'no'}"
    )
    return final

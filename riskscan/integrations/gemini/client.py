"""
Gemini API client: initialization and inference calls.

The client is created lazily on the first call so the service can boot (and
tests can import) without credentials. `analyze_content` is the single async
entry point used by the scanner; it never raises and always returns
GatewaySuccess | GatewayFailure.

No retries are configured: a failed call is reported once and the scanner
degrades to its fallback result.
"""

import io
import json
import time
import asyncio
import logging
from typing import Optional, Union

from PIL import Image
from google import genai
from google.genai import types

from riskscan.config import settings
from riskscan.detection.templates import get_template
from riskscan.integrations.gemini.prompts import (
    get_link_instruction,
    get_link_query,
    get_text_instruction,
    get_text_query,
    get_vision_instruction,
    get_vision_query,
)
from riskscan.schemas.gateway import (
    GatewayFailure,
    GatewayReply,
    GatewayResult,
    GatewaySuccess,
    LinkVerdict,
    TextVerdict,
    VisionVerdict,
)

logger = logging.getLogger(__name__)

_client: Optional[genai.Client] = None


def get_client() -> genai.Client:
    """Get Gemini client singleton instance."""
    global _client
    if _client is None:
        _client = genai.Client(
            api_key=settings.gemini_api_key,
            http_options=types.HttpOptions(timeout=settings.gemini_http_timeout_ms),
        )
    return _client


def _resize_if_needed(img: Image.Image) -> Image.Image:
    """
    Resizes image if it exceeds the pixel cap to limit token usage and avoid payload errors.
    Keeps aspect ratio.
    """
    w, h = img.size
    pixels = w * h

    if pixels > settings.gemini_max_pixels:
        scale = (settings.gemini_max_pixels / pixels) ** 0.5
        new_w = max(1, int(w * scale))
        new_h = max(1, int(h * scale))
        return img.resize((new_w, new_h), Image.Resampling.LANCZOS)

    return img


def prepare_image(image_bytes: bytes) -> bytes:
    """Re-encode any supported image as an upload-sized RGB JPEG."""
    with Image.open(io.BytesIO(image_bytes)) as img_original:
        img_working = _resize_if_needed(img_original)
        if img_working.mode != "RGB":
            img_working = img_working.convert("RGB")

        img_byte_arr = io.BytesIO()
        img_working.save(img_byte_arr, format="JPEG", quality=settings.gemini_jpeg_quality)
        if img_working is not img_original:
            img_working.close()
        return img_byte_arr.getvalue()


def _generate(model: str, contents: list, instruction: str, schema) -> GatewaySuccess:
    config = types.GenerateContentConfig(
        system_instruction=instruction,
        temperature=settings.gemini_temperature,
        response_mime_type="application/json",
        response_schema=schema,
    )
    response = get_client().models.generate_content(
        model=model,
        contents=contents,
        config=config,
    )

    reply = GatewayReply.from_text(response.text)

    if getattr(response, "usage_metadata", None):
        logger.info(
            f"[GEMINI] Usage: prompt={response.usage_metadata.prompt_token_count}, "
            f"completion={response.usage_metadata.candidates_token_count}"
        )
    return GatewaySuccess(reply=reply)


def analyze_text(message: str, jurisdiction: str) -> GatewayResult:
    try:
        return _generate(
            settings.gemini_text_model,
            [get_text_query(message)],
            get_text_instruction(jurisdiction),
            TextVerdict,
        )
    except Exception as e:
        logger.error(f"[GEMINI] analyze_text error: {e}")
        return GatewayFailure(error=str(e))


def analyze_link(url: str, jurisdiction: str) -> GatewayResult:
    try:
        return _generate(
            settings.gemini_text_model,
            [get_link_query(url)],
            get_link_instruction(jurisdiction),
            LinkVerdict,
        )
    except Exception as e:
        logger.error(f"[GEMINI] analyze_link error: {e}")
        return GatewayFailure(error=str(e))


def analyze_screenshot(image_bytes: bytes, platform: str, jurisdiction: str, mode: str = "image") -> GatewayResult:
    try:
        upload = prepare_image(image_bytes)
        return _generate(
            settings.gemini_vision_model,
            [
                types.Part.from_bytes(data=upload, mime_type="image/jpeg"),
                get_vision_query(platform),
            ],
            get_vision_instruction(platform, jurisdiction, get_template(platform), mode),
            VisionVerdict,
        )
    except Exception as e:
        logger.error(f"[GEMINI] analyze_screenshot error: {e}")
        return GatewayFailure(error=str(e))


async def analyze_content(
    content: Union[str, bytes],
    jurisdiction: str,
    mode: str,
    platform: Optional[str] = None,
) -> GatewayResult:
    """
    Hand text, a URL or screenshot bytes to Gemini for the given scan mode.
    The blocking SDK call runs in a worker thread.
    """
    if mode == "text":
        return await asyncio.to_thread(analyze_text, content, jurisdiction)
    if mode == "link":
        return await asyncio.to_thread(analyze_link, content, jurisdiction)
    if not isinstance(content, bytes):
        return GatewayFailure(error=f"Mode '{mode}' requires image bytes")
    return await asyncio.to_thread(
        analyze_screenshot, content, platform or settings.default_platform, jurisdiction, mode
    )


if __name__ == "__main__":
    import sys
    if len(sys.argv) > 1:
        text = sys.argv[1]
        print(f"Analyzing: {text}...")
        start = time.perf_counter()
        result = analyze_text(text, settings.default_jurisdiction)
        end = time.perf_counter()
        if isinstance(result, GatewaySuccess):
            print(f"Result: {json.dumps(result.reply.model_dump(), indent=2)}")
        else:
            print(f"Failed: {result.error}")
        print(f"Latency: {end - start:.4f}s")

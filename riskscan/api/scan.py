"""
Scan routes: /scan/text, /scan/link, /scan/forensic, /scan/platforms

/scan/forensic accepts multipart/form-data with an optional 'file' field
(plus 'mode', 'platform', 'jurisdiction', 'metadata' JSON, 'width', 'height'),
or a JSON payload { "mode", "platform", "jurisdiction", "metadata",
"imageSize", "image": "data:image/...;base64,..." }.

Scan results are always 200: Gemini failures degrade inside the pipeline.
Only malformed requests are rejected here.
"""

import asyncio
import json
import logging
from typing import Optional, get_args

from fastapi import APIRouter, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from riskscan.config import settings
from riskscan.core.file_validator import validate_image
from riskscan.detection.exif import extract_metadata, merge_metadata
from riskscan.detection.pipeline import scan_forensics, scan_link, scan_text
from riskscan.detection.templates import known_platforms
from riskscan.schemas.scan import (
    ForensicScanRequest,
    ImageSize,
    LinkScanRequest,
    Metadata,
    ScanMode,
    ScanResult,
    TextScanRequest,
)
from riskscan.services.image_service import decode_image_data, get_image_size

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scan", tags=["Scan"])

SCAN_MODES = get_args(ScanMode)


@router.post("/text", response_model=ScanResult, response_model_exclude_none=True)
async def text_scan(payload: TextScanRequest):
    return await scan_text(payload.message, payload.jurisdiction)


@router.post("/link", response_model=ScanResult, response_model_exclude_none=True)
async def link_scan(payload: LinkScanRequest):
    return await scan_link(payload.url, payload.jurisdiction)


@router.get("/platforms")
async def platforms():
    return {"platforms": known_platforms()}


def _parse_form_metadata(raw) -> Optional[Metadata]:
    if not raw:
        return None
    if not isinstance(raw, str):
        raise HTTPException(status_code=400, detail="Invalid metadata field")
    try:
        return Metadata.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"[ROUTE] Invalid metadata JSON: {e}")
        raise HTTPException(status_code=400, detail="Invalid JSON in 'metadata'")


def _parse_form_size(width, height) -> Optional[ImageSize]:
    if width is None and height is None:
        return None
    try:
        return ImageSize(width=float(width), height=float(height))
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail="'width' and 'height' must both be numbers")


@router.post("/forensic", response_model=ScanResult, response_model_exclude_none=True)
async def forensic_scan(request: Request):
    """
    Heuristic + vision audit of a payment screenshot.
    """
    content_type = request.headers.get("content-type", "")
    image_bytes = None
    filename = None

    if "application/json" in content_type:
        try:
            payload = ForensicScanRequest.model_validate(await request.json())
        except json.JSONDecodeError:
            raise HTTPException(status_code=400, detail="Invalid JSON body")
        except ValidationError as e:
            raise RequestValidationError(e.errors())

        if payload.image:
            try:
                image_bytes = decode_image_data(payload.image)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        mode = payload.mode
        platform = payload.platform
        jurisdiction = payload.jurisdiction
        metadata = payload.metadata
        image_size = payload.image_size

    elif "multipart/form-data" in content_type:
        form = await request.form()
        file_obj = form.get("file")

        mode = form.get("mode") or "image"
        if mode not in SCAN_MODES:
            raise HTTPException(status_code=400, detail=f"Unknown scan mode '{mode}'")
        platform = form.get("platform") or None
        jurisdiction = form.get("jurisdiction") or None
        metadata = _parse_form_metadata(form.get("metadata"))
        image_size = _parse_form_size(form.get("width"), form.get("height"))

        if file_obj:
            if isinstance(file_obj, str):
                raise HTTPException(status_code=400, detail="Invalid file upload format")
            image_bytes = await file_obj.read()
            filename = file_obj.filename or "uploaded_file"

    else:
        raise HTTPException(
            status_code=415,
            detail="Unsupported Media Type. Use multipart/form-data or application/json"
        )

    if image_bytes is not None:
        validate_image(filename, image_bytes)
        extracted = await asyncio.to_thread(extract_metadata, image_bytes)
        metadata = merge_metadata(extracted, metadata)
        if image_size is None:
            try:
                width, height = get_image_size(image_bytes)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            image_size = ImageSize(width=width, height=height)

    if image_size is None:
        raise HTTPException(status_code=400, detail="Provide an image or its 'imageSize'")

    result = await scan_forensics(
        mode,
        metadata,
        image_size,
        jurisdiction=jurisdiction,
        platform=platform or settings.default_platform,
        image_data=image_bytes,
    )
    logger.info(f"[ROUTE] Forensic scan for {filename or 'json payload'}: {result.risk_level} ({result.score})")
    return result

"""
System / health routes.

/health reports whether the Gemini key is configured; without it every scan
still answers, using heuristic or degraded results.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from riskscan.config import settings

router = APIRouter(tags=["System"])


@router.get("/health")
async def health():
    return {
        "status": "healthy",
        "gemini": "configured" if settings.gemini_api_key else "missing",
    }


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots():
    return "User-agent: *\nDisallow: /"

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load environment variables at the very beginning
load_dotenv()

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from riskscan.api import scan, system  # noqa: E402
from riskscan.config import settings  # noqa: E402
from riskscan.detection.templates import known_platforms  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info(
        f"[STARTUP] Risk scan API ready (text model={settings.gemini_text_model}, "
        f"vision model={settings.gemini_vision_model}, templates={known_platforms()})"
    )
    if not settings.gemini_api_key:
        logger.warning("[STARTUP] GEMINI_API_KEY is not set; scans will degrade to fallback results")
    yield
    logger.info("[SHUTDOWN] Risk scan API stopped")


app = FastAPI(title="Scam & Forgery Risk Scan API", lifespan=lifespan)


# Error responses carry CORS headers too, so the frontend can read the JSON
# body instead of getting a generic network error.
@app.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException):
    headers = dict(getattr(exc, "headers", None) or {})
    headers["Access-Control-Allow-Origin"] = "*"
    headers["Access-Control-Allow-Methods"] = "*"
    headers["Access-Control-Allow-Headers"] = "*"

    response_data = {"detail": exc.detail}
    logger.info(f"[ERROR HANDLER] Returning {exc.status_code} to client. Body: {response_data}")

    return JSONResponse(
        status_code=exc.status_code,
        content=response_data,
        headers=headers
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(system.router)
app.include_router(scan.router)


if __name__ == "__main__":
    import os
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("riskscan.main:app", host="0.0.0.0", port=port, log_level="info")

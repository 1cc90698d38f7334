"""
Shared pytest fixtures for all test modules.

The Gemini client is created lazily, so no real key is needed; a stub is set
anyway so /health reports a configured service. Real API calls never happen in
tests; the gateway is always mocked.
"""

import base64
import io
import os

os.environ.setdefault("GEMINI_API_KEY", "stub-key-for-tests")

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from riskscan.main import app  # noqa: E402
from riskscan.schemas.gateway import GatewayFailure, GatewayReply, GatewaySuccess  # noqa: E402


# ---------------------------------------------------------------------------
# Core infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def client():
    """FastAPI TestClient; lifespan runs but never touches the network."""
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


# ---------------------------------------------------------------------------
# Shared test-data helpers
# ---------------------------------------------------------------------------


def make_tiny_jpeg(size=(10, 10), exif=None) -> bytes:
    """Create a small JPEG in memory, optionally carrying EXIF tags."""
    buf = io.BytesIO()
    img = Image.new("RGB", size, color=(128, 128, 128))
    if exif:
        tags = Image.Exif()
        for tag, value in exif.items():
            tags[tag] = value
        img.save(buf, format="JPEG", exif=tags)
    else:
        img.save(buf, format="JPEG")
    return buf.getvalue()


def make_png(size=(10, 10)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color=(20, 40, 200)).save(buf, format="PNG")
    return buf.getvalue()


def to_data_uri(content: bytes, mime: str = "image/jpeg") -> str:
    return f"data:{mime};base64,{base64.b64encode(content).decode()}"


def gateway_success(**fields) -> GatewaySuccess:
    return GatewaySuccess(reply=GatewayReply.model_validate(fields))


def gateway_failure(error: str = "boom") -> GatewayFailure:
    return GatewayFailure(error=error)

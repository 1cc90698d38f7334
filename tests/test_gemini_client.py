"""
Unit tests for riskscan/integrations/gemini/client.py.

The SDK client is replaced by a MagicMock via `get_client`; request configs
are real `google.genai.types` objects so schema wiring is exercised.
"""

import io
import json
from unittest.mock import MagicMock, patch

from PIL import Image

from riskscan.config import settings
from riskscan.integrations.gemini import client as gemini
from riskscan.schemas.gateway import GatewayFailure, GatewaySuccess, LinkVerdict, TextVerdict, VisionVerdict
from tests.conftest import make_png, make_tiny_jpeg


def _fake_client(text=None, side_effect=None) -> MagicMock:
    fake = MagicMock()
    if side_effect is not None:
        fake.models.generate_content.side_effect = side_effect
    else:
        fake.models.generate_content.return_value = MagicMock(text=text, usage_metadata=None)
    return fake


# ---------------------------------------------------------------------------
# Text / link calls
# ---------------------------------------------------------------------------


def test_analyze_text_success():
    fake = _fake_client(json.dumps({"score": 77, "explanation": "OTP bait", "reasons": ["OTP"], "advice": ["Block"]}))
    with patch.object(gemini, "get_client", return_value=fake):
        result = gemini.analyze_text("Share your OTP now", "India")

    assert isinstance(result, GatewaySuccess)
    assert result.reply.score == 77
    assert result.reply.reasons == ["OTP"]

    kwargs = fake.models.generate_content.call_args.kwargs
    assert kwargs["model"] == settings.gemini_text_model
    assert kwargs["config"].response_schema is TextVerdict
    assert kwargs["config"].response_mime_type == "application/json"
    assert "India" in kwargs["config"].system_instruction
    assert "Share your OTP now" in kwargs["contents"][0]


def test_analyze_text_malformed_reply_is_still_success():
    with patch.object(gemini, "get_client", return_value=_fake_client("I think this is a scam!")):
        result = gemini.analyze_text("hello", "India")

    assert isinstance(result, GatewaySuccess)
    assert result.reply.score == 0
    assert result.reply.reasons == []


def test_analyze_text_sdk_error_is_failure():
    with patch.object(gemini, "get_client", return_value=_fake_client(side_effect=RuntimeError("503 UNAVAILABLE"))):
        result = gemini.analyze_text("hello", "India")

    assert isinstance(result, GatewayFailure)
    assert "503" in result.error


def test_analyze_link_uses_link_schema():
    fake = _fake_client(json.dumps({"score": 40, "reasons": ["New domain"]}))
    with patch.object(gemini, "get_client", return_value=fake):
        result = gemini.analyze_link("http://paytm-refund.xyz", "India")

    assert isinstance(result, GatewaySuccess)
    assert fake.models.generate_content.call_args.kwargs["config"].response_schema is LinkVerdict


# ---------------------------------------------------------------------------
# Screenshot call
# ---------------------------------------------------------------------------


def test_analyze_screenshot_sends_jpeg_and_template_context():
    fake = _fake_client(json.dumps({"score": 88, "layout_status": "Failed"}))
    with patch.object(gemini, "get_client", return_value=fake):
        result = gemini.analyze_screenshot(make_png((90, 195)), "PhonePe", "India", mode="payment")

    assert isinstance(result, GatewaySuccess)
    assert result.reply.layout_status == "Failed"

    kwargs = fake.models.generate_content.call_args.kwargs
    assert kwargs["model"] == settings.gemini_vision_model
    assert kwargs["config"].response_schema is VisionVerdict
    assert "Purple header gradient" in kwargs["config"].system_instruction
    image_part = kwargs["contents"][0]
    assert image_part.inline_data.mime_type == "image/jpeg"


def test_analyze_screenshot_invalid_bytes_is_failure():
    fake = _fake_client("{}")
    with patch.object(gemini, "get_client", return_value=fake):
        result = gemini.analyze_screenshot(b"definitely not an image", "Paytm", "India")

    assert isinstance(result, GatewayFailure)
    fake.models.generate_content.assert_not_called()


def test_prepare_image_downscales_and_converts(monkeypatch):
    monkeypatch.setattr(settings, "gemini_max_pixels", 2_500)
    out = gemini.prepare_image(make_png((100, 100)))

    with Image.open(io.BytesIO(out)) as img:
        assert img.format == "JPEG"
        assert img.mode == "RGB"
        assert img.size[0] * img.size[1] <= 2_500


def test_prepare_image_keeps_small_images():
    out = gemini.prepare_image(make_tiny_jpeg((32, 48)))
    with Image.open(io.BytesIO(out)) as img:
        assert img.size == (32, 48)


# ---------------------------------------------------------------------------
# Async dispatch
# ---------------------------------------------------------------------------


async def test_analyze_content_dispatches_by_mode():
    with (
        patch.object(gemini, "analyze_text", return_value=GatewayFailure("t")) as mock_text,
        patch.object(gemini, "analyze_link", return_value=GatewayFailure("l")) as mock_link,
        patch.object(gemini, "analyze_screenshot", return_value=GatewayFailure("s")) as mock_shot,
    ):
        await gemini.analyze_content("msg", "India", "text")
        await gemini.analyze_content("http://x.y", "India", "link")
        await gemini.analyze_content(b"img", "India", "payment", platform="Paytm")

    mock_text.assert_called_once_with("msg", "India")
    mock_link.assert_called_once_with("http://x.y", "India")
    mock_shot.assert_called_once_with(b"img", "Paytm", "India", "payment")


async def test_analyze_content_image_mode_requires_bytes():
    result = await gemini.analyze_content("not bytes", "India", "image")
    assert isinstance(result, GatewayFailure)

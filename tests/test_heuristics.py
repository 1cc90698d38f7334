"""
Pure unit tests for riskscan/detection/heuristics.py.

No I/O: metadata bags and image sizes are built inline.
"""

import pytest

from riskscan.detection.heuristics import (
    get_geometry_risk_score,
    get_heuristic_score,
    get_metadata_risk_score,
)
from riskscan.schemas.scan import Metadata


# ---------------------------------------------------------------------------
# Rule 1: editing-tool signature
# ---------------------------------------------------------------------------


def test_photoshop_software_adds_forty_points():
    score, reasons = get_metadata_risk_score(Metadata(software="Adobe Photoshop CC"))
    assert score == 40
    assert len(reasons) == 1
    assert "Adobe Photoshop CC" in reasons[0]


@pytest.mark.parametrize("software", ["CANVA", "PicsArt 24.1", "Snapseed", "Photo Editor Pro", "MS Paint", "Adobe Express"])
def test_editing_tool_match_is_case_insensitive(software):
    score, reasons = get_metadata_risk_score(Metadata(software=software))
    assert score == 40
    assert reasons == [f"Modification Signature: File processed via {software}."]


def test_camera_firmware_software_is_not_flagged():
    score, reasons = get_metadata_risk_score(Metadata(software="Android 14 / HDR+"))
    assert score == 0
    assert reasons == []


# ---------------------------------------------------------------------------
# Rules 2 & 3: timestamp tampering and EXIF contradiction
# ---------------------------------------------------------------------------


def test_altered_timestamp_adds_thirty_points():
    score, reasons = get_metadata_risk_score(Metadata(is_altered_timestamp=True))
    assert score == 30
    assert reasons[0].startswith("Epoch Discrepancy")


def test_screenshot_with_lens_data_adds_fifteen_points():
    meta = Metadata(has_exif=True, is_screenshot=True, model="iPhone 14 Pro")
    score, reasons = get_metadata_risk_score(meta)
    assert score == 15
    assert reasons[0].startswith("Inconsistent Metadata")


@pytest.mark.parametrize(
    "meta",
    [
        Metadata(has_exif=True, is_screenshot=True),
        Metadata(has_exif=False, is_screenshot=True, make="Apple"),
        Metadata(has_exif=True, is_screenshot=False, make="Apple"),
    ],
)
def test_exif_contradiction_requires_every_signal(meta):
    score, reasons = get_metadata_risk_score(meta)
    assert score == 0
    assert reasons == []


# ---------------------------------------------------------------------------
# Rule 4: GPS (informational only)
# ---------------------------------------------------------------------------


def test_gps_emits_reason_without_points():
    meta = Metadata(gps_latitude=12.97159, gps_longitude=77.59456)
    score, reasons = get_metadata_risk_score(meta)
    assert score == 0
    assert reasons == ["Geolocation Marker Found: 12.97, 77.59"]


def test_partial_gps_is_ignored():
    score, reasons = get_metadata_risk_score(Metadata(gps_latitude=12.9))
    assert score == 0
    assert reasons == []


def test_camel_case_metadata_is_accepted():
    meta = Metadata.model_validate({"isAlteredTimestamp": True, "gpsLatitude": -33.8, "gpsLongitude": 151.2})
    score, reasons = get_metadata_risk_score(meta)
    assert score == 30
    assert reasons[-1] == "Geolocation Marker Found: -33.80, 151.20"


def test_metadata_keeps_camel_aliases_and_extra_keys():
    meta = Metadata.model_validate({"hasExif": True, "isScreenshot": True, "model": "Pixel 8", "deviceOwner": "x"})
    assert meta.model_extra == {"deviceOwner": "x"}
    assert meta.model_dump(by_alias=True, exclude_none=True)["isScreenshot"] is True
    assert get_metadata_risk_score(meta)[0] == 15


def test_no_metadata_scores_zero():
    assert get_metadata_risk_score(None) == (0, [])


# ---------------------------------------------------------------------------
# Rule 5: geometry against platform template
# ---------------------------------------------------------------------------


def test_google_pay_tall_screenshot_matches_template():
    # 2340 / 1080 ≈ 2.1667 == 19.5 / 9
    assert get_geometry_risk_score(1080, 2340, "Google Pay") == (0, [])


def test_google_pay_16_9_screenshot_is_a_mismatch():
    score, reasons = get_geometry_risk_score(1080, 1920, "Google Pay")
    assert score == 20
    assert reasons == ["Geometric Mismatch: Screenshot dimensions do not match the Google Pay standard."]


def test_paypal_accepts_16_9():
    assert get_geometry_risk_score(1080, 1920, "PayPal") == (0, [])


def test_tolerance_is_absolute_point_one():
    # 2.0 vs Paytm 18/9 = 2.0 → match; 1.85 is more than 0.1 from every Paytm ratio
    assert get_geometry_risk_score(1000, 2000, "Paytm")[0] == 0
    assert get_geometry_risk_score(1000, 1850, "Paytm")[0] == 20


@pytest.mark.parametrize("platform", ["General", "google pay", "Venmo", "", None])
def test_unknown_platform_skips_geometry(platform):
    assert get_geometry_risk_score(1000, 1000, platform) == (0, [])


@pytest.mark.parametrize("width,height", [(0, 1920), (1080, 0), (-1080, 1920)])
def test_non_positive_dimensions_skip_geometry(width, height):
    assert get_geometry_risk_score(width, height, "PhonePe") == (0, [])


# ---------------------------------------------------------------------------
# Combined scoring and reason order
# ---------------------------------------------------------------------------


def test_all_rules_fire_in_fixed_order_unclamped():
    meta = Metadata(
        software="Picsart",
        is_altered_timestamp=True,
        has_exif=True,
        is_screenshot=True,
        make="Samsung",
        gps_latitude=1.0,
        gps_longitude=2.0,
    )
    score, reasons = get_heuristic_score(meta, 1080, 1080, "PhonePe")

    assert score == 105
    assert [r.split(":")[0] for r in reasons] == [
        "Modification Signature",
        "Epoch Discrepancy",
        "Inconsistent Metadata",
        "Geolocation Marker Found",
        "Geometric Mismatch",
    ]


def test_heuristics_are_deterministic():
    meta = Metadata(software="Canva", is_altered_timestamp=True)
    assert get_heuristic_score(meta, 720, 1280, "Paytm") == get_heuristic_score(meta, 720, 1280, "Paytm")

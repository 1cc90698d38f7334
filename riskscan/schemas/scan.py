import math
from typing import Iterable, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from riskscan.config import settings
from riskscan.detection.constants import MAX_SCORE, MIN_SCORE

RiskLevel = Literal["Low", "Medium", "High"]
LayoutStatus = Literal["Passed", "Failed", "Suspicious", "N/A"]
AnomalySeverity = Literal["High", "Medium"]
ScanMode = Literal["text", "link", "image", "payment", "qr"]


def clamp_score(score) -> int:
    """Integer score in [0, 100]; non-numeric input scores 0."""
    try:
        value = float(score)
    except (TypeError, ValueError):
        return MIN_SCORE
    if not math.isfinite(value):
        return MIN_SCORE
    return int(max(MIN_SCORE, min(MAX_SCORE, value)))


def dedupe_reasons(reasons: Iterable[str]) -> list[str]:
    """Exact-string dedupe, first occurrence wins."""
    return list(dict.fromkeys(reasons))


class CamelModel(BaseModel):
    """Snake-case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TemplateAnomaly(CamelModel):
    x: float
    y: float
    width: float
    height: float
    label: str
    severity: AnomalySeverity


class ScanResult(CamelModel):
    risk_level: RiskLevel
    score: int
    explanation: str = ""
    reasons: List[str] = Field(default_factory=list)
    advice: List[str] = Field(default_factory=list)
    layout_check: Optional[LayoutStatus] = None     # forensic mode only
    anomalies: Optional[List[TemplateAnomaly]] = None  # successful deep-vision pass only

    @field_validator("score", mode="before")
    @classmethod
    def clamp(cls, v) -> int:
        return clamp_score(v)

    @field_validator("reasons")
    @classmethod
    def dedupe(cls, v: List[str]) -> List[str]:
        return dedupe_reasons(v)


class Metadata(CamelModel):
    """
    Loose bag of per-scan provenance signals. Every field is optional;
    None means "not applicable", never "negative".
    """
    model_config = ConfigDict(extra="allow")

    software: Optional[str] = None
    is_altered_timestamp: Optional[bool] = None
    has_exif: Optional[bool] = None
    is_screenshot: Optional[bool] = None
    make: Optional[str] = None
    model: Optional[str] = None
    gps_latitude: Optional[float] = None
    gps_longitude: Optional[float] = None

    @field_validator("software", "make", "model", mode="before")
    @classmethod
    def coerce_text(cls, v) -> Optional[str]:
        if isinstance(v, str):
            return v
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return None

    @field_validator("is_altered_timestamp", "has_exif", "is_screenshot", mode="before")
    @classmethod
    def coerce_flag(cls, v) -> Optional[bool]:
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return {"true": True, "false": False}.get(v.strip().lower())
        if isinstance(v, int) and v in (0, 1):
            return bool(v)
        return None

    @field_validator("gps_latitude", "gps_longitude", mode="before")
    @classmethod
    def coerce_coordinate(cls, v) -> Optional[float]:
        if isinstance(v, bool):
            return None
        try:
            value = float(v)
        except (TypeError, ValueError):
            return None
        return value if math.isfinite(value) else None


class ImageSize(BaseModel):
    width: float
    height: float


class TextScanRequest(BaseModel):
    message: str = Field(max_length=settings.max_text_length)
    jurisdiction: Optional[str] = None


class LinkScanRequest(BaseModel):
    url: str = Field(min_length=1, max_length=settings.max_url_length)
    jurisdiction: Optional[str] = None


class ForensicScanRequest(CamelModel):
    mode: ScanMode = "image"
    platform: Optional[str] = None
    jurisdiction: Optional[str] = None
    metadata: Optional[Metadata] = None
    image_size: Optional[ImageSize] = None
    image: Optional[str] = Field(None, description="Base64 data URI (or bare base64) of the screenshot")

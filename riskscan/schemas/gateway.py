"""
Gemini reply contracts.

Two layers:
  - *Verdict models (TextVerdict, LinkVerdict, VisionVerdict) are the response
    schemas we ASK Gemini to honour. They carry no defaults because the SDK
    rejects defaults in response schemas.
  - GatewayReply is what we actually TRUST: every field defaulted and coerced,
    so a partial or malformed reply normalizes instead of raising.

Gateway calls return GatewaySuccess | GatewayFailure; callers branch on type.
"""

import json
import math
from dataclasses import dataclass
from typing import List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from riskscan.schemas.scan import TemplateAnomaly

_LAYOUT_STATUSES = ("Passed", "Failed", "Suspicious")
_BOX_FIELDS = ("x", "y", "width", "height")


# --------------------------------------------------------------------------- #
# Requested response schemas                                                  #
# --------------------------------------------------------------------------- #


class TextVerdict(BaseModel):
    """Gemini structured output schema: message audit."""
    score: int = Field(description="Scam likelihood between 0 and 100")
    explanation: str = Field(description="Plain-language breakdown of the verdict")
    reasons: List[str] = Field(description="Concrete red flags found in the message")
    advice: List[str] = Field(description="Actions the recipient should take")


class LinkVerdict(BaseModel):
    """Gemini structured output schema: URL audit."""
    score: int = Field(description="Phishing likelihood between 0 and 100")
    reasons: List[str] = Field(description="Concrete findings about the URL")
    advice: List[str] = Field(description="Actions the user should take")


class AnomalyBox(BaseModel):
    x: float = Field(description="Left edge in image pixels")
    y: float = Field(description="Top edge in image pixels")
    width: float = Field(description="Box width in image pixels")
    height: float = Field(description="Box height in image pixels")
    label: str = Field(description="Short description of the defect")
    severity: str = Field(description="Must be one of: High, Medium")


class VisionVerdict(BaseModel):
    """Gemini structured output schema: forensic screenshot audit."""
    score: int = Field(description="Forgery likelihood between 0 and 100")
    reasons: List[str] = Field(description="Concrete visual findings")
    explanation: str = Field(description="One-paragraph forensic summary")
    layout_status: str = Field(description="Must be one of: Passed, Failed, Suspicious")
    anomalies: List[AnomalyBox] = Field(description="Localized visual defects")


# --------------------------------------------------------------------------- #
# Normalized reply                                                            #
# --------------------------------------------------------------------------- #


def _is_number(v) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def _string_list(v) -> list[str]:
    if not isinstance(v, list):
        return []
    return [item for item in v if isinstance(item, str)]


def _normalize_anomaly(item) -> Optional[dict]:
    if not isinstance(item, dict):
        return None
    if not all(_is_number(item.get(k)) for k in _BOX_FIELDS):
        return None
    severity = str(item.get("severity", "")).strip().lower()
    label = item.get("label")
    return {
        **{k: item[k] for k in _BOX_FIELDS},
        "label": label if isinstance(label, str) else "",
        "severity": "High" if severity == "high" else "Medium",
    }


class GatewayReply(BaseModel):
    model_config = ConfigDict(extra="ignore")

    score: int = Field(0, validation_alias=AliasChoices("score", "aiScore"))
    reasons: List[str] = Field(default_factory=list, validation_alias=AliasChoices("reasons", "aiReasons"))
    explanation: str = Field("", validation_alias=AliasChoices("explanation", "aiExplanation"))
    advice: List[str] = Field(default_factory=list)
    layout_status: Optional[Literal["Passed", "Failed", "Suspicious"]] = Field(
        None, validation_alias=AliasChoices("layout_status", "layoutStatus")
    )
    anomalies: List[TemplateAnomaly] = Field(
        default_factory=list, validation_alias=AliasChoices("anomalies", "detectedAnomalies")
    )

    @field_validator("score", mode="before")
    @classmethod
    def coerce_score(cls, v) -> int:
        if isinstance(v, str):
            try:
                v = float(v.strip())
            except ValueError:
                return 0
        if not _is_number(v):
            return 0
        return int(round(v))

    @field_validator("reasons", "advice", mode="before")
    @classmethod
    def coerce_strings(cls, v) -> list[str]:
        return _string_list(v)

    @field_validator("explanation", mode="before")
    @classmethod
    def coerce_explanation(cls, v) -> str:
        return v if isinstance(v, str) else ""

    @field_validator("layout_status", mode="before")
    @classmethod
    def coerce_layout_status(cls, v) -> Optional[str]:
        if not isinstance(v, str):
            return None
        wanted = v.strip().lower()
        for status in _LAYOUT_STATUSES:
            if status.lower() == wanted:
                return status
        return None

    @field_validator("anomalies", mode="before")
    @classmethod
    def coerce_anomalies(cls, v) -> list[dict]:
        if not isinstance(v, list):
            return []
        return [a for a in (_normalize_anomaly(item) for item in v) if a is not None]

    @classmethod
    def from_text(cls, text: Optional[str]) -> "GatewayReply":
        """Parse a raw model reply. Malformed or non-object JSON counts as {}."""
        try:
            payload = json.loads(text or "{}")
        except (TypeError, ValueError):
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        return cls.model_validate(payload)


@dataclass(frozen=True)
class GatewaySuccess:
    reply: GatewayReply


@dataclass(frozen=True)
class GatewayFailure:
    error: str


GatewayResult = Union[GatewaySuccess, GatewayFailure]

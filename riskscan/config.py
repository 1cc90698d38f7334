"""
Central application configuration.

Every tunable value lives here as a typed, documented field.
Any field can be overridden at runtime via an environment variable of the
same name (case-insensitive), e.g.:

    GEMINI_VISION_MODEL=gemini-2.5-flash uvicorn riskscan.main:app
    export DEFAULT_JURISDICTION="United Kingdom"

A `.env` file at the project root is loaded automatically.

Scoring points and risk thresholds are not settings; they are fixed
constants in `riskscan/detection/constants.py`.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,   # GEMINI_API_KEY == gemini_api_key
        extra="ignore",         # silently drop unknown env vars
    )

    # ------------------------------------------------------------------ #
    # Gemini Client                                                       #
    # ------------------------------------------------------------------ #
    gemini_api_key: Optional[str] = Field(
        None, description="Google AI Studio key; the client is built lazily on first scan"
    )
    gemini_text_model: str = Field(
        "gemini-3-flash-preview", description="Model used for text and link audits"
    )
    gemini_vision_model: str = Field(
        "gemini-3-flash-preview", description="Model used for the forensic vision audit"
    )
    gemini_http_timeout_ms: int = Field(
        30_000, description="HTTP client total timeout (ms)"
    )
    gemini_temperature: float = Field(
        0.2, description="Sampling temperature for Gemini model"
    )
    gemini_max_pixels: int = Field(
        4_194_304, description="2048×2048 resize cap before upload"
    )
    gemini_jpeg_quality: int = Field(
        95, description="JPEG quality for the forensic screenshot upload"
    )

    # ------------------------------------------------------------------ #
    # Request Limits                                                      #
    # ------------------------------------------------------------------ #
    max_image_upload_mb: int = Field(
        20, description="Max MB for multipart / data-URI image uploads"
    )
    pil_max_image_pixels: int = Field(
        40_000_000, description="PIL decompression-bomb guard (pixels)"
    )
    max_text_length: int = Field(
        10_000, description="Max characters accepted by /scan/text"
    )
    max_url_length: int = Field(
        2_048, description="Max characters accepted by /scan/link"
    )

    # ------------------------------------------------------------------ #
    # Scan Defaults                                                       #
    # ------------------------------------------------------------------ #
    default_jurisdiction: str = Field(
        "India", description="Jurisdiction used when a request does not name one"
    )
    default_platform: str = Field(
        "General", description="Platform name used when a forensic request does not name one"
    )

    # ------------------------------------------------------------------ #
    # HTTP                                                                #
    # ------------------------------------------------------------------ #
    cors_origins: str = Field(
        "*", description="Comma-separated list of allowed CORS origins"
    )

    @property
    def max_image_upload_bytes(self) -> int:
        return self.max_image_upload_mb * 1024 * 1024

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Single shared instance, import this everywhere.
settings = Settings()

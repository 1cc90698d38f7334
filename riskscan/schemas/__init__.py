from riskscan.schemas.scan import (
    ForensicScanRequest,
    ImageSize,
    LinkScanRequest,
    Metadata,
    ScanResult,
    TemplateAnomaly,
    TextScanRequest,
)
from riskscan.schemas.gateway import GatewayFailure, GatewayReply, GatewayResult, GatewaySuccess

__all__ = [
    "ForensicScanRequest",
    "ImageSize",
    "LinkScanRequest",
    "Metadata",
    "ScanResult",
    "TemplateAnomaly",
    "TextScanRequest",
    "GatewayFailure",
    "GatewayReply",
    "GatewayResult",
    "GatewaySuccess",
]

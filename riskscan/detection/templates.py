"""
Visual baselines for popular payment apps.

Lookup is by exact, case-sensitive platform name. An unknown name means
"no structural check possible", not a mismatch.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True)
class PlatformTemplate:
    primary_color: str
    aspect_ratios: frozenset[float]   # accepted height / width
    font_family: str
    branding: str
    structure: str


PLATFORM_TEMPLATES: Mapping[str, PlatformTemplate] = MappingProxyType({
    "Google Pay": PlatformTemplate(
        primary_color="#4285F4",
        # Tall-screen only; 1080x1920 captures are not a Google Pay baseline
        aspect_ratios=frozenset({19.5 / 9, 20 / 9}),
        font_family="Product Sans / Google Sans",
        branding="Google Logo top center/left",
        structure="Clean material design, pill buttons",
    ),
    "PhonePe": PlatformTemplate(
        primary_color="#5f259f",
        aspect_ratios=frozenset({19.5 / 9, 20 / 9}),
        font_family="Roboto / Custom Sans",
        branding="Purple header gradient",
        structure="Transaction ID at bottom, large checkmark",
    ),
    "Paytm": PlatformTemplate(
        primary_color="#00baf2",
        aspect_ratios=frozenset({19.5 / 9, 20 / 9, 18 / 9}),
        font_family="Paytm Sans / Inter",
        branding="Light blue accents",
        structure="Payment Success badge top, order details below",
    ),
    "PayPal": PlatformTemplate(
        primary_color="#003087",
        aspect_ratios=frozenset({16 / 9, 19.5 / 9}),
        font_family="PayPal Sans / Futura",
        branding="Double P logo top center",
        structure="Minimalist, center-aligned transaction amount",
    ),
})


def get_template(platform: Optional[str]) -> Optional[PlatformTemplate]:
    if not platform:
        return None
    return PLATFORM_TEMPLATES.get(platform)


def known_platforms() -> list[str]:
    return list(PLATFORM_TEMPLATES)

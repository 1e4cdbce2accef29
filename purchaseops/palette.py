"""Static lookup tables for source badges and chart colors.

Keys are source names lower-cased with every non-alphanumeric character
removed, so ``(direct)`` looks up ``direct`` and ``l.facebook.com`` looks up
``lfacebookcom``. Unknown sources get ``DEFAULT_BADGE`` and a palette color
picked by position.
"""
from __future__ import annotations

import re

DEFAULT_BADGE = "badge-default"

SOURCE_BADGES: dict[str, str] = {
    "google": "badge-google",
    "facebook": "badge-facebook",
    "fb": "badge-facebook",
    "facebookcom": "badge-facebook",
    "lfacebookcom": "badge-facebook",
    "mfacebookcom": "badge-facebook",
    "instagram": "badge-instagram",
    "ig": "badge-instagram",
    "instagramcom": "badge-instagram",
    "linstagramcom": "badge-instagram",
    "tiktok": "badge-tiktok",
    "tiktokcom": "badge-tiktok",
    "direct": "badge-direct",
    "bing": "badge-bing",
    "email": "badge-email",
    "newsletter": "badge-email",
    "whatsapp": "badge-whatsapp",
    "youtube": "badge-youtube",
    "youtubecom": "badge-youtube",
    "chatgptcom": "badge-chatgpt",
}

SOURCE_COLORS: dict[str, str] = {
    "google": "#4285F4",
    "facebook": "#1877F2",
    "fb": "#1877F2",
    "lfacebookcom": "#1877F2",
    "mfacebookcom": "#1877F2",
    "instagram": "#E1306C",
    "ig": "#E1306C",
    "linstagramcom": "#E1306C",
    "tiktok": "#010101",
    "direct": "#6B7280",
    "bing": "#008373",
    "email": "#F59E0B",
    "newsletter": "#F59E0B",
    "whatsapp": "#25D366",
    "youtube": "#FF0000",
}

FALLBACK_PALETTE: tuple[str, ...] = (
    "#6366F1",
    "#10B981",
    "#F97316",
    "#8B5CF6",
    "#EC4899",
    "#14B8A6",
    "#EAB308",
    "#0EA5E9",
    "#A3A3A3",
)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def source_key(source: str | None) -> str:
    return _NON_ALNUM.sub("", str(source or "").lower())


def badge_class(source: str | None) -> str:
    return SOURCE_BADGES.get(source_key(source), DEFAULT_BADGE)


def source_color(source: str | None, index: int) -> str:
    color = SOURCE_COLORS.get(source_key(source))
    if color:
        return color
    return FALLBACK_PALETTE[index % len(FALLBACK_PALETTE)]

"""Release title parser for quality tier, HDR/HEVC flags and season number."""

from __future__ import annotations

import re

from seedarr.domain.entities.torrent import QualityTier

# --- Quality mappings ---

# Checked in order; the first token contained in the title wins.
_QUALITY_TOKENS: tuple[tuple[str, QualityTier], ...] = (
    ("2160P", QualityTier.UHD_4K),
    ("4K", QualityTier.UHD_4K),
    ("1440P", QualityTier.P1440),
    ("1080P", QualityTier.P1080),
    ("720P", QualityTier.P720),
    ("480P", QualityTier.P480),
    ("360P", QualityTier.P360),
)

_HDR_TOKENS: tuple[str, ...] = ("HDR",)
_HEVC_TOKENS: tuple[str, ...] = ("HEVC", "H.265")

# --- Season helpers ---

# "S01", "S01E05", "Season 2", "Сезон 3", "Сезон: 3", "3 сезон", "3-й сезон"
_SEASON_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?i)(?<![a-z0-9])s(\d{1,2})(?:e\d{1,4})?(?![0-9])"),
    re.compile(r"(?i)\bseason\s*(\d{1,2})\b"),
    re.compile(r"(?i)сезон\s*:?\s*(\d{1,2})(?!\d)"),
    re.compile(r"(?i)(?<!\d)(\d{1,2})(?:\s*-?\s*й)?\s+сезон"),
)


def classify_quality(title: str) -> QualityTier:
    """Infer the quality tier from title tokens (case-insensitive)."""
    normalized = title.upper()
    for token, tier in _QUALITY_TOKENS:
        if token in normalized:
            return tier
    return QualityTier.UNKNOWN


def has_hdr(title: str) -> bool:
    normalized = title.upper()
    return any(token in normalized for token in _HDR_TOKENS)


def has_hevc(title: str) -> bool:
    normalized = title.upper()
    return any(token in normalized for token in _HEVC_TOKENS)


def classify(title: str) -> tuple[QualityTier, bool, bool]:
    """Return ``(quality, hdr, hevc)`` for a release title.

    Pure function, never raises. ``"Movie.2023.2160p.HDR.Bluray"`` yields
    ``(QualityTier.UHD_4K, True, False)``.
    """
    return classify_quality(title), has_hdr(title), has_hevc(title)


def parse_season(title: str) -> int | None:
    """Extract a season number from a release title.

    Returns None when the title carries no season token.
    """
    for pattern in _SEASON_PATTERNS:
        match = pattern.search(title)
        if match:
            return int(match.group(1))
    return None

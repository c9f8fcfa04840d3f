"""Domain entities for torrent discovery and ranking.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

MediaKind = Literal["movie", "series"]


class QualityTier(str, Enum):
    """Video resolution tier inferred from a release title.

    Ordered from lowest to highest resolution. ``UNKNOWN`` has no rank:
    it never satisfies a min/max bound but still forms its own group.
    """

    P360 = "360P"
    P480 = "480P"
    P720 = "720P"
    P1080 = "1080P"
    P1440 = "1440P"
    UHD_4K = "4K"
    UNKNOWN = "Unknown"

    @property
    def rank(self) -> int | None:
        """Position on the ordered scale, ``None`` for ``UNKNOWN``."""
        return _TIER_RANKS.get(self)

    @classmethod
    def parse(cls, raw: str) -> QualityTier | None:
        """Map a caller-supplied token (``"1080p"``, ``"2160P"``, ``"4k"``) to a tier.

        Returns None for tokens that name no tier.
        """
        token = raw.strip().upper()
        if not token:
            return None
        if token == "2160P":
            return cls.UHD_4K
        if token == "UNKNOWN":
            return cls.UNKNOWN
        for tier in cls:
            if tier.value == token:
                return tier
        return None


_TIER_RANKS: dict[QualityTier, int] = {
    QualityTier.P360: 1,
    QualityTier.P480: 2,
    QualityTier.P720: 3,
    QualityTier.P1080: 4,
    QualityTier.P1440: 5,
    QualityTier.UHD_4K: 6,
}


class SortKey(str, Enum):
    SEEDERS = "seeders"
    SIZE = "size"
    DATE = "date"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class ResolvedMedia:
    """Canonical title and release year for an external identifier."""

    title: str
    year: str = ""  # "" when the provider has no release date
    media_kind: MediaKind = "movie"


@dataclass(frozen=True)
class CandidateRecord:
    """A single torrent release extracted from a search result page."""

    title: str
    size: str = ""  # raw size text, e.g. "1.46 GB"
    seeders: int = 0
    leechers: int = 0
    quality: QualityTier = QualityTier.UNKNOWN
    hdr: bool = False
    hevc: bool = False
    magnet_link: str = ""
    torrent_link: str = ""
    added_date: str = ""  # ISO "YYYY-MM-DD" or ""


@dataclass(frozen=True)
class SearchPolicy:
    """Caller-supplied filter, sort and grouping preferences for one request."""

    qualities: frozenset[QualityTier] = frozenset()
    min_quality: QualityTier | None = None
    max_quality: QualityTier | None = None
    exclude_qualities: frozenset[QualityTier] = frozenset()
    hdr: bool | None = None
    hevc: bool | None = None
    sort_key: SortKey = SortKey.SEEDERS
    sort_direction: SortDirection = SortDirection.DESC
    group_by_quality: bool = False
    group_by_season: bool = False
    season: int | None = None


@dataclass(frozen=True)
class ResultSet:
    """Final ordered candidates plus optional partition into groups."""

    query: str
    total: int
    records: tuple[CandidateRecord, ...] = ()
    groups: Mapping[str, tuple[CandidateRecord, ...]] | None = None
    policy: SearchPolicy = field(default_factory=SearchPolicy)

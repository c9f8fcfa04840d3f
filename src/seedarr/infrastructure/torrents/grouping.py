"""Partitioning of sorted candidates by quality tier and/or season."""

from __future__ import annotations

from collections.abc import Iterable

from seedarr.domain.entities.torrent import CandidateRecord, MediaKind
from seedarr.infrastructure.torrents.release_parser import parse_season

UNSPECIFIED_SEASON = "unspecified"


def season_key(title: str) -> str:
    """Group key for the season found in *title* (``"S01"`` or ``"unspecified"``)."""
    season = parse_season(title)
    if season is None:
        return UNSPECIFIED_SEASON
    return f"S{season:02d}"


def group_key(
    record: CandidateRecord,
    *,
    by_quality: bool,
    by_season: bool,
) -> str:
    parts: list[str] = []
    if by_quality:
        parts.append(record.quality.value)
    if by_season:
        parts.append(season_key(record.title))
    return "/".join(parts)


def group_candidates(
    records: Iterable[CandidateRecord],
    *,
    by_quality: bool = False,
    by_season: bool = False,
    media_kind: MediaKind = "movie",
) -> dict[str, list[CandidateRecord]] | None:
    """Partition *records* into groups, or return None when grouping is off.

    Season grouping only applies to series. Groups appear in order of their
    first member and keep the input order inside each group.
    """
    by_season = by_season and media_kind == "series"
    if not (by_quality or by_season):
        return None

    groups: dict[str, list[CandidateRecord]] = {}
    for record in records:
        key = group_key(record, by_quality=by_quality, by_season=by_season)
        groups.setdefault(key, []).append(record)
    return groups

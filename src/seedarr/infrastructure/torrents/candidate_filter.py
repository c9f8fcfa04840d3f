"""Policy-driven filtering of classified torrent candidates.

Predicates run in a fixed order and all must pass:

    (a) allow-list   (b) min bound   (c) max bound   (d) exclusions
    (e) HDR flag     (f) HEVC flag   (g) season (series only)

Bounds compare ``QualityTier.rank``; ``UNKNOWN`` has no rank and therefore
fails any bound that is set.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from seedarr.domain.entities.torrent import (
    CandidateRecord,
    MediaKind,
    QualityTier,
    SearchPolicy,
)
from seedarr.infrastructure.torrents.release_parser import parse_season

_Predicate = Callable[[CandidateRecord], bool]


def meets_minimum(tier: QualityTier, bound: QualityTier) -> bool:
    rank, bound_rank = tier.rank, bound.rank
    if rank is None or bound_rank is None:
        return False
    return rank >= bound_rank


def meets_maximum(tier: QualityTier, bound: QualityTier) -> bool:
    rank, bound_rank = tier.rank, bound.rank
    if rank is None or bound_rank is None:
        return False
    return rank <= bound_rank


def build_predicates(
    policy: SearchPolicy,
    media_kind: MediaKind = "movie",
) -> list[_Predicate]:
    """Translate a policy into the ordered list of active predicates."""
    predicates: list[_Predicate] = []

    if policy.qualities:
        allowed = policy.qualities
        predicates.append(lambda r: r.quality in allowed)

    if policy.min_quality is not None:
        lower = policy.min_quality
        predicates.append(lambda r: meets_minimum(r.quality, lower))

    if policy.max_quality is not None:
        upper = policy.max_quality
        predicates.append(lambda r: meets_maximum(r.quality, upper))

    if policy.exclude_qualities:
        excluded = policy.exclude_qualities
        predicates.append(lambda r: r.quality not in excluded)

    if policy.hdr is not None:
        hdr = policy.hdr
        predicates.append(lambda r: r.hdr is hdr)

    if policy.hevc is not None:
        hevc = policy.hevc
        predicates.append(lambda r: r.hevc is hevc)

    if media_kind == "series" and policy.season is not None:
        season = policy.season
        predicates.append(lambda r: parse_season(r.title) == season)

    return predicates


def filter_candidates(
    records: Iterable[CandidateRecord],
    policy: SearchPolicy,
    media_kind: MediaKind = "movie",
) -> list[CandidateRecord]:
    """Return the records that pass every policy predicate, in input order."""
    predicates = build_predicates(policy, media_kind)
    return [r for r in records if all(check(r) for check in predicates)]

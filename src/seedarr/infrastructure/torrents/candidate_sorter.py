"""Ordering of torrent candidates by seeders, size or date."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from seedarr.domain.entities.torrent import CandidateRecord, SortDirection, SortKey
from seedarr.infrastructure.common.parsers import parse_size_to_bytes

_SORT_KEYS: dict[SortKey, Callable[[CandidateRecord], Any]] = {
    SortKey.SEEDERS: lambda r: r.seeders,
    SortKey.SIZE: lambda r: parse_size_to_bytes(r.size),
    SortKey.DATE: lambda r: r.added_date,
}


def sort_candidates(
    records: Iterable[CandidateRecord],
    sort_key: SortKey = SortKey.SEEDERS,
    sort_direction: SortDirection = SortDirection.DESC,
) -> list[CandidateRecord]:
    """Return a new list ordered by *sort_key*.

    The sort is stable in both directions: records with equal keys keep
    their input order. Sizes compare as bytes; unparseable sizes are 0.
    """
    key = _SORT_KEYS.get(sort_key, _SORT_KEYS[SortKey.SEEDERS])
    return sorted(records, key=key, reverse=sort_direction == SortDirection.DESC)

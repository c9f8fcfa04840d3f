"""Packaging of the final candidate list into a ResultSet."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from seedarr.domain.entities.torrent import (
    CandidateRecord,
    ResolvedMedia,
    ResultSet,
    SearchPolicy,
)


def format_query(media: ResolvedMedia) -> str:
    """``"Title (2023)"``, or just ``"Title"`` when the year is unknown."""
    if media.year:
        return f"{media.title} ({media.year})"
    return media.title


def assemble_result(
    media: ResolvedMedia,
    records: Sequence[CandidateRecord],
    groups: Mapping[str, Sequence[CandidateRecord]] | None,
    policy: SearchPolicy,
) -> ResultSet:
    """Freeze the sorted records (and optional groups) into a ResultSet.

    The policy is echoed on the result. An empty *records* sequence still
    produces a well-formed set with ``total == 0``; not-found handling
    belongs to the caller.
    """
    frozen_groups = (
        {key: tuple(members) for key, members in groups.items()}
        if groups is not None
        else None
    )
    return ResultSet(
        query=format_query(media),
        total=len(records),
        records=tuple(records),
        groups=frozen_groups,
        policy=policy,
    )

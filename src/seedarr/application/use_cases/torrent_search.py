"""Torrent search use case.

IMDb ID -> TMDB title -> search page -> extract -> filter -> sort
-> group -> ResultSet.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Sequence
from typing import Protocol

import structlog

from seedarr.domain.entities.torrent import (
    CandidateRecord,
    MediaKind,
    ResolvedMedia,
    ResultSet,
    SearchPolicy,
    SortDirection,
    SortKey,
)
from seedarr.domain.ports.source_fetcher import SourceFetcherPort
from seedarr.domain.ports.tmdb import TitleResolverPort

# ---------------------------------------------------------------------------
# Pipeline stage signatures this use case depends on.
# Infrastructure functions satisfy these via structural subtyping.
# ---------------------------------------------------------------------------


class _ExtractFn(Protocol):
    def __call__(self, document: str) -> list[CandidateRecord]: ...


class _FilterFn(Protocol):
    def __call__(
        self,
        records: Iterable[CandidateRecord],
        policy: SearchPolicy,
        media_kind: MediaKind = "movie",
    ) -> list[CandidateRecord]: ...


class _SortFn(Protocol):
    def __call__(
        self,
        records: Iterable[CandidateRecord],
        sort_key: SortKey = SortKey.SEEDERS,
        sort_direction: SortDirection = SortDirection.DESC,
    ) -> list[CandidateRecord]: ...


class _GroupFn(Protocol):
    def __call__(
        self,
        records: Iterable[CandidateRecord],
        *,
        by_quality: bool = False,
        by_season: bool = False,
        media_kind: MediaKind = "movie",
    ) -> dict[str, list[CandidateRecord]] | None: ...


_AssembleFn = Callable[..., ResultSet]
_SeasonFn = Callable[[str], int | None]

log = structlog.get_logger(__name__)


def _quality_counts(records: Sequence[CandidateRecord]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for record in records:
        counts[record.quality.value] = counts.get(record.quality.value, 0) + 1
    return counts


class TorrentSearchUseCase:
    """Find, classify and rank torrent candidates for a title.

    Flow:
        1. Resolve IMDb ID to canonical title + year via TMDB.
        2. Fetch the search page for ``"<title> <year>"``.
        3. Extract candidate records (quality classified per title).
        4. Filter by policy.
        5. Sort by policy key/direction.
        6. Group by quality and/or season (optional).
        7. Assemble the ResultSet.

    Stages run strictly in order; ResolutionError and FetchError propagate
    to the caller unchanged.
    """

    def __init__(
        self,
        *,
        resolver: TitleResolverPort,
        fetcher: SourceFetcherPort,
        extract_fn: _ExtractFn,
        filter_fn: _FilterFn,
        sort_fn: _SortFn,
        group_fn: _GroupFn,
        assemble_fn: _AssembleFn,
        season_fn: _SeasonFn,
    ) -> None:
        self._resolver = resolver
        self._fetcher = fetcher
        self._extract_fn = extract_fn
        self._filter_fn = filter_fn
        self._sort_fn = sort_fn
        self._group_fn = group_fn
        self._assemble_fn = assemble_fn
        self._season_fn = season_fn

    async def execute(
        self,
        imdb_id: str,
        media_kind: MediaKind,
        policy: SearchPolicy,
    ) -> ResultSet:
        """Run the full pipeline for an IMDb ID.

        Raises:
            ResolutionError: TMDB has no usable title for the ID/kind pair.
            FetchError: the search page could not be retrieved.
        """
        media = await self._resolver.resolve(imdb_id, media_kind)
        log.info(
            "torrent_search_start",
            imdb_id=imdb_id,
            media_kind=media_kind,
            title=media.title,
            year=media.year,
        )
        return await self._run(media, policy)

    async def search_by_query(
        self,
        query: str,
        media_kind: MediaKind,
        policy: SearchPolicy,
    ) -> ResultSet:
        """Run the pipeline for a free-text query, skipping title resolution."""
        media = ResolvedMedia(title=query.strip(), year="", media_kind=media_kind)
        log.info("torrent_query_search_start", query=media.title, media_kind=media_kind)
        return await self._run(media, policy)

    async def available_seasons(self, imdb_id: str) -> tuple[ResolvedMedia, list[int]]:
        """Distinct season numbers found in the search results of a series."""
        media = await self._resolver.resolve(imdb_id, "series")
        records = await self._discover(media)
        seasons = sorted(
            {s for s in (self._season_fn(r.title) for r in records) if s is not None}
        )
        log.info(
            "torrent_seasons_found",
            imdb_id=imdb_id,
            title=media.title,
            seasons=seasons,
        )
        return media, seasons

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def _discover(self, media: ResolvedMedia) -> list[CandidateRecord]:
        document = await self._fetcher.fetch(media.title, media.year)
        return self._extract_fn(document)

    async def _run(self, media: ResolvedMedia, policy: SearchPolicy) -> ResultSet:
        start_ns = time.perf_counter_ns()
        candidates = await self._discover(media)

        filtered = self._filter_fn(candidates, policy, media.media_kind)
        ordered = self._sort_fn(filtered, policy.sort_key, policy.sort_direction)
        groups = self._group_fn(
            ordered,
            by_quality=policy.group_by_quality,
            by_season=policy.group_by_season,
            media_kind=media.media_kind,
        )
        result = self._assemble_fn(media, ordered, groups, policy)

        log.info(
            "torrent_search_complete",
            query=result.query,
            extracted=len(candidates),
            qualities=_quality_counts(filtered),
            total=result.total,
            groups=len(groups) if groups is not None else 0,
            duration_ms=round((time.perf_counter_ns() - start_ns) / 1e6, 2),
        )
        return result

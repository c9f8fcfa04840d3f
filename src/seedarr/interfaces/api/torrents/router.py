"""Torrent search API endpoints (search by IMDb ID, free-text search, seasons)."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from seedarr.domain.entities.torrent import (
    CandidateRecord,
    MediaKind,
    QualityTier,
    ResultSet,
    SearchPolicy,
    SortDirection,
    SortKey,
)
from seedarr.domain.exceptions import FetchError, ResolutionError
from seedarr.infrastructure.common.converters import to_bool
from seedarr.infrastructure.torrents.result_assembler import format_query
from seedarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/torrents", tags=["torrents"])

_IMDB_ID_RE = re.compile(r"^tt\d{5,10}$")

_MEDIA_KINDS: dict[str, MediaKind] = {
    "movie": "movie",
    "series": "series",
    "tv": "series",
}


# ---------------------------------------------------------------------------
# Query parameter parsing (malformed values are ignored, never rejected)
# ---------------------------------------------------------------------------


def _parse_media_kind(raw: str | None) -> MediaKind:
    if raw is None:
        return "movie"
    return _MEDIA_KINDS.get(raw.strip().lower(), "movie")


def _parse_tier_list(raw: str | None) -> frozenset[QualityTier]:
    if not raw:
        return frozenset()
    tiers = (QualityTier.parse(token) for token in raw.split(","))
    return frozenset(t for t in tiers if t is not None)


def _parse_bound(raw: str | None) -> QualityTier | None:
    if not raw:
        return None
    tier = QualityTier.parse(raw)
    # Unknown has no rank and cannot act as a bound.
    if tier is None or tier.rank is None:
        return None
    return tier


def _parse_season(raw: str | None) -> int | None:
    if raw is None:
        return None
    text = raw.strip()
    return int(text) if text.isdecimal() else None


def _parse_sort_key(raw: str | None) -> SortKey:
    try:
        return SortKey((raw or "").strip().lower())
    except ValueError:
        return SortKey.SEEDERS


def _parse_sort_direction(raw: str | None) -> SortDirection:
    try:
        return SortDirection((raw or "").strip().lower())
    except ValueError:
        return SortDirection.DESC


def _parse_policy(params: Mapping[str, str]) -> SearchPolicy:
    """Build a SearchPolicy from query parameters."""
    return SearchPolicy(
        qualities=_parse_tier_list(params.get("quality")),
        min_quality=_parse_bound(params.get("minQuality")),
        max_quality=_parse_bound(params.get("maxQuality")),
        exclude_qualities=_parse_tier_list(params.get("excludeQualities")),
        hdr=to_bool(params.get("hdr")),
        hevc=to_bool(params.get("hevc")),
        sort_key=_parse_sort_key(params.get("sortBy")),
        sort_direction=_parse_sort_direction(params.get("sortOrder")),
        group_by_quality=bool(to_bool(params.get("groupByQuality"))),
        group_by_season=bool(to_bool(params.get("groupBySeason"))),
        season=_parse_season(params.get("season")),
    )


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------


def _format_record(record: CandidateRecord) -> dict[str, Any]:
    return {
        "title": record.title,
        "size": record.size,
        "seeders": record.seeders,
        "leechers": record.leechers,
        "quality": record.quality.value,
        "hdr": record.hdr,
        "hevc": record.hevc,
        "magnet_link": record.magnet_link,
        "torrent_link": record.torrent_link,
        "added_date": record.added_date,
    }


def _result_payload(result: ResultSet, media_kind: MediaKind) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "type": media_kind,
        "query": result.query,
        "total": result.total,
        "grouped": result.groups is not None,
        "results": [_format_record(r) for r in result.records],
    }
    if result.groups is not None:
        payload["groups"] = {
            key: [_format_record(r) for r in members]
            for key, members in result.groups.items()
        }
    if result.policy.season is not None:
        payload["season"] = result.policy.season
    return payload


def _respond(payload: dict[str, Any], result: ResultSet) -> JSONResponse:
    if result.total == 0:
        payload["error"] = "no torrents found"
        return JSONResponse(content=payload, status_code=404)
    return JSONResponse(content=payload, status_code=200)


def _error(message: str, *, status_code: int) -> JSONResponse:
    return JSONResponse(content={"error": message}, status_code=status_code)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/search")
async def search_torrents_by_query(
    request: Request,
    query: str = Query("", description="Free-text search query"),
) -> JSONResponse:
    """Search the torrent source directly, skipping TMDB title resolution."""
    state = cast(AppState, request.app.state)
    query = query.strip()
    if not query:
        return _error("query parameter is required", status_code=400)

    media_kind = _parse_media_kind(request.query_params.get("type"))
    policy = _parse_policy(request.query_params)

    try:
        result = await state.torrent_search_uc.search_by_query(
            query, media_kind, policy
        )
    except FetchError as exc:
        log.warning("torrent_query_search_fetch_failed", query=query, url=exc.url)
        return _error(str(exc), status_code=502)

    return _respond(_result_payload(result, media_kind), result)


@router.get("/search/{imdb_id}")
async def search_torrents(request: Request, imdb_id: str) -> JSONResponse:
    """Find, filter, sort and group torrents for an IMDb ID."""
    state = cast(AppState, request.app.state)
    if not _IMDB_ID_RE.match(imdb_id):
        return _error(f"invalid IMDb ID: {imdb_id}", status_code=400)

    media_kind = _parse_media_kind(request.query_params.get("type"))
    policy = _parse_policy(request.query_params)

    try:
        result = await state.torrent_search_uc.execute(imdb_id, media_kind, policy)
    except ResolutionError as exc:
        log.warning("torrent_search_resolution_failed", imdb_id=imdb_id, error=str(exc))
        return _error(str(exc), status_code=500)
    except FetchError as exc:
        log.warning(
            "torrent_search_fetch_failed",
            imdb_id=imdb_id,
            url=exc.url,
            status=exc.status,
        )
        return _error(str(exc), status_code=502)

    payload = {"imdbId": imdb_id, **_result_payload(result, media_kind)}
    return _respond(payload, result)


@router.get("/seasons")
async def available_seasons(
    request: Request,
    imdb_id: str = Query("", alias="imdbId", description="IMDb ID of a series"),
) -> JSONResponse:
    """List the season numbers present in the search results of a series."""
    state = cast(AppState, request.app.state)
    if not _IMDB_ID_RE.match(imdb_id):
        return _error(f"invalid IMDb ID: {imdb_id}", status_code=400)

    try:
        media, seasons = await state.torrent_search_uc.available_seasons(imdb_id)
    except ResolutionError as exc:
        log.warning("torrent_seasons_resolution_failed", imdb_id=imdb_id, error=str(exc))
        return _error(str(exc), status_code=500)
    except FetchError as exc:
        log.warning("torrent_seasons_fetch_failed", imdb_id=imdb_id, url=exc.url)
        return _error(str(exc), status_code=502)

    return JSONResponse(
        content={"imdbId": imdb_id, "query": format_query(media), "seasons": seasons},
        status_code=200,
    )

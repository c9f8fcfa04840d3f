"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

import functools
from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from seedarr.application.use_cases.torrent_search import TorrentSearchUseCase
from seedarr.infrastructure.config.schema import AppConfig
from seedarr.infrastructure.tmdb.client import HttpxTmdbClient
from seedarr.infrastructure.torrents.candidate_filter import filter_candidates
from seedarr.infrastructure.torrents.candidate_sorter import sort_candidates
from seedarr.infrastructure.torrents.extractor import extract_candidates
from seedarr.infrastructure.torrents.grouping import group_candidates
from seedarr.infrastructure.torrents.release_parser import parse_season
from seedarr.infrastructure.torrents.result_assembler import assemble_result
from seedarr.infrastructure.torrents.source_fetcher import HttpxSourceFetcher
from seedarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def build_http_client(config: AppConfig) -> httpx.AsyncClient:
    """Shared outbound client for TMDB and the search surface."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        follow_redirects=config.http_follow_redirects,
        headers={"User-Agent": config.http_user_agent},
    )


def build_torrent_search(
    config: AppConfig, http_client: httpx.AsyncClient
) -> tuple[HttpxTmdbClient, HttpxSourceFetcher, TorrentSearchUseCase]:
    """Wire the TMDB client, the source fetcher and the pipeline stages."""
    tmdb_client = HttpxTmdbClient(
        http_client=http_client,
        api_key=config.tmdb.api_key,
        access_token=config.tmdb.access_token,
        language=config.tmdb.language,
        base_url=config.tmdb.base_url,
    )
    fetcher = HttpxSourceFetcher(
        http_client=http_client,
        search_url=config.source.search_url,
    )
    use_case = TorrentSearchUseCase(
        resolver=tmdb_client,
        fetcher=fetcher,
        extract_fn=functools.partial(extract_candidates, base_url=fetcher.base_url),
        filter_fn=filter_candidates,
        sort_fn=sort_candidates,
        group_fn=group_candidates,
        assemble_fn=assemble_result,
        season_fn=parse_season,
    )
    return tmdb_client, fetcher, use_case


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. HTTP client (required by TMDB client and source fetcher)
        2. TMDB client + source fetcher
        3. Torrent search use case (pure pipeline stages injected)
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) HTTP client
    state.http_client = build_http_client(config)
    log.info(
        "http_client_initialized",
        timeout_seconds=config.http_timeout_seconds,
        follow_redirects=config.http_follow_redirects,
    )

    # 2) + 3) Adapters and use case
    state.tmdb_client, state.source_fetcher, state.torrent_search_uc = (
        build_torrent_search(config, state.http_client)
    )
    if not (config.tmdb.api_key or config.tmdb.access_token):
        log.warning("tmdb_credentials_missing")
    log.info(
        "torrent_search_initialized",
        search_url=config.source.search_url,
        tmdb_language=config.tmdb.language,
    )

    state.graceful_shutdown.mark_ready()
    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.graceful_shutdown.wait_for_drain(
            timeout=config.shutdown_timeout_seconds
        )

        await state.http_client.aclose()
        log.info("http_client_closed")

        log.info("app_shutdown_complete")

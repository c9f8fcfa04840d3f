"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from seedarr.infrastructure.config import AppConfig
from seedarr.infrastructure.graceful_shutdown import GracefulShutdown

if TYPE_CHECKING:
    from seedarr.application.use_cases.torrent_search import TorrentSearchUseCase
    from seedarr.domain.ports import SourceFetcherPort, TitleResolverPort


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient

    # Domain ports
    tmdb_client: TitleResolverPort
    source_fetcher: SourceFetcherPort

    # Application services
    torrent_search_uc: TorrentSearchUseCase

    # Graceful shutdown (request tracking + drain)
    graceful_shutdown: GracefulShutdown

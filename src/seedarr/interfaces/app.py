"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.responses import Response

from seedarr.infrastructure.config import AppConfig
from seedarr.infrastructure.graceful_shutdown import GracefulShutdown
from seedarr.interfaces.app_state import AppState
from seedarr.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app; configuration only, resources are built in lifespan()."""
    app = FastAPI(
        title="Seedarr",
        description="Torrent discovery and ranking by IMDb ID",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config
    app.state.graceful_shutdown = GracefulShutdown()

    from seedarr.interfaces.api.torrents.router import router as torrents_router

    app.include_router(torrents_router, prefix="/api/v1")

    @app.get("/api/v1/healthz")
    async def healthz() -> dict[str, str | int]:
        """Liveness probe: 200 as long as the process is running."""
        gs: GracefulShutdown = app.state.graceful_shutdown
        return {"status": "ok", "in_flight": gs.in_flight}

    @app.get("/api/v1/readyz")
    async def readyz() -> Response:
        """Readiness probe: 200 after startup, 503 before it and while stopping."""
        gs: GracefulShutdown = app.state.graceful_shutdown
        if gs.is_ready:
            return JSONResponse({"status": "ready"}, status_code=200)
        return JSONResponse({"status": "not_ready"}, status_code=503)

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        gs: GracefulShutdown = app.state.graceful_shutdown
        start = time.perf_counter()
        status_code = 500
        with gs.track():
            try:
                response = await call_next(request)
                status_code = response.status_code
                return response
            finally:
                log.info(
                    "http_request",
                    method=request.method,
                    path=request.url.path,
                    query=str(request.url.query),
                    status_code=status_code,
                    duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
                    client_host=(request.client.host if request.client else None),
                )

    return app

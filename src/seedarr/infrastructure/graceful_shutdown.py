"""Readiness flag and in-flight request tracking for orderly shutdown."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

log = structlog.get_logger(__name__)


class GracefulShutdown:
    """Count in-flight requests so the lifespan can drain them before closing
    the shared HTTP client.

    The request middleware wraps every call in :meth:`track`; the lifespan
    calls :meth:`mark_ready` after startup and :meth:`wait_for_drain` on exit.
    """

    def __init__(self) -> None:
        self._in_flight = 0
        self._ready = False
        self._stopping = False
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def is_stopping(self) -> bool:
        return self._stopping

    @property
    def is_ready(self) -> bool:
        return self._ready and not self._stopping

    def mark_ready(self) -> None:
        self._ready = True

    def request_started(self) -> None:
        self._in_flight += 1
        self._idle.clear()

    def request_finished(self) -> None:
        self._in_flight = max(0, self._in_flight - 1)
        if self._in_flight == 0:
            self._idle.set()

    @contextmanager
    def track(self) -> Iterator[None]:
        """Count the enclosed block as one in-flight request."""
        self.request_started()
        try:
            yield
        finally:
            self.request_finished()

    async def wait_for_drain(self, *, timeout: float = 10.0) -> bool:
        """Stop reporting ready and wait up to *timeout* seconds for in-flight
        requests to finish.

        Returns True when everything drained, False on timeout.
        """
        self._stopping = True
        if self._in_flight == 0:
            return True

        log.info("shutdown_draining", in_flight=self._in_flight)
        try:
            await asyncio.wait_for(self._idle.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            log.warning(
                "shutdown_drain_timeout",
                in_flight=self._in_flight,
                timeout=timeout,
            )
            return False
        log.info("shutdown_drained")
        return True

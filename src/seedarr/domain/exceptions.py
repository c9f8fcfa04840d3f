"""Torrent search pipeline exceptions."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for all errors that abort a torrent search."""


class ResolutionError(PipelineError):
    """Raised when no canonical title can be resolved for an identifier."""


class FetchError(PipelineError):
    """Raised when the search document cannot be retrieved."""

    def __init__(self, message: str, *, url: str = "", status: int | None = None):
        super().__init__(message)
        self.url = url
        self.status = status

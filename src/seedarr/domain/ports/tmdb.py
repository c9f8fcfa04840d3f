"""Port for metadata provider lookups."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from seedarr.domain.entities.torrent import MediaKind, ResolvedMedia


@runtime_checkable
class TitleResolverPort(Protocol):
    """Async interface for resolving an IMDb ID to a canonical title."""

    async def resolve(self, imdb_id: str, media_kind: MediaKind) -> ResolvedMedia:
        """Resolve title and release year for an IMDb ID.

        Raises ResolutionError when the provider has no match for the
        requested media kind.
        """
        ...

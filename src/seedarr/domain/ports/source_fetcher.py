"""Port for retrieving the raw search result document."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SourceFetcherPort(Protocol):
    """Async interface for a torrent search surface."""

    async def fetch(self, title: str, year: str = "") -> str:
        """Search for ``"<title> <year>"`` and return the raw document.

        Raises FetchError on transport failure or non-success status.
        """
        ...

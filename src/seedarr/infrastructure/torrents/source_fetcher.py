"""Torrent search page fetcher backed by httpx."""

from __future__ import annotations

from urllib.parse import quote_plus, urlsplit

import httpx
import structlog

from seedarr.domain.exceptions import FetchError

log = structlog.get_logger(__name__)

DEFAULT_SEARCH_URL = "https://bitru.org/search.php?search={query}"


def build_search_query(title: str, year: str = "") -> str:
    """``"<title> <year>"``, with the year left out when empty."""
    title = title.strip()
    year = year.strip()
    return f"{title} {year}" if year else title


class HttpxSourceFetcher:
    """Fetch a search result page with a single GET (no retries).

    Implements ``SourceFetcherPort`` from domain.ports.source_fetcher.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        search_url: str = DEFAULT_SEARCH_URL,
    ) -> None:
        if "{query}" not in search_url:
            raise ValueError("search_url must contain a '{query}' placeholder")
        self._http = http_client
        self._search_url = search_url

    @property
    def base_url(self) -> str:
        """Scheme and host of the search surface, for resolving relative links."""
        parts = urlsplit(self._search_url)
        return f"{parts.scheme}://{parts.netloc}/"

    def search_url_for(self, title: str, year: str = "") -> str:
        query = build_search_query(title, year)
        return self._search_url.replace("{query}", quote_plus(query))

    async def fetch(self, title: str, year: str = "") -> str:
        """Retrieve the raw search document for *title* and *year*.

        Raises:
            FetchError: on transport failure or a non-2xx response.
        """
        url = self.search_url_for(title, year)
        try:
            resp = await self._http.get(url)
        except httpx.TimeoutException as exc:
            log.warning("source_fetch_timeout", url=url)
            raise FetchError(f"search request timed out: {url}", url=url) from exc
        except httpx.HTTPError as exc:
            log.warning("source_fetch_failed", url=url, error=str(exc))
            raise FetchError(f"search request failed: {exc}", url=url) from exc

        if not resp.is_success:
            log.warning("source_http_error", url=url, status=resp.status_code)
            raise FetchError(
                f"search surface returned HTTP {resp.status_code}",
                url=url,
                status=resp.status_code,
            )

        log.debug("source_fetched", url=url, bytes=len(resp.content))
        return resp.text

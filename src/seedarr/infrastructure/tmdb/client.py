"""TMDB API client: async httpx implementation of the title resolver."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from seedarr.domain.entities.torrent import MediaKind, ResolvedMedia
from seedarr.domain.exceptions import ResolutionError

log = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://api.themoviedb.org/3"

# /find result list and (original, localized, date) field names per media kind
_RESULT_FIELDS: dict[str, tuple[str, str, str, str]] = {
    "movie": ("movie_results", "original_title", "title", "release_date"),
    "series": ("tv_results", "original_name", "name", "first_air_date"),
}


class HttpxTmdbClient:
    """Async TMDB client using httpx.

    Implements ``TitleResolverPort`` from domain.ports.tmdb. Authenticates
    with a v4 bearer access token when one is given, otherwise with the v3
    ``api_key`` query parameter.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        api_key: str | None = None,
        access_token: str | None = None,
        language: str = "ru-RU",
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        self._http = http_client
        self._api_key = api_key
        self._access_token = access_token
        self._language = language
        self._base_url = base_url.rstrip("/")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _params(self, **extra: Any) -> dict[str, Any]:
        params: dict[str, Any] = {"language": self._language, **extra}
        if self._api_key and not self._access_token:
            params["api_key"] = self._api_key
        return params

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        return headers

    async def _get(self, path: str, **extra: Any) -> dict[str, Any]:
        """GET request; raises ResolutionError on any upstream failure."""
        url = f"{self._base_url}{path}"
        try:
            resp = await self._http.get(
                url, params=self._params(**extra), headers=self._headers()
            )
        except httpx.HTTPError as exc:
            log.warning("tmdb_network_error", path=path, exc_info=True)
            raise ResolutionError(f"metadata provider unreachable: {exc}") from exc

        if resp.status_code == 401:
            log.error("tmdb_api_key_invalid", status=401)
            raise ResolutionError("metadata provider rejected credentials")
        if not resp.is_success:
            log.warning("tmdb_http_error", path=path, status=resp.status_code)
            raise ResolutionError(
                f"metadata provider returned HTTP {resp.status_code}"
            )

        try:
            data = resp.json()
        except ValueError as exc:
            log.warning("tmdb_invalid_json", path=path)
            raise ResolutionError("metadata provider returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise ResolutionError("metadata provider returned unexpected payload")
        return data

    @staticmethod
    def _pick_title(item: dict[str, Any], original_field: str, local_field: str) -> str:
        for key in (original_field, local_field):
            value = item.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return ""

    # ------------------------------------------------------------------
    # Public API (TitleResolverPort)
    # ------------------------------------------------------------------

    async def find_by_imdb_id(self, imdb_id: str) -> dict[str, Any]:
        """Raw TMDB ``/find`` payload (``movie_results``, ``tv_results``, ...)."""
        return await self._get(f"/find/{imdb_id}", external_source="imdb_id")

    async def resolve(self, imdb_id: str, media_kind: MediaKind) -> ResolvedMedia:
        """Resolve the canonical title and year for an IMDb ID.

        The original-language title is preferred; the localized title is
        the fallback. Year is the first four characters of the release
        (or first air) date, or ``""`` when there is none.

        Raises:
            ResolutionError: no result for *media_kind*, no usable title,
                or the provider call failed.
        """
        list_field, original_field, local_field, date_field = _RESULT_FIELDS[
            media_kind
        ]
        data = await self.find_by_imdb_id(imdb_id)

        results = data.get(list_field) or []
        if not results or not isinstance(results[0], dict):
            log.info("tmdb_no_results", imdb_id=imdb_id, media_kind=media_kind)
            raise ResolutionError(f"no results found for IMDb ID: {imdb_id}")

        item = results[0]
        title = self._pick_title(item, original_field, local_field)
        if not title:
            log.info("tmdb_result_without_title", imdb_id=imdb_id)
            raise ResolutionError(f"no title found for IMDb ID: {imdb_id}")

        date_str = item.get(date_field) or ""
        year = date_str[:4] if isinstance(date_str, str) and len(date_str) >= 4 else ""

        log.debug("tmdb_title_resolved", imdb_id=imdb_id, title=title, year=year)
        return ResolvedMedia(title=title, year=year, media_kind=media_kind)

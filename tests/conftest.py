"""Shared test fixtures for Seedarr test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from seedarr.domain.entities import (
    CandidateRecord,
    QualityTier,
    ResolvedMedia,
    SearchPolicy,
)

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def resolved_movie() -> ResolvedMedia:
    return ResolvedMedia(title="Dune: Part Two", year="2024", media_kind="movie")


@pytest.fixture()
def resolved_series() -> ResolvedMedia:
    return ResolvedMedia(title="The Bear", year="2022", media_kind="series")


@pytest.fixture()
def default_policy() -> SearchPolicy:
    return SearchPolicy()


@pytest.fixture()
def candidates() -> list[CandidateRecord]:
    """Mixed-tier candidates in page order."""
    return [
        CandidateRecord(
            title="Dune.Part.Two.2024.1080p.WEB-DL",
            size="8.2 GB",
            seeders=120,
            leechers=10,
            quality=QualityTier.P1080,
            added_date="2024-04-02",
        ),
        CandidateRecord(
            title="Dune.Part.Two.2024.720p.WEBRip",
            size="2.1 GB",
            seeders=45,
            leechers=3,
            quality=QualityTier.P720,
            added_date="2024-03-30",
        ),
        CandidateRecord(
            title="Dune.Part.Two.2024.2160p.HDR.HEVC.WEB-DL",
            size="25.4 GB",
            seeders=300,
            leechers=40,
            quality=QualityTier.UHD_4K,
            hdr=True,
            hevc=True,
            added_date="2024-04-05",
        ),
        CandidateRecord(
            title="Dune.Part.Two.2024.480p.CAMRip",
            size="700 MB",
            seeders=5,
            leechers=1,
            quality=QualityTier.P480,
            added_date="2024-03-01",
        ),
        CandidateRecord(
            title="Dune Part Two 2024 TS",
            size="1.4 GB",
            seeders=2,
            leechers=0,
            quality=QualityTier.UNKNOWN,
        ),
    ]


# ---------------------------------------------------------------------------
# Mock port fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_resolver(resolved_movie: ResolvedMedia) -> AsyncMock:
    """Mock TitleResolverPort."""
    resolver = AsyncMock()
    resolver.resolve = AsyncMock(return_value=resolved_movie)
    return resolver


@pytest.fixture()
def mock_fetcher() -> AsyncMock:
    """Mock SourceFetcherPort returning an empty document."""
    fetcher = AsyncMock()
    fetcher.fetch = AsyncMock(return_value="<html></html>")
    return fetcher


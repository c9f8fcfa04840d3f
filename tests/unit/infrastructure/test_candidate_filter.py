"""Tests for policy-driven candidate filtering."""

from __future__ import annotations

import pytest

from seedarr.domain.entities import CandidateRecord, QualityTier, SearchPolicy
from seedarr.infrastructure.torrents.candidate_filter import (
    build_predicates,
    filter_candidates,
    meets_maximum,
    meets_minimum,
)


def _rec(title: str, quality: QualityTier, **kwargs) -> CandidateRecord:
    return CandidateRecord(title=title, quality=quality, **kwargs)


class TestBounds:
    def test_minimum(self) -> None:
        assert meets_minimum(QualityTier.P1080, QualityTier.P720)
        assert meets_minimum(QualityTier.P720, QualityTier.P720)
        assert not meets_minimum(QualityTier.P480, QualityTier.P720)

    def test_maximum(self) -> None:
        assert meets_maximum(QualityTier.P720, QualityTier.P1080)
        assert not meets_maximum(QualityTier.UHD_4K, QualityTier.P1080)

    def test_unknown_never_meets_a_bound(self) -> None:
        assert not meets_minimum(QualityTier.UNKNOWN, QualityTier.P360)
        assert not meets_maximum(QualityTier.UNKNOWN, QualityTier.UHD_4K)


class TestFilterCandidates:
    def test_empty_policy_keeps_everything(
        self, candidates: list[CandidateRecord]
    ) -> None:
        assert filter_candidates(candidates, SearchPolicy()) == candidates
        assert build_predicates(SearchPolicy()) == []

    def test_min_quality_example(self) -> None:
        records = [
            _rec("a", QualityTier.P1080),
            _rec("b", QualityTier.P720),
            _rec("c", QualityTier.UHD_4K),
            _rec("d", QualityTier.P480),
        ]

        result = filter_candidates(
            records, SearchPolicy(min_quality=QualityTier.P720)
        )

        assert {r.quality for r in result} == {
            QualityTier.P1080,
            QualityTier.P720,
            QualityTier.UHD_4K,
        }

    def test_min_quality_drops_unknown(
        self, candidates: list[CandidateRecord]
    ) -> None:
        result = filter_candidates(
            candidates, SearchPolicy(min_quality=QualityTier.P360)
        )
        assert all(r.quality.rank is not None for r in result)
        assert all(r.quality.rank >= QualityTier.P360.rank for r in result)

    def test_max_quality(self, candidates: list[CandidateRecord]) -> None:
        result = filter_candidates(
            candidates, SearchPolicy(max_quality=QualityTier.P720)
        )
        assert [r.quality for r in result] == [QualityTier.P720, QualityTier.P480]

    def test_allow_list(self, candidates: list[CandidateRecord]) -> None:
        policy = SearchPolicy(
            qualities=frozenset({QualityTier.UHD_4K, QualityTier.UNKNOWN})
        )
        result = filter_candidates(candidates, policy)
        assert [r.quality for r in result] == [
            QualityTier.UHD_4K,
            QualityTier.UNKNOWN,
        ]

    def test_exclusions(self, candidates: list[CandidateRecord]) -> None:
        policy = SearchPolicy(
            exclude_qualities=frozenset({QualityTier.P480, QualityTier.UNKNOWN})
        )
        result = filter_candidates(candidates, policy)
        assert QualityTier.P480 not in {r.quality for r in result}
        assert QualityTier.UNKNOWN not in {r.quality for r in result}
        assert len(result) == 3

    @pytest.mark.parametrize("wanted", [True, False])
    def test_hdr_flag(self, candidates: list[CandidateRecord], wanted: bool) -> None:
        result = filter_candidates(candidates, SearchPolicy(hdr=wanted))
        assert result
        assert all(r.hdr is wanted for r in result)

    def test_hevc_flag(self, candidates: list[CandidateRecord]) -> None:
        result = filter_candidates(candidates, SearchPolicy(hevc=True))
        assert [r.title for r in result] == ["Dune.Part.Two.2024.2160p.HDR.HEVC.WEB-DL"]

    def test_preserves_input_order(self, candidates: list[CandidateRecord]) -> None:
        result = filter_candidates(
            candidates, SearchPolicy(min_quality=QualityTier.P480)
        )
        positions = [candidates.index(r) for r in result]
        assert positions == sorted(positions)


class TestSeasonFilter:
    _RECORDS = [
        _rec("Show.S01.1080p", QualityTier.P1080),
        _rec("Show.S02.1080p", QualityTier.P1080),
        _rec("Show Complete 720p", QualityTier.P720),
    ]

    def test_series_keeps_matching_season(self) -> None:
        result = filter_candidates(self._RECORDS, SearchPolicy(season=2), "series")
        assert [r.title for r in result] == ["Show.S02.1080p"]

    def test_series_drops_titles_without_season(self) -> None:
        result = filter_candidates(self._RECORDS, SearchPolicy(season=1), "series")
        assert "Show Complete 720p" not in [r.title for r in result]

    def test_movie_ignores_season(self) -> None:
        result = filter_candidates(self._RECORDS, SearchPolicy(season=2), "movie")
        assert result == self._RECORDS


class TestCombined:
    def test_all_predicates_must_pass(self, candidates: list[CandidateRecord]) -> None:
        policy = SearchPolicy(
            min_quality=QualityTier.P720,
            max_quality=QualityTier.P1080,
            hdr=False,
        )
        result = filter_candidates(candidates, policy)
        assert [r.quality for r in result] == [QualityTier.P1080, QualityTier.P720]

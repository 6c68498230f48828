"""Tests for LocalArtistStrategy."""

from __future__ import annotations

from careerfeed.models import CandidateVideo, ScoredVideo
from careerfeed.strategies.local_artist import LocalArtistStrategy


def _scored(video_id: str, local: bool) -> ScoredVideo:
    return ScoredVideo(CandidateVideo(video_id, is_local_artist=local), 50, "r")


class TestLocalArtistStrategy:
    def test_filters_and_keeps_rank_order(self) -> None:
        ranked = [_scored("a", False), _scored("b", True), _scored("c", True), _scored("d", True)]
        assert [p.id for p in LocalArtistStrategy().select(ranked, 2)] == ["b", "c"]

    def test_no_local_artists(self) -> None:
        assert LocalArtistStrategy().select([_scored("a", False)], 3) == []

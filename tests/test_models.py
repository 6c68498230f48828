"""Tests for careerfeed.models dataclasses."""

from __future__ import annotations

from careerfeed.models import (
    POSITIVE_REACTIONS,
    BehaviorState,
    CandidateVideo,
    CategoryStreak,
    ReactionKind,
    ScoredVideo,
)


class TestBehaviorState:
    def test_defaults_are_empty(self) -> None:
        state = BehaviorState()
        assert state.interest_scores == {}
        assert state.liked_videos == set()
        assert state.category_watch_history == []
        assert state.category_streak == CategoryStreak(None, 0, 0)
        assert state.preferred_category is None
        assert state.last_updated is None

    def test_instances_do_not_share_containers(self) -> None:
        a = BehaviorState()
        b = BehaviorState()
        a.liked_videos.add("v1")
        a.category_streak.run_length = 2
        assert b.liked_videos == set()
        assert b.category_streak.run_length == 0


class TestReactionKind:
    def test_positive_set(self) -> None:
        assert POSITIVE_REACTIONS == {"love", "inspired", "wow"}

    def test_str_enum_value(self) -> None:
        assert ReactionKind.LOVE == "love"


class TestCandidateVideo:
    def test_from_camel_case_dict(self) -> None:
        video = CandidateVideo.from_dict(
            {
                "id": "abc",
                "title": "Beat Lab",
                "careerCategory": "music_production",
                "tags": ["career", "music"],
                "isLocalArtist": True,
                "wasSkipped": False,
                "thumbnail": "https://img/abc.jpg",
            }
        )
        assert video.id == "abc"
        assert video.career_category == "music_production"
        assert video.tags == frozenset({"career", "music"})
        assert video.is_local_artist is True
        assert video.was_skipped is False
        assert video.extra == {"thumbnail": "https://img/abc.jpg"}

    def test_from_snake_case_dict(self) -> None:
        video = CandidateVideo.from_dict(
            {"id": "x", "career_category": "Sports", "is_local_artist": 1, "was_skipped": 1}
        )
        assert video.career_category == "Sports"
        assert video.is_local_artist is True
        assert video.was_skipped is True

    def test_string_tags_are_one_tag(self) -> None:
        video = CandidateVideo.from_dict({"id": "a", "tags": "career"})
        assert video.tags == frozenset({"career"})

    def test_empty_string_tags(self) -> None:
        assert CandidateVideo.from_dict({"id": "a", "tags": ""}).tags == frozenset()

    def test_missing_fields_default(self) -> None:
        video = CandidateVideo.from_dict({"id": 42})
        assert video.id == "42"
        assert video.title == ""
        assert video.career_category is None
        assert video.tags == frozenset()

    def test_to_dict_keeps_display_fields(self) -> None:
        video = CandidateVideo("abc", "T", "Music", frozenset({"b", "a"}), extra={"channel": "c"})
        data = video.to_dict()
        assert data["channel"] == "c"
        assert data["tags"] == ["a", "b"]
        assert data["careerCategory"] == "Music"


class TestScoredVideo:
    def test_id_and_dict(self) -> None:
        scored = ScoredVideo(CandidateVideo("v1"), 72.5, "Recommended for you")
        assert scored.id == "v1"
        data = scored.to_dict()
        assert data["recommendationScore"] == 72.5
        assert data["recommendationReason"] == "Recommended for you"

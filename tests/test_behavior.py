"""Tests for careerfeed.behavior: pure state transitions.

These verify the interest maths and watch classification without any
persistence involved.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone

import pytest

from careerfeed import behavior
from careerfeed.models import BehaviorState

TS = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestRecordWatch:
    def test_accumulates_watch_time(self) -> None:
        state = BehaviorState()
        behavior.record_watch(state, "v1", 1000, 60_000, TS)
        behavior.record_watch(state, "v1", 2500, 60_000, TS)
        assert state.watch_time_ms["v1"] == 3500

    def test_returns_fraction(self) -> None:
        state = BehaviorState()
        fraction = behavior.record_watch(state, "v1", 30_000, 60_000, TS)
        assert fraction == pytest.approx(0.5)

    def test_high_engagement_above_seventy_percent(self) -> None:
        state = BehaviorState()
        behavior.record_watch(state, "v1", 43_000, 60_000, TS)
        assert "v1" in state.high_engagement_videos

    def test_exactly_seventy_percent_is_not_high(self) -> None:
        state = BehaviorState()
        behavior.record_watch(state, "v1", 7000, 10_000, TS)
        assert "v1" not in state.high_engagement_videos

    def test_high_engagement_forwards_category(self) -> None:
        state = BehaviorState()
        behavior.record_watch(state, "v1", 9000, 10_000, TS, category="dance")
        assert [w.category for w in state.category_watch_history] == ["Sports"]

    def test_low_engagement_does_not_track_category(self) -> None:
        state = BehaviorState()
        behavior.record_watch(state, "v1", 5000, 10_000, TS, category="Music")
        assert state.category_watch_history == []

    def test_quick_skip_is_marked(self) -> None:
        state = BehaviorState()
        behavior.record_watch(state, "v1", 1500, 60_000, TS)
        assert "v1" in state.skipped_videos

    def test_slow_low_fraction_is_not_a_skip(self) -> None:
        state = BehaviorState()
        behavior.record_watch(state, "v1", 4000, 120_000, TS)
        assert "v1" not in state.skipped_videos

    def test_skip_and_high_engagement_can_both_fire(self) -> None:
        state = BehaviorState()
        behavior.record_watch(state, "v1", 500, 60_000, TS)
        behavior.record_watch(state, "v1", 50_000, 60_000, TS)
        assert "v1" in state.skipped_videos
        assert "v1" in state.high_engagement_videos

    def test_zero_duration_gives_zero_fraction(self) -> None:
        state = BehaviorState()
        fraction = behavior.record_watch(state, "v1", 100, 0, TS)
        assert fraction == 0.0
        assert "v1" in state.skipped_videos
        assert "v1" not in state.high_engagement_videos

    @pytest.mark.parametrize("bad_delta", [-500, math.nan, math.inf])
    def test_invalid_delta_counts_as_zero(self, bad_delta) -> None:
        state = BehaviorState()
        behavior.record_watch(state, "v1", 2000, 60_000, TS)
        behavior.record_watch(state, "v1", bad_delta, 60_000, TS)
        assert state.watch_time_ms["v1"] == 2000

    def test_nan_duration_gives_zero_fraction(self) -> None:
        state = BehaviorState()
        assert behavior.record_watch(state, "v1", 5000, math.nan, TS) == 0.0


class TestInterest:
    def test_like_adds_ten(self) -> None:
        state = BehaviorState()
        behavior.like(state, "v1", "Music")
        assert state.interest_scores["Music"] == pytest.approx(10)
        assert "v1" in state.liked_videos

    def test_repeat_like_is_cumulative(self) -> None:
        state = BehaviorState()
        behavior.like(state, "v1", "Music")
        behavior.like(state, "v1", "Music")
        assert state.interest_scores["Music"] == pytest.approx(20)

    def test_like_without_category_leaves_interests(self) -> None:
        state = BehaviorState()
        behavior.like(state, "v1")
        assert state.interest_scores == {}

    def test_unlike_removes_and_subtracts_two(self) -> None:
        state = BehaviorState()
        behavior.like(state, "v1", "Music")
        behavior.unlike(state, "v1", "Music")
        assert "v1" not in state.liked_videos
        assert state.interest_scores["Music"] == pytest.approx(8)

    def test_unlike_floors_at_zero(self) -> None:
        state = BehaviorState()
        behavior.unlike(state, "v1", "Music")
        assert state.interest_scores["Music"] == 0

    def test_replay_counts_and_adds_fifteen(self) -> None:
        state = BehaviorState()
        behavior.replay(state, "v1", "dance")
        behavior.replay(state, "v1", "dance")
        assert state.replay_counts["v1"] == 2
        assert state.interest_scores["dance"] == pytest.approx(30)

    def test_interest_keys_are_not_normalised(self) -> None:
        state = BehaviorState()
        behavior.replay(state, "v1", "music_production")
        assert "music_production" in state.interest_scores
        assert "Music" not in state.interest_scores

    @pytest.mark.parametrize("kind", ["love", "inspired", "wow"])
    def test_positive_reaction_adds_eight(self, kind) -> None:
        state = BehaviorState()
        behavior.react(state, "v1", kind, TS, "Music")
        assert state.interest_scores["Music"] == pytest.approx(8)
        assert state.reactions["v1"][0].kind == kind
        assert state.reactions["v1"][0].at == TS

    def test_other_reaction_is_recorded_without_interest(self) -> None:
        state = BehaviorState()
        behavior.react(state, "v1", "sad", TS, "Music")
        assert len(state.reactions["v1"]) == 1
        assert "Music" not in state.interest_scores

    def test_comment_appends_and_adds_twelve(self) -> None:
        state = BehaviorState()
        behavior.comment(state, "v1", "so cool", TS, "Sports")
        behavior.comment(state, "v1", "again!", TS, "Sports")
        assert [c.text for c in state.comments["v1"]] == ["so cool", "again!"]
        assert state.interest_scores["Sports"] == pytest.approx(24)

    def test_interest_caps_at_hundred(self) -> None:
        state = BehaviorState()
        for _ in range(10):
            behavior.replay(state, "v1", "Music")
        assert state.interest_scores["Music"] == 100

    def test_like_unlike_sequences_stay_in_range(self) -> None:
        state = BehaviorState()
        pattern = [True] * 12 + [False] * 60 + [True, False] * 20
        for liked in pattern:
            if liked:
                behavior.like(state, "v1", "Music")
            else:
                behavior.unlike(state, "v1", "Music")
            assert 0 <= state.interest_scores["Music"] <= 100


class TestScroll:
    def test_scroll_history_is_bounded(self) -> None:
        state = BehaviorState()
        for i in range(150):
            behavior.track_scroll(state, "down", f"v{i}", TS)
        assert len(state.scroll_patterns) == behavior.SCROLL_CAPACITY
        assert state.scroll_patterns[0].video_id == "v50"
        assert state.scroll_patterns[-1].video_id == "v149"


class TestReset:
    def test_reset_returns_zero_state(self) -> None:
        state = BehaviorState()
        behavior.like(state, "v1", "Music")
        behavior.record_watch(state, "v1", 9000, 10_000, TS, category="Music")
        behavior.reset(state)
        assert state == BehaviorState()

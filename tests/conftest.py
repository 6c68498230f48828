"""Shared pytest fixtures for all careerfeed tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from careerfeed.engine import RecommendationEngine
from careerfeed.models import CandidateVideo
from careerfeed.persistence import InMemoryStateSink
from careerfeed.user_state import BehaviorStore


TS = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class TickingClock:
    """Returns a strictly increasing time, one second per call."""

    def __init__(self, start: datetime = TS) -> None:
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def sink() -> InMemoryStateSink:
    return InMemoryStateSink()


@pytest.fixture
def store(sink, clock) -> BehaviorStore:
    """An empty store (cold-start user) backed by an in-memory sink."""
    return BehaviorStore(sink=sink, clock=clock)


@pytest.fixture
def music_store(store) -> BehaviorStore:
    """A user whose only interest is ``"Music"`` at 80."""
    store.state.interest_scores["Music"] = 80.0
    return store


@pytest.fixture
def engine(store) -> RecommendationEngine:
    return RecommendationEngine(store)


# ---------------------------------------------------------------------------
# Candidate fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_candidates() -> list[CandidateVideo]:
    """Ten candidates spanning several categories, two by local artists."""
    return [
        CandidateVideo("v1", "Beat Making 101", "Music", frozenset({"career"})),
        CandidateVideo("v2", "Studio Tour", "music_production", frozenset({"career"})),
        CandidateVideo("v3", "Street Dance", "dance", frozenset()),
        CandidateVideo("v4", "Cutting a Trailer", "video_editing", frozenset({"career"})),
        CandidateVideo("v5", "Local Rapper Live", "rap_music", frozenset(), is_local_artist=True),
        CandidateVideo("v6", "Indie Short Film", "Film & Television", frozenset()),
        CandidateVideo("v7", "Managing a Band", "music_business", frozenset({"career"})),
        CandidateVideo("v8", "Court Highlights", "Sports", frozenset()),
        CandidateVideo("v9", "Hometown Choir", "Music", frozenset(), is_local_artist=True),
        CandidateVideo("v10", "Untitled Clip", None, frozenset()),
    ]

"""Recommendation engine: scores candidates and composes the personalised feed."""

from __future__ import annotations

import logging
import math
from typing import Iterable

import numpy as np

from careerfeed.categories import describe_category, format_category_name, next_interest_for
from careerfeed.models import (
    CandidateVideo,
    CareerInsights,
    CareerSuggestion,
    ScoredVideo,
    TopCareer,
)
from careerfeed.strategies.base import FeedStrategy
from careerfeed.strategies.diverse import DiverseStrategy
from careerfeed.strategies.local_artist import LocalArtistStrategy
from careerfeed.strategies.top_ranked import TopRankedStrategy
from careerfeed.user_state import BehaviorStore

logger = logging.getLogger(__name__)

BASE_SCORE = 50.0
MIN_SCORE = 0.0
MAX_SCORE = 100.0

_INTEREST_WEIGHT = 0.5
_LIKED_BOOST = 30.0
_LOCAL_ARTIST_BOOST = 15.0
_ENGAGEMENT_WEIGHT = 0.3
_CAREER_TAG_BOOST = 20.0
_SKIPPED_PENALTY = 40.0

_CAREER_TAG = "career"
_CAREER_INTEREST_MARKERS = ("career", "music", "dance")

REASON_NEW_USER = "New user - exploring all content"
REASON_LIKED = "You liked this before"
REASON_LOCAL_ARTIST = "Local artist from your area"
REASON_CAREER_DISCOVERY = "Career discovery content"
REASON_DEFAULT = "Recommended for you"

MESSAGE_NO_INTERESTS = "Keep watching videos to discover your interests!"

# Share of the feed given to each strategy: (strategy_attr_name, share)
_SLOT_ALLOCATION = [
    ("_top_strategy", 0.6),
    ("_diverse_strategy", 0.2),
    ("_local_artist_strategy", 0.2),
]

DEFAULT_FEED_LIMIT = 20


class RecommendationEngine:
    """Ranks candidate videos against a user's behaviour and builds the feed.

    Feed composition:

    ========================  =======
    Strategy                  Share
    ========================  =======
    Top ranked                60 %
    Diverse (per category)    20 %
    Local artists             20 %
    ========================  =======

    Each share is rounded down.  Slices are concatenated in the order above
    and deduplicated by video id; when a video appears in more than one slice
    the later slice's entry wins but the video keeps its first position.

    Args:
        store: The session's :class:`~careerfeed.user_state.BehaviorStore`.
        top_strategy: Picks the highest ranked videos.
        diverse_strategy: Picks one video per category.
        local_artist_strategy: Picks local-artist videos.
    """

    def __init__(
        self,
        store: BehaviorStore,
        top_strategy: FeedStrategy | None = None,
        diverse_strategy: FeedStrategy | None = None,
        local_artist_strategy: FeedStrategy | None = None,
    ) -> None:
        self._store = store
        self._top_strategy = top_strategy or TopRankedStrategy()
        self._diverse_strategy = diverse_strategy or DiverseStrategy()
        self._local_artist_strategy = local_artist_strategy or LocalArtistStrategy()

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def score_videos_for_user(self, candidates: Iterable[CandidateVideo]) -> list[ScoredVideo]:
        """Score every candidate and return them best first.

        With no recorded interests every candidate scores a neutral 50 and the
        input order is kept.  Otherwise each candidate starts at 50 and
        collects boosts and penalties from the user's behaviour; only the
        first applicable reason is reported.  The final score is clamped to
        [0, 100] and the sort is stable.

        Args:
            candidates: Videos supplied by the content source.

        Returns:
            One :class:`~careerfeed.models.ScoredVideo` per candidate.
        """
        videos = list(candidates)
        interests = dict(self._store.get_interests())

        if not interests:
            return [ScoredVideo(v, BASE_SCORE, REASON_NEW_USER) for v in videos]

        top_categories = [category for category, _ in self._store.get_top_interests(3)]
        career_interest = any(
            marker in category
            for category in top_categories
            for marker in _CAREER_INTEREST_MARKERS
        )

        raw_scores: list[float] = []
        reasons: list[str] = []
        for video in videos:
            score, reason = self._score_one(video, interests, career_interest)
            raw_scores.append(score)
            reasons.append(reason)

        scores = np.asarray(raw_scores, dtype=float)
        scores[~np.isfinite(scores)] = 0.0
        scores = np.clip(scores, MIN_SCORE, MAX_SCORE)
        order = np.argsort(-scores, kind="stable")

        ranked = [
            ScoredVideo(videos[i], float(scores[i]), reasons[i]) for i in order
        ]
        logger.debug("Scored %d candidates against %d interests.", len(ranked), len(interests))
        return ranked

    def _score_one(
        self,
        video: CandidateVideo,
        interests: dict[str, float],
        career_interest: bool,
    ) -> tuple[float, str]:
        score = BASE_SCORE
        reasons: list[str] = []

        category = video.career_category
        if category and category in interests:
            score += _finite(interests[category]) * _INTEREST_WEIGHT
            reasons.append(f"Matches your interest in {format_category_name(category)}")

        if self._store.has_liked(video.id):
            score += _LIKED_BOOST
            reasons.append(REASON_LIKED)

        if video.is_local_artist:
            score += _LOCAL_ARTIST_BOOST
            reasons.append(REASON_LOCAL_ARTIST)

        score += self._store.engagement_score(video.id) * _ENGAGEMENT_WEIGHT

        if _CAREER_TAG in video.tags and career_interest:
            score += _CAREER_TAG_BOOST
            reasons.append(REASON_CAREER_DISCOVERY)

        if video.was_skipped:
            score -= _SKIPPED_PENALTY

        return score, reasons[0] if reasons else REASON_DEFAULT

    # ------------------------------------------------------------------
    # Feed composition
    # ------------------------------------------------------------------

    def get_personalized_feed(
        self, candidates: Iterable[CandidateVideo], limit: int = DEFAULT_FEED_LIMIT
    ) -> list[ScoredVideo]:
        """Return at most *limit* scored videos with no duplicate ids.

        Args:
            candidates: Videos supplied by the content source.
            limit: Maximum feed length.  Non-positive limits give an empty feed.

        Returns:
            The composed feed.
        """
        if limit <= 0:
            return []

        ranked = self.score_videos_for_user(candidates)

        unique: dict[str, ScoredVideo] = {}
        for strategy_attr, share in _SLOT_ALLOCATION:
            strategy: FeedStrategy = getattr(self, strategy_attr)
            n_slots = math.floor(limit * share)
            for scored in strategy.select(ranked, n_slots):
                unique[scored.id] = scored

        feed = list(unique.values())[:limit]
        logger.debug(
            "Composed feed of %d videos from %d candidates (limit=%d).",
            len(feed),
            len(ranked),
            limit,
        )
        return feed

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------

    def get_career_insights(self) -> CareerInsights:
        """Summarise the user's strongest interest and the runners-up."""
        top = self._store.get_top_interests(5)
        if not top:
            return CareerInsights(message=MESSAGE_NO_INTERESTS)

        category, score = top[0]
        name = format_category_name(category)
        return CareerInsights(
            message=f"You're showing strong interest in {name}!",
            top_career=TopCareer(
                name=name, score=score, description=describe_category(category)
            ),
            suggestions=[
                CareerSuggestion(name=format_category_name(c), score=s) for c, s in top[1:4]
            ],
        )

    def predict_next_interest(self) -> str | None:
        """Guess the category the user is likely to explore next.

        Needs at least two recorded interests.

        Returns:
            Display name of the predicted category, or ``None``.
        """
        top = self._store.get_top_interests(3)
        if len(top) < 2:
            return None
        successor = next_interest_for(top[0][0])
        return format_category_name(successor) if successor else None


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0

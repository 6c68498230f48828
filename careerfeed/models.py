"""Core domain dataclasses shared across all careerfeed modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union


class CareerCategory(str, Enum):
    """The six canonical creative-industry categories."""

    BUSINESS = "Business & Management"
    ANIMATION = "Animation & Visual Effects"
    WRITING = "Writing & Journalism"
    MUSIC = "Music"
    SPORTS = "Sports"
    FILM = "Film & Television"


class ReactionKind(str, Enum):
    """Reaction buttons offered on a video card.

    The set is open: :meth:`~careerfeed.user_state.BehaviorStore.react`
    accepts any string, these are just the ones the UI ships with.
    """

    LOVE = "love"
    WOW = "wow"
    INSPIRED = "inspired"
    LAUGH = "laugh"
    FIRE = "fire"
    SAD = "sad"


# Reactions that count as a positive interest signal.
POSITIVE_REACTIONS = frozenset(
    {ReactionKind.LOVE.value, ReactionKind.INSPIRED.value, ReactionKind.WOW.value}
)


@dataclass(frozen=True)
class Canonical:
    """A category identifier that is already one of the canonical six."""

    category: CareerCategory

    @property
    def name(self) -> str:
        return self.category.value


@dataclass(frozen=True)
class Code:
    """A free-form category code such as ``"music_production"``."""

    code: str

    @property
    def name(self) -> str:
        return self.code


CategoryRef = Union[Canonical, Code]


@dataclass
class Reaction:
    kind: str
    at: datetime


@dataclass
class Comment:
    text: str
    at: datetime


@dataclass
class CategoryWatch:
    """One high-engagement watch recorded in the category history."""

    category: str
    at: datetime


@dataclass
class ScrollEvent:
    direction: str
    video_id: str
    at: datetime


@dataclass
class CategoryStreak:
    """Current category streak.

    Attributes:
        category: The locked-in category, or ``None``.
        count: Size of the trailing window that confirmed the streak.  Only
            ever 0 or 3.
        run_length: Length of the trailing run of identical categories in the
            watch history, whether or not the streak is locked in.
    """

    category: str | None = None
    count: int = 0
    run_length: int = 0


@dataclass
class BehaviorState:
    """Accumulated behavioural facts for one user session.

    Interest deltas (applied by :mod:`careerfeed.behavior`):

    ========  ===========================
    Event     Interest delta
    ========  ===========================
    Like      +10
    Unlike    -2
    Replay    +15
    Reaction  +8 (love / inspired / wow)
    Comment   +12
    ========  ===========================

    Every interest score is clamped to [0, 100] after each update.
    """

    watch_time_ms: dict[str, int] = field(default_factory=dict)
    liked_videos: set[str] = field(default_factory=set)
    replay_counts: dict[str, int] = field(default_factory=dict)
    reactions: dict[str, list[Reaction]] = field(default_factory=dict)
    comments: dict[str, list[Comment]] = field(default_factory=dict)
    skipped_videos: set[str] = field(default_factory=set)
    high_engagement_videos: set[str] = field(default_factory=set)
    interest_scores: dict[str, float] = field(default_factory=dict)
    category_watch_history: list[CategoryWatch] = field(default_factory=list)
    category_streak: CategoryStreak = field(default_factory=CategoryStreak)
    preferred_category: str | None = None
    scroll_patterns: list[ScrollEvent] = field(default_factory=list)
    last_updated: datetime | None = None


@dataclass(frozen=True)
class CandidateVideo:
    """A candidate video supplied by an external content source.

    Attributes:
        id: Upstream video identifier.
        title: Display title.
        career_category: Category code or canonical name, if known.
        tags: Free-form content tags.
        is_local_artist: Whether the creator is local to the viewer.
        was_skipped: Upstream flag marking the video as previously skipped.
        extra: Any other display fields, passed through untouched.
    """

    id: str
    title: str = ""
    career_category: str | None = None
    tags: frozenset[str] = frozenset()
    is_local_artist: bool = False
    was_skipped: bool = False
    extra: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CandidateVideo:
        """Build a candidate from an upstream JSON object.

        No validation is done; both camelCase and snake_case keys are read.
        """
        known = {
            "id", "title", "tags",
            "careerCategory", "career_category",
            "isLocalArtist", "is_local_artist",
            "wasSkipped", "was_skipped",
        }
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title") or "",
            career_category=data.get("careerCategory", data.get("career_category")),
            tags=_parse_tags(data.get("tags")),
            is_local_artist=bool(data.get("isLocalArtist", data.get("is_local_artist", False))),
            was_skipped=bool(data.get("wasSkipped", data.get("was_skipped", False))),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.extra,
            "id": self.id,
            "title": self.title,
            "careerCategory": self.career_category,
            "tags": sorted(self.tags),
            "isLocalArtist": self.is_local_artist,
            "wasSkipped": self.was_skipped,
        }


@dataclass(frozen=True)
class ScoredVideo:
    """A candidate paired with its recommendation score and reason."""

    video: CandidateVideo
    recommendation_score: float
    recommendation_reason: str

    @property
    def id(self) -> str:
        return self.video.id

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.video.to_dict(),
            "recommendationScore": self.recommendation_score,
            "recommendationReason": self.recommendation_reason,
        }


@dataclass(frozen=True)
class TopCareer:
    name: str
    score: float
    description: str


@dataclass(frozen=True)
class CareerSuggestion:
    name: str
    score: float


@dataclass(frozen=True)
class CareerInsights:
    """Display-ready summary of the user's strongest career interests."""

    message: str
    top_career: TopCareer | None = None
    suggestions: list[CareerSuggestion] = field(default_factory=list)


@dataclass(frozen=True)
class AnalyticsSummary:
    total_videos_watched: int
    total_likes: int
    total_replays: int
    top_interests: list[tuple[str, float]]
    total_scrolls: int
    preferred_category: str | None
    category_streak: CategoryStreak


def _parse_tags(raw: Any) -> frozenset[str]:
    """A bare string is one tag, not a sequence of characters."""
    if isinstance(raw, str):
        return frozenset([raw]) if raw else frozenset()
    return frozenset(raw or ())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)

"""Pure state transitions for :class:`~careerfeed.models.BehaviorState`.

Every function here mutates the state it is given and does nothing else: no
persistence, no clock.  :class:`~careerfeed.user_state.BehaviorStore` wraps
them and persists after each call.
"""

from __future__ import annotations

import math
from dataclasses import fields
from datetime import datetime

from careerfeed import streak
from careerfeed.models import (
    POSITIVE_REACTIONS,
    BehaviorState,
    Comment,
    Reaction,
    ScrollEvent,
)

INTEREST_MIN = 0.0
INTEREST_MAX = 100.0

HIGH_ENGAGEMENT_FRACTION = 0.70
SKIP_FRACTION = 0.10
SKIP_MAX_DELTA_MS = 3000
SCROLL_CAPACITY = 100

# Interest deltas per interaction.
LIKE_INTEREST = 10
UNLIKE_INTEREST = -2
REPLAY_INTEREST = 15
REACTION_INTEREST = 8
COMMENT_INTEREST = 12


def record_watch(
    state: BehaviorState,
    video_id: str,
    delta_ms: float,
    assumed_total_duration_ms: float,
    at: datetime,
    category: str | None = None,
    history_capacity: int = streak.HISTORY_CAPACITY,
) -> float:
    """Accumulate watch time for *video_id* and classify the engagement.

    Above 70 % of the assumed duration the video is marked as high engagement
    and, when *category* is given, the watch is forwarded to the streak
    detector.  Below 10 % with a short delta the video is marked as skipped.
    Both checks run on every call.

    Args:
        state: The behaviour state to mutate.
        video_id: The watched video.
        delta_ms: Milliseconds watched since the previous report.  Negative or
            non-finite values count as 0.
        assumed_total_duration_ms: Duration used to compute the watched
            fraction.  Non-positive or non-finite values give a fraction of 0.
        at: When the watch was reported.
        category: Category of the video, if known.
        history_capacity: Size of the category watch history.

    Returns:
        The engagement fraction after accumulation.
    """
    delta = _non_negative_int(delta_ms)
    total = state.watch_time_ms.get(video_id, 0) + delta
    state.watch_time_ms[video_id] = total

    if math.isfinite(assumed_total_duration_ms) and assumed_total_duration_ms > 0:
        fraction = total / assumed_total_duration_ms
    else:
        fraction = 0.0

    if fraction > HIGH_ENGAGEMENT_FRACTION:
        state.high_engagement_videos.add(video_id)
        if category:
            streak.track_category_watch(state, category, at, capacity=history_capacity)

    if fraction < SKIP_FRACTION and delta < SKIP_MAX_DELTA_MS:
        state.skipped_videos.add(video_id)

    return fraction


def like(state: BehaviorState, video_id: str, category: str | None = None) -> None:
    state.liked_videos.add(video_id)
    if category:
        adjust_interest(state, category, LIKE_INTEREST)


def unlike(state: BehaviorState, video_id: str, category: str | None = None) -> None:
    state.liked_videos.discard(video_id)
    if category:
        adjust_interest(state, category, UNLIKE_INTEREST)


def replay(state: BehaviorState, video_id: str, category: str | None = None) -> None:
    state.replay_counts[video_id] = state.replay_counts.get(video_id, 0) + 1
    if category:
        adjust_interest(state, category, REPLAY_INTEREST)


def react(
    state: BehaviorState,
    video_id: str,
    kind: str,
    at: datetime,
    category: str | None = None,
) -> None:
    """Append a reaction; love, inspired and wow also raise interest."""
    kind = getattr(kind, "value", kind)
    state.reactions.setdefault(video_id, []).append(Reaction(kind=kind, at=at))
    if category and kind in POSITIVE_REACTIONS:
        adjust_interest(state, category, REACTION_INTEREST)


def comment(
    state: BehaviorState,
    video_id: str,
    text: str,
    at: datetime,
    category: str | None = None,
) -> None:
    state.comments.setdefault(video_id, []).append(Comment(text=text, at=at))
    if category:
        adjust_interest(state, category, COMMENT_INTEREST)


def track_scroll(
    state: BehaviorState,
    direction: str,
    video_id: str,
    at: datetime,
    capacity: int = SCROLL_CAPACITY,
) -> None:
    state.scroll_patterns.append(ScrollEvent(direction=direction, video_id=video_id, at=at))
    if len(state.scroll_patterns) > capacity:
        del state.scroll_patterns[:-capacity]


def adjust_interest(state: BehaviorState, category: str, points: float) -> float:
    """Add *points* to the interest in *category* and clamp to [0, 100].

    Returns:
        The new interest score.
    """
    current = state.interest_scores.get(category, 0.0)
    updated = min(INTEREST_MAX, max(INTEREST_MIN, current + points))
    state.interest_scores[category] = updated
    return updated


def reset(state: BehaviorState) -> None:
    """Return *state* to its zero value in-place."""
    fresh = BehaviorState()
    for f in fields(state):
        setattr(state, f.name, getattr(fresh, f.name))


def _non_negative_int(value: float) -> int:
    if not math.isfinite(value) or value < 0:
        return 0
    return int(value)

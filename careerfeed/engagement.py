"""Per-video engagement score derived from recorded behaviour."""

from __future__ import annotations

from careerfeed.models import BehaviorState

_LIKE_POINTS = 20
_REPLAY_POINTS = 15
_REACTION_POINTS = 10
_COMMENT_POINTS = 12
_SKIP_PENALTY = 30
_LONG_WATCH_POINTS = 25
_LONG_WATCH_THRESHOLD_MS = 60_000


def engagement_score(state: BehaviorState, video_id: str) -> float:
    """Return the additive engagement score for *video_id*, never negative.

    ==========================  ========
    Signal                      Points
    ==========================  ========
    Liked                       +20
    Each replay                 +15
    Each reaction               +10
    Each comment                +12
    Skipped                     -30
    Watched for over a minute   +25
    ==========================  ========
    """
    score = 0
    if video_id in state.liked_videos:
        score += _LIKE_POINTS
    score += state.replay_counts.get(video_id, 0) * _REPLAY_POINTS
    score += len(state.reactions.get(video_id, ())) * _REACTION_POINTS
    score += len(state.comments.get(video_id, ())) * _COMMENT_POINTS
    if video_id in state.skipped_videos:
        score -= _SKIP_PENALTY
    if state.watch_time_ms.get(video_id, 0) > _LONG_WATCH_THRESHOLD_MS:
        score += _LONG_WATCH_POINTS
    return float(max(0, score))

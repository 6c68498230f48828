"""Behaviour store: owns one session's behaviour state and persists it."""

from __future__ import annotations

import functools
import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, TypeVar

from careerfeed import behavior, streak
from careerfeed.engagement import engagement_score
from careerfeed.models import AnalyticsSummary, BehaviorState, CategoryStreak, utcnow
from careerfeed.persistence import DEFAULT_SLOT, SnapshotError, StateSink, dump_state, load_state

logger = logging.getLogger(__name__)

_F = TypeVar("_F", bound=Callable[..., Any])


def _persisted(method: _F) -> _F:
    """Stamp ``last_updated`` and persist after *method* returns normally."""

    @functools.wraps(method)
    def wrapper(self: BehaviorStore, *args: Any, **kwargs: Any) -> Any:
        result = method(self, *args, **kwargs)
        self._state.last_updated = self._clock()
        self.persist()
        return result

    return wrapper  # type: ignore[return-value]


class BehaviorStore:
    """Single source of truth for one user's behavioural facts.

    All mutation goes through the public methods below, each of which applies
    a pure transition from :mod:`careerfeed.behavior` and then writes a full
    snapshot to the sink.  Sink failures are logged and never reach the
    caller; the in-memory state stays correct either way.

    The store is owned by a single session and is not thread-safe.

    Args:
        sink: Where snapshots are written (see :mod:`careerfeed.persistence`).
        slot: Name of the slot holding this session's snapshot.
        clock: Returns the current time; injectable for tests.
        history_capacity: Size of the category watch history.
        scroll_capacity: Number of scroll events kept.
    """

    def __init__(
        self,
        sink: StateSink,
        slot: str = DEFAULT_SLOT,
        clock: Callable[[], datetime] = utcnow,
        history_capacity: int = streak.HISTORY_CAPACITY,
        scroll_capacity: int = behavior.SCROLL_CAPACITY,
    ) -> None:
        self._sink = sink
        self._slot = slot
        self._clock = clock
        self._history_capacity = history_capacity
        self._scroll_capacity = scroll_capacity
        self._state = BehaviorState()

    @property
    def state(self) -> BehaviorState:
        """The live state object.  Treat as read-only."""
        return self._state

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Replace the in-memory state with the persisted snapshot, if any.

        A missing snapshot leaves the store empty.  A snapshot that cannot be
        decoded, or a sink that fails, is logged and also leaves it empty.
        """
        try:
            payload = self._sink.load(self._slot)
        except Exception:
            logger.exception("Failed to read behaviour snapshot from slot %r.", self._slot)
            self._state = BehaviorState()
            return

        if payload is None:
            logger.debug("No behaviour snapshot in slot %r; starting empty.", self._slot)
            self._state = BehaviorState()
            return

        try:
            self._state = load_state(payload)
        except SnapshotError as exc:
            logger.warning("Ignoring snapshot in slot %r: %s", self._slot, exc)
            self._state = BehaviorState()
            return

        logger.info(
            "Loaded behaviour snapshot: %d interests, %d liked videos.",
            len(self._state.interest_scores),
            len(self._state.liked_videos),
        )

    def persist(self) -> None:
        """Write the full state to the sink.  Never raises."""
        try:
            self._sink.save(self._slot, dump_state(self._state))
        except Exception:
            logger.exception("Failed to persist behaviour snapshot to slot %r.", self._slot)

    def clear(self) -> None:
        """Reset to the zero state and remove the persisted snapshot."""
        behavior.reset(self._state)
        try:
            self._sink.delete(self._slot)
        except Exception:
            logger.exception("Failed to delete behaviour snapshot in slot %r.", self._slot)

    # ------------------------------------------------------------------
    # Event recording
    # ------------------------------------------------------------------

    @_persisted
    def record_watch(
        self,
        video_id: str,
        delta_ms: float,
        assumed_total_duration_ms: float,
        category: str | None = None,
    ) -> float:
        """Accumulate watch time; see :func:`careerfeed.behavior.record_watch`."""
        return behavior.record_watch(
            self._state,
            video_id,
            delta_ms,
            assumed_total_duration_ms,
            at=self._clock(),
            category=category,
            history_capacity=self._history_capacity,
        )

    @_persisted
    def like(self, video_id: str, category: str | None = None) -> None:
        behavior.like(self._state, video_id, category)

    @_persisted
    def unlike(self, video_id: str, category: str | None = None) -> None:
        behavior.unlike(self._state, video_id, category)

    @_persisted
    def replay(self, video_id: str, category: str | None = None) -> None:
        behavior.replay(self._state, video_id, category)

    @_persisted
    def react(self, video_id: str, kind: str, category: str | None = None) -> None:
        behavior.react(self._state, video_id, kind, at=self._clock(), category=category)

    @_persisted
    def comment(self, video_id: str, text: str, category: str | None = None) -> None:
        behavior.comment(self._state, video_id, text, at=self._clock(), category=category)

    @_persisted
    def track_scroll(self, direction: str, video_id: str) -> None:
        behavior.track_scroll(
            self._state, direction, video_id, at=self._clock(), capacity=self._scroll_capacity
        )

    @_persisted
    def reset_category_preference(self) -> None:
        """Drop the preferred category, e.g. when the feed wants to diversify."""
        streak.reset_category_preference(self._state)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_interests(self) -> list[tuple[str, float]]:
        """Return ``(category, score)`` pairs, highest score first.

        Ties keep the order in which the categories were first scored.
        """
        return sorted(self._state.interest_scores.items(), key=lambda kv: kv[1], reverse=True)

    def get_top_interests(self, n: int = 5) -> list[tuple[str, float]]:
        return self.get_interests()[: max(0, n)]

    def has_liked(self, video_id: str) -> bool:
        return video_id in self._state.liked_videos

    def get_replay_count(self, video_id: str) -> int:
        return self._state.replay_counts.get(video_id, 0)

    def get_watch_time(self, video_id: str) -> int:
        return self._state.watch_time_ms.get(video_id, 0)

    def engagement_score(self, video_id: str) -> float:
        return engagement_score(self._state, video_id)

    def get_preferred_category(self) -> str | None:
        return self._state.preferred_category

    def get_category_streak(self) -> CategoryStreak:
        return replace(self._state.category_streak)

    def get_analytics_summary(self) -> AnalyticsSummary:
        state = self._state
        return AnalyticsSummary(
            total_videos_watched=len(state.watch_time_ms),
            total_likes=len(state.liked_videos),
            total_replays=len(state.replay_counts),
            top_interests=self.get_top_interests(5),
            total_scrolls=len(state.scroll_patterns),
            preferred_category=state.preferred_category,
            category_streak=replace(state.category_streak),
        )

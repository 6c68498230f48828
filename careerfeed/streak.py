"""Category streak detection: turns high-engagement watches into a preference.

A category becomes the user's *preferred* category once the three most recent
entries of the watch history share it.  The preference is dropped as soon as a
watch from a different category arrives.
"""

from __future__ import annotations

import logging
from datetime import datetime

from careerfeed.categories import normalize_category
from careerfeed.models import BehaviorState, CategoryStreak, CategoryWatch

logger = logging.getLogger(__name__)

HISTORY_CAPACITY = 10
STREAK_WINDOW = 3


def track_category_watch(
    state: BehaviorState,
    category: str | None,
    at: datetime,
    capacity: int = HISTORY_CAPACITY,
) -> None:
    """Append a qualifying watch of *category* and update the streak in-place.

    Args:
        state: The behaviour state to mutate.
        category: Category code or canonical name.  Falsy values are ignored.
        at: When the watch happened.
        capacity: Maximum number of history entries kept.
    """
    normalized = normalize_category(category)
    if normalized is None:
        return

    history = state.category_watch_history
    history.append(CategoryWatch(category=normalized, at=at))
    if len(history) > capacity:
        del history[:-capacity]

    run_length = _trailing_run_length(history)
    recent = history[-STREAK_WINDOW:]

    if len(recent) >= STREAK_WINDOW and all(w.category == normalized for w in recent):
        if state.preferred_category != normalized:
            logger.info(
                "Preferred category locked in: %s (%d consecutive watches)",
                normalized,
                len(recent),
            )
        state.category_streak = CategoryStreak(
            category=normalized, count=len(recent), run_length=run_length
        )
        state.preferred_category = normalized
        return

    if len(history) >= 2 and history[-2].category != normalized:
        if state.preferred_category is not None:
            logger.info(
                "Category changed from %s to %s, resetting preference",
                history[-2].category,
                normalized,
            )
        state.category_streak = CategoryStreak(run_length=run_length)
        state.preferred_category = None
        return

    # Streak is still building.
    state.category_streak.run_length = run_length


def reset_category_preference(state: BehaviorState) -> None:
    """Force-clear the preferred category and streak, keeping the history."""
    state.preferred_category = None
    state.category_streak = CategoryStreak()


def _trailing_run_length(history: list[CategoryWatch]) -> int:
    if not history:
        return 0
    last = history[-1].category
    run = 0
    for watch in reversed(history):
        if watch.category != last:
            break
        run += 1
    return run

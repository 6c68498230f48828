"""Diversity strategy: one video per category to avoid a filter bubble."""

from __future__ import annotations

from careerfeed.models import ScoredVideo
from careerfeed.strategies.base import FeedStrategy

UNCATEGORISED = "other"


class DiverseStrategy(FeedStrategy):
    """Picks the best-scoring video from each category not yet seen.

    Scans the ranked list in order and keeps the first video of every new
    category until *n* are chosen.  Videos without a category are grouped
    under ``"other"``.
    """

    def select(self, ranked: list[ScoredVideo], n: int) -> list[ScoredVideo]:
        seen: set[str] = set()
        picks: list[ScoredVideo] = []
        for scored in ranked:
            if len(picks) >= n:
                break
            category = scored.video.career_category or UNCATEGORISED
            if category not in seen:
                seen.add(category)
                picks.append(scored)
        return picks

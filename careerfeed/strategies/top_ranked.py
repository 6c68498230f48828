"""Top-ranked strategy: the highest scoring candidates."""

from __future__ import annotations

from careerfeed.models import ScoredVideo
from careerfeed.strategies.base import FeedStrategy


class TopRankedStrategy(FeedStrategy):
    """Returns the first *n* candidates of the ranked list."""

    def select(self, ranked: list[ScoredVideo], n: int) -> list[ScoredVideo]:
        return ranked[: max(0, n)]

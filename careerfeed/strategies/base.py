"""Abstract base class for all feed composition strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod

from careerfeed.models import ScoredVideo


class FeedStrategy(ABC):
    """Picks one slice of the personalised feed.

    The :class:`~careerfeed.engine.RecommendationEngine` scores every
    candidate once, then asks each strategy for its share of the feed from the
    same ranked list.  Strategies do not deduplicate against each other; the
    engine does that when combining slices.
    """

    @abstractmethod
    def select(self, ranked: list[ScoredVideo], n: int) -> list[ScoredVideo]:
        """Return up to *n* videos from *ranked*.

        Args:
            ranked: All candidates, ordered by descending recommendation score.
            n: Maximum number of videos to return.

        Returns:
            Up to *n* videos, in the order they should appear.
        """

"""Local-artist strategy: promotes creators from the viewer's area."""

from __future__ import annotations

from careerfeed.models import ScoredVideo
from careerfeed.strategies.base import FeedStrategy


class LocalArtistStrategy(FeedStrategy):
    """Returns the highest ranked videos flagged as by a local artist."""

    def select(self, ranked: list[ScoredVideo], n: int) -> list[ScoredVideo]:
        local = [s for s in ranked if s.video.is_local_artist]
        return local[: max(0, n)]

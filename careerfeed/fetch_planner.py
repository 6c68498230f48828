"""Chooses which category the feed should fetch next.

This is the feed-consumer side of the engine: it reads the preferred category
produced by the streak detector and decides what to ask the content source
for.  With a preferred category most fetches stay on it and the rest mix in
another category; without one the feed rotates through categories.
"""

from __future__ import annotations

import logging
import random
from typing import Sequence

from careerfeed.models import CareerCategory

logger = logging.getLogger(__name__)

DEFAULT_PREFERRED_RATIO = 0.8


class FetchPlanner:
    """Picks the category for the next candidate fetch.

    Args:
        categories: Categories the content source can be asked for.  Defaults
            to the six canonical ones.
        preferred_ratio: Probability of fetching the preferred category when
            starting a new page sequence.
        rng: Random source; pass a seeded :class:`random.Random` for
            reproducible behaviour.
    """

    def __init__(
        self,
        categories: Sequence[str] | None = None,
        preferred_ratio: float = DEFAULT_PREFERRED_RATIO,
        rng: random.Random | None = None,
    ) -> None:
        self._categories = list(categories) if categories else [c.value for c in CareerCategory]
        self._preferred_ratio = preferred_ratio
        self._rng = rng or random.Random()

    @property
    def categories(self) -> list[str]:
        return list(self._categories)

    def initial_category(self, preferred: str | None) -> str:
        """Category for the first page of a fresh feed."""
        if preferred:
            logger.debug("Starting feed on preferred category %s", preferred)
            return preferred
        return self._rng.choice(self._categories)

    def next_category(
        self,
        preferred: str | None,
        current: str | None = None,
        page_token: str | None = None,
        last_category: str | None = None,
    ) -> str:
        """Category for the next page of the feed.

        Args:
            preferred: The user's preferred category, if any.
            current: Category of the page sequence in progress.
            page_token: Continuation token for *current*; ``None`` when the
                sequence is exhausted or has not started.
            last_category: Category of the last video shown.

        Returns:
            The category to fetch.
        """
        if preferred:
            if page_token:
                return preferred
            if self._rng.random() < self._preferred_ratio:
                return preferred
            others = [c for c in self._categories if c != preferred]
            if not others:
                return preferred
            choice = self._rng.choice(others)
            logger.debug("Mixing in %s alongside preferred %s", choice, preferred)
            return choice

        if page_token and current:
            return current

        available = [c for c in self._categories if c != last_category] or self._categories
        choice = self._rng.choice(available)
        logger.debug("Rotating to category %s", choice)
        return choice

"""Pair selection for the next comparison."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Protocol

import structlog

from pairwise_rank.core.config import DEFAULT_INITIAL_RATING
from pairwise_rank.models import Item

logger = structlog.get_logger()


class RandomSource(Protocol):
    """The subset of ``random.Random`` the selector draws from."""

    def randrange(self, stop: int) -> int: ...

    def random(self) -> float: ...


class PairSelector:
    """Choose which two items to compare next.

    Selection favours items with the fewest comparisons and, among those,
    items whose ratings are close together:

    1. Items are ranked by comparison count, then by distance from the
       initial rating.
    2. Only items within ``count_tolerance`` comparisons of the least
       compared item are candidates.
    3. Candidates are sorted by rating (descending) and a random adjacent
       pair is drawn, so similar ratings meet but the exact pair varies.
    4. The pair order is swapped at random to avoid positional bias.

    Attributes:
        rng: Injected random source.
        initial_rating: Reference rating for the deviation tie-break.
        count_tolerance: Allowed comparisons above the minimum.
        swap_probability: Chance of swapping the returned order.
        target_comparisons: Items at or above this count are not offered.
    """

    def __init__(
        self,
        rng: RandomSource | None = None,
        initial_rating: float = DEFAULT_INITIAL_RATING,
        count_tolerance: int = 2,
        swap_probability: float = 0.5,
        target_comparisons: int | None = None,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()  # noqa: S311
        self.initial_rating = initial_rating
        self.count_tolerance = count_tolerance
        self.swap_probability = swap_probability
        self.target_comparisons = target_comparisons

    def candidates(self, items: Sequence[Item]) -> list[Item]:
        """Return the items eligible for the next pair, sorted by rating descending."""
        unique = {item.id: item for item in items}
        eligible = [
            item
            for item in unique.values()
            if self.target_comparisons is None or item.comparisons < self.target_comparisons
        ]
        if not eligible:
            return []

        ranked = sorted(
            eligible,
            key=lambda item: (
                item.comparisons,
                abs(item.rating - self.initial_rating),
                item.id,
            ),
        )
        min_count = ranked[0].comparisons
        window = [item for item in ranked if item.comparisons <= min_count + self.count_tolerance]
        return sorted(window, key=lambda item: (-item.rating, item.id))

    def next_pair(self, items: Sequence[Item]) -> tuple[str, str] | None:
        """Select the next pair of item IDs.

        Args:
            items: All known items.

        Returns:
            Two distinct item IDs, or None when fewer than two items are
            eligible.
        """
        min_pair_size = 2
        candidates = self.candidates(items)
        if len(candidates) < min_pair_size:
            logger.debug("no_pair_available", candidates=len(candidates))
            return None

        index = self.rng.randrange(len(candidates) - 1)
        first, second = candidates[index].id, candidates[index + 1].id

        if self.rng.random() < self.swap_probability:
            first, second = second, first

        logger.debug("pair_selected", first=first, second=second, pool=len(candidates))
        return first, second

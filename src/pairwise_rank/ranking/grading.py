"""Percentile-based letter grades."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from pairwise_rank.core.config import DEFAULT_GRADE_BANDS, GradeBand
from pairwise_rank.core.errors import UnknownItemError
from pairwise_rank.models import Item
from pairwise_rank.ranking.store import RatingStore

logger = structlog.get_logger()


class GradeAssigner:
    """Map an item's rank among all items to a grade label.

    The percentile is the fraction of items rated strictly higher than the
    target, so the best item sits at 0.0. The grade is the first band (most
    exclusive first) whose ceiling is above that percentile; the last band
    is the fallback.

    Attributes:
        bands: Ordered grade table, most exclusive first.
    """

    def __init__(self, bands: Sequence[GradeBand] = DEFAULT_GRADE_BANDS) -> None:
        if not bands:
            msg = "At least one grade band is required"
            raise ValueError(msg)
        self.bands = tuple(bands)

    @property
    def labels(self) -> list[str]:
        return [band.label for band in self.bands]

    def rank_of(self, label: str) -> int:
        """Position of a label in the table; 0 is the best grade."""
        return self.labels.index(label)

    @staticmethod
    def percentile(item: Item, all_items: Sequence[Item]) -> float:
        """Fraction of items rated strictly above ``item``.

        Raises:
            UnknownItemError: If ``item`` is not among ``all_items``.
        """
        if not any(other.id == item.id for other in all_items):
            raise UnknownItemError(item.id)
        above = sum(1 for other in all_items if other.rating > item.rating)
        return above / len(all_items)

    def grade_for(self, item: Item, all_items: Sequence[Item]) -> str:
        """Grade label for one item relative to all items."""
        pct = self.percentile(item, all_items)
        for band in self.bands:
            if band.ceiling > pct:
                return band.label
        return self.bands[-1].label

    def assign_all(self, store: RatingStore) -> dict[str, str]:
        """Grade every item in the store and write the grades back.

        Returns:
            Mapping of item ID to assigned grade.
        """
        items = store.items()
        grades = {item.id: self.grade_for(item, items) for item in items}
        for item_id, grade in grades.items():
            store.set_grade(item_id, grade)
        logger.info("grades_assigned", items=len(grades))
        return grades

"""In-memory rating store keyed by item identifier."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from pairwise_rank.core.config import DEFAULT_INITIAL_RATING
from pairwise_rank.core.errors import UnknownItemError
from pairwise_rank.models import Item, ItemState


class RatingStore:
    """Holds one Item per known identifier.

    Entries are created lazily with the initial rating and are never removed.
    Only the rating engine changes ratings and comparison counts; the grade
    assigner writes grades. Reads return detached copies, so the only way to
    change an entry is through the setters below.

    Attributes:
        initial_rating: Rating for new items and after reset.
    """

    def __init__(self, initial_rating: float = DEFAULT_INITIAL_RATING) -> None:
        self.initial_rating = initial_rating
        self._items: dict[str, Item] = {}

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    def _entry(self, item_id: str) -> Item:
        try:
            return self._items[item_id]
        except KeyError:
            raise UnknownItemError(item_id) from None

    def ensure(self, item_id: str) -> Item:
        """Return a copy of the item, creating it with default rating if unseen."""
        item = self._items.get(item_id)
        if item is None:
            item = Item(id=item_id, rating=self.initial_rating)
            self._items[item_id] = item
        return replace(item)

    def add_items(self, item_ids: Iterable[str]) -> list[str]:
        """Register several items.

        Returns:
            IDs that were not known before, in input order.
        """
        added = []
        for item_id in item_ids:
            if item_id not in self._items:
                self.ensure(item_id)
                added.append(item_id)
        return added

    def get(self, item_id: str) -> Item:
        """Get a copy of an item.

        Raises:
            UnknownItemError: If the ID was never registered.
        """
        return replace(self._entry(item_id))

    def rating(self, item_id: str) -> float:
        return self._entry(item_id).rating

    def comparisons(self, item_id: str) -> int:
        return self._entry(item_id).comparisons

    def ids(self) -> list[str]:
        return list(self._items)

    def items(self) -> list[Item]:
        return [replace(item) for item in self._items.values()]

    def set_rating(self, item_id: str, rating: float) -> None:
        self._entry(item_id).rating = rating

    def increment_comparisons(self, item_id: str) -> None:
        self._entry(item_id).comparisons += 1

    def decrement_comparisons(self, item_id: str) -> None:
        item = self._entry(item_id)
        if item.comparisons <= 0:
            msg = f"Comparison count for '{item_id}' is already zero"
            raise ValueError(msg)
        item.comparisons -= 1

    def set_grade(self, item_id: str, grade: str | None) -> None:
        self._entry(item_id).grade = grade

    def reset(self) -> None:
        """Put every known item back to the initial rating, zero comparisons, no grade."""
        for item in self._items.values():
            item.rating = self.initial_rating
            item.comparisons = 0
            item.grade = None

    def leaderboard(self) -> list[Item]:
        """Copies of all items sorted by rating descending, ties broken by ID."""
        return sorted(self.items(), key=lambda item: (-item.rating, item.id))

    def to_states(self) -> dict[str, ItemState]:
        return {
            item_id: ItemState(rating=item.rating, comparisons=item.comparisons, grade=item.grade)
            for item_id, item in self._items.items()
        }

    @classmethod
    def from_states(
        cls,
        states: dict[str, ItemState],
        initial_rating: float = DEFAULT_INITIAL_RATING,
    ) -> RatingStore:
        store = cls(initial_rating=initial_rating)
        for item_id, state in states.items():
            store._items[item_id] = Item(
                id=item_id,
                rating=state.rating,
                comparisons=state.comparisons,
                grade=state.grade,
            )
        return store

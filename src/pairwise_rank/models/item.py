"""Item and outcome records for pairwise ranking."""

from __future__ import annotations

from dataclasses import dataclass

from pairwise_rank.core.config import DEFAULT_INITIAL_RATING
from pairwise_rank.core.errors import InvalidOutcomeError


@dataclass
class Item:
    """Rating state for a single compared item.

    Attributes:
        id: Unique identifier (artist name in the gallery use case).
        rating: Current Elo rating.
        comparisons: Number of applied outcomes involving this item.
        grade: Last assigned grade label, or None if never graded.
    """

    id: str
    rating: float = DEFAULT_INITIAL_RATING
    comparisons: int = 0
    grade: str | None = None


@dataclass(frozen=True)
class Outcome:
    """A recorded decision between two items.

    Stores both ratings as they were immediately before the update so the
    decision can be reverted exactly.
    """

    winner: str
    loser: str
    winner_rating_before: float
    loser_rating_before: float

    def __post_init__(self) -> None:
        if self.winner == self.loser:
            raise InvalidOutcomeError(self.winner)

"""Snapshot schema exchanged with the host for loading and persisting state."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from pairwise_rank.core.config import DEFAULT_INITIAL_RATING
from pairwise_rank.models.item import Outcome


class ItemState(BaseModel):
    """Persisted rating state of one item."""

    rating: float = DEFAULT_INITIAL_RATING
    comparisons: int = Field(default=0, ge=0)
    grade: str | None = None


class OutcomeRecord(BaseModel):
    """Persisted form of an Outcome."""

    winner: str
    loser: str
    winner_rating_before: float
    loser_rating_before: float

    @model_validator(mode="after")
    def check_distinct(self) -> OutcomeRecord:
        if self.winner == self.loser:
            msg = f"Outcome winner and loser must differ, got '{self.winner}' twice"
            raise ValueError(msg)
        return self

    @classmethod
    def from_outcome(cls, outcome: Outcome) -> OutcomeRecord:
        return cls(
            winner=outcome.winner,
            loser=outcome.loser,
            winner_rating_before=outcome.winner_rating_before,
            loser_rating_before=outcome.loser_rating_before,
        )

    def to_outcome(self) -> Outcome:
        return Outcome(
            winner=self.winner,
            loser=self.loser,
            winner_rating_before=self.winner_rating_before,
            loser_rating_before=self.loser_rating_before,
        )


class RatingSnapshot(BaseModel):
    """Ratings for every known item plus the ordered outcome history.

    This is the whole data boundary between the ranking core and its host:
    it is supplied at session start and emitted after every mutation.
    """

    items: dict[str, ItemState] = Field(default_factory=dict)
    history: list[OutcomeRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_history_items_known(self) -> RatingSnapshot:
        for record in self.history:
            for item_id in (record.winner, record.loser):
                if item_id not in self.items:
                    msg = f"History references unknown item '{item_id}'"
                    raise ValueError(msg)
        return self

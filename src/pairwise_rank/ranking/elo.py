"""Elo rating calculations for pairwise comparisons."""

from __future__ import annotations

import structlog

from pairwise_rank.core.config import DEFAULT_K_FACTOR
from pairwise_rank.core.errors import DesyncError, InvalidOutcomeError
from pairwise_rank.models import Outcome
from pairwise_rank.ranking.store import RatingStore

logger = structlog.get_logger()


def calculate_expected_win_chance(rating_a: float, rating_b: float) -> float:
    """Calculate expected win probability for item A against item B.

    Uses the standard Elo formula:
    E_A = 1 / (1 + 10^((R_B - R_A) / 400))

    Args:
        rating_a: Rating of item A.
        rating_b: Rating of item B.

    Returns:
        Probability that A wins (0.0 to 1.0).
    """
    return 1.0 / (1.0 + 10 ** ((rating_b - rating_a) / 400))


def rating_deltas(
    winner_rating: float,
    loser_rating: float,
    k_factor: float = DEFAULT_K_FACTOR,
) -> tuple[float, float]:
    """Compute rating changes for a single decided comparison.

    The loser's delta is the exact negation of the winner's, so the two
    always sum to zero.

    Args:
        winner_rating: Current rating of the winner.
        loser_rating: Current rating of the loser.
        k_factor: K-factor for the update.

    Returns:
        Tuple of (winner_delta, loser_delta).
    """
    expected_winner = calculate_expected_win_chance(winner_rating, loser_rating)
    expected_loser = 1.0 - expected_winner

    # Actual scores: 1 for the winner, 0 for the loser
    winner_delta = k_factor * (1.0 - expected_winner)
    loser_delta = k_factor * (0.0 - expected_loser)
    return winner_delta, loser_delta


def update_elo(
    winner_rating: float,
    loser_rating: float,
    k_factor: float = DEFAULT_K_FACTOR,
) -> tuple[float, float]:
    """Update Elo ratings after a comparison.

    Ratings are not clamped and may go negative under extreme inputs.

    Returns:
        Tuple of (new_winner_rating, new_loser_rating).
    """
    winner_delta, loser_delta = rating_deltas(winner_rating, loser_rating, k_factor)
    return winner_rating + winner_delta, loser_rating + loser_delta


class EloEngine:
    """Applies and reverts outcomes against a rating store.

    Attributes:
        store: Rating store mutated in place.
        k_factor: K-factor for rating adjustments.
    """

    def __init__(self, store: RatingStore, k_factor: float = DEFAULT_K_FACTOR) -> None:
        """Initialize Elo engine.

        Args:
            store: Rating store to update.
            k_factor: K-factor for rating adjustments. Must be positive.
        """
        if k_factor <= 0:
            msg = f"k_factor must be positive, got {k_factor}"
            raise ValueError(msg)
        self.store = store
        self.k_factor = k_factor

    def apply_outcome(self, winner_id: str, loser_id: str) -> tuple[float, float]:
        """Update ratings after a decided comparison.

        Both comparison counts increase by exactly one.

        Args:
            winner_id: ID of the preferred item.
            loser_id: ID of the other item.

        Returns:
            Tuple of (new_winner_rating, new_loser_rating).

        Raises:
            InvalidOutcomeError: If both IDs are the same.
            UnknownItemError: If either ID is not in the store.
        """
        if winner_id == loser_id:
            raise InvalidOutcomeError(winner_id)

        winner_rating = self.store.rating(winner_id)
        loser_rating = self.store.rating(loser_id)

        new_winner, new_loser = update_elo(winner_rating, loser_rating, self.k_factor)

        self.store.set_rating(winner_id, new_winner)
        self.store.set_rating(loser_id, new_loser)
        self.store.increment_comparisons(winner_id)
        self.store.increment_comparisons(loser_id)

        logger.debug(
            "outcome_applied",
            winner=winner_id,
            loser=loser_id,
            winner_rating=round(new_winner, 2),
            loser_rating=round(new_loser, 2),
        )
        return new_winner, new_loser

    def record(self, winner_id: str, loser_id: str) -> Outcome:
        """Apply an outcome and return it with the pre-update ratings attached."""
        if winner_id == loser_id:
            raise InvalidOutcomeError(winner_id)
        outcome = Outcome(
            winner=winner_id,
            loser=loser_id,
            winner_rating_before=self.store.rating(winner_id),
            loser_rating_before=self.store.rating(loser_id),
        )
        self.apply_outcome(winner_id, loser_id)
        return outcome

    def revert_outcome(self, outcome: Outcome) -> None:
        """Restore both items to their ratings before the outcome.

        Nothing is changed when the check fails.

        Raises:
            DesyncError: If either item already has zero comparisons.
            UnknownItemError: If either item is not in the store.
        """
        for item_id in (outcome.winner, outcome.loser):
            if self.store.comparisons(item_id) <= 0:
                raise DesyncError(item_id)

        self.store.set_rating(outcome.winner, outcome.winner_rating_before)
        self.store.set_rating(outcome.loser, outcome.loser_rating_before)
        self.store.decrement_comparisons(outcome.winner)
        self.store.decrement_comparisons(outcome.loser)

        logger.debug("outcome_reverted", winner=outcome.winner, loser=outcome.loser)

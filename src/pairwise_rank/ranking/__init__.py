"""Ranking module for pairwise comparisons.

Provides the rating store, the Elo update rule, pair selection, the outcome
history and percentile grading.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from pairwise_rank.ranking.elo import (
    EloEngine,
    calculate_expected_win_chance,
    rating_deltas,
    update_elo,
)
from pairwise_rank.ranking.grading import GradeAssigner
from pairwise_rank.ranking.history import HistoryLog
from pairwise_rank.ranking.pairing import PairSelector, RandomSource
from pairwise_rank.ranking.store import RatingStore

if TYPE_CHECKING:
    from pairwise_rank.core.config import RankingConfig


def create_pair_selector(
    config: RankingConfig,
    rng: RandomSource | None = None,
    seed: int | None = None,
) -> PairSelector:
    """Create pair selector based on config.

    Args:
        config: Ranking configuration.
        rng: Explicit random source. Takes precedence over ``seed``.
        seed: Seed for a fresh ``random.Random`` when no source is given.

    Returns:
        Configured pair selector.
    """
    return PairSelector(
        rng=rng if rng is not None else random.Random(seed),  # noqa: S311
        initial_rating=config.initial_rating,
        count_tolerance=config.count_tolerance,
        swap_probability=config.swap_probability,
        target_comparisons=config.target_comparisons,
    )


__all__ = [
    "EloEngine",
    "GradeAssigner",
    "HistoryLog",
    "PairSelector",
    "RandomSource",
    "RatingStore",
    "calculate_expected_win_chance",
    "create_pair_selector",
    "rating_deltas",
    "update_elo",
]

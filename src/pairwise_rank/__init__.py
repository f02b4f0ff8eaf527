"""Pairwise Rank.

Rank a collection of items by repeatedly choosing the better of two, with
Elo ratings, undoable history and percentile letter grades.
"""

from pairwise_rank.models import Item, Outcome, RatingSnapshot
from pairwise_rank.services.session import (
    GradeResult,
    SessionController,
    SessionState,
    StepResult,
)

__version__ = "0.1.0"
__all__ = [
    "GradeResult",
    "Item",
    "Outcome",
    "RatingSnapshot",
    "SessionController",
    "SessionState",
    "StepResult",
    "__version__",
]

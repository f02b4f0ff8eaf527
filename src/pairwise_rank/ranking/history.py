"""Append-only outcome history with single-step undo."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pairwise_rank.core.errors import EmptyHistoryError
from pairwise_rank.models import Outcome


class HistoryLog:
    """Ordered record of applied outcomes.

    Outcomes are only ever appended or popped from the end, so undo is
    strictly last-in first-out.
    """

    def __init__(self, outcomes: Iterable[Outcome] = ()) -> None:
        self._outcomes: list[Outcome] = list(outcomes)

    def __len__(self) -> int:
        return len(self._outcomes)

    def __bool__(self) -> bool:
        return bool(self._outcomes)

    def __iter__(self) -> Iterator[Outcome]:
        return iter(tuple(self._outcomes))

    def append(self, outcome: Outcome) -> None:
        self._outcomes.append(outcome)

    def peek(self) -> Outcome | None:
        """Most recent outcome, or None if empty."""
        return self._outcomes[-1] if self._outcomes else None

    def pop(self) -> Outcome:
        """Remove and return the most recent outcome.

        Raises:
            EmptyHistoryError: If nothing has been recorded.
        """
        if not self._outcomes:
            raise EmptyHistoryError
        return self._outcomes.pop()

    def clear(self) -> None:
        self._outcomes.clear()

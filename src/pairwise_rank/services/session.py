"""Comparison session: request a pair, accept a decision, repeat."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from enum import Enum

import structlog

from pairwise_rank.core.config import RankingConfig
from pairwise_rank.core.errors import (
    DesyncError,
    EmptyHistoryError,
    ExhaustedError,
    InvalidTransitionError,
    RankingError,
)
from pairwise_rank.models import Item, Outcome, OutcomeRecord, RatingSnapshot
from pairwise_rank.ranking import (
    EloEngine,
    GradeAssigner,
    HistoryLog,
    RandomSource,
    RatingStore,
    create_pair_selector,
)

logger = structlog.get_logger()

SnapshotCallback = Callable[[RatingSnapshot], None]


class SessionState(str, Enum):
    """Where the session is in the comparison loop."""

    IDLE = "idle"
    PAIR_PENDING = "pair_pending"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class StepResult:
    """Result of a session transition.

    Attributes:
        state: Session state after the call.
        pair: Pending pair to show next, if any.
        outcome: Outcome recorded or reverted by this call, if any.
        error: Reported condition. ``ExhaustedError`` is informational.
    """

    state: SessionState
    pair: tuple[str, str] | None = None
    outcome: Outcome | None = None
    error: RankingError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None or not self.error.is_fault

    @property
    def exhausted(self) -> bool:
        return self.state is SessionState.EXHAUSTED


@dataclass(frozen=True)
class GradeResult:
    """Result of a single-item grade query."""

    grade: str | None = None
    error: RankingError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SessionController:
    """Orchestrates the rating store, Elo engine, pair selector and history.

    Domain errors raised by the collaborators are caught here and reported
    through ``StepResult.error``; a failed call leaves the session as it was.
    One lock guards the store, history and pending pair so an update and an
    undo never interleave.
    """

    def __init__(
        self,
        store: RatingStore,
        config: RankingConfig | None = None,
        rng: RandomSource | None = None,
        history: HistoryLog | None = None,
        on_change: SnapshotCallback | None = None,
    ) -> None:
        """Initialize session controller.

        Args:
            store: Rating store for this dataset.
            config: Ranking configuration. Defaults are used if None.
            rng: Random source for pair selection.
            history: Existing outcome history, e.g. from a snapshot.
            on_change: Called with the output snapshot after each mutation.
                Exceptions it raises are logged and do not fail the call.
        """
        self.config = config or RankingConfig()
        self.store = store
        self.history = history if history is not None else HistoryLog()
        self.engine = EloEngine(store, k_factor=self.config.k_factor)
        self.selector = create_pair_selector(self.config, rng=rng)
        self.grader = GradeAssigner(self.config.grades)
        self.on_change = on_change
        self._state = SessionState.IDLE
        self._pending: tuple[str, str] | None = None
        self._lock = threading.RLock()

    @classmethod
    def from_snapshot(
        cls,
        snapshot: RatingSnapshot,
        config: RankingConfig | None = None,
        rng: RandomSource | None = None,
        on_change: SnapshotCallback | None = None,
    ) -> SessionController:
        """Build a session from a host-supplied snapshot."""
        config = config or RankingConfig()
        store = RatingStore.from_states(snapshot.items, initial_rating=config.initial_rating)
        history = HistoryLog(record.to_outcome() for record in snapshot.history)
        return cls(store, config=config, rng=rng, history=history, on_change=on_change)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def pending_pair(self) -> tuple[str, str] | None:
        return self._pending

    def start(self) -> StepResult:
        """Request a pair, or return the one already pending."""
        with self._lock:
            if self._state is SessionState.PAIR_PENDING and self._pending is not None:
                return StepResult(self._state, pair=self._pending)
            return self._request_pair()

    def decide(self, winner_id: str) -> StepResult:
        """Record ``winner_id`` as preferred over the other pending item."""
        with self._lock:
            if self._state is not SessionState.PAIR_PENDING or self._pending is None:
                return self._fail(
                    InvalidTransitionError(
                        "No pair is pending a decision", "Call start() to request a pair."
                    )
                )
            if winner_id not in self._pending:
                return self._fail(
                    InvalidTransitionError(
                        f"'{winner_id}' is not part of the pending pair {self._pending}"
                    )
                )

            first, second = self._pending
            loser_id = second if winner_id == first else first
            try:
                outcome = self.engine.record(winner_id, loser_id)
            except RankingError as e:
                return self._fail(e)

            self.history.append(outcome)
            self._pending = None
            logger.info("decision_recorded", winner=winner_id, loser=loser_id)

            result = self._request_pair()
            self._notify()
            return replace(result, outcome=outcome)

    def skip(self) -> StepResult:
        """Discard the pending pair without recording anything."""
        with self._lock:
            if self._state is not SessionState.PAIR_PENDING or self._pending is None:
                return self._fail(InvalidTransitionError("No pair is pending to skip"))

            logger.info("pair_skipped", pair=list(self._pending))
            self._pending = None
            return self._request_pair()

    def undo(self) -> StepResult:
        """Revert the most recent outcome and request a fresh pair."""
        with self._lock:
            try:
                outcome = self.history.pop()
            except EmptyHistoryError as e:
                return self._fail(e)

            try:
                self.engine.revert_outcome(outcome)
            except DesyncError as e:
                self.history.append(outcome)
                logger.error(
                    "history_desync",
                    item=e.item_id,
                    winner=outcome.winner,
                    loser=outcome.loser,
                )
                return self._fail(e)
            except RankingError as e:
                self.history.append(outcome)
                return self._fail(e)

            logger.info("decision_undone", winner=outcome.winner, loser=outcome.loser)
            self._pending = None
            result = self._request_pair()
            self._notify()
            return replace(result, outcome=outcome)

    def reset(self) -> StepResult:
        """Reset every item to defaults, clear history and drop any pending pair."""
        with self._lock:
            self.store.reset()
            self.history.clear()
            self._pending = None
            self._state = SessionState.IDLE
            logger.info("session_reset", items=len(self.store))
            self._notify()
            return StepResult(self._state)

    def add_items(self, item_ids: Iterable[str]) -> list[str]:
        """Register items, creating unseen ones with the initial rating.

        Returns:
            IDs that were newly added.
        """
        with self._lock:
            added = self.store.add_items(item_ids)
            if added:
                logger.info("items_added", count=len(added))
                if self._state is SessionState.EXHAUSTED:
                    self._state = SessionState.IDLE
                self._notify()
            return added

    def grade_all(self) -> dict[str, str]:
        """Assign a grade to every item and store it."""
        with self._lock:
            grades = self.grader.assign_all(self.store)
            self._notify()
            return grades

    def grade_for(self, item_id: str) -> GradeResult:
        """Grade one item without storing it."""
        with self._lock:
            try:
                grade = self.grader.grade_for(self.store.get(item_id), self.store.items())
            except RankingError as e:
                logger.debug("grade_query_rejected", reason=e.message)
                return GradeResult(error=e)
            return GradeResult(grade=grade)

    def eligible_items(self) -> list[str]:
        """IDs the pair selector would still draw from.

        Once the session is exhausted this is empty when every item reached
        the comparison target, or holds the single item left without a
        partner inside the count tolerance.
        """
        with self._lock:
            return [item.id for item in self.selector.candidates(self.store.items())]

    def leaderboard(self) -> list[Item]:
        with self._lock:
            return self.store.leaderboard()

    def snapshot(self) -> RatingSnapshot:
        """Current output snapshot for the host to persist."""
        with self._lock:
            return RatingSnapshot(
                items=self.store.to_states(),
                history=[OutcomeRecord.from_outcome(outcome) for outcome in self.history],
            )

    def _request_pair(self) -> StepResult:
        pair = self.selector.next_pair(self.store.items())
        if pair is None:
            self._pending = None
            self._state = SessionState.EXHAUSTED
            logger.info("ranking_exhausted", items=len(self.store), decisions=len(self.history))
            return StepResult(self._state, error=ExhaustedError())

        self._pending = pair
        self._state = SessionState.PAIR_PENDING
        return StepResult(self._state, pair=pair)

    def _fail(self, error: RankingError) -> StepResult:
        if not isinstance(error, DesyncError):
            logger.debug("transition_rejected", reason=error.message)
        return StepResult(self._state, pair=self._pending, error=error)

    def _notify(self) -> None:
        # The transition is already committed; a failing callback must not undo it.
        if self.on_change is None:
            return
        try:
            self.on_change(self.snapshot())
        except Exception:
            logger.exception("change_callback_failed", state=self._state.value)

"""Custom exceptions for ranking sessions and configuration."""

from __future__ import annotations


class RankingError(Exception):
    """Base exception for ranking engine errors with optional suggestions.

    Attributes:
        is_fault: False for informational conditions the caller is expected
            to handle as a normal outcome.
    """

    is_fault = True
    label = "Ranking Error"

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"[{self.label}] {self.message}"
        if self.suggestion:
            msg += f"\n[Suggestion] {self.suggestion}"
        return msg


class InvalidTransitionError(RankingError):
    """Error when an operation is called in a state that forbids it."""

    label = "Invalid Transition"


class UnknownItemError(RankingError):
    """Error when an identifier is not present in the rating store."""

    label = "Unknown Item"

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(
            f"Item '{item_id}' is not in the rating store",
            "Register the item before comparing it.",
        )


class InvalidOutcomeError(RankingError):
    """Error when an outcome names the same item as winner and loser."""

    label = "Invalid Outcome"

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(f"Item '{item_id}' cannot be compared against itself")


class DesyncError(RankingError):
    """Error when history and rating store disagree during undo."""

    label = "History Desync"

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(
            f"Cannot revert outcome: item '{item_id}' has no recorded comparisons",
            "The snapshot history no longer matches the ratings; reset the session.",
        )


class EmptyHistoryError(RankingError):
    """Error when undo is requested with nothing recorded."""

    label = "Nothing To Undo"

    def __init__(self) -> None:
        super().__init__("The history log is empty")


class ExhaustedError(RankingError):
    """No valid pair is left to compare. Informational, not a fault."""

    is_fault = False
    label = "Ranking Complete"

    def __init__(self) -> None:
        super().__init__(
            "No eligible pair remains",
            "Raise target_comparisons or count_tolerance to keep comparing.",
        )


class ConfigurationError(Exception):
    """Base exception for configuration errors with optional suggestions."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"[Configuration Error] {self.message}"
        if self.suggestion:
            msg += f"\n[Suggestion] {self.suggestion}"
        return msg


class ValidationError(ConfigurationError):
    """Error when configuration validation fails."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(
            f"Invalid value for '{field}'",
            f"{reason}",
        )

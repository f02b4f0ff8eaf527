"""Core configuration and errors for pairwise ranking."""

from pairwise_rank.core.config import (
    DEFAULT_GRADE_BANDS,
    DEFAULT_INITIAL_RATING,
    DEFAULT_K_FACTOR,
    AppConfig,
    GradeBand,
    RankingConfig,
    load_config,
)
from pairwise_rank.core.errors import (
    ConfigurationError,
    DesyncError,
    EmptyHistoryError,
    ExhaustedError,
    InvalidOutcomeError,
    InvalidTransitionError,
    RankingError,
    UnknownItemError,
    ValidationError,
)

__all__ = [
    "DEFAULT_GRADE_BANDS",
    "DEFAULT_INITIAL_RATING",
    "DEFAULT_K_FACTOR",
    "AppConfig",
    "GradeBand",
    "RankingConfig",
    "load_config",
    "ConfigurationError",
    "DesyncError",
    "EmptyHistoryError",
    "ExhaustedError",
    "InvalidOutcomeError",
    "InvalidTransitionError",
    "RankingError",
    "UnknownItemError",
    "ValidationError",
]

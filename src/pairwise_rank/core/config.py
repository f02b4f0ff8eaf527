"""Configuration schemas and loading for pairwise ranking sessions."""

from __future__ import annotations

from pathlib import Path

import pydantic
import yaml
from pydantic import BaseModel, Field, field_validator

from pairwise_rank.core.errors import ConfigurationError, ValidationError

DEFAULT_INITIAL_RATING = 1500.0
DEFAULT_K_FACTOR = 32.0


class GradeBand(BaseModel):
    """A grade label and the percentile ceiling it covers.

    Attributes:
        label: Grade label shown to the user (e.g. "SS").
        ceiling: Upper percentile bound, measured from the top (0.0 is best).
    """

    model_config = pydantic.ConfigDict(frozen=True)

    label: str = Field(..., min_length=1)
    ceiling: float = Field(..., gt=0.0, le=1.0)


DEFAULT_GRADE_BANDS: tuple[GradeBand, ...] = (
    GradeBand(label="SS", ceiling=0.05),
    GradeBand(label="S", ceiling=0.15),
    GradeBand(label="A", ceiling=0.30),
    GradeBand(label="B", ceiling=0.50),
    GradeBand(label="C", ceiling=0.70),
    GradeBand(label="D", ceiling=0.85),
    GradeBand(label="E", ceiling=0.95),
    GradeBand(label="F", ceiling=1.0),
)


class RankingConfig(BaseModel):
    """Rating, pairing and grading configuration.

    Attributes:
        initial_rating: Rating given to newly seen items and on reset.
        k_factor: Elo K-factor applied to every outcome.
        count_tolerance: How many comparisons above the current minimum an
            item may have and still be offered for comparison.
        swap_probability: Chance of swapping the displayed order of a pair.
        target_comparisons: Items with at least this many comparisons are no
            longer offered. None keeps offering pairs indefinitely.
        grades: Ordered grade table, most exclusive first.
    """

    initial_rating: float = DEFAULT_INITIAL_RATING
    k_factor: float = Field(default=DEFAULT_K_FACTOR, gt=0.0)
    count_tolerance: int = Field(default=2, ge=0)
    swap_probability: float = Field(default=0.5, ge=0.0, le=1.0)
    target_comparisons: int | None = Field(default=None, ge=1)
    grades: list[GradeBand] = Field(default_factory=lambda: list(DEFAULT_GRADE_BANDS))

    @field_validator("grades")
    @classmethod
    def validate_grade_table(cls, v: list[GradeBand]) -> list[GradeBand]:
        """Ensure grade labels are unique and ceilings strictly increase."""
        if not v:
            msg = "At least one grade must be defined in 'grades'"
            raise ValueError(msg)
        labels = [band.label for band in v]
        if len(set(labels)) != len(labels):
            msg = f"Grade labels must be unique: {labels}"
            raise ValueError(msg)
        ceilings = [band.ceiling for band in v]
        if any(lo >= hi for lo, hi in zip(ceilings, ceilings[1:], strict=False)):
            msg = f"Grade ceilings must strictly increase: {ceilings}"
            raise ValueError(msg)
        return v


class AppConfig(BaseModel):
    """Complete configuration for a ranking host."""

    ranking: RankingConfig = Field(default_factory=RankingConfig)
    items: list[str] = Field(default_factory=list)
    seed: int | None = None
    snapshot_path: str = "./ratings.json"

    @field_validator("items")
    @classmethod
    def validate_item_ids(cls, v: list[str]) -> list[str]:
        """Ensure item IDs are non-empty strings."""
        for item_id in v:
            if not item_id or not item_id.strip():
                msg = "Item IDs cannot be empty"
                raise ValueError(msg)
        return v


def load_config(path: str | Path) -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to YAML configuration file.

    Returns:
        Validated AppConfig instance. An empty file yields the defaults.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigurationError: If the file is not a mapping or fails validation.
    """
    config_path = Path(path)
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with config_path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return AppConfig()
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Expected a mapping at the top of {config_path}",
            "Start the file with keys such as 'ranking:' or 'items:'.",
        )

    try:
        return AppConfig.model_validate(data)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "<root>"
        raise ValidationError(field, first["msg"]) from e

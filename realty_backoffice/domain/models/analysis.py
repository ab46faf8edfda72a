"""Statistical analysis of homogenized market samples.

Holds the two-pass NBR 14653-2 classification (outliers, excluded,
retained) and the central tendency/dispersion of the retained subset.
"""

from __future__ import annotations

import math

from pydantic import Field, computed_field, model_validator

from realty_backoffice.core.exceptions import ValidationError
from realty_backoffice.core.valuation_constants import (
    LOW_PRECISION_GRADE,
    MIN_FILTERED_SAMPLES,
    PRECISION_DESCRIPTIONS,
    PRECISION_GRADES,
    RELIABLE_CV_PCT,
)
from realty_backoffice.domain.base import DomainModel
from realty_backoffice.domain.values import Money

from .sample import MarketSample


class StatisticalAnalysis(DomainModel):
    """Result of one analysis run. Immutable.

    ``fallback_used`` is True when filtering left fewer than three samples
    and the statistics were computed over every input sample instead.
    """

    # Inputs
    samples: tuple[MarketSample, ...] = Field(..., description="All analyzed samples")

    # Statistics of the retained subset (price per m²)
    mean: Money
    median: Money
    std_dev: Money
    coefficient_of_variation: float = Field(..., description="100 * std_dev / mean")
    min_value: Money
    max_value: Money

    # Classification
    outliers: tuple[MarketSample, ...] = Field(default=(), description="Rejected at the first pass")
    excluded: tuple[MarketSample, ...] = Field(default=(), description="Rejected at the second pass")
    retained: tuple[MarketSample, ...] = Field(..., description="Used for the final statistics")
    fallback_used: bool = Field(default=False, description="Filtering discarded for lack of samples")

    model_config = {
        "frozen": True,
    }

    @model_validator(mode="after")
    def check_invariants(self) -> StatisticalAnalysis:
        if not self.samples:
            raise ValidationError("At least one sample is required")
        if not self.retained:
            raise ValidationError("At least one retained sample is required")
        if not math.isfinite(self.coefficient_of_variation):
            raise ValidationError("Coefficient of variation must be finite")
        if self.coefficient_of_variation < 0:
            raise ValidationError("Coefficient of variation cannot be negative")
        return self

    @computed_field
    @property
    def is_reliable(self) -> bool:
        """CV below 30% with at least three retained samples."""
        return self.coefficient_of_variation < RELIABLE_CV_PCT and len(self.retained) >= MIN_FILTERED_SAMPLES

    @computed_field
    @property
    def precision_grade(self) -> str:
        for upper_bound, grade in PRECISION_GRADES:
            if self.coefficient_of_variation <= upper_bound:
                return grade
        return LOW_PRECISION_GRADE

    @computed_field
    @property
    def precision_description(self) -> str:
        return PRECISION_DESCRIPTIONS[self.precision_grade]

    @computed_field
    @property
    def confidence_interval(self) -> dict[str, Money]:
        """Mean ± 2 standard deviations, lower bound floored at zero."""
        spread = 2 * self.std_dev.amount
        currency = self.mean.currency
        return {
            "lower": Money(max(0.0, self.mean.amount - spread), currency),
            "upper": Money(self.mean.amount + spread, currency),
        }

    @computed_field
    @property
    def sample_counts(self) -> dict[str, int]:
        return {
            "total": len(self.samples),
            "outliers": len(self.outliers),
            "excluded": len(self.excluded),
            "retained": len(self.retained),
        }

    def classification_of(self, sample_id: str) -> str | None:
        """Return 'outlier', 'excluded', 'retained' or None for unknown ids."""
        for label, group in (("outlier", self.outliers), ("excluded", self.excluded), ("retained", self.retained)):
            if any(s.id == sample_id for s in group):
                return label
        return None

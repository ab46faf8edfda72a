"""
Valuation Service - direct comparative method (NBR 14653-2).

Facade over the domain calculators: homogenize samples, run the two-pass
statistical filter, and value the target under each finish standard.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from realty_backoffice.core.logging import get_logger
from realty_backoffice.core.settings import get_settings
from realty_backoffice.domain.calculator import (
    analyze_samples,
    calculate_valuations,
    homogenize_samples,
)
from realty_backoffice.domain.models import (
    FactorScores,
    MarketSample,
    PropertyStandard,
    PropertyValuation,
    StatisticalAnalysis,
)
from realty_backoffice.domain.values import Area

log = get_logger(__name__)


@dataclass(frozen=True)
class ValuationOutcome:
    """Everything one valuation run produces."""
    samples: tuple[MarketSample, ...]
    analysis: StatisticalAnalysis
    valuations: dict[PropertyStandard, PropertyValuation]


class ValuationService:
    """
    Runs the comparative method over caller-supplied comparables.

    Stateless apart from its configuration; safe to share between callers.
    """

    def __init__(self, adjustment_factor: float | None = None):
        """
        Args:
            adjustment_factor: Per-factor homogenization step. Defaults to
                settings.homogenization_factor.
        """
        if adjustment_factor is None:
            adjustment_factor = get_settings().homogenization_factor
        self.adjustment_factor = adjustment_factor

    def homogenize_samples(
        self,
        samples: Sequence[MarketSample],
        target_profile: FactorScores | Mapping[str, float],
    ) -> list[MarketSample]:
        return homogenize_samples(samples, target_profile, self.adjustment_factor)

    def analyze_statistics(self, samples: Sequence[MarketSample]) -> StatisticalAnalysis:
        analysis = analyze_samples(samples)

        if analysis.fallback_used:
            log.warning(
                "statistics_fallback_used",
                samples=len(samples),
                reason="fewer than 3 samples survived filtering",
            )
        log.info(
            "statistics_analyzed",
            **analysis.sample_counts,
            mean=analysis.mean.amount,
            cv=round(analysis.coefficient_of_variation, 2),
            grade=analysis.precision_grade,
        )
        return analysis

    def calculate_valuations(
        self,
        analysis: StatisticalAnalysis,
        area: Area,
        perception_factor: float = 0.0,
    ) -> dict[PropertyStandard, PropertyValuation]:
        return calculate_valuations(analysis, area, perception_factor)

    def evaluate(
        self,
        samples: Sequence[MarketSample],
        target_profile: FactorScores | Mapping[str, float],
        area: Area,
        perception_factor: float = 0.0,
    ) -> ValuationOutcome:
        """Homogenize, analyze and value in one call."""
        homogenized = self.homogenize_samples(samples, target_profile)
        analysis = self.analyze_statistics(homogenized)
        valuations = self.calculate_valuations(analysis, area, perception_factor)
        return ValuationOutcome(
            samples=tuple(homogenized),
            analysis=analysis,
            valuations=valuations,
        )

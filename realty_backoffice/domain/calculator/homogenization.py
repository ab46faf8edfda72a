"""Sample homogenization.

Adjusts each comparable's price towards the target property's factor
profile: a comparable better than the target on a factor is discounted, a
worse one is inflated.
"""

from __future__ import annotations

import math
from collections.abc import Mapping

from realty_backoffice.core.exceptions import ValidationError
from realty_backoffice.core.valuation_constants import DEFAULT_ADJUSTMENT_FACTOR
from realty_backoffice.domain.models.factors import FactorScores
from realty_backoffice.domain.models.sample import MarketSample


def _as_factor_scores(profile: FactorScores | Mapping[str, float]) -> FactorScores:
    if isinstance(profile, FactorScores):
        return profile
    return FactorScores(dict(profile))


def _check_adjustment(adjustment: float) -> None:
    if not math.isfinite(adjustment) or not 0 < adjustment < 1:
        raise ValidationError(f"Adjustment factor must be between 0 and 1, got {adjustment}")


def calculate_adjustment_factor(
    sample_scores: FactorScores,
    target_profile: FactorScores | Mapping[str, float],
    adjustment: float = DEFAULT_ADJUSTMENT_FACTOR,
) -> float:
    """Multiplicative adjustment for one sample.

    Args:
        sample_scores: Factor scores of the comparable
        target_profile: Factor scores of the target property
        adjustment: Per-factor step k (0.10 means ±10%)

    Returns:
        Product of (1 - k) for each factor where the sample is superior and
        (1 + k) for each factor where it is inferior. Factors missing on
        either side are ignored.
    """
    _check_adjustment(adjustment)
    target = _as_factor_scores(target_profile)

    factor = 1.0
    for name in sample_scores.shared_with(target):
        sample_value = sample_scores[name]
        target_value = target[name]
        if sample_value > target_value:
            factor *= 1 - adjustment
        elif sample_value < target_value:
            factor *= 1 + adjustment
    return factor


def homogenize_samples(
    samples: list[MarketSample] | tuple[MarketSample, ...],
    target_profile: FactorScores | Mapping[str, float],
    adjustment: float = DEFAULT_ADJUSTMENT_FACTOR,
) -> list[MarketSample]:
    """Homogenize comparables against the target profile.

    Returns new samples whose homogenized value is the original price times
    the adjustment factor. The input samples are left untouched.
    """
    _check_adjustment(adjustment)
    target = _as_factor_scores(target_profile)

    homogenized = []
    for sample in samples:
        factor = calculate_adjustment_factor(sample.characteristics, target, adjustment)
        homogenized.append(sample.with_homogenized_value(sample.price.multiply(factor)))
    return homogenized

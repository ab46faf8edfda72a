"""Statistical treatment of homogenized samples (NBR 14653-2).

Two-pass trimmed statistics over homogenized price per m²:

1. Samples outside [60%, 140%] of the median are outliers.
2. With at least 3 remaining candidates, samples outside [80%, 120%] of the
   candidates' median are excluded; the rest are retained.
3. With at least 3 retained samples, final statistics use only those.

Otherwise every classification is discarded and the first-pass statistics
over all samples are returned with ``fallback_used=True``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from realty_backoffice.core.exceptions import CurrencyMismatchError, ValidationError
from realty_backoffice.core.valuation_constants import (
    MIN_FILTERED_SAMPLES,
    NORMAL_LOWER_RATIO,
    NORMAL_UPPER_RATIO,
    OUTLIER_LOWER_RATIO,
    OUTLIER_UPPER_RATIO,
)
from realty_backoffice.domain.models.analysis import StatisticalAnalysis
from realty_backoffice.domain.models.sample import MarketSample
from realty_backoffice.domain.values import Money


@dataclass(frozen=True)
class SummaryStatistics:
    """Central tendency and dispersion of a set of values."""
    mean: float
    median: float
    std_dev: float
    coefficient_of_variation: float
    minimum: float
    maximum: float


def calculate_mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        raise ValidationError("Cannot calculate mean of empty array")
    return float(np.mean(values))


def calculate_median(values: Sequence[float]) -> float:
    """Middle value, or average of the two middle values for even counts."""
    if len(values) == 0:
        raise ValidationError("Cannot calculate median of empty array")
    return float(np.median(values))


def calculate_std_dev(values: Sequence[float]) -> float:
    """Population standard deviation."""
    if len(values) == 0:
        raise ValidationError("Cannot calculate standard deviation of empty array")
    return float(np.std(values, ddof=0))


def calculate_coefficient_of_variation(std_dev: float, mean: float) -> float:
    """CV in percent: 100 * std_dev / mean."""
    if mean <= 0:
        raise ValidationError("Cannot calculate coefficient of variation: mean price per m² is zero")
    return std_dev / mean * 100


def summarize(values: Sequence[float]) -> SummaryStatistics:
    mean = calculate_mean(values)
    std_dev = calculate_std_dev(values)
    return SummaryStatistics(
        mean=mean,
        median=calculate_median(values),
        std_dev=std_dev,
        coefficient_of_variation=calculate_coefficient_of_variation(std_dev, mean),
        minimum=float(np.min(values)),
        maximum=float(np.max(values)),
    )


def split_by_band(
    samples: Sequence[MarketSample],
    reference: float,
    lower_ratio: float,
    upper_ratio: float,
) -> tuple[list[MarketSample], list[MarketSample]]:
    """Split samples into (inside, outside) the closed band around ``reference``."""
    lower, upper = reference * lower_ratio, reference * upper_ratio
    inside: list[MarketSample] = []
    outside: list[MarketSample] = []
    for sample in samples:
        value = sample.homogenized_unit_price()
        if value < lower or value > upper:
            outside.append(sample)
        else:
            inside.append(sample)
    return inside, outside


def _sample_currency(samples: Sequence[MarketSample]) -> str:
    currency = samples[0].price.currency
    for sample in samples[1:]:
        if sample.price.currency != currency:
            raise CurrencyMismatchError(currency, sample.price.currency)
    return currency


def _build_analysis(
    samples: Sequence[MarketSample],
    stats: SummaryStatistics,
    currency: str,
    outliers: Sequence[MarketSample],
    excluded: Sequence[MarketSample],
    retained: Sequence[MarketSample],
    fallback_used: bool,
) -> StatisticalAnalysis:
    return StatisticalAnalysis(
        samples=tuple(samples),
        mean=Money(stats.mean, currency),
        median=Money(stats.median, currency),
        std_dev=Money(stats.std_dev, currency),
        coefficient_of_variation=stats.coefficient_of_variation,
        min_value=Money(stats.minimum, currency),
        max_value=Money(stats.maximum, currency),
        outliers=tuple(outliers),
        excluded=tuple(excluded),
        retained=tuple(retained),
        fallback_used=fallback_used,
    )


def analyze_samples(samples: Sequence[MarketSample]) -> StatisticalAnalysis:
    """Run the two-pass outlier filter and compute final statistics.

    Args:
        samples: Homogenized market samples

    Returns:
        StatisticalAnalysis over the retained subset, or over all samples
        with ``fallback_used=True`` when filtering leaves fewer than 3.

    Raises:
        ValidationError: if ``samples`` is empty, a sample is not
            homogenized, or the mean price per m² is zero.
    """
    if not samples:
        raise ValidationError("Cannot analyze statistics: no samples provided")

    currency = _sample_currency(samples)
    values = [s.homogenized_unit_price() for s in samples]
    initial = summarize(values)

    # Pass 1: abnormal values around the overall median
    candidates, outliers = split_by_band(samples, initial.median, OUTLIER_LOWER_RATIO, OUTLIER_UPPER_RATIO)

    if len(candidates) >= MIN_FILTERED_SAMPLES:
        # Pass 2: normality band around the candidates' median
        candidate_median = calculate_median([s.homogenized_unit_price() for s in candidates])
        retained, excluded = split_by_band(candidates, candidate_median, NORMAL_LOWER_RATIO, NORMAL_UPPER_RATIO)

        if len(retained) >= MIN_FILTERED_SAMPLES:
            final = summarize([s.homogenized_unit_price() for s in retained])
            return _build_analysis(samples, final, currency, outliers, excluded, retained, fallback_used=False)

    return _build_analysis(samples, initial, currency, (), (), samples, fallback_used=True)

"""Per-standard valuation of the target property."""

from __future__ import annotations

import math

from realty_backoffice.core.exceptions import ValidationError
from realty_backoffice.core.valuation_constants import PERCEPTION_MAX_PCT, PERCEPTION_MIN_PCT
from realty_backoffice.domain.models.analysis import StatisticalAnalysis
from realty_backoffice.domain.models.valuation import PropertyStandard, PropertyValuation
from realty_backoffice.domain.values import Area, Money


def validate_perception_factor(perception_pct: float) -> float:
    if not math.isfinite(perception_pct) or not PERCEPTION_MIN_PCT <= perception_pct <= PERCEPTION_MAX_PCT:
        raise ValidationError(
            f"Perception factor must be between {PERCEPTION_MIN_PCT:.0f}% and {PERCEPTION_MAX_PCT:.0f}%"
        )
    return perception_pct


def calculate_valuations(
    analysis: StatisticalAnalysis,
    area: Area,
    perception_pct: float = 0.0,
) -> dict[PropertyStandard, PropertyValuation]:
    """Value the target area under every finish standard.

    price/m² = mean × standard multiplier × (1 + perception / 100)
    total    = price/m² × area

    Args:
        analysis: Statistical analysis whose mean is the base price per m²
        area: Target property area
        perception_pct: Market perception adjustment in [-50, 50]

    Returns:
        Mapping of standard to valuation, in fixed tag order.
    """
    validate_perception_factor(perception_pct)

    base = analysis.mean.amount
    currency = analysis.mean.currency
    perception = 1 + perception_pct / 100

    valuations: dict[PropertyStandard, PropertyValuation] = {}
    for standard in PropertyStandard:
        price_per_sqm = base * standard.multiplier * perception
        total = price_per_sqm * area.square_meters
        valuations[standard] = PropertyValuation(
            standard=standard,
            price_per_sqm=Money(price_per_sqm, currency),
            total_value=Money(total, currency),
        )
    return valuations

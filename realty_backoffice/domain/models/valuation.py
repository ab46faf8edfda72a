"""Property valuation per finish standard."""

from __future__ import annotations

from enum import Enum

from pydantic import Field, computed_field

from realty_backoffice.core.exceptions import CurrencyMismatchError
from realty_backoffice.domain.base import DomainModel
from realty_backoffice.domain.values import Area, Money

STANDARD_MULTIPLIERS = {
    "original": 0.90,     # No renovations
    "basic": 0.95,        # Basic renovations
    "renovated": 1.00,    # Fully renovated (baseline)
    "modernized": 1.05,   # Modern finishes
    "high_end": 1.10,     # Luxury finishes
}

STANDARD_DESCRIPTIONS = {
    "original": "Original (Sem Reformas)",
    "basic": "Básico (Reformas Básicas)",
    "renovated": "Reformado (Completamente Renovado)",
    "modernized": "Modernizado (Acabamentos Modernos)",
    "high_end": "Alto Padrão (Acabamentos de Luxo)",
}


class PropertyStandard(str, Enum):
    """Finish/condition tier, declared in ascending multiplier order."""
    ORIGINAL = "original"
    BASIC = "basic"
    RENOVATED = "renovated"
    MODERNIZED = "modernized"
    HIGH_END = "high_end"

    @property
    def multiplier(self) -> float:
        return STANDARD_MULTIPLIERS[self.value]

    @property
    def description(self) -> str:
        return STANDARD_DESCRIPTIONS[self.value]

    @property
    def rank(self) -> int:
        """Position in the fixed tag order."""
        return list(PropertyStandard).index(self)

    @classmethod
    def from_string(cls, value: str) -> PropertyStandard | None:
        """Convert string to PropertyStandard, case-insensitive."""
        normalised = value.lower().strip().replace("-", "_")
        for member in cls:
            if member.value == normalised:
                return member
        return None


class PropertyValuation(DomainModel):
    """Valuation of the target property under one finish standard."""

    standard: PropertyStandard = Field(..., description="Finish standard")
    price_per_sqm: Money = Field(..., description="Price per m² for this standard")
    total_value: Money = Field(..., description="Price per m² times target area")

    model_config = {
        "frozen": True,
    }

    @computed_field
    @property
    def standard_multiplier(self) -> float:
        return self.standard.multiplier

    @computed_field
    @property
    def standard_description(self) -> str:
        return self.standard.description

    @computed_field
    @property
    def total_value_formatted(self) -> str:
        return self.total_value.format()

    def calculate_for_area(self, area: Area) -> Money:
        """Value of a property of a different size at this price per m²."""
        return self.price_per_sqm.multiply(area.square_meters)

    def compare_with(self, other: PropertyValuation) -> Money:
        """Absolute difference in total value."""
        if self.total_value.currency != other.total_value.currency:
            raise CurrencyMismatchError(self.total_value.currency, other.total_value.currency)
        return Money(abs(self.total_value.amount - other.total_value.amount), self.total_value.currency)

    def percentage_difference_from(self, other: PropertyValuation) -> float:
        """Absolute difference as a percentage of ``other``'s total, 2 decimals."""
        if other.total_value.is_zero():
            return 0.0
        diff = self.compare_with(other)
        return round(diff.amount / other.total_value.amount * 100, 2)

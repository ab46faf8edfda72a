"""Comparable market sample.

A sample is one observed listing, sale or rental used to infer the value of
the target property. It carries its original price and, once homogenized,
the price adjusted towards the target's factor profile.
"""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import Field, computed_field, field_validator, model_validator

from realty_backoffice.core.exceptions import CurrencyMismatchError, ValidationError
from realty_backoffice.domain.base import DomainModel
from realty_backoffice.domain.values import Area, Money

from .factors import FactorScores


class SampleStatus(str, Enum):
    """Market status of a comparable."""
    FOR_SALE = "for_sale"
    SOLD = "sold"
    RENTED = "rented"


class MarketSample(DomainModel):
    """Comparable property sample.

    Immutable: homogenization produces a new instance through
    ``with_homogenized_value``.
    """

    # Identity
    id: str = Field(..., description="Sample identifier")
    location: str = Field(..., description="Free-text location")

    # Observation
    area: Area = Field(..., description="Private area")
    price: Money = Field(..., description="Original asking/sale price")
    status: SampleStatus = Field(..., description="for_sale, sold or rented")
    characteristics: FactorScores = Field(default_factory=FactorScores.empty)

    # Derived
    homogenized_value: Money | None = Field(None, description="Price adjusted to the target profile")

    # Dates
    listing_date: date | None = None
    sale_date: date | None = None

    model_config = {
        "frozen": True,
    }

    @field_validator("id", "location")
    @classmethod
    def require_text(cls, v: str, info) -> str:
        if not v or not v.strip():
            label = "Market sample ID" if info.field_name == "id" else "Location"
            raise ValidationError(f"{label} is required")
        return v.strip()

    @model_validator(mode="after")
    def check_consistency(self) -> MarketSample:
        if self.status is SampleStatus.SOLD and self.sale_date is None:
            raise ValidationError("Sale date is required for sold properties")
        if self.homogenized_value is not None and self.homogenized_value.currency != self.price.currency:
            raise CurrencyMismatchError(self.price.currency, self.homogenized_value.currency)
        return self

    @computed_field
    @property
    def price_per_sqm(self) -> Money:
        """Original price per m²."""
        return self.price.divide(self.area.square_meters)

    @computed_field
    @property
    def homogenized_price_per_sqm(self) -> Money | None:
        """Homogenized price per m², None until homogenized."""
        if self.homogenized_value is None:
            return None
        return self.homogenized_value.divide(self.area.square_meters)

    @property
    def is_homogenized(self) -> bool:
        return self.homogenized_value is not None

    def homogenized_unit_price(self) -> float:
        """Homogenized price per m² as a plain number.

        Raises:
            ValidationError: if the sample was never homogenized.
        """
        unit_price = self.homogenized_price_per_sqm
        if unit_price is None:
            raise ValidationError(f"Market sample '{self.id}' has not been homogenized")
        return unit_price.amount

    def characteristic(self, name: str) -> float | None:
        return self.characteristics.get(name)

    def has_characteristic(self, name: str) -> bool:
        return name in self.characteristics

    def with_homogenized_value(self, value: Money) -> MarketSample:
        """Return a copy carrying ``value`` as homogenized value."""
        return MarketSample(**{**dict(self), "homogenized_value": value})

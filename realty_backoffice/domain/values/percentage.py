"""Percentage value object (0-100)."""

from __future__ import annotations

import math
from typing import Any

from pydantic import Field, field_validator, model_validator

from realty_backoffice.core.exceptions import ValidationError
from realty_backoffice.domain.base import DomainModel


class Percentage(DomainModel):
    """Percentage in the closed range [0, 100], rounded to 2 decimals."""

    value: float = Field(..., description="Percentage points (30.0 means 30%)")

    model_config = {
        "frozen": True,
    }

    def __init__(self, value: Any = None, **data: Any):
        if value is not None:
            data["value"] = value
        super().__init__(**data)

    @model_validator(mode="before")
    @classmethod
    def coerce_bare_value(cls, data: Any) -> Any:
        if isinstance(data, (int, float)) and not isinstance(data, bool):
            return {"value": data}
        return data

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValidationError("Percentage must be a finite number")
        if v < 0 or v > 100:
            raise ValidationError("Percentage must be between 0 and 100")
        return round(v, 2)

    def to_decimal(self) -> float:
        """Convert to a [0, 1] factor."""
        return self.value / 100

    def add(self, other: Percentage) -> Percentage:
        total = self.value + other.value
        if total > 100:
            raise ValidationError("Sum of percentages cannot exceed 100%")
        return Percentage(total)

    def subtract(self, other: Percentage) -> Percentage:
        diff = self.value - other.value
        if diff < 0:
            raise ValidationError("Subtraction would result in negative percentage")
        return Percentage(diff)

    __add__ = add
    __sub__ = subtract

    def __lt__(self, other: Percentage) -> bool:
        return self.value < other.value

    def __gt__(self, other: Percentage) -> bool:
        return self.value > other.value

    def format(self) -> str:
        return f"{self.value:.2f}%"

    @classmethod
    def from_decimal(cls, decimal: float) -> Percentage:
        if decimal < 0 or decimal > 1:
            raise ValidationError("Decimal must be between 0 and 1")
        return cls(decimal * 100)

    @classmethod
    def zero(cls) -> Percentage:
        return cls(0)

    @classmethod
    def one_hundred(cls) -> Percentage:
        return cls(100)

    def __str__(self) -> str:
        return self.format()

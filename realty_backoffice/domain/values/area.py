"""Area value object in square meters."""

from __future__ import annotations

import math
from typing import Any

from pydantic import Field, field_validator, model_validator

from realty_backoffice.core.exceptions import ValidationError
from realty_backoffice.core.valuation_constants import MAX_AREA_SQM
from realty_backoffice.domain.base import DomainModel


class Area(DomainModel):
    """Positive area in m², rounded to 2 decimals and capped at 100,000 m²."""

    square_meters: float = Field(..., description="Surface in m²")

    model_config = {
        "frozen": True,
    }

    def __init__(self, square_meters: Any = None, **data: Any):
        if square_meters is not None:
            data["square_meters"] = square_meters
        super().__init__(**data)

    @model_validator(mode="before")
    @classmethod
    def coerce_bare_value(cls, data: Any) -> Any:
        if isinstance(data, (int, float)) and not isinstance(data, bool):
            return {"square_meters": data}
        return data

    @field_validator("square_meters")
    @classmethod
    def validate_square_meters(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValidationError("Area must be a finite number")
        if v > MAX_AREA_SQM:
            raise ValidationError(f"Area cannot exceed {MAX_AREA_SQM:,.0f} m²")
        v = round(v, 2)
        if v <= 0:
            raise ValidationError("Area must be positive")
        return v

    def __lt__(self, other: Area) -> bool:
        return self.square_meters < other.square_meters

    def __gt__(self, other: Area) -> bool:
        return self.square_meters > other.square_meters

    def format(self) -> str:
        return f"{self.square_meters:.2f} m²"

    def __str__(self) -> str:
        return self.format()

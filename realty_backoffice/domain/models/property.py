"""Target property descriptors.

Address and physical characteristics of the property a market study values.
"""

from __future__ import annotations

import re

from pydantic import Field, field_validator

from realty_backoffice.core.exceptions import ValidationError
from realty_backoffice.domain.base import DomainModel

from .factors import FactorScores

_POSTAL_CODE = re.compile(r"^\d{5}-?\d{3}$")
_MAX_ROOMS = 50


class PropertyAddress(DomainModel):
    """Brazilian street address."""

    street: str = Field(..., description="Street name")
    number: str = Field(default="", description="Street number")
    neighborhood: str = Field(..., description="Neighborhood (bairro)")
    city: str = Field(..., description="City")
    state: str = Field(..., description="2-letter state code (UF)")
    complement: str | None = Field(None, description="Apartment, block...")
    postal_code: str | None = Field(None, description="CEP, XXXXX-XXX")

    model_config = {
        "frozen": True,
    }

    @field_validator("street", "neighborhood", "city")
    @classmethod
    def require_text(cls, v: str, info) -> str:
        if not v or not v.strip():
            raise ValidationError(f"{info.field_name.capitalize()} is required")
        return v.strip()

    @field_validator("state")
    @classmethod
    def validate_state(cls, v: str) -> str:
        v = (v or "").strip().upper()
        if not v:
            raise ValidationError("State is required")
        if len(v) != 2:
            raise ValidationError("State must be a 2-letter code (e.g., SP, RJ)")
        return v

    @field_validator("postal_code")
    @classmethod
    def validate_postal_code(cls, v: str | None) -> str | None:
        if v and not _POSTAL_CODE.match(v):
            raise ValidationError("Postal code must be in format XXXXX-XXX")
        return v or None

    def __str__(self) -> str:
        address = f"{self.street}, {self.number}"
        if self.complement:
            address += f", {self.complement}"
        address += f", {self.neighborhood}, {self.city}-{self.state}"
        if self.postal_code:
            address += f" - CEP: {self.postal_code}"
        return address


class PropertyCharacteristics(DomainModel):
    """Room counts and extra features of the target property."""

    bedrooms: int = Field(default=0, description="Number of bedrooms")
    bathrooms: int = Field(default=0, description="Number of bathrooms")
    parking_spots: int = Field(default=0, description="Number of parking spots")
    additional_features: tuple[str, ...] = Field(default=(), description="pool, gym...")

    model_config = {
        "frozen": True,
    }

    @field_validator("bedrooms", "bathrooms", "parking_spots")
    @classmethod
    def validate_count(cls, v: int, info) -> int:
        label = info.field_name.replace("_", " ").capitalize()
        if v < 0:
            raise ValidationError(f"{label} must be a non-negative integer")
        if v > _MAX_ROOMS:
            raise ValidationError(f"{label} cannot exceed {_MAX_ROOMS}")
        return v

    @field_validator("additional_features")
    @classmethod
    def normalize_features(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(f.strip().lower() for f in v if f and f.strip())

    @property
    def total_rooms(self) -> int:
        return self.bedrooms + self.bathrooms

    def has_feature(self, feature: str) -> bool:
        return feature.strip().lower() in self.additional_features

    def as_factor_scores(self) -> FactorScores:
        """Target factor profile used for homogenization."""
        return FactorScores({
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "parking_spots": self.parking_spots,
        })

    def __str__(self) -> str:
        def plural(n: int, word: str) -> str:
            return f"{n} {word}{'s' if n != 1 else ''}"

        description = ", ".join([
            plural(self.bedrooms, "quarto"),
            plural(self.bathrooms, "banheiro"),
            plural(self.parking_spots, "vaga"),
        ])
        if self.additional_features:
            description += f" ({', '.join(self.additional_features)})"
        return description

"""Market study aggregate.

A market study values one target property by the direct comparative
method. Samples, analysis and valuations are fixed at construction; only
metadata (selected standard, artifact URLs, timestamps) changes afterwards,
through the methods below.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable

from pydantic import Field, computed_field, field_validator, model_validator

from realty_backoffice.core.exceptions import BusinessRuleError, ValidationError
from realty_backoffice.core.valuation_constants import MIN_STUDY_SAMPLES
from realty_backoffice.domain.base import DomainModel
from realty_backoffice.domain.values import Area

from .analysis import StatisticalAnalysis
from .property import PropertyAddress, PropertyCharacteristics
from .sample import MarketSample
from .valuation import PropertyStandard, PropertyValuation

IdFactory = Callable[[], str]


def generate_study_id() -> str:
    """Default study id factory (random UUID4)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require_url(url: str, label: str) -> str:
    if not isinstance(url, str) or not url.strip():
        raise ValidationError(f"{label} cannot be empty")
    return url


class EvaluationType(str, Enum):
    """Purpose of the study."""
    SALE = "sale"
    RENT = "rent"


class MarketStudy(DomainModel):
    """Aggregate root for a property valuation study.

    Example:
        >>> study = MarketStudy(user_id="user-123", ..., valuations=valuations)
        >>> study.select_standard(PropertyStandard.RENOVATED)
        >>> study.recommended_valuation.total_value
    """

    # Identity
    id: str = Field(default_factory=generate_study_id, frozen=True)
    user_id: str = Field(..., frozen=True)

    # Target property
    property_address: PropertyAddress = Field(..., frozen=True)
    property_area: Area = Field(..., frozen=True)
    property_characteristics: PropertyCharacteristics = Field(..., frozen=True)
    evaluation_type: EvaluationType = Field(..., frozen=True)

    # Comparative method results
    factor_names: tuple[str, ...] = Field(..., frozen=True)
    samples: tuple[MarketSample, ...] = Field(..., frozen=True)
    analysis: StatisticalAnalysis = Field(..., frozen=True)
    valuations: tuple[PropertyValuation, ...] = Field(..., frozen=True, description="One per standard, fixed tag order")

    # Metadata
    selected_standard: PropertyStandard | None = None
    agent_logo: str | None = None
    pdf_url: str | None = None
    slides_url: str | None = None
    created_at: datetime = Field(default_factory=utcnow, frozen=True)
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = {
        "validate_assignment": True,
    }

    @field_validator("factor_names")
    @classmethod
    def normalize_factor_names(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        names: list[str] = []
        for name in v:
            name = name.strip()
            if name and name not in names:
                names.append(name)
        return tuple(names)

    @field_validator("valuations", mode="before")
    @classmethod
    def accept_mapping(cls, v: Any) -> Any:
        if isinstance(v, Mapping):
            return tuple(v.values())
        return v

    @field_validator("valuations")
    @classmethod
    def order_valuations(cls, v: tuple[PropertyValuation, ...]) -> tuple[PropertyValuation, ...]:
        standards = [val.standard for val in v]
        if len(set(standards)) != len(standards):
            raise ValidationError("Duplicate valuation for the same standard")
        return tuple(sorted(v, key=lambda val: val.standard.rank))

    @field_validator("selected_standard")
    @classmethod
    def require_valuation_for_standard(cls, v: PropertyStandard | None, info) -> PropertyStandard | None:
        # Runs before the value is written, on construction and on assignment
        valuations = info.data.get("valuations")
        if v is not None and valuations is not None and all(val.standard is not v for val in valuations):
            raise BusinessRuleError(
                f"No valuation available for standard: {v.value}",
                rule="VALUATION_NOT_FOUND",
                value=v.value,
            )
        return v

    @field_validator("agent_logo", "pdf_url", "slides_url")
    @classmethod
    def reject_blank_url(cls, v: str | None, info) -> str | None:
        if v is not None and not v.strip():
            label = {"agent_logo": "Logo URL", "pdf_url": "PDF URL", "slides_url": "Slides URL"}[info.field_name]
            raise ValidationError(f"{label} cannot be empty")
        return v

    @model_validator(mode="after")
    def check_business_rules(self) -> MarketStudy:
        if not self.user_id or not self.user_id.strip():
            raise ValidationError("User ID is required")
        if len(self.samples) < MIN_STUDY_SAMPLES:
            raise ValidationError(f"Minimum {MIN_STUDY_SAMPLES} samples required for reliable valuation")
        if not self.factor_names:
            raise ValidationError("At least one comparison factor is required")
        if not self.valuations:
            raise ValidationError("At least one valuation is required")
        return self

    # --- Business operations ---

    def select_standard(self, standard: PropertyStandard | str) -> None:
        """Select the finish standard to recommend.

        Raises:
            BusinessRuleError: if no valuation exists for ``standard``; the
                current selection is left untouched.
        """
        tag = standard if isinstance(standard, PropertyStandard) else PropertyStandard.from_string(str(standard))
        if tag is None or self.valuation_for(tag) is None:
            raw = getattr(standard, "value", standard)
            raise BusinessRuleError(
                f"No valuation available for standard: {raw}",
                rule="VALUATION_NOT_FOUND",
                value=raw,
            )
        self.selected_standard = tag
        self._touch()

    def upload_agent_logo(self, logo_url: str) -> None:
        self.agent_logo = _require_url(logo_url, "Logo URL")
        self._touch()

    def set_pdf_url(self, url: str) -> None:
        self.pdf_url = _require_url(url, "PDF URL")
        self._touch()

    def set_slides_url(self, url: str) -> None:
        self.slides_url = _require_url(url, "Slides URL")
        self._touch()

    def _touch(self) -> None:
        self.updated_at = utcnow()

    # --- Queries ---

    @property
    def valuation_map(self) -> Mapping[PropertyStandard, PropertyValuation]:
        """Read-only standard -> valuation view, fixed tag order."""
        return MappingProxyType({v.standard: v for v in self.valuations})

    def valuation_for(self, standard: PropertyStandard) -> PropertyValuation | None:
        for valuation in self.valuations:
            if valuation.standard is standard:
                return valuation
        return None

    @computed_field
    @property
    def recommended_valuation(self) -> PropertyValuation | None:
        if self.selected_standard is None:
            return None
        return self.valuation_for(self.selected_standard)

    @computed_field
    @property
    def valuation_range(self) -> dict[str, PropertyValuation] | None:
        """Lowest and highest total value across standards.

        Ties keep the earliest standard in the fixed tag order.
        """
        if not self.valuations:
            return None
        lowest = highest = self.valuations[0]
        for valuation in self.valuations[1:]:
            if valuation.total_value < lowest.total_value:
                lowest = valuation
            if valuation.total_value > highest.total_value:
                highest = valuation
        return {"min": lowest, "max": highest}

    @computed_field
    @property
    def has_pdf_generated(self) -> bool:
        return bool(self.pdf_url)

    @computed_field
    @property
    def has_slides_generated(self) -> bool:
        return bool(self.slides_url)

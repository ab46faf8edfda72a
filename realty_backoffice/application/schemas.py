"""Request schemas for market study use cases.

Pydantic models validating raw payloads before they reach the domain.
Schema violations are re-raised as the domain ``ValidationError`` with one
detail entry per offending field.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any, TypeVar

from pydantic import BaseModel, Field, HttpUrl
from pydantic import ValidationError as PydanticValidationError

from realty_backoffice.core.valuation_constants import (
    MIN_STUDY_SAMPLES,
    PERCEPTION_MAX_PCT,
    PERCEPTION_MIN_PCT,
)
from realty_backoffice.domain.base import to_domain_error
from realty_backoffice.domain.models import (
    EvaluationType,
    PropertyAddress,
    PropertyCharacteristics,
    PropertyStandard,
    SampleStatus,
)

RequestT = TypeVar("RequestT", bound=BaseModel)


class SampleInput(BaseModel):
    """One comparable as submitted by the agent."""

    location: str = Field(..., min_length=1)
    area: float = Field(..., gt=0, description="m²")
    price: float = Field(..., gt=0)
    status: SampleStatus
    characteristics: dict[str, float] = Field(default_factory=dict)
    listing_date: date | None = None
    sale_date: date | None = None

    model_config = {
        "extra": "forbid",
    }


class CreateMarketStudyRequest(BaseModel):
    """Payload for creating a study from a set of comparables."""

    user_id: str = Field(..., min_length=1)
    property_address: PropertyAddress
    property_area: float = Field(..., gt=0)
    property_characteristics: PropertyCharacteristics
    target_factors: dict[str, float] = Field(
        default_factory=dict, description="Extra target scores beyond room counts (e.g. conservation)"
    )
    evaluation_type: EvaluationType
    factor_names: list[str] = Field(..., min_length=1)
    samples: list[SampleInput] = Field(..., min_length=MIN_STUDY_SAMPLES)
    perception_factor: float = Field(default=0.0, ge=PERCEPTION_MIN_PCT, le=PERCEPTION_MAX_PCT)

    model_config = {
        "extra": "forbid",
    }


class UpdateMarketStudyRequest(BaseModel):
    """Metadata changes on an existing study."""

    id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    selected_standard: PropertyStandard | None = None
    agent_logo: HttpUrl | None = None

    model_config = {
        "extra": "forbid",
    }


def parse_request(model: type[RequestT], payload: RequestT | Mapping[str, Any]) -> RequestT:
    """Validate ``payload`` against ``model``.

    Raises:
        ValidationError: with per-field details on schema violations.
    """
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise to_domain_error(e, "Invalid request data") from e

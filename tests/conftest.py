"""Pytest fixtures for realty_backoffice tests."""

import itertools
import os
import sys

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from realty_backoffice.domain.models import (  # noqa: E402
    FactorScores,
    MarketSample,
    PropertyAddress,
    PropertyCharacteristics,
    SampleStatus,
)
from realty_backoffice.domain.values import Area, Money  # noqa: E402


def make_sample(unit_price, area=100.0, sample_id=None, homogenized=True, **characteristics):
    """Build a sample whose homogenized price per m² equals ``unit_price``."""
    total = unit_price * area
    sample = MarketSample(
        id=sample_id or f"s-{unit_price:g}",
        location="Rua Augusta, Consolação",
        area=Area(area),
        price=Money(total),
        status=SampleStatus.FOR_SALE,
        characteristics=FactorScores(characteristics),
    )
    if homogenized:
        sample = sample.with_homogenized_value(Money(total))
    return sample


@pytest.fixture
def sample_factory():
    """Factory for homogenized samples keyed by price per m²."""
    return make_sample


@pytest.fixture
def scenario_a_samples():
    """Four clustered samples plus one far above the median."""
    return [
        make_sample(price, sample_id=f"a-{i}")
        for i, price in enumerate([4000, 4200, 4100, 4150, 9000])
    ]


@pytest.fixture
def target_address():
    return PropertyAddress(
        street="Rua Oscar Freire",
        number="1200",
        neighborhood="Jardins",
        city="São Paulo",
        state="sp",
        postal_code="01426-001",
    )


@pytest.fixture
def target_characteristics():
    return PropertyCharacteristics(bedrooms=3, bathrooms=2, parking_spots=1)


@pytest.fixture
def id_factory():
    """Deterministic id factory: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def create_payload():
    """Valid payload for MarketStudyService.create_study."""
    return {
        "user_id": "user-123",
        "property_address": {
            "street": "Rua Oscar Freire",
            "number": "1200",
            "neighborhood": "Jardins",
            "city": "São Paulo",
            "state": "SP",
        },
        "property_area": 90,
        "property_characteristics": {"bedrooms": 3, "bathrooms": 2, "parking_spots": 1},
        "evaluation_type": "sale",
        "factor_names": ["bedrooms"],
        "samples": [
            {"location": "Rua Haddock Lobo", "area": 100, "price": 500000, "status": "for_sale",
             "characteristics": {"bedrooms": 3}},
            {"location": "Alameda Lorena", "area": 80, "price": 400000, "status": "for_sale",
             "characteristics": {"bedrooms": 3}},
            {"location": "Rua Bela Cintra", "area": 120, "price": 600000, "status": "sold",
             "characteristics": {"bedrooms": 3}, "sale_date": "2024-03-15"},
            {"location": "Rua da Consolação", "area": 90, "price": 450000, "status": "for_sale",
             "characteristics": {"bedrooms": 3}},
        ],
        "perception_factor": 0,
    }

"""Unit tests for realty_backoffice.domain.models."""

from datetime import date

import pytest

from realty_backoffice.core.exceptions import BackofficeError, CurrencyMismatchError, ValidationError
from realty_backoffice.domain.calculator import analyze_samples
from realty_backoffice.domain.models import (
    FactorScores,
    MarketSample,
    PropertyAddress,
    PropertyCharacteristics,
    PropertyStandard,
    PropertyValuation,
    SampleStatus,
    StatisticalAnalysis,
)
from realty_backoffice.domain.values import Area, Money


class TestFactorScores:
    """Tests for the named-factor score map."""

    def test_keys_sorted_and_stripped(self):
        scores = FactorScores({" parking_spots ": 1, "bedrooms": 3})
        assert scores.names() == ("bedrooms", "parking_spots")
        assert scores["bedrooms"] == 3.0

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            FactorScores({"  ": 1})

    def test_non_finite_score_rejected(self):
        with pytest.raises(ValidationError):
            FactorScores({"bedrooms": float("nan")})

    def test_shared_with(self):
        a = FactorScores({"bedrooms": 3, "pool": 1})
        b = FactorScores({"bedrooms": 2, "parking_spots": 1})
        assert a.shared_with(b) == ("bedrooms",)

    def test_restricted_to(self):
        scores = FactorScores({"bedrooms": 3, "bathrooms": 2, "parking_spots": 1})
        assert scores.restricted_to(["bedrooms", "unknown"]).names() == ("bedrooms",)

    def test_mapping_helpers(self):
        scores = FactorScores({"bedrooms": 3})
        assert "bedrooms" in scores
        assert len(scores) == 1
        assert scores.get("pool") is None
        assert list(scores) == ["bedrooms"]

    def test_root_cannot_be_mutated(self):
        scores = FactorScores({"bedrooms": 3})
        with pytest.raises(TypeError):
            scores.root["bedrooms"] = 99
        assert scores["bedrooms"] == 3.0

    def test_returned_views_are_copies(self):
        scores = FactorScores({"bedrooms": 3})
        scores.as_dict()["bedrooms"] = 99
        scores.items().append(("pool", 1.0))
        assert scores.as_dict() == {"bedrooms": 3.0}

    def test_homogenized_copy_keeps_independent_scores(self):
        original = MarketSample(
            id="s-1",
            location="Rua Augusta",
            area=Area(80),
            price=Money(400000),
            status=SampleStatus.FOR_SALE,
            characteristics=FactorScores({"bedrooms": 2}),
        )
        adjusted = original.with_homogenized_value(Money(360000))
        with pytest.raises(TypeError):
            adjusted.characteristics.root["bedrooms"] = 99
        assert original.characteristic("bedrooms") == 2
        assert adjusted.characteristic("bedrooms") == 2

    def test_serializes_as_mapping(self):
        scores = FactorScores({"parking_spots": 1, "bedrooms": 3})
        assert scores.model_dump() == {"bedrooms": 3.0, "parking_spots": 1.0}
        assert FactorScores.model_validate({"bedrooms": 3}) == FactorScores({"bedrooms": 3})

    def test_bad_score_type_raises_domain_error(self):
        with pytest.raises(ValidationError):
            FactorScores({"bedrooms": "abc"})


class TestPropertyAddress:
    """Tests for PropertyAddress validation and formatting."""

    def test_state_uppercased(self, target_address):
        assert target_address.state == "SP"

    def test_required_fields(self):
        with pytest.raises(ValidationError, match="City is required"):
            PropertyAddress(street="Rua A", neighborhood="Centro", city="  ", state="SP")

    def test_invalid_state(self):
        with pytest.raises(ValidationError, match="2-letter"):
            PropertyAddress(street="Rua A", neighborhood="Centro", city="Santos", state="SPX")

    def test_invalid_postal_code(self):
        with pytest.raises(ValidationError, match="Postal code"):
            PropertyAddress(street="Rua A", neighborhood="Centro", city="Santos", state="SP", postal_code="1234")

    def test_str(self, target_address):
        assert str(target_address) == (
            "Rua Oscar Freire, 1200, Jardins, São Paulo-SP - CEP: 01426-001"
        )


class TestPropertyCharacteristics:
    """Tests for PropertyCharacteristics."""

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError, match="non-negative"):
            PropertyCharacteristics(bedrooms=-1)

    def test_upper_bound(self):
        with pytest.raises(ValidationError, match="cannot exceed"):
            PropertyCharacteristics(parking_spots=51)

    def test_features_normalized(self):
        chars = PropertyCharacteristics(additional_features=(" Pool ", "", "GYM"))
        assert chars.additional_features == ("pool", "gym")
        assert chars.has_feature("POOL")

    def test_factor_profile(self, target_characteristics):
        profile = target_characteristics.as_factor_scores()
        assert dict(profile.items()) == {"bathrooms": 2.0, "bedrooms": 3.0, "parking_spots": 1.0}
        assert target_characteristics.total_rooms == 5

    def test_str(self):
        chars = PropertyCharacteristics(bedrooms=1, bathrooms=2, parking_spots=0)
        assert str(chars) == "1 quarto, 2 banheiros, 0 vagas"


class TestMarketSample:
    """Tests for MarketSample."""

    def _sample(self, **overrides):
        data = {
            "id": "s-1",
            "location": "Rua Augusta",
            "area": Area(80),
            "price": Money(400000),
            "status": SampleStatus.FOR_SALE,
        }
        data.update(overrides)
        return MarketSample(**data)

    def test_price_per_sqm(self):
        assert self._sample().price_per_sqm.amount == 5000

    def test_blank_id_rejected(self):
        with pytest.raises(ValidationError, match="ID is required"):
            self._sample(id=" ")

    def test_sold_requires_sale_date(self):
        with pytest.raises(ValidationError, match="Sale date"):
            self._sample(status=SampleStatus.SOLD)
        sold = self._sample(status=SampleStatus.SOLD, sale_date=date(2024, 1, 10))
        assert sold.sale_date == date(2024, 1, 10)

    def test_not_homogenized_by_default(self):
        sample = self._sample()
        assert not sample.is_homogenized
        assert sample.homogenized_price_per_sqm is None
        with pytest.raises(ValidationError, match="not been homogenized"):
            sample.homogenized_unit_price()

    def test_with_homogenized_value_returns_new_instance(self):
        original = self._sample()
        adjusted = original.with_homogenized_value(Money(360000))
        assert adjusted is not original
        assert original.homogenized_value is None
        assert adjusted.homogenized_unit_price() == 4500
        assert adjusted.price == original.price

    def test_homogenized_currency_must_match(self):
        with pytest.raises(CurrencyMismatchError):
            self._sample(homogenized_value=Money(1, "USD"))

    def test_characteristic_lookup(self):
        sample = self._sample(characteristics=FactorScores({"bedrooms": 2}))
        assert sample.characteristic("bedrooms") == 2
        assert sample.has_characteristic("bedrooms")
        assert not sample.has_characteristic("pool")

    def test_missing_status_raises_domain_error(self):
        data = {"id": "s-1", "location": "Rua Augusta", "area": Area(80), "price": Money(400000)}
        with pytest.raises(ValidationError) as exc_info:
            MarketSample(**data)
        assert isinstance(exc_info.value, BackofficeError)
        assert any(d["field"] == "status" for d in exc_info.value.details)

    def test_bad_status_on_model_validate(self):
        with pytest.raises(ValidationError, match="status"):
            MarketSample.model_validate(
                {"id": "s-1", "location": "Rua Augusta", "area": Area(80), "price": Money(400000), "status": "leased"}
            )


class TestPropertyStandard:
    """Tests for the finish standard enum."""

    def test_multipliers(self):
        assert [s.multiplier for s in PropertyStandard] == [0.90, 0.95, 1.00, 1.05, 1.10]

    def test_from_string(self):
        assert PropertyStandard.from_string("High-End") is PropertyStandard.HIGH_END
        assert PropertyStandard.from_string(" renovated ") is PropertyStandard.RENOVATED
        assert PropertyStandard.from_string("premium") is None

    def test_rank_follows_declaration(self):
        assert PropertyStandard.ORIGINAL.rank == 0
        assert PropertyStandard.HIGH_END.rank == 4


class TestPropertyValuation:
    """Tests for PropertyValuation."""

    def _valuation(self, standard, total):
        return PropertyValuation(standard=standard, price_per_sqm=Money(total / 100), total_value=Money(total))

    def test_derived_fields(self):
        valuation = self._valuation(PropertyStandard.RENOVATED, 450000)
        assert valuation.standard_multiplier == 1.0
        assert valuation.total_value_formatted == "R$ 450.000,00"

    def test_calculate_for_area(self):
        valuation = self._valuation(PropertyStandard.RENOVATED, 500000)
        assert valuation.calculate_for_area(Area(50)).amount == 250000

    def test_compare_and_percentage_difference(self):
        low = self._valuation(PropertyStandard.ORIGINAL, 400000)
        high = self._valuation(PropertyStandard.HIGH_END, 500000)
        assert high.compare_with(low).amount == 100000
        assert low.compare_with(high).amount == 100000
        assert high.percentage_difference_from(low) == 25.0
        assert low.percentage_difference_from(high) == 20.0


class TestStatisticalAnalysisModel:
    """Tests for StatisticalAnalysis derived values and serialization."""

    def test_reliability_and_grade(self, scenario_a_samples):
        analysis = analyze_samples(scenario_a_samples)
        assert analysis.coefficient_of_variation < 10
        assert analysis.precision_grade == "excellent"
        assert analysis.is_reliable

    def test_confidence_interval_floored_at_zero(self, sample_factory):
        analysis = analyze_samples([sample_factory(100, sample_id="a"), sample_factory(5000, sample_id="b")])
        assert analysis.confidence_interval["lower"].amount == 0

    def test_sample_counts(self, scenario_a_samples):
        analysis = analyze_samples(scenario_a_samples)
        assert analysis.sample_counts == {"total": 5, "outliers": 1, "excluded": 0, "retained": 4}

    def test_classification_of(self, scenario_a_samples):
        analysis = analyze_samples(scenario_a_samples)
        assert analysis.classification_of("a-4") == "outlier"
        assert analysis.classification_of("a-0") == "retained"
        assert analysis.classification_of("missing") is None

    def test_negative_cv_rejected(self, scenario_a_samples):
        analysis = analyze_samples(scenario_a_samples)
        data = {**dict(analysis), "coefficient_of_variation": -1.0}
        with pytest.raises(ValidationError):
            StatisticalAnalysis(**data)

    def test_json_round_trip(self, scenario_a_samples):
        analysis = analyze_samples(scenario_a_samples)
        restored = StatisticalAnalysis.model_validate(analysis.model_dump(mode="json"))
        assert restored == analysis
        assert restored.classification_of("a-4") == "outlier"

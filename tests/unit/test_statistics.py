"""Unit tests for realty_backoffice.domain.calculator.statistics."""

import pytest

from realty_backoffice.core.exceptions import CurrencyMismatchError, ValidationError
from realty_backoffice.domain.calculator import (
    analyze_samples,
    calculate_coefficient_of_variation,
    calculate_mean,
    calculate_median,
    calculate_std_dev,
)
from realty_backoffice.domain.calculator.statistics import split_by_band
from realty_backoffice.domain.models import MarketSample, SampleStatus
from realty_backoffice.domain.values import Area, Money


class TestBasicStatistics:
    """Tests for the scalar statistics helpers."""

    def test_mean(self):
        assert calculate_mean([1, 2, 3, 4]) == 2.5

    def test_median_odd_and_even(self):
        assert calculate_median([3, 1, 2]) == 2
        assert calculate_median([4, 1, 3, 2]) == 2.5

    def test_population_std_dev(self):
        assert calculate_std_dev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)

    def test_single_value_has_zero_std_dev(self):
        assert calculate_std_dev([5000]) == 0.0

    @pytest.mark.parametrize("func", [calculate_mean, calculate_median, calculate_std_dev])
    def test_empty_input(self, func):
        with pytest.raises(ValidationError):
            func([])

    def test_coefficient_of_variation(self):
        assert calculate_coefficient_of_variation(500, 5000) == pytest.approx(10.0)

    def test_coefficient_of_variation_zero_mean(self):
        with pytest.raises(ValidationError, match="mean"):
            calculate_coefficient_of_variation(0, 0)


class TestSplitByBand:
    """Tests for the closed-band split."""

    def test_bounds_inclusive(self, sample_factory):
        samples = [sample_factory(v, sample_id=str(v)) for v in (600, 1000, 1400, 599, 1401)]
        inside, outside = split_by_band(samples, 1000, 0.6, 1.4)
        assert [s.id for s in inside] == ["600", "1000", "1400"]
        assert [s.id for s in outside] == ["599", "1401"]


class TestAnalyzeSamples:
    """Tests for the two-pass outlier filter."""

    def test_outlier_removed_in_first_pass(self, scenario_a_samples):
        analysis = analyze_samples(scenario_a_samples)

        assert [s.id for s in analysis.outliers] == ["a-4"]
        assert analysis.excluded == ()
        assert [s.id for s in analysis.retained] == ["a-0", "a-1", "a-2", "a-3"]
        assert not analysis.fallback_used

    def test_final_statistics_use_retained_only(self, scenario_a_samples):
        analysis = analyze_samples(scenario_a_samples)

        assert analysis.mean.amount == 4112.5
        assert analysis.median.amount == 4125
        assert analysis.std_dev.amount == pytest.approx(73.95, abs=0.01)
        assert analysis.min_value.amount == 4000
        assert analysis.max_value.amount == 4200

    def test_second_pass_excludes_around_candidate_median(self, sample_factory):
        samples = [sample_factory(v, sample_id=str(v)) for v in (1000, 1000, 1000, 1000, 1300)]
        analysis = analyze_samples(samples)

        assert analysis.outliers == ()
        assert [s.id for s in analysis.excluded] == ["1300"]
        assert len(analysis.retained) == 4
        assert analysis.mean.amount == 1000
        assert analysis.coefficient_of_variation == 0

    def test_fallback_with_two_samples(self, sample_factory):
        samples = [sample_factory(4000, sample_id="x"), sample_factory(4400, sample_id="y")]
        analysis = analyze_samples(samples)

        assert analysis.fallback_used
        assert analysis.outliers == ()
        assert analysis.excluded == ()
        assert analysis.retained == tuple(samples)
        assert analysis.mean.amount == 4200
        assert analysis.median.amount == 4200

    def test_fallback_when_second_pass_leaves_too_few(self, sample_factory):
        samples = [sample_factory(v, sample_id=str(v)) for v in (800, 1000, 1300)]
        analysis = analyze_samples(samples)

        assert analysis.fallback_used
        assert analysis.excluded == ()
        assert len(analysis.retained) == 3
        assert analysis.mean.amount == pytest.approx(1033.33, abs=0.01)

    def test_partition_covers_every_sample(self, scenario_a_samples, sample_factory):
        samples = scenario_a_samples + [sample_factory(3200, sample_id="low")]
        analysis = analyze_samples(samples)

        classified = analysis.outliers + analysis.excluded + analysis.retained
        assert sorted(s.id for s in classified) == sorted(s.id for s in samples)
        assert [s.id for s in analysis.excluded] == ["low"]

    def test_mean_within_range(self, scenario_a_samples):
        analysis = analyze_samples(scenario_a_samples)
        assert analysis.min_value <= analysis.mean <= analysis.max_value
        assert analysis.min_value <= analysis.median <= analysis.max_value

    def test_empty_input(self):
        with pytest.raises(ValidationError, match="no samples"):
            analyze_samples([])

    def test_unhomogenized_sample_rejected(self, sample_factory):
        samples = [sample_factory(1000, sample_id=str(i), homogenized=False) for i in range(3)]
        with pytest.raises(ValidationError, match="not been homogenized"):
            analyze_samples(samples)

    def test_zero_mean_rejected(self, sample_factory):
        samples = [
            sample_factory(1000, sample_id=str(i), homogenized=False).with_homogenized_value(Money(0))
            for i in range(3)
        ]
        with pytest.raises(ValidationError, match="mean"):
            analyze_samples(samples)

    def test_mixed_currencies_rejected(self, sample_factory):
        brl = sample_factory(1000, sample_id="brl")
        usd = MarketSample(
            id="usd",
            location="Brickell, Miami",
            area=Area(100),
            price=Money(100000, "USD"),
            status=SampleStatus.FOR_SALE,
            homogenized_value=Money(100000, "USD"),
        )
        with pytest.raises(CurrencyMismatchError):
            analyze_samples([brl, usd, brl])

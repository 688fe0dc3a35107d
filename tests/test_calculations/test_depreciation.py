"""Tests for capital works and plant-and-equipment depreciation."""

import pytest

from propforecast.calculations.depreciation import (
    calculate_depreciation,
    depreciation_schedule,
)
from propforecast.models.property import DepreciationMethod


def _depreciation(year, method=DepreciationMethod.PRIME_COST, construction_year=2020, is_new=True):
    return calculate_depreciation(
        building_value=800_000,
        plant_value=50_000,
        construction_year=construction_year,
        is_new_property=is_new,
        method=method,
        year=year,
    )


class TestCapitalWorks:
    """Tests for building depreciation."""

    def test_two_and_a_half_percent(self):
        assert _depreciation(1).building == pytest.approx(20_000)

    def test_constant_across_years_and_methods(self):
        """Method does not affect the capital works rate."""
        for year in (1, 10, 30):
            assert _depreciation(year, DepreciationMethod.DIMINISHING_VALUE).building == pytest.approx(20_000)

    def test_pre_1987_buildings_not_eligible(self):
        """Buildings constructed before 1987 get no capital works deduction."""
        for year in range(1, 41):
            assert _depreciation(year, construction_year=1980).building == 0.0

    def test_1987_is_eligible(self):
        assert _depreciation(1, construction_year=1987).building > 0


class TestPlantAndEquipment:
    """Tests for fixtures depreciation."""

    def test_prime_cost_is_constant(self):
        """Prime cost fixtures depreciation is the same every year."""
        values = [_depreciation(y).fixtures for y in range(1, 11)]
        assert all(v == pytest.approx(7_500) for v in values)

    def test_diminishing_value_declines(self):
        """Each year's diminishing value deduction is below the last."""
        values = [_depreciation(y, DepreciationMethod.DIMINISHING_VALUE).fixtures for y in range(1, 21)]
        for earlier, later in zip(values, values[1:]):
            assert later < earlier

    def test_diminishing_value_formula(self):
        """Year k = plant x 0.85^(k-1) x 15%."""
        result = _depreciation(3, DepreciationMethod.DIMINISHING_VALUE)
        assert result.fixtures == pytest.approx(50_000 * 0.85 ** 2 * 0.15)

    def test_established_property_gets_no_fixtures(self):
        """Second-hand plant and equipment is not deductible."""
        for year in range(1, 41):
            assert _depreciation(year, is_new=False).fixtures == 0.0


class TestTotals:
    """Tests for combined results."""

    def test_total_is_sum(self):
        result = _depreciation(1)
        assert result.total == pytest.approx(27_500)

    def test_negative_values_floored(self):
        result = calculate_depreciation(-100_000, -10_000, 2020, True, DepreciationMethod.PRIME_COST, 1)
        assert result.building == 0.0
        assert result.fixtures == 0.0

    def test_schedule_for_record(self, end_to_end_record):
        schedule = depreciation_schedule(end_to_end_record, 5)
        assert [d.year for d in schedule] == [1, 2, 3, 4, 5]
        assert schedule[0].total == pytest.approx(27_500)

"""Tests for the per-investor tax engine."""

import pytest

from propforecast.calculations.tax import (
    calculate_income_tax,
    calculate_medicare_levy,
    calculate_tax_impact,
    cpi_multiplier,
    highest_marginal_rate,
    marginal_rate,
)
from propforecast.models.assumptions import ProjectionAssumptions
from propforecast.models.lookups import STAGE_THREE_TAX_BRACKETS
from propforecast.models.property import Investor, OwnershipAllocation


class TestIncomeTax:
    """Tests for progressive bracket tax."""

    @pytest.mark.parametrize("income,expected", [
        (0, 0),
        (18_200, 0),
        (45_000, 5_092),
        (120_000, 29_467),
        (180_000, 51_667),
        (200_000, 60_667),
    ])
    def test_bracket_thresholds(self, income, expected):
        """Tax at each bracket edge."""
        assert calculate_income_tax(income) == pytest.approx(expected)

    def test_negative_income_pays_no_tax(self):
        assert calculate_income_tax(-50_000) == 0.0

    def test_alternative_bracket_table(self):
        """Stage 3 rates can be swapped in."""
        assert calculate_income_tax(120_000, STAGE_THREE_TAX_BRACKETS) == pytest.approx(26_788)


class TestMedicareLevy:
    """Tests for the flat Medicare levy."""

    def test_levy_is_two_percent(self):
        assert calculate_medicare_levy(100_000, True) == pytest.approx(2_000)

    def test_below_threshold_no_levy(self):
        assert calculate_medicare_levy(25_000, True) == 0.0

    def test_flag_off_no_levy(self):
        assert calculate_medicare_levy(100_000, False) == 0.0


class TestMarginalRate:
    """Tests for the display marginal rate."""

    def test_rate_for_income(self):
        assert marginal_rate(10_000) == 0.0
        assert marginal_rate(50_000) == 0.325
        assert marginal_rate(120_000) == 0.325
        assert marginal_rate(120_001) == 0.37
        assert marginal_rate(250_000) == 0.45

    def test_highest_rate_across_investors(self):
        investors = [
            Investor(id="1", annual_income=60_000),
            Investor(id="2", annual_income=190_000),
        ]
        assert highest_marginal_rate(investors) == 0.45

    def test_no_investors(self):
        assert highest_marginal_rate([]) == 0.0


class TestCpiMultiplier:
    """Tests for income indexation."""

    def test_first_year_is_unindexed(self):
        assert cpi_multiplier(1, 2.5) == 1.0
        assert cpi_multiplier(0, 2.5) == 1.0

    def test_compounds_from_year_one(self):
        assert cpi_multiplier(3, 2.5) == pytest.approx(1.025 ** 2)


class TestTaxImpact:
    """Tests for the aggregated tax delta."""

    def test_loss_produces_saving(self):
        """A $20k loss for a $120k earner saves $6,900 including levy."""
        investors = [Investor(id="a", annual_income=120_000, has_medicare_levy=True)]
        allocations = [OwnershipAllocation(investor_id="a", percentage=100)]

        impact = calculate_tax_impact(investors, allocations, -20_000, year=1)

        # Without: 29,467 + 2,400 levy. With (on $100k): 22,967 + 2,000 levy.
        assert impact.investors[0].tax_without_property == pytest.approx(31_867)
        assert impact.investors[0].tax_with_property == pytest.approx(24_967)
        assert impact.total_tax_delta == pytest.approx(-6_900)
        assert impact.tax_benefit == pytest.approx(6_900)

    def test_profit_increases_tax(self):
        investors = [Investor(id="a", annual_income=80_000)]
        allocations = [OwnershipAllocation(investor_id="a", percentage=100)]
        impact = calculate_tax_impact(investors, allocations, 10_000, year=1)
        assert impact.total_tax_delta > 0
        assert impact.tax_benefit < 0

    def test_shares_follow_ownership(self):
        """Each investor is taxed on their ownership share of the result."""
        investors = [
            Investor(id="1", annual_income=200_000),
            Investor(id="2", annual_income=20_000, has_medicare_levy=False),
        ]
        allocations = [
            OwnershipAllocation(investor_id="1", percentage=90),
            OwnershipAllocation(investor_id="2", percentage=10),
        ]
        impact = calculate_tax_impact(investors, allocations, -10_000, year=1)

        shares = {r.investor_id: r.property_income_share for r in impact.investors}
        assert shares["1"] == pytest.approx(-9_000)
        assert shares["2"] == pytest.approx(-1_000)
        # Top bracket investor saves 45% + 2% levy on their share
        assert impact.investors[0].tax_delta == pytest.approx(-9_000 * 0.47)

    def test_every_owner_pays_less_on_a_loss(self):
        """With a loss, tax with the property never exceeds tax without it."""
        investors = [
            Investor(id="1", annual_income=35_000),
            Investor(id="2", annual_income=95_000),
            Investor(id="3", annual_income=15_000, has_medicare_levy=False),
        ]
        allocations = [
            OwnershipAllocation(investor_id="1", percentage=30),
            OwnershipAllocation(investor_id="2", percentage=50),
            OwnershipAllocation(investor_id="3", percentage=20),
        ]
        impact = calculate_tax_impact(investors, allocations, -45_000, year=4)

        assert len(impact.investors) == 3
        for result in impact.investors:
            assert result.tax_with_property <= result.tax_without_property
        assert impact.total_tax_delta <= 0

    def test_zero_ownership_skipped(self):
        investors = [Investor(id="1", annual_income=100_000), Investor(id="2", annual_income=100_000)]
        allocations = [
            OwnershipAllocation(investor_id="1", percentage=100),
            OwnershipAllocation(investor_id="2", percentage=0),
        ]
        impact = calculate_tax_impact(investors, allocations, -5_000)
        assert [r.investor_id for r in impact.investors] == ["1"]

    def test_unknown_investor_ignored(self):
        investors = [Investor(id="1", annual_income=100_000)]
        allocations = [OwnershipAllocation(investor_id="ghost", percentage=100)]
        impact = calculate_tax_impact(investors, allocations, -5_000)
        assert impact.investors == []
        assert impact.total_tax_delta == 0.0

    def test_income_indexed_by_cpi(self):
        """Later years tax a CPI-grown base income."""
        investors = [Investor(id="a", annual_income=100_000, other_income=20_000)]
        allocations = [OwnershipAllocation(investor_id="a", percentage=100)]
        impact = calculate_tax_impact(investors, allocations, 0, year=3)
        assert impact.investors[0].base_income == pytest.approx(120_000 * 1.025 ** 2)

    def test_custom_cpi_assumption(self):
        investors = [Investor(id="a", annual_income=100_000)]
        allocations = [OwnershipAllocation(investor_id="a", percentage=100)]
        assumptions = ProjectionAssumptions(cpi_rate=0.0)
        impact = calculate_tax_impact(investors, allocations, 0, year=10, assumptions=assumptions)
        assert impact.investors[0].base_income == pytest.approx(100_000)

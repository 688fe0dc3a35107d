"""Tests for property records, assumptions and result rows."""

from dataclasses import replace

import pytest

from propforecast.models.assumptions import ProjectionAssumptions
from propforecast.models.property import (
    Investor,
    LoanTerms,
    LoanType,
    OwnershipAllocation,
    default_property_record,
)
from propforecast.models.results import YearProjection


class TestValidation:
    """Tests for PropertyRecord.validate."""

    def test_default_record_is_valid(self, default_record):
        assert default_record.validate() == []

    def test_ownership_must_total_100(self, default_record):
        record = replace(default_record, ownership_allocations=[
            OwnershipAllocation(investor_id="1", percentage=80),
            OwnershipAllocation(investor_id="2", percentage=15),
        ])
        errors = record.validate()
        assert len(errors) == 1
        assert "ownership" in errors[0]

    def test_ownership_tolerance(self, default_record):
        """Rounding within 0.1% is accepted."""
        record = replace(default_record, ownership_allocations=[
            OwnershipAllocation(investor_id="1", percentage=66.67),
            OwnershipAllocation(investor_id="2", percentage=33.33),
        ])
        assert record.validate() == []

    def test_unknown_state(self, default_record):
        errors = replace(default_record, property_state="XX").validate()
        assert any("property_state" in e for e in errors)

    def test_negative_values(self, default_record):
        errors = replace(default_record, purchase_price=-1, weekly_rent=-1).validate()
        assert len(errors) == 2


class TestWarnings:
    """Tests for PropertyRecord.warnings."""

    def test_default_record_has_no_warnings(self, default_record):
        assert default_record.warnings() == []

    def test_construction_record_has_no_warnings(self, construction_record):
        assert construction_record.warnings() == []

    def test_large_funding_shortfall(self, default_record):
        warnings = replace(default_record, deposit_amount=0).warnings()
        assert any("funding shortfall" in w for w in warnings)

    def test_land_and_build_must_match_price(self, construction_record):
        warnings = replace(construction_record, land_value=350_000).warnings()
        assert any("land value + construction value" in w for w in warnings)

    def test_building_split_must_match_construction(self, construction_record):
        warnings = replace(construction_record, building_value=400_000).warnings()
        assert any("plant & equipment" in w for w in warnings)

    def test_cheap_equity_loan(self, construction_record):
        record = replace(
            construction_record,
            equity_loan=LoanTerms(interest_rate=5.0, term_years=25, loan_type=LoanType.IO),
        )
        assert any("equity loan rate" in w for w in record.warnings())

    def test_unusual_rental_growth(self, default_record):
        warnings = replace(default_record, rental_growth_rate=15.0).warnings()
        assert any("rental growth" in w for w in warnings)

    def test_missing_building_value(self, default_record):
        warnings = replace(default_record, building_value=0).warnings()
        assert any("depreciation" in w for w in warnings)


class TestDefaultRecord:
    """Tests for default_property_record."""

    def test_each_call_is_independent(self):
        """Changing one default record never leaks into the next."""
        first = default_property_record()
        first.investors.append(Investor(id="3"))
        first.main_loan.amount = 1

        second = default_property_record()
        assert len(second.investors) == 2
        assert second.main_loan.amount == 600_000

    def test_ownership_split(self, default_record):
        assert default_record.total_ownership() == pytest.approx(100)
        assert default_record.get_investor("1").annual_income == 200_000
        assert default_record.get_investor("missing") is None


class TestRecordProperties:
    """Tests for derived record values."""

    def test_base_value_for_purchase(self, end_to_end_record):
        assert end_to_end_record.base_property_value == 1_000_000
        assert not end_to_end_record.has_construction_phase

    def test_base_value_for_build(self, construction_record):
        assert construction_record.base_property_value == 800_000
        assert construction_record.has_construction_phase

    def test_zero_period_is_not_a_construction_phase(self, construction_record):
        assert not replace(construction_record, construction_period=0).has_construction_phase

    def test_investor_base_income(self):
        assert Investor(id="a", annual_income=90_000, other_income=5_000).base_income == 95_000


class TestAssumptions:
    """Tests for ProjectionAssumptions fallbacks."""

    def test_resolve_rate(self, assumptions):
        assert assumptions.resolve_rate(5.5) == 5.5
        assert assumptions.resolve_rate(None) == 6.0
        assert assumptions.resolve_rate(None, assumptions.default_equity_rate) == 7.2

    def test_zero_rate_is_kept(self, assumptions):
        assert assumptions.resolve_rate(0.0) == 0.0

    def test_resolve_term(self, assumptions):
        assert assumptions.resolve_term(25) == 25
        assert assumptions.resolve_term(None) == 30
        assert assumptions.resolve_term(0) == 30

    def test_rental_growth_source(self):
        assert ProjectionAssumptions().rental_growth_for(3.0) == 5.0
        assert ProjectionAssumptions(use_record_rental_growth=True).rental_growth_for(3.0) == 3.0
        assert ProjectionAssumptions(use_record_rental_growth=True).rental_growth_for(None) == 5.0


class TestYearProjection:
    """Tests for the result row."""

    def test_to_dict(self):
        row = YearProjection(
            year=2, rental_income=30_000, property_value=900_000,
            main_loan_balance=500_000, equity_loan_balance=100_000,
            main_interest=32_000, equity_interest=7_000,
            main_payment=40_000, equity_payment=7_000,
            main_loan_status=LoanType.PI, equity_loan_status=LoanType.IO,
            other_expenses=5_000, building_depreciation=10_000, fixtures_depreciation=3_000,
            total_depreciation=13_000, taxable_income=-27_000, tax_benefit=9_000,
            after_tax_cash_flow=-13_000, cumulative_cash_flow=-20_000,
            property_equity=300_000, total_return=50_000,
        )
        data = row.to_dict()

        assert data["total_debt"] == 600_000
        assert data["total_interest"] == 39_000
        assert data["equity_loan_status"] == "io"
        assert row.tax_delta == -9_000
        assert not row.is_construction

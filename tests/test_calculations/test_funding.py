"""Tests for funding analysis and construction funding helpers."""

from dataclasses import replace

import pytest

from propforecast.calculations.funding import (
    analyze_funding,
    calculate_available_equity,
    calculate_progress_draw_interest,
    calculate_total_project_cost,
    default_progress_payments,
)
from propforecast.models.property import ProgressPayment
from tests.fixtures.test_inputs import get_construction_record, get_end_to_end_record


def _closes(funding):
    lhs = (funding.main_loan_amount + funding.equity_loan_amount
           + funding.actual_cash_deposit + funding.funding_shortfall)
    rhs = funding.total_project_cost + funding.funding_surplus
    return lhs == pytest.approx(rhs, abs=1e-6)


class TestProjectCost:
    """Tests for total project cost."""

    def test_purchase_uses_price(self, end_to_end_record):
        assert calculate_total_project_cost(end_to_end_record) == 1_000_000

    def test_construction_uses_land_and_build(self, construction_record):
        """Land + construction + purchase costs + construction costs."""
        assert calculate_total_project_cost(construction_record) == pytest.approx(
            300_000 + 500_000 + 10_500 + 20_000
        )

    def test_holding_costs_included(self, construction_record):
        record = replace(construction_record, total_holding_costs=25_000)
        assert calculate_total_project_cost(record) == pytest.approx(855_500)


class TestAvailableEquity:
    """Tests for equity release sizing."""

    def test_lvr_less_existing_debt(self, construction_record):
        assert calculate_available_equity(construction_record) == pytest.approx(400_000)

    def test_never_negative(self, construction_record):
        record = replace(construction_record, existing_debt=900_000)
        assert calculate_available_equity(record) == 0.0


class TestAnalyzeFunding:
    """Tests for the single-pass funding resolution."""

    def test_fully_funded_purchase(self, end_to_end_record):
        funding = analyze_funding(end_to_end_record)

        assert funding.main_loan_amount == 800_000
        assert funding.equity_loan_amount == 0.0
        assert funding.minimum_cash_required == 200_000
        assert funding.funding_shortfall == 0.0
        assert funding.funding_surplus == 0.0
        assert funding.is_fully_funded

    def test_equity_covers_gap_after_main_loan(self, construction_record):
        """Equity loan covers cost minus main loan when enough is available."""
        funding = analyze_funding(construction_record)

        assert funding.equity_loan_amount == pytest.approx(190_500)
        assert funding.minimum_cash_required == 0.0
        assert funding.funding_shortfall == 0.0

    def test_equity_capped_by_availability(self, construction_record):
        """Limited equity leaves a cash requirement and a shortfall."""
        record = replace(construction_record, primary_property_value=500_000, existing_debt=350_000)
        funding = analyze_funding(record)

        assert funding.equity_loan_amount == pytest.approx(50_000)
        assert funding.minimum_cash_required == pytest.approx(140_500)
        assert funding.funding_shortfall == pytest.approx(140_500)

    def test_equity_unused_when_disabled(self, construction_record):
        record = replace(construction_record, use_equity_funding=False)
        funding = analyze_funding(record)

        assert funding.available_equity == pytest.approx(400_000)
        assert funding.equity_loan_amount == 0.0
        assert funding.funding_shortfall == pytest.approx(190_500)

    def test_deposit_does_not_reduce_equity_draw(self, construction_record):
        """The equity draw is sized before the deposit is considered."""
        record = replace(construction_record, deposit_amount=100_000)
        funding = analyze_funding(record)

        assert funding.equity_loan_amount == pytest.approx(190_500)
        assert funding.funding_surplus == pytest.approx(100_000)

    def test_surplus_when_over_funded(self, end_to_end_record):
        record = replace(end_to_end_record, deposit_amount=300_000)
        funding = analyze_funding(record)
        assert funding.funding_surplus == pytest.approx(100_000)
        assert funding.funding_shortfall == 0.0

    @pytest.mark.parametrize("changes", [
        {},
        {"deposit_amount": 50_000},
        {"deposit_amount": 900_000},
        {"primary_property_value": 300_000},
        {"use_equity_funding": False},
        {"total_holding_costs": 33_333.33},
    ])
    def test_funding_closes(self, changes):
        """main + equity + deposit + shortfall == cost + surplus."""
        record = replace(get_construction_record(), **changes)
        assert _closes(analyze_funding(record))

    def test_funding_closes_for_purchase(self):
        assert _closes(analyze_funding(get_end_to_end_record()))


class TestProgressPayments:
    """Tests for progress payment schedules and draw interest."""

    def test_standard_eight_month_schedule(self):
        stages = default_progress_payments(8)
        assert [s.month for s in stages] == [1, 2, 4, 6, 8]
        assert sum(s.percentage for s in stages) == pytest.approx(100)

    def test_schedule_scales_to_period(self):
        stages = default_progress_payments(12)
        assert [s.month for s in stages] == [2, 3, 6, 9, 12]

    def test_short_build_starts_at_month_one(self):
        stages = default_progress_payments(4)
        assert stages[0].month == 1
        assert stages[-1].month == 4

    def test_draw_interest_single_upfront_draw(self):
        """A full draw in month 1 accrues interest every month."""
        stages = [ProgressPayment(percentage=100, month=1)]
        interest = calculate_progress_draw_interest(stages, 100_000, 12.0, 12)
        assert interest == pytest.approx(12_000)

    def test_draw_interest_below_full_balance(self):
        """Staged draws cost less interest than borrowing everything up front."""
        stages = default_progress_payments(12)
        staged = calculate_progress_draw_interest(stages, 500_000, 7.0, 12)
        assert staged < 500_000 * 0.07
        assert staged == pytest.approx(3_025_000 * 0.07 / 12)

    def test_no_period_no_interest(self):
        assert calculate_progress_draw_interest(default_progress_payments(8), 500_000, 7.0, 0) == 0.0

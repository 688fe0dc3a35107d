#!/usr/bin/env python3
"""Compare ways of funding interest during construction.

Projects the same house-and-land build with construction interest paid
in cash, capitalised onto the loans, and split 50/50, plus a variant with
an interest-only main loan. Scenarios are projected in parallel and
ranked on ROI, cash flow and risk.

Usage:
    python examples/compare_funding_mix.py
"""

import sys
from pathlib import Path
from dataclasses import replace

import pandas as pd

sys.path.insert(0, str(Path(__file__).parent.parent))

from propforecast.calculations.construction import estimate_holding_costs
from propforecast.models.property import (
    FundingMix,
    Investor,
    LoanTerms,
    LoanType,
    OwnershipAllocation,
    PropertyRecord,
)
from propforecast.portfolio import compare_scenarios


def build_record() -> PropertyRecord:
    """Land $300k + build $500k over 12 months, equity release from home."""
    return PropertyRecord(
        investors=[
            Investor(id="a", name="Alex", annual_income=180_000),
            Investor(id="b", name="Sam", annual_income=60_000),
        ],
        ownership_allocations=[
            OwnershipAllocation(investor_id="a", percentage=60),
            OwnershipAllocation(investor_id="b", percentage=40),
        ],
        purchase_price=800_000,
        weekly_rent=700,
        vacancy_rate=3.0,
        property_state="QLD",
        is_construction_project=True,
        construction_year=2025,
        construction_period=12,
        construction_interest_rate=7.0,
        land_value=300_000,
        construction_value=500_000,
        building_value=450_000,
        plant_equipment_value=50_000,
        main_loan=LoanTerms(amount=640_000, interest_rate=6.5, term_years=30, loan_type=LoanType.PI),
        use_equity_funding=True,
        equity_loan=LoanTerms(interest_rate=7.2, term_years=25, loan_type=LoanType.IO, io_term_years=5),
        primary_property_value=1_000_000,
        existing_debt=400_000,
        stamp_duty=8_000,
        legal_fees=2_000,
        inspection_fees=500,
        council_fees=4_000,
        architect_fees=10_000,
        site_costs=6_000,
        property_management=7.0,
        council_rates=2_200,
        insurance=1_400,
        repairs=1_500,
    )


def main():
    """Compare construction funding mixes."""

    print("=" * 70)
    print("CONSTRUCTION FUNDING MIX COMPARISON")
    print("=" * 70)
    print()

    base = build_record()
    scenarios = {
        "cash": replace(base, holding_cost_funding=FundingMix.CASH),
        "capitalised": replace(base, holding_cost_funding=FundingMix.DEBT),
        "hybrid_50": replace(
            base, holding_cost_funding=FundingMix.HYBRID, holding_cost_cash_percentage=50
        ),
        "capitalised_io": replace(
            base,
            holding_cost_funding=FundingMix.DEBT,
            main_loan=replace(base.main_loan, loan_type=LoanType.IO, io_term_years=5),
        ),
    }

    print(f"Estimated holding costs (full loan):      ${estimate_holding_costs(base):>10,.0f}")
    print(f"Estimated holding costs (progress draws): "
          f"${estimate_holding_costs(base, use_progress_draws=True):>10,.0f}")
    print()

    result = compare_scenarios(scenarios, year_to=30)

    for name, projection in result.projections.items():
        year_zero = projection.construction_year
        print(f"{name:<16} year 0 cash flow ${year_zero.after_tax_cash_flow:>10,.0f}   "
              f"debt entering year 1 ${year_zero.total_debt:>10,.0f}")
    print()

    with pd.option_context("display.width", 140, "display.float_format", "{:,.1f}".format):
        print(result.to_dataframe()[[
            "roi", "weekly_cash_flow", "equity_year_30", "break_even_year",
            "total_cash_invested", "risk_score", "risk_level",
        ]])
    print()

    spread = result.roi_spread
    print(f"Best performer:   {result.best_performer}")
    print(f"Worst performer:  {result.worst_performer}")
    print(f"ROI range:        {spread.minimum:.1f}% to {spread.maximum:.1f}% "
          f"(mean {result.average_roi:.1f}%)")
    print(f"Top by cash flow: {', '.join(result.top_by_cash_flow())}")
    print(f"Risk-adjusted:    {', '.join(result.top_risk_adjusted())}")


if __name__ == "__main__":
    main()

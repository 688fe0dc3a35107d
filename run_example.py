#!/usr/bin/env python3
"""Example script to project the standard investment property record."""

import logging
import sys
from dataclasses import replace
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from propforecast.models.property import (
    FundingMix,
    LoanTerms,
    LoanType,
    default_property_record,
)
from propforecast.calculations.funding import FundingResult
from propforecast.calculations.metrics import format_summary_table
from propforecast.calculations.projection import ProjectionResult, run_projection
from propforecast.calculations.stamp_duty import stamp_duty_for_record


def get_build_record():
    """Default record turned into a house-and-land build with equity release."""
    record = default_property_record()
    return replace(
        record,
        is_construction_project=True,
        construction_period=8,
        building_value=515_000,
        plant_equipment_value=35_000,
        use_equity_funding=True,
        equity_loan=LoanTerms(interest_rate=7.0, term_years=25, loan_type=LoanType.IO, io_term_years=3),
        holding_cost_funding=FundingMix.HYBRID,
        holding_cost_cash_percentage=50,
    )


def print_funding(funding: FundingResult):
    print(f"{'Total project cost':<28} ${funding.total_project_cost:>12,.0f}")
    print(f"{'Main loan':<28} ${funding.main_loan_amount:>12,.0f}")
    print(f"{'Equity loan':<28} ${funding.equity_loan_amount:>12,.0f}")
    print(f"{'Available equity':<28} ${funding.available_equity:>12,.0f}")
    print(f"{'Cash deposit':<28} ${funding.actual_cash_deposit:>12,.0f}")
    print(f"{'Shortfall':<28} ${funding.funding_shortfall:>12,.0f}")
    print(f"{'Surplus':<28} ${funding.funding_surplus:>12,.0f}")


def print_years(result: ProjectionResult, step: int = 5):
    print(f"\n{'Year':>4} {'Rent':>10} {'Interest':>10} {'Deprec':>10} {'Taxable':>11} "
          f"{'Tax Ben':>9} {'ATCF':>10} {'Cumulative':>12} {'Equity':>12}")
    print("-" * 96)
    for row in result.years:
        if row.year not in (0, 1) and row.year % step:
            continue
        print(
            f"{row.year:>4} {row.rental_income:>10,.0f} {row.total_interest:>10,.0f} "
            f"{row.total_depreciation:>10,.0f} {row.taxable_income:>11,.0f} "
            f"{row.tax_benefit:>9,.0f} {row.after_tax_cash_flow:>10,.0f} "
            f"{row.cumulative_cash_flow:>12,.0f} {row.property_equity:>12,.0f}"
        )


def run_scenario(title, record, years, trace_enabled):
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60 + "\n")

    errors = record.validate()
    if errors:
        for error in errors:
            print(f"ERROR: {error}")
        return
    for warning in record.warnings():
        print(f"Warning: {warning}")

    print(f"Estimated stamp duty ({record.property_state}): "
          f"${stamp_duty_for_record(record):,.0f}\n")

    result = run_projection(record, year_to=years, trace_enabled=trace_enabled)
    print_funding(result.funding)
    print_years(result)
    print("\n" + format_summary_table(result.summary))

    if result.trace_context is not None:
        print("\n" + result.trace_context.summary())


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Investment property projection")
    parser.add_argument("--years", type=int, default=30, help="Projection horizon in years")
    parser.add_argument(
        "--build",
        action="store_true",
        help="Also run the construction scenario",
    )
    parser.add_argument("--trace", action="store_true", help="Print a calculation trace summary")
    parser.add_argument("--verbose", action="store_true", help="Show debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    run_scenario("ESTABLISHED PURCHASE", default_property_record(), args.years, args.trace)

    if args.build:
        run_scenario("HOUSE AND LAND BUILD", get_build_record(), args.years, args.trace)

    print("\nDone.")


if __name__ == "__main__":
    main()

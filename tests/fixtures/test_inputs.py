"""Property records used across the test suite."""

from dataclasses import replace
from typing import Optional

from propforecast.models.property import (
    DepreciationMethod,
    FundingMix,
    Investor,
    LoanTerms,
    LoanType,
    OwnershipAllocation,
    PropertyRecord,
)


def get_end_to_end_record() -> PropertyRecord:
    """Established-purchase scenario with a single investor.

    $1M purchase, $500/week rent, $800k loan at 6% P&I over 30 years,
    no equity release and no construction phase. Expected:
    - Year 1 rental income: 500 x 52 x 0.98 = $25,480
    - Year 1 depreciation: 800k x 2.5% + 50k x 15% = $27,500
    - Year 1 taxable income negative, giving a tax saving

    Returns:
        PropertyRecord for the end-to-end scenario.
    """
    return PropertyRecord(
        investors=[Investor(id="a", name="Sole Investor", annual_income=120_000)],
        ownership_allocations=[OwnershipAllocation(investor_id="a", percentage=100)],
        purchase_price=1_000_000,
        weekly_rent=500,
        vacancy_rate=2.0,
        property_state="NSW",
        is_construction_project=False,
        construction_year=2020,
        building_value=800_000,
        plant_equipment_value=50_000,
        main_loan=LoanTerms(amount=800_000, interest_rate=6.0, term_years=30, loan_type=LoanType.PI),
        use_equity_funding=False,
        deposit_amount=200_000,
        property_management=7.0,
        council_rates=2_000,
        insurance=1_500,
        repairs=2_000,
        depreciation_method=DepreciationMethod.PRIME_COST,
        is_new_property=True,
    )


def get_construction_record(
    funding_mix: FundingMix = FundingMix.DEBT,
    equity_loan_type: LoanType = LoanType.IO,
    construction_equity_repayment: Optional[LoanType] = None,
) -> PropertyRecord:
    """House-and-land build funded by a main loan plus equity release.

    Land $300k + build $500k over 12 months at 7%. Main loan $640k.
    Equity available: $1M x 80% - $400k = $400k.

    Args:
        funding_mix: How construction interest is funded.
        equity_loan_type: Repayment type of the equity loan after completion.
        construction_equity_repayment: IO accrues the equity loan like the
            main loan during the build; PI amortises it. Defaults to
            `equity_loan_type`.

    Returns:
        PropertyRecord with a construction phase.
    """
    return PropertyRecord(
        investors=[
            Investor(id="1", name="Investor 1", annual_income=180_000, has_medicare_levy=True),
            Investor(id="2", name="Investor 2", annual_income=60_000, has_medicare_levy=True),
        ],
        ownership_allocations=[
            OwnershipAllocation(investor_id="1", percentage=60),
            OwnershipAllocation(investor_id="2", percentage=40),
        ],
        purchase_price=800_000,
        weekly_rent=650,
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
        equity_loan=LoanTerms(
            interest_rate=7.2, term_years=25, loan_type=equity_loan_type, io_term_years=5
        ),
        construction_equity_repayment=construction_equity_repayment or equity_loan_type,
        primary_property_value=1_000_000,
        existing_debt=400_000,
        max_lvr=80,
        deposit_amount=0,
        holding_cost_funding=funding_mix,
        holding_cost_cash_percentage=40,
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
        depreciation_method=DepreciationMethod.DIMINISHING_VALUE,
        is_new_property=True,
    )


def get_interest_only_record() -> PropertyRecord:
    """End-to-end record switched to a 5-year IO main loan."""
    record = get_end_to_end_record()
    return replace(
        record,
        main_loan=replace(record.main_loan, loan_type=LoanType.IO, io_term_years=5),
    )

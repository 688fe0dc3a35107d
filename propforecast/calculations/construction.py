"""Interest accrued on the loans while the property is being built.

Each month of construction charges interest on the main loan and on any
equity loan. A capitalisation fraction, set by the holding-cost funding
policy, decides how much of that interest is added to the loan balance and
how much is paid in cash.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..models.assumptions import ProjectionAssumptions
from ..models.property import FundingMix, LoanType, PropertyRecord
from ..models.results import YearProjection
from .funding import (
    FundingResult,
    analyze_funding,
    calculate_progress_draw_interest,
    default_progress_payments,
)
from .loan import calculate_monthly_payment, monthly_rate
from .tax import calculate_tax_impact
from .trace import trace

logger = logging.getLogger(__name__)


@dataclass
class LoanAccrual:
    """Construction-period movements on one loan."""

    opening_balance: float
    interest: float
    capitalised_interest: float
    cash_interest: float
    principal_paid: float  # Always paid in cash
    closing_balance: float
    months_amortised: int = 0  # Term consumed by P&I repayments
    status: LoanType = LoanType.IO


@dataclass
class ConstructionAccrual:
    """Result of the construction phase for both loans."""

    months: int
    capitalisation_fraction: float
    main: LoanAccrual
    equity: LoanAccrual

    @property
    def total_interest(self) -> float:
        return self.main.interest + self.equity.interest

    @property
    def cash_interest(self) -> float:
        return self.main.cash_interest + self.equity.cash_interest

    @property
    def capitalised_interest(self) -> float:
        return self.main.capitalised_interest + self.equity.capitalised_interest

    @property
    def cash_outlay(self) -> float:
        """Cash interest plus any equity principal repaid."""
        return self.cash_interest + self.main.principal_paid + self.equity.principal_paid


def capitalisation_fraction(
    mix: FundingMix,
    cash_percentage: float = 100.0,
    capitalise_interest: bool = False,
) -> float:
    """Share of construction interest added to the loan (0-1)."""
    if capitalise_interest or mix == FundingMix.DEBT:
        return 1.0
    if mix == FundingMix.HYBRID:
        return min(1.0, max(0.0, (100 - (cash_percentage or 0.0)) / 100))
    return 0.0


def accrue_interest_only(principal: float, annual_rate_pct: float, months: int,
                         fraction: float) -> LoanAccrual:
    """Simple interest on a constant balance, split by `fraction`."""
    principal = max(0.0, principal)
    interest = principal * monthly_rate(annual_rate_pct) * max(0, months)
    capitalised = interest * fraction
    return LoanAccrual(
        opening_balance=principal,
        interest=interest,
        capitalised_interest=capitalised,
        cash_interest=interest - capitalised,
        principal_paid=0.0,
        closing_balance=principal + capitalised,
        status=LoanType.IO,
    )


def accrue_amortising(principal: float, annual_rate_pct: float, term_years: float,
                      months: int, fraction: float) -> LoanAccrual:
    """Month-by-month P&I repayments during construction.

    The payment is the standard payment over the full loan term. Principal
    is repaid in cash; only interest can be capitalised. Stops early if the
    loan is repaid.
    """
    principal = max(0.0, principal)
    r = monthly_rate(annual_rate_pct)
    payment = calculate_monthly_payment(principal, annual_rate_pct, int(round(term_years * 12)))

    balance = principal
    interest_total = capitalised_total = cash_total = principal_total = 0.0
    elapsed = 0
    for _ in range(max(0, months)):
        if balance <= 0:
            break
        interest = balance * r
        principal_part = min(max(0.0, payment - interest), balance)
        capitalised = interest * fraction

        balance = balance - principal_part + capitalised
        interest_total += interest
        capitalised_total += capitalised
        cash_total += interest - capitalised
        principal_total += principal_part
        elapsed += 1

    return LoanAccrual(
        opening_balance=principal,
        interest=interest_total,
        capitalised_interest=capitalised_total,
        cash_interest=cash_total,
        principal_paid=principal_total,
        closing_balance=max(0.0, balance),
        months_amortised=elapsed,
        status=LoanType.PI,
    )


def construction_rates(record: PropertyRecord, assumptions: ProjectionAssumptions):
    """(main rate, equity rate) in percent during construction.

    The main loan uses the construction rate, falling back to the loan's own
    rate and then the default rate.
    """
    main_rate = record.construction_interest_rate
    if main_rate is None:
        main_rate = assumptions.resolve_rate(record.main_loan.interest_rate)
    equity_rate = assumptions.resolve_rate(
        record.equity_loan.interest_rate, assumptions.default_equity_rate
    )
    return main_rate, equity_rate


def calculate_construction_accrual(
    record: PropertyRecord,
    assumptions: Optional[ProjectionAssumptions] = None,
    funding: Optional[FundingResult] = None,
) -> ConstructionAccrual:
    """Accrue construction-period interest on the main and equity loans.

    Args:
        record: Property record. Without a construction phase the result
            carries the raw loan amounts through unchanged.
        assumptions: Fallback rates and terms.
        funding: Pre-computed funding analysis (sizes the equity loan).

    Returns:
        ConstructionAccrual with opening balances for year 1.
    """
    assumptions = assumptions or ProjectionAssumptions()
    funding = funding or analyze_funding(record)

    months = record.construction_period if record.has_construction_phase else 0
    fraction = capitalisation_fraction(
        record.holding_cost_funding,
        record.holding_cost_cash_percentage,
        record.capitalise_interest,
    )
    main_rate, equity_rate = construction_rates(record, assumptions)

    main = accrue_interest_only(funding.main_loan_amount, main_rate, months, fraction)

    equity_amount = funding.equity_loan_amount
    if record.construction_equity_repayment == LoanType.IO:
        equity = accrue_interest_only(equity_amount, equity_rate, months, fraction)
    else:
        equity = accrue_amortising(
            equity_amount,
            equity_rate,
            assumptions.resolve_term(record.equity_loan.term_years),
            months,
            fraction,
        )

    if months:
        trace("construction.main_interest", main.interest,
              {"inputs.loan_amount": funding.main_loan_amount, "inputs.construction_period": months},
              period=0)
        trace("construction.equity_interest", equity.interest,
              {"funding.equity_loan_amount": equity_amount, "inputs.construction_period": months},
              period=0)
        trace("construction.capitalised_interest", main.capitalised_interest + equity.capitalised_interest,
              {"construction.main_interest": main.interest, "construction.equity_interest": equity.interest},
              period=0)
        trace("construction.cash_interest", main.cash_interest + equity.cash_interest,
              {"construction.main_interest": main.interest, "construction.equity_interest": equity.interest},
              period=0)
        logger.debug(
            "Construction: %d months, interest $%.0f (capitalised $%.0f)",
            months, main.interest + equity.interest,
            main.capitalised_interest + equity.capitalised_interest,
        )

    return ConstructionAccrual(months=months, capitalisation_fraction=fraction, main=main, equity=equity)


def build_construction_year(
    accrual: ConstructionAccrual,
    record: PropertyRecord,
    assumptions: Optional[ProjectionAssumptions] = None,
) -> YearProjection:
    """The synthetic year-0 row for the construction period.

    Construction interest is deductible, so the taxable result is the
    negative of the interest accrued and the refund offsets the cash paid.
    """
    assumptions = assumptions or ProjectionAssumptions()

    taxable_income = trace("tax.taxable_income", -accrual.total_interest,
                           {"loans.total_interest": accrual.total_interest}, period=0)
    impact = calculate_tax_impact(
        record.investors, record.ownership_allocations, taxable_income, year=0, assumptions=assumptions
    )
    tax_benefit = trace("tax.tax_benefit", impact.tax_benefit,
                        {"tax.taxable_income": taxable_income}, period=0)

    after_tax = trace(
        "cashflow.after_tax_cash_flow",
        -accrual.cash_outlay + abs(tax_benefit),
        {"construction.cash_outlay": accrual.cash_outlay, "tax.tax_benefit": tax_benefit},
        period=0,
    )

    value = record.base_property_value
    debt = accrual.main.closing_balance + accrual.equity.closing_balance

    return YearProjection(
        year=0,
        rental_income=0.0,
        property_value=value,
        main_loan_balance=accrual.main.closing_balance,
        equity_loan_balance=accrual.equity.closing_balance,
        main_interest=accrual.main.interest,
        equity_interest=accrual.equity.interest,
        main_payment=accrual.main.cash_interest + accrual.main.principal_paid,
        equity_payment=accrual.equity.cash_interest + accrual.equity.principal_paid,
        main_loan_status=accrual.main.status,
        equity_loan_status=accrual.equity.status,
        other_expenses=0.0,
        building_depreciation=0.0,
        fixtures_depreciation=0.0,
        total_depreciation=0.0,
        taxable_income=taxable_income,
        tax_benefit=tax_benefit,
        after_tax_cash_flow=after_tax,
        cumulative_cash_flow=after_tax,
        property_equity=value - debt,
        total_return=after_tax,
    )


def estimate_holding_costs(
    record: PropertyRecord,
    assumptions: Optional[ProjectionAssumptions] = None,
    use_progress_draws: bool = False,
) -> float:
    """Estimate the cost of holding the site until completion.

    Interest during construction plus council rates and insurance for the
    build period. With `use_progress_draws`, main-loan interest is charged
    only on construction value drawn so far (land interest is excluded);
    otherwise on the full loan for the whole period.

    Args:
        record: Property record.
        assumptions: Fallback rates.
        use_progress_draws: Charge interest on progress draws.

    Returns:
        Estimated total holding costs. Zero without a construction phase.
    """
    if not record.has_construction_phase:
        return 0.0

    assumptions = assumptions or ProjectionAssumptions()
    months = record.construction_period
    accrual = calculate_construction_accrual(record, assumptions)

    if use_progress_draws:
        stages = record.progress_payments or default_progress_payments(months)
        main_rate, _ = construction_rates(record, assumptions)
        interest = calculate_progress_draw_interest(
            stages, record.construction_value or 0.0, main_rate, months
        ) + accrual.equity.interest
    else:
        interest = accrual.total_interest

    outgoings = ((record.council_rates or 0.0) + (record.insurance or 0.0)) * months / 12
    return interest + outgoings

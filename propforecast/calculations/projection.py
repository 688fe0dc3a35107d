"""Year-by-year projection of cash flow, equity and tax for a property.

The projection has two phases: an optional construction period (a single
synthetic year 0) and the operating years 1..N. Balances produced by the
construction period, including capitalised interest, open year 1.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd

from ..models.assumptions import ProjectionAssumptions
from ..models.property import PropertyRecord
from ..models.results import YearProjection
from .construction import (
    ConstructionAccrual,
    build_construction_year,
    calculate_construction_accrual,
)
from .depreciation import depreciation_for_record
from .funding import FundingResult, analyze_funding
from .loan import LoanAmortizer
from .metrics import InvestmentSummary, calculate_investment_summary
from .tax import calculate_tax_impact, cpi_multiplier
from .trace import TraceContext, trace

logger = logging.getLogger(__name__)

MAX_RECOMMENDED_YEARS = 40


@dataclass
class ProjectionResult:
    """Complete output of a projection run."""

    record: PropertyRecord
    years: List[YearProjection]
    funding: FundingResult
    construction: Optional[ConstructionAccrual]
    summary: InvestmentSummary
    year_from: int
    year_to: int
    assumptions: ProjectionAssumptions = field(default_factory=ProjectionAssumptions)
    trace_context: Optional[TraceContext] = None

    @property
    def construction_year(self) -> Optional[YearProjection]:
        if self.years and self.years[0].is_construction:
            return self.years[0]
        return None

    @property
    def operating_years(self) -> List[YearProjection]:
        return [y for y in self.years if not y.is_construction]

    def get_year(self, year: int) -> Optional[YearProjection]:
        for row in self.years:
            if row.year == year:
                return row
        return None

    def to_dataframe(self) -> pd.DataFrame:
        """Rows as a DataFrame indexed by year."""
        df = pd.DataFrame([row.to_dict() for row in self.years])
        if df.empty:
            return df
        return df.set_index("year")


class ProjectionEngine:
    """Projects one PropertyRecord under a fixed set of assumptions.

    Stateless between runs: every call to `project` recomputes all years.
    """

    def __init__(self, assumptions: Optional[ProjectionAssumptions] = None):
        self.assumptions = assumptions or ProjectionAssumptions()

    def project(
        self,
        record: PropertyRecord,
        year_from: int = 1,
        year_to: int = MAX_RECOMMENDED_YEARS,
        include_construction: bool = True,
    ) -> ProjectionResult:
        """Project `record` and return rows for [year_from, year_to].

        Years before `year_from` are still computed, because balances and
        cumulative cash flow carry forward. Year 0 is included when the
        record has a construction phase, `include_construction` is set and
        the window starts at year 1. With `include_construction` False the
        construction phase is skipped entirely and year 1 opens on the raw
        loan amounts.
        """
        a = self.assumptions
        year_from = max(1, year_from)
        year_to = max(year_from, year_to)
        if year_to > MAX_RECOMMENDED_YEARS:
            logger.debug("Projecting %d years; growth beyond %d years is speculative",
                         year_to, MAX_RECOMMENDED_YEARS)

        funding = analyze_funding(record)

        construction: Optional[ConstructionAccrual] = None
        if include_construction and record.has_construction_phase:
            construction = calculate_construction_accrual(record, a, funding)

        rows: List[YearProjection] = []
        # Every computed year, including those before year_from
        history: List[YearProjection] = []
        cumulative = 0.0

        if construction is not None:
            year_zero = build_construction_year(construction, record, a)
            cumulative = year_zero.cumulative_cash_flow
            history.append(year_zero)
            if year_from == 1:
                rows.append(year_zero)
            main_opening = construction.main.closing_balance
            equity_opening = construction.equity.closing_balance
            equity_elapsed = construction.equity.months_amortised
        else:
            main_opening = funding.main_loan_amount
            equity_opening = funding.equity_loan_amount
            equity_elapsed = 0

        main_loan = LoanAmortizer(
            principal=main_opening,
            annual_rate_pct=a.resolve_rate(record.main_loan.interest_rate),
            term_years=a.resolve_term(record.main_loan.term_years),
            loan_type=record.main_loan.loan_type,
            io_term_years=record.main_loan.io_term_years,
        )
        equity_loan = LoanAmortizer(
            principal=equity_opening,
            annual_rate_pct=a.resolve_rate(record.equity_loan.interest_rate, a.default_equity_rate),
            term_years=a.resolve_term(record.equity_loan.term_years),
            loan_type=record.equity_loan.loan_type,
            io_term_years=record.equity_loan.io_term_years,
            elapsed_months=equity_elapsed,
        )

        rental_growth = a.rental_growth_for(record.rental_growth_rate) / 100
        capital_growth = a.capital_growth_rate / 100
        vacancy = (record.vacancy_rate if record.vacancy_rate is not None else a.default_vacancy_rate) / 100
        management = (
            record.property_management
            if record.property_management is not None
            else a.default_property_management_rate
        ) / 100
        fixed_expenses = (record.council_rates or 0.0) + (record.insurance or 0.0) + (record.repairs or 0.0)
        base_value = record.base_property_value
        weekly_rent = max(0.0, record.weekly_rent or 0.0)

        previous_value = base_value
        for year in range(1, year_to + 1):
            rental_income = trace(
                "income.rental_income",
                weekly_rent * 52 * (1 + rental_growth) ** (year - 1) * (1 - vacancy),
                {"inputs.weekly_rent": weekly_rent, "inputs.vacancy_rate": vacancy},
                period=year,
            )
            property_value = trace(
                "income.property_value",
                base_value * (1 + capital_growth) ** (year - 1),
                {"funding.base_cost": base_value},
                period=year,
            )

            main = main_loan.year(year)
            equity = equity_loan.year(year)
            total_interest = trace(
                "loans.total_interest", main.interest + equity.interest,
                {"loans.main_interest": main.interest, "loans.equity_interest": equity.interest},
                period=year,
            )
            total_payment = trace(
                "loans.total_payment", main.payment + equity.payment,
                {"loans.main_payment": main.payment, "loans.equity_payment": equity.payment},
                period=year,
            )

            indexed_fixed = fixed_expenses * cpi_multiplier(year, a.cpi_rate)
            operating_expenses = trace(
                "expenses.operating_expenses",
                management * rental_income + indexed_fixed,
                {"inputs.property_management": management, "income.rental_income": rental_income,
                 "inputs.fixed_expenses": indexed_fixed},
                period=year,
            )

            depreciation = depreciation_for_record(record, year)
            trace("depreciation.total", depreciation.total,
                  {"depreciation.building": depreciation.building,
                   "depreciation.fixtures": depreciation.fixtures},
                  period=year)

            taxable_income = trace(
                "tax.taxable_income",
                rental_income - total_interest - operating_expenses - depreciation.total,
                {"income.rental_income": rental_income, "loans.total_interest": total_interest,
                 "expenses.operating_expenses": operating_expenses,
                 "depreciation.total": depreciation.total},
                period=year,
            )
            impact = calculate_tax_impact(
                record.investors, record.ownership_allocations, taxable_income, year, a
            )
            tax_benefit = trace("tax.tax_benefit", impact.tax_benefit,
                                {"tax.taxable_income": taxable_income}, period=year)

            after_tax = trace(
                "cashflow.after_tax_cash_flow",
                rental_income - operating_expenses - total_payment + tax_benefit,
                {"income.rental_income": rental_income,
                 "expenses.operating_expenses": operating_expenses,
                 "loans.total_payment": total_payment, "tax.tax_benefit": tax_benefit},
                period=year,
            )
            cumulative += after_tax
            trace("cashflow.cumulative_cash_flow", cumulative,
                  {"cashflow.after_tax_cash_flow": after_tax}, period=year)

            total_debt = main.closing_balance + equity.closing_balance
            property_equity = trace(
                "returns.property_equity", property_value - total_debt,
                {"income.property_value": property_value,
                 "loans.main_balance": main.closing_balance,
                 "loans.equity_balance": equity.closing_balance},
                period=year,
            )
            total_return = trace(
                "returns.total_return", after_tax + (property_value - previous_value),
                {"cashflow.after_tax_cash_flow": after_tax,
                 "income.property_value": property_value - previous_value},
                period=year,
            )
            previous_value = property_value

            row = YearProjection(
                year=year,
                rental_income=rental_income,
                property_value=property_value,
                main_loan_balance=main.closing_balance,
                equity_loan_balance=equity.closing_balance,
                main_interest=main.interest,
                equity_interest=equity.interest,
                main_payment=main.payment,
                equity_payment=equity.payment,
                main_loan_status=main.status,
                equity_loan_status=equity.status,
                other_expenses=operating_expenses,
                building_depreciation=depreciation.building,
                fixtures_depreciation=depreciation.fixtures,
                total_depreciation=depreciation.total,
                taxable_income=taxable_income,
                tax_benefit=tax_benefit,
                after_tax_cash_flow=after_tax,
                cumulative_cash_flow=cumulative,
                property_equity=property_equity,
                total_return=total_return,
            )
            history.append(row)
            if year >= year_from:
                rows.append(row)

        summary = calculate_investment_summary(history, record.investors, year_from, year_to, a)

        return ProjectionResult(
            record=record,
            years=rows,
            funding=funding,
            construction=construction,
            summary=summary,
            year_from=year_from,
            year_to=year_to,
            assumptions=a,
        )


def run_projection(
    record: PropertyRecord,
    year_from: int = 1,
    year_to: int = MAX_RECOMMENDED_YEARS,
    assumptions: Optional[ProjectionAssumptions] = None,
    include_construction: bool = True,
    trace_enabled: bool = False,
) -> ProjectionResult:
    """Run a full projection for a property record.

    This is the engine's entry point. The same record and assumptions
    always produce the same rows.

    Args:
        record: Property, financing and investor inputs.
        year_from: First operating year to report (1-based).
        year_to: Last operating year to report (inclusive).
        assumptions: Growth, fallback and tax settings.
        include_construction: Model the construction phase as year 0.
        trace_enabled: Capture an audit trace of every formula.

    Returns:
        ProjectionResult with rows, funding, construction accrual and
        investment summary. `trace_context` is set when tracing.

    Example:
        >>> result = run_projection(default_property_record(), year_to=30)
        >>> result.summary.equity_at_end > 0
        True
    """
    engine = ProjectionEngine(assumptions)
    if not trace_enabled:
        return engine.project(record, year_from, year_to, include_construction)

    with TraceContext() as ctx:
        result = engine.project(record, year_from, year_to, include_construction)
    result.trace_context = ctx
    return result

"""Investment summary metrics derived from a projection."""

from dataclasses import dataclass
from typing import Optional, Sequence

from ..models.assumptions import ProjectionAssumptions
from ..models.lookups import WEEKS_PER_YEAR
from ..models.property import Investor
from ..models.results import YearProjection
from .tax import highest_marginal_rate
from .trace import trace


@dataclass
class InvestmentSummary:
    """Headline figures for a projection window."""

    year_from: int
    year_to: int
    weekly_cash_flow: float  # After-tax, at year_from
    cumulative_tax_savings: float  # Refunds through year_to
    equity_at_end: float  # Property equity at year_to
    cumulative_contribution: float  # Net cash put in through year_to
    roi: float  # Percent
    marginal_rate: float  # Highest investor marginal rate at year_from
    break_even_year: Optional[int]  # First operating year with positive cash flow
    total_cash_invested: float  # Deepest point of cumulative cash flow
    average_annual_cash_flow: float
    property_value_at_end: float
    debt_at_end: float


def _row_for_year(rows: Sequence[YearProjection], year: int) -> Optional[YearProjection]:
    for row in rows:
        if row.year == year:
            return row
    return None


def calculate_investment_summary(
    rows: Sequence[YearProjection],
    investors: Sequence[Investor],
    year_from: int,
    year_to: int,
    assumptions: Optional[ProjectionAssumptions] = None,
) -> InvestmentSummary:
    """Summarise projection rows for the window [year_from, year_to].

    Cumulative figures (tax savings, net contribution, ROI, peak cash
    invested, break-even) run from the start of the projection through
    `year_to`, so they do not depend on `year_from`. ROI is equity at
    `year_to` over the net cash contributed (the magnitude of negative
    cumulative cash flow). With no net contribution ROI is reported as 0.
    Weekly and average cash flow describe the window only.

    Args:
        rows: Every projected year from the start, including year 0 when
            there is a construction phase.
        investors: Investors, for the marginal rate.
        year_from: First year of the window (1-based).
        year_to: Last year of the window.
        assumptions: CPI rate and tax tables.

    Returns:
        InvestmentSummary.
    """
    assumptions = assumptions or ProjectionAssumptions()
    history = [r for r in rows if r.year <= year_to]
    window = [r for r in history if r.year >= max(1, year_from)]

    start = _row_for_year(rows, year_from)
    end = _row_for_year(rows, year_to) or (history[-1] if history else None)

    weekly_cash_flow = start.after_tax_cash_flow / WEEKS_PER_YEAR if start else 0.0
    tax_savings = sum(max(0.0, r.tax_benefit) for r in history)

    net_cash = end.cumulative_cash_flow if end else 0.0
    contribution = abs(min(0.0, net_cash))

    equity_at_end = end.property_equity if end else 0.0
    roi = equity_at_end / contribution * 100 if contribution > 0 else 0.0
    trace(
        "returns.roi",
        roi,
        {"returns.property_equity": equity_at_end, "cashflow.cumulative_cash_flow": net_cash},
        period=year_to,
    )

    break_even = next(
        (r.year for r in history if r.year >= 1 and r.after_tax_cash_flow > 0), None
    )
    lowest_cumulative = min((r.cumulative_cash_flow for r in history), default=0.0)

    return InvestmentSummary(
        year_from=year_from,
        year_to=year_to,
        weekly_cash_flow=weekly_cash_flow,
        cumulative_tax_savings=tax_savings,
        equity_at_end=equity_at_end,
        cumulative_contribution=contribution,
        roi=roi,
        marginal_rate=highest_marginal_rate(investors, year_from, assumptions),
        break_even_year=break_even,
        total_cash_invested=abs(min(0.0, lowest_cumulative)),
        average_annual_cash_flow=(
            sum(r.after_tax_cash_flow for r in window) / len(window) if window else 0.0
        ),
        property_value_at_end=end.property_value if end else 0.0,
        debt_at_end=end.total_debt if end else 0.0,
    )


def format_summary_table(summary: InvestmentSummary) -> str:
    """Format an investment summary as a text table."""
    break_even = str(summary.break_even_year) if summary.break_even_year else "Never"
    lines = [
        f"Investment Summary (years {summary.year_from}-{summary.year_to})",
        "=" * 50,
        f"{'Weekly cash flow (after tax)':<32} ${summary.weekly_cash_flow:>14,.0f}",
        f"{'Cumulative tax savings':<32} ${summary.cumulative_tax_savings:>14,.0f}",
        f"{'Property value':<32} ${summary.property_value_at_end:>14,.0f}",
        f"{'Debt':<32} ${summary.debt_at_end:>14,.0f}",
        f"{'Equity':<32} ${summary.equity_at_end:>14,.0f}",
        f"{'Net cash contributed':<32} ${summary.cumulative_contribution:>14,.0f}",
        f"{'Peak cash invested':<32} ${summary.total_cash_invested:>14,.0f}",
        f"{'ROI':<32} {summary.roi:>14.1f}%",
        f"{'Highest marginal rate':<32} {summary.marginal_rate:>14.1%}",
        f"{'Break-even year':<32} {break_even:>15}",
    ]
    return "\n".join(lines)

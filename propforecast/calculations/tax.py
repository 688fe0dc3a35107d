"""Personal income tax impact of the property, per investor.

Each investor's tax is computed twice: on their own income alone, and with
their share of the property's taxable result added. The difference is the
tax delta; negative deltas are savings (negative gearing).
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..models.assumptions import ProjectionAssumptions
from ..models.lookups import (
    TaxBracket,
    RESIDENT_TAX_BRACKETS,
    MEDICARE_LEVY_RATE,
    MEDICARE_LEVY_THRESHOLD,
)
from ..models.property import Investor, OwnershipAllocation

logger = logging.getLogger(__name__)


@dataclass
class InvestorTaxResult:
    """Tax position of one investor for one year."""

    investor_id: str
    ownership_percentage: float
    base_income: float  # CPI-adjusted
    property_income_share: float
    tax_without_property: float
    tax_with_property: float
    marginal_rate: float

    @property
    def tax_delta(self) -> float:
        """Negative = tax saving."""
        return self.tax_with_property - self.tax_without_property


@dataclass
class TaxImpact:
    """Aggregated tax effect of the property for one year."""

    year: int
    property_taxable_income: float
    investors: List[InvestorTaxResult] = field(default_factory=list)

    @property
    def total_tax_delta(self) -> float:
        return sum(r.tax_delta for r in self.investors)

    @property
    def tax_benefit(self) -> float:
        """Cash-flow view of the delta: positive = refund."""
        return -self.total_tax_delta


def calculate_income_tax(
    income: float,
    brackets: Sequence[TaxBracket] = RESIDENT_TAX_BRACKETS,
) -> float:
    """Progressive income tax on `income` (before levies).

    Args:
        income: Taxable income. Negative income attracts no tax.
        brackets: Brackets ordered by floor.

    Returns:
        Tax payable.

    Example:
        >>> calculate_income_tax(120_000)
        29467.0
    """
    income = max(0.0, income or 0.0)
    tax = 0.0
    for i, bracket in enumerate(brackets):
        ceiling = brackets[i + 1].floor if i + 1 < len(brackets) else float("inf")
        if income <= bracket.floor:
            break
        tax += (min(income, ceiling) - bracket.floor) * bracket.rate
    return tax


def calculate_medicare_levy(
    income: float,
    has_medicare_levy: bool,
    rate: float = MEDICARE_LEVY_RATE,
    threshold: float = MEDICARE_LEVY_THRESHOLD,
) -> float:
    """Flat Medicare levy on the whole income above the threshold."""
    if not has_medicare_levy or income <= threshold:
        return 0.0
    return income * rate


def calculate_total_tax(
    income: float,
    has_medicare_levy: bool,
    assumptions: Optional[ProjectionAssumptions] = None,
) -> float:
    """Income tax plus Medicare levy."""
    assumptions = assumptions or ProjectionAssumptions()
    return calculate_income_tax(income, assumptions.tax_brackets) + calculate_medicare_levy(
        income,
        has_medicare_levy,
        assumptions.medicare_levy_rate,
        assumptions.medicare_levy_threshold,
    )


def marginal_rate(
    income: float,
    brackets: Sequence[TaxBracket] = RESIDENT_TAX_BRACKETS,
) -> float:
    """Rate of the highest bracket that `income` reaches. Display only."""
    rate = 0.0
    for bracket in brackets:
        if income > bracket.floor:
            rate = bracket.rate
    return rate


def cpi_multiplier(year: int, cpi_rate_pct: float) -> float:
    """Income indexation factor for a projection year.

    Year 1 (and the construction year) uses today's income.
    """
    if year < 1:
        return 1.0
    return (1 + cpi_rate_pct / 100) ** (year - 1)


def calculate_investor_tax(
    investor: Investor,
    ownership_percentage: float,
    property_taxable_income: float,
    year: int,
    assumptions: Optional[ProjectionAssumptions] = None,
) -> InvestorTaxResult:
    """Tax with and without the property for a single investor."""
    assumptions = assumptions or ProjectionAssumptions()

    base_income = investor.base_income * cpi_multiplier(year, assumptions.cpi_rate)
    share = property_taxable_income * ownership_percentage / 100

    return InvestorTaxResult(
        investor_id=investor.id,
        ownership_percentage=ownership_percentage,
        base_income=base_income,
        property_income_share=share,
        tax_without_property=calculate_total_tax(base_income, investor.has_medicare_levy, assumptions),
        tax_with_property=calculate_total_tax(base_income + share, investor.has_medicare_levy, assumptions),
        marginal_rate=marginal_rate(base_income, assumptions.tax_brackets),
    )


def calculate_tax_impact(
    investors: Sequence[Investor],
    allocations: Sequence[OwnershipAllocation],
    property_taxable_income: float,
    year: int = 1,
    assumptions: Optional[ProjectionAssumptions] = None,
) -> TaxImpact:
    """Aggregate tax delta across all investors for one year.

    Investors with no ownership, and allocations that name an unknown
    investor, contribute nothing.

    Args:
        investors: Investors in the record.
        allocations: Ownership split between investors.
        property_taxable_income: Property's taxable result for the year
            (negative = loss).
        year: Projection year, for income indexation.
        assumptions: Tax tables and CPI rate.

    Returns:
        TaxImpact with per-investor results. `total_tax_delta` is negative
        when the property reduces tax.
    """
    assumptions = assumptions or ProjectionAssumptions()
    by_id = {inv.id: inv for inv in investors}

    impact = TaxImpact(year=year, property_taxable_income=property_taxable_income)
    for allocation in allocations:
        percentage = allocation.percentage or 0.0
        if percentage <= 0:
            continue
        investor = by_id.get(allocation.investor_id)
        if investor is None:
            logger.debug("No investor with id %r; allocation ignored", allocation.investor_id)
            continue
        impact.investors.append(
            calculate_investor_tax(investor, percentage, property_taxable_income, year, assumptions)
        )

    return impact


def highest_marginal_rate(
    investors: Sequence[Investor],
    year: int = 1,
    assumptions: Optional[ProjectionAssumptions] = None,
) -> float:
    """Highest marginal rate across investors at indexed income."""
    assumptions = assumptions or ProjectionAssumptions()
    factor = cpi_multiplier(year, assumptions.cpi_rate)
    rates = [marginal_rate(inv.base_income * factor, assumptions.tax_brackets) for inv in investors]
    return max(rates, default=0.0)

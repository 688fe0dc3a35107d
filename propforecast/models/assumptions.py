"""Projection assumptions: growth rates, fallbacks and tax settings."""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .lookups import (
    TaxBracket,
    RESIDENT_TAX_BRACKETS,
    MEDICARE_LEVY_RATE,
    MEDICARE_LEVY_THRESHOLD,
    DEFAULT_CAPITAL_GROWTH,
    DEFAULT_RENTAL_GROWTH,
    DEFAULT_CPI_RATE,
    DEFAULT_INTEREST_RATE,
    DEFAULT_EQUITY_RATE,
    DEFAULT_LOAN_TERM_YEARS,
    DEFAULT_PROPERTY_MANAGEMENT_RATE,
    DEFAULT_VACANCY_RATE,
)

logger = logging.getLogger(__name__)


@dataclass
class ProjectionAssumptions:
    """Market and tax assumptions applied to every projected year.

    All rates are in percent (7.0 = 7%), matching the PropertyRecord fields.
    """

    capital_growth_rate: float = DEFAULT_CAPITAL_GROWTH
    rental_growth_rate: float = DEFAULT_RENTAL_GROWTH
    cpi_rate: float = DEFAULT_CPI_RATE

    # When True, rent grows at PropertyRecord.rental_growth_rate instead
    use_record_rental_growth: bool = False

    # Fallbacks for missing record values
    default_interest_rate: float = DEFAULT_INTEREST_RATE
    default_equity_rate: float = DEFAULT_EQUITY_RATE
    default_loan_term_years: int = DEFAULT_LOAN_TERM_YEARS
    default_property_management_rate: float = DEFAULT_PROPERTY_MANAGEMENT_RATE
    default_vacancy_rate: float = DEFAULT_VACANCY_RATE

    # Tax
    tax_brackets: Tuple[TaxBracket, ...] = RESIDENT_TAX_BRACKETS
    medicare_levy_rate: float = MEDICARE_LEVY_RATE
    medicare_levy_threshold: float = MEDICARE_LEVY_THRESHOLD

    def resolve_rate(self, rate: Optional[float], default: Optional[float] = None) -> float:
        """Return `rate`, or the fallback when it is missing."""
        if rate is None:
            fallback = self.default_interest_rate if default is None else default
            logger.debug("Interest rate missing, using %.2f%%", fallback)
            return fallback
        return rate

    def resolve_term(self, term_years: Optional[int]) -> int:
        """Return the loan term, or the default term when it is missing or zero."""
        if not term_years:
            logger.debug("Loan term missing, using %d years", self.default_loan_term_years)
            return self.default_loan_term_years
        return term_years

    def rental_growth_for(self, record_rate: Optional[float]) -> float:
        """Rental growth rate in percent for a record."""
        if self.use_record_rental_growth and record_rate is not None:
            return record_rate
        return self.rental_growth_rate

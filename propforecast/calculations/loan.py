"""Loan amortisation for interest-only and principal-and-interest loans."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy_financial as npf

from ..models.property import LoanType

logger = logging.getLogger(__name__)

# Balances below this are treated as repaid (float residue)
BALANCE_EPSILON = 1e-6


class PaymentFrequency(Enum):
    """Repayment frequency for quoted repayments."""

    WEEKLY = 52
    MONTHLY = 12

    @property
    def periods_per_year(self) -> int:
        return self.value


@dataclass
class LoanYear:
    """One year of a loan schedule."""

    year: int
    status: LoanType
    payment: float  # Total paid during the year
    interest: float  # Interest charged during the year
    principal_paid: float
    opening_balance: float
    closing_balance: float


def monthly_rate(annual_rate_pct: float) -> float:
    """Convert an annual percentage rate to a monthly decimal rate."""
    return (annual_rate_pct or 0.0) / 100 / 12


def calculate_monthly_payment(principal: float, annual_rate_pct: float, months: int) -> float:
    """Standard amortising payment for a loan.

    Args:
        principal: Balance to amortise.
        annual_rate_pct: Annual interest rate in percent.
        months: Number of monthly payments remaining.

    Returns:
        Monthly P&I payment, or 0 when there is nothing to amortise.
    """
    if principal <= 0 or months <= 0:
        return 0.0

    r = monthly_rate(annual_rate_pct)
    if r == 0:
        return principal / months

    return float(-npf.pmt(rate=r, nper=months, pv=principal, fv=0))


def calculate_loan_payment(
    principal: float,
    annual_rate_pct: float,
    term_years: float,
    frequency: PaymentFrequency = PaymentFrequency.WEEKLY,
) -> float:
    """Quoted P&I repayment at a given frequency."""
    periods = int(round(term_years * frequency.periods_per_year))
    if principal <= 0 or periods <= 0:
        return 0.0

    period_rate = (annual_rate_pct or 0.0) / 100 / frequency.periods_per_year
    if period_rate == 0:
        return principal / periods

    return float(-npf.pmt(rate=period_rate, nper=periods, pv=principal, fv=0))


def calculate_interest_only_payment(
    principal: float,
    annual_rate_pct: float,
    frequency: PaymentFrequency = PaymentFrequency.WEEKLY,
) -> float:
    """Quoted interest-only repayment at a given frequency."""
    if principal <= 0:
        return 0.0
    return principal * (annual_rate_pct or 0.0) / 100 / frequency.periods_per_year


def calculate_current_loan_payment(
    principal: float,
    annual_rate_pct: float,
    term_years: float,
    io_term_years: float,
    current_year: int,
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY,
) -> float:
    """Repayment due in `current_year`, switching from IO to P&I.

    During the IO term the repayment is interest-only. Afterwards the
    principal is amortised over whatever is left of the term.
    """
    if current_year <= io_term_years:
        return calculate_interest_only_payment(principal, annual_rate_pct, frequency)
    return calculate_loan_payment(principal, annual_rate_pct, term_years - io_term_years, frequency)


class LoanAmortizer:
    """Month-by-month amortisation of a single loan, reported by year.

    The loan is interest-only for `io_term_years` when `loan_type` is IO and
    principal-and-interest after that. The P&I payment is fixed once, at the
    point the P&I phase starts, over the months remaining at that moment.
    When the term is exhausted the loan is treated as repaid.

    Example:
        >>> loan = LoanAmortizer(800_000, 6.0, 30)
        >>> round(loan.year(1).payment)
        57557
    """

    def __init__(
        self,
        principal: float,
        annual_rate_pct: float,
        term_years: float,
        loan_type: LoanType = LoanType.PI,
        io_term_years: float = 0,
        elapsed_months: int = 0,
    ):
        """Initialize the amortizer.

        Args:
            principal: Opening balance.
            annual_rate_pct: Annual interest rate in percent.
            term_years: Full loan term.
            loan_type: IO loans start with an interest-only window.
            io_term_years: Length of the IO window. A window at least as long
                as the term makes the loan interest-only for life.
            elapsed_months: Months of the term already used (e.g. by
                amortising during construction).
        """
        self.principal = max(0.0, principal or 0.0)
        self.annual_rate_pct = annual_rate_pct or 0.0
        self.loan_type = loan_type
        self.term_months = max(0, int(round((term_years or 0) * 12)) - max(0, elapsed_months))

        if loan_type == LoanType.IO:
            io_months = int(round(max(0, io_term_years or 0) * 12))
            self.io_months = min(io_months, self.term_months)
        else:
            self.io_months = 0

        self._balance = self.principal
        self._month = 0
        self._payment: Optional[float] = None
        self._years: List[LoanYear] = []

    @property
    def monthly_rate(self) -> float:
        return monthly_rate(self.annual_rate_pct)

    @property
    def monthly_payment(self) -> Optional[float]:
        """Fixed P&I payment, once the P&I phase has started."""
        return self._payment

    def schedule(self, years: int) -> List[LoanYear]:
        """Return years 1..`years` of the schedule."""
        while len(self._years) < years:
            self._years.append(self._advance_year())
        return self._years[:max(0, years)]

    def year(self, n: int) -> LoanYear:
        """Return the schedule entry for year `n` (1-based)."""
        if n < 1:
            return LoanYear(
                year=n,
                status=self._status_for_month(0),
                payment=0.0,
                interest=0.0,
                principal_paid=0.0,
                opening_balance=self.principal,
                closing_balance=self.principal,
            )
        return self.schedule(n)[n - 1]

    def _status_for_month(self, month: int) -> LoanType:
        return LoanType.IO if month < self.io_months else LoanType.PI

    def _advance_year(self) -> LoanYear:
        year = len(self._years) + 1
        opening = self._balance
        status = self._status_for_month(self._month)
        r = self.monthly_rate

        interest = 0.0
        payment = 0.0
        principal_paid = 0.0

        for _ in range(12):
            if self._balance <= 0:
                break

            remaining = self.term_months - self._month
            if remaining <= 0:
                logger.debug(
                    "Loan term exhausted in year %d with $%.2f outstanding; treating as repaid",
                    year, self._balance,
                )
                self._balance = 0.0
                break

            month_interest = self._balance * r
            interest += month_interest

            if self._month < self.io_months:
                payment += month_interest
            else:
                if self._payment is None:
                    self._payment = calculate_monthly_payment(
                        self._balance, self.annual_rate_pct, remaining
                    )
                if remaining == 1:
                    # Final instalment clears any rounding residue
                    month_principal = self._balance
                else:
                    month_principal = min(max(0.0, self._payment - month_interest), self._balance)
                payment += month_interest + month_principal
                principal_paid += month_principal
                self._balance -= month_principal

            self._month += 1

        if self._balance < BALANCE_EPSILON:
            self._balance = 0.0

        return LoanYear(
            year=year,
            status=status,
            payment=payment,
            interest=interest,
            principal_paid=principal_paid,
            opening_balance=opening,
            closing_balance=self._balance,
        )

"""Output rows of a projection run."""

from dataclasses import dataclass

from .property import LoanType


@dataclass(frozen=True)
class YearProjection:
    """One row of the projection. Year 0 is the construction period."""

    year: int
    rental_income: float
    property_value: float

    main_loan_balance: float
    equity_loan_balance: float
    main_interest: float
    equity_interest: float
    main_payment: float
    equity_payment: float
    main_loan_status: LoanType
    equity_loan_status: LoanType

    other_expenses: float
    building_depreciation: float
    fixtures_depreciation: float
    total_depreciation: float

    taxable_income: float
    tax_benefit: float  # Positive = refund, added to cash flow
    after_tax_cash_flow: float
    cumulative_cash_flow: float
    property_equity: float
    total_return: float

    @property
    def is_construction(self) -> bool:
        return self.year == 0

    @property
    def total_interest(self) -> float:
        return self.main_interest + self.equity_interest

    @property
    def total_payment(self) -> float:
        return self.main_payment + self.equity_payment

    @property
    def total_debt(self) -> float:
        return self.main_loan_balance + self.equity_loan_balance

    @property
    def tax_delta(self) -> float:
        """Change in investors' tax; negative = saving."""
        return -self.tax_benefit

    def to_dict(self) -> dict:
        """Flat dict with enum values and derived totals."""
        return {
            "year": self.year,
            "rental_income": self.rental_income,
            "property_value": self.property_value,
            "main_loan_balance": self.main_loan_balance,
            "equity_loan_balance": self.equity_loan_balance,
            "total_debt": self.total_debt,
            "main_interest": self.main_interest,
            "equity_interest": self.equity_interest,
            "total_interest": self.total_interest,
            "main_payment": self.main_payment,
            "equity_payment": self.equity_payment,
            "total_payment": self.total_payment,
            "main_loan_status": self.main_loan_status.value,
            "equity_loan_status": self.equity_loan_status.value,
            "other_expenses": self.other_expenses,
            "building_depreciation": self.building_depreciation,
            "fixtures_depreciation": self.fixtures_depreciation,
            "total_depreciation": self.total_depreciation,
            "taxable_income": self.taxable_income,
            "tax_benefit": self.tax_benefit,
            "after_tax_cash_flow": self.after_tax_cash_flow,
            "cumulative_cash_flow": self.cumulative_cash_flow,
            "property_equity": self.property_equity,
            "total_return": self.total_return,
        }

"""Calculation modules for the property projection engine."""

from .loan import (
    LoanAmortizer,
    LoanYear,
    PaymentFrequency,
    calculate_monthly_payment,
    calculate_loan_payment,
    calculate_interest_only_payment,
    calculate_current_loan_payment,
)
from .depreciation import DepreciationResult, calculate_depreciation, depreciation_schedule
from .tax import (
    InvestorTaxResult,
    TaxImpact,
    calculate_income_tax,
    calculate_medicare_levy,
    calculate_tax_impact,
    marginal_rate,
    cpi_multiplier,
)
from .funding import (
    FundingResult,
    analyze_funding,
    calculate_total_project_cost,
    calculate_available_equity,
    default_progress_payments,
)
from .construction import (
    ConstructionAccrual,
    LoanAccrual,
    capitalisation_fraction,
    calculate_construction_accrual,
    build_construction_year,
    estimate_holding_costs,
)
from .stamp_duty import calculate_stamp_duty, stamp_duty_for_record
from .metrics import InvestmentSummary, calculate_investment_summary, format_summary_table
from .projection import ProjectionEngine, ProjectionResult, run_projection
from .trace import TraceContext, TracedValue, trace
from .formula_registry import FormulaRegistry, FormulaDefinition, FormulaCategory

__all__ = [
    "LoanAmortizer",
    "LoanYear",
    "PaymentFrequency",
    "calculate_monthly_payment",
    "calculate_loan_payment",
    "calculate_interest_only_payment",
    "calculate_current_loan_payment",
    "DepreciationResult",
    "calculate_depreciation",
    "depreciation_schedule",
    "InvestorTaxResult",
    "TaxImpact",
    "calculate_income_tax",
    "calculate_medicare_levy",
    "calculate_tax_impact",
    "marginal_rate",
    "cpi_multiplier",
    "FundingResult",
    "analyze_funding",
    "calculate_total_project_cost",
    "calculate_available_equity",
    "default_progress_payments",
    "ConstructionAccrual",
    "LoanAccrual",
    "capitalisation_fraction",
    "calculate_construction_accrual",
    "build_construction_year",
    "estimate_holding_costs",
    "calculate_stamp_duty",
    "stamp_duty_for_record",
    "InvestmentSummary",
    "calculate_investment_summary",
    "format_summary_table",
    "ProjectionEngine",
    "ProjectionResult",
    "run_projection",
    "TraceContext",
    "TracedValue",
    "trace",
    "FormulaRegistry",
    "FormulaDefinition",
    "FormulaCategory",
]

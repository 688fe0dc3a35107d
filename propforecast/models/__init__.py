"""Data models for the property projection engine."""

from .lookups import (
    Jurisdiction,
    TaxBracket,
    DutyBracket,
    RESIDENT_TAX_BRACKETS,
    STAGE_THREE_TAX_BRACKETS,
    STAMP_DUTY_SCALES,
)
from .property import (
    LoanType,
    FundingMix,
    DepreciationMethod,
    Investor,
    OwnershipAllocation,
    ProgressPayment,
    LoanTerms,
    PropertyRecord,
    default_property_record,
)
from .assumptions import ProjectionAssumptions
from .results import YearProjection

__all__ = [
    "Jurisdiction",
    "TaxBracket",
    "DutyBracket",
    "RESIDENT_TAX_BRACKETS",
    "STAGE_THREE_TAX_BRACKETS",
    "STAMP_DUTY_SCALES",
    "LoanType",
    "FundingMix",
    "DepreciationMethod",
    "Investor",
    "OwnershipAllocation",
    "ProgressPayment",
    "LoanTerms",
    "PropertyRecord",
    "default_property_record",
    "ProjectionAssumptions",
    "YearProjection",
]

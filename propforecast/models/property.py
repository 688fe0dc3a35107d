"""Property record: the complete input for a projection run."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .lookups import (
    Jurisdiction,
    OWNERSHIP_TOLERANCE,
    VALUE_TOLERANCE,
    FUNDING_SHORTFALL_WARNING_THRESHOLD,
)


class LoanType(Enum):
    """Repayment regime for a loan."""

    IO = "io"  # Interest-only
    PI = "pi"  # Principal and interest


class FundingMix(Enum):
    """How interest during construction is funded."""

    CASH = "cash"  # Paid out of pocket
    DEBT = "debt"  # Capitalised onto the loan
    HYBRID = "hybrid"  # Split by cash percentage


class DepreciationMethod(Enum):
    """Plant-and-equipment depreciation method."""

    PRIME_COST = "prime-cost"
    DIMINISHING_VALUE = "diminishing-value"


@dataclass
class Investor:
    """An individual who owns a share of the property."""

    id: str
    name: str = ""
    annual_income: float = 0.0
    other_income: float = 0.0
    has_medicare_levy: bool = True

    @property
    def base_income(self) -> float:
        """Taxable income before the property."""
        return (self.annual_income or 0.0) + (self.other_income or 0.0)


@dataclass
class OwnershipAllocation:
    """Share of the property held by one investor."""

    investor_id: str
    percentage: float  # 0-100


@dataclass
class ProgressPayment:
    """A construction progress payment stage."""

    percentage: float  # Of construction value
    month: int  # Month of the build the stage is drawn
    description: str = ""


@dataclass
class LoanTerms:
    """Loan settings shared by the main and equity loans.

    For the equity loan, `amount` is not an input: the drawn amount is sized
    by the funding analysis.
    """

    amount: float = 0.0
    interest_rate: Optional[float] = None  # Annual %, None = default rate
    term_years: Optional[int] = None  # None = default term
    loan_type: LoanType = LoanType.PI
    io_term_years: int = 0

    @property
    def is_interest_only(self) -> bool:
        return self.loan_type == LoanType.IO


@dataclass
class PropertyRecord:
    """Complete input parameters for an investment property projection.

    Rates are annual percentages (6.5 = 6.5%). The record is never mutated
    by the engine; derive variants with dataclasses.replace().
    """

    # Investors
    investors: List[Investor] = field(default_factory=list)
    ownership_allocations: List[OwnershipAllocation] = field(default_factory=list)

    # Property basics
    purchase_price: float = 0.0
    weekly_rent: float = 0.0
    rental_growth_rate: Optional[float] = None
    vacancy_rate: Optional[float] = None
    property_state: str = Jurisdiction.VIC.value

    # Construction
    is_construction_project: bool = False
    construction_year: int = 2020
    construction_period: int = 0  # months
    construction_interest_rate: Optional[float] = None
    land_value: float = 0.0
    construction_value: float = 0.0
    building_value: float = 0.0
    plant_equipment_value: float = 0.0
    progress_payments: List[ProgressPayment] = field(default_factory=list)

    # Financing
    main_loan: LoanTerms = field(default_factory=LoanTerms)
    use_equity_funding: bool = False
    equity_loan: LoanTerms = field(default_factory=LoanTerms)
    # Equity loan repayments while the property is being built
    construction_equity_repayment: LoanType = LoanType.IO
    primary_property_value: float = 0.0
    existing_debt: float = 0.0
    max_lvr: float = 80.0
    deposit_amount: float = 0.0

    # Interest during construction
    holding_cost_funding: FundingMix = FundingMix.CASH
    holding_cost_cash_percentage: float = 100.0
    capitalise_interest: bool = False

    # Purchase and construction costs
    stamp_duty: float = 0.0
    legal_fees: float = 0.0
    inspection_fees: float = 0.0
    council_fees: float = 0.0
    architect_fees: float = 0.0
    site_costs: float = 0.0
    total_holding_costs: float = 0.0

    # Annual expenses
    property_management: Optional[float] = None  # % of rental income
    council_rates: float = 0.0
    insurance: float = 0.0
    repairs: float = 0.0

    # Depreciation
    depreciation_method: DepreciationMethod = DepreciationMethod.PRIME_COST
    is_new_property: bool = True

    @property
    def loan_amount(self) -> float:
        return self.main_loan.amount or 0.0

    @property
    def base_property_value(self) -> float:
        """Value the capital growth compounds from."""
        if self.is_construction_project:
            return (self.land_value or 0.0) + (self.construction_value or 0.0)
        return self.purchase_price or 0.0

    @property
    def has_construction_phase(self) -> bool:
        return self.is_construction_project and (self.construction_period or 0) > 0

    def get_investor(self, investor_id: str) -> Optional[Investor]:
        """Find an investor by id."""
        for investor in self.investors:
            if investor.id == investor_id:
                return investor
        return None

    def total_ownership(self) -> float:
        """Sum of ownership percentages."""
        return sum(a.percentage or 0.0 for a in self.ownership_allocations)

    def validate(self) -> list[str]:
        """Validate inputs and return list of errors.

        The engine itself accepts any record; callers surface these.

        Returns:
            List of validation error messages. Empty if valid.
        """
        errors = []

        total = self.total_ownership()
        if abs(total - 100) > OWNERSHIP_TOLERANCE:
            errors.append(f"ownership percentages must sum to 100%, got {total:g}%")

        valid_states = {j.value for j in Jurisdiction}
        if self.property_state not in valid_states:
            errors.append(
                f"property_state must be one of {', '.join(sorted(valid_states))}, "
                f"got {self.property_state!r}"
            )

        if (self.purchase_price or 0) < 0:
            errors.append(f"purchase_price must be >= 0, got ${self.purchase_price:,.0f}")
        if (self.weekly_rent or 0) < 0:
            errors.append(f"weekly_rent must be >= 0, got ${self.weekly_rent:,.0f}")

        return errors

    def warnings(self) -> list[str]:
        """Advisory checks that do not block a projection.

        Returns:
            List of warning messages. Empty if nothing looks unusual.
        """
        from ..calculations.funding import analyze_funding

        warnings = []

        funding = analyze_funding(self)
        if (
            funding.total_project_cost > 0
            and funding.funding_shortfall
            > funding.total_project_cost * FUNDING_SHORTFALL_WARNING_THRESHOLD
        ):
            warnings.append(
                f"funding shortfall of ${funding.funding_shortfall:,.0f} exceeds "
                f"{FUNDING_SHORTFALL_WARNING_THRESHOLD:.0%} of total project cost"
            )

        if self.is_construction_project:
            land_plus_build = (self.land_value or 0) + (self.construction_value or 0)
            if abs(land_plus_build - (self.purchase_price or 0)) > VALUE_TOLERANCE:
                warnings.append(
                    f"land value + construction value (${land_plus_build:,.0f}) "
                    f"should equal purchase price (${self.purchase_price:,.0f})"
                )
            building_total = (self.building_value or 0) + (self.plant_equipment_value or 0)
            if abs(building_total - (self.construction_value or 0)) > VALUE_TOLERANCE:
                warnings.append(
                    f"building value + plant & equipment (${building_total:,.0f}) "
                    f"should equal construction value (${self.construction_value:,.0f})"
                )

        if self.use_equity_funding:
            main_rate = self.main_loan.interest_rate
            equity_rate = self.equity_loan.interest_rate
            if main_rate is not None and equity_rate is not None and equity_rate < main_rate:
                warnings.append(
                    f"equity loan rate ({equity_rate}%) is usually higher than "
                    f"the main loan rate ({main_rate}%)"
                )

        growth = self.rental_growth_rate
        if growth is not None and not 0 <= growth <= 10:
            warnings.append(f"rental growth rate of {growth}% is unusual (expected 0-10%)")

        if (self.building_value or 0) <= 0:
            warnings.append("building value is required for depreciation")

        return warnings


def default_property_record() -> PropertyRecord:
    """Build a fresh record with the standard example values.

    Each call returns a new object, so resetting to defaults never
    affects a record already handed out.
    """
    return PropertyRecord(
        investors=[
            Investor(id="1", name="Investor 1", annual_income=200_000, has_medicare_levy=True),
            Investor(id="2", name="Investor 2", annual_income=20_000, has_medicare_levy=False),
        ],
        ownership_allocations=[
            OwnershipAllocation(investor_id="1", percentage=90),
            OwnershipAllocation(investor_id="2", percentage=10),
        ],
        purchase_price=750_000,
        weekly_rent=650,
        rental_growth_rate=3.0,
        vacancy_rate=2.0,
        is_construction_project=False,
        construction_year=2020,
        construction_period=8,
        construction_interest_rate=7.0,
        land_value=200_000,
        construction_value=550_000,
        building_value=600_000,
        plant_equipment_value=35_000,
        main_loan=LoanTerms(
            amount=600_000,
            interest_rate=6.5,
            term_years=30,
            loan_type=LoanType.PI,
            io_term_years=5,
        ),
        use_equity_funding=False,
        equity_loan=LoanTerms(
            interest_rate=7.0,
            term_years=25,
            loan_type=LoanType.PI,
            io_term_years=3,
        ),
        primary_property_value=1_000_000,
        existing_debt=400_000,
        max_lvr=80,
        deposit_amount=150_000,
        holding_cost_funding=FundingMix.CASH,
        holding_cost_cash_percentage=100,
        stamp_duty=35_000,
        legal_fees=2_500,
        inspection_fees=800,
        council_fees=5_000,
        architect_fees=15_000,
        site_costs=8_000,
        property_management=8,
        council_rates=2_500,
        insurance=1_200,
        repairs=2_000,
        depreciation_method=DepreciationMethod.PRIME_COST,
        is_new_property=True,
    )

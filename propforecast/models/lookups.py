"""Lookup tables for Australian tax, depreciation, finance and stamp duty."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Jurisdiction(Enum):
    """Australian states and territories recognised by the engine."""

    ACT = "ACT"
    NSW = "NSW"
    NT = "NT"
    QLD = "QLD"
    SA = "SA"
    TAS = "TAS"
    VIC = "VIC"
    WA = "WA"


@dataclass(frozen=True)
class TaxBracket:
    """A single resident income tax bracket.

    Income above `floor` (up to the next bracket's floor) is taxed at `rate`.
    """

    floor: float
    rate: float  # Decimal (0.325 = 32.5%)


# Resident rates used by the projection engine
RESIDENT_TAX_BRACKETS: Tuple[TaxBracket, ...] = (
    TaxBracket(floor=0, rate=0.0),
    TaxBracket(floor=18_200, rate=0.19),
    TaxBracket(floor=45_000, rate=0.325),
    TaxBracket(floor=120_000, rate=0.37),
    TaxBracket(floor=180_000, rate=0.45),
)

# 2024-25 rates after the stage 3 changes
STAGE_THREE_TAX_BRACKETS: Tuple[TaxBracket, ...] = (
    TaxBracket(floor=0, rate=0.0),
    TaxBracket(floor=18_200, rate=0.16),
    TaxBracket(floor=45_000, rate=0.30),
    TaxBracket(floor=135_000, rate=0.37),
    TaxBracket(floor=190_000, rate=0.45),
)

MEDICARE_LEVY_RATE = 0.02
MEDICARE_LEVY_THRESHOLD = 26_000

# Depreciation
CAPITAL_WORKS_RATE = 0.025
PLANT_EQUIPMENT_RATE = 0.15
CAPITAL_WORKS_CUTOFF_YEAR = 1987

# Finance defaults (percent)
DEFAULT_INTEREST_RATE = 6.0
DEFAULT_EQUITY_RATE = 7.2
DEFAULT_LOAN_TERM_YEARS = 30
DEFAULT_PROPERTY_MANAGEMENT_RATE = 7.0
DEFAULT_VACANCY_RATE = 5.0
MAX_LVR_THRESHOLD = 80.0

# Growth defaults (percent)
DEFAULT_CAPITAL_GROWTH = 7.0
DEFAULT_RENTAL_GROWTH = 5.0
DEFAULT_CPI_RATE = 2.5

WEEKS_PER_YEAR = 52
MONTHS_PER_YEAR = 12

# Validation tolerances
OWNERSHIP_TOLERANCE = 0.1  # percentage points
VALUE_TOLERANCE = 100.0  # dollars
FUNDING_SHORTFALL_WARNING_THRESHOLD = 0.10  # of total project cost

# Standard progress payment stages for an eight-month build:
# (percentage, month, description)
STANDARD_BUILD_MONTHS = 8
STANDARD_PROGRESS_STAGES: Tuple[Tuple[float, int, str], ...] = (
    (10.0, 1, "Deposit"),
    (20.0, 2, "Base stage"),
    (25.0, 4, "Frame stage"),
    (25.0, 6, "Lock-up stage"),
    (20.0, 8, "Practical completion"),
)


@dataclass(frozen=True)
class DutyBracket:
    """Stamp duty bracket.

    `maximum` is inclusive. Duty within the bracket is
    `base + (value - minimum) * rate`, or `fixed` when set.
    """

    minimum: float
    maximum: float
    base: float
    rate: float
    fixed: Optional[float] = None


_INF = float("inf")

# General (non-concessional) transfer duty scales
STAMP_DUTY_SCALES: Dict[Jurisdiction, List[DutyBracket]] = {
    Jurisdiction.NSW: [
        DutyBracket(0, 14_000, 0, 0.0125),
        DutyBracket(14_000, 31_000, 175, 0.015),
        DutyBracket(31_000, 83_000, 430, 0.0175),
        DutyBracket(83_000, 310_000, 1_340, 0.035),
        DutyBracket(310_000, 1_033_000, 9_390, 0.045),
        DutyBracket(1_033_000, _INF, 42_540, 0.055),
    ],
    Jurisdiction.VIC: [
        DutyBracket(0, 25_000, 0, 0.014),
        DutyBracket(25_000, 130_000, 350, 0.024),
        DutyBracket(130_000, 960_000, 2_870, 0.06),
        DutyBracket(960_000, 2_000_000, 57_970, 0.055),
        DutyBracket(2_000_000, _INF, 110_000, 0.065),
    ],
    Jurisdiction.QLD: [
        DutyBracket(0, 5_000, 0, 0.0),
        DutyBracket(5_000, 75_000, 0, 0.015),
        DutyBracket(75_000, 540_000, 1_050, 0.035),
        DutyBracket(540_000, 1_000_000, 17_325, 0.045),
        DutyBracket(1_000_000, _INF, 38_025, 0.0575),
    ],
    Jurisdiction.WA: [
        DutyBracket(0, 120_000, 0, 0.019),
        DutyBracket(120_000, 150_000, 2_280, 0.0285),
        DutyBracket(150_000, 360_000, 3_135, 0.038),
        DutyBracket(360_000, 725_000, 11_115, 0.0475),
        DutyBracket(725_000, _INF, 28_453, 0.0515),
    ],
    Jurisdiction.SA: [
        DutyBracket(0, 12_000, 0, 0.01),
        DutyBracket(12_000, 30_000, 120, 0.02),
        DutyBracket(30_000, 50_000, 480, 0.03),
        DutyBracket(50_000, 100_000, 1_080, 0.035),
        DutyBracket(100_000, 200_000, 2_830, 0.04),
        DutyBracket(200_000, 250_000, 6_830, 0.0425),
        DutyBracket(250_000, 300_000, 8_955, 0.0475),
        DutyBracket(300_000, 500_000, 11_330, 0.05),
        DutyBracket(500_000, _INF, 21_330, 0.055),
    ],
    Jurisdiction.TAS: [
        DutyBracket(0, 3_000, 0, 0.0, fixed=50),
        DutyBracket(3_000, 25_000, 50, 0.0175),
        DutyBracket(25_000, 75_000, 400, 0.0225),
        DutyBracket(75_000, 200_000, 1_525, 0.035),
        DutyBracket(200_000, 375_000, 5_900, 0.04),
        DutyBracket(375_000, _INF, 12_900, 0.0425),
    ],
    # ACT and NT are flat approximations
    Jurisdiction.ACT: [
        DutyBracket(0, _INF, 0, 0.05),
    ],
    Jurisdiction.NT: [
        DutyBracket(0, _INF, 0, 0.0495),
    ],
}

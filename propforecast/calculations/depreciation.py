"""Capital works and plant-and-equipment depreciation."""

from dataclasses import dataclass
from typing import List

from ..models.lookups import (
    CAPITAL_WORKS_RATE,
    PLANT_EQUIPMENT_RATE,
    CAPITAL_WORKS_CUTOFF_YEAR,
)
from ..models.property import DepreciationMethod, PropertyRecord


@dataclass
class DepreciationResult:
    """Depreciation deductions for one ownership year."""

    year: int
    building: float  # Capital works (Division 43)
    fixtures: float  # Plant and equipment (Division 40)

    @property
    def total(self) -> float:
        return self.building + self.fixtures


def is_capital_works_eligible(construction_year: int) -> bool:
    """Capital works deductions apply to buildings started from 1987."""
    return (construction_year or 0) >= CAPITAL_WORKS_CUTOFF_YEAR


def calculate_depreciation(
    building_value: float,
    plant_value: float,
    construction_year: int,
    is_new_property: bool,
    method: DepreciationMethod,
    year: int,
) -> DepreciationResult:
    """Calculate depreciation for a single ownership year.

    Capital works are a flat 2.5% of building value regardless of method.
    Plant and equipment is claimable on new properties only: 15% of the
    original value under prime cost, or 15% of a base that declines by 15%
    each year under diminishing value.

    Args:
        building_value: Construction cost of the building.
        plant_value: Value of plant and equipment.
        construction_year: Year the building was constructed.
        is_new_property: Whether the investor is the first owner.
        method: Plant-and-equipment depreciation method.
        year: Ownership year (1 = first year).

    Returns:
        DepreciationResult with building, fixtures and total.
    """
    building = 0.0
    if is_capital_works_eligible(construction_year):
        building = max(0.0, (building_value or 0.0) * CAPITAL_WORKS_RATE)

    fixtures = 0.0
    if is_new_property and year >= 1:
        base = plant_value or 0.0
        if method == DepreciationMethod.DIMINISHING_VALUE:
            base *= (1 - PLANT_EQUIPMENT_RATE) ** (year - 1)
        fixtures = max(0.0, base * PLANT_EQUIPMENT_RATE)

    return DepreciationResult(year=year, building=building, fixtures=fixtures)


def depreciation_for_record(record: PropertyRecord, year: int) -> DepreciationResult:
    return calculate_depreciation(
        building_value=record.building_value,
        plant_value=record.plant_equipment_value,
        construction_year=record.construction_year,
        is_new_property=record.is_new_property,
        method=record.depreciation_method,
        year=year,
    )


def depreciation_schedule(record: PropertyRecord, years: int) -> List[DepreciationResult]:
    """Depreciation for ownership years 1..`years`."""
    return [depreciation_for_record(record, y) for y in range(1, years + 1)]

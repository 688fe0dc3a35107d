"""Transfer (stamp) duty on the dutiable value, by jurisdiction.

General scales only: concessions, first-home-buyer exemptions, foreign
purchaser surcharges and off-the-plan variations are not applied.
"""

import math
from typing import Union

from ..models.lookups import Jurisdiction, STAMP_DUTY_SCALES
from ..models.property import PropertyRecord


def calculate_stamp_duty(dutiable_value: float, jurisdiction: Union[Jurisdiction, str]) -> float:
    """Duty payable on `dutiable_value`, rounded to whole dollars.

    Args:
        dutiable_value: Value the duty is assessed on.
        jurisdiction: State or territory (enum or code such as "NSW").

    Returns:
        Duty in dollars. Zero for non-positive or non-finite values.

    Raises:
        ValueError: If `jurisdiction` is not a recognised code.
    """
    if isinstance(jurisdiction, str):
        jurisdiction = Jurisdiction(jurisdiction)

    if dutiable_value is None or not math.isfinite(dutiable_value) or dutiable_value <= 0:
        return 0.0

    brackets = STAMP_DUTY_SCALES[jurisdiction]
    bracket = next((b for b in brackets if dutiable_value <= b.maximum), brackets[-1])

    if bracket.fixed is not None:
        return float(round(bracket.fixed))
    return float(round(bracket.base + (dutiable_value - bracket.minimum) * bracket.rate))


def dutiable_value(record: PropertyRecord) -> float:
    """Land value for construction projects, purchase price otherwise."""
    if record.is_construction_project:
        return record.land_value or 0.0
    return record.purchase_price or 0.0


def stamp_duty_for_record(record: PropertyRecord) -> float:
    return calculate_stamp_duty(dutiable_value(record), record.property_state)

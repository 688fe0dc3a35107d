"""Funding analysis: project cost, loans, equity release and cash deposit."""

import logging
import math
from dataclasses import dataclass
from typing import List

from ..models.lookups import STANDARD_BUILD_MONTHS, STANDARD_PROGRESS_STAGES
from ..models.property import ProgressPayment, PropertyRecord
from .trace import trace

logger = logging.getLogger(__name__)


@dataclass
class FundingResult:
    """How the total project cost is funded."""

    total_project_cost: float
    main_loan_amount: float
    equity_loan_amount: float
    available_equity: float
    minimum_cash_required: float
    actual_cash_deposit: float
    funding_shortfall: float
    funding_surplus: float

    @property
    def total_funding(self) -> float:
        return self.main_loan_amount + self.equity_loan_amount + self.actual_cash_deposit

    @property
    def is_fully_funded(self) -> bool:
        return self.funding_shortfall == 0


def calculate_purchase_costs(record: PropertyRecord) -> float:
    """Stamp duty, legal and inspection fees."""
    return (record.stamp_duty or 0.0) + (record.legal_fees or 0.0) + (record.inspection_fees or 0.0)


def calculate_construction_costs(record: PropertyRecord) -> float:
    """Council, architect and site costs."""
    return (record.council_fees or 0.0) + (record.architect_fees or 0.0) + (record.site_costs or 0.0)


def calculate_total_project_cost(record: PropertyRecord) -> float:
    """Base cost plus purchase, construction and holding costs."""
    base = record.base_property_value
    purchase = calculate_purchase_costs(record)
    construction = calculate_construction_costs(record)
    holding = record.total_holding_costs or 0.0
    return trace(
        "funding.total_project_cost",
        base + purchase + construction + holding,
        {
            "funding.base_cost": base,
            "funding.purchase_costs": purchase,
            "funding.construction_costs": construction,
            "inputs.total_holding_costs": holding,
        },
    )


def calculate_available_equity(record: PropertyRecord) -> float:
    """Equity that can be released from the investor's existing property."""
    limit = (record.primary_property_value or 0.0) * (record.max_lvr or 0.0) / 100
    return trace(
        "funding.available_equity",
        max(0.0, limit - (record.existing_debt or 0.0)),
        {
            "inputs.primary_property_value": record.primary_property_value or 0.0,
            "inputs.max_lvr": record.max_lvr or 0.0,
            "inputs.existing_debt": record.existing_debt or 0.0,
        },
    )


def analyze_funding(record: PropertyRecord) -> FundingResult:
    """Size the equity loan and find any funding gap.

    Loan amount, equity draw and shortfall depend on each other, so they
    are resolved in a single fixed pass rather than iterated:

    1. Total project cost = base cost + purchase costs + construction
       costs + holding costs.
    2. Available equity = max(0, security value x max LVR - existing debt).
    3. Equity loan = min(max(0, cost - main loan), available equity), when
       equity funding is used.
    4. Minimum cash = max(0, cost - main loan - equity loan).
    5. Shortfall / surplus compare cost against main loan + equity loan +
       the actual cash deposit.

    The equity loan does not top up a deposit that falls short of the
    minimum cash requirement; the gap is reported as a shortfall.

    Args:
        record: Property record with funding inputs.

    Returns:
        FundingResult. main + equity + deposit + shortfall always equals
        total project cost + surplus.
    """
    total_cost = calculate_total_project_cost(record)
    available_equity = calculate_available_equity(record)
    main_loan = max(0.0, record.loan_amount)

    if record.use_equity_funding:
        equity_loan = min(max(0.0, total_cost - main_loan), available_equity)
    else:
        equity_loan = 0.0
    trace(
        "funding.equity_loan_amount",
        equity_loan,
        {"funding.total_project_cost": total_cost, "inputs.loan_amount": main_loan,
         "funding.available_equity": available_equity},
    )

    minimum_cash = max(0.0, total_cost - main_loan - equity_loan)
    deposit = max(0.0, record.deposit_amount or 0.0)

    total_funding = main_loan + equity_loan + deposit
    shortfall = max(0.0, total_cost - total_funding)
    surplus = max(0.0, total_funding - total_cost)
    trace(
        "funding.shortfall",
        shortfall,
        {"funding.total_project_cost": total_cost, "funding.total_funding": total_funding},
    )

    if shortfall > 0:
        logger.debug("Funding shortfall of $%.0f against cost $%.0f", shortfall, total_cost)

    return FundingResult(
        total_project_cost=total_cost,
        main_loan_amount=main_loan,
        equity_loan_amount=equity_loan,
        available_equity=available_equity,
        minimum_cash_required=minimum_cash,
        actual_cash_deposit=deposit,
        funding_shortfall=shortfall,
        funding_surplus=surplus,
    )


def default_progress_payments(construction_period: int) -> List[ProgressPayment]:
    """Standard five-stage schedule stretched over `construction_period` months."""
    period = max(1, construction_period or 0)
    return [
        ProgressPayment(
            percentage=percentage,
            month=max(1, math.floor(month / STANDARD_BUILD_MONTHS * period + 0.5)),
            description=description,
        )
        for percentage, month, description in STANDARD_PROGRESS_STAGES
    ]


def calculate_progress_draw_interest(
    progress_payments: List[ProgressPayment],
    construction_value: float,
    annual_rate_pct: float,
    construction_period: int,
) -> float:
    """Interest on construction draws as each progress payment is made.

    Draws are simple interest, charged monthly on the cumulative amount
    drawn, from the month the stage is paid to the end of the build.
    """
    if construction_period <= 0 or construction_value <= 0:
        return 0.0

    r = annual_rate_pct / 100 / 12
    draws_by_month = {}
    for payment in progress_payments:
        month = min(max(1, payment.month), construction_period)
        draws_by_month[month] = draws_by_month.get(month, 0.0) + construction_value * payment.percentage / 100

    drawn = 0.0
    interest = 0.0
    for month in range(1, construction_period + 1):
        drawn += draws_by_month.get(month, 0.0)
        interest += drawn * r
    return interest

"""Side-by-side comparison of independent property scenarios.

Each scenario is projected on its own, so scenarios run in parallel on a
thread pool. Results are aggregated with numpy and tabulated with pandas.
"""

import concurrent.futures
import logging
import multiprocessing
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional

import numpy as np
import pandas as pd

from .calculations.projection import ProjectionResult, run_projection
from .models.assumptions import ProjectionAssumptions
from .models.property import PropertyRecord

logger = logging.getLogger(__name__)


class RiskLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class ScenarioPerformance:
    """Performance metrics for one scenario."""

    name: str
    roi: float  # Percent, from the investment summary
    weekly_cash_flow: float
    average_annual_cash_flow: float
    equity_at_year_10: float
    equity_at_year_20: float
    equity_at_year_30: float
    break_even_year: Optional[int]
    total_cash_invested: float
    cash_flow_volatility: float  # Std dev of annual after-tax cash flow
    lvr: float  # Percent, total borrowing over base value
    average_interest_rate: float  # Percent, weighted by loan amount
    risk_score: float  # 0-100
    risk_level: RiskLevel


@dataclass
class PerformanceSpread:
    minimum: float
    maximum: float
    median: float
    standard_deviation: float


@dataclass
class ComparisonResult:
    """Comparison across scenarios."""

    scenarios: List[ScenarioPerformance]
    projections: Dict[str, ProjectionResult] = field(default_factory=dict)

    @property
    def best_performer(self) -> Optional[str]:
        ranked = self.top_by_roi(1)
        return ranked[0] if ranked else None

    @property
    def worst_performer(self) -> Optional[str]:
        if not self.scenarios:
            return None
        return min(self.scenarios, key=lambda s: s.roi).name

    @property
    def average_roi(self) -> float:
        if not self.scenarios:
            return 0.0
        return float(np.mean([s.roi for s in self.scenarios]))

    @property
    def roi_spread(self) -> PerformanceSpread:
        if not self.scenarios:
            return PerformanceSpread(0.0, 0.0, 0.0, 0.0)
        rois = np.array([s.roi for s in self.scenarios])
        return PerformanceSpread(
            minimum=float(rois.min()),
            maximum=float(rois.max()),
            median=float(np.median(rois)),
            standard_deviation=float(np.std(rois)),
        )

    @property
    def risk_distribution(self) -> Dict[RiskLevel, int]:
        counts = {level: 0 for level in RiskLevel}
        for s in self.scenarios:
            counts[s.risk_level] += 1
        return counts

    def top_by_roi(self, n: int = 3) -> List[str]:
        ranked = sorted(self.scenarios, key=lambda s: s.roi, reverse=True)
        return [s.name for s in ranked[:n]]

    def top_by_cash_flow(self, n: int = 3) -> List[str]:
        ranked = sorted(self.scenarios, key=lambda s: s.average_annual_cash_flow, reverse=True)
        return [s.name for s in ranked[:n]]

    def top_risk_adjusted(self, n: int = 3) -> List[str]:
        """Ranked by ROI per point of risk score."""
        ranked = sorted(
            self.scenarios,
            key=lambda s: s.roi / s.risk_score if s.risk_score > 0 else s.roi,
            reverse=True,
        )
        return [s.name for s in ranked[:n]]

    def to_dataframe(self) -> pd.DataFrame:
        """One row per scenario, indexed by name."""
        rows = []
        for s in self.scenarios:
            rows.append({
                "scenario": s.name,
                "roi": s.roi,
                "weekly_cash_flow": s.weekly_cash_flow,
                "average_annual_cash_flow": s.average_annual_cash_flow,
                "equity_year_10": s.equity_at_year_10,
                "equity_year_20": s.equity_at_year_20,
                "equity_year_30": s.equity_at_year_30,
                "break_even_year": s.break_even_year,
                "total_cash_invested": s.total_cash_invested,
                "cash_flow_volatility": s.cash_flow_volatility,
                "lvr": s.lvr,
                "risk_score": s.risk_score,
                "risk_level": s.risk_level.value,
            })
        df = pd.DataFrame(rows)
        if df.empty:
            return df
        return df.set_index("scenario")


def calculate_risk_score(lvr: float, volatility: float, break_even_year: float,
                         interest_rate: float) -> float:
    """Simplified 0-100 risk score. Volatility is scored per $1,000."""
    score = lvr * 0.3 + volatility / 1_000 * 0.2 + break_even_year * 0.3 + interest_rate * 0.2
    return min(100.0, max(0.0, score))


def risk_level_for(score: float) -> RiskLevel:
    if score < 30:
        return RiskLevel.LOW
    if score < 70:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def summarize_scenario(name: str, result: ProjectionResult) -> ScenarioPerformance:
    """Derive comparison metrics from a projection."""
    a = result.assumptions
    record = result.record
    operating = result.operating_years
    cash_flows = np.array([y.after_tax_cash_flow for y in operating])

    def equity_at(year: int) -> float:
        row = result.get_year(year)
        return row.property_equity if row else 0.0

    main_amount = result.funding.main_loan_amount
    equity_amount = result.funding.equity_loan_amount
    borrowed = main_amount + equity_amount
    base_value = record.base_property_value
    lvr = borrowed / base_value * 100 if base_value > 0 else 0.0

    main_rate = a.resolve_rate(record.main_loan.interest_rate)
    equity_rate = a.resolve_rate(record.equity_loan.interest_rate, a.default_equity_rate)
    average_rate = (
        (main_amount * main_rate + equity_amount * equity_rate) / borrowed if borrowed > 0 else 0.0
    )

    volatility = float(np.std(cash_flows)) if cash_flows.size else 0.0
    summary = result.summary
    break_even = summary.break_even_year
    score = calculate_risk_score(
        lvr, volatility, break_even if break_even is not None else result.year_to, average_rate
    )

    return ScenarioPerformance(
        name=name,
        roi=summary.roi,
        weekly_cash_flow=summary.weekly_cash_flow,
        average_annual_cash_flow=float(cash_flows.mean()) if cash_flows.size else 0.0,
        equity_at_year_10=equity_at(10),
        equity_at_year_20=equity_at(20),
        equity_at_year_30=equity_at(30),
        break_even_year=break_even,
        total_cash_invested=summary.total_cash_invested,
        cash_flow_volatility=volatility,
        lvr=lvr,
        average_interest_rate=average_rate,
        risk_score=score,
        risk_level=risk_level_for(score),
    )


def compare_scenarios(
    scenarios: Mapping[str, PropertyRecord],
    year_to: int = 30,
    assumptions: Optional[ProjectionAssumptions] = None,
    parallel: bool = True,
    max_workers: Optional[int] = None,
) -> ComparisonResult:
    """Project and compare several named scenarios.

    Args:
        scenarios: Scenario name -> property record.
        year_to: Projection horizon for every scenario.
        assumptions: Shared assumptions.
        parallel: Run projections on a thread pool.
        max_workers: Pool size (default: CPU count, at most 8).

    Returns:
        ComparisonResult, scenarios in input order.
    """
    names = list(scenarios)
    projections: Dict[str, ProjectionResult] = {}

    if parallel and len(names) > 1:
        max_workers = max_workers or min(multiprocessing.cpu_count(), 8)
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(run_projection, scenarios[name], 1, year_to, assumptions): name
                for name in names
            }
            for future in concurrent.futures.as_completed(futures):
                projections[futures[future]] = future.result()
    else:
        for name in names:
            projections[name] = run_projection(scenarios[name], 1, year_to, assumptions)

    logger.info("Compared %d scenarios over %d years", len(names), year_to)

    return ComparisonResult(
        scenarios=[summarize_scenario(name, projections[name]) for name in names],
        projections=projections,
    )

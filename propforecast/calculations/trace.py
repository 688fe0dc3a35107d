"""Opt-in calculation tracing for audit trails.

Tracing records the inputs and result of each traced formula while a
TraceContext is active. With no active context, trace() is a pass-through.
"""

from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

import pandas as pd

from .formula_registry import FormulaRegistry, FormulaDefinition

# Per thread / per task, so concurrent projections never share a trace
_active: ContextVar[Optional["TraceContext"]] = ContextVar("propforecast_trace", default=None)


def _format_value(value: float) -> str:
    if abs(value) >= 1_000_000:
        return f"${value / 1_000_000:,.2f}M"
    if abs(value) >= 1_000:
        return f"${value / 1_000:,.1f}K"
    if value == 0:
        return "$0"
    return f"${value:,.2f}"


@dataclass
class TracedValue:
    """A single traced calculation."""

    field_path: str
    value: float
    formula_def: Optional[FormulaDefinition]
    input_values: Dict[str, float]
    computed_formula: str  # Formula followed by the substituted values
    timestamp: datetime = field(default_factory=datetime.now)
    period: Optional[int] = None
    notes: str = ""

    def format_inputs(self) -> str:
        """Format input values for display."""
        return ", ".join(
            f"{name.split('.')[-1]}={_format_value(val)}"
            for name, val in self.input_values.items()
        )


class TraceContext:
    """Context manager that captures traced calculations.

    Usage:
        with TraceContext() as ctx:
            result = run_projection(record)
            # ctx.traces now holds every traced formula, keyed by
            # "field_path" or "field_path:year"

    Contexts nest: leaving an inner context reactivates the outer one.
    """

    def __init__(self, enabled: bool = True):
        """Initialize trace context.

        Args:
            enabled: If False, trace() calls are no-ops.
        """
        self.enabled = enabled
        self.traces: Dict[str, TracedValue] = {}
        self._start_time = datetime.now()
        self._token: Optional[Token] = None

    def __enter__(self) -> "TraceContext":
        self._token = _active.set(self)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _active.reset(self._token)
            self._token = None

    @staticmethod
    def current() -> Optional["TraceContext"]:
        """Get the active trace context, if any."""
        return _active.get()

    def trace(
        self,
        field_path: str,
        value: float,
        input_values: Dict[str, float],
        period: Optional[int] = None,
        notes: str = "",
    ) -> None:
        """Record a traced calculation.

        Args:
            field_path: Formula path (e.g. "cashflow.after_tax_cash_flow").
            value: Calculated result.
            input_values: Input name -> value used in the calculation.
            period: Projection year, for year-specific values.
            notes: Free-form notes.
        """
        if not self.enabled:
            return

        formula_def = FormulaRegistry.get(field_path)
        formula = formula_def.formula if formula_def else field_path
        if input_values:
            values = ", ".join(_format_value(v) for v in input_values.values())
            computed = f"{formula} [{values}] = {_format_value(value)}"
        else:
            computed = f"{formula} = {_format_value(value)}"

        key = f"{field_path}:{period}" if period is not None else field_path
        self.traces[key] = TracedValue(
            field_path=field_path,
            value=value,
            formula_def=formula_def,
            input_values=dict(input_values),
            computed_formula=computed,
            period=period,
            notes=notes,
        )

    def get_trace(self, field_path: str, period: Optional[int] = None) -> Optional[TracedValue]:
        """Get a specific trace by field path and optional period."""
        key = f"{field_path}:{period}" if period is not None else field_path
        return self.traces.get(key)

    def get_traces_for_period(self, period: int) -> Dict[str, TracedValue]:
        return {k: v for k, v in self.traces.items() if v.period == period}

    def get_calculation_chain(self, field_path: str, period: Optional[int] = None) -> List[TracedValue]:
        """Get the traced value and everything upstream of it, inputs first."""
        chain: List[TracedValue] = []
        visited = set()

        def _collect(path: str) -> None:
            if path in visited:
                return
            visited.add(path)
            traced = self.get_trace(path, period) or self.get_trace(path)
            if traced is None:
                return
            for input_path in traced.input_values:
                _collect(input_path)
            chain.append(traced)

        _collect(field_path)
        return chain

    def to_dataframe(self) -> pd.DataFrame:
        """All traces as a table, one row per traced value."""
        rows = [
            {
                "field_path": t.field_path,
                "period": t.period,
                "value": t.value,
                "category": t.formula_def.category.value if t.formula_def else "",
                "formula": t.computed_formula,
            }
            for t in self.traces.values()
        ]
        return pd.DataFrame(rows, columns=["field_path", "period", "value", "category", "formula"])

    def summary(self) -> str:
        """Generate a text summary of all traces, grouped by category."""
        lines = [
            f"Trace Summary ({len(self.traces)} calculations traced)",
            f"Duration: {datetime.now() - self._start_time}",
            "",
        ]

        by_category: Dict[str, List[TracedValue]] = {}
        for traced in self.traces.values():
            cat = traced.formula_def.category.value if traced.formula_def else "Unregistered"
            by_category.setdefault(cat, []).append(traced)

        for category, traces in sorted(by_category.items()):
            lines.append(f"=== {category} ({len(traces)} traces) ===")
            for traced in traces[:5]:
                lines.append(f"  {traced.field_path}: {traced.computed_formula}")
            if len(traces) > 5:
                lines.append(f"  ... and {len(traces) - 5} more")
            lines.append("")

        return "\n".join(lines)


def trace(
    field_path: str,
    value: float,
    input_values: Dict[str, float],
    period: Optional[int] = None,
    notes: str = "",
) -> float:
    """Trace a calculation and return the value, for inline use.

        rental = trace("income.rental_income", gross * occupancy, {...}, period=year)

    Returns:
        `value`, unchanged.
    """
    ctx = _active.get()
    if ctx is not None:
        ctx.trace(field_path, value, input_values, period, notes)
    return value

"""Calculation tracing for transparent audit trails.

This module provides runtime tracing of calculations, capturing
the actual values used in each formula for debugging and auditing.

The active context lives in a ``ContextVar`` so that pipeline runs on
different threads (e.g. sensitivity scenarios) never write into each
other's trace.
"""

from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from .formula_registry import FormulaRegistry, FormulaDefinition

_current_context: ContextVar[Optional["TraceContext"]] = ContextVar("proforma_trace_context", default=None)


@dataclass
class TracedValue:
    """A single traced calculation.

    Captures the formula definition, actual input values,
    computed result, and formatted formula string.
    """
    field_path: str
    value: float
    formula_def: Optional[FormulaDefinition]
    input_values: Dict[str, float]
    computed_formula: str  # Formula with values substituted
    timestamp: datetime = field(default_factory=datetime.now)
    period: Optional[int] = None
    notes: str = ""


class TraceContext:
    """Context manager for capturing calculation traces.

    Usage:
        with TraceContext() as ctx:
            result = calculate_deal(inputs, PropertyType.RETAIL)
            # ctx.traces now contains all traced calculations
    """

    def __init__(self, enabled: bool = True):
        """Initialize trace context.

        Args:
            enabled: If False, trace() calls are no-ops.
        """
        self.enabled = enabled
        self.traces: Dict[str, TracedValue] = {}
        self._token: Optional[Token] = None

    def __enter__(self) -> "TraceContext":
        self._token = _current_context.set(self)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _current_context.reset(self._token)
            self._token = None

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
            field_path: The formula field path (e.g., "costs.total_project_cost")
            value: The calculated result
            input_values: Dict of input name -> value used in calculation
            period: Optional period number for period-specific values
            notes: Optional notes about this specific calculation
        """
        if not self.enabled:
            return

        formula_def = FormulaRegistry.get(field_path)
        formula = formula_def.formula if formula_def else field_path

        trace_key = f"{field_path}:{period}" if period is not None else field_path

        self.traces[trace_key] = TracedValue(
            field_path=field_path,
            value=value,
            formula_def=formula_def,
            input_values=input_values,
            computed_formula=self._substitute_values(field_path, formula, input_values, value),
            period=period,
            notes=notes,
        )

    def _substitute_values(
        self, field_path: str, formula: str, input_values: Dict[str, float], result: float,
    ) -> str:
        """Render ``formula = input values = result`` for display."""
        result_str = format_trace_value(result, _unit_for(field_path))
        if not input_values:
            return f"{formula} = {result_str}"

        values_str = ", ".join(
            f"{name.split('.')[-1]}={format_trace_value(val, _unit_for(name))}"
            for name, val in input_values.items()
        )
        return f"{formula} = [{values_str}] = {result_str}"

    def get_trace(self, field_path: str, period: Optional[int] = None) -> Optional[TracedValue]:
        """Get a specific trace by field path and optional period."""
        trace_key = f"{field_path}:{period}" if period is not None else field_path
        return self.traces.get(trace_key)

    def get_traces_by_category(self, category: str) -> Dict[str, TracedValue]:
        """Get all traces in a specific category."""
        return {
            k: v for k, v in self.traces.items()
            if v.formula_def and v.formula_def.category.value == category
        }

    def get_calculation_chain(self, field_path: str) -> List[TracedValue]:
        """Get the full calculation chain for a value (upstream traces first)."""
        chain: List[TracedValue] = []
        visited = set()

        def _collect(path: str) -> None:
            if path in visited:
                return
            visited.add(path)
            traced = self.get_trace(path)
            if traced:
                for input_path in traced.input_values:
                    _collect(input_path)
                chain.append(traced)

        _collect(field_path)
        return chain

    @staticmethod
    def current() -> Optional["TraceContext"]:
        """Get the trace context active in the current execution context."""
        return _current_context.get()


def _unit_for(field_path: str) -> Optional[str]:
    formula_def = FormulaRegistry.get(field_path)
    return formula_def.unit if formula_def else None


def format_trace_value(value: float, unit: Optional[str] = None) -> str:
    """Format a value for display in a trace.

    ``unit`` comes from the FormulaDefinition: "%" is a decimal fraction,
    "pct" a whole-percent input, "x" a multiple. Without a unit the
    magnitude decides.
    """
    if unit == "%":
        return f"{value:.2%}"
    elif unit == "pct":
        return f"{value:.2f}%"
    elif unit == "x":
        return f"{value:.2f}x"
    elif unit is not None and unit != "$":
        return f"{value:,.0f} {unit}"
    elif abs(value) >= 1_000_000:
        return f"${value/1_000_000:,.2f}M"
    elif abs(value) >= 1_000:
        return f"${value/1_000:,.1f}K"
    elif unit is None and abs(value) < 1 and value != 0:
        return f"{value:.2%}"
    elif value == 0:
        return "$0"
    else:
        return f"${value:,.0f}"


def trace(
    field_path: str,
    value: float,
    input_values: Dict[str, float],
    period: Optional[int] = None,
    notes: str = "",
) -> float:
    """Trace a calculation and return the value unchanged.

    This can be used inline in calculations:
        noi = trace("operations.noi", egi - expenses, {"operations.egi": egi, ...})
    """
    ctx = _current_context.get()
    if ctx:
        ctx.trace(field_path, value, input_values, period, notes)
    return value

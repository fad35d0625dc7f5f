"""Calculation modules for the development pro forma engine."""

from .costs import calculate_development_costs, calculate_areas, DevelopmentCosts, AreaResult
from .revenue import calculate_stabilized_operations, calculate_year_one_rent, StabilizedOperations
from .debt import (
    size_construction_loan,
    size_permanent_loan,
    amortize_year,
    ConstructionLoan,
    PermanentLoan,
    AmortizationYear,
)
from .metrics import calculate_financing, calculate_deal_metrics, Financing, DealMetrics
from .projections import generate_projections, YearProjection
from .cash_flows import (
    assemble_equity_cash_flows,
    assemble_unlevered_cash_flows,
    CashFlowEvent,
    CashFlowKind,
)
from .irr import calculate_irr, calculate_npv, calculate_equity_multiple, IRRResult
from .exit_analysis import calculate_exit, ExitAnalysis
from .waterfall import run_waterfall, WaterfallResult, WaterfallPeriod, Distribution

# Full pipeline
from .deal import calculate_deal, DealResult

# Scenario tools built on calculate_deal
from .sensitivity import (
    run_sensitivity,
    SensitivityVariable,
    SensitivityPoint,
    SensitivityResult,
)
from .validation import validate_deal, ValidationWarning, Severity

# Tracing
from .trace import TraceContext, TracedValue, trace
from .formula_registry import FormulaRegistry, FormulaDefinition, FormulaCategory

__all__ = [
    "calculate_development_costs",
    "calculate_areas",
    "DevelopmentCosts",
    "AreaResult",
    "calculate_stabilized_operations",
    "calculate_year_one_rent",
    "StabilizedOperations",
    "size_construction_loan",
    "size_permanent_loan",
    "amortize_year",
    "ConstructionLoan",
    "PermanentLoan",
    "AmortizationYear",
    "calculate_financing",
    "calculate_deal_metrics",
    "Financing",
    "DealMetrics",
    "generate_projections",
    "YearProjection",
    "assemble_equity_cash_flows",
    "assemble_unlevered_cash_flows",
    "CashFlowEvent",
    "CashFlowKind",
    "calculate_irr",
    "calculate_npv",
    "calculate_equity_multiple",
    "IRRResult",
    "calculate_exit",
    "ExitAnalysis",
    "run_waterfall",
    "WaterfallResult",
    "WaterfallPeriod",
    "Distribution",
    "calculate_deal",
    "DealResult",
    "run_sensitivity",
    "SensitivityVariable",
    "SensitivityPoint",
    "SensitivityResult",
    "validate_deal",
    "ValidationWarning",
    "Severity",
    "TraceContext",
    "TracedValue",
    "trace",
    "FormulaRegistry",
    "FormulaDefinition",
    "FormulaCategory",
]

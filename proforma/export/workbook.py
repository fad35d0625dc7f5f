"""Pro forma workbook export.

Builds an Excel workbook of a calculated deal (summary, development
budget, annual projections, waterfall, and traced calculations) and
returns it as bytes. Nothing is written to disk.
"""

import io
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Dict, List, Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.dataframe import dataframe_to_rows

from ..calculations.formula_registry import FormulaCategory, FormulaRegistry
from ..calculations.trace import format_trace_value
from ..models.lookups import PROPERTY_TYPE_PARAMS
from .display import NOT_APPLICABLE, format_percent, format_ratio

if TYPE_CHECKING:
    from ..calculations.deal import DealResult
    from ..calculations.trace import TraceContext

PROJECTION_COLUMNS: Dict[str, str] = {
    "period": "Period",
    "label": "Year",
    "gross_rent": "Gross Rent",
    "vacancy": "Vacancy",
    "egi": "EGI",
    "operating_expenses": "Operating Expenses",
    "property_tax": "Property Tax",
    "total_expenses": "Total Expenses",
    "noi": "NOI",
    "reserves": "Reserves",
    "cash_flow_before_debt": "CF Before Debt",
    "debt_service": "Debt Service",
    "interest": "Interest",
    "principal": "Principal",
    "ending_loan_balance": "Loan Balance",
    "cash_flow_after_debt": "CF After Debt",
}


@dataclass
class WorkbookConfig:
    """Configuration for workbook generation."""
    include_summary: bool = True
    include_budget: bool = True
    include_projections: bool = True
    include_waterfall: bool = True
    include_formula_registry: bool = False
    include_traced_values: bool = True
    scenario_name: str = "Base Case"


def projections_to_dataframe(result: "DealResult") -> pd.DataFrame:
    """Build a DataFrame of the annual projection schedule.

    One row per projection year (construction rows included), unrounded.

    Args:
        result: Output of calculate_deal().

    Returns:
        DataFrame indexed by period with ``is_construction`` and the
        cash flow line items as columns.
    """
    columns = ["period", "label", "is_construction"] + [
        c for c in PROJECTION_COLUMNS if c not in ("period", "label")
    ]
    records = [{column: getattr(row, column) for column in columns} for row in result.projections]
    return pd.DataFrame(records, columns=columns).set_index("period")


def _add_header_style(ws, row: int, cols: int) -> None:
    """Apply header styling to a row."""
    header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
    header_font = Font(color="FFFFFF", bold=True)

    for col in range(1, cols + 1):
        cell = ws.cell(row=row, column=col)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center")


def _add_section_header(ws, title: str, row: int) -> int:
    """Add a section header and return next row."""
    ws.cell(row=row, column=1, value=title)
    ws.cell(row=row, column=1).font = Font(bold=True, size=14)
    return row + 1


def _write_label_values(ws, rows: List[tuple], row: int) -> int:
    """Write (label, value) pairs; an empty label leaves a blank row."""
    for label, value in rows:
        if label:
            ws.cell(row=row, column=1, value=label)
            ws.cell(row=row, column=2, value=value)
        row += 1
    return row


def _percent_text(value: Optional[float], decimals: int = 2) -> str:
    text = format_percent(value, decimals)
    return text if text == NOT_APPLICABLE else f"{text}%"


def _ratio_text(value: Optional[float]) -> str:
    text = format_ratio(value)
    return text if text == NOT_APPLICABLE else f"{text}x"


def generate_pro_forma_excel(
    result: "DealResult",
    config: Optional[WorkbookConfig] = None,
    trace_context: Optional["TraceContext"] = None,
) -> bytes:
    """Generate the pro forma workbook.

    Args:
        result: The DealResult from calculate_deal()
        config: Optional configuration for the workbook
        trace_context: TraceContext that was active during calculate_deal();
            the Traced Calculations sheet is skipped without one

    Returns:
        Excel file as bytes
    """
    if config is None:
        config = WorkbookConfig()

    wb = Workbook()

    # Remove default sheet
    wb.remove(wb.active)

    if config.include_summary:
        ws = wb.create_sheet("Summary")
        _create_summary_sheet(ws, result, config)

    if config.include_budget:
        ws = wb.create_sheet("Development Budget")
        _create_budget_sheet(ws, result)

    if config.include_projections:
        ws = wb.create_sheet("Projections")
        _create_projections_sheet(ws, result)

    if config.include_waterfall and result.waterfall is not None:
        ws = wb.create_sheet("Waterfall")
        _create_waterfall_sheet(ws, result)

    if config.include_formula_registry:
        ws = wb.create_sheet("Formula Registry")
        _create_formula_registry_sheet(ws)

    if config.include_traced_values and trace_context is not None:
        ws = wb.create_sheet("Traced Calculations")
        _create_traced_calculations_sheet(ws, trace_context)

    # Save to bytes
    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output.getvalue()


def _create_summary_sheet(ws, result: "DealResult", config: WorkbookConfig) -> None:
    """Create the summary sheet."""
    row = 1

    ws.cell(row=row, column=1, value=f"Pro Forma: {result.inputs.name}")
    ws.cell(row=row, column=1).font = Font(bold=True, size=16)
    row += 1

    ws.cell(row=row, column=1, value=f"Property Type: {PROPERTY_TYPE_PARAMS[result.property_type].display_name}")
    row += 1
    ws.cell(row=row, column=1, value=f"Scenario: {config.scenario_name}")
    row += 1
    ws.cell(row=row, column=1, value=f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    row += 2

    row = _add_section_header(ws, "Key Metrics", row)
    row += 1

    financing = result.financing
    metrics = result.metrics
    irr_label = "Equity IRR" if result.equity_irr.converged else "Equity IRR (not converged)"

    row = _write_label_values(ws, [
        ("Total Project Cost", f"${result.costs.total_project_cost:,.0f}"),
        ("Equity Required", f"${financing.equity_required:,.0f}"),
        ("Construction Loan", f"${financing.construction_loan.loan_amount:,.0f}"),
        ("Permanent Loan", f"${financing.permanent_loan.loan_amount:,.0f}"),
        ("Cash-Out at Refinance", f"${financing.refinance_cash_out:,.0f}"),
        ("", ""),
        ("Year-1 NOI", f"${result.operations.noi:,.0f}"),
        ("Stabilized Value", f"${financing.stabilized_value:,.0f}"),
        ("Value Creation", f"${financing.value_creation:,.0f}"),
        ("", ""),
        ("DSCR", _ratio_text(metrics.dscr)),
        ("Debt Yield", _percent_text(metrics.debt_yield, 1)),
        ("Yield on Cost", _percent_text(metrics.yield_on_cost, 1)),
        ("Development Margin", _percent_text(metrics.development_margin, 1)),
        ("", ""),
        (irr_label, _percent_text(result.equity_irr.rate)),
        ("Unlevered IRR", _percent_text(result.unlevered_irr.rate)),
        ("Equity Multiple", _ratio_text(result.equity_multiple)),
        ("", ""),
        ("Net Sale Price", f"${result.exit_analysis.net_sale_price:,.0f}"),
        ("Net Proceeds", f"${result.exit_analysis.net_proceeds:,.0f}"),
    ], row)

    ws.column_dimensions['A'].width = 30
    ws.column_dimensions['B'].width = 20


def _create_budget_sheet(ws, result: "DealResult") -> None:
    """Create the Development Budget sheet."""
    costs = result.costs

    row = 1
    row = _add_section_header(ws, "Development Budget", row)
    row += 1

    headers = ["Item", "Amount", "% of Total", "Per Gross SF"]
    for col, header in enumerate(headers, 1):
        ws.cell(row=row, column=col, value=header)
    _add_header_style(ws, row, len(headers))
    row += 1

    lines = [
        ("Land", costs.land_cost),
        ("Shell", costs.shell_cost),
        ("Site Work", costs.site_cost),
        ("Tenant Improvements", costs.tenant_improvements),
        ("Hard Costs", costs.hard_costs),
        ("Architectural Fee", costs.architectural_fee),
        ("Contingency", costs.contingency),
        ("Other Soft Costs", costs.other_soft_costs),
        ("Development Fee", costs.development_fee),
        ("Soft Costs", costs.soft_costs),
        ("Total Project Cost", costs.total_project_cost),
    ]
    subtotals = {"Hard Costs", "Soft Costs", "Total Project Cost"}
    total = costs.total_project_cost
    gross_sf = costs.areas.gross_sf

    for label, amount in lines:
        ws.cell(row=row, column=1, value=label)
        ws.cell(row=row, column=2, value=f"${amount:,.0f}")
        ws.cell(row=row, column=3, value=f"{amount / total:.1%}" if total > 0 else "-")
        ws.cell(row=row, column=4, value=f"${amount / gross_sf:,.2f}" if gross_sf > 0 else "-")
        if label in subtotals:
            ws.cell(row=row, column=1).font = Font(bold=True)
            ws.cell(row=row, column=2).font = Font(bold=True)
        row += 1

    ws.column_dimensions['A'].width = 25
    ws.column_dimensions['B'].width = 18
    ws.column_dimensions['C'].width = 12
    ws.column_dimensions['D'].width = 14


def _create_projections_sheet(ws, result: "DealResult") -> None:
    """Create the annual Projections sheet from the projection DataFrame."""
    df = projections_to_dataframe(result).drop(columns=["is_construction"]).reset_index()
    df = df.rename(columns=PROJECTION_COLUMNS)
    numeric_columns = [c for c in df.columns if c not in ("Period", "Year")]
    df[numeric_columns] = df[numeric_columns].round(0)

    row = 1
    row = _add_section_header(ws, "Annual Projections", row)
    row += 1

    for r_idx, values in enumerate(dataframe_to_rows(df, index=False, header=True)):
        for c_idx, value in enumerate(values, 1):
            ws.cell(row=row, column=c_idx, value=value)
        if r_idx == 0:
            _add_header_style(ws, row, len(values))
        row += 1

    for col in range(1, len(df.columns) + 1):
        ws.column_dimensions[get_column_letter(col)].width = 16


def _create_waterfall_sheet(ws, result: "DealResult") -> None:
    """Create the LP/GP Waterfall sheet."""
    waterfall = result.waterfall

    row = 1
    row = _add_section_header(ws, "Equity Waterfall", row)
    row += 1

    row = _write_label_values(ws, [
        ("LP Capital", f"${waterfall.lp_capital:,.0f}"),
        ("GP Capital", f"${waterfall.gp_capital:,.0f}"),
        ("LP Distributions", f"${waterfall.lp_total:,.0f}"),
        ("GP Distributions", f"${waterfall.gp_total:,.0f}"),
        ("LP Multiple", _ratio_text(waterfall.lp_multiple)),
        ("GP Multiple", _ratio_text(waterfall.gp_multiple)),
    ], row)
    row += 1

    headers = [
        "Period", "Cash Available", "LP Capital", "GP Capital", "LP Pref", "GP Pref",
        "GP Catch-up", "LP Promote", "GP Promote", "LP Total", "GP Total",
    ]
    for col, header in enumerate(headers, 1):
        ws.cell(row=row, column=col, value=header)
    _add_header_style(ws, row, len(headers))
    row += 1

    for period in waterfall.periods:
        values = [
            period.cash_available,
            period.lp_capital_return,
            period.gp_capital_return,
            period.lp_preferred,
            period.gp_preferred,
            period.gp_catch_up,
            period.lp_promote,
            period.gp_promote,
            period.lp_total,
            period.gp_total,
        ]
        ws.cell(row=row, column=1, value=period.period)
        for col, value in enumerate(values, 2):
            ws.cell(row=row, column=col, value=f"${value:,.0f}")
        row += 1

    for col in range(1, len(headers) + 1):
        ws.column_dimensions[get_column_letter(col)].width = 15


def _create_formula_registry_sheet(ws) -> None:
    """Create the Formula Registry sheet."""
    row = 1
    row = _add_section_header(ws, "Formula Registry", row)
    row += 1

    headers = ["Category", "Name", "Field Path", "Formula", "Inputs", "Notes"]
    for col, header in enumerate(headers, 1):
        ws.cell(row=row, column=col, value=header)
    _add_header_style(ws, row, len(headers))
    row += 1

    for category in FormulaCategory:
        for formula in sorted(FormulaRegistry.get_by_category(category), key=lambda f: f.field_path):
            ws.cell(row=row, column=1, value=category.value)
            ws.cell(row=row, column=2, value=formula.name)
            ws.cell(row=row, column=3, value=formula.field_path)
            ws.cell(row=row, column=4, value=formula.formula)
            ws.cell(row=row, column=5, value=", ".join(formula.inputs) if formula.inputs else "-")
            ws.cell(row=row, column=6, value=formula.notes or "-")
            row += 1

    for col, width in zip("ABCDEF", (15, 30, 30, 50, 40, 40)):
        ws.column_dimensions[col].width = width


def _create_traced_calculations_sheet(ws, trace_context: "TraceContext") -> None:
    """Create the Traced Calculations sheet."""
    row = 1
    row = _add_section_header(ws, "Traced Calculations - Actual Values Used", row)
    row += 1

    headers = ["Field Path", "Result", "Computed Formula", "Notes"]
    for col, header in enumerate(headers, 1):
        ws.cell(row=row, column=col, value=header)
    _add_header_style(ws, row, len(headers))
    row += 1

    for trace_key in sorted(trace_context.traces.keys()):
        traced = trace_context.traces[trace_key]

        ws.cell(row=row, column=1, value=traced.field_path)
        unit = traced.formula_def.unit if traced.formula_def else None
        ws.cell(row=row, column=2, value=format_trace_value(traced.value, unit))
        ws.cell(row=row, column=3, value=traced.computed_formula[:100])
        ws.cell(row=row, column=4, value=traced.notes or "-")
        row += 1

    ws.column_dimensions['A'].width = 30
    ws.column_dimensions['B'].width = 18
    ws.column_dimensions['C'].width = 80
    ws.column_dimensions['D'].width = 30

"""Display formatting for pro forma results.

The calculation engine keeps every value unrounded. This module is the
single place where values are rounded for presentation:

- Monetary amounts become whole-dollar ints
- IRR, DSCR, equity multiple, and interest/cap rates become 2-decimal strings
- Development margin, debt yield, and yield on cost become 1-decimal strings

Percentages are expressed x100 ("14.52" for 0.1452). Values that are not
applicable (zero denominators, no IRR) render as "N/A".
"""

import math
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..models.lookups import PROPERTY_TYPE_PARAMS

if TYPE_CHECKING:
    from ..calculations.deal import DealResult
    from ..calculations.projections import YearProjection
    from ..calculations.waterfall import WaterfallResult

NOT_APPLICABLE = "N/A"


def round_currency(value: float) -> int:
    """Round to whole currency units, halves rounded up."""
    return int(math.floor(value + 0.5))


def format_percent(value: Optional[float], decimals: int = 2) -> str:
    """Format a decimal fraction as a percent string without the sign.

    Example:
        >>> format_percent(0.14523)
        '14.52'
        >>> format_percent(None)
        'N/A'
    """
    if value is None or not math.isfinite(value):
        return NOT_APPLICABLE
    return f"{value * 100:.{decimals}f}"


def format_ratio(value: Optional[float], decimals: int = 2) -> str:
    """Format a ratio (DSCR, multiple) as a fixed-precision string."""
    if value is None or not math.isfinite(value):
        return NOT_APPLICABLE
    return f"{value:.{decimals}f}"


def format_rate(value: float) -> str:
    """Format an input rate already expressed in percent (7.5 -> '7.50')."""
    return f"{value:.2f}"


def _format_projection(row: "YearProjection") -> Dict[str, Any]:
    return {
        "period": row.period,
        "label": row.label,
        "is_construction": row.is_construction,
        "gross_rent": round_currency(row.gross_rent),
        "vacancy": round_currency(row.vacancy),
        "egi": round_currency(row.egi),
        "operating_expenses": round_currency(row.operating_expenses),
        "property_tax": round_currency(row.property_tax),
        "total_expenses": round_currency(row.total_expenses),
        "noi": round_currency(row.noi),
        "reserves": round_currency(row.reserves),
        "cash_flow_before_debt": round_currency(row.cash_flow_before_debt),
        "debt_service": round_currency(row.debt_service),
        "interest": round_currency(row.interest),
        "principal": round_currency(row.principal),
        "ending_loan_balance": round_currency(row.ending_loan_balance),
        "cash_flow_after_debt": round_currency(row.cash_flow_after_debt),
    }


def _format_waterfall(waterfall: "WaterfallResult") -> Dict[str, Any]:
    return {
        "lp_capital": round_currency(waterfall.lp_capital),
        "gp_capital": round_currency(waterfall.gp_capital),
        "lp_total": round_currency(waterfall.lp_total),
        "gp_total": round_currency(waterfall.gp_total),
        "lp_multiple": format_ratio(waterfall.lp_multiple),
        "gp_multiple": format_ratio(waterfall.gp_multiple),
        "lp_distributions": [
            {
                "period": d.period,
                "amount": round_currency(d.amount),
                "cumulative": round_currency(d.cumulative),
            }
            for d in waterfall.lp_distributions
        ],
        "gp_distributions": [
            {
                "period": d.period,
                "amount": round_currency(d.amount),
                "cumulative": round_currency(d.cumulative),
            }
            for d in waterfall.gp_distributions
        ],
    }


def format_deal_result(result: "DealResult") -> Dict[str, Any]:
    """Convert a raw DealResult into display values.

    Args:
        result: Output of calculate_deal().

    Returns:
        Nested dict of rounded ints and fixed-precision strings.
    """
    costs = result.costs
    operations = result.operations
    financing = result.financing
    metrics = result.metrics
    exit_analysis = result.exit_analysis
    inputs = result.inputs

    formatted: Dict[str, Any] = {
        "property_type": result.property_type.value,
        "areas": {
            "gross_sf": round_currency(costs.areas.gross_sf),
            "rentable_sf": round_currency(costs.areas.rentable_sf),
            "useable_sf": round_currency(costs.areas.useable_sf),
            "site_area_sf": round_currency(costs.areas.site_area_sf),
        },
        "costs": {
            "land_cost": round_currency(costs.land_cost),
            "shell_cost": round_currency(costs.shell_cost),
            "site_cost": round_currency(costs.site_cost),
            "tenant_improvements": round_currency(costs.tenant_improvements),
            "hard_costs": round_currency(costs.hard_costs),
            "architectural_fee": round_currency(costs.architectural_fee),
            "contingency": round_currency(costs.contingency),
            "other_soft_costs": round_currency(costs.other_soft_costs),
            "development_fee": round_currency(costs.development_fee),
            "soft_costs": round_currency(costs.soft_costs),
            "total_project_cost": round_currency(costs.total_project_cost),
        },
        "financing": {
            "construction_loan": round_currency(financing.construction_loan.loan_amount),
            "construction_rate": format_rate(financing.construction_loan.interest_rate),
            "construction_interest": round_currency(financing.construction_loan.interest),
            "all_in_cost": round_currency(financing.all_in_cost),
            "equity_required": round_currency(financing.equity_required),
            "permanent_loan": round_currency(financing.permanent_loan.loan_amount),
            "permanent_rate": format_rate(financing.permanent_loan.interest_rate),
            "annual_debt_service": round_currency(financing.permanent_loan.annual_debt_service),
            "refinance_cash_out": round_currency(financing.refinance_cash_out),
        },
        "operations": {
            "gross_rent": round_currency(operations.gross_rent),
            "vacancy": round_currency(operations.vacancy),
            "egi": round_currency(operations.egi),
            "operating_expenses": round_currency(operations.operating_expenses),
            "property_tax": round_currency(operations.property_tax),
            "total_expenses": round_currency(operations.total_expenses),
            "noi": round_currency(operations.noi),
            "reserves": round_currency(operations.reserves),
            "cash_flow_before_debt": round_currency(operations.cash_flow_before_debt),
        },
        "valuation": {
            "going_in_cap_rate": format_rate(inputs.going_in_cap_rate),
            "stabilized_value": round_currency(financing.stabilized_value),
            "value_creation": round_currency(financing.value_creation),
        },
        "metrics": {
            "dscr": format_ratio(metrics.dscr),
            "debt_yield": format_percent(metrics.debt_yield, 1),
            "yield_on_cost": format_percent(metrics.yield_on_cost, 1),
            "development_margin": format_percent(metrics.development_margin, 1),
        },
        "returns": {
            "equity_irr": format_percent(result.equity_irr.rate),
            "equity_irr_converged": result.equity_irr.converged,
            "unlevered_irr": format_percent(result.unlevered_irr.rate),
            "unlevered_irr_converged": result.unlevered_irr.converged,
            "equity_multiple": format_ratio(result.equity_multiple),
        },
        "exit": {
            "exit_cap_rate": format_rate(exit_analysis.exit_cap_rate),
            "gross_sale_price": round_currency(exit_analysis.gross_sale_price),
            "selling_costs": round_currency(exit_analysis.selling_costs),
            "net_sale_price": round_currency(exit_analysis.net_sale_price),
            "loan_payoff": round_currency(exit_analysis.loan_payoff),
            "net_proceeds": round_currency(exit_analysis.net_proceeds),
        },
        "projections": [_format_projection(row) for row in result.projections],
        "cash_flows": [
            {"period": e.period, "amount": round_currency(e.amount), "kind": e.kind.value}
            for e in result.equity_cash_flows
        ],
        "waterfall": _format_waterfall(result.waterfall) if result.waterfall else None,
    }
    return formatted


def _percent_cell(value: Optional[float], decimals: int = 2) -> str:
    text = format_percent(value, decimals)
    return text if text == NOT_APPLICABLE else f"{text}%"


def _ratio_cell(value: Optional[float]) -> str:
    text = format_ratio(value)
    return text if text == NOT_APPLICABLE else f"{text}x"


def format_summary_table(result: "DealResult") -> str:
    """Format the key deal figures as a fixed-width text table.

    Args:
        result: Output of calculate_deal().

    Returns:
        Formatted string table.
    """
    costs = result.costs
    operations = result.operations
    financing = result.financing
    metrics = result.metrics
    irr_note = "" if result.equity_irr.converged else " (not converged)"

    lines = [
        "=" * 60,
        f"PRO FORMA SUMMARY: {result.inputs.name} ({PROPERTY_TYPE_PARAMS[result.property_type].display_name})",
        "=" * 60,
        "",
        f"{'Land Cost':<30} ${costs.land_cost:>15,.0f}",
        f"{'Hard Costs':<30} ${costs.hard_costs:>15,.0f}",
        f"{'Soft Costs':<30} ${costs.soft_costs:>15,.0f}",
        f"{'Total Project Cost':<30} ${costs.total_project_cost:>15,.0f}",
        "",
        f"{'Construction Loan':<30} ${financing.construction_loan.loan_amount:>15,.0f}",
        f"{'Construction Interest':<30} ${financing.construction_loan.interest:>15,.0f}",
        f"{'Equity Required':<30} ${financing.equity_required:>15,.0f}",
        f"{'Permanent Loan':<30} ${financing.permanent_loan.loan_amount:>15,.0f}",
        f"{'Cash-Out at Refinance':<30} ${financing.refinance_cash_out:>15,.0f}",
        "",
        f"{'Year-1 Gross Rent':<30} ${operations.gross_rent:>15,.0f}",
        f"{'Year-1 NOI':<30} ${operations.noi:>15,.0f}",
        f"{'Stabilized Value':<30} ${financing.stabilized_value:>15,.0f}",
        "",
        f"{'DSCR':<30} {_ratio_cell(metrics.dscr):>16}",
        f"{'Debt Yield':<30} {_percent_cell(metrics.debt_yield, 1):>16}",
        f"{'Yield on Cost':<30} {_percent_cell(metrics.yield_on_cost, 1):>16}",
        f"{'Development Margin':<30} {_percent_cell(metrics.development_margin, 1):>16}",
        "",
        f"{'Equity IRR' + irr_note:<30} {_percent_cell(result.equity_irr.rate):>16}",
        f"{'Unlevered IRR':<30} {_percent_cell(result.unlevered_irr.rate):>16}",
        f"{'Equity Multiple':<30} {_ratio_cell(result.equity_multiple):>16}",
    ]

    if result.waterfall is not None:
        waterfall = result.waterfall
        lines.extend([
            "",
            "-" * 60,
            f"{'LP Distributions':<30} ${waterfall.lp_total:>15,.0f}",
            f"{'GP Distributions':<30} ${waterfall.gp_total:>15,.0f}",
            f"{'LP Multiple':<30} {_ratio_cell(waterfall.lp_multiple):>16}",
            f"{'GP Multiple':<30} {_ratio_cell(waterfall.gp_multiple):>16}",
        ])

    lines.append("=" * 60)
    return "\n".join(lines)


def format_sensitivity_rows(points: List[Any]) -> List[Dict[str, Any]]:
    """Format sensitivity points for display (see SensitivityResult.to_dict)."""
    return [
        {
            "adjustment": point.adjustment,
            "value": point.value,
            "equityIRR": format_percent(point.equity_irr),
            "equityIRRConverged": point.equity_irr_converged,
            "developmentMargin": format_percent(point.development_margin, 1),
            "dscr": format_ratio(point.dscr),
            **({"error": point.error} if point.error else {}),
        }
        for point in points
    ]

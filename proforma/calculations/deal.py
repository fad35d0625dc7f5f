"""End-to-end pro forma pipeline.

calculate_deal() runs the full chain in order:

    costs -> stabilized operations -> financing -> metrics
          -> projections -> exit -> cash flows -> IRR -> waterfall

Every intermediate stays unrounded on the returned DealResult; rounding
belongs to proforma.export.display.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..models.lookups import PropertyType, require_supported
from ..models.project import ProjectInput
from ..models.waterfall import WaterfallConfig
from .cash_flows import CashFlowEvent, assemble_equity_cash_flows, assemble_unlevered_cash_flows
from .costs import DevelopmentCosts, calculate_development_costs
from .exit_analysis import ExitAnalysis, calculate_exit
from .irr import IRRResult, calculate_equity_multiple, calculate_irr
from .metrics import DealMetrics, Financing, calculate_deal_metrics, calculate_financing
from .projections import YearProjection, generate_projections
from .revenue import StabilizedOperations, calculate_stabilized_operations
from .trace import trace
from .waterfall import WaterfallResult, run_waterfall

logger = logging.getLogger(__name__)


@dataclass
class DealResult:
    """Raw (unrounded) results of a pro forma run."""

    inputs: ProjectInput
    property_type: PropertyType

    costs: DevelopmentCosts
    operations: StabilizedOperations
    financing: Financing
    metrics: DealMetrics

    projections: List[YearProjection]
    exit_analysis: ExitAnalysis

    equity_cash_flows: List[CashFlowEvent]
    unlevered_cash_flows: List[CashFlowEvent]
    equity_irr: IRRResult
    unlevered_irr: IRRResult
    equity_multiple: Optional[float]

    waterfall: Optional[WaterfallResult] = None


def _trace_costs(costs: DevelopmentCosts) -> None:
    trace("costs.land_cost", costs.land_cost, {})
    trace("costs.hard_costs", costs.hard_costs, {
        "shell_cost": costs.shell_cost,
        "site_cost": costs.site_cost,
        "tenant_improvements": costs.tenant_improvements,
    })
    trace("costs.soft_costs", costs.soft_costs, {
        "architectural_fee": costs.architectural_fee,
        "contingency": costs.contingency,
        "other_soft_costs": costs.other_soft_costs,
        "development_fee": costs.development_fee,
    })
    trace("costs.total_project_cost", costs.total_project_cost, {
        "costs.land_cost": costs.land_cost,
        "costs.hard_costs": costs.hard_costs,
        "costs.soft_costs": costs.soft_costs,
    })


def _trace_operations(operations: StabilizedOperations) -> None:
    trace("operations.gross_rent", operations.gross_rent, {})
    trace("operations.egi", operations.egi, {
        "operations.gross_rent": operations.gross_rent,
        "vacancy": operations.vacancy,
    })
    trace("operations.total_expenses", operations.total_expenses, {
        "operating_expenses": operations.operating_expenses,
        "property_tax": operations.property_tax,
    })
    trace("operations.noi", operations.noi, {
        "operations.egi": operations.egi,
        "operations.total_expenses": operations.total_expenses,
    })


def _trace_financing(costs: DevelopmentCosts, financing: Financing, operations: StabilizedOperations) -> None:
    construction = financing.construction_loan
    permanent = financing.permanent_loan

    trace("financing.construction_loan", construction.loan_amount, {
        "costs.total_project_cost": costs.total_project_cost,
        "inputs.construction_loan_ltc": construction.ltc_ratio,
    })
    trace("financing.construction_interest", construction.interest, {
        "financing.construction_loan": construction.loan_amount,
        "inputs.construction_loan_rate": construction.interest_rate,
        "inputs.construction_months": construction.term_months,
    })
    trace("financing.all_in_cost", financing.all_in_cost, {
        "costs.total_project_cost": costs.total_project_cost,
        "financing.construction_interest": construction.interest,
    })
    trace("investment.stabilized_value", financing.stabilized_value, {
        "operations.noi": operations.noi,
    })
    trace("investment.value_creation", financing.value_creation, {
        "investment.stabilized_value": financing.stabilized_value,
        "financing.all_in_cost": financing.all_in_cost,
    })
    trace("financing.permanent_loan", permanent.loan_amount, {
        "investment.stabilized_value": financing.stabilized_value,
        "inputs.permanent_loan_ltv": permanent.ltv_ratio,
    })
    trace("financing.annual_debt_service", permanent.annual_debt_service, {
        "financing.permanent_loan": permanent.loan_amount,
    })
    trace("financing.equity_required", financing.equity_required, {
        "financing.all_in_cost": financing.all_in_cost,
        "financing.construction_loan": construction.loan_amount,
    })
    trace("financing.refinance_cash_out", financing.refinance_cash_out, {
        "financing.permanent_loan": permanent.loan_amount,
        "financing.construction_loan": construction.loan_amount,
        "financing.construction_interest": construction.interest,
    })


def _trace_returns(result: DealResult) -> None:
    operations = result.operations
    financing = result.financing
    metrics = result.metrics

    if metrics.dscr is not None:
        trace("returns.dscr", metrics.dscr, {
            "cash_flow_before_debt": operations.cash_flow_before_debt,
            "financing.annual_debt_service": financing.permanent_loan.annual_debt_service,
        })
    if metrics.debt_yield is not None:
        trace("returns.debt_yield", metrics.debt_yield, {
            "operations.noi": operations.noi,
            "financing.permanent_loan": financing.permanent_loan.loan_amount,
        })
    if metrics.yield_on_cost is not None:
        trace("returns.yield_on_cost", metrics.yield_on_cost, {
            "operations.noi": operations.noi,
            "financing.all_in_cost": financing.all_in_cost,
        })
    if metrics.development_margin is not None:
        trace("returns.development_margin", metrics.development_margin, {
            "investment.value_creation": financing.value_creation,
            "financing.all_in_cost": financing.all_in_cost,
        })
    if result.equity_irr.rate is not None:
        trace("returns.equity_irr", result.equity_irr.rate, {
            "financing.equity_required": financing.equity_required,
            "financing.refinance_cash_out": financing.refinance_cash_out,
        }, notes="" if result.equity_irr.converged else "did not converge")
    if result.unlevered_irr.rate is not None:
        trace("returns.unlevered_irr", result.unlevered_irr.rate, {
            "costs.total_project_cost": result.costs.total_project_cost,
            "exit.net_sale_price": result.exit_analysis.net_sale_price,
        }, notes="" if result.unlevered_irr.converged else "did not converge")
    if result.equity_multiple is not None:
        trace("returns.equity_multiple", result.equity_multiple, {
            "financing.equity_required": financing.equity_required,
        })

    exit_analysis = result.exit_analysis
    trace("exit.gross_sale_price", exit_analysis.gross_sale_price, {
        "final_year_noi": exit_analysis.final_year_noi,
        "inputs.exit_cap_rate": exit_analysis.exit_cap_rate,
    })
    trace("exit.net_sale_price", exit_analysis.net_sale_price, {
        "exit.gross_sale_price": exit_analysis.gross_sale_price,
        "selling_costs": exit_analysis.selling_costs,
    })
    trace("exit.net_proceeds", exit_analysis.net_proceeds, {
        "exit.net_sale_price": exit_analysis.net_sale_price,
        "loan_payoff": exit_analysis.loan_payoff,
    })


def calculate_deal(
    inputs: ProjectInput,
    property_type: PropertyType,
    waterfall_config: Optional[WaterfallConfig] = None,
) -> DealResult:
    """Run the full development pro forma.

    Args:
        inputs: Project inputs.
        property_type: Property type tag; only retail and office are supported.
        waterfall_config: Waterfall rules. The waterfall is skipped when
            None or disabled.

    Returns:
        DealResult with every stage of the calculation.

    Raises:
        UnsupportedPropertyTypeError: For property types without formulas.
        ConfigurationError: For invalid modes, cap rates, or hold periods.

    Example:
        >>> result = calculate_deal(inputs, PropertyType.RETAIL, default_waterfall_config())
        >>> result.equity_irr.converged
        True
    """
    property_type = require_supported(property_type)
    logger.debug("Calculating %s deal %r", property_type.value, inputs.name)

    costs = calculate_development_costs(inputs, property_type)
    _trace_costs(costs)

    operations = calculate_stabilized_operations(inputs, property_type, costs.areas.rentable_sf)
    _trace_operations(operations)

    financing = calculate_financing(inputs, costs, operations)
    _trace_financing(costs, financing, operations)

    metrics = calculate_deal_metrics(operations, financing)

    projections = generate_projections(inputs, operations, financing.permanent_loan)
    exit_analysis = calculate_exit(inputs, projections)

    equity_cash_flows = assemble_equity_cash_flows(
        projections, financing.equity_required, financing.refinance_cash_out,
    )
    unlevered_cash_flows = assemble_unlevered_cash_flows(
        projections, costs.total_project_cost, exit_analysis.net_sale_price,
    )

    waterfall = None
    if waterfall_config is not None and waterfall_config.enabled:
        waterfall = run_waterfall(equity_cash_flows, financing.equity_required, waterfall_config)

    result = DealResult(
        inputs=inputs,
        property_type=property_type,
        costs=costs,
        operations=operations,
        financing=financing,
        metrics=metrics,
        projections=projections,
        exit_analysis=exit_analysis,
        equity_cash_flows=equity_cash_flows,
        unlevered_cash_flows=unlevered_cash_flows,
        equity_irr=calculate_irr(equity_cash_flows),
        unlevered_irr=calculate_irr(unlevered_cash_flows),
        equity_multiple=calculate_equity_multiple(equity_cash_flows),
        waterfall=waterfall,
    )
    _trace_returns(result)

    logger.debug(
        "Deal %r: total cost %.2f, NOI %.2f, equity IRR %s",
        inputs.name, costs.total_project_cost, operations.noi, result.equity_irr.rate,
    )
    return result

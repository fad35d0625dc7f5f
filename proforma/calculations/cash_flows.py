"""Flatten projections and capital events into period-indexed cash flows."""

from dataclasses import dataclass
from enum import Enum
from typing import List

from .projections import YearProjection, construction_rows, operating_rows


class CashFlowKind(str, Enum):
    """Source of a cash flow event."""
    INVESTMENT = "investment"
    REFINANCE = "refinance"
    OPERATIONS = "operations"
    REVERSION = "reversion"


@dataclass(frozen=True)
class CashFlowEvent:
    """A single signed cash flow at an annual period (0 = closing)."""

    period: int
    amount: float
    kind: CashFlowKind

    def __post_init__(self) -> None:
        if self.period < 0:
            raise ValueError(f"Cash flow period must be non-negative, got {self.period}")


def refinance_period(projections: List[YearProjection]) -> int:
    """Period at which the construction loan is taken out.

    The refinance lands on the last construction year; with no
    construction years it falls back to period 1.
    """
    construction = construction_rows(projections)
    if not construction:
        return 1
    return construction[-1].period


def assemble_equity_cash_flows(
    projections: List[YearProjection],
    equity_required: float,
    refinance_cash_out: float,
) -> List[CashFlowEvent]:
    """Build the levered equity cash flow series.

    Period 0 is the equity check (negative). A positive cash-out at
    refinance is added at the refinance period. Each operating year
    contributes its cash flow after debt service, sign preserved, at
    ``construction years + operating year``.

    Args:
        projections: Output of generate_projections().
        equity_required: Equity invested at closing.
        refinance_cash_out: Excess permanent loan proceeds.

    Returns:
        Cash flow events in period order.
    """
    events = [CashFlowEvent(period=0, amount=-equity_required, kind=CashFlowKind.INVESTMENT)]

    if refinance_cash_out > 0:
        events.append(CashFlowEvent(
            period=refinance_period(projections),
            amount=refinance_cash_out,
            kind=CashFlowKind.REFINANCE,
        ))

    offset = len(construction_rows(projections))
    for row in operating_rows(projections):
        events.append(CashFlowEvent(
            period=offset + row.operating_year,
            amount=row.cash_flow_after_debt,
            kind=CashFlowKind.OPERATIONS,
        ))

    return events


def assemble_unlevered_cash_flows(
    projections: List[YearProjection],
    total_project_cost: float,
    net_sale_price: float,
) -> List[CashFlowEvent]:
    """Build the unlevered (property-level) cash flow series.

    Period 0 is the total project cost (negative). Each operating year
    contributes cash flow before debt service, and the final year adds
    the net sale price (after selling costs, before loan payoff).

    Args:
        projections: Output of generate_projections().
        total_project_cost: Land + hard + soft costs.
        net_sale_price: Exit value net of selling costs.

    Returns:
        Cash flow events in period order.
    """
    events = [CashFlowEvent(period=0, amount=-total_project_cost, kind=CashFlowKind.INVESTMENT)]

    offset = len(construction_rows(projections))
    operating = operating_rows(projections)
    for row in operating:
        events.append(CashFlowEvent(
            period=offset + row.operating_year,
            amount=row.cash_flow_before_debt,
            kind=CashFlowKind.OPERATIONS,
        ))

    if operating:
        events.append(CashFlowEvent(
            period=offset + operating[-1].operating_year,
            amount=net_sale_price,
            kind=CashFlowKind.REVERSION,
        ))

    return events

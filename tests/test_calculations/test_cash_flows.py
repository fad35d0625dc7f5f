"""Tests for equity and unlevered cash flow assembly."""

import pytest

from proforma.calculations.cash_flows import (
    CashFlowEvent,
    CashFlowKind,
    assemble_equity_cash_flows,
    assemble_unlevered_cash_flows,
    refinance_period,
)
from proforma.calculations.projections import YearProjection


def _schedule(construction_years, cash_flows):
    rows = [
        YearProjection(period=p, label=f"Construction Year {p}", is_construction=True, operating_year=0)
        for p in range(1, construction_years + 1)
    ]
    for year, amount in enumerate(cash_flows, 1):
        rows.append(YearProjection(
            period=construction_years + year,
            label=f"Year {year}",
            is_construction=False,
            operating_year=year,
            noi=amount + 50,
            cash_flow_before_debt=amount + 50,
            debt_service=50,
            cash_flow_after_debt=amount,
        ))
    return rows


class TestEquityCashFlows:
    """Tests for the levered equity series."""

    def test_investment_then_operations(self):
        events = assemble_equity_cash_flows(_schedule(1, [100, 110, 120]), 1_000, 0)

        assert events[0] == CashFlowEvent(0, -1_000, CashFlowKind.INVESTMENT)
        assert [e.period for e in events] == [0, 2, 3, 4]
        assert [e.amount for e in events] == [-1_000, 100, 110, 120]
        assert all(e.kind == CashFlowKind.OPERATIONS for e in events[1:])

    def test_refinance_at_last_construction_year(self):
        events = assemble_equity_cash_flows(_schedule(2, [100, 110]), 1_000, 400)

        refinance = [e for e in events if e.kind == CashFlowKind.REFINANCE]
        assert refinance == [CashFlowEvent(2, 400, CashFlowKind.REFINANCE)]
        assert [e.period for e in events] == [0, 2, 3, 4]

    def test_refinance_without_construction_falls_back_to_period_one(self):
        projections = _schedule(0, [100, 110])
        events = assemble_equity_cash_flows(projections, 1_000, 400)

        assert refinance_period(projections) == 1
        assert [(e.period, e.kind) for e in events[:3]] == [
            (0, CashFlowKind.INVESTMENT),
            (1, CashFlowKind.REFINANCE),
            (1, CashFlowKind.OPERATIONS),
        ]

    def test_no_refinance_event_when_cash_out_is_zero(self):
        events = assemble_equity_cash_flows(_schedule(1, [100]), 1_000, 0)
        assert all(e.kind != CashFlowKind.REFINANCE for e in events)

    def test_negative_operating_cash_flow_keeps_sign(self):
        events = assemble_equity_cash_flows(_schedule(1, [-25, 40]), 1_000, 0)
        assert events[1].amount == -25

    def test_negative_period_rejected(self):
        with pytest.raises(ValueError):
            CashFlowEvent(-1, 100, CashFlowKind.OPERATIONS)


class TestUnleveredCashFlows:
    """Tests for the property-level series."""

    def test_cost_operations_and_sale(self):
        events = assemble_unlevered_cash_flows(_schedule(1, [100, 110]), 5_000, 6_000)

        assert events[0].amount == -5_000
        assert [(e.period, e.amount) for e in events[1:3]] == [(2, 150), (3, 160)]
        assert events[-1] == CashFlowEvent(3, 6_000, CashFlowKind.REVERSION)

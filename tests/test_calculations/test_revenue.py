"""Tests for stabilized revenue, expenses, and financing metrics."""

import dataclasses

import pytest

from proforma.calculations.costs import calculate_development_costs
from proforma.calculations.metrics import (
    calculate_deal_metrics,
    calculate_financing,
    capitalize,
    ratio_or_none,
)
from proforma.calculations.revenue import (
    calculate_egi,
    calculate_stabilized_operations,
    calculate_year_one_rent,
    escalate,
)
from proforma.errors import ConfigurationError
from proforma.models.lookups import PropertyType


class TestYearOneRent:
    """Tests for year-1 rent."""

    def test_retail_rent_roll(self, retail_inputs):
        """2800x47 + 1200x47 + 2500x45 + 2500x45 = 376,700 exactly."""
        rent = calculate_year_one_rent(retail_inputs, PropertyType.RETAIL, 9_000)
        assert rent == 376_700

    def test_office_rent_on_rentable_area(self, office_inputs):
        """Office rent is rentable SF x rent per SF."""
        rent = calculate_year_one_rent(office_inputs, PropertyType.OFFICE, 11_700)
        assert rent == pytest.approx(216_450)

    def test_egi(self):
        assert calculate_egi(100_000, 5) == pytest.approx(95_000)


class TestStabilizedOperations:
    """Tests for year-1 operating statement."""

    def test_retail_noi(self, retail_inputs):
        """Retail NOI derives from the 376,700 rent figure."""
        ops = calculate_stabilized_operations(retail_inputs, PropertyType.RETAIL, 9_000)

        assert ops.egi == pytest.approx(357_865)
        assert ops.management_fee == pytest.approx(357_865 * 0.03)
        assert ops.operating_expenses == pytest.approx(10_735.95 + 49_500 + 2_250)
        assert ops.property_tax == pytest.approx(22_500)  # 2.50/SF default
        assert ops.noi == pytest.approx(272_879.05)
        assert ops.reserves == pytest.approx(7_534)
        assert ops.cash_flow_before_debt == pytest.approx(265_345.05)

    def test_property_tax_override(self, retail_inputs):
        """A per-project tax rate replaces the 2.50/SF default."""
        inputs = dataclasses.replace(retail_inputs, property_tax_per_sf=1.75)
        ops = calculate_stabilized_operations(inputs, PropertyType.RETAIL, 9_000)

        assert ops.property_tax == pytest.approx(15_750)


class TestFinancing:
    """Tests for loan sizing and equity."""

    def test_retail_financing(self, retail_inputs):
        costs = calculate_development_costs(retail_inputs, PropertyType.RETAIL)
        ops = calculate_stabilized_operations(retail_inputs, PropertyType.RETAIL, 9_000)
        financing = calculate_financing(retail_inputs, costs, ops)

        assert financing.construction_loan.loan_amount == pytest.approx(1_039_500)
        assert financing.construction_loan.interest == pytest.approx(49_376.25)
        assert financing.all_in_cost == pytest.approx(1_534_376.25)
        assert financing.equity_required == pytest.approx(494_876.25)
        assert financing.stabilized_value == pytest.approx(272_879.05 / 0.07)
        assert financing.permanent_loan.loan_amount == pytest.approx(272_879.05 / 0.07 * 0.75)
        assert financing.refinance_cash_out == pytest.approx(
            272_879.05 / 0.07 * 0.75 - 1_039_500 - 49_376.25
        )

    def test_cash_out_floors_at_zero(self, office_inputs):
        """Office take-out loan is smaller than the construction loan."""
        costs = calculate_development_costs(office_inputs, PropertyType.OFFICE)
        ops = calculate_stabilized_operations(office_inputs, PropertyType.OFFICE, 11_700)
        financing = calculate_financing(office_inputs, costs, ops)

        assert financing.refinance_cash_out == 0.0
        assert financing.value_creation < 0

    def test_zero_cap_rate_is_an_error(self):
        with pytest.raises(ConfigurationError) as exc_info:
            capitalize(100_000, 0, "going_in_cap_rate")

        assert exc_info.value.field == "going_in_cap_rate"


class TestDealMetrics:
    """Tests for DSCR, debt yield, yield on cost, and margin."""

    def test_retail_metrics(self, retail_inputs):
        costs = calculate_development_costs(retail_inputs, PropertyType.RETAIL)
        ops = calculate_stabilized_operations(retail_inputs, PropertyType.RETAIL, 9_000)
        financing = calculate_financing(retail_inputs, costs, ops)
        metrics = calculate_deal_metrics(ops, financing)

        assert metrics.dscr == pytest.approx(
            ops.cash_flow_before_debt / financing.permanent_loan.annual_debt_service
        )
        assert metrics.debt_yield == pytest.approx(0.0933, abs=1e-4)
        assert metrics.yield_on_cost == pytest.approx(272_879.05 / 1_534_376.25)

    def test_no_debt_gives_not_applicable(self, retail_inputs):
        """With a zero LTV, DSCR and debt yield are None, never inf."""
        inputs = dataclasses.replace(retail_inputs, permanent_loan_ltv=0)
        costs = calculate_development_costs(inputs, PropertyType.RETAIL)
        ops = calculate_stabilized_operations(inputs, PropertyType.RETAIL, 9_000)
        metrics = calculate_deal_metrics(ops, calculate_financing(inputs, costs, ops))

        assert metrics.dscr is None
        assert metrics.debt_yield is None
        assert metrics.yield_on_cost is not None

    def test_ratio_or_none(self):
        assert ratio_or_none(1.0, 0) is None
        assert ratio_or_none(3.0, 2.0) == 1.5


class TestEscalate:
    """Tests for compound growth."""

    def test_year_one_unchanged(self):
        assert escalate(100_000, 0, 3) == 100_000

    def test_compounds(self):
        assert escalate(100_000, 2, 3) == pytest.approx(106_090)

"""Tests for the end-to-end calculate_deal pipeline."""

import dataclasses

import numpy_financial as npf
import pytest

from proforma.calculations.cash_flows import CashFlowKind
from proforma.calculations.deal import calculate_deal
from proforma.errors import ConfigurationError, UnsupportedPropertyTypeError
from proforma.models.lookups import PropertyType
from proforma.models.waterfall import WaterfallConfig


class TestPropertyTypes:
    """Only retail and office have formula branches."""

    @pytest.mark.parametrize("property_type", ["hotel", "condo", "senior", "mixed", PropertyType.HOTEL])
    def test_unsupported_types_rejected(self, retail_inputs, property_type):
        with pytest.raises(UnsupportedPropertyTypeError) as exc_info:
            calculate_deal(retail_inputs, property_type)

        assert exc_info.value.field == "property_type"
        assert "not yet supported" in str(exc_info.value)

    def test_unknown_type_is_configuration_error(self, retail_inputs):
        with pytest.raises(ConfigurationError) as exc_info:
            calculate_deal(retail_inputs, "warehouse")

        assert exc_info.value.value == "warehouse"

    def test_string_tag_accepted(self, retail_inputs):
        result = calculate_deal(retail_inputs, "retail")
        assert result.property_type == PropertyType.RETAIL


class TestRetailDeal:
    """Retail preset through the full pipeline."""

    def test_rent_and_noi(self, retail_result):
        assert retail_result.operations.gross_rent == 376_700
        assert retail_result.operations.noi == pytest.approx(272_879.05)
        assert retail_result.financing.stabilized_value == pytest.approx(272_879.05 / 0.07)

    def test_projection_length(self, retail_result):
        assert len(retail_result.projections) == 1 + 10

    def test_equity_series(self, retail_result):
        """Equity check at 0, cash-out at refinance, then ten operating years."""
        events = retail_result.equity_cash_flows

        assert events[0].amount == pytest.approx(-494_876.25)
        assert events[1].kind == CashFlowKind.REFINANCE
        assert events[1].period == 1
        assert events[1].amount == pytest.approx(retail_result.financing.refinance_cash_out)
        assert [e.period for e in events[2:]] == list(range(2, 12))

    def test_returns(self, retail_result):
        assert retail_result.equity_irr.converged
        assert retail_result.equity_irr.rate > 0
        assert retail_result.unlevered_irr.converged
        assert 0 < retail_result.unlevered_irr.rate < 1
        assert retail_result.equity_multiple > 1

    def test_exit(self, retail_result):
        final_year = retail_result.projections[-1]
        exit_analysis = retail_result.exit_analysis

        assert exit_analysis.gross_sale_price == pytest.approx(final_year.noi / 0.075)
        assert exit_analysis.selling_costs == pytest.approx(exit_analysis.gross_sale_price * 0.02)
        assert exit_analysis.net_proceeds == pytest.approx(
            exit_analysis.net_sale_price - final_year.ending_loan_balance
        )

    def test_waterfall_conservation(self, retail_result):
        waterfall = retail_result.waterfall
        positive = sum(e.amount for e in retail_result.equity_cash_flows if e.amount > 0)

        assert waterfall.lp_total + waterfall.gp_total == pytest.approx(positive)
        assert waterfall.lp_capital + waterfall.gp_capital == pytest.approx(
            retail_result.financing.equity_required
        )

    def test_deterministic(self, retail_inputs, retail_result):
        again = calculate_deal(retail_inputs, PropertyType.RETAIL)
        assert again.equity_irr == retail_result.equity_irr
        assert again.projections == retail_result.projections


class TestOfficeDeal:
    """Office preset through the full pipeline."""

    def test_costs(self, office_result):
        assert office_result.costs.total_project_cost == pytest.approx(3_492_090.98)
        assert office_result.operations.gross_rent == pytest.approx(216_450)

    def test_no_cash_out_no_refinance_event(self, office_result):
        assert office_result.financing.refinance_cash_out == 0
        assert all(e.kind != CashFlowKind.REFINANCE for e in office_result.equity_cash_flows)

    def test_negative_margin(self, office_result):
        assert office_result.metrics.development_margin < 0

    def test_no_waterfall_without_config(self, office_result):
        assert office_result.waterfall is None

    def test_disabled_waterfall_skipped(self, office_inputs):
        result = calculate_deal(office_inputs, PropertyType.OFFICE, WaterfallConfig(enabled=False))
        assert result.waterfall is None


class TestConfigurationErrors:
    """Invalid numeric configuration fails loudly."""

    def test_zero_exit_cap(self, retail_inputs):
        inputs = dataclasses.replace(retail_inputs, exit_cap_rate=0)

        with pytest.raises(ConfigurationError) as exc_info:
            calculate_deal(inputs, PropertyType.RETAIL)

        assert exc_info.value.field == "exit_cap_rate"

    def test_zero_going_in_cap(self, retail_inputs):
        inputs = dataclasses.replace(retail_inputs, going_in_cap_rate=0)

        with pytest.raises(ConfigurationError) as exc_info:
            calculate_deal(inputs, PropertyType.RETAIL)

        assert exc_info.value.field == "going_in_cap_rate"


class TestLossMakingDeals:
    """Deals that lose money still produce consistent results."""

    def test_negative_noi_supports_no_permanent_loan(self, retail_inputs):
        inputs = dataclasses.replace(retail_inputs, operating_expenses_per_sf=60)
        result = calculate_deal(inputs, PropertyType.RETAIL)

        assert result.operations.noi < 0
        assert result.financing.stabilized_value < 0
        assert result.financing.permanent_loan.loan_amount == 0
        assert result.financing.refinance_cash_out == 0
        assert result.metrics.dscr is None
        assert result.metrics.debt_yield is None
        assert all(row.ending_loan_balance == 0 for row in result.projections)
        assert all(row.debt_service == 0 for row in result.projections)

    def test_negative_noi_exit_has_no_loan_payoff(self, retail_inputs):
        inputs = dataclasses.replace(retail_inputs, operating_expenses_per_sf=60)
        exit_analysis = calculate_deal(inputs, PropertyType.RETAIL).exit_analysis

        assert exit_analysis.loan_payoff == 0
        assert exit_analysis.net_sale_price < 0
        assert exit_analysis.net_proceeds == pytest.approx(exit_analysis.net_sale_price)

    def test_negative_noi_has_no_equity_irr(self, retail_inputs):
        """Every equity flow is an outflow, so there is no rate to solve for."""
        inputs = dataclasses.replace(retail_inputs, operating_expenses_per_sf=60)
        result = calculate_deal(inputs, PropertyType.RETAIL)

        assert all(e.amount < 0 for e in result.equity_cash_flows)
        assert result.equity_irr.rate is None

    def test_overbuilt_deal_has_negative_equity_irr(self, retail_inputs):
        """Equity far above ten years of cash flow gives a converged loss."""
        inputs = dataclasses.replace(retail_inputs, construction_shell_per_sf=3_000, permanent_loan_ltv=0)
        result = calculate_deal(inputs, PropertyType.RETAIL)

        dense = [0.0] * (result.equity_cash_flows[-1].period + 1)
        for event in result.equity_cash_flows:
            dense[event.period] += event.amount

        assert result.equity_irr.converged
        assert result.equity_irr.rate < 0
        assert result.equity_irr.rate == pytest.approx(npf.irr(dense), abs=1e-4)

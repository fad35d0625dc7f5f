"""Tests for display formatting of deal results."""

import dataclasses

import pytest

from proforma.calculations.deal import calculate_deal
from proforma.export.display import (
    NOT_APPLICABLE,
    format_deal_result,
    format_percent,
    format_ratio,
    format_summary_table,
    round_currency,
)
from proforma.models.lookups import PropertyType


class TestFormatters:
    """Tests for the individual formatters."""

    @pytest.mark.parametrize("value,expected", [(1.4, 1), (1.5, 2), (2.5, 3), (-1.4, -1), (-2.5, -2), (376_700.0, 376_700)])
    def test_round_currency(self, value, expected):
        assert round_currency(value) == expected

    def test_percent_two_decimals(self):
        assert format_percent(0.14523) == "14.52"

    def test_percent_one_decimal(self):
        assert format_percent(0.0933, 1) == "9.3"

    def test_ratio(self):
        assert format_ratio(1.0817) == "1.08"

    @pytest.mark.parametrize("value", [None, float("inf"), float("nan")])
    def test_not_applicable(self, value):
        assert format_percent(value) == NOT_APPLICABLE
        assert format_ratio(value) == NOT_APPLICABLE


class TestFormatDealResult:
    """Tests for the full display dict."""

    def test_monetary_fields_are_ints(self, retail_result):
        formatted = format_deal_result(retail_result)

        assert formatted["operations"]["gross_rent"] == 376_700
        assert formatted["operations"]["noi"] == 272_879
        assert formatted["costs"]["total_project_cost"] == 1_485_000
        assert isinstance(formatted["financing"]["equity_required"], int)
        assert all(isinstance(row["noi"], int) for row in formatted["projections"])

    def test_precision(self, retail_result):
        formatted = format_deal_result(retail_result)

        assert formatted["metrics"]["dscr"] == f"{retail_result.metrics.dscr:.2f}"
        assert formatted["metrics"]["debt_yield"] == "9.3"
        assert formatted["metrics"]["yield_on_cost"] == f"{retail_result.metrics.yield_on_cost * 100:.1f}"
        assert formatted["returns"]["equity_irr"] == f"{retail_result.equity_irr.rate * 100:.2f}"
        assert formatted["financing"]["permanent_rate"] == "7.50"
        assert formatted["valuation"]["going_in_cap_rate"] == "7.00"

    def test_not_applicable_ratios(self, retail_inputs):
        """Zero debt renders DSCR and debt yield as N/A."""
        inputs = dataclasses.replace(retail_inputs, permanent_loan_ltv=0)
        formatted = format_deal_result(calculate_deal(inputs, PropertyType.RETAIL))

        assert formatted["metrics"]["dscr"] == NOT_APPLICABLE
        assert formatted["metrics"]["debt_yield"] == NOT_APPLICABLE

    def test_waterfall_section(self, retail_result, office_result):
        assert format_deal_result(retail_result)["waterfall"]["lp_capital"] == round_currency(
            retail_result.waterfall.lp_capital
        )
        assert format_deal_result(office_result)["waterfall"] is None


class TestSummaryTable:
    """Tests for the text summary."""

    def test_contains_key_lines(self, retail_result):
        table = format_summary_table(retail_result)

        assert "Retail Center" in table
        assert "(Retail)" in table
        assert "1,485,000" in table
        assert "376,700" in table
        assert "LP Distributions" in table

    def test_not_applicable_shown(self, retail_inputs):
        inputs = dataclasses.replace(retail_inputs, permanent_loan_ltv=0)
        table = format_summary_table(calculate_deal(inputs, PropertyType.RETAIL))

        assert NOT_APPLICABLE in table

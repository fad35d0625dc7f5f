"""Tests for the LP/GP equity waterfall."""

import pytest

from proforma.calculations.cash_flows import CashFlowEvent, CashFlowKind
from proforma.calculations.waterfall import run_waterfall
from proforma.errors import ConfigurationError
from proforma.models.waterfall import PromoteTier, WaterfallConfig, default_waterfall_config


def _events(amounts_by_period):
    return [
        CashFlowEvent(period, amount, CashFlowKind.INVESTMENT if amount < 0 else CashFlowKind.OPERATIONS)
        for period, amount in amounts_by_period
    ]


class TestWaterfallConfig:
    """Tests for waterfall configuration."""

    def test_default_config(self):
        config = default_waterfall_config()

        assert config.enabled
        assert config.preferred_return_rate == 8.0
        assert config.catch_up_percent == 50.0
        assert config.gp_contribution_percent == 10.0
        assert [(t.hurdle_irr, t.lp_split, t.gp_split) for t in config.promote_tiers] == [
            (12.0, 80.0, 20.0), (18.0, 70.0, 30.0), (25.0, 60.0, 40.0),
        ]

    def test_default_config_is_a_fresh_value(self):
        assert default_waterfall_config() == default_waterfall_config()
        assert default_waterfall_config() is not default_waterfall_config()

    def test_splits_must_sum_to_100(self):
        with pytest.raises(ConfigurationError):
            PromoteTier(hurdle_irr=12, lp_split=80, gp_split=25)

    def test_enabled_requires_a_tier(self):
        with pytest.raises(ConfigurationError):
            WaterfallConfig(enabled=True, promote_tiers=())


class TestWaterfallSteps:
    """Hand-calculated two-distribution example.

    Equity $1,000 (LP $900 / GP $100), 8% pref, 50% catch-up, 80/20 promote.
    Period 1: $500 -> all return of capital (LP 450, GP 50).
    Period 2: $1,000 -> ROC (LP 450, GP 50), pref (LP 144, GP 16),
    catch-up GP 170, promote LP 136 / GP 34.
    """

    @pytest.fixture
    def result(self):
        events = _events([(0, -1_000), (1, 500), (2, 1_000)])
        return run_waterfall(events, 1_000, default_waterfall_config())

    def test_capital_split(self, result):
        assert result.lp_capital == pytest.approx(900)
        assert result.gp_capital == pytest.approx(100)

    def test_first_distribution_returns_capital(self, result):
        first = result.periods[0]

        assert first.lp_capital_return == pytest.approx(450)
        assert first.gp_capital_return == pytest.approx(50)
        assert first.lp_preferred == 0
        assert first.gp_catch_up == 0

    def test_second_distribution_breakdown(self, result):
        second = result.periods[1]

        assert second.lp_capital_return == pytest.approx(450)
        assert second.gp_capital_return == pytest.approx(50)
        assert second.lp_preferred == pytest.approx(144)
        assert second.gp_preferred == pytest.approx(16)
        assert second.gp_catch_up == pytest.approx(170)
        assert second.lp_promote == pytest.approx(136)
        assert second.gp_promote == pytest.approx(34)

    def test_cumulative_distributions(self, result):
        assert [(d.period, d.amount, d.cumulative) for d in result.lp_distributions] == [
            (1, pytest.approx(450), pytest.approx(450)),
            (2, pytest.approx(730), pytest.approx(1_180)),
        ]
        assert result.gp_distributions[-1].cumulative == pytest.approx(320)

    def test_multiples(self, result):
        assert result.lp_multiple == pytest.approx(1_180 / 900)
        assert result.gp_multiple == pytest.approx(3.2)


class TestWaterfallInvariants:
    """Conservation and state carried across events."""

    @pytest.mark.parametrize("amounts", [
        [(0, -1_000_000), (1, 250_000), (2, 90_000), (3, 95_000), (4, 1_400_000)],
        [(0, -500_000), (1, -20_000), (2, 30_000), (3, 2_000_000)],
        [(0, -750_000), (2, 10_000)],
    ])
    def test_conservation(self, amounts):
        """LP + GP distributions equal the positive cash flows."""
        events = _events(amounts)
        result = run_waterfall(events, -amounts[0][1], default_waterfall_config())

        positive = sum(amount for _, amount in amounts if amount > 0)
        assert result.lp_total + result.gp_total == pytest.approx(positive)
        assert result.lp_capital + result.gp_capital == pytest.approx(-amounts[0][1])

    def test_negative_events_skipped(self):
        result = run_waterfall(_events([(0, -1_000), (1, -50), (2, 200)]), 1_000, default_waterfall_config())
        assert [p.period for p in result.periods] == [2]

    def test_capital_never_over_returned(self):
        events = _events([(0, -1_000)] + [(p, 600) for p in range(1, 6)])
        result = run_waterfall(events, 1_000, default_waterfall_config())

        assert sum(p.lp_capital_return for p in result.periods) == pytest.approx(900)
        assert sum(p.gp_capital_return for p in result.periods) == pytest.approx(100)

    def test_promote_uses_first_tier_only(self):
        """Large distributions still split by the first tier."""
        events = _events([(0, -1_000), (1, 1_000_000)])
        period = run_waterfall(events, 1_000, default_waterfall_config()).periods[0]

        assert period.gp_promote / (period.lp_promote + period.gp_promote) == pytest.approx(0.20)

    def test_zero_equity_has_no_multiple(self):
        result = run_waterfall(_events([(1, 100)]), 0, default_waterfall_config())

        assert result.lp_multiple is None
        assert result.total_distributed == pytest.approx(100)

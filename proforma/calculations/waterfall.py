"""LP/GP equity waterfall.

Each positive equity distribution flows through four steps in order:

1. Return of capital, LP and GP pro-rata by capital share
2. Preferred return on invested capital, LP first, then GP
3. GP catch-up on a fixed share of what remains
4. Promote split of the remainder

Capital returned, preferred return paid, and cumulative distributions
carry across events; nothing resets between periods.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import ConfigurationError
from ..models.waterfall import WaterfallConfig
from .cash_flows import CashFlowEvent
from .metrics import ratio_or_none

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Distribution:
    """One side's distribution in a period."""

    period: int
    amount: float
    cumulative: float


@dataclass(frozen=True)
class WaterfallPeriod:
    """Breakdown of a single distribution through the waterfall steps."""

    period: int
    cash_available: float

    # === Return of Capital ===
    lp_capital_return: float
    gp_capital_return: float

    # === Preferred Return ===
    lp_preferred: float
    gp_preferred: float

    # === Catch-up and Promote ===
    gp_catch_up: float
    lp_promote: float
    gp_promote: float

    @property
    def lp_total(self) -> float:
        return self.lp_capital_return + self.lp_preferred + self.lp_promote

    @property
    def gp_total(self) -> float:
        return self.gp_capital_return + self.gp_preferred + self.gp_catch_up + self.gp_promote


@dataclass
class WaterfallResult:
    """Results of running distributions through the waterfall."""

    lp_capital: float
    gp_capital: float

    periods: List[WaterfallPeriod] = field(default_factory=list)
    lp_distributions: List[Distribution] = field(default_factory=list)
    gp_distributions: List[Distribution] = field(default_factory=list)

    lp_total: float = 0.0
    gp_total: float = 0.0
    lp_multiple: Optional[float] = None
    gp_multiple: Optional[float] = None

    @property
    def total_distributed(self) -> float:
        return self.lp_total + self.gp_total


@dataclass
class _WaterfallState:
    """Running balances carried from one distribution to the next."""

    lp_capital_returned: float = 0.0
    gp_capital_returned: float = 0.0
    lp_preferred_paid: float = 0.0
    gp_preferred_paid: float = 0.0
    lp_cumulative: float = 0.0
    gp_cumulative: float = 0.0


def _unpaid_preferred(capital: float, rate: float, period: int, paid: float) -> float:
    """Accrued preferred return not yet paid.

    Accrual is simple interest on invested capital to the absolute
    period number, not from the previous distribution.
    """
    accrued = capital * rate / 100 * period
    return max(0.0, accrued - paid)


def run_waterfall(
    events: List[CashFlowEvent],
    total_equity: float,
    config: WaterfallConfig,
) -> WaterfallResult:
    """Allocate equity distributions between LP and GP.

    Args:
        events: Equity cash flow events; only positive amounts are distributed.
        total_equity: Equity invested (LP + GP).
        config: Waterfall rules. Promote uses the first tier only.

    Returns:
        WaterfallResult with per-period breakdowns and per-side totals.

    Example:
        >>> result = run_waterfall(events, 1_000_000, default_waterfall_config())
        >>> result.lp_capital
        900000.0
    """
    lp_share = config.lp_contribution_percent
    gp_share = config.gp_contribution_percent
    lp_capital = total_equity * lp_share / 100
    gp_capital = total_equity * gp_share / 100

    if not config.promote_tiers:
        raise ConfigurationError("promote_tiers", config.promote_tiers, "at least one tier is required")
    tier = config.promote_tiers[0]
    result = WaterfallResult(lp_capital=lp_capital, gp_capital=gp_capital)
    state = _WaterfallState()

    for event in events:
        if event.amount <= 0:
            continue

        pool = event.amount

        # Step 1: return of capital
        lp_capital_return = min(lp_capital - state.lp_capital_returned, pool * lp_share / 100)
        gp_capital_return = min(gp_capital - state.gp_capital_returned, pool * gp_share / 100)
        lp_capital_return = max(0.0, lp_capital_return)
        gp_capital_return = max(0.0, gp_capital_return)
        state.lp_capital_returned += lp_capital_return
        state.gp_capital_returned += gp_capital_return
        remaining = pool - lp_capital_return - gp_capital_return

        # Step 2: preferred return
        lp_unpaid = _unpaid_preferred(lp_capital, config.preferred_return_rate, event.period, state.lp_preferred_paid)
        lp_preferred = min(remaining, lp_unpaid)
        state.lp_preferred_paid += lp_preferred
        remaining -= lp_preferred

        gp_unpaid = _unpaid_preferred(gp_capital, config.preferred_return_rate, event.period, state.gp_preferred_paid)
        gp_preferred = min(remaining, gp_unpaid)
        state.gp_preferred_paid += gp_preferred
        remaining -= gp_preferred

        # Step 3: catch-up
        gp_catch_up = remaining * config.catch_up_percent / 100
        remaining -= gp_catch_up

        # Step 4: promote
        lp_promote = remaining * tier.lp_split / 100
        gp_promote = remaining * tier.gp_split / 100

        breakdown = WaterfallPeriod(
            period=event.period,
            cash_available=pool,
            lp_capital_return=lp_capital_return,
            gp_capital_return=gp_capital_return,
            lp_preferred=lp_preferred,
            gp_preferred=gp_preferred,
            gp_catch_up=gp_catch_up,
            lp_promote=lp_promote,
            gp_promote=gp_promote,
        )
        result.periods.append(breakdown)

        state.lp_cumulative += breakdown.lp_total
        state.gp_cumulative += breakdown.gp_total
        result.lp_distributions.append(
            Distribution(period=event.period, amount=breakdown.lp_total, cumulative=state.lp_cumulative)
        )
        result.gp_distributions.append(
            Distribution(period=event.period, amount=breakdown.gp_total, cumulative=state.gp_cumulative)
        )

    result.lp_total = state.lp_cumulative
    result.gp_total = state.gp_cumulative
    result.lp_multiple = ratio_or_none(result.lp_total, lp_capital)
    result.gp_multiple = ratio_or_none(result.gp_total, gp_capital)

    logger.debug(
        "Waterfall distributed %.2f over %d periods (LP %.2f, GP %.2f)",
        result.total_distributed, len(result.periods), result.lp_total, result.gp_total,
    )
    return result

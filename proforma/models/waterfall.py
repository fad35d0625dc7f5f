"""Equity waterfall configuration."""

from dataclasses import dataclass, field
from typing import Tuple

from ..errors import ConfigurationError

SPLIT_TOLERANCE = 1e-9


@dataclass(frozen=True)
class PromoteTier:
    """Profit split above an IRR hurdle (all values in percent)."""

    hurdle_irr: float
    lp_split: float
    gp_split: float

    def __post_init__(self) -> None:
        if abs(self.lp_split + self.gp_split - 100.0) > SPLIT_TOLERANCE:
            raise ConfigurationError(
                "promote_tiers",
                (self.lp_split, self.gp_split),
                "lp_split + gp_split must equal 100",
            )


@dataclass(frozen=True)
class WaterfallConfig:
    """LP/GP distribution rules.

    Attributes:
        enabled: Whether the waterfall is run at all.
        preferred_return_rate: Annual preferred return in percent (simple, not compounded).
        catch_up_percent: Share of post-pref cash paid entirely to GP.
        promote_tiers: Ordered promote tiers. Only the first tier is applied.
        gp_contribution_percent: GP share of total equity.
    """

    enabled: bool = True
    preferred_return_rate: float = 8.0
    catch_up_percent: float = 50.0
    promote_tiers: Tuple[PromoteTier, ...] = field(default_factory=tuple)
    gp_contribution_percent: float = 10.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "promote_tiers", tuple(self.promote_tiers))

        if self.enabled and not self.promote_tiers:
            raise ConfigurationError("promote_tiers", self.promote_tiers, "at least one tier is required")
        if not 0 <= self.gp_contribution_percent <= 100:
            raise ConfigurationError(
                "gp_contribution_percent", self.gp_contribution_percent, "must be between 0 and 100"
            )
        if not 0 <= self.catch_up_percent <= 100:
            raise ConfigurationError("catch_up_percent", self.catch_up_percent, "must be between 0 and 100")

    @property
    def lp_contribution_percent(self) -> float:
        """LP share of total equity."""
        return 100.0 - self.gp_contribution_percent


def default_waterfall_config() -> WaterfallConfig:
    """Build the standard three-tier sponsor/investor waterfall.

    8% preferred return, 50% catch-up, 10% GP co-invest, and promote
    tiers at 12% (80/20), 18% (70/30) and 25% (60/40).
    """
    return WaterfallConfig(
        enabled=True,
        preferred_return_rate=8.0,
        catch_up_percent=50.0,
        promote_tiers=(
            PromoteTier(hurdle_irr=12.0, lp_split=80.0, gp_split=20.0),
            PromoteTier(hurdle_irr=18.0, lp_split=70.0, gp_split=30.0),
            PromoteTier(hurdle_irr=25.0, lp_split=60.0, gp_split=40.0),
        ),
        gp_contribution_percent=10.0,
    )

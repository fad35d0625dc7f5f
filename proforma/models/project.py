"""Project data model containing all inputs for a development pro forma."""

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..errors import ConfigurationError
from .lookups import (
    ArchitecturalFeeMode,
    LandCostMode,
    DEFAULT_PROPERTY_TAX_GROWTH,
    DEFAULT_SELLING_COSTS_PERCENT,
    coerce_enum,
)


@dataclass(frozen=True)
class Tenant:
    """Single suite in the rent roll (non-office property types)."""

    name: str
    sf: float  # Leased square feet
    rent_per_sf: float  # Annual rent per SF
    ti_per_sf: float = 0.0  # Tenant improvement allowance per SF

    @property
    def annual_rent(self) -> float:
        """Annual base rent for this suite."""
        return self.sf * self.rent_per_sf

    @property
    def tenant_improvements(self) -> float:
        """Total TI allowance for this suite."""
        return self.sf * self.ti_per_sf


@dataclass(frozen=True)
class ProjectInput:
    """Complete input parameters for a development pro forma.

    Rates and percentages are whole percents (7.5 means 7.5%).
    Instances are immutable; use ``dataclasses.replace`` to derive
    perturbed copies.
    """

    name: str = "Project"

    # === Areas ===
    gross_sf: float = 0.0
    rentable_percent: float = 100.0
    useable_percent: float = 100.0
    land_acres: float = 0.0

    # === Land ===
    land_cost_mode: LandCostMode = LandCostMode.PER_ACRE
    land_cost_per_acre: float = 0.0
    land_cost_total: float = 0.0
    land_cost_per_site_sf: float = 0.0

    # === Hard Costs (per SF) ===
    construction_shell_per_sf: float = 0.0
    construction_site_per_sf: float = 0.0
    office_ti_per_sf: float = 0.0

    # === Soft Costs ===
    architectural_fee_mode: ArchitecturalFeeMode = ArchitecturalFeeMode.PERCENT
    architectural_percent: float = 0.0  # Percent of hard costs
    architectural_fixed: float = 0.0
    contingency_percent: float = 0.0  # Percent of hard costs
    soft_costs_other: float = 0.0
    development_fee: float = 0.0

    # === Financing ===
    construction_loan_ltc: float = 70.0
    construction_loan_rate: float = 7.0
    construction_months: int = 12
    permanent_loan_ltv: float = 75.0
    permanent_loan_rate: float = 6.0
    permanent_loan_amortization_years: int = 30

    # === Operations ===
    office_rent_per_sf: float = 0.0
    vacancy_rate: float = 5.0
    management_fee_percent: float = 0.0  # Percent of EGI
    operating_expenses_per_sf: float = 0.0
    insurance_per_sf: float = 0.0
    property_tax_per_sf: Optional[float] = None  # None = engine default
    leasing_reserve_percent: float = 0.0  # Percent of gross rent
    capex_reserve_percent: float = 0.0  # Percent of gross rent

    # === Valuation ===
    going_in_cap_rate: float = 7.0
    exit_cap_rate: float = 7.5
    selling_costs_percent: float = DEFAULT_SELLING_COSTS_PERCENT

    # === Growth Rates (Annual) ===
    rent_growth: float = 3.0
    expense_growth: float = 3.0
    property_tax_growth: float = DEFAULT_PROPERTY_TAX_GROWTH

    # === Hold ===
    hold_years: int = 10

    # === Rent Roll ===
    tenants: Tuple[Tenant, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(
            self, "land_cost_mode", coerce_enum(LandCostMode, self.land_cost_mode, "land_cost_mode")
        )
        object.__setattr__(
            self,
            "architectural_fee_mode",
            coerce_enum(ArchitecturalFeeMode, self.architectural_fee_mode, "architectural_fee_mode"),
        )
        object.__setattr__(self, "tenants", tuple(self.tenants))

        if self.gross_sf < 0:
            raise ConfigurationError("gross_sf", self.gross_sf, "must be non-negative")
        if self.construction_months < 0:
            raise ConfigurationError("construction_months", self.construction_months, "must be non-negative")
        if self.hold_years < 1:
            raise ConfigurationError("hold_years", self.hold_years, "must be at least 1")
        for pct_field in ("rentable_percent", "useable_percent"):
            value = getattr(self, pct_field)
            if not 0 <= value <= 100:
                raise ConfigurationError(pct_field, value, "must be between 0 and 100")

    @property
    def construction_years(self) -> int:
        """Number of construction placeholder years (ceil of months / 12)."""
        return math.ceil(self.construction_months / 12)

    @property
    def total_years(self) -> int:
        """Total projection length including construction years."""
        return self.construction_years + self.hold_years

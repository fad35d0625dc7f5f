"""Development cost buildup: areas, land, hard costs, and soft costs."""

from dataclasses import dataclass

from ..errors import ConfigurationError
from ..models.lookups import (
    ArchitecturalFeeMode,
    LandCostMode,
    PropertyType,
    PROPERTY_TYPE_PARAMS,
    SQUARE_FEET_PER_ACRE,
)
from ..models.project import ProjectInput


@dataclass(frozen=True)
class AreaResult:
    """Building and site areas in square feet."""

    gross_sf: float
    rentable_sf: float
    useable_sf: float
    site_area_sf: float


@dataclass(frozen=True)
class DevelopmentCosts:
    """Results of the development cost buildup."""

    areas: AreaResult
    land_cost: float

    # Hard costs
    shell_cost: float
    site_cost: float
    tenant_improvements: float
    hard_costs: float

    # Soft costs
    architectural_fee: float
    contingency: float
    other_soft_costs: float
    development_fee: float
    soft_costs: float

    total_project_cost: float


def calculate_areas(inputs: ProjectInput) -> AreaResult:
    """Calculate rentable, useable, and site areas.

    Args:
        inputs: Project inputs.

    Returns:
        AreaResult with all areas in SF.

    Example:
        >>> areas = calculate_areas(ProjectInput(gross_sf=12_000, rentable_percent=97.5, land_acres=2.33))
        >>> areas.rentable_sf
        11700.0
        >>> areas.site_area_sf
        101494.8
    """
    return AreaResult(
        gross_sf=inputs.gross_sf,
        rentable_sf=inputs.gross_sf * inputs.rentable_percent / 100,
        useable_sf=inputs.gross_sf * inputs.useable_percent / 100,
        site_area_sf=inputs.land_acres * SQUARE_FEET_PER_ACRE,
    )


def calculate_tenant_improvements(inputs: ProjectInput, property_type: PropertyType) -> float:
    """Total tenant improvement allowance.

    Office applies a single TI rate to the gross area; other types
    sum the allowance of each suite in the rent roll.
    """
    if PROPERTY_TYPE_PARAMS[property_type].uses_tenant_roll:
        return sum(tenant.tenant_improvements for tenant in inputs.tenants)
    return inputs.gross_sf * inputs.office_ti_per_sf


def calculate_land_cost(inputs: ProjectInput, site_area_sf: float) -> float:
    """Land cost selected by the land cost mode.

    Raises:
        ConfigurationError: If the mode is not a known LandCostMode.
    """
    mode = inputs.land_cost_mode
    if mode == LandCostMode.PER_ACRE:
        return inputs.land_acres * inputs.land_cost_per_acre
    elif mode == LandCostMode.TOTAL:
        return inputs.land_cost_total
    elif mode == LandCostMode.PER_SITE_SF:
        return site_area_sf * inputs.land_cost_per_site_sf
    raise ConfigurationError("land_cost_mode", mode)


def calculate_site_cost(inputs: ProjectInput, property_type: PropertyType, site_area_sf: float) -> float:
    """Site work cost.

    Office prices site work on the gross building area; other types
    price the site area not covered by the building.
    """
    if property_type == PropertyType.OFFICE:
        return inputs.gross_sf * inputs.construction_site_per_sf
    return (site_area_sf - inputs.gross_sf) * inputs.construction_site_per_sf


def calculate_architectural_fee(inputs: ProjectInput, hard_costs: float) -> float:
    """Architectural fee as a percent of hard costs or a fixed amount.

    Raises:
        ConfigurationError: If the mode is not a known ArchitecturalFeeMode.
    """
    mode = inputs.architectural_fee_mode
    if mode == ArchitecturalFeeMode.PERCENT:
        return hard_costs * inputs.architectural_percent / 100
    elif mode == ArchitecturalFeeMode.FIXED:
        return inputs.architectural_fixed
    raise ConfigurationError("architectural_fee_mode", mode)


def calculate_development_costs(inputs: ProjectInput, property_type: PropertyType) -> DevelopmentCosts:
    """Calculate the full development budget.

    Total Project Cost = Land + Hard Costs + Soft Costs, where
    hard costs are shell + site + TI and soft costs are
    architectural fee + contingency + other soft costs + development fee.

    Args:
        inputs: Project inputs.
        property_type: Supported property type (retail or office).

    Returns:
        DevelopmentCosts with every component unrounded.
    """
    areas = calculate_areas(inputs)
    land_cost = calculate_land_cost(inputs, areas.site_area_sf)

    shell_cost = inputs.gross_sf * inputs.construction_shell_per_sf
    site_cost = calculate_site_cost(inputs, property_type, areas.site_area_sf)
    tenant_improvements = calculate_tenant_improvements(inputs, property_type)
    hard_costs = shell_cost + site_cost + tenant_improvements

    architectural_fee = calculate_architectural_fee(inputs, hard_costs)
    contingency = hard_costs * inputs.contingency_percent / 100
    soft_costs = architectural_fee + contingency + inputs.soft_costs_other + inputs.development_fee

    return DevelopmentCosts(
        areas=areas,
        land_cost=land_cost,
        shell_cost=shell_cost,
        site_cost=site_cost,
        tenant_improvements=tenant_improvements,
        hard_costs=hard_costs,
        architectural_fee=architectural_fee,
        contingency=contingency,
        other_soft_costs=inputs.soft_costs_other,
        development_fee=inputs.development_fee,
        soft_costs=soft_costs,
        total_project_cost=land_cost + hard_costs + soft_costs,
    )

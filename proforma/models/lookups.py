"""Lookup tables and engine constants for property types and cost modes."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Type, TypeVar

from ..errors import ConfigurationError, UnsupportedPropertyTypeError

logger = logging.getLogger(__name__)


class PropertyType(Enum):
    """Property type selects the cost and rent formula branch."""

    RETAIL = "retail"
    OFFICE = "office"
    HOTEL = "hotel"
    CONDO = "condo"
    SENIOR = "senior"
    MIXED = "mixed"


class LandCostMode(Enum):
    """How the land cost input is expressed."""

    PER_ACRE = "per_acre"  # land_acres x land_cost_per_acre
    TOTAL = "total"  # land_cost_total as a lump sum
    PER_SITE_SF = "per_site_sf"  # site area SF x land_cost_per_site_sf


class ArchitecturalFeeMode(Enum):
    """How the architectural fee is expressed."""

    PERCENT = "percent"  # Percent of hard costs
    FIXED = "fixed"  # Fixed dollar amount


@dataclass(frozen=True)
class PropertyTypeParams:
    """Display and formula-branch parameters for each property type."""

    display_name: str
    supported: bool  # Has an implemented formula branch
    uses_tenant_roll: bool  # Rent and TI come from the tenant list


PROPERTY_TYPE_PARAMS: Dict[PropertyType, PropertyTypeParams] = {
    PropertyType.RETAIL: PropertyTypeParams("Retail", supported=True, uses_tenant_roll=True),
    PropertyType.OFFICE: PropertyTypeParams("Office", supported=True, uses_tenant_roll=False),
    PropertyType.HOTEL: PropertyTypeParams("Hotel", supported=False, uses_tenant_roll=True),
    PropertyType.CONDO: PropertyTypeParams("Condo (For Sale)", supported=False, uses_tenant_roll=True),
    PropertyType.SENIOR: PropertyTypeParams("Senior Living", supported=False, uses_tenant_roll=True),
    PropertyType.MIXED: PropertyTypeParams("Mixed Use", supported=False, uses_tenant_roll=True),
}

# Engine constants
SQUARE_FEET_PER_ACRE = 43_560
DEFAULT_PROPERTY_TAX_PER_SF = 2.50
DEFAULT_PROPERTY_TAX_GROWTH = 2.0  # Percent per year
DEFAULT_SELLING_COSTS_PERCENT = 2.0
CONSTRUCTION_INTEREST_DRAW_FACTOR = 0.5  # Average outstanding balance on a single draw schedule

# Validation thresholds
MIN_DSCR = 1.25
MIN_DEBT_YIELD = 0.08
MIN_DEVELOPMENT_MARGIN = 0.15

E = TypeVar("E", bound=Enum)


def coerce_enum(enum_cls: Type[E], value: Any, field_name: str) -> E:
    """Convert a raw value to an enum member.

    Args:
        enum_cls: Target enum class.
        value: Enum member or its string value.
        field_name: Input field name used in the error message.

    Returns:
        The matching enum member.

    Raises:
        ConfigurationError: If the value matches no member.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ConfigurationError(field_name, value, f"expected one of {[m.value for m in enum_cls]}") from None


def require_supported(property_type: Any) -> PropertyType:
    """Return the property type if it has an implemented formula branch.

    Raises:
        ConfigurationError: If the value is not a known property type.
        UnsupportedPropertyTypeError: If the type is known but not implemented.
    """
    ptype = coerce_enum(PropertyType, property_type, "property_type")
    if not PROPERTY_TYPE_PARAMS[ptype].supported:
        logger.warning("Rejected property type %r: no formula branch", ptype.value)
        raise UnsupportedPropertyTypeError(ptype.value)
    return ptype

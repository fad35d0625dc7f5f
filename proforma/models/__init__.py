"""Data models for the development pro forma engine."""

from .lookups import (
    PropertyType,
    PropertyTypeParams,
    LandCostMode,
    ArchitecturalFeeMode,
    PROPERTY_TYPE_PARAMS,
    SQUARE_FEET_PER_ACRE,
    DEFAULT_PROPERTY_TAX_PER_SF,
    DEFAULT_PROPERTY_TAX_GROWTH,
    DEFAULT_SELLING_COSTS_PERCENT,
    require_supported,
)
from .project import (
    Tenant,
    ProjectInput,
)
from .waterfall import (
    PromoteTier,
    WaterfallConfig,
    default_waterfall_config,
)

__all__ = [
    "PropertyType",
    "PropertyTypeParams",
    "LandCostMode",
    "ArchitecturalFeeMode",
    "PROPERTY_TYPE_PARAMS",
    "SQUARE_FEET_PER_ACRE",
    "DEFAULT_PROPERTY_TAX_PER_SF",
    "DEFAULT_PROPERTY_TAX_GROWTH",
    "DEFAULT_SELLING_COSTS_PERCENT",
    "require_supported",
    "Tenant",
    "ProjectInput",
    "PromoteTier",
    "WaterfallConfig",
    "default_waterfall_config",
]

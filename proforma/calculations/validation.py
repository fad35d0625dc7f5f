"""Underwriting threshold checks on a calculated deal."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List

from ..models.lookups import MIN_DEBT_YIELD, MIN_DEVELOPMENT_MARGIN, MIN_DSCR, PropertyType
from ..models.project import ProjectInput
from .deal import calculate_deal

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """How serious a validation finding is."""
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class ValidationWarning:
    """A threshold the deal does not meet."""

    severity: Severity
    field: str
    message: str


def validate_deal(
    inputs: ProjectInput,
    property_type: PropertyType,
    min_dscr: float = MIN_DSCR,
    min_debt_yield: float = MIN_DEBT_YIELD,
    min_development_margin: float = MIN_DEVELOPMENT_MARGIN,
) -> List[ValidationWarning]:
    """Run the pro forma once and check lender and return thresholds.

    Checks, in order:
        - DSCR below ``min_dscr`` (warning)
        - Debt yield below ``min_debt_yield`` (warning)
        - Development margin below ``min_development_margin`` (info)

    Metrics that are not applicable (zero denominator) are skipped.

    Args:
        inputs: Project inputs.
        property_type: Property type tag.
        min_dscr: Minimum debt service coverage (x).
        min_debt_yield: Minimum debt yield as decimal.
        min_development_margin: Minimum development margin as decimal.

    Returns:
        Ordered list of ValidationWarning (empty when all checks pass).
    """
    metrics = calculate_deal(inputs, property_type).metrics
    warnings: List[ValidationWarning] = []

    if metrics.dscr is not None and metrics.dscr < min_dscr:
        warnings.append(ValidationWarning(
            severity=Severity.WARNING,
            field="dscr",
            message=f"DSCR of {metrics.dscr:.2f}x is below the {min_dscr:.2f}x lender minimum",
        ))

    if metrics.debt_yield is not None and metrics.debt_yield < min_debt_yield:
        warnings.append(ValidationWarning(
            severity=Severity.WARNING,
            field="debt_yield",
            message=f"Debt yield of {metrics.debt_yield:.1%} is below the {min_debt_yield:.1%} minimum",
        ))

    if metrics.development_margin is not None and metrics.development_margin < min_development_margin:
        warnings.append(ValidationWarning(
            severity=Severity.INFO,
            field="development_margin",
            message=(
                f"Development margin of {metrics.development_margin:.1%} is below "
                f"the {min_development_margin:.0%} target"
            ),
        ))

    if warnings:
        logger.debug("Deal %r raised %d validation warnings", inputs.name, len(warnings))
    return warnings

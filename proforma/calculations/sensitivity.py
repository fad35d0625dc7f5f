"""Sensitivity analysis: rerun the pro forma with one input perturbed.

Each scenario scales a single ProjectInput field by (1 + adjustment%)
and reruns calculate_deal(). Scenarios share nothing, so they can run
on a thread pool.

Usage:
    from proforma.calculations.sensitivity import SensitivityVariable, run_sensitivity

    variables = [
        SensitivityVariable("Exit Cap Rate", "exit_cap_rate", [-10, 0, 10]),
        SensitivityVariable("Construction Cost", "construction_shell_per_sf", [-10, 0, 10]),
    ]
    results = run_sensitivity(inputs, PropertyType.RETAIL, variables, parallel=True)
"""

import concurrent.futures
import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..errors import ConfigurationError, ProFormaError
from ..export.display import format_sensitivity_rows
from ..models.lookups import PropertyType
from ..models.project import ProjectInput
from ..models.waterfall import WaterfallConfig
from .deal import calculate_deal

logger = logging.getLogger(__name__)

_FIELD_NAMES = {f.name for f in dataclasses.fields(ProjectInput)}


@dataclass(frozen=True)
class SensitivityVariable:
    """One input to perturb and the percentage adjustments to apply."""

    name: str
    field: str
    ranges: Tuple[float, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "ranges", tuple(self.ranges))


@dataclass(frozen=True)
class SensitivityPoint:
    """Result of a single perturbed run (raw values)."""

    adjustment: float
    value: float
    equity_irr: Optional[float] = None
    equity_irr_converged: bool = False
    development_margin: Optional[float] = None
    dscr: Optional[float] = None
    error: Optional[str] = None


@dataclass
class SensitivityResult:
    """All points for one sensitivity variable, in input order."""

    variable: str
    field: str
    results: List[SensitivityPoint] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a display dict with formatted metrics."""
        return {
            "variable": self.variable,
            "field": self.field,
            "results": format_sensitivity_rows(self.results),
        }


def perturb_input(inputs: ProjectInput, field_name: str, adjustment: float) -> Tuple[ProjectInput, float]:
    """Copy inputs with one numeric field scaled by (1 + adjustment / 100).

    Integer fields are rounded back to int.

    Returns:
        Tuple of (perturbed inputs, new field value).

    Raises:
        ConfigurationError: If the field is unknown or not numeric.
    """
    if field_name not in _FIELD_NAMES:
        raise ConfigurationError("field", field_name, "unknown ProjectInput field")

    current = getattr(inputs, field_name)
    if isinstance(current, bool) or not isinstance(current, (int, float)):
        raise ConfigurationError("field", field_name, "sensitivity requires a numeric field")

    value = current * (1 + adjustment / 100)
    if isinstance(current, int):
        value = int(round(value))

    return dataclasses.replace(inputs, **{field_name: value}), value


def _run_point(
    inputs: ProjectInput,
    property_type: PropertyType,
    field_name: str,
    adjustment: float,
    waterfall_config: Optional[WaterfallConfig],
) -> SensitivityPoint:
    """Run a single perturbed scenario."""
    value = getattr(inputs, field_name) * (1 + adjustment / 100)
    try:
        perturbed, value = perturb_input(inputs, field_name, adjustment)
        result = calculate_deal(perturbed, property_type, waterfall_config)
    except ProFormaError as e:
        logger.warning("Sensitivity %s %+g%% failed: %s", field_name, adjustment, e)
        return SensitivityPoint(adjustment=adjustment, value=value, error=str(e))

    return SensitivityPoint(
        adjustment=adjustment,
        value=value,
        equity_irr=result.equity_irr.rate,
        equity_irr_converged=result.equity_irr.converged,
        development_margin=result.metrics.development_margin,
        dscr=result.metrics.dscr,
    )


def run_sensitivity(
    inputs: ProjectInput,
    property_type: PropertyType,
    variables: Sequence[SensitivityVariable],
    waterfall_config: Optional[WaterfallConfig] = None,
    parallel: bool = False,
    max_workers: Optional[int] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> List[SensitivityResult]:
    """Run every adjustment of every variable against the base inputs.

    Args:
        inputs: Base project inputs (never mutated).
        property_type: Property type for every run.
        variables: Variables and their percentage adjustments.
        waterfall_config: Optional waterfall passed to each run.
        parallel: Run scenarios on a ThreadPoolExecutor.
        max_workers: Thread pool size (default: executor default).
        progress_callback: Optional callback(completed, total).

    Returns:
        One SensitivityResult per variable, points in the given order.

    Raises:
        ConfigurationError: If a variable names an unknown or non-numeric field.
    """
    for variable in variables:
        perturb_input(inputs, variable.field, 0)

    tasks = [
        (variable_index, variable.field, adjustment)
        for variable_index, variable in enumerate(variables)
        for adjustment in variable.ranges
    ]
    total = len(tasks)
    logger.debug("Running %d sensitivity scenarios (parallel=%s)", total, parallel)

    points: List[SensitivityPoint] = []

    if parallel and total > 1:
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(_run_point, inputs, property_type, field_name, adjustment, waterfall_config)
                for _, field_name, adjustment in tasks
            ]

            for i, _ in enumerate(concurrent.futures.as_completed(futures)):
                if progress_callback:
                    progress_callback(i + 1, total)

            points = [future.result() for future in futures]
    else:
        for i, (_, field_name, adjustment) in enumerate(tasks):
            points.append(_run_point(inputs, property_type, field_name, adjustment, waterfall_config))
            if progress_callback:
                progress_callback(i + 1, total)

    results = [SensitivityResult(variable=variable.name, field=variable.field) for variable in variables]
    for (variable_index, _, _), point in zip(tasks, points):
        results[variable_index].results.append(point)

    return results

"""IRR and NPV calculations over period-indexed cash flows.

Implements IRR with Newton-Raphson. Unlike a fixed-grid IRR, periods
come from the events themselves, so two events may share a period and
periods may be skipped.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from ..errors import ConfigurationError
from .cash_flows import CashFlowEvent

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-5
DEFAULT_GUESS = 0.10


@dataclass(frozen=True)
class IRRResult:
    """Outcome of the IRR solver.

    Attributes:
        rate: Annual IRR as decimal, or None when the series has no sign change.
        converged: False when the solver stopped without meeting the tolerance;
            ``rate`` then holds the last iterate.
        iterations: Number of Newton steps taken.
    """
    rate: Optional[float]
    converged: bool
    iterations: int


def calculate_npv(events: List[CashFlowEvent], rate: float) -> float:
    """NPV = sum(amount / (1 + rate) ** period)."""
    return sum(event.amount / (1 + rate) ** event.period for event in events)


def _npv_derivative(events: List[CashFlowEvent], rate: float) -> float:
    """Derivative of NPV with respect to rate (for Newton-Raphson)."""
    return sum(
        -event.period * event.amount / (1 + rate) ** (event.period + 1)
        for event in events
    )


def calculate_irr(
    events: List[CashFlowEvent],
    guess: float = DEFAULT_GUESS,
    tolerance: float = TOLERANCE,
    max_iterations: int = MAX_ITERATIONS,
) -> IRRResult:
    """Calculate IRR using the Newton-Raphson method.

    Iterates r(n+1) = r(n) - NPV / NPV' from ``guess`` until the step
    is smaller than ``tolerance`` or ``max_iterations`` is reached. A step
    that would land at or below -100% is halved until it stays above,
    so deep-loss series still converge.

    Args:
        events: Cash flow events (negative = investment).
        guess: Starting rate (default 10%).
        tolerance: Convergence threshold on the rate step.
        max_iterations: Iteration cap.

    Returns:
        IRRResult. Non-convergence returns the last iterate flagged with
        ``converged=False``; a series without both inflows and outflows
        has no IRR and returns ``rate=None``.

    Raises:
        ConfigurationError: If ``guess`` is at or below -100%.

    Example:
        >>> result = calculate_irr([CashFlowEvent(0, -1000, CashFlowKind.INVESTMENT),
        ...                         CashFlowEvent(1, 1100, CashFlowKind.OPERATIONS)])
        >>> round(result.rate, 4)
        0.1
    """
    if guess <= -1:
        raise ConfigurationError("guess", guess, "IRR guess must be above -100%")

    has_positive = any(event.amount > 0 for event in events)
    has_negative = any(event.amount < 0 for event in events)
    if not has_positive or not has_negative:
        return IRRResult(rate=None, converged=False, iterations=0)

    rate = guess

    for iteration in range(1, max_iterations + 1):
        npv = calculate_npv(events, rate)
        dnpv = _npv_derivative(events, rate)

        if dnpv == 0 or not math.isfinite(dnpv) or not math.isfinite(npv):
            logger.warning("IRR stopped at iteration %d: derivative undefined at rate %.6f", iteration, rate)
            return IRRResult(rate=rate, converged=False, iterations=iteration)

        step = npv / dnpv

        if abs(step) < tolerance:
            return IRRResult(rate=rate - step, converged=True, iterations=iteration)

        while rate - step <= -1:
            step /= 2

        rate -= step

    logger.warning("IRR did not converge after %d iterations; last estimate %.6f", max_iterations, rate)
    return IRRResult(rate=rate, converged=False, iterations=max_iterations)


def calculate_equity_multiple(events: List[CashFlowEvent]) -> Optional[float]:
    """Calculate equity multiple.

    Multiple = total inflows / |total outflows|.

    Returns:
        Multiple (e.g., 2.0 = 2.0x return), None if there are no outflows.
    """
    total_inflows = sum(event.amount for event in events if event.amount > 0)
    total_outflows = abs(sum(event.amount for event in events if event.amount < 0))

    if total_outflows == 0:
        return None

    return total_inflows / total_outflows

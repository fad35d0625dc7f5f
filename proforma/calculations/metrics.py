"""Financing sizing and stabilized deal metrics."""

from dataclasses import dataclass
from typing import Optional

from ..errors import ConfigurationError
from ..models.project import ProjectInput
from .costs import DevelopmentCosts
from .debt import ConstructionLoan, PermanentLoan, size_construction_loan, size_permanent_loan
from .revenue import StabilizedOperations


@dataclass(frozen=True)
class Financing:
    """Capital structure from construction through refinance."""

    construction_loan: ConstructionLoan
    permanent_loan: PermanentLoan

    all_in_cost: float  # Total project cost + construction interest
    stabilized_value: float
    value_creation: float
    equity_required: float
    refinance_cash_out: float


@dataclass(frozen=True)
class DealMetrics:
    """Stabilized-year return and credit metrics as raw fractions.

    A metric is None when its denominator is zero (e.g. DSCR with no debt).
    """

    dscr: Optional[float]
    debt_yield: Optional[float]
    yield_on_cost: Optional[float]
    development_margin: Optional[float]


def ratio_or_none(numerator: float, denominator: float) -> Optional[float]:
    """Divide, returning None instead of inf/nan on a zero denominator."""
    if denominator == 0:
        return None
    return numerator / denominator


def capitalize(noi: float, cap_rate: float, field_name: str) -> float:
    """Value = NOI / cap rate.

    Args:
        noi: Annual NOI.
        cap_rate: Cap rate in percent.
        field_name: Input field the cap rate came from, for error messages.

    Raises:
        ConfigurationError: If the cap rate is not positive.
    """
    if cap_rate <= 0:
        raise ConfigurationError(field_name, cap_rate, "cap rate must be positive")
    return noi / (cap_rate / 100)


def calculate_financing(
    inputs: ProjectInput,
    costs: DevelopmentCosts,
    operations: StabilizedOperations,
) -> Financing:
    """Size the construction and permanent loans and the equity check.

    Equity Required = (Total Project Cost + Construction Interest) - Construction Loan
    Cash-Out at Refinance = max(0, Permanent Loan - Construction Loan - Construction Interest)

    Args:
        inputs: Project inputs with financing terms.
        costs: Development cost buildup.
        operations: Year-1 stabilized operations.

    Returns:
        Financing with both loans, value creation, and equity.
    """
    construction_loan = size_construction_loan(
        total_project_cost=costs.total_project_cost,
        ltc_ratio=inputs.construction_loan_ltc,
        interest_rate=inputs.construction_loan_rate,
        construction_months=inputs.construction_months,
    )
    all_in_cost = costs.total_project_cost + construction_loan.interest

    stabilized_value = capitalize(operations.noi, inputs.going_in_cap_rate, "going_in_cap_rate")

    permanent_loan = size_permanent_loan(
        stabilized_value=stabilized_value,
        ltv_ratio=inputs.permanent_loan_ltv,
        interest_rate=inputs.permanent_loan_rate,
        amortization_years=inputs.permanent_loan_amortization_years,
    )

    refinance_cash_out = max(
        0.0,
        permanent_loan.loan_amount - construction_loan.loan_amount - construction_loan.interest,
    )

    return Financing(
        construction_loan=construction_loan,
        permanent_loan=permanent_loan,
        all_in_cost=all_in_cost,
        stabilized_value=stabilized_value,
        value_creation=stabilized_value - all_in_cost,
        equity_required=all_in_cost - construction_loan.loan_amount,
        refinance_cash_out=refinance_cash_out,
    )


def calculate_deal_metrics(operations: StabilizedOperations, financing: Financing) -> DealMetrics:
    """Calculate DSCR, debt yield, yield on cost, and development margin.

    DSCR uses cash flow after reserves; debt yield and yield on cost
    use NOI. All ratios come from unrounded inputs.
    """
    return DealMetrics(
        dscr=ratio_or_none(
            operations.cash_flow_before_debt, financing.permanent_loan.annual_debt_service,
        ),
        debt_yield=ratio_or_none(operations.noi, financing.permanent_loan.loan_amount),
        yield_on_cost=ratio_or_none(operations.noi, financing.all_in_cost),
        development_margin=ratio_or_none(financing.value_creation, financing.all_in_cost),
    )

"""Annual pro forma projections: construction placeholders plus hold years.

Each operating year grows rent, operating expenses, and property taxes
at their own rates. The permanent loan amortizes monthly inside each
year so the interest/principal split stays accurate at high rates.
"""

import logging
from dataclasses import dataclass
from typing import List

from ..models.project import ProjectInput
from .debt import PermanentLoan, amortize_year
from .revenue import StabilizedOperations, calculate_reserves, escalate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class YearProjection:
    """Cash flow for a single projection year."""

    period: int  # 1-based position in the projection
    label: str
    is_construction: bool
    operating_year: int  # 0 for construction rows

    # Revenue
    gross_rent: float = 0.0
    vacancy: float = 0.0
    egi: float = 0.0

    # Expenses
    operating_expenses: float = 0.0
    property_tax: float = 0.0
    total_expenses: float = 0.0

    noi: float = 0.0

    # Reserves
    leasing_reserve: float = 0.0
    capex_reserve: float = 0.0
    reserves: float = 0.0
    cash_flow_before_debt: float = 0.0

    # Debt
    debt_service: float = 0.0
    interest: float = 0.0
    principal: float = 0.0
    ending_loan_balance: float = 0.0

    cash_flow_after_debt: float = 0.0


def _construction_placeholder(period: int) -> YearProjection:
    """Zero-valued placeholder for a construction year."""
    return YearProjection(
        period=period,
        label=f"Construction Year {period}",
        is_construction=True,
        operating_year=0,
    )


def generate_projections(
    inputs: ProjectInput,
    operations: StabilizedOperations,
    permanent_loan: PermanentLoan,
) -> List[YearProjection]:
    """Generate the year-by-year projection.

    The first ceil(construction_months / 12) rows are construction
    placeholders; then one row per hold year. Year 1 uses the
    stabilized operations; later years escalate from year 1.

    Args:
        inputs: Project inputs with growth rates and hold period.
        operations: Year-1 stabilized operations.
        permanent_loan: Sized permanent loan (amortizes from operating year 1).

    Returns:
        List of YearProjection, construction rows first. Years after the
        loan is paid off carry no debt service.
    """

    rows: List[YearProjection] = [
        _construction_placeholder(period) for period in range(1, inputs.construction_years + 1)
    ]
    construction_years = len(rows)

    annual_debt_service = permanent_loan.annual_debt_service
    balance = permanent_loan.loan_amount

    for year in range(1, inputs.hold_years + 1):
        years_elapsed = year - 1

        gross_rent = escalate(operations.gross_rent, years_elapsed, inputs.rent_growth)
        operating_expenses = escalate(operations.operating_expenses, years_elapsed, inputs.expense_growth)
        property_tax = escalate(operations.property_tax, years_elapsed, inputs.property_tax_growth)

        vacancy = gross_rent * inputs.vacancy_rate / 100
        egi = gross_rent - vacancy
        total_expenses = operating_expenses + property_tax
        noi = egi - total_expenses

        leasing_reserve, capex_reserve = calculate_reserves(
            gross_rent, inputs.leasing_reserve_percent, inputs.capex_reserve_percent,
        )
        reserves = leasing_reserve + capex_reserve
        cash_flow_before_debt = noi - reserves

        amortization = amortize_year(balance, permanent_loan.interest_rate, permanent_loan.monthly_payment)
        balance = amortization.ending_balance
        # Paid off during the year: only the payments actually made
        debt_service = annual_debt_service if balance > 0 else amortization.debt_service

        rows.append(YearProjection(
            period=construction_years + year,
            label=f"Year {year}",
            is_construction=False,
            operating_year=year,
            gross_rent=gross_rent,
            vacancy=vacancy,
            egi=egi,
            operating_expenses=operating_expenses,
            property_tax=property_tax,
            total_expenses=total_expenses,
            noi=noi,
            leasing_reserve=leasing_reserve,
            capex_reserve=capex_reserve,
            reserves=reserves,
            cash_flow_before_debt=cash_flow_before_debt,
            debt_service=debt_service,
            interest=amortization.interest,
            principal=amortization.principal,
            ending_loan_balance=amortization.ending_balance,
            cash_flow_after_debt=cash_flow_before_debt - debt_service,
        ))

    logger.debug(
        "Projected %d construction and %d operating years for %s",
        construction_years, inputs.hold_years, inputs.name,
    )
    return rows


def operating_rows(projections: List[YearProjection]) -> List[YearProjection]:
    """Operating rows only, in order."""
    return [row for row in projections if not row.is_construction]


def construction_rows(projections: List[YearProjection]) -> List[YearProjection]:
    """Construction placeholder rows only, in order."""
    return [row for row in projections if row.is_construction]

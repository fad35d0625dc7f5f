"""Debt calculations for construction and permanent loans."""

from dataclasses import dataclass

import numpy_financial as npf

from ..models.lookups import CONSTRUCTION_INTEREST_DRAW_FACTOR


@dataclass(frozen=True)
class ConstructionLoan:
    """Construction loan details."""

    loan_amount: float
    ltc_ratio: float  # Percent
    interest_rate: float  # Percent
    term_months: int
    interest: float  # Total interest carried during construction


@dataclass(frozen=True)
class PermanentLoan:
    """Permanent (takeout) loan details."""

    loan_amount: float
    ltv_ratio: float  # Percent
    interest_rate: float  # Percent
    amortization_months: int
    monthly_payment: float
    annual_debt_service: float


@dataclass(frozen=True)
class AmortizationYear:
    """Twelve monthly amortization steps rolled up to one year."""

    beginning_balance: float
    interest: float
    principal: float
    ending_balance: float

    @property
    def debt_service(self) -> float:
        return self.interest + self.principal


def size_construction_loan(
    total_project_cost: float,
    ltc_ratio: float,
    interest_rate: float,
    construction_months: int,
) -> ConstructionLoan:
    """Size construction loan based on loan-to-cost ratio.

    Interest uses the average outstanding balance approximation:
    loan x rate x (months / 12) x 0.5, which assumes the loan is
    drawn evenly over the construction period.

    Args:
        total_project_cost: Land + hard + soft costs.
        ltc_ratio: Loan-to-cost in percent (e.g., 70).
        interest_rate: Annual interest rate in percent.
        construction_months: Construction duration in months.

    Returns:
        ConstructionLoan with loan amount and carried interest.

    Example:
        >>> loan = size_construction_loan(2_000_000, 70, 9.5, 12)
        >>> loan.loan_amount
        1400000.0
        >>> loan.interest
        66500.0
    """
    loan_amount = total_project_cost * ltc_ratio / 100
    interest = (
        loan_amount
        * interest_rate / 100
        * (construction_months / 12)
        * CONSTRUCTION_INTEREST_DRAW_FACTOR
    )

    return ConstructionLoan(
        loan_amount=loan_amount,
        ltc_ratio=ltc_ratio,
        interest_rate=interest_rate,
        term_months=construction_months,
        interest=interest,
    )


def calculate_monthly_payment(principal: float, annual_rate: float, amortization_months: int) -> float:
    """Level monthly payment on a fully amortizing loan.

    Args:
        principal: Loan amount.
        annual_rate: Annual interest rate in percent.
        amortization_months: Amortization period in months.

    Returns:
        Monthly payment (positive), 0 for a zero loan.
    """
    if principal <= 0 or amortization_months <= 0:
        return 0.0
    return float(-npf.pmt(
        rate=annual_rate / 100 / 12,
        nper=amortization_months,
        pv=principal,
        fv=0,
    ))


def size_permanent_loan(
    stabilized_value: float,
    ltv_ratio: float,
    interest_rate: float,
    amortization_years: int,
) -> PermanentLoan:
    """Size permanent loan as a fixed share of stabilized value.

    A non-positive stabilized value (negative NOI) supports no loan,
    so the amount floors at zero.

    Args:
        stabilized_value: Property value at stabilization.
        ltv_ratio: Loan-to-value in percent (e.g., 75).
        interest_rate: Annual interest rate in percent.
        amortization_years: Amortization period in years.

    Returns:
        PermanentLoan with level monthly and annual debt service.
    """
    loan_amount = max(0.0, stabilized_value * ltv_ratio / 100)
    amortization_months = amortization_years * 12
    monthly_payment = calculate_monthly_payment(loan_amount, interest_rate, amortization_months)

    return PermanentLoan(
        loan_amount=loan_amount,
        ltv_ratio=ltv_ratio,
        interest_rate=interest_rate,
        amortization_months=amortization_months,
        monthly_payment=monthly_payment,
        annual_debt_service=monthly_payment * 12,
    )


def amortize_year(beginning_balance: float, annual_rate: float, monthly_payment: float) -> AmortizationYear:
    """Run twelve monthly amortization steps.

    Each month: interest = balance x monthly rate, principal =
    payment - interest, balance -= principal. The yearly interest
    and principal are the sums of the twelve steps. Once the balance
    reaches zero no further payments are made, and the final payment
    only retires what is left.

    Args:
        beginning_balance: Loan balance at the start of the year.
        annual_rate: Annual interest rate in percent.
        monthly_payment: Level monthly payment.

    Returns:
        AmortizationYear with summed interest/principal and ending balance.
    """
    monthly_rate = annual_rate / 100 / 12
    balance = beginning_balance
    total_interest = 0.0
    total_principal = 0.0

    for _month in range(12):
        if balance <= 0:
            break
        interest = balance * monthly_rate
        principal = min(monthly_payment - interest, balance)
        balance -= principal
        total_interest += interest
        total_principal += principal

    return AmortizationYear(
        beginning_balance=beginning_balance,
        interest=total_interest,
        principal=total_principal,
        ending_balance=balance,
    )

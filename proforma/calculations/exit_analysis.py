"""Exit (reversion) analysis at the end of the hold period."""

from dataclasses import dataclass
from typing import List

from ..errors import ConfigurationError
from ..models.project import ProjectInput
from .metrics import capitalize
from .projections import YearProjection, operating_rows


@dataclass(frozen=True)
class ExitAnalysis:
    """Sale of the property at the end of the final operating year."""

    final_year_noi: float
    exit_cap_rate: float  # Percent
    gross_sale_price: float
    selling_costs: float
    net_sale_price: float
    loan_payoff: float
    net_proceeds: float


def calculate_exit(inputs: ProjectInput, projections: List[YearProjection]) -> ExitAnalysis:
    """Calculate reversion proceeds from final-year NOI.

    Gross Sale Price = Final Year NOI / Exit Cap Rate
    Net Sale Price = Gross Sale Price - Selling Costs
    Net Proceeds = Net Sale Price - Ending Loan Balance

    Args:
        inputs: Project inputs with exit cap rate and selling costs.
        projections: Output of generate_projections().

    Returns:
        ExitAnalysis for the final operating year.

    Raises:
        ConfigurationError: If there are no operating years or the exit cap rate is not positive.
    """
    operating = operating_rows(projections)
    if not operating:
        raise ConfigurationError("hold_years", inputs.hold_years, "no operating years to exit from")

    final_year = operating[-1]
    gross_sale_price = capitalize(final_year.noi, inputs.exit_cap_rate, "exit_cap_rate")
    selling_costs = gross_sale_price * inputs.selling_costs_percent / 100
    net_sale_price = gross_sale_price - selling_costs

    return ExitAnalysis(
        final_year_noi=final_year.noi,
        exit_cap_rate=inputs.exit_cap_rate,
        gross_sale_price=gross_sale_price,
        selling_costs=selling_costs,
        net_sale_price=net_sale_price,
        loan_payoff=final_year.ending_loan_balance,
        net_proceeds=net_sale_price - final_year.ending_loan_balance,
    )

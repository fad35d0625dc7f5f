"""Revenue and operating expense calculations for the stabilized year."""

from dataclasses import dataclass

from ..models.lookups import PropertyType, PROPERTY_TYPE_PARAMS, DEFAULT_PROPERTY_TAX_PER_SF
from ..models.project import ProjectInput


@dataclass(frozen=True)
class StabilizedOperations:
    """Year-1 stabilized operating results."""

    gross_rent: float
    vacancy: float
    egi: float  # Effective Gross Income

    management_fee: float
    operating_expenses_fixed: float  # Per-SF operating expenses
    insurance: float
    operating_expenses: float  # Management fee + fixed opex + insurance
    property_tax: float
    total_expenses: float

    noi: float

    leasing_reserve: float
    capex_reserve: float
    reserves: float
    cash_flow_before_debt: float


def calculate_year_one_rent(inputs: ProjectInput, property_type: PropertyType, rentable_sf: float) -> float:
    """Calculate year-1 gross potential rent.

    Office rent is rentable SF x office rent per SF. Tenant-roll
    property types sum each suite's SF x rent per SF.
    """
    if PROPERTY_TYPE_PARAMS[property_type].uses_tenant_roll:
        return sum(tenant.annual_rent for tenant in inputs.tenants)
    return rentable_sf * inputs.office_rent_per_sf


def calculate_egi(gross_rent: float, vacancy_rate: float) -> float:
    """Calculate Effective Gross Income.

    EGI = Gross Rent x (1 - vacancy rate)

    Args:
        gross_rent: Annual gross potential rent.
        vacancy_rate: Vacancy in percent (e.g., 5 for 5%).
    """
    return gross_rent * (1 - vacancy_rate / 100)


def property_tax_per_sf(inputs: ProjectInput) -> float:
    """Property tax rate per SF, falling back to the engine default."""
    if inputs.property_tax_per_sf is None:
        return DEFAULT_PROPERTY_TAX_PER_SF
    return inputs.property_tax_per_sf


def calculate_reserves(gross_rent: float, leasing_reserve_percent: float, capex_reserve_percent: float) -> tuple[float, float]:
    """Calculate leasing and capital reserves as percentages of gross rent.

    Returns:
        Tuple of (leasing reserve, capex reserve).
    """
    return (
        gross_rent * leasing_reserve_percent / 100,
        gross_rent * capex_reserve_percent / 100,
    )


def calculate_stabilized_operations(
    inputs: ProjectInput,
    property_type: PropertyType,
    rentable_sf: float,
) -> StabilizedOperations:
    """Calculate year-1 stabilized revenue, expenses, and NOI.

    Expenses have four components:
    1. Management fee (% of EGI)
    2. Operating expenses per SF of gross area
    3. Insurance per SF of gross area
    4. Property tax per SF of gross area (2.50/SF when not specified)

    Args:
        inputs: Project inputs.
        property_type: Supported property type.
        rentable_sf: Rentable area from the cost buildup.

    Returns:
        StabilizedOperations with all components unrounded.
    """
    gross_rent = calculate_year_one_rent(inputs, property_type, rentable_sf)
    egi = calculate_egi(gross_rent, inputs.vacancy_rate)

    management_fee = egi * inputs.management_fee_percent / 100
    operating_expenses_fixed = inputs.gross_sf * inputs.operating_expenses_per_sf
    insurance = inputs.gross_sf * inputs.insurance_per_sf
    operating_expenses = management_fee + operating_expenses_fixed + insurance
    property_tax = inputs.gross_sf * property_tax_per_sf(inputs)
    total_expenses = operating_expenses + property_tax

    noi = egi - total_expenses

    leasing_reserve, capex_reserve = calculate_reserves(
        gross_rent, inputs.leasing_reserve_percent, inputs.capex_reserve_percent,
    )
    reserves = leasing_reserve + capex_reserve

    return StabilizedOperations(
        gross_rent=gross_rent,
        vacancy=gross_rent - egi,
        egi=egi,
        management_fee=management_fee,
        operating_expenses_fixed=operating_expenses_fixed,
        insurance=insurance,
        operating_expenses=operating_expenses,
        property_tax=property_tax,
        total_expenses=total_expenses,
        noi=noi,
        leasing_reserve=leasing_reserve,
        capex_reserve=capex_reserve,
        reserves=reserves,
        cash_flow_before_debt=noi - reserves,
    )


def escalate(base_amount: float, years_elapsed: int, growth_rate: float) -> float:
    """Apply annual compound escalation.

    Args:
        base_amount: Year-1 amount.
        years_elapsed: Number of years since year 1.
        growth_rate: Annual growth in percent (e.g., 3 for 3%).

    Returns:
        Escalated amount.
    """
    return base_amount * (1 + growth_rate / 100) ** years_elapsed

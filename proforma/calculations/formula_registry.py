"""Formula Registry for transparent calculation auditing.

This module provides a central registry of the pro forma formulas,
enabling users to understand exactly how each value is computed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Set


class FormulaCategory(str, Enum):
    """Categories for organizing formulas."""
    INPUT = "Input"
    DEVELOPMENT = "Development"
    FINANCING = "Financing"
    OPERATIONS = "Operations"
    INVESTMENT = "Investment"
    RETURNS = "Returns"
    EXIT = "Exit"


@dataclass
class FormulaDefinition:
    """Definition of a single calculation formula.

    Attributes:
        field_path: Dot-notation path to the field (e.g., "costs.total_project_cost")
        name: Human-readable name (e.g., "Total Project Cost")
        formula: Symbolic formula (e.g., "land_cost + hard_costs + soft_costs")
        inputs: List of input field paths that feed into this formula
        category: Category for grouping formulas
        unit: Display unit ("$", "%" for decimal fractions, "pct" for
            whole-percent inputs, "x", "SF", "months")
        notes: Optional explanation or caveats
    """
    field_path: str
    name: str
    formula: str
    inputs: List[str]
    category: FormulaCategory
    unit: str = "$"
    notes: str = ""


class FormulaRegistry:
    """Central registry of all calculation formulas.

    Populated lazily on first lookup and read-only afterwards.
    """
    _formulas: Dict[str, FormulaDefinition] = {}
    _initialized: bool = False

    @classmethod
    def register(cls, definition: FormulaDefinition) -> None:
        """Register a formula definition."""
        cls._formulas[definition.field_path] = definition

    @classmethod
    def get(cls, field_path: str) -> Optional[FormulaDefinition]:
        """Get formula definition by field path."""
        cls._ensure_initialized()
        return cls._formulas.get(field_path)

    @classmethod
    def get_all(cls) -> Dict[str, FormulaDefinition]:
        """Get all registered formulas."""
        cls._ensure_initialized()
        return cls._formulas.copy()

    @classmethod
    def get_by_category(cls, category: FormulaCategory) -> List[FormulaDefinition]:
        """Get all formulas in a category."""
        cls._ensure_initialized()
        return [f for f in cls._formulas.values() if f.category == category]

    @classmethod
    def get_inputs(cls, field_path: str) -> List[str]:
        """Get the input field paths for a formula."""
        formula = cls.get(field_path)
        return formula.inputs if formula else []

    @classmethod
    def get_dependents(cls, field_path: str) -> List[str]:
        """Get all formulas that use this field as an input."""
        cls._ensure_initialized()
        return [path for path, formula in cls._formulas.items() if field_path in formula.inputs]

    @classmethod
    def get_all_ancestors(cls, field_path: str) -> Set[str]:
        """Get all upstream dependencies recursively."""
        ancestors: Set[str] = set()
        to_process = list(cls.get_inputs(field_path))

        while to_process:
            current = to_process.pop()
            if current not in ancestors:
                ancestors.add(current)
                to_process.extend(cls.get_inputs(current))

        return ancestors

    @classmethod
    def _ensure_initialized(cls) -> None:
        """Ensure the registry is populated with formulas."""
        if not cls._initialized:
            _populate_registry()
            cls._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Reset the registry (mainly for testing)."""
        cls._formulas = {}
        cls._initialized = False


def _input(field_path: str, name: str, unit: str = "$", notes: str = "") -> FormulaDefinition:
    return FormulaDefinition(
        field_path=field_path,
        name=name,
        formula="User input",
        inputs=[],
        category=FormulaCategory.INPUT,
        unit=unit,
        notes=notes,
    )


def _populate_registry() -> None:
    """Populate the registry with all calculation formulas."""

    # =========================================================================
    # INPUT FIELDS (Raw inputs from ProjectInput)
    # =========================================================================
    inputs = [
        _input("inputs.gross_sf", "Gross Square Feet", unit="SF"),
        _input("inputs.construction_loan_ltc", "Construction LTC", unit="pct",
               notes="Loan-to-cost ratio for construction financing"),
        _input("inputs.construction_loan_rate", "Construction Interest Rate", unit="pct"),
        _input("inputs.construction_months", "Construction Term", unit="months"),
        _input("inputs.permanent_loan_ltv", "Permanent LTV", unit="pct"),
        _input("inputs.vacancy_rate", "Vacancy Rate", unit="pct"),
        _input("inputs.going_in_cap_rate", "Going-In Cap Rate", unit="pct"),
        _input("inputs.exit_cap_rate", "Exit Cap Rate", unit="pct"),
    ]

    development = [
        FormulaDefinition(
            field_path="costs.land_cost",
            name="Land Cost",
            formula="acres x cost_per_acre | total | site_sf x cost_per_site_sf",
            inputs=[],
            category=FormulaCategory.DEVELOPMENT,
            notes="Selected by land cost mode",
        ),
        FormulaDefinition(
            field_path="costs.hard_costs",
            name="Hard Costs",
            formula="shell_cost + site_cost + tenant_improvements",
            inputs=["inputs.gross_sf"],
            category=FormulaCategory.DEVELOPMENT,
        ),
        FormulaDefinition(
            field_path="costs.soft_costs",
            name="Soft Costs",
            formula="architectural_fee + contingency + other_soft_costs + development_fee",
            inputs=["costs.hard_costs"],
            category=FormulaCategory.DEVELOPMENT,
        ),
        FormulaDefinition(
            field_path="costs.total_project_cost",
            name="Total Project Cost",
            formula="land_cost + hard_costs + soft_costs",
            inputs=["costs.land_cost", "costs.hard_costs", "costs.soft_costs"],
            category=FormulaCategory.DEVELOPMENT,
        ),
    ]

    financing = [
        FormulaDefinition(
            field_path="financing.construction_loan",
            name="Construction Loan",
            formula="total_project_cost x ltc",
            inputs=["costs.total_project_cost", "inputs.construction_loan_ltc"],
            category=FormulaCategory.FINANCING,
        ),
        FormulaDefinition(
            field_path="financing.construction_interest",
            name="Construction Interest",
            formula="construction_loan x rate x (months / 12) x 0.5",
            inputs=[
                "financing.construction_loan",
                "inputs.construction_loan_rate",
                "inputs.construction_months",
            ],
            category=FormulaCategory.FINANCING,
            notes="Average outstanding balance approximation for a single draw schedule",
        ),
        FormulaDefinition(
            field_path="financing.all_in_cost",
            name="All-In Cost",
            formula="total_project_cost + construction_interest",
            inputs=["costs.total_project_cost", "financing.construction_interest"],
            category=FormulaCategory.FINANCING,
        ),
        FormulaDefinition(
            field_path="financing.equity_required",
            name="Equity Required",
            formula="all_in_cost - construction_loan",
            inputs=["financing.all_in_cost", "financing.construction_loan"],
            category=FormulaCategory.FINANCING,
        ),
        FormulaDefinition(
            field_path="financing.permanent_loan",
            name="Permanent Loan",
            formula="stabilized_value x ltv",
            inputs=["investment.stabilized_value", "inputs.permanent_loan_ltv"],
            category=FormulaCategory.FINANCING,
        ),
        FormulaDefinition(
            field_path="financing.refinance_cash_out",
            name="Cash-Out at Refinance",
            formula="max(0, permanent_loan - construction_loan - construction_interest)",
            inputs=[
                "financing.permanent_loan",
                "financing.construction_loan",
                "financing.construction_interest",
            ],
            category=FormulaCategory.FINANCING,
        ),
        FormulaDefinition(
            field_path="financing.annual_debt_service",
            name="Annual Debt Service",
            formula="12 x PMT(rate / 12, amortization_years x 12, permanent_loan)",
            inputs=["financing.permanent_loan"],
            category=FormulaCategory.FINANCING,
        ),
    ]

    operations = [
        FormulaDefinition(
            field_path="operations.gross_rent",
            name="Year-1 Gross Rent",
            formula="rentable_sf x office_rent_per_sf | sum(tenant_sf x rent_per_sf)",
            inputs=["inputs.gross_sf"],
            category=FormulaCategory.OPERATIONS,
        ),
        FormulaDefinition(
            field_path="operations.egi",
            name="Effective Gross Income",
            formula="gross_rent x (1 - vacancy_rate)",
            inputs=["operations.gross_rent", "inputs.vacancy_rate"],
            category=FormulaCategory.OPERATIONS,
        ),
        FormulaDefinition(
            field_path="operations.total_expenses",
            name="Total Expenses",
            formula="management_fee + operating_expenses + insurance + property_tax",
            inputs=["operations.egi"],
            category=FormulaCategory.OPERATIONS,
        ),
        FormulaDefinition(
            field_path="operations.noi",
            name="Net Operating Income",
            formula="egi - total_expenses",
            inputs=["operations.egi", "operations.total_expenses"],
            category=FormulaCategory.OPERATIONS,
        ),
    ]

    investment = [
        FormulaDefinition(
            field_path="investment.stabilized_value",
            name="Stabilized Value",
            formula="noi / going_in_cap_rate",
            inputs=["operations.noi", "inputs.going_in_cap_rate"],
            category=FormulaCategory.INVESTMENT,
        ),
        FormulaDefinition(
            field_path="investment.value_creation",
            name="Value Creation",
            formula="stabilized_value - all_in_cost",
            inputs=["investment.stabilized_value", "financing.all_in_cost"],
            category=FormulaCategory.INVESTMENT,
        ),
    ]

    returns = [
        FormulaDefinition(
            field_path="returns.dscr",
            name="Debt Service Coverage Ratio",
            formula="(noi - reserves) / annual_debt_service",
            inputs=["operations.noi", "financing.annual_debt_service"],
            category=FormulaCategory.RETURNS,
            unit="x",
        ),
        FormulaDefinition(
            field_path="returns.debt_yield",
            name="Debt Yield",
            formula="noi / permanent_loan",
            inputs=["operations.noi", "financing.permanent_loan"],
            category=FormulaCategory.RETURNS,
            unit="%",
        ),
        FormulaDefinition(
            field_path="returns.yield_on_cost",
            name="Yield on Cost",
            formula="noi / all_in_cost",
            inputs=["operations.noi", "financing.all_in_cost"],
            category=FormulaCategory.RETURNS,
            unit="%",
        ),
        FormulaDefinition(
            field_path="returns.development_margin",
            name="Development Margin",
            formula="value_creation / all_in_cost",
            inputs=["investment.value_creation", "financing.all_in_cost"],
            category=FormulaCategory.RETURNS,
            unit="%",
        ),
        FormulaDefinition(
            field_path="returns.equity_irr",
            name="Equity IRR",
            formula="Newton-Raphson root of NPV over equity cash flows",
            inputs=["financing.equity_required", "financing.refinance_cash_out"],
            category=FormulaCategory.RETURNS,
            unit="%",
            notes="Reversion proceeds are reported separately in the exit analysis",
        ),
        FormulaDefinition(
            field_path="returns.unlevered_irr",
            name="Unlevered IRR",
            formula="Newton-Raphson root of NPV over unlevered cash flows",
            inputs=["costs.total_project_cost", "exit.net_sale_price"],
            category=FormulaCategory.RETURNS,
            unit="%",
        ),
        FormulaDefinition(
            field_path="returns.equity_multiple",
            name="Equity Multiple",
            formula="sum(positive cash flows) / |sum(negative cash flows)|",
            inputs=["financing.equity_required"],
            category=FormulaCategory.RETURNS,
            unit="x",
        ),
    ]

    exit_ = [
        FormulaDefinition(
            field_path="exit.gross_sale_price",
            name="Gross Sale Price",
            formula="final_year_noi / exit_cap_rate",
            inputs=["inputs.exit_cap_rate"],
            category=FormulaCategory.EXIT,
        ),
        FormulaDefinition(
            field_path="exit.net_sale_price",
            name="Net Sale Price",
            formula="gross_sale_price - selling_costs",
            inputs=["exit.gross_sale_price"],
            category=FormulaCategory.EXIT,
        ),
        FormulaDefinition(
            field_path="exit.net_proceeds",
            name="Net Proceeds",
            formula="net_sale_price - ending_loan_balance",
            inputs=["exit.net_sale_price", "financing.permanent_loan"],
            category=FormulaCategory.EXIT,
        ),
    ]

    all_formulas = inputs + development + financing + operations + investment + returns + exit_
    for formula in all_formulas:
        FormulaRegistry.register(formula)

"""Formula registry for transparent calculation auditing.

A central catalogue of the formulas behind each projected figure, so a
traced value can be explained and its upstream inputs followed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Set


class FormulaCategory(str, Enum):
    """Categories for organizing formulas."""
    INPUT = "Input"
    FUNDING = "Funding"
    CONSTRUCTION = "Construction"
    INCOME = "Income"
    FINANCING = "Financing"
    EXPENSES = "Expenses"
    TAX = "Tax"
    RETURNS = "Returns"


@dataclass
class FormulaDefinition:
    """Definition of a single calculation formula.

    Attributes:
        field_path: Dot-notation path (e.g., "income.rental_income")
        name: Human-readable name
        formula: Symbolic formula
        inputs: Field paths that feed into this formula
        category: Category for grouping
        unit: Display unit ("$", "%", "years")
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

    Populated lazily on first lookup.
    """
    _formulas: Dict[str, FormulaDefinition] = {}
    _initialized: bool = False

    @classmethod
    def register(cls, definition: FormulaDefinition) -> None:
        cls._formulas[definition.field_path] = definition

    @classmethod
    def get(cls, field_path: str) -> Optional[FormulaDefinition]:
        """Get formula definition by field path."""
        cls._ensure_initialized()
        return cls._formulas.get(field_path)

    @classmethod
    def get_all(cls) -> Dict[str, FormulaDefinition]:
        cls._ensure_initialized()
        return cls._formulas.copy()

    @classmethod
    def get_by_category(cls, category: FormulaCategory) -> List[FormulaDefinition]:
        cls._ensure_initialized()
        return [f for f in cls._formulas.values() if f.category == category]

    @classmethod
    def get_inputs(cls, field_path: str) -> List[str]:
        formula = cls.get(field_path)
        return formula.inputs if formula else []

    @classmethod
    def get_dependents(cls, field_path: str) -> List[str]:
        """Get all formulas that use this field as an input."""
        cls._ensure_initialized()
        return [path for path, f in cls._formulas.items() if field_path in f.inputs]

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
    def build_dependency_graph(cls):
        """Build a networkx DiGraph of all dependencies.

        Requires the optional `graph` extra.

        Returns:
            nx.DiGraph with an edge from each input to the formula using it.
        """
        try:
            import networkx as nx
        except ImportError:
            raise ImportError(
                "networkx is required for dependency graphs. "
                "Install with: pip install propforecast[graph]"
            )

        cls._ensure_initialized()
        graph = nx.DiGraph()
        for path, formula in cls._formulas.items():
            graph.add_node(path, name=formula.name, category=formula.category.value,
                           formula=formula.formula)
        for path, formula in cls._formulas.items():
            for input_path in formula.inputs:
                graph.add_edge(input_path, path)
        return graph

    @classmethod
    def _ensure_initialized(cls) -> None:
        if not cls._initialized:
            _populate_registry()
            cls._initialized = True

    @classmethod
    def reset(cls) -> None:
        """Reset the registry (mainly for testing)."""
        cls._formulas = {}
        cls._initialized = False


def _populate_registry() -> None:
    """Populate the registry with the projection formulas."""

    # =========================================================================
    # INPUTS
    # =========================================================================
    input_fields = [
        ("inputs.weekly_rent", "Weekly Rent", "$"),
        ("inputs.vacancy_rate", "Vacancy Rate", "%"),
        ("inputs.purchase_price", "Purchase Price", "$"),
        ("inputs.loan_amount", "Main Loan Amount", "$"),
        ("inputs.total_holding_costs", "Total Holding Costs", "$"),
        ("inputs.primary_property_value", "Primary Property Value", "$"),
        ("inputs.max_lvr", "Maximum LVR", "%"),
        ("inputs.existing_debt", "Existing Debt", "$"),
        ("inputs.building_value", "Building Value", "$"),
        ("inputs.plant_equipment_value", "Plant & Equipment Value", "$"),
        ("inputs.property_management", "Property Management Fee", "%"),
        ("inputs.fixed_expenses", "Council Rates + Insurance + Repairs", "$"),
        ("inputs.construction_period", "Construction Period", "months"),
    ]
    for path, name, unit in input_fields:
        FormulaRegistry.register(FormulaDefinition(
            field_path=path, name=name, formula="User input", inputs=[],
            category=FormulaCategory.INPUT, unit=unit,
        ))

    # =========================================================================
    # FUNDING
    # =========================================================================
    FormulaRegistry.register(FormulaDefinition(
        field_path="funding.base_cost",
        name="Base Cost",
        formula="land_value + construction_value (build) or purchase_price",
        inputs=["inputs.purchase_price"],
        category=FormulaCategory.FUNDING,
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="funding.purchase_costs",
        name="Purchase Costs",
        formula="stamp_duty + legal_fees + inspection_fees",
        inputs=[],
        category=FormulaCategory.FUNDING,
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="funding.construction_costs",
        name="Construction Costs",
        formula="council_fees + architect_fees + site_costs",
        inputs=[],
        category=FormulaCategory.FUNDING,
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="funding.total_funding",
        name="Total Funding",
        formula="loan_amount + equity_loan_amount + deposit",
        inputs=["inputs.loan_amount", "funding.equity_loan_amount"],
        category=FormulaCategory.FUNDING,
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="funding.total_project_cost",
        name="Total Project Cost",
        formula="base_cost + purchase_costs + construction_costs + holding_costs",
        inputs=["funding.base_cost", "funding.purchase_costs",
                "funding.construction_costs", "inputs.total_holding_costs"],
        category=FormulaCategory.FUNDING,
        notes="Base cost is land + construction for builds, purchase price otherwise",
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="funding.available_equity",
        name="Available Equity",
        formula="max(0, primary_property_value x max_lvr - existing_debt)",
        inputs=["inputs.primary_property_value", "inputs.max_lvr", "inputs.existing_debt"],
        category=FormulaCategory.FUNDING,
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="funding.equity_loan_amount",
        name="Equity Loan Amount",
        formula="min(max(0, total_project_cost - loan_amount), available_equity)",
        inputs=["funding.total_project_cost", "inputs.loan_amount", "funding.available_equity"],
        category=FormulaCategory.FUNDING,
        notes="Zero unless equity funding is used",
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="funding.shortfall",
        name="Funding Shortfall",
        formula="max(0, total_project_cost - total_funding)",
        inputs=["funding.total_project_cost", "funding.total_funding"],
        category=FormulaCategory.FUNDING,
    ))

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================
    FormulaRegistry.register(FormulaDefinition(
        field_path="construction.main_interest",
        name="Main Loan Construction Interest",
        formula="loan_amount x monthly_rate x construction_period",
        inputs=["inputs.loan_amount", "inputs.construction_period"],
        category=FormulaCategory.CONSTRUCTION,
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="construction.equity_interest",
        name="Equity Loan Construction Interest",
        formula="equity_loan_amount x monthly_rate per month of construction",
        inputs=["funding.equity_loan_amount", "inputs.construction_period"],
        category=FormulaCategory.CONSTRUCTION,
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="construction.cash_interest",
        name="Construction Interest Paid in Cash",
        formula="(main_interest + equity_interest) x (1 - capitalisation_fraction)",
        inputs=["construction.main_interest", "construction.equity_interest"],
        category=FormulaCategory.CONSTRUCTION,
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="construction.capitalised_interest",
        name="Capitalised Construction Interest",
        formula="(main_interest + equity_interest) x capitalisation_fraction",
        inputs=["construction.main_interest", "construction.equity_interest"],
        category=FormulaCategory.CONSTRUCTION,
        notes="Added to the loan balances carried into year 1",
    ))

    # =========================================================================
    # INCOME
    # =========================================================================
    FormulaRegistry.register(FormulaDefinition(
        field_path="income.rental_income",
        name="Rental Income",
        formula="weekly_rent x 52 x (1 + rental_growth)^(year - 1) x (1 - vacancy_rate)",
        inputs=["inputs.weekly_rent", "inputs.vacancy_rate"],
        category=FormulaCategory.INCOME,
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="income.property_value",
        name="Property Value",
        formula="base_value x (1 + capital_growth)^(year - 1)",
        inputs=["funding.base_cost"],
        category=FormulaCategory.INCOME,
    ))

    # =========================================================================
    # FINANCING
    # =========================================================================
    FormulaRegistry.register(FormulaDefinition(
        field_path="loans.total_interest",
        name="Total Interest",
        formula="main_interest + equity_interest",
        inputs=["loans.main_interest", "loans.equity_interest"],
        category=FormulaCategory.FINANCING,
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="loans.total_payment",
        name="Total Loan Payments",
        formula="main_payment + equity_payment",
        inputs=["loans.main_payment", "loans.equity_payment"],
        category=FormulaCategory.FINANCING,
    ))
    for loan in ("main", "equity"):
        for item, label in (("interest", "Interest"), ("payment", "Payment"), ("balance", "Balance")):
            FormulaRegistry.register(FormulaDefinition(
                field_path=f"loans.{loan}_{item}",
                name=f"{loan.title()} Loan {label}",
                formula="Loan schedule (IO window, then fixed P&I payment)",
                inputs=["inputs.loan_amount"] if loan == "main" else ["funding.equity_loan_amount"],
                category=FormulaCategory.FINANCING,
            ))

    # =========================================================================
    # EXPENSES
    # =========================================================================
    FormulaRegistry.register(FormulaDefinition(
        field_path="expenses.operating_expenses",
        name="Operating Expenses",
        formula="management% x rental_income + fixed_expenses x (1 + cpi)^(year - 1)",
        inputs=["inputs.property_management", "income.rental_income", "inputs.fixed_expenses"],
        category=FormulaCategory.EXPENSES,
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="depreciation.total",
        name="Total Depreciation",
        formula="building x 2.5% (built 1987+) + plant x 15% (new only)",
        inputs=["inputs.building_value", "inputs.plant_equipment_value"],
        category=FormulaCategory.EXPENSES,
        notes="Diminishing value applies 15% to a base reduced by 15% per year",
    ))

    # =========================================================================
    # TAX
    # =========================================================================
    FormulaRegistry.register(FormulaDefinition(
        field_path="tax.taxable_income",
        name="Property Taxable Income",
        formula="rental_income - total_interest - operating_expenses - depreciation",
        inputs=["income.rental_income", "loans.total_interest",
                "expenses.operating_expenses", "depreciation.total"],
        category=FormulaCategory.TAX,
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="tax.tax_benefit",
        name="Tax Benefit",
        formula="-(sum over investors of tax_with_property - tax_without_property)",
        inputs=["tax.taxable_income"],
        category=FormulaCategory.TAX,
        notes="Positive = refund",
    ))

    # =========================================================================
    # RETURNS
    # =========================================================================
    FormulaRegistry.register(FormulaDefinition(
        field_path="cashflow.after_tax_cash_flow",
        name="After-Tax Cash Flow",
        formula="rental_income - operating_expenses - total_payments + tax_benefit",
        inputs=["income.rental_income", "expenses.operating_expenses",
                "loans.total_payment", "tax.tax_benefit"],
        category=FormulaCategory.RETURNS,
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="cashflow.cumulative_cash_flow",
        name="Cumulative Cash Flow",
        formula="previous cumulative + after_tax_cash_flow",
        inputs=["cashflow.after_tax_cash_flow"],
        category=FormulaCategory.RETURNS,
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="returns.property_equity",
        name="Property Equity",
        formula="property_value - main_balance - equity_balance",
        inputs=["income.property_value", "loans.main_balance", "loans.equity_balance"],
        category=FormulaCategory.RETURNS,
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="returns.total_return",
        name="Total Return",
        formula="after_tax_cash_flow + (property_value - prior property_value)",
        inputs=["cashflow.after_tax_cash_flow", "income.property_value"],
        category=FormulaCategory.RETURNS,
    ))
    FormulaRegistry.register(FormulaDefinition(
        field_path="returns.roi",
        name="Return on Investment",
        formula="equity at final year / cumulative cash contributed x 100",
        inputs=["returns.property_equity", "cashflow.cumulative_cash_flow"],
        category=FormulaCategory.RETURNS,
        unit="%",
    ))

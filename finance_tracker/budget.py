# finance_tracker/budget.py
"""Turn the ``budget_config``, ``goals`` and ``categories`` tables into config objects."""

from __future__ import annotations

from typing import Dict, Iterable, List

from finance_tracker.core.models import BudgetConfig, FinancialState, Goal, Transaction
from finance_tracker.utils import parse_amount

DEFAULT_MONTHLY_INCOME = 4380.0

DEFAULT_FIXED_COSTS: Dict[str, float] = {
    "rent": 1270.0,
    "capitalOne": 269.0,
    "bills": 225.0,
    "therapy": 150.0,
    "lessons": 140.0,
    "nelnet": 144.33,
    "klarna": 19.79,
    "sister": 72.26,
    "fitness": 54.01,
}

DEFAULT_DISCRETIONARY: Dict[str, float] = {
    "groceries": 300.0,
    "transport": 160.0,
    "flex": 302.0,
}

DEFAULT_CATEGORIES: List[str] = [
    "groceries", "transport", "flex", "bills", "amex",
    "nelnet", "klarna", "sister", "fitness", "income",
]

DEFAULT_GOALS: List[Goal] = [Goal(name="amex", category="amex", target=2100.0)]


def default_budget_config() -> BudgetConfig:
    return BudgetConfig(
        monthly_income=DEFAULT_MONTHLY_INCOME,
        fixed_costs=dict(DEFAULT_FIXED_COSTS),
        discretionary=dict(DEFAULT_DISCRETIONARY),
    )


def default_state() -> FinancialState:
    return FinancialState(
        transactions=[],
        budget_config=default_budget_config(),
        categories=list(DEFAULT_CATEGORIES),
        goals=list(DEFAULT_GOALS),
    )


def parse_budget_config(rows: Iterable[dict]) -> BudgetConfig:
    """
    Build a BudgetConfig from ``category, amount, type`` rows.

    ``fixed`` rows become fixed costs, ``monthly`` rows discretionary budgets
    and an ``income`` row overrides the monthly income. An empty table means
    the default budget.
    """
    rows = list(rows or [])
    if not rows:
        return default_budget_config()

    config = BudgetConfig(monthly_income=DEFAULT_MONTHLY_INCOME)
    for row in rows:
        kind = str(row.get("type", "")).strip().lower()
        category = str(row.get("category", "")).strip()
        amount = parse_amount(row.get("amount"))
        if kind == "fixed" and category:
            config.fixed_costs[category] = amount
        elif kind == "monthly" and category:
            config.discretionary[category] = amount
        elif kind == "income":
            config.monthly_income = amount
    return config


def parse_goals(rows: Iterable[dict]) -> List[Goal]:
    goals = [Goal.from_dict(row) for row in rows or []]
    goals = [goal for goal in goals if goal.category]
    return goals or list(DEFAULT_GOALS)


def parse_categories(rows: Iterable[dict]) -> List[str]:
    names = []
    for row in rows or []:
        name = row.get("name")
        if name is None and row:
            name = next(iter(row.values()))
        name = str(name or "").strip()
        if name and name not in names:
            names.append(name)
    return names or list(DEFAULT_CATEGORIES)


def state_from_tables(tables: Dict[str, List[dict]]) -> FinancialState:
    return FinancialState(
        transactions=[Transaction.from_row(row) for row in tables.get("transactions", [])],
        budget_config=parse_budget_config(tables.get("budget_config", [])),
        categories=parse_categories(tables.get("categories", [])),
        goals=parse_goals(tables.get("goals", [])),
    )

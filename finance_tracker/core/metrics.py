# finance_tracker/core/metrics.py
"""Derived figures for the dashboard.

Everything here is a pure function of the transaction log, the budget
configuration and the reference date ``now``. Nothing is cached: callers
recompute the full set after every change to the log.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List

from finance_tracker.utils import days_in_month, parse_amount, parse_date

SPENDING_WINDOW_DAYS = 30

PAYMENT = "payment"
INCOME = "income"


@dataclass
class GoalProgress:
    category: str
    target: float
    paid: float
    name: str = ""

    @property
    def display_percent(self) -> float:
        """Percentage of the target paid so far, clamped to 0-100."""
        if self.target <= 0:
            return 100.0 if self.paid > 0 else 0.0
        return max(0.0, min(self.paid / self.target * 100, 100.0))


@dataclass
class BudgetStatus:
    category: str
    budget: float
    spent: float
    progress: float
    projected: float
    remaining: float
    is_over: bool

    @property
    def percent_used(self) -> float:
        if self.budget <= 0:
            return 100.0 if self.spent > 0 else 0.0
        return min(self.spent / self.budget * 100, 100.0)


@dataclass
class FinancialMetrics:
    current_balance: float = 0.0
    monthly_spending: float = 0.0
    goal_progress: List[GoalProgress] = field(default_factory=list)
    budget_status: List[BudgetStatus] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def _as_date(now) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


def _magnitude(tx) -> float:
    return abs(parse_amount(tx.amount))


def _payments(transactions: Iterable) -> Iterable:
    return (tx for tx in transactions if tx.type == PAYMENT)


def compute_balance(transactions: Iterable) -> float:
    balance = 0.0
    for tx in transactions:
        if tx.type == INCOME:
            balance += _magnitude(tx)
        else:
            balance -= _magnitude(tx)
    return balance


def compute_monthly_spending(transactions: Iterable, now) -> float:
    """Sum of payments dated within the 30 days ending at ``now`` (inclusive)."""
    end = _as_date(now)
    start = end - timedelta(days=SPENDING_WINDOW_DAYS)
    total = 0.0
    for tx in _payments(transactions):
        tx_date = parse_date(tx.date)
        if tx_date is None or not start <= tx_date <= end:
            continue
        total += _magnitude(tx)
    return total


def compute_goal_progress(transactions: Iterable, category: str, target_amount) -> GoalProgress:
    paid = sum(_magnitude(tx) for tx in _payments(transactions) if tx.category == category)
    return GoalProgress(category=category, target=parse_amount(target_amount), paid=paid)


def compute_budget_status(transactions: Iterable, discretionary: Dict[str, float], now) -> List[BudgetStatus]:
    """
    Compare spending with the pro-rated budget of each discretionary category.

    ``spent`` covers the whole log, not just the current month; only the
    projection is pro-rated by how far through the month ``now`` is.
    """
    today = _as_date(now)
    progress = today.day / days_in_month(today)
    transactions = list(transactions)

    statuses = []
    for category, monthly_budget in discretionary.items():
        budget = parse_amount(monthly_budget)
        spent = sum(_magnitude(tx) for tx in _payments(transactions) if tx.category == category)
        projected = budget * progress
        if budget == 0:
            remaining = -spent
            is_over = spent > 0
        else:
            remaining = budget - spent
            is_over = spent > projected
        statuses.append(BudgetStatus(
            category=category,
            budget=budget,
            spent=spent,
            progress=progress,
            projected=projected,
            remaining=remaining,
            is_over=is_over,
        ))
    return statuses


def compute_metrics(transactions: Iterable, budget_config, goals: Iterable, now) -> FinancialMetrics:
    transactions = list(transactions)
    goal_progress = []
    for goal in goals:
        result = compute_goal_progress(transactions, goal.category, goal.target)
        result.name = goal.name
        goal_progress.append(result)
    return FinancialMetrics(
        current_balance=compute_balance(transactions),
        monthly_spending=compute_monthly_spending(transactions, now),
        goal_progress=goal_progress,
        budget_status=compute_budget_status(transactions, budget_config.discretionary, now),
    )

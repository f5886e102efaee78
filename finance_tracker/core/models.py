# finance_tracker/core/models.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from finance_tracker.core.metrics import FinancialMetrics, compute_metrics
from finance_tracker.utils import generate_id, normalize_header, parse_amount


class TransactionType(str, Enum):
    PAYMENT = "payment"
    INCOME = "income"

    @classmethod
    def parse(cls, value):
        # Rows without a recognisable type were written as payments.
        text = str(value or "").strip().lower()
        return cls.INCOME if text == cls.INCOME.value else cls.PAYMENT


# (attribute, header) pairs in sheet column order, used for reads and writes.
TRANSACTION_COLUMNS = (
    ("id", "id"),
    ("date", "date"),
    ("amount", "amount"),
    ("description", "description"),
    ("category", "category"),
    ("type", "type"),
    ("recorded_at", "recordedAt"),
)

TRANSACTION_HEADERS = [header for _, header in TRANSACTION_COLUMNS]


def _text(value):
    return "" if value is None else str(value).strip()


@dataclass(frozen=True)
class Transaction:
    id: str
    date: str
    amount: float
    description: str = ""
    category: str = ""
    type: TransactionType = TransactionType.PAYMENT
    recorded_at: str = ""

    @property
    def is_income(self):
        return self.type == TransactionType.INCOME

    def to_row(self):
        values = self.to_dict()
        return [values[attr] for attr, _ in TRANSACTION_COLUMNS]

    def to_row_mapping(self):
        values = self.to_dict()
        return {header: values[attr] for attr, header in TRANSACTION_COLUMNS}

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.date,
            "amount": self.amount,
            "description": self.description,
            "category": self.category,
            "type": self.type.value,
            "recorded_at": self.recorded_at,
        }

    @classmethod
    def from_row(cls, row):
        """
        Build a Transaction from a header-keyed mapping. Keys are matched
        after header normalisation, so both ``recordedAt`` and
        ``recorded_at`` are accepted.
        """
        cells = {normalize_header(key): value for key, value in row.items()}

        def cell(attr, header):
            value = cells.get(normalize_header(header))
            if value is None:
                value = cells.get(attr)
            return value

        values = {attr: cell(attr, header) for attr, header in TRANSACTION_COLUMNS}
        return cls(
            id=_text(values["id"]) or generate_id(),
            date=_text(values["date"]),
            amount=parse_amount(values["amount"]),
            description=_text(values["description"]),
            category=_text(values["category"]),
            type=TransactionType.parse(values["type"]),
            recorded_at=_text(values["recorded_at"]),
        )

    from_dict = from_row


@dataclass
class BudgetConfig:
    monthly_income: float = 0.0
    fixed_costs: Dict[str, float] = field(default_factory=dict)
    discretionary: Dict[str, float] = field(default_factory=dict)

    def to_dict(self):
        return {
            "monthly_income": self.monthly_income,
            "fixed_costs": dict(self.fixed_costs),
            "discretionary": dict(self.discretionary),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            monthly_income=parse_amount(data.get("monthly_income")),
            fixed_costs={str(k): parse_amount(v) for k, v in (data.get("fixed_costs") or {}).items()},
            discretionary={str(k): parse_amount(v) for k, v in (data.get("discretionary") or {}).items()},
        )


@dataclass(frozen=True)
class Goal:
    name: str
    category: str
    target: float

    def to_dict(self):
        return {"name": self.name, "category": self.category, "target": self.target}

    @classmethod
    def from_dict(cls, data):
        category = _text(data.get("category"))
        return cls(
            name=_text(data.get("name")) or category,
            category=category,
            target=parse_amount(data.get("target")),
        )


@dataclass
class FinancialState:
    """
    Everything a session knows. Derived figures are not stored here;
    ``metrics()`` recomputes them from the log on every call.
    """
    transactions: List[Transaction] = field(default_factory=list)
    budget_config: BudgetConfig = field(default_factory=BudgetConfig)
    categories: List[str] = field(default_factory=list)
    goals: List[Goal] = field(default_factory=list)

    def metrics(self, now) -> FinancialMetrics:
        return compute_metrics(self.transactions, self.budget_config, self.goals, now)

    def to_dict(self, now=None):
        data = {
            "transactions": [tx.to_dict() for tx in self.transactions],
            "budget_config": self.budget_config.to_dict(),
            "categories": list(self.categories),
            "goals": [goal.to_dict() for goal in self.goals],
        }
        if now is not None:
            metrics = self.metrics(now)
            data["current_balance"] = metrics.current_balance
            data["monthly_spending"] = metrics.monthly_spending
            data["goal_progress"] = [
                {"name": g.name, "category": g.category, "paid": g.paid, "target": g.target}
                for g in metrics.goal_progress
            ]
        return data

    @classmethod
    def from_dict(cls, data):
        """Rebuild a state from ``to_dict`` output. Derived figures are ignored."""
        return cls(
            transactions=[Transaction.from_dict(tx) for tx in data.get("transactions") or []],
            budget_config=BudgetConfig.from_dict(data.get("budget_config") or {}),
            categories=[str(c) for c in data.get("categories") or []],
            goals=[Goal.from_dict(g) for g in data.get("goals") or []],
        )

import json
import logging
from datetime import date

from finance_tracker.budget import default_state
from finance_tracker.cache import LocalCache
from finance_tracker.core.models import BudgetConfig, FinancialState, Goal, Transaction, TransactionType


def sample_state():
    return FinancialState(
        transactions=[
            Transaction(
                id="tx_1", date="2025-05-01", amount=2000.0, description="Salary",
                category="income", type=TransactionType.INCOME, recorded_at="2025-05-01T09:00:00.000Z",
            ),
            Transaction(
                id="tx_2", date="2025-05-02", amount=-42.1, description="Groceries",
                category="groceries", type=TransactionType.PAYMENT, recorded_at="2025-05-02T09:00:00.000Z",
            ),
        ],
        budget_config=BudgetConfig(
            monthly_income=4380.0,
            fixed_costs={"rent": 1270.0},
            discretionary={"groceries": 300.0},
        ),
        categories=["groceries", "income"],
        goals=[Goal(name="amex", category="amex", target=2100.0)],
    )


def make_cache(tmp_path):
    return LocalCache(tmp_path, today=lambda: date(2025, 5, 10))


def test_snapshot_round_trip(tmp_path):
    cache = make_cache(tmp_path)
    state = sample_state()
    cache.save_snapshot(state)
    assert cache.load_snapshot() == state


def test_snapshot_includes_derived_figures(tmp_path):
    cache = make_cache(tmp_path)
    cache.save_snapshot(sample_state())
    data = json.loads(cache.path.read_text())
    assert data["current_balance"] == 2000.0 - 42.1
    assert data["monthly_spending"] == 42.1
    assert data["goal_progress"][0]["target"] == 2100.0


def test_save_overwrites_previous_snapshot(tmp_path):
    cache = make_cache(tmp_path)
    cache.save_snapshot(sample_state())
    cache.save_snapshot(default_state())
    assert cache.load_snapshot().transactions == []


def test_missing_snapshot_gives_defaults(tmp_path):
    assert make_cache(tmp_path).load_snapshot() == default_state()


def test_corrupt_snapshot_is_discarded(tmp_path, caplog):
    cache = make_cache(tmp_path)
    cache.path.write_text("{not json")

    with caplog.at_level(logging.ERROR):
        state = cache.load_snapshot()

    assert state == default_state()
    assert not cache.path.exists()
    assert "corrupt snapshot" in caplog.text


def test_wrongly_shaped_snapshots_give_defaults(tmp_path):
    cache = make_cache(tmp_path)
    nested = '[' * 200000
    for payload in ('[1, 2]', '{"transactions": [1]}', '{"budget_config": "x"}', '', nested):
        cache.path.write_text(payload)
        assert cache.load_snapshot() == default_state()


def test_clear(tmp_path):
    cache = make_cache(tmp_path)
    assert cache.clear() is None
    cache.save_snapshot(sample_state())
    assert cache.clear() == cache.path
    assert not cache.path.exists()

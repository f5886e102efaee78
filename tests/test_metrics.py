from datetime import date, datetime

from finance_tracker.core.metrics import (
    compute_balance,
    compute_budget_status,
    compute_goal_progress,
    compute_metrics,
    compute_monthly_spending,
)
from finance_tracker.core.models import BudgetConfig, Goal, Transaction, TransactionType


def make_tx(amount, type_='payment', category='groceries', day='2025-05-10'):
    return Transaction(
        id=f"tx_{category}_{amount}_{day}",
        date=day,
        amount=amount,
        category=category,
        type=TransactionType(type_),
    )


def test_balance_payment_and_income():
    txs = [make_tx(-50), make_tx(1000, 'income', category='income')]
    assert compute_balance(txs) == 950


def test_balance_ignores_sign_of_stored_amount():
    txs = [
        make_tx(1200, 'income', category='income'),
        make_tx(-50),
        make_tx(25, category='flex'),
        make_tx(-100, 'income', category='income'),
    ]
    # income adds its magnitude, everything else subtracts it
    assert compute_balance(txs) == 1200 + 100 - 50 - 25
    assert compute_balance(list(reversed(txs))) == compute_balance(txs)


def test_balance_empty_log_is_zero():
    assert compute_balance([]) == 0


def test_monthly_spending_window():
    now = date(2025, 5, 31)
    txs = [
        make_tx(-10, day='2025-05-31'),
        make_tx(-20, day='2025-05-01'),   # exactly 30 days before
        make_tx(-40, day='2025-04-30'),   # 31 days before
        make_tx(-7, day='05/15/2025'),
        make_tx(1000, 'income', category='income', day='2025-05-20'),
        make_tx(-5, day='not-a-date'),
        make_tx(-3, day=''),
        make_tx(-60, day='2025-06-01'),
    ]
    assert compute_monthly_spending(txs, now) == 37


def test_monthly_spending_accepts_datetime():
    txs = [make_tx(-10, day='2025-05-31')]
    assert compute_monthly_spending(txs, datetime(2025, 5, 31, 23, 59)) == 10


def test_goal_progress_is_not_capped():
    txs = [
        make_tx(-1500, category='amex'),
        make_tx(-1000, category='amex'),
        make_tx(300, 'income', category='amex'),
        make_tx(-80, category='groceries'),
    ]
    progress = compute_goal_progress(txs, 'amex', 2100)
    assert progress.paid == 2500
    assert progress.target == 2100
    assert progress.display_percent == 100.0


def test_goal_progress_partial_percent():
    progress = compute_goal_progress([make_tx(-1050, category='amex')], 'amex', '2100')
    assert progress.display_percent == 50.0


def test_budget_status_over_projection():
    txs = [make_tx(-300, category='groceries')]
    # June has 30 days
    [status] = compute_budget_status(txs, {'groceries': 300}, date(2025, 6, 15))
    assert status.progress == 0.5
    assert status.projected == 150
    assert status.is_over is True
    assert status.remaining == 0
    assert status.percent_used == 100.0


def test_budget_status_counts_all_history():
    txs = [
        make_tx(-40, category='transport', day='2024-01-03'),
        make_tx(-10, category='transport', day='2025-06-02'),
    ]
    [status] = compute_budget_status(txs, {'transport': 160}, date(2025, 6, 30))
    assert status.spent == 50
    assert status.remaining == 110
    assert status.is_over is False


def test_budget_status_zero_budget():
    spent = compute_budget_status([make_tx(-10, category='flex')], {'flex': 0}, date(2025, 6, 1))
    assert spent[0].remaining == -10
    assert spent[0].is_over is True

    untouched = compute_budget_status([], {'flex': 0}, date(2025, 6, 1))
    assert untouched[0].remaining == 0
    assert untouched[0].is_over is False


def test_budget_status_only_tracks_discretionary_categories():
    txs = [make_tx(-10, category='rent'), make_tx(-5, category='groceries')]
    statuses = compute_budget_status(txs, {'groceries': 300, 'flex': 302}, date(2025, 6, 1))
    assert [s.category for s in statuses] == ['groceries', 'flex']
    assert [s.spent for s in statuses] == [5, 0]


def test_non_numeric_amounts_count_as_zero():
    tx = Transaction.from_row({'id': 'a', 'date': '2025-05-10', 'amount': 'abc', 'type': 'payment'})
    assert tx.amount == 0.0
    assert compute_balance([tx, make_tx(-5)]) == -5


def test_compute_metrics_bundles_everything():
    txs = [
        make_tx(2000, 'income', category='income', day='2025-05-01'),
        make_tx(-500, category='amex', day='2025-05-02'),
        make_tx(-45, category='groceries', day='2025-05-03'),
    ]
    config = BudgetConfig(monthly_income=4380, discretionary={'groceries': 300})
    goals = [Goal(name='amex', category='amex', target=2100)]

    metrics = compute_metrics(txs, config, goals, date(2025, 5, 10))

    assert metrics.current_balance == 1455
    assert metrics.monthly_spending == 545
    assert metrics.goal_progress[0].name == 'amex'
    assert metrics.goal_progress[0].paid == 500
    assert metrics.budget_status[0].spent == 45
    assert metrics.to_dict()['current_balance'] == 1455


def test_monthly_spending_reads_utc_timestamps():
    txs = [
        make_tx(-10, day='2025-05-20T12:00:00.000Z'),
        make_tx(-4, day='2025-05-21T08:30:00Z'),
        make_tx(-99, day='2025-03-01T08:30:00Z'),
    ]
    assert compute_monthly_spending(txs, date(2025, 5, 31)) == 14

import logging
from datetime import date

import pytest

from finance_tracker.budget import default_state
from finance_tracker.cache import LocalCache
from finance_tracker.core.models import TransactionType
from finance_tracker.errors import RemoteUnavailable, ValidationError
from finance_tracker.ingestion import submit_income, submit_payment
from finance_tracker.stores.base import BaseStore
from finance_tracker.stores.csv_store import CSVStore

TODAY = date(2025, 5, 10)


class FakeStore(BaseStore):
    def __init__(self, fail=False):
        self.fail = fail
        self.rows = []

    def read_table(self, name):
        return []

    def append_row(self, name, record):
        if self.fail:
            raise RemoteUnavailable("quota exceeded")
        self.rows.append((name, dict(record)))

    def check_connection(self):
        pass


@pytest.fixture
def cache(tmp_path):
    return LocalCache(tmp_path / "cache", today=lambda: TODAY)


def test_submit_payment_records_negative_amount(cache):
    state = default_state()
    store = FakeStore()

    result = submit_payment(state, store, cache, "12.50", "  Trader Joe's ", "groceries", today=TODAY)

    tx = result.transaction
    assert result.synced is True
    assert tx.amount == -12.5
    assert tx.type == TransactionType.PAYMENT
    assert tx.description == "Trader Joe's"
    assert tx.date == "2025-05-10"
    assert tx.id.startswith("tx_")
    assert tx.recorded_at.endswith("Z")
    assert state.transactions == [tx]

    name, row = store.rows[0]
    assert name == "transactions"
    assert row["id"] == tx.id
    assert row["amount"] == -12.5
    assert row["recordedAt"] == tx.recorded_at

    assert cache.load_snapshot() == state


def test_submit_income_is_positive_and_categorised(cache):
    state = default_state()

    result = submit_income(state, FakeStore(), cache, 1000, " Salary ", today=TODAY)

    tx = result.transaction
    assert tx.amount == 1000
    assert tx.type == TransactionType.INCOME
    assert tx.category == "income"
    assert tx.description == "Salary"
    assert result.metrics.current_balance == 1000


@pytest.mark.parametrize("amount", ["0", "-3", "abc", "", None, "nan", "inf", 0, -12.5, True])
def test_invalid_amount_leaves_everything_untouched(cache, amount):
    state = default_state()
    store = FakeStore()

    with pytest.raises(ValidationError):
        submit_payment(state, store, cache, amount, "Coffee", "flex", today=TODAY)

    assert state.transactions == []
    assert store.rows == []
    assert not cache.path.exists()


def test_payment_requires_description_and_category(cache):
    state = default_state()
    with pytest.raises(ValidationError, match="Description"):
        submit_payment(state, FakeStore(), cache, "5", "   ", "flex", today=TODAY)
    with pytest.raises(ValidationError, match="Category"):
        submit_payment(state, FakeStore(), cache, "5", "Coffee", None, today=TODAY)
    with pytest.raises(ValidationError, match="Source"):
        submit_income(state, FakeStore(), cache, "5", "", today=TODAY)
    assert state.transactions == []


def test_remote_failure_still_records_locally_once(cache, caplog):
    state = default_state()

    with caplog.at_level(logging.WARNING):
        result = submit_payment(state, FakeStore(fail=True), cache, "20", "Bus", "transport", today=TODAY)

    assert result.synced is False
    assert state.transactions == [result.transaction]
    assert cache.load_snapshot().transactions == [result.transaction]
    assert "Remote save failed" in caplog.text


def test_offline_submission_is_not_synced(cache):
    state = default_state()
    result = submit_income(state, None, cache, "250", "Refund", today=TODAY)
    assert result.synced is False
    assert len(state.transactions) == 1


def test_submissions_keep_entry_order_and_recompute(cache):
    state = default_state()
    store = FakeStore()

    submit_income(state, store, cache, "1000", "Salary", today=TODAY)
    last = submit_payment(state, store, cache, "50", "Groceries run", "groceries", today=TODAY)

    assert [tx.description for tx in state.transactions] == ["Salary", "Groceries run"]
    assert [row["description"] for _, row in store.rows] == ["Salary", "Groceries run"]
    assert last.metrics.current_balance == 950
    assert last.metrics.monthly_spending == 50


class BrokenStore(FakeStore):
    def append_row(self, name, record):
        raise ValueError("unexpected response")


def test_unexpected_store_error_still_records_locally(cache, caplog):
    state = default_state()

    with caplog.at_level(logging.ERROR):
        result = submit_payment(state, BrokenStore(), cache, "5", "Coffee", "flex", today=TODAY)

    assert result.synced is False
    assert state.transactions == [result.transaction]
    assert cache.load_snapshot().transactions == [result.transaction]
    assert "Unexpected error saving" in caplog.text


def test_undecodable_csv_table_does_not_block_payment(tmp_path, cache):
    tables = tmp_path / "tables"
    tables.mkdir()
    (tables / "transactions.csv").write_bytes(b"\xff\xfeid,date\n")
    state = default_state()

    result = submit_payment(state, CSVStore({"csv_store_dir": str(tables)}), cache,
                            "5", "Coffee", "flex", today=TODAY)

    assert result.synced is False
    assert len(state.transactions) == 1

# finance_tracker/ingestion.py
"""Record payments and income.

The in-memory log is authoritative for the running session. The remote
store is only a sync target: a failed remote append is logged and the
record is still appended locally and cached. Records that only made it
locally are flagged with ``synced=False`` and are not reconciled here.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

from finance_tracker.cache import LocalCache
from finance_tracker.core.metrics import FinancialMetrics
from finance_tracker.core.models import FinancialState, Transaction, TransactionType
from finance_tracker.errors import RemoteUnavailable, ValidationError
from finance_tracker.stores.base import BaseStore
from finance_tracker.utils import generate_id, utc_timestamp

logger = logging.getLogger(__name__)

TRANSACTIONS_TABLE = "transactions"
INCOME_CATEGORY = "income"


@dataclass
class Submission:
    transaction: Transaction
    synced: bool
    metrics: FinancialMetrics


def _parse_positive_amount(amount_input) -> float:
    if isinstance(amount_input, bool) or amount_input is None:
        raise ValidationError("Amount is required")
    try:
        amount = float(str(amount_input).replace("$", "").replace(",", "").strip())
    except ValueError as exc:
        raise ValidationError(f"Amount must be a number, got {amount_input!r}") from exc
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("Amount must be greater than zero")
    return amount


def _required_text(value, field_name: str) -> str:
    text = str(value or "").strip()
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def _record(
    state: FinancialState,
    store: Optional[BaseStore],
    cache: LocalCache,
    tx: Transaction,
    today: date,
) -> Submission:
    synced = False
    if store is None:
        logger.info("Offline: %s %s kept locally", tx.type.value, tx.id)
    else:
        try:
            store.append_row(TRANSACTIONS_TABLE, tx.to_row_mapping())
            synced = True
        except RemoteUnavailable as exc:
            logger.warning("Remote save failed for %s, keeping it locally: %s", tx.id, exc)
        except Exception:
            # The record is kept locally whatever the store raised.
            logger.exception("Unexpected error saving %s remotely, keeping it locally", tx.id)

    state.transactions.append(tx)
    metrics = state.metrics(today)
    cache.save_snapshot(state)
    return Submission(transaction=tx, synced=synced, metrics=metrics)


def submit_payment(
    state: FinancialState,
    store: Optional[BaseStore],
    cache: LocalCache,
    amount_input,
    description,
    category,
    *,
    today: Optional[date] = None,
) -> Submission:
    """
    Validate and record a payment. The amount must be positive and is
    stored negated. Raises ValidationError without touching
    the state, the store or the cache.
    """
    amount = _parse_positive_amount(amount_input)
    description = _required_text(description, "Description")
    category = _required_text(category, "Category")

    today = today or date.today()
    tx = Transaction(
        id=generate_id(),
        date=today.isoformat(),
        amount=-abs(amount),
        description=description,
        category=category,
        type=TransactionType.PAYMENT,
        recorded_at=utc_timestamp(),
    )
    return _record(state, store, cache, tx, today)


def submit_income(
    state: FinancialState,
    store: Optional[BaseStore],
    cache: LocalCache,
    amount_input,
    source,
    *,
    today: Optional[date] = None,
) -> Submission:
    """Validate and record income; the amount is stored positive."""
    amount = _parse_positive_amount(amount_input)
    source = _required_text(source, "Source")

    today = today or date.today()
    tx = Transaction(
        id=generate_id(),
        date=today.isoformat(),
        amount=abs(amount),
        description=source,
        category=INCOME_CATEGORY,
        type=TransactionType.INCOME,
        recorded_at=utc_timestamp(),
    )
    return _record(state, store, cache, tx, today)

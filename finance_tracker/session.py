# finance_tracker/session.py
from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Optional

from finance_tracker import ingestion
from finance_tracker.budget import default_state, state_from_tables
from finance_tracker.cache import LocalCache
from finance_tracker.core.metrics import FinancialMetrics
from finance_tracker.core.models import FinancialState, Transaction
from finance_tracker.errors import RemoteUnavailable
from finance_tracker.stores.base import BaseStore

logger = logging.getLogger(__name__)


class TrackerSession:
    """
    Owns the one FinancialState of a running session. The state is loaded
    from the remote store when it is reachable and from the local cache
    otherwise; every submission goes through ``ingestion``.
    """

    def __init__(
        self,
        store: Optional[BaseStore],
        cache: LocalCache,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.cache = cache
        self.today = today
        self.state: FinancialState = default_state()
        self.source: Optional[str] = None

    @property
    def offline(self) -> bool:
        return self.store is None

    def load(self) -> FinancialState:
        if self.store is not None:
            try:
                self.state = state_from_tables(self.store.load_tables())
                self.source = "remote"
                return self.state
            except RemoteUnavailable as exc:
                logger.warning("Remote load failed, using local cache: %s", exc)
        self.state = self.cache.load_snapshot()
        self.source = "cache"
        return self.state

    def metrics(self) -> FinancialMetrics:
        return self.state.metrics(self.today())

    def recent(self, limit: int = 10) -> List[Transaction]:
        """Most recently entered transactions, newest first."""
        if limit <= 0:
            return []
        return list(reversed(self.state.transactions[-limit:]))

    def submit_payment(self, amount, description, category) -> ingestion.Submission:
        return ingestion.submit_payment(
            self.state, self.store, self.cache, amount, description, category,
            today=self.today(),
        )

    def submit_income(self, amount, source) -> ingestion.Submission:
        return ingestion.submit_income(
            self.state, self.store, self.cache, amount, source,
            today=self.today(),
        )

    def export(self, output) -> str:
        return output.write(self.state, self.today())

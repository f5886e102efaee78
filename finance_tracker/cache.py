# finance_tracker/cache.py
from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Callable, Optional

from finance_tracker.budget import default_state
from finance_tracker.core.models import FinancialState
from finance_tracker.errors import CacheCorrupt

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "financial_data"


class LocalCache:
    """
    Durable key-value storage on the local disk. Each key is one JSON file
    in ``directory``; the financial snapshot lives under ``SNAPSHOT_KEY``.
    """

    def __init__(
        self,
        directory: Path,
        key: str = SNAPSHOT_KEY,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.directory = Path(directory)
        self.key = key
        self.today = today

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def save_snapshot(self, state: FinancialState) -> None:
        """Overwrite the stored snapshot with the full *state*."""
        self.directory.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fp:
            json.dump(state.to_dict(now=self.today()), fp, indent=2)
        logger.debug("Saved snapshot with %d transaction(s) to %s", len(state.transactions), self.path)

    def _decode(self, raw: bytes) -> FinancialState:
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise CacheCorrupt(f"expected an object, got {type(data).__name__}")
            return FinancialState.from_dict(data)
        except (ValueError, TypeError, AttributeError, RecursionError) as exc:
            raise CacheCorrupt(str(exc)) from exc

    def load_snapshot(self) -> FinancialState:
        """
        Return the stored state, or the default state if there is none.
        A snapshot that can't be decoded is discarded and replaced by the
        defaults rather than raised.
        """
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return default_state()
        try:
            state = self._decode(raw)
        except CacheCorrupt as exc:
            logger.error("Discarding corrupt snapshot %s: %s", self.path, exc)
            self.clear()
            return default_state()
        logger.info("Loaded %d transaction(s) from local cache", len(state.transactions))
        return state

    def clear(self) -> Optional[Path]:
        if not self.path.exists():
            return None
        self.path.unlink()
        return self.path

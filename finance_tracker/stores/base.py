# finance_tracker/stores/base.py
import logging
from abc import ABC, abstractmethod

from finance_tracker.errors import RemoteUnavailable
from finance_tracker.utils import normalize_header

logger = logging.getLogger(__name__)

TABLES = ("transactions", "budget_config", "categories", "goals")


def parse_rows(grid):
    """
    Convert a 2-D grid into header-keyed dicts. The first row holds the
    field names; short rows are padded with empty strings.
    """
    if not grid:
        return []
    headers = [normalize_header(h) for h in grid[0]]
    rows = []
    for raw in grid[1:]:
        rows.append({
            header: (raw[idx] if idx < len(raw) and raw[idx] is not None else '')
            for idx, header in enumerate(headers)
        })
    return rows


def order_values(header, record):
    """
    Lay out *record* in the column order of an existing *header* row.
    Keys with no matching column are dropped with a warning.
    """
    normalized = {normalize_header(k): v for k, v in record.items()}
    columns = [normalize_header(h) for h in header]
    unknown = set(normalized) - set(columns)
    if unknown:
        logger.warning("Dropping fields with no matching column: %s", ", ".join(sorted(unknown)))
    return [normalized.get(col, '') for col in columns]


class BaseStore(ABC):
    """
    A tabular data source addressed by table name. Implementations raise
    RemoteUnavailable for every transport, auth or quota failure.
    """

    @abstractmethod
    def read_table(self, name):
        """Return the rows of table *name* as a list of header-keyed dicts."""

    @abstractmethod
    def append_row(self, name, record):
        """Append *record*, a header-keyed mapping, as one row of table *name*."""

    @abstractmethod
    def check_connection(self):
        """Raise RemoteUnavailable if the store can't be reached."""

    def test_connection(self):
        try:
            self.check_connection()
        except RemoteUnavailable as exc:
            return False, f"Connection failed: {exc}"
        return True, "Successfully connected"

    def load_tables(self):
        """
        Read every known table. A failed connection check propagates; a
        single unreadable table is logged and treated as empty.
        """
        self.check_connection()
        tables = {}
        for name in TABLES:
            try:
                tables[name] = self.read_table(name)
            except RemoteUnavailable as exc:
                logger.warning("Could not read table %s: %s", name, exc)
                tables[name] = []
        logger.info(
            "Loaded %d transaction row(s) from %s",
            len(tables["transactions"]), type(self).__name__,
        )
        return tables

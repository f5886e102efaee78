# finance_tracker/stores/csv_store.py
import csv
import logging
from pathlib import Path

from finance_tracker.errors import RemoteUnavailable
from finance_tracker.stores.base import BaseStore, order_values, parse_rows

logger = logging.getLogger(__name__)

# UnicodeDecodeError is a ValueError.
_FAILURES = (OSError, ValueError, csv.Error)


class CSVStore(BaseStore):
    """
    A directory of ``<table>.csv`` files laid out like the spreadsheet tabs.
    A missing directory or table counts as the store being unavailable.
    """
    def __init__(self, config):
        self.directory = Path(config.get('csv_store_dir', 'data/tables'))

    def _path(self, name):
        return self.directory / f"{name}.csv"

    def check_connection(self):
        if not self.directory.is_dir():
            raise RemoteUnavailable(f"Table directory not found: {self.directory}")

    def read_table(self, name):
        path = self._path(name)
        try:
            with open(path, newline='', encoding='utf-8') as f:
                grid = list(csv.reader(f))
        except _FAILURES as exc:
            raise RemoteUnavailable(f"Error reading table {name}: {exc}") from exc
        return parse_rows(grid)

    def append_row(self, name, record):
        self.check_connection()
        path = self._path(name)
        try:
            header = []
            if path.exists():
                with open(path, newline='', encoding='utf-8') as f:
                    header = next(csv.reader(f), [])
            with open(path, 'a', newline='', encoding='utf-8') as f:
                writer = csv.writer(f)
                if not header:
                    header = list(record)
                    writer.writerow(header)
                writer.writerow(order_values(header, record))
        except _FAILURES as exc:
            raise RemoteUnavailable(f"Error appending to table {name}: {exc}") from exc
        logger.info("Appended row to %s", path)

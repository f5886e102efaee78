# finance_tracker/stores/sheets_store.py
import logging

import gspread
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from finance_tracker.errors import RemoteUnavailable
from finance_tracker.stores.base import BaseStore, order_values, parse_rows

logger = logging.getLogger(__name__)

# requests' exceptions derive from OSError; ValueError covers bad key files.
_FAILURES = (gspread.exceptions.GSpreadException, GoogleAuthError, OSError, ValueError)


class SheetsStore(BaseStore):
    """
    Google Sheets spreadsheet used as the remote database. Each table is a
    worksheet whose first row holds the column names.
    """
    SCOPES = ['https://www.googleapis.com/auth/spreadsheets']

    def __init__(self, config):
        google_cfg = config.get('google', {})
        self.service_account_file = google_cfg.get('service_account_file')
        self.spreadsheet_id = google_cfg.get('spreadsheet_id')
        self._spreadsheet = None

    def _open(self):
        if self._spreadsheet is not None:
            return self._spreadsheet
        if not self.spreadsheet_id or not self.service_account_file:
            raise RemoteUnavailable("Google Sheets configuration missing (spreadsheet_id, service_account_file)")
        try:
            creds = Credentials.from_service_account_file(
                self.service_account_file, scopes=self.SCOPES
            )
            gc = gspread.authorize(creds)
            self._spreadsheet = gc.open_by_key(self.spreadsheet_id)
        except _FAILURES as exc:
            raise RemoteUnavailable(f"Could not open spreadsheet {self.spreadsheet_id}: {exc}") from exc
        logger.debug("Opened spreadsheet %s", self.spreadsheet_id)
        return self._spreadsheet

    def _worksheet(self, name):
        sh = self._open()
        try:
            return sh.worksheet(name)
        except _FAILURES as exc:
            raise RemoteUnavailable(f"Could not open worksheet {name}: {exc}") from exc

    def check_connection(self):
        ws = self._worksheet('transactions')
        try:
            ws.get('A1:A1')
        except _FAILURES as exc:
            raise RemoteUnavailable(str(exc)) from exc

    def read_table(self, name):
        ws = self._worksheet(name)
        try:
            grid = ws.get_all_values()
        except _FAILURES as exc:
            raise RemoteUnavailable(f"Error reading sheet {name}: {exc}") from exc
        return parse_rows(grid)

    def append_row(self, name, record):
        ws = self._worksheet(name)
        try:
            header = ws.row_values(1)
            if not header:
                header = list(record)
                ws.append_row(header, value_input_option='USER_ENTERED')
            ws.append_row(
                order_values(header, record),
                value_input_option='USER_ENTERED',
                insert_data_option='INSERT_ROWS',
            )
        except _FAILURES as exc:
            raise RemoteUnavailable(f"Error appending to sheet {name}: {exc}") from exc
        logger.info("Appended row to sheet %s", name)

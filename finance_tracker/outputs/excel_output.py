# finance_tracker/outputs/excel_output.py

"""Excel export backed by XlsxWriter.

The workbook has three worksheets: ``Transactions`` with the log in entry
order, ``Budget`` with the discretionary budget status as of the export
date, and ``Summary`` aggregating payments by month and category.
"""

from __future__ import annotations

import logging
import os

import xlsxwriter

from finance_tracker.core.models import TRANSACTION_HEADERS
from finance_tracker.outputs.base import BaseOutput
from finance_tracker.utils import parse_date

logger = logging.getLogger(__name__)


class ExcelOutput(BaseOutput):
    """Generate a local Excel workbook from the financial state."""

    TRANSACTIONS = "Transactions"
    BUDGET = "Budget"
    SUMMARY = "Summary"
    UNDATED = "undated"

    def __init__(self, config: dict):
        self.config = config
        self.output_dir = config.get("export_dir", "exports")
        os.makedirs(self.output_dir, exist_ok=True)

    def write(self, state, today):
        out_path = os.path.join(self.output_dir, self.filename(today, "xlsx"))
        workbook = xlsxwriter.Workbook(out_path)
        amount_fmt = workbook.add_format({"num_format": "$#,##0.00"})

        # Transactions, in the order they were entered
        tx_ws = workbook.add_worksheet(self.TRANSACTIONS)
        tx_ws.freeze_panes(1, 0)
        tx_ws.write_row(0, 0, TRANSACTION_HEADERS)
        amount_col = TRANSACTION_HEADERS.index("amount")
        for idx, tx in enumerate(state.transactions, start=1):
            row = tx.to_row()
            tx_ws.write_row(idx, 0, row)
            tx_ws.write_number(idx, amount_col, float(tx.amount), amount_fmt)
        tx_ws.set_column(amount_col, amount_col, None, amount_fmt)
        tx_ws.add_table(0, 0, max(len(state.transactions), 1), len(TRANSACTION_HEADERS) - 1, {
            "columns": [{"header": h} for h in TRANSACTION_HEADERS]
        })

        # Budget status for the export date
        budget_ws = workbook.add_worksheet(self.BUDGET)
        budget_ws.freeze_panes(1, 0)
        budget_rows = self._budget_rows(state.metrics(today).budget_status)
        budget_ws.write_row(0, 0, budget_rows[0])
        for idx, row in enumerate(budget_rows[1:], start=1):
            budget_ws.write(idx, 0, row[0])
            for col in range(1, 5):
                budget_ws.write_number(idx, col, row[col], amount_fmt)
            budget_ws.write(idx, 5, row[5])

        # Summary of payments by month and category
        summary_ws = workbook.add_worksheet(self.SUMMARY)
        summary_ws.freeze_panes(1, 0)
        summary_ws.set_column(2, 2, None, amount_fmt)
        summary_ws.write_row(0, 0, ["month", "category", "spent"])
        for idx, row in enumerate(self._summary_rows(state.transactions), start=1):
            summary_ws.write(idx, 0, row[0])
            summary_ws.write(idx, 1, row[1])
            summary_ws.write_number(idx, 2, row[2], amount_fmt)

        workbook.close()
        logger.info("Written Excel workbook %s", out_path)
        return out_path

    def _budget_rows(self, statuses):
        rows = [["category", "budget", "spent", "projected", "remaining", "status"]]
        for status in statuses:
            rows.append([
                status.category,
                status.budget,
                status.spent,
                status.projected,
                status.remaining,
                "OVER BUDGET" if status.is_over else "On Track",
            ])
        return rows

    def _summary_rows(self, transactions):
        summary_data = {}
        for tx in transactions:
            if tx.is_income:
                continue
            tx_date = parse_date(tx.date)
            month = tx_date.strftime("%Y-%m") if tx_date else self.UNDATED
            cats = summary_data.setdefault(month, {})
            cats[tx.category] = cats.get(tx.category, 0.0) + abs(tx.amount)

        # Dated months in order, anything unparseable last
        months = sorted(m for m in summary_data if m != self.UNDATED)
        if self.UNDATED in summary_data:
            months.append(self.UNDATED)

        rows = []
        grand_total = 0.0
        for month in months:
            cats = summary_data[month]
            for cat in sorted(cats):
                rows.append([month, cat, cats[cat]])
            month_total = sum(cats.values())
            rows.append([f"{month} Total", "", month_total])
            grand_total += month_total
        rows.append(["Grand Total", "", grand_total])
        return rows

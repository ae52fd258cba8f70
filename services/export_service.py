"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of a month of cash register activity.
"""

import io
from datetime import datetime

import pandas as pd
from dateutil.relativedelta import relativedelta

from models.transaction import ExchangePair
from services.balance_calculator import register_balances
from utils.logger import get_logger

logger = get_logger(__name__)


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """First instant of the month and first instant of the next one."""
    start = datetime(year, month, 1)
    return start, start + relativedelta(months=1)


class ExportService:
    """Builds downloadable register reports in CSV and Excel formats."""

    def __init__(self, register_service):
        self.register_service = register_service

    def _rows(self, entries) -> list[dict]:
        rows = []
        for entry in entries:
            legs = (entry.outgoing, entry.incoming) if isinstance(entry, ExchangePair) else (entry,)
            for tx in legs:
                rows.append({
                    "Date": tx.date.strftime("%Y-%m-%d %H:%M"),
                    "Type": tx.type,
                    "Amount": tx.amount,
                    "Currency": str(tx.currency),
                    "Exchange rate": tx.exchange_rate,
                    "Description": tx.description or "",
                    "Reference": tx.reference or "",
                })
        return rows

    def export_month_csv(self, year: int, month: int) -> io.BytesIO:
        """
        Export a month's register movements as CSV.

        Returns:
            A BytesIO buffer containing the CSV data.
        """
        entries = self.register_service.get_entries(*month_bounds(year, month))
        rows = self._rows(entries)

        df = pd.DataFrame(rows, columns=[
            "Date", "Type", "Amount", "Currency", "Exchange rate", "Description", "Reference",
        ])
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(rows)} register rows as CSV for {month}/{year}")
        return buffer

    def export_month_excel(self, year: int, month: int) -> io.BytesIO:
        """
        Export a month's register movements as Excel (.xlsx), with a
        second sheet holding the month's net balance per currency.
        """
        entries = self.register_service.get_entries(*month_bounds(year, month))
        rows = self._rows(entries)
        balances = register_balances(entries, self.register_service.currency_service)

        df = pd.DataFrame(rows, columns=[
            "Date", "Type", "Amount", "Currency", "Exchange rate", "Description", "Reference",
        ])
        summary = pd.DataFrame(
            [{"Currency": c.value, "Balance": b} for c, b in balances.items()]
        )

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Transactions", index=False)
            summary.to_excel(writer, sheet_name="Balances", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(rows)} register rows as Excel for {month}/{year}")
        return buffer

"""
repositories/register_repo.py
------------------------------
Data access layer for cash register movements.
All SQL queries related to the `cash_transactions` table live here.

Records are insert-only: the register never edits or deletes a movement.
"""

from dataclasses import replace
from datetime import datetime
from typing import Optional

from db.connection import get_connection, release_connection
from models.transaction import CashTransaction, ExchangePair
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = (
    "id, type, amount, currency, exchange_rate, description, "
    "reference, date, pair_id, created_at"
)


class CashTransactionRepository:
    """Repository for the cash_transactions table."""

    _INSERT_SQL = """
        INSERT INTO cash_transactions
            (type, amount, currency, exchange_rate, description, reference, date, pair_id)
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
        RETURNING id, created_at;
    """

    # ── CREATE ────────────────────────────────────────────

    def add(self, tx: CashTransaction) -> CashTransaction:
        """
        Insert a new movement.

        Returns:
            A copy of `tx` with `id` and `created_at` populated.
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                saved = self._insert(cur, tx)
            conn.commit()
            logger.info(f"Added {saved.type} #{saved.id}: {saved.amount:.2f} {saved.currency}")
            return saved
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add cash transaction: {e}")
            raise
        finally:
            release_connection(conn)

    def add_pair(self, pair: ExchangePair) -> ExchangePair:
        """
        Insert both legs of an exchange in a single database transaction.

        Returns:
            The pair with both legs' ids populated.
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                outgoing = self._insert(cur, pair.outgoing)
                incoming = self._insert(cur, pair.incoming)
            conn.commit()
            logger.info(
                f"Added exchange {pair.outgoing.pair_id}: "
                f"#{outgoing.id} {outgoing.currency} → #{incoming.id} {incoming.currency}"
            )
            return ExchangePair(outgoing=outgoing, incoming=incoming)
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add exchange pair: {e}")
            raise
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_all(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> list[CashTransaction]:
        """
        Fetch movements, optionally limited to [start, end).

        Returns:
            CashTransaction objects ordered oldest first.
        """
        sql = f"SELECT {_COLUMNS} FROM cash_transactions WHERE TRUE"
        params: list = []
        if start is not None:
            sql += " AND date >= %s"
            params.append(start)
        if end is not None:
            sql += " AND date < %s"
            params.append(end)
        sql += " ORDER BY date ASC, id ASC;"

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [self._row_to_transaction(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    def _insert(self, cur, tx: CashTransaction) -> CashTransaction:
        cur.execute(self._INSERT_SQL, (
            tx.type, tx.amount, str(tx.currency), tx.exchange_rate,
            tx.description, tx.reference, tx.date, tx.pair_id,
        ))
        row = cur.fetchone()
        return replace(tx, id=row[0], created_at=row[1])

    @staticmethod
    def _row_to_transaction(row: tuple) -> CashTransaction:
        """Convert a database row tuple to a CashTransaction."""
        return CashTransaction(
            id=row[0],
            type=row[1],
            amount=float(row[2]),
            currency=row[3],
            exchange_rate=float(row[4]) if row[4] is not None else None,
            description=row[5] or "",
            reference=row[6],
            date=row[7],
            pair_id=row[8],
            created_at=row[9],
        )

"""
repositories/customer_repo.py
------------------------------
Data access layer for customers and their account transactions.
"""

from dataclasses import replace
from typing import Optional

from db.connection import get_connection, release_connection
from models.customer import Customer, CustomerTransaction
from utils.logger import get_logger

logger = get_logger(__name__)


class CustomerRepository:
    """Repository for the customers and customer_transactions tables."""

    # ── CUSTOMERS ─────────────────────────────────────────

    def add_customer(self, customer: Customer) -> Customer:
        """Insert a customer and populate its `id` and `created_at`."""
        sql = """
            INSERT INTO customers (name, email, phone)
            VALUES (%s, %s, %s)
            RETURNING id, created_at;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (customer.name, customer.email, customer.phone))
                row = cur.fetchone()
                customer.id = row[0]
                customer.created_at = row[1]
            conn.commit()
            logger.info(f"Added customer #{customer.id} '{customer.name}'")
            return customer
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add customer: {e}")
            raise
        finally:
            release_connection(conn)

    def get_customer(self, customer_id: int) -> Optional[Customer]:
        sql = "SELECT id, name, email, phone, created_at FROM customers WHERE id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (customer_id,))
                row = cur.fetchone()
                return self._row_to_customer(row) if row else None
        finally:
            release_connection(conn)

    def get_customers(self) -> list[Customer]:
        sql = "SELECT id, name, email, phone, created_at FROM customers ORDER BY name;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [self._row_to_customer(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    # ── TRANSACTIONS ──────────────────────────────────────

    def add_transaction(self, tx: CustomerTransaction) -> CustomerTransaction:
        """
        Insert an account movement.

        Returns:
            A copy of `tx` with its `id` populated.
        """
        sql = """
            INSERT INTO customer_transactions
                (customer_id, type, amount, description, reference, date, due_date)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING id;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    tx.customer_id, tx.type, tx.amount, tx.description,
                    tx.reference, tx.date, tx.due_date,
                ))
                saved = replace(tx, id=cur.fetchone()[0])
            conn.commit()
            logger.info(f"Added {saved.type} #{saved.id} for customer {saved.customer_id}")
            return saved
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add customer transaction: {e}")
            raise
        finally:
            release_connection(conn)

    def get_transactions(self, customer_id: Optional[int] = None) -> list[CustomerTransaction]:
        """
        Fetch account movements, newest first.

        Args:
            customer_id: Limit to one customer; None returns everyone's.
        """
        sql = (
            "SELECT id, customer_id, type, amount, description, reference, date, due_date "
            "FROM customer_transactions"
        )
        params: list = []
        if customer_id is not None:
            sql += " WHERE customer_id = %s"
            params.append(customer_id)
        sql += " ORDER BY date DESC, id DESC;"

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [self._row_to_transaction(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def count_transactions(self) -> int:
        """Total number of account movements (used to number references)."""
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute("SELECT COUNT(*) FROM customer_transactions;")
                return int(cur.fetchone()[0])
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_customer(row: tuple) -> Customer:
        return Customer(
            id=row[0],
            name=row[1],
            email=row[2],
            phone=row[3],
            created_at=row[4],
        )

    @staticmethod
    def _row_to_transaction(row: tuple) -> CustomerTransaction:
        """Convert a database row tuple to a CustomerTransaction."""
        return CustomerTransaction(
            id=row[0],
            customer_id=row[1],
            type=row[2],
            amount=float(row[3]),
            description=row[4] or "",
            reference=row[5],
            date=row[6],
            due_date=row[7],
        )

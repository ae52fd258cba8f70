"""
services/customer_service.py
-----------------------------
Business logic for customer accounts: invoices, payments, refunds and
the outstanding balance of each customer.

Customer accounts are single-currency; no conversion happens here.
"""

from datetime import date, timedelta
from typing import Optional

from models.customer import (
    Customer,
    CustomerTransaction,
    CUSTOMER_TYPES,
    INVOICE,
    PAYMENT,
    REFUND,
)
from repositories.customer_repo import CustomerRepository
from services.balance_calculator import customer_balance
from utils.logger import get_logger
from utils.validators import ValidationError, is_positive_number

logger = get_logger(__name__)

ACTIVE = "active"
INACTIVE = "inactive"
OVERDUE = "overdue"

INACTIVE_AFTER = timedelta(days=30)


class CustomerAccountService:
    """Manages customer accounts and their balances."""

    def __init__(self, repo=None):
        self.repo = repo if repo is not None else CustomerRepository()

    # ── CUSTOMERS ─────────────────────────────────────────

    def add_customer(self, name: str, email: Optional[str] = None,
                     phone: Optional[str] = None) -> Customer:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Customer name is required")
        return self.repo.add_customer(Customer(name=name, email=email, phone=phone))

    def get_customer(self, customer_id: int) -> Customer:
        """
        Raises:
            ValidationError: If the customer does not exist.
        """
        customer = self.repo.get_customer(customer_id)
        if customer is None:
            raise ValidationError(f"Customer #{customer_id} not found")
        return customer

    # ── TRANSACTIONS ──────────────────────────────────────

    def record_invoice(self, customer_id: int, amount: float, description: str = "",
                       reference: Optional[str] = None,
                       due_date: Optional[date] = None) -> CustomerTransaction:
        """Charge the customer; raises what they owe."""
        self.get_customer(customer_id)
        return self._record(customer_id, INVOICE, amount, description,
                            reference, due_date=due_date)

    def record_payment(self, customer_id: int, amount: float, description: str = "",
                       reference: Optional[str] = None) -> CustomerTransaction:
        """
        Record money received from a customer.

        Defaults: description "Payment received from <name>" and reference
        "PMT-<year>-<n>" where n is the next transaction number.
        """
        customer = self.get_customer(customer_id)
        if not reference:
            reference = f"PMT-{date.today().year}-{self.repo.count_transactions() + 1}"
        description = description or f"Payment received from {customer.name}"
        tx = self._record(customer_id, PAYMENT, amount, description, reference)
        logger.info(f"Payment of {tx.amount:.2f} recorded for {customer.name}")
        return tx

    def record_refund(self, customer_id: int, amount: float, description: str = "",
                      reference: Optional[str] = None) -> CustomerTransaction:
        self.get_customer(customer_id)
        return self._record(customer_id, REFUND, amount, description, reference)

    def _record(self, customer_id: int, tx_type: str, amount: float, description: str,
                reference: Optional[str], due_date: Optional[date] = None) -> CustomerTransaction:
        if tx_type not in CUSTOMER_TYPES:
            raise ValidationError(f"Unknown account transaction type: {tx_type!r}")
        if not is_positive_number(amount):
            raise ValidationError("Please enter a valid amount")
        tx = CustomerTransaction(
            customer_id=customer_id,
            type=tx_type,
            amount=float(amount),
            description=description,
            reference=reference,
            date=date.today(),
            due_date=due_date,
        )
        return self.repo.add_transaction(tx)

    # ── BALANCES ──────────────────────────────────────────

    def get_balance(self, customer_id: int) -> float:
        """Outstanding amount owed by the customer."""
        return customer_balance(self.repo.get_transactions(customer_id), customer_id)

    def get_status(self, customer_id: int, today: Optional[date] = None) -> str:
        """
        Classify an account.

        Returns:
            'inactive' when there are no transactions or none in the last
            30 days; 'overdue' when money is owed and an invoice is past its
            due date; otherwise 'active'.
        """
        today = today or date.today()
        transactions = self.repo.get_transactions(customer_id)
        if not transactions:
            return INACTIVE

        balance = customer_balance(transactions, customer_id)
        past_due = any(
            t.type == INVOICE and t.due_date is not None and t.due_date < today
            for t in transactions
        )
        if balance > 0 and past_due:
            return OVERDUE

        last = max(t.date for t in transactions)
        if last < today - INACTIVE_AFTER:
            return INACTIVE
        return ACTIVE

    def list_customers(self) -> str:
        customers = self.repo.get_customers()
        if not customers:
            return "📭 No customers yet. Add one with /addcustomer <name>."

        lines = ["👥 Customers:\n"]
        for c in customers:
            lines.append(
                f"  #{c.id} {c.name}: ${self.get_balance(c.id):.2f} [{self.get_status(c.id)}]"
            )
        return "\n".join(lines)

    def get_statement(self, customer_id: int) -> str:
        """Account statement: balance, status and every transaction."""
        customer = self.get_customer(customer_id)
        transactions = self.repo.get_transactions(customer_id)
        balance = customer_balance(transactions, customer_id)

        lines = [
            f"👤 {customer.name} ({customer.email or 'No email'})",
            f"💰 Balance: ${balance:.2f} [{self.get_status(customer_id)}]\n",
        ]
        if not transactions:
            lines.append("📭 No transactions.")
            return "\n".join(lines)

        for t in transactions:
            sign = "+" if t.type == INVOICE else "-"
            ref = f" {t.reference}" if t.reference else ""
            desc = f" - {t.description}" if t.description else ""
            lines.append(f"  {t.date} {t.type}{ref}: {sign}${t.amount:.2f}{desc}")
        return "\n".join(lines)

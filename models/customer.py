"""
models/customer.py
------------------
Domain models for customers and their account transactions.

Customer accounts are kept in a single currency; nothing here is converted.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

INVOICE = "invoice"
PAYMENT = "payment"
REFUND = "refund"

CUSTOMER_TYPES = frozenset({INVOICE, PAYMENT, REFUND})


@dataclass
class Customer:
    """A customer account holder."""
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __str__(self) -> str:
        return f"#{self.id} {self.name} ({self.email or 'No email'})"


@dataclass(frozen=True)
class CustomerTransaction:
    """
    A movement on a customer's account.

    Attributes:
        customer_id: Owning customer.
        type: 'invoice' raises what the customer owes,
              'payment' and 'refund' lower it.
        amount: Non-negative magnitude.
        description: Human-readable note.
        reference: Invoice/payment number, e.g. 'PMT-2024-3'.
        date: Day of the movement.
        due_date: Payment deadline, invoices only.
        id: Database primary key (None for new records).
    """
    customer_id: int
    type: str
    amount: float
    description: str = ""
    reference: Optional[str] = None
    date: date = field(default_factory=date.today)
    due_date: Optional[date] = None
    id: Optional[int] = None

    def __str__(self) -> str:
        sign = "+" if self.type == INVOICE else "-"
        return f"{sign}{self.amount:.2f} | {self.type} | {self.reference or ''} | {self.date}"

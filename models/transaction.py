"""
models/transaction.py
---------------------
Domain models for cash register movements.

A register entry is either a single CashTransaction or an ExchangePair
holding both legs of one currency exchange.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

# ── Transaction types ─────────────────────────────────────
SALE = "sale"
EXPENSE = "expense"
DEPOSIT = "deposit"
WITHDRAWAL = "withdrawal"
EXCHANGE = "exchange"

CREDIT_TYPES = frozenset({SALE, DEPOSIT})
DEBIT_TYPES = frozenset({EXPENSE, WITHDRAWAL})
REGISTER_TYPES = CREDIT_TYPES | DEBIT_TYPES | {EXCHANGE}


@dataclass(frozen=True)
class CashTransaction:
    """
    A single, immutable cash register movement.

    Attributes:
        type: One of REGISTER_TYPES.
        amount: Non-negative magnitude. Direction comes from `type`.
        currency: Currency code ('USD' or 'SYP').
        exchange_rate: SYP per USD captured when the transaction was made.
        description: Free-text note.
        reference: Optional external reference (invoice number, etc.).
        date: When the movement happened.
        pair_id: Shared by the two legs of an exchange.
        id: Database primary key (None for new records).
        created_at: Timestamp when the record was created.
    """
    type: str
    amount: float
    currency: str
    exchange_rate: Optional[float] = None
    description: str = ""
    reference: Optional[str] = None
    date: datetime = field(default_factory=datetime.now)
    pair_id: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def is_credit(self) -> bool:
        return self.type in CREDIT_TYPES

    def is_debit(self) -> bool:
        return self.type in DEBIT_TYPES

    def __str__(self) -> str:
        sign = "-" if self.is_debit() else "+"
        return f"{sign}{self.amount:.2f} {self.currency} | {self.type} | {self.date:%Y-%m-%d %H:%M}"


@dataclass(frozen=True)
class ExchangePair:
    """
    One currency exchange: money leaving `outgoing.currency` and
    arriving in `incoming.currency` at the same captured rate.
    """
    outgoing: CashTransaction
    incoming: CashTransaction

    @property
    def date(self) -> datetime:
        return self.outgoing.date

    @property
    def exchange_rate(self) -> Optional[float]:
        return self.outgoing.exchange_rate

    def __str__(self) -> str:
        return (
            f"{self.outgoing.amount:.2f} {self.outgoing.currency} → "
            f"{self.incoming.amount:.2f} {self.incoming.currency} "
            f"@ {self.exchange_rate} | {self.date:%Y-%m-%d %H:%M}"
        )


RegisterEntry = Union[CashTransaction, ExchangePair]

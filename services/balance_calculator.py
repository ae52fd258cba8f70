"""
services/balance_calculator.py
-------------------------------
Folds transactions into balances. Pure functions, no database access.

Two separate rule sets live here:
    - the cash register, which holds USD and SYP and converts exchanges;
    - customer accounts, which are single-currency and never converted.

Balances are always recomputed from the transactions; nothing is stored.
Entries with an unknown type or currency contribute 0 and are only logged.
"""

from typing import Iterable, Optional

from models.currency import Currency
from models.customer import CustomerTransaction, INVOICE, PAYMENT, REFUND
from models.transaction import (
    CashTransaction,
    ExchangePair,
    RegisterEntry,
    CREDIT_TYPES,
    DEBIT_TYPES,
    EXCHANGE,
)
from utils.logger import get_logger

logger = get_logger(__name__)


# ── CASH REGISTER ─────────────────────────────────────────

def _transaction_effect(tx: CashTransaction, currency: Currency, currency_service) -> float:
    tx_currency = Currency.parse(tx.currency)
    if tx_currency is None:
        logger.debug(f"Skipping transaction {tx.id}: unsupported currency {tx.currency!r}")
        return 0.0

    if tx.type in CREDIT_TYPES:
        return tx.amount if tx_currency is currency else 0.0
    if tx.type in DEBIT_TYPES:
        return -tx.amount if tx_currency is currency else 0.0
    if tx.type == EXCHANGE:
        # A lone exchange record leaves its own currency and lands in the other.
        if tx_currency is currency:
            return -tx.amount
        rate = tx.exchange_rate or currency_service.get_default_rate()
        return currency_service.convert(tx.amount, tx_currency, currency, rate)

    logger.debug(f"Skipping transaction {tx.id}: unknown type {tx.type!r}")
    return 0.0


def _pair_effect(pair: ExchangePair, currency: Currency) -> float:
    effect = 0.0
    if Currency.parse(pair.outgoing.currency) is currency:
        effect -= pair.outgoing.amount
    if Currency.parse(pair.incoming.currency) is currency:
        effect += pair.incoming.amount
    return effect


def register_effect(entry: RegisterEntry, currency, currency_service) -> float:
    """
    Signed contribution of one register entry to the balance of `currency`.

    Args:
        entry: A CashTransaction or an ExchangePair.
        currency: The balance being computed (Currency or code).
        currency_service: Supplies the default rate and conversions.

    Returns:
        The signed amount, or 0.0 for unsupported data.
    """
    target = Currency.parse(currency)
    if target is None:
        return 0.0
    if isinstance(entry, ExchangePair):
        return _pair_effect(entry, target)
    if isinstance(entry, CashTransaction):
        return _transaction_effect(entry, target, currency_service)
    return 0.0


def register_balance(entries: Iterable[RegisterEntry], currency, currency_service) -> float:
    """Sum the effects of all entries on one currency."""
    return sum(
        (register_effect(e, currency, currency_service) for e in entries),
        0.0,
    )


def register_balances(entries: Iterable[RegisterEntry], currency_service) -> dict[Currency, float]:
    """
    Compute the balance of every supported currency.

    Returns:
        Dict mapping each Currency to its balance.
    """
    entries = list(entries)
    return {
        currency: register_balance(entries, currency, currency_service)
        for currency in Currency
    }


# ── CUSTOMER ACCOUNTS ─────────────────────────────────────

def customer_effect(tx: CustomerTransaction) -> float:
    """Invoices raise what the customer owes; payments and refunds lower it."""
    if tx.type == INVOICE:
        return tx.amount
    if tx.type in (PAYMENT, REFUND):
        return -tx.amount
    logger.debug(f"Skipping customer transaction {tx.id}: unknown type {tx.type!r}")
    return 0.0


def customer_balance(
    transactions: Iterable[CustomerTransaction],
    customer_id: Optional[int] = None,
) -> float:
    """
    Outstanding balance owed by a customer.

    Args:
        transactions: Customer account transactions.
        customer_id: If given, only this customer's transactions are counted.
    """
    return sum(
        (
            customer_effect(t)
            for t in transactions
            if customer_id is None or t.customer_id == customer_id
        ),
        0.0,
    )

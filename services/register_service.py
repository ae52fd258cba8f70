"""
services/register_service.py
-----------------------------
Business logic for the cash register: recording movements and currency
exchanges, and reporting balances in USD and SYP.
"""

import uuid
from datetime import datetime
from typing import Iterable, Optional

from models.currency import Currency
from models.transaction import (
    CashTransaction,
    ExchangePair,
    RegisterEntry,
    EXCHANGE,
    REGISTER_TYPES,
)
from repositories.register_repo import CashTransactionRepository
from services.balance_calculator import register_balances
from services.currency_service import ExchangeRateError
from utils.formatting import format_currency, format_with_conversion
from utils.logger import get_logger
from utils.validators import ValidationError, is_positive_number

logger = get_logger(__name__)



def group_entries(transactions: Iterable[CashTransaction]) -> list[RegisterEntry]:
    """
    Rebuild register entries from stored rows.

    Rows sharing a `pair_id` become one ExchangePair (the first stored leg
    is the outgoing one). Everything else, including an exchange row whose
    partner is missing, stays a single CashTransaction.
    """
    entries: list[RegisterEntry] = []
    open_pairs: dict[str, tuple[int, CashTransaction]] = {}

    for tx in transactions:
        if tx.type == EXCHANGE and tx.pair_id:
            if tx.pair_id in open_pairs:
                index, outgoing = open_pairs.pop(tx.pair_id)
                entries[index] = ExchangePair(outgoing=outgoing, incoming=tx)
                continue
            open_pairs[tx.pair_id] = (len(entries), tx)
        entries.append(tx)
    return entries


class CashRegisterService:
    """
    Records cash movements and computes balances.

    Args:
        currency_service: Shared CurrencyService.
        repo: Storage for movements (defaults to the PostgreSQL repository).
    """

    def __init__(self, currency_service, repo=None):
        self.currency_service = currency_service
        self.repo = repo if repo is not None else CashTransactionRepository()

    # ── RECORDING ─────────────────────────────────────────

    def record_transaction(
        self,
        tx_type: str,
        amount: float,
        currency,
        exchange_rate: Optional[float] = None,
        description: str = "",
        reference: Optional[str] = None,
    ) -> CashTransaction:
        """
        Record a sale, expense, deposit or withdrawal.

        A rate is only kept on SYP movements; it is the rate in force at
        the time and never changes afterwards.

        Raises:
            ValidationError: Unknown type or currency, or amount not > 0.
        """
        if tx_type not in REGISTER_TYPES or tx_type == EXCHANGE:
            raise ValidationError(f"Unknown transaction type: {tx_type!r}")
        code = Currency.parse(currency)
        if code is None:
            raise ValidationError(f"Unsupported currency: {currency!r}")
        if not is_positive_number(amount):
            raise ValidationError("Please enter a valid amount")

        rate = exchange_rate if code is Currency.SYP and exchange_rate else None
        tx = CashTransaction(
            type=tx_type,
            amount=float(amount),
            currency=code.value,
            exchange_rate=rate,
            description=description,
            reference=reference or None,
            date=datetime.now(),
        )
        return self.repo.add(tx)

    def preview_exchange(
        self, amount: float, from_currency, to_currency, rate: Optional[float] = None
    ) -> float:
        """Amount that an exchange would produce, without recording it."""
        effective = rate if rate else self.currency_service.get_default_rate()
        return self.currency_service.convert(amount, from_currency, to_currency, effective)

    def record_exchange(
        self, amount: float, from_currency, to_currency, rate: Optional[float] = None
    ) -> ExchangePair:
        """
        Record a currency exchange as an outgoing and an incoming leg.

        Args:
            amount: Amount leaving `from_currency`.
            from_currency: Currency given up.
            to_currency: Currency received.
            rate: Custom rate; the current default is used when omitted.

        Raises:
            ValidationError: Bad currencies or amount.
            ExchangeRateError: If the rate in use is zero or not finite.
        """
        source = Currency.parse(from_currency)
        target = Currency.parse(to_currency)
        if source is None or target is None:
            raise ValidationError("Unsupported currency. Use USD or SYP")
        if source is target:
            raise ValidationError("Choose two different currencies to exchange")
        if not is_positive_number(amount):
            raise ValidationError("Please enter a valid amount to exchange")

        effective = rate if rate else self.currency_service.get_default_rate()
        converted = self.currency_service.convert(amount, source, target, effective)

        pair_id = str(uuid.uuid4())
        now = datetime.now()
        description = f"Exchange from {source.value} to {target.value}"
        outgoing = CashTransaction(
            type=EXCHANGE, amount=float(amount), currency=source.value,
            exchange_rate=effective, description=description, date=now, pair_id=pair_id,
        )
        incoming = CashTransaction(
            type=EXCHANGE, amount=converted, currency=target.value,
            exchange_rate=effective, description=description, date=now, pair_id=pair_id,
        )
        saved = self.repo.add_pair(ExchangePair(outgoing=outgoing, incoming=incoming))
        logger.info(f"Exchanged {amount} {source.value} → {converted} {target.value} @ {effective}")
        return saved

    # ── REPORTING ─────────────────────────────────────────

    def get_entries(self, start: Optional[datetime] = None,
                    end: Optional[datetime] = None) -> list[RegisterEntry]:
        return group_entries(self.repo.get_all(start, end))

    def get_balances(self, start: Optional[datetime] = None,
                     end: Optional[datetime] = None) -> dict[Currency, float]:
        """Per-currency balance of all movements (or those in [start, end))."""
        return register_balances(self.get_entries(start, end), self.currency_service)

    def get_summary(self, recent: int = 10) -> str:
        """Balances plus the most recent entries, as display text."""
        entries = self.get_entries()
        balances = register_balances(entries, self.currency_service)

        lines = ["🏦 Cash register\n"]
        for currency, balance in balances.items():
            lines.append(f"  {currency.value}: {self._balance_text(balance, currency)}")
        lines.append(f"\n💱 Default rate: {self.currency_service.get_default_rate():g} SYP / 1 USD")

        if not entries:
            lines.append("\n📭 No transactions recorded yet.")
            return "\n".join(lines)

        lines.append("\n🧾 Latest transactions:")
        for entry in reversed(entries[-recent:]):
            lines.append(f"  • {self._describe(entry)}")
        return "\n".join(lines)

    def _balance_text(self, balance: float, currency: Currency) -> str:
        """Balance with its equivalent at the default rate, when one is usable."""
        try:
            return format_with_conversion(balance, currency, self.currency_service)
        except ExchangeRateError:
            return format_currency(balance, currency)

    @staticmethod
    def _describe(entry: RegisterEntry) -> str:
        if isinstance(entry, ExchangePair):
            out, inc = entry.outgoing, entry.incoming
            rate = f" @ {entry.exchange_rate:g}" if entry.exchange_rate else ""
            return (
                f"exchange {format_currency(out.amount, out.currency)} → "
                f"{format_currency(inc.amount, inc.currency)}{rate}"
            )
        sign = "+" if entry.is_credit() else "-"
        desc = f" - {entry.description}" if entry.description else ""
        return f"{entry.type} {sign}{format_currency(entry.amount, entry.currency)}{desc}"

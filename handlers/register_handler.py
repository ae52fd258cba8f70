"""
handlers/register_handler.py
-----------------------------
Handles cash register commands: sales, expenses, deposits, withdrawals,
currency exchanges and the balance view.
Delegates all logic to CashRegisterService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from models.currency import Currency
from models.transaction import SALE, EXPENSE, DEPOSIT, WITHDRAWAL
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from services.currency_service import ExchangeRateError
from utils.formatting import format_currency, format_with_conversion
from utils.logger import get_logger
from utils.validators import ValidationError, parse_amount, parse_currency, parse_rate

logger = get_logger(__name__)

RATE_MARKER = "@"
PREVIEW_WORDS = ("preview", "?")


def parse_register_args(args: list[str]) -> tuple[float, Currency, float | None, str]:
    """
    Split `<amount> <USD|SYP> [@rate] [note...]`.

    The rate must carry the @ marker ("@3600") so numbers in the note stay
    in the note. It is only read for SYP movements.

    Raises:
        ValidationError: On a bad amount, currency or rate.
    """
    if len(args) < 2:
        raise ValidationError("Usage: <amount> <USD|SYP> [@rate] [note]")

    amount = parse_amount(args[0])
    currency = parse_currency(args[1])
    rest = list(args[2:])

    rate = None
    if currency is Currency.SYP and rest and rest[0].startswith(RATE_MARKER):
        rate = parse_rate(rest.pop(0)[len(RATE_MARKER):])
    return amount, currency, rate, " ".join(rest)


def parse_exchange_args(args: list[str]) -> tuple[float, Currency, Currency, float | None, bool]:
    """
    Split `<amount> <FROM> <TO> [rate] [preview]`.

    Returns:
        (amount, source, target, rate or None, preview flag)

    Raises:
        ValidationError: On missing or bad arguments.
    """
    args = list(args)
    preview = bool(args) and args[-1].lower() in PREVIEW_WORDS
    if preview:
        args.pop()
    if len(args) < 3:
        raise ValidationError("Usage: /exchange <amount> <FROM> <TO> [rate] [preview]")

    amount = parse_amount(args[0])
    source = parse_currency(args[1])
    target = parse_currency(args[2])
    rate = parse_rate(args[3].lstrip(RATE_MARKER)) if len(args) > 3 else None
    return amount, source, target, rate, preview


def _make_register_command(tx_type: str, verb: str):
    """Build the /sale, /expense, /deposit and /withdraw handlers."""

    @authorized_only
    @rate_limited
    async def command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        try:
            amount, currency, rate, note = parse_register_args(context.args or [])
        except ValidationError as e:
            await update.message.reply_text(
                f"⚠️ {e}\nExample: /{verb} 175000 SYP @3500 3 chairs"
            )
            return

        register = context.bot_data["register_service"]
        currency_service = context.bot_data["currency_service"]
        tx = register.record_transaction(tx_type, amount, currency, rate, description=note)
        balances = register.get_balances()

        await update.message.reply_text(
            f"✅ {tx_type.capitalize()} recorded: "
            f"{format_with_conversion(tx.amount, tx.currency, currency_service, tx.exchange_rate)}\n"
            f"Balance {currency.value}: {format_currency(balances[currency], currency)}"
        )

    command.__name__ = f"{verb}_command"
    command.__doc__ = f"Handle /{verb} <amount> <USD|SYP> [@rate] [note] - record a {tx_type}."
    return command


sale_command = _make_register_command(SALE, "sale")
expense_command = _make_register_command(EXPENSE, "expense")
deposit_command = _make_register_command(DEPOSIT, "deposit")
withdraw_command = _make_register_command(WITHDRAWAL, "withdraw")


@authorized_only
@rate_limited
async def exchange_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /exchange <amount> <FROM> <TO> [rate] [preview].
    Example: /exchange 500 USD SYP 3550 preview
    With "preview" the result is shown and nothing is recorded.
    """
    register = context.bot_data["register_service"]
    try:
        amount, source, target, rate, preview = parse_exchange_args(context.args or [])
        if preview:
            if source is target:
                raise ValidationError("Choose two different currencies to exchange")
            received = register.preview_exchange(amount, source, target, rate)
            used = register.currency_service.resolve_rate(rate)
        else:
            pair = register.record_exchange(amount, source, target, rate)
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e}\nExample: /exchange 500 USD SYP 3550")
        return
    except ExchangeRateError as e:
        logger.error(f"Exchange failed: {e}")
        await update.message.reply_text("❌ The exchange rate is not usable. Set one with /setrate.")
        return

    if preview:
        await update.message.reply_text(
            f"🔎 {format_currency(amount, source)} → {format_currency(received, target)}\n"
            f"Rate: {used:g} SYP / 1 USD\n"
            f"Nothing recorded. Send the command without \"preview\" to confirm."
        )
        return

    await update.message.reply_text(
        f"💱 Exchanged {format_currency(pair.outgoing.amount, pair.outgoing.currency)} → "
        f"{format_currency(pair.incoming.amount, pair.incoming.currency)}\n"
        f"Rate: {pair.exchange_rate:g} SYP / 1 USD"
    )


@authorized_only
@rate_limited
async def balance_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /balance - show register balances and recent movements."""
    register = context.bot_data["register_service"]
    await update.message.reply_text(register.get_summary())

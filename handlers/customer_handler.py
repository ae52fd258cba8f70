"""
handlers/customer_handler.py
-----------------------------
Handles customer account commands.
Delegates to CustomerAccountService.
"""

import re

from telegram import Update
from telegram.ext import ContextTypes

from models.customer import INVOICE
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger
from utils.validators import ValidationError, parse_amount, parse_due_date

logger = get_logger(__name__)

_DATE_LIKE = re.compile(r"^\d{4}-\d{1,2}-\d{1,2}$")


def _parse_customer_id(text: str) -> int:
    try:
        return int(text.lstrip("#"))
    except ValueError:
        raise ValidationError("Customer ID must be a whole number") from None


@authorized_only
@rate_limited
async def customers_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /customers - list customers with balance and status."""
    accounts = context.bot_data["customer_service"]
    await update.message.reply_text(accounts.list_customers())


@authorized_only
@rate_limited
async def addcustomer_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /addcustomer <name> [email].
    Example: /addcustomer Ahmad Trading ahmad@example.com
    """
    args = list(context.args or [])
    email = args.pop() if args and "@" in args[-1] else None
    accounts = context.bot_data["customer_service"]
    try:
        customer = accounts.add_customer(" ".join(args), email=email)
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e}\nUsage: /addcustomer <name> [email]")
        return
    await update.message.reply_text(f"✅ Customer added: {customer}")


def _make_account_command(kind: str):
    """
    Build the /invoice, /payment and /refund handlers.

    /invoice also takes an optional due date (YYYY-MM-DD) right after
    the amount.
    """
    usage = "<customer id> <amount> [note]"
    if kind == INVOICE:
        usage = "<customer id> <amount> [YYYY-MM-DD] [note]"

    @authorized_only
    @rate_limited
    async def command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        args = context.args or []
        if len(args) < 2:
            await update.message.reply_text(
                f"⚠️ Usage: /{kind} {usage}\nExample: /{kind} 1 500"
            )
            return

        accounts = context.bot_data["customer_service"]
        record = getattr(accounts, f"record_{kind}")
        try:
            customer_id = _parse_customer_id(args[0])
            amount = parse_amount(args[1])
            extra = {}
            rest = list(args[2:])
            if kind == INVOICE and rest and _DATE_LIKE.match(rest[0]):
                extra["due_date"] = parse_due_date(rest.pop(0))
            tx = record(customer_id, amount, description=" ".join(rest), **extra)
        except ValidationError as e:
            await update.message.reply_text(f"⚠️ {e}")
            return

        balance = accounts.get_balance(customer_id)
        ref = f" ({tx.reference})" if tx.reference else ""
        due = f"\n📅 Due: {tx.due_date:%Y-%m-%d}" if tx.due_date else ""
        await update.message.reply_text(
            f"✅ {kind.capitalize()} of ${tx.amount:.2f}{ref} recorded.\n"
            f"💰 Outstanding balance: ${balance:.2f}{due}"
        )

    command.__name__ = f"{kind}_command"
    command.__doc__ = f"Handle /{kind} {usage}."
    return command


invoice_command = _make_account_command("invoice")
payment_command = _make_account_command("payment")
refund_command = _make_account_command("refund")


@authorized_only
@rate_limited
async def account_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /account <customer id> - show the customer's statement."""
    if not context.args:
        await update.message.reply_text("⚠️ Usage: /account <customer id>")
        return

    accounts = context.bot_data["customer_service"]
    try:
        statement = accounts.get_statement(_parse_customer_id(context.args[0]))
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e}")
        return
    await update.message.reply_text(statement)

"""
handlers/currency_handler.py
-----------------------------
Handles the default exchange rate and ad-hoc conversions.
Delegates to the shared CurrencyService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import authorized_only
from security.rate_limiter import rate_limited
from services.currency_service import ExchangeRateError
from utils.formatting import format_currency
from utils.logger import get_logger
from utils.validators import ValidationError, parse_amount, parse_currency, parse_rate

logger = get_logger(__name__)


@authorized_only
@rate_limited
async def rate_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /rate - show the default exchange rate."""
    currency_service = context.bot_data["currency_service"]
    rate = currency_service.get_default_rate()
    await update.message.reply_text(
        f"💱 Default exchange rate: {rate:g} SYP = 1 USD\n"
        f"Used for SYP transactions recorded without their own rate."
    )


@authorized_only
@rate_limited
async def setrate_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /setrate <rate> - change the default exchange rate.
    Usage: /setrate 3600
    """
    if not context.args:
        await update.message.reply_text("⚠️ Usage: /setrate <rate>\nExample: /setrate 3600")
        return

    try:
        rate = parse_rate(context.args[0])
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e}")
        return

    currency_service = context.bot_data["currency_service"]
    currency_service.set_default_rate(rate)
    logger.info(f"User {update.effective_user.id} set the default rate to {rate}")
    await update.message.reply_text(
        f"✅ Default exchange rate updated: {rate:g} SYP = 1 USD"
    )


@authorized_only
@rate_limited
async def convert_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /convert <amount> <FROM> <TO> [rate].
    Example: /convert 100 USD SYP
    """
    args = context.args or []
    if len(args) < 3:
        await update.message.reply_text(
            "⚠️ Usage: /convert <amount> <FROM> <TO> [rate]\nExample: /convert 100 USD SYP"
        )
        return

    try:
        amount = parse_amount(args[0])
        source = parse_currency(args[1])
        target = parse_currency(args[2])
        rate = parse_rate(args[3]) if len(args) > 3 else None
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e}")
        return

    currency_service = context.bot_data["currency_service"]
    try:
        converted = currency_service.convert(amount, source, target, rate)
    except ExchangeRateError as e:
        logger.error(f"Conversion failed: {e}")
        await update.message.reply_text("❌ The exchange rate is not usable. Set one with /setrate.")
        return

    used = currency_service.resolve_rate(rate)
    await update.message.reply_text(
        f"💱 {format_currency(amount, source)} = {format_currency(converted, target)}\n"
        f"Rate: {used:g} SYP / 1 USD"
    )

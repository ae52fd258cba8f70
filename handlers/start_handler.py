"""
handlers/start_handler.py
--------------------------
Handles /start, /help and /myid.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = """
🤖 *Cashbox*
Cash register and customer accounts in USD and SYP.

*💱 Exchange rate:*
/rate - show the default rate
/setrate <rate> - change the default rate (SYP per 1 USD)
/convert <amount> <FROM> <TO> \\[rate] - convert an amount

*🏦 Cash register:*
/sale, /expense, /deposit, /withdraw <amount> <USD|SYP> \\[@rate] \\[note]
  e.g. /sale 175000 SYP @3500 3 chairs
/exchange <amount> <FROM> <TO> \\[rate] \\[preview] - exchange currency
  add "preview" to see the result without recording it
/balance - balances and latest transactions

*👥 Customers:*
/customers - list customers and balances
/addcustomer <name> \\[email]
/invoice <customer id> <amount> \\[YYYY-MM-DD due] \\[note]
/payment, /refund <customer id> <amount> \\[note]
/account <customer id> - account statement

*📄 Reports:*
/export\\_csv \\[year month] - month as CSV
/export\\_excel \\[year month] - month as Excel

/myid - show your Telegram ID
"""


@authorized_only
@rate_limited
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start - greet the user."""
    user = update.effective_user
    logger.info(f"User {user.id} ({user.first_name}) started the bot.")

    await update.message.reply_text(
        f"Hello {user.first_name}! 👋\n"
        f"I keep your cash register and customer accounts in USD and SYP.\n\n"
        f"Send /help to see every command.",
    )


@authorized_only
@rate_limited
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help - list the available commands."""
    await update.message.reply_text(HELP_TEXT, parse_mode="Markdown")


@authorized_only
async def myid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /myid - show the user's Telegram ID for whitelisting."""
    user = update.effective_user
    await update.message.reply_text(
        f"🆔 Your ID: `{user.id}`\n"
        f"Add it to `ALLOWED_USER_IDS` in `.env` to restrict the bot.",
        parse_mode="Markdown",
    )

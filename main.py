"""
main.py
-------
Entry point for the Cashbox Telegram bot.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Build the services once and hand them to the handlers via bot_data.
    - Configure and start the Telegram bot with all handlers.
"""

from telegram import BotCommand
from telegram.ext import Application, CommandHandler

from config import TELEGRAM_BOT_TOKEN
from db.connection import init_pool, close_pool
from db.init_db import create_tables
from handlers.start_handler import start_command, help_command, myid_command
from handlers.currency_handler import rate_command, setrate_command, convert_command
from handlers.register_handler import (
    sale_command,
    expense_command,
    deposit_command,
    withdraw_command,
    exchange_command,
    balance_command,
)
from handlers.customer_handler import (
    customers_command,
    addcustomer_command,
    invoice_command,
    payment_command,
    refund_command,
    account_command,
)
from handlers.export_handler import export_csv_command, export_excel_command
from repositories.settings_repo import SettingsRepository
from services.currency_service import CurrencyService
from services.customer_service import CustomerAccountService
from services.export_service import ExportService
from services.register_service import CashRegisterService
from utils.logger import get_logger

logger = get_logger(__name__)

COMMANDS = [
    ("start", start_command, "🚀 Start the bot"),
    ("help", help_command, "📖 Show help"),
    ("myid", myid_command, "🆔 Your Telegram ID"),
    ("rate", rate_command, "💱 Default exchange rate"),
    ("setrate", setrate_command, "✏️ Change the default rate"),
    ("convert", convert_command, "🔄 Convert USD/SYP"),
    ("sale", sale_command, "🟢 Record a sale"),
    ("expense", expense_command, "🔴 Record an expense"),
    ("deposit", deposit_command, "🏦 Record a deposit"),
    ("withdraw", withdraw_command, "💸 Record a withdrawal"),
    ("exchange", exchange_command, "💱 Exchange currency"),
    ("balance", balance_command, "📊 Register balances"),
    ("customers", customers_command, "👥 Customers"),
    ("addcustomer", addcustomer_command, "➕ Add a customer"),
    ("invoice", invoice_command, "🧾 Invoice a customer"),
    ("payment", payment_command, "💵 Record a customer payment"),
    ("refund", refund_command, "↩️ Refund a customer"),
    ("account", account_command, "📒 Customer statement"),
    ("export_csv", export_csv_command, "📄 Export CSV"),
    ("export_excel", export_excel_command, "📊 Export Excel"),
]


def build_services() -> dict:
    """Create the shared services. Each is built once per process."""
    currency_service = CurrencyService(store=SettingsRepository())
    register_service = CashRegisterService(currency_service)
    return {
        "currency_service": currency_service,
        "register_service": register_service,
        "customer_service": CustomerAccountService(),
        "export_service": ExportService(register_service),
    }


async def set_bot_commands(application: Application) -> None:
    """Register the bot commands menu in Telegram on startup."""
    await application.bot.set_my_commands(
        [BotCommand(name, description) for name, _, description in COMMANDS]
    )
    logger.info("Bot commands menu registered successfully.")


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    create_tables()

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = Application.builder().token(TELEGRAM_BOT_TOKEN).post_init(set_bot_commands).build()
    app.bot_data.update(build_services())

    # ── 3. Register command handlers ──────────────────────
    for name, handler, _ in COMMANDS:
        app.add_handler(CommandHandler(name, handler))

    # ── 4. Start polling ──────────────────────────────────
    logger.info("Cashbox is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message"])

    # ── 5. Cleanup on shutdown ────────────────────────────
    close_pool()
    logger.info("Cashbox stopped.")


if __name__ == "__main__":
    main()

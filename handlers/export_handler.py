"""
handlers/export_handler.py
---------------------------
Handles data export commands (CSV, Excel).
Delegates to ExportService.
"""

from datetime import date

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)


def _parse_period(args) -> tuple[int, int]:
    """Read optional `year month` arguments; defaults to the current month."""
    today = date.today()
    if args and len(args) >= 2:
        year, month = int(args[0]), int(args[1])
        if not 1 <= month <= 12:
            raise ValueError(f"month out of range: {month}")
        return year, month
    return today.year, today.month


async def _send_export(update: Update, context: ContextTypes.DEFAULT_TYPE, kind: str) -> None:
    try:
        year, month = _parse_period(context.args)
    except ValueError:
        await update.message.reply_text(
            f"⚠️ Usage: /export_{kind} [year month]\nExample: /export_{kind} 2024 1"
        )
        return

    await update.message.reply_text(f"📄 Preparing the {kind.upper()} file...")

    export_service = context.bot_data["export_service"]
    try:
        if kind == "csv":
            buffer = export_service.export_month_csv(year, month)
            filename = f"register_{year}_{month:02d}.csv"
        else:
            buffer = export_service.export_month_excel(year, month)
            filename = f"register_{year}_{month:02d}.xlsx"
        await update.message.reply_document(
            document=buffer,
            filename=filename,
            caption=f"📊 Cash register {month}/{year}",
        )
    except Exception as e:
        logger.error(f"{kind.upper()} export failed: {e}")
        await update.message.reply_text("❌ Export failed. Please try again.")


@authorized_only
@rate_limited
async def export_csv_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /export_csv [year month] - send a month of register data as CSV."""
    await _send_export(update, context, "csv")


@authorized_only
@rate_limited
async def export_excel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /export_excel [year month] - send a month of register data as Excel."""
    await _send_export(update, context, "excel")

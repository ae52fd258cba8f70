"""
security/auth.py
-----------------
Authentication middleware for the Telegram bot.
Only whitelisted staff may touch the register and customer accounts.
"""

from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

from config import ALLOWED_USER_IDS
from utils.logger import get_logger

logger = get_logger(__name__)


def authorized_only(func: Callable):
    """
    Decorator that restricts a handler to whitelisted users only.

    Behavior:
        - If ALLOWED_USER_IDS is empty, ALL users are allowed (dev mode).
        - Otherwise only listed users get through; others are logged and refused.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not ALLOWED_USER_IDS:
            return await func(update, context, *args, **kwargs)

        if user.id not in ALLOWED_USER_IDS:
            logger.warning(
                f"Unauthorized access attempt: user_id={user.id}, "
                f"username={user.username}, name={user.first_name}"
            )
            await update.message.reply_text(
                "⛔ Sorry, this register is private. Ask the owner to add your /myid."
            )
            return

        return await func(update, context, *args, **kwargs)

    return wrapper

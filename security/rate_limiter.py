"""
security/rate_limiter.py
-------------------------
Per-user rate limiting for bot commands.
"""

import time
from collections import defaultdict
from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

from config import RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)

# {user_id: [timestamp, ...]} within the current window
_user_timestamps: dict[int, list[float]] = defaultdict(list)


def is_allowed(user_id: int, now: float | None = None) -> bool:
    """
    Record one message for `user_id` and report whether it is within the limit.

    Timestamps older than RATE_LIMIT_WINDOW_SECONDS are dropped first.
    """
    now = time.time() if now is None else now
    cutoff = now - RATE_LIMIT_WINDOW_SECONDS
    recent = [t for t in _user_timestamps[user_id] if t > cutoff]
    if len(recent) >= RATE_LIMIT_MESSAGES:
        _user_timestamps[user_id] = recent
        return False
    recent.append(now)
    _user_timestamps[user_id] = recent
    return True


def rate_limited(func: Callable):
    """
    Decorator that enforces RATE_LIMIT_MESSAGES per RATE_LIMIT_WINDOW_SECONDS
    for each user. Over-limit messages get a warning and are not handled.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not is_allowed(user.id):
            logger.warning(f"Rate limit hit for user {user.id}")
            await update.message.reply_text(
                "⚠️ Too many messages. Please wait a moment and try again."
            )
            return

        return await func(update, context, *args, **kwargs)

    return wrapper

"""
utils/validators.py
-------------------
Input validation used at the bot boundary.
Bad input is rejected here with a readable message and never reaches
the services' stored state.
"""

import math
from datetime import date
from typing import Optional

from models.currency import Currency

# Arabic-Indic digits and separators → ASCII
_AR_DIGITS = str.maketrans("٠١٢٣٤٥٦٧٨٩٫٬", "0123456789.,")


class ValidationError(ValueError):
    """Raised when user-supplied input is not acceptable."""


def _to_number(text) -> Optional[float]:
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        return float(text)
    if not isinstance(text, str):
        return None
    cleaned = text.strip().translate(_AR_DIGITS).replace(",", "")
    try:
        return float(cleaned)
    except ValueError:
        return None


def is_positive_number(value) -> bool:
    """True for a finite int or float greater than zero (bools excluded)."""
    return (
        isinstance(value, (int, float)) and not isinstance(value, bool)
        and math.isfinite(value) and value > 0
    )


def parse_amount(text) -> float:
    """
    Parse a transaction amount.

    Raises:
        ValidationError: If the value is not a finite number greater than zero.
    """
    value = _to_number(text)
    if value is None or not math.isfinite(value) or value <= 0:
        raise ValidationError("Please enter a valid amount")
    return value


def parse_rate(text) -> float:
    """
    Parse an exchange rate (SYP per 1 USD).

    Raises:
        ValidationError: If the value is non-numeric, zero, negative or not finite.
    """
    value = _to_number(text)
    if value is None or not math.isfinite(value) or value <= 0:
        raise ValidationError("Invalid exchange rate: please enter a valid positive number")
    return value


def parse_currency(text) -> Currency:
    """
    Parse a currency code.

    Raises:
        ValidationError: If the code is not USD or SYP.
    """
    currency = Currency.parse(text)
    if currency is None:
        raise ValidationError(f"Unsupported currency: {text!r}. Use USD or SYP")
    return currency


def parse_due_date(text) -> date:
    """
    Parse an invoice due date written as YYYY-MM-DD.

    Raises:
        ValidationError: If the text is not an ISO date.
    """
    try:
        return date.fromisoformat(str(text).strip())
    except ValueError:
        raise ValidationError("Due date must look like YYYY-MM-DD") from None

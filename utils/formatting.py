"""
utils/formatting.py
-------------------
Text rendering of money amounts.
"""

from typing import Optional

from models.currency import BASE_CURRENCY, SECONDARY_CURRENCY, Currency


def format_currency(amount: float, currency) -> str:
    """
    Format an amount for display.

    USD keeps two decimals ("$1204.25"); SYP is shown in whole pounds
    with thousands separators ("£1,775,000").
    """
    code = Currency.parse(currency)
    if code is None:
        return f"{amount:.2f} {currency}"
    if code is Currency.SYP:
        return f"{code.symbol}{amount:,.0f}"
    return f"{code.symbol}{amount:.2f}"


def format_with_conversion(
    amount: float, currency, currency_service, rate: Optional[float] = None
) -> str:
    """
    Format an amount followed by its value in the other currency,
    e.g. "$10.00 (£35,000)".
    """
    code = Currency.parse(currency)
    if code is None:
        return format_currency(amount, currency)
    other = SECONDARY_CURRENCY if code is BASE_CURRENCY else BASE_CURRENCY
    converted = currency_service.convert(amount, code, other, currency_service.resolve_rate(rate))
    return f"{format_currency(amount, code)} ({format_currency(converted, other)})"

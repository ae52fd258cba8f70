"""
models/currency.py
------------------
The two currencies the cash register works with.

USD is the base currency and SYP the secondary one. An exchange rate is
always expressed as SYP per 1 USD.
"""

from enum import Enum
from typing import Optional


class Currency(str, Enum):
    """Supported currencies. Values are the ISO codes stored in the database."""

    USD = "USD"
    SYP = "SYP"

    @classmethod
    def parse(cls, value) -> Optional["Currency"]:
        """
        Look up a currency by code, case-insensitively.

        Returns:
            The matching Currency, or None for anything unsupported.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value

    @property
    def symbol(self) -> str:
        return "$" if self is Currency.USD else "£"


BASE_CURRENCY = Currency.USD
SECONDARY_CURRENCY = Currency.SYP

"""
services/currency_service.py
-----------------------------
Exchange rate handling and USD/SYP conversion.

One CurrencyService is built at start-up and passed to every consumer.
It owns the default exchange rate (SYP per 1 USD), keeps it in a settings
store so it survives restarts, and converts amounts between the two
currencies.
"""

import math
from typing import Optional

from config import DEFAULT_EXCHANGE_RATE, EXCHANGE_RATE_SETTING_KEY
from models.currency import Currency
from repositories.settings_repo import InMemorySettingsStore
from utils.logger import get_logger

logger = get_logger(__name__)


class ExchangeRateError(ValueError):
    """Raised when a conversion would use a zero or non-finite rate."""


class CurrencyService:
    """
    Resolves exchange rates and converts between USD and SYP.

    Args:
        store: Any object with ``get(key)`` and ``set(key, value)``.
            Defaults to a process-local store.
        fallback_rate: Rate used when nothing valid has been saved.
    """

    def __init__(self, store=None, fallback_rate: float = DEFAULT_EXCHANGE_RATE):
        self.store = store if store is not None else InMemorySettingsStore()
        self.fallback_rate = fallback_rate
        self._default_rate = fallback_rate
        self.load_default_rate()

    # ── DEFAULT RATE ──────────────────────────────────────

    def load_default_rate(self) -> float:
        """
        Load the saved default rate from the store.

        A missing or unparsable value, or an unreachable store, leaves the
        built-in fallback in place.

        Returns:
            The default rate now in effect.
        """
        try:
            raw = self.store.get(EXCHANGE_RATE_SETTING_KEY)
        except Exception as e:
            logger.warning(f"Could not read saved exchange rate, using {self.fallback_rate}: {e}")
            self._default_rate = self.fallback_rate
            return self._default_rate

        if raw is None or str(raw).strip() == "":
            self._default_rate = self.fallback_rate
            return self._default_rate

        try:
            rate = float(raw)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring unparsable saved exchange rate {raw!r}")
            rate = self.fallback_rate

        if not math.isfinite(rate):
            logger.warning(f"Ignoring non-finite saved exchange rate {raw!r}")
            rate = self.fallback_rate

        self._default_rate = rate
        logger.info(f"Default exchange rate loaded: {rate}")
        return rate

    def get_default_rate(self) -> float:
        """Return the current default rate."""
        return self._default_rate

    def set_default_rate(self, rate: float) -> None:
        """
        Replace the default rate and persist it.

        The value is not validated here; handlers check it is positive
        before calling. Rates already captured on transactions are untouched.
        A failing store is logged and the new rate still applies in memory.
        """
        self._default_rate = rate
        try:
            self.store.set(EXCHANGE_RATE_SETTING_KEY, str(rate))
        except Exception as e:
            logger.warning(f"Could not persist exchange rate {rate}: {e}")
        logger.info(f"Default exchange rate set to {rate}")

    # ── CONVERSION ────────────────────────────────────────

    def resolve_rate(self, explicit_rate: Optional[float] = None) -> float:
        """
        Pick the rate for a conversion.

        An explicit rate wins only when it is a number greater than zero.
        None, 0, negatives and NaN all fall back to the default, so a rate
        of exactly 0 cannot be requested.
        """
        if isinstance(explicit_rate, (int, float)) and not isinstance(explicit_rate, bool) \
                and explicit_rate > 0:
            return float(explicit_rate)
        return self._default_rate

    def convert(
        self,
        amount: float,
        from_currency,
        to_currency,
        rate: Optional[float] = None,
    ) -> float:
        """
        Convert `amount` from one currency to the other.

        USD → SYP multiplies by the rate, SYP → USD divides by it. The sign
        of `amount` is passed through untouched.

        Args:
            amount: Value to convert.
            from_currency: Source currency (Currency or code).
            to_currency: Target currency (Currency or code).
            rate: Optional explicit rate; see `resolve_rate`.

        Returns:
            The converted amount. Same-currency requests return `amount`
            without looking at any rate.

        Raises:
            ExchangeRateError: If the resolved rate is zero or not finite.
        """
        if from_currency == to_currency:
            return amount

        source = Currency.parse(from_currency)
        target = Currency.parse(to_currency)
        if source is None or target is None:
            logger.debug(f"No conversion for {from_currency} → {to_currency}")
            return amount
        if source is target:
            return amount

        resolved = self.resolve_rate(rate)
        if resolved == 0 or not math.isfinite(resolved):
            raise ExchangeRateError(
                f"Cannot convert {source.value} → {target.value} with rate {resolved}"
            )

        if source is Currency.USD:
            return amount * resolved
        return amount / resolved

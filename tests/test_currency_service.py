import math

import pytest

from config import EXCHANGE_RATE_SETTING_KEY
from models.currency import Currency
from repositories.settings_repo import InMemorySettingsStore
from services.currency_service import CurrencyService, ExchangeRateError
from tests.fakes import BrokenStore

USD, SYP = Currency.USD, Currency.SYP


# ── default rate ──────────────────────────────────────────

def test_default_rate_starts_at_builtin_constant(currency_service):
    assert currency_service.get_default_rate() == 3500.0


def test_builtin_constant_is_3500():
    assert CurrencyService(store=InMemorySettingsStore()).fallback_rate == 3500.0


def test_default_rate_survives_reload(store):
    CurrencyService(store=store).set_default_rate(5000)

    reloaded = CurrencyService(store=store)

    assert reloaded.get_default_rate() == 5000


def test_set_default_rate_is_saved_under_fixed_key(currency_service, store):
    currency_service.set_default_rate(4200.5)
    assert store.get(EXCHANGE_RATE_SETTING_KEY) == "4200.5"


@pytest.mark.parametrize("saved", ["abc", "", "nan", "inf"])
def test_unparsable_saved_rate_falls_back(saved):
    store = InMemorySettingsStore({EXCHANGE_RATE_SETTING_KEY: saved})
    assert CurrencyService(store=store).get_default_rate() == 3500.0


def test_unreachable_store_falls_back_silently():
    service = CurrencyService(store=BrokenStore())
    assert service.get_default_rate() == 3500.0

    service.set_default_rate(4000)

    assert service.get_default_rate() == 4000


def test_set_default_rate_accepts_unvalidated_values(currency_service):
    currency_service.set_default_rate(-10)
    assert currency_service.get_default_rate() == -10


# ── resolve_rate ──────────────────────────────────────────

def test_resolve_rate_prefers_positive_explicit_rate(currency_service):
    assert currency_service.resolve_rate(3600) == 3600


@pytest.mark.parametrize("explicit", [None, 0, 0.0, -5, float("nan")])
def test_resolve_rate_falls_back_to_default(currency_service, explicit):
    assert currency_service.resolve_rate(explicit) == 3500.0


def test_zero_rate_is_treated_as_not_provided(currency_service):
    currency_service.set_default_rate(4100)
    assert currency_service.resolve_rate(0) == 4100


# ── convert ───────────────────────────────────────────────

@pytest.mark.parametrize("amount", [0, 12.5, -7, 1e9])
@pytest.mark.parametrize("rate", [None, 0, -1, 3550, float("nan")])
@pytest.mark.parametrize("currency", [USD, SYP])
def test_identity_conversion_ignores_rate(currency_service, amount, rate, currency):
    assert currency_service.convert(amount, currency, currency, rate) == amount


def test_identity_conversion_skips_rate_lookup(currency_service):
    currency_service.set_default_rate(0)
    assert currency_service.convert(10, "SYP", SYP) == 10


def test_usd_to_syp_multiplies(currency_service):
    assert currency_service.convert(500, USD, SYP, 3550) == 1_775_000


def test_syp_to_usd_divides(currency_service):
    assert currency_service.convert(175_000, SYP, USD) == 50


def test_accepts_currency_codes(currency_service):
    assert currency_service.convert(2, "usd", "SYP", 100) == 200


@pytest.mark.parametrize("amount", [0.01, 1, 250, 45.75, 123456.789])
@pytest.mark.parametrize("rate", [1, 3500, 3550.25, 15000])
def test_round_trip_conversion(currency_service, amount, rate):
    there = currency_service.convert(amount, USD, SYP, rate)
    back = currency_service.convert(there, SYP, USD, rate)
    assert back == pytest.approx(amount)


def test_negative_amount_keeps_sign(currency_service):
    assert currency_service.convert(-2, USD, SYP, 10) == -20


def test_zero_default_rate_raises_on_syp_to_usd(currency_service):
    currency_service.set_default_rate(0)
    with pytest.raises(ExchangeRateError):
        currency_service.convert(100, SYP, USD)


def test_zero_default_rate_raises_even_with_zero_explicit_rate(currency_service):
    currency_service.set_default_rate(0)
    with pytest.raises(ExchangeRateError):
        currency_service.convert(100, USD, SYP, 0)


def test_infinite_rate_raises(currency_service):
    with pytest.raises(ExchangeRateError):
        currency_service.convert(100, SYP, USD, math.inf)


def test_exchange_rate_error_is_a_value_error():
    assert issubclass(ExchangeRateError, ValueError)


def test_unsupported_currency_returns_amount(currency_service):
    assert currency_service.convert(100, "EUR", USD) == 100

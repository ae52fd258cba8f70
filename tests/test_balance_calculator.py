import pytest

from models.currency import Currency
from models.customer import CustomerTransaction
from models.transaction import CashTransaction, ExchangePair
from services.balance_calculator import (
    customer_balance,
    customer_effect,
    register_balance,
    register_balances,
    register_effect,
)

USD, SYP = Currency.USD, Currency.SYP


def tx(type_, amount, currency="USD", rate=None, **kwargs):
    return CashTransaction(type=type_, amount=amount, currency=currency, exchange_rate=rate, **kwargs)


# ── cash register ─────────────────────────────────────────

def test_sale_expense_deposit_in_usd(currency_service):
    entries = [tx("sale", 250), tx("expense", 45.75), tx("deposit", 1000)]
    assert register_balance(entries, USD, currency_service) == pytest.approx(1204.25)


def test_withdrawal_is_a_debit(currency_service):
    entries = [tx("deposit", 100, "SYP"), tx("withdrawal", 30, "SYP")]
    assert register_balance(entries, SYP, currency_service) == 70


def test_simple_movements_only_count_in_their_own_currency(currency_service):
    entries = [tx("sale", 250), tx("sale", 175000, "SYP", rate=3500)]
    balances = register_balances(entries, currency_service)
    assert balances == {USD: 250, SYP: 175000}


def test_single_exchange_record_debits_own_and_credits_other(currency_service):
    entries = [tx("exchange", 500, "USD", rate=3550)]
    assert register_balance(entries, USD, currency_service) == -500
    assert register_balance(entries, SYP, currency_service) == 1_775_000


def test_single_exchange_without_rate_uses_default(currency_service):
    currency_service.set_default_rate(4000)
    entries = [tx("exchange", 8000, "SYP")]
    assert register_balance(entries, USD, currency_service) == 2
    assert register_balance(entries, SYP, currency_service) == -8000


def test_exchange_pair_moves_money_between_currencies(currency_service):
    pair = ExchangePair(
        outgoing=tx("exchange", 500, "USD", rate=3550, pair_id="p1"),
        incoming=tx("exchange", 1_775_000, "SYP", rate=3550, pair_id="p1"),
    )
    balances = register_balances([tx("deposit", 1000), pair], currency_service)
    assert balances == {USD: 500, SYP: 1_775_000}


def test_exchange_pair_ignores_later_default_rate_changes(currency_service):
    pair = ExchangePair(
        outgoing=tx("exchange", 100, "USD", rate=3500),
        incoming=tx("exchange", 350_000, "SYP", rate=3500),
    )
    currency_service.set_default_rate(9999)
    assert register_effect(pair, SYP, currency_service) == 350_000


@pytest.mark.parametrize("currency", [USD, SYP])
def test_unknown_type_contributes_zero(currency_service, currency):
    entries = [tx("loan", 999), tx("refund", 50, "SYP")]
    assert register_balance(entries, currency, currency_service) == 0


def test_unsupported_currency_contributes_zero(currency_service):
    entries = [tx("sale", 10), tx("sale", 999, "EUR"), tx("exchange", 5, "GBP")]
    balances = register_balances(entries, currency_service)
    assert balances == {USD: 10, SYP: 0}


def test_unsupported_target_currency_is_zero(currency_service):
    assert register_effect(tx("sale", 10), "EUR", currency_service) == 0


def test_exchange_pair_with_unsupported_leg_only_counts_supported_leg(currency_service):
    pair = ExchangePair(outgoing=tx("exchange", 10, "EUR"), incoming=tx("exchange", 35000, "SYP"))
    assert register_balances([pair], currency_service) == {USD: 0, SYP: 35000}


def test_empty_register_is_zero(currency_service):
    assert register_balances([], currency_service) == {USD: 0, SYP: 0}


def test_accepts_generators(currency_service):
    entries = (tx("sale", n) for n in (1, 2, 3))
    assert register_balances(entries, currency_service)[USD] == 6


def test_repeated_exchanges_accumulate_float_error_within_tolerance(currency_service):
    rate = 3550.37
    entries = [tx("exchange", 0.1, "USD", rate=rate) for _ in range(1000)]
    assert register_balance(entries, SYP, currency_service) == pytest.approx(0.1 * rate * 1000)


# ── customer accounts ─────────────────────────────────────

def ctx(type_, amount, customer_id=1):
    return CustomerTransaction(customer_id=customer_id, type=type_, amount=amount)


def test_invoice_minus_payment():
    assert customer_balance([ctx("invoice", 1750), ctx("payment", 500)]) == 1250


def test_refund_lowers_balance():
    assert customer_effect(ctx("refund", 75.5)) == -75.5


def test_customer_unknown_type_contributes_zero():
    assert customer_balance([ctx("invoice", 100), ctx("sale", 40)]) == 100


def test_customer_balance_filters_by_customer():
    txs = [ctx("invoice", 1750, 1), ctx("invoice", 3750.5, 2), ctx("payment", 500, 1)]
    assert customer_balance(txs, customer_id=1) == 1250
    assert customer_balance(txs, customer_id=2) == 3750.5

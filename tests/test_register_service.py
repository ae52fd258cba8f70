from dataclasses import FrozenInstanceError
from datetime import datetime

import pytest

from models.currency import Currency
from models.transaction import CashTransaction, ExchangePair
from services.currency_service import ExchangeRateError
from services.register_service import group_entries
from utils.validators import ValidationError

USD, SYP = Currency.USD, Currency.SYP


def test_recorded_movements_update_balances(register_service):
    register_service.record_transaction("sale", 250, "USD", description="Invoice #INV-001")
    register_service.record_transaction("expense", 45.75, USD)
    register_service.record_transaction("deposit", 1000, "usd")

    assert register_service.get_balances()[USD] == pytest.approx(1204.25)


def test_rate_is_kept_only_on_syp_movements(register_service):
    usd = register_service.record_transaction("sale", 10, USD, exchange_rate=3600)
    syp = register_service.record_transaction("sale", 36000, SYP, exchange_rate=3600)

    assert usd.exchange_rate is None
    assert syp.exchange_rate == 3600


def test_recorded_transaction_is_immutable(register_service):
    saved = register_service.record_transaction("sale", 10, USD)
    with pytest.raises(FrozenInstanceError):
        saved.exchange_rate = 1


def test_captured_rate_survives_default_change(register_service, currency_service):
    saved = register_service.record_transaction("sale", 35000, SYP, exchange_rate=3500)
    currency_service.set_default_rate(5000)
    assert register_service.get_entries()[0].exchange_rate == saved.exchange_rate == 3500


@pytest.mark.parametrize("amount", [0, -5, float("nan"), None])
def test_rejects_non_positive_amount(register_service, amount):
    with pytest.raises(ValidationError):
        register_service.record_transaction("sale", amount, USD)


def test_rejects_unknown_type_and_currency(register_service):
    with pytest.raises(ValidationError):
        register_service.record_transaction("loan", 10, USD)
    with pytest.raises(ValidationError):
        register_service.record_transaction("exchange", 10, USD)
    with pytest.raises(ValidationError):
        register_service.record_transaction("sale", 10, "EUR")


def test_exchange_records_two_legs_with_shared_pair(register_service, register_repo):
    pair = register_service.record_exchange(500, USD, SYP, 3550)

    assert pair.outgoing.amount == 500
    assert pair.incoming.amount == 1_775_000
    assert pair.outgoing.pair_id == pair.incoming.pair_id
    assert pair.outgoing.exchange_rate == pair.incoming.exchange_rate == 3550
    assert len(register_repo.rows) == 2


def test_exchange_uses_default_rate_when_none_given(register_service, currency_service):
    currency_service.set_default_rate(4000)
    pair = register_service.record_exchange(100_000, SYP, USD)
    assert pair.incoming.amount == 25
    assert pair.exchange_rate == 4000


def test_exchange_moves_balance_between_currencies(register_service):
    register_service.record_transaction("deposit", 1000, USD)
    register_service.record_exchange(500, USD, SYP, 3550)

    assert register_service.get_balances() == {USD: 500, SYP: 1_775_000}


def test_exchange_rejects_same_currency(register_service):
    with pytest.raises(ValidationError):
        register_service.record_exchange(10, USD, "usd")


def test_exchange_with_zero_default_rate_fails(register_service, currency_service, register_repo):
    currency_service.set_default_rate(0)
    with pytest.raises(ExchangeRateError):
        register_service.record_exchange(10, SYP, USD)
    assert register_repo.rows == []


def test_preview_exchange(register_service):
    assert register_service.preview_exchange(2, USD, SYP) == 7000
    assert register_service.preview_exchange(7100, SYP, USD, 3550) == 2


def test_group_entries_pairs_rows_by_pair_id():
    when = datetime(2024, 6, 17, 11, 0)
    rows = [
        CashTransaction(type="sale", amount=1, currency="USD", date=when, id=1),
        CashTransaction(type="exchange", amount=5, currency="USD", pair_id="a", date=when, id=2),
        CashTransaction(type="exchange", amount=17500, currency="SYP", pair_id="a", date=when, id=3),
        CashTransaction(type="exchange", amount=9, currency="USD", date=when, id=4),
        CashTransaction(type="exchange", amount=9, currency="USD", pair_id="orphan", date=when, id=5),
    ]

    entries = group_entries(rows)

    assert [type(e) for e in entries] == [CashTransaction, ExchangePair, CashTransaction, CashTransaction]
    assert entries[1].outgoing.id == 2 and entries[1].incoming.id == 3


def test_summary_lists_balances_and_latest(register_service):
    register_service.record_transaction("sale", 250, USD, description="Invoice #INV-001")
    register_service.record_exchange(10, USD, SYP, 3500)

    summary = register_service.get_summary()

    assert "USD: $240.00 (£840,000)" in summary
    assert "SYP: £35,000 ($10.00)" in summary
    assert "exchange $10.00 → £35,000 @ 3500" in summary
    assert "sale +$250.00 - Invoice #INV-001" in summary


def test_summary_of_empty_register(register_service):
    assert "No transactions recorded yet" in register_service.get_summary()


def test_summary_without_usable_rate_shows_plain_balances(register_service, currency_service):
    register_service.record_transaction("sale", 10, USD)
    currency_service.set_default_rate(0)

    assert "  USD: $10.00\n" in register_service.get_summary()

from datetime import date, timedelta

import pytest

from models.customer import CustomerTransaction
from utils.validators import ValidationError


@pytest.fixture
def customer(customer_service):
    return customer_service.add_customer("Acme Corporation", email="billing@acme.example")


def test_outstanding_balance_after_invoice_and_payment(customer_service, customer):
    customer_service.record_invoice(customer.id, 1750, description="Monthly supplies order")
    customer_service.record_payment(customer.id, 500)

    assert customer_service.get_balance(customer.id) == 1250


def test_refund_lowers_balance(customer_service, customer):
    customer_service.record_invoice(customer.id, 100)
    customer_service.record_refund(customer.id, 25)
    assert customer_service.get_balance(customer.id) == 75


def test_payment_defaults(customer_service, customer):
    customer_service.record_invoice(customer.id, 100)
    payment = customer_service.record_payment(customer.id, 40)

    assert payment.reference == f"PMT-{date.today().year}-2"
    assert payment.description == "Payment received from Acme Corporation"


def test_balances_are_per_customer(customer_service, customer):
    other = customer_service.add_customer("Globex")
    customer_service.record_invoice(customer.id, 100)
    customer_service.record_invoice(other.id, 3750.5)
    assert customer_service.get_balance(customer.id) == 100
    assert customer_service.get_balance(other.id) == 3750.5


@pytest.mark.parametrize("amount", [0, -10, None, float("inf"), float("nan")])
def test_rejects_non_positive_amount(customer_service, customer, amount):
    with pytest.raises(ValidationError):
        customer_service.record_payment(customer.id, amount)


def test_rejects_unknown_account_type(customer_service, customer):
    with pytest.raises(ValidationError):
        customer_service._record(customer.id, "credit", 10, "", None)


def test_unknown_customer(customer_service):
    with pytest.raises(ValidationError):
        customer_service.record_invoice(99, 10)


def test_customer_name_required(customer_service):
    with pytest.raises(ValidationError):
        customer_service.add_customer("   ")


# ── status ────────────────────────────────────────────────

def _add(repo, customer_id, type_, amount, when, due=None):
    repo.add_transaction(CustomerTransaction(
        customer_id=customer_id, type=type_, amount=amount, date=when, due_date=due,
    ))


def test_status_inactive_without_transactions(customer_service, customer):
    assert customer_service.get_status(customer.id) == "inactive"


def test_status_active_with_recent_activity(customer_service, customer_repo, customer):
    today = date(2024, 6, 20)
    _add(customer_repo, customer.id, "invoice", 100, today - timedelta(days=3))
    assert customer_service.get_status(customer.id, today=today) == "active"


def test_status_inactive_after_thirty_days(customer_service, customer_repo, customer):
    today = date(2024, 6, 20)
    _add(customer_repo, customer.id, "invoice", 100, today - timedelta(days=45))
    assert customer_service.get_status(customer.id, today=today) == "inactive"


def test_status_overdue_when_invoice_past_due_and_unpaid(customer_service, customer_repo, customer):
    today = date(2024, 6, 20)
    _add(customer_repo, customer.id, "invoice", 100, date(2024, 5, 1), due=date(2024, 5, 31))
    assert customer_service.get_status(customer.id, today=today) == "overdue"


def test_status_not_overdue_once_paid(customer_service, customer_repo, customer):
    today = date(2024, 6, 20)
    _add(customer_repo, customer.id, "invoice", 100, date(2024, 6, 1), due=date(2024, 6, 10))
    _add(customer_repo, customer.id, "payment", 100, date(2024, 6, 15))
    assert customer_service.get_status(customer.id, today=today) == "active"


def test_statement(customer_service, customer):
    customer_service.record_invoice(customer.id, 1750, reference="INV-2023-056")
    customer_service.record_payment(customer.id, 500, reference="PMT-2023-089")

    statement = customer_service.get_statement(customer.id)

    assert "Acme Corporation" in statement
    assert "Balance: $1250.00" in statement
    assert "invoice INV-2023-056: +$1750.00" in statement
    assert "payment PMT-2023-089: -$500.00" in statement


def test_list_customers(customer_service, customer):
    customer_service.record_invoice(customer.id, 10)
    listing = customer_service.list_customers()
    assert f"#{customer.id} Acme Corporation: $10.00 [active]" in listing

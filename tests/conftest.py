"""
Shared fixtures: in-memory stand-ins for the PostgreSQL repositories so
services can be exercised without a database.
"""

import pytest

from repositories.settings_repo import InMemorySettingsStore
from services.currency_service import CurrencyService
from services.customer_service import CustomerAccountService
from services.register_service import CashRegisterService
from tests.fakes import FakeCustomerRepo, FakeRegisterRepo


@pytest.fixture
def store():
    return InMemorySettingsStore()


@pytest.fixture
def currency_service(store):
    return CurrencyService(store=store, fallback_rate=3500.0)


@pytest.fixture
def register_repo():
    return FakeRegisterRepo()


@pytest.fixture
def register_service(currency_service, register_repo):
    return CashRegisterService(currency_service, repo=register_repo)


@pytest.fixture
def customer_repo():
    return FakeCustomerRepo()


@pytest.fixture
def customer_service(customer_repo):
    return CustomerAccountService(repo=customer_repo)

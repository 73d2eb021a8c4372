from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.test import Client

from finance.models import LedgerShare, Transaction
from finance.seeding import create_ledger_with_defaults

User = get_user_model()

PASSWORD = "secret123"


class JsonClient:
    """Thin wrapper over django.test.Client that sends JSON bodies."""

    def __init__(self, user=None) -> None:
        self._client = Client()
        if user is not None:
            self._client.force_login(user)

    def get(self, path, params=None):
        return self._client.get(path, params or {})

    def post(self, path, data=None):
        return self._client.post(path, data or {}, content_type="application/json")

    def put(self, path, data=None):
        return self._client.put(path, data or {}, content_type="application/json")

    def patch(self, path, data=None):
        return self._client.patch(path, data or {}, content_type="application/json")

    def delete(self, path):
        return self._client.delete(path)

    @property
    def raw(self) -> Client:
        return self._client


@pytest.fixture
def make_user(db):
    def _make(username: str, password: str = PASSWORD):
        return User.objects.create_user(username=username, password=password)

    return _make


@pytest.fixture
def owner(make_user):
    return make_user("olivia")


@pytest.fixture
def ledger(owner):
    return create_ledger_with_defaults(owner, name="Household", currency="EUR")


@pytest.fixture
def editor(make_user, ledger):
    user = make_user("eddie")
    LedgerShare.objects.create(ledger=ledger, user=user, role="editor")
    return user


@pytest.fixture
def viewer(make_user, ledger):
    user = make_user("vera")
    LedgerShare.objects.create(ledger=ledger, user=user, role="viewer")
    return user


@pytest.fixture
def stranger(make_user):
    return make_user("sam")


@pytest.fixture
def api():
    def _client(user=None) -> JsonClient:
        return JsonClient(user)

    return _client


@pytest.fixture
def food(ledger):
    return ledger.categories.get(name="Food")


@pytest.fixture
def salary(ledger):
    return ledger.categories.get(name="Salary")


@pytest.fixture
def make_transaction(ledger, food):
    def _make(**overrides):
        fields = {
            "ledger": ledger,
            "category": food,
            "type": "Expense",
            "amount": Decimal("12.50"),
            "date": date(2024, 1, 15),
            "description": "Groceries",
        }
        fields.update(overrides)
        return Transaction.objects.create(**fields)

    return _make

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from finance import activity
from finance.models import ActivityLog, Transaction
from finance.seeding import create_ledger_with_defaults

RECEIPT = "data:image/png;base64,aGVsbG8="


def _payload(ledger, category, **overrides):
    data = {
        "ledgerId": ledger.pk,
        "categoryId": category.pk,
        "description": "Weekly shop",
        "amount": 42.5,
        "type": "Expense",
        "date": "2024-03-02",
    }
    data.update(overrides)
    return data


@pytest.mark.parametrize("who", ["owner", "editor"])
def test_create_transaction(api, request, ledger, food, who):
    user = request.getfixturevalue(who)
    response = api(user).post("/transactions", _payload(ledger, food, note="milk, eggs"))

    assert response.status_code == 200
    body = response.json()
    assert body["amount"] == 42.5
    assert body["category"] == "Food"
    assert body["date"] == "2024-03-02"
    assert body["note"] == "milk, eggs"
    assert body["hasReceipt"] is False

    tx = Transaction.objects.get(pk=body["id"])
    assert tx.amount == Decimal("42.50")
    entry = ActivityLog.objects.get(entity_type="TRANSACTION", action="CREATE")
    assert entry.user == user
    assert entry.entity_id == str(tx.pk)
    assert entry.message == 'Added Expense "Weekly shop" of 42.50 EUR'


def test_viewer_cannot_add_transactions(api, viewer, ledger, food):
    response = api(viewer).post("/transactions", _payload(ledger, food))
    assert response.status_code == 403
    assert response.json() == {"error": "Viewers cannot add transactions"}
    assert not Transaction.objects.exists()


def test_viewer_can_read_transactions(api, viewer, make_transaction):
    make_transaction()
    response = api(viewer).get("/transactions")
    assert response.status_code == 200
    assert [t["description"] for t in response.json()] == ["Groceries"]


def test_outsider_add_is_not_found(api, stranger, ledger, food):
    response = api(stranger).post("/transactions", _payload(ledger, food))
    assert response.status_code == 404


def test_category_from_another_ledger_is_rejected(api, owner, ledger, stranger):
    foreign = create_ledger_with_defaults(stranger, name="Elsewhere")
    other_food = foreign.categories.get(name="Food")

    response = api(owner).post("/transactions", _payload(ledger, other_food))

    assert response.status_code == 404
    assert not Transaction.objects.exists()


def test_create_without_ledger_uses_first_owned(api, stranger):
    client = api(stranger)
    ledger = client.get("/user/ledger").json()
    food = next(c for c in ledger["categories"] if c["name"] == "Food")

    response = client.post("/transactions", {
        "categoryId": food["id"], "description": "Coffee", "amount": 3, "type": "Expense", "date": "2024-05-01",
    })

    assert response.status_code == 200
    assert response.json()["ledgerId"] == ledger["id"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"amount": 0},
        {"amount": -5},
        {"amount": "lots"},
        {"type": "Transfer"},
        {"date": "yesterday"},
        {"description": ""},
        {"categoryId": None},
    ],
)
def test_create_validation(api, owner, ledger, food, overrides):
    response = api(owner).post("/transactions", _payload(ledger, food, **overrides))
    assert response.status_code == 400
    assert "error" in response.json()


def test_create_with_receipt(api, owner, ledger, food):
    body = api(owner).post("/transactions", _payload(ledger, food, receiptImage=RECEIPT)).json()
    assert body["hasReceipt"] is True
    assert body["receiptImage"] == RECEIPT


def test_receipt_must_be_image_data_uri(api, owner, ledger, food):
    response = api(owner).post("/transactions", _payload(ledger, food, receiptImage="aGVsbG8="))
    assert response.status_code == 400


def test_receipt_size_limit(api, owner, ledger, food, settings):
    settings.LEDGERBOOK_MAX_RECEIPT_BYTES = 4
    response = api(owner).post("/transactions", _payload(ledger, food, receiptImage=RECEIPT))
    assert response.status_code == 400


def test_update_transaction_keeps_unsent_receipt(api, editor, ledger, salary, make_transaction):
    tx = make_transaction(note="keep me", receipt_image=RECEIPT)

    response = api(editor).put(f"/transactions/{tx.pk}", _payload(
        ledger, salary, description="Refund", type="Income", amount="20.00",
    ))

    assert response.status_code == 200
    tx.refresh_from_db()
    assert tx.description == "Refund"
    assert tx.category == salary
    assert tx.amount == Decimal("20.00")
    assert tx.note == "keep me"
    assert tx.receipt_image == RECEIPT
    assert ActivityLog.objects.filter(entity_type="TRANSACTION", action="UPDATE").exists()


def test_update_can_remove_receipt(api, owner, ledger, food, make_transaction):
    tx = make_transaction(receipt_image=RECEIPT)
    response = api(owner).put(f"/transactions/{tx.pk}", _payload(ledger, food, receiptImage=None))
    assert response.status_code == 200
    tx.refresh_from_db()
    assert tx.receipt_image is None


def test_viewer_cannot_update_or_delete(api, viewer, ledger, food, make_transaction):
    tx = make_transaction()
    assert api(viewer).put(f"/transactions/{tx.pk}", _payload(ledger, food)).status_code == 403
    assert api(viewer).delete(f"/transactions/{tx.pk}").status_code == 403
    assert Transaction.objects.filter(pk=tx.pk).exists()


def test_delete_transaction(api, owner, make_transaction):
    tx = make_transaction()
    response = api(owner).delete(f"/transactions/{tx.pk}")

    assert response.status_code == 200
    assert not Transaction.objects.filter(pk=tx.pk).exists()
    entry = ActivityLog.objects.get(entity_type="TRANSACTION", action="DELETE")
    assert entry.entity_id == str(tx.pk)


def test_outsider_delete_is_not_found(api, stranger, make_transaction):
    tx = make_transaction()
    assert api(stranger).delete(f"/transactions/{tx.pk}").status_code == 404
    assert api(stranger).delete("/transactions/9999").status_code == 404


def test_list_filters(api, owner, salary, make_transaction):
    make_transaction(description="Lunch", date=date(2024, 1, 10))
    make_transaction(description="Pay", type="Income", category=salary, amount=Decimal("100"), date=date(2024, 1, 31))

    client = api(owner)
    assert [t["description"] for t in client.get("/transactions").json()] == ["Pay", "Lunch"]
    assert [t["description"] for t in client.get("/transactions", {"type": "Income"}).json()] == ["Pay"]
    assert [t["description"] for t in client.get("/transactions", {"q": "lun"}).json()] == ["Lunch"]


def test_list_hides_receipt_payload(api, owner, make_transaction):
    make_transaction(receipt_image=RECEIPT)
    row = api(owner).get("/transactions").json()[0]
    assert row["hasReceipt"] is True
    assert "receiptImage" not in row


def test_summary(api, viewer, ledger, salary, make_transaction):
    make_transaction(amount=Decimal("10.10"))
    make_transaction(amount=Decimal("0.20"), category=ledger.categories.get(name="Transport"))
    make_transaction(type="Income", category=salary, amount=Decimal("1000"))

    body = api(viewer).get("/transactions/summary", {"ledgerId": ledger.pk}).json()

    assert body["totalIncome"] == 1000.0
    assert body["totalExpense"] == 10.3
    assert body["balance"] == 989.7
    assert body["transactionCount"] == 3
    assert [row["category"] for row in body["expenseByCategory"]] == ["Food", "Transport"]


class _BrokenSink(activity.ActivitySink):
    def write(self, **kwargs):
        raise RuntimeError("log store is down")


def test_activity_failure_does_not_fail_the_mutation(api, owner, ledger, food, monkeypatch):
    monkeypatch.setattr(activity, "get_activity_sink", lambda: _BrokenSink())

    response = api(owner).post("/transactions", _payload(ledger, food))

    assert response.status_code == 200
    assert Transaction.objects.filter(pk=response.json()["id"]).exists()
    assert not ActivityLog.objects.exists()


def test_record_activity_reports_failure(ledger, owner, caplog):
    ok = activity.record_activity(ledger, owner, "CREATE", "LEDGER", "hello", sink=_BrokenSink())
    assert ok is False
    assert "activity.write_failed" in caplog.text


@pytest.mark.parametrize(
    "amount, stored",
    [
        (0.1 + 0.2, Decimal("0.30")),
        (12.345, Decimal("12.35")),
        ("7.005", Decimal("7.01")),
        (3, Decimal("3.00")),
    ],
)
def test_amount_is_rounded_to_cents(api, owner, ledger, food, amount, stored):
    response = api(owner).post("/transactions", _payload(ledger, food, amount=amount))

    assert response.status_code == 200
    assert Transaction.objects.get(pk=response.json()["id"]).amount == stored


def test_amount_rounding_to_zero_is_rejected(api, owner, ledger, food):
    response = api(owner).post("/transactions", _payload(ledger, food, amount=0.004))
    assert response.status_code == 400
    assert not Transaction.objects.exists()

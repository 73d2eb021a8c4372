from __future__ import annotations

from accounts.models import UserProfile
from finance.models import ActivityLog, Ledger


def test_list_ledgers_owned_and_shared(api, owner, editor, viewer, ledger):
    own = api(owner).get("/ledgers").json()
    assert len(own) == 1
    assert own[0]["isOwner"] is True
    assert own[0]["currency"] == "EUR"
    assert len(own[0]["categories"]) == 10
    assert {s["username"]: s["role"] for s in own[0]["sharedWith"]} == {"eddie": "editor", "vera": "viewer"}

    shared = api(viewer).get("/ledgers").json()
    assert len(shared) == 1
    assert shared[0]["isOwner"] is False
    assert shared[0]["role"] == "viewer"
    assert shared[0]["owner"] == {"id": owner.pk, "username": "olivia"}
    assert "sharedWith" not in shared[0]


def test_list_ledgers_hides_other_peoples_books(api, stranger, ledger):
    assert api(stranger).get("/ledgers").json() == []


def test_create_ledger_seeds_categories(api, stranger):
    response = api(stranger).post("/ledgers", {"name": "  Trip   fund ", "currency": "jpy"})

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Trip fund"
    assert body["currency"] == "JPY"
    assert len(body["categories"]) == 10
    ledger = Ledger.objects.get(pk=body["id"])
    assert ledger.owner == stranger
    assert ActivityLog.objects.filter(ledger=ledger, action="CREATE", entity_type="LEDGER").exists()


def test_create_ledger_defaults_currency(api, stranger, settings):
    settings.LEDGERBOOK_DEFAULT_CURRENCY = "GBP"
    body = api(stranger).post("/ledgers", {"name": "Savings"}).json()
    assert body["currency"] == "GBP"


def test_create_ledger_requires_name(api, stranger):
    response = api(stranger).post("/ledgers", {"name": "   "})
    assert response.status_code == 400
    assert "Name is required" in response.json()["error"]


def test_owner_renames_ledger(api, owner, ledger):
    response = api(owner).patch(f"/ledger/{ledger.pk}", {"name": "Family"})
    assert response.status_code == 200
    assert response.json()["name"] == "Family"
    ledger.refresh_from_db()
    assert ledger.name == "Family"
    entry = ActivityLog.objects.get(ledger=ledger, action="UPDATE", entity_type="LEDGER")
    assert entry.message == 'Renamed ledger "Household" to "Family"'


def test_editor_cannot_rename(api, editor, ledger):
    response = api(editor).patch(f"/ledger/{ledger.pk}", {"name": "Mine now"})
    assert response.status_code == 403
    ledger.refresh_from_db()
    assert ledger.name == "Household"


def test_stranger_gets_not_found_on_rename(api, stranger, ledger):
    response = api(stranger).patch(f"/ledger/{ledger.pk}", {"name": "Mine now"})
    assert response.status_code == 404


def test_rename_unknown_ledger(api, owner):
    assert api(owner).patch("/ledger/9999", {"name": "Nope"}).status_code == 404


def test_owner_changes_currency(api, owner, ledger):
    response = api(owner).patch(f"/ledger/{ledger.pk}/currency", {"currency": "usd"})
    assert response.status_code == 200
    assert response.json()["ledger"] == {"id": ledger.pk, "currency": "USD"}


def test_currency_must_be_iso_code(api, owner, ledger):
    response = api(owner).patch(f"/ledger/{ledger.pk}/currency", {"currency": "dollars"})
    assert response.status_code == 400


def test_currency_change_permissions(api, editor, viewer, stranger, ledger):
    assert api(editor).patch(f"/ledger/{ledger.pk}/currency", {"currency": "USD"}).status_code == 403
    assert api(viewer).patch(f"/ledger/{ledger.pk}/currency", {"currency": "USD"}).status_code == 403
    assert api(stranger).patch(f"/ledger/{ledger.pk}/currency", {"currency": "USD"}).status_code == 404
    ledger.refresh_from_db()
    assert ledger.currency == "EUR"


def test_user_ledger_returns_first_owned(api, owner, ledger):
    body = api(owner).get("/user/ledger").json()
    assert body["id"] == ledger.pk
    assert body["name"] == "Household"
    assert len(body["categories"]) == 10


def test_user_ledger_creates_one_when_missing(api, stranger):
    body = api(stranger).get("/user/ledger").json()
    assert body["name"] == "My Ledger"
    assert Ledger.objects.filter(owner=stranger).count() == 1


def test_preferences_roundtrip(api, viewer, ledger):
    client = api(viewer)
    assert client.get("/user/preferences").json() == {"currentLedgerId": None, "darkMode": False}

    response = client.patch("/user/preferences", {"currentLedgerId": ledger.pk, "darkMode": True})
    assert response.status_code == 200
    assert response.json() == {"currentLedgerId": ledger.pk, "darkMode": True}

    response = client.patch("/user/preferences", {"currentLedgerId": None})
    assert response.json() == {"currentLedgerId": None, "darkMode": True}


def test_preferences_reject_invisible_ledger(api, stranger, ledger):
    response = api(stranger).patch("/user/preferences", {"currentLedgerId": ledger.pk})
    assert response.status_code == 404
    assert UserProfile.objects.get(user=stranger).current_ledger is None


def test_preferences_dark_mode_must_be_bool(api, owner):
    response = api(owner).patch("/user/preferences", {"darkMode": "yes"})
    assert response.status_code == 400

from __future__ import annotations

from finance.models import LedgerShare


def test_owner_lists_shares(api, owner, editor, viewer, ledger):
    body = api(owner).get("/ledger/invite", {"ledgerId": ledger.pk}).json()
    assert body["ledgerId"] == ledger.pk
    assert sorted((u["username"], u["role"]) for u in body["sharedUsers"]) == [
        ("eddie", "editor"),
        ("vera", "viewer"),
    ]


def test_share_list_falls_back_to_first_owned_ledger(api, owner, ledger):
    body = api(owner).get("/ledger/invite").json()
    assert body == {"ledgerId": ledger.pk, "sharedUsers": []}


def test_sharer_cannot_list_shares(api, editor, ledger):
    response = api(editor).get("/ledger/invite", {"ledgerId": ledger.pk})
    assert response.status_code == 403


def test_invite_defaults_to_editor(api, owner, stranger, ledger):
    response = api(owner).post("/ledger/invite", {"username": "sam", "ledgerId": ledger.pk})

    assert response.status_code == 200
    assert response.json()["ledgerUser"]["role"] == "editor"
    assert LedgerShare.objects.get(ledger=ledger, user=stranger).role == "editor"


def test_invite_as_viewer(api, owner, stranger, ledger):
    response = api(owner).post("/ledger/invite", {"username": "sam", "role": "viewer", "ledgerId": ledger.pk})
    assert response.status_code == 200
    assert LedgerShare.objects.get(ledger=ledger, user=stranger).role == "viewer"


def test_invite_rejects_unknown_role(api, owner, stranger, ledger):
    response = api(owner).post("/ledger/invite", {"username": "sam", "role": "admin", "ledgerId": ledger.pk})
    assert response.status_code == 400


def test_invite_unknown_user(api, owner, ledger):
    response = api(owner).post("/ledger/invite", {"username": "ghost", "ledgerId": ledger.pk})
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_cannot_invite_yourself(api, owner, ledger):
    response = api(owner).post("/ledger/invite", {"username": "olivia", "ledgerId": ledger.pk})
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot invite yourself"}


def test_invite_existing_member_is_conflict(api, owner, editor, ledger):
    response = api(owner).post("/ledger/invite", {"username": "eddie", "ledgerId": ledger.pk})
    assert response.status_code == 409
    assert LedgerShare.objects.filter(ledger=ledger, user=editor).count() == 1


def test_editor_cannot_invite(api, editor, stranger, ledger):
    response = api(editor).post("/ledger/invite", {"username": "sam", "ledgerId": ledger.pk})
    assert response.status_code == 403
    assert not LedgerShare.objects.filter(user=stranger).exists()


def test_outsider_invite_is_not_found(api, stranger, editor, ledger):
    response = api(stranger).post("/ledger/invite", {"username": "eddie", "ledgerId": ledger.pk})
    assert response.status_code == 404


def test_owner_changes_role(api, owner, editor, ledger):
    share = LedgerShare.objects.get(ledger=ledger, user=editor)
    response = api(owner).patch(f"/ledger/invite/{share.pk}", {"role": "viewer"})

    assert response.status_code == 200
    share.refresh_from_db()
    assert share.role == "viewer"
    # the downgrade takes effect on the very next request
    assert api(editor).post("/categories", {
        "ledgerId": ledger.pk, "name": "Pets", "type": "Expense", "color": "#000000", "icon": "pets",
    }).status_code == 403


def test_owner_revokes_access(api, owner, viewer, ledger):
    share = LedgerShare.objects.get(ledger=ledger, user=viewer)
    response = api(owner).delete(f"/ledger/invite/{share.pk}")

    assert response.status_code == 200
    assert not LedgerShare.objects.filter(pk=share.pk).exists()
    assert api(viewer).get("/ledgers").json() == []
    assert api(viewer).get("/transactions", {"ledgerId": ledger.pk}).json() == []


def test_sharer_cannot_revoke(api, editor, viewer, ledger):
    share = LedgerShare.objects.get(ledger=ledger, user=viewer)
    assert api(editor).delete(f"/ledger/invite/{share.pk}").status_code == 403
    assert LedgerShare.objects.filter(pk=share.pk).exists()


def test_revoke_unknown_share(api, owner):
    response = api(owner).delete("/ledger/invite/9999")
    assert response.status_code == 404
    assert response.json() == {"error": "Shared access not found"}

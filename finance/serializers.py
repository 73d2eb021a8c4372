# finance/serializers.py
# 📤 Model → JSON dict converters. Field names follow what the React client
#    reads (camelCase, category flattened to a name + categoryId).


def _money(value):
    return float(value)


def serialize_category(category):
    return {
        "id": category.pk,
        "name": category.name,
        "type": category.type,
        "color": category.color,
        "icon": category.icon,
        "ledgerId": category.ledger_id,
    }


def serialize_transaction(tx, include_receipt=False):
    data = {
        "id": tx.pk,
        "description": tx.description,
        "amount": _money(tx.amount),
        "type": tx.type,
        "date": tx.date.isoformat(),
        "note": tx.note,
        "category": tx.category.name,
        "categoryId": tx.category_id,
        "ledgerId": tx.ledger_id,
        "hasReceipt": bool(tx.receipt_image),
    }
    if include_receipt:
        data["receiptImage"] = tx.receipt_image
    return data


def serialize_share(share):
    return {
        "id": share.pk,
        "userId": share.user_id,
        "username": share.user.username,
        "role": share.role,
        "createdAt": share.created_at.isoformat(),
    }


def serialize_ledger(ledger, user, role=None):
    """Owners see who the ledger is shared with; sharers see their role and the owner."""
    data = {
        "id": ledger.pk,
        "name": ledger.name,
        "currency": ledger.currency,
        "ownerId": ledger.owner_id,
        "isOwner": ledger.owner_id == user.pk,
        "categories": [serialize_category(c) for c in ledger.categories.all()],
    }
    if data["isOwner"]:
        data["sharedWith"] = [
            {"userId": s.user_id, "username": s.user.username, "role": s.role}
            for s in ledger.shares.all()
        ]
    else:
        data["role"] = role
        data["owner"] = {"id": ledger.owner_id, "username": ledger.owner.username}
    return data


def serialize_summary(summary):
    return {
        "totalIncome": _money(summary["totalIncome"]),
        "totalExpense": _money(summary["totalExpense"]),
        "balance": _money(summary["balance"]),
        "transactionCount": summary["transactionCount"],
    }


def serialize_activity(entry):
    return {
        "id": entry.pk,
        "ledgerId": entry.ledger_id,
        "userId": entry.user_id,
        "username": entry.user.username if entry.user else None,
        "action": entry.action,
        "entityType": entry.entity_type,
        "entityId": entry.entity_id or None,
        "message": entry.message,
        "createdAt": entry.created_at.isoformat(),
    }

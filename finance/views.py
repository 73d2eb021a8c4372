# finance/views.py
# ─────────────────────────────────────────────────────────────────────────────
# ✅ All JSON views for the Finance app live here.
#    This file includes:
#      • Ledger views: list/create, rename, change currency
#      • Sharing views: list/invite, change role/revoke
#      • Category views: list/create, update/delete
#      • Transaction views: list/create, update/delete, summary
#      • Receipt storage stats + bulk clear
#      • Activity log
#    Every view follows the same order: load → authorize → validate → mutate
#    → record activity → respond. Access rules live in permissions.py.
# ─────────────────────────────────────────────────────────────────────────────

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.http import JsonResponse

from accounts.models import UserProfile
from ledgerbook.api import (
    ApiLoginRequiredMixin,
    ApiView,
    Conflict,
    NotFound,
    ValidationError,
    read_json,
    validate_form,
)

from .activity import record_activity
from .forms import (
    CategoryForm,
    CurrencyForm,
    InviteForm,
    LedgerForm,
    RenameLedgerForm,
    ShareRoleForm,
    TransactionForm,
)
from .models import ActivityLog, Category, Ledger, LedgerShare, Transaction
from .permissions import Operation, authorize, visible_ledgers
from .receipts import clear_receipts, receipt_stats
from .reports import (
    calculate_summary,
    filter_transactions,
    group_by_category,
    read_filters,
)
from .seeding import create_ledger_with_defaults, get_or_create_first_ledger
from .serializers import (
    serialize_activity,
    serialize_category,
    serialize_ledger,
    serialize_share,
    serialize_summary,
    serialize_transaction,
)

logger = logging.getLogger(__name__)

User = get_user_model()


# ─────────────────────────────────────────────────────────────────────────────
# 🔎 Helpers
# ─────────────────────────────────────────────────────────────────────────────
def _to_int(value):
    """Parse an id from JSON/query string; None when missing or not a number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _ledger_or_none(ledger_id):
    ledger_id = _to_int(ledger_id)
    if ledger_id is None:
        return None
    return Ledger.objects.filter(pk=ledger_id).first()


def _current_ledger(user):
    """The ledger picked in the user's preferences (None when unset)."""
    profile, _ = UserProfile.objects.get_or_create(user=user)
    return profile.current_ledger


# ─────────────────────────────────────────────────────────────────────────────
# 📒 LEDGER VIEWS
# ─────────────────────────────────────────────────────────────────────────────

class LedgerListView(ApiLoginRequiredMixin, ApiView):
    """GET: owned ledgers then ledgers shared with me. POST: new ledger + starter categories."""

    def get(self, request):
        user = request.user
        owned = (Ledger.objects
                 .filter(owner=user)
                 .prefetch_related("categories", "shares__user"))
        shared = (LedgerShare.objects
                  .filter(user=user)
                  .select_related("ledger__owner")
                  .prefetch_related("ledger__categories"))

        data = [serialize_ledger(ledger, user) for ledger in owned]
        data += [serialize_ledger(share.ledger, user, role=share.role) for share in shared]
        return JsonResponse(data, safe=False)

    def post(self, request):
        user = request.user
        cleaned = validate_form(LedgerForm(read_json(request)))
        ledger = create_ledger_with_defaults(user, name=cleaned["name"], currency=cleaned["currency"])
        record_activity(ledger, user, "CREATE", "LEDGER", f'Created ledger "{ledger.name}"', ledger.pk)
        return JsonResponse(serialize_ledger(ledger, user))


class LedgerRenameView(ApiLoginRequiredMixin, ApiView):
    """PATCH /ledger/<id> – owner only."""

    def patch(self, request, pk):
        user = request.user
        cleaned = validate_form(RenameLedgerForm(read_json(request)))
        ledger = _ledger_or_none(pk)
        authorize(user, ledger, Operation.LEDGER_RENAME,
                  forbidden="Forbidden: Only the owner can rename the ledger")

        old_name = ledger.name
        ledger.name = cleaned["name"]
        ledger.save(update_fields=["name", "updated_at"])
        logger.info("ledger.rename ledger=%s by=%s", ledger.pk, user.pk)
        record_activity(ledger, user, "UPDATE", "LEDGER",
                        f'Renamed ledger "{old_name}" to "{ledger.name}"', ledger.pk)
        return JsonResponse({
            "id": ledger.pk,
            "name": ledger.name,
            "currency": ledger.currency,
            "ownerId": ledger.owner_id,
        })


class LedgerCurrencyView(ApiLoginRequiredMixin, ApiView):
    """PATCH /ledger/<id>/currency – owner only."""

    def patch(self, request, pk):
        user = request.user
        cleaned = validate_form(CurrencyForm(read_json(request)))
        ledger = _ledger_or_none(pk)
        authorize(user, ledger, Operation.LEDGER_CURRENCY,
                  forbidden="Forbidden: Only the owner can change the currency")

        ledger.currency = cleaned["currency"]
        ledger.save(update_fields=["currency", "updated_at"])
        logger.info("ledger.currency ledger=%s currency=%s by=%s", ledger.pk, ledger.currency, user.pk)
        record_activity(ledger, user, "UPDATE", "LEDGER",
                        f"Changed currency to {ledger.currency}", ledger.pk)
        return JsonResponse({
            "message": "Currency updated successfully",
            "ledger": {"id": ledger.pk, "currency": ledger.currency},
        })


# ─────────────────────────────────────────────────────────────────────────────
# 🤝 SHARING VIEWS
# ─────────────────────────────────────────────────────────────────────────────

def _share_target_ledger(user, ledger_id):
    """
    Which ledger an invite call is about: the explicit ledgerId if sent,
    otherwise the current ledger when I own it, otherwise my first ledger.
    """
    if ledger_id not in (None, ""):
        return _ledger_or_none(ledger_id)
    current = _current_ledger(user)
    if current is not None and current.owner_id == user.pk:
        return current
    return Ledger.objects.filter(owner=user).order_by("created_at", "id").first()


class InviteListView(ApiLoginRequiredMixin, ApiView):
    """GET: who the ledger is shared with. POST: share it with another user."""

    def get(self, request):
        user = request.user
        ledger = _share_target_ledger(user, request.GET.get("ledgerId"))
        authorize(user, ledger, Operation.SHARE_MANAGE,
                  forbidden="Only the ledger owner can see shared access")
        shares = ledger.shares.select_related("user")
        return JsonResponse({"ledgerId": ledger.pk, "sharedUsers": [serialize_share(s) for s in shares]})

    def post(self, request):
        user = request.user
        payload = read_json(request)
        cleaned = validate_form(InviteForm(payload))

        invitee = User.objects.filter(username=cleaned["username"]).first()
        if invitee is None:
            raise NotFound("User not found")
        if invitee.pk == user.pk:
            raise ValidationError("Cannot invite yourself")

        ledger = _share_target_ledger(user, payload.get("ledgerId"))
        authorize(user, ledger, Operation.SHARE_MANAGE,
                  forbidden="Only the ledger owner can invite users")

        if invitee.pk == ledger.owner_id or ledger.shares.filter(user=invitee).exists():
            raise Conflict("User already has access to this ledger")

        try:
            with transaction.atomic():
                share = LedgerShare.objects.create(ledger=ledger, user=invitee, role=cleaned["role"])
        except IntegrityError:
            raise Conflict("User already has access to this ledger")

        logger.info("share.create ledger=%s user=%s role=%s", ledger.pk, invitee.pk, share.role)
        return JsonResponse({"message": "User invited successfully", "ledgerUser": serialize_share(share)})


class InviteDetailView(ApiLoginRequiredMixin, ApiView):
    """PATCH: change a share's role. DELETE: revoke it. Owner only."""

    def _load(self, request, pk):
        share = LedgerShare.objects.select_related("ledger", "user").filter(pk=pk).first()
        authorize(request.user, share.ledger if share else None, Operation.SHARE_MANAGE,
                  not_found="Shared access not found",
                  forbidden="Only the ledger owner can manage access")
        return share

    def patch(self, request, pk):
        cleaned = validate_form(ShareRoleForm(read_json(request)))
        share = self._load(request, pk)
        share.role = cleaned["role"]
        share.save(update_fields=["role"])
        logger.info("share.role ledger=%s user=%s role=%s", share.ledger_id, share.user_id, share.role)
        return JsonResponse({"message": "Role updated successfully", "ledgerUser": serialize_share(share)})

    def delete(self, request, pk):
        share = self._load(request, pk)
        logger.info("share.delete ledger=%s user=%s", share.ledger_id, share.user_id)
        share.delete()
        return JsonResponse({"message": "Access removed successfully"})


# ─────────────────────────────────────────────────────────────────────────────
# 🏷️ CATEGORY VIEWS
# ─────────────────────────────────────────────────────────────────────────────

class CategoryListView(ApiLoginRequiredMixin, ApiView):
    """GET: categories of every ledger I can see (or one, via ?ledgerId=). POST: create."""

    def get(self, request):
        qs = Category.objects.filter(ledger__in=visible_ledgers(request.user))
        ledger_id = request.GET.get("ledgerId")
        if ledger_id:
            qs = qs.filter(ledger_id=_to_int(ledger_id))
        return JsonResponse([serialize_category(c) for c in qs.order_by("ledger_id", "type", "name")], safe=False)

    def post(self, request):
        user = request.user
        payload = read_json(request)
        if not payload.get("ledgerId"):
            raise ValidationError("Missing required fields")

        ledger = _ledger_or_none(payload.get("ledgerId"))
        authorize(user, ledger, Operation.CATEGORY_WRITE,
                  not_found="Ledger not found or access denied",
                  forbidden="Viewers cannot change categories")

        form = CategoryForm(payload, ledger=ledger)
        validate_form(form)
        category = form.save()
        record_activity(ledger, user, "CREATE", "CATEGORY",
                        f'Created {category.type.lower()} category "{category.name}"', category.pk)
        return JsonResponse(serialize_category(category))


class CategoryDetailView(ApiLoginRequiredMixin, ApiView):
    """PUT: update. DELETE: blocked while any transaction uses the category."""

    def _load(self, request, pk):
        category = Category.objects.select_related("ledger").filter(pk=pk).first()
        authorize(request.user, category.ledger if category else None, Operation.CATEGORY_WRITE,
                  not_found="Category not found or access denied",
                  forbidden="Viewers cannot change categories")
        return category

    def put(self, request, pk):
        category = self._load(request, pk)
        form = CategoryForm(read_json(request), instance=category)
        validate_form(form)
        category = form.save()
        record_activity(category.ledger, request.user, "UPDATE", "CATEGORY",
                        f'Updated category "{category.name}"', category.pk)
        return JsonResponse(serialize_category(category))

    def delete(self, request, pk):
        category = self._load(request, pk)
        in_use = category.transactions.count()
        if in_use:
            raise ValidationError(
                f"Cannot delete category. It is being used by {in_use} transaction(s)."
            )
        ledger, name, category_id = category.ledger, category.name, category.pk
        category.delete()
        record_activity(ledger, request.user, "DELETE", "CATEGORY",
                        f'Deleted category "{name}"', category_id)
        return JsonResponse({"success": True})


# ─────────────────────────────────────────────────────────────────────────────
# 💳 TRANSACTION VIEWS
# ─────────────────────────────────────────────────────────────────────────────

def _transaction_data(payload):
    """Map the client's JSON keys onto TransactionForm field names."""
    data = {
        "description": payload.get("description"),
        "amount": payload.get("amount"),
        "type": payload.get("type"),
        "date": payload.get("date"),
        "category": payload.get("categoryId"),
    }
    if "note" in payload:
        data["note"] = payload.get("note") or ""
    if "receiptImage" in payload:
        data["receipt_image"] = payload.get("receiptImage") or ""
    return data


def _require_category(ledger, category_id):
    """404 unless the category exists inside `ledger` (missing id → let the form say 400)."""
    if category_id in (None, ""):
        return
    category_id = _to_int(category_id)
    if category_id is None or not Category.objects.filter(pk=category_id, ledger=ledger).exists():
        raise NotFound("Category not found or access denied")


def _visible_transactions(user):
    return (Transaction.objects
            .filter(ledger__in=visible_ledgers(user))
            .select_related("category"))


def _describe(tx, currency):
    return f'{tx.type} "{tx.description}" of {tx.amount:.2f} {currency}'


class TransactionListView(ApiLoginRequiredMixin, ApiView):
    """GET: transactions across my ledgers, filterable. POST: create one."""

    def get(self, request):
        qs = filter_transactions(_visible_transactions(request.user), read_filters(request.GET))
        return JsonResponse([serialize_transaction(tx) for tx in qs.order_by("-date", "-id")], safe=False)

    def post(self, request):
        user = request.user
        payload = read_json(request)

        ledger_id = payload.get("ledgerId")
        if ledger_id in (None, ""):
            ledger = get_or_create_first_ledger(user)
        else:
            ledger = _ledger_or_none(ledger_id)
        authorize(user, ledger, Operation.TRANSACTION_WRITE,
                  not_found="Ledger not found or access denied",
                  forbidden="Viewers cannot add transactions")
        _require_category(ledger, payload.get("categoryId"))

        form = TransactionForm(_transaction_data(payload), ledger=ledger)
        validate_form(form)
        tx = form.save()
        logger.info("transaction.create ledger=%s tx=%s by=%s", ledger.pk, tx.pk, user.pk)
        record_activity(ledger, user, "CREATE", "TRANSACTION",
                        f"Added {_describe(tx, ledger.currency)}", tx.pk)
        return JsonResponse(serialize_transaction(tx, include_receipt=True))


class TransactionDetailView(ApiLoginRequiredMixin, ApiView):
    """PUT: update. DELETE: remove. Owner or editor only."""

    def _load(self, request, pk):
        tx = Transaction.objects.select_related("ledger", "category").filter(pk=pk).first()
        authorize(request.user, tx.ledger if tx else None, Operation.TRANSACTION_WRITE,
                  not_found="Transaction not found or access denied",
                  forbidden="Viewers cannot change transactions")
        return tx

    def put(self, request, pk):
        tx = self._load(request, pk)
        payload = read_json(request)
        _require_category(tx.ledger, payload.get("categoryId"))

        form = TransactionForm(_transaction_data(payload), instance=tx, ledger=tx.ledger)
        validate_form(form)
        tx = form.save()
        record_activity(tx.ledger, request.user, "UPDATE", "TRANSACTION",
                        f"Updated {_describe(tx, tx.ledger.currency)}", tx.pk)
        return JsonResponse(serialize_transaction(tx, include_receipt=True))

    def delete(self, request, pk):
        tx = self._load(request, pk)
        ledger, summary, tx_id = tx.ledger, _describe(tx, tx.ledger.currency), tx.pk
        tx.delete()
        record_activity(ledger, request.user, "DELETE", "TRANSACTION", f"Deleted {summary}", tx_id)
        return JsonResponse({"success": True})


class TransactionSummaryView(ApiLoginRequiredMixin, ApiView):
    """Totals + per-category breakdown for the filtered transactions."""

    def get(self, request):
        filters = read_filters(request.GET)
        transactions = list(filter_transactions(_visible_transactions(request.user), filters))
        breakdown = [
            {**row, "amount": float(row["amount"])}
            for row in group_by_category(tx for tx in transactions if tx.type == "Expense")
        ]
        return JsonResponse({
            **serialize_summary(calculate_summary(transactions)),
            "expenseByCategory": breakdown,
        })


# ─────────────────────────────────────────────────────────────────────────────
# 🧾 RECEIPT STORAGE
# ─────────────────────────────────────────────────────────────────────────────

class ReceiptStatsView(ApiLoginRequiredMixin, ApiView):
    """Receipt storage for the current ledger. DELETE clears it (owner only)."""

    def _ledger(self, request):
        ledger_id = request.GET.get("ledgerId")
        if ledger_id:
            return _ledger_or_none(ledger_id)
        return _current_ledger(request.user)

    def get(self, request):
        ledger = self._ledger(request)
        if ledger is None and not request.GET.get("ledgerId"):
            return JsonResponse(receipt_stats([]))
        authorize(request.user, ledger, Operation.RECEIPTS_READ)
        images = (ledger.transactions
                  .filter(receipt_image__isnull=False)
                  .values_list("receipt_image", flat=True))
        return JsonResponse(receipt_stats(images))

    def delete(self, request):
        ledger = self._ledger(request)
        if ledger is None and not request.GET.get("ledgerId"):
            return JsonResponse({"message": "No ledger selected", "clearedCount": 0})
        authorize(request.user, ledger, Operation.RECEIPTS_CLEAR,
                  forbidden="Only ledger owners can clear receipt images")
        cleared = clear_receipts(ledger)
        logger.info("receipts.clear ledger=%s cleared=%s", ledger.pk, cleared)
        if cleared:
            record_activity(ledger, request.user, "CLEAR", "STORAGE",
                            f"Cleared {cleared} receipt image(s)")
        return JsonResponse({"message": "Receipt images cleared successfully", "clearedCount": cleared})


# ─────────────────────────────────────────────────────────────────────────────
# 📜 ACTIVITY LOG
# ─────────────────────────────────────────────────────────────────────────────

class ActivityLogView(ApiLoginRequiredMixin, ApiView):
    """Latest entries on every ledger I can see (optionally one ledger)."""

    def get(self, request):
        qs = (ActivityLog.objects
              .filter(ledger__in=visible_ledgers(request.user))
              .select_related("user"))
        ledger_id = request.GET.get("ledgerId")
        if ledger_id:
            qs = qs.filter(ledger_id=_to_int(ledger_id))
        entries = qs.order_by("-created_at", "-id")[:settings.LEDGERBOOK_LOG_LIMIT]
        return JsonResponse([serialize_activity(e) for e in entries], safe=False)

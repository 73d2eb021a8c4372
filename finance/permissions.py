# finance/permissions.py
# ─────────────────────────────────────────────────────────────────────────────
# Who may do what to a ledger and everything hanging off it.
#
# The rules are pure: they look only at a LedgerAccess fact (who owns the
# ledger, and which share role – if any – the subject holds) and never touch
# the database. Views load the fact with load_access(), ask decide(), and
# turn a denial into an API error with raise_for_decision().
#
#   invisible ledger (not owner, no share)  → NotFound (existence not confirmed)
#   visible, but rule says no               → Forbidden
# ─────────────────────────────────────────────────────────────────────────────

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from django.db.models import Q

from ledgerbook.api import Forbidden, NotFound

from .models import ROLE_EDITOR, Ledger, LedgerShare


class Operation(str, Enum):
    LEDGER_READ = "ledger.read"
    LEDGER_RENAME = "ledger.rename"
    LEDGER_CURRENCY = "ledger.currency"
    CATEGORY_READ = "category.read"
    CATEGORY_WRITE = "category.write"            # create / update / delete
    TRANSACTION_READ = "transaction.read"
    TRANSACTION_WRITE = "transaction.write"      # create / update / delete
    SHARE_MANAGE = "share.manage"                # invite / change role / revoke
    ACTIVITY_READ = "activity.read"
    RECEIPTS_READ = "receipts.read"
    RECEIPTS_CLEAR = "receipts.clear"


# which subjects each operation admits, once the ledger is visible
_OWNER_ONLY = frozenset({
    Operation.LEDGER_RENAME,
    Operation.LEDGER_CURRENCY,
    Operation.SHARE_MANAGE,
    Operation.RECEIPTS_CLEAR,
})
_EDITOR_WRITES = frozenset({
    Operation.CATEGORY_WRITE,
    Operation.TRANSACTION_WRITE,
})
_ANY_PARTICIPANT = frozenset({
    Operation.LEDGER_READ,
    Operation.CATEGORY_READ,
    Operation.TRANSACTION_READ,
    Operation.ACTIVITY_READ,
    Operation.RECEIPTS_READ,
})


@dataclass(frozen=True)
class LedgerAccess:
    """Ownership facts about one ledger from one subject's point of view."""
    ledger_id: int
    owner_id: int
    role: Optional[str] = None       # the subject's share role, None if no share row


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""                 # "not_found" | "forbidden" when denied

    def __bool__(self):
        return self.allowed


ALLOW = Decision(True)
DENY_NOT_FOUND = Decision(False, "not_found")
DENY_FORBIDDEN = Decision(False, "forbidden")


def decide(subject_id, access: Optional[LedgerAccess], operation: Operation) -> Decision:
    """Return ALLOW or a Deny decision for `subject_id` doing `operation`."""
    if access is None:
        return DENY_NOT_FOUND

    is_owner = access.owner_id == subject_id
    if not is_owner and access.role is None:
        return DENY_NOT_FOUND

    if operation in _ANY_PARTICIPANT:
        return ALLOW
    if operation in _EDITOR_WRITES:
        return ALLOW if is_owner or access.role == ROLE_EDITOR else DENY_FORBIDDEN
    if operation in _OWNER_ONLY:
        return ALLOW if is_owner else DENY_FORBIDDEN
    raise ValueError(f"Unknown operation: {operation}")


def raise_for_decision(decision: Decision, not_found="Ledger not found", forbidden="Forbidden"):
    """Turn a denial into the matching API error; do nothing on ALLOW."""
    if decision.allowed:
        return
    if decision.reason == "not_found":
        raise NotFound(not_found)
    raise Forbidden(forbidden)


# ===== Loading facts =========================================================

def load_access(user, ledger: Optional[Ledger]) -> Optional[LedgerAccess]:
    """Read the subject's share role (if any) for `ledger`; None for no ledger."""
    if ledger is None:
        return None
    role = None
    if ledger.owner_id != user.pk:
        role = (LedgerShare.objects
                .filter(ledger_id=ledger.pk, user_id=user.pk)
                .values_list("role", flat=True)
                .first())
    return LedgerAccess(ledger_id=ledger.pk, owner_id=ledger.owner_id, role=role)


def authorize(user, ledger: Optional[Ledger], operation: Operation, **messages) -> LedgerAccess:
    """load_access + decide + raise_for_decision in one call."""
    access = load_access(user, ledger)
    raise_for_decision(decide(user.pk, access, operation), **messages)
    return access


# ===== Query predicates ======================================================

def visible_ledgers_q(user):
    """Q() selecting ledgers the user owns OR holds any share on."""
    shared_ids = LedgerShare.objects.filter(user=user).values("ledger_id")
    return Q(owner=user) | Q(pk__in=shared_ids)


def visible_ledgers(user):
    return Ledger.objects.filter(visible_ledgers_q(user))

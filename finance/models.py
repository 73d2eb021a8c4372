# finance/models.py

# ✅ Import Django utilities for building models
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

# ✅ One 2-choice field indicates Income or Expense everywhere
TRANSACTION_TYPES = (
    ("Income", "Income"),
    ("Expense", "Expense"),
)

ROLE_EDITOR = "editor"
ROLE_VIEWER = "viewer"
SHARE_ROLES = (
    (ROLE_EDITOR, "Editor"),
    (ROLE_VIEWER, "Viewer"),
)


class Ledger(models.Model):
    """
    A financial book. Exactly one owner; other users reach it through
    LedgerShare rows (editor = read/write, viewer = read-only).
    """

    name = models.CharField(max_length=100)

    # 💱 ISO-4217 code, e.g. USD, EUR, IDR
    currency = models.CharField(max_length=3, default="USD")

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,                 # a user's books go with them
        related_name="owned_ledgers",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]           # "first ledger" means oldest

    def __str__(self):
        return f"{self.name} ({self.currency})"


class LedgerShare(models.Model):
    """Grants a non-owner access to a ledger with a role."""

    ledger = models.ForeignKey(Ledger, on_delete=models.CASCADE, related_name="shares")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="ledger_shares",
    )
    role = models.CharField(max_length=6, choices=SHARE_ROLES, default=ROLE_EDITOR)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        # ✅ a (ledger, user) pair appears at most once
        constraints = [
            models.UniqueConstraint(fields=["ledger", "user"], name="uq_ledgershare_ledger_user"),
        ]
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.user} → {self.ledger} ({self.role})"


class Category(models.Model):
    """
    A label to group transactions inside one ledger.
    The 'type' (Income/Expense) keeps reports grouped correctly.
    """

    ledger = models.ForeignKey(Ledger, on_delete=models.CASCADE, related_name="categories")
    name = models.CharField(max_length=50)
    type = models.CharField(max_length=7, choices=TRANSACTION_TYPES)
    color = models.CharField(max_length=20, default="#999999")
    icon = models.CharField(max_length=50, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["type", "name", "id"]
        verbose_name_plural = "Categories"

    def __str__(self):
        return f"{self.name} ({self.type})"


class Transaction(models.Model):
    """
    A single money event (always a positive amount).
    Income adds to the balance, Expense subtracts from it.
    """

    ledger = models.ForeignKey(Ledger, on_delete=models.CASCADE, related_name="transactions")

    # ⚠️ PROTECT: a category with transactions cannot be deleted
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name="transactions")

    type = models.CharField(max_length=7, choices=TRANSACTION_TYPES)

    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],  # must be > 0
    )

    date = models.DateField(default=timezone.now)
    description = models.CharField(max_length=255)
    note = models.TextField(blank=True, default="")

    # 🧾 base-64 data URI of a compressed receipt photo
    receipt_image = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-id"]              # newest first in lists

    def __str__(self):
        return f"{self.description} • {self.type} • {self.amount}"

    def clean(self):
        """The category must live in the same ledger as the transaction."""
        if self.category_id is None or self.ledger_id is None:
            return
        if self.category.ledger_id != self.ledger_id:
            raise ValidationError("This category does not belong to the ledger.")

    def save(self, *args, **kwargs):
        self.full_clean()  # runs clean() + field validators
        super().save(*args, **kwargs)


class ActivityLog(models.Model):
    """Append-only audit entry for a mutation on a ledger."""

    ACTIONS = (
        ("CREATE", "Create"),
        ("UPDATE", "Update"),
        ("DELETE", "Delete"),
        ("CLEAR", "Clear"),
    )
    ENTITY_TYPES = (
        ("TRANSACTION", "Transaction"),
        ("CATEGORY", "Category"),
        ("LEDGER", "Ledger"),
        ("STORAGE", "Storage"),
    )

    ledger = models.ForeignKey(Ledger, on_delete=models.CASCADE, related_name="activity")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,                # keep history when a user leaves
        null=True,
        related_name="activity",
    )
    action = models.CharField(max_length=6, choices=ACTIONS)
    entity_type = models.CharField(max_length=11, choices=ENTITY_TYPES)
    entity_id = models.CharField(max_length=64, blank=True, default="")
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.action} {self.entity_type}: {self.message}"

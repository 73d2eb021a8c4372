# finance/forms.py
# ─────────────────────────────────────────────────────────────────────────────
# Validation for the Finance API. Views decode JSON into a dict and bind it
# here, exactly like a POSTed HTML form.
#   1) LedgerForm / CurrencyForm – create a ledger, rename it, change currency
#   2) CategoryForm – name/type/color/icon of a category inside one ledger
#   3) TransactionForm – add/edit a transaction; category limited to the ledger
#   4) InviteForm / ShareRoleForm – share a ledger with another user
# ─────────────────────────────────────────────────────────────────────────────

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django import forms
from django.conf import settings

from .models import SHARE_ROLES, Category, Ledger, Transaction
from .receipts import format_file_size, get_base64_size

CURRENCY_RE = re.compile(r"^[A-Z]{3}$")
DATA_URI_RE = re.compile(r"^data:image/[a-z0-9.+-]+;base64,", re.IGNORECASE)


def _norm_name(name: str) -> str:
    """Return a neatly spaced version of the name (no double spaces)."""
    return " ".join((name or "").split())


def _clean_currency(value):
    code = (value or "").strip().upper()
    if not CURRENCY_RE.match(code):
        raise forms.ValidationError("Currency must be a 3-letter ISO code, e.g. USD.")
    return code


# ─────────────────────────────────────────────────────────────────────────────
# 1) Ledgers
# ─────────────────────────────────────────────────────────────────────────────
class LedgerForm(forms.ModelForm):
    """Name (required) and currency (optional on create, defaults from settings)."""

    currency = forms.CharField(required=False, max_length=3)

    class Meta:
        model = Ledger
        fields = ["name", "currency"]
        error_messages = {"name": {"required": "Name is required"}}

    def clean_name(self):
        name = _norm_name(self.cleaned_data.get("name"))
        if not name:
            raise forms.ValidationError("Name is required")
        return name

    def clean_currency(self):
        value = self.cleaned_data.get("currency")
        if not value:
            return self.instance.currency if self.instance.pk else settings.LEDGERBOOK_DEFAULT_CURRENCY
        return _clean_currency(value)


class RenameLedgerForm(forms.Form):
    name = forms.CharField(max_length=100, error_messages={"required": "Name is required"})

    def clean_name(self):
        name = _norm_name(self.cleaned_data.get("name"))
        if not name:
            raise forms.ValidationError("Name is required")
        return name


class CurrencyForm(forms.Form):
    """A tiny form that edits only the ledger currency."""
    currency = forms.CharField(max_length=3, error_messages={"required": "Currency is required"})

    def clean_currency(self):
        return _clean_currency(self.cleaned_data.get("currency"))


# ─────────────────────────────────────────────────────────────────────────────
# 2) CategoryForm
# ─────────────────────────────────────────────────────────────────────────────
class CategoryForm(forms.ModelForm):
    """All four fields are required, as the client always sends them."""

    class Meta:
        model = Category
        fields = ["name", "type", "color", "icon"]

    def __init__(self, *args, **kwargs):
        self.ledger = kwargs.pop("ledger", None)
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            field.required = True

    def clean_name(self):
        return _norm_name(self.cleaned_data.get("name"))

    def save(self, commit=True):
        """Tie a new Category row to the ledger passed by the view."""
        obj = super().save(commit=False)
        if self.ledger is not None and not obj.ledger_id:
            obj.ledger = self.ledger
        if commit:
            obj.save()
        return obj


# ─────────────────────────────────────────────────────────────────────────────
# 3) TransactionForm
# ─────────────────────────────────────────────────────────────────────────────
class MoneyField(forms.DecimalField):
    """DecimalField that rounds to cents first, so a float like 0.30000000000000004 is 0.30."""

    CENT = Decimal("0.01")

    def to_python(self, value):
        value = super().to_python(value)
        if value is None:
            return None
        try:
            return value.quantize(self.CENT, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise forms.ValidationError(self.error_messages["invalid"], code="invalid")


class TransactionForm(forms.ModelForm):
    """
    Create/update a Transaction.
      • category choices are limited to the ledger's own categories
      • on update, `note` and `receipt_image` are only touched when sent
      • receipt must be an image data URI under LEDGERBOOK_MAX_RECEIPT_BYTES
    """

    OPTIONAL_ON_UPDATE = ("note", "receipt_image")

    amount = MoneyField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))

    class Meta:
        model = Transaction
        fields = ["description", "amount", "type", "date", "note", "category", "receipt_image"]

    def __init__(self, *args, **kwargs):
        self.ledger = kwargs.pop("ledger")
        super().__init__(*args, **kwargs)
        self.fields["category"].queryset = Category.objects.filter(ledger=self.ledger)
        self.fields["date"].required = True
        if self.instance.pk:
            # absent keys leave the stored value alone
            for name in self.OPTIONAL_ON_UPDATE:
                if name not in self.data:
                    del self.fields[name]

    def clean_description(self):
        return (self.cleaned_data.get("description") or "").strip()

    def clean_receipt_image(self):
        value = self.cleaned_data.get("receipt_image")
        if not value:
            return None
        if not DATA_URI_RE.match(value):
            raise forms.ValidationError("Receipt must be a base64 image data URI.")
        limit = settings.LEDGERBOOK_MAX_RECEIPT_BYTES
        if get_base64_size(value) > limit:
            raise forms.ValidationError(f"Receipt image is larger than {format_file_size(limit)}.")
        return value

    def save(self, commit=True):
        obj = super().save(commit=False)
        obj.ledger = self.ledger
        if commit:
            obj.save()
        return obj


# ─────────────────────────────────────────────────────────────────────────────
# 4) Sharing
# ─────────────────────────────────────────────────────────────────────────────
class InviteForm(forms.Form):
    username = forms.CharField(max_length=150, error_messages={"required": "Username is required"})
    role = forms.ChoiceField(choices=SHARE_ROLES, required=False)

    def clean_username(self):
        return (self.cleaned_data.get("username") or "").strip()

    def clean_role(self):
        return self.cleaned_data.get("role") or "editor"


class ShareRoleForm(forms.Form):
    role = forms.ChoiceField(choices=SHARE_ROLES, error_messages={"required": "Role is required"})

# finance/seeding.py
# 🌱 The starter categories every new ledger gets, and the one function that
#    creates a ledger together with them.

import logging

from django.conf import settings
from django.db import transaction

from .models import Category, Ledger

logger = logging.getLogger(__name__)

DEFAULT_LEDGER_NAME = "My Ledger"

# (name, type, color, icon) – icon names are Material Icons ligatures
DEFAULT_CATEGORIES = (
    ("Food", "Expense", "#FF6B6B", "restaurant"),
    ("Transport", "Expense", "#4ECDC4", "directions_car"),
    ("Shopping", "Expense", "#FFE66D", "shopping_cart"),
    ("Entertainment", "Expense", "#A8E6CF", "movie"),
    ("Utilities", "Expense", "#FF8B94", "bolt"),
    ("Healthcare", "Expense", "#C7CEEA", "local_hospital"),
    ("Salary", "Income", "#95E1D3", "payments"),
    ("Business", "Income", "#F38181", "business_center"),
    ("Investment", "Income", "#AA96DA", "trending_up"),
    ("Other", "Expense", "#FCBAD3", "more_horiz"),
)


def create_ledger_with_defaults(owner, name=DEFAULT_LEDGER_NAME, currency=None):
    """Create a ledger owned by `owner` plus the starter categories, atomically."""
    with transaction.atomic():
        ledger = Ledger.objects.create(
            owner=owner,
            name=name,
            currency=currency or settings.LEDGERBOOK_DEFAULT_CURRENCY,
        )
        Category.objects.bulk_create([
            Category(ledger=ledger, name=cat_name, type=cat_type, color=color, icon=icon)
            for cat_name, cat_type, color, icon in DEFAULT_CATEGORIES
        ])
    logger.info("ledger.create owner=%s ledger=%s currency=%s", owner.pk, ledger.pk, ledger.currency)
    return ledger


def get_or_create_first_ledger(owner):
    """The user's oldest owned ledger; seed a fresh one if they own none."""
    ledger = Ledger.objects.filter(owner=owner).order_by("created_at", "id").first()
    if ledger is None:
        ledger = create_ledger_with_defaults(owner)
    return ledger

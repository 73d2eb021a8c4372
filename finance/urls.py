# finance/urls.py
# ✅ URL routes for the Finance API. No trailing slashes; ids are integers.

from django.urls import path

from . import views

app_name = "finance"

urlpatterns = [
    # ───────────── Ledgers ─────────────
    path("ledgers", views.LedgerListView.as_view(), name="ledger_list"),
    path("ledger/invite", views.InviteListView.as_view(), name="invite_list"),
    path("ledger/invite/<int:pk>", views.InviteDetailView.as_view(), name="invite_detail"),
    path("ledger/<int:pk>", views.LedgerRenameView.as_view(), name="ledger_rename"),
    path("ledger/<int:pk>/currency", views.LedgerCurrencyView.as_view(), name="ledger_currency"),

    # ───────────── Categories ─────────────
    path("categories", views.CategoryListView.as_view(), name="category_list"),
    path("categories/<int:pk>", views.CategoryDetailView.as_view(), name="category_detail"),

    # ───────────── Transactions ─────────────
    path("transactions", views.TransactionListView.as_view(), name="transaction_list"),
    path("transactions/summary", views.TransactionSummaryView.as_view(), name="transaction_summary"),
    path("transactions/<int:pk>", views.TransactionDetailView.as_view(), name="transaction_detail"),

    # ───────────── Receipts + activity ─────────────
    path("receipts/stats", views.ReceiptStatsView.as_view(), name="receipt_stats"),
    path("logs", views.ActivityLogView.as_view(), name="activity_log"),
]

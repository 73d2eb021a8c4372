# finance/admin.py
# ✅ Register the finance models (read-mostly views for support staff)

from django.contrib import admin

from .models import ActivityLog, Category, Ledger, LedgerShare, Transaction


class LedgerShareInline(admin.TabularInline):
    model = LedgerShare
    extra = 0


@admin.register(Ledger)
class LedgerAdmin(admin.ModelAdmin):
    list_display  = ("name", "currency", "owner", "created_at")
    list_filter   = ("currency",)
    search_fields = ("name", "owner__username")
    inlines       = [LedgerShareInline]


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display  = ("name", "type", "ledger")
    list_filter   = ("type",)
    search_fields = ("name", "ledger__name")


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display   = ("date", "description", "type", "amount", "category", "ledger")
    list_filter    = ("type", "date")
    search_fields  = ("description", "note", "ledger__name")
    date_hierarchy = "date"
    exclude        = ("receipt_image",)        # base64 blobs are unreadable in a form


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display  = ("created_at", "ledger", "user", "action", "entity_type", "message")
    list_filter   = ("action", "entity_type")
    search_fields = ("message", "user__username")

    def has_change_permission(self, request, obj=None):
        return False                           # append-only

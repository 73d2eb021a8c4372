# accounts/admin.py
# 🛠️ Admin integration for UserProfile.

from django.contrib import admin

from .models import UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "current_ledger", "dark_mode")
    list_filter = ("dark_mode",)
    search_fields = ("user__username",)

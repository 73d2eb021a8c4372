# accounts/models.py
# 🧱 Models for the accounts app: per-user preferences (current ledger, theme)

from django.conf import settings
from django.db import models


class UserProfile(models.Model):
    """
    📄 One profile per user.
    - current_ledger: the ledger the client has switched to
    - dark_mode: display preference
    """

    # 🔗 link to the user (AUTH_USER_MODEL allows custom User later)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,           # ✅ delete profile if user is deleted
        related_name="profile",             # ✅ access via user.profile
    )

    # 📒 nulled (not deleted) when the ledger goes away
    current_ledger = models.ForeignKey(
        "finance.Ledger",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    dark_mode = models.BooleanField(default=False)

    def __str__(self):
        return f"Profile for {self.user}"

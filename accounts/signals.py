# accounts/signals.py
# 🔔 Create a default UserProfile automatically for each new User.

from django.contrib.auth import get_user_model
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import UserProfile

User = get_user_model()


@receiver(post_save, sender=User)
def create_user_profile(sender, instance, created, **kwargs):
    # 🍼 first save only; current_ledger is filled in once a ledger exists
    if created:
        UserProfile.objects.get_or_create(user=instance)

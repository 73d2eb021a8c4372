from django.apps import AppConfig


class AccountsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'accounts'
    verbose_name = 'Accounts & preferences'

    def ready(self):
        # 🧲 import signal handlers so they register
        from . import signals  # noqa: F401

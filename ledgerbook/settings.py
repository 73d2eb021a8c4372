# ledgerbook/settings.py
# ─────────────────────────────────────────────────────────────────────────────
# Django settings for the Ledgerbook project.
# Every value that differs between machines is read from the environment,
# with a development-friendly default.
# ─────────────────────────────────────────────────────────────────────────────

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name, default=False):
    """Read a truthy/falsy environment variable ("1", "true", "yes", "on")."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


# ===== Core ==================================================================
SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-secret-key-change-me")
DEBUG = _env_bool("DJANGO_DEBUG", False)
ALLOWED_HOSTS = [
    h.strip() for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")
    if h.strip()
]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "accounts.apps.AccountsConfig",
    "finance.apps.FinanceConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "ledgerbook.urls"
WSGI_APPLICATION = "ledgerbook.wsgi.application"

# API routes have no trailing slash, so never redirect to one
APPEND_SLASH = False

# signup and login are exempt; every other unsafe request needs the csrftoken
# cookie set by login echoed back in X-CSRFToken
CSRF_FAILURE_VIEW = "ledgerbook.views.csrf_failure_view"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

# ===== Database ==============================================================
DATABASES = {
    "default": {
        "ENGINE": os.environ.get("LEDGERBOOK_DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.environ.get("LEDGERBOOK_DB_NAME", str(BASE_DIR / "db.sqlite3")),
        "USER": os.environ.get("LEDGERBOOK_DB_USER", ""),
        "PASSWORD": os.environ.get("LEDGERBOOK_DB_PASSWORD", ""),
        "HOST": os.environ.get("LEDGERBOOK_DB_HOST", ""),
        "PORT": os.environ.get("LEDGERBOOK_DB_PORT", ""),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ===== Auth ==================================================================
AUTH_PASSWORD_VALIDATORS = []   # signup enforces its own length rules

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

# ===== Ledgerbook ============================================================
LEDGERBOOK_DEFAULT_CURRENCY = os.environ.get("LEDGERBOOK_DEFAULT_CURRENCY", "USD")

# decoded bytes; the client compresses receipts well below this
LEDGERBOOK_MAX_RECEIPT_BYTES = int(os.environ.get("LEDGERBOOK_MAX_RECEIPT_BYTES", str(1024 * 1024)))

LEDGERBOOK_ACTIVITY_SINK = os.environ.get(
    "LEDGERBOOK_ACTIVITY_SINK", "finance.activity.DatabaseActivitySink"
)

LEDGERBOOK_LOG_LIMIT = int(os.environ.get("LEDGERBOOK_LOG_LIMIT", "100"))

# ===== Logging ===============================================================
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "plain",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": os.environ.get("LEDGERBOOK_LOG_LEVEL", "INFO"),
    },
    "loggers": {
        "django.db.backends": {"level": "WARNING"},
    },
}

# ledgerbook/wsgi.py
# WSGI entry point (gunicorn ledgerbook.wsgi).

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "ledgerbook.settings")

application = get_wsgi_application()

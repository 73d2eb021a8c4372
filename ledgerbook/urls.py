# ledgerbook/urls.py
# 🗺️ Root URLconf: the admin plus the two apps. API routes sit at the root
#    (/auth/..., /ledgers, /transactions, ...) with no trailing slashes.

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("accounts.urls")),
    path("", include("finance.urls")),
]

handler404 = "ledgerbook.views.page_not_found_view"
handler500 = "ledgerbook.views.server_error_view"

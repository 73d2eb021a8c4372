# accounts/urls.py
# ✅ Auth and per-user routes.

from django.urls import path

from . import views

app_name = "accounts"

urlpatterns = [
    path("auth/signup", views.SignupView.as_view(), name="signup"),
    path("auth/login", views.LoginView.as_view(), name="login"),
    path("auth/logout", views.LogoutView.as_view(), name="logout"),

    path("user/ledger", views.UserLedgerView.as_view(), name="user_ledger"),
    path("user/preferences", views.PreferencesView.as_view(), name="preferences"),
]

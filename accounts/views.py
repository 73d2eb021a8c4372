# accounts/views.py
# ✅ Auth + per-user endpoints: signup/login/logout, the user's ledger, preferences.

import logging

from django.contrib.auth import login, logout
from django.db import IntegrityError
from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt, ensure_csrf_cookie

from finance.models import Ledger
from finance.permissions import Operation, authorize
from finance.seeding import get_or_create_first_ledger
from finance.serializers import serialize_category
from ledgerbook.api import (
    ApiLoginRequiredMixin,
    ApiView,
    Conflict,
    Unauthenticated,
    ValidationError,
    read_json,
    validate_form,
)

from .forms import LoginForm, PreferencesForm, SignupForm
from .models import UserProfile

logger = logging.getLogger(__name__)


def _preferences(profile):
    return {
        "currentLedgerId": profile.current_ledger_id,
        "darkMode": profile.dark_mode,
    }


@method_decorator(csrf_exempt, name="dispatch")
class SignupView(ApiView):
    """
    Create a new user with a starter ledger.
    Validation problems → 400, username taken → 409.
    """

    def post(self, request):
        form = SignupForm(read_json(request))
        if not form.is_valid() and form.has_error("__all__", code="duplicate"):
            raise Conflict("Username already exists")
        validate_form(form)
        try:
            user = form.save()
        except IntegrityError:
            # lost a race with another signup for the same username
            raise Conflict("Username already exists")
        logger.info("user.signup user=%s", user.pk)
        return JsonResponse({"message": "User created successfully", "userId": user.pk})


@method_decorator([csrf_exempt, ensure_csrf_cookie], name="dispatch")
class LoginView(ApiView):
    """Start a session (Django's session cookie) for valid credentials."""

    def post(self, request):
        form = LoginForm(read_json(request), request=request)
        if not form.is_valid() and form.has_error("__all__", code="invalid_login"):
            raise Unauthenticated("Invalid username or password")
        validate_form(form)
        login(request, form.user)                    # ✅ session cookie from django.contrib.sessions
        return JsonResponse({"id": form.user.pk, "username": form.user.username})


class LogoutView(ApiView):
    def post(self, request):
        logout(request)                              # ✅ clear session
        return JsonResponse({"message": "Logged out"})


class UserLedgerView(ApiLoginRequiredMixin, ApiView):
    """The user's first owned ledger; one with starter categories is created if none exists."""

    def get(self, request):
        ledger = get_or_create_first_ledger(request.user)
        return JsonResponse({
            "id": ledger.pk,
            "name": ledger.name,
            "currency": ledger.currency,
            "categories": [serialize_category(c) for c in ledger.categories.all()],
        })


class PreferencesView(ApiLoginRequiredMixin, ApiView):
    """GET/PATCH currentLedgerId and darkMode."""

    def get(self, request):
        # 🧾 get or create a profile for this user (safety if signal didn't run)
        profile, _ = UserProfile.objects.get_or_create(user=request.user)
        return JsonResponse(_preferences(profile))

    def patch(self, request):
        payload = read_json(request)
        cleaned = validate_form(PreferencesForm(payload))
        profile, _ = UserProfile.objects.get_or_create(user=request.user)

        if "currentLedgerId" in payload:
            ledger_id = cleaned["currentLedgerId"]
            if ledger_id is None:
                profile.current_ledger = None
            else:
                ledger = Ledger.objects.filter(pk=ledger_id).first()
                authorize(request.user, ledger, Operation.LEDGER_READ)
                profile.current_ledger = ledger

        if "darkMode" in payload:
            if not isinstance(payload["darkMode"], bool):
                raise ValidationError("darkMode must be true or false")
            profile.dark_mode = payload["darkMode"]

        profile.save()                               # 💾 write preferences
        return JsonResponse(_preferences(profile))

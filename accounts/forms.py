# accounts/forms.py
# ✅ Signup, login and preference forms for the JSON API.

from django import forms
from django.contrib.auth import authenticate, get_user_model
from django.db import transaction

from finance.seeding import create_ledger_with_defaults

from .models import UserProfile

User = get_user_model()                               # supports custom User if you add one later

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


class SignupForm(forms.Form):
    """
    ✅ Our signup form:
       - username ≥ 3 characters, password ≥ 6 characters
       - duplicate username is flagged with code="duplicate" so the view can answer 409
       - save() creates the user, their first ledger and starter categories
    """

    username = forms.CharField(max_length=150, required=False, strip=True)
    password = forms.CharField(required=False, strip=False)

    def clean(self):
        cleaned = super().clean()
        username = cleaned.get("username") or ""
        password = cleaned.get("password") or ""

        # 🔎 checked in this order, one message at a time
        if not username or not password:
            raise forms.ValidationError("Username and password are required", code="required")
        if len(username) < MIN_USERNAME_LENGTH:
            raise forms.ValidationError(
                f"Username must be at least {MIN_USERNAME_LENGTH} characters", code="invalid"
            )
        if len(password) < MIN_PASSWORD_LENGTH:
            raise forms.ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters", code="invalid"
            )
        if User.objects.filter(username=username).exists():
            raise forms.ValidationError("Username already exists", code="duplicate")
        return cleaned

    def save(self):
        """
        💾 Create the User (password hashed by Django), then their first ledger,
           and point the profile's current ledger at it.
        """
        with transaction.atomic():
            user = User.objects.create_user(
                username=self.cleaned_data["username"],
                password=self.cleaned_data["password"],
            )
            ledger = create_ledger_with_defaults(user)
            profile, _ = UserProfile.objects.get_or_create(user=user)
            profile.current_ledger = ledger
            profile.save(update_fields=["current_ledger"])
        return user


class LoginForm(forms.Form):
    """Check credentials; the authenticated user ends up in self.user."""

    username = forms.CharField(max_length=150, error_messages={"required": "Username is required"})
    password = forms.CharField(strip=False, error_messages={"required": "Password is required"})

    def __init__(self, *args, request=None, **kwargs):
        self.request = request
        self.user = None
        super().__init__(*args, **kwargs)

    def clean(self):
        cleaned = super().clean()
        username = cleaned.get("username")
        password = cleaned.get("password")
        if username and password:
            self.user = authenticate(self.request, username=username, password=password)
            if self.user is None:
                raise forms.ValidationError("Invalid username or password", code="invalid_login")
        return cleaned


class PreferencesForm(forms.Form):
    """
    PATCH body for /user/preferences (darkMode is checked by the view);
    currentLedgerId may be null to clear the selection.
    """

    currentLedgerId = forms.IntegerField(required=False, min_value=1)

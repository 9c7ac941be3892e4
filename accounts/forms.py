"""
Forms for signing up and signing in with an email address.
"""
import re

from django import forms
from django.contrib.auth import get_user_model

from accounts.account_adapter import email_domain_allowed

User = get_user_model()

SPECIAL_CHARACTERS = "!@#$%^&*"

PASSWORD_REQUIREMENTS = [
    ("length", "At least 8 characters", lambda p: len(p) >= 8),
    ("upper", "One uppercase letter", lambda p: bool(re.search(r"[A-Z]", p))),
    ("lower", "One lowercase letter", lambda p: bool(re.search(r"[a-z]", p))),
    ("digit", "One number", lambda p: bool(re.search(r"[0-9]", p))),
    ("special", f"One special character ({SPECIAL_CHARACTERS})",
     lambda p: any(c in SPECIAL_CHARACTERS for c in p)),
]


def password_checks(password):
    """Return ``(key, label, met)`` for every password requirement."""
    password = password or ""
    return [(key, label, check(password)) for key, label, check in PASSWORD_REQUIREMENTS]


def password_strength(password):
    """
    Score a password against the requirements.

    Returns (percentage, label) where label is "Weak" up to 33%,
    "Medium" below 100% and "Strong" when every requirement is met.
    """
    met = sum(1 for _, _, ok in password_checks(password) if ok)
    strength = met / len(PASSWORD_REQUIREMENTS) * 100
    if strength <= 33:
        label = "Weak"
    elif strength < 100:
        label = "Medium"
    else:
        label = "Strong"
    return round(strength), label


class SignInForm(forms.Form):
    email = forms.EmailField(
        widget=forms.EmailInput(attrs={"class": "form-control", "autocomplete": "email"}),
    )
    password = forms.CharField(
        widget=forms.PasswordInput(attrs={"class": "form-control", "autocomplete": "current-password"}),
    )


class SignUpForm(forms.Form):
    first_name = forms.CharField(
        max_length=150,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    last_name = forms.CharField(
        max_length=150,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    email = forms.EmailField(
        widget=forms.EmailInput(attrs={"class": "form-control", "autocomplete": "email"}),
    )
    password = forms.CharField(
        widget=forms.PasswordInput(attrs={"class": "form-control", "autocomplete": "new-password"}),
    )
    confirm_password = forms.CharField(
        label="Confirm password",
        widget=forms.PasswordInput(attrs={"class": "form-control", "autocomplete": "new-password"}),
    )

    def clean_email(self):
        email = self.cleaned_data["email"].strip().lower()
        if User.objects.filter(email__iexact=email).exists() or User.objects.filter(username__iexact=email).exists():
            raise forms.ValidationError(
                "This email is already registered. Please sign in or use a different email."
            )
        if not email_domain_allowed(email):
            raise forms.ValidationError("Sign-ups from this email domain are not allowed.")
        return email

    def clean_password(self):
        password = self.cleaned_data["password"]
        missing = [label for _, label, ok in password_checks(password) if not ok]
        if missing:
            raise forms.ValidationError(
                "Password does not meet all requirements: " + ", ".join(missing).lower() + "."
            )
        return password

    def clean(self):
        cleaned = super().clean()
        password = cleaned.get("password")
        confirm = cleaned.get("confirm_password")
        if password and confirm and password != confirm:
            self.add_error("confirm_password", "Passwords do not match.")
        return cleaned

    def save(self):
        data = self.cleaned_data
        return User.objects.create_user(
            username=data["email"],
            email=data["email"],
            password=data["password"],
            first_name=data["first_name"].strip(),
            last_name=data["last_name"].strip(),
        )

from allauth.account.adapter import DefaultAccountAdapter
from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.urls import reverse


def email_domain_allowed(email):
    allowed = getattr(settings, "ALLOWED_SIGNUP_DOMAINS", None)
    if not allowed:
        return True
    email = (email or "").lower()
    return any(email.endswith("@" + d.lower()) for d in allowed)


class SignupAdapter(DefaultAccountAdapter):
    def is_open_for_signup(self, request):
        return True

    def get_login_redirect_url(self, request):
        return reverse("accounts:post_login_router")

    def save_user(self, request, user, form, commit=True):
        user = super().save_user(request, user, form, commit=False)
        if not email_domain_allowed(user.email):
            raise PermissionDenied("This email domain is not allowed.")
        if commit:
            user.save()
        return user

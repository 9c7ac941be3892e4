import logging

from allauth.account.signals import user_signed_up
from django.contrib import messages
from django.contrib.auth import authenticate, get_user_model, login, logout
from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme

from accounts.forms import PASSWORD_REQUIREMENTS, SignInForm, SignUpForm, password_strength
from core.models import Profile
from core.permissions import onboarding_url_name

logger = logging.getLogger(__name__)

User = get_user_model()

# Users created here authenticate through the model backend
MODEL_BACKEND = "django.contrib.auth.backends.ModelBackend"


def _safe_next(request):
    next_url = request.POST.get("next") or request.GET.get("next")
    if next_url and url_has_allowed_host_and_scheme(
        next_url, allowed_hosts={request.get_host()}, require_https=request.is_secure()
    ):
        return next_url
    return None


@login_required
def post_login_router(request):
    """Route users after login to their next onboarding step or the dashboard."""
    return redirect(onboarding_url_name(Profile.for_user(request.user)))


def sign_in(request):
    if request.user.is_authenticated:
        return redirect("accounts:post_login_router")

    form = SignInForm(request.POST or None)
    if request.method == "POST":
        user = None
        if form.is_valid():
            email = form.cleaned_data["email"]
            account = User.objects.filter(email__iexact=email).first()
            if account is not None:
                user = authenticate(
                    request,
                    username=account.get_username(),
                    password=form.cleaned_data["password"],
                )
        if user is not None:
            login(request, user)
            return redirect(_safe_next(request) or "accounts:post_login_router")
        messages.error(request, "Invalid email or password.")

    # preserve ?next=... if present
    return render(
        request,
        "accounts/login.html",
        {
            "form": form,
            "next": request.GET.get("next", ""),
            "hide_sidebar": True,
        },
    )


def sign_up(request):
    if request.user.is_authenticated:
        return redirect("accounts:post_login_router")

    form = SignUpForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        user = form.save()
        login(request, user, backend=MODEL_BACKEND)
        logger.info("New account %s signed up", user.pk)
        user_signed_up.send(sender=User, request=request, user=user)
        return redirect("accounts:post_login_router")

    strength = label = None
    if request.method == "POST":
        strength, label = password_strength(request.POST.get("password", ""))

    return render(
        request,
        "accounts/signup.html",
        {
            "form": form,
            "requirements": [label for _, label, _ in PASSWORD_REQUIREMENTS],
            "strength": strength,
            "strength_label": label,
            "hide_sidebar": True,
        },
    )


@login_required
def sign_out(request):
    logout(request)
    return redirect("landing")


def permission_denied_view(request, exception=None):
    """
    Custom 403 handler that renders a styled forbidden page.
    """
    return render(request, "accounts/forbidden.html", status=403)

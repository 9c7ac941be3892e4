"""
Signals for account-related events.

Handles user signup events, for both email and Google sign-ups.
"""
from django.dispatch import receiver
from django.urls import reverse
from allauth.account.signals import user_signed_up

from core.emails import send_welcome_email_async
from core.models import Profile


@receiver(user_signed_up)
def welcome_new_user(request, user, **kwargs):
    """
    Give a new user a basic profile (no role yet) and send the welcome email.

    The user picks a role on first visit to the onboarding pages.
    """
    Profile.for_user(user)

    onboarding_url = None
    if request:
        onboarding_url = request.build_absolute_uri(reverse("onboarding:role"))

    # Async so SMTP latency does not block the request
    send_welcome_email_async(user, onboarding_url=onboarding_url)

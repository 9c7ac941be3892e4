"""
Context processors for core app.

Provides template context variables related to the signed-in user's Profile.
"""
from typing import Any

from django.http import HttpRequest
from django.urls import reverse

from core.models import Profile


def profile_context(request: HttpRequest) -> dict[str, Any]:
    """
    Adds the request user's profile for the navbar and profile cards.

    Provides:
    - user_profile: the Profile (None for anonymous users)
    - user_profile_url: link to the user's own profile page
    """
    user = request.user
    context: dict[str, Any] = {
        "user_profile": None,
        "user_profile_url": None,
    }

    if not user.is_authenticated:
        return context

    try:
        profile = Profile.objects.select_related("user").get(user=user)
    except Profile.DoesNotExist:
        return context

    context["user_profile"] = profile
    if profile.role:
        context["user_profile_url"] = reverse(f"onboarding:{profile.role}_profile")
    return context

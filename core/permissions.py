"""
Access control for Strength of Faculty.

Access is role-based: every signed-up user owns one Profile whose ``role``
is chosen during onboarding.

Layer 1: Onboarding
-------------------
Enforced by @require_onboarded in core.decorators.
Users must have:
  1. Authentication (login)
  2. A role (teacher or institution)
  3. A completed profile

Users who haven't finished onboarding are routed back into it.

Layer 2: Ownership
------------------
Enforced by the helpers in this module.
- Profiles, documents and posts can only be changed by their owner.
- Job postings can only be changed by the institution that posted them.
- Staff users (Django admin) may moderate posts.
"""

from core.models import Profile


def get_profile(user):
    """Return the user's Profile (created if missing), or None when anonymous."""
    if not user or not user.is_authenticated:
        return None
    return Profile.for_user(user)


def onboarding_url_name(profile) -> str:
    """
    URL name of the next onboarding step for ``profile``.

    - no role: role selection
    - role but profile not completed: that role's profile form
    - otherwise: dashboard
    """
    if not profile.role:
        return "onboarding:role"
    if not profile.profile_completed:
        return f"onboarding:{profile.role}_profile"
    return "dashboard"


def can_change_document(user, document) -> bool:
    profile = get_profile(user)
    return profile is not None and document.profile_id == profile.pk


def can_view_document(user, document) -> bool:
    """Owners and staff (who verify uploads) may open a document."""
    if not user or not user.is_authenticated:
        return False
    if user.is_staff or user.is_superuser:
        return True
    return can_change_document(user, document)


def can_delete_post(user, post) -> bool:
    if not user or not user.is_authenticated:
        return False
    if user.is_staff or user.is_superuser:
        return True
    profile = get_profile(user)
    return profile is not None and post.author_id == profile.pk


def can_manage_job(user, job) -> bool:
    profile = get_profile(user)
    return (
        profile is not None
        and profile.is_institution
        and job.institution_id == profile.pk
    )

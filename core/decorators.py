"""
Access control decorators for Strength of Faculty views.

@require_onboarded
    User must have chosen a role and completed their profile.
    Users still onboarding are redirected to their next onboarding step.

@require_role(Profile.ROLE_INSTITUTION, ...)
    User must be onboarded AND have one of the given roles.
    Other users get PermissionDenied.

Usage Examples:
--------------
    from django.contrib.auth.decorators import login_required
    from core.decorators import require_onboarded, require_role
    from core.models import Profile

    @login_required
    @require_onboarded
    def dashboard(request):
        ...

    @login_required
    @require_role(Profile.ROLE_INSTITUTION)
    def job_create(request):
        ...
"""
from functools import wraps

from django.core.exceptions import PermissionDenied
from django.shortcuts import redirect

from core.permissions import get_profile, onboarding_url_name


def require_onboarded(view_func):
    """
    Decorator to require a completed profile.

    The user's Profile is attached to the request as ``request.profile``.
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        profile = get_profile(request.user)
        if profile is None:
            return redirect("accounts:login")
        if not profile.is_onboarded:
            return redirect(onboarding_url_name(profile))
        request.profile = profile
        return view_func(request, *args, **kwargs)
    return wrapper


def require_role(*allowed_roles):
    """
    Decorator to require one of the given roles.

    Args:
        *allowed_roles: Profile roles that are allowed access

    Raises:
        PermissionDenied if the user's role is not in allowed_roles
    """
    def decorator(view_func):
        @wraps(view_func)
        @require_onboarded
        def wrapper(request, *args, **kwargs):
            if request.profile.role not in allowed_roles:
                raise PermissionDenied
            return view_func(request, *args, **kwargs)
        return wrapper
    return decorator

"""
URL configuration for the Strength of Faculty project.
"""
from django.contrib import admin
from django.urls import include, path

from core import views as core_views

handler403 = "accounts.views.permission_denied_view"

urlpatterns = [
    path("", core_views.landing, name="landing"),
    path("dashboard/", core_views.dashboard, name="dashboard"),
    path("admin/", admin.site.urls),
    path("accounts/", include("accounts.urls")),
    # allauth: password reset, Google sign-in
    path("auth/", include("allauth.urls")),
    path("", include("core.urls")),
    path("onboarding/", include("onboarding.urls")),
    path("", include("matching.urls")),
]

"""
URL configuration for core app.

Landing and dashboard are mounted at the project root (see sof_project.urls).
"""
from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    # Feed
    path("feed/", views.feed, name="feed"),
    path("feed/<int:pk>/delete/", views.post_delete, name="post_delete"),
    # Profiles
    path("profiles/<int:pk>/", views.profile_detail, name="profile_detail"),
]

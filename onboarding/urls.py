from django.urls import path

from onboarding import views

app_name = "onboarding"

urlpatterns = [
    path("role/", views.role_select, name="role"),
    path("teacher/", views.teacher_profile, name="teacher_profile"),
    path("institution/", views.institution_profile, name="institution_profile"),
    # Verification documents
    path("documents/upload/", views.document_upload, name="document_upload"),
    path("documents/<int:pk>/", views.document_download, name="document_download"),
    path("documents/<int:pk>/delete/", views.document_delete, name="document_delete"),
]

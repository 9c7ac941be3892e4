from django.urls import path

from matching import views

app_name = "matching"

urlpatterns = [
    # Job postings
    path("jobs/", views.job_list, name="job_list"),
    path("jobs/new/", views.job_create, name="job_create"),
    path("jobs/<int:pk>/", views.job_detail, name="job_detail"),
    path("jobs/<int:pk>/close/", views.job_close, name="job_close"),
    # AI matching
    path("matching/job-analysis/", views.job_analysis, name="job_analysis"),
    path("matching/resume-analysis/", views.resume_analysis, name="resume_analysis"),
]

"""
Views for job postings and the AI matching flows.

- Institutions: post, list, close jobs; analyse how well a teacher fits a job
- Teachers: browse jobs; check their own fit; analyse a resume against a job
"""
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied
from django.db.models import Q
from django.http import Http404
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from core.decorators import require_onboarded, require_role
from core.mixins import stamp_audit
from core.models import Profile
from core.paging import paginate
from core.permissions import can_manage_job
from matching.flows import (
    JobRequirementsInput,
    ProfileAnalysisInput,
    analyze_job_requirements,
    analyze_profile,
    describe_teacher,
    to_data_uri,
)
from matching.forms import JobAnalysisForm, JobPostingForm, ResumeAnalysisForm
from matching.genai_client import AnalysisError
from matching.models import JobPosting

logger = logging.getLogger(__name__)


def _get_job_or_none(request, param="job"):
    """Look up an active (or own) job posting from a query parameter."""
    job_id = request.GET.get(param)
    if not job_id:
        return None
    try:
        job = JobPosting.objects.select_related("institution__user").get(pk=int(job_id))
    except (ValueError, JobPosting.DoesNotExist):
        return None
    if not job.is_active and not can_manage_job(request.user, job):
        return None
    return job


def _get_teacher_or_none(request, param="teacher"):
    teacher_id = request.GET.get(param, "")
    if not teacher_id.isdigit():
        return None
    return Profile.objects.filter(
        pk=int(teacher_id), role=Profile.ROLE_TEACHER, profile_completed=True
    ).first()


# =============================================================================
# Job postings
# =============================================================================


@login_required
@require_onboarded
def job_list(request):
    """
    Institutions see their own postings; teachers see all active postings.

    Query parameters:
        q: Search title, subject or location
        page / per_page: Pagination
    """
    profile = request.profile
    q = (request.GET.get("q") or "").strip()

    if profile.is_institution:
        jobs = JobPosting.objects.filter(institution=profile)
    else:
        jobs = JobPosting.objects.filter(is_active=True)

    if q:
        jobs = jobs.filter(
            Q(title__icontains=q) | Q(subject__icontains=q) | Q(location__icontains=q)
        )

    jobs = jobs.select_related("institution__user")

    return render(
        request,
        "matching/job_list.html",
        {
            "active": "jobs",
            "q": q,
            **paginate(request, jobs),
        },
    )


@login_required
@require_role(Profile.ROLE_INSTITUTION)
def job_create(request):
    form = JobPostingForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        job = form.save(commit=False)
        job.institution = request.profile
        stamp_audit(job, request.user)
        job.save()
        logger.info("Job %s posted by profile %s", job.pk, request.profile.pk)
        messages.success(request, "Job posted.")
        return redirect("matching:job_detail", pk=job.pk)

    return render(request, "matching/job_form.html", {"active": "jobs", "form": form})


@login_required
@require_onboarded
def job_detail(request, pk):
    job = get_object_or_404(JobPosting.objects.select_related("institution__user"), pk=pk)
    can_manage = can_manage_job(request.user, job)
    if not job.is_active and not can_manage:
        raise Http404("This job is no longer available.")

    candidates = []
    if can_manage:
        candidates = (
            Profile.objects.filter(role=Profile.ROLE_TEACHER, profile_completed=True)
            .select_related("user")
            .order_by("-last_updated_at")[:20]
        )

    return render(
        request,
        "matching/job_detail.html",
        {
            "active": "jobs",
            "job": job,
            "can_manage": can_manage,
            "candidates": candidates,
        },
    )


@login_required
@require_role(Profile.ROLE_INSTITUTION)
@require_POST
def job_close(request, pk):
    """Close an open posting, or re-open a closed one."""
    job = get_object_or_404(JobPosting, pk=pk)
    if not can_manage_job(request.user, job):
        raise PermissionDenied("You can only manage your own job postings.")

    job.is_active = not job.is_active
    job.last_updated_by = request.user
    job.save(update_fields=["is_active", "last_updated_by", "last_updated_at"])
    messages.success(request, "Job re-opened." if job.is_active else "Job closed.")
    return redirect("matching:job_detail", pk=job.pk)


# =============================================================================
# AI matching
# =============================================================================


@login_required
@require_onboarded
def job_analysis(request):
    """
    Job-requirement analysis: score a teacher profile against a job.

    - Institutions may pre-fill from ?job=<id> and ?teacher=<profile id>
    - Teachers always analyse their own stored profile; any submitted
      teacher_profile text is replaced with it
    """
    profile = request.profile
    result = None

    if request.method == "POST":
        form = JobAnalysisForm(request.POST)
        if form.is_valid():
            data = dict(form.cleaned_data)
            if profile.is_teacher:
                data["teacher_profile"] = describe_teacher(profile)
            try:
                result = analyze_job_requirements(JobRequirementsInput(**data))
            except AnalysisError as exc:
                logger.warning("Job requirement analysis failed for profile %s: %s", profile.pk, exc)
                messages.error(request, str(exc))
    else:
        job = _get_job_or_none(request)
        teacher_text = ""
        if profile.is_teacher:
            teacher_text = describe_teacher(profile)
        else:
            teacher = _get_teacher_or_none(request)
            if teacher is not None:
                teacher_text = describe_teacher(teacher)
        form = JobAnalysisForm(initial=JobAnalysisForm.initial_for(job, teacher_text))

    if profile.is_teacher:
        form.fields["teacher_profile"].widget.attrs["readonly"] = True

    return render(
        request,
        "matching/job_analysis.html",
        {"active": "matching", "form": form, "result": result},
    )


@login_required
@require_role(Profile.ROLE_TEACHER)
def resume_analysis(request):
    """Resume analysis: summarise a resume and score it against a job description."""
    result = None

    if request.method == "POST":
        form = ResumeAnalysisForm(request.POST, request.FILES)
        if form.is_valid():
            resume = form.cleaned_data["resume"]
            try:
                data = ProfileAnalysisInput(
                    resume_data_uri=to_data_uri(resume.read(), resume.content_type),
                    job_description=form.cleaned_data["job_description"],
                )
                result = analyze_profile(data)
            except AnalysisError as exc:
                logger.warning("Resume analysis failed for profile %s: %s", request.profile.pk, exc)
                messages.error(request, str(exc))
    else:
        job = _get_job_or_none(request)
        initial = {"job_description": job.as_job_description()} if job else {}
        form = ResumeAnalysisForm(initial=initial)

    return render(
        request,
        "matching/resume_analysis.html",
        {"active": "matching", "form": form, "result": result},
    )

"""
Views for core models.

This module provides views for:
- Landing: Public welcome page
- Dashboard: Role-specific overview (teacher or institution)
- Feed: Social-style posts from teachers and institutions
- Profiles: Read-only view of a completed profile
"""
from datetime import timedelta

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied
from django.db.models import Case, IntegerField, Value, When
from django.http import Http404
from django.shortcuts import get_object_or_404, redirect, render
from django.utils import timezone
from django.views.decorators.http import require_POST

from core.decorators import require_onboarded
from core.forms import PostForm
from core.mixins import stamp_audit
from core.models import Post, Profile
from core.paging import paginate
from core.permissions import can_delete_post, onboarding_url_name
from matching.models import JobPosting


def landing(request):
    """
    Public landing page.

    Always shows the landing page; signed-in users get a link back into the app.
    """
    next_url_name = None
    if request.user.is_authenticated:
        next_url_name = onboarding_url_name(Profile.for_user(request.user))
    return render(
        request,
        "core/landing.html",
        {"hide_sidebar": True, "next_url_name": next_url_name},
    )


def _recommended_jobs(profile, limit=5):
    """Active postings, those matching the teacher's subjects first."""
    subjects = (profile.data.get("professional_details") or {}).get("subjects", "")
    terms = [s.strip() for s in subjects.split(",") if s.strip()]

    jobs = JobPosting.objects.filter(is_active=True).select_related("institution__user")
    if terms:
        whens = [When(subject__icontains=term, then=Value(0)) for term in terms]
        jobs = jobs.annotate(
            subject_rank=Case(*whens, default=Value(1), output_field=IntegerField())
        ).order_by("subject_rank", "-created_at")
    return jobs[:limit]


def _teacher_dashboard_context(profile):
    return {
        "recommended_jobs": _recommended_jobs(profile),
        "recent_posts": Post.objects.select_related("author__user")[:5],
        "suggested_institutions": (
            Profile.objects.filter(role=Profile.ROLE_INSTITUTION, profile_completed=True)
            .select_related("user")
            .order_by("-last_updated_at")[:5]
        ),
    }


def _institution_dashboard_context(profile):
    now = timezone.now()
    start_period = now - timedelta(days=30)

    postings = JobPosting.objects.filter(institution=profile)
    teachers = Profile.objects.filter(role=Profile.ROLE_TEACHER, profile_completed=True)

    return {
        # KPIs
        "active_job_count": postings.filter(is_active=True).count(),
        "total_job_count": postings.count(),
        "teacher_count": teachers.count(),
        "teachers_joined_recent": teachers.filter(created_at__gte=start_period).count(),
        # Lists
        "active_jobs": postings.filter(is_active=True)[:5],
        "recent_teachers": teachers.select_related("user").order_by("-last_updated_at")[:5],
    }


@login_required
@require_onboarded
def dashboard(request):
    """
    Main dashboard, one layout per role.

    Teacher: profile card, job recommendations, recent feed activity,
             suggested institutions.
    Institution: KPIs, active job postings, recently completed teacher profiles.
    """
    profile = request.profile
    if profile.is_teacher:
        context = _teacher_dashboard_context(profile)
        template = "core/teacher_dashboard.html"
    else:
        context = _institution_dashboard_context(profile)
        template = "core/institution_dashboard.html"

    context.update({"active": "dashboard", "profile": profile})
    return render(request, template, context)


@login_required
@require_onboarded
def feed(request):
    """
    Social feed, newest posts first.

    Query parameters:
        kind: Filter by post kind (post, article, photo, video)
        page / per_page: Pagination

    POST creates a new post authored by the signed-in profile.
    """
    profile = request.profile

    if request.method == "POST":
        form = PostForm(request.POST)
        if form.is_valid():
            post = form.save(commit=False)
            post.author = profile
            stamp_audit(post, request.user)
            post.save()
            messages.success(request, "Your post is live.")
            return redirect("core:feed")
    else:
        form = PostForm()

    kind = (request.GET.get("kind") or "").strip().lower()
    posts = Post.objects.select_related("author__user")
    if kind in dict(Post.KIND_CHOICES):
        posts = posts.filter(kind=kind)
    else:
        kind = ""

    suggestions = (
        Profile.objects.filter(profile_completed=True)
        .exclude(pk=profile.pk)
        .exclude(role=profile.role)
        .select_related("user")
        .order_by("-last_updated_at")[:5]
    )

    return render(
        request,
        "core/feed.html",
        {
            "active": "feed",
            "profile": profile,
            "form": form,
            "kind": kind,
            "kind_choices": Post.KIND_CHOICES,
            "suggestions": suggestions,
            **paginate(request, posts),
        },
    )


@login_required
@require_POST
def post_delete(request, pk):
    post = get_object_or_404(Post, pk=pk)
    if not can_delete_post(request.user, post):
        raise PermissionDenied("You can only delete your own posts.")
    post.delete()
    messages.success(request, "Post deleted.")
    return redirect("core:feed")


@login_required
@require_onboarded
def profile_detail(request, pk):
    """Read-only view of any completed profile."""
    profile = get_object_or_404(Profile.objects.select_related("user"), pk=pk)
    if not profile.is_onboarded:
        raise Http404("This profile is not available yet.")

    template = (
        "core/teacher_profile_detail.html"
        if profile.is_teacher
        else "core/institution_profile_detail.html"
    )
    is_own = profile.pk == request.profile.pk
    context = {
        "active": "feed",
        "profile": profile,
        "is_own": is_own,
        # Verification documents are only shown to their owner
        "documents": profile.documents.all() if is_own else [],
    }
    if profile.is_institution:
        context["active_jobs"] = profile.job_postings.filter(is_active=True)
    return render(request, template, context)

"""
Onboarding views.

A new user picks a role, then fills in that role's profile form. Once the
profile is completed the same page shows a read-only view, with an edit
mode behind ``?edit=1``.
"""
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied
from django.db import DatabaseError
from django.http import FileResponse, Http404
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from core.forms import ProfileDocumentForm
from core.mixins import stamp_audit
from core.models import Profile, ProfileDocument
from core.permissions import can_change_document, can_view_document
from onboarding.forms import (
    BranchFormSet,
    InstitutionProfileForm,
    TeacherProfileForm,
    WorkHistoryFormSet,
    formset_rows,
)

logger = logging.getLogger(__name__)

LOAD_ERROR = "We couldn't reach the profile service. Please check your connection and try again."
SAVE_ERROR = "There was a problem saving your profile. Please try again."


def _load_profile(request):
    """The user's profile, or None (with an error message) when the database is unavailable."""
    try:
        return Profile.for_user(request.user)
    except DatabaseError:
        logger.exception("Could not load profile for user %s", request.user.pk)
        messages.error(request, LOAD_ERROR)
        return None


@login_required
def role_select(request):
    profile = _load_profile(request)
    if profile is None:
        return redirect("landing")

    if profile.is_onboarded:
        messages.info(request, "Your profile is already set up.")
        return redirect("dashboard")

    if request.method == "POST":
        role = request.POST.get("role", "")
        try:
            profile.set_role(role, user=request.user)
        except ValueError:
            messages.error(request, "Please choose whether you are a teacher or an institution.")
        except DatabaseError:
            logger.exception("Could not save role for profile %s", profile.pk)
            messages.error(request, SAVE_ERROR)
        else:
            logger.info("Profile %s chose role %s", profile.pk, role)
            return redirect(f"onboarding:{role}_profile")

    return render(
        request,
        "onboarding/role.html",
        {"profile": profile, "roles": Profile.ROLE_CHOICES, "hide_sidebar": True},
    )


def _view_sections(form_class):
    """(heading, [(label, document path)]) for the read-only profile page."""
    form = form_class()
    return [
        (title, [(form[name].label, form.path_for(name)) for name in names])
        for title, names in form_class.sections
    ]


def _profile_page(request, role, form_class, formset_class, list_key):
    """
    Shared view/edit page for both profile forms.

    ``list_key`` is the document key of the repeatable section, which is
    also the formset prefix.
    """
    profile = _load_profile(request)
    if profile is None:
        return redirect("landing")

    if not profile.role:
        return redirect("onboarding:role")
    if profile.role != role:
        return redirect(f"onboarding:{profile.role}_profile")

    editing = not profile.profile_completed or request.GET.get("edit") == "1"
    template = f"onboarding/{role}_profile.html"
    context = {
        "active": "profile",
        "profile": profile,
        "editing": editing,
        "list_key": list_key,
        "rows": (profile.data or {}).get(list_key) or [],
    }

    if not editing:
        context.update(
            {
                "sections": _view_sections(form_class),
                "documents": profile.documents.all(),
                "document_form": ProfileDocumentForm(role=role),
            }
        )
        return render(request, template, context)

    if request.method == "POST":
        form = form_class(request.POST)
        formset = formset_class(request.POST, prefix=list_key)
        if form.is_valid() and formset.is_valid():
            document = form.to_document()
            document[list_key] = formset_rows(formset)
            try:
                profile.complete(document, user=request.user)
            except DatabaseError:
                logger.exception("Could not save profile %s", profile.pk)
                messages.error(request, SAVE_ERROR)
            else:
                logger.info("Profile %s completed (%s)", profile.pk, role)
                messages.success(request, "Profile completed successfully!")
                return redirect("dashboard")
        else:
            messages.error(request, "Please correct the errors below.")
    else:
        initial = form_class.initial_from_document(profile.data)
        if role == Profile.ROLE_TEACHER and not initial.get("email"):
            initial["email"] = request.user.email
        form = form_class(initial=initial)
        formset = formset_class(initial=context["rows"], prefix=list_key)

    context.update(
        {
            "form": form,
            "formset": formset,
            "sections": form_class.sections,
        }
    )
    return render(request, template, context)


@login_required
def teacher_profile(request):
    return _profile_page(
        request, Profile.ROLE_TEACHER, TeacherProfileForm, WorkHistoryFormSet, "work_history"
    )


@login_required
def institution_profile(request):
    return _profile_page(
        request, Profile.ROLE_INSTITUTION, InstitutionProfileForm, BranchFormSet, "branches"
    )


# =============================================================================
# Verification documents
# =============================================================================


@login_required
@require_POST
def document_upload(request):
    profile = Profile.for_user(request.user)
    if not profile.role:
        return redirect("onboarding:role")

    form = ProfileDocumentForm(request.POST, request.FILES, role=profile.role)
    if form.is_valid():
        document = form.save(commit=False)
        document.profile = profile
        stamp_audit(document, request.user)
        document.save()
        messages.success(request, f"{document.get_doc_type_display()} uploaded.")
    else:
        for errors in form.errors.values():
            for error in errors:
                messages.error(request, error)

    return redirect(f"onboarding:{profile.role}_profile")


@login_required
@require_POST
def document_delete(request, pk):
    document = get_object_or_404(ProfileDocument.objects.select_related("profile"), pk=pk)
    if not can_change_document(request.user, document):
        raise PermissionDenied("You can only delete your own documents.")

    role = document.profile.role
    document.file.delete(save=False)
    document.delete()
    messages.success(request, "Document deleted.")
    return redirect(f"onboarding:{role}_profile")


@login_required
def document_download(request, pk):
    """Stream a verification document to its owner or to staff."""
    document = get_object_or_404(ProfileDocument.objects.select_related("profile"), pk=pk)
    if not can_view_document(request.user, document):
        raise PermissionDenied("You can only open your own documents.")

    try:
        handle = document.file.open("rb")
    except FileNotFoundError:
        logger.warning("Document %s is missing its file %s", document.pk, document.file.name)
        raise Http404("Document file not found.")
    return FileResponse(handle, filename=document.original_filename or None)

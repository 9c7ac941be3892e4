"""
Core models for Strength of Faculty.

Models:
    AuditModel: Abstract base model with audit fields (created_at, created_by, etc.)
    Profile: The per-user profile document (role + onboarding data)
    ProfileDocument: Verification documents uploaded against a profile
    Post: A feed post authored by a profile
"""

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import models

from core.completion import profile_completion
from core.storage import private_storage

if TYPE_CHECKING:
    from django.db.models.manager import RelatedManager


class AuditModel(models.Model):
    """
    Abstract base model that provides audit fields.

    Provides: created_at, created_by, last_updated_at, last_updated_by
    """

    created_at = models.DateTimeField(auto_now_add=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="%(app_label)s_%(class)s_created",
    )
    last_updated_at = models.DateTimeField(auto_now=True)
    last_updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="%(app_label)s_%(class)s_updated",
    )

    class Meta:
        abstract = True


def merge_document(stored, values):
    """
    Merge ``values`` into ``stored`` and return the result.

    Nested dicts are merged key by key; any other value (lists included)
    replaces what was stored.
    """
    merged = dict(stored or {})
    for key, value in values.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_document(merged[key], value)
        else:
            merged[key] = value
    return merged


class Profile(AuditModel):
    """
    Profile document for a signed-up user.

    Each user has exactly one Profile. It starts out "basic" (no role, not
    completed); the user picks a role during onboarding and then fills in the
    role's profile form, whose values are stored in ``data`` as a nested
    JSON document.

    Attributes:
        user (User): Django user account (one-to-one)
        role (str): "teacher", "institution" or "" when not chosen yet
        profile_completed (bool): True once the role's profile form was saved
        data (dict): The onboarding document (shape depends on the role)

    Example:
        >>> profile = Profile.for_user(user)
        >>> profile.set_role(Profile.ROLE_TEACHER, user=user)
        >>> profile.complete({"full_name": "Asha Rao"}, user=user)
        >>> profile.completion
        5
    """

    ROLE_TEACHER = "teacher"
    ROLE_INSTITUTION = "institution"

    ROLE_CHOICES = [
        (ROLE_TEACHER, "Teacher"),
        (ROLE_INSTITUTION, "Institution"),
    ]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
        help_text="Django user account for this profile",
    )
    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        blank=True,
        default="",
        help_text="Teacher or institution; empty until chosen during onboarding",
    )
    profile_completed = models.BooleanField(default=False)
    data = models.JSONField(default=dict, blank=True)

    if TYPE_CHECKING:
        documents: "RelatedManager[ProfileDocument]"
        posts: "RelatedManager[Post]"

    class Meta:
        ordering = ["user_id"]
        indexes = [
            models.Index(fields=["role", "profile_completed"], name="core_profile_role_done_idx"),
        ]

    def __str__(self):
        return f"Profile<{self.user}>"

    @classmethod
    def for_user(cls, user):
        """
        Return the user's profile, creating a basic one if it doesn't exist.
        """
        profile, _ = cls.objects.get_or_create(
            user=user,
            defaults={"role": "", "profile_completed": False, "created_by": user},
        )
        return profile

    def set_role(self, role, user=None):
        if role not in dict(self.ROLE_CHOICES):
            raise ValueError(f"Unknown role: {role!r}")
        self.role = role
        self.last_updated_by = user
        self.save(update_fields=["role", "last_updated_by", "last_updated_at"])

    def merge(self, values):
        """Merge a partial document into ``data`` (not saved)."""
        self.data = merge_document(self.data, values)

    def complete(self, values, user=None):
        """Merge the submitted form document and mark the profile completed."""
        self.merge(values)
        self.profile_completed = True
        self.last_updated_by = user
        self.save()

    @property
    def is_teacher(self):
        return self.role == self.ROLE_TEACHER

    @property
    def is_institution(self):
        return self.role == self.ROLE_INSTITUTION

    @property
    def is_onboarded(self):
        return bool(self.role) and self.profile_completed

    @property
    def display_name(self):
        data = self.data or {}
        if self.is_institution and data.get("institution_name"):
            return data["institution_name"]
        if data.get("full_name"):
            return data["full_name"]
        return self.user.get_full_name() or self.user.email or self.user.username

    @property
    def headline(self):
        """Short line under the name, e.g. "Math Teacher - Mumbai"."""
        data = self.data or {}
        if self.is_institution:
            title = data.get("institution_type", "")
            city = (data.get("location") or {}).get("city", "")
        else:
            title = (data.get("professional_details") or {}).get("job_title", "")
            city = (data.get("current_location") or {}).get("city", "")
        return " - ".join(part for part in (title, city) if part)

    @property
    def initials(self):
        names = self.display_name.split()
        if len(names) > 1:
            return f"{names[0][0]}{names[-1][0]}".upper()
        return names[0][0].upper() if names else ""

    @property
    def completion(self):
        return profile_completion(self)


def document_upload_to(instance, filename):
    return f"profile_documents/{instance.profile.user_id}/{filename}"


class ProfileDocument(AuditModel):
    """
    A document uploaded for verification (or as a resume) against a profile.

    Auto-computed on save by ProfileDocumentForm:
    - original_filename: from uploaded file
    - file_size: from uploaded file
    """

    GOV_ID = "gov_id"
    EDUCATION_CERTIFICATE = "education_certificate"
    EXPERIENCE_LETTER = "experience_letter"
    PROFILE_PHOTO = "profile_photo"
    RESUME = "resume"
    LOGO = "logo"
    REGISTRATION_CERTIFICATE = "registration_certificate"
    AFFILIATION_PROOF = "affiliation_proof"
    REPRESENTATIVE_ID = "representative_id"

    DOC_TYPE_CHOICES = [
        (GOV_ID, "Government ID Proof"),
        (EDUCATION_CERTIFICATE, "Educational Certificate"),
        (EXPERIENCE_LETTER, "Experience Letter"),
        (PROFILE_PHOTO, "Profile Photo"),
        (RESUME, "Resume"),
        (LOGO, "Logo"),
        (REGISTRATION_CERTIFICATE, "Registration Certificate"),
        (AFFILIATION_PROOF, "Affiliation Proof"),
        (REPRESENTATIVE_ID, "Representative ID Proof"),
    ]

    # Document types each role may upload
    TEACHER_DOC_TYPES = [GOV_ID, EDUCATION_CERTIFICATE, EXPERIENCE_LETTER, PROFILE_PHOTO, RESUME]
    INSTITUTION_DOC_TYPES = [LOGO, REGISTRATION_CERTIFICATE, AFFILIATION_PROOF, REPRESENTATIVE_ID]

    profile = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name="documents",
    )
    doc_type = models.CharField(max_length=40, choices=DOC_TYPE_CHOICES)
    file = models.FileField(upload_to=document_upload_to, storage=private_storage)
    original_filename = models.CharField(max_length=255, blank=True)
    file_size = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        ordering = ["profile_id", "doc_type", "-created_at"]
        verbose_name = "Profile Document"
        verbose_name_plural = "Profile Documents"

    def __str__(self):
        return f"{self.get_doc_type_display()} ({self.original_filename or self.file.name})"

    @classmethod
    def doc_types_for_role(cls, role):
        allowed = {
            Profile.ROLE_TEACHER: cls.TEACHER_DOC_TYPES,
            Profile.ROLE_INSTITUTION: cls.INSTITUTION_DOC_TYPES,
        }.get(role, [])
        return [(code, label) for code, label in cls.DOC_TYPE_CHOICES if code in allowed]


class Post(AuditModel):
    """A post on the social feed."""

    KIND_POST = "post"
    KIND_ARTICLE = "article"
    KIND_PHOTO = "photo"
    KIND_VIDEO = "video"

    KIND_CHOICES = [
        (KIND_POST, "Post"),
        (KIND_ARTICLE, "Article"),
        (KIND_PHOTO, "Photo"),
        (KIND_VIDEO, "Video"),
    ]

    author = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name="posts",
    )
    kind = models.CharField(max_length=20, choices=KIND_CHOICES, default=KIND_POST)
    body = models.TextField(max_length=3000)
    link = models.URLField(blank=True, help_text="Optional link to a photo, video or article")

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.get_kind_display()} by {self.author.display_name}"

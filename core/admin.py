"""
Django admin configuration for core models.

Provides admin interfaces for:
- User (Django's built-in User model with onboarding status filters)
- Profile (with inline documents)
- Post
"""
from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.urls import reverse
from django.utils.html import format_html

from core.mixins import CreatedUpdatedAuditMixin
from core.models import Post, Profile, ProfileDocument

User = get_user_model()


# ---- User (Django's built-in User model) ----

class OnboardingStatusFilter(admin.SimpleListFilter):
    """Filter users by how far they got through onboarding."""
    title = "onboarding status"
    parameter_name = "onboarding"

    def lookups(self, request, model_admin):
        return (
            ("no_profile", "No profile yet"),
            ("no_role", "No role chosen"),
            ("incomplete", "Profile not completed"),
            ("complete", "Onboarded"),
        )

    def queryset(self, request, queryset):
        if self.value() == "no_profile":
            return queryset.filter(profile__isnull=True)
        elif self.value() == "no_role":
            return queryset.filter(profile__role="")
        elif self.value() == "incomplete":
            return queryset.exclude(profile__role="").filter(profile__profile_completed=False)
        elif self.value() == "complete":
            return queryset.exclude(profile__role="").filter(profile__profile_completed=True)
        return queryset


class CustomUserAdmin(BaseUserAdmin):
    """User admin showing each user's role and onboarding status."""
    list_display = (
        "username",
        "email",
        "first_name",
        "last_name",
        "is_active",
        "role_status",
        "date_joined",
    )
    list_filter = (
        OnboardingStatusFilter,
        "is_staff",
        "is_superuser",
        "is_active",
        "date_joined",
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("profile")

    def role_status(self, obj):
        profile = getattr(obj, "profile", None)
        if profile is None or not profile.role:
            return format_html('<span style="color: red;">{}</span>', "✗ No role")
        label = profile.get_role_display()
        if not profile.profile_completed:
            return format_html('<span style="color: orange;">{} (incomplete)</span>', label)
        return format_html('<span style="color: green;">✓ {}</span>', label)

    role_status.short_description = "Role Status"


admin.site.unregister(User)
admin.site.register(User, CustomUserAdmin)


# ---- Profile and documents ----

class ProfileDocumentInline(admin.TabularInline):
    model = ProfileDocument
    extra = 0
    fields = ["doc_type", "download_link", "original_filename", "file_size"]
    readonly_fields = ["download_link", "original_filename", "file_size"]

    # Files are uploaded by their owner and have no public URL
    def has_add_permission(self, request, obj=None):
        return False

    def download_link(self, obj):
        if not obj.pk:
            return "-"
        url = reverse("onboarding:document_download", args=[obj.pk])
        return format_html('<a href="{}" target="_blank">Open</a>', url)
    download_link.short_description = "File"


@admin.register(Profile)
class ProfileAdmin(CreatedUpdatedAuditMixin, admin.ModelAdmin):
    list_display = ["user", "role", "profile_completed", "completion_display", "last_updated_at"]
    search_fields = ["user__username", "user__email", "user__first_name", "user__last_name"]
    list_filter = ["role", "profile_completed", "created_at"]
    readonly_fields = ["created_at", "created_by", "last_updated_at", "last_updated_by"]
    raw_id_fields = ["user"]
    inlines = [ProfileDocumentInline]

    def completion_display(self, obj):
        return f"{obj.completion}%"
    completion_display.short_description = "Completion"


# ---- Feed ----

@admin.register(Post)
class PostAdmin(CreatedUpdatedAuditMixin, admin.ModelAdmin):
    list_display = ["author", "kind", "short_body", "created_at"]
    search_fields = ["body", "author__user__email"]
    list_filter = ["kind", "created_at"]
    readonly_fields = ["created_at", "created_by", "last_updated_at", "last_updated_by"]
    raw_id_fields = ["author"]

    def short_body(self, obj):
        return obj.body[:80]
    short_body.short_description = "Body"

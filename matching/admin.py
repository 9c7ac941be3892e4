from django.contrib import admin

from core.mixins import CreatedUpdatedAuditMixin
from matching.models import JobPosting


@admin.register(JobPosting)
class JobPostingAdmin(CreatedUpdatedAuditMixin, admin.ModelAdmin):
    list_display = ("title", "subject", "location", "institution", "is_active", "created_at")
    search_fields = ("title", "subject", "location", "institution__user__email")
    list_filter = ("is_active", "created_at")
    readonly_fields = ("created_at", "created_by", "last_updated_at", "last_updated_by")
    raw_id_fields = ("institution",)

from typing import Any

from django.forms import ModelForm
from django.http import HttpRequest


class CreatedUpdatedAuditMixin:
    """
    Mixin for Django ModelAdmin to automatically set audit fields.

    On create: set created_by if empty; always set last_updated_by.

    Usage:
        class PostAdmin(CreatedUpdatedAuditMixin, admin.ModelAdmin):
            pass
    """

    def save_model(
        self,
        request: HttpRequest,
        obj: Any,
        form: ModelForm,
        change: bool,
    ) -> None:
        if not change and getattr(obj, "created_by_id", None) is None:
            obj.created_by = request.user
        if hasattr(obj, "last_updated_by_id"):
            obj.last_updated_by = request.user
        super().save_model(request, obj, form, change)  # type: ignore[misc]


def stamp_audit(obj, user):
    """Set audit fields on ``obj`` for a save made by ``user`` from a view."""
    if getattr(obj, "created_by_id", None) is None:
        obj.created_by = user
    obj.last_updated_by = user
    return obj

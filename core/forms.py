"""
Forms for core models.
"""
from django import forms
from django.conf import settings

from core.models import Post, ProfileDocument

ALLOWED_UPLOAD_TYPES = [
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/gif",
]


def validate_upload(file):
    """Validate file size and type of an uploaded document."""
    max_size = getattr(settings, "MAX_UPLOAD_SIZE", 10 * 1024 * 1024)
    if file.size > max_size:
        raise forms.ValidationError(
            f"File size must be under {max_size // (1024 * 1024)}MB. "
            f"Current size: {file.size / 1024 / 1024:.1f}MB"
        )
    if getattr(file, "content_type", None) not in ALLOWED_UPLOAD_TYPES:
        raise forms.ValidationError(
            "Only PDF and image files (JPEG, PNG, GIF) are allowed."
        )


class ProfileDocumentForm(forms.ModelForm):
    """
    Form for uploading a document to a profile.

    Fields:
    - doc_type: Required - restricted to the types allowed for the profile's role
    - file: Required - the file to upload

    Auto-computed on save:
    - original_filename: from uploaded file
    - file_size: from uploaded file
    """

    class Meta:
        model = ProfileDocument
        fields = ["doc_type", "file"]
        widgets = {
            "doc_type": forms.Select(attrs={"class": "form-select"}),
            "file": forms.FileInput(attrs={"class": "form-control"}),
        }

    def __init__(self, *args, role=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["doc_type"].choices = ProfileDocument.doc_types_for_role(role)

    def clean_file(self):
        file = self.cleaned_data.get("file")
        if file:
            validate_upload(file)
        return file

    def save(self, commit=True):
        """Save document with auto-computed fields."""
        instance = super().save(commit=False)

        if self.cleaned_data.get("file"):
            instance.original_filename = self.cleaned_data["file"].name
            instance.file_size = self.cleaned_data["file"].size

        if commit:
            instance.save()

        return instance


class PostForm(forms.ModelForm):
    """Form behind the feed's "Start a post" box."""

    class Meta:
        model = Post
        fields = ["kind", "body", "link"]
        widgets = {
            "kind": forms.Select(attrs={"class": "form-select form-select-sm"}),
            "body": forms.Textarea(
                attrs={
                    "class": "form-control",
                    "rows": 3,
                    "placeholder": "Start a post",
                }
            ),
            "link": forms.URLInput(
                attrs={"class": "form-control form-control-sm", "placeholder": "Optional link"}
            ),
        }
        error_messages = {
            "body": {"required": "Write something before posting."},
        }

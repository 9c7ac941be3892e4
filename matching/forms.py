"""
Forms for job postings and the AI matching pages.
"""
from django import forms

from core.forms import validate_upload
from matching.models import JobPosting


class JobPostingForm(forms.ModelForm):
    class Meta:
        model = JobPosting
        fields = ["title", "subject", "location", "requirements"]
        widgets = {
            "title": forms.TextInput(attrs={"class": "form-control", "placeholder": "e.g., Senior Physics Teacher"}),
            "subject": forms.TextInput(attrs={"class": "form-control", "placeholder": "e.g., Physics"}),
            "location": forms.TextInput(attrs={"class": "form-control", "placeholder": "e.g., Mumbai"}),
            "requirements": forms.Textarea(attrs={"class": "form-control", "rows": 6}),
        }


class JobAnalysisForm(forms.Form):
    """Input of the job-requirement analysis flow."""

    job_title = forms.CharField(
        max_length=200,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    subject = forms.CharField(
        max_length=200,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    location = forms.CharField(
        max_length=200,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    requirements = forms.CharField(
        label="Job requirements",
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 5}),
    )
    teacher_profile = forms.CharField(
        label="Teacher profile",
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 8}),
        help_text="Qualifications, experience, subjects and location of the teacher.",
    )

    @classmethod
    def initial_for(cls, job=None, teacher_profile=""):
        initial = {"teacher_profile": teacher_profile}
        if job is not None:
            initial.update(
                {
                    "job_title": job.title,
                    "subject": job.subject,
                    "location": job.location,
                    "requirements": job.requirements,
                }
            )
        return initial


class ResumeAnalysisForm(forms.Form):
    """Input of the resume analysis flow."""

    resume = forms.FileField(
        widget=forms.FileInput(attrs={"class": "form-control"}),
        help_text="PDF or image, up to 10MB.",
    )
    job_description = forms.CharField(
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 8}),
    )

    def clean_resume(self):
        resume = self.cleaned_data.get("resume")
        if resume:
            validate_upload(resume)
        return resume

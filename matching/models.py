from django.db import models

from core.models import AuditModel, Profile


class JobPosting(AuditModel):
    """
    A teaching position posted by an institution.

    Job postings feed the teacher dashboard's recommendations and pre-fill
    the job-requirement and resume analysis pages.
    """

    institution = models.ForeignKey(
        Profile,
        on_delete=models.CASCADE,
        related_name="job_postings",
        limit_choices_to={"role": Profile.ROLE_INSTITUTION},
    )
    title = models.CharField(max_length=200)
    subject = models.CharField(max_length=200)
    location = models.CharField(max_length=200)
    requirements = models.TextField(
        help_text="Qualifications, experience and other requirements for the job",
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["is_active", "subject"], name="matching_job_active_subj_idx"),
        ]
        verbose_name = "Job Posting"
        verbose_name_plural = "Job Postings"

    def __str__(self):
        return f"{self.title} @ {self.institution.display_name}"

    def as_job_description(self):
        """Plain-text description used as the resume analysis input."""
        return (
            f"Job Title: {self.title}\n"
            f"Subject: {self.subject}\n"
            f"Location: {self.location}\n"
            f"Requirements: {self.requirements}"
        )

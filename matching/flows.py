"""
AI matching flows.

Two request/response calls to the generative-AI service, each with a typed
input and a typed output validated by pydantic:

- analyze_job_requirements: how well a teacher profile fits a job posting
  (used by institutions).
- analyze_profile: summarises a resume and scores it against a job
  description (used by teachers).
"""
import base64
import binascii
import logging
import re

from google.genai import types
from pydantic import BaseModel, Field, field_validator

from core.completion import lookup
from matching.genai_client import GenAIClient

logger = logging.getLogger(__name__)

DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)


# =============================================================================
# Job requirement analysis
# =============================================================================


class JobRequirementsInput(BaseModel):
    job_title: str = Field(description="The title of the job posting.")
    subject: str = Field(description="The subject area for the job.")
    location: str = Field(description="The location of the job.")
    requirements: str = Field(
        description="Detailed requirements for the job, including qualifications and experience."
    )
    teacher_profile: str = Field(
        description="Teacher profile including qualifications and experience."
    )


class JobRequirementsOutput(BaseModel):
    match_score: float = Field(
        ge=0,
        le=100,
        description="A score indicating how well the teacher profile matches the job requirements (0-100).",
    )
    reasons: str = Field(
        description="Reasons for the match score, highlighting strengths and weaknesses of the candidate."
    )


JOB_REQUIREMENTS_PROMPT = """You are an AI assistant specializing in matching teacher profiles to job requirements.

Given the following job requirements and a teacher profile, analyze how well the teacher matches the requirements.
Provide a match score between 0 and 100, and explain the reasons for the score.

Job Title: {job_title}
Subject: {subject}
Location: {location}
Job Requirements: {requirements}

Teacher Profile: {teacher_profile}

Consider factors such as qualifications, experience, subject expertise, and location preferences.
The match score should reflect the overall suitability of the teacher for the job.
Reasons must contain a section mentioning the strengths of the candidate, and another section about the weaknesses of the candidate.
Reasons must contain a bullet point list in markdown format.
"""


def analyze_job_requirements(data: JobRequirementsInput, client=None) -> JobRequirementsOutput:
    """Score a teacher profile against a job's requirements."""
    client = client or GenAIClient()
    prompt = JOB_REQUIREMENTS_PROMPT.format(**data.model_dump())
    logger.info("Running job requirement analysis for %r", data.job_title)
    return client.generate([prompt], JobRequirementsOutput)


# =============================================================================
# Profile (resume) analysis
# =============================================================================


def to_data_uri(payload: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def parse_data_uri(uri: str):
    """
    Split a ``data:<mimetype>;base64,<encoded_data>`` URI.

    Returns:
        (mime_type, bytes)

    Raises:
        ValueError if the URI is malformed
    """
    match = DATA_URI_RE.match(uri or "")
    if not match:
        raise ValueError(
            "Expected a data URI of the form 'data:<mimetype>;base64,<encoded_data>'."
        )
    try:
        payload = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as exc:
        raise ValueError("The data URI does not contain valid base64 data.") from exc
    return match.group("mime"), payload


class ProfileAnalysisInput(BaseModel):
    resume_data_uri: str = Field(
        description=(
            "A resume document, as a data URI that must include a MIME type and use Base64 "
            "encoding. Expected format: 'data:<mimetype>;base64,<encoded_data>'."
        )
    )
    job_description: str = Field(description="The job description to match the resume against.")

    @field_validator("resume_data_uri")
    @classmethod
    def check_data_uri(cls, value):
        parse_data_uri(value)
        return value


class ProfileAnalysisOutput(BaseModel):
    profile_summary: str = Field(
        description="A summary of the teacher profile, highlighting key skills and experience."
    )
    match_score: float = Field(
        ge=0,
        le=100,
        description="A score indicating how well the teacher profile matches the job description.",
    )
    relevant_skills: list[str] = Field(
        description="A list of relevant skills extracted from the resume."
    )


PROFILE_ANALYSIS_PROMPT = """You are an AI expert in matching teacher profiles to job descriptions.

Analyze the attached resume and the following job description to provide a profile summary, a match score (out of 100), and a list of relevant skills.

Job Description: {job_description}
"""


def analyze_profile(data: ProfileAnalysisInput, client=None) -> ProfileAnalysisOutput:
    """Summarise a resume and score it against a job description."""
    client = client or GenAIClient()
    mime_type, payload = parse_data_uri(data.resume_data_uri)
    contents = [
        types.Part.from_bytes(data=payload, mime_type=mime_type),
        PROFILE_ANALYSIS_PROMPT.format(job_description=data.job_description),
    ]
    logger.info("Running resume analysis (%s, %d bytes)", mime_type, len(payload))
    return client.generate(contents, ProfileAnalysisOutput)


# =============================================================================
# Helpers
# =============================================================================

TEACHER_PROFILE_LINES = [
    ("Name", "full_name"),
    ("Current role", "professional_details.job_title"),
    ("Total teaching experience (years)", "professional_details.total_experience"),
    ("Subjects", "professional_details.subjects"),
    ("Qualifications", "professional_details.qualifications"),
    ("Grades taught", "professional_details.grades_taught"),
    ("Curriculum expertise", "professional_details.curriculum_expertise"),
    ("City", "current_location.city"),
    ("State", "current_location.state"),
    ("Teaching skills", "skills.teaching"),
    ("Soft skills", "skills.soft"),
    ("Achievements", "achievements"),
]


def describe_teacher(profile):
    """Render a teacher's profile document as plain text for the AI prompt."""
    data = profile.data or {}
    lines = []
    for label, path in TEACHER_PROFILE_LINES:
        value = lookup(data, path)
        if value not in (None, ""):
            lines.append(f"{label}: {value}")
    history = data.get("work_history") or []
    if history:
        lines.append("Work history:")
        for row in history:
            lines.append(f"- {row.get('school', '')} ({row.get('duration', '')})")
    return "\n".join(lines)


"""
Profile completion percentage.

Both roles use the same heuristic: a fixed list of dotted document paths is
checked and the share of filled ones is returned as a whole percentage.
"""

TEACHER_FIELDS = (
    # Basic information
    "full_name",
    "gender",
    "dob",
    "contact_number",
    "email",
    # Current location
    "current_location.city",
    "current_location.state",
    "current_location.pin_code",
    # Professional details
    "professional_details.job_title",
    "professional_details.total_experience",
    "professional_details.subjects",
    "professional_details.qualifications",
    "professional_details.grades_taught",
    "professional_details.curriculum_expertise",
    # Work history / achievements
    "work_history",
    "achievements",
    # Skills
    "skills.teaching",
    "skills.soft",
    # Social & professional links
    "social_links.linkedin",
    "social_links.portfolio",
    "social_links.demo_video",
)

INSTITUTION_FIELDS = (
    "institution_name",
    "institution_type",
    "establishment_year",
    "contact_number",
    "email",
    "location.full_address",
    "location.city",
    "location.state",
    "location.pin_code",
    "institution_details.affiliation",
    "institution_details.about",
    "institution_details.website_url",
    "job_settings.hr_contact_name",
    "job_settings.hr_contact_number",
)


def lookup(data, path):
    """Return the value at a dotted ``path`` in a nested dict, or None."""
    value = data
    for key in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def is_filled(value):
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    return True


def completion_percentage(data, fields):
    if not fields:
        return 0
    filled = sum(1 for path in fields if is_filled(lookup(data or {}, path)))
    return round(100 * filled / len(fields))


def fields_for_role(role):
    return {
        "teacher": TEACHER_FIELDS,
        "institution": INSTITUTION_FIELDS,
    }.get(role, ())


def profile_completion(profile):
    return completion_percentage(profile.data, fields_for_role(profile.role))

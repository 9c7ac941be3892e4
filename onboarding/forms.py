"""
Onboarding forms.

Each profile form maps its flat form fields onto dotted paths of the nested
profile document, e.g. ``city`` -> ``current_location.city``. Repeatable
sections (work history, branches) are formsets whose rows become a list in
the document.
"""
from django import forms
from django.core.validators import RegexValidator

from core.completion import lookup

pin_code_validator = RegexValidator(r"^[0-9]{6}$", "Pin code must be exactly 6 digits.")
year_validator = RegexValidator(r"^[0-9]{4}$", "Enter a 4-digit year.")


def _text(required=False, **attrs):
    return forms.CharField(
        required=required,
        widget=forms.TextInput(attrs={"class": "form-control", **attrs}),
    )


def _textarea(required=False, rows=3, **kwargs):
    return forms.CharField(
        required=required,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": rows}),
        **kwargs,
    )


def _contact_number(required=False):
    return forms.CharField(
        required=required,
        min_length=10,
        max_length=20,
        error_messages={"min_length": "Contact number must be at least 10 digits."},
        widget=forms.TextInput(attrs={"class": "form-control", "type": "tel"}),
    )


def _pin_code(required=False):
    return forms.CharField(
        required=required,
        validators=[pin_code_validator],
        widget=forms.TextInput(attrs={"class": "form-control", "inputmode": "numeric"}),
    )


def _set_path(document, path, value):
    node = document
    *parents, leaf = path.split(".")
    for key in parents:
        node = node.setdefault(key, {})
    node[leaf] = value


class DocumentForm(forms.Form):
    """
    Base form for a section of the profile document.

    Subclasses list ``document_paths``: form field name -> dotted path.
    Fields missing from the mapping are stored at the top level under
    their own name.
    """

    document_paths = {}

    def path_for(self, name):
        return self.document_paths.get(name, name)

    @classmethod
    def initial_from_document(cls, data):
        initial = {}
        for name in cls.base_fields:
            value = lookup(data or {}, cls.document_paths.get(name, name))
            if value is not None:
                initial[name] = value
        return initial

    def to_document(self):
        """Nested document built from ``cleaned_data``."""
        document = {}
        for name in self.fields:
            value = self.cleaned_data.get(name)
            if value is None:
                value = ""
            _set_path(document, self.path_for(name), value)
        return document


# =============================================================================
# Teacher
# =============================================================================


class TeacherProfileForm(DocumentForm):
    GENDER_CHOICES = [
        ("", "Select gender"),
        ("Male", "Male"),
        ("Female", "Female"),
        ("Other", "Other"),
        ("Prefer not to say", "Prefer not to say"),
    ]

    # Basic information
    full_name = _text(required=True)
    gender = forms.ChoiceField(
        required=False,
        choices=GENDER_CHOICES,
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    dob = forms.DateField(
        label="Date of birth",
        required=False,
        widget=forms.DateInput(attrs={"class": "form-control", "type": "date"}),
    )
    contact_number = _contact_number()
    email = forms.EmailField(
        required=False,
        widget=forms.EmailInput(attrs={"class": "form-control"}),
    )

    # Current location
    city = _text()
    state = _text()
    pin_code = _pin_code()

    # Professional details
    job_title = _text(placeholder="e.g., Math Teacher")
    total_experience = forms.IntegerField(
        label="Total experience (years)",
        required=False,
        min_value=0,
        widget=forms.NumberInput(attrs={"class": "form-control", "min": 0}),
    )
    subjects = _text(required=True, placeholder="e.g., Mathematics, Physics")
    qualifications = _text(placeholder="e.g., M.Sc., B.Ed.")
    grades_taught = _text(placeholder="e.g., 9-12")
    curriculum_expertise = _text(placeholder="e.g., CBSE, ICSE, IB")

    # Achievements and skills
    achievements = _textarea()
    teaching_skills = _textarea(rows=2)
    soft_skills = _textarea(rows=2)

    # Social links
    linkedin = forms.URLField(
        label="LinkedIn",
        required=False,
        widget=forms.URLInput(attrs={"class": "form-control"}),
    )
    portfolio = forms.URLField(
        required=False,
        widget=forms.URLInput(attrs={"class": "form-control"}),
    )
    demo_video = forms.URLField(
        label="Demo video",
        required=False,
        widget=forms.URLInput(attrs={"class": "form-control"}),
    )

    document_paths = {
        "city": "current_location.city",
        "state": "current_location.state",
        "pin_code": "current_location.pin_code",
        "job_title": "professional_details.job_title",
        "total_experience": "professional_details.total_experience",
        "subjects": "professional_details.subjects",
        "qualifications": "professional_details.qualifications",
        "grades_taught": "professional_details.grades_taught",
        "curriculum_expertise": "professional_details.curriculum_expertise",
        "teaching_skills": "skills.teaching",
        "soft_skills": "skills.soft",
        "linkedin": "social_links.linkedin",
        "portfolio": "social_links.portfolio",
        "demo_video": "social_links.demo_video",
    }

    # Page layout: (heading, field names)
    sections = [
        ("Basic information", ["full_name", "gender", "dob", "contact_number", "email"]),
        ("Current location", ["city", "state", "pin_code"]),
        ("Professional details", [
            "job_title", "total_experience", "subjects",
            "qualifications", "grades_taught", "curriculum_expertise",
        ]),
        ("Achievements", ["achievements"]),
        ("Skills", ["teaching_skills", "soft_skills"]),
        ("Social and professional links", ["linkedin", "portfolio", "demo_video"]),
    ]

    def to_document(self):
        document = super().to_document()
        # JSON has no date type
        if document.get("dob"):
            document["dob"] = document["dob"].isoformat()
        return document


class WorkHistoryForm(forms.Form):
    school = _text(required=True)
    duration = _text(required=True, placeholder="e.g., 2018 - 2022")


# =============================================================================
# Institution
# =============================================================================


class InstitutionProfileForm(DocumentForm):
    TYPE_CHOICES = [
        ("", "Select type"),
        ("School", "School"),
        ("College", "College"),
        ("Coaching Centre", "Coaching Centre"),
        ("University", "University"),
    ]

    # Basic information
    institution_name = _text(required=True)
    institution_type = forms.ChoiceField(
        choices=TYPE_CHOICES,
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    establishment_year = forms.CharField(
        validators=[year_validator],
        widget=forms.TextInput(attrs={"class": "form-control", "inputmode": "numeric"}),
    )
    contact_number = _contact_number(required=True)
    email = forms.EmailField(widget=forms.EmailInput(attrs={"class": "form-control"}))

    # Location
    full_address = _textarea(required=True, rows=2)
    city = _text(required=True)
    state = _text(required=True)
    pin_code = _pin_code(required=True)

    # Institution details
    affiliation = _text(required=True, placeholder="e.g., CBSE")
    student_count = forms.IntegerField(
        required=False,
        min_value=0,
        widget=forms.NumberInput(attrs={"class": "form-control", "min": 0}),
    )
    teacher_count = forms.IntegerField(
        required=False,
        min_value=0,
        widget=forms.NumberInput(attrs={"class": "form-control", "min": 0}),
    )
    about = _textarea(
        required=True,
        rows=4,
        min_length=20,
        error_messages={"min_length": "Tell us a little more (at least 20 characters)."},
    )
    website_url = forms.URLField(
        label="Website URL",
        required=False,
        widget=forms.URLInput(attrs={"class": "form-control"}),
    )

    # Job settings
    hr_contact_name = _text(required=True)
    hr_contact_number = _contact_number(required=True)
    posting_guidelines = _textarea()

    document_paths = {
        "full_address": "location.full_address",
        "city": "location.city",
        "state": "location.state",
        "pin_code": "location.pin_code",
        "affiliation": "institution_details.affiliation",
        "student_count": "institution_details.student_count",
        "teacher_count": "institution_details.teacher_count",
        "about": "institution_details.about",
        "website_url": "institution_details.website_url",
        "hr_contact_name": "job_settings.hr_contact_name",
        "hr_contact_number": "job_settings.hr_contact_number",
        "posting_guidelines": "job_settings.posting_guidelines",
    }

    sections = [
        ("Basic information", [
            "institution_name", "institution_type", "establishment_year",
            "contact_number", "email",
        ]),
        ("Location", ["full_address", "city", "state", "pin_code"]),
        ("Institution details", [
            "affiliation", "student_count", "teacher_count", "about", "website_url",
        ]),
        ("Job settings", ["hr_contact_name", "hr_contact_number", "posting_guidelines"]),
    ]


class BranchForm(forms.Form):
    address = _text(required=True)
    city = _text(required=True)
    state = _text(required=True)
    pin_code = _pin_code(required=True)


# =============================================================================
# Repeatable sections
# =============================================================================


WorkHistoryFormSet = forms.formset_factory(WorkHistoryForm, extra=1, can_delete=True)
BranchFormSet = forms.formset_factory(BranchForm, extra=1, can_delete=True)


def formset_rows(formset):
    """Cleaned rows of a valid formset, skipping deleted and blank extra rows."""
    rows = []
    for form in formset.forms:
        # Untouched extra rows clean to an empty dict
        if not form.cleaned_data or form.cleaned_data.get("DELETE"):
            continue
        rows.append({name: value for name, value in form.cleaned_data.items() if name != "DELETE"})
    return rows

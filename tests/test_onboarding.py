import shutil
import tempfile
from unittest.mock import patch

from django.contrib.messages import get_messages
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from django.test import TestCase, override_settings
from django.urls import reverse

from core.models import Profile, ProfileDocument
from onboarding.forms import InstitutionProfileForm, TeacherProfileForm
from tests.factories import make_institution, make_profile, make_teacher, make_user


def formset_data(prefix, rows, extra_blank=True):
    """POST data for a formset with ``rows`` plus an optional blank extra row."""
    total = len(rows) + (1 if extra_blank else 0)
    data = {
        f"{prefix}-TOTAL_FORMS": str(total),
        f"{prefix}-INITIAL_FORMS": "0",
        f"{prefix}-MIN_NUM_FORMS": "0",
        f"{prefix}-MAX_NUM_FORMS": "1000",
    }
    for index, row in enumerate(rows):
        for key, value in row.items():
            data[f"{prefix}-{index}-{key}"] = value
    return data


def teacher_post(**overrides):
    data = {
        "full_name": "Asha Rao",
        "gender": "Female",
        "dob": "1990-04-12",
        "contact_number": "9876543210",
        "email": "asha@example.com",
        "city": "Mumbai",
        "state": "Maharashtra",
        "pin_code": "400001",
        "job_title": "Math Teacher",
        "total_experience": "6",
        "subjects": "Mathematics, Physics",
        "qualifications": "M.Sc., B.Ed.",
        "linkedin": "https://www.linkedin.com/in/asha",
    }
    data.update(formset_data("work_history", [{"school": "Green Valley School", "duration": "2018 - 2022"}]))
    data.update(overrides)
    return data


def institution_post(**overrides):
    data = {
        "institution_name": "Sunrise Academy",
        "institution_type": "School",
        "establishment_year": "1998",
        "contact_number": "0221234567",
        "email": "hr@sunrise.example.com",
        "full_address": "12 Hill Road",
        "city": "Pune",
        "state": "Maharashtra",
        "pin_code": "411001",
        "affiliation": "CBSE",
        "student_count": "1200",
        "about": "A co-educational school serving Pune since 1998.",
        "website_url": "https://sunrise.example.com",
        "hr_contact_name": "Meera Joshi",
        "hr_contact_number": "9876500000",
    }
    data.update(
        formset_data(
            "branches",
            [{"address": "4 Lake Road", "city": "Nashik", "state": "Maharashtra", "pin_code": "422001"}],
        )
    )
    data.update(overrides)
    return data


class DocumentFormTests(TestCase):
    def test_to_document_nests_fields(self):
        form = TeacherProfileForm(teacher_post())
        self.assertTrue(form.is_valid(), form.errors)
        document = form.to_document()
        self.assertEqual(document["current_location"]["pin_code"], "400001")
        self.assertEqual(document["professional_details"]["total_experience"], 6)
        self.assertEqual(document["social_links"]["linkedin"], "https://www.linkedin.com/in/asha")
        self.assertEqual(document["dob"], "1990-04-12")

    def test_initial_from_document(self):
        initial = InstitutionProfileForm.initial_from_document(
            {"institution_name": "Sunrise", "location": {"city": "Pune"}}
        )
        self.assertEqual(initial, {"institution_name": "Sunrise", "city": "Pune"})

    def test_teacher_validation_rules(self):
        form = TeacherProfileForm(
            teacher_post(
                full_name="",
                subjects="",
                contact_number="12345",
                pin_code="4000",
                linkedin="not a url",
                total_experience="-1",
            )
        )
        self.assertFalse(form.is_valid())
        for field in ("full_name", "subjects", "contact_number", "pin_code", "linkedin", "total_experience"):
            self.assertIn(field, form.errors)
        self.assertEqual(form.errors["pin_code"], ["Pin code must be exactly 6 digits."])

    def test_institution_validation_rules(self):
        form = InstitutionProfileForm(
            institution_post(
                institution_type="Kindergarten",
                establishment_year="98",
                about="Too short",
                hr_contact_name="",
                website_url="",
                student_count="-5",
            )
        )
        self.assertFalse(form.is_valid())
        for field in ("institution_type", "establishment_year", "about", "hr_contact_name", "student_count"):
            self.assertIn(field, form.errors)
        # Optional
        self.assertNotIn("website_url", form.errors)

    def test_pin_code_and_year_need_ascii_digits(self):
        form = InstitutionProfileForm(institution_post(pin_code="٤١١٠٠١", establishment_year="١٩٩٨"))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors["pin_code"], ["Pin code must be exactly 6 digits."])
        self.assertEqual(form.errors["establishment_year"], ["Enter a 4-digit year."])


class RoleSelectTests(TestCase):
    def setUp(self):
        self.user = make_user("new@example.com")
        self.client.force_login(self.user)
        self.url = reverse("onboarding:role")

    def test_requires_login(self):
        self.client.logout()
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 302)

    def test_get_shows_both_roles(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'value="teacher"')
        self.assertContains(response, 'value="institution"')

    def test_choosing_a_role(self):
        response = self.client.post(self.url, {"role": "institution"})
        self.assertRedirects(response, reverse("onboarding:institution_profile"))
        self.assertEqual(Profile.objects.get(user=self.user).role, "institution")

    def test_invalid_role(self):
        response = self.client.post(self.url, {"role": "admin"})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Please choose whether you are a teacher or an institution.")
        self.assertEqual(Profile.objects.get(user=self.user).role, "")

    def test_completed_profile_cannot_switch_role(self):
        make_profile(self.user, Profile.ROLE_TEACHER, completed=True, data={"full_name": "Asha"})
        response = self.client.post(self.url, {"role": "institution"})
        self.assertRedirects(response, reverse("dashboard"))
        self.assertEqual(Profile.objects.get(user=self.user).role, "teacher")


class TeacherProfileTests(TestCase):
    def setUp(self):
        self.user = make_user("asha@example.com")
        self.profile = make_profile(self.user, Profile.ROLE_TEACHER)
        self.client.force_login(self.user)
        self.url = reverse("onboarding:teacher_profile")

    def test_no_role_redirects_to_role_selection(self):
        self.profile.role = ""
        self.profile.save()
        self.assertRedirects(self.client.get(self.url), reverse("onboarding:role"))

    def test_other_role_redirects_to_own_page(self):
        response = self.client.get(reverse("onboarding:institution_profile"))
        self.assertRedirects(response, self.url)

    def test_incomplete_profile_shows_form(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context["editing"])
        self.assertEqual(response.context["form"].initial["email"], "asha@example.com")

    def test_submit_completes_profile(self):
        response = self.client.post(self.url, teacher_post())
        self.assertRedirects(response, reverse("dashboard"))

        self.profile.refresh_from_db()
        self.assertTrue(self.profile.profile_completed)
        self.assertEqual(self.profile.data["full_name"], "Asha Rao")
        self.assertEqual(
            self.profile.data["work_history"],
            [{"school": "Green Valley School", "duration": "2018 - 2022"}],
        )
        messages = [str(m) for m in get_messages(response.wsgi_request)]
        self.assertIn("Profile completed successfully!", messages)

    def test_invalid_submit_keeps_profile_incomplete(self):
        response = self.client.post(self.url, teacher_post(subjects=""))
        self.assertEqual(response.status_code, 200)
        self.assertIn("subjects", response.context["form"].errors)
        self.profile.refresh_from_db()
        self.assertFalse(self.profile.profile_completed)

    def test_incomplete_work_history_row_is_rejected(self):
        data = teacher_post()
        data["work_history-0-duration"] = ""
        response = self.client.post(self.url, data)
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.context["formset"].is_valid())

    def test_save_error_is_reported(self):
        with patch.object(Profile, "complete", side_effect=DatabaseError("connection lost")):
            response = self.client.post(self.url, teacher_post())
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "There was a problem saving your profile. Please try again.")

    def test_load_error_is_reported(self):
        with patch.object(Profile, "for_user", side_effect=DatabaseError("connection lost")):
            response = self.client.get(self.url)
        self.assertRedirects(response, reverse("landing"), fetch_redirect_response=False)
        messages = [str(m) for m in get_messages(response.wsgi_request)]
        self.assertIn(
            "We couldn't reach the profile service. Please check your connection and try again.",
            messages,
        )

    def test_completed_profile_shows_read_only_view(self):
        self.client.post(self.url, teacher_post())
        response = self.client.get(self.url)
        self.assertFalse(response.context["editing"])
        self.assertContains(response, "Green Valley School")
        self.assertContains(response, "Not provided")

    def test_edit_mode_prefills_form(self):
        self.client.post(self.url, teacher_post())
        response = self.client.get(self.url + "?edit=1")
        self.assertTrue(response.context["editing"])
        self.assertEqual(response.context["form"].initial["pin_code"], "400001")
        self.assertEqual(response.context["formset"].initial[0]["school"], "Green Valley School")

    def test_edit_replaces_work_history(self):
        self.client.post(self.url, teacher_post())
        data = teacher_post()
        data.update(formset_data("work_history", [{"school": "Hill Top School", "duration": "2022 - now"}]))
        self.client.post(self.url + "?edit=1", data)
        self.profile.refresh_from_db()
        self.assertEqual([row["school"] for row in self.profile.data["work_history"]], ["Hill Top School"])


class InstitutionProfileTests(TestCase):
    def setUp(self):
        self.user = make_user("hr@sunrise.example.com")
        self.profile = make_profile(self.user, Profile.ROLE_INSTITUTION)
        self.client.force_login(self.user)
        self.url = reverse("onboarding:institution_profile")

    def test_submit_completes_profile(self):
        response = self.client.post(self.url, institution_post())
        self.assertRedirects(response, reverse("dashboard"))

        self.profile.refresh_from_db()
        self.assertTrue(self.profile.profile_completed)
        self.assertEqual(self.profile.data["location"]["city"], "Pune")
        self.assertEqual(self.profile.data["institution_details"]["student_count"], 1200)
        self.assertEqual(self.profile.data["branches"][0]["city"], "Nashik")
        self.assertEqual(self.profile.completion, 100)

    def test_branch_pin_code_is_validated(self):
        data = institution_post()
        data["branches-0-pin_code"] = "42200"
        response = self.client.post(self.url, data)
        self.assertEqual(response.status_code, 200)
        self.assertIn("pin_code", response.context["formset"].forms[0].errors)

    def test_deleted_branch_is_dropped(self):
        data = institution_post()
        data["branches-0-DELETE"] = "on"
        self.client.post(self.url, data)
        self.profile.refresh_from_db()
        self.assertEqual(self.profile.data["branches"], [])


class DocumentTests(TestCase):
    def setUp(self):
        self.media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.media_root, ignore_errors=True)
        override = override_settings(PRIVATE_MEDIA_ROOT=self.media_root)
        override.enable()
        self.addCleanup(override.disable)

        self.user, self.profile = make_teacher("asha@example.com")
        self.client.force_login(self.user)

    def upload(self, doc_type="resume", name="resume.pdf", content=b"%PDF-1.4 test", content_type="application/pdf"):
        return self.client.post(
            reverse("onboarding:document_upload"),
            {"doc_type": doc_type, "file": SimpleUploadedFile(name, content, content_type=content_type)},
        )

    def test_upload(self):
        response = self.upload()
        self.assertRedirects(response, reverse("onboarding:teacher_profile"))
        document = ProfileDocument.objects.get(profile=self.profile)
        self.assertEqual(document.original_filename, "resume.pdf")
        self.assertEqual(document.file_size, len(b"%PDF-1.4 test"))
        self.assertEqual(document.created_by, self.user)

    def test_doc_type_must_match_role(self):
        self.upload(doc_type="logo")
        self.assertFalse(ProfileDocument.objects.exists())

    def test_rejects_other_file_types(self):
        response = self.upload(name="notes.txt", content=b"hello", content_type="text/plain")
        messages = [str(m) for m in get_messages(response.wsgi_request)]
        self.assertIn("Only PDF and image files (JPEG, PNG, GIF) are allowed.", messages)
        self.assertFalse(ProfileDocument.objects.exists())

    @override_settings(MAX_UPLOAD_SIZE=10)
    def test_rejects_large_files(self):
        self.upload()
        self.assertFalse(ProfileDocument.objects.exists())

    def test_owner_can_delete(self):
        self.upload()
        document = ProfileDocument.objects.get()
        response = self.client.post(reverse("onboarding:document_delete", args=[document.pk]))
        self.assertRedirects(response, reverse("onboarding:teacher_profile"))
        self.assertFalse(ProfileDocument.objects.exists())

    def test_others_cannot_delete(self):
        self.upload()
        document = ProfileDocument.objects.get()
        other, _ = make_institution()
        self.client.force_login(other)
        response = self.client.post(reverse("onboarding:document_delete", args=[document.pk]))
        self.assertEqual(response.status_code, 403)
        self.assertTrue(ProfileDocument.objects.exists())

    def download_url(self):
        self.upload(doc_type="gov_id", name="aadhaar.pdf", content=b"%PDF-1.4 secret")
        return reverse("onboarding:document_download", args=[ProfileDocument.objects.get().pk])

    def test_owner_can_download(self):
        response = self.client.get(self.download_url())
        self.assertEqual(response.status_code, 200)
        self.assertEqual(b"".join(response.streaming_content), b"%PDF-1.4 secret")
        self.assertIn("aadhaar.pdf", response["Content-Disposition"])
        response.close()

    def test_other_users_cannot_download(self):
        url = self.download_url()
        other, _ = make_teacher("other@example.com")
        self.client.force_login(other)
        self.assertEqual(self.client.get(url).status_code, 403)

    def test_anonymous_is_sent_to_login(self):
        url = self.download_url()
        self.client.logout()
        response = self.client.get(url)
        self.assertRedirects(response, f"{reverse('accounts:login')}?next={url}", fetch_redirect_response=False)

    def test_staff_can_download(self):
        url = self.download_url()
        staff = make_user("staff@example.com", is_staff=True)
        self.client.force_login(staff)
        response = self.client.get(url)
        self.assertEqual(response.status_code, 200)
        response.close()

    def test_files_have_no_public_url(self):
        self.upload()
        document = ProfileDocument.objects.get()
        self.assertTrue(document.file.path.startswith(self.media_root))
        with self.assertRaises(ValueError):
            document.file.url

    def test_profile_page_links_to_download_view(self):
        url = self.download_url()
        response = self.client.get(reverse("onboarding:teacher_profile"))
        self.assertContains(response, f'href="{url}"')

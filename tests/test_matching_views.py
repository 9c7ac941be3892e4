from unittest.mock import patch

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.urls import reverse

from matching.flows import JobRequirementsOutput, ProfileAnalysisOutput, parse_data_uri
from matching.genai_client import AnalysisError
from matching.models import JobPosting
from tests.factories import make_institution, make_job, make_teacher


class JobPostingViewTests(TestCase):
    def setUp(self):
        self.user, self.institution = make_institution()
        self.client.force_login(self.user)

    def test_create_job(self):
        response = self.client.post(
            reverse("matching:job_create"),
            {
                "title": "Chemistry Teacher",
                "subject": "Chemistry",
                "location": "Pune",
                "requirements": "B.Sc. Chemistry, B.Ed.",
            },
        )
        job = JobPosting.objects.get()
        self.assertRedirects(response, reverse("matching:job_detail", args=[job.pk]))
        self.assertEqual(job.institution, self.institution)
        self.assertEqual(job.created_by, self.user)
        self.assertTrue(job.is_active)

    def test_teachers_cannot_create_jobs(self):
        teacher_user, _ = make_teacher()
        self.client.force_login(teacher_user)
        response = self.client.get(reverse("matching:job_create"))
        self.assertEqual(response.status_code, 403)

    def test_institution_sees_only_own_jobs(self):
        make_job(self.institution, title="Ours")
        make_job(self.institution, title="Ours closed", is_active=False)
        _, other = make_institution("other@example.com")
        make_job(other, title="Theirs")

        response = self.client.get(reverse("matching:job_list"))
        titles = {job.title for job in response.context["page_obj"]}
        self.assertEqual(titles, {"Ours", "Ours closed"})

    def test_teacher_sees_active_jobs_and_can_search(self):
        make_job(self.institution, title="Physics Teacher", subject="Physics")
        make_job(self.institution, title="History Teacher", subject="History")
        make_job(self.institution, title="Closed", is_active=False)
        teacher_user, _ = make_teacher()
        self.client.force_login(teacher_user)

        response = self.client.get(reverse("matching:job_list"))
        self.assertEqual(len(response.context["page_obj"]), 2)

        response = self.client.get(reverse("matching:job_list"), {"q": "physics"})
        self.assertEqual([job.title for job in response.context["page_obj"]], ["Physics Teacher"])

    def test_close_and_reopen(self):
        job = make_job(self.institution)
        url = reverse("matching:job_close", args=[job.pk])

        self.client.post(url)
        job.refresh_from_db()
        self.assertFalse(job.is_active)

        self.client.post(url)
        job.refresh_from_db()
        self.assertTrue(job.is_active)

    def test_cannot_close_other_institutions_job(self):
        _, other = make_institution("other@example.com")
        job = make_job(other)
        response = self.client.post(reverse("matching:job_close", args=[job.pk]))
        self.assertEqual(response.status_code, 403)

    def test_closed_job_hidden_from_teachers(self):
        job = make_job(self.institution, is_active=False)
        teacher_user, _ = make_teacher()
        self.client.force_login(teacher_user)
        response = self.client.get(reverse("matching:job_detail", args=[job.pk]))
        self.assertEqual(response.status_code, 404)

    def test_owner_sees_candidates(self):
        job = make_job(self.institution)
        _, teacher = make_teacher()
        response = self.client.get(reverse("matching:job_detail", args=[job.pk]))
        self.assertTrue(response.context["can_manage"])
        self.assertIn(teacher, list(response.context["candidates"]))


class JobAnalysisViewTests(TestCase):
    def setUp(self):
        self.inst_user, self.institution = make_institution()
        self.job = make_job(self.institution)
        self.teacher_user, self.teacher = make_teacher()
        self.url = reverse("matching:job_analysis")

    def post_data(self):
        return {
            "job_title": "Physics Teacher",
            "subject": "Physics",
            "location": "Pune",
            "requirements": "M.Sc. Physics",
            "teacher_profile": "Subjects: Physics",
        }

    def test_institution_prefill_from_job_and_teacher(self):
        self.client.force_login(self.inst_user)
        response = self.client.get(self.url, {"job": self.job.pk, "teacher": self.teacher.pk})
        initial = response.context["form"].initial
        self.assertEqual(initial["job_title"], "Physics Teacher")
        self.assertIn("Name: Asha Rao", initial["teacher_profile"])

    def test_teacher_analyses_own_profile(self):
        self.client.force_login(self.teacher_user)
        response = self.client.get(self.url, {"job": self.job.pk})
        self.assertIn("Name: Asha Rao", response.context["form"].initial["teacher_profile"])

    @patch("matching.views.analyze_job_requirements")
    def test_teacher_submission_uses_stored_profile(self, analyze):
        analyze.return_value = JobRequirementsOutput(match_score=60, reasons="-")
        self.client.force_login(self.teacher_user)

        response = self.client.post(self.url, {**self.post_data(), "teacher_profile": "Ten years at CERN"})

        self.assertEqual(response.status_code, 200)
        data = analyze.call_args.args[0]
        self.assertIn("Name: Asha Rao", data.teacher_profile)
        self.assertNotIn("CERN", data.teacher_profile)
        self.assertTrue(response.context["form"].fields["teacher_profile"].widget.attrs["readonly"])

    def test_bad_query_parameters_are_ignored(self):
        self.client.force_login(self.inst_user)
        response = self.client.get(self.url, {"job": "abc", "teacher": "999"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context["form"].initial, {"teacher_profile": ""})

    @patch("matching.views.analyze_job_requirements")
    def test_result_is_rendered(self, analyze):
        analyze.return_value = JobRequirementsOutput(match_score=82, reasons="Strong physics background")
        self.client.force_login(self.inst_user)

        response = self.client.post(self.url, self.post_data())

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "82%")
        self.assertContains(response, "Strong physics background")
        data = analyze.call_args.args[0]
        self.assertEqual(data.teacher_profile, "Subjects: Physics")

    @patch("matching.views.analyze_job_requirements")
    def test_failure_shows_message_and_keeps_form(self, analyze):
        analyze.side_effect = AnalysisError("The AI service returned an error. Please try again.")
        self.client.force_login(self.inst_user)

        response = self.client.post(self.url, self.post_data())

        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.context["result"])
        self.assertContains(response, "The AI service returned an error. Please try again.")
        self.assertEqual(response.context["form"].data["subject"], "Physics")

    @patch("matching.views.analyze_job_requirements")
    def test_missing_fields_skip_the_ai_call(self, analyze):
        self.client.force_login(self.inst_user)
        response = self.client.post(self.url, {"job_title": "Physics Teacher"})
        self.assertEqual(response.status_code, 200)
        self.assertIn("requirements", response.context["form"].errors)
        analyze.assert_not_called()


class ResumeAnalysisViewTests(TestCase):
    def setUp(self):
        self.teacher_user, _ = make_teacher()
        self.url = reverse("matching:resume_analysis")

    def test_institutions_are_forbidden(self):
        user, _ = make_institution()
        self.client.force_login(user)
        self.assertEqual(self.client.get(self.url).status_code, 403)

    def test_prefill_from_job(self):
        _, institution = make_institution()
        job = make_job(institution)
        self.client.force_login(self.teacher_user)
        response = self.client.get(self.url, {"job": job.pk})
        self.assertEqual(response.context["form"].initial["job_description"], job.as_job_description())

    @patch("matching.views.analyze_profile")
    def test_resume_is_sent_as_data_uri(self, analyze):
        analyze.return_value = ProfileAnalysisOutput(
            profile_summary="Experienced physics teacher",
            match_score=75,
            relevant_skills=["Physics", "Lab work"],
        )
        self.client.force_login(self.teacher_user)

        response = self.client.post(
            self.url,
            {
                "resume": SimpleUploadedFile("cv.pdf", b"%PDF-1.4 cv", content_type="application/pdf"),
                "job_description": "Physics teacher",
            },
        )

        self.assertContains(response, "Experienced physics teacher")
        self.assertContains(response, "Lab work")
        data = analyze.call_args.args[0]
        self.assertEqual(parse_data_uri(data.resume_data_uri), ("application/pdf", b"%PDF-1.4 cv"))
        self.assertEqual(data.job_description, "Physics teacher")

    @patch("matching.views.analyze_profile")
    def test_unsupported_file_type(self, analyze):
        self.client.force_login(self.teacher_user)
        response = self.client.post(
            self.url,
            {
                "resume": SimpleUploadedFile("cv.docx", b"PK..", content_type="application/msword"),
                "job_description": "Physics teacher",
            },
        )
        self.assertIn("resume", response.context["form"].errors)
        analyze.assert_not_called()

    @patch("matching.views.analyze_profile")
    def test_failure_is_reported(self, analyze):
        analyze.side_effect = AnalysisError("AI matching is not configured. Set GEMINI_API_KEY.")
        self.client.force_login(self.teacher_user)
        response = self.client.post(
            self.url,
            {
                "resume": SimpleUploadedFile("cv.png", b"\x89PNG", content_type="image/png"),
                "job_description": "Physics teacher",
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "AI matching is not configured. Set GEMINI_API_KEY.")

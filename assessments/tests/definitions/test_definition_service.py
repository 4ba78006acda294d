"""
Definition Tests - Assessment Engine

Tests für das Anlegen, Ändern, Löschen und Auflisten von Prüfungen.

Author: DSP Development Team
Version: 1.0.0
"""

from django.test import TestCase

from assessments.attempts.models import Submission
from assessments.definitions.models import Assessment, Question
from assessments.exceptions import (
    AccessDeniedError,
    AssessmentValidationError,
    ConflictError,
    NotFoundError,
)
from assessments.services.definitions import DefinitionService
from assessments.tests.helpers import make_assessment, make_user


def definition(**overrides):
    data = {
        "title": "Django Abschlussprüfung",
        "kind": "EXAM",
        "passing_score_percent": 60,
        "max_attempts": 2,
        "questions": [
            {
                "text": "Welche Datei enthält die Settings?",
                "question_type": "SINGLE_CHOICE",
                "options": ["settings.py", "urls.py"],
                "correct_answer": "settings.py",
                "points": 3,
            },
            {
                "text": "Erkläre das ORM.",
                "question_type": "ESSAY",
                "points": 4,
            },
        ],
    }
    data.update(overrides)
    return data


class CreateAssessmentTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.instructor = make_user("lehrer", instructor=True)
        cls.learner = make_user("max")

    def setUp(self):
        self.service = DefinitionService()

    def test_total_points_is_sum_of_questions(self):
        assessment = self.service.create_assessment(self.instructor, 7, definition())
        self.assertEqual(assessment.total_points, 7)
        self.assertEqual(assessment.course_id, 7)
        self.assertEqual(assessment.owner, self.instructor)
        self.assertEqual(assessment.question_count, 2)

    def test_orders_follow_list_position(self):
        assessment = self.service.create_assessment(self.instructor, 7, definition())
        self.assertEqual([q.order for q in assessment.ordered_questions()], [1, 2])

    def test_subjective_question_has_no_answer_key(self):
        data = definition()
        data["questions"][1]["correct_answer"] = "wird ignoriert"
        assessment = self.service.create_assessment(self.instructor, 7, data)
        self.assertIsNone(assessment.ordered_questions()[1].correct_answer)

    def test_objective_question_needs_correct_answer(self):
        data = definition()
        del data["questions"][0]["correct_answer"]
        with self.assertRaises(AssessmentValidationError) as ctx:
            self.service.create_assessment(self.instructor, 7, data)
        self.assertIn("correct_answer", ctx.exception.details["questions"]["0"])
        self.assertFalse(Assessment.objects.exists())

    def test_questions_are_required(self):
        with self.assertRaises(AssessmentValidationError):
            self.service.create_assessment(self.instructor, 7, definition(questions=[]))

    def test_duplicate_order_is_rejected(self):
        data = definition()
        data["questions"][0]["order"] = 2
        data["questions"][1]["order"] = 2
        with self.assertRaises(AssessmentValidationError) as ctx:
            self.service.create_assessment(self.instructor, 7, data)
        self.assertIn("1", ctx.exception.details["questions"])

    def test_invalid_assessment_fields_are_reported(self):
        with self.assertRaises(AssessmentValidationError) as ctx:
            self.service.create_assessment(
                self.instructor, 7, definition(time_limit_minutes=600, passing_score_percent=120)
            )
        self.assertIn("time_limit_minutes", ctx.exception.details)
        self.assertIn("passing_score_percent", ctx.exception.details)

    def test_unknown_field_is_rejected(self):
        with self.assertRaises(AssessmentValidationError) as ctx:
            self.service.create_assessment(self.instructor, 7, definition(total_points=999))
        self.assertIn("total_points", ctx.exception.details)

    def test_explicit_zero_order_is_rejected(self):
        data = definition()
        data["questions"][0]["order"] = 0
        with self.assertRaises(AssessmentValidationError) as ctx:
            self.service.create_assessment(self.instructor, 7, data)
        self.assertIn("order", ctx.exception.details["questions"]["0"])

    def test_points_out_of_range(self):
        data = definition()
        data["questions"][0]["points"] = 0
        with self.assertRaises(AssessmentValidationError):
            self.service.create_assessment(self.instructor, 7, data)

    def test_learner_cannot_create(self):
        with self.assertRaises(AccessDeniedError):
            self.service.create_assessment(self.learner, 7, definition())


class UpdateDeleteAssessmentTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.owner = make_user("lehrer", instructor=True)
        cls.learner = make_user("max")
        cls.admin = make_user("admin", staff=True)

    def setUp(self):
        self.service = DefinitionService()
        self.assessment = make_assessment(owner=self.owner)

    def test_update_without_questions_keeps_them(self):
        updated = self.service.update_assessment(self.owner, self.assessment.pk, {"title": "Neu"})
        self.assertEqual(updated.title, "Neu")
        self.assertEqual(updated.total_points, 10)
        self.assertEqual(updated.question_count, 2)

    def test_update_replaces_questions_and_total(self):
        patch = {
            "questions": [
                {"text": "Nur eine", "question_type": "TRUE_FALSE", "correct_answer": True, "points": 8},
            ]
        }
        updated = self.service.update_assessment(self.owner, self.assessment.pk, patch)
        self.assertEqual(updated.total_points, 8)
        self.assertEqual(Question.objects.filter(assessment=updated).count(), 1)

    def test_rejected_update_changes_nothing(self):
        patch = {"title": "Neu", "questions": [{"text": "Kaputt", "question_type": "SINGLE_CHOICE", "points": 2}]}
        with self.assertRaises(AssessmentValidationError):
            self.service.update_assessment(self.owner, self.assessment.pk, patch)
        self.assessment.refresh_from_db()
        self.assertEqual(self.assessment.title, "Python Grundlagen")
        self.assertEqual(self.assessment.question_count, 2)

    def test_learner_cannot_update(self):
        with self.assertRaises(AccessDeniedError):
            self.service.update_assessment(self.learner, self.assessment.pk, {"title": "Neu"})

    def test_update_missing_assessment(self):
        with self.assertRaises(NotFoundError):
            self.service.update_assessment(self.owner, 999999, {"title": "Neu"})

    def test_delete_without_submissions(self):
        self.service.delete_assessment(self.admin, self.assessment.pk)
        self.assertFalse(Assessment.objects.filter(pk=self.assessment.pk).exists())

    def test_delete_with_submissions_conflicts(self):
        Submission.objects.create(
            assessment=self.assessment,
            course_id=self.assessment.course_id,
            user=self.learner,
            attempt_number=1,
            start_time=self.assessment.created_at,
            max_possible_score=10,
            passing_score_percent=50,
        )
        with self.assertRaises(ConflictError) as ctx:
            self.service.delete_assessment(self.owner, self.assessment.pk)
        self.assertEqual(ctx.exception.details["submission_count"], 1)
        self.assertTrue(Assessment.objects.filter(pk=self.assessment.pk).exists())


class ReadAssessmentTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.instructor = make_user("lehrer", instructor=True)
        cls.learner = make_user("max")
        cls.published = make_assessment(title="Veröffentlicht", tags=["python"])
        cls.draft = make_assessment(title="Entwurf", is_published=False)
        cls.other_course = make_assessment(title="Anderer Kurs", course_id=2)

    def setUp(self):
        self.service = DefinitionService()

    def test_learner_cannot_see_draft(self):
        with self.assertRaises(AccessDeniedError):
            self.service.get_assessment(self.learner, self.draft.pk)

    def test_instructor_sees_draft(self):
        self.assertEqual(self.service.get_assessment(self.instructor, self.draft.pk), self.draft)

    def test_learner_lists_published_only(self):
        titles = [a.title for a in self.service.list_course_assessments(self.learner, 1)]
        self.assertEqual(titles, ["Veröffentlicht"])

    def test_instructor_filters_by_status(self):
        drafts = self.service.list_course_assessments(self.instructor, 1, status="draft")
        self.assertEqual([a.title for a in drafts], ["Entwurf"])

    def test_search_matches_tags(self):
        found = self.service.list_course_assessments(self.instructor, 1, search="python")
        self.assertEqual([a.title for a in found], ["Veröffentlicht"])

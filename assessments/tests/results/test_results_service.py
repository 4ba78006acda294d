"""
Results Tests - Assessment Engine

Tests für Versuchshistorie, bester Versuch und Prüfungsstatistik.

Author: DSP Development Team
Version: 1.0.0
"""

from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from assessments.attempts.models import Answer, Submission
from assessments.exceptions import AccessDeniedError, NotFoundError
from assessments.services.results import ResultsService
from assessments.tests.helpers import make_assessment, make_user


def make_submission(assessment, user, attempt_number, status=Submission.Status.GRADED, percentage=0.0, **fields):
    now = timezone.now()
    finalized = status != Submission.Status.IN_PROGRESS
    defaults = {
        "course_id": assessment.course_id,
        "start_time": now - timedelta(minutes=10),
        "submit_time": now + timedelta(seconds=attempt_number) if finalized else None,
        "max_possible_score": assessment.total_points,
        "passing_score_percent": assessment.passing_score_percent,
        "percentage": percentage,
        "total_score": round(assessment.total_points * percentage / 100),
        "passed": percentage >= assessment.passing_score_percent,
    }
    defaults.update(fields)
    return Submission.objects.create(
        assessment=assessment,
        user=user,
        attempt_number=attempt_number,
        status=status,
        **defaults,
    )


class LearnerResultsTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.learner = make_user("max")
        cls.assessment = make_assessment(max_attempts=5)

    def setUp(self):
        self.service = ResultsService()

    def test_list_is_newest_first(self):
        make_submission(self.assessment, self.learner, 1, percentage=40)
        make_submission(self.assessment, self.learner, 2, status=Submission.Status.IN_PROGRESS)
        attempts = self.service.list_submissions(self.assessment.pk, self.learner)
        self.assertEqual([s.attempt_number for s in attempts], [2, 1])

    def test_best_submission_has_highest_percentage(self):
        make_submission(self.assessment, self.learner, 1, percentage=40)
        best = make_submission(self.assessment, self.learner, 2, percentage=90)
        make_submission(self.assessment, self.learner, 3, percentage=70)
        self.assertEqual(self.service.best_submission(self.assessment.pk, self.learner), best)

    def test_best_submission_ignores_unscored_attempts(self):
        make_submission(self.assessment, self.learner, 1, status=Submission.Status.SUBMITTED, percentage=100)
        make_submission(self.assessment, self.learner, 2, status=Submission.Status.IN_PROGRESS)
        self.assertIsNone(self.service.best_submission(self.assessment.pk, self.learner))

    def test_missing_assessment(self):
        with self.assertRaises(NotFoundError):
            self.service.list_submissions(999999, self.learner)


class InstructorResultsTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.owner = make_user("lehrer")
        cls.learner = make_user("max")
        cls.other = make_user("erika")
        cls.assessment = make_assessment(owner=cls.owner, max_attempts=3)
        make_submission(cls.assessment, cls.learner, 1, percentage=40, time_spent_seconds=100)
        make_submission(cls.assessment, cls.learner, 2, percentage=80, time_spent_seconds=200)
        make_submission(cls.assessment, cls.other, 1, status=Submission.Status.IN_PROGRESS)

    def setUp(self):
        self.service = ResultsService()

    def test_statistics_cover_finalized_attempts(self):
        statistics = self.service.submission_statistics(self.assessment.pk)
        self.assertEqual(statistics.total_submissions, 2)
        self.assertEqual(statistics.average_percentage, 60.0)
        self.assertEqual(statistics.min_percentage, 40.0)
        self.assertEqual(statistics.max_percentage, 80.0)
        self.assertEqual(statistics.passed_count, 1)
        self.assertEqual(statistics.average_time_spent_seconds, 150.0)

    def test_statistics_without_submissions(self):
        empty = make_assessment()
        statistics = self.service.submission_statistics(empty.pk).to_dict()
        self.assertEqual(statistics["total_submissions"], 0)
        self.assertEqual(statistics["average_percentage"], 0.0)

    def test_owner_sees_results(self):
        results = list(self.service.assessment_results(self.owner, self.assessment.pk))
        self.assertEqual([s.attempt_number for s in results], [2, 1])
        self.assertTrue(self.service.can_view_results(self.owner, self.assessment.pk))

    def test_learner_cannot_see_results(self):
        with self.assertRaises(AccessDeniedError):
            self.service.assessment_results(self.learner, self.assessment.pk)
        self.assertFalse(self.service.can_view_results(self.learner, self.assessment.pk))

    def test_pending_review_is_kept_out_of_percentages(self):
        manual = make_assessment(is_auto_graded=False, max_attempts=2)
        make_submission(manual, self.learner, 1, percentage=80)
        make_submission(manual, self.learner, 2, status=Submission.Status.SUBMITTED, percentage=0)

        statistics = self.service.submission_statistics(manual.pk)
        self.assertEqual(statistics.total_submissions, 2)
        self.assertEqual(statistics.pending_review_count, 1)
        self.assertEqual(statistics.average_percentage, 80.0)
        self.assertEqual(statistics.min_percentage, 80.0)
        self.assertEqual(statistics.passed_count, 1)

    def test_results_come_with_answers(self):
        submission = Submission.objects.filter(assessment=self.assessment, user=self.learner).first()
        question = self.assessment.ordered_questions()[0]
        Answer.objects.create(submission=submission, question=question, question_index=0, answer="A")

        results = list(self.service.assessment_results(self.owner, self.assessment.pk))
        with self.assertNumQueries(0):
            loaded = [answer.question for result in results for answer in result.answers.all()]
        self.assertEqual(loaded, [question])

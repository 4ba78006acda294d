"""
Attempt Tests - Assessment Engine

Tests für den Lebenszyklus eines Prüfungsversuchs: Starten, Fortsetzen,
Versuchslimit, gleichzeitige Starts und Abgabe mit Bewertung.

Author: DSP Development Team
Version: 1.0.0
"""

from datetime import timedelta
from unittest import mock

from django.test import TestCase
from django.utils import timezone

from assessments.attempts.models import Answer, Submission
from assessments.definitions.models import QuestionType
from assessments.exceptions import (
    AccessDeniedError,
    AlreadyFinalized,
    AssessmentValidationError,
    AttemptLimitExceeded,
    ConcurrencyRetryExhausted,
    NotFoundError,
)
from assessments.services.attempts import AttemptService
from assessments.services.definitions import DefinitionService
from assessments.tests.helpers import make_assessment, make_user

SERVICE_LOGGER = "assessments.services.attempts.attempt_service"


class FakeClock:
    def __init__(self):
        self.now = timezone.now()

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


class StartAttemptTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.learner = make_user("max")
        cls.other = make_user("erika")

    def setUp(self):
        self.service = AttemptService()

    def test_first_start_creates_attempt_one(self):
        assessment = make_assessment()
        started = self.service.start(assessment.pk, self.learner, ip_address="127.0.0.1", user_agent="pytest")
        self.assertFalse(started.resumed)
        self.assertEqual(started.submission.attempt_number, 1)
        self.assertEqual(started.submission.status, Submission.Status.IN_PROGRESS)
        self.assertEqual(started.submission.max_possible_score, 10)
        self.assertEqual(started.submission.passing_score_percent, 50)
        self.assertEqual(started.submission.ip_address, "127.0.0.1")

    def test_second_start_resumes_open_attempt(self):
        assessment = make_assessment(max_attempts=3)
        first = self.service.start(assessment.pk, self.learner)
        second = self.service.start(assessment.pk, self.learner)
        self.assertTrue(second.resumed)
        self.assertEqual(second.submission.pk, first.submission.pk)
        self.assertEqual(Submission.objects.count(), 1)

    def test_attempt_numbers_are_per_user(self):
        assessment = make_assessment()
        mine = self.service.start(assessment.pk, self.learner)
        theirs = self.service.start(assessment.pk, self.other)
        self.assertEqual(mine.submission.attempt_number, 1)
        self.assertEqual(theirs.submission.attempt_number, 1)

    def test_next_attempt_after_submit(self):
        assessment = make_assessment(max_attempts=3)
        first = self.service.start(assessment.pk, self.learner)
        self.service.submit(first.submission.pk, self.learner, ["A", "B"])
        second = self.service.start(assessment.pk, self.learner)
        self.assertFalse(second.resumed)
        self.assertEqual(second.submission.attempt_number, 2)

    def test_attempt_limit(self):
        assessment = make_assessment(max_attempts=2)
        for expected_number in (1, 2):
            started = self.service.start(assessment.pk, self.learner)
            self.assertEqual(started.submission.attempt_number, expected_number)
            self.service.submit(started.submission.pk, self.learner, ["A", "B"])

        with self.assertRaises(AttemptLimitExceeded) as ctx:
            self.service.start(assessment.pk, self.learner)
        self.assertEqual(ctx.exception.details["max_attempts"], 2)
        self.assertEqual(Submission.objects.filter(user=self.learner).count(), 2)

    def test_unpublished_assessment_cannot_be_started(self):
        assessment = make_assessment(is_published=False)
        with self.assertRaises(AccessDeniedError):
            self.service.start(assessment.pk, self.learner)

    def test_missing_assessment(self):
        with self.assertRaises(NotFoundError):
            self.service.start(999999, self.learner)

    def test_not_enrolled(self):
        policy = mock.Mock()
        policy.is_enrolled.return_value = False
        assessment = make_assessment()
        with self.assertRaises(AccessDeniedError):
            AttemptService(access_policy=policy).start(assessment.pk, self.learner)
        policy.is_enrolled.assert_called_once_with(self.learner, assessment.course_id)

    def test_lost_race_resumes_winner(self):
        assessment = make_assessment()
        winner = self.service.start(assessment.pk, self.learner).submission

        # The first read misses the winner's row, the insert then collides with it.
        with mock.patch.object(AttemptService, "_load_attempts", side_effect=[[], [winner]]):
            with self.assertLogs(SERVICE_LOGGER, level="WARNING"):
                started = self.service.start(assessment.pk, self.learner)

        self.assertTrue(started.resumed)
        self.assertEqual(started.submission.pk, winner.pk)
        self.assertEqual(Submission.objects.count(), 1)

    def test_retry_exhausted(self):
        assessment = make_assessment()
        self.service.start(assessment.pk, self.learner)

        with mock.patch.object(AttemptService, "_load_attempts", return_value=[]):
            with self.assertLogs(SERVICE_LOGGER, level="ERROR"):
                with self.assertRaises(ConcurrencyRetryExhausted) as ctx:
                    AttemptService(retry_limit=2).start(assessment.pk, self.learner)

        self.assertEqual(ctx.exception.details["retries"], 2)
        self.assertEqual(Submission.objects.count(), 1)


class SubmitAttemptTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.learner = make_user("max")
        cls.other = make_user("erika")

    def setUp(self):
        self.clock = FakeClock()
        self.service = AttemptService(clock=self.clock)

    def _start(self, assessment):
        return self.service.start(assessment.pk, self.learner).submission

    def test_half_right_passes_at_threshold(self):
        assessment = make_assessment()
        submission = self.service.submit(self._start(assessment).pk, self.learner, ["A", "C"])
        self.assertEqual(submission.status, Submission.Status.GRADED)
        self.assertEqual(submission.total_score, 5)
        self.assertEqual(submission.max_possible_score, 10)
        self.assertEqual(submission.percentage, 50.0)
        self.assertTrue(submission.passed)
        self.assertIsNotNone(submission.graded_at)

    def test_answers_are_stored_in_order(self):
        assessment = make_assessment()
        submission = self.service.submit(
            self._start(assessment).pk,
            self.learner,
            [{"answer": "A", "time_spent_seconds": 20}, {"answer": "C"}],
        )
        answers = list(Answer.objects.filter(submission=submission).order_by("question_index"))
        self.assertEqual([a.question_index for a in answers], [0, 1])
        self.assertEqual([a.is_correct for a in answers], [True, False])
        self.assertEqual(answers[0].time_spent_seconds, 20)
        self.assertEqual(answers[0].question.order, 1)
        self.assertEqual(answers[1].feedback, "Incorrect. The correct answer was: B")

    def test_time_limit_exceeded_is_still_graded(self):
        assessment = make_assessment(time_limit_minutes=1)
        submission_id = self._start(assessment).pk
        self.clock.advance(90)

        submission = self.service.submit(submission_id, self.learner, ["A", "B"])
        self.assertTrue(submission.is_time_limit_exceeded)
        self.assertEqual(submission.status, Submission.Status.GRADED)
        self.assertEqual(submission.time_spent_seconds, 90)
        self.assertEqual(submission.total_score, 10)
        self.assertEqual(submission.percentage, 100.0)

    def test_within_time_limit(self):
        assessment = make_assessment(time_limit_minutes=1)
        submission_id = self._start(assessment).pk
        self.clock.advance(30)
        submission = self.service.submit(submission_id, self.learner, ["A", "B"])
        self.assertFalse(submission.is_time_limit_exceeded)

    def test_essay_is_pending_review(self):
        assessment = make_assessment(
            questions=[{"question_type": QuestionType.ESSAY, "points": 10, "options": []}]
        )
        submission = self.service.submit(self._start(assessment).pk, self.learner, ["Mein Aufsatz"])
        answer = submission.answers.get()
        self.assertIsNone(answer.is_correct)
        self.assertEqual(answer.score, 0)
        self.assertEqual(submission.percentage, 0.0)
        self.assertEqual(submission.status, Submission.Status.GRADED)

    def test_manual_grading_leaves_submission_submitted(self):
        assessment = make_assessment(is_auto_graded=False)
        submission = self.service.submit(self._start(assessment).pk, self.learner, ["A", "B"])
        self.assertEqual(submission.status, Submission.Status.SUBMITTED)
        self.assertIsNone(submission.graded_at)
        self.assertEqual(submission.total_score, 0)
        self.assertFalse(submission.passed)

    def test_passing_threshold_is_snapshotted(self):
        assessment = make_assessment()
        submission_id = self._start(assessment).pk
        assessment.passing_score_percent = 100
        assessment.save()

        submission = self.service.submit(submission_id, self.learner, ["A", "C"])
        self.assertEqual(submission.passing_score_percent, 50)
        self.assertTrue(submission.passed)

    def test_point_total_is_snapshotted(self):
        assessment = make_assessment()
        submission_id = self._start(assessment).pk

        # Fragen werden während des Versuchs ersetzt
        admin = make_user("admin", staff=True)
        DefinitionService().update_assessment(
            admin,
            assessment.pk,
            {
                "questions": [
                    {"text": "Neu 1", "question_type": "SINGLE_CHOICE", "correct_answer": "A", "points": 40},
                    {"text": "Neu 2", "question_type": "SINGLE_CHOICE", "correct_answer": "B", "points": 40},
                ]
            },
        )
        assessment.refresh_from_db()
        self.assertEqual(assessment.total_points, 80)

        submission = self.service.submit(submission_id, self.learner, ["A", "C"])
        self.assertEqual(submission.max_possible_score, 10)
        self.assertEqual(submission.total_score, 40)
        self.assertLessEqual(submission.percentage, 100.0)
        self.assertTrue(submission.passed)

    def test_missing_optional_answer_counts_as_zero(self):
        assessment = make_assessment(
            questions=[
                {"question_type": QuestionType.SINGLE_CHOICE, "points": 5, "correct_answer": "A"},
                {"question_type": QuestionType.SINGLE_CHOICE, "points": 5, "correct_answer": "B", "is_required": False},
            ]
        )
        submission = self.service.submit(self._start(assessment).pk, self.learner, ["A"])
        self.assertEqual(submission.max_possible_score, 10)
        self.assertEqual(submission.percentage, 50.0)
        self.assertEqual(submission.answers.count(), 2)

    def test_blank_answer_is_accepted(self):
        assessment = make_assessment()
        submission = self.service.submit(self._start(assessment).pk, self.learner, ["A", None])
        self.assertEqual(submission.total_score, 5)
        self.assertEqual(submission.answers.get(question_index=1).feedback, "No answer provided")

    def test_double_submit(self):
        assessment = make_assessment()
        submission_id = self._start(assessment).pk
        self.service.submit(submission_id, self.learner, ["A", "B"])
        with self.assertRaises(AlreadyFinalized):
            self.service.submit(submission_id, self.learner, ["A", "B"])
        self.assertEqual(Answer.objects.filter(submission_id=submission_id).count(), 2)

    def test_submission_of_other_user(self):
        assessment = make_assessment()
        submission_id = self._start(assessment).pk
        with self.assertRaises(NotFoundError):
            self.service.submit(submission_id, self.other, ["A", "B"])

    def test_submission_of_other_assessment(self):
        assessment = make_assessment()
        other_assessment = make_assessment()
        submission_id = self._start(assessment).pk
        with self.assertRaises(NotFoundError):
            self.service.submit(submission_id, self.learner, ["A", "B"], assessment_id=other_assessment.pk)

    def test_answer_list_validation(self):
        assessment = make_assessment()
        submission_id = self._start(assessment).pk
        for answers in ([], ["A", "B", "C"], ["A"], [{"answer": "A", "time_spent_seconds": "abc"}, "B"]):
            with self.subTest(answers=answers):
                with self.assertRaises(AssessmentValidationError):
                    self.service.submit(submission_id, self.learner, answers)

        submission = Submission.objects.get(pk=submission_id)
        self.assertEqual(submission.status, Submission.Status.IN_PROGRESS)

    def test_malformed_time_spent_is_rejected(self):
        assessment = make_assessment()
        submission_id = self._start(assessment).pk
        for time_spent in ("abc", -5, [1], {"s": 1}, 1.5, True):
            with self.subTest(time_spent=time_spent):
                with self.assertRaises(AssessmentValidationError) as ctx:
                    self.service.submit(
                        submission_id,
                        self.learner,
                        [{"answer": "A", "time_spent_seconds": time_spent}, {"answer": "B"}],
                    )
                self.assertIn("time_spent_seconds", ctx.exception.details["answers"]["0"])

        submission = Submission.objects.get(pk=submission_id)
        self.assertEqual(submission.status, Submission.Status.IN_PROGRESS)
        self.assertFalse(submission.answers.exists())

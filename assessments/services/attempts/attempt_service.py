"""
Attempt Service for the Assessment Engine

Runs the lifecycle of a learner's attempt at an assessment:

Pipeline:
1. start: resume the open attempt or allocate the next attempt number,
   snapshotting point total and passing threshold
2. submit: validate the answer list, measure time spent, grade, and
   finalize the attempt exactly once

Concurrency:
- Two simultaneous starts race on the unique (assessment, user,
  attempt_number) key; the loser re-reads and resumes the winner's attempt
- A submit locks the attempt row and only updates it while it is still
  IN_PROGRESS, so a second submit fails with AlreadyFinalized

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence

from django.db import IntegrityError, transaction
from django.utils import timezone

from ...access import CourseAccessPolicy, get_access_policy
from ...attempts.models import Answer, Submission
from ...conf import get_setting
from ...definitions.models import Assessment
from ...exceptions import (
    AccessDeniedError,
    AlreadyFinalized,
    AssessmentValidationError,
    AttemptLimitExceeded,
    ConcurrencyRetryExhausted,
    NotFoundError,
)
from ..grading import GradingResult, grade_submission

logger = logging.getLogger(__name__)


@dataclass
class AttemptStart:
    """Result of ``AttemptService.start``."""

    submission: Submission
    resumed: bool


class AttemptService:
    """
    Service für Prüfungsversuche.

    Erstellt, setzt fort und schließt Versuche ab. Zeitquelle und
    Zugriffsrichtlinie sind austauschbar (Tests, andere Kursverwaltung).
    """

    def __init__(
        self,
        access_policy: Optional[CourseAccessPolicy] = None,
        clock: Optional[Callable[[], Any]] = None,
        retry_limit: Optional[int] = None,
    ):
        self.access_policy = access_policy or get_access_policy()
        self.clock = clock or timezone.now
        self.retry_limit = retry_limit or get_setting("START_RETRY_LIMIT")
        self.logger = logger

    def start(
        self,
        assessment_id: int,
        user,
        ip_address: Optional[str] = None,
        user_agent: str = "",
    ) -> AttemptStart:
        """
        Start a new attempt or resume the open one.

        Args:
            assessment_id: Assessment to attempt
            user: Learner
            ip_address: Client address recorded on new attempts
            user_agent: Client user agent recorded on new attempts

        Returns:
            AttemptStart with the submission and whether it was resumed

        Raises:
            NotFoundError: Assessment does not exist
            AccessDeniedError: Assessment unpublished or learner not enrolled
            AttemptLimitExceeded: All attempts used up
            ConcurrencyRetryExhausted: Attempt number could not be allocated
        """
        try:
            assessment = Assessment.objects.get(pk=assessment_id)
        except Assessment.DoesNotExist:
            raise NotFoundError("Assessment", assessment_id)

        if not assessment.is_published:
            raise AccessDeniedError("Assessment is not available")
        if not self.access_policy.is_enrolled(user, assessment.course_id):
            raise AccessDeniedError("You are not enrolled in this course")

        for retry in range(1, self.retry_limit + 1):
            existing = self._load_attempts(assessment, user)

            if existing and existing[0].status == Submission.Status.IN_PROGRESS:
                self.logger.info(
                    f"Resuming attempt {existing[0].attempt_number} of assessment "
                    f"{assessment.pk} for user {user.pk}"
                )
                return AttemptStart(submission=existing[0], resumed=True)

            if len(existing) >= assessment.max_attempts:
                raise AttemptLimitExceeded(assessment.max_attempts)

            attempt_number = len(existing) + 1
            try:
                with transaction.atomic():
                    submission = Submission.objects.create(
                        assessment=assessment,
                        course_id=assessment.course_id,
                        user=user,
                        attempt_number=attempt_number,
                        status=Submission.Status.IN_PROGRESS,
                        start_time=self.clock(),
                        max_possible_score=assessment.total_points,
                        passing_score_percent=assessment.passing_score_percent,
                        ip_address=ip_address,
                        user_agent=(user_agent or "")[:255],
                    )
            except IntegrityError:
                self.logger.warning(
                    f"Attempt number {attempt_number} of assessment {assessment.pk} "
                    f"already taken for user {user.pk}, re-reading "
                    f"(try {retry}/{self.retry_limit})"
                )
                continue

            self.logger.info(
                f"Started attempt {attempt_number} of assessment {assessment.pk} "
                f"for user {user.pk}"
            )
            return AttemptStart(submission=submission, resumed=False)

        self.logger.error(
            f"Could not allocate an attempt of assessment {assessment.pk} "
            f"for user {user.pk} after {self.retry_limit} tries"
        )
        raise ConcurrencyRetryExhausted(self.retry_limit)

    def submit(
        self,
        submission_id: int,
        user,
        answers: Sequence[Any],
        assessment_id: Optional[int] = None,
    ) -> Submission:
        """
        Grade and finalize an in-progress attempt.

        Exceeding the time limit is recorded on the submission but does not
        prevent grading.

        Args:
            submission_id: Attempt to submit
            user: Learner owning the attempt
            answers: Positional answer entries
                (``{"answer": value, "time_spent_seconds": n}`` or ``None``)
            assessment_id: Assessment the caller claims the attempt belongs to

        Returns:
            The finalized Submission (GRADED or SUBMITTED)

        Raises:
            NotFoundError: Attempt absent, not the user's or not of this assessment
            AlreadyFinalized: Attempt is no longer in progress
            AssessmentValidationError: Answer list does not fit the questions
        """
        with transaction.atomic():
            submission = self._lock_submission(submission_id, user, assessment_id)
            if submission.status != Submission.Status.IN_PROGRESS:
                raise AlreadyFinalized(submission.pk, submission.status)

            assessment = submission.assessment
            questions = assessment.ordered_questions()
            self._validate_answers(questions, answers)

            now = self.clock()
            time_spent = max(0, int((now - submission.start_time).total_seconds()))
            time_limit = assessment.time_limit_minutes
            time_limit_exceeded = bool(time_limit) and time_spent > time_limit * 60

            result = grade_submission(
                questions,
                answers,
                max_possible_score=submission.max_possible_score,
                passing_score_percent=submission.passing_score_percent,
                auto_graded=assessment.is_auto_graded,
            )

            if assessment.is_auto_graded:
                new_status = Submission.Status.GRADED
                graded_at = now
            else:
                new_status = Submission.Status.SUBMITTED
                graded_at = None

            updated = Submission.objects.filter(
                pk=submission.pk, status=Submission.Status.IN_PROGRESS
            ).update(
                status=new_status,
                submit_time=now,
                time_spent_seconds=time_spent,
                is_time_limit_exceeded=time_limit_exceeded,
                total_score=result.total_score,
                percentage=result.percentage,
                passed=result.passed,
                graded_at=graded_at,
                updated_at=timezone.now(),
            )
            if not updated:
                raise AlreadyFinalized(submission.pk)

            self._store_answers(submission, questions, result)

        if time_limit_exceeded:
            self.logger.warning(
                f"Submission {submission.pk} exceeded the time limit "
                f"({time_spent}s > {time_limit} min), graded anyway"
            )
        self.logger.info(
            f"Submission {submission.pk} finalized as {new_status}: "
            f"{result.total_score}/{result.max_possible_score} "
            f"({result.pending_review_count} pending review)"
        )

        submission.refresh_from_db()
        return submission

    # --- Helpers ---

    def _load_attempts(self, assessment: Assessment, user) -> List[Submission]:
        """All attempts of ``user`` at ``assessment``, newest attempt first."""
        return list(
            Submission.objects.filter(assessment=assessment, user=user).order_by(
                "-attempt_number"
            )
        )

    def _lock_submission(self, submission_id, user, assessment_id) -> Submission:
        try:
            submission = (
                Submission.objects.select_for_update(of=("self",))
                .select_related("assessment")
                .get(pk=submission_id, user=user)
            )
        except Submission.DoesNotExist:
            raise NotFoundError("Submission", submission_id)

        if assessment_id is not None and submission.assessment_id != int(assessment_id):
            raise NotFoundError("Submission", submission_id)
        return submission

    def _validate_answers(self, questions, answers: Sequence[Any]) -> None:
        """
        The answer list is positional: it may not be empty, may not be longer
        than the question list, must reach the last required question, and any
        reported ``time_spent_seconds`` must be a non-negative integer.
        """
        if not answers:
            raise AssessmentValidationError(
                "At least one answer is required",
                details={"answers": ["At least one answer is required."]},
            )
        if len(answers) > len(questions):
            raise AssessmentValidationError(
                "More answers than questions",
                details={
                    "answers": [
                        f"Expected at most {len(questions)} answers, got {len(answers)}."
                    ]
                },
            )

        required_positions = [
            index for index, question in enumerate(questions) if question.is_required
        ]
        if required_positions and len(answers) <= required_positions[-1]:
            raise AssessmentValidationError(
                "Answers missing for required questions",
                details={
                    "answers": [
                        f"Expected at least {required_positions[-1] + 1} answers, "
                        f"got {len(answers)}."
                    ]
                },
            )

        errors = {}
        for index, entry in enumerate(answers):
            if not isinstance(entry, Mapping):
                continue
            time_spent = entry.get("time_spent_seconds")
            if time_spent is None:
                continue
            if isinstance(time_spent, bool) or not isinstance(time_spent, int) or time_spent < 0:
                errors[str(index)] = {
                    "time_spent_seconds": ["Must be a non-negative integer."]
                }
        if errors:
            raise AssessmentValidationError(
                "Invalid answer entries", details={"answers": errors}
            )

    def _store_answers(self, submission: Submission, questions, result: GradingResult) -> None:
        Answer.objects.bulk_create(
            [
                Answer(
                    submission=submission,
                    question=questions[graded.question_index],
                    question_index=graded.question_index,
                    answer=graded.answer,
                    is_correct=graded.is_correct,
                    score=graded.score,
                    feedback=graded.feedback[:1000],
                    explanation=graded.explanation,
                    time_spent_seconds=graded.time_spent_seconds,
                )
                for graded in result.answers
            ]
        )

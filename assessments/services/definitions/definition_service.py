"""
Definition Service for the Assessment Engine

Creates, updates and deletes assessment definitions together with their
questions. Every write validates the full definition first and then persists
it atomically, so a rejected request never leaves partial data behind.

Responsibilities:
- Question validation (objective types need a correct answer, unique order)
- Automatic question ordering by list position
- Keeping ``total_points`` equal to the sum of question points
- Refusing to delete assessments that already have submissions

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import ProtectedError, Q, QuerySet

from ...access import CourseAccessPolicy, get_access_policy
from ...attempts.models import Submission
from ...definitions.models import Assessment, Question
from ...exceptions import (
    AccessDeniedError,
    AssessmentValidationError,
    ConflictError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

ASSESSMENT_FIELDS = (
    "title",
    "description",
    "instructions",
    "kind",
    "time_limit_minutes",
    "passing_score_percent",
    "max_attempts",
    "is_published",
    "is_auto_graded",
    "allow_review",
    "show_correct_answers",
    "due_date",
    "tags",
    "difficulty",
)

QUESTION_FIELDS = (
    "text",
    "question_type",
    "options",
    "correct_answer",
    "points",
    "explanation",
    "is_required",
    "order",
)


class DefinitionService:
    """
    Service für Prüfungsdefinitionen.

    Verwaltet Assessments und deren Fragen; liest Submissions nur für die
    Löschsperre.
    """

    def __init__(self, access_policy: Optional[CourseAccessPolicy] = None):
        self.access_policy = access_policy or get_access_policy()
        self.logger = logger

    # --- Reads ---

    def get_assessment(self, actor, assessment_id: int) -> Assessment:
        """
        Load an assessment visible to ``actor``.

        Unpublished assessments are only visible to people who may manage them.
        """
        assessment = self._get(assessment_id)
        if not assessment.is_published and not self.access_policy.can_manage_assessment(
            actor, assessment
        ):
            raise AccessDeniedError("Access denied")
        return assessment

    def list_course_assessments(
        self,
        actor,
        course_id: int,
        kind: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> QuerySet:
        """
        List the assessments of a course, newest first.

        Args:
            actor: Requesting user
            course_id: Course the assessments belong to
            kind: Optional assessment kind filter
            status: ``"published"`` or ``"draft"``
            search: Case-insensitive match on title, description or tags

        Returns:
            QuerySet of assessments; non-managers only see published ones
        """
        queryset = Assessment.objects.filter(course_id=course_id)
        if kind:
            queryset = queryset.filter(kind=kind)
        if status == "published":
            queryset = queryset.filter(is_published=True)
        elif status == "draft":
            queryset = queryset.filter(is_published=False)
        if search:
            queryset = queryset.filter(
                Q(title__icontains=search)
                | Q(description__icontains=search)
                | Q(tags__icontains=search)
            )

        if not self.access_policy.can_manage_course(actor, course_id):
            queryset = queryset.filter(is_published=True)

        return queryset.select_related("owner").order_by("-created_at")

    # --- Writes ---

    def create_assessment(
        self, actor, course_id: int, definition: Mapping[str, Any]
    ) -> Assessment:
        """
        Create an assessment with its questions.

        Args:
            actor: Requesting user, must be allowed to manage the course
            course_id: Course the assessment belongs to
            definition: Assessment fields plus a ``questions`` list

        Returns:
            The persisted Assessment with ``total_points`` computed

        Raises:
            AccessDeniedError: Actor is neither course owner nor admin
            AssessmentValidationError: Definition is incomplete or inconsistent
        """
        if not self.access_policy.can_manage_course(actor, course_id):
            raise AccessDeniedError(
                "Only course owner or admin can create assessments"
            )

        self._reject_unknown_fields(definition)
        questions_data = self._normalize_questions(definition.get("questions"))

        assessment = Assessment(
            course_id=course_id,
            owner=actor if getattr(actor, "pk", None) else None,
            **{name: definition[name] for name in ASSESSMENT_FIELDS if name in definition},
        )
        self._full_clean(assessment, exclude=["owner"])
        questions = self._build_questions(questions_data)

        with transaction.atomic():
            assessment.save()
            self._store_questions(assessment, questions)
            assessment.refresh_total_points()

        self.logger.info(
            f"Assessment {assessment.pk} created in course {course_id} "
            f"({len(questions)} questions, {assessment.total_points} points)"
        )
        return assessment

    def update_assessment(
        self, actor, assessment_id: int, patch: Mapping[str, Any]
    ) -> Assessment:
        """
        Apply a partial update; ``questions`` in the patch replaces all questions.

        Raises:
            NotFoundError: Assessment does not exist
            AccessDeniedError: Actor may not manage the assessment
            AssessmentValidationError: Patch is invalid
        """
        assessment = self._get(assessment_id)
        if not self.access_policy.can_manage_assessment(actor, assessment):
            raise AccessDeniedError(
                "Only assessment owner or admin can update assessment"
            )

        self._reject_unknown_fields(patch)

        questions = None
        if "questions" in patch:
            questions = self._build_questions(
                self._normalize_questions(patch.get("questions"))
            )

        for name in ASSESSMENT_FIELDS:
            if name in patch:
                setattr(assessment, name, patch[name])
        self._full_clean(assessment, exclude=["owner"])

        with transaction.atomic():
            assessment.save()
            if questions is not None:
                assessment.questions.all().delete()
                self._store_questions(assessment, questions)
            assessment.refresh_total_points()

        self.logger.info(f"Assessment {assessment.pk} updated")
        return assessment

    def delete_assessment(self, actor, assessment_id: int) -> None:
        """
        Delete an assessment that has no submissions.

        Raises:
            NotFoundError: Assessment does not exist
            AccessDeniedError: Actor may not manage the assessment
            ConflictError: Submissions reference the assessment
        """
        assessment = self._get(assessment_id)
        if not self.access_policy.can_manage_assessment(actor, assessment):
            raise AccessDeniedError(
                "Only assessment owner or admin can delete assessment"
            )

        submission_count = Submission.objects.filter(assessment=assessment).count()
        if submission_count > 0:
            raise ConflictError(
                "Cannot delete assessment with existing submissions",
                details={"submission_count": submission_count},
            )

        try:
            with transaction.atomic():
                assessment.delete()
        except ProtectedError:
            # A submission was started between the count and the delete.
            raise ConflictError("Cannot delete assessment with existing submissions")

        self.logger.info(f"Assessment {assessment_id} deleted")

    # --- Helpers ---

    def _get(self, assessment_id: int) -> Assessment:
        try:
            return Assessment.objects.get(pk=assessment_id)
        except Assessment.DoesNotExist:
            raise NotFoundError("Assessment", assessment_id)

    def _reject_unknown_fields(self, data: Mapping[str, Any]) -> None:
        unknown = sorted(set(data) - set(ASSESSMENT_FIELDS) - {"questions"})
        if unknown:
            raise AssessmentValidationError(
                "Unknown assessment fields",
                details={name: ["Unknown field."] for name in unknown},
            )

    def _normalize_questions(self, questions: Any) -> List[Dict[str, Any]]:
        """
        Check the question list and fill in missing ``order`` values.

        Orders are assigned by list position (1-based) when omitted and must be
        unique afterwards.
        """
        if not questions:
            raise AssessmentValidationError(
                "At least one question is required",
                details={"questions": ["At least one question is required."]},
            )

        errors: Dict[str, List[str]] = {}
        normalized = []
        for index, question in enumerate(questions):
            if not isinstance(question, Mapping):
                errors[str(index)] = ["Question must be an object."]
                continue
            unknown = sorted(set(question) - set(QUESTION_FIELDS) - {"id"})
            if unknown:
                errors[str(index)] = [f"Unknown field: {name}" for name in unknown]
                continue
            data = {name: question[name] for name in QUESTION_FIELDS if name in question}
            if data.get("order") is None:
                data["order"] = index + 1
            normalized.append(data)

        seen_orders = set()
        for index, data in enumerate(normalized):
            if data["order"] in seen_orders:
                errors.setdefault(str(index), []).append(
                    f"Duplicate question order {data['order']}."
                )
            seen_orders.add(data["order"])

        if errors:
            raise AssessmentValidationError(
                "Invalid questions", details={"questions": errors}
            )
        return normalized

    def _build_questions(self, questions_data: List[Dict[str, Any]]) -> List[Question]:
        """Instantiate and validate unsaved questions (``clean`` included)."""
        errors: Dict[str, Any] = {}
        questions = []
        for index, data in enumerate(questions_data):
            question = Question(**data)
            try:
                question.full_clean(exclude=["assessment"], validate_unique=False)
            except DjangoValidationError as e:
                errors[str(index)] = e.message_dict
            questions.append(question)

        if errors:
            raise AssessmentValidationError(
                "Invalid questions", details={"questions": errors}
            )
        return questions

    def _store_questions(self, assessment: Assessment, questions: List[Question]) -> None:
        for question in questions:
            question.assessment = assessment
        Question.objects.bulk_create(questions)

    def _full_clean(self, instance, exclude=None) -> None:
        try:
            instance.full_clean(exclude=exclude)
        except DjangoValidationError as e:
            raise AssessmentValidationError(
                "Invalid assessment", details=e.message_dict
            )

"""
Results Service for the Assessment Engine

Read-only views on submissions: a learner's attempt history, their best
graded attempt, and per-assessment statistics for instructors. Nothing in
this module writes to the database.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from django.db.models import Avg, Count, Max, Min, Q, QuerySet

from ...access import CourseAccessPolicy, get_access_policy
from ...attempts.models import Submission
from ...definitions.models import Assessment
from ...exceptions import AccessDeniedError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass
class SubmissionStatistics:
    """Aggregate over the finalized submissions of one assessment."""

    assessment_id: int
    total_submissions: int
    average_percentage: float
    min_percentage: float
    max_percentage: float
    passed_count: int
    average_time_spent_seconds: float
    pending_review_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ResultsService:
    """Service für Auswertungen abgeschlossener Prüfungsversuche."""

    def __init__(self, access_policy: Optional[CourseAccessPolicy] = None):
        self.access_policy = access_policy or get_access_policy()
        self.logger = logger

    def list_submissions(self, assessment_id: int, user) -> List[Submission]:
        """All attempts of ``user`` at the assessment, newest first."""
        assessment = self._get_assessment(assessment_id)
        return list(
            Submission.objects.filter(assessment=assessment, user=user)
            .prefetch_related("answers")
            .order_by("-attempt_number")
        )

    def best_submission(self, assessment_id: int, user) -> Optional[Submission]:
        """
        Highest-percentage scored attempt of ``user``.

        Only GRADED and REVIEWED attempts count; ties go to the latest submit.
        """
        assessment = self._get_assessment(assessment_id)
        return (
            Submission.objects.filter(
                assessment=assessment,
                user=user,
                status__in=Submission.SCORED_STATUSES,
            )
            .order_by("-percentage", "-submit_time")
            .first()
        )

    def submission_statistics(self, assessment_id: int) -> SubmissionStatistics:
        """
        Count, percentage spread, pass count and mean time of finalized attempts.

        Percentages and passes only cover scored attempts (GRADED/REVIEWED);
        SUBMITTED attempts awaiting review are reported as ``pending_review_count``.
        """
        assessment = self._get_assessment(assessment_id)
        scored = Q(status__in=Submission.SCORED_STATUSES)
        stats = self._finalized(assessment).aggregate(
            total_submissions=Count("id"),
            pending_review_count=Count("id", filter=Q(status=Submission.Status.SUBMITTED)),
            average_percentage=Avg("percentage", filter=scored),
            min_percentage=Min("percentage", filter=scored),
            max_percentage=Max("percentage", filter=scored),
            passed_count=Count("id", filter=scored & Q(passed=True)),
            average_time_spent_seconds=Avg("time_spent_seconds"),
        )
        return SubmissionStatistics(
            assessment_id=assessment.pk,
            total_submissions=stats["total_submissions"] or 0,
            average_percentage=float(stats["average_percentage"] or 0),
            min_percentage=float(stats["min_percentage"] or 0),
            max_percentage=float(stats["max_percentage"] or 0),
            passed_count=stats["passed_count"] or 0,
            average_time_spent_seconds=float(stats["average_time_spent_seconds"] or 0),
            pending_review_count=stats["pending_review_count"] or 0,
        )

    def assessment_results(self, actor, assessment_id: int) -> QuerySet:
        """
        Every finalized submission of the assessment, latest submit first.

        Raises:
            AccessDeniedError: Actor may not manage the assessment
        """
        assessment = self._get_assessment(assessment_id)
        if not self.access_policy.can_manage_assessment(actor, assessment):
            raise AccessDeniedError("Only assessment owner or admin can view results")
        return (
            self._finalized(assessment)
            .select_related("user", "graded_by")
            .prefetch_related("answers__question")
            .order_by("-submit_time", "-pk")
        )

    def can_view_results(self, actor, assessment_id: int) -> bool:
        return self.access_policy.can_manage_assessment(
            actor, self._get_assessment(assessment_id)
        )

    # --- Helpers ---

    def _get_assessment(self, assessment_id: int) -> Assessment:
        try:
            return Assessment.objects.get(pk=assessment_id)
        except Assessment.DoesNotExist:
            raise NotFoundError("Assessment", assessment_id)

    def _finalized(self, assessment: Assessment) -> QuerySet:
        return Submission.objects.filter(
            assessment=assessment, status__in=Submission.FINAL_STATUSES
        )

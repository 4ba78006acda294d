"""
Assessment Attempt Models

This module defines a learner's attempts at an assessment and the scored
answers recorded for each attempt.

Models:
- Submission: One numbered attempt of one learner at one assessment
- Answer: One response to one question within a submission

Features:
- Unique (assessment, user, attempt_number) key enforced by the database
- Point total and passing threshold snapshotted when the attempt starts
- Advisory time-limit flag, tri-state correctness for pending review

Author: DSP Development Team
Version: 1.0.0
"""

import datetime

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from ..definitions.models import Assessment, Question

User = settings.AUTH_USER_MODEL


class Submission(models.Model):
    class Status(models.TextChoices):
        IN_PROGRESS = "IN_PROGRESS", _("In Bearbeitung")
        SUBMITTED = "SUBMITTED", _("Abgegeben")
        GRADED = "GRADED", _("Bewertet")
        REVIEWED = "REVIEWED", _("Geprüft")

    FINAL_STATUSES = (Status.SUBMITTED, Status.GRADED, Status.REVIEWED)
    SCORED_STATUSES = (Status.GRADED, Status.REVIEWED)

    assessment = models.ForeignKey(
        Assessment, on_delete=models.PROTECT, related_name="submissions"
    )
    course_id = models.PositiveBigIntegerField(db_index=True)
    user = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name="assessment_submissions"
    )
    attempt_number = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    status = models.CharField(
        max_length=15, choices=Status.choices, default=Status.IN_PROGRESS
    )
    start_time = models.DateTimeField()
    submit_time = models.DateTimeField(null=True, blank=True)
    time_spent_seconds = models.PositiveIntegerField(default=0)
    is_time_limit_exceeded = models.BooleanField(default=False)
    total_score = models.PositiveIntegerField(default=0)
    max_possible_score = models.PositiveIntegerField(
        help_text=_("Punktesumme der Prüfung zum Startzeitpunkt.")
    )
    passing_score_percent = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        help_text=_("Bestehensgrenze der Prüfung zum Startzeitpunkt."),
    )
    percentage = models.FloatField(
        default=0, validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    passed = models.BooleanField(default=False)
    graded_by = models.ForeignKey(
        User,
        related_name="graded_assessment_submissions",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
    )
    graded_at = models.DateTimeField(null=True, blank=True)
    comments = models.TextField(max_length=2000, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Submission")
        verbose_name_plural = _("Submissions")
        ordering = ["-attempt_number"]
        constraints = [
            models.UniqueConstraint(
                fields=["assessment", "user", "attempt_number"],
                name="unique_assessment_attempt",
            ),
        ]
        indexes = [
            models.Index(fields=["assessment", "user"], name="submission_assessment_user_idx"),
            models.Index(fields=["user", "status"], name="submission_user_status_idx"),
            models.Index(fields=["status"], name="submission_status_idx"),
            models.Index(fields=["-submit_time"], name="submission_submit_time_idx"),
        ]

    def __str__(self):
        return f"Attempt {self.attempt_number} at {self.assessment.title} by {self.user}"

    @property
    def is_finalized(self) -> bool:
        return self.status != self.Status.IN_PROGRESS

    @property
    def due_at(self):
        limit = self.assessment.time_limit_minutes if self.assessment_id else None
        if self.start_time and limit:
            return self.start_time + datetime.timedelta(minutes=limit)
        return None

    @property
    def time_remaining_seconds(self):
        due = self.due_at
        if due is None or self.is_finalized:
            return None
        return max(0, int((due - timezone.now()).total_seconds()))

    def get_summary(self) -> dict:
        return {
            "id": self.pk,
            "assessment_id": self.assessment_id,
            "attempt_number": self.attempt_number,
            "total_score": self.total_score,
            "max_possible_score": self.max_possible_score,
            "percentage": self.percentage,
            "passed": self.passed,
            "status": self.status,
            "submit_time": self.submit_time,
            "time_spent_seconds": self.time_spent_seconds,
            "is_time_limit_exceeded": self.is_time_limit_exceeded,
        }


class Answer(models.Model):
    submission = models.ForeignKey(
        Submission, on_delete=models.CASCADE, related_name="answers"
    )
    # Questions may be replaced after grading; the answer keeps its own copy.
    question = models.ForeignKey(
        Question,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="answers",
    )
    question_index = models.PositiveIntegerField()
    answer = models.JSONField(null=True, blank=True)
    is_correct = models.BooleanField(
        null=True, blank=True, help_text=_("Leer = manuelle Prüfung ausstehend.")
    )
    score = models.PositiveIntegerField(default=0)
    feedback = models.CharField(max_length=1000, blank=True)
    explanation = models.TextField(max_length=1000, blank=True)
    time_spent_seconds = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = _("Answer")
        verbose_name_plural = _("Answers")
        ordering = ["submission", "question_index"]
        constraints = [
            models.UniqueConstraint(
                fields=["submission", "question_index"],
                name="unique_submission_answer",
            ),
        ]

    def __str__(self):
        return f"Answer {self.question_index + 1} of submission {self.submission_id}"

    @property
    def is_pending_review(self) -> bool:
        return self.is_correct is None

"""
Assessment Application Django Admin Configuration

This module provides the Django admin interface for the assessment engine.

The admin interface is organized into two sections:
- Assessment Management: Assessment definitions with inline questions
- Attempt Tracking: Read-only view of learner submissions and answers

Submissions are created and graded through the API only, so the admin never
offers to add or edit them by hand.

Author: DSP Development Team
Version: 1.0.0
"""

from typing import Optional

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest
from django.utils.translation import gettext_lazy as _

# Import all models from the central models registry
from .models import Answer, Assessment, Question, Submission

# --- Assessment Management ---


class QuestionInline(admin.TabularInline):
    """Inline admin for the questions of an assessment."""

    model = Question
    extra = 1
    fields = (
        "order",
        "text",
        "question_type",
        "options",
        "correct_answer",
        "points",
        "is_required",
    )
    ordering = ("order",)


@admin.register(Assessment)
class AssessmentAdmin(admin.ModelAdmin):
    """
    Administration interface for assessment definitions.

    Questions are edited inline; the point total is recomputed after every
    save so it always matches the questions.
    """

    list_display = (
        "title",
        "course_id",
        "kind",
        "total_points",
        "max_attempts",
        "is_published",
        "created_at",
    )
    list_filter = ("kind", "is_published", "is_auto_graded", "difficulty")
    search_fields = ("title", "description")
    readonly_fields = ("total_points", "created_at", "updated_at")
    inlines = [QuestionInline]

    fieldsets = (
        (
            _("Basic Information"),
            {"fields": ("title", "course_id", "owner", "kind", "description", "instructions")},
        ),
        (
            _("Grading"),
            {
                "fields": (
                    "passing_score_percent",
                    "max_attempts",
                    "time_limit_minutes",
                    "is_auto_graded",
                    "total_points",
                )
            },
        ),
        (
            _("Visibility"),
            {
                "fields": (
                    "is_published",
                    "allow_review",
                    "show_correct_answers",
                    "due_date",
                    "tags",
                    "difficulty",
                )
            },
        ),
        (
            _("Timestamps"),
            {"fields": ("created_at", "updated_at"), "classes": ("collapse",)},
        ),
    )

    def save_related(self, request: HttpRequest, form, formsets, change: bool) -> None:
        """Keep ``total_points`` in sync with the inline questions."""
        super().save_related(request, form, formsets, change)
        form.instance.refresh_total_points()

    def has_delete_permission(
        self, request: HttpRequest, obj: Optional[Assessment] = None
    ) -> bool:
        """Assessments with submissions cannot be deleted."""
        if obj is not None and obj.submissions.exists():
            return False
        return super().has_delete_permission(request, obj)


# --- Attempt Tracking ---


class AnswerInline(admin.TabularInline):
    """Read-only inline for the scored answers of a submission."""

    model = Answer
    extra = 0
    can_delete = False
    fields = ("question_index", "answer", "is_correct", "score", "feedback", "time_spent_seconds")
    readonly_fields = fields

    def has_add_permission(self, request: HttpRequest, obj=None) -> bool:
        return False


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    """
    Administration interface for learner submissions.

    Provides tracking of attempts including timing, scoring and status.
    """

    list_display = (
        "user",
        "assessment",
        "attempt_number",
        "status",
        "percentage",
        "passed",
        "is_time_limit_exceeded",
        "submit_time",
    )
    list_filter = ("status", "passed", "is_time_limit_exceeded", "assessment")
    search_fields = ("user__username", "user__email", "assessment__title")
    readonly_fields = (
        "assessment",
        "course_id",
        "user",
        "attempt_number",
        "status",
        "start_time",
        "submit_time",
        "time_spent_seconds",
        "is_time_limit_exceeded",
        "total_score",
        "max_possible_score",
        "passing_score_percent",
        "percentage",
        "passed",
        "graded_by",
        "graded_at",
        "ip_address",
        "user_agent",
    )
    inlines = [AnswerInline]

    def has_add_permission(self, request: HttpRequest) -> bool:
        """
        Prevent manual creation of submissions.

        Attempts are only created through the API so that attempt numbers and
        score snapshots stay consistent.
        """
        return False

    def has_delete_permission(
        self, request: HttpRequest, obj: Optional[Submission] = None
    ) -> bool:
        return False

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        """Optimize queryset with related object prefetch."""
        return (
            super()
            .get_queryset(request)
            .select_related("user", "assessment", "graded_by")
            .prefetch_related("answers")
        )

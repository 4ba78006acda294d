"""
Assessment Definition Models

This module defines the structure of graded assessments: the assessment itself
with its grading configuration, and the ordered questions it consists of.

Models:
- Assessment: Quiz/assignment/exam/survey belonging to a course
- Question: One gradable item of an assessment

Features:
- Attempt limit, time limit and passing threshold per assessment
- Closed set of question types with objective/subjective split
- Derived point total kept in sync with the questions

Author: DSP Development Team
Version: 1.0.0
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Sum
from django.utils.translation import gettext_lazy as _

User = settings.AUTH_USER_MODEL


class AssessmentKind(models.TextChoices):
    QUIZ = "QUIZ", _("Quiz")
    ASSIGNMENT = "ASSIGNMENT", _("Assignment")
    EXAM = "EXAM", _("Exam")
    SURVEY = "SURVEY", _("Survey")


class AssessmentDifficulty(models.TextChoices):
    EASY = "EASY", _("Einfach")
    MEDIUM = "MEDIUM", _("Mittel")
    HARD = "HARD", _("Schwer")


class QuestionType(models.TextChoices):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE", _("Multiple Choice")
    SINGLE_CHOICE = "SINGLE_CHOICE", _("Single Choice")
    TRUE_FALSE = "TRUE_FALSE", _("True/False")
    SHORT_ANSWER = "SHORT_ANSWER", _("Short Answer")
    ESSAY = "ESSAY", _("Essay")
    FILE_UPLOAD = "FILE_UPLOAD", _("File Upload")


# Types the auto-grader can decide on its own.
OBJECTIVE_QUESTION_TYPES = frozenset(
    {
        QuestionType.MULTIPLE_CHOICE,
        QuestionType.SINGLE_CHOICE,
        QuestionType.TRUE_FALSE,
    }
)


def is_empty_value(value) -> bool:
    """True for None, blank strings and empty collections (but not False/0)."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def validate_tags(value):
    if not isinstance(value, list):
        raise ValidationError(_("Tags must be a list."))
    for tag in value:
        if not isinstance(tag, str) or len(tag) > 50:
            raise ValidationError(_("Each tag must be a string of at most 50 characters."))


def validate_options(value):
    if not isinstance(value, list):
        raise ValidationError(_("Options must be a list."))
    for option in value:
        if not isinstance(option, str) or len(option) > 500:
            raise ValidationError(_("Each option must be a string of at most 500 characters."))


class Assessment(models.Model):
    """
    A graded unit belonging to a course.

    The grading configuration (attempt limit, time limit, passing threshold,
    auto-grading) is read from this record, never from ambient settings.
    ``total_points`` always equals the sum of the question points.
    """

    course_id = models.PositiveBigIntegerField(db_index=True)
    owner = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="owned_assessments",
    )
    title = models.CharField(max_length=200)
    description = models.TextField(max_length=2000, blank=True)
    instructions = models.TextField(max_length=2000, blank=True)
    kind = models.CharField(max_length=12, choices=AssessmentKind.choices)
    time_limit_minutes = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(480)],
        help_text=_("Bearbeitungszeit in Minuten (optional, max. 8 Stunden)."),
    )
    passing_score_percent = models.PositiveSmallIntegerField(
        default=70,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    max_attempts = models.PositiveSmallIntegerField(
        default=1, validators=[MinValueValidator(1)]
    )
    is_published = models.BooleanField(default=False)
    is_auto_graded = models.BooleanField(default=True)
    allow_review = models.BooleanField(default=True)
    show_correct_answers = models.BooleanField(default=False)
    due_date = models.DateTimeField(null=True, blank=True)
    tags = models.JSONField(default=list, blank=True, validators=[validate_tags])
    difficulty = models.CharField(
        max_length=10,
        choices=AssessmentDifficulty.choices,
        default=AssessmentDifficulty.MEDIUM,
    )
    total_points = models.PositiveIntegerField(
        default=0,
        editable=False,
        help_text=_("Summe der Fragenpunkte. Wird automatisch berechnet."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Assessment")
        verbose_name_plural = _("Assessments")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["course_id", "kind"], name="assessment_course_kind_idx"),
            models.Index(fields=["is_published"], name="assessment_published_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    @property
    def question_count(self) -> int:
        return self.questions.count()

    def refresh_total_points(self) -> int:
        """Recompute ``total_points`` from the stored questions and persist it."""
        total = self.questions.aggregate(total=Sum("points"))["total"] or 0
        if total != self.total_points:
            self.total_points = total
            self.save(update_fields=["total_points", "updated_at"])
        return total

    def ordered_questions(self):
        return list(self.questions.order_by("order"))

    def get_summary(self) -> dict:
        return {
            "id": self.pk,
            "title": self.title,
            "kind": self.kind,
            "question_count": self.question_count,
            "total_points": self.total_points,
            "time_limit_minutes": self.time_limit_minutes,
            "passing_score_percent": self.passing_score_percent,
            "is_published": self.is_published,
            "due_date": self.due_date,
            "difficulty": self.difficulty,
        }


class Question(models.Model):
    """
    One gradable item of an assessment.

    ``order`` is unique within the assessment and defines the position that
    submitted answers are matched against.
    """

    assessment = models.ForeignKey(
        Assessment, on_delete=models.CASCADE, related_name="questions"
    )
    text = models.CharField(max_length=1000)
    question_type = models.CharField(max_length=20, choices=QuestionType.choices)
    options = models.JSONField(default=list, blank=True, validators=[validate_options])
    correct_answer = models.JSONField(null=True, blank=True)
    points = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(100)]
    )
    explanation = models.TextField(max_length=1000, blank=True)
    is_required = models.BooleanField(default=True)
    order = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])

    class Meta:
        verbose_name = _("Question")
        verbose_name_plural = _("Questions")
        ordering = ["assessment", "order"]
        constraints = [
            models.UniqueConstraint(
                fields=["assessment", "order"], name="unique_question_order"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order}. {self.text[:40]}"

    @property
    def is_objective(self) -> bool:
        return self.question_type in OBJECTIVE_QUESTION_TYPES

    def clean(self):
        if self.is_objective:
            if is_empty_value(self.correct_answer):
                raise ValidationError(
                    {
                        "correct_answer": _(
                            "A correct answer is required for this question type."
                        )
                    }
                )
        else:
            # Subjective answers are reviewed by hand, a stored key would never be used.
            self.correct_answer = None

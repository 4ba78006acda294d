import assessments.definitions.models
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Assessment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("course_id", models.PositiveBigIntegerField(db_index=True)),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, max_length=2000)),
                ("instructions", models.TextField(blank=True, max_length=2000)),
                (
                    "kind",
                    models.CharField(
                        choices=[("QUIZ", "Quiz"), ("ASSIGNMENT", "Assignment"), ("EXAM", "Exam"), ("SURVEY", "Survey")],
                        max_length=12,
                    ),
                ),
                (
                    "time_limit_minutes",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        help_text="Bearbeitungszeit in Minuten (optional, max. 8 Stunden).",
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(480),
                        ],
                    ),
                ),
                (
                    "passing_score_percent",
                    models.PositiveSmallIntegerField(
                        default=70,
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(100),
                        ],
                    ),
                ),
                (
                    "max_attempts",
                    models.PositiveSmallIntegerField(
                        default=1, validators=[django.core.validators.MinValueValidator(1)]
                    ),
                ),
                ("is_published", models.BooleanField(default=False)),
                ("is_auto_graded", models.BooleanField(default=True)),
                ("allow_review", models.BooleanField(default=True)),
                ("show_correct_answers", models.BooleanField(default=False)),
                ("due_date", models.DateTimeField(blank=True, null=True)),
                (
                    "tags",
                    models.JSONField(
                        blank=True, default=list, validators=[assessments.definitions.models.validate_tags]
                    ),
                ),
                (
                    "difficulty",
                    models.CharField(
                        choices=[("EASY", "Einfach"), ("MEDIUM", "Mittel"), ("HARD", "Schwer")],
                        default="MEDIUM",
                        max_length=10,
                    ),
                ),
                (
                    "total_points",
                    models.PositiveIntegerField(
                        default=0,
                        editable=False,
                        help_text="Summe der Fragenpunkte. Wird automatisch berechnet.",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="owned_assessments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Assessment",
                "verbose_name_plural": "Assessments",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["course_id", "kind"], name="assessment_course_kind_idx"),
                    models.Index(fields=["is_published"], name="assessment_published_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Question",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("text", models.CharField(max_length=1000)),
                (
                    "question_type",
                    models.CharField(
                        choices=[
                            ("MULTIPLE_CHOICE", "Multiple Choice"),
                            ("SINGLE_CHOICE", "Single Choice"),
                            ("TRUE_FALSE", "True/False"),
                            ("SHORT_ANSWER", "Short Answer"),
                            ("ESSAY", "Essay"),
                            ("FILE_UPLOAD", "File Upload"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "options",
                    models.JSONField(
                        blank=True, default=list, validators=[assessments.definitions.models.validate_options]
                    ),
                ),
                ("correct_answer", models.JSONField(blank=True, null=True)),
                (
                    "points",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(100),
                        ]
                    ),
                ),
                ("explanation", models.TextField(blank=True, max_length=1000)),
                ("is_required", models.BooleanField(default=True)),
                (
                    "order",
                    models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                (
                    "assessment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="questions",
                        to="assessments.assessment",
                    ),
                ),
            ],
            options={
                "verbose_name": "Question",
                "verbose_name_plural": "Questions",
                "ordering": ["assessment", "order"],
                "constraints": [
                    models.UniqueConstraint(fields=("assessment", "order"), name="unique_question_order"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Submission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("course_id", models.PositiveBigIntegerField(db_index=True)),
                (
                    "attempt_number",
                    models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("IN_PROGRESS", "In Bearbeitung"),
                            ("SUBMITTED", "Abgegeben"),
                            ("GRADED", "Bewertet"),
                            ("REVIEWED", "Geprüft"),
                        ],
                        default="IN_PROGRESS",
                        max_length=15,
                    ),
                ),
                ("start_time", models.DateTimeField()),
                ("submit_time", models.DateTimeField(blank=True, null=True)),
                ("time_spent_seconds", models.PositiveIntegerField(default=0)),
                ("is_time_limit_exceeded", models.BooleanField(default=False)),
                ("total_score", models.PositiveIntegerField(default=0)),
                (
                    "max_possible_score",
                    models.PositiveIntegerField(help_text="Punktesumme der Prüfung zum Startzeitpunkt."),
                ),
                (
                    "passing_score_percent",
                    models.PositiveSmallIntegerField(
                        help_text="Bestehensgrenze der Prüfung zum Startzeitpunkt.",
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(100),
                        ],
                    ),
                ),
                (
                    "percentage",
                    models.FloatField(
                        default=0,
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(100),
                        ],
                    ),
                ),
                ("passed", models.BooleanField(default=False)),
                ("graded_at", models.DateTimeField(blank=True, null=True)),
                ("comments", models.TextField(blank=True, max_length=2000)),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("user_agent", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "assessment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="submissions",
                        to="assessments.assessment",
                    ),
                ),
                (
                    "graded_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="graded_assessment_submissions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="assessment_submissions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Submission",
                "verbose_name_plural": "Submissions",
                "ordering": ["-attempt_number"],
                "indexes": [
                    models.Index(fields=["assessment", "user"], name="submission_assessment_user_idx"),
                    models.Index(fields=["user", "status"], name="submission_user_status_idx"),
                    models.Index(fields=["status"], name="submission_status_idx"),
                    models.Index(fields=["-submit_time"], name="submission_submit_time_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("assessment", "user", "attempt_number"), name="unique_assessment_attempt"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Answer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("question_index", models.PositiveIntegerField()),
                ("answer", models.JSONField(blank=True, null=True)),
                (
                    "is_correct",
                    models.BooleanField(blank=True, help_text="Leer = manuelle Prüfung ausstehend.", null=True),
                ),
                ("score", models.PositiveIntegerField(default=0)),
                ("feedback", models.CharField(blank=True, max_length=1000)),
                ("explanation", models.TextField(blank=True, max_length=1000)),
                ("time_spent_seconds", models.PositiveIntegerField(default=0)),
                (
                    "question",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="answers",
                        to="assessments.question",
                    ),
                ),
                (
                    "submission",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="answers",
                        to="assessments.submission",
                    ),
                ),
            ],
            options={
                "verbose_name": "Answer",
                "verbose_name_plural": "Answers",
                "ordering": ["submission", "question_index"],
                "constraints": [
                    models.UniqueConstraint(fields=("submission", "question_index"), name="unique_submission_answer"),
                ],
            },
        ),
    ]

from rest_framework import serializers

# Angepasste Importe
from .models import Assessment, Question


class QuestionSerializer(serializers.ModelSerializer):
    """Full question representation for authors, including the answer key."""

    class Meta:
        model = Question
        fields = [
            "id",
            "text",
            "question_type",
            "options",
            "correct_answer",
            "points",
            "explanation",
            "is_required",
            "order",
        ]
        extra_kwargs = {"order": {"required": False}}


class LearnerQuestionSerializer(serializers.ModelSerializer):
    """Question as shown to learners: no answer key, no explanation."""

    class Meta:
        model = Question
        fields = ["id", "text", "question_type", "options", "points", "is_required", "order"]
        read_only_fields = fields


class AssessmentSerializer(serializers.ModelSerializer):
    """
    Assessment with nested questions.

    Used to validate create/update payloads; persistence goes through the
    DefinitionService so that question replacement and point totals stay
    consistent.
    """

    questions = QuestionSerializer(many=True, required=False)
    question_count = serializers.IntegerField(read_only=True)
    owner = serializers.StringRelatedField(read_only=True)

    class Meta:
        model = Assessment
        fields = [
            "id",
            "course_id",
            "owner",
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
            "total_points",
            "question_count",
            "questions",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "course_id", "total_points", "created_at", "updated_at"]

    def to_internal_value(self, data):
        validated = super().to_internal_value(data)
        if "questions" in validated:
            validated["questions"] = [dict(question) for question in validated["questions"]]
        return validated


class LearnerAssessmentSerializer(serializers.ModelSerializer):
    questions = LearnerQuestionSerializer(many=True, read_only=True)
    question_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Assessment
        fields = [
            "id",
            "course_id",
            "title",
            "description",
            "instructions",
            "kind",
            "time_limit_minutes",
            "passing_score_percent",
            "max_attempts",
            "allow_review",
            "due_date",
            "tags",
            "difficulty",
            "total_points",
            "question_count",
            "questions",
        ]
        read_only_fields = fields


class AssessmentListSerializer(serializers.ModelSerializer):
    question_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Assessment
        fields = [
            "id",
            "title",
            "kind",
            "question_count",
            "total_points",
            "time_limit_minutes",
            "passing_score_percent",
            "max_attempts",
            "is_published",
            "due_date",
            "difficulty",
        ]
        read_only_fields = fields

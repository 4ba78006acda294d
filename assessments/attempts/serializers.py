from rest_framework import serializers

# Angepasste Importe
from .models import Answer, Submission


class AnswerInputSerializer(serializers.Serializer):
    answer = serializers.JSONField(required=False, allow_null=True, default=None)
    time_spent_seconds = serializers.IntegerField(required=False, min_value=0, default=0)


class SubmitAssessmentSerializer(serializers.Serializer):
    submission_id = serializers.IntegerField()
    answers = AnswerInputSerializer(many=True)


class AnswerSerializer(serializers.ModelSerializer):
    """
    Scored answer. The correct answer is only included when the context
    flag ``show_correct_answers`` is set.
    """

    correct_answer = serializers.SerializerMethodField()

    class Meta:
        model = Answer
        fields = [
            "question_index",
            "answer",
            "is_correct",
            "score",
            "feedback",
            "explanation",
            "correct_answer",
            "time_spent_seconds",
        ]

    def get_correct_answer(self, obj):
        if not self.context.get("show_correct_answers") or obj.question is None:
            return None
        return obj.question.correct_answer

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not self.context.get("show_correct_answers"):
            data.pop("correct_answer", None)
            data.pop("explanation", None)
        return data


class SubmissionSerializer(serializers.ModelSerializer):
    """
    Full submission. Answers are dropped unless the context flag
    ``include_answers`` is set (assessment allows review, or instructor view).
    """

    answers = AnswerSerializer(many=True, read_only=True)
    assessment_title = serializers.CharField(source="assessment.title", read_only=True)
    time_remaining_seconds = serializers.IntegerField(read_only=True)

    class Meta:
        model = Submission
        fields = [
            "id",
            "assessment",
            "assessment_title",
            "course_id",
            "attempt_number",
            "status",
            "start_time",
            "submit_time",
            "time_spent_seconds",
            "time_remaining_seconds",
            "is_time_limit_exceeded",
            "total_score",
            "max_possible_score",
            "passing_score_percent",
            "percentage",
            "passed",
            "graded_at",
            "answers",
        ]
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not self.context.get("include_answers"):
            data.pop("answers", None)
        return data


class InstructorSubmissionSerializer(SubmissionSerializer):
    user = serializers.StringRelatedField(read_only=True)
    graded_by = serializers.StringRelatedField(read_only=True)

    class Meta(SubmissionSerializer.Meta):
        fields = SubmissionSerializer.Meta.fields + [
            "user",
            "graded_by",
            "comments",
            "ip_address",
            "user_agent",
        ]
        read_only_fields = fields


class SubmissionStatisticsSerializer(serializers.Serializer):
    assessment_id = serializers.IntegerField()
    total_submissions = serializers.IntegerField()
    average_percentage = serializers.FloatField()
    min_percentage = serializers.FloatField()
    max_percentage = serializers.FloatField()
    passed_count = serializers.IntegerField()
    average_time_spent_seconds = serializers.FloatField()
    pending_review_count = serializers.IntegerField()

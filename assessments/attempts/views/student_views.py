from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

# Angepasste Importe
from ...definitions.serializers import LearnerAssessmentSerializer
from ...services.attempts import AttemptService
from ...services.results import ResultsService
from ..serializers import SubmissionSerializer, SubmitAssessmentSerializer


def _review_context(assessment) -> dict:
    return {
        "include_answers": assessment.allow_review,
        "show_correct_answers": assessment.allow_review and assessment.show_correct_answers,
    }


class StartAssessmentView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, assessment_id):
        started = AttemptService().start(
            assessment_id,
            request.user,
            ip_address=request.META.get("REMOTE_ADDR"),
            user_agent=request.META.get("HTTP_USER_AGENT", ""),
        )
        submission = started.submission

        return Response(
            {
                "message": "Resuming existing attempt" if started.resumed else "Assessment started successfully",
                "resumed": started.resumed,
                "submission": SubmissionSerializer(submission).data,
                "assessment": LearnerAssessmentSerializer(submission.assessment).data,
            },
            status=status.HTTP_200_OK if started.resumed else status.HTTP_201_CREATED,
        )


class SubmitAssessmentView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, assessment_id):
        serializer = SubmitAssessmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        submission = AttemptService().submit(
            serializer.validated_data["submission_id"],
            request.user,
            serializer.validated_data["answers"],
            assessment_id=assessment_id,
        )
        assessment = submission.assessment

        return Response(
            {
                "message": "Assessment submitted successfully",
                "auto_graded": assessment.is_auto_graded,
                "show_correct_answers": assessment.show_correct_answers,
                "submission": SubmissionSerializer(
                    submission, context=_review_context(assessment)
                ).data,
            },
            status=status.HTTP_200_OK,
        )


class MySubmissionsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, assessment_id):
        submissions = ResultsService().list_submissions(assessment_id, request.user)
        context = _review_context(submissions[0].assessment) if submissions else {}
        return Response(SubmissionSerializer(submissions, many=True, context=context).data)


class BestSubmissionView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, assessment_id):
        submission = ResultsService().best_submission(assessment_id, request.user)
        if submission is None:
            return Response({"submission": None})
        return Response(
            {
                "submission": SubmissionSerializer(
                    submission, context=_review_context(submission.assessment)
                ).data
            }
        )

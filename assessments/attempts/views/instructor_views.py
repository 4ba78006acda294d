from rest_framework import permissions
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework.views import APIView

# Angepasste Importe
from ...conf import get_setting
from ...exceptions import AccessDeniedError
from ...services.results import ResultsService
from ..serializers import InstructorSubmissionSerializer, SubmissionStatisticsSerializer


class ResultsPagination(PageNumberPagination):
    page_size_query_param = "limit"
    max_page_size = 100

    def get_page_size(self, request):
        self.page_size = get_setting("RESULTS_PAGE_SIZE")
        return super().get_page_size(request)


class AssessmentResultsView(APIView):
    """All finalized submissions of an assessment (owner/admin), paginated."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, assessment_id):
        submissions = ResultsService().assessment_results(request.user, assessment_id)

        paginator = ResultsPagination()
        page = paginator.paginate_queryset(submissions, request, view=self)
        serializer = InstructorSubmissionSerializer(
            page,
            many=True,
            context={"include_answers": True, "show_correct_answers": True},
        )
        return paginator.get_paginated_response(serializer.data)


class AssessmentStatisticsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, assessment_id):
        service = ResultsService()
        if not service.can_view_results(request.user, assessment_id):
            raise AccessDeniedError("Only assessment owner or admin can view statistics")

        statistics = service.submission_statistics(assessment_id)
        return Response(SubmissionStatisticsSerializer(statistics.to_dict()).data)

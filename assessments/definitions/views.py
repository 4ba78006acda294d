from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

# Angepasste Importe
from ..services.definitions import DefinitionService
from .serializers import (
    AssessmentListSerializer,
    AssessmentSerializer,
    LearnerAssessmentSerializer,
)


class CourseAssessmentListCreateView(APIView):
    """List the assessments of a course, or create one (owner/admin)."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, course_id):
        service = DefinitionService()
        assessments = service.list_course_assessments(
            request.user,
            course_id,
            kind=request.query_params.get("kind"),
            status=request.query_params.get("status"),
            search=request.query_params.get("search"),
        )
        serializer = AssessmentListSerializer(assessments, many=True)
        return Response(serializer.data)

    def post(self, request, course_id):
        serializer = AssessmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        assessment = DefinitionService().create_assessment(
            request.user, course_id, serializer.validated_data
        )
        return Response(
            AssessmentSerializer(assessment).data, status=status.HTTP_201_CREATED
        )


class AssessmentDetailView(APIView):
    """Retrieve, update or delete a single assessment."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, assessment_id):
        service = DefinitionService()
        assessment = service.get_assessment(request.user, assessment_id)

        # Autoren sehen den Lösungsschlüssel, Lernende nicht
        if service.access_policy.can_manage_assessment(request.user, assessment):
            return Response(AssessmentSerializer(assessment).data)
        return Response(LearnerAssessmentSerializer(assessment).data)

    def put(self, request, assessment_id):
        return self._update(request, assessment_id, partial=False)

    def patch(self, request, assessment_id):
        return self._update(request, assessment_id, partial=True)

    def delete(self, request, assessment_id):
        DefinitionService().delete_assessment(request.user, assessment_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    def _update(self, request, assessment_id, partial):
        serializer = AssessmentSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        assessment = DefinitionService().update_assessment(
            request.user, assessment_id, serializer.validated_data
        )
        return Response(AssessmentSerializer(assessment).data)

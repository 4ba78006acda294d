"""
Assessment Application URL Configuration

This module defines the URL routing for the assessment engine.

URL Structure (mounted under /api/assessments/):
- courses/<course_id>/: Assessment listing and creation per course
- <assessment_id>/: Assessment detail, update and deletion
- <assessment_id>/start|submit/: Attempt lifecycle for learners
- <assessment_id>/submissions/: A learner's own attempts
- <assessment_id>/results|statistics/: Instructor evaluation

Author: DSP Development Team
Version: 1.0.0
"""

from typing import List

from django.urls import URLPattern, path

# Import der Views
from .attempts import views as attempt_views
from .definitions import views as definition_views

app_name = "assessments"

# --- Definition URL Patterns ---

definition_urlpatterns: List[URLPattern] = [
    path(
        "courses/<int:course_id>/",
        definition_views.CourseAssessmentListCreateView.as_view(),
        name="course-assessments",
    ),
    path(
        "<int:assessment_id>/",
        definition_views.AssessmentDetailView.as_view(),
        name="assessment-detail",
    ),
]

# --- Attempt URL Patterns ---

attempt_urlpatterns: List[URLPattern] = [
    # Learner attempt lifecycle
    path("<int:assessment_id>/start/", attempt_views.StartAssessmentView.as_view(), name="start-assessment"),
    path("<int:assessment_id>/submit/", attempt_views.SubmitAssessmentView.as_view(), name="submit-assessment"),
    # Learner results
    path("<int:assessment_id>/submissions/", attempt_views.MySubmissionsView.as_view(), name="my-submissions"),
    path(
        "<int:assessment_id>/submissions/best/",
        attempt_views.BestSubmissionView.as_view(),
        name="best-submission",
    ),
    # Instructor evaluation (owner/admin)
    path("<int:assessment_id>/results/", attempt_views.AssessmentResultsView.as_view(), name="assessment-results"),
    path(
        "<int:assessment_id>/statistics/",
        attempt_views.AssessmentStatisticsView.as_view(),
        name="assessment-statistics",
    ),
]

urlpatterns: List[URLPattern] = definition_urlpatterns + attempt_urlpatterns

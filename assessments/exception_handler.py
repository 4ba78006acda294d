"""
DRF exception handler that renders assessment engine errors as JSON.

Registered as ``REST_FRAMEWORK["EXCEPTION_HANDLER"]``; every other exception
is left to DRF's default handler.
"""

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import AssessmentEngineException

logger = logging.getLogger(__name__)


def assessment_exception_handler(exc, context):
    if isinstance(exc, AssessmentEngineException):
        view = context.get("view")
        logger.info(
            f"{exc.__class__.__name__} in {view.__class__.__name__ if view else 'unknown view'}: "
            f"{exc.message}"
        )
        return Response(exc.to_dict(), status=exc.status_code)
    return exception_handler(exc, context)

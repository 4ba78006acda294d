"""
Grading Services Package

Pure scoring of answers against question definitions.

Author: DSP Development Team
Version: 1.0.0
"""

from .grading_service import (
    GRADERS,
    GradedAnswer,
    GradingResult,
    aggregate_scores,
    calculate_percentage,
    grade_answer,
    grade_submission,
)

__all__ = [
    "GRADERS",
    "GradedAnswer",
    "GradingResult",
    "aggregate_scores",
    "calculate_percentage",
    "grade_answer",
    "grade_submission",
]

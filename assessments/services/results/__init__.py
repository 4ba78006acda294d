"""
Results Services Package

Read-only aggregation over finalized submissions.

Author: DSP Development Team
Version: 1.0.0
"""

from .results_service import ResultsService, SubmissionStatistics

__all__ = ["ResultsService", "SubmissionStatistics"]

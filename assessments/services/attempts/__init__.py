"""
Attempt Services Package

Start/resume and submit lifecycle of assessment attempts.

Author: DSP Development Team
Version: 1.0.0
"""

from .attempt_service import AttemptService, AttemptStart

__all__ = ["AttemptService", "AttemptStart"]

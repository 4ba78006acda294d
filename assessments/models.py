"""
Assessment Application Models Registry

This module serves as the central models registry for the assessment
application. It imports and exposes all models from the logical submodules
(definitions, attempts) so they are registered with Django's ORM.

Architecture:
- definitions/: Assessment and question models
- attempts/: Submission and answer models

Author: DSP Development Team
Version: 1.0.0
"""

# Import all definition models for registration with Django ORM
from .definitions.models import *

# Import all attempt models for registration with Django ORM
from .attempts.models import *

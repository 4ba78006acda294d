"""
Definition Services Package

Creation, update and deletion of assessment definitions.

Author: DSP Development Team
Version: 1.0.0
"""

from .definition_service import DefinitionService

__all__ = ["DefinitionService"]

"""
Assessment engine settings access.

All engine options live in the ``ASSESSMENTS`` dict of the Django settings;
missing keys fall back to the defaults below.
"""

from typing import Any, Dict

from django.conf import settings

DEFAULTS: Dict[str, Any] = {
    "START_RETRY_LIMIT": 3,
    "ACCESS_POLICY": "assessments.access.StaffCourseAccessPolicy",
    "INSTRUCTOR_GROUP": "instructors",
    "RESULTS_PAGE_SIZE": 20,
}


def get_setting(name: str) -> Any:
    """Return the configured value for ``name`` or its default."""
    if name not in DEFAULTS:
        raise KeyError(f"Unknown assessment setting: {name}")
    return getattr(settings, "ASSESSMENTS", {}).get(name, DEFAULTS[name])

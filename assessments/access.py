from django.utils.module_loading import import_string

from .conf import get_setting

# ------------------------------------------------------------
# Authorization collaborator: who may author assessments of a
# course and who may take them. Course membership itself lives
# outside this app; swap the policy via ASSESSMENTS["ACCESS_POLICY"].
# ------------------------------------------------------------


def is_platform_admin(user) -> bool:
    """Returns True for authenticated staff or superusers."""
    return bool(
        user
        and user.is_authenticated
        and (user.is_staff or user.is_superuser)
    )


class CourseAccessPolicy:
    """Interface for the course-level checks the engine relies on."""

    def can_manage_course(self, user, course_id: int) -> bool:
        raise NotImplementedError

    def is_enrolled(self, user, course_id: int) -> bool:
        raise NotImplementedError

    def can_manage_assessment(self, user, assessment) -> bool:
        """Owner of the assessment, an admin, or someone managing its course."""
        if not user or not user.is_authenticated:
            return False
        if is_platform_admin(user):
            return True
        if assessment.owner_id is not None and assessment.owner_id == user.pk:
            return True
        return self.can_manage_course(user, assessment.course_id)


class StaffCourseAccessPolicy(CourseAccessPolicy):
    """
    Default policy: admins and members of the instructor group manage every
    course; every authenticated user counts as enrolled.
    """

    def can_manage_course(self, user, course_id: int) -> bool:
        if is_platform_admin(user):
            return True
        if not user or not user.is_authenticated:
            return False
        group_name = get_setting("INSTRUCTOR_GROUP")
        return user.groups.filter(name=group_name).exists()

    def is_enrolled(self, user, course_id: int) -> bool:
        return bool(user and user.is_authenticated)


def get_access_policy() -> CourseAccessPolicy:
    """Instantiate the configured access policy."""
    policy_class = import_string(get_setting("ACCESS_POLICY"))
    return policy_class()

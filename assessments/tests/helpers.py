"""
Gemeinsame Testdaten für die Assessment-Tests.
"""

from django.contrib.auth.models import Group, User

from assessments.definitions.models import Assessment, Question, QuestionType


def make_user(username, staff=False, instructor=False):
    user = User.objects.create_user(
        username=username,
        password="Musterpassword",
        email=f"{username}@test.com",
        is_staff=staff,
    )
    if instructor:
        group, _ = Group.objects.get_or_create(name="instructors")
        user.groups.add(group)
    return user


def make_assessment(questions=None, owner=None, course_id=1, **fields):
    """
    Creates a published assessment directly through the ORM.

    ``questions`` is a list of dicts with at least ``question_type``,
    ``points`` and (for objective types) ``correct_answer``.
    """
    if questions is None:
        questions = [
            {"question_type": QuestionType.MULTIPLE_CHOICE, "points": 5, "correct_answer": "A"},
            {"question_type": QuestionType.MULTIPLE_CHOICE, "points": 5, "correct_answer": "B"},
        ]
    defaults = {
        "title": "Python Grundlagen",
        "kind": "QUIZ",
        "is_published": True,
        "passing_score_percent": 50,
        "max_attempts": 1,
    }
    defaults.update(fields)
    assessment = Assessment.objects.create(course_id=course_id, owner=owner, **defaults)
    for index, data in enumerate(questions):
        data = dict(data)
        data.setdefault("text", f"Frage {index + 1}")
        data.setdefault("options", ["A", "B", "C", "D"])
        data.setdefault("order", index + 1)
        Question.objects.create(assessment=assessment, **data)
    assessment.refresh_total_points()
    return assessment

"""
Grading Service for the Assessment Engine

Pure scoring functions: question definitions and raw answers in, scored
answers and aggregate results out. Nothing here touches the database, so the
same input always yields the same result.

Rules:
- Objective types (multiple/single choice, true/false): exact match against
  the stored correct answer, full points or none
- Subjective types (short answer, essay, file upload): no score, pending
  manual review
- Blank answers: no score, marked incorrect
- Unknown types or failing graders: no score for that answer only

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ...definitions.models import QuestionType, is_empty_value

logger = logging.getLogger(__name__)

CORRECT_FEEDBACK = "Correct!"
INCORRECT_FEEDBACK = "Incorrect. The correct answer was: {correct_answer}"
PENDING_REVIEW_FEEDBACK = "Pending manual review"
NO_ANSWER_FEEDBACK = "No answer provided"
INVALID_TYPE_FEEDBACK = "Invalid question type"


@dataclass(frozen=True)
class GradedAnswer:
    """Scored response to one question."""

    question_index: int
    answer: Any
    is_correct: Optional[bool]
    score: int
    feedback: str
    explanation: str = ""
    time_spent_seconds: int = 0

    @property
    def is_pending_review(self) -> bool:
        return self.is_correct is None


@dataclass(frozen=True)
class GradingResult:
    """Scored answers plus the aggregate of one submission."""

    answers: List[GradedAnswer]
    total_score: int
    max_possible_score: int
    percentage: float
    passed: bool
    pending_review_count: int = field(default=0)


def _grade_objective(question, raw_answer) -> Tuple[Optional[bool], int, str]:
    is_correct = raw_answer == question.correct_answer
    if is_correct:
        return True, question.points, CORRECT_FEEDBACK
    return False, 0, INCORRECT_FEEDBACK.format(correct_answer=question.correct_answer)


def _grade_pending_review(question, raw_answer) -> Tuple[Optional[bool], int, str]:
    return None, 0, PENDING_REVIEW_FEEDBACK


# Every QuestionType member needs an entry here.
GRADERS: Dict[str, Callable[[Any, Any], Tuple[Optional[bool], int, str]]] = {
    QuestionType.MULTIPLE_CHOICE: _grade_objective,
    QuestionType.SINGLE_CHOICE: _grade_objective,
    QuestionType.TRUE_FALSE: _grade_objective,
    QuestionType.SHORT_ANSWER: _grade_pending_review,
    QuestionType.ESSAY: _grade_pending_review,
    QuestionType.FILE_UPLOAD: _grade_pending_review,
}


def grade_answer(
    question,
    raw_answer: Any,
    question_index: int = 0,
    time_spent_seconds: int = 0,
) -> GradedAnswer:
    """
    Score one raw answer against its question.

    Args:
        question: Object exposing ``question_type``, ``points``,
            ``correct_answer`` and optionally ``explanation``
        raw_answer: The learner's value, ``None`` when absent
        question_index: Position of the question in the assessment
        time_spent_seconds: Time the learner reported for this question

    Returns:
        GradedAnswer with correctness (``None`` = pending review), score and feedback
    """
    explanation = getattr(question, "explanation", "") or ""

    def _result(is_correct, score, feedback):
        return GradedAnswer(
            question_index=question_index,
            answer=raw_answer,
            is_correct=is_correct,
            score=score,
            feedback=feedback,
            explanation=explanation,
            time_spent_seconds=time_spent_seconds,
        )

    if is_empty_value(raw_answer):
        return _result(False, 0, NO_ANSWER_FEEDBACK)

    grader = GRADERS.get(question.question_type)
    if grader is None:
        logger.warning(
            f"Unknown question type {question.question_type!r} at index {question_index}"
        )
        return _result(False, 0, INVALID_TYPE_FEEDBACK)

    try:
        is_correct, score, feedback = grader(question, raw_answer)
    except Exception:
        # One broken question must not cost the learner the other answers.
        logger.exception(f"Grading failed for question at index {question_index}")
        return _result(False, 0, INVALID_TYPE_FEEDBACK)

    return _result(is_correct, score, feedback)


def calculate_percentage(total_score: int, max_possible_score: int) -> float:
    """Percentage of ``max_possible_score`` reached, clamped to [0, 100]."""
    if max_possible_score <= 0:
        return 0.0
    percentage = total_score / max_possible_score * 100
    return min(100.0, max(0.0, percentage))


def aggregate_scores(
    answers: Sequence[GradedAnswer],
    max_possible_score: int,
    passing_score_percent: float,
) -> Tuple[int, float, bool]:
    """
    Sum the answer scores and derive percentage and pass/fail.

    Returns:
        Tuple (total_score, percentage, passed)
    """
    total_score = sum(answer.score for answer in answers)
    percentage = calculate_percentage(total_score, max_possible_score)
    return total_score, percentage, percentage >= passing_score_percent


def _split_answer(entry: Any) -> Tuple[Any, int]:
    """Accepts ``{"answer": ..., "time_spent_seconds": n}`` mappings or ``None``."""
    if entry is None:
        return None, 0
    if isinstance(entry, Mapping):
        time_spent = entry.get("time_spent_seconds") or 0
        return entry.get("answer"), max(0, int(time_spent))
    return entry, 0


def grade_submission(
    questions: Sequence[Any],
    answers: Sequence[Any],
    max_possible_score: int,
    passing_score_percent: float,
    auto_graded: bool = True,
) -> GradingResult:
    """
    Grade a full answer list positionally against the ordered questions.

    Questions without a matching answer are graded as unanswered and count
    towards ``max_possible_score`` with zero points. When ``auto_graded`` is
    False every answer stays pending review and no aggregate is computed.

    Args:
        questions: Questions ordered by position
        answers: Answer entries by position (mapping, raw value or ``None``)
        max_possible_score: Point total snapshotted when the attempt started
        passing_score_percent: Threshold snapshotted when the attempt started
        auto_graded: Whether the assessment is scored automatically

    Returns:
        GradingResult with the graded answers and aggregate
    """
    graded: List[GradedAnswer] = []
    for index, question in enumerate(questions):
        raw_answer, time_spent = _split_answer(answers[index] if index < len(answers) else None)

        if auto_graded:
            graded.append(grade_answer(question, raw_answer, index, time_spent))
        else:
            feedback = NO_ANSWER_FEEDBACK if is_empty_value(raw_answer) else PENDING_REVIEW_FEEDBACK
            graded.append(
                GradedAnswer(
                    question_index=index,
                    answer=raw_answer,
                    is_correct=None,
                    score=0,
                    feedback=feedback,
                    explanation=getattr(question, "explanation", "") or "",
                    time_spent_seconds=time_spent,
                )
            )

    pending = sum(1 for answer in graded if answer.is_pending_review)

    if not auto_graded:
        return GradingResult(
            answers=graded,
            total_score=0,
            max_possible_score=max_possible_score,
            percentage=0.0,
            passed=False,
            pending_review_count=pending,
        )

    total_score, percentage, passed = aggregate_scores(
        graded, max_possible_score, passing_score_percent
    )
    return GradingResult(
        answers=graded,
        total_score=total_score,
        max_possible_score=max_possible_score,
        percentage=percentage,
        passed=passed,
        pending_review_count=pending,
    )

"""
Assessment Engine Custom Exceptions

This module provides the exception classes raised by the assessment services.
They follow a hierarchical structure so callers can handle a whole family of
errors (e.g. every conflict) or one specific case, and every exception knows
the HTTP status it maps to when rendered by the API layer.

Author: DSP Development Team
Version: 1.0.0
"""

from typing import Optional, Dict, Any


class AssessmentEngineException(Exception):
    """
    Base exception class for all assessment engine errors.

    Attributes:
        message (str): Human-readable error message
        status_code (int): HTTP status code used by the API layer
        error_code (str): Stable machine-readable identifier
        details (Dict[str, Any]): Additional error details (e.g. field errors)

    Example:
        >>> try:
        ...     service.start(assessment_id, user)
        ... except AssessmentEngineException as e:
        ...     logger.error(f"Assessment error: {e.message}")
    """

    status_code: int = 400
    error_code: str = "AssessmentError"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize an assessment engine exception.

        Args:
            message: Human-readable error description
            status_code: Overrides the class default HTTP status
            error_code: Overrides the class default error identifier
            details: Additional context or error details
        """
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "message": self.message,
            "status_code": self.status_code,
            "error_code": self.error_code,
            "details": self.details,
            "exception_type": self.__class__.__name__,
        }


class AssessmentValidationError(AssessmentEngineException):
    """
    Raised for malformed assessment, question or answer payloads.

    ``details`` carries the per-field messages, e.g.
    ``{"questions": {"0": ["A correct answer is required ..."]}}``.
    """

    status_code = 400
    error_code = "ValidationError"


class NotFoundError(AssessmentEngineException):
    """Raised when an assessment or submission does not exist (for this caller)."""

    status_code = 404
    error_code = "NotFound"

    def __init__(self, resource: str, identifier: Any = None) -> None:
        message = f"{resource} not found"
        details = {"resource": resource}
        if identifier is not None:
            details["id"] = identifier
        super().__init__(message, details=details)


class AccessDeniedError(AssessmentEngineException):
    """
    Raised when the actor lacks the required role, ownership or enrollment.
    """

    status_code = 403
    error_code = "Forbidden"


class ConflictError(AssessmentEngineException):
    """
    Raised when an operation conflicts with existing records, e.g. deleting an
    assessment that still has submissions.
    """

    status_code = 409
    error_code = "Conflict"


class AttemptLimitExceeded(ConflictError):
    """Raised when a learner has used up every attempt of an assessment."""

    error_code = "AttemptLimitExceeded"

    def __init__(self, max_attempts: int) -> None:
        super().__init__(
            "Maximum attempts reached for this assessment",
            details={"max_attempts": max_attempts},
        )


class AlreadyFinalized(ConflictError):
    """Raised when submitting an attempt that is no longer in progress."""

    error_code = "AlreadyFinalized"

    def __init__(self, submission_id: Any, status: Optional[str] = None) -> None:
        details = {"submission_id": submission_id}
        if status is not None:
            details["status"] = status
        super().__init__("Submission has already been submitted", details=details)


class ConcurrencyRetryExhausted(AssessmentEngineException):
    """
    Raised when starting an attempt keeps colliding on the attempt number.

    The collision is normally resolved by re-reading existing attempts; running
    out of retries points to a persistence fault rather than a real race.
    """

    status_code = 503
    error_code = "ConcurrencyRetryExhausted"

    def __init__(self, retries: int) -> None:
        super().__init__(
            "Could not allocate an attempt number, please try again",
            details={"retries": retries},
        )

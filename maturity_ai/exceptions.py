"""
Exception hierarchy for the Maturity Assessment pipeline.

- State errors: an operation attempted outside the legal session status
- Reference errors: unknown sessions or questions
- Validation errors: answers that do not fit their question
- Analyzer failures: raised inside the aggregator only, logged and downgraded

Usage:
    from maturity_ai.exceptions import InvalidSessionState

    try:
        service.submit_answer(session_id, "Q_FIN_001", 250000)
    except InvalidSessionState as e:
        logger.warning(f"Rejected answer: {e} ({e.details})")
"""

from __future__ import annotations

from typing import Iterable, Optional


class AssessmentError(Exception):
    """
    Base exception for all assessment pipeline errors.

    Catch `AssessmentError` to handle any pipeline-specific error.
    """

    def __init__(self, message: str, *, details: Optional[dict] = None):
        super().__init__(message)
        self.details = details or {}


# ── Session state ─────────────────────────────────────────────────

class InvalidSessionState(AssessmentError):
    """Raised when a transition or mutation is not legal for the current status."""

    def __init__(
        self,
        message: str,
        *,
        session_id: Optional[str] = None,
        status: Optional[str] = None,
        allowed: Optional[Iterable[str]] = None,
        details: Optional[dict] = None,
    ):
        allowed = tuple(allowed or ())
        super().__init__(
            message,
            details={
                **(details or {}),
                "session_id": session_id,
                "status": status,
                "allowed": list(allowed),
            },
        )
        self.session_id = session_id
        self.status = status
        self.allowed = allowed


# ── References ────────────────────────────────────────────────────

class SessionNotFound(AssessmentError):
    """Raised when a session id does not resolve to a stored session."""

    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}", details={"session_id": session_id})
        self.session_id = session_id


class QuestionNotFound(AssessmentError):
    """Raised for unknown or inactive question references."""

    def __init__(self, question_id: str, *, inactive: bool = False):
        reason = "inactive" if inactive else "unknown"
        super().__init__(
            f"Question not found ({reason}): {question_id}",
            details={"question_id": question_id, "inactive": inactive},
        )
        self.question_id = question_id
        self.inactive = inactive


# ── Answers ───────────────────────────────────────────────────────

class InvalidAnswer(AssessmentError):
    """Raised when a submitted value does not satisfy the question's rules."""

    def __init__(self, message: str, *, question_id: str, value=None):
        super().__init__(message, details={"question_id": question_id, "value": value})
        self.question_id = question_id
        self.value = value


# ── Analyzers ─────────────────────────────────────────────────────

class AnalyzerFailure(AssessmentError):
    """
    A single analyzer raised while analyzing.

    Never propagated to callers: the aggregator logs it and drops that
    analyzer's contribution.
    """

    def __init__(self, message: str, *, analyzer_id: str, cause: Optional[BaseException] = None):
        super().__init__(
            message,
            details={
                "analyzer_id": analyzer_id,
                "error_type": type(cause).__name__ if cause else None,
            },
        )
        self.analyzer_id = analyzer_id
        self.cause = cause

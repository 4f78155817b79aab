"""
Assessment session state machine

    draft -> in_progress -> completed
                         -> abandoned
    draft -> abandoned

completed and abandoned are terminal. Every mutation checks the transition
table first and raises InvalidSessionState without touching the session
when the move is not allowed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional
import logging

from ..exceptions import InvalidSessionState

logger = logging.getLogger(__name__)


class SessionStatus(Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self]

    @property
    def accepts_answers(self) -> bool:
        return self is SessionStatus.IN_PROGRESS


TRANSITIONS: Mapping[SessionStatus, FrozenSet[SessionStatus]] = MappingProxyType({
    SessionStatus.DRAFT: frozenset({SessionStatus.IN_PROGRESS, SessionStatus.ABANDONED}),
    SessionStatus.IN_PROGRESS: frozenset({SessionStatus.COMPLETED, SessionStatus.ABANDONED}),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.ABANDONED: frozenset(),
})


def compute_progress(answered: int, total: int) -> float:
    """round(answered / total * 100, 2) clamped to [0, 100]; 0 when total is 0."""
    if total <= 0:
        return 0.0
    return max(0.0, min(100.0, round(answered / total * 100, 2)))


@dataclass
class AssessmentSession:
    """In-memory view of a session; persisted by SessionRepository."""
    id: str
    company_id: Optional[str] = None
    user_id: Optional[str] = None
    session_name: Optional[str] = None
    session_type: str = "full"
    status: SessionStatus = SessionStatus.DRAFT
    current_question_id: Optional[str] = None
    questions_answered: int = 0
    questions_total: int = 0
    progress_percentage: float = 0.0
    context_data: Dict[str, Any] = field(default_factory=dict)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def sector(self) -> Optional[str]:
        return self.context_data.get("sector")

    def can_transition_to(self, target: SessionStatus) -> bool:
        return target in TRANSITIONS[self.status]

    def _transition(self, target: SessionStatus) -> None:
        if not self.can_transition_to(target):
            raise InvalidSessionState(
                f"Cannot move session {self.id} from {self.status.value} to {target.value}",
                session_id=self.id,
                status=self.status.value,
                allowed=sorted(s.value for s in TRANSITIONS[self.status]),
            )
        logger.info(f"Session {self.id}: {self.status.value} -> {target.value}")
        self.status = target
        self.updated_at = datetime.utcnow()

    def require_status(self, *statuses: SessionStatus) -> None:
        """Raise unless the session is currently in one of `statuses`."""
        if self.status not in statuses:
            raise InvalidSessionState(
                f"Session {self.id} is {self.status.value}",
                session_id=self.id,
                status=self.status.value,
                allowed=[s.value for s in statuses],
            )

    def start(self) -> None:
        self._transition(SessionStatus.IN_PROGRESS)
        self.started_at = datetime.utcnow()

    def advance(self, question_id: Optional[str], answered: int, total: int) -> None:
        """Move the pointer and recompute progress. Only while in progress."""
        self.require_status(SessionStatus.IN_PROGRESS)
        self.current_question_id = question_id
        self.questions_answered = answered
        self.questions_total = total
        self.progress_percentage = compute_progress(answered, total)
        self.updated_at = datetime.utcnow()

    def complete(self) -> None:
        self._transition(SessionStatus.COMPLETED)
        self.completed_at = datetime.utcnow()
        self.current_question_id = None
        self.progress_percentage = 100.0

    def abandon(self) -> None:
        self._transition(SessionStatus.ABANDONED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "company_id": self.company_id,
            "user_id": self.user_id,
            "session_name": self.session_name,
            "session_type": self.session_type,
            "status": self.status.value,
            "current_question_id": self.current_question_id,
            "questions_answered": self.questions_answered,
            "questions_total": self.questions_total,
            "progress_percentage": self.progress_percentage,
            "context_data": dict(self.context_data),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

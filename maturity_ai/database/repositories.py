"""
Repositories over the Flask-SQLAlchemy models.

Repositories only flush; the service owns commit and rollback so that a
submit or completion is one transaction.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional
import logging

from sqlalchemy import func, update

from ..assessment.session import AssessmentSession, SessionStatus
from ..exceptions import SessionNotFound
from .models import db, AssessmentSessionRecord, AnswerRecord, AnalysisResultRecord

logger = logging.getLogger(__name__)


class SessionRepository:
    """Session store: load, add, save and conditional status writes."""

    def get_record(self, session_id: str) -> Optional[AssessmentSessionRecord]:
        return db.session.get(AssessmentSessionRecord, session_id)

    def load(self, session_id: str) -> AssessmentSession:
        record = self.get_record(session_id)
        if record is None:
            raise SessionNotFound(session_id)
        return record.to_session()

    def add(self, session: AssessmentSession) -> AssessmentSessionRecord:
        record = AssessmentSessionRecord.from_session(session)
        db.session.add(record)
        db.session.flush()
        return record

    def save(self, session: AssessmentSession) -> AssessmentSessionRecord:
        """Unconditional write of every session field."""
        record = self.get_record(session.id)
        if record is None:
            raise SessionNotFound(session.id)
        record.apply(session)
        db.session.flush()
        return record

    def compare_and_set(self, session: AssessmentSession, expected_status: SessionStatus) -> bool:
        """
        Write `session` only if the stored status is still `expected_status`.

        A single UPDATE ... WHERE id = ? AND status = ?; the affected row
        count decides whether the write won.
        """
        stmt = (
            update(AssessmentSessionRecord)
            .where(AssessmentSessionRecord.id == session.id)
            .where(AssessmentSessionRecord.status == expected_status.value)
            .values(
                status=session.status.value,
                current_question_id=session.current_question_id,
                questions_answered=session.questions_answered,
                questions_total=session.questions_total,
                progress_percentage=session.progress_percentage,
                context_data=dict(session.context_data),
                started_at=session.started_at,
                completed_at=session.completed_at,
                updated_at=session.updated_at,
            )
            .execution_options(synchronize_session='evaluate')
        )
        result = db.session.execute(stmt)
        won = result.rowcount == 1
        if not won:
            logger.warning(
                f"Conditional write lost for session {session.id} "
                f"(expected {expected_status.value})"
            )
        return won


class AnswerRepository:
    """Answer store with idempotent upsert per (session, question)."""

    def get(self, session_id: str, question_id: str) -> Optional[AnswerRecord]:
        return AnswerRecord.query.filter_by(session_id=session_id, question_id=question_id).first()

    def upsert_answer(
        self,
        session_id: str,
        question_id: str,
        value: Any,
        normalized: Optional[Dict[str, Any]] = None,
        *,
        confidence_score: float = 1.0,
        source: str = 'user',
        is_skipped: bool = False,
        skip_reason: Optional[str] = None,
        time_spent_seconds: Optional[int] = None
    ) -> AnswerRecord:
        record = self.get(session_id, question_id)
        if record is None:
            record = AnswerRecord(session_id=session_id, question_id=question_id)
            db.session.add(record)

        record.answer_value = value
        record.answer_normalized = normalized
        record.confidence_score = confidence_score
        record.source = source
        record.is_skipped = is_skipped
        record.skip_reason = skip_reason
        record.time_spent_seconds = time_spent_seconds
        db.session.flush()
        return record

    def list_for_session(self, session_id: str) -> List[AnswerRecord]:
        return (
            AnswerRecord.query
            .filter_by(session_id=session_id)
            .order_by(AnswerRecord.created_at, AnswerRecord.id)
            .all()
        )

    def get_answers(self, session_id: str, field_map: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """
        Answer map for a session.

        Keys are question ids; when `field_map` (question_id -> field) is
        given each value is also exposed under its field name. Skipped
        questions are present with a None value.
        """
        answers: Dict[str, Any] = {}
        for record in self.list_for_session(session_id):
            value = None if record.is_skipped else record.answer_value
            answers[record.question_id] = value
            if field_map and record.question_id in field_map:
                answers[field_map[record.question_id]] = value
        return answers

    def count(self, session_id: str, question_ids: Optional[Iterable[str]] = None) -> int:
        query = db.session.query(func.count(AnswerRecord.id)).filter(AnswerRecord.session_id == session_id)
        if question_ids is not None:
            query = query.filter(AnswerRecord.question_id.in_(list(question_ids)))
        return query.scalar() or 0


class AnalysisResultRepository:
    """Append-only analysis history per session."""

    def append(self, session_id: str, payload: Mapping[str, Any]) -> AnalysisResultRecord:
        record = AnalysisResultRecord(
            session_id=session_id,
            composite_score=payload.get('composite_score'),
            maturity_level=payload.get('maturity_level'),
            plan_type=payload.get('plan_type'),
            dimension_scores=payload.get('dimension_scores', {}),
            insights=payload.get('insights', []),
            alerts=payload.get('alerts', []),
            swot=payload.get('swot', {}),
            recommendations=payload.get('recommendations', {}),
            opportunities=payload.get('opportunities', []),
            flags=payload.get('flags', {}),
            analyzers_run=payload.get('analyzers_run', []),
            failed_analyzers=payload.get('failed_analyzers', []),
        )
        db.session.add(record)
        db.session.flush()
        return record

    def history(self, session_id: str) -> List[AnalysisResultRecord]:
        return (
            AnalysisResultRecord.query
            .filter_by(session_id=session_id)
            .order_by(AnalysisResultRecord.created_at)
            .all()
        )

    def latest(self, session_id: str) -> Optional[AnalysisResultRecord]:
        return (
            AnalysisResultRecord.query
            .filter_by(session_id=session_id)
            .order_by(AnalysisResultRecord.created_at.desc())
            .first()
        )

    def count(self, session_id: Optional[str] = None) -> int:
        query = db.session.query(func.count(AnalysisResultRecord.id))
        if session_id is not None:
            query = query.filter(AnalysisResultRecord.session_id == session_id)
        return query.scalar() or 0

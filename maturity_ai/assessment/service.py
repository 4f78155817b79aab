"""
Assessment Service

The operations exposed to callers (HTTP controllers, CLI, jobs):

- create_session / begin_session / start_session
- next_question
- submit_answer / skip_question
- update_context
- complete_session (runs the analysis pipeline)
- abandon_session
- get_progress, latest_result, result_history

Every status-sensitive write goes through SessionRepository.compare_and_set
inside one transaction; any failure rolls the whole operation back.
"""

from typing import Any, Dict, List, Optional
import logging

from config.settings import PipelineSettings
from ..database import (
    db,
    generate_uuid,
    AnswerRecord,
    SessionRepository,
    AnswerRepository,
    AnalysisResultRepository
)
from ..engine import AnalysisPipeline, AnalysisResult
from ..exceptions import AssessmentError, InvalidSessionState, QuestionNotFound
from .question_flow import QuestionFlowEngine
from .questions import Question, QuestionCatalog, get_default_catalog
from .session import AssessmentSession, SessionStatus

logger = logging.getLogger(__name__)

# Answers in this category are copied into the session context
CONTEXT_CATEGORY = "basic_info"


class AssessmentService:
    """
    Example:
        service = AssessmentService(PipelineSettings.from_mapping(app.config))
        session_id = service.start_session(company_id="c1", user_id="u1", sector="retail")

        question = service.next_question(session_id)
        while question is not None:
            service.submit_answer(session_id, question.id, collect(question))
            question = service.next_question(session_id)

        result = service.complete_session(session_id)
    """

    def __init__(
        self,
        settings: Optional[PipelineSettings] = None,
        catalog: Optional[QuestionCatalog] = None,
        flow: Optional[QuestionFlowEngine] = None,
        pipeline: Optional[AnalysisPipeline] = None,
        sessions: Optional[SessionRepository] = None,
        answers: Optional[AnswerRepository] = None,
        results: Optional[AnalysisResultRepository] = None
    ):
        self.settings = settings or PipelineSettings()
        self.catalog = catalog or get_default_catalog()
        self.flow = flow or QuestionFlowEngine(self.catalog, self.settings)
        self.pipeline = pipeline or AnalysisPipeline(self.settings)
        self.sessions = sessions or SessionRepository()
        self.answers = answers or AnswerRepository()
        self.results = results or AnalysisResultRepository()

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    def create_session(
        self,
        company_id: Optional[str] = None,
        user_id: Optional[str] = None,
        sector: Optional[str] = None,
        session_type: str = "full",
        session_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> str:
        """Create a draft session and return its id."""
        sector = sector or self.settings.default_sector
        if sector != "all" and sector not in self.settings.sectors:
            raise AssessmentError(f"Unknown sector: {sector}", details={"sector": sector})
        if session_type not in self.settings.session_types:
            raise AssessmentError(f"Unknown session type: {session_type}", details={"session_type": session_type})

        session = AssessmentSession(
            id=generate_uuid(),
            company_id=company_id,
            user_id=user_id,
            session_name=session_name,
            session_type=session_type,
            questions_total=self.flow.total_questions(sector),
            context_data={**(context or {}), "sector": sector},
        )

        try:
            self.sessions.add(session)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"Created {session_type} session {session.id} for company {company_id} ({sector})")
        return session.id

    def begin_session(self, session_id: str) -> AssessmentSession:
        """draft -> in_progress, pointing at the first question."""
        session = self.sessions.load(session_id)
        session.start()

        first = self.flow.next_question({}, None, session.sector)
        session.advance(first.id if first else None, 0, self.flow.total_questions(session.sector))

        self._commit_transition(session, SessionStatus.DRAFT)
        return session

    def start_session(
        self,
        company_id: Optional[str] = None,
        user_id: Optional[str] = None,
        sector: Optional[str] = None,
        session_type: str = "full",
        session_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> str:
        """Create and start a session in one call."""
        session_id = self.create_session(
            company_id=company_id,
            user_id=user_id,
            sector=sector,
            session_type=session_type,
            session_name=session_name,
            context=context
        )
        self.begin_session(session_id)
        return session_id

    def abandon_session(self, session_id: str) -> AssessmentSession:
        session = self.sessions.load(session_id)
        expected = session.status
        session.abandon()
        self._commit_transition(session, expected)
        return session

    def get_session(self, session_id: str) -> AssessmentSession:
        return self.sessions.load(session_id)

    def update_context(self, session_id: str, **values) -> AssessmentSession:
        """Merge values into the session context. Draft or in-progress only."""
        session = self.sessions.load(session_id)
        session.require_status(SessionStatus.DRAFT, SessionStatus.IN_PROGRESS)

        if "sector" in values and values["sector"] != session.sector:
            raise AssessmentError(
                "Sector cannot change once a session exists",
                details={"session_id": session_id, "sector": session.sector},
            )

        session.context_data.update(values)
        self._commit_transition(session, session.status)
        return session

    # =========================================================================
    # Questions & answers
    # =========================================================================

    def next_question(self, session_id: str) -> Optional[Question]:
        """The question to ask now, or None when the session can be completed."""
        session = self.sessions.load(session_id)
        session.require_status(SessionStatus.IN_PROGRESS)
        answers = self.answers.get_answers(session_id)

        if session.current_question_id:
            current = self.catalog.get_question_by_id(session.current_question_id)
            if current is not None and self.flow.is_askable(current, answers, session.sector):
                return current

        return self.flow.next_question(answers, None, session.sector)

    def submit_answer(
        self,
        session_id: str,
        question_id: str,
        value: Any,
        *,
        time_spent_seconds: Optional[int] = None,
        confidence_score: float = 1.0,
        source: str = "user"
    ) -> AnswerRecord:
        """
        Store (or replace) the answer to a question and advance the session.

        Raises:
            SessionNotFound, InvalidSessionState, QuestionNotFound, InvalidAnswer
        """
        session = self.sessions.load(session_id)
        session.require_status(SessionStatus.IN_PROGRESS)
        question = self._get_active_question(question_id)
        question.validate(value)

        return self._record(
            session,
            question,
            value=value,
            normalized=question.normalize(value),
            confidence_score=confidence_score,
            source=source,
            time_spent_seconds=time_spent_seconds
        )

    def skip_question(self, session_id: str, question_id: str, reason: Optional[str] = None) -> AnswerRecord:
        """Record a skip; the question counts as handled and is not asked again."""
        session = self.sessions.load(session_id)
        session.require_status(SessionStatus.IN_PROGRESS)
        question = self._get_active_question(question_id)

        return self._record(session, question, value=None, is_skipped=True, skip_reason=reason)

    def get_answers(self, session_id: str) -> List[Dict[str, Any]]:
        self.sessions.load(session_id)
        return [a.to_dict() for a in self.answers.list_for_session(session_id)]

    def get_progress(self, session_id: str) -> Dict[str, Any]:
        session = self.sessions.load(session_id)
        return {
            "session_id": session.id,
            "status": session.status.value,
            "current_question_id": session.current_question_id,
            "questions_answered": session.questions_answered,
            "questions_total": session.questions_total,
            "progress_percentage": session.progress_percentage,
        }

    # =========================================================================
    # Completion & results
    # =========================================================================

    def complete_session(self, session_id: str) -> AnalysisResult:
        """
        Run the analysis and complete the session.

        The status change and the stored result are one transaction: if
        either fails, neither is kept.
        """
        session = self.sessions.load(session_id)
        session.require_status(SessionStatus.IN_PROGRESS)

        answers = self.answers.get_answers(session_id, self.catalog.field_map())
        result = self.pipeline.analyze(answers, session.context_data, session_id=session_id)

        session.complete()
        try:
            self._transition(session, SessionStatus.IN_PROGRESS)
            self.results.append(session_id, result.to_dict())
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(
            f"Completed session {session_id}: score {result.composite_score} "
            f"({result.maturity_level}), plan {result.plan_type}"
        )
        return result

    def latest_result(self, session_id: str) -> Optional[Dict[str, Any]]:
        record = self.results.latest(session_id)
        return record.to_dict() if record else None

    def result_history(self, session_id: str) -> List[Dict[str, Any]]:
        return [r.to_dict() for r in self.results.history(session_id)]

    # =========================================================================
    # Internals
    # =========================================================================

    def _get_active_question(self, question_id: str) -> Question:
        question = self.catalog.get_question_by_id(question_id)
        if question is None:
            raise QuestionNotFound(question_id)
        if not question.is_active:
            raise QuestionNotFound(question_id, inactive=True)
        return question

    def _record(self, session: AssessmentSession, question: Question, **answer_fields) -> AnswerRecord:
        """Upsert the answer, move the pointer and write the session, atomically."""
        try:
            record = self.answers.upsert_answer(session.id, question.id, **answer_fields)

            if question.category == CONTEXT_CATEGORY and not answer_fields.get("is_skipped"):
                session.context_data[question.field] = answer_fields.get("value")

            answers = self.answers.get_answers(session.id)
            upcoming = self.flow.next_question(answers, question.id, session.sector)

            # Only questions still in the flow count; skipped-over blocks drop out of both sides
            tracked = [q.id for q in self.flow.tracked_questions(session.sector, answers)]
            session.advance(
                upcoming.id if upcoming else None,
                self.answers.count(session.id, question_ids=tracked),
                len(tracked)
            )

            self._transition(session, SessionStatus.IN_PROGRESS)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(
            f"Session {session.id}: {'skipped' if record.is_skipped else 'answered'} {question.id}, "
            f"progress {session.progress_percentage}%"
        )
        return record

    def _transition(self, session: AssessmentSession, expected: SessionStatus) -> None:
        """Conditional write; raises if another writer changed the status first."""
        if not self.sessions.compare_and_set(session, expected):
            raise InvalidSessionState(
                f"Session {session.id} is no longer {expected.value}",
                session_id=session.id,
                status=None,
                allowed=[expected.value],
            )

    def _commit_transition(self, session: AssessmentSession, expected: SessionStatus) -> None:
        try:
            self._transition(session, expected)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

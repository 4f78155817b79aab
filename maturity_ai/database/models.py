"""
Database Models for the Maturity Assessment pipeline

SQLAlchemy models for assessment sessions, answers and the append-only
analysis results produced when a session completes.
"""

import uuid
from datetime import datetime
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import JSON, UniqueConstraint

from ..assessment.session import AssessmentSession, SessionStatus

db = SQLAlchemy()


def generate_uuid():
    return str(uuid.uuid4())


class AssessmentSessionRecord(db.Model):
    """
    Assessment session.

    One interview of one company; status changes are written through
    SessionRepository.compare_and_set.
    """
    __tablename__ = 'assessment_sessions'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    company_id = db.Column(db.String(36), index=True)
    user_id = db.Column(db.String(36), index=True)

    # Session details
    session_name = db.Column(db.String(200))
    session_type = db.Column(db.String(20), default='full')  # full, quick, deep_dive, follow_up
    status = db.Column(db.String(20), default='draft', nullable=False)

    # Progress
    current_question_id = db.Column(db.String(50))
    questions_answered = db.Column(db.Integer, default=0)
    questions_total = db.Column(db.Integer, default=0)
    progress_percentage = db.Column(db.Float, default=0.0)

    # Sector, goals and anything else collected during the interview
    context_data = db.Column(JSON)

    # Timestamps
    started_at = db.Column(db.DateTime)
    completed_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    answers = db.relationship('AnswerRecord', backref='session', lazy='dynamic',
                              cascade='all, delete-orphan')
    results = db.relationship('AnalysisResultRecord', backref='session', lazy='dynamic',
                              cascade='all, delete-orphan')

    def to_session(self) -> AssessmentSession:
        return AssessmentSession(
            id=self.id,
            company_id=self.company_id,
            user_id=self.user_id,
            session_name=self.session_name,
            session_type=self.session_type or 'full',
            status=SessionStatus(self.status),
            current_question_id=self.current_question_id,
            questions_answered=self.questions_answered or 0,
            questions_total=self.questions_total or 0,
            progress_percentage=self.progress_percentage or 0.0,
            context_data=dict(self.context_data or {}),
            started_at=self.started_at,
            completed_at=self.completed_at,
            created_at=self.created_at or datetime.utcnow(),
            updated_at=self.updated_at or datetime.utcnow(),
        )

    @classmethod
    def from_session(cls, session: AssessmentSession) -> 'AssessmentSessionRecord':
        record = cls(id=session.id)
        record.created_at = session.created_at
        record.apply(session)
        return record

    def apply(self, session: AssessmentSession):
        """Copy the mutable session fields onto this row"""
        self.company_id = session.company_id
        self.user_id = session.user_id
        self.session_name = session.session_name
        self.session_type = session.session_type
        self.status = session.status.value
        self.current_question_id = session.current_question_id
        self.questions_answered = session.questions_answered
        self.questions_total = session.questions_total
        self.progress_percentage = session.progress_percentage
        # New dict so the JSON column is flagged dirty
        self.context_data = dict(session.context_data)
        self.started_at = session.started_at
        self.completed_at = session.completed_at
        self.updated_at = session.updated_at

    def to_dict(self):
        return self.to_session().to_dict()


class AnswerRecord(db.Model):
    """
    A single answer to a catalog question.

    At most one row per (session, question); resubmission updates it in place.
    """
    __tablename__ = 'answers'
    __table_args__ = (
        UniqueConstraint('session_id', 'question_id', name='uq_answer_session_question'),
    )

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    session_id = db.Column(db.String(36), db.ForeignKey('assessment_sessions.id'), nullable=False)
    question_id = db.Column(db.String(50), nullable=False)

    # Answer content
    answer_value = db.Column(JSON)
    answer_normalized = db.Column(JSON)
    confidence_score = db.Column(db.Float, default=1.0)
    source = db.Column(db.String(20), default='user')  # user, inferred

    # Skips
    is_skipped = db.Column(db.Boolean, default=False)
    skip_reason = db.Column(db.String(200))

    time_spent_seconds = db.Column(db.Integer)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'session_id': self.session_id,
            'question_id': self.question_id,
            'answer_value': self.answer_value,
            'answer_normalized': self.answer_normalized,
            'confidence_score': self.confidence_score,
            'source': self.source,
            'is_skipped': self.is_skipped,
            'skip_reason': self.skip_reason,
            'time_spent_seconds': self.time_spent_seconds,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }


class AnalysisResultRecord(db.Model):
    """
    Analysis produced by completing a session.

    Append-only: every completion adds a row, existing rows are never updated.
    """
    __tablename__ = 'analysis_results'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    session_id = db.Column(db.String(36), db.ForeignKey('assessment_sessions.id'), nullable=False)

    # Scores
    composite_score = db.Column(db.Float)
    maturity_level = db.Column(db.String(20))
    plan_type = db.Column(db.String(20))
    dimension_scores = db.Column(JSON)

    # Panel output
    insights = db.Column(JSON)
    alerts = db.Column(JSON)
    swot = db.Column(JSON)
    recommendations = db.Column(JSON)  # {strategic: [], tactical: [], execution: []}
    opportunities = db.Column(JSON)
    flags = db.Column(JSON)  # {red_flags: [], green_flags: [], anomalies: []}

    analyzers_run = db.Column(JSON)
    failed_analyzers = db.Column(JSON)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'session_id': self.session_id,
            'composite_score': self.composite_score,
            'maturity_level': self.maturity_level,
            'plan_type': self.plan_type,
            'dimension_scores': self.dimension_scores or {},
            'insights': self.insights or [],
            'alerts': self.alerts or [],
            'swot': self.swot or {},
            'recommendations': self.recommendations or {},
            'opportunities': self.opportunities or [],
            'flags': self.flags or {},
            'analyzers_run': self.analyzers_run or [],
            'failed_analyzers': self.failed_analyzers or [],
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

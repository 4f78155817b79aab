"""
Database Module for the Maturity Assessment pipeline

SQLAlchemy models and repositories.
"""

from .models import (
    db,
    generate_uuid,
    AssessmentSessionRecord,
    AnswerRecord,
    AnalysisResultRecord
)
from .repositories import (
    SessionRepository,
    AnswerRepository,
    AnalysisResultRepository
)

__all__ = [
    'db',
    'generate_uuid',
    'AssessmentSessionRecord',
    'AnswerRecord',
    'AnalysisResultRecord',
    'SessionRepository',
    'AnswerRepository',
    'AnalysisResultRepository',
]

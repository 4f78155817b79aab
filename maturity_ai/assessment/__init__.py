"""
Maturity Assessment Module

Adaptive business maturity questionnaire with:
- Question catalog and answer validation
- Branch and deep-dive question flow
- Session state machine

The service (assessment.service) sits on top and is imported directly to
keep this package free of database imports.
"""

from .questions import Question, QuestionCatalog, ASSESSMENT_QUESTIONS, CATEGORIES, get_default_catalog
from .question_flow import QuestionFlowEngine
from .flow_rules import FlowRule, BRANCH_RULES, DEEP_DIVE_RULES
from .session import AssessmentSession, SessionStatus, TRANSITIONS, compute_progress

__all__ = [
    'Question',
    'QuestionCatalog',
    'ASSESSMENT_QUESTIONS',
    'CATEGORIES',
    'get_default_catalog',
    'QuestionFlowEngine',
    'FlowRule',
    'BRANCH_RULES',
    'DEEP_DIVE_RULES',
    'AssessmentSession',
    'SessionStatus',
    'TRANSITIONS',
    'compute_progress',
]

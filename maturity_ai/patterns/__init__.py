"""
Patterns Module for the Maturity Assessment pipeline

Reusable scoring and classification patterns.
"""

from .maturity_classification import (
    MaturityClassifier,
    MaturityLevel,
    MaturityBand,
    MaturityClassification,
    PlanType,
    DEFAULT_MATURITY_BANDS,
    recommend_plan
)

from .weighted_scoring import (
    WeightedScoringEngine,
    ScoreComponent,
    ScoreDirection,
    ScoreResult,
    create_maturity_engine
)

__all__ = [
    # Maturity Classification
    'MaturityClassifier',
    'MaturityLevel',
    'MaturityBand',
    'MaturityClassification',
    'PlanType',
    'DEFAULT_MATURITY_BANDS',
    'recommend_plan',
    # Weighted Scoring
    'WeightedScoringEngine',
    'ScoreComponent',
    'ScoreDirection',
    'ScoreResult',
    'create_maturity_engine',
]

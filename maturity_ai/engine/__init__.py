"""
Analysis engine

Aggregates the analyzer panel, scores the result, raises threshold alerts,
detects contradictions and pattern flags, and synthesizes tiered
recommendations.
"""

from .inference import InferenceAggregator, InferenceOutcome, run_inference
from .scoring import ScoringNormalizer, ScoreSummary, CANONICAL_DIMENSIONS
from .contradictions import ContradictionDetector, ContradictionRule, CONTRADICTION_RULES, detect_contradictions
from .alerts import (
    ThresholdAlertEngine,
    ThresholdRule,
    AlertReport,
    THRESHOLD_RULES,
    OPPORTUNITY_RULES,
    check_thresholds
)
from .flags import PatternDetector, PatternReport, PatternRule, detect_patterns
from .recommendations import (
    Recommendation,
    RecommendationSet,
    RecommendationSynthesizer,
    generate_recommendations
)
from .pipeline import AnalysisPipeline, AnalysisResult

__all__ = [
    'InferenceAggregator',
    'InferenceOutcome',
    'run_inference',
    'ScoringNormalizer',
    'ScoreSummary',
    'CANONICAL_DIMENSIONS',
    'ContradictionDetector',
    'ContradictionRule',
    'CONTRADICTION_RULES',
    'detect_contradictions',
    'ThresholdAlertEngine',
    'ThresholdRule',
    'AlertReport',
    'THRESHOLD_RULES',
    'OPPORTUNITY_RULES',
    'check_thresholds',
    'PatternDetector',
    'PatternReport',
    'PatternRule',
    'detect_patterns',
    'Recommendation',
    'RecommendationSet',
    'RecommendationSynthesizer',
    'generate_recommendations',
    'AnalysisPipeline',
    'AnalysisResult',
]

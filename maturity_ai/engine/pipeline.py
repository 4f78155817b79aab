"""
Analysis pipeline

answers -> analyzer panel -> scoring -> threshold alerts + contradictions
        -> pattern flags -> recommendations

Produces the AnalysisResult that is appended to a session's history when
it completes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional
import logging

from config.settings import PipelineSettings
from ..analyzers.base import Alert, Insight, SwotFragment
from .alerts import ThresholdAlertEngine
from .contradictions import ContradictionDetector
from .flags import PatternDetector, PatternReport
from .inference import InferenceAggregator
from .recommendations import RecommendationSet, RecommendationSynthesizer
from .scoring import ScoringNormalizer

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Complete analysis of one session's answers"""
    session_id: Optional[str]
    dimension_scores: Dict[str, float]
    insights: List[Insight]
    alerts: List[Alert]
    swot: SwotFragment
    composite_score: float
    maturity_level: str
    plan_type: str
    recommendations: RecommendationSet
    opportunities: List[Alert] = field(default_factory=list)
    flags: PatternReport = field(default_factory=PatternReport)
    analyzers_run: List[str] = field(default_factory=list)
    failed_analyzers: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "session_id": self.session_id,
            "composite_score": self.composite_score,
            "maturity_level": self.maturity_level,
            "plan_type": self.plan_type,
            "dimension_scores": dict(self.dimension_scores),
            "insights": [i.to_dict() for i in self.insights],
            "alerts": [a.to_dict() for a in self.alerts],
            "swot": self.swot.to_dict(),
            "recommendations": self.recommendations.to_dict(),
            "opportunities": [o.to_dict() for o in self.opportunities],
            "flags": self.flags.to_dict(),
            "analyzers_run": list(self.analyzers_run),
            "failed_analyzers": list(self.failed_analyzers),
            "created_at": self.created_at.isoformat(),
        }


class AnalysisPipeline:
    """
    Example:
        pipeline = AnalysisPipeline()
        result = pipeline.analyze(answers, {"sector": "retail"}, session_id="abc")
        print(result.composite_score, result.maturity_level)
    """

    def __init__(
        self,
        settings: Optional[PipelineSettings] = None,
        aggregator: Optional[InferenceAggregator] = None,
        normalizer: Optional[ScoringNormalizer] = None,
        detector: Optional[ContradictionDetector] = None,
        synthesizer: Optional[RecommendationSynthesizer] = None,
        alert_engine: Optional[ThresholdAlertEngine] = None,
        pattern_detector: Optional[PatternDetector] = None
    ):
        self.settings = settings or PipelineSettings()
        self.aggregator = aggregator or InferenceAggregator(settings=self.settings)
        self.normalizer = normalizer or ScoringNormalizer()
        self.detector = detector or ContradictionDetector()
        self.synthesizer = synthesizer or RecommendationSynthesizer(self.settings)
        self.alert_engine = alert_engine or ThresholdAlertEngine()
        self.pattern_detector = pattern_detector or PatternDetector()

    def analyze(
        self,
        answers: Mapping[str, Any],
        context: Mapping[str, Any],
        session_id: Optional[str] = None
    ) -> AnalysisResult:
        outcome = self.aggregator.run_inference(answers, context)
        summary = self.normalizer.normalize(outcome.dimension_scores, entity_id=session_id or "unknown")

        thresholds = self.alert_engine.check(
            answers,
            summary.dimension_scores,
            summary.composite_score,
            context.get("sector")
        )
        contradictions = self.detector.detect_contradictions(answers)
        # Panel alerts first, then threshold alerts, then contradictions
        alerts = list(outcome.alerts) + thresholds.alerts + contradictions
        flags = self.pattern_detector.detect(answers)

        recommendations = self.synthesizer.synthesize(
            outcome.insights,
            alerts,
            summary.dimension_scores,
            thresholds.opportunities
        )

        logger.info(
            f"Analysis for session {session_id}: {summary.composite_score} "
            f"({summary.maturity_level.value}), {len(alerts)} alerts, "
            f"{len(thresholds.opportunities)} opportunities"
        )

        return AnalysisResult(
            session_id=session_id,
            dimension_scores=summary.dimension_scores,
            insights=list(outcome.insights),
            alerts=alerts,
            swot=outcome.swot,
            composite_score=summary.composite_score,
            maturity_level=summary.maturity_level.value,
            plan_type=summary.plan_type.value,
            recommendations=recommendations,
            opportunities=thresholds.opportunities,
            flags=flags,
            analyzers_run=list(outcome.analyzers_run),
            failed_analyzers=list(outcome.failed_analyzers),
        )

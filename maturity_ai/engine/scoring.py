"""
Scoring Normalizer

Turns merged dimension scores into:
- a composite 0-100 score over the canonical dimensions present
- a maturity level from fixed bands
- a recommended plan type
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple
import logging

from ..analyzers.base import clamp_score
from ..patterns import (
    MaturityClassifier,
    MaturityLevel,
    PlanType,
    WeightedScoringEngine,
    create_maturity_engine,
    recommend_plan
)

logger = logging.getLogger(__name__)

CANONICAL_DIMENSIONS: Tuple[str, ...] = (
    "strategy_maturity",
    "digital_maturity",
    "operations_efficiency",
    "risk_score",
)

# Higher is worse on these
INVERTED_DIMENSIONS = frozenset({"risk_score"})


@dataclass
class ScoreSummary:
    composite_score: float
    maturity_level: MaturityLevel
    plan_type: PlanType
    dimension_scores: Dict[str, float] = field(default_factory=dict)
    dimensions_used: List[str] = field(default_factory=list)
    dimensions_missing: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "composite_score": self.composite_score,
            "maturity_level": self.maturity_level.value,
            "plan_type": self.plan_type.value,
            "dimension_scores": dict(self.dimension_scores),
            "dimensions_used": list(self.dimensions_used),
            "dimensions_missing": list(self.dimensions_missing),
        }


class ScoringNormalizer:

    def __init__(
        self,
        engine: Optional[WeightedScoringEngine] = None,
        classifier: Optional[MaturityClassifier] = None
    ):
        self.engine = engine or create_maturity_engine()
        self.classifier = classifier or MaturityClassifier()

    def normalize(self, dimension_scores: Mapping[str, float], entity_id: str = "unknown") -> ScoreSummary:
        clamped = {dim: round(clamp_score(score), 2) for dim, score in dimension_scores.items()}

        result = self.engine.score(clamped, entity_id=entity_id)
        composite = result.overall_score if result.has_data else 0.0

        classification = self.classifier.classify(composite)
        plan = recommend_plan(composite, clamped.get("risk_score"))

        logger.info(
            f"Scored {entity_id}: composite={composite}, level={classification.level.value}, "
            f"plan={plan.value}"
        )

        return ScoreSummary(
            composite_score=composite,
            maturity_level=classification.level,
            plan_type=plan,
            dimension_scores=clamped,
            dimensions_used=list(result.component_scores.keys()),
            dimensions_missing=list(result.missing_components),
        )


def composite_score(dimension_scores: Mapping[str, float]) -> float:
    """Composite score with the default engine."""
    return ScoringNormalizer().normalize(dimension_scores).composite_score

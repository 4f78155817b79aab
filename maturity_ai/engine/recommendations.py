"""
Recommendation Synthesizer

Builds three tiers of recommendations from the merged analysis:

1. Strategic - one per missing capability ("Establish ...")
2. Tactical - one per high/warning insight, one per opportunity ("Pursue: ...")
   and one per weak canonical dimension
3. Execution - one per alert, panel, threshold or contradiction ("Resolve: ...")

Nothing is dropped or merged; every source item yields exactly one
recommendation.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence
import logging

from config.settings import PipelineSettings
from ..analyzers.base import Alert, Insight
from .scoring import CANONICAL_DIMENSIONS, INVERTED_DIMENSIONS

logger = logging.getLogger(__name__)

TIERS = ("strategic", "tactical", "execution")

PRIORITY_RANK: Mapping[str, int] = MappingProxyType({
    "critical": 0,
    "high": 1,
    "medium": 2,
    "low": 3,
})

TACTICAL_SEVERITIES = frozenset({"high", "warning"})


@dataclass
class Recommendation:
    tier: str
    title: str
    rationale: str
    action: str
    priority: str
    order: int
    source: str
    benefits: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tier": self.tier,
            "title": self.title,
            "rationale": self.rationale,
            "action": self.action,
            "priority": self.priority,
            "order": self.order,
            "source": self.source,
            "benefits": list(self.benefits),
        }


@dataclass
class RecommendationSet:
    strategic: List[Recommendation] = field(default_factory=list)
    tactical: List[Recommendation] = field(default_factory=list)
    execution: List[Recommendation] = field(default_factory=list)

    def add(self, tier: str, **kwargs) -> Recommendation:
        items = getattr(self, tier)
        rec = Recommendation(tier=tier, order=len(items) + 1, **kwargs)
        items.append(rec)
        return rec

    def all(self) -> List[Recommendation]:
        return self.strategic + self.tactical + self.execution

    def prioritized(self) -> List[Recommendation]:
        """Flat list ordered by tier, then priority, then order within the tier."""
        return sorted(
            self.all(),
            key=lambda r: (TIERS.index(r.tier), PRIORITY_RANK.get(r.priority, 99), r.order)
        )

    def __len__(self) -> int:
        return len(self.strategic) + len(self.tactical) + len(self.execution)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {tier: [r.to_dict() for r in getattr(self, tier)] for tier in TIERS}


class RecommendationSynthesizer:

    def __init__(self, settings: Optional[PipelineSettings] = None):
        self.settings = settings or PipelineSettings()

    def generate_recommendations(self, analysis) -> RecommendationSet:
        """
        Build the tiered recommendation set.

        `analysis` is anything exposing `insights`, `alerts` and
        `dimension_scores` (an InferenceOutcome with the contradiction
        alerts already merged in, or an AnalysisResult).
        """
        return self.synthesize(
            analysis.insights,
            analysis.alerts,
            analysis.dimension_scores,
            getattr(analysis, "opportunities", None)
        )

    def synthesize(
        self,
        insights: Sequence[Insight],
        alerts: Sequence[Alert],
        dimension_scores: Mapping[str, float],
        opportunities: Optional[Sequence[Alert]] = None
    ) -> RecommendationSet:
        recs = RecommendationSet()

        for insight in insights:
            if insight.is_missing_capability:
                recs.add(
                    "strategic",
                    title=f"Establish {insight.service}",
                    rationale=insight.importance or insight.explanation,
                    action=f"Plan and budget for {insight.service}.",
                    priority="high",
                    source=insight.analyzer_id or "unknown",
                    benefits=list(insight.expected_benefits),
                )
            elif insight.severity in TACTICAL_SEVERITIES:
                recs.add(
                    "tactical",
                    title=f"Address: {insight.title}",
                    rationale=insight.explanation,
                    action=insight.explanation,
                    priority="medium",
                    source=insight.analyzer_id or "unknown",
                )

        for opportunity in opportunities or ():
            recs.add(
                "tactical",
                title=f"Pursue: {opportunity.title}",
                rationale=opportunity.message,
                action=opportunity.recommendation,
                priority="low",
                source=opportunity.source or "unknown",
            )

        self._add_dimension_tactics(recs, dimension_scores)

        for alert in alerts:
            recs.add(
                "execution",
                title=f"Resolve: {alert.title}",
                rationale=alert.message,
                action=alert.recommendation,
                priority="critical",
                source=alert.source or "unknown",
            )

        logger.info(
            f"Recommendations: {len(recs.strategic)} strategic, "
            f"{len(recs.tactical)} tactical, {len(recs.execution)} execution"
        )
        return recs

    def _add_dimension_tactics(self, recs: RecommendationSet, dimension_scores: Mapping[str, float]) -> None:
        threshold = self.settings.tactical_score_threshold

        for dimension in CANONICAL_DIMENSIONS:
            score = dimension_scores.get(dimension)
            if score is None:
                continue

            label = dimension.replace("_", " ")
            if dimension in INVERTED_DIMENSIONS:
                weak = score > 100 - threshold
                rationale = f"{label} is {score:.0f}/100; above {100 - threshold:.0f} is a concern."
            else:
                weak = score < threshold
                rationale = f"{label} is {score:.0f}/100, below the {threshold:.0f} target."

            if weak:
                recs.add(
                    "tactical",
                    title=f"Improve {label}",
                    rationale=rationale,
                    action=f"Set a 90-day target for {label} and review it monthly.",
                    priority="medium",
                    source="scoring_normalizer",
                )


def generate_recommendations(analysis, settings: Optional[PipelineSettings] = None) -> RecommendationSet:
    return RecommendationSynthesizer(settings).generate_recommendations(analysis)

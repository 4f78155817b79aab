"""
Weighted Scoring Pattern - Maturity Assessment

A configurable multi-component scoring engine. Components that have no
value are left out and the remaining weights are renormalized, so a
partial set of dimensions still yields a 0-100 composite.

Use cases:
- Composite business maturity score
- Any weighted roll-up of 0-100 dimension scores
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional
from enum import Enum
import logging

import numpy as np

logger = logging.getLogger(__name__)


class ScoreDirection(Enum):
    """Whether higher values are better or worse."""
    HIGHER_IS_BETTER = "higher_is_better"
    LOWER_IS_BETTER = "lower_is_better"


@dataclass(frozen=True)
class ScoreComponent:
    """Definition of a single scoring component."""
    name: str
    weight: float
    direction: ScoreDirection = ScoreDirection.HIGHER_IS_BETTER
    min_value: float = 0.0
    max_value: float = 100.0
    description: str = ""

    def normalize(self, value: float) -> float:
        """Normalize a value to 0-100 scale, inverting lower-is-better components."""
        if self.max_value == self.min_value:
            return 100.0 if value >= self.max_value else 0.0

        value = float(np.clip(value, self.min_value, self.max_value))
        normalized = ((value - self.min_value) / (self.max_value - self.min_value)) * 100

        if self.direction == ScoreDirection.LOWER_IS_BETTER:
            normalized = 100 - normalized

        return round(normalized, 2)


@dataclass
class ScoreResult:
    """Result of scoring an entity."""
    entity_id: str
    overall_score: float
    component_scores: Dict[str, float]
    component_details: Dict[str, Dict[str, Any]]
    missing_components: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return bool(self.component_scores)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entity_id": self.entity_id,
            "overall_score": self.overall_score,
            "component_scores": self.component_scores,
            "component_details": self.component_details,
            "missing_components": self.missing_components,
            "metadata": self.metadata
        }


class WeightedScoringEngine:
    """
    A configurable multi-component weighted scoring engine.

    Example:
    ```python
    engine = WeightedScoringEngine([
        ScoreComponent("strategy_maturity", weight=0.6),
        ScoreComponent("risk_score", weight=0.4, direction=ScoreDirection.LOWER_IS_BETTER),
    ])

    result = engine.score({"strategy_maturity": 70, "risk_score": 20}, entity_id="session-1")
    print(result.overall_score)  # 74.0
    ```
    """

    def __init__(self, components: List[ScoreComponent]):
        if not components:
            raise ValueError("At least one scoring component is required")
        if any(c.weight <= 0 for c in components):
            raise ValueError("Component weights must be positive")
        self.components = {c.name: c for c in components}

        total_weight = sum(c.weight for c in components)
        if abs(total_weight - 1.0) > 0.01:
            logger.warning(f"Component weights sum to {total_weight}, not 1.0; they will be renormalized")

    def score(
        self,
        values: Mapping[str, Optional[float]],
        entity_id: str = "unknown",
        metadata: Optional[Dict[str, Any]] = None
    ) -> ScoreResult:
        """Weighted average over the components present in `values`."""
        present = [c for c in self.components.values() if values.get(c.name) is not None]
        missing = [name for name in self.components if values.get(name) is None]

        if missing:
            logger.info(f"Scoring {entity_id} without components: {', '.join(missing)}")

        if not present:
            return ScoreResult(
                entity_id=entity_id,
                overall_score=0.0,
                component_scores={},
                component_details={},
                missing_components=missing,
                metadata=metadata or {}
            )

        normalized = np.array([c.normalize(float(values[c.name])) for c in present])
        weights = np.array([c.weight for c in present])
        effective = weights / weights.sum()

        overall = float(np.clip(np.average(normalized, weights=weights), 0, 100))

        component_scores = {}
        component_details = {}
        for component, norm, weight in zip(present, normalized, effective):
            component_scores[component.name] = float(norm)
            component_details[component.name] = {
                "raw_value": float(values[component.name]),
                "normalized_score": float(norm),
                "weight": component.weight,
                "effective_weight": round(float(weight), 4),
                "weighted_contribution": round(float(norm * weight), 2),
                "direction": component.direction.value,
                "description": component.description
            }

        return ScoreResult(
            entity_id=entity_id,
            overall_score=round(overall, 2),
            component_scores=component_scores,
            component_details=component_details,
            missing_components=missing,
            metadata=metadata or {}
        )

# =============================================================================
# Factory Functions
# =============================================================================

def create_maturity_engine() -> WeightedScoringEngine:
    """Composite maturity engine over the four canonical dimensions."""
    components = [
        ScoreComponent(
            name="strategy_maturity",
            weight=0.30,
            description="Direction, goals and planning discipline"
        ),
        ScoreComponent(
            name="digital_maturity",
            weight=0.25,
            description="Website, advertising and social presence"
        ),
        ScoreComponent(
            name="operations_efficiency",
            weight=0.25,
            description="Documented, repeatable operations"
        ),
        ScoreComponent(
            name="risk_score",
            weight=0.20,
            direction=ScoreDirection.LOWER_IS_BETTER,
            description="Exposure to financial, legal and market risk (lower is safer)"
        ),
    ]

    return WeightedScoringEngine(components)

"""
Maturity Classification Pattern - Maturity Assessment

Converts a continuous 0-100 composite score into a discrete maturity
level, and picks the kind of plan the business needs next.

Use cases:
- Maturity labels on the analysis report
- Plan selection (emergency, treatment, growth, transformation)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
from enum import Enum
import logging

logger = logging.getLogger(__name__)


class MaturityLevel(Enum):
    """Maturity levels, lowest first."""
    BEGINNER = "beginner"
    DEVELOPING = "developing"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return {
            MaturityLevel.BEGINNER: 1,
            MaturityLevel.DEVELOPING: 2,
            MaturityLevel.ADVANCED: 3,
            MaturityLevel.EXPERT: 4
        }[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def color(self) -> str:
        """Standard color for visualization."""
        return {
            MaturityLevel.BEGINNER: "#dc3545",    # Red
            MaturityLevel.DEVELOPING: "#ffc107",  # Yellow
            MaturityLevel.ADVANCED: "#17a2b8",    # Blue/Teal
            MaturityLevel.EXPERT: "#28a745"       # Green
        }[self]


class PlanType(Enum):
    """Kind of plan recommended after an assessment."""
    EMERGENCY = "emergency"
    TREATMENT = "treatment"
    GROWTH = "growth"
    TRANSFORMATION = "transformation"

    @property
    def description(self) -> str:
        return {
            PlanType.EMERGENCY: "Stabilize the business before anything else",
            PlanType.TREATMENT: "Fix the weakest areas over the next quarter",
            PlanType.GROWTH: "Build on working foundations to grow",
            PlanType.TRANSFORMATION: "Transform a mature business for the next stage"
        }[self]


@dataclass(frozen=True)
class MaturityBand:
    """Half-open band [min_score, max_score); the top band includes its max."""
    level: MaturityLevel
    min_score: float
    max_score: float
    description: str = ""


@dataclass
class MaturityClassification:
    """Result of classifying a composite score."""
    score: float
    level: MaturityLevel
    description: str
    band: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level.value,
            "level_label": self.level.label,
            "level_rank": self.level.rank,
            "level_color": self.level.color,
            "description": self.description,
            "band": self.band
        }


DEFAULT_MATURITY_BANDS: Tuple[MaturityBand, ...] = (
    MaturityBand(MaturityLevel.BEGINNER, 0, 26, "Foundations are missing or informal"),
    MaturityBand(MaturityLevel.DEVELOPING, 26, 51, "Basics in place, applied inconsistently"),
    MaturityBand(MaturityLevel.ADVANCED, 51, 76, "Structured practices across most areas"),
    MaturityBand(MaturityLevel.EXPERT, 76, 100, "Systematic, data-driven and improving"),
)


class MaturityClassifier:
    """
    Classifies composite scores into maturity levels.

    Example:
    ```python
    classifier = MaturityClassifier()
    result = classifier.classify(62.5)
    print(result.level.value)  # "advanced"
    ```
    """

    def __init__(self, bands: Optional[Tuple[MaturityBand, ...]] = None):
        self.bands = tuple(sorted(bands or DEFAULT_MATURITY_BANDS, key=lambda b: b.min_score))
        self._validate_bands()

    def _validate_bands(self) -> None:
        if not self.bands:
            raise ValueError("At least one maturity band must be defined")

        for current, next_band in zip(self.bands, self.bands[1:]):
            if current.max_score != next_band.min_score:
                logger.warning(
                    f"Band gap/overlap between {current.level.value} "
                    f"({current.max_score}) and {next_band.level.value} ({next_band.min_score})"
                )

    def classify(self, score: float) -> MaturityClassification:
        """Classify a score into a maturity level."""
        clamped = max(self.bands[0].min_score, min(self.bands[-1].max_score, score))

        matched = self.bands[-1]
        for band in self.bands:
            if band.min_score <= clamped < band.max_score:
                matched = band
                break

        return MaturityClassification(
            score=round(score, 2),
            level=matched.level,
            description=matched.description,
            band={"min_score": matched.min_score, "max_score": matched.max_score}
        )


def recommend_plan(composite_score: float, risk_score: Optional[float] = None) -> PlanType:
    """
    Pick the plan type for a composite score and (optional) raw risk score.

    emergency if risk > 70 or composite < 20, treatment below 40,
    growth below 70, transformation otherwise.
    """
    if (risk_score is not None and risk_score > 70) or composite_score < 20:
        return PlanType.EMERGENCY
    if composite_score < 40:
        return PlanType.TREATMENT
    if composite_score < 70:
        return PlanType.GROWTH
    return PlanType.TRANSFORMATION

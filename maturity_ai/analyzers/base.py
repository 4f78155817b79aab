"""
Analyzer Base - shared structure for the expert panel

Every analyzer reads the full answer map (keyed by question id and by
answer field) plus the session context, and returns an AnalyzerResult:

- scores: dimension -> 0..100
- insights: observations, including uniform missing-capability insights
- alerts: conditions that need action now
- swot: optional SWOT fragment

Analyzers are stateless. Missing answers fall back to neutral defaults:
"no" for yes/no flags and 0 for numbers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

MISSING_CAPABILITY = "missing_capability"

SEVERITIES = ("critical", "high", "warning", "medium", "info", "success")


@dataclass
class Insight:
    """An observation made by one analyzer."""
    type: str
    title: str
    explanation: str
    severity: str = "medium"
    dimension: Optional[str] = None

    # Set by the aggregator
    analyzer_id: Optional[str] = None
    analyzer_name: Optional[str] = None

    # Missing-capability insights only
    service: Optional[str] = None
    importance: Optional[str] = None
    expected_benefits: List[str] = field(default_factory=list)
    impact_of_absence: Optional[str] = None

    @property
    def is_missing_capability(self) -> bool:
        return self.type == MISSING_CAPABILITY

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "type": self.type,
            "dimension": self.dimension,
            "severity": self.severity,
            "title": self.title,
            "explanation": self.explanation,
            "analyzer_id": self.analyzer_id,
            "analyzer_name": self.analyzer_name,
        }
        if self.is_missing_capability:
            data.update({
                "service": self.service,
                "importance": self.importance,
                "expected_benefits": list(self.expected_benefits),
                "impact_of_absence": self.impact_of_absence,
            })
        return data


@dataclass
class Alert:
    """A condition that needs action, raised by an analyzer or a contradiction rule."""
    id: str
    severity: str
    title: str
    message: str
    recommendation: str
    source: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "severity": self.severity,
            "title": self.title,
            "message": self.message,
            "recommendation": self.recommendation,
            "source": self.source,
        }


@dataclass
class SwotFragment:
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    opportunities: List[str] = field(default_factory=list)
    threats: List[str] = field(default_factory=list)

    CATEGORIES = ("strengths", "weaknesses", "opportunities", "threats")

    def extend(self, other: "SwotFragment") -> None:
        for category in self.CATEGORIES:
            getattr(self, category).extend(getattr(other, category))

    def is_empty(self) -> bool:
        return not any(getattr(self, c) for c in self.CATEGORIES)

    def to_dict(self) -> Dict[str, List[str]]:
        return {c: list(getattr(self, c)) for c in self.CATEGORIES}


@dataclass
class AnalyzerResult:
    """Output of a single analyzer run."""
    analyzer_id: str
    scores: Dict[str, float] = field(default_factory=dict)
    insights: List[Insight] = field(default_factory=list)
    alerts: List[Alert] = field(default_factory=list)
    swot: Optional[SwotFragment] = None
    summary: str = ""

    def __post_init__(self):
        self.scores = {dim: clamp_score(value) for dim, value in self.scores.items()}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "analyzer_id": self.analyzer_id,
            "scores": dict(self.scores),
            "insights": [i.to_dict() for i in self.insights],
            "alerts": [a.to_dict() for a in self.alerts],
            "swot": self.swot.to_dict() if self.swot else None,
            "summary": self.summary,
        }


def clamp_score(value: float) -> float:
    return float(max(0.0, min(100.0, float(value))))


class AnalyzerBase(ABC):
    """
    Base class for the ten panel analyzers.

    Subclasses set the identity attributes and implement analyze().
    """

    analyzer_id: str = ""
    name: str = ""
    role: str = ""
    expertise_areas: Tuple[str, ...] = ()
    frameworks: Tuple[str, ...] = ()
    dimensions: Tuple[str, ...] = ()

    @abstractmethod
    def analyze(self, answers: Mapping[str, Any], context: Mapping[str, Any]) -> AnalyzerResult:
        """Analyze the full answer set for one session."""

    # -------------------------------------------------------------------------
    # Answer helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def flag(answers: Mapping[str, Any], key: str, default: str = "no") -> bool:
        """True only for an explicit "yes"."""
        value = answers.get(key)
        if value is None:
            value = default
        return str(value).strip().lower() == "yes"

    @staticmethod
    def answered(answers: Mapping[str, Any], key: str) -> bool:
        return answers.get(key) is not None

    @staticmethod
    def number(answers: Mapping[str, Any], key: str, default: float = 0.0) -> float:
        value = answers.get(key)
        if value is None or isinstance(value, bool):
            return default
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.debug(f"Non-numeric answer for {key}: {value!r}")
            return default

    @staticmethod
    def text(answers: Mapping[str, Any], key: str) -> str:
        value = answers.get(key)
        return str(value).strip() if value is not None else ""

    # -------------------------------------------------------------------------
    # Result helpers
    # -------------------------------------------------------------------------

    def missing_capability(
        self,
        service: str,
        importance: str,
        benefits: Iterable[str],
        dimension: Optional[str] = None
    ) -> Insight:
        """Uniform insight for a capability the business does not have."""
        return Insight(
            type=MISSING_CAPABILITY,
            title=f"Missing: {service}",
            explanation=importance,
            severity="medium",
            dimension=dimension or (self.dimensions[0] if self.dimensions else None),
            service=service,
            importance=importance,
            expected_benefits=list(benefits),
            impact_of_absence=(
                f"Without {service} the business is likely to miss real growth "
                f"opportunities and lose ground to competitors."
            ),
        )

    def result(
        self,
        scores: Dict[str, float],
        insights: Optional[List[Insight]] = None,
        alerts: Optional[List[Alert]] = None,
        swot: Optional[SwotFragment] = None,
        summary: str = ""
    ) -> AnalyzerResult:
        return AnalyzerResult(
            analyzer_id=self.analyzer_id,
            scores=scores,
            insights=insights or [],
            alerts=alerts or [],
            swot=swot,
            summary=summary,
        )

    def get_info(self) -> Dict[str, Any]:
        return {
            "id": self.analyzer_id,
            "name": self.name,
            "role": self.role,
            "expertise": list(self.expertise_areas),
            "frameworks": list(self.frameworks),
            "dimensions": list(self.dimensions),
        }

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.analyzer_id}>"
